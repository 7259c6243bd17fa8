"""Rule interpreter core: key grammar, property bag, lookups, actions, chains.

Concrete classes are imported from their modules; the configuration models
import ``supplier_rules.engine.lookups``, so this package stays empty.
"""
