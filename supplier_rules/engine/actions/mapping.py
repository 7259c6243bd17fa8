"""Map action: translate the input through a lookup table."""
from typing import Optional

from supplier_rules.engine.actions.base import ActionResult, ChainAction
from supplier_rules.engine.conditions import Condition
from supplier_rules.engine.context import CellContext
from supplier_rules.engine.lookups import LookupTable


class MapAction(ChainAction):
    """Replace the input value with its canonical form from ``table``.

    A hit writes ``Output`` as a scalar, or the deferred ``assign:Output``
    entry when the action is an assignment. Misses write nothing.
    """

    op = "map"
    writes_list = False

    def __init__(
        self,
        input_key: str,
        output_key: str,
        table_name: str,
        table: Optional[LookupTable],
        assign: bool = False,
        condition: Optional[Condition] = None,
    ):
        super().__init__(input_key, output_key, assign, condition)
        self.table_name = table_name
        self.table = table

    def lookup(self, value: str) -> Optional[str]:
        """Canonical value for ``value``; the stripped value is tried second."""
        if not value or not self.table:
            return None
        mapped = self.table.get(value)
        if mapped is None and value.strip() != value:
            mapped = self.table.get(value.strip())
        return mapped

    def execute(self, ctx: CellContext) -> ActionResult:
        value = ctx.read(self.input)
        mapped = self.lookup(value)
        if mapped is None:
            return ActionResult.no_match(f"'{value}' not found in lookup '{self.table_name}'")

        # A hit with an empty canonical value is still written
        if self.output:
            if self.assign:
                ctx.bag.set_deferred(self.output, mapped)
            else:
                ctx.bag[self.output] = mapped
        return ActionResult.hit()
