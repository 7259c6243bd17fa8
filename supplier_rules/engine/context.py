"""Per-cell execution context handed to every action of a chain."""
from dataclasses import dataclass, field

from supplier_rules.engine import keys
from supplier_rules.engine.bag import PropertyBag

INVARIANT_CULTURE = "invariant"


@dataclass(frozen=True)
class CellContext:
    """Immutable view of one (row, column) invocation.

    Attributes:
        column: Column letter the raw text came from
        raw: Raw cell text (never None; blank cells are "")
        culture: Formatting context name; the interpreter formats numbers
            locale-invariantly regardless of its value
        bag: Row-wide property bag (borrowed, shared, never copied)
    """
    column: str
    raw: str
    culture: str = INVARIANT_CULTURE
    bag: PropertyBag = field(default_factory=PropertyBag, compare=False, repr=False)

    def read(self, key: str) -> str:
        """Resolve an action input key.

        The reserved ``Text`` key yields the raw cell text; any other key is
        read from the bag (missing keys read as "").
        """
        if keys.is_text_key(key):
            return self.raw or ""
        return self.bag.get_value(key)
