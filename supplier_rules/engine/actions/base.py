"""Base contract shared by every chain action."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import structlog

from supplier_rules.engine import keys
from supplier_rules.engine.conditions import Condition
from supplier_rules.engine.context import CellContext

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one action invocation.

    Truthy iff the action matched (produced at least one non-empty result).
    A non-match carries an optional reason for the diagnostic trace.
    """
    matched: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.matched

    @classmethod
    def hit(cls) -> "ActionResult":
        return cls(True)

    @classmethod
    def no_match(cls, reason: Optional[str] = None) -> "ActionResult":
        return cls(False, reason)


class ChainAction(ABC):
    """One step of a column rule.

    Actions read their input through the cell context, write results to the
    shared property bag using the key grammar and never raise for data that
    does not fit: they return a non-matching ``ActionResult`` instead.
    """

    op: str = ""
    # False for actions whose output is a scalar rather than a list
    writes_list: bool = True

    def __init__(
        self,
        input_key: str = keys.TEXT_KEY,
        output_key: str = "",
        assign: bool = False,
        condition: Optional[Condition] = None,
    ):
        self.input = input_key or keys.TEXT_KEY
        self.output = output_key or ""
        self.assign = assign
        self.condition = condition
        self._log = logger.bind(op=self.op, input=self.input, output=self.output)

    def run(self, ctx: CellContext) -> ActionResult:
        """Execute unless the guard condition is false.

        A skipped action leaves the bag untouched and does not match.
        """
        if self.condition is not None and not self.condition.evaluate(ctx):
            return ActionResult.no_match(f"condition '{self.condition}' is false")
        return self.execute(ctx)

    @abstractmethod
    def execute(self, ctx: CellContext) -> ActionResult:
        """Run the action against ``ctx``."""
        pass

    def write_empty(self, ctx: CellContext) -> None:
        """Record an empty list result under the output key."""
        if self.output:
            ctx.bag.write_list(self.output, [])

    def __repr__(self) -> str:
        return f"{type(self).__name__}(input={self.input!r}, output={self.output!r})"
