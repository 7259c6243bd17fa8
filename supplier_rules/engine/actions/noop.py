"""Placeholder action for op names the factory does not know."""
from supplier_rules.engine import keys
from supplier_rules.engine.actions.base import ActionResult, ChainAction
from supplier_rules.engine.context import CellContext


class NoopAction(ChainAction):
    """Never touches the bag, never matches."""

    op = "noop"

    def __init__(self, original_op: str, input_key: str = keys.TEXT_KEY, output_key: str = ""):
        super().__init__(input_key, output_key)
        self.original_op = original_op

    def execute(self, ctx: CellContext) -> ActionResult:
        return ActionResult.no_match(f"unknown op '{self.original_op}'")
