"""Conditional action: copy the input only when a guard expression holds."""
from supplier_rules.engine.actions.base import ActionResult, ChainAction
from supplier_rules.engine.conditions import Condition
from supplier_rules.engine.context import CellContext


class ConditionalAction(ChainAction):
    """Copy ``input`` to ``Output`` as a scalar when ``condition`` is true.

    With the assign flag the value goes to the deferred ``assign:Output``
    entry instead. An empty input does not match.
    """

    op = "conditional"
    writes_list = False

    def __init__(
        self,
        input_key: str,
        output_key: str,
        condition: Condition,
        assign: bool = False,
    ):
        super().__init__(input_key, output_key, assign, condition)

    def execute(self, ctx: CellContext) -> ActionResult:
        if not self.condition.evaluate(ctx):
            return ActionResult.no_match(f"condition '{self.condition}' is false")

        value = ctx.read(self.input)
        if not value:
            return ActionResult.no_match(f"input '{self.input}' is empty")

        if self.output:
            if self.assign:
                ctx.bag.set_deferred(self.output, value)
            else:
                ctx.bag[self.output] = value
        return ActionResult.hit()
