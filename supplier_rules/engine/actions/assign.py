"""Assign action: copy the input value into a one-element list."""
from supplier_rules.engine.actions.base import ActionResult, ChainAction
from supplier_rules.engine.context import CellContext


class AssignAction(ChainAction):
    """Copy ``input`` to ``Output[0]`` (``Length=1``, ``Valid=true``).

    An empty input records an empty list (``Length=0``, ``Valid=false``).
    """

    op = "assign"

    def execute(self, ctx: CellContext) -> ActionResult:
        value = ctx.read(self.input)
        if not value:
            self.write_empty(ctx)
            return ActionResult.no_match(f"input '{self.input}' is empty")

        if self.output:
            ctx.bag.write_list(self.output, [value])
        return ActionResult.hit()
