"""Split action: break the input into parts on a literal delimiter."""
from typing import Optional

from supplier_rules.engine.actions.base import ActionResult, ChainAction
from supplier_rules.engine.conditions import Condition
from supplier_rules.engine.context import CellContext

DEFAULT_DELIMITER = ":"


class SplitAction(ChainAction):
    """Split ``input`` on ``delimiter`` and record the parts as a list.

    Parts are kept verbatim unless ``trim`` is set, so joining them with the
    delimiter gives back the input. With ``expected_parts`` and ``strict`` a
    part-count mismatch records an empty list; without ``strict`` it is only
    logged.
    """

    op = "split"

    def __init__(
        self,
        input_key: str,
        output_key: str,
        assign: bool = False,
        delimiter: str = DEFAULT_DELIMITER,
        expected_parts: Optional[int] = None,
        strict: bool = False,
        trim: bool = False,
        condition: Optional[Condition] = None,
    ):
        super().__init__(input_key, output_key, assign, condition)
        if not delimiter:
            raise ValueError("Split delimiter must not be empty")
        self.delimiter = delimiter
        self.expected_parts = expected_parts
        self.strict = strict
        self.trim = trim

    def execute(self, ctx: CellContext) -> ActionResult:
        value = ctx.read(self.input)
        parts = value.split(self.delimiter) if value else []
        if self.trim:
            parts = [part.strip() for part in parts]

        if not any(parts):
            self.write_empty(ctx)
            return ActionResult.no_match(f"input '{self.input}' has no parts")

        if self.expected_parts is not None and len(parts) != self.expected_parts:
            if self.strict:
                self._log.debug(
                    "split_strict_mismatch",
                    column=ctx.column,
                    expected=self.expected_parts,
                    actual=len(parts),
                )
                self.write_empty(ctx)
                return ActionResult.no_match(
                    f"expected {self.expected_parts} parts, got {len(parts)}"
                )
            self._log.info(
                "split_part_count_mismatch",
                column=ctx.column,
                expected=self.expected_parts,
                actual=len(parts),
            )

        if self.output:
            ctx.bag.write_list(self.output, parts)
        return ActionResult.hit()
