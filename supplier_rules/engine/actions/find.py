"""Find action: regular-expression extraction, optionally destructive."""
import re
from typing import FrozenSet, List, Optional

from supplier_rules.engine import keys
from supplier_rules.engine.actions.base import ActionResult, ChainAction
from supplier_rules.engine.conditions import Condition
from supplier_rules.engine.context import CellContext

OPTION_FIRST = "first"
OPTION_LAST = "last"
OPTION_ALL = "all"
OPTION_REMOVE = "remove"
OPTION_IGNORECASE = "ignorecase"

FIND_OPTIONS = frozenset({OPTION_FIRST, OPTION_LAST, OPTION_ALL, OPTION_REMOVE, OPTION_IGNORECASE})


class FindAction(ChainAction):
    """Record matches of ``pattern`` in ``input`` under ``output``.

    Options:
        first (default): record the first match only
        last: record the last match only
        all: record every match, one list slot each
        remove: cut the recorded matches out of the input and store the
            rest under ``Output.Clean``
        ignorecase: compile the pattern case-insensitively

    Each slot holds the full match text. Named groups of the latest recorded
    match are written under ``Output.3.<group>``; a group that did not take
    part in that match is written as "". Empty matches are ignored.
    """

    op = "find"

    def __init__(
        self,
        input_key: str,
        output_key: str,
        pattern: "re.Pattern[str]",
        options: FrozenSet[str] = frozenset(),
        assign: bool = False,
        condition: Optional[Condition] = None,
    ):
        super().__init__(input_key, output_key, assign, condition)
        self.pattern = pattern
        self.options = frozenset(options)

    @property
    def remove(self) -> bool:
        return OPTION_REMOVE in self.options

    def _select(self, text: str) -> List["re.Match[str]"]:
        matches = [m for m in self.pattern.finditer(text) if m.end() > m.start()]
        if not matches:
            return []
        if OPTION_ALL in self.options:
            return matches
        if OPTION_LAST in self.options:
            return matches[-1:]
        return matches[:1]

    def execute(self, ctx: CellContext) -> ActionResult:
        text = ctx.read(self.input)
        matches = self._select(text) if text else []

        if self.remove and self.output:
            ctx.bag[keys.clean(self.output)] = self._residual(text, matches)

        if not matches:
            self.write_empty(ctx)
            return ActionResult.no_match(f"pattern did not match input '{self.input}'")

        if self.output:
            ctx.bag.write_list(self.output, [m.group(0) for m in matches])
            latest = matches[-1]
            for name in self.pattern.groupindex:
                ctx.bag[keys.group(self.output, name)] = latest.group(name) or ""
        return ActionResult.hit()

    @staticmethod
    def _residual(text: str, matches: List["re.Match[str]"]) -> str:
        """``text`` with every matched span cut out, all else untouched."""
        pieces = []
        position = 0
        for match in matches:
            pieces.append(text[position:match.start()])
            position = match.end()
        pieces.append(text[position:])
        return "".join(pieces)
