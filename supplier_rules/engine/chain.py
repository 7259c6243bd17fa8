"""Chain executor: runs one column's actions and resolves its assignments."""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import structlog

from supplier_rules.config import settings
from supplier_rules.engine import keys
from supplier_rules.engine.actions import ActionResult, AssignAction, ChainAction, create_action
from supplier_rules.engine.casefold import CaseInsensitiveDict
from supplier_rules.engine.context import CellContext
from supplier_rules.engine.lookups import LookupTables
from supplier_rules.errors import ConfigurationError
from supplier_rules.models.parser_config import RuleConfig

logger = structlog.get_logger(__name__)


@dataclass
class Assignment:
    """A resolved ``property -> value`` pair."""
    prop: str
    value: str


@dataclass
class ChainResult:
    """Outcome of one column's chain.

    Attributes:
        assignments: Resolved assignments in first-seen order
        matched: True iff at least one assignment was produced
        trace: Per-action diagnostic lines (only when tracing is enabled)
    """
    assignments: List[Assignment] = field(default_factory=list)
    matched: bool = False
    trace: List[str] = field(default_factory=list)


class ChainExecutor:
    """Ordered action chain of one column rule.

    Actions are built once, at construction, so configuration errors surface
    before any row is parsed. ``execute`` never raises for data problems.
    """

    def __init__(self, rule: RuleConfig, lookups: Optional[LookupTables] = None, column: str = ""):
        self.rule = rule
        self.column = column
        self.trace_enabled = rule.trace or settings.trace_actions
        self._log = logger.bind(column=column)

        actions: List[ChainAction] = []
        for index, descriptor in enumerate(rule.actions):
            try:
                actions.append(create_action(descriptor, lookups))
            except ConfigurationError as e:
                raise ConfigurationError(
                    f"Column '{column}' action {index} ({descriptor.op}): {e.message}",
                    op=e.op,
                    column=column,
                ) from e
        self.actions = actions

    def __len__(self) -> int:
        return len(self.actions)

    def execute(self, ctx: CellContext) -> ChainResult:
        """Run every action against ``ctx`` then resolve assignments."""
        result = ChainResult()
        outcomes: List[Tuple[ChainAction, ActionResult]] = []

        for action in self.actions:
            try:
                outcome = action.run(ctx)
            except Exception as e:
                self._log.error(
                    "action_failed",
                    op=action.op,
                    output=action.output,
                    error=str(e),
                    exc_info=True,
                )
                result.trace.append(f"{ctx.column}: {action.op} -> {action.output}: error: {e}")
                continue

            outcomes.append((action, outcome))
            if self.trace_enabled:
                status = "matched" if outcome else f"no match ({outcome.reason or 'no result'})"
                result.trace.append(
                    f"{ctx.column}: {action.op} {action.input} -> {action.output}: {status}"
                )

        resolved = self._resolve_assignments(ctx, outcomes)
        result.assignments = [Assignment(prop, value) for prop, value in resolved.items()]
        result.matched = bool(result.assignments)
        return result

    def _resolve_assignments(
        self,
        ctx: CellContext,
        outcomes: List[Tuple[ChainAction, ActionResult]],
    ) -> CaseInsensitiveDict:
        assignments = CaseInsensitiveDict()

        for prop, value in self.rule.assign.items():
            if prop and prop.strip():
                assignments[prop.strip()] = value

        for prop, value in ctx.bag.pop_deferred():
            if prop and prop.strip():
                assignments[prop.strip()] = value

        # target -> last action of this chain that matched while writing it
        writers = CaseInsensitiveDict()
        for action, outcome in outcomes:
            target = action.output
            if not target or not self._is_property_target(action):
                continue
            if outcome:
                writers[target] = action
            elif target not in writers:
                writers[target] = None

        for target, action in writers.items():
            if action is None:
                continue
            value = self._resolve_target(ctx, target, action)
            if value is not None:
                assignments[target] = value

        return assignments

    @staticmethod
    def _is_property_target(action: ChainAction) -> bool:
        return (
            isinstance(action, AssignAction)
            or action.assign
            or keys.is_property_path(action.output)
        )

    @staticmethod
    def _resolve_target(ctx: CellContext, target: str, action: ChainAction) -> Optional[str]:
        """Value ``action`` left under ``target``.

        List writers resolve to their valid elements joined by a space and
        scalar writers to the scalar, so a value another column left under
        the same key is never picked up.
        """
        if not action.writes_list:
            return ctx.bag.get_value(target) or None
        if ctx.bag.get_value(keys.valid(target)) != keys.TRUE:
            return None
        joined = " ".join(value for value in ctx.bag.read_list(target) if value)
        return joined or None
