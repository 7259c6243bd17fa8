"""Build chain actions from action descriptors.

All parameter validation happens here, when a parser is built, so that a
broken configuration fails before the first row is read. Unknown op names
are not errors: they become ``NoopAction`` placeholders.
"""
import re
from typing import Callable, Dict, FrozenSet, Optional

import structlog

from supplier_rules.engine.actions.assign import AssignAction
from supplier_rules.engine.actions.base import ChainAction
from supplier_rules.engine.actions.conditional import ConditionalAction
from supplier_rules.engine.actions.find import FIND_OPTIONS, OPTION_IGNORECASE, FindAction
from supplier_rules.engine.actions.mapping import MapAction
from supplier_rules.engine.actions.noop import NoopAction
from supplier_rules.engine.actions.split import DEFAULT_DELIMITER, SplitAction
from supplier_rules.engine.conditions import Condition, parse_condition
from supplier_rules.engine.lookups import (
    LookupTables,
    build_lookup_pattern,
    parse_lookup_reference,
)
from supplier_rules.errors import ConfigurationError
from supplier_rules.models.parser_config import ActionConfig

logger = structlog.get_logger(__name__)

# (?<name>...) named groups; lookbehinds (?<= and (?<! are left alone
_ANGLE_GROUP_RE = re.compile(r"\(\?<(?![=!])")

# Matches nothing; used for Lookup:<table> references to an empty table
NEVER_MATCH_PATTERN = r"(?!)"

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def _parse_bool(descriptor: ActionConfig, name: str, default: bool = False) -> bool:
    raw = descriptor.param(name)
    if raw is None or not raw.strip():
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Parameter '{name}' of {descriptor.op} must be a boolean, got '{raw}'",
        op=descriptor.op,
    )


def _parse_int(descriptor: ActionConfig, name: str, minimum: int = 1) -> Optional[int]:
    raw = descriptor.param(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError as e:
        raise ConfigurationError(
            f"Parameter '{name}' of {descriptor.op} must be an integer, got '{raw}'",
            op=descriptor.op,
        ) from e
    if value < minimum:
        raise ConfigurationError(
            f"Parameter '{name}' of {descriptor.op} must be >= {minimum}, got {value}",
            op=descriptor.op,
        )
    return value


def _is_assignment(descriptor: ActionConfig) -> bool:
    return descriptor.assign or _parse_bool(descriptor, "assign")


def _parse_options(descriptor: ActionConfig) -> FrozenSet[str]:
    raw = descriptor.param("options") or ""
    options = {item.strip().lower() for item in raw.split(",") if item.strip()}
    unknown = sorted(options - FIND_OPTIONS)
    if unknown:
        raise ConfigurationError(
            f"Unknown find option(s) {unknown}. Available: {sorted(FIND_OPTIONS)}",
            op=descriptor.op,
        )
    return frozenset(options)


def _parse_condition(descriptor: ActionConfig, required: bool = False) -> Optional[Condition]:
    raw = descriptor.param("condition")
    if raw is None or not raw.strip():
        if required:
            raise ConfigurationError(
                f"{descriptor.op} requires a 'condition' parameter", op=descriptor.op
            )
        return None
    try:
        return parse_condition(raw)
    except ValueError as e:
        raise ConfigurationError(str(e), op=descriptor.op) from e


def compile_pattern(pattern: str, ignore_case: bool = False) -> "re.Pattern[str]":
    """Compile a configured regular expression.

    ``(?<name>...)`` named groups are rewritten to Python's ``(?P<name>...)``.
    """
    normalized = _ANGLE_GROUP_RE.sub("(?P<", pattern)
    flags = re.IGNORECASE if ignore_case else 0
    return re.compile(normalized, flags)


def build_assign(descriptor: ActionConfig, lookups: LookupTables) -> ChainAction:
    return AssignAction(
        descriptor.input,
        descriptor.output,
        _is_assignment(descriptor),
        condition=_parse_condition(descriptor),
    )


def build_conditional(descriptor: ActionConfig, lookups: LookupTables) -> ChainAction:
    return ConditionalAction(
        descriptor.input,
        descriptor.output,
        _parse_condition(descriptor, required=True),
        assign=_is_assignment(descriptor),
    )


def build_split(descriptor: ActionConfig, lookups: LookupTables) -> ChainAction:
    delimiter = descriptor.param("delimiter")
    if delimiter is None:
        delimiter = DEFAULT_DELIMITER
    if delimiter == "":
        raise ConfigurationError("Split delimiter must not be empty", op=descriptor.op)
    return SplitAction(
        descriptor.input,
        descriptor.output,
        assign=_is_assignment(descriptor),
        delimiter=delimiter,
        expected_parts=_parse_int(descriptor, "expectedParts"),
        strict=_parse_bool(descriptor, "strict"),
        trim=_parse_bool(descriptor, "trim"),
        condition=_parse_condition(descriptor),
    )


def build_find(descriptor: ActionConfig, lookups: LookupTables) -> ChainAction:
    # Whitespace is significant in a pattern; only a missing one is an error
    pattern = descriptor.param("pattern")
    if not pattern:
        raise ConfigurationError("Find requires a 'pattern' parameter", op=descriptor.op)

    table_name = parse_lookup_reference(pattern.strip())
    if table_name is not None:
        table = lookups.get(table_name) if table_name else None
        if table is None:
            raise ConfigurationError(
                f"Find pattern references unknown lookup table '{table_name}'",
                op=descriptor.op,
            )
        pattern = build_lookup_pattern(table)
        if pattern is None:
            logger.info("find_lookup_table_empty", table=table_name, output=descriptor.output)
            pattern = NEVER_MATCH_PATTERN

    options = _parse_options(descriptor)
    try:
        compiled = compile_pattern(pattern, OPTION_IGNORECASE in options)
    except re.error as e:
        raise ConfigurationError(f"Invalid find pattern '{pattern}': {e}", op=descriptor.op) from e

    return FindAction(
        descriptor.input,
        descriptor.output,
        compiled,
        options=options,
        assign=_is_assignment(descriptor),
        condition=_parse_condition(descriptor),
    )


def build_map(descriptor: ActionConfig, lookups: LookupTables) -> ChainAction:
    raw = (descriptor.param("table") or "").strip()
    table_name = parse_lookup_reference(raw) or raw
    if not table_name:
        raise ConfigurationError("Map requires a 'table' parameter", op=descriptor.op)
    table = lookups.get(table_name)
    if table is None:
        raise ConfigurationError(
            f"Map references unknown lookup table '{table_name}'",
            op=descriptor.op,
        )
    return MapAction(
        descriptor.input,
        descriptor.output,
        table_name,
        table,
        assign=_is_assignment(descriptor),
        condition=_parse_condition(descriptor),
    )


# Registry of supported op names (lowercase)
ACTION_REGISTRY: Dict[str, Callable[[ActionConfig, LookupTables], ChainAction]] = {
    "assign": build_assign,
    "conditional": build_conditional,
    "split": build_split,
    "find": build_find,
    "map": build_map,
    "mapping": build_map,
}


def create_action(descriptor: ActionConfig, lookups: Optional[LookupTables] = None) -> ChainAction:
    """Build the action described by ``descriptor``.

    Args:
        descriptor: Action descriptor from a column rule
        lookups: Resolved lookup tables of the parser configuration

    Returns:
        ChainAction instance (``NoopAction`` for unknown op names)

    Raises:
        ConfigurationError: If a required parameter is missing or invalid,
            a referenced lookup table does not exist, or a pattern does not
            compile
    """
    op = descriptor.op.strip().lower()
    builder = ACTION_REGISTRY.get(op)
    if builder is None:
        logger.warning(
            "unknown_action_op",
            op=descriptor.op,
            available=list(ACTION_REGISTRY.keys()),
        )
        return NoopAction(descriptor.op, descriptor.input, descriptor.output)

    return builder(descriptor, lookups if lookups is not None else LookupTables())
