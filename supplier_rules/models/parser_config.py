"""Pydantic models for per-supplier parser configuration.

A parser configuration maps spreadsheet column letters to rules. A rule is an
ordered chain of action descriptors plus an optional map of static property
assignments.
"""
from typing import Any, Dict, List, Mapping, Optional

from pydantic import Field, PrivateAttr, field_validator

from supplier_rules.config import settings as engine_settings
from supplier_rules.engine.lookups import LookupTables, rebuild_lookup_tables, validate_lookup_tables
from supplier_rules.models.base import ConfigModel

# Descriptor keys that older configuration files used instead of input/output
_INPUT_ALIASES = ("from", "in")
_OUTPUT_ALIASES = ("to", "out")


def _parameter_text(value: Any) -> str:
    """Render a JSON parameter value as the string the actions expect."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


class ActionConfig(ConfigModel):
    """Declarative descriptor of one chain action.

    Operation-specific settings live in ``parameters``. Top-level keys that
    are not descriptor fields (``pattern``, ``delimiter``, ``table``, ...)
    are folded into ``parameters`` so both layouts are accepted.
    """

    op: str = Field(
        default="",
        description="Operation name (assign, split, find, map); unknown names become no-ops"
    )
    input: str = Field(
        default="Text",
        description="Bag key to read; 'Text' reads the raw cell text"
    )
    output: str = Field(
        default="",
        description="Bag key (or property path such as Product.Name) to write"
    )
    assign: bool = Field(
        default=False,
        description="Treat the output as a property target of the final result"
    )
    parameters: Dict[str, str] = Field(
        default_factory=dict,
        description="Operation-specific parameters (keys are case-insensitive)"
    )

    @classmethod
    def _prepare(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        raw_parameters = data.get("parameters")
        if raw_parameters is not None and not isinstance(raw_parameters, Mapping):
            return data
        prepared: Dict[str, Any] = {}
        parameters: Dict[str, Any] = dict(raw_parameters or {})
        for key, value in data.items():
            lowered = str(key).lower()
            if key in ("op", "input", "output", "assign", "parameters"):
                prepared[key] = value
            elif lowered in _INPUT_ALIASES:
                prepared.setdefault("input", value)
            elif lowered in _OUTPUT_ALIASES:
                prepared.setdefault("output", value)
            elif value is not None:
                parameters.setdefault(key, value)
        prepared["parameters"] = parameters
        return prepared

    @field_validator("op", "input", "output", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> str:
        """Treat null as empty and strip surrounding whitespace."""
        return "" if v is None else str(v).strip()

    @field_validator("input")
    @classmethod
    def default_input(cls, v: str) -> str:
        """An empty input reads the raw cell text."""
        return v or "Text"

    @field_validator("parameters", mode="before")
    @classmethod
    def stringify_parameters(cls, v: Any) -> Dict[str, str]:
        """Coerce JSON scalars (numbers, booleans, lists) to strings."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("parameters must be an object of name -> value")
        return {
            str(key): _parameter_text(value)
            for key, value in v.items()
            if value is not None
        }

    def param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive parameter lookup."""
        lowered = name.lower()
        for key, value in self.parameters.items():
            if key.lower() == lowered:
                return value
        return default


class RuleConfig(ConfigModel):
    """Rule applied to one spreadsheet column."""

    actions: List[ActionConfig] = Field(
        default_factory=list,
        description="Ordered action chain"
    )
    assign: Dict[str, str] = Field(
        default_factory=dict,
        description="Static property assignments applied unconditionally"
    )
    trace: bool = Field(
        default=False,
        description="Record one diagnostic trace line per executed action"
    )

    @classmethod
    def _prepare(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        # {"rule": {...}} wrappers and the older "steps" list name
        if "rule" in data and isinstance(data["rule"], dict) and "actions" not in data:
            return cls._prepare(cls._fold_field_names(dict(data["rule"])))
        if "actions" not in data:
            for key in list(data):
                if str(key).lower() == "steps":
                    data["actions"] = data.pop(key)
                    break
        return data

    @field_validator("assign", mode="before")
    @classmethod
    def stringify_assign(cls, v: Any) -> Dict[str, str]:
        """Static values are literals; null becomes an empty string."""
        if v is None:
            return {}
        return {str(key): _parameter_text(value) if value is not None else "" for key, value in v.items()}


class ParserSettings(ConfigModel):
    """Per-parser behavior switches."""

    default_culture: str = Field(
        default_factory=lambda: engine_settings.default_culture,
        description="Formatting context name handed to cell contexts"
    )
    stop_on_first_match: bool = Field(
        default=False,
        description="Stop processing a row after the first column whose rule matched"
    )
    prefer_first_assignment: bool = Field(
        default=False,
        description="Keep the first value written for a property instead of the last"
    )

    @field_validator("default_culture", mode="before")
    @classmethod
    def default_culture_fallback(cls, v: Any) -> str:
        return str(v).strip() if v else engine_settings.default_culture


class ParserConfig(ConfigModel):
    """Parser configuration of one supplier.

    ``lookups`` holds the supplier-level tables as declared. The tables the
    actions actually use are ``resolved_lookups``: the declared tables layered
    over the shared (global) tables passed to ``merge_lookups``.
    """

    settings: ParserSettings = Field(default_factory=ParserSettings)
    lookups: Dict[str, Dict[str, str]] = Field(
        default_factory=dict,
        description="Supplier-level lookup tables: table -> alias -> canonical"
    )
    column_rules: Dict[str, RuleConfig] = Field(
        default_factory=dict,
        description="Column letter -> rule"
    )

    _resolved: Optional[LookupTables] = PrivateAttr(default=None)

    @classmethod
    def _prepare(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        rules = data.get("columnRules")
        if isinstance(rules, list):
            # [{"column": "C", "rule": {...}}] or [{"column": "C", "actions": [...]}]
            by_column: Dict[str, Any] = {}
            for item in rules:
                if not isinstance(item, dict):
                    continue
                column = next((v for k, v in item.items() if str(k).lower() == "column"), None)
                if not column or not str(column).strip():
                    continue
                rule = {k: v for k, v in item.items() if str(k).lower() != "column"}
                by_column[str(column).strip()] = rule
            data["columnRules"] = by_column
        return data

    @field_validator("lookups", mode="before")
    @classmethod
    def lookups_not_null(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("column_rules", mode="before")
    @classmethod
    def strip_column_names(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(column).strip(): rule for column, rule in v.items()}
        return v

    @property
    def resolved_lookups(self) -> LookupTables:
        """Tables used by actions; declared lookups only until merged."""
        if self._resolved is None:
            self.merge_lookups(None)
        return self._resolved

    def merge_lookups(self, shared: Optional[Dict[str, Dict[str, str]]] = None) -> LookupTables:
        """Layer the declared supplier tables over ``shared`` tables, in place.

        Supplier aliases win over shared aliases. The resolved table set and
        every table object already in it are reused, so re-merging is
        idempotent and references held by callers stay valid.
        """
        if self._resolved is None:
            self._resolved = LookupTables()
        return rebuild_lookup_tables(self._resolved, [shared, self.lookups])

    def get_rule(self, column: str) -> Optional[RuleConfig]:
        """Rule configured for ``column`` (case-insensitive)."""
        lowered = column.lower()
        for name, rule in self.column_rules.items():
            if name.lower() == lowered:
                return rule
        return None

    def validate_configuration(self) -> List[str]:
        """Return structural error messages; an empty list means valid."""
        errors = [f"lookups: {message}" for message in validate_lookup_tables(self.lookups)]
        seen = set()
        for column, rule in self.column_rules.items():
            if not column:
                errors.append("Column rule with empty column name")
                continue
            if column.lower() in seen:
                errors.append(f"Column '{column}' is configured more than once")
            seen.add(column.lower())
            for index, action in enumerate(rule.actions):
                if not action.op:
                    errors.append(f"Column '{column}' action {index} has no op")
        return errors

    def apply_from(self, source: "ParserConfig") -> None:
        """Update this configuration in place from ``source``.

        Settings and declared lookups are copied; existing rule objects are
        updated rather than replaced and rules missing from ``source`` are
        removed. Call ``merge_lookups`` afterwards to refresh resolved tables.
        """
        self.settings = source.settings.model_copy(deep=True)
        self.lookups = {name: dict(entries) for name, entries in source.lookups.items()}

        incoming = {column.lower(): (column, rule) for column, rule in source.column_rules.items()}
        for column in [c for c in self.column_rules if c.lower() not in incoming]:
            del self.column_rules[column]

        existing = {column.lower(): column for column in self.column_rules}
        for lowered, (column, rule) in incoming.items():
            if lowered in existing:
                target = self.column_rules[existing[lowered]]
                target.actions = [action.model_copy(deep=True) for action in rule.actions]
                target.assign = dict(rule.assign)
                target.trace = rule.trace
            else:
                self.column_rules[column] = rule.model_copy(deep=True)
