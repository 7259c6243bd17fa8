"""Shared base for configuration models read from supplier JSON files."""
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class ConfigModel(BaseModel):
    """Base model for configuration documents.

    Supplier configuration files are hand-edited, so field names are matched
    case-insensitively and with or without underscores (``columnRules``,
    ``ColumnRules`` and ``column_rules`` are the same field). Serialization
    uses camelCase aliases.

    Subclasses reshape legacy layouts by overriding ``_prepare``.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_input(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            data = cls._fold_field_names(dict(data))
            data = cls._prepare(data)
        return data

    @classmethod
    def _prepare(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Hook for subclasses to rewrite raw input before validation."""
        return data

    @classmethod
    def _fold_field_names(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        known: Dict[str, str] = {}
        for name, info in cls.model_fields.items():
            alias = info.alias or name
            for candidate in (name, alias):
                known[candidate.replace("_", "").lower()] = alias

        folded: Dict[str, Any] = {}
        for key, value in data.items():
            canonical = known.get(str(key).replace("_", "").lower(), key)
            folded[canonical] = value
        return folded
