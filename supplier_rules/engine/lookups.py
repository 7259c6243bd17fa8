"""Lookup tables: case-insensitive alias -> canonical mappings, grouped by name.

Tables are read-only while rows are being parsed and may be shared by
concurrently parsed rows. Merging mutates tables in place so that callers
holding a reference to a table (or to the table set) keep seeing current
content; merges must not run concurrently with parses of the same set.
"""
import re
from typing import Any, Iterable, List, Mapping, Optional

import structlog

from supplier_rules.engine.casefold import CaseInsensitiveDict

logger = structlog.get_logger(__name__)

LOOKUP_PATTERN_PREFIX = "lookup:"


class LookupTable(CaseInsensitiveDict):
    """Case-insensitive ``alias -> canonical`` mapping."""

    def __setitem__(self, key: str, value: Optional[str]) -> None:
        super().__setitem__(key, "" if value is None else str(value))

    def aliases_longest_first(self) -> List[str]:
        """Non-empty aliases ordered by length, longest first (stable)."""
        return sorted((alias for alias in self if alias), key=len, reverse=True)


class LookupTables(CaseInsensitiveDict):
    """Case-insensitive ``table name -> LookupTable`` mapping."""

    def __setitem__(self, key: str, value: Mapping[str, str]) -> None:
        if not isinstance(value, LookupTable):
            value = LookupTable(value or {})
        super().__setitem__(key, value)

    @classmethod
    def from_mapping(cls, source: Optional[Mapping[str, Mapping[str, str]]]) -> "LookupTables":
        tables = cls()
        merge_lookup_tables(tables, source)
        return tables


def merge_lookup_tables(
    target: LookupTables,
    source: Optional[Mapping[str, Mapping[str, str]]],
) -> LookupTables:
    """Upsert every table and alias of ``source`` into ``target`` in place.

    Existing table objects are kept (and updated); tables missing from the
    target are created. Merging the same source twice leaves the target
    unchanged.
    """
    for table_name, entries in (source or {}).items():
        if not table_name:
            continue
        table = target.get(table_name)
        if table is None:
            target[table_name] = LookupTable(entries or {})
            continue
        for alias, canonical in (entries or {}).items():
            if alias is None:
                continue
            table[alias] = canonical
    return target


def rebuild_lookup_tables(
    target: LookupTables,
    layers: Iterable[Optional[Mapping[str, Mapping[str, str]]]],
) -> LookupTables:
    """Make ``target`` equal to the layered union of ``layers``, in place.

    Later layers override earlier ones alias by alias. Table objects already
    present in ``target`` are cleared and refilled instead of replaced, and
    tables no longer present in any layer are dropped from ``target``.
    Rebuilding from the same layers is idempotent.
    """
    layers = [layer or {} for layer in layers]
    wanted = CaseInsensitiveDict()
    for layer in layers:
        for table_name in layer:
            if table_name and table_name not in wanted:
                wanted[table_name] = True

    for table_name in [name for name in target if name not in wanted]:
        del target[table_name]

    for table_name in wanted:
        table = target.get(table_name)
        if table is None:
            table = LookupTable()
            target[table_name] = table
        else:
            table.clear()
        for layer in layers:
            for layer_table_name, entries in layer.items():
                if layer_table_name and layer_table_name.lower() == table_name.lower():
                    for alias, canonical in (entries or {}).items():
                        if alias is not None:
                            table[alias] = canonical

    logger.debug("lookup_tables_rebuilt", tables=len(target), layers=len(layers))
    return target


def validate_lookup_tables(lookups: Optional[Mapping[str, Any]]) -> List[str]:
    """Return structural error messages for a raw lookup mapping."""
    errors: List[str] = []
    if lookups is None:
        return ["Lookups dictionary is null"]
    for table_name, entries in lookups.items():
        if not table_name or not str(table_name).strip():
            errors.append("Lookup table has empty name")
            continue
        if entries is None:
            errors.append(f"Lookup table '{table_name}' has null entries dictionary")
            continue
        if not isinstance(entries, Mapping):
            errors.append(f"Lookup table '{table_name}' must be an object of alias -> value")
            continue
        for alias, canonical in entries.items():
            if alias is None:
                errors.append(f"Lookup '{table_name}' contains a null key")
            if canonical is None:
                errors.append(f"Lookup '{table_name}' contains a null value for key '{alias}'")
    return errors


def parse_lookup_reference(pattern: Optional[str]) -> Optional[str]:
    """Table name of a ``Lookup:<table>`` pattern reference, else None."""
    if not pattern:
        return None
    if pattern[:len(LOOKUP_PATTERN_PREFIX)].lower() != LOOKUP_PATTERN_PREFIX:
        return None
    return pattern[len(LOOKUP_PATTERN_PREFIX):].strip()


def build_lookup_pattern(table: LookupTable) -> Optional[str]:
    """Whole-token, case-insensitive alternation of the table's aliases.

    Longer aliases come first so that "Eau de Parfum" wins over "Eau".
    A match may not touch a word character on either side, which also
    works for aliases that start or end with punctuation ("E.D.T.").
    Returns None for an empty table.
    """
    aliases = table.aliases_longest_first()
    if not aliases:
        return None
    joined = "|".join(re.escape(alias) for alias in aliases)
    return rf"(?i)(?<!\w)(?:{joined})(?!\w)"
