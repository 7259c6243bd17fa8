"""Structured key grammar for the property bag.

Every action and the chain executor build and read bag keys through this
module so the addressing convention lives in one place:

    Key                 scalar value
    Key[i]              i-th element (0-based) of a list result
    Key.Length          decimal count of list elements
    Key.Valid           "true" / "false" (true iff Length > 0)
    Key.Clean           residual text after a destructive extraction
    Key.3.<group>       named capture group of the latest recorded match
    assign:Key          deferred assignment promoted by the chain executor

The ``3`` in named-group keys is a fixed marker of the grammar, not an index.
"""
import re
from typing import Optional, Tuple

TEXT_KEY = "Text"
ASSIGN_PREFIX = "assign:"
GROUP_MARKER = "3"

LENGTH_SUFFIX = "Length"
VALID_SUFFIX = "Valid"
CLEAN_SUFFIX = "Clean"

TRUE = "true"
FALSE = "false"

_ELEMENT_RE = re.compile(r"^(?P<base>.+)\[(?P<index>\d+)\]$")
_PROPERTY_PATH_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)+$")
_RESERVED_SUFFIXES = {LENGTH_SUFFIX.lower(), VALID_SUFFIX.lower(), CLEAN_SUFFIX.lower()}


def element(key: str, index: int) -> str:
    """Key of the ``index``-th list element under ``key``."""
    return f"{key}[{index}]"


def length(key: str) -> str:
    return f"{key}.{LENGTH_SUFFIX}"


def valid(key: str) -> str:
    return f"{key}.{VALID_SUFFIX}"


def clean(key: str) -> str:
    return f"{key}.{CLEAN_SUFFIX}"


def group(key: str, group_name: str) -> str:
    """Key of a named capture group recorded under ``key``."""
    return f"{key}.{GROUP_MARKER}.{group_name}"


def deferred(key: str) -> str:
    """Key of a deferred assignment to property ``key``."""
    return f"{ASSIGN_PREFIX}{key}"


def is_deferred(key: str) -> bool:
    return key[:len(ASSIGN_PREFIX)].lower() == ASSIGN_PREFIX


def strip_deferred(key: str) -> str:
    """Property name of a deferred assignment key."""
    if is_deferred(key):
        return key[len(ASSIGN_PREFIX):]
    return key


def is_text_key(key: Optional[str]) -> bool:
    """True if ``key`` is the reserved key for the raw cell text."""
    return key is not None and key.strip().lower() == TEXT_KEY.lower()


def parse_element(key: str) -> Optional[Tuple[str, int]]:
    """Split ``Key[i]`` into ``("Key", i)``; None for any other shape."""
    match = _ELEMENT_RE.match(key)
    if not match:
        return None
    return match.group("base"), int(match.group("index"))


def is_property_path(key: Optional[str]) -> bool:
    """True for output keys shaped like ``Entity.Property`` (e.g. ``Product.Name``).

    Keys ending in one of the grammar's own suffixes (``.Length``, ``.Valid``,
    ``.Clean``) or carrying the named-group marker are not property paths.
    """
    if not key or not _PROPERTY_PATH_RE.match(key):
        return False
    segments = key.split(".")
    if segments[-1].lower() in _RESERVED_SUFFIXES:
        return False
    return True


def format_bool(value: bool) -> str:
    return TRUE if value else FALSE
