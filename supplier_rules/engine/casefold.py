"""Insertion-ordered mapping with case-insensitive string keys."""
from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple


class CaseInsensitiveDict(MutableMapping):
    """Mapping whose string keys compare case-insensitively.

    Keys keep the casing of their first write. Iteration follows insertion
    order, like a plain dict.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._data: Dict[str, Tuple[str, Any]] = {}
        if initial:
            for key, value in initial.items():
                self[key] = value

    def __getitem__(self, key: str) -> Any:
        return self._data[key.lower()][1]

    def __setitem__(self, key: str, value: Any) -> None:
        folded = key.lower()
        existing = self._data.get(folded)
        self._data[folded] = (existing[0] if existing else key, value)

    def __delitem__(self, key: str) -> None:
        del self._data[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        if len(other) != len(self):
            return False
        return all(
            isinstance(key, str) and key in self and self[key] == value
            for key, value in other.items()
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"

    def original_key(self, key: str) -> Optional[str]:
        """Stored casing of ``key``, or None when absent."""
        entry = self._data.get(key.lower())
        return entry[0] if entry else None

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.items())
