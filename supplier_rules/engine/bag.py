"""Property bag: the shared, case-insensitive key/value store of one row."""
from typing import Dict, List, Optional, Sequence, Tuple

from supplier_rules.engine import keys
from supplier_rules.engine.casefold import CaseInsensitiveDict


class PropertyBag(CaseInsensitiveDict):
    """Insertion-ordered, case-insensitive ``str -> str`` store.

    The bag is owned by the parser engine for the duration of one row and is
    shared (never copied) by every cell context and action of that row.

    List results are always written through ``write_list`` so that the
    elements, ``Key.Length`` and ``Key.Valid`` change together.
    """

    def __setitem__(self, key: str, value: Optional[str]) -> None:
        super().__setitem__(key, "" if value is None else str(value))

    def get_value(self, key: str) -> str:
        """Value stored under ``key``, or an empty string when missing."""
        return self.get(key, "")

    def list_length(self, key: str) -> int:
        """Recorded ``Key.Length`` as an int (0 when missing or malformed)."""
        try:
            return int(self.get_value(keys.length(key)))
        except ValueError:
            return 0

    def write_list(self, key: str, values: Sequence[str]) -> None:
        """Write a list result under ``key`` in one step.

        Element slots left over from an earlier, longer list under the same
        key are removed so ``Key[i]`` never outlives ``Key.Length``.
        """
        previous = self.list_length(key)
        for index in range(len(values), previous):
            self.pop(keys.element(key, index), None)

        for index, value in enumerate(values):
            self[keys.element(key, index)] = value
        self[keys.length(key)] = str(len(values))
        self[keys.valid(key)] = keys.format_bool(len(values) > 0)

    def read_list(self, key: str) -> List[str]:
        """Elements of the list result under ``key`` (empty when not valid)."""
        return [
            self.get_value(keys.element(key, index))
            for index in range(self.list_length(key))
        ]

    def set_deferred(self, prop: str, value: str) -> None:
        """Record a deferred ``assign:`` entry for ``prop``."""
        self[keys.deferred(prop)] = value

    def pop_deferred(self) -> List[Tuple[str, str]]:
        """Remove and return all deferred assignments in insertion order."""
        deferred = [(key, self[key]) for key in self if keys.is_deferred(key)]
        for key, _ in deferred:
            del self[key]
        return [(keys.strip_deferred(key), value) for key, value in deferred]

    def snapshot(self) -> Dict[str, str]:
        """Plain dict copy of the current contents."""
        return self.to_dict()
