"""Row input and parse result containers."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from supplier_rules.engine.casefold import CaseInsensitiveDict


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass
class RowData:
    """One spreadsheet row with cells keyed by column letter.

    Column letters are case-insensitive; blank or missing cells read as "".
    """
    index: int
    cells: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)

    def __post_init__(self):
        if not isinstance(self.cells, CaseInsensitiveDict):
            self.cells = CaseInsensitiveDict(self.cells or {})
        for column in list(self.cells):
            self.cells[column] = _cell_text(self.cells[column])

    @classmethod
    def from_mapping(cls, index: int, cells: Optional[Mapping[str, Any]]) -> "RowData":
        return cls(index=index, cells=CaseInsensitiveDict(cells or {}))

    def get_cell(self, column: str) -> str:
        return self.cells.get(column, "")

    def has_data(self) -> bool:
        """True if any cell holds non-blank text."""
        return any(value.strip() for value in self.cells.values())


@dataclass
class ParseResult:
    """Outcome of parsing one row.

    Attributes:
        values: Assigned property values (case-insensitive, insertion order)
        trace: Human-readable diagnostic lines
        variables: Snapshot of the row's property bag after all columns ran
        matched: True if at least one column's rule produced an assignment
        row_index: Index of the source row
    """
    values: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    trace: List[str] = field(default_factory=list)
    variables: Dict[str, str] = field(default_factory=dict)
    matched: bool = False
    row_index: int = 0

    def get(self, prop: str, default: Optional[str] = None) -> Optional[str]:
        return self.values.get(prop, default)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable view of the result."""
        return {
            "row_index": self.row_index,
            "matched": self.matched,
            "values": self.values.to_dict(),
            "trace": list(self.trace),
        }
