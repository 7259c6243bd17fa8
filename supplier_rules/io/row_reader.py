"""Read spreadsheet files into rows keyed by column letter.

Supports Excel (.xlsx, .xlsm via openpyxl) and CSV files. Every cell is read
as text; blank cells become "". Column letters follow the spreadsheet
convention (A, B, ..., Z, AA, ...).
"""
import csv
from pathlib import Path
from typing import Iterator, Optional, Union

import pandas as pd
import structlog
from openpyxl.utils import get_column_letter

from supplier_rules.errors import RowReadError
from supplier_rules.models.row import RowData

logger = structlog.get_logger(__name__)

EXCEL_EXTENSIONS = {".xlsx", ".xlsm"}
CSV_EXTENSIONS = {".csv"}


def _csv_width(path: Path) -> int:
    """Widest row of a CSV file, in fields."""
    with open(path, newline="", encoding="utf-8") as handle:
        return max((len(record) for record in csv.reader(handle)), default=0)


def _read_frame(path: Path, sheet_name: Optional[str]) -> pd.DataFrame:
    extension = path.suffix.lower()
    if extension in EXCEL_EXTENSIONS:
        return pd.read_excel(
            path,
            sheet_name=sheet_name if sheet_name else 0,
            header=None,
            dtype=str,
            keep_default_na=False,
            engine="openpyxl",
        )
    if extension in CSV_EXTENSIONS:
        width = _csv_width(path)
        if width == 0:
            return pd.DataFrame()
        # Explicit names let short rows read as empty instead of failing
        return pd.read_csv(
            path,
            header=None,
            names=list(range(width)),
            dtype=str,
            keep_default_na=False,
            encoding="utf-8",
        )
    raise RowReadError(
        f"Unsupported file type '{extension}'. "
        f"Supported: {sorted(EXCEL_EXTENSIONS | CSV_EXTENSIONS)}"
    )


def read_rows(
    path: Union[str, Path],
    sheet_name: Optional[str] = None,
    data_start_row: int = 1,
) -> Iterator[RowData]:
    """Yield the non-blank rows of a spreadsheet file.

    Args:
        path: Path to an .xlsx/.xlsm or .csv file
        sheet_name: Worksheet to read (Excel only; default: first sheet)
        data_start_row: 1-based number of the first row to yield

    Yields:
        RowData whose ``index`` is the 1-based sheet row number

    Raises:
        RowReadError: If the file is missing, unsupported or unreadable
    """
    file_path = Path(path)
    log = logger.bind(file_path=str(file_path), sheet_name=sheet_name)

    if not file_path.exists():
        raise RowReadError(f"File not found: {file_path}")
    if data_start_row < 1:
        raise RowReadError(f"data_start_row must be >= 1, got {data_start_row}")

    try:
        frame = _read_frame(file_path, sheet_name)
    except RowReadError:
        raise
    except Exception as e:
        raise RowReadError(f"Failed to read {file_path.name}: {e}") from e

    frame = frame.fillna("")
    columns = [get_column_letter(position + 1) for position in range(frame.shape[1])]
    log.info("rows_read", rows=frame.shape[0], columns=len(columns))

    for offset, values in enumerate(frame.itertuples(index=False, name=None)):
        row_number = offset + 1
        if row_number < data_start_row:
            continue
        row = RowData(index=row_number, cells=dict(zip(columns, values)))
        if not row.has_data():
            continue
        yield row
