"""Quote-aware CSV row reading shared by the tabular parsers."""

import csv
import io
from typing import Dict, List, Optional, Sequence


def read_csv_rows(text: str) -> List[List[str]]:
    """Split CSV text into rows of cells.

    Quoted fields may contain commas and newlines; a doubled ``""`` inside
    a quoted field is a literal quote. A leading UTF-8 BOM and surrounding
    whitespace of the whole document are trimmed first. Blank lines are
    kept as empty rows so row indexes stay aligned with physical lines.
    """
    stripped = text.lstrip("\ufeff").strip()
    if not stripped:
        return []
    return [row for row in csv.reader(io.StringIO(stripped))]


def is_blank_row(row: Sequence[str]) -> bool:
    return all(not cell.strip() for cell in row)


def header_index(header: Sequence[str]) -> Dict[str, int]:
    """Map lower-cased, stripped header names to their first column index."""
    index: Dict[str, int] = {}
    for position, name in enumerate(header):
        key = name.strip().lower()
        if key and key not in index:
            index[key] = position
    return index


def cell(row: Sequence[str], position: Optional[int]) -> str:
    """Stripped cell value, or "" when the column is absent or the row is short."""
    if position is None or position >= len(row):
        return ""
    return row[position].strip()
