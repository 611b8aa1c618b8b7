"""Reading comma-delimited text into a header row and data rows."""

import csv
import io
from pathlib import Path

from vparecon.domain.errors import StructuralError


def read_delimited_text(text: str) -> tuple[list[str], list[tuple[int, list[str]]]]:
    """Split delimited text into header tokens and numbered data rows.

    Row numbers count lines from the header (row 1) to the line where a
    record starts. Blank lines between records are skipped but still
    counted; blank lines before the header are not.

    Returns:
        (header tokens, [(row_number, values), ...])

    Raises:
        StructuralError: If there is no header or no data row
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.reader(io.StringIO(text))
    header: list[str] | None = None
    header_line = 0
    rows: list[tuple[int, list[str]]] = []
    consumed = 0
    for values in reader:
        # line_num is where the record ended; quoted fields may span lines
        start_line = consumed + 1
        consumed = reader.line_num
        if not any(v.strip() for v in values):
            continue
        if header is None:
            header = values
            header_line = start_line
            continue
        rows.append((start_line - header_line + 1, values))

    if header is None:
        raise StructuralError("File is empty")
    if not rows:
        raise StructuralError("File must contain at least a header row and one data row")
    return header, rows


def read_delimited_file(path: str) -> tuple[list[str], list[tuple[int, list[str]]]]:
    """Read a UTF-8 delimited file (see read_delimited_text).

    Raises:
        FileNotFoundError: If the file doesn't exist
        StructuralError: If there is no header or no data row
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return read_delimited_text(file_path.read_text(encoding="utf-8-sig"))
