"""Excel import/export for the student registry.

Import reads the first worksheet with openpyxl so every data row keeps its
real row number in the file. Export builds a DataFrame and writes it through
pandas' openpyxl engine, then styles the header row.
"""

from __future__ import annotations

import io
import zipfile
from typing import Any, BinaryIO, Optional, Sequence

import pandas as pd
from openpyxl import load_workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from ..core.constants import EXPORT_COLUMNS, EXPORT_HEADER_FILL, EXPORT_SHEET_NAME, IMPORT_COLUMNS
from ..core.exceptions import ValidationError
from .model import ImportRow, Student


def _cell_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    # Numeric student numbers come back as floats from some writers.
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def read_import_rows(stream: BinaryIO) -> list[ImportRow]:
    """Parse an uploaded workbook into rows; blank rows are dropped."""

    try:
        wb = load_workbook(stream, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError):
        raise ValidationError("The uploaded file is not a valid .xlsx workbook")

    try:
        if not wb.worksheets:
            raise ValidationError("The workbook has no worksheet")
        ws = wb.worksheets[0]

        header = next(ws.iter_rows(min_row=1, max_row=1, values_only=True), ())
        labels = [_cell_text(v) for v in header]
        missing = [c for c in IMPORT_COLUMNS if c not in labels]
        if missing:
            raise ValidationError(f"Missing required columns: {', '.join(missing)}")
        positions = [labels.index(c) for c in IMPORT_COLUMNS]

        rows: list[ImportRow] = []
        for row_number, values in enumerate(ws.iter_rows(min_row=2, values_only=True), start=2):
            cells = [_cell_text(values[p]) if p < len(values) else None for p in positions]
            if not any(cells):
                continue
            student_id, name, major = cells
            rows.append(ImportRow(row_number=row_number, student_id=student_id, name=name, major=major))
        return rows
    finally:
        wb.close()


def write_export(students: Sequence[Student]) -> io.BytesIO:
    data = [
        {
            "student_id": s.student_id,
            "name": s.name,
            "major": s.major,
            "current_score": float(s.current_score),
            "total_calls": s.total_calls,
            "arrived_calls": s.arrived_calls,
            "correct_answers": s.correct_answers,
            "transfer_rights": s.transfer_rights,
        }
        for s in students
    ]
    df = pd.DataFrame(data, columns=[key for key, _, _ in EXPORT_COLUMNS])
    df = df.rename(columns={key: label for key, label, _ in EXPORT_COLUMNS})

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=EXPORT_SHEET_NAME)

        ws = writer.sheets[EXPORT_SHEET_NAME]
        fill = PatternFill(fill_type="solid", fgColor=EXPORT_HEADER_FILL)
        for cell in ws[1]:
            cell.font = Font(bold=True)
            cell.fill = fill
        for idx, (_, _, width) in enumerate(EXPORT_COLUMNS, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = width

    output.seek(0)
    return output
