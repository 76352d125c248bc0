# backend/caras/services/exports.py
from __future__ import annotations

import csv
import logging
from datetime import date, datetime
from io import BytesIO, StringIO
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

from caras.services.clock import as_utc, local_tz

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

MEMBER_COLUMNS = [
    ("Full Name", "full_name"),
    ("Birthday", "birthday"),
    ("Age", "age"),
    ("Address", "address"),
    ("Guardian", "guardian"),
    ("Contact Number", "contact_number"),
    ("Batch", "batch"),
]


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        # timestamps are stored in UTC; the sheet shows the parish's calendar date
        return as_utc(value).astimezone(local_tz()).strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def rows_to_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """Comma-separated text; fields holding commas, quotes or newlines are quoted."""
    buf = StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(headers)
    for r in rows:
        writer.writerow([_text(v) for v in r])
    return buf.getvalue()


def attachment_headers(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


# ---- Members spreadsheet ------------------------------------------------------

def _blank_template(start_row: int) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = "Members"
    header_row = max(start_row - 1, 1)
    if header_row > 1:
        ws.cell(row=1, column=1, value="CARAS Members").font = Font(bold=True, size=14)
    for col, (label, _) in enumerate(MEMBER_COLUMNS, start=1):
        ws.cell(row=header_row, column=col, value=label).font = Font(bold=True)
    return wb


def members_workbook(
    members: Iterable[Any],
    template_path: Optional[str] = None,
    start_row: int = 4,
    font_name: str = "Arial",
) -> bytes:
    """
    Fill the members template from `start_row` down.

    `members` must already be ordered by batch; one empty row is left
    wherever the batch changes.
    """
    if template_path and Path(template_path).is_file():
        wb = load_workbook(template_path)
    else:
        if template_path:
            logger.info("members template not found at %s; using generated layout", template_path)
        wb = _blank_template(start_row)
    ws = wb.active

    row = start_row
    prev_batch: Optional[str] = None
    first = True
    for m in members:
        batch = getattr(m, "batch", None) or ""
        if not first and batch != prev_batch:
            row += 1
        for col, (_, attr) in enumerate(MEMBER_COLUMNS, start=1):
            value = getattr(m, attr, None)
            if isinstance(value, datetime):
                value = value.date()
            cell = ws.cell(row=row, column=col, value=value if value is not None else "")
            cell.font = Font(name=font_name, size=11)
        prev_batch = batch
        first = False
        row += 1

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def member_csv_rows(members: Iterable[Any]) -> List[List[Any]]:
    return [
        [getattr(m, attr, None) for _, attr in MEMBER_COLUMNS] + [getattr(m, "created_at", None)]
        for m in members
    ]


MEMBER_CSV_HEADERS = [label for label, _ in MEMBER_COLUMNS] + ["Joined"]
