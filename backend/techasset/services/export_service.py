# Overview: Spreadsheet exports for the work logs (xlsx via openpyxl).

from __future__ import annotations

import io

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from ..shaping import as_float
from . import worklog_service
from .worklog_service import WorkLogKind
from techasset.time_utils import to_iso_date, utctoday


XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header, column width, value getter)
_LEADING_COLUMNS = [
    ("ID Code", 15, lambda e, _: e.id_code),
    ("Client Name", 20, lambda e, _: e.client_name),
    ("Subject Issue", 30, lambda e, _: e.subject_issue),
    ("Category", 12, lambda e, _: e.category),
    ("Date Started", 12, lambda e, _: to_iso_date(e.date_started)),
    ("Time Started", 12, lambda e, _: e.time_started),
    ("Date Finished", 12, lambda e, _: to_iso_date(e.date_finished)),
    ("Time Finished", 12, lambda e, _: e.time_finished),
    ("Technician Name", 18, lambda e, _: e.technician_name),
    ("Time Consumed (Minutes)", 15, lambda e, _: e.time_consumed_minutes),
    ("Total Time Charge (Minutes)", 18, lambda e, _: e.total_time_charge_minutes),
]

_CREDIT_COLUMNS = [
    ("Credit Consumed", 15, lambda e, _: round(as_float(e.credit_consumed), 2)),
    ("Total Credit Consumed", 18, lambda e, _: round(as_float(e.total_credit_consumed), 2)),
]

_TRAILING_COLUMNS = [
    ("Resolution Details", 40, lambda e, _: e.resolution_details),
    ("Remarks", 25, lambda e, _: e.remarks or "No remarks"),
    ("Status", 10, lambda e, _: e.status),
    ("Added By", 15, lambda e, name: name or "Unknown"),
    ("Entry Created", 20, lambda e, _: e.created_at.strftime("%Y-%m-%d %H:%M:%S") if e.created_at else None),
]


def columns_for(kind: WorkLogKind) -> list[tuple]:
    credit = _CREDIT_COLUMNS if kind.with_credits else []
    return _LEADING_COLUMNS + credit + _TRAILING_COLUMNS


def export_filename(kind: WorkLogKind, filters: dict) -> str:
    parts = [kind.file_stem, utctoday().isoformat()]
    labels = (("client", "Client"), ("category", "Category"), ("technician", "Tech"))
    for key, label in labels:
        if filters.get(key):
            parts.append(f"{label}-{filters[key]}")
    safe = "_".join(parts).replace("/", "-").replace(" ", "_")
    return f"{safe}.xlsx"


def export_worklog(kind: WorkLogKind, **filters) -> tuple[bytes, str]:
    """Build the workbook; returns (file bytes, download filename)."""
    columns = columns_for(kind)
    rows = worklog_service.list_entries(kind, **filters)

    wb = Workbook()
    ws = wb.active
    ws.title = kind.sheet_title

    ws.append([header for header, _, _ in columns])
    for entry, added_by in rows:
        ws.append([getter(entry, added_by) for _, _, getter in columns])

    for index, (_, width, _) in enumerate(columns, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue(), export_filename(kind, filters)
