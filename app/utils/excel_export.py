from __future__ import annotations
from typing import List, Dict, Any
from io import BytesIO
from datetime import datetime

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.styles import Font, Alignment

from app.schemas.work_ticket import WorkTicketRecord

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

TICKET_COLUMNS = [
    ("Ticket Number", "ticket_number"),
    ("Cost Centre", "cost_centre"),
    ("Activity", "activity"),
    ("Operator", "operator_name"),
    ("Operators", "num_operators"),
    ("Start", "start_date_time"),
    ("Start Counter", "start_counter"),
    ("End", "end_date_time"),
    ("End Counter", "end_counter"),
    ("Qty In", "quantity_in"),
    ("Qty Out", "quantity_out"),
    ("Material Used", "material_used"),
    ("Created By", "created_by"),
    ("Created At", "created_at"),
    ("Updated At", "updated_at"),
]


def ticket_rows(tickets: List[WorkTicketRecord]) -> List[Dict[str, Any]]:
    return [{header: getattr(t, field) for header, field in TICKET_COLUMNS} for t in tickets]


def rows_to_xlsx_bytes(rows: List[Dict[str, Any]], headers: List[str], sheet_name: str = "Tickets") -> bytes:
    """
    rows: list of dict keyed by header; missing keys become empty cells
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name[:31]

    ws.append(headers)

    # header style
    header_font = Font(bold=True)
    for col_idx, _h in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for r in rows:
        ws.append([r.get(h) for h in headers])

    # autosize columns
    for col_idx, h in enumerate(headers, start=1):
        max_len = len(str(h))
        for row_idx in range(2, ws.max_row + 1):
            v = ws.cell(row=row_idx, column=col_idx).value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max_len + 2, 60)

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def tickets_to_xlsx_bytes(tickets: List[WorkTicketRecord]) -> bytes:
    headers = [header for header, _ in TICKET_COLUMNS]
    return rows_to_xlsx_bytes(ticket_rows(tickets), headers, sheet_name="Tickets")


def make_filename(prefix: str = "work_tickets") -> str:
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{ts}.xlsx"
