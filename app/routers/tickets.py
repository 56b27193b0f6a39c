from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import StreamingResponse

from app.dependencies import get_ticket_service
from app.schemas.paging import PagedResult
from app.schemas.user import Principal
from app.schemas.work_ticket import WorkTicketCreate, WorkTicketRecord, WorkTicketUpdate
from app.services.ticket_service import TicketService
from app.utils.auth import get_current_user, require_admin
from app.utils.excel_export import XLSX_MEDIA_TYPE, make_filename, tickets_to_xlsx_bytes

import logging
logger = logging.getLogger("app.tickets")


router = APIRouter(prefix="/tickets", tags=["Tickets"])


class TicketFilters:
    """Query parameters shared by the list and export endpoints."""

    def __init__(
        self,
        search: Optional[str] = Query(None, description="ticket number / operator / activity, case-insensitive"),
        sort_by: Optional[str] = Query(None, description="ticketNumber, costCentre, activity, operatorName, createdAt"),
        sort_ascending: bool = Query(True),
        start_date: Optional[datetime] = Query(None, description="start_date_time >= start_date"),
        end_date: Optional[datetime] = Query(None, description="start_date_time within or before this day"),
        updated_start_date: Optional[datetime] = Query(None),
        updated_end_date: Optional[datetime] = Query(None),
    ):
        self.search = search
        self.sort_by = sort_by
        self.sort_ascending = sort_ascending
        self.start_date = start_date
        self.end_date = end_date
        self.updated_start_date = updated_start_date
        self.updated_end_date = updated_end_date

    def as_kwargs(self) -> dict:
        return {
            "search_term": self.search,
            "sort_by": self.sort_by,
            "sort_ascending": self.sort_ascending,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "updated_start_date": self.updated_start_date,
            "updated_end_date": self.updated_end_date,
        }


@router.get("", response_model=PagedResult[WorkTicketRecord])
def list_tickets(
    filters: TicketFilters = Depends(),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=200),
    tickets: TicketService = Depends(get_ticket_service),
    user: Principal = Depends(get_current_user),
):
    return tickets.list_tickets(page, page_size, **filters.as_kwargs())


@router.get("/export")
def export_tickets_excel(
    filters: TicketFilters = Depends(),
    tickets: TicketService = Depends(get_ticket_service),
    user: Principal = Depends(get_current_user),
):
    """
    Filtered and sorted tickets as an .xlsx file (no paging)
    """
    rows = tickets.query_tickets(**filters.as_kwargs())
    logger.info("%s exported %d tickets", user.identity, len(rows))

    return StreamingResponse(
        iter([tickets_to_xlsx_bytes(rows)]),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{make_filename()}"'},
    )


@router.post("", response_model=WorkTicketRecord, status_code=status.HTTP_201_CREATED)
def create_ticket(
    body: WorkTicketCreate,
    tickets: TicketService = Depends(get_ticket_service),
    user: Principal = Depends(get_current_user),
):
    record = WorkTicketRecord(**body.model_dump(), created_by=user.identity)
    return tickets.create_ticket(record)


@router.get("/{ticket_id}", response_model=WorkTicketRecord)
def get_ticket(
    ticket_id: int,
    tickets: TicketService = Depends(get_ticket_service),
    user: Principal = Depends(get_current_user),
):
    ticket = tickets.get_ticket_by_id(ticket_id)
    if ticket is None:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket


@router.put("/{ticket_id}", response_model=WorkTicketRecord)
def update_ticket(
    ticket_id: int,
    body: WorkTicketUpdate,
    tickets: TicketService = Depends(get_ticket_service),
    user: Principal = Depends(get_current_user),
):
    data = body.model_dump()
    if data.get("created_by") is None:
        data.pop("created_by")
        existing = tickets.get_ticket_by_id(ticket_id)
        data["created_by"] = existing.created_by if existing else None

    updated = tickets.update_ticket(WorkTicketRecord(id=ticket_id, **data))
    if updated is None:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return updated


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_ticket(
    ticket_id: int,
    tickets: TicketService = Depends(get_ticket_service),
    admin: Principal = Depends(require_admin),
):
    if not tickets.delete_ticket(ticket_id):
        raise HTTPException(status_code=404, detail="Ticket not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
