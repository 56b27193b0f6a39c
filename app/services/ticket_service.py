import logging
from datetime import date, datetime
from typing import Callable, Optional

from app.schemas.paging import PagedResult
from app.schemas.work_ticket import WorkTicketRecord
from app.stores.base import TicketStore
from app.utils.clock import as_naive_utc, utcnow
from app.utils.paging import filter_by_range, filter_by_search, paginate, sort_records

logger = logging.getLogger("app.tickets")

TICKET_SEARCH_FIELDS = ("ticket_number", "operator_name", "activity")
TICKET_SORT_FIELDS = {
    "ticketnumber": "ticket_number",
    "costcentre": "cost_centre",
    "activity": "activity",
    "operatorname": "operator_name",
    "createdat": "created_at",
}
# newest first
TICKET_DEFAULT_SORT = ("created_at", False)


def _normalize_times(ticket: WorkTicketRecord) -> dict:
    return {
        "start_date_time": as_naive_utc(ticket.start_date_time),
        "end_date_time": as_naive_utc(ticket.end_date_time),
    }


class TicketService:
    def __init__(self, store: TicketStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    def create_ticket(self, ticket: WorkTicketRecord) -> WorkTicketRecord:
        stamped = ticket.model_copy(update={
            **_normalize_times(ticket),
            "id": None,
            "created_at": self.clock(),
            "updated_at": None,
        })
        created = self.store.insert(stamped)
        logger.info("Created ticket %s (%s)", created.id, created.ticket_number)
        return created

    def get_ticket_by_id(self, ticket_id: int) -> Optional[WorkTicketRecord]:
        return self.store.get(ticket_id)

    def update_ticket(self, ticket: WorkTicketRecord) -> Optional[WorkTicketRecord]:
        """Overwrite every editable field of an existing ticket; None if the id is unknown."""
        if ticket.id is None:
            return None
        existing = self.store.get(ticket.id)
        if existing is None:
            logger.info("Update skipped, ticket %s not found", ticket.id)
            return None

        updated = ticket.model_copy(update={
            **_normalize_times(ticket),
            "created_at": existing.created_at,
            "updated_at": self.clock(),
        })
        if not self.store.update(updated):
            # deleted between the read and the write
            return None
        return updated

    def delete_ticket(self, ticket_id: int) -> bool:
        deleted = self.store.delete(ticket_id)
        if deleted:
            logger.info("Deleted ticket %s", ticket_id)
        return deleted

    def query_tickets(
        self,
        search_term: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_ascending: bool = True,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        updated_start_date: Optional[date] = None,
        updated_end_date: Optional[date] = None,
    ) -> list[WorkTicketRecord]:
        """Filtered and sorted tickets, without paging."""
        tickets = filter_by_search(self.store.query_all(), search_term, TICKET_SEARCH_FIELDS)
        tickets = filter_by_range(tickets, "start_date_time", start_date, end_date)
        if updated_start_date is not None or updated_end_date is not None:
            tickets = filter_by_range(tickets, "updated_at", updated_start_date, updated_end_date)
        return sort_records(tickets, TICKET_SORT_FIELDS, sort_by, sort_ascending, TICKET_DEFAULT_SORT)

    def list_tickets(
        self,
        page: int,
        page_size: int,
        search_term: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_ascending: bool = True,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        updated_start_date: Optional[date] = None,
        updated_end_date: Optional[date] = None,
    ) -> PagedResult[WorkTicketRecord]:
        tickets = self.query_tickets(
            search_term=search_term,
            sort_by=sort_by,
            sort_ascending=sort_ascending,
            start_date=start_date,
            end_date=end_date,
            updated_start_date=updated_start_date,
            updated_end_date=updated_end_date,
        )
        window = paginate(tickets, page, page_size)
        return PagedResult[WorkTicketRecord](items=window.items, total_count=window.total_count)
