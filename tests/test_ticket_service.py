"""Tests for TicketService, run against both ticket store backends."""

from datetime import date, datetime

import pytest


class TestCrud:
    def test_create_stamps_created_at_and_assigns_id(self, ticket_service, make_ticket, clock):
        created = ticket_service.create_ticket(make_ticket(created_at=datetime(1999, 1, 1)))

        assert created.id is not None
        assert created.created_at == clock.now
        assert created.updated_at is None
        assert ticket_service.get_ticket_by_id(created.id) == created

    def test_get_missing_ticket(self, ticket_service):
        assert ticket_service.get_ticket_by_id(12345) is None

    def test_update_overwrites_fields(self, ticket_service, make_ticket, clock):
        created = ticket_service.create_ticket(make_ticket())
        clock.advance(hours=2)

        changed = make_ticket(
            id=created.id,
            ticket_number="T1-B",
            cost_centre=None,
            quantity_out=-3,
            created_by="someone",
            created_at=datetime(2000, 1, 1),
        )
        updated = ticket_service.update_ticket(changed)

        stored = ticket_service.get_ticket_by_id(created.id)
        assert stored == updated
        assert stored.ticket_number == "T1-B"
        assert stored.cost_centre is None
        assert stored.quantity_out == -3
        assert stored.created_by == "someone"
        assert stored.created_at == created.created_at
        assert stored.updated_at == clock.now

    def test_update_unknown_id_is_a_no_op(self, ticket_service, make_ticket):
        assert ticket_service.update_ticket(make_ticket(id=999)) is None
        assert ticket_service.update_ticket(make_ticket()) is None
        assert ticket_service.list_tickets(1, 10).total_count == 0

    def test_delete(self, ticket_service, make_ticket):
        created = ticket_service.create_ticket(make_ticket())
        assert ticket_service.delete_ticket(created.id) is True
        assert ticket_service.get_ticket_by_id(created.id) is None
        assert ticket_service.delete_ticket(created.id) is False

    def test_delete_on_empty_store(self, ticket_service):
        assert ticket_service.delete_ticket(999) is False

    def test_timezone_aware_input_is_stored_as_utc(self, ticket_service, make_ticket):
        from datetime import timedelta, timezone

        aware = datetime(2024, 1, 5, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        created = ticket_service.create_ticket(make_ticket(start_date_time=aware))
        assert created.start_date_time == datetime(2024, 1, 5, 8, 0)


class TestListTickets:
    def test_default_order_is_newest_first(self, ticket_service, make_ticket, clock):
        a = ticket_service.create_ticket(make_ticket(ticket_number="T1"))
        clock.advance(minutes=5)
        b = ticket_service.create_ticket(make_ticket(ticket_number="T2"))

        result = ticket_service.list_tickets(page=1, page_size=10, sort_by=None)
        assert [t.id for t in result.items] == [b.id, a.id]
        assert result.total_count == 2

    def test_default_order_ignores_ascending_flag(self, ticket_service, make_ticket, clock):
        ticket_service.create_ticket(make_ticket(ticket_number="T1"))
        clock.advance(minutes=5)
        ticket_service.create_ticket(make_ticket(ticket_number="T2"))

        result = ticket_service.list_tickets(1, 10, sort_by="nonsense", sort_ascending=True)
        assert [t.ticket_number for t in result.items] == ["T2", "T1"]

    def test_sort_by_created_at_ascending(self, ticket_service, make_ticket, clock):
        ticket_service.create_ticket(make_ticket(ticket_number="T1"))
        clock.advance(minutes=5)
        ticket_service.create_ticket(make_ticket(ticket_number="T2"))

        result = ticket_service.list_tickets(1, 10, sort_by="createdAt", sort_ascending=True)
        assert [t.ticket_number for t in result.items] == ["T1", "T2"]

    @pytest.mark.parametrize("sort_by,field", [
        ("ticketNumber", "ticket_number"),
        ("costCentre", "cost_centre"),
        ("activity", "activity"),
        ("operatorName", "operator_name"),
    ])
    def test_sort_keys(self, ticket_service, make_ticket, sort_by, field):
        for value in ["b", "c", "a"]:
            ticket_service.create_ticket(make_ticket(**{field: value}))

        asc = ticket_service.list_tickets(1, 10, sort_by=sort_by, sort_ascending=True)
        desc = ticket_service.list_tickets(1, 10, sort_by=sort_by, sort_ascending=False)
        assert [getattr(t, field) for t in asc.items] == ["a", "b", "c"]
        assert [getattr(t, field) for t in desc.items] == ["c", "b", "a"]

    def test_ties_keep_insertion_order(self, ticket_service, make_ticket):
        for number in ["T1", "T2", "T3"]:
            ticket_service.create_ticket(make_ticket(ticket_number=number, cost_centre="CC"))

        result = ticket_service.list_tickets(1, 10, sort_by="costCentre")
        assert [t.ticket_number for t in result.items] == ["T1", "T2", "T3"]

    def test_search_matches_operator_case_insensitively(self, ticket_service, make_ticket):
        ticket_service.create_ticket(make_ticket(operator_name="Alice Smith"))
        ticket_service.create_ticket(make_ticket(operator_name="Bob Jones"))

        result = ticket_service.list_tickets(1, 10, search_term="smith")
        assert [t.operator_name for t in result.items] == ["Alice Smith"]
        assert result.total_count == 1

    def test_search_fields(self, ticket_service, make_ticket):
        ticket_service.create_ticket(make_ticket(ticket_number="WX-1", operator_name="A", activity="Weld"))
        ticket_service.create_ticket(make_ticket(ticket_number="T-9", operator_name="wx Team", activity="Cut"))
        ticket_service.create_ticket(make_ticket(ticket_number="T-8", operator_name="B", activity="Paint wx"))
        ticket_service.create_ticket(make_ticket(ticket_number="T-7", operator_name="C", activity="Cut",
                                                 cost_centre="WX", material_used="wx"))

        result = ticket_service.list_tickets(1, 10, search_term="Wx")
        assert result.total_count == 3
        assert "T-7" not in [t.ticket_number for t in result.items]

    def test_end_date_includes_the_whole_day(self, ticket_service, make_ticket):
        ticket_service.create_ticket(make_ticket(start_date_time=datetime(2024, 1, 5, 23, 59)))

        assert ticket_service.list_tickets(1, 10, end_date=date(2024, 1, 5)).total_count == 1
        assert ticket_service.list_tickets(1, 10, end_date=date(2024, 1, 4)).total_count == 0

    def test_start_date_is_inclusive(self, ticket_service, make_ticket):
        ticket_service.create_ticket(make_ticket(start_date_time=datetime(2024, 1, 5, 8, 0)))

        assert ticket_service.list_tickets(1, 10, start_date=datetime(2024, 1, 5, 8, 0)).total_count == 1
        assert ticket_service.list_tickets(1, 10, start_date=datetime(2024, 1, 5, 8, 1)).total_count == 0

    def test_updated_range_skips_untouched_tickets(self, ticket_service, make_ticket, clock):
        first = ticket_service.create_ticket(make_ticket(ticket_number="T1"))
        ticket_service.create_ticket(make_ticket(ticket_number="T2"))
        clock.advance(days=3)
        ticket_service.update_ticket(first.model_copy(update={"activity": "Rework"}))

        result = ticket_service.list_tickets(1, 10, updated_start_date=date(2024, 1, 4))
        assert [t.ticket_number for t in result.items] == ["T1"]

        result = ticket_service.list_tickets(1, 10, updated_end_date=date(2024, 1, 3))
        assert result.total_count == 0

    def test_pages_are_consistent_with_full_listing(self, ticket_service, make_ticket, clock):
        for i in range(13):
            clock.advance(minutes=1)
            operator = "Alice Smith" if i % 3 else "Bob Jones"
            ticket_service.create_ticket(make_ticket(ticket_number=f"T{i:02d}", operator_name=operator))

        full = ticket_service.list_tickets(1, 100, search_term="alice", sort_by="ticketNumber",
                                           sort_ascending=False)
        page_size = 4
        pages = [
            ticket_service.list_tickets(p, page_size, search_term="alice", sort_by="ticketNumber",
                                        sort_ascending=False)
            for p in range(1, 4)
        ]

        assert sum(len(p.items) for p in pages) == full.total_count == 8
        for p_no, page in enumerate(pages, start=1):
            assert page.total_count == full.total_count
            for i, item in enumerate(page.items):
                assert item == full.items[(p_no - 1) * page_size + i]

    def test_query_tickets_returns_everything_filtered(self, ticket_service, make_ticket):
        for i in range(30):
            ticket_service.create_ticket(make_ticket(ticket_number=f"T{i}"))
        assert len(ticket_service.query_tickets()) == 30
