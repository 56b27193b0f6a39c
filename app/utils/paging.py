"""
Shared search / date-range / sort / window steps for list endpoints.

Records are any objects exposing the named fields as attributes (pydantic
records from the stores). Each step returns a new list and keeps the input
order where it does not sort.
"""
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Sequence, TypeVar

from app.schemas.paging import PagedResult
from app.utils.clock import as_naive_utc

T = TypeVar("T")


def normalize_sort_key(sort_by: Optional[str]) -> Optional[str]:
    # "ticketNumber", "ticket_number" and "TicketNumber" all mean the same key
    if not sort_by:
        return None
    return sort_by.strip().replace("_", "").lower()


def _contains(value, needle: str) -> bool:
    return value is not None and needle in str(value).casefold()


def filter_by_search(records: Iterable[T], search_term: Optional[str], fields: Sequence[str]) -> list[T]:
    term = (search_term or "").strip()
    if not term:
        return list(records)
    needle = term.casefold()
    return [r for r in records if any(_contains(getattr(r, f, None), needle) for f in fields)]


def _as_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return as_naive_utc(value)
    return datetime.combine(value, time.min)


def end_of_day(value) -> datetime:
    """Exclusive upper bound covering the whole calendar day of ``value``."""
    return datetime.combine(_as_datetime(value).date(), time.min) + timedelta(days=1)


def filter_by_range(
    records: Iterable[T],
    field: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[T]:
    """
    start: inclusive, compared as an exact timestamp
    end:   inclusive of the whole day, whatever its time part
    Records whose field is None never pass a bound.
    """
    out = list(records)
    if start is not None:
        lower = _as_datetime(start)
        out = [r for r in out if getattr(r, field) is not None and getattr(r, field) >= lower]
    if end is not None:
        upper = end_of_day(end)
        out = [r for r in out if getattr(r, field) is not None and getattr(r, field) < upper]
    return out


def _sort_value(value):
    # None sorts before everything else
    return (value is not None, value)


def sort_records(
    records: Iterable[T],
    sort_fields: dict[str, str],
    sort_by: Optional[str],
    sort_ascending: bool,
    default: tuple[str, bool],
) -> list[T]:
    """
    sort_fields maps a normalized sort key to the record attribute.
    Unknown or missing keys fall back to ``default`` = (attribute, ascending),
    which ignores ``sort_ascending``. sorted() is stable in both directions.
    """
    key = normalize_sort_key(sort_by)
    if key in sort_fields:
        field, ascending = sort_fields[key], sort_ascending
    else:
        field, ascending = default
    return sorted(records, key=lambda r: _sort_value(getattr(r, field)), reverse=not ascending)


def paginate(records: Sequence[T], page: int, page_size: int) -> PagedResult:
    total = len(records)
    if page_size <= 0:
        return PagedResult(items=[], total_count=total)
    skip = (max(page, 1) - 1) * page_size
    return PagedResult(items=list(records[skip:skip + page_size]), total_count=total)
