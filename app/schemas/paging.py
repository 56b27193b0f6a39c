from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PagedResult(BaseModel, Generic[T]):
    items: list[T]
    total_count: int
