"""
Storage interfaces the services depend on.

Two implementations exist for each store: ``app.stores.memory`` (process-local,
lock-guarded) and ``app.stores.sql`` (SQLAlchemy session). Both hand out
pydantic records, never ORM rows or internal references.
"""
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from app.schemas.user import UserRecord
from app.schemas.work_ticket import WorkTicketRecord


@runtime_checkable
class UserStore(Protocol):
    def get(self, user_id: int) -> Optional[UserRecord]: ...

    def get_by_username(self, username: str) -> Optional[UserRecord]: ...

    def insert_if_absent(self, user: UserRecord) -> Optional[UserRecord]:
        """Insert unless the username is taken; None when it was."""
        ...

    def update(self, user: UserRecord) -> bool: ...

    def consume_reset_token(
        self, user_id: int, token_hash: str, now: datetime, new_password_hash: str
    ) -> bool:
        """
        Set the new password and clear the reset token in one atomic step,
        only if ``token_hash`` is still the stored one and unexpired at ``now``.
        """
        ...

    def delete(self, user_id: int) -> bool: ...

    def query_all(self) -> list[UserRecord]:
        """All users in insertion order."""
        ...


@runtime_checkable
class TicketStore(Protocol):
    def get(self, ticket_id: int) -> Optional[WorkTicketRecord]: ...

    def insert(self, ticket: WorkTicketRecord) -> WorkTicketRecord:
        """Persist and return the record with its assigned id."""
        ...

    def update(self, ticket: WorkTicketRecord) -> bool: ...

    def delete(self, ticket_id: int) -> bool: ...

    def query_all(self) -> list[WorkTicketRecord]:
        """All tickets in insertion order."""
        ...
