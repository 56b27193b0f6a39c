import itertools
import secrets
import threading
from datetime import datetime
from typing import Optional

from app.schemas.user import UserRecord
from app.schemas.work_ticket import WorkTicketRecord


class InMemoryUserStore:
    """Users keyed by username; one lock makes insert-if-absent atomic."""

    def __init__(self):
        self._lock = threading.Lock()
        self._users: dict[str, UserRecord] = {}
        self._ids = itertools.count(1)

    def get(self, user_id: int) -> Optional[UserRecord]:
        with self._lock:
            for u in self._users.values():
                if u.id == user_id:
                    return u.model_copy()
        return None

    def get_by_username(self, username: str) -> Optional[UserRecord]:
        with self._lock:
            u = self._users.get(username)
            return u.model_copy() if u else None

    def insert_if_absent(self, user: UserRecord) -> Optional[UserRecord]:
        with self._lock:
            if user.username in self._users:
                return None
            stored = user.model_copy(update={"id": next(self._ids)})
            self._users[stored.username] = stored
            return stored.model_copy()

    def update(self, user: UserRecord) -> bool:
        with self._lock:
            current = self._users.get(user.username)
            if current is None or current.id != user.id:
                return False
            self._users[user.username] = user.model_copy()
            return True

    def consume_reset_token(
        self, user_id: int, token_hash: str, now: datetime, new_password_hash: str
    ) -> bool:
        with self._lock:
            for name, u in self._users.items():
                if u.id != user_id:
                    continue
                if u.reset_token_hash is None or not secrets.compare_digest(u.reset_token_hash, token_hash):
                    return False
                if u.reset_token_expires is None or now >= u.reset_token_expires:
                    return False
                self._users[name] = u.model_copy(update={
                    "password_hash": new_password_hash,
                    "reset_token_hash": None,
                    "reset_token_expires": None,
                })
                return True
        return False

    def delete(self, user_id: int) -> bool:
        with self._lock:
            for name, u in self._users.items():
                if u.id == user_id:
                    del self._users[name]
                    return True
        return False

    def query_all(self) -> list[UserRecord]:
        with self._lock:
            # dicts keep insertion order
            return [u.model_copy() for u in self._users.values()]


class InMemoryTicketStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._tickets: dict[int, WorkTicketRecord] = {}
        self._ids = itertools.count(1)

    def get(self, ticket_id: int) -> Optional[WorkTicketRecord]:
        with self._lock:
            t = self._tickets.get(ticket_id)
            return t.model_copy() if t else None

    def insert(self, ticket: WorkTicketRecord) -> WorkTicketRecord:
        with self._lock:
            stored = ticket.model_copy(update={"id": next(self._ids)})
            self._tickets[stored.id] = stored
            return stored.model_copy()

    def update(self, ticket: WorkTicketRecord) -> bool:
        with self._lock:
            if ticket.id not in self._tickets:
                return False
            self._tickets[ticket.id] = ticket.model_copy()
            return True

    def delete(self, ticket_id: int) -> bool:
        with self._lock:
            return self._tickets.pop(ticket_id, None) is not None

    def query_all(self) -> list[WorkTicketRecord]:
        with self._lock:
            return [t.model_copy() for t in self._tickets.values()]
