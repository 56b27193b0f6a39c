import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import update as sql_update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.user import User
from app.models.work_ticket import WorkTicket
from app.schemas.user import UserRecord
from app.schemas.work_ticket import WorkTicketRecord

logger = logging.getLogger("app.stores")

_USER_COLUMNS = ("username", "password_hash", "role", "reset_token_hash", "reset_token_expires")


class SqlUserStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> Optional[UserRecord]:
        row = self.db.get(User, user_id)
        return UserRecord.model_validate(row) if row else None

    def get_by_username(self, username: str) -> Optional[UserRecord]:
        row = self.db.query(User).filter(User.username == username).first()
        return UserRecord.model_validate(row) if row else None

    def insert_if_absent(self, user: UserRecord) -> Optional[UserRecord]:
        row = User(**user.model_dump(include=set(_USER_COLUMNS)))
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            # unique index on username decides concurrent registrations
            self.db.rollback()
            logger.info("Username already taken: %s", user.username)
            return None
        self.db.refresh(row)
        return UserRecord.model_validate(row)

    def update(self, user: UserRecord) -> bool:
        row = self.db.get(User, user.id)
        if row is None:
            return False
        for key in _USER_COLUMNS:
            setattr(row, key, getattr(user, key))
        self.db.commit()
        return True

    def consume_reset_token(
        self, user_id: int, token_hash: str, now: datetime, new_password_hash: str
    ) -> bool:
        # single conditional UPDATE; a second caller with the same token matches no row
        stmt = (
            sql_update(User)
            .where(
                User.id == user_id,
                User.reset_token_hash == token_hash,
                User.reset_token_expires > now,
            )
            .values(password_hash=new_password_hash, reset_token_hash=None, reset_token_expires=None)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1

    def delete(self, user_id: int) -> bool:
        row = self.db.get(User, user_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def query_all(self) -> list[UserRecord]:
        rows = self.db.query(User).order_by(User.id.asc()).all()
        return [UserRecord.model_validate(r) for r in rows]


class SqlTicketStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, ticket_id: int) -> Optional[WorkTicketRecord]:
        row = self.db.get(WorkTicket, ticket_id)
        return WorkTicketRecord.model_validate(row) if row else None

    def insert(self, ticket: WorkTicketRecord) -> WorkTicketRecord:
        row = WorkTicket(**ticket.model_dump(exclude={"id"}))
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return WorkTicketRecord.model_validate(row)

    def update(self, ticket: WorkTicketRecord) -> bool:
        row = self.db.get(WorkTicket, ticket.id)
        if row is None:
            return False
        for key, value in ticket.model_dump(exclude={"id"}).items():
            setattr(row, key, value)
        self.db.commit()
        return True

    def delete(self, ticket_id: int) -> bool:
        row = self.db.get(WorkTicket, ticket_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    def query_all(self) -> list[WorkTicketRecord]:
        rows = self.db.query(WorkTicket).order_by(WorkTicket.id.asc()).all()
        return [WorkTicketRecord.model_validate(r) for r in rows]
