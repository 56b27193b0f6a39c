from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.credential_service import CredentialService
from app.services.email_service import EmailService
from app.services.ticket_service import TicketService
from app.stores.base import TicketStore, UserStore
from app.stores.sql import SqlTicketStore, SqlUserStore
from app.utils.hashing import PasswordHasher


def user_store_for(app: FastAPI, db: Session) -> UserStore:
    # memory backend: the stores live on app.state for the process lifetime
    store = getattr(app.state, "user_store", None)
    return store if store is not None else SqlUserStore(db)


def ticket_store_for(app: FastAPI, db: Session) -> TicketStore:
    store = getattr(app.state, "ticket_store", None)
    return store if store is not None else SqlTicketStore(db)


def get_user_store(request: Request, db: Session = Depends(get_db)) -> UserStore:
    return user_store_for(request.app, db)


def get_ticket_store(request: Request, db: Session = Depends(get_db)) -> TicketStore:
    return ticket_store_for(request.app, db)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


def get_email_service() -> EmailService:
    return EmailService()


def get_credential_service(
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> CredentialService:
    return CredentialService(store, hasher)


def get_ticket_service(store: TicketStore = Depends(get_ticket_store)) -> TicketService:
    return TicketService(store)
