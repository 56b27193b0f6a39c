"""Shared fixtures: both store backends, a controllable clock and an HTTP client."""

import os

# must be in place before anything imports app.config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORE_BACKEND"] = "sql"
os.environ["SESSION_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_TO_FILE"] = "false"
os.environ.pop("ADMIN_USERNAME", None)
os.environ.pop("ADMIN_PASSWORD", None)

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient


class FakeClock:
    """Callable clock whose time only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 8, 0, 0))


@pytest.fixture
def hasher():
    from app.utils.hashing import PasswordHasher

    return PasswordHasher(rounds=4)


@pytest.fixture
def db_session():
    """Fresh tables in the shared in-memory SQLite database."""
    from app.database import Base, SessionLocal, engine
    from app.models import user, work_ticket  # noqa: F401

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def file_sessions(tmp_path):
    """Session factory over an on-disk SQLite file, for tests that use one session per thread."""
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker

    from app.database import Base
    from app.models import user, work_ticket  # noqa: F401

    engine = create_engine(f"sqlite:///{tmp_path / 'users.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    opened = []

    def _open():
        db = factory()
        opened.append(db)
        return db

    yield _open
    for db in opened:
        db.close()
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def user_store(request):
    from app.stores.memory import InMemoryUserStore
    from app.stores.sql import SqlUserStore

    if request.param == "memory":
        return InMemoryUserStore()
    return SqlUserStore(request.getfixturevalue("db_session"))


@pytest.fixture(params=["memory", "sql"])
def ticket_store(request):
    from app.stores.memory import InMemoryTicketStore
    from app.stores.sql import SqlTicketStore

    if request.param == "memory":
        return InMemoryTicketStore()
    return SqlTicketStore(request.getfixturevalue("db_session"))


@pytest.fixture
def credential_service(user_store, hasher, clock):
    from app.services.credential_service import CredentialService

    return CredentialService(user_store, hasher, clock=clock)


@pytest.fixture
def ticket_service(ticket_store, clock):
    from app.services.ticket_service import TicketService

    return TicketService(ticket_store, clock=clock)


@pytest.fixture
def make_ticket():
    """Build an unsaved ticket record with sensible defaults."""
    from app.schemas.work_ticket import WorkTicketRecord

    def _make(**overrides):
        data = {
            "ticket_number": "T1",
            "cost_centre": "CC-100",
            "activity": "Cutting",
            "operator_name": "Alice Smith",
            "num_operators": 2,
            "start_date_time": datetime(2024, 1, 5, 8, 0),
            "start_counter": 100,
            "end_date_time": datetime(2024, 1, 5, 16, 0),
            "end_counter": 250,
            "quantity_in": 150,
            "quantity_out": 148,
            "material_used": "Steel sheet",
        }
        data.update(overrides)
        return WorkTicketRecord(**data)

    return _make


@pytest.fixture
def client(db_session):
    from app.main import app

    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def login(client, username: str, password: str):
    return client.post("/auth/login", json={"username": username, "password": password})


@pytest.fixture
def user_client(client):
    """Client signed in as a regular user."""
    client.post("/auth/register", json={"username": "worker", "password": "worker-pass"})
    resp = login(client, "worker", "worker-pass")
    assert resp.status_code == 200
    return client


@pytest.fixture
def admin_client(client, hasher):
    """Client signed in as an Admin."""
    from app.database import SessionLocal
    from app.services.credential_service import CredentialService
    from app.stores.sql import SqlUserStore

    with SessionLocal() as db:
        CredentialService(SqlUserStore(db), hasher).register("boss", "boss-pass", role="Admin")
    resp = login(client, "boss", "boss-pass")
    assert resp.status_code == 200
    return client
