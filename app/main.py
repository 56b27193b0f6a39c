# app/main.py
import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import Base, SessionLocal, engine
from app.dependencies import get_password_hasher, user_store_for
from app.logging_config import setup_logging
from app.models import user, work_ticket  # noqa: F401  registers the tables
from app.routers import admin, auth, tickets
from app.services.credential_service import CredentialService
from app.stores.memory import InMemoryTicketStore, InMemoryUserStore


setup_logging()
logger = logging.getLogger("app")


def bootstrap_admin(app: FastAPI) -> None:
    if not (settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD):
        return
    with SessionLocal() as db:
        credentials = CredentialService(user_store_for(app, db), get_password_hasher())
        if credentials.ensure_admin(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD):
            logger.info("Created admin account %s", settings.ADMIN_USERNAME)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.STORE_BACKEND == "memory":
        app.state.user_store = InMemoryUserStore()
        app.state.ticket_store = InMemoryTicketStore()
    else:
        # create tables if missing
        Base.metadata.create_all(bind=engine)
    logger.info("Store backend: %s", settings.STORE_BACKEND)
    bootstrap_admin(app)
    yield


app = FastAPI(title="Work Ticket Backend", version="1.0.0", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
        ms = int((time.time() - start) * 1000)
        logger.info("%s %s -> %s (%dms)", request.method, request.url.path, response.status_code, ms)
        return response
    except Exception:
        ms = int((time.time() - start) * 1000)
        logger.exception("Unhandled error %s %s (%dms)", request.method, request.url.path, ms)
        raise


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(tickets.router)
app.include_router(admin.router)

@app.get("/")
def root():
    return {"message": "Work ticket backend is running!"}
