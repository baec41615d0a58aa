from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from mooda.db.base import get_db
from mooda.core.config import settings
from mooda.core.logging import configure_logging
from mooda.routers import admin as admin_router
from mooda.routers import chat as chat_router
from mooda.routers import conversations as conversations_router
from mooda.routers import emotion_logs as emotion_logs_router
from mooda.routers import personalities as personalities_router
from mooda.routers import users as users_router
from mooda.core.errors import (
    MoodaException,
    mooda_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)
from mooda.services.scheduler import DailySummaryScheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    scheduler = None
    if settings.SCHEDULER_ENABLED:
        scheduler = DailySummaryScheduler(
            hour=settings.SCHEDULER_HOUR, minute=settings.SCHEDULER_MINUTE
        )
        scheduler.start()
    app.state.scheduler = scheduler
    yield
    if scheduler is not None:
        scheduler.stop()


app = FastAPI(
    title="Mooda API",
    description=(
        "**Mooda**: chat with an AI companion; every night each user's "
        "conversations are summarized into a one-emotion diary entry.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(MoodaException, mooda_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(users_router.router)
app.include_router(personalities_router.router)
app.include_router(chat_router.router)
app.include_router(conversations_router.router)
app.include_router(emotion_logs_router.router)
app.include_router(admin_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
