"""
FastAPI application

Router registration and error mapping.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tillbook import __version__
from tillbook.api.routes import cash_balance, cash_history, health, transactions, transfers
from tillbook.config import Settings
from tillbook.database.base import Database
from tillbook.domain.errors import (
    ConflictError,
    DependencyError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first; DomainError catches anything left over
ERROR_STATUS = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (DependencyError, 500),
    (DomainError, 400),
)


def status_for(error: DomainError) -> int:
    """HTTP status code of a domain error."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return 500


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rejected (%d): %s", request.method, request.url.path, status_code, exc)
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else err.get("msg", ""))
    message = "; ".join(problems) or "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


def create_app(db: Optional[Database] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the API application.

    Args:
        db: Database handle to serve. When omitted one is built from
            ``settings`` and released on shutdown.
        settings: Runtime settings, read from the environment when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings.from_env()
    owns_db = db is None
    if db is None:
        db = settings.create_database()
        db.connect()
        db.initialize_schema()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("API started (overdraft guard %s)", "on" if settings.block_overdraft else "off")
        yield
        if owns_db:
            db.disconnect()
        logger.info("API stopped")

    app = FastAPI(
        title="Tillbook API",
        description="Point-of-sale cash bookkeeping",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.db = db
    app.state.settings = settings

    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(health.router)
    app.include_router(transfers.router)
    app.include_router(transactions.router)
    app.include_router(cash_balance.router)
    app.include_router(cash_history.router)

    return app
