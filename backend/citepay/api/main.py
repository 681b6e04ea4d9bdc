"""Entry point for the FastAPI application.

This module constructs the FastAPI app, includes the routers and sets up
startup and shutdown events.  Startup never touches the database: a
storage outage is reported per request as a receipt error, and tables are
created only by ``citepay.scripts.init_db``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exception_handlers import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from citepay.api.error_handlers import (
    generic_exception_handler,
    receipt_exception_handler,
    validation_exception_handler,
)
from citepay.api.routes.receipts import router as receipts_router
from citepay.core.config import settings, is_development
from citepay.core.errors import ReceiptError
from citepay.core.observability import init_sentry

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    logger.info("Starting up...")
    if init_sentry("api"):
        logger.info("Sentry SDK initialized (api)")
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="CitePay API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if is_development() else list(settings.BACKEND_CORS_ORIGINS or []),
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Register custom exception handlers
app.add_exception_handler(ReceiptError, receipt_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include routers
app.include_router(receipts_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}


@app.api_route("/health", methods=["GET", "HEAD"])
async def health_check():
    """Health check endpoint (supports GET & HEAD)."""
    return {"status": "healthy"}

