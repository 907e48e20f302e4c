# Copyright (C) 2024 Hub Redirector Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Hub Redirector - Main FastAPI application."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from hub_redirector.config import settings
from hub_redirector.database import init_db
from hub_redirector.errors import RedirectorError
from hub_redirector.routers import reconfigure, redirect, register, token

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    await init_db()
    logger.info("Hub Redirector ready (database: %s)", settings.database_url.split("://", 1)[0])
    yield
    # shutdown


app = FastAPI(
    title="Hub Redirector",
    description="Redirects each caller to the hub registered for its public IP",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status, and duration for each request (no body)."""
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.exception("%s %s failed %.1fms", request.method, request.url.path, duration_ms)
        raise
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)
    return response


@app.exception_handler(RedirectorError)
async def redirector_error_handler(request: Request, exc: RedirectorError) -> PlainTextResponse:
    """Render core outcomes as plain text. Internal details stay in the server log."""
    if exc.status_code < 500:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.get("/api/v1")
async def root():
    """API info."""
    return {
        "name": "Hub Redirector",
        "version": VERSION,
        "api": "/api/v1",
        "docs": "/api/docs",
    }


@app.get("/api/v1/health")
async def health():
    """Health check for load balancers."""
    return {"status": "ok"}


# API v1
app.include_router(token.router, prefix="/api/v1")
app.include_router(register.router, prefix="/api/v1")
app.include_router(reconfigure.router, prefix="/api/v1")
# Catch-all, must stay last
app.include_router(redirect.router)


def run() -> None:
    """Entry point: configure logging and serve with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
