"""FastAPI application entrypoint for errchain."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from errchain.api.errors import register_error_handlers
from errchain.api.operations import router as operations_router
from errchain.core.config import get_settings
from errchain.db.base import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting errchain with settings=%s", get_settings().safe_for_logging())
    init_db()
    yield


app = FastAPI(title="errchain", lifespan=lifespan)
register_error_handlers(app)
app.include_router(operations_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint for service readiness."""
    return {"status": "ok"}
