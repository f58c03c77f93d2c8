"""FastAPI application - trip chat planner."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api.deps import get_conversation_engine
from backend.app.api.routes.chat import router as chat_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.config import get_settings
from backend.app.db.engine import create_schema, get_async_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the session table on startup; flush pending persists on shutdown."""
    settings = get_settings()
    if settings.database_url and settings.auto_create_schema:
        await create_schema(get_async_engine())
        logger.info("Session schema ready")

    yield

    if get_conversation_engine.cache_info().currsize:
        await get_conversation_engine().drain()


app = FastAPI(title="Trip Chat Planner API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_settings().ui_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(chat_router, tags=["chat"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Trip Chat Planner API", "version": "0.1.0"}
