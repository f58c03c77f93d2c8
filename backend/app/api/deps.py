"""FastAPI dependencies - wires the conversation engine from settings."""

import logging
from functools import lru_cache

from backend.app.config import Settings, get_settings
from backend.app.db.engine import create_session_factory, get_async_engine
from backend.app.db.inmemory import InMemorySessionStore
from backend.app.db.redis_store import RedisSessionStore
from backend.app.db.repositories import LayeredSessionRepository
from backend.app.db.sql_repositories import SqlSessionStore
from backend.app.llm.client import get_llm_client
from backend.app.llm.responder import AIResponder
from backend.app.orchestration.conversation import ConversationEngine
from backend.app.utils.logging import StructuredTurnLogger
from backend.app.utils.metrics import PrometheusChatMetrics

logger = logging.getLogger(__name__)


def build_session_repository(
    settings: Settings, metrics: PrometheusChatMetrics
) -> LayeredSessionRepository:
    """Compose the session tiers that are configured."""
    cache = None
    if settings.redis_url:
        cache = RedisSessionStore.from_url(
            settings.redis_url, ttl_seconds=settings.session_cache_ttl_seconds
        )
        logger.info("Session cache tier: redis")

    durable = None
    if settings.database_url:
        durable = SqlSessionStore(create_session_factory(get_async_engine()))
        logger.info("Session durable tier: sql")

    return LayeredSessionRepository(
        memory=InMemorySessionStore(), cache=cache, durable=durable, metrics=metrics
    )


def build_conversation_engine(settings: Settings) -> ConversationEngine:
    """Create a conversation engine with Prometheus metrics and structured logs."""
    metrics = PrometheusChatMetrics()
    responder = AIResponder(
        get_llm_client(settings),
        metrics=metrics,
        threshold=settings.generation_threshold,
        history_turns=settings.prompt_history_turns,
    )
    return ConversationEngine(
        sessions=build_session_repository(settings, metrics),
        responder=responder,
        settings=settings,
        metrics=metrics,
        turn_logger=StructuredTurnLogger(),
    )


@lru_cache
def get_conversation_engine() -> ConversationEngine:
    """FastAPI dependency returning the process-wide engine (override in tests)."""
    return build_conversation_engine(get_settings())
