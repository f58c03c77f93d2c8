"""Shared pytest fixtures for all test suites."""

import os
from collections.abc import AsyncGenerator, Callable
from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from backend.app.config import Settings
from backend.app.db.inmemory import InMemorySessionStore
from backend.app.db.models import Base
from backend.app.db.repositories import LayeredSessionRepository
from backend.app.llm.client import LLMClient
from backend.app.llm.responder import AIResponder
from backend.app.orchestration.conversation import ConversationEngine

TODAY = date(2026, 10, 18)  # a Sunday


class ScriptedLLMClient:
    """LLM client returning canned completions in order (last one repeats)."""

    def __init__(self, *completions: str) -> None:
        self.completions = list(completions)
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if len(self.completions) > 1:
            return self.completions.pop(0)
        return self.completions[0]


class FailingLLMClient:
    """LLM client that always raises."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or RuntimeError("provider down")
        self.calls = 0

    async def complete(self, prompt: str) -> str:
        self.calls += 1
        raise self.error


@pytest.fixture
def scripted_llm() -> Callable[..., ScriptedLLMClient]:
    """Factory for scripted LLM clients."""
    return ScriptedLLMClient


@pytest.fixture
def failing_llm() -> FailingLLMClient:
    """LLM client that raises on every call."""
    return FailingLLMClient()


@pytest.fixture
def today() -> date:
    """Fixed reference date for relative date parsing."""
    return TODAY


@pytest.fixture
def settings() -> Settings:
    """Settings with no external services configured."""
    return Settings(
        _env_file=None,
        database_url=None,
        redis_url=None,
        openai_api_key=None,
    )


@pytest.fixture
def make_engine(
    settings: Settings,
) -> Callable[..., ConversationEngine]:
    """Factory for conversation engines over in-memory storage.

    Usage:
        engine = make_engine(client=FailingLLMClient())
        engine = make_engine(sessions=LayeredSessionRepository(...))
    """

    def factory(
        client: LLMClient | None = None,
        sessions: LayeredSessionRepository | None = None,
        **kwargs: object,
    ) -> ConversationEngine:
        responder = AIResponder(
            client,
            threshold=settings.generation_threshold,
            history_turns=settings.prompt_history_turns,
        )
        return ConversationEngine(
            sessions=sessions or LayeredSessionRepository(memory=InMemorySessionStore()),
            responder=responder,
            settings=settings,
            today_fn=lambda: TODAY,
            **kwargs,  # type: ignore[arg-type]
        )

    return factory


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine with the session schema created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'sessions.db'}",
        poolclass=NullPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine for PostgreSQL integration tests.

    Requires DATABASE_URL to be set to a real PostgreSQL connection string.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set - skipping postgres test")

    if not database_url.startswith(("postgresql://", "postgresql+asyncpg://")):
        pytest.skip(f"DATABASE_URL is not PostgreSQL: {database_url}")

    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()
