"""Session store protocol and the layered session repository.

Three tiers hold chat sessions:
- cache: shared, TTL-bound (Redis)
- memory: in-process, always present
- durable: long-lived (SQL)

Reads take the newer of the cache and memory copies, falling back to durable
storage. Writes commit to memory immediately and are persisted to cache and
durable tiers in the background.
"""

import asyncio
import logging
from typing import Protocol

from backend.app.models.session import ChatSession
from backend.app.orchestration.hooks import ChatMetrics

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Key-value contract for one storage tier."""

    async def get(self, session_id: str) -> ChatSession | None:
        """Get session by id.

        Returns:
            Stored session, or None if absent
        """
        ...

    async def put(self, session: ChatSession) -> None:
        """Store session under its session_id, replacing any previous value."""
        ...

    async def delete(self, session_id: str) -> None:
        """Remove session if present."""
        ...


class LayeredSessionRepository:
    """Composes cache, in-process and durable session stores."""

    def __init__(
        self,
        memory: SessionStore,
        cache: SessionStore | None = None,
        durable: SessionStore | None = None,
        metrics: ChatMetrics | None = None,
    ) -> None:
        """Initialize repository.

        Args:
            memory: In-process tier (required)
            cache: Shared cache tier (optional)
            durable: Durable tier (optional)
            metrics: Metrics recorder (optional, defaults to no-op)
        """
        self._memory = memory
        self._cache = cache
        self._durable = durable
        self._metrics = metrics or ChatMetrics()
        self._pending: dict[str, asyncio.Task[None]] = {}

    def _persistent_tiers(self) -> list[tuple[str, SessionStore]]:
        tiers: list[tuple[str, SessionStore]] = []
        if self._cache is not None:
            tiers.append(("cache", self._cache))
        if self._durable is not None:
            tiers.append(("durable", self._durable))
        return tiers

    async def _read(
        self, tier: str, store: SessionStore | None, session_id: str
    ) -> ChatSession | None:
        if store is None:
            return None
        try:
            return await store.get(session_id)
        except Exception as e:
            logger.warning(f"Session read from {tier} tier failed for {session_id}: {e}")
            return None

    async def load(self, session_id: str) -> ChatSession | None:
        """Load a session, trying cache and memory, then durable storage.

        A background persist still running for the same session is awaited
        first. When both cache and memory hold the session, the copy with the
        later updated_at wins, so a cache left behind by a failed write never
        replaces newer in-process state.
        """
        pending = self._pending.get(session_id)
        if pending is not None:
            await asyncio.gather(pending, return_exceptions=True)

        cached = await self._read("cache", self._cache, session_id)
        local = await self._read("memory", self._memory, session_id)
        if local is not None and (cached is None or local.updated_at >= cached.updated_at):
            return local
        if cached is not None:
            await self._memory.put(cached)
            return cached

        durable = await self._read("durable", self._durable, session_id)
        if durable is not None:
            await self._memory.put(durable)
        return durable

    async def commit(self, session: ChatSession) -> None:
        """Make a session visible in the in-process tier."""
        await self._memory.put(session)

    async def persist(self, session: ChatSession) -> None:
        """Write a session to the cache and durable tiers.

        Every tier is attempted; failures are logged and counted, never raised.
        A failed cache write also evicts that session from the cache.
        """
        tiers = self._persistent_tiers()
        if not tiers:
            return

        results = await asyncio.gather(
            *(store.put(session) for _, store in tiers), return_exceptions=True
        )
        for (tier, store), result in zip(tiers, results):
            if isinstance(result, Exception):
                logger.warning(
                    f"Session persist to {tier} tier failed for {session.session_id}: {result}"
                )
                self._metrics.inc_persist_error(tier)
                if tier == "cache":
                    await self._invalidate(store, session.session_id)

    async def _invalidate(self, cache: SessionStore, session_id: str) -> None:
        """Drop a cache entry that may now be older than memory."""
        try:
            await cache.delete(session_id)
        except Exception as e:
            logger.warning(f"Cache invalidation failed for {session_id}: {e}")

    def schedule_persist(self, session: ChatSession) -> asyncio.Task[None]:
        """Persist a snapshot of the session in a background task.

        Persists for the same session run in submission order.
        """
        snapshot = session.model_copy(deep=True)
        session_id = snapshot.session_id
        previous = self._pending.get(session_id)

        async def run() -> None:
            if previous is not None:
                await asyncio.gather(previous, return_exceptions=True)
            await self.persist(snapshot)

        task = asyncio.create_task(run())
        self._pending[session_id] = task

        def forget(done: asyncio.Task[None]) -> None:
            if self._pending.get(session_id) is done:
                del self._pending[session_id]

        task.add_done_callback(forget)
        return task

    async def delete(self, session_id: str) -> None:
        """Remove a session from every tier.

        The in-process tier is cleared even when other tiers fail.
        """
        pending = self._pending.get(session_id)
        if pending is not None:
            await asyncio.gather(pending, return_exceptions=True)

        await self._memory.delete(session_id)

        tiers = self._persistent_tiers()
        results = await asyncio.gather(
            *(store.delete(session_id) for _, store in tiers), return_exceptions=True
        )
        for (tier, _), result in zip(tiers, results):
            if isinstance(result, Exception):
                logger.warning(f"Session delete from {tier} tier failed for {session_id}: {result}")
                self._metrics.inc_persist_error(tier)

    async def drain(self) -> None:
        """Wait for all background persists to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending.values()), return_exceptions=True)
