"""Redis implementation of the session store (shared cache tier)."""

import redis.asyncio as redis

from backend.app.models.session import ChatSession

DEFAULT_TTL_SECONDS = 24 * 3600


class RedisSessionStore:
    """Redis implementation of SessionStore.

    Sessions are stored as JSON under ``session:{id}`` and expire after the
    configured TTL.
    """

    def __init__(self, redis_client: redis.Redis, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        """Initialize store.

        Args:
            redis_client: Async Redis client
            ttl_seconds: Expiry applied on every write
        """
        self._redis = redis_client
        self._ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> "RedisSessionStore":
        return cls(redis.from_url(url, decode_responses=True), ttl_seconds)

    @staticmethod
    def key(session_id: str) -> str:
        return f"session:{session_id}"

    async def get(self, session_id: str) -> ChatSession | None:
        """Get session by id."""
        raw = await self._redis.get(self.key(session_id))
        if raw is None:
            return None
        return ChatSession.model_validate_json(raw)

    async def put(self, session: ChatSession) -> None:
        """Store session JSON with TTL."""
        await self._redis.set(
            self.key(session.session_id),
            session.model_dump_json(by_alias=True),
            ex=self._ttl_seconds,
        )

    async def delete(self, session_id: str) -> None:
        """Remove session if present."""
        await self._redis.delete(self.key(session_id))

    async def close(self) -> None:
        await self._redis.aclose()
