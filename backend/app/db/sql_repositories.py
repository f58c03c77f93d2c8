"""SQL implementation of the session store."""

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.db.models import ChatSessionRecord
from backend.app.models.session import ChatSession


class SqlSessionStore:
    """SQL implementation of SessionStore (chat_session table)."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, session_id: str) -> ChatSession | None:
        """Get session by id."""
        async with self._session_factory() as db:
            record = await db.get(ChatSessionRecord, session_id)
            if record is None:
                return None
            return ChatSession.model_validate(record.payload)

    async def put(self, session: ChatSession) -> None:
        """Insert or replace the session row."""
        record = ChatSessionRecord(
            session_id=session.session_id,
            payload=session.model_dump(mode="json", by_alias=True),
            completeness=session.completeness,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )
        async with self._session_factory() as db:
            await db.merge(record)
            await db.commit()

    async def delete(self, session_id: str) -> None:
        """Remove session row if present."""
        async with self._session_factory() as db:
            await db.execute(
                delete(ChatSessionRecord).where(ChatSessionRecord.session_id == session_id)
            )
            await db.commit()
