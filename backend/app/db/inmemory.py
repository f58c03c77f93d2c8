"""In-memory implementation of the session store."""

from backend.app.models.session import ChatSession


class InMemorySessionStore:
    """In-memory implementation of SessionStore.

    Sessions are copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, ChatSession] = {}

    async def get(self, session_id: str) -> ChatSession | None:
        """Get session by id."""
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session is not None else None

    async def put(self, session: ChatSession) -> None:
        """Store a copy of the session."""
        self._sessions[session.session_id] = session.model_copy(deep=True)

    async def delete(self, session_id: str) -> None:
        """Remove session if present."""
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)
