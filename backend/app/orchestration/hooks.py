"""Instrumentation interfaces for the conversation engine.

Default implementations are no-ops; Prometheus and structured-log backed
versions live in backend.app.utils.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TurnContext:
    """Identifies one conversation turn in logs."""

    session_id: str
    turn: int


# Metrics interface (to be implemented by actual metrics system)
class ChatMetrics:
    """Interface for chat metrics."""

    def record_turn(self, status: str, latency_ms: float) -> None:
        """Record a completed turn and its latency."""
        pass

    def inc_llm_fallback(self, reason: str) -> None:
        """Increment responder fallback counter."""
        pass

    def inc_persist_error(self, tier: str) -> None:
        """Increment session persistence error counter."""
        pass

    def inc_itinerary(self) -> None:
        """Increment generated itinerary counter."""
        pass


# Logging interface
class TurnLogger:
    """Interface for structured turn logging."""

    def log_turn(
        self,
        ctx: TurnContext,
        completeness: int,
        next_action: str,
        source: str,
        latency_ms: float,
        itinerary_generated: bool = False,
        applied_fields: list[str] | None = None,
    ) -> None:
        """Log one completed turn."""
        pass
