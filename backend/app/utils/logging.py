"""Structured logging for conversation turns."""

import logging
from typing import Any

from backend.app.orchestration.hooks import TurnContext

logger = logging.getLogger(__name__)


class StructuredTurnLogger:
    """Structured logger for conversation turns."""

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
        """Log one completed turn with structured data."""
        log_data: dict[str, Any] = {
            "session_id": ctx.session_id,
            "turn": ctx.turn,
            "completeness": completeness,
            "next_action": next_action,
            "source": source,
            "latency_ms": round(latency_ms, 2),
            "itinerary_generated": itinerary_generated,
        }

        if applied_fields:
            log_data["applied_fields"] = applied_fields

        log_msg = f"Chat turn: {ctx.session_id} #{ctx.turn} - {completeness}%"

        logger.info(log_msg, extra={"structured": log_data})
