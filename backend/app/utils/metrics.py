"""Prometheus metrics for the chat engine."""

from prometheus_client import Counter, Histogram

# Conversation metrics
chat_turns_total = Counter(
    "chat_turns_total",
    "Total processed chat turns",
    ["status"],
)

chat_turn_latency_ms = Histogram(
    "chat_turn_latency_ms",
    "Chat turn latency in milliseconds",
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 4000, 8000],
)

llm_fallbacks_total = Counter(
    "llm_fallbacks_total",
    "Total deterministic fallback replies",
    ["reason"],
)

session_persist_errors_total = Counter(
    "session_persist_errors_total",
    "Total session persistence errors",
    ["tier"],
)

itineraries_generated_total = Counter(
    "itineraries_generated_total",
    "Total itineraries generated",
)


class PrometheusChatMetrics:
    """Prometheus-based chat metrics implementation."""

    def record_turn(self, status: str, latency_ms: float) -> None:
        """Record a completed turn and its latency."""
        chat_turns_total.labels(status=status).inc()
        chat_turn_latency_ms.observe(latency_ms)

    def inc_llm_fallback(self, reason: str) -> None:
        """Increment responder fallback counter."""
        llm_fallbacks_total.labels(reason=reason).inc()

    def inc_persist_error(self, tier: str) -> None:
        """Increment session persistence error counter."""
        session_persist_errors_total.labels(tier=tier).inc()

    def inc_itinerary(self) -> None:
        """Increment generated itinerary counter."""
        itineraries_generated_total.inc()
