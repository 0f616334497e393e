"""Game telemetry events and sinks."""
import logging
from dataclasses import asdict, dataclass
from typing import Any, Protocol


logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    """Protocol for telemetry sinks."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Emit a telemetry event."""
        ...


class LoggingTelemetrySink:
    """Default sink that logs telemetry events."""

    def emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Log telemetry event."""
        logger.info("TELEMETRY %s: %s", event_name, data)


@dataclass
class GameCreatedEvent:
    """game_created: a new game was started for a player."""

    player_id: str
    credits: int
    bet_size: int
    bet_min: int
    bet_max: int


@dataclass
class SpinProcessedEvent:
    """spin_processed: a spin completed and the balance changed."""

    player_id: str
    round_id: str
    symbols: list[str]
    multiplier: int
    bet_size: int
    win: int
    credits_after: int
    lock_acquire_ms: float | None = None  # HTTP only; None from the CLI


@dataclass
class SpinRejectedEvent:
    """spin_rejected: a spin was refused before any state change."""

    player_id: str
    reason: str  # "LOW_BALANCE" | "ROUND_IN_PROGRESS"
    credits: int | None
    bet_size: int | None


@dataclass
class BetChangedEvent:
    """bet_changed: the bet size moved."""

    player_id: str
    old_size: int
    new_size: int


class TelemetryService:
    """Service for emitting game telemetry events."""

    def __init__(self, sink: TelemetrySink | None = None):
        self._sink = sink or LoggingTelemetrySink()
        self._sink_errors = 0  # Counter for sink failures

    @property
    def sink_errors(self) -> int:
        return self._sink_errors

    def set_sink(self, sink: TelemetrySink) -> None:
        """Set the telemetry sink (useful for testing)."""
        self._sink = sink

    def _safe_emit(self, event_name: str, data: dict[str, Any]) -> None:
        """Emit event; sink failures never break the caller."""
        try:
            self._sink.emit(event_name, data)
        except Exception as e:
            self._sink_errors += 1
            logger.warning(
                "Telemetry sink error (count=%d): %s - %s",
                self._sink_errors,
                event_name,
                str(e),
            )

    def emit_game_created(self, event: GameCreatedEvent) -> None:
        self._safe_emit("game_created", asdict(event))

    def emit_spin_processed(self, event: SpinProcessedEvent) -> None:
        self._safe_emit("spin_processed", asdict(event))

    def emit_spin_rejected(self, event: SpinRejectedEvent) -> None:
        self._safe_emit("spin_rejected", asdict(event))

    def emit_bet_changed(self, event: BetChangedEvent) -> None:
        self._safe_emit("bet_changed", asdict(event))


# Global instance
telemetry_service = TelemetryService()
