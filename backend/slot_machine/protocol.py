"""HTTP request and response models."""
from enum import Enum

from pydantic import BaseModel, Field

from slot_machine.config import settings
from slot_machine.logic.game import Game
from slot_machine.logic.models import SpinResult
from slot_machine.logic.symbols import Symbol


class BetDirection(str, Enum):
    """Direction for a bet ladder step."""

    PLUS = "plus"
    MINUS = "minus"


# === Request Models ===


class SetBetRequest(BaseModel):
    """POST /bet request body."""

    betSize: int = Field(..., ge=0, description="New bet size, must be in [betMin, betMax]")


class StepBetRequest(BaseModel):
    """POST /bet/step request body."""

    direction: BetDirection


# === Response Models ===


class BetView(BaseModel):
    size: int
    min: int
    max: int


class GameView(BaseModel):
    """Snapshot of a player's game."""

    protocolVersion: str = settings.protocol_version
    credits: int
    bet: BetView
    win: int
    symbols: list[Symbol] = Field(default_factory=list)
    betLadder: list[int] = Field(default_factory=lambda: list(settings.bet_ladder))

    @classmethod
    def from_game(cls, game: Game) -> "GameView":
        return cls(
            credits=game.credits,
            bet=BetView(size=game.bet_size, min=game.bet_min, max=game.bet_max),
            win=game.win,
            symbols=game.symbols,
        )


class SpinResponse(BaseModel):
    """POST /spin response."""

    protocolVersion: str = settings.protocol_version
    roundId: str
    symbols: list[Symbol]
    multiplier: int
    win: int
    betSize: int
    creditsAfter: int

    @classmethod
    def from_result(cls, round_id: str, result: SpinResult) -> "SpinResponse":
        return cls(
            roundId=round_id,
            symbols=result.symbols,
            multiplier=result.multiplier,
            win=result.win,
            betSize=result.bet_size,
            creditsAfter=result.credits_after,
        )
