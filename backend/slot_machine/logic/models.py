"""Game state models."""
from pydantic import BaseModel, Field, field_validator

from slot_machine.logic.payout import NUM_REELS
from slot_machine.logic.symbols import Symbol


class Bet(BaseModel):
    """
    Wager per spin with its configured bounds.

    Bounds are checked by validate_bet before a Bet is built or changed,
    so a stored Bet always satisfies min <= size <= max.
    """

    size: int = Field(ge=0)
    min: int = Field(ge=0)
    max: int = Field(ge=0)


class GameState(BaseModel):
    """
    Player game state.

    Tracks:
    - credits balance
    - current bet and its bounds
    - win of the last spin (0 before the first spin)
    - symbols of the last spin (empty before the first spin)
    """

    credits: int = Field(ge=0)
    bet: Bet
    win: int = Field(default=0, ge=0)
    symbols: list[Symbol] = Field(default_factory=list)

    @field_validator("symbols")
    @classmethod
    def one_symbol_per_reel(cls, v: list[Symbol]) -> list[Symbol]:
        if len(v) not in (0, NUM_REELS):
            raise ValueError(f"expected 0 or {NUM_REELS} symbols, got {len(v)}")
        return v


class SpinResult(BaseModel):
    """Result of one spin."""

    symbols: list[Symbol]
    multiplier: int
    win: int
    bet_size: int
    credits_before: int
    credits_after: int
