"""Game state machine: balance, bet and the spin."""
import logging
from typing import Any

from slot_machine.errors import InvalidBetError, LowBalanceError
from slot_machine.logic.models import Bet, GameState, SpinResult
from slot_machine.logic.payout import NUM_REELS, payout
from slot_machine.logic.symbols import RandomSymbolSource, Symbol, SymbolSource
from slot_machine.validators import validate_bet


logger = logging.getLogger(__name__)


class Game:
    """
    Single-player slot machine game.

    Owns the credit balance, the bet with its bounds, the last win and
    the last drawn symbols. A Game is not shared between players; callers
    that serve several players keep one instance per player and
    serialize access to it.
    """

    def __init__(
        self,
        credits: int,
        bet_size: int,
        bet_min: int,
        bet_max: int,
        source: SymbolSource | None = None,
    ):
        validate_bet(bet_size, bet_min, bet_max)
        self._state = GameState(
            credits=credits,
            bet=Bet(size=bet_size, min=bet_min, max=bet_max),
        )
        self.source = source or RandomSymbolSource()

    @classmethod
    def from_state(cls, state: GameState, source: SymbolSource | None = None) -> "Game":
        """Rebuild a game from a stored state, re-checking the bet bounds."""
        game = cls(
            credits=state.credits,
            bet_size=state.bet.size,
            bet_min=state.bet.min,
            bet_max=state.bet.max,
            source=source,
        )
        game._state.win = state.win
        game._state.symbols = list(state.symbols)
        return game

    @property
    def state(self) -> GameState:
        """Copy of the current state."""
        return self._state.model_copy(deep=True)

    @property
    def credits(self) -> int:
        return self._state.credits

    @property
    def bet_size(self) -> int:
        return self._state.bet.size

    @property
    def bet_min(self) -> int:
        return self._state.bet.min

    @property
    def bet_max(self) -> int:
        return self._state.bet.max

    @property
    def win(self) -> int:
        """Amount won on the last spin."""
        return self._state.win

    @property
    def symbols(self) -> list[Symbol]:
        """Symbols of the last spin, empty before the first one."""
        return list(self._state.symbols)

    def set_bet_size(self, bet_size: int) -> None:
        """
        Change the bet size within the configured bounds.

        Raises INVALID_BET and leaves the bet unchanged if bet_size is
        outside [bet_min, bet_max].
        """
        try:
            validate_bet(bet_size, self.bet_min, self.bet_max)
        except InvalidBetError as e:
            logger.info("Bet %d rejected: %s", bet_size, e.message)
            raise
        self._state.bet.size = bet_size

    def spin(self) -> SpinResult:
        """
        Spin the reels.

        Deducts the bet, draws NUM_REELS symbols, credits the win and
        stores the symbols. Raises LOW_BALANCE and leaves the state
        unchanged if credits < bet size.
        """
        credits_before = self.credits
        bet_size = self.bet_size

        if credits_before < bet_size:
            logger.info(
                "Spin rejected: credits %d < bet %d", credits_before, bet_size
            )
            raise LowBalanceError(credits_before, bet_size)

        drawn = [self.source.draw() for _ in range(NUM_REELS)]
        multiplier = payout(drawn)
        win = multiplier * bet_size

        self._state.credits = credits_before - bet_size + win
        self._state.win = win
        self._state.symbols = drawn

        logger.debug(
            "Spin %s: multiplier=%d win=%d credits=%d",
            [s.value for s in drawn],
            multiplier,
            win,
            self._state.credits,
        )

        return SpinResult(
            symbols=drawn,
            multiplier=multiplier,
            win=win,
            bet_size=bet_size,
            credits_before=credits_before,
            credits_after=self._state.credits,
        )


# === Facade used by the CLI and the HTTP service ===


def create_game(
    initial_credits: int,
    bet_size: int,
    bet_min: int,
    bet_max: int,
    source: SymbolSource | None = None,
) -> Game:
    """Create a game. Raises INVALID_BET if the bet configuration is invalid."""
    return Game(initial_credits, bet_size, bet_min, bet_max, source=source)


def adjust_bet(game: Game, new_size: int) -> None:
    """Set a new bet size. Raises INVALID_BET if outside the bounds."""
    game.set_bet_size(new_size)


def spin(game: Game) -> SpinResult:
    """Spin once. Raises LOW_BALANCE if credits do not cover the bet."""
    return game.spin()


def to_portable_form(game: Game) -> dict[str, Any]:
    """Return a JSON-safe record of everything needed to restore the game."""
    return game.state.model_dump(mode="json")


def from_portable_form(data: dict[str, Any], source: SymbolSource | None = None) -> Game:
    """Restore a game saved with to_portable_form."""
    return Game.from_state(GameState.model_validate(data), source=source)
