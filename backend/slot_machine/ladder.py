"""Fixed bet-size ladder used by BET PLUS / BET MINUS."""
from collections.abc import Sequence

from slot_machine.config import settings
from slot_machine.errors import BetLimitError
from slot_machine.logic.game import Game, adjust_bet


def _rung(game: Game, ladder: Sequence[int]) -> int:
    try:
        return list(ladder).index(game.bet_size)
    except ValueError:
        raise BetLimitError("Invalid bet size!") from None


def bet_plus(game: Game, ladder: Sequence[int] | None = None) -> int:
    """Move the bet one rung up. Returns the new bet size."""
    ladder = ladder or settings.bet_ladder
    index = _rung(game, ladder)
    if index == len(ladder) - 1:
        raise BetLimitError("Max bet size!")
    new_size = ladder[index + 1]
    adjust_bet(game, new_size)
    return new_size


def bet_minus(game: Game, ladder: Sequence[int] | None = None) -> int:
    """Move the bet one rung down. Returns the new bet size."""
    ladder = ladder or settings.bet_ladder
    index = _rung(game, ladder)
    if index == 0:
        raise BetLimitError("Min bet size!")
    new_size = ladder[index - 1]
    adjust_bet(game, new_size)
    return new_size
