"""Bet validation."""
from slot_machine.errors import InvalidBetError


def is_valid_bet(bet: int, bet_min: int, bet_max: int) -> bool:
    """Return True if bet_min <= bet <= bet_max."""
    return bet_min <= bet <= bet_max


def validate_bet(bet: int, bet_min: int, bet_max: int) -> None:
    """
    Validate a bet against its bounds.

    Raises INVALID_BET if bet_min > bet_max, bet < bet_min or bet > bet_max.
    """
    if not is_valid_bet(bet, bet_min, bet_max):
        raise InvalidBetError(bet, bet_min, bet_max)
