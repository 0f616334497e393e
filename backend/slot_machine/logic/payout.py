"""Payout table for a three-reel line."""
from collections.abc import Sequence

from slot_machine.logic.symbols import SYMBOL_TRAITS, Symbol

# Number of reels on the machine
NUM_REELS = 3

# Three-of-a-kind multipliers, checked in this order
PAYTABLE: tuple[tuple[Symbol, int], ...] = (
    (Symbol.JACKPOT, 1666),
    (Symbol.SEVEN, 300),
    (Symbol.TRIPLE_BAR, 100),
    (Symbol.DOUBLE_BAR, 50),
    (Symbol.BAR, 25),
)

# Three Cherry, or any three symbols from the Bar family
ANY_BARS_OR_CHERRIES_MULTIPLIER = 12
TWO_CHERRIES_MULTIPLIER = 6
ONE_CHERRY_MULTIPLIER = 3


def payout(symbols: Sequence[Symbol]) -> int:
    """
    Return the payout multiplier for the symbols on the line.

    The first matching rule wins. Callers inside the core always pass
    NUM_REELS symbols; anything else is a programming error.
    """
    if len(symbols) != NUM_REELS:
        raise AssertionError(
            f"Expected {NUM_REELS} symbols, got {len(symbols)}"
        )

    for symbol, multiplier in PAYTABLE:
        if all(s == symbol for s in symbols):
            return multiplier

    traits = [SYMBOL_TRAITS[s] for s in symbols]
    cherries = sum(1 for t in traits if t.is_cherry)

    if cherries == NUM_REELS or all(t.is_bar_family for t in traits):
        return ANY_BARS_OR_CHERRIES_MULTIPLIER
    if cherries == 2:
        return TWO_CHERRIES_MULTIPLIER
    if cherries == 1:
        return ONE_CHERRY_MULTIPLIER
    return 0
