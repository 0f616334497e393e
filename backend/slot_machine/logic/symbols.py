"""Reel symbols and the number -> symbol mapping."""
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from slot_machine.errors import SymbolOutOfRangeError
from slot_machine.logic.rng import ProductionRNG, RNGBase


class Symbol(str, Enum):
    """Reel symbols. The value doubles as the display name."""

    BLANK = "Blank"
    CHERRY = "Cherry"
    BAR = "Bar"
    DOUBLE_BAR = "DoubleBar"
    TRIPLE_BAR = "TripleBar"
    SEVEN = "Seven"
    JACKPOT = "Jackpot"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SymbolTraits:
    """Category flags the payout table keys on."""

    is_cherry: bool = False
    is_bar_family: bool = False


SYMBOL_TRAITS: dict[Symbol, SymbolTraits] = {
    Symbol.BLANK: SymbolTraits(),
    Symbol.CHERRY: SymbolTraits(is_cherry=True),
    Symbol.BAR: SymbolTraits(is_bar_family=True),
    Symbol.DOUBLE_BAR: SymbolTraits(is_bar_family=True),
    Symbol.TRIPLE_BAR: SymbolTraits(is_bar_family=True),
    Symbol.SEVEN: SymbolTraits(),
    Symbol.JACKPOT: SymbolTraits(),
}

# Numbers a reel stop is drawn from
NUMBER_MIN = 0
NUMBER_MAX = 127

# Contiguous, inclusive sub-ranges covering [NUMBER_MIN, NUMBER_MAX]
SYMBOL_RANGES: tuple[tuple[int, int, Symbol], ...] = (
    (0, 72, Symbol.BLANK),
    (73, 77, Symbol.CHERRY),
    (78, 93, Symbol.BAR),
    (94, 106, Symbol.DOUBLE_BAR),
    (107, 117, Symbol.TRIPLE_BAR),
    (118, 125, Symbol.SEVEN),
    (126, 127, Symbol.JACKPOT),
)


def from_number(number: int) -> Symbol:
    """
    Map a drawn number to its symbol.

    Raises SymbolOutOfRangeError if number is outside [0, 127].
    """
    for low, high, symbol in SYMBOL_RANGES:
        if low <= number <= high:
            return symbol
    raise SymbolOutOfRangeError(number, NUMBER_MIN, NUMBER_MAX)


def random_symbol(rng: RNGBase) -> Symbol:
    """Draw a uniform number in [0, 127] and map it to a symbol."""
    return from_number(rng.randint(NUMBER_MIN, NUMBER_MAX))


def symbol_weights() -> dict[Symbol, int]:
    """Return how many of the 128 numbers land on each symbol."""
    return {symbol: high - low + 1 for low, high, symbol in SYMBOL_RANGES}


class SymbolSource(Protocol):
    """Anything that can produce one reel stop."""

    def draw(self) -> Symbol:
        """Return the next symbol."""
        ...


class RandomSymbolSource:
    """Symbol source backed by an RNG."""

    def __init__(self, rng: RNGBase | None = None):
        self.rng = rng or ProductionRNG()

    def draw(self) -> Symbol:
        return random_symbol(self.rng)
