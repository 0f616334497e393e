"""Interactive text interface for the slot machine.

Usage:
    python -m slot_machine.cli
    python -m slot_machine.cli --credits 500 --bet 2 --bet-min 1 --bet-max 10
    python -m slot_machine.cli --seed 42 --delay 0
"""
import argparse
import logging
import sys
import time
import uuid
from collections.abc import Callable
from typing import TextIO

from slot_machine.config import settings
from slot_machine.errors import GameError, LowBalanceError
from slot_machine.ladder import bet_minus, bet_plus
from slot_machine.logic.game import Game, create_game, spin
from slot_machine.logic.rng import ProductionRNG, SeededRNG
from slot_machine.logic.symbols import RandomSymbolSource
from slot_machine.telemetry import (
    BetChangedEvent,
    GameCreatedEvent,
    SpinProcessedEvent,
    SpinRejectedEvent,
    TelemetryService,
    telemetry_service,
)


logger = logging.getLogger(__name__)

PLAYER_ID = "cli"

HELP_TEXT = (
    "To get a balance, put the `balance`.\n"
    "To get a bet size, put the `bet`.\n"
    "To increase or decrease the size of the bet, put `bet plus` or `bet minus`.\n"
    "To spin the reels, put `spin`; to spin several times, put `autospin <n>`.\n"
    "To leave, put `quit`."
)


class SlotMachineShell:
    """Command loop that drives one Game from a text stream."""

    def __init__(
        self,
        game: Game,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        delay: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
        telemetry: TelemetryService | None = None,
    ):
        self.game = game
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.delay = settings.autospin_delay_seconds if delay is None else delay
        self.sleep = sleep
        self.telemetry = telemetry or telemetry_service

    def say(self, text: str) -> None:
        print(text, file=self.stdout)

    def greet(self) -> None:
        self.say("Greetings!")
        self.say(f"Your balance: {self.game.credits} credits")
        self.say(f"Bet size: {self.game.bet_size}")
        self.say(HELP_TEXT)

    def run(self) -> None:
        """Read commands until QUIT/EXIT or end of input."""
        self.greet()
        for line in self.stdin:
            if not self.handle(line):
                break

    def handle(self, line: str) -> bool:
        """Execute one command. Returns False when the loop should stop."""
        command = " ".join(line.split()).upper()

        if command in ("QUIT", "EXIT"):
            return False
        if command == "":
            return True

        try:
            if command == "BALANCE":
                self.say(f"Your balance: {self.game.credits} credits.")
            elif command == "BET":
                self.say(f"Current bet: {self.game.bet_size} credits.")
            elif command == "BET PLUS":
                self._change_bet(bet_plus)
            elif command == "BET MINUS":
                self._change_bet(bet_minus)
            elif command == "SPIN":
                self.spin_once()
            elif command.split()[0] == "AUTOSPIN":
                self.autospin(command)
            elif command == "HELP":
                self.say(HELP_TEXT)
            else:
                self.say("Invalid command!")
        except GameError as e:
            self.say(e.message)

        return True

    def _change_bet(self, step: Callable[[Game], int]) -> None:
        old_size = self.game.bet_size
        new_size = step(self.game)
        self.telemetry.emit_bet_changed(
            BetChangedEvent(player_id=PLAYER_ID, old_size=old_size, new_size=new_size)
        )
        self.say(f"Bet size: {new_size}.")

    def spin_once(self) -> None:
        """Spin and print the reels. Raises LOW_BALANCE through to handle()."""
        try:
            result = spin(self.game)
        except LowBalanceError:
            self.telemetry.emit_spin_rejected(
                SpinRejectedEvent(
                    player_id=PLAYER_ID,
                    reason="LOW_BALANCE",
                    credits=self.game.credits,
                    bet_size=self.game.bet_size,
                )
            )
            raise

        self.telemetry.emit_spin_processed(
            SpinProcessedEvent(
                player_id=PLAYER_ID,
                round_id=str(uuid.uuid4()),
                symbols=[s.value for s in result.symbols],
                multiplier=result.multiplier,
                bet_size=result.bet_size,
                win=result.win,
                credits_after=result.credits_after,
            )
        )
        self.say("[" + ", ".join(s.value for s in result.symbols) + "]")
        self.say(f"You win {result.win} credits")

    def autospin(self, command: str) -> None:
        """AUTOSPIN <n>: spin n times, pausing between spins."""
        parts = command.split()
        if len(parts) != 2 or not (parts[1].isascii() and parts[1].isdigit()):
            self.say("Usage: autospin <number of spins>")
            return

        count = int(parts[1])
        for i in range(count):
            self.spin_once()
            if i < count - 1 and self.delay > 0:
                self.sleep(self.delay)


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"{value} is negative")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Three-reel slot machine")
    parser.add_argument("--credits", type=_non_negative, default=settings.initial_credits,
                        help="Starting balance")
    parser.add_argument("--bet", type=_non_negative, default=settings.bet_size,
                        help="Starting bet size")
    parser.add_argument("--bet-min", type=_non_negative, default=settings.bet_min,
                        help="Minimum bet size")
    parser.add_argument("--bet-max", type=_non_negative, default=settings.bet_max,
                        help="Maximum bet size")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for reproducible spins")
    parser.add_argument("--delay", type=float, default=settings.autospin_delay_seconds,
                        help="Seconds between AUTOSPIN spins")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    rng = SeededRNG(args.seed) if args.seed is not None else ProductionRNG()
    try:
        game = create_game(
            args.credits,
            args.bet,
            args.bet_min,
            args.bet_max,
            source=RandomSymbolSource(rng),
        )
    except GameError as e:
        print(f"Cannot start game: {e.message}", file=sys.stderr)
        return 2

    logger.debug("Game started: credits=%d bet=%d", game.credits, game.bet_size)
    telemetry_service.emit_game_created(
        GameCreatedEvent(
            player_id=PLAYER_ID,
            credits=game.credits,
            bet_size=game.bet_size,
            bet_min=game.bet_min,
            bet_max=game.bet_max,
        )
    )

    SlotMachineShell(game, delay=args.delay).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
