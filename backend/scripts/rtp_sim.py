#!/usr/bin/env python3
"""
Return-to-player report for the paytable.

Computes the exact theoretical RTP from the reel number ranges and
compares it with a seeded headless simulation.

Usage:
    python -m scripts.rtp_sim --spins 100000 --seed RTP_2025
    python -m scripts.rtp_sim --spins 1000000 --seed RTP_2025 --bet 5 --out out/rtp.json
"""
import argparse
import hashlib
import itertools
import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from fractions import Fraction
from pathlib import Path
from typing import Any

from slot_machine.logic.game import Game
from slot_machine.logic.payout import NUM_REELS, payout
from slot_machine.logic.rng import SeededRNG
from slot_machine.logic.symbols import (
    NUMBER_MAX,
    NUMBER_MIN,
    RandomSymbolSource,
    symbol_weights,
)


logger = logging.getLogger(__name__)


@dataclass
class SimulationStats:
    """Statistics accumulated during simulation."""
    spins: int = 0
    total_wagered: int = 0
    total_won: int = 0
    hits: int = 0
    max_multiplier: int = 0
    multiplier_counts: Counter = field(default_factory=Counter)
    symbol_counts: Counter = field(default_factory=Counter)

    @property
    def rtp(self) -> float:
        """Observed RTP in percent."""
        return self.total_won / self.total_wagered * 100 if self.total_wagered else 0.0

    @property
    def hit_frequency(self) -> float:
        """Share of spins with a non-zero win, in percent."""
        return self.hits / self.spins * 100 if self.spins else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "spins": self.spins,
            "total_wagered": self.total_wagered,
            "total_won": self.total_won,
            "rtp": round(self.rtp, 4),
            "hit_frequency": round(self.hit_frequency, 4),
            "max_multiplier": self.max_multiplier,
            "multiplier_counts": {str(k): v for k, v in sorted(self.multiplier_counts.items())},
            "symbol_counts": {s.value: n for s, n in self.symbol_counts.items()},
        }


def _combinations():
    """Yield (multiplier, probability) for every ordered reel combination."""
    weights = symbol_weights()
    total = NUMBER_MAX - NUMBER_MIN + 1
    for combo in itertools.product(weights, repeat=NUM_REELS):
        probability = Fraction(1)
        for symbol in combo:
            probability *= Fraction(weights[symbol], total)
        yield payout(combo), probability


def theoretical_rtp() -> Fraction:
    """Exact expected multiplier per credit wagered."""
    return sum((m * p for m, p in _combinations()), Fraction(0))


def theoretical_hit_frequency() -> Fraction:
    """Exact probability that a spin pays anything."""
    return sum((p for m, p in _combinations() if m > 0), Fraction(0))


def seed_to_int(seed_str: str) -> int:
    """Convert string seed to integer deterministically."""
    return int(hashlib.sha256(seed_str.encode()).hexdigest(), 16) % (2**31)


def run_simulation(spins: int, seed_str: str, bet_size: int = 1) -> SimulationStats:
    """
    Run a headless seeded simulation.

    The game gets enough credits up front that it can never run dry,
    so every requested spin is played.
    """
    rng = SeededRNG(seed=seed_to_int(seed_str))
    game = Game(
        credits=spins * bet_size,
        bet_size=bet_size,
        bet_min=bet_size,
        bet_max=bet_size,
        source=RandomSymbolSource(rng),
    )

    stats = SimulationStats()
    for _ in range(spins):
        result = game.spin()
        stats.spins += 1
        stats.total_wagered += result.bet_size
        stats.total_won += result.win
        stats.multiplier_counts[result.multiplier] += 1
        stats.symbol_counts.update(result.symbols)
        if result.win > 0:
            stats.hits += 1
        stats.max_multiplier = max(stats.max_multiplier, result.multiplier)

    return stats


def build_report(stats: SimulationStats, seed_str: str) -> dict[str, Any]:
    rtp = theoretical_rtp()
    hit = theoretical_hit_frequency()
    return {
        "seed": seed_str,
        "theoretical": {
            "rtp": float(rtp * 100),
            "rtp_fraction": f"{rtp.numerator}/{rtp.denominator}",
            "hit_frequency": float(hit * 100),
        },
        "simulated": stats.to_dict(),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Slot machine RTP report")
    parser.add_argument("--spins", type=int, default=100000, help="Number of spins")
    parser.add_argument("--seed", default="RTP_2025", help="Seed string")
    parser.add_argument("--bet", type=int, default=1, help="Bet size per spin")
    parser.add_argument("--out", default=None, help="Write JSON report to this path")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    stats = run_simulation(args.spins, args.seed, bet_size=args.bet)
    report = build_report(stats, args.seed)

    logger.info(
        "RTP theoretical=%.4f%% simulated=%.4f%% hit_frequency=%.4f%% (%d spins)",
        report["theoretical"]["rtp"],
        stats.rtp,
        stats.hit_frequency,
        stats.spins,
    )

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(report, indent=2))
        logger.info("Report written to %s", out_path)
    else:
        print(json.dumps(report, indent=2))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
