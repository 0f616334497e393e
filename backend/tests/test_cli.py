"""Command-line interface tests."""
import io

import pytest

from slot_machine import cli
from slot_machine.cli import HELP_TEXT, SlotMachineShell
from slot_machine.logic.game import create_game
from slot_machine.logic.symbols import Symbol
from slot_machine.telemetry import TelemetryService


def run_shell(game, commands: str, delay: float = 0.0, telemetry=None):
    """Run the shell over a script of commands; returns (output, sleeps)."""
    out = io.StringIO()
    sleeps: list[float] = []
    shell = SlotMachineShell(
        game,
        stdin=io.StringIO(commands),
        stdout=out,
        delay=delay,
        sleep=sleeps.append,
        telemetry=telemetry or TelemetryService(),
    )
    shell.run()
    return out.getvalue(), sleeps


class TestGreeting:
    def test_greets_with_balance_and_bet(self):
        output, _ = run_shell(create_game(1000, 1, 1, 10), "")
        assert output.startswith("Greetings!\n")
        assert "Your balance: 1000 credits\n" in output
        assert "Bet size: 1\n" in output
        assert HELP_TEXT in output


class TestCommands:
    def test_balance_and_bet(self):
        output, _ = run_shell(create_game(500, 2, 1, 10), "balance\nBET\n")
        assert "Your balance: 500 credits." in output
        assert "Current bet: 2 credits." in output

    def test_commands_are_case_and_space_insensitive(self):
        game = create_game(500, 1, 1, 10)
        output, _ = run_shell(game, "  bet   plus \n")
        assert "Bet size: 2." in output
        assert game.bet_size == 2

    def test_bet_minus_at_bottom(self):
        game = create_game(500, 1, 1, 10)
        output, _ = run_shell(game, "bet minus\n")
        assert "Min bet size!" in output
        assert game.bet_size == 1

    def test_bet_plus_at_top(self):
        game = create_game(500, 10, 1, 10)
        output, _ = run_shell(game, "bet plus\n")
        assert "Max bet size!" in output

    def test_spin_prints_symbols_and_win(self, make_source):
        game = create_game(100, 1, 1, 10, source=make_source(Symbol.SEVEN))
        output, _ = run_shell(game, "spin\nbalance\n")
        assert "[Seven, Seven, Seven]" in output
        assert "You win 300 credits" in output
        assert "Your balance: 399 credits." in output

    def test_spin_with_low_balance(self, blank_source):
        game = create_game(0, 1, 1, 10, source=blank_source)
        output, _ = run_shell(game, "spin\n")
        assert "Insufficient credits on the balance!" in output
        assert blank_source.draws == 0

    def test_invalid_command(self):
        output, _ = run_shell(create_game(100, 1, 1, 10), "jump\n")
        assert "Invalid command!" in output

    def test_help(self):
        output, _ = run_shell(create_game(100, 1, 1, 10), "help\n")
        assert output.count(HELP_TEXT) == 2

    def test_quit_stops_reading(self, blank_source):
        game = create_game(100, 1, 1, 10, source=blank_source)
        run_shell(game, "quit\nspin\n")
        assert game.credits == 100

    def test_blank_lines_are_ignored(self):
        output, _ = run_shell(create_game(100, 1, 1, 10), "\n\n")
        assert "Invalid command!" not in output


class TestAutospin:
    def test_spins_n_times_with_delay(self, blank_source):
        game = create_game(100, 2, 1, 10, source=blank_source)
        output, sleeps = run_shell(game, "autospin 3\n", delay=1.0)
        assert game.credits == 94
        assert output.count("You win 0 credits") == 3
        assert sleeps == [1.0, 1.0]

    def test_stops_on_low_balance(self, blank_source):
        game = create_game(5, 2, 1, 10, source=blank_source)
        output, _ = run_shell(game, "autospin 10\n")
        assert output.count("You win 0 credits") == 2
        assert "Insufficient credits on the balance!" in output
        assert game.credits == 1

    @pytest.mark.parametrize("command", ["autospin\n", "autospin ten\n", "autospin -1\n"])
    def test_bad_count(self, blank_source, command):
        game = create_game(100, 1, 1, 10, source=blank_source)
        output, _ = run_shell(game, command)
        assert "Usage: autospin <number of spins>" in output
        assert game.credits == 100

    def test_non_ascii_digits_keep_the_loop_running(self, blank_source):
        game = create_game(100, 1, 1, 10, source=blank_source)
        output, _ = run_shell(game, "autospin \u00b2\nbalance\n")
        assert "Usage: autospin <number of spins>" in output
        assert "Your balance: 100 credits." in output
        assert blank_source.draws == 0

    def test_prefix_is_not_a_command(self, blank_source):
        game = create_game(100, 1, 1, 10, source=blank_source)
        output, _ = run_shell(game, "autospinfoo 2\n")
        assert "Invalid command!" in output
        assert game.credits == 100
        assert blank_source.draws == 0

    def test_no_delay_when_disabled(self, blank_source):
        game = create_game(100, 1, 1, 10, source=blank_source)
        _, sleeps = run_shell(game, "autospin 5\n", delay=0.0)
        assert sleeps == []


class TestTelemetry:
    def test_spins_and_bet_changes_are_reported(self, make_source, recording_telemetry):
        from slot_machine.telemetry import telemetry_service

        game = create_game(1, 1, 1, 10, source=make_source(Symbol.BLANK))
        run_shell(game, "bet plus\nbet minus\nspin\nspin\n", telemetry=telemetry_service)

        changes = recording_telemetry.get_events("bet_changed")
        assert [(e["old_size"], e["new_size"]) for e in changes] == [(1, 2), (2, 1)]
        processed = recording_telemetry.get_events("spin_processed")
        assert len(processed) == 1
        assert processed[0]["symbols"] == ["Blank", "Blank", "Blank"]
        assert processed[0]["lock_acquire_ms"] is None
        rejected = recording_telemetry.get_events("spin_rejected")
        assert rejected == [
            {"player_id": "cli", "reason": "LOW_BALANCE", "credits": 0, "bet_size": 1}
        ]


class TestMain:
    def test_invalid_configuration_exits_with_error(self, capsys):
        assert cli.main(["--bet", "20", "--bet-max", "10"]) == 2
        assert "Cannot start game: bet > bet_max" in capsys.readouterr().err

    def test_negative_credits_rejected_by_parser(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--credits", "-5"])
        assert exc_info.value.code == 2

    def test_runs_seeded_session(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("spin\nbalance\nquit\n"))
        assert cli.main(["--seed", "1", "--delay", "0", "--credits", "50"]) == 0
        output = capsys.readouterr().out
        assert "Greetings!" in output
        assert "You win" in output
        assert "Your balance:" in output
