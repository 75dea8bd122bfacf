from __future__ import annotations

from crazyeights.cli import main
from crazyeights.services.telemetry import TelemetryService


def test_simulated_game_reports_winner(capsys) -> None:
    assert main(["--players", "3", "--seed", "1"]) == 0
    out = capsys.readouterr().out
    assert "Winner: Bot" in out
    assert out.count(" cards") == 3


def test_heuristic_game_writes_telemetry(tmp_path, capsys) -> None:
    path = tmp_path / "events.jsonl"
    assert main(["--players", "4", "--strategy", "heuristic", "--seed", "2", "--telemetry", str(path)]) == 0
    records = TelemetryService(path).read()
    kinds = {r["type"] for r in records}
    assert kinds == {"hand_size", "top_card", "game_complete"}
    assert records[-1]["type"] == "game_complete"
    assert records[-1]["payload"] == {"value": True}


def test_too_few_players_is_reported(capsys) -> None:
    assert main(["--players", "1"]) == 2
    assert "Cannot start game" in capsys.readouterr().out
