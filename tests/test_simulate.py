# tests/test_simulate.py
import csv

import matplotlib

matplotlib.use("Agg")

import pytest

from trick_table.agents import HighestCardAgent
from trick_table.engine import GameEngine
from trick_table.scheduler import ManualScheduler
from trick_table.simulate import main, output_path, parse_args, play_out
from trick_table.state import Phase


def test_parse_args_defaults():
    args = parse_args([])
    assert args.games == 1
    assert args.rule_sets == ["highest-card", "suit-follows", "spades-trump"]
    assert args.difficulties == ["easy", "easy", "easy"]
    assert args.max_rounds == 5


def test_output_path(tmp_path):
    results = tmp_path / "results"

    absolute = tmp_path / "elsewhere" / "out.csv"
    assert output_path(absolute, results_dir=results) == absolute
    assert absolute.parent.is_dir()

    nested = output_path("runs/spades/out.csv", results_dir=results)
    assert nested == results / "runs" / "spades" / "out.csv"
    assert nested.parent.is_dir()
    assert not nested.exists()


def test_play_out_requires_started_game():
    scheduler = ManualScheduler()
    engine = GameEngine(
        scheduler=scheduler,
        agents={i: HighestCardAgent() for i in range(1, 4)},
    )
    with pytest.raises(RuntimeError):
        play_out(engine, scheduler, HighestCardAgent())
    assert engine.get_state().phase == Phase.WAITING


def test_main_writes_results(tmp_path):
    csv_path = tmp_path / "standings.csv"
    trick_path = tmp_path / "tricks.csv"
    verbose_path = tmp_path / "verbose.log"
    plot_path = tmp_path / "means.png"

    main(
        [
            "--games", "2",
            "--rule-sets", "suit-follows", "spades-trump",
            "--difficulties", "easy", "medium", "hard",
            "--max-rounds", "2",
            "--csv", str(csv_path),
            "--trick-log", str(trick_path),
            "--verbose-log", str(verbose_path),
            "--plot", str(plot_path),
            "--parallel-games", "2",
            "--log-level", "WARNING",
        ]
    )

    with open(csv_path, newline="", encoding="utf-8") as f:
        standings = list(csv.DictReader(f))
    # 2 rule sets × 2 games × 4 seats
    assert len(standings) == 16
    for game_id in {row["game_id"] for row in standings}:
        game_rows = [r for r in standings if r["game_id"] == game_id]
        assert sum(int(r["score"]) for r in game_rows) == 14
    assert {r["agent"] for r in standings} == {"hard", "easy", "medium"}

    with open(trick_path, newline="", encoding="utf-8") as f:
        tricks = list(csv.DictReader(f))
    assert len(tricks) == 2 * 2 * 14

    assert verbose_path.read_text(encoding="utf-8")
    assert plot_path.exists()


def test_main_rejects_wrong_number_of_difficulties(tmp_path):
    with pytest.raises(SystemExit):
        main(["--difficulties", "easy", "--csv", str(tmp_path / "x.csv")])
