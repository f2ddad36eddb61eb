# tests/test_stats.py
import matplotlib

matplotlib.use("Agg")

import pytest

from trick_table.game_log import STANDING_FIELDNAMES, write_rows_csv
from trick_table.stats import (
    format_summary,
    load_standings,
    plot_mean_scores,
    standings_frame,
    summarize_standings,
)


def _rows():
    rows = []
    for game, scores in enumerate([(10, 9, 8, 8), (12, 12, 6, 5)]):
        top = max(scores)
        for i, score in enumerate(scores):
            rows.append(
                {
                    "game_id": f"g{game}",
                    "rule_set_id": "highest-card",
                    "seat_id": f"player{i + 1}",
                    "seat_name": f"S{i}",
                    "agent": "hard" if i == 0 else "easy",
                    "score": score,
                    "rank": None,
                    "is_winner": score == top,
                }
            )
    return rows


def test_summarize_standings():
    summary = summarize_standings(standings_frame(_rows()))

    assert len(summary) == 4
    p1 = summary[summary["seat_id"] == "player1"].iloc[0]
    assert p1["games"] == 2
    assert p1["mean_score"] == pytest.approx(11.0)
    assert p1["win_rate"] == pytest.approx(1.0)
    assert p1["ci95"] > 0

    p2 = summary[summary["seat_id"] == "player2"].iloc[0]
    assert p2["win_rate"] == pytest.approx(0.5)

    lines = format_summary(summary)
    assert len(lines) == 4
    assert "player1" in lines[0]


def test_summarize_empty_frame():
    summary = summarize_standings(standings_frame([]))
    assert summary.empty
    assert format_summary(summary) == []


def test_summary_from_csv_and_plot(tmp_path):
    csv_path = tmp_path / "standings.csv"
    write_rows_csv(_rows(), csv_path, STANDING_FIELDNAMES)

    summary = summarize_standings(load_standings(csv_path))
    p2 = summary[summary["seat_id"] == "player2"].iloc[0]
    assert p2["win_rate"] == pytest.approx(0.5)

    plot_path = plot_mean_scores(summary, tmp_path / "plots" / "means.png")
    assert plot_path.exists()
    assert plot_path.stat().st_size > 0
