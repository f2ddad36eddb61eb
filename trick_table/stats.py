# trick_table/stats.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

GROUP_COLUMNS = ["rule_set_id", "seat_id", "agent"]


def standings_frame(rows: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    """Build a DataFrame from standing rows (see game_log.STANDING_FIELDNAMES)."""
    return pd.DataFrame(list(rows))


def load_standings(path: str | Path) -> pd.DataFrame:
    return pd.read_csv(path)


def summarize_standings(df: pd.DataFrame) -> pd.DataFrame:
    """
    Per rule set / seat / agent: games played, mean score with a 95%
    confidence interval, and win rate (shared wins count as wins).
    """
    if df.empty:
        return pd.DataFrame(
            columns=GROUP_COLUMNS + ["games", "mean_score", "std", "ci95", "win_rate"]
        )

    df = df.copy()
    df["agent"] = df["agent"].fillna("-")
    df["is_winner"] = df["is_winner"].astype(str).str.lower().isin(["true", "1"])

    summary = (
        df.groupby(GROUP_COLUMNS)
          .agg(
              games=("score", "count"),
              mean_score=("score", "mean"),
              std=("score", "std"),
              win_rate=("is_winner", "mean"),
          )
          .reset_index()
    )
    summary["std"] = summary["std"].fillna(0.0)
    # 95% confidence interval: mean ± 1.96 * (std / sqrt(n))
    summary["ci95"] = 1.96 * summary["std"] / np.sqrt(summary["games"])
    return summary


def format_summary(summary: pd.DataFrame) -> List[str]:
    """Human-readable summary lines for logging."""
    lines = []
    for row in summary.itertuples(index=False):
        lines.append(
            f"{row.rule_set_id:<13} {row.seat_id:<8} {row.agent:<7} "
            f"games={row.games:<4d} mean={row.mean_score:5.2f}±{row.ci95:4.2f} "
            f"win_rate={row.win_rate:5.1%}"
        )
    return lines


def plot_mean_scores(summary: pd.DataFrame, path: str | Path) -> Path:
    """Bar chart of mean score per seat (with 95% CI), one group per rule set."""
    path = Path(path)
    rule_sets = sorted(summary["rule_set_id"].unique())
    seats = sorted(summary["seat_id"].unique())
    width = 0.8 / max(len(seats), 1)
    x = np.arange(len(rule_sets))

    fig, ax = plt.subplots(figsize=(max(6, 3 * len(rule_sets)), 4))
    for i, seat in enumerate(seats):
        sub = summary[summary["seat_id"] == seat].set_index("rule_set_id")
        sub = sub.reindex(rule_sets)
        ax.bar(
            x + i * width,
            sub["mean_score"].fillna(0.0),
            width,
            yerr=sub["ci95"].fillna(0.0),
            capsize=3,
            label=seat,
        )

    ax.set_xticks(x + width * (len(seats) - 1) / 2)
    ax.set_xticklabels(rule_sets)
    ax.set_ylabel("Mean tricks won per game")
    ax.set_title("Mean score by seat with 95% CI")
    ax.grid(True, axis="y", linestyle=":", alpha=0.5)
    ax.legend()
    fig.tight_layout()

    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path)
    plt.close(fig)
    return path
