# trick_table/game_log.py
from __future__ import annotations

import csv
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .scoring import player_rank
from .state import GameSnapshot, Phase

TRICK_FIELDNAMES = [
    "game_id",
    "rule_set_id",
    "round",
    "trick_index",
    "lead_seat_id",
    "lead_suit",
    "plays",
    "winner_id",
    "winner_name",
]

STANDING_FIELDNAMES = [
    "game_id",
    "rule_set_id",
    "seat_id",
    "seat_name",
    "agent",
    "score",
    "rank",
    "is_winner",
]


def build_trick_rows(
    snapshot: GameSnapshot,
    game_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    One row per evaluated trick, in play order.

    `plays` is a space-separated "seat_id:card_id" list in the order the
    cards hit the table.
    """
    names = {seat.id: seat.name for seat in snapshot.seats}
    rows: List[Dict[str, Any]] = []
    for trick in snapshot.trick_history:
        rows.append(
            {
                "game_id": game_id,
                "rule_set_id": snapshot.rule_set_id,
                "round": trick.round,
                "trick_index": trick.trick_index,
                "lead_seat_id": trick.lead_seat_id,
                "lead_suit": trick.lead_suit.value,
                "plays": " ".join(
                    f"{seat_id}:{card.id}" for seat_id, card in trick.plays
                ),
                "winner_id": trick.winner_id,
                "winner_name": names.get(trick.winner_id),
            }
        )
    return rows


def build_standing_rows(
    snapshot: GameSnapshot,
    game_id: Optional[str] = None,
    agent_labels: Optional[Sequence[str]] = None,
) -> List[Dict[str, Any]]:
    """
    One row per seat with its final score and rank.

    Only finished games produce rows, so an abandoned game can be passed in
    without polluting a results file.
    """
    if snapshot.phase != Phase.GAME_OVER:
        return []

    top = max(snapshot.scores)
    rows: List[Dict[str, Any]] = []
    for i, seat in enumerate(snapshot.seats):
        rows.append(
            {
                "game_id": game_id,
                "rule_set_id": snapshot.rule_set_id,
                "seat_id": seat.id,
                "seat_name": seat.name,
                "agent": agent_labels[i] if agent_labels else None,
                "score": snapshot.scores[i],
                "rank": player_rank(snapshot.scores, i),
                "is_winner": snapshot.scores[i] == top,
            }
        )
    return rows


def write_rows_csv(
    rows: Iterable[Dict[str, Any]],
    path,
    fieldnames: List[str],
) -> None:
    """
    Write rows to a CSV file, keeping only `fieldnames` columns.

    `path` can be a string or any path-like object accepted by `open`.
    """
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow({field: row.get(field) for field in fieldnames})


def write_trick_log_csv(
    snapshot: GameSnapshot,
    path,
    game_id: Optional[str] = None,
) -> None:
    """Write the trick-by-trick history of a game to a CSV file."""
    write_rows_csv(build_trick_rows(snapshot, game_id=game_id), path, TRICK_FIELDNAMES)
