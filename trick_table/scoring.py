# trick_table/scoring.py
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

# Every trick is worth the same; card values never affect the score.
TRICK_POINTS = 1


def award_trick(scores: List[int], winner_index: int, points: int = TRICK_POINTS) -> None:
    """Add `points` to the winner's entry, in place."""
    if points < 0:
        raise ValueError("Trick points must not be negative")
    scores[winner_index] += points


def final_winners(scores: Sequence[int]) -> List[int]:
    """
    Indices of every seat holding the top score.

    Ties are reported, never resolved: two seats on 12 both win.
    """
    if not scores:
        raise ValueError("No scores to rank")
    best = max(scores)
    return [i for i, score in enumerate(scores) if score == best]


def player_rank(scores: Sequence[int], index: int) -> Optional[int]:
    """
    1-based competition rank of seat `index` ("1224" style on ties).

    Returns None when there is nothing to rank or the index is unknown.
    """
    if not scores or not 0 <= index < len(scores):
        return None
    return 1 + sum(1 for score in scores if score > scores[index])


def leaderboard(names: Sequence[str], scores: Sequence[int]) -> List[Tuple[int, str, int, int]]:
    """
    Standings as (rank, name, score, seat_index) rows, best first.

    Seats on equal scores keep seating order.
    """
    if len(names) != len(scores):
        raise ValueError("names and scores must have the same length")
    order = sorted(range(len(scores)), key=lambda i: -scores[i])
    rows = []
    for i in order:
        rank = 1 + sum(1 for score in scores if score > scores[i])
        rows.append((rank, names[i], scores[i], i))
    return rows
