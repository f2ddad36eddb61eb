# tests/test_scoring.py
import pytest

from trick_table.scoring import award_trick, final_winners, leaderboard, player_rank


def test_award_trick_adds_one_point():
    scores = [0, 2, 0, 1]
    award_trick(scores, 1)
    assert scores == [0, 3, 0, 1]

    with pytest.raises(ValueError):
        award_trick(scores, 0, points=-1)


def test_final_winners_reports_ties():
    assert final_winners([3, 9, 2, 1]) == [1]
    assert final_winners([10, 10, 8, 7]) == [0, 1]
    with pytest.raises(ValueError):
        final_winners([])


def test_player_rank_competition_style():
    scores = [10, 12, 10, 3]
    assert player_rank(scores, 1) == 1
    assert player_rank(scores, 0) == 2
    assert player_rank(scores, 2) == 2
    assert player_rank(scores, 3) == 4
    assert player_rank(scores, 7) is None
    assert player_rank([], 0) is None


def test_leaderboard_sorted_and_stable():
    rows = leaderboard(["Ann", "Alex", "Sam", "Jordan"], [5, 9, 5, 0])
    assert rows == [
        (1, "Alex", 9, 1),
        (2, "Ann", 5, 0),
        (2, "Sam", 5, 2),
        (4, "Jordan", 0, 3),
    ]

    with pytest.raises(ValueError):
        leaderboard(["Ann"], [1, 2])
