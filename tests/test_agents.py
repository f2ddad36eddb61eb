# tests/test_agents.py
import random

import pytest

from trick_table.agents import (
    HighestCardAgent,
    RandomSeatAgent,
    RuleAwareAgent,
    SeatAgent,
    make_agent,
)
from trick_table.cards import Card, Suit, card_to_dict

H, D, C, S = Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES


def _obs(hand_cards, rule_set_id="highest-card", plays=(), seat_id="player4", num_seats=4):
    plays = list(plays)
    return {
        "phase": "play",
        "game": {
            "round": 1,
            "max_rounds": 5,
            "trick_index": 0,
            "num_seats": num_seats,
            "rule_set_id": rule_set_id,
        },
        "player": {"index": 3, "id": seat_id, "name": "Jordan", "score": 0},
        "hand": [card_to_dict(c) for c in hand_cards],
        "hand_cards": hand_cards,
        "legal_move_indices": list(range(len(hand_cards))),
        "current_trick": {
            "plays": [
                {"seat_id": sid, "card": card_to_dict(card)} for sid, card in plays
            ],
            "lead_seat_id": plays[0][0] if plays else None,
            "lead_suit": plays[0][1].suit.value if plays else None,
        },
        "scores": {},
    }


def test_random_agent_choose_card_from_legal():
    agent = RandomSeatAgent(rng=random.Random(0))
    obs = _obs([Card(H, 2), Card(S, 9), Card(C, 4)])
    obs["legal_move_indices"] = [0, 2]

    for _ in range(20):
        assert agent.choose_card(obs) in [0, 2]


def test_highest_card_agent_ignores_suit():
    agent = HighestCardAgent()
    assert agent.choose_card(_obs([Card(H, 2), Card(S, 1), Card(C, 13)])) == 1


def test_highest_card_agent_works_from_card_dicts():
    hand = [Card(D, 5), Card(C, 11)]
    obs = _obs(hand)
    del obs["hand_cards"]
    assert HighestCardAgent().choose_card(obs) == 1


def test_rule_aware_agent_leads_with_non_trump_under_spades():
    agent = RuleAwareAgent(seed=0)
    hand = [Card(S, 1), Card(H, 12), Card(D, 3)]
    assert agent.choose_card(_obs(hand, rule_set_id="spades-trump")) == 1


def test_rule_aware_agent_last_seat_wins_cheaply():
    agent = RuleAwareAgent(seed=0)
    plays = [("player1", Card(H, 5)), ("player2", Card(H, 9)), ("player3", Card(C, 13))]
    hand = [Card(H, 1), Card(H, 10), Card(D, 2)]

    choice = agent.choose_card(_obs(hand, rule_set_id="suit-follows", plays=plays))
    assert hand[choice] == Card(H, 10)


def test_rule_aware_agent_trumps_when_it_cannot_follow():
    agent = RuleAwareAgent(seed=0)
    plays = [("player1", Card(H, 13)), ("player2", Card(H, 1)), ("player3", Card(H, 4))]
    hand = [Card(S, 2), Card(S, 11), Card(D, 8)]

    choice = agent.choose_card(_obs(hand, rule_set_id="spades-trump", plays=plays))
    assert hand[choice] == Card(S, 2)


def test_rule_aware_agent_not_last_plays_strongest_winner():
    agent = RuleAwareAgent(seed=0)
    plays = [("player1", Card(C, 6))]
    hand = [Card(C, 7), Card(C, 12), Card(H, 1)]

    obs = _obs(hand, rule_set_id="suit-follows", plays=plays, seat_id="player2")
    assert hand[agent.choose_card(obs)] == Card(C, 12)


def test_rule_aware_agent_discards_lowest_when_it_cannot_win():
    agent = RuleAwareAgent(seed=0)
    plays = [("player1", Card(H, 1))]
    hand = [Card(S, 3), Card(D, 9), Card(C, 4)]

    obs = _obs(hand, rule_set_id="spades-trump", plays=plays, seat_id="player2")
    # The spade would win, so it is played; without spades the lowest goes
    assert hand[agent.choose_card(obs)] == Card(S, 3)

    hand = [Card(D, 9), Card(C, 4), Card(C, 8)]
    obs = _obs(hand, rule_set_id="spades-trump", plays=plays, seat_id="player2")
    assert hand[agent.choose_card(obs)] == Card(C, 4)


def test_make_agent_by_difficulty():
    assert isinstance(make_agent("easy", seed=1), RandomSeatAgent)
    assert isinstance(make_agent("medium"), HighestCardAgent)
    assert isinstance(make_agent("hard", seed=1), RuleAwareAgent)
    assert isinstance(make_agent("hard"), SeatAgent)

    with pytest.raises(ValueError):
        make_agent("impossible")
