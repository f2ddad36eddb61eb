# tests/test_dealing.py
import random

import pytest

from trick_table.cards import build_shuffled_deck, standard_deck
from trick_table.config import GameConfig
from trick_table.dealing import check_deal_capacity, deal, undealt_cards
from trick_table.errors import ConfigurationError


def test_deal_four_hands_of_seven():
    deck = build_shuffled_deck(random.Random(123))
    hands = deal(deck, 4, 7)

    assert sorted(hands) == [0, 1, 2, 3]
    for hand in hands.values():
        assert len(hand) == 7

    dealt = [card for hand in hands.values() for card in hand]
    assert len(set(dealt)) == 28
    remaining = undealt_cards(deck, 4, 7)
    assert len(remaining) == 24
    assert set(remaining).isdisjoint(dealt)


def test_deal_is_block_wise():
    deck = standard_deck()
    hands = deal(deck, 4, 7)

    assert hands[0] == deck[0:7]
    assert hands[1] == deck[7:14]
    assert hands[3] == deck[21:28]


def test_deal_capacity_check():
    check_deal_capacity(4, 13, 52)
    with pytest.raises(ConfigurationError):
        check_deal_capacity(4, 14, 52)


def test_default_config_is_valid():
    config = GameConfig()
    config.validate()
    assert (config.seat_count, config.hand_size, config.max_rounds) == (4, 7, 5)
    assert config.total_tricks == 35


@pytest.mark.parametrize(
    "kwargs",
    [
        {"hand_size": 14},
        {"hand_size": 0},
        {"max_rounds": 0},
        {"seat_count": 3},
        {"ai_difficulty": "nightmare"},
        {"human_turn_timeout": 0},
        {"ai_play_delay": -1},
    ],
)
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        GameConfig(**kwargs).validate()
