# trick_table/dealing.py
from __future__ import annotations

from typing import Dict, List, Sequence

from .cards import Card
from .errors import ConfigurationError


def check_deal_capacity(seat_count: int, hand_size: int, deck_size: int) -> None:
    """
    Ensure `seat_count` hands of `hand_size` cards fit in a deck.

    Called once when the configuration is validated; `deal` itself trusts it.
    """
    total_needed = seat_count * hand_size
    if total_needed > deck_size:
        raise ConfigurationError(
            f"Cannot deal {seat_count} hands of {hand_size} cards "
            f"({total_needed} cards) from a {deck_size}-card deck"
        )


def deal(
    deck: Sequence[Card],
    seat_count: int,
    hand_size: int,
) -> Dict[int, List[Card]]:
    """
    Deal block-wise: the first `hand_size` cards go to seat 0, the next
    `hand_size` to seat 1, and so on.

    Returns a mapping seat index -> hand. Cards beyond
    seat_count * hand_size are not dealt and are not tracked further.
    """
    hands: Dict[int, List[Card]] = {}
    for seat in range(seat_count):
        start = seat * hand_size
        hands[seat] = list(deck[start:start + hand_size])
    return hands


def undealt_cards(deck: Sequence[Card], seat_count: int, hand_size: int) -> List[Card]:
    """The cards `deal` leaves behind for the round."""
    return list(deck[seat_count * hand_size:])
