# trick_table/cards.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import enum
import random


class Suit(enum.Enum):
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


ACE_VALUE = 14

_RANK_NAMES = {1: "Ace", 11: "Jack", 12: "Queen", 13: "King"}


@dataclass(frozen=True)
class Card:
    """
    A standard playing card.

    - suit: one of the four Suits.
    - rank: 1–13, where 1 is the Ace.

    `value` is what rule sets compare: the Ace ranks high (14), every other
    rank counts as itself. `id` is a stable key such as "hearts-1" used for
    lookups, never for ordering.
    """
    suit: Suit
    rank: int

    def __post_init__(self) -> None:
        if not (1 <= self.rank <= 13):
            raise ValueError("Card rank must be between 1 and 13")

    @property
    def value(self) -> int:
        return ACE_VALUE if self.rank == 1 else self.rank

    @property
    def id(self) -> str:
        return f"{self.suit.value}-{self.rank}"

    @property
    def name(self) -> str:
        rank_name = _RANK_NAMES.get(self.rank, str(self.rank))
        return f"{rank_name} of {self.suit.value.title()}"

    def __str__(self) -> str:
        return self.name


def card_to_dict(card: Card) -> Dict[str, Any]:
    """Convert a Card to a JSON-serializable dict."""
    return {
        "id": card.id,
        "suit": card.suit.value,
        "rank": card.rank,
        "value": card.value,
    }


def dict_to_card(data: Dict[str, Any]) -> Card:
    """Convert a dict back into a Card."""
    return Card(suit=Suit(data["suit"]), rank=int(data["rank"]))


def card_from_id(card_id: str) -> Card:
    """Parse a card id of the form "<suit>-<rank>"."""
    suit_name, _, rank = card_id.rpartition("-")
    try:
        return Card(suit=Suit(suit_name), rank=int(rank))
    except ValueError as exc:
        raise ValueError(f"Malformed card id {card_id!r}") from exc


def standard_deck() -> List[Card]:
    """All 52 cards in canonical order (suit by suit, Ace through King)."""
    return [Card(suit, rank) for suit in Suit for rank in range(1, 14)]


class Deck:
    """
    A standard 52-card deck: 4 suits × ranks 1–13, each exactly once.
    """

    def __init__(self) -> None:
        self.cards: List[Card] = standard_deck()

        if len(self.cards) != 52:
            raise RuntimeError("Deck must contain exactly 52 cards")

    def shuffle(self, rng: Optional[random.Random] = None) -> None:
        """
        Shuffle the deck in place. Uses provided RNG if given.

        random.shuffle is a Fisher–Yates shuffle, so every permutation is
        equally likely.
        """
        if rng is None:
            random.shuffle(self.cards)
        else:
            rng.shuffle(self.cards)


def build_shuffled_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """Return a fresh, uniformly shuffled 52-card deck."""
    deck = Deck()
    deck.shuffle(rng)
    return deck.cards


def highest_card(cards: List[Card]) -> Optional[Card]:
    """The card with the greatest value; first one wins ties."""
    best: Optional[Card] = None
    for card in cards:
        if best is None or card.value > best.value:
            best = card
    return best


def lowest_card(cards: List[Card]) -> Optional[Card]:
    """The card with the smallest value; first one wins ties."""
    best: Optional[Card] = None
    for card in cards:
        if best is None or card.value < best.value:
            best = card
    return best


def sort_by_suit_and_value(cards: List[Card]) -> List[Card]:
    """Presentation order: suits in Suit order, high cards first."""
    suit_order = {suit: i for i, suit in enumerate(Suit)}
    return sorted(cards, key=lambda c: (suit_order[c.suit], -c.value))
