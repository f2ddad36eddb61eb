# trick_table/rules.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple
import enum

from .cards import Card, Suit
from .errors import ConfigurationError

TRUMP_SUIT = Suit.SPADES

# (seat_id, card) pairs in play order.
CardEntries = List[Tuple[str, Card]]
Evaluator = Callable[[Mapping[str, Card], Optional[str]], str]


class RuleSetId(enum.Enum):
    HIGHEST_CARD = "highest-card"
    SUIT_FOLLOWS = "suit-follows"
    SPADES_TRUMP = "spades-trump"


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def lead_seat(cards: Mapping[str, Card], lead_seat_id: Optional[str] = None) -> str:
    """
    Seat that led the trick.

    An explicit `lead_seat_id` wins if that seat has played; otherwise the
    first entry of the mapping (play order) is the lead.
    """
    if not cards:
        raise ValueError("Cannot determine the lead of an empty trick")
    if lead_seat_id is not None and lead_seat_id in cards:
        return lead_seat_id
    return next(iter(cards))


def lead_suit(cards: Mapping[str, Card], lead_seat_id: Optional[str] = None) -> Suit:
    """Suit of the card played by the lead seat."""
    return cards[lead_seat(cards, lead_seat_id)].suit


def filter_by_suit(entries: CardEntries, suit: Suit) -> CardEntries:
    return [(seat_id, card) for seat_id, card in entries if card.suit == suit]


def find_highest_card(entries: CardEntries) -> Optional[str]:
    """
    Seat holding the highest-valued card, ignoring suit.

    Strict comparison: among equal values the earliest entry is kept.
    """
    best_seat: Optional[str] = None
    best_value = -1
    for seat_id, card in entries:
        if card.value > best_value:
            best_value = card.value
            best_seat = seat_id
    return best_seat


def find_highest_in_suit(entries: CardEntries, suit: Suit) -> Optional[str]:
    """Seat with the highest card of `suit`, or None if nobody played it."""
    return find_highest_card(filter_by_suit(entries, suit))


def _entries(cards: Mapping[str, Card]) -> CardEntries:
    if not cards:
        raise ValueError("Cannot determine winner of an empty trick")
    return list(cards.items())


# -----------------------------------------------------------------------------
# Evaluators
# -----------------------------------------------------------------------------


def highest_card_winner(
    cards: Mapping[str, Card],
    lead_seat_id: Optional[str] = None,
) -> str:
    """Highest value wins; suit is ignored entirely."""
    winner = find_highest_card(_entries(cards))
    assert winner is not None
    return winner


def suit_follows_winner(
    cards: Mapping[str, Card],
    lead_seat_id: Optional[str] = None,
) -> str:
    """
    Highest card of the lead suit wins.

    Off-suit cards can never win, however high; the lead seat is always a
    candidate so it wins by default when nobody follows.
    """
    entries = _entries(cards)
    suit = lead_suit(cards, lead_seat_id)
    winner = find_highest_in_suit(entries, suit)
    return winner if winner is not None else lead_seat(cards, lead_seat_id)


def spades_trump_winner(
    cards: Mapping[str, Card],
    lead_seat_id: Optional[str] = None,
) -> str:
    """
    Any spade beats every non-spade; highest spade wins.

    With no spades in the trick this falls back to suit-follows.
    """
    entries = _entries(cards)
    trumps = filter_by_suit(entries, TRUMP_SUIT)
    if trumps:
        winner = find_highest_card(trumps)
        assert winner is not None
        return winner
    return suit_follows_winner(cards, lead_seat_id)


# -----------------------------------------------------------------------------
# Rule set registry
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleSet:
    id: RuleSetId
    name: str
    description: str
    evaluator: Evaluator

    def evaluate_winner(
        self,
        cards_by_player: Mapping[str, Card],
        lead_seat_id: Optional[str] = None,
    ) -> str:
        return self.evaluator(cards_by_player, lead_seat_id)

    def to_dict(self) -> Dict[str, str]:
        """Display metadata for presentation layers."""
        return {
            "id": self.id.value,
            "name": self.name,
            "description": self.description,
        }


RULE_SETS: Dict[RuleSetId, RuleSet] = {
    RuleSetId.HIGHEST_CARD: RuleSet(
        id=RuleSetId.HIGHEST_CARD,
        name="Highest Card Wins",
        description="The highest card value wins the trick",
        evaluator=highest_card_winner,
    ),
    RuleSetId.SUIT_FOLLOWS: RuleSet(
        id=RuleSetId.SUIT_FOLLOWS,
        name="Suit Follows",
        description="Must follow lead suit, highest of lead suit wins",
        evaluator=suit_follows_winner,
    ),
    RuleSetId.SPADES_TRUMP: RuleSet(
        id=RuleSetId.SPADES_TRUMP,
        name="Spades Trump",
        description="Spades are trump cards and beat all other suits",
        evaluator=spades_trump_winner,
    ),
}


def get_rule_set(rule_set_id: str | RuleSetId) -> RuleSet:
    """Look up a built-in rule set by id ("highest-card", ...)."""
    try:
        key = RuleSetId(rule_set_id)
    except ValueError:
        known = ", ".join(r.value for r in RuleSetId)
        raise ConfigurationError(
            f"Unknown rule set {rule_set_id!r}; expected one of: {known}"
        ) from None
    return RULE_SETS[key]


def list_rule_sets() -> List[RuleSet]:
    """Built-in rule sets in display order."""
    return [RULE_SETS[r] for r in RuleSetId]


def legal_moves(hand: List[Card]) -> List[int]:
    """
    Indices into `hand` that may be played.

    None of the built-in rule sets obliges a seat to follow suit, so every
    held card is legal; suit only matters when the trick is evaluated.
    """
    return list(range(len(hand)))
