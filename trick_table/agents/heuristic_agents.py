# trick_table/agents/heuristic_agents.py
from __future__ import annotations

import random
from typing import Any, Callable, Dict, List, Optional

from ..cards import Card, dict_to_card
from ..rules import TRUMP_SUIT, RuleSetId, get_rule_set
from .base import SeatAgent
from .random_agent import RandomSeatAgent


def _hand_cards(observation: Dict[str, Any]) -> List[Card]:
    cards = observation.get("hand_cards")
    if cards is not None:
        return list(cards)
    return [dict_to_card(card) for card in observation["hand"]]


def _current_plays(observation: Dict[str, Any]) -> Dict[str, Card]:
    current_trick = observation.get("current_trick", {"plays": []})
    return {
        play["seat_id"]: dict_to_card(play["card"])
        for play in current_trick["plays"]
    }


def _pick(
    hand: List[Card],
    indices: List[int],
    key: Callable[[Card], Any],
    highest: bool,
) -> int:
    """First index with the max (or min) key among `indices`."""
    best_idx = indices[0]
    for idx in indices[1:]:
        if highest and key(hand[idx]) > key(hand[best_idx]):
            best_idx = idx
        elif not highest and key(hand[idx]) < key(hand[best_idx]):
            best_idx = idx
    return best_idx


class HighestCardAgent(SeatAgent):
    """Always plays its highest-valued legal card (first one on ties)."""

    def choose_card(self, observation: Dict[str, Any]) -> int:
        hand = _hand_cards(observation)
        legal = observation["legal_move_indices"]
        return _pick(hand, legal, key=lambda c: c.value, highest=True)


class RuleAwareAgent(SeatAgent):
    """
    Plays to the active rule set.

    - Leading: play the strongest card (a non-trump one under spades-trump
      when it has any).
    - Following: find the cards that would take the trick right now. As the
      last seat, play the cheapest of them; otherwise play the strongest so
      later seats are less likely to beat it.
    - Cannot win: throw away the lowest card, keeping trumps if possible.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    @staticmethod
    def _strength(rule_set_id: RuleSetId, card: Card) -> int:
        if rule_set_id == RuleSetId.SPADES_TRUMP and card.suit == TRUMP_SUIT:
            return card.value + 100
        return card.value

    def choose_card(self, observation: Dict[str, Any]) -> int:
        hand = _hand_cards(observation)
        legal = observation["legal_move_indices"]
        if len(legal) == 1:
            return legal[0]

        game = observation["game"]
        rule_set = get_rule_set(game["rule_set_id"])
        rule_id = rule_set.id
        seat_id = observation["player"]["id"]
        plays = _current_plays(observation)

        def strength(card: Card) -> int:
            return self._strength(rule_id, card)

        if not plays:
            candidates = legal
            if rule_id == RuleSetId.SPADES_TRUMP:
                non_trump = [i for i in legal if hand[i].suit != TRUMP_SUIT]
                candidates = non_trump or legal
            return _pick(hand, candidates, key=lambda c: c.value, highest=True)

        lead_seat_id = observation["current_trick"].get("lead_seat_id")
        winners = []
        for idx in legal:
            trick = dict(plays)
            trick[seat_id] = hand[idx]
            if rule_set.evaluate_winner(trick, lead_seat_id) == seat_id:
                winners.append(idx)

        if winners:
            is_last = len(plays) == game["num_seats"] - 1
            return _pick(hand, winners, key=strength, highest=not is_last)

        losers = legal
        if rule_id == RuleSetId.SPADES_TRUMP:
            non_trump = [i for i in legal if hand[i].suit != TRUMP_SUIT]
            losers = non_trump or legal
        lowest = _pick(hand, losers, key=lambda c: c.value, highest=False)
        ties = [i for i in losers if hand[i].value == hand[lowest].value]
        return self._rng.choice(ties)


DIFFICULTIES = ("easy", "medium", "hard")


def make_agent(difficulty: str, seed: Optional[int] = None) -> SeatAgent:
    """
    Build the card-selection agent for a difficulty level.

    easy -> random legal card, medium -> highest card, hard -> rule-aware.
    """
    if difficulty == "easy":
        return RandomSeatAgent(rng=random.Random(seed))
    if difficulty == "medium":
        return HighestCardAgent()
    if difficulty == "hard":
        return RuleAwareAgent(seed=seed)
    raise ValueError(
        f"Unknown difficulty {difficulty!r}; expected one of: {', '.join(DIFFICULTIES)}"
    )
