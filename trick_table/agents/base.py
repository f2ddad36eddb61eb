# trick_table/agents/base.py
from __future__ import annotations

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class SeatAgent(Protocol):
    """
    Card-selection strategy for a seat the engine plays on its own.

    `observation` is a JSON-like dict containing:
      - game-level info (round, trick index, rule set id, seat count)
      - player info (index, id, name, score)
      - "hand": list[card_dict] and "hand_cards": list[Card]
      - "legal_move_indices": list[int]
      - "current_trick": plays so far, lead seat and lead suit
      - "scores": seat id -> score
    """

    def choose_card(self, observation: Dict[str, Any]) -> int:
        """Return the index into the seat's current hand of the card to play."""
        raise NotImplementedError
