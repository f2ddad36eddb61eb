# trick_table/agents/random_agent.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict
import random

from .base import SeatAgent


@dataclass
class RandomSeatAgent(SeatAgent):
    """
    Baseline agent: pick uniformly among legal moves.

    This is also the fallback used when the human seat runs out of time.
    """

    rng: random.Random = field(default_factory=random.Random)

    def choose_card(self, observation: Dict[str, Any]) -> int:
        legal_indices = observation["legal_move_indices"]
        return self.rng.choice(legal_indices)
