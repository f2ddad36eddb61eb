# trick_table/agents/__init__.py
from .base import SeatAgent
from .random_agent import RandomSeatAgent
from .heuristic_agents import DIFFICULTIES, HighestCardAgent, RuleAwareAgent, make_agent

__all__ = [
    "SeatAgent",
    "RandomSeatAgent",
    "HighestCardAgent",
    "RuleAwareAgent",
    "DIFFICULTIES",
    "make_agent",
]
