# trick_table/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple
import enum

from .cards import Card, Suit


class Phase(enum.Enum):
    WAITING = "waiting"
    DEALING = "dealing"
    PLAYING = "playing"
    EVALUATING = "evaluating"
    GAME_OVER = "gameOver"


HUMAN_SEAT_INDEX = 0


def seat_id_for(index: int) -> str:
    return f"player{index + 1}"


@dataclass
class Seat:
    id: str
    name: str
    hand: List[Card] = field(default_factory=list)
    # Mirror of GameState.scores[index]; the list is authoritative.
    score: int = 0
    is_active: bool = False

    def find_card(self, card_id: str) -> Optional[int]:
        """Index of `card_id` in the hand, or None if not held."""
        for i, card in enumerate(self.hand):
            if card.id == card_id:
                return i
        return None


@dataclass(frozen=True)
class TrickResult:
    round: int
    trick_index: int
    # (seat_id, card) pairs in play order
    plays: Tuple[Tuple[str, Card], ...]
    lead_seat_id: str
    lead_suit: Suit
    winner_id: str


@dataclass(frozen=True)
class WinnerEntry:
    seat_id: str
    name: str
    score: int


@dataclass
class GameState:
    seats: List[Seat]
    max_rounds: int
    phase: Phase = Phase.WAITING
    current_player: int = 0
    # seat_id -> card, in play order for the current trick
    played_cards: Dict[str, Card] = field(default_factory=dict)
    lead_seat_id: Optional[str] = None
    scores: List[int] = field(default_factory=list)
    round: int = 1
    trick_index: int = 0
    rule_set_id: Optional[str] = None
    last_trick: Optional[TrickResult] = None
    trick_history: List[TrickResult] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.scores:
            self.scores = [0] * len(self.seats)

    @property
    def num_seats(self) -> int:
        return len(self.seats)

    def seat_index(self, seat_id: str) -> Optional[int]:
        for i, seat in enumerate(self.seats):
            if seat.id == seat_id:
                return i
        return None

    def hands_empty(self) -> bool:
        return all(not seat.hand for seat in self.seats)

    def sync_active_flags(self) -> None:
        """Only the seat to act is active, and only while cards are being played."""
        for i, seat in enumerate(self.seats):
            seat.is_active = (
                self.phase == Phase.PLAYING and i == self.current_player
            )

    def snapshot(self) -> "GameSnapshot":
        return GameSnapshot(
            phase=self.phase,
            current_player=self.current_player,
            played_cards=MappingProxyType(dict(self.played_cards)),
            lead_seat_id=self.lead_seat_id,
            scores=tuple(self.scores),
            round=self.round,
            max_rounds=self.max_rounds,
            trick_index=self.trick_index,
            rule_set_id=self.rule_set_id,
            seats=tuple(
                SeatSnapshot(
                    id=seat.id,
                    name=seat.name,
                    hand=tuple(seat.hand),
                    score=seat.score,
                    is_active=seat.is_active,
                    is_human=i == HUMAN_SEAT_INDEX,
                )
                for i, seat in enumerate(self.seats)
            ),
            last_trick=self.last_trick,
            trick_history=tuple(self.trick_history),
        )


@dataclass(frozen=True)
class SeatSnapshot:
    id: str
    name: str
    hand: Tuple[Card, ...]
    score: int
    is_active: bool
    is_human: bool


@dataclass(frozen=True)
class GameSnapshot:
    """
    Read-only view of the engine state handed to presentation code.

    Nothing here aliases engine internals: mutating the engine afterwards
    never changes a snapshot already handed out.
    """
    phase: Phase
    current_player: int
    played_cards: Mapping[str, Card]
    lead_seat_id: Optional[str]
    scores: Tuple[int, ...]
    round: int
    max_rounds: int
    trick_index: int
    rule_set_id: Optional[str]
    seats: Tuple[SeatSnapshot, ...]
    last_trick: Optional[TrickResult]
    trick_history: Tuple[TrickResult, ...]

    @property
    def current_seat(self) -> SeatSnapshot:
        return self.seats[self.current_player]

    def seat(self, seat_id: str) -> SeatSnapshot:
        for seat in self.seats:
            if seat.id == seat_id:
                return seat
        raise KeyError(seat_id)
