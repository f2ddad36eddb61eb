# trick_table/errors.py
from __future__ import annotations


class TrickTableError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(TrickTableError):
    """Invalid seat / hand size / deck size relationship, unknown rule set,
    or a scheduler that cannot run timers (no usable event loop).

    The engine state is left untouched when this is raised.
    """


class IllegalMoveError(TrickTableError):
    """
    A rejected operation: wrong phase, not the seat's turn, or card not held.

    The engine state is left untouched when this is raised, so callers can
    simply ignore the move and re-prompt.
    """
