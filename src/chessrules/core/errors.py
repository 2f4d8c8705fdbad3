"""Exception hierarchy for the rules engine.

``MoveError`` subclasses are recoverable: the caller rejects the request and
asks again.  ``CorruptedStateError`` means the engine itself is broken and is
never converted into a value.
"""

from __future__ import annotations


class ChessError(Exception):
    """Base class for every error raised by :mod:`chessrules`."""


class InvalidSquare(ChessError, ValueError):
    """A coordinate or square name outside the 8x8 board."""


class InvalidPosition(ChessError, ValueError):
    """A position description that cannot be loaded (bad FEN, broken invariants)."""


class MoveError(ChessError):
    """A move request that cannot be applied in the current game."""


class IllegalMove(MoveError):
    """Well-formed move that is not a legal transition from the current position."""


class GameAlreadyOver(MoveError):
    """Move submitted after the game reached a terminal outcome."""


class CorruptedStateError(ChessError, RuntimeError):
    """An engine invariant was violated, e.g. a king went missing."""
