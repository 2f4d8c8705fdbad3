"""chessrules — a two-player chess rules engine."""

from chessrules.core import (
    Color,
    GameAlreadyOver,
    IllegalMove,
    InvalidSquare,
    Move,
    MoveError,
    Outcome,
    OutcomeKind,
    PieceType,
)
from chessrules.game import GameSnapshot, GameState, RuleConfig, SubmitResult

__version__ = "0.1.0"

__all__ = [
    "Color",
    "GameAlreadyOver",
    "GameSnapshot",
    "GameState",
    "IllegalMove",
    "InvalidSquare",
    "Move",
    "MoveError",
    "Outcome",
    "OutcomeKind",
    "PieceType",
    "RuleConfig",
    "SubmitResult",
    "__version__",
]
