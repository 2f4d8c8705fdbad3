"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessrules.core import LegalityFilter, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    for move in LegalityFilter(pos).legal_moves():
        print(move)
"""

from chessrules.core.board import Board
from chessrules.core.enums import (
    CastlingRights,
    Color,
    DrawReason,
    GameResult,
    MoveFlag,
    OutcomeKind,
    PieceType,
    Special,
)
from chessrules.core.errors import (
    ChessError,
    CorruptedStateError,
    GameAlreadyOver,
    IllegalMove,
    InvalidPosition,
    InvalidSquare,
    MoveError,
)
from chessrules.core.legality import LegalityFilter
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import (
    STARTING_FEN,
    parse_coordinate_move,
    position_from_fen,
    position_to_fen,
)
from chessrules.core.outcome import Outcome
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.rules import Rules
from chessrules.core.types import (
    Square,
    file_of,
    make_square,
    offset_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "DrawReason",
    "GameResult",
    "MoveFlag",
    "OutcomeKind",
    "PieceType",
    "Special",
    # Errors
    "ChessError",
    "CorruptedStateError",
    "GameAlreadyOver",
    "IllegalMove",
    "InvalidPosition",
    "InvalidSquare",
    "MoveError",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "offset_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "LegalityFilter",
    "Move",
    "MoveGenerator",
    "Outcome",
    "Piece",
    "Position",
    "Rules",
    # Notation
    "STARTING_FEN",
    "parse_coordinate_move",
    "position_from_fen",
    "position_to_fen",
]
