"""Notation package: coordinate moves and FEN."""

from chessrules.core.notation.coordinate import parse_coordinate_move
from chessrules.core.notation.fen import (
    STARTING_FEN,
    board_to_fen,
    castling_to_fen,
    position_from_fen,
    position_to_fen,
)

__all__ = [
    "STARTING_FEN",
    "board_to_fen",
    "castling_to_fen",
    "position_from_fen",
    "position_to_fen",
    "parse_coordinate_move",
]
