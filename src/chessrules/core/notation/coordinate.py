"""Coordinate move text: the raw square-pair format (``e2e4``, ``e7e8q``)."""

from __future__ import annotations

from chessrules.core.enums import PieceType
from chessrules.core.errors import InvalidSquare
from chessrules.core.move import Move
from chessrules.core.types import parse_square

_PROMOTION_LETTERS: dict[str, PieceType] = {
    "q": PieceType.QUEEN,
    "r": PieceType.ROOK,
    "b": PieceType.BISHOP,
    "n": PieceType.KNIGHT,
}


def parse_coordinate_move(text: str) -> Move:
    """Decode ``"e2e4"`` / ``"e7e8q"`` into a move request.

    The result carries no flag; the game resolves castling, en passant and
    double pushes against its legal moves.  Anything that is not two square
    names plus an optional promotion letter raises :class:`InvalidSquare`.
    """
    clean = text.strip()
    if len(clean) not in (4, 5):
        raise InvalidSquare(
            f"Invalid move format {text!r}: use from/to squares such as 'e2e4'"
        )
    from_sq = parse_square(clean[0:2])
    to_sq = parse_square(clean[2:4])

    promotion: PieceType | None = None
    if len(clean) == 5:
        promotion = _PROMOTION_LETTERS.get(clean[4].lower())
        if promotion is None:
            raise InvalidSquare(f"Invalid promotion letter in {text!r}")
    return Move(from_sq, to_sq, promotion=promotion)
