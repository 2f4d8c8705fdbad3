"""Legality filter: drops pseudo-legal moves that leave the mover in check."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.applier import relocate
from chessrules.core.enums import Color, MoveFlag
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.types import make_square, rank_of

if TYPE_CHECKING:
    from chessrules.core.move import Move
    from chessrules.core.position import Position
    from chessrules.core.types import Square

# King files that must not be attacked while castling: start, transit, target.
_KING_PATHS: dict[MoveFlag, tuple[int, ...]] = {
    MoveFlag.CASTLE_KINGSIDE: (4, 5, 6),
    MoveFlag.CASTLE_QUEENSIDE: (4, 3, 2),
}


class LegalityFilter:
    """Strict legality on top of :class:`MoveGenerator`.

    Each candidate is played on a scratch copy of the board and kept only if
    the mover's king is not attacked afterwards.  The live position is never
    mutated.
    """

    __slots__ = ("_pos", "_gen")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._gen = MoveGenerator(position)

    @property
    def generator(self) -> MoveGenerator:
        return self._gen

    # -- Public API ---------------------------------------------------------

    def legal_moves(self, color: Color | None = None) -> list[Move]:
        """All strictly legal moves for *color* (default: side to move)."""
        if color is None:
            color = self._pos.side_to_move
        return [
            move
            for move in self._gen.pseudo_legal_moves(color)
            if self._keeps_king_safe(move, color)
        ]

    def legal_moves_from(self, sq: Square) -> list[Move]:
        """Legal moves of the piece on *sq*, whichever side it belongs to."""
        piece = self._pos.board[sq]
        if piece is None:
            return []
        return [
            move
            for move in self._gen.piece_moves(sq)
            if self._keeps_king_safe(move, piece.color)
        ]

    def is_legal(self, move: Move) -> bool:
        """Whether *move* (with its exact flag and promotion) is legal."""
        piece = self._pos.board[move.from_sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return False
        if move not in self._gen.piece_moves(move.from_sq):
            return False
        return self._keeps_king_safe(move, piece.color)

    def has_legal_move(self, color: Color | None = None) -> bool:
        if color is None:
            color = self._pos.side_to_move
        return any(
            self._keeps_king_safe(move, color)
            for move in self._gen.pseudo_legal_moves(color)
        )

    def is_in_check(self, color: Color | None = None) -> bool:
        if color is None:
            color = self._pos.side_to_move
        return self._gen.is_in_check(color)

    # -- Internal -----------------------------------------------------------

    def _keeps_king_safe(self, move: Move, color: Color) -> bool:
        if move.is_castle and not self._castling_path_safe(move, color):
            return False

        scratch = self._pos.board.copy()
        relocate(scratch, move)
        return not MoveGenerator(self._pos, scratch).is_in_check(color)

    def _castling_path_safe(self, move: Move, color: Color) -> bool:
        rank = rank_of(move.from_sq)
        opponent = color.opposite
        return not any(
            self._gen.is_square_attacked(make_square(file, rank), opponent)
            for file in _KING_PATHS[move.flag]
        )
