"""High-level chess rules: check, checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.enums import Color, DrawReason, PieceType
from chessrules.core.legality import LegalityFilter
from chessrules.core.outcome import Outcome
from chessrules.core.types import file_of, rank_of

if TYPE_CHECKING:
    from chessrules.core.position import Position

FIFTY_MOVE_PLIES = 100
REPETITION_LIMIT = 3


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return LegalityFilter(position).is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        legality = LegalityFilter(position)
        return legality.is_in_check() and not legality.has_legal_move()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        legality = LegalityFilter(position)
        return not legality.is_in_check() and not legality.has_legal_move()

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-color bishops)."""
        board = position.board
        total = board.occupied_count()

        # K vs K
        if total == 2:
            return True

        # K+minor vs K
        if total == 3:
            return (
                board.has_piece(Color.WHITE, PieceType.KNIGHT)
                or board.has_piece(Color.WHITE, PieceType.BISHOP)
                or board.has_piece(Color.BLACK, PieceType.KNIGHT)
                or board.has_piece(Color.BLACK, PieceType.BISHOP)
            )

        # K+B vs K+B with same-colour bishops
        if total == 4:
            white_bishops = board.pieces(Color.WHITE, PieceType.BISHOP)
            black_bishops = board.pieces(Color.BLACK, PieceType.BISHOP)
            if len(white_bishops) == 1 and len(black_bishops) == 1:
                w_sq, b_sq = white_bishops[0], black_bishops[0]
                w_color = (file_of(w_sq) + rank_of(w_sq)) % 2
                b_color = (file_of(b_sq) + rank_of(b_sq)) % 2
                return w_color == b_color

        return False

    @staticmethod
    def is_fifty_move_rule(position: Position, plies: int = FIFTY_MOVE_PLIES) -> bool:
        return position.halfmove_clock >= plies

    @staticmethod
    def is_threefold_repetition(
        position: Position, limit: int = REPETITION_LIMIT
    ) -> bool:
        return position.repetition_count() >= limit

    @staticmethod
    def outcome(
        position: Position,
        *,
        fifty_move_plies: int = FIFTY_MOVE_PLIES,
        repetition_limit: int = REPETITION_LIMIT,
        insufficient_material: bool = False,
    ) -> Outcome:
        """Classify *position* for its side to move.

        Running out of legal moves is decided first, so a mate delivered on
        the hundredth quiet ply still wins.
        """
        legality = LegalityFilter(position)
        side = position.side_to_move
        in_check = legality.is_in_check(side)

        if not legality.has_legal_move(side):
            return Outcome.checkmate(side) if in_check else Outcome.stalemate()

        if Rules.is_fifty_move_rule(position, fifty_move_plies):
            return Outcome.draw(DrawReason.FIFTY_MOVE)
        if Rules.is_threefold_repetition(position, repetition_limit):
            return Outcome.draw(DrawReason.REPETITION)
        if insufficient_material and Rules.is_insufficient_material(position):
            return Outcome.draw(DrawReason.INSUFFICIENT_MATERIAL)

        return Outcome.check(side) if in_check else Outcome.in_progress()
