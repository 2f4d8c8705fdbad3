"""Position — complete game state (board + metadata) with make/unmake."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.applier import (
    castling_after,
    check_applicable,
    en_passant_after,
    relocate,
    touched_squares,
)
from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, PieceType
from chessrules.core.errors import IllegalMove
from chessrules.core.legality import LegalityFilter
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square
from chessrules.core.zobrist import castling_key as zobrist_castling_key
from chessrules.core.zobrist import en_passant_key as zobrist_en_passant_key
from chessrules.core.zobrist import full_key as zobrist_full_key
from chessrules.core.zobrist import piece_key as zobrist_piece_key
from chessrules.core.zobrist import side_to_move_key as zobrist_side_to_move_key


@dataclass(slots=True)
class _PositionState:
    """Snapshot saved before each move so we can undo it."""

    move: Move
    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    squares: tuple[tuple[Square, Piece | None], ...]


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Supports :meth:`make_move` / :meth:`unmake_move` via an internal history
    stack.  Every applied ply also appends the position fingerprint to an
    append-only log that repetition detection counts against.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "_zobrist_hash",
        "_history",
        "_key_stack",
        "_key_counts",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self._zobrist_hash = zobrist_full_key(
            self.board.as_tuple(), side_to_move, castling, en_passant
        )
        self._history: list[_PositionState] = []
        key = self._zobrist_hash
        self._key_stack: list[int] = [key]
        self._key_counts: dict[int, int] = {key: 1}

    # ── Core move operations ─────────────────────────────────────────────

    def make_move(self, move: Move) -> Piece | None:
        """Apply *move*, pushing undo state onto the history stack.

        Raises :class:`~chessrules.core.errors.IllegalMove` when the board does
        not support the move or the legality filter rejects it; the position
        is left untouched in that case.  Returns the captured piece, if any.
        """
        board = self.board
        piece = check_applicable(board, move, self.side_to_move, self.en_passant)
        if not LegalityFilter(self).is_legal(move):
            raise IllegalMove(f"{move} is not a legal move in this position")

        touched = touched_squares(move)
        before = tuple((sq, board[sq]) for sq in touched)
        self._history.append(
            _PositionState(
                move=move,
                castling=self.castling,
                en_passant=self.en_passant,
                halfmove_clock=self.halfmove_clock,
                squares=before,
            )
        )

        captured = relocate(board, move)

        for sq, old in before:
            new = board[sq]
            if old == new:
                continue
            if old is not None:
                self._zobrist_hash ^= zobrist_piece_key(old, sq)
            if new is not None:
                self._zobrist_hash ^= zobrist_piece_key(new, sq)

        self._set_en_passant(en_passant_after(move))
        self._set_castling(castling_after(self.castling, move, piece))

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = self.side_to_move.opposite
        self._zobrist_hash ^= zobrist_side_to_move_key()
        key = self._zobrist_hash
        self._key_stack.append(key)
        self._key_counts[key] = self._key_counts.get(key, 0) + 1
        return captured

    def unmake_move(self) -> Move:
        """Undo the last :meth:`make_move` and return the move that was undone."""
        if not self._history:
            raise IndexError("No move to undo")
        state = self._history.pop()
        key = self._key_stack.pop()
        key_count = self._key_counts[key] - 1
        if key_count:
            self._key_counts[key] = key_count
        else:
            del self._key_counts[key]

        self.side_to_move = self.side_to_move.opposite
        if self.side_to_move == Color.BLACK:
            self.fullmove_number -= 1

        for sq, piece in state.squares:
            self.board[sq] = piece

        self.castling = state.castling
        self.en_passant = state.en_passant
        self.halfmove_clock = state.halfmove_clock
        self._zobrist_hash = self._key_stack[-1]
        return state.move

    # ── Hash bookkeeping ─────────────────────────────────────────────────

    def _set_castling(self, castling: CastlingRights) -> None:
        if castling == self.castling:
            return
        self._zobrist_hash ^= zobrist_castling_key(self.castling)
        self.castling = castling
        self._zobrist_hash ^= zobrist_castling_key(self.castling)

    def _set_en_passant(self, en_passant: Square | None) -> None:
        if en_passant == self.en_passant:
            return
        if self.en_passant is not None:
            self._zobrist_hash ^= zobrist_en_passant_key(self.en_passant)
        self.en_passant = en_passant
        if self.en_passant is not None:
            self._zobrist_hash ^= zobrist_en_passant_key(self.en_passant)

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Deep copy without undo history (the repetition log is kept)."""
        pos = Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )
        pos._zobrist_hash = self._zobrist_hash
        pos._key_stack = self._key_stack.copy()
        pos._key_counts = self._key_counts.copy()
        return pos

    def repetition_count(self) -> int:
        """How many times the current position key occurred in game history."""
        key = self._key_stack[-1]
        return self._key_counts.get(key, 0)

    @property
    def zobrist_hash(self) -> int:
        """Current Zobrist key for the full position."""
        return self._key_stack[-1]

    @property
    def fingerprints(self) -> tuple[int, ...]:
        """Append-only log of position keys, oldest first."""
        return tuple(self._key_stack)

    @property
    def ply_count(self) -> int:
        """Plies applied since this position object was created."""
        return len(self._history)

    def recompute_hash(self) -> int:
        """Fingerprint computed from scratch; equals :attr:`zobrist_hash` when sound."""
        return zobrist_full_key(
            self.board.as_tuple(), self.side_to_move, self.castling, self.en_passant
        )
