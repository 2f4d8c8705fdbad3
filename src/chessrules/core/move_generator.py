"""Pseudo-legal move generation + attack detection.

Nothing in this module asks whether a king is in check: legality is layered
on top in :mod:`chessrules.core.legality`.  Attack queries only use the raw
jump and ray reach of the pieces, so they never recurse into legality.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, TypeAlias

from chessrules.core.applier import ROOK_CORNERS
from chessrules.core.enums import (
    PROMOTION_TYPES,
    CastlingRights,
    Color,
    MoveFlag,
    PieceType,
)
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square, make_square, offset_square, rank_of

if TYPE_CHECKING:
    from chessrules.core.board import Board
    from chessrules.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

# Per color: forward rank step, start rank, last rank.
_PAWN_FORWARD: tuple[int, int] = (1, -1)
_PAWN_START_RANK: tuple[int, int] = (1, 6)
_PAWN_LAST_RANK: tuple[int, int] = (7, 0)

_HOME_KING: tuple[Square, Square] = (make_square(4, 0), make_square(4, 7))


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        moves = [offset_square(sq, df, dr) for df, dr in offsets]
        targets.append(tuple(to_sq for to_sq in moves if to_sq is not None))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            ray: list[Square] = []
            cur = offset_square(sq, df, dr)
            while cur is not None:
                ray.append(cur)
                cur = offset_square(cur, df, dr)
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


def _build_pawn_captures() -> tuple[tuple[tuple[Square, ...], ...], ...]:
    """[color][sq] -> squares a pawn of *color* on *sq* attacks."""
    per_color: list[tuple[tuple[Square, ...], ...]] = []
    for forward in _PAWN_FORWARD:
        per_color.append(_build_targets(((-1, forward), (1, forward))))
    return tuple(per_color)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_PAWN_CAPTURES = _build_pawn_captures()

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_SLIDER_RAYS: dict[PieceType, tuple[tuple[tuple[Square, ...], ...], ...]] = {
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _QUEEN_RAYS,
}

# (right, flag, king target, squares that must be empty, rook corner)
_CastlingLane: TypeAlias = tuple[
    CastlingRights, MoveFlag, Square, tuple[Square, ...], Square
]


def _build_castling_lanes(rank: int) -> tuple[_CastlingLane, _CastlingLane]:
    kingside = make_square(7, rank)
    queenside = make_square(0, rank)
    return (
        (
            ROOK_CORNERS[kingside],
            MoveFlag.CASTLE_KINGSIDE,
            make_square(6, rank),
            (make_square(5, rank), make_square(6, rank)),
            kingside,
        ),
        (
            ROOK_CORNERS[queenside],
            MoveFlag.CASTLE_QUEENSIDE,
            make_square(2, rank),
            (make_square(1, rank), make_square(2, rank), make_square(3, rank)),
            queenside,
        ),
    )


_CASTLING_LANES = (_build_castling_lanes(0), _build_castling_lanes(7))


def _move_order(move: Move) -> tuple[int, int, int]:
    # Promotions sort Q, R, B, N.
    return (move.from_sq, move.to_sq, -int(move.promotion or 0))


class MoveGenerator:
    """Generates pseudo-legal moves and attack sets for a :class:`Position`.

    Generation order is deterministic: ascending source square, then target
    square, then promotion piece (queen first).
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position, board: Board | None = None) -> None:
        self._pos = position
        self._board = board if board is not None else position.board

    # -- Public API ---------------------------------------------------------

    def pseudo_legal_moves(self, color: Color | None = None) -> list[Move]:
        """All pseudo-legal moves for *color* (default: side to move)."""
        if color is None:
            color = self._pos.side_to_move
        moves: list[Move] = []
        for sq in self._board.all_pieces(color):
            moves.extend(self.piece_moves(sq))
        return moves

    def piece_moves(self, sq: Square) -> Iterator[Move]:
        """Lazily yield the pseudo-legal moves of the piece standing on *sq*."""
        piece = self._board[sq]
        if piece is None:
            return
        moves: list[Move] = []
        ptype = piece.piece_type
        if ptype == PieceType.PAWN:
            self._gen_pawn(sq, piece.color, moves)
        elif ptype == PieceType.KNIGHT:
            self._gen_jumps(sq, piece.color, _KNIGHT_TARGETS[sq], moves)
        elif ptype == PieceType.KING:
            self._gen_jumps(sq, piece.color, _KING_TARGETS[sq], moves)
            self._gen_castling(sq, piece.color, moves)
        else:
            self._gen_sliding(sq, piece.color, _SLIDER_RAYS[ptype][sq], moves)
        moves.sort(key=_move_order)
        yield from moves

    # -- Attack detection (public) -----------------------------------------

    def attacks_from(self, sq: Square) -> set[Square]:
        """Squares the piece on *sq* attacks (its capture reach)."""
        piece = self._board[sq]
        if piece is None:
            return set()
        ptype = piece.piece_type
        if ptype == PieceType.PAWN:
            return set(_PAWN_CAPTURES[int(piece.color)][sq])
        if ptype == PieceType.KNIGHT:
            return set(_KNIGHT_TARGETS[sq])
        if ptype == PieceType.KING:
            return set(_KING_TARGETS[sq])

        board = self._board
        reach: set[Square] = set()
        for ray in _SLIDER_RAYS[ptype][sq]:
            for to_sq in ray:
                reach.add(to_sq)
                if board[to_sq] is not None:
                    break
        return reach

    def attacked_squares(self, by_color: Color) -> set[Square]:
        """Union of the capture reach of every piece of *by_color*."""
        reach: set[Square] = set()
        for sq in self._board.all_pieces(by_color):
            reach |= self.attacks_from(sq)
        return reach

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?

        Looks outward from *sq* with the same jump and ray tables the
        generator uses, which is equivalent to testing membership in
        :meth:`attacked_squares` without building the whole set.
        """
        board = self._board
        defender = int(by_color.opposite)

        pawn = Piece(by_color, PieceType.PAWN)
        # A pawn of by_color attacks sq iff a defender-colored pawn on sq would
        # attack the pawn's square.
        for from_sq in _PAWN_CAPTURES[defender][sq]:
            if board[from_sq] == pawn:
                return True

        knight = Piece(by_color, PieceType.KNIGHT)
        for from_sq in _KNIGHT_TARGETS[sq]:
            if board[from_sq] == knight:
                return True

        king = Piece(by_color, PieceType.KING)
        for from_sq in _KING_TARGETS[sq]:
            if board[from_sq] == king:
                return True

        for rays, slider in (
            (_BISHOP_RAYS[sq], PieceType.BISHOP),
            (_ROOK_RAYS[sq], PieceType.ROOK),
        ):
            for ray in rays:
                for from_sq in ray:
                    piece = board[from_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in (
                        slider,
                        PieceType.QUEEN,
                    ):
                        return True
                    break

        return False

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        return self.is_square_attacked(king_sq, color.opposite)

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        idx = int(color)
        forward = _PAWN_FORWARD[idx]
        promotes = rank_of(sq) + forward == _PAWN_LAST_RANK[idx]

        one_step = offset_square(sq, 0, forward)
        if one_step is not None and board.is_empty(one_step):
            if promotes:
                self._add_promotions(sq, one_step, moves)
            else:
                moves.append(Move(sq, one_step))
                if rank_of(sq) == _PAWN_START_RANK[idx]:
                    two_step = offset_square(sq, 0, 2 * forward)
                    if two_step is not None and board.is_empty(two_step):
                        moves.append(Move(sq, two_step, MoveFlag.DOUBLE_PAWN))

        for cap_sq in _PAWN_CAPTURES[idx][sq]:
            target = board[cap_sq]
            if target is not None:
                if target.color == color:
                    continue
                if promotes:
                    self._add_promotions(sq, cap_sq, moves)
                else:
                    moves.append(Move(sq, cap_sq))
            elif cap_sq == self._pos.en_passant:
                moves.append(Move(sq, cap_sq, MoveFlag.EN_PASSANT))

    @staticmethod
    def _add_promotions(from_sq: Square, to_sq: Square, moves: list[Move]) -> None:
        for pt in PROMOTION_TYPES:
            moves.append(Move(from_sq, to_sq, MoveFlag.PROMOTION, pt))

    def _gen_jumps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        """Castling candidates: right held, pieces home, path empty.

        Whether the king passes through or lands on an attacked square is
        decided by the legality filter.
        """
        idx = int(color)
        if king_sq != _HOME_KING[idx]:
            return

        board = self._board
        rook = Piece(color, PieceType.ROOK)
        for right, flag, king_to, between, corner in _CASTLING_LANES[idx]:
            if not self._pos.castling & right:
                continue
            if board[corner] != rook:
                continue
            if all(board.is_empty(s) for s in between):
                moves.append(Move(king_sq, king_to, flag))
