"""Board-level move application shared by the live position and scratch boards."""

from __future__ import annotations

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessrules.core.errors import IllegalMove
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square, file_of, make_square, rank_of, square_name

# flag -> (rook from file, rook to file)
_ROOK_SLIDES: dict[MoveFlag, tuple[int, int]] = {
    MoveFlag.CASTLE_KINGSIDE: (7, 5),
    MoveFlag.CASTLE_QUEENSIDE: (0, 3),
}

ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}

_KING_RIGHTS: tuple[CastlingRights, CastlingRights] = (
    CastlingRights.WHITE_BOTH,
    CastlingRights.BLACK_BOTH,
)


def capture_square(move: Move) -> Square:
    """Square whose occupant *move* removes; differs from ``to_sq`` for en passant."""
    if move.flag == MoveFlag.EN_PASSANT:
        return make_square(file_of(move.to_sq), rank_of(move.from_sq))
    return move.to_sq


def rook_slide(move: Move) -> tuple[Square, Square] | None:
    """(from, to) of the rook that accompanies a castling move."""
    files = _ROOK_SLIDES.get(move.flag)
    if files is None:
        return None
    rank = rank_of(move.from_sq)
    return make_square(files[0], rank), make_square(files[1], rank)


def touched_squares(move: Move) -> tuple[Square, ...]:
    """Every square whose content *move* may change."""
    squares = [move.from_sq, move.to_sq]
    cap_sq = capture_square(move)
    if cap_sq != move.to_sq:
        squares.append(cap_sq)
    slide = rook_slide(move)
    if slide is not None:
        squares.extend(slide)
    return tuple(squares)


def relocate(board: Board, move: Move) -> Piece | None:
    """Move the pieces for *move* on *board* and return the captured piece.

    Handles the en-passant victim, the castling rook and promotion.  Raises
    :class:`IllegalMove` before touching the board when the pieces needed by
    the move are absent.
    """
    piece = board[move.from_sq]
    if piece is None:
        raise IllegalMove(f"No piece on {square_name(move.from_sq)}")

    slide = rook_slide(move)
    if slide is not None and board[slide[0]] is None:
        raise IllegalMove(f"No rook on {square_name(slide[0])} to castle with")

    cap_sq = capture_square(move)
    board.remove(move.from_sq)
    captured = board.remove(cap_sq)

    placed = piece
    if move.promotion is not None:
        placed = Piece(piece.color, move.promotion)
    board.place(move.to_sq, placed)

    if slide is not None:
        rook = board.remove(slide[0])
        assert rook is not None
        board.place(slide[1], rook)

    return captured


def castling_after(
    castling: CastlingRights, move: Move, piece: Piece
) -> CastlingRights:
    """Rights left once *piece* has made *move*; bits are only ever cleared."""
    if piece.piece_type == PieceType.KING:
        castling &= ~_KING_RIGHTS[int(piece.color)]
    for sq in (move.from_sq, move.to_sq):
        right = ROOK_CORNERS.get(sq)
        if right is not None:
            castling &= ~right
    return castling


def en_passant_after(move: Move) -> Square | None:
    """En-passant target created by *move* (only a double pawn advance sets one)."""
    if move.flag != MoveFlag.DOUBLE_PAWN:
        return None
    return make_square(
        file_of(move.from_sq),
        (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
    )


def check_applicable(
    board: Board,
    move: Move,
    side: Color,
    en_passant: Square | None,
) -> Piece:
    """Reject moves that contradict the board before anything is mutated.

    This is a consistency guard for the applier; full legality belongs to
    :class:`~chessrules.core.legality.LegalityFilter`.
    """
    piece = board[move.from_sq]
    if piece is None:
        raise IllegalMove(f"No piece on {square_name(move.from_sq)}")
    if piece.color != side:
        raise IllegalMove(
            f"Piece on {square_name(move.from_sq)} belongs to {piece.color}, "
            f"but {side} is to move"
        )

    target = board[move.to_sq]
    if target is not None and target.color == side:
        raise IllegalMove(f"Cannot capture own piece on {square_name(move.to_sq)}")

    is_pawn = piece.piece_type == PieceType.PAWN
    last_rank = 7 if side == Color.WHITE else 0
    reaches_last_rank = is_pawn and rank_of(move.to_sq) == last_rank
    if reaches_last_rank and move.promotion is None:
        raise IllegalMove(f"Pawn reaching {square_name(move.to_sq)} must promote")
    if move.promotion is not None and not reaches_last_rank:
        raise IllegalMove(f"{move} is not a promotion")

    if move.flag == MoveFlag.EN_PASSANT:
        victim = board[capture_square(move)]
        if (
            not is_pawn
            or move.to_sq != en_passant
            or victim != Piece(side.opposite, PieceType.PAWN)
        ):
            raise IllegalMove(f"{move} is not a valid en-passant capture")
    elif move.is_castle:
        slide = rook_slide(move)
        assert slide is not None
        if piece.piece_type != PieceType.KING or board[slide[0]] != Piece(
            side, PieceType.ROOK
        ):
            raise IllegalMove(f"{move} is not a valid castling move")
    return piece
