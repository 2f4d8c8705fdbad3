"""FEN parsing and serialization."""

from __future__ import annotations

from chessrules.core.board import Board
from chessrules.core.enums import CastlingRights, Color, PieceType
from chessrules.core.errors import InvalidPosition, InvalidSquare
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    Raises :class:`InvalidPosition` for malformed text and for placements the
    engine cannot play from: missing or extra kings, pawns on a back rank, or
    the side that just moved still in check.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise InvalidPosition(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    # 1. Piece placement
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidPosition(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch in "12345678":
                file += int(ch)
            else:
                if file >= 8:
                    raise InvalidPosition(f"Invalid FEN rank width: {fen!r}")
                try:
                    piece = Piece.from_char(ch)
                except ValueError as exc:
                    raise InvalidPosition(str(exc)) from None
                board.place(make_square(file, rank), piece)
                file += 1
            if file > 8:
                raise InvalidPosition(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise InvalidPosition(f"Invalid FEN rank width: {fen!r}")

    _validate_placement(board, fen)

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise InvalidPosition(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        seen: set[str] = set()
        for ch in castling_part:
            right = _CASTLING_CHARS.get(ch)
            if right is None or ch in seen:
                raise InvalidPosition(f"Invalid FEN castling field: {castling_part!r}")
            seen.add(ch)
            castling |= right

    # 4. En passant
    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except InvalidSquare:
            raise InvalidPosition(f"Invalid FEN en-passant square: {ep_part!r}") from None
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise InvalidPosition(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )

    # 5–6. Clocks (optional)
    halfmove = _parse_counter(parts, 4, default=0, minimum=0, name="halfmove clock")
    fullmove = _parse_counter(parts, 5, default=1, minimum=1, name="fullmove number")

    pos = Position(board, side, castling, ep, halfmove, fullmove)
    if MoveGenerator(pos).is_in_check(side.opposite):
        raise InvalidPosition(f"Side not to move is in check: {fen!r}")
    return pos


def _parse_counter(
    parts: list[str], index: int, *, default: int, minimum: int, name: str
) -> int:
    if len(parts) <= index:
        return default
    try:
        value = int(parts[index])
    except ValueError:
        raise InvalidPosition(f"Invalid FEN {name}: {parts[index]!r}") from None
    if value < minimum:
        raise InvalidPosition(f"Invalid FEN {name}: {parts[index]!r}")
    return value


def _validate_placement(board: Board, fen: str) -> None:
    for color in Color:
        count = board.king_count(color)
        if count != 1:
            raise InvalidPosition(
                f"FEN must contain exactly one {color} king, found {count}: {fen!r}"
            )
    for color in Color:
        for sq in board.pieces(color, PieceType.PAWN):
            if rank_of(sq) in (0, 7):
                raise InvalidPosition(
                    f"Pawn on back rank {square_name(sq)}: {fen!r}"
                )


def board_to_fen(board: Board) -> str:
    """Piece-placement field only."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def castling_to_fen(castling: CastlingRights) -> str:
    text = "".join(ch for ch, right in _CASTLING_CHARS.items() if castling & right)
    return text or "-"


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"
    return (
        f"{board_to_fen(pos.board)} {side_str} {castling_to_fen(pos.castling)} "
        f"{ep_str} {pos.halfmove_clock} {pos.fullmove_number}"
    )
