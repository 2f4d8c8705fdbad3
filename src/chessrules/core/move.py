"""Move value object (UCI-style representation)."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import PROMOTION_TYPES, MoveFlag, PieceType, Special
from chessrules.core.errors import IllegalMove
from chessrules.core.types import Square, square_name, validate_square

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}

_SPECIALS: dict[MoveFlag, Special] = {
    MoveFlag.EN_PASSANT: Special.EN_PASSANT,
    MoveFlag.CASTLE_KINGSIDE: Special.CASTLE_KINGSIDE,
    MoveFlag.CASTLE_QUEENSIDE: Special.CASTLE_QUEENSIDE,
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    A move is only meaningful against a specific position.  Callers may build
    a bare request (``Move(E2, E4)``); the game resolves it against the legal
    moves, which carry the precise :class:`MoveFlag`.
    """

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    def __post_init__(self) -> None:
        validate_square(self.from_sq)
        validate_square(self.to_sq)
        if self.promotion is not None and self.promotion not in PROMOTION_TYPES:
            raise IllegalMove(f"Cannot promote to {self.promotion!r}")

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS[self.promotion]
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)

    @property
    def special(self) -> Special:
        """Castling / en-passant classification; everything else is NORMAL."""
        return _SPECIALS.get(self.flag, Special.NORMAL)

    @property
    def is_castle(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)
