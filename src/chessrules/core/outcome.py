"""Outcome value object — the annotation recomputed after every ply."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import Color, DrawReason, GameResult, OutcomeKind


@dataclass(frozen=True, slots=True)
class Outcome:
    """Where the game stands for the side to move.

    ``color`` is the side in check (CHECK) or the side that was mated
    (CHECKMATE); ``reason`` is set for DRAW only.
    """

    kind: OutcomeKind = OutcomeKind.IN_PROGRESS
    color: Color | None = None
    reason: DrawReason | None = None

    # ── Constructors ─────────────────────────────────────────────────────

    @classmethod
    def in_progress(cls) -> Outcome:
        return cls()

    @classmethod
    def check(cls, color: Color) -> Outcome:
        return cls(OutcomeKind.CHECK, color)

    @classmethod
    def checkmate(cls, color: Color) -> Outcome:
        return cls(OutcomeKind.CHECKMATE, color)

    @classmethod
    def stalemate(cls) -> Outcome:
        return cls(OutcomeKind.STALEMATE)

    @classmethod
    def draw(cls, reason: DrawReason) -> Outcome:
        return cls(OutcomeKind.DRAW, reason=reason)

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def is_terminal(self) -> bool:
        return self.kind in (
            OutcomeKind.CHECKMATE,
            OutcomeKind.STALEMATE,
            OutcomeKind.DRAW,
        )

    @property
    def result(self) -> GameResult:
        if self.kind == OutcomeKind.CHECKMATE:
            return (
                GameResult.BLACK_WINS
                if self.color == Color.WHITE
                else GameResult.WHITE_WINS
            )
        if self.kind in (OutcomeKind.STALEMATE, OutcomeKind.DRAW):
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    def __str__(self) -> str:
        if self.kind == OutcomeKind.DRAW:
            return f"draw ({self.reason})"
        if self.color is not None:
            return f"{self.kind.name.lower()} ({self.color})"
        return self.kind.name.lower().replace("_", " ")
