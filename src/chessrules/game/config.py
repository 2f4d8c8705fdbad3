"""Rule configuration for a game: draw thresholds and optional draw rules."""

from __future__ import annotations

from chessrules.core.rules import FIFTY_MOVE_PLIES, REPETITION_LIMIT


class RuleConfig:
    """Immutable rule-set definition.

    Args:
        fifty_move_plies: Halfmove-clock value that ends the game as a draw.
        repetition_limit: Occurrences of one position that end the game.
        insufficient_material_draw: Also end the game when neither side can
            mate (K vs K, K+minor vs K, same-colored bishops).
    """

    __slots__ = ("fifty_move_plies", "repetition_limit", "insufficient_material_draw")

    def __init__(
        self,
        fifty_move_plies: int = FIFTY_MOVE_PLIES,
        repetition_limit: int = REPETITION_LIMIT,
        insufficient_material_draw: bool = False,
    ) -> None:
        if fifty_move_plies < 1:
            raise ValueError(f"fifty_move_plies must be positive: {fifty_move_plies}")
        if repetition_limit < 2:
            raise ValueError(f"repetition_limit must be at least 2: {repetition_limit}")
        object.__setattr__(self, "fifty_move_plies", fifty_move_plies)
        object.__setattr__(self, "repetition_limit", repetition_limit)
        object.__setattr__(
            self, "insufficient_material_draw", insufficient_material_draw
        )

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # Common presets
    @classmethod
    def standard(cls) -> RuleConfig:
        """Fifty-move rule and threefold repetition end the game."""
        return cls()

    @classmethod
    def fide_automatic(cls) -> RuleConfig:
        """FIDE's no-claim thresholds: 75 moves, fivefold repetition, dead positions."""
        return cls(150, 5, insufficient_material_draw=True)

    @classmethod
    def casual(cls) -> RuleConfig:
        """Standard thresholds plus insufficient-material draws."""
        return cls(insufficient_material_draw=True)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleConfig):
            return NotImplemented
        return (
            self.fifty_move_plies == other.fifty_move_plies
            and self.repetition_limit == other.repetition_limit
            and self.insufficient_material_draw == other.insufficient_material_draw
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.fifty_move_plies,
                self.repetition_limit,
                self.insufficient_material_draw,
            )
        )

    def __repr__(self) -> str:
        extra = ", insufficient material" if self.insufficient_material_draw else ""
        return (
            f"RuleConfig({self.fifty_move_plies} plies, "
            f"{self.repetition_limit}-fold{extra})"
        )
