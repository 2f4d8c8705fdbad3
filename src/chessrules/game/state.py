"""Game state machine — turn order, outcome tracking and move submission."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from chessrules.core.enums import CastlingRights, Color, GameResult, MoveFlag
from chessrules.core.errors import GameAlreadyOver, IllegalMove, MoveError
from chessrules.core.legality import LegalityFilter
from chessrules.core.move import Move
from chessrules.core.notation import (
    STARTING_FEN,
    parse_coordinate_move,
    position_from_fen,
    position_to_fen,
)
from chessrules.core.outcome import Outcome
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.rules import Rules
from chessrules.core.types import Square, square_name
from chessrules.game.config import RuleConfig

_LOGGER = logging.getLogger(__name__)


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    fen_after: str
    outcome: Outcome
    captured: Piece | None = None

    @property
    def was_capture(self) -> bool:
        return self.captured is not None

    @property
    def was_check(self) -> bool:
        return self.outcome.color is not None


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Read-only view of a game after a ply, for rendering by the host."""

    board: tuple[Piece | None, ...]
    side_to_move: Color
    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    fullmove_number: int
    outcome: Outcome
    fen: str

    def piece_at(self, sq: Square) -> Piece | None:
        return self.board[sq]

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly mapping: occupied squares by name, enums as strings."""
        outcome = self.outcome
        return {
            "board": {
                square_name(sq): str(piece)
                for sq, piece in enumerate(self.board)
                if piece is not None
            },
            "side_to_move": str(self.side_to_move),
            "castling": self.fen.split()[2],
            "en_passant": (
                square_name(self.en_passant) if self.en_passant is not None else None
            ),
            "halfmove_clock": self.halfmove_clock,
            "fullmove_number": self.fullmove_number,
            "outcome": {
                "kind": outcome.kind.name.lower(),
                "color": str(outcome.color) if outcome.color is not None else None,
                "reason": str(outcome.reason) if outcome.reason is not None else None,
            },
            "fen": self.fen,
        }


@dataclass(frozen=True, slots=True)
class SubmitResult:
    """Either the new snapshot (and history record) or the rejection."""

    state: GameSnapshot | None = None
    record: MoveRecord | None = None
    error: MoveError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok


@dataclass
class GameState:
    """Owns one position and drives it from the first ply to a terminal outcome.

    Pure data/logic — no threading, no I/O.  One instance per game; share it
    between threads only behind a lock (see :mod:`chessrules.game.session`).
    """

    config: RuleConfig = field(default_factory=RuleConfig.standard)
    fen: str | None = None
    outcome: Outcome = field(default_factory=Outcome.in_progress, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    start_fen: str = field(default=STARTING_FEN, init=False)
    _position: Position = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.setup(self.fen)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None) -> None:
        """Initialise (or reset) the game."""
        self.start_fen = fen or STARTING_FEN
        self.fen = fen
        self._position = position_from_fen(self.start_fen)
        self.move_history.clear()
        self.outcome = self._evaluate()
        _LOGGER.debug("Game set up from %s (%s)", self.start_fen, self.outcome)

    # ── Move submission ──────────────────────────────────────────────────

    def submit_move(self, move: Move) -> SubmitResult:
        """Validate and apply *move*; never raises a :class:`MoveError`."""
        try:
            record = self.apply_move(move)
        except MoveError as exc:
            _LOGGER.debug("Rejected %s: %s", move, exc)
            return SubmitResult(error=exc)
        return SubmitResult(state=self.snapshot(), record=record)

    def submit_text(self, text: str) -> SubmitResult:
        """Submit ``e2e4`` / ``e7e8q`` coordinate text.

        Malformed text raises :class:`~chessrules.core.errors.InvalidSquare`
        before anything reaches the game.
        """
        return self.submit_move(parse_coordinate_move(text))

    def apply_move(self, move: Move) -> MoveRecord:
        """Apply *move* and return the history record.

        Raises :class:`GameAlreadyOver` or :class:`IllegalMove` when the
        request cannot be played.
        """
        if self.outcome.is_terminal:
            raise GameAlreadyOver(self._over_message())

        resolved = self.resolve(move)
        position = self._position
        captured = position.make_move(resolved)

        self.outcome = self._evaluate()
        record = MoveRecord(
            move=resolved,
            fen_after=position_to_fen(position),
            outcome=self.outcome,
            captured=captured,
        )
        self.move_history.append(record)
        _LOGGER.debug("Applied %s -> %s", resolved, self.outcome)

        if self.outcome.is_terminal:
            _LOGGER.info(
                "Game over after %d plies: %s", self.ply_count, self.outcome
            )
        return record

    def resolve(self, move: Move) -> Move:
        """Match a move request against the legal moves of the current position.

        The request needs only ``from_sq``, ``to_sq`` and (for pawns reaching
        the last rank) ``promotion``; a non-NORMAL flag must agree with the
        legal move it matches.
        """
        position = self._position
        side = position.side_to_move
        piece = position.board[move.from_sq]
        if piece is None or piece.color != side:
            raise IllegalMove(f"No {side} piece on {square_name(move.from_sq)}")

        legality = LegalityFilter(position)
        candidates = [
            m
            for m in legality.generator.piece_moves(move.from_sq)
            if m.to_sq == move.to_sq
        ]
        if not candidates:
            raise IllegalMove(f"{move} is not a legal move for {piece.symbol}")

        promoting = candidates[0].promotion is not None
        if promoting and move.promotion is None:
            raise IllegalMove(f"{move} requires a promotion piece")
        if not promoting and move.promotion is not None:
            raise IllegalMove(f"{move} is not a promotion")

        matched = next(m for m in candidates if m.promotion == move.promotion)
        if move.flag != matched.flag and move.flag != MoveFlag.NORMAL:
            raise IllegalMove(f"{move} does not match flag {move.flag.name}")
        if not legality.is_legal(matched):
            if matched.is_castle:
                raise IllegalMove(f"{move}: cannot castle out of, through or into check")
            raise IllegalMove(f"{move} would leave the {side} king in check")
        return matched

    def undo_last_move(self) -> Move | None:
        """Undo the last move. Returns the undone Move, or None if empty."""
        if not self.move_history:
            return None

        self.move_history.pop()
        move = self._position.unmake_move()
        self.outcome = self._evaluate()
        _LOGGER.debug("Undid %s", move)
        return move

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self._position.side_to_move

    @property
    def is_game_over(self) -> bool:
        return self.outcome.is_terminal

    @property
    def result(self) -> GameResult:
        return self.outcome.result

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    def piece_at(self, sq: Square) -> Piece | None:
        return self._position.board[sq]

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position (empty once the game is over)."""
        if self.outcome.is_terminal:
            return []
        return LegalityFilter(self._position).legal_moves()

    def current_fen(self) -> str:
        return position_to_fen(self._position)

    def snapshot(self) -> GameSnapshot:
        position = self._position
        return GameSnapshot(
            board=position.board.as_tuple(),
            side_to_move=position.side_to_move,
            castling=position.castling,
            en_passant=position.en_passant,
            halfmove_clock=position.halfmove_clock,
            fullmove_number=position.fullmove_number,
            outcome=self.outcome,
            fen=position_to_fen(position),
        )

    def position_copy(self) -> Position:
        """Independent copy of the current position for analysis by the host."""
        return self._position.copy()

    # ── Internal ─────────────────────────────────────────────────────────

    def _evaluate(self) -> Outcome:
        config = self.config
        return Rules.outcome(
            self._position,
            fifty_move_plies=config.fifty_move_plies,
            repetition_limit=config.repetition_limit,
            insufficient_material=config.insufficient_material_draw,
        )

    def _over_message(self) -> str:
        return f"Game is already over: {self.outcome}"
