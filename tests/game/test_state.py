"""Tests for GameState: turn order, submission and outcome tracking."""

import logging

import pytest
from helpers import play

from chessrules.core.enums import (
    CastlingRights,
    Color,
    DrawReason,
    GameResult,
    MoveFlag,
    OutcomeKind,
    PieceType,
)
from chessrules.core.errors import (
    CorruptedStateError,
    GameAlreadyOver,
    IllegalMove,
    InvalidPosition,
    InvalidSquare,
)
from chessrules.core.move import Move
from chessrules.core.notation import STARTING_FEN
from chessrules.core.outcome import Outcome
from chessrules.core.piece import Piece
from chessrules.core.types import (
    A7, A8, E1, E2, E3, E4, E5, F1, G1, H1,
    parse_square,
)
from chessrules.game.config import RuleConfig
from chessrules.game.state import GameState

SCHOLARS_MATE = ("e2e4", "e7e5", "f1c4", "b8c6", "d1h5", "g8f6", "h5f7")
ROOK_SHUFFLE = ("a1a2", "h8h7", "a2a1", "h7h8")
ROOK_ENDGAME = "7r/4k3/8/8/8/8/4K3/R7 w - - 0 1"


class TestSetup:
    def test_initial_state(self, game: GameState) -> None:
        assert game.side_to_move == Color.WHITE
        assert game.outcome == Outcome.in_progress()
        assert game.ply_count == 0
        assert game.current_fen() == STARTING_FEN
        assert len(game.legal_moves()) == 20

    def test_from_fen(self) -> None:
        fen = "4k3/8/8/8/8/8/8/4K2R w K - 0 1"
        game = GameState(fen=fen)
        assert game.start_fen == fen
        assert game.current_fen() == fen

    def test_invalid_fen(self) -> None:
        with pytest.raises(InvalidPosition):
            GameState(fen="8/8/8/8/8/8/8/8 w - - 0 1")

    def test_fen_with_capturable_king_rejected(self) -> None:
        with pytest.raises(InvalidPosition, match="in check"):
            GameState(fen="4k3/8/8/8/8/8/4R3/4K3 w - - 0 1")

    def test_starting_outcome_evaluated(self) -> None:
        game = GameState(fen="R2k4/8/3K4/8/8/8/8/8 b - - 0 1")
        assert game.outcome == Outcome.checkmate(Color.BLACK)
        assert game.is_game_over
        assert game.legal_moves() == []

    def test_reset(self, game: GameState) -> None:
        play(game, "e2e4", "e7e5")
        game.setup()
        assert game.ply_count == 0
        assert game.current_fen() == STARTING_FEN


class TestSubmitMove:
    def test_legal_move_accepted(self, game: GameState) -> None:
        result = game.submit_move(Move(E2, E4))
        assert result.ok
        assert result
        assert result.error is None
        assert result.state is not None
        assert result.state.side_to_move == Color.BLACK
        assert result.record is not None
        assert result.record.move == Move(E2, E4, MoveFlag.DOUBLE_PAWN)
        assert result.record.move.uci == "e2e4"

    def test_illegal_move_rejected_unchanged(self, game: GameState) -> None:
        result = game.submit_move(Move(E2, E5))
        assert not result.ok
        assert not result
        assert isinstance(result.error, IllegalMove)
        assert result.state is None
        assert game.current_fen() == STARTING_FEN
        assert game.ply_count == 0

    def test_wrong_side_rejected(self, game: GameState) -> None:
        result = game.submit_move(Move(parse_square("e7"), E5))
        assert isinstance(result.error, IllegalMove)
        assert "white" in str(result.error)

    def test_empty_square_rejected(self, game: GameState) -> None:
        result = game.submit_move(Move(E4, E5))
        assert isinstance(result.error, IllegalMove)

    def test_turns_alternate(self, game: GameState) -> None:
        play(game, "e2e4")
        assert game.side_to_move == Color.BLACK
        result = game.submit_move(Move(parse_square("d2"), parse_square("d4")))
        assert not result.ok
        play(game, "e7e5")
        assert game.side_to_move == Color.WHITE

    def test_pinned_piece_rejected(self) -> None:
        game = GameState(fen="4r1k1/8/8/8/8/8/4N3/4K3 w - - 0 1")
        result = game.submit_move(Move(E2, parse_square("c3")))
        assert isinstance(result.error, IllegalMove)
        assert "check" in str(result.error)

    def test_contradicting_flag_rejected(self, game: GameState) -> None:
        result = game.submit_move(Move(E2, E4, MoveFlag.EN_PASSANT))
        assert isinstance(result.error, IllegalMove)

    def test_matching_flag_accepted(self, game: GameState) -> None:
        assert game.submit_move(Move(E2, E4, MoveFlag.DOUBLE_PAWN)).ok

    def test_apply_move_raises(self, game: GameState) -> None:
        with pytest.raises(IllegalMove):
            game.apply_move(Move(E2, E5))

    def test_rejection_logged(
        self, game: GameState, caplog: pytest.LogCaptureFixture
    ) -> None:
        game.submit_move(Move(E2, E5))
        assert any("Rejected e2e5" in r.getMessage() for r in caplog.records)

    def test_applied_move_logged(
        self, game: GameState, caplog: pytest.LogCaptureFixture
    ) -> None:
        play(game, "e2e4")
        messages = [
            r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG
        ]
        assert any("Applied e2e4 -> in progress" in m for m in messages)


class TestScholarsMate:
    def test_checkmate(self, game: GameState) -> None:
        result = play(game, *SCHOLARS_MATE)
        assert game.outcome == Outcome.checkmate(Color.BLACK)
        assert game.outcome.kind == OutcomeKind.CHECKMATE
        assert game.is_game_over
        assert game.result == GameResult.WHITE_WINS
        assert result.record is not None
        assert result.record.move.uci == "h5f7"
        assert result.record.was_capture
        assert result.record.was_check

    def test_game_over_logged(
        self, game: GameState, caplog: pytest.LogCaptureFixture
    ) -> None:
        play(game, *SCHOLARS_MATE)
        assert any(
            r.levelno == logging.INFO and "Game over after 7 plies" in r.getMessage()
            for r in caplog.records
        )

    def test_no_moves_after_mate(self, game: GameState) -> None:
        play(game, *SCHOLARS_MATE)
        result = game.submit_move(Move(parse_square("e8"), parse_square("e7")))
        assert isinstance(result.error, GameAlreadyOver)
        assert game.ply_count == 7

    def test_apply_after_mate_raises(self, game: GameState) -> None:
        play(game, *SCHOLARS_MATE)
        with pytest.raises(GameAlreadyOver, match="already over"):
            game.apply_move(Move(parse_square("a7"), parse_square("a6")))

    def test_check_annotation(self, game: GameState) -> None:
        play(game, "e2e4", "f7f6", "d2d4", "g7g5")
        result = play(game, "d1h5")
        assert game.outcome.kind == OutcomeKind.CHECKMATE
        assert result.record is not None and result.record.was_check

    def test_check_not_terminal(self, game: GameState) -> None:
        play(game, "e2e4", "f7f6", "d1h5")
        assert game.outcome == Outcome.check(Color.BLACK)
        assert not game.is_game_over
        assert game.legal_moves()


class TestEnPassant:
    def test_capture_removes_passed_pawn(self) -> None:
        game = GameState(fen="4k3/8/8/8/3p4/8/4P3/4K3 w - - 0 1")
        play(game, "e2e4")
        assert game.snapshot().en_passant == E3
        result = play(game, "d4e3")
        assert game.piece_at(E4) is None
        assert game.piece_at(E3) == Piece(Color.BLACK, PieceType.PAWN)
        assert result.record is not None
        assert result.record.move.flag == MoveFlag.EN_PASSANT
        assert result.record.captured == Piece(Color.WHITE, PieceType.PAWN)
        assert result.record.move.uci == "d4e3"

    def test_right_expires(self) -> None:
        game = GameState(fen="4k3/8/8/8/3p4/8/4P3/4K3 w - - 0 1")
        play(game, "e2e4", "e8e7", "e1f1")
        result = game.submit_move(Move(parse_square("d4"), E3))
        assert isinstance(result.error, IllegalMove)


class TestCastling:
    def test_kingside_moves_rook(self) -> None:
        game = GameState(fen="4k3/8/8/8/8/8/8/4K2R w K - 0 1")
        result = game.submit_move(Move(E1, G1, MoveFlag.CASTLE_KINGSIDE))
        assert result.ok
        assert game.piece_at(G1) == Piece(Color.WHITE, PieceType.KING)
        assert game.piece_at(F1) == Piece(Color.WHITE, PieceType.ROOK)
        assert game.piece_at(H1) is None
        assert result.state is not None
        assert result.state.castling == CastlingRights.NONE
        assert result.record is not None and result.record.move.uci == "e1g1"

    def test_bare_request_resolves_to_castle(self) -> None:
        game = GameState(fen="4k3/8/8/8/8/8/8/4K2R w K - 0 1")
        play(game, "e1g1")
        assert game.piece_at(F1) == Piece(Color.WHITE, PieceType.ROOK)

    def test_through_check_rejected(self) -> None:
        game = GameState(fen="4kr2/8/8/8/8/8/8/4K2R w K - 0 1")
        result = game.submit_move(Move(E1, G1))
        assert isinstance(result.error, IllegalMove)
        assert "castle" in str(result.error)
        assert game.piece_at(E1) == Piece(Color.WHITE, PieceType.KING)

    def test_rights_lost_after_rook_moves(self) -> None:
        game = GameState(fen="4k3/8/8/8/8/8/8/4K2R w K - 0 1")
        play(game, "h1h2", "e8d8", "h2h1", "d8e8")
        result = game.submit_move(Move(E1, G1))
        assert not result.ok


class TestPromotion:
    FEN = "4k3/P7/8/8/8/8/8/4K3 w - - 0 1"

    def test_missing_kind_rejected(self) -> None:
        game = GameState(fen=self.FEN)
        result = game.submit_move(Move(A7, A8))
        assert isinstance(result.error, IllegalMove)
        assert "promotion" in str(result.error)
        assert game.piece_at(A7) == Piece(Color.WHITE, PieceType.PAWN)

    def test_underpromotion_to_knight(self) -> None:
        game = GameState(fen=self.FEN)
        result = game.submit_move(Move(A7, A8, promotion=PieceType.KNIGHT))
        assert result.ok
        assert game.piece_at(A8) == Piece(Color.WHITE, PieceType.KNIGHT)
        assert game.outcome == Outcome.in_progress()

    def test_queen_promotion_checks(self) -> None:
        game = GameState(fen=self.FEN)
        play(game, "a7a8q")
        assert game.piece_at(A8) == Piece(Color.WHITE, PieceType.QUEEN)
        assert game.outcome == Outcome.check(Color.BLACK)

    def test_promotion_on_non_promoting_move(self, game: GameState) -> None:
        result = game.submit_move(Move(E2, E4, promotion=PieceType.QUEEN))
        assert isinstance(result.error, IllegalMove)

    def test_invalid_kind_rejected_at_construction(self) -> None:
        with pytest.raises(IllegalMove):
            Move(A7, A8, promotion=PieceType.KING)


class TestDraws:
    def test_fifty_move_rule(self) -> None:
        game = GameState(
            config=RuleConfig(repetition_limit=1000), fen=ROOK_ENDGAME
        )
        for _ in range(24):
            play(game, *ROOK_SHUFFLE)
        play(game, *ROOK_SHUFFLE[:3])
        assert game.ply_count == 99
        assert not game.is_game_over
        play(game, ROOK_SHUFFLE[3])
        assert game.ply_count == 100
        assert game.outcome == Outcome.draw(DrawReason.FIFTY_MOVE)
        assert game.result == GameResult.DRAW

    def test_threefold_repetition(self) -> None:
        game = GameState(fen=ROOK_ENDGAME)
        play(game, *ROOK_SHUFFLE)
        assert not game.is_game_over
        play(game, *ROOK_SHUFFLE)
        assert game.ply_count == 8
        assert game.outcome == Outcome.draw(DrawReason.REPETITION)

    def test_fivefold_with_fide_preset(self) -> None:
        game = GameState(config=RuleConfig.fide_automatic(), fen=ROOK_ENDGAME)
        for _ in range(3):
            play(game, *ROOK_SHUFFLE)
        assert not game.is_game_over
        play(game, *ROOK_SHUFFLE)
        assert game.outcome.reason == DrawReason.REPETITION

    def test_stalemate(self) -> None:
        game = GameState(fen="7k/8/5K2/8/8/8/8/6Q1 w - - 0 1")
        play(game, "g1g6")
        assert game.outcome == Outcome.stalemate()
        assert game.result == GameResult.DRAW

    def test_insufficient_material_opt_in(self) -> None:
        fen = "4k3/8/8/8/8/8/3r4/4K3 w - - 0 1"
        standard = GameState(fen=fen)
        play(standard, "e1d2")
        assert not standard.is_game_over

        casual = GameState(config=RuleConfig.casual(), fen=fen)
        play(casual, "e1d2")
        assert casual.outcome == Outcome.draw(DrawReason.INSUFFICIENT_MATERIAL)


class TestSubmitText:
    def test_coordinate_text(self, game: GameState) -> None:
        assert game.submit_text("e2e4").ok
        assert game.piece_at(E4) == Piece(Color.WHITE, PieceType.PAWN)

    def test_promotion_text(self) -> None:
        game = GameState(fen="4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        assert game.submit_text("a7a8n").ok
        assert game.piece_at(A8) == Piece(Color.WHITE, PieceType.KNIGHT)

    def test_illegal_text_is_a_result(self, game: GameState) -> None:
        result = game.submit_text("e1e2")
        assert isinstance(result.error, IllegalMove)

    def test_malformed_text_raises(self, game: GameState) -> None:
        with pytest.raises(InvalidSquare):
            game.submit_text("zz")

    @pytest.mark.parametrize("text", ["Nf3", "e4", "O-O"])
    def test_algebraic_text_not_accepted(self, game: GameState, text: str) -> None:
        with pytest.raises(InvalidSquare):
            game.submit_text(text)
        assert game.ply_count == 0

    def test_text_after_game_over(self, game: GameState) -> None:
        play(game, *SCHOLARS_MATE)
        assert isinstance(game.submit_text("e8e7").error, GameAlreadyOver)


class TestUndo:
    def test_undo_restores_position(self, game: GameState) -> None:
        play(game, "e2e4", "e7e5")
        undone = game.undo_last_move()
        assert undone == Move(parse_square("e7"), E5, MoveFlag.DOUBLE_PAWN)
        assert game.side_to_move == Color.BLACK
        assert game.ply_count == 1
        assert game.piece_at(E5) is None

    def test_undo_empty(self, game: GameState) -> None:
        assert game.undo_last_move() is None

    def test_undo_reopens_finished_game(self, game: GameState) -> None:
        play(game, *SCHOLARS_MATE)
        game.undo_last_move()
        assert not game.is_game_over
        assert game.submit_text("h5f7").ok
        assert game.is_game_over


class TestSnapshot:
    def test_snapshot_fields(self, game: GameState) -> None:
        play(game, "e2e4")
        snap = game.snapshot()
        assert snap.side_to_move == Color.BLACK
        assert snap.en_passant == E3
        assert snap.halfmove_clock == 0
        assert snap.fullmove_number == 1
        assert snap.piece_at(E4) == Piece(Color.WHITE, PieceType.PAWN)
        assert snap.fen == game.current_fen()

    def test_snapshot_is_detached(self, game: GameState) -> None:
        snap = game.snapshot()
        play(game, "e2e4")
        assert snap.piece_at(E2) == Piece(Color.WHITE, PieceType.PAWN)
        assert snap.side_to_move == Color.WHITE

    def test_to_dict(self, game: GameState) -> None:
        play(game, "e2e4")
        data = game.snapshot().to_dict()
        assert data["side_to_move"] == "black"
        assert data["castling"] == "KQkq"
        assert data["en_passant"] == "e3"
        assert data["board"]["e4"] == "P"
        assert "e2" not in data["board"]
        assert data["outcome"] == {"kind": "in_progress", "color": None, "reason": None}

    def test_to_dict_draw(self) -> None:
        game = GameState(fen="7k/8/5K2/8/8/8/8/6Q1 w - - 0 1")
        play(game, "g1g6")
        assert game.snapshot().to_dict()["outcome"]["kind"] == "stalemate"

    def test_history_records(self, game: GameState) -> None:
        play(game, "e2e4", "d7d5", "e4d5")
        played = [record.move.uci for record in game.move_history]
        assert played == ["e2e4", "d7d5", "e4d5"]
        assert game.move_history[-1].was_capture
        assert game.move_history[0].fen_after.startswith("rnbqkbnr/pppppppp/8/8/4P3")

    def test_position_copy_is_independent(self, game: GameState) -> None:
        copy = game.position_copy()
        copy.make_move(Move(E2, E4, MoveFlag.DOUBLE_PAWN))
        assert game.piece_at(E2) == Piece(Color.WHITE, PieceType.PAWN)


class TestCorruption:
    def test_missing_king_propagates(self, game: GameState) -> None:
        game._position.board.remove(parse_square("e8"))
        with pytest.raises(CorruptedStateError):
            game.submit_move(Move(E2, E4))
