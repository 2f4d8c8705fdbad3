"""Position constants and small helpers shared by the test modules."""

from __future__ import annotations

from chessrules.core.notation import parse_coordinate_move
from chessrules.game.state import GameState, SubmitResult

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
POS3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"
POS4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"
POS5 = "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8"

# Positions with castling, en passant, promotions and pins to sweep properties over.
SAMPLE_FENS = (
    "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
    KIWIPETE,
    POS3,
    POS4,
    POS5,
    "rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3",
    "4k3/8/8/8/3p4/8/4P3/4K3 w - - 0 1",
    "r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1",
)


def play(game: GameState, *moves: str) -> SubmitResult:
    """Submit coordinate moves in order; fail the test on the first rejection."""
    result = SubmitResult()
    for text in moves:
        result = game.submit_move(parse_coordinate_move(text))
        assert result.ok, f"{text} rejected: {result.error}"
    return result
