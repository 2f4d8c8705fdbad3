"""Game management layer — state machine, rule configuration, sessions.

Quick start::

    from chessrules.core import Move, parse_square
    from chessrules.game import GameState

    game = GameState()
    result = game.submit_move(Move(parse_square("e2"), parse_square("e4")))
    if not result.ok:
        print(result.error)
"""

from chessrules.game.config import RuleConfig
from chessrules.game.session import GameSession, SessionRegistry
from chessrules.game.state import GameSnapshot, GameState, MoveRecord, SubmitResult

__all__ = [
    "GameSession",
    "GameSnapshot",
    "GameState",
    "MoveRecord",
    "RuleConfig",
    "SessionRegistry",
    "SubmitResult",
]
