"""Session registry for hosts that serve several games at once.

The engine itself has no synchronisation.  Each :class:`GameSession` pairs an
independent :class:`GameState` with its own lock, so concurrent requests for
one game are serialised while different games never contend.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from chessrules.core.move import Move
from chessrules.game.config import RuleConfig
from chessrules.game.state import GameSnapshot, GameState, SubmitResult

_LOGGER = logging.getLogger(__name__)


@dataclass
class GameSession:
    """A game owned by one logical session.

    Attributes:
        session_id: Registry key.
        state: The game; touch it only inside :meth:`exclusive`.
        created_at: When the session was opened.
        last_activity: When a move was last submitted.
    """

    session_id: str
    state: GameState
    created_at: datetime = field(default_factory=datetime.now)
    last_activity: datetime = field(default_factory=datetime.now)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @contextmanager
    def exclusive(self) -> Iterator[GameState]:
        """Hold the session lock while working with the game directly."""
        with self._lock:
            yield self.state

    def submit_move(self, move: Move) -> SubmitResult:
        with self._lock:
            result = self.state.submit_move(move)
            self.last_activity = datetime.now()
        if not result.ok:
            _LOGGER.warning(
                "Session %s rejected %s: %s", self.session_id, move, result.error
            )
        return result

    def submit_text(self, text: str) -> SubmitResult:
        with self._lock:
            result = self.state.submit_text(text)
            self.last_activity = datetime.now()
        if not result.ok:
            _LOGGER.warning(
                "Session %s rejected %r: %s", self.session_id, text, result.error
            )
        return result

    def snapshot(self) -> GameSnapshot:
        with self._lock:
            return self.state.snapshot()


class SessionRegistry:
    """Maps session ids to independent games."""

    __slots__ = ("_sessions", "_lock", "_config")

    def __init__(self, config: RuleConfig | None = None) -> None:
        self._sessions: dict[str, GameSession] = {}
        self._lock = threading.Lock()
        self._config = config or RuleConfig.standard()

    def create(
        self, fen: str | None = None, session_id: str | None = None
    ) -> GameSession:
        """Open a new game; *session_id* defaults to a random hex id."""
        state = GameState(config=self._config, fen=fen)
        sid = session_id or uuid.uuid4().hex
        session = GameSession(session_id=sid, state=state)
        with self._lock:
            if sid in self._sessions:
                raise KeyError(f"Session already exists: {sid}")
            self._sessions[sid] = session
        _LOGGER.info("Opened session %s", sid)
        return session

    def get(self, session_id: str) -> GameSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        """Drop a session. Returns False if it was unknown."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        _LOGGER.info("Closed session %s", session_id)
        return True

    def cleanup_stale(self, max_age_seconds: float = 3600) -> int:
        """Close sessions idle for longer than *max_age_seconds*; return the count."""
        cutoff = datetime.now() - timedelta(seconds=max_age_seconds)
        with self._lock:
            stale = [
                sid
                for sid, session in self._sessions.items()
                if session.last_activity < cutoff
            ]
            for sid in stale:
                del self._sessions[sid]
        if stale:
            _LOGGER.info("Cleaned up %d stale sessions", len(stale))
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions
