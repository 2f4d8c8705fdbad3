"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from chessrules.game.state import GameState


@pytest.fixture
def game() -> Iterator[GameState]:
    """A fresh game from the standard starting position."""
    yield GameState()


@pytest.fixture(autouse=True)
def _engine_debug_logging(caplog: pytest.LogCaptureFixture) -> Iterator[None]:
    """Record engine DEBUG output so a failing test shows the move log."""
    with caplog.at_level(logging.DEBUG, logger="chessrules"):
        yield
