"""
Shared pytest configuration.

This file ensures the project root is on sys.path so that
`import chatsession` works consistently in all tests, and provides the
fake clock and store fixtures used across the session tests.
"""

import sys
from pathlib import Path

import pytest


# Ensure project root is importable for test modules.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from chatsession.sessions import SessionStore  # noqa: E402


DEFAULT_PROMPT = "You are a test assistant."


class FakeClock:
    """
    Manually advanced clock returning epoch seconds.
    """

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> SessionStore:
    return SessionStore(default_system_prompt=DEFAULT_PROMPT, clock=clock)
