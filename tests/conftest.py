"""
Shared pytest fixtures and configuration for watchables tests.
"""

import pytest

from watchables import WatchableMap, WatchableSubject


@pytest.fixture
def empty_subject():
    """Provide a fresh empty leaf."""
    return WatchableSubject.empty()


@pytest.fixture
def recorder():
    """Provide a watcher that records every value it receives."""

    class Recorder:
        def __init__(self):
            self.values = []

        def __call__(self, value):
            self.values.append(value)

    return Recorder()


@pytest.fixture
def watchable_map():
    """Provide a fresh WatchableMap with default equality."""
    return WatchableMap()
