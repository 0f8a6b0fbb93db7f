"""Shared test fixtures for statedguard tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def recorder():
    """A callback that records the arguments of every call it receives."""

    class _Recorder:
        def __init__(self) -> None:
            self.calls: list[tuple] = []

        def __call__(self, *args) -> None:
            self.calls.append(args)

    return _Recorder()
