"""Stated scope guard.

A :class:`ScopeGuard` owns a value and a state, and calls ``callback(value,
state)`` exactly once when it is closed. The state is replaced freely while
the guard is alive; the callback sees whichever state was set last and is
expected to branch on it::

    with ScopeGuard(conn, "opened", _teardown) as guard:
        guard.value.login()
        guard.set_state("logged_in")
        guard.value.subscribe()
        guard.set_state("ready")

Closing happens on every exit path of the ``with`` block, including early
returns and exceptions. :meth:`ScopeGuard.into_inner` hands the value back
and cancels the callback for good.
"""

from __future__ import annotations

import enum
import logging
import warnings
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

logger = logging.getLogger("statedguard.guard")

T = TypeVar("T")
S = TypeVar("S")


class Status(enum.Enum):
    """Lifecycle of a guard."""

    ARMED = "armed"
    FINALIZED = "finalized"
    EXTRACTED = "extracted"


class GuardConsumedError(RuntimeError):
    """Raised when a guard is used after it was finalized or extracted."""

    def __init__(self, operation: str, status: Status) -> None:
        super().__init__(
            f"cannot {operation}: guard already {status.value}"
        )
        self.operation = operation
        self.status = status


class ScopeGuard(Generic[T, S]):
    """Own *value* and run *callback* with it and the current state on close."""

    def __init__(self, value: T, state: S, callback: Callable[[T, S], None]) -> None:
        if not callable(callback):
            raise TypeError(
                f"callback must be callable, got {type(callback).__name__}"
            )
        self._value = value
        self._state = state
        self._callback: Callable[[T, S], None] | None = callback
        # Set last: __del__ only reports fully constructed guards
        self._status = Status.ARMED

    # -- state ------------------------------------------------------------

    def _ensure_armed(self, operation: str) -> None:
        if self._status is not Status.ARMED:
            raise GuardConsumedError(operation, self._status)

    @property
    def status(self) -> Status:
        return self._status

    @property
    def active(self) -> bool:
        """True until the guard is finalized or extracted."""
        return self._status is Status.ARMED

    @property
    def finalized(self) -> bool:
        return self._status is Status.FINALIZED

    @property
    def extracted(self) -> bool:
        return self._status is Status.EXTRACTED

    @property
    def value(self) -> T:
        """The guarded value itself, not a copy."""
        self._ensure_armed("access value")
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        self._ensure_armed("replace value")
        self._value = value

    @property
    def state(self) -> S:
        self._ensure_armed("read state")
        return self._state

    def set_state(self, state: S) -> None:
        """Replace the current state. The callback is not called here."""
        self._ensure_armed("set state")
        self._state = state

    # -- end of life ------------------------------------------------------

    def into_inner(self) -> T:
        """Return the value and cancel the callback permanently."""
        self._ensure_armed("extract value")
        value = self._value
        self._status = Status.EXTRACTED
        self._callback = None
        self._value = self._state = None  # type: ignore[assignment]
        logger.debug("Extracted value from %s; callback cancelled", _describe(value))
        return value

    def close(self) -> None:
        """Run the callback with the value and the latest state.

        Does nothing if the guard was already finalized or extracted.
        Exceptions raised by the callback propagate to the caller.
        """
        callback = self._callback
        if self._status is not Status.ARMED or callback is None:
            return
        value, state = self._value, self._state
        self._status = Status.FINALIZED
        self._callback = None
        self._value = self._state = None  # type: ignore[assignment]
        logger.debug("Finalizing %s with state %r", _describe(value), state)
        callback(value, state)

    def __enter__(self) -> ScopeGuard[T, S]:
        self._ensure_armed("enter guard")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __del__(self) -> None:
        if getattr(self, "_status", None) is not Status.ARMED:
            return
        logger.warning(
            "Guard over %s collected without being closed; callback not run",
            _describe(self._value),
        )
        warnings.warn(
            f"unclosed {self!r}", ResourceWarning, stacklevel=2, source=self
        )

    def __repr__(self) -> str:
        if self._status is Status.ARMED:
            return f"<{type(self).__name__} armed state={self._state!r}>"
        return f"<{type(self).__name__} {self._status.value}>"


def _describe(value: object) -> str:
    return type(value).__name__
