"""Dismissible scope guard.

The common two-state case of :class:`~statedguard.guard.ScopeGuard`: the
callback reverts the value unless the guard was dismissed first. Call
:meth:`DismissibleGuard.dismiss` once the operation has succeeded::

    with new_dismissible(tmpdir, shutil.rmtree) as guard:
        populate(guard.value)
        guard.dismiss()
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Generic, TypeVar

import statedguard.guard

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

T = TypeVar("T")


class Disposition(enum.Enum):
    ACTIVE = "active"
    DISMISSED = "dismissed"


class DismissibleGuard(Generic[T]):
    """Run *callback(value)* on close unless :meth:`dismiss` was called."""

    def __init__(self, value: T, callback: Callable[[T], None]) -> None:
        if not callable(callback):
            raise TypeError(
                f"callback must be callable, got {type(callback).__name__}"
            )

        def _revert(value: T, state: Disposition) -> None:
            if state is Disposition.ACTIVE:
                callback(value)

        self._guard: statedguard.guard.ScopeGuard[T, Disposition] = (
            statedguard.guard.ScopeGuard(value, Disposition.ACTIVE, _revert)
        )

    def dismiss(self) -> None:
        """Cancel the callback. Calling it again has no further effect."""
        self._guard.set_state(Disposition.DISMISSED)

    @property
    def state(self) -> Disposition:
        return self._guard.state

    @property
    def status(self) -> statedguard.guard.Status:
        return self._guard.status

    @property
    def dismissed(self) -> bool:
        return self.state is Disposition.DISMISSED

    @property
    def active(self) -> bool:
        return self._guard.active

    @property
    def value(self) -> T:
        return self._guard.value

    @value.setter
    def value(self, value: T) -> None:
        self._guard.value = value

    def into_inner(self) -> T:
        return self._guard.into_inner()

    def close(self) -> None:
        self._guard.close()

    def __enter__(self) -> DismissibleGuard[T]:
        self._guard.__enter__()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._guard.close()

    def __repr__(self) -> str:
        if self.active:
            return f"<DismissibleGuard state={self.state.value}>"
        return f"<DismissibleGuard {self.status.value}>"


def new_dismissible(value: T, callback: Callable[[T], None]) -> DismissibleGuard[T]:
    """Guard *value*; ``callback(value)`` runs on close unless dismissed."""
    return DismissibleGuard(value, callback)


def dismissible_action(callback: Callable[[], None]) -> DismissibleGuard[None]:
    """Guard with no value; ``callback()`` runs on close unless dismissed."""
    if not callable(callback):
        raise TypeError(
            f"callback must be callable, got {type(callback).__name__}"
        )
    return DismissibleGuard(None, lambda _value: callback())
