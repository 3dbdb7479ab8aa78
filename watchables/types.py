"""
Watchables Types
================

Protocol-based interface for the read-only watchable contract, plus the
small helper types shared by the implementations.

Protocols are structural: any object with has_value, get_value and watch can
be wrapped into a full Watchable with DerivedWatchable, without inheriting
from anything.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Protocol, TypeVar, runtime_checkable

from .util.subscriptions import Unsubscribe

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

WatcherFn = Callable[[T], None]
EqualityFn = Callable[[Any, Any], bool]


@runtime_checkable
class WatchableLike(Protocol[T_co]):
    """
    The three operations every watchable provides.

    - has_value(): whether a value is currently present. Once True it stays True.
    - get_value(): the current value; only valid when has_value() is True.
    - watch(watcher): register for updates; a present value is replayed
      synchronously before watch() returns. Returns a one-shot unsubscribe.
    """

    def has_value(self) -> bool: ...

    def get_value(self) -> T_co: ...

    def watch(self, watcher: Callable[[Any], None]) -> Unsubscribe: ...


@dataclass(frozen=True)
class WatchableFunctions(Generic[T]):
    """A WatchableLike built from three plain callables."""

    has_value: Callable[[], bool]
    get_value: Callable[[], T]
    watch: Callable[[WatcherFn], Unsubscribe]


class Box(Generic[T]):
    """Holder for a present value, so that None can be a legitimate value."""

    __slots__ = ("current",)

    def __init__(self, current: T) -> None:
        self.current = current

    def __repr__(self) -> str:
        return f"Box({self.current!r})"
