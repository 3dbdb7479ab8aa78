"""
Watchables - Synchronous Reactive Values
========================================

This module provides the core watchable abstraction:

- Watchable: abstract read-only value with derived operations (map,
  with_hooks, snapshot, to_future) built on has_value/get_value/watch
- DerivedWatchable: a Watchable that delegates to any WatchableLike
- WatchableSubject: the mutable leaf, the source of truth of a graph

Everything is synchronous. watch() replays a present value before it
returns, and update() notifies every watcher in subscription order before it
returns. An update() issued from inside a watcher runs its own notification
pass to completion before the outer pass resumes.

Example:
    ```python
    count = WatchableSubject.of(1)
    label = count.map(lambda n: f"{n} items")

    unsubscribe = label.watch(print)  # prints "1 items"
    count.update(2)                   # prints "2 items"
    count.update(2)                   # same value: no notification
    unsubscribe()
    ```
"""

import logging
import operator
from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Callable, Generic, Optional, TypeVar, Union

from .errors import EmptyWatchableError
from .types import Box, EqualityFn, WatchableFunctions, WatchableLike, WatcherFn
from .util.memoize import memoize_latest
from .util.subscriptions import Subscriptions, Unsubscribe

T = TypeVar("T")
U = TypeVar("U")
D = TypeVar("D")


class Watchable(ABC, Generic[T]):
    """
    Read-only reactive value.

    Subclasses implement has_value, get_value and watch; every other
    operation here is written in terms of those three.

    Presence is monotonic: once has_value() returns True it keeps returning
    True for the lifetime of the instance.
    """

    @abstractmethod
    def has_value(self) -> bool:
        """If this watchable has a current value."""

    @abstractmethod
    def get_value(self) -> T:
        """
        Get the current value.

        Raises:
            EmptyWatchableError: If has_value() is False.
        """

    @abstractmethod
    def watch(self, watcher: WatcherFn) -> Unsubscribe:
        """
        Watch this for updates. The current value, if any, is replayed
        synchronously before returning.

        Returns:
            A one-shot unsubscribe callable. Calling it twice raises
            MissingSubscriptionError.
        """

    def get_or_default(self, default: D) -> Union[T, D]:
        return self.get_value() if self.has_value() else default

    def map(self, mapper: Callable[[T], U]) -> "Watchable[U]":
        """
        Transform this watchable into another one.

        The mapper is memoized on the identity of its latest input, so
        repeated reads of an unchanged source return the very same object
        and an expensive mapper only runs once per source value.
        """
        memoized = memoize_latest(mapper)

        def watch(watcher: WatcherFn) -> Unsubscribe:
            return self.watch(lambda value: watcher(memoized(value)))

        return DerivedWatchable(
            WatchableFunctions(
                has_value=self.has_value,
                get_value=lambda: memoized(self.get_value()),
                watch=watch,
            )
        )

    def with_hooks(
        self, setup: Callable[[], None], teardown: Callable[[], None]
    ) -> "Watchable[T]":
        """
        Returns a watchable that calls setup when its first watcher attaches
        and teardown when its last watcher detaches.

        Watchers attaching and detaching in between never retrigger either
        hook. The count is kept on the returned watchable, not on this one.

        Useful for tracking usage of a watchable, or for starting and stopping
        whatever feeds it with updates.
        """
        count = 0
        # True between a successful setup() and the matching teardown()
        is_set_up = False

        def release() -> None:
            nonlocal count, is_set_up
            count -= 1
            if count == 0 and is_set_up:
                is_set_up = False
                logging.debug(
                    f"Last watcher detached from {type(self).__name__}, running teardown"
                )
                teardown()

        def watch(watcher: WatcherFn) -> Unsubscribe:
            nonlocal count, is_set_up
            is_first = count == 0
            count += 1
            try:
                if is_first:
                    logging.debug(
                        f"First watcher attached to {type(self).__name__}, running setup"
                    )
                    setup()
                    is_set_up = True
                unsubscribe = self.watch(watcher)
            except Exception:
                release()
                raise

            def unsubscribe_hooked() -> None:
                unsubscribe()
                release()

            return unsubscribe_hooked

        return DerivedWatchable(
            WatchableFunctions(
                has_value=self.has_value,
                get_value=self.get_value,
                watch=watch,
            )
        )

    def to_future(self) -> "Future[T]":
        """
        Convert this watchable into a future resolved with its first value.

        If a value is already present the returned future is already done.
        Otherwise it resolves inside the update() that first populates this
        watchable, and its done callbacks run right there.
        """
        future: "Future[T]" = Future()

        def resolve(value: T) -> None:
            logging.debug(f"Future of {type(self).__name__} resolved")
            future.set_result(value)

        self._on_first_value(resolve)
        return future

    def snapshot(self) -> "Watchable[T]":
        """
        Returns either the current value as an independent watchable, or an
        empty watchable that is populated once with the first value this one
        produces and never changes after that.

        Errors raised by the snapshot's watchers propagate out of the
        update() that populates it.
        """
        if self.has_value():
            return WatchableSubject.of(self.get_value())
        delayed: WatchableSubject[T] = WatchableSubject.empty()
        self._on_first_value(delayed.update)
        return delayed

    def _on_first_value(self, callback: Callable[[T], None]) -> None:
        """Call callback with the first value only, then stop watching."""
        resolved = False
        unsubscribe: Optional[Unsubscribe] = None

        def on_value(value: T) -> None:
            nonlocal resolved
            if resolved:
                return
            resolved = True
            # When watch() replays synchronously the handle does not exist
            # yet; it is released once watch() returns.
            if unsubscribe is not None:
                unsubscribe()
            callback(value)

        unsubscribe = self.watch(on_value)
        if resolved:
            unsubscribe()

    def __repr__(self) -> str:
        if self.has_value():
            return f"{type(self).__name__}({self.get_value()!r})"
        return f"{type(self).__name__}(<empty>)"


class DerivedWatchable(Watchable[T]):
    """
    A Watchable that forwards everything to a WatchableLike source.

    The source is held for as long as the derived watchable lives. Used to
    build map, with_hooks and combination results without subclassing the
    mutable leaf.
    """

    __slots__ = ("_source",)

    def __init__(self, source: WatchableLike[T]) -> None:
        self._source = source

    def has_value(self) -> bool:
        return self._source.has_value()

    def get_value(self) -> T:
        return self._source.get_value()

    def watch(self, watcher: WatcherFn) -> Unsubscribe:
        return self._source.watch(watcher)


class WatchableSubject(Watchable[T]):
    """
    The mutable version of a watchable.

    Create one with WatchableSubject.empty() or WatchableSubject.of(value)
    and change it with update(). Hand out the subject typed as Watchable to
    give consumers a read-only view.

    Example:
        ```python
        name = WatchableSubject.empty()
        seen = []
        name.watch(seen.append)

        name.update("Alice")
        name.update("Alice")  # deduped
        name.update("Bob")
        assert seen == ["Alice", "Bob"]
        ```
    """

    __slots__ = ("_subscriptions", "_current", "_equals")

    def __init__(
        self, current: Optional[Box[T]] = None, equals: EqualityFn = operator.is_
    ) -> None:
        self._subscriptions: Subscriptions[WatcherFn] = Subscriptions()
        self._current = current
        self._equals = equals

    @classmethod
    def empty(cls, equals: EqualityFn = operator.is_) -> "WatchableSubject[T]":
        return cls(None, equals)

    @classmethod
    def of(cls, value: T, equals: EqualityFn = operator.is_) -> "WatchableSubject[T]":
        return cls(Box(value), equals)

    def has_value(self) -> bool:
        return self._current is not None

    def get_value(self) -> T:
        if self._current is None:
            raise EmptyWatchableError()
        return self._current.current

    def update(self, value: T) -> None:
        """
        Set the current value and notify every watcher in subscription order.

        A value equal to the stored one (identity by default) is a no-op.
        Watchers added during the pass do not receive this value; watchers
        removed during the pass are still called for it.
        """
        if self._current is not None and self._equals(self._current.current, value):
            return
        self._current = Box(value)
        for watcher in self._subscriptions.snapshot():
            watcher(value)

    def watch(self, watcher: WatcherFn) -> Unsubscribe:
        unsubscribe = self._subscriptions.add(watcher)
        if self._current is not None:
            try:
                watcher(self._current.current)
            except Exception:
                # The caller never receives the handle, so don't keep the watcher
                unsubscribe()
                raise
        return unsubscribe

    def has_watchers(self) -> bool:
        return not self._subscriptions.is_empty()
