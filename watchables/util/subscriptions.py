"""
Subscription Registry
=====================

This module provides Subscriptions, the ordered callback registry that sits
underneath every WatchableSubject.

Callbacks are kept in insertion order and tracked by identity, so any
callable can be registered, including unhashable ones and distinct objects
that happen to compare equal. Notification passes iterate over a
point-in-time copy, so a callback may subscribe or unsubscribe (itself or
others) while a pass is running without skipping anyone or corrupting the
iteration.
"""

from typing import Callable, Dict, Generic, Iterator, List, TypeVar

from ..errors import DuplicateSubscriptionError, MissingSubscriptionError

CallbackType = TypeVar("CallbackType", bound=Callable)

Unsubscribe = Callable[[], None]


class Subscriptions(Generic[CallbackType]):
    """
    Ordered set of callbacks with strict add/remove bookkeeping.

    Adding the same callback object twice raises DuplicateSubscriptionError
    and removing one that is already gone raises MissingSubscriptionError.

    Example:
        ```python
        subs = Subscriptions()
        unsubscribe = subs.add(print)
        for callback in subs:
            callback("hello")
        unsubscribe()
        ```
    """

    __slots__ = ("_callbacks",)

    def __init__(self) -> None:
        # id(callback) -> callback; holding the callback keeps its id reserved
        self._callbacks: Dict[int, CallbackType] = {}

    def add(self, fn: CallbackType) -> Unsubscribe:
        """Register fn and return a one-shot handle that removes it."""
        key = id(fn)
        if key in self._callbacks:
            raise DuplicateSubscriptionError(fn)
        self._callbacks[key] = fn

        def unsubscribe() -> None:
            if self._callbacks.get(key) is not fn:
                raise MissingSubscriptionError(fn)
            del self._callbacks[key]

        return unsubscribe

    def is_empty(self) -> bool:
        return not self._callbacks

    def snapshot(self) -> List[CallbackType]:
        """Materialize the current members for a notification pass."""
        return list(self._callbacks.values())

    def __iter__(self) -> Iterator[CallbackType]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._callbacks)

    def __contains__(self, fn: object) -> bool:
        return self._callbacks.get(id(fn)) is fn
