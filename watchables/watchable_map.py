"""
WatchableMap - Keyed Registry of Watchables
===========================================

A map of watchable values that allows for managing many individual
subscriptions. For example, if you have a set of contacts you want to be able
to watch, track them by email or ID here.

Leaves are created lazily, empty, the first time a key is touched. To combine
individual watchables into a single one, see partial_combine_watchable.
"""

import logging
import operator
from typing import (
    Callable,
    Generic,
    Iterator,
    MutableMapping,
    Optional,
    Tuple,
    TypeVar,
)

from .types import EqualityFn
from .watchable import Watchable, WatchableSubject

K = TypeVar("K")
V = TypeVar("V")

MapFactory = Callable[[], MutableMapping]

_NO_VALUE = object()


class WatchableMap(Generic[K, V]):
    """
    Map from keys to lazily created WatchableSubjects.

    Every mutation goes through the leaf's update(), so watchers only hear
    about real changes under the configured equality.

    Args:
        equality_fn: Decides whether a new value differs from the stored one.
            Also used by every leaf this map creates. Defaults to ``==``.
        map_factory: Builds the backing mapping. Defaults to ``dict``.

    Example:
        ```python
        contacts = WatchableMap()
        contacts.get_or_create("ada@example.com").watch(print)

        contacts.update_or_create_with_value("ada@example.com", "Ada")  # prints
        contacts.update_or_create_with_value("ada@example.com", "Ada")  # deduped
        ```
    """

    def __init__(
        self,
        equality_fn: EqualityFn = operator.eq,
        map_factory: MapFactory = dict,
    ) -> None:
        self._equality_fn = equality_fn
        self._underlying: MutableMapping[K, WatchableSubject[V]] = map_factory()

    def keys(self) -> Iterator[K]:
        return iter(self._underlying.keys())

    def items(self) -> Iterator[Tuple[K, Watchable[V]]]:
        return iter(self._underlying.items())

    def __iter__(self) -> Iterator[K]:
        return self.keys()

    def __len__(self) -> int:
        return len(self._underlying)

    def __contains__(self, key: object) -> bool:
        return key in self._underlying

    def get_or_create(self, key: K) -> Watchable[V]:
        return self._get_or_create_subject(key)

    def get_if_exists(self, key: K) -> Optional[Watchable[V]]:
        return self._underlying.get(key)

    def get_or_create_with_value(self, key: K, default_value: V) -> Watchable[V]:
        """Like get_or_create, but fills a still-empty leaf with default_value."""
        subject = self._get_or_create_subject(key)
        if not subject.has_value():
            subject.update(default_value)
        return subject

    def update_or_create(self, key: K, update_fn: Callable[..., V]) -> None:
        """
        Update the value at key with update_fn.

        update_fn receives the current value when there is one and is called
        with no arguments otherwise. The leaf is only updated when the result
        differs under the equality function.
        """
        self._apply(self._get_or_create_subject(key), update_fn)

    def update_if_missing(self, key: K, value: V) -> None:
        subject = self._get_or_create_subject(key)
        if not subject.has_value():
            subject.update(value)

    def update_or_create_with_value(self, key: K, value: V) -> None:
        subject = self._get_or_create_subject(key)
        current = subject.get_or_default(_NO_VALUE)
        if current is _NO_VALUE or not self._equality_fn(current, value):
            subject.update(value)

    def update_if_exists(self, key: K, update_fn: Callable[..., V]) -> None:
        """Same as update_or_create, but does nothing for an unknown key."""
        subject = self._underlying.get(key)
        if subject is not None:
            self._apply(subject, update_fn)

    def _apply(self, subject: WatchableSubject[V], update_fn: Callable[..., V]) -> None:
        if subject.has_value():
            current = subject.get_value()
            new_value = update_fn(current)
            if not self._equality_fn(current, new_value):
                subject.update(new_value)
        else:
            subject.update(update_fn())

    def _get_or_create_subject(self, key: K) -> WatchableSubject[V]:
        existing = self._underlying.get(key)
        if existing is not None:
            return existing
        logging.debug(f"Creating watchable for key {key!r}")
        subject: WatchableSubject[V] = WatchableSubject.empty(self._equality_fn)
        self._underlying[key] = subject
        return subject
