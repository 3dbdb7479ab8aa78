"""
Partial Combination
===================

Combines a fixed map of keys to watchables into a single watchable of a
dict, leaving out every input that has no value yet.

Since an input can never go from having a value back to being empty, a key
that appears in the combined dict never disappears from a later one.

Example:
    ```python
    a = WatchableSubject.empty()
    b = WatchableSubject.of(1)
    combined = partial_combine_watchable({"a": a, "b": b})

    combined.get_value()  # {"b": 1}
    a.update(2)
    combined.get_value()  # {"a": 2, "b": 1}
    ```
"""

import logging
from typing import Dict, Generic, List, Mapping, TypeVar

from .util.subscriptions import Unsubscribe
from .watchable import DerivedWatchable, Watchable, WatchableSubject

K = TypeVar("K")
V = TypeVar("V")

_MISSING = object()


class PartialCombination(Generic[K, V]):
    """
    WatchableLike backing partial_combine_watchable.

    Holds a private copy of the inputs and a private leaf with the latest
    combined dict. Each watch() attaches to every input; the combined dict is
    recomputed once after all of them are attached instead of once per
    replayed input value.
    """

    def __init__(self, watchables: Mapping[K, Watchable[V]]) -> None:
        # Copy in case the caller mutates their mapping later
        self._inputs: Dict[K, Watchable[V]] = dict(watchables)
        self._subject: WatchableSubject[Dict[K, V]] = WatchableSubject.empty()
        self._active = 0
        self._update_latest()

    def _calculate_latest(self) -> Dict[K, V]:
        return {
            key: watchable.get_value()
            for key, watchable in self._inputs.items()
            if watchable.has_value()
        }

    def _update_latest(self) -> None:
        latest = self._calculate_latest()
        previous = self._subject.get_or_default({})
        for key, value in latest.items():
            if previous.get(key, _MISSING) is not value:
                self._subject.update(latest)
                return
        # No key can be missing from latest: inputs never lose their value.

    def _refresh_if_idle(self) -> None:
        # Without watchers nothing keeps the leaf current, so catch up on read.
        if self._active == 0:
            self._update_latest()

    def has_value(self) -> bool:
        self._refresh_if_idle()
        return self._subject.has_value()

    def get_value(self) -> Dict[K, V]:
        self._refresh_if_idle()
        return self._subject.get_value()

    def watch(self, watcher) -> Unsubscribe:
        unsubscribes: List[Unsubscribe] = []

        # Input replays during attachment are ignored; one recomputation
        # follows once every input is attached.
        started = False

        def make_on_input():
            # One callback per input, so a watchable listed under two keys
            # is subscribed twice rather than rejected as a duplicate.
            def on_input(_value) -> None:
                if started:
                    self._update_latest()

            return on_input

        try:
            for watchable in self._inputs.values():
                unsubscribes.append(watchable.watch(make_on_input()))
            started = True
            self._update_latest()
            # Removes its own registration if the replay raises
            unsubscribe_subject = self._subject.watch(watcher)
        except Exception:
            for unsubscribe in unsubscribes:
                unsubscribe()
            raise
        self._active += 1
        logging.debug(f"Combination of {len(self._inputs)} watchables started")

        def unsubscribe_all() -> None:
            unsubscribe_subject()
            self._active -= 1
            for unsubscribe in unsubscribes:
                unsubscribe()
            logging.debug(f"Combination of {len(self._inputs)} watchables stopped")

        return unsubscribe_all


def partial_combine_watchable(
    watchables: Mapping[K, Watchable[V]],
) -> Watchable[Dict[K, V]]:
    """
    Combine a map of watchables, omitting any that don't have a value yet.

    The returned watchable holds a dict of key to current value. It is
    populated as soon as at least one input has a value and only notifies
    when some key's value changed (by identity).

    Args:
        watchables: Mapping of keys to watchables. It is copied, so later
            changes to it have no effect.

    Returns:
        A watchable of the combined dict. An empty input mapping gives a
        watchable that already holds an empty dict.
    """
    if not watchables:
        return WatchableSubject.of({})
    return DerivedWatchable(PartialCombination(watchables))
