"""
Watchables - Minimal Synchronous Reactive Values
================================================

A watchable holds an optional value and pushes updates to its watchers,
replaying the current value to every new watcher. Build small reactive
graphs by deriving (map), combining (partial_combine_watchable) and
capturing (snapshot, to_future) values, without a scheduler or event loop.
"""

from .combine import PartialCombination, partial_combine_watchable
from .errors import (
    DuplicateSubscriptionError,
    EmptyWatchableError,
    MissingSubscriptionError,
    SubscriptionError,
    WatchableError,
)
from .types import Box, WatchableFunctions, WatchableLike, WatcherFn
from .util import Subscriptions, Unsubscribe, memoize_latest
from .watchable import DerivedWatchable, Watchable, WatchableSubject
from .watchable_map import WatchableMap

__version__ = "0.1.0"

__all__ = [
    # Core watchables
    "Watchable",
    "WatchableSubject",
    "DerivedWatchable",
    "WatchableLike",
    "WatchableFunctions",
    # Combination and keyed registry
    "partial_combine_watchable",
    "PartialCombination",
    "WatchableMap",
    # Utilities
    "Subscriptions",
    "Unsubscribe",
    "memoize_latest",
    "Box",
    "WatcherFn",
    # Exceptions
    "WatchableError",
    "EmptyWatchableError",
    "SubscriptionError",
    "DuplicateSubscriptionError",
    "MissingSubscriptionError",
]
