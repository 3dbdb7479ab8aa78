"""
Watchables Utils
================

Small building blocks shared by the watchable implementations.

- Subscriptions: ordered callback registry with copy-before-iterate traversal
- memoize_latest: single-slot, identity-keyed memoization
"""

from .memoize import memoize_latest
from .subscriptions import Subscriptions, Unsubscribe

__all__ = [
    "Subscriptions",
    "Unsubscribe",
    "memoize_latest",
]
