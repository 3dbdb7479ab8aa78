"""
Watchables Errors
=================

Every error here signals a programming mistake in the caller: reading an
empty watchable, or misusing a subscription handle. None of them are retried
or recovered from inside the library.
"""


class WatchableError(Exception):
    """Base class for errors raised by watchables."""

    pass


class EmptyWatchableError(WatchableError, LookupError):
    """get_value() called on a watchable that has no value yet."""

    def __init__(self) -> None:
        super().__init__(
            "You must check has_value() before accessing a watchable value."
        )


class SubscriptionError(WatchableError):
    """Misuse of a subscription registry."""

    pass


class DuplicateSubscriptionError(SubscriptionError):
    """The same callback was added twice to one registry."""

    def __init__(self, callback) -> None:
        super().__init__(f"Can't add subscription twice: {callback!r}")
        self.callback = callback


class MissingSubscriptionError(SubscriptionError):
    """Unsubscribe called for a callback that is no longer registered."""

    def __init__(self, callback) -> None:
        super().__init__(f"Did not find callback for unsubscribe: {callback!r}")
        self.callback = callback
