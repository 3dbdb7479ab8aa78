"""Unit tests for the mutable leaf watchable."""

import operator

import pytest

from watchables import (
    DuplicateSubscriptionError,
    EmptyWatchableError,
    MissingSubscriptionError,
    Watchable,
    WatchableSubject,
)


@pytest.mark.unit
@pytest.mark.subject
def test_empty_subject_has_no_value(empty_subject):
    """A fresh empty leaf has no value and refuses get_value"""
    assert not empty_subject.has_value()

    with pytest.raises(EmptyWatchableError):
        empty_subject.get_value()


@pytest.mark.unit
@pytest.mark.subject
def test_empty_watchable_error_is_a_lookup_error(empty_subject):
    with pytest.raises(LookupError):
        empty_subject.get_value()


@pytest.mark.unit
@pytest.mark.subject
def test_value_can_be_read_synchronously(empty_subject):
    """update() makes the value readable right away"""
    empty_subject.update(4)
    assert empty_subject.has_value()
    assert empty_subject.get_value() == 4

    empty_subject.update(5)
    assert empty_subject.has_value()
    assert empty_subject.get_value() == 5


@pytest.mark.unit
@pytest.mark.subject
def test_of_creates_populated_subject():
    subject = WatchableSubject.of("initial")

    assert subject.has_value()
    assert subject.get_value() == "initial"


@pytest.mark.unit
@pytest.mark.subject
def test_none_is_a_real_value():
    """None counts as a present value"""
    subject = WatchableSubject.of(None)

    assert subject.has_value()
    assert subject.get_value() is None


@pytest.mark.unit
@pytest.mark.subject
def test_get_or_default(empty_subject):
    """get_or_default returns the fallback only while empty"""
    fallback = object()
    assert empty_subject.get_or_default(fallback) is fallback

    empty_subject.update(1)
    assert empty_subject.get_or_default(fallback) == 1


@pytest.mark.unit
@pytest.mark.subject
def test_watchers_receive_each_update_until_unsubscribed(empty_subject, recorder):
    """Watcher sees every update, then nothing after unsubscribing"""
    unsubscribe = empty_subject.watch(recorder)
    assert recorder.values == []

    empty_subject.update(4)
    empty_subject.update(5)
    assert recorder.values == [4, 5]

    unsubscribe()
    empty_subject.update(6)
    assert recorder.values == [4, 5]


@pytest.mark.unit
@pytest.mark.subject
def test_watch_replays_current_value_synchronously(recorder):
    """A present value is delivered before watch() returns"""
    subject = WatchableSubject.of(1)

    subject.watch(recorder)

    assert recorder.values == [1]


@pytest.mark.unit
@pytest.mark.subject
def test_same_value_update_does_not_notify(empty_subject, recorder):
    """Updating with the stored object again is a no-op"""
    value = object()
    empty_subject.watch(recorder)

    empty_subject.update(value)
    empty_subject.update(value)

    assert recorder.values == [value]


@pytest.mark.unit
@pytest.mark.subject
def test_default_dedupe_uses_identity_not_equality(empty_subject, recorder):
    """Equal but distinct objects are treated as a change"""
    empty_subject.watch(recorder)

    empty_subject.update([1])
    empty_subject.update([1])

    assert len(recorder.values) == 2


@pytest.mark.unit
@pytest.mark.subject
def test_custom_equality_controls_dedupe(recorder):
    subject = WatchableSubject.empty(equals=operator.eq)
    subject.watch(recorder)

    subject.update([1])
    subject.update([1])
    subject.update([2])

    assert recorder.values == [[1], [2]]


@pytest.mark.unit
@pytest.mark.subject
def test_watchers_are_notified_in_subscription_order(empty_subject):
    order = []
    empty_subject.watch(lambda v: order.append(("a", v)))
    empty_subject.watch(lambda v: order.append(("b", v)))
    empty_subject.watch(lambda v: order.append(("c", v)))

    empty_subject.update(1)

    assert order == [("a", 1), ("b", 1), ("c", 1)]


@pytest.mark.unit
@pytest.mark.subject
def test_watching_with_same_callback_twice_raises(empty_subject, recorder):
    empty_subject.watch(recorder)

    with pytest.raises(DuplicateSubscriptionError):
        empty_subject.watch(recorder)


@pytest.mark.unit
@pytest.mark.subject
def test_double_unsubscribe_raises(empty_subject, recorder):
    unsubscribe = empty_subject.watch(recorder)
    unsubscribe()

    with pytest.raises(MissingSubscriptionError):
        unsubscribe()


@pytest.mark.unit
@pytest.mark.subject
def test_watcher_unsubscribing_another_during_pass_still_completes_pass(
    empty_subject,
):
    """Removal during a pass does not skip the removed watcher for that pass"""
    seen = []
    handles = {}

    def first(value):
        seen.append(("first", value))
        if "second" in handles:
            handles.pop("second")()

    def second(value):
        seen.append(("second", value))

    empty_subject.watch(first)
    handles["second"] = empty_subject.watch(second)

    empty_subject.update(1)
    empty_subject.update(2)

    assert seen == [("first", 1), ("second", 1), ("first", 2)]


@pytest.mark.unit
@pytest.mark.subject
def test_watcher_added_during_pass_only_gets_replay(empty_subject):
    """A watcher added mid-pass gets its replay, not the in-flight delivery"""
    late_values = []

    def late(value):
        late_values.append(value)

    def adder(value):
        if not late_values:
            empty_subject.watch(late)

    empty_subject.watch(adder)
    empty_subject.update(1)

    assert late_values == [1]

    empty_subject.update(2)
    assert late_values == [1, 2]


@pytest.mark.unit
@pytest.mark.subject
def test_watcher_may_unsubscribe_itself(empty_subject):
    seen = []
    handle = {}

    def once(value):
        seen.append(value)
        handle["unsubscribe"]()

    handle["unsubscribe"] = empty_subject.watch(once)
    empty_subject.update(1)
    empty_subject.update(2)

    assert seen == [1]


@pytest.mark.unit
@pytest.mark.subject
def test_reentrant_update_runs_nested_pass_first(empty_subject):
    """An update() from inside a watcher is delivered before the outer pass resumes"""
    seen = []

    def bumper(value):
        seen.append(("bumper", value))
        if value == 1:
            empty_subject.update(2)

    def observer(value):
        seen.append(("observer", value))

    empty_subject.watch(bumper)
    empty_subject.watch(observer)

    empty_subject.update(1)

    assert seen == [
        ("bumper", 1),
        ("bumper", 2),
        ("observer", 2),
        ("observer", 1),
    ]
    assert empty_subject.get_value() == 2


@pytest.mark.unit
@pytest.mark.subject
def test_watcher_exception_propagates_from_update(empty_subject):
    def broken(value):
        raise ValueError("boom")

    empty_subject.watch(broken)

    with pytest.raises(ValueError, match="boom"):
        empty_subject.update(1)
    assert empty_subject.get_value() == 1


@pytest.mark.unit
@pytest.mark.subject
def test_subject_is_a_watchable():
    assert isinstance(WatchableSubject.of(1), Watchable)


@pytest.mark.unit
@pytest.mark.subject
def test_repr_shows_presence():
    assert repr(WatchableSubject.of(3)) == "WatchableSubject(3)"
    assert repr(WatchableSubject.empty()) == "WatchableSubject(<empty>)"


@pytest.mark.unit
@pytest.mark.subject
def test_has_watchers(empty_subject, recorder):
    assert not empty_subject.has_watchers()

    unsubscribe = empty_subject.watch(recorder)
    assert empty_subject.has_watchers()

    unsubscribe()
    assert not empty_subject.has_watchers()


@pytest.mark.unit
@pytest.mark.subject
def test_watcher_failing_on_replay_is_not_left_registered():
    """A watcher that raises during replay is removed before the error surfaces"""
    subject = WatchableSubject.of(1)
    calls = []

    def broken(value):
        calls.append(value)
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        subject.watch(broken)

    assert not subject.has_watchers()
    subject.update(2)
    assert calls == [1]
