"""
Tests for the hook bus.
"""

import asyncio
import time

import pytest

from streamlog.core.exceptions import EventError, ValidationError
from streamlog.infrastructure.hooks import HookBus, HookType


def test_apply_filters_without_callbacks_returns_value(hooks):
    """Test that an unhooked filter returns its input."""
    value = {"summary": "x"}
    assert asyncio.run(hooks.apply_filters(HookType.RECORD_ARRAY, value)) is value


def test_apply_filters_chains_in_priority_order(hooks):
    """Test that filters run by priority, then registration order."""
    hooks.add_filter(HookType.QUERY_RESULTS, lambda v: v + ["late"], priority=20)
    hooks.add_filter(HookType.QUERY_RESULTS, lambda v: v + ["first"])
    hooks.add_filter(HookType.QUERY_RESULTS, lambda v: v + ["second"])
    hooks.add_filter(HookType.QUERY_RESULTS, lambda v: v + ["early"], priority=1)

    result = asyncio.run(hooks.apply_filters(HookType.QUERY_RESULTS, []))

    assert result == ["early", "first", "second", "late"]


def test_apply_filters_supports_coroutines(hooks):
    """Test that coroutine filters are awaited."""

    async def upper(value):
        return value.upper()

    hooks.add_filter(HookType.RECORD_ARRAY, upper)

    assert asyncio.run(hooks.apply_filters(HookType.RECORD_ARRAY, "abc")) == "ABC"


def test_apply_filters_passes_extra_arguments(hooks):
    """Test that extra arguments reach every filter."""
    hooks.add_filter(HookType.RECORD_ARRAY, lambda value, suffix: value + suffix)

    assert asyncio.run(hooks.apply_filters(HookType.RECORD_ARRAY, "a", "!")) == "a!"


def test_apply_filters_failure_raises_event_error(hooks):
    """Test that a failing filter surfaces as an EventError."""

    def broken(value):
        raise RuntimeError("boom")

    hooks.add_filter(HookType.RECORD_ARRAY, broken)

    with pytest.raises(EventError, match="boom"):
        asyncio.run(hooks.apply_filters(HookType.RECORD_ARRAY, {}))


def test_do_action_notifies_sync_and_async_callbacks(hooks):
    """Test that actions reach both plain and coroutine callbacks."""
    seen = []

    async def async_handler(record_id, record):
        seen.append(("async", record_id))

    hooks.add_action(HookType.POST_INSERTED, lambda record_id, record: seen.append(("sync", record_id)))
    hooks.add_action(HookType.POST_INSERTED, async_handler)

    asyncio.run(hooks.do_action(HookType.POST_INSERTED, "r1", {}))

    assert seen == [("sync", "r1"), ("async", "r1")]


def test_do_action_runs_callbacks_in_priority_order(hooks):
    """Test that actions run one at a time, lowest priority first."""
    seen = []

    def slow_early(message):
        time.sleep(0.05)
        seen.append("early")

    async def late(message):
        seen.append("late")

    hooks.add_action(HookType.POST_INSERT_ERROR, late, priority=20)
    hooks.add_action(HookType.POST_INSERT_ERROR, lambda message: seen.append("default"))
    hooks.add_action(HookType.POST_INSERT_ERROR, slow_early, priority=1)

    asyncio.run(hooks.do_action(HookType.POST_INSERT_ERROR, "failed"))

    assert seen == ["early", "default", "late"]


def test_do_action_swallows_callback_failures(hooks):
    """Test that a failing action callback does not stop the others."""
    seen = []

    def broken(message):
        raise RuntimeError("boom")

    hooks.add_action(HookType.POST_INSERT_ERROR, broken)
    hooks.add_action(HookType.POST_INSERT_ERROR, seen.append)

    asyncio.run(hooks.do_action(HookType.POST_INSERT_ERROR, "failed"))

    assert seen == ["failed"]


def test_do_action_validates_registered_schema(hooks):
    """Test that action payloads are checked against a registered schema."""
    hooks.register_schema(
        HookType.POST_INSERT_ERROR,
        {"type": "array", "items": {"type": "string"}, "minItems": 1},
    )

    asyncio.run(hooks.do_action(HookType.POST_INSERT_ERROR, "ok"))
    with pytest.raises(ValidationError):
        asyncio.run(hooks.do_action(HookType.POST_INSERT_ERROR, 42))


def test_do_action_invalid_schema_raises_validation_error(hooks):
    """Test that a malformed registered schema is reported as a ValidationError."""
    hooks.register_schema(HookType.POST_INSERTED, {"type": "no-such-type"})

    with pytest.raises(ValidationError, match="Invalid schema"):
        asyncio.run(hooks.do_action(HookType.POST_INSERTED, "r1", {}))


def test_remove_callback(hooks):
    """Test removing a registered callback."""

    def handler(value):
        return value

    hooks.add_filter(HookType.RECORD_ARRAY, handler)
    assert hooks.has_hook(HookType.RECORD_ARRAY)

    assert hooks.remove(HookType.RECORD_ARRAY, handler) is True
    assert hooks.remove(HookType.RECORD_ARRAY, handler) is False
    assert hooks.get_subscriber_count(HookType.RECORD_ARRAY) == 0


def test_clear_hooks():
    """Test clearing one hook and then all hooks."""
    bus = HookBus()
    bus.add_filter(HookType.RECORD_ARRAY, lambda v: v)
    bus.add_action(HookType.POST_INSERTED, lambda *a: None)

    bus.clear(HookType.RECORD_ARRAY)
    assert bus.get_subscriber_count(HookType.RECORD_ARRAY) == 0
    assert bus.get_subscriber_count(HookType.POST_INSERTED) == 1

    bus.clear()
    assert not bus.has_hook(HookType.POST_INSERTED)


def test_non_callable_rejected(hooks):
    """Test that registering a non-callable fails."""
    with pytest.raises(EventError):
        hooks.add_action(HookType.POST_INSERTED, "not callable")
