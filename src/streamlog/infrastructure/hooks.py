"""
Hook bus for observing and rewriting records in transit.

This module implements the extension points of the record store. Host code
registers callbacks on named hooks:
- Filter hooks pass a value through every callback in priority order, each
  callback receiving the previous callback's return value
- Action hooks notify every callback of an occurrence; callback failures are
  logged and never reach the caller
- Action payloads can be checked against a registered JSON schema

Callbacks may be plain functions or coroutine functions.
"""

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from jsonschema import SchemaError
from jsonschema import ValidationError as JsonSchemaError
from jsonschema import validate

from ..core.exceptions import EventError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10


class HookType(Enum):
    """
    Hooks fired by the record store.

    ``RECORD_ARRAY`` and ``QUERY_RESULTS`` are filters; ``POST_INSERTED`` and
    ``POST_INSERT_ERROR`` are actions.
    """

    RECORD_ARRAY = "record_array"
    QUERY_RESULTS = "query_results"
    POST_INSERTED = "post_inserted"
    POST_INSERT_ERROR = "post_insert_error"


class HookBus:
    """
    Registry and dispatcher for filter and action hooks.

    Callbacks are kept per hook as ``(priority, sequence, callback)`` entries so
    lower priorities run first and equal priorities keep registration order.

    Attributes:
        subscribers (Dict[HookType, List[Tuple[int, int, Callable]]]): Registered callbacks
        schemas (Dict[HookType, Dict[str, Any]]): JSON schemas for action payloads
    """

    def __init__(self) -> None:
        self.subscribers: Dict[HookType, List[Tuple[int, int, Callable[..., Any]]]] = {
            hook: [] for hook in HookType
        }
        self.schemas: Dict[HookType, Dict[str, Any]] = {}
        self._sequence = 0

    def add_filter(
        self, hook: HookType, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> None:
        """
        Register a filter callback.

        Args:
            hook: Hook to attach to
            callback: Function receiving the current value and returning the new one
            priority: Lower values run earlier

        Raises:
            EventError: If callback is not callable
        """
        self._subscribe(hook, callback, priority)

    def add_action(
        self, hook: HookType, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> None:
        """
        Register an action callback.

        Args:
            hook: Hook to attach to
            callback: Function receiving the action arguments
            priority: Lower values run earlier

        Raises:
            EventError: If callback is not callable
        """
        self._subscribe(hook, callback, priority)

    def _subscribe(self, hook: HookType, callback: Callable[..., Any], priority: int) -> None:
        if not callable(callback):
            raise EventError(f"Callback for {hook.value} is not callable")

        logger.debug(f"Adding subscriber for: {hook.value}")
        self._sequence += 1
        self.subscribers[hook].append((priority, self._sequence, callback))
        self.subscribers[hook].sort(key=lambda entry: (entry[0], entry[1]))

    def remove(self, hook: HookType, callback: Callable[..., Any]) -> bool:
        """
        Remove a callback from a hook.

        Args:
            hook: Hook to detach from
            callback: Previously registered callback

        Returns:
            True if the callback was removed, False otherwise
        """
        logger.debug(f"Removing subscriber for: {hook.value}")
        for entry in self.subscribers[hook]:
            if entry[2] == callback:
                self.subscribers[hook].remove(entry)
                return True
        return False

    def has_hook(self, hook: HookType) -> bool:
        return bool(self.subscribers[hook])

    def get_subscriber_count(self, hook: HookType) -> int:
        return len(self.subscribers[hook])

    def clear(self, hook: Optional[HookType] = None) -> None:
        """
        Clear callbacks for one hook or for all hooks.

        Args:
            hook: Hook to clear. If None, clears every hook.
        """
        if hook:
            self.subscribers[hook] = []
        else:
            self.subscribers = {hook_type: [] for hook_type in HookType}

    def register_schema(self, hook: HookType, schema: Dict[str, Any]) -> None:
        """
        Register a JSON schema for validating an action payload.

        The payload validated is the list of positional action arguments.

        Args:
            hook: Action hook the schema applies to
            schema: JSON Schema definition
        """
        self.schemas[hook] = schema

    async def apply_filters(self, hook: HookType, value: Any, *args: Any) -> Any:
        """
        Pass a value through every filter callback.

        Args:
            hook: Filter hook to apply
            value: Initial value
            *args: Extra arguments handed to every callback

        Returns:
            The value returned by the last callback, or ``value`` if none are registered

        Raises:
            EventError: If a callback raises
        """
        for _, _, callback in list(self.subscribers[hook]):
            try:
                if inspect.iscoroutinefunction(callback):
                    value = await callback(value, *args)
                else:
                    value = callback(value, *args)
            except Exception as e:
                logger.error(f"Error applying filter {hook.value}: {str(e)}")
                raise EventError(f"Filter {hook.value} failed: {str(e)}") from e
        return value

    async def do_action(self, hook: HookType, *args: Any) -> None:
        """
        Notify every action callback.

        Args:
            hook: Action hook to fire
            *args: Arguments handed to every callback

        Raises:
            ValidationError: If the arguments fail the hook's registered schema,
                or the registered schema is itself invalid
        """
        self._validate_payload(hook, list(args))

        # Awaited one at a time, in priority order
        for _, _, callback in list(self.subscribers[hook]):
            try:
                if inspect.iscoroutinefunction(callback):
                    await callback(*args)
                else:
                    await asyncio.to_thread(callback, *args)
            except Exception as e:
                logger.error(f"Error calling subscriber for {hook.value}: {str(e)}")

    def _validate_payload(self, hook: HookType, payload: List[Any]) -> None:
        schema = self.schemas.get(hook)
        if schema:
            try:
                validate(instance=payload, schema=schema)
            except JsonSchemaError as e:
                raise ValidationError(f"Hook payload validation failed: {e.message}") from e
            except SchemaError as e:
                raise ValidationError(f"Invalid schema registered for {hook.value}: {e.message}") from e
