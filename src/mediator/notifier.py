"""EventMediator: ordered listener queues per event name, broadcast with short-circuit."""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger

from mediator.core.constants import DEFAULT_MAX_DELTA_DEPTH, DELTA_EVENT, DeltaKind
from mediator.core.errors import (
    BadListenerError,
    InvalidInputKindError,
    InvalidListenerKindError,
    ProviderDefinitionError,
)
from mediator.events import Deferred, ListenerEntry, QueueDelta, is_listener_group, to_entry
from mediator.instantiation import Instantiator

if TYPE_CHECKING:
    from mediator.config import Config


def _pairs(listeners: object) -> list[tuple[str, Any]]:
    """Normalize push_all() input to (event_name, listener) pairs."""
    if isinstance(listeners, Mapping):
        return list(listeners.items())
    if isinstance(listeners, (str, bytes, bytearray)) or not isinstance(listeners, Iterable):
        raise InvalidInputKindError(
            f"push_all() expects a mapping or an iterable of (event, listener) pairs, "
            f"got {type(listeners).__name__}",
            code="invalid_input_kind",
            details={"type": type(listeners).__name__},
        )

    pairs: list[tuple[str, Any]] = []
    for i, item in enumerate(listeners):
        if not isinstance(item, tuple) or len(item) != 2:
            raise InvalidInputKindError(
                f"push_all() item {i} is not an (event, listener) pair",
                code="invalid_input_kind",
                details={"index": i, "type": type(item).__name__},
            )
        pairs.append(item)
    return pairs


class EventMediator:
    """Central hub for in-process event broadcasting.

    Listeners are kept in one queue per event name; queue order is invocation
    order. A listener is either a callable or a string identifier that is
    materialized through the injected Instantiator each time it is reached
    during a broadcast.

    Every queue mutation is recorded as the last queue delta and announced on
    ``__mediator.delta`` with the mediator as the only argument. Delta
    broadcasts nested deeper than ``max_delta_depth`` are skipped.

    One RLock guards queues, counters and the last delta. Listeners are invoked
    outside the lock, so they may call back into the mediator.
    """

    def __init__(
        self,
        instantiator: Instantiator,
        *,
        max_delta_depth: int = DEFAULT_MAX_DELTA_DEPTH,
        delta_notifications: bool = True,
    ) -> None:
        self._instantiator = instantiator
        self._max_delta_depth = max_delta_depth
        self._delta_notifications = delta_notifications
        self._listeners: dict[str, list[ListenerEntry]] = {}
        self._broadcast_counts: defaultdict[str, int] = defaultdict(int)
        self._invocation_counts: defaultdict[str, int] = defaultdict(int)
        self._last_delta: QueueDelta | None = None
        self._lock = threading.RLock()
        self._local = threading.local()

    @classmethod
    def from_config(cls, config: Config, instantiator: Instantiator) -> EventMediator:
        """Build a mediator from config settings and push the configured listeners."""
        mediator = cls(
            instantiator,
            max_delta_depth=config.max_delta_depth,
            delta_notifications=config.delta_notifications,
        )
        mediator.push_all(config.listeners)
        return mediator

    # -- mutation -------------------------------------------------------------

    def push_all(self, listeners: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> None:
        """Push every (event, listener) pair; list values fan out per element."""
        for event_name, listener in _pairs(listeners):
            self.push(event_name, listener)

    def push(self, event_name: str, listener: Any) -> int:
        """Append listener (or each element of a listener list) to the event queue.

        Returns the new number of queued listeners for event_name.
        """
        entry = to_entry(listener)
        if entry is not None:
            with self._lock:
                queue = self._listeners.setdefault(event_name, [])
                queue.append(entry)
                size = len(queue)
            logger.debug("Pushed listener onto {} ({} queued)", event_name, size)
            self._record_delta(event_name, "push")
            return size

        if is_listener_group(listener):
            for element in listener:
                self.push(event_name, element)
            return self.count(event_name)

        raise InvalidListenerKindError(
            f"push() expects a callable, a string identifier or a list of those, "
            f"got {type(listener).__name__}",
            code="invalid_listener_kind",
            details={"event_name": event_name, "type": type(listener).__name__},
        )

    def unshift(self, event_name: str, listener: Any) -> int:
        """Prepend a single listener to the event queue. Returns the new queue length."""
        entry = to_entry(listener)
        if entry is None:
            raise InvalidListenerKindError(
                f"unshift() expects a callable or a string identifier, got {type(listener).__name__}",
                code="invalid_listener_kind",
                details={"event_name": event_name, "type": type(listener).__name__},
            )
        with self._lock:
            queue = self._listeners.setdefault(event_name, [])
            queue.insert(0, entry)
            size = len(queue)
        logger.debug("Unshifted listener onto {} ({} queued)", event_name, size)
        self._record_delta(event_name, "unshift")
        return size

    def shift(self, event_name: str) -> ListenerEntry | None:
        """Remove and return the first listener, or None if nothing is queued."""
        return self._remove(event_name, "shift", 0)

    def pop(self, event_name: str) -> ListenerEntry | None:
        """Remove and return the last listener, or None if nothing is queued."""
        return self._remove(event_name, "pop", -1)

    def _remove(self, event_name: str, kind: DeltaKind, index: int) -> ListenerEntry | None:
        with self._lock:
            queue = self._listeners.get(event_name)
            entry = queue.pop(index) if queue else None
            if queue is not None and not queue:
                del self._listeners[event_name]
        self._record_delta(event_name, kind)
        return entry

    def clear(self, event_name: str) -> None:
        """Drop all listeners for event_name."""
        with self._lock:
            removed = len(self._listeners.pop(event_name, ()))
        logger.debug("Cleared {} listener(s) from {}", removed, event_name)
        self._record_delta(event_name, "clear")

    def _record_delta(self, event_name: str, kind: DeltaKind) -> None:
        with self._lock:
            self._last_delta = QueueDelta(event_name, kind)
        if not self._delta_notifications:
            return

        depth = getattr(self._local, "delta_depth", 0)
        if depth >= self._max_delta_depth:
            logger.warning(
                "Skipping {} for {} {}: nested {} levels deep (max_delta_depth={})",
                DELTA_EVENT,
                kind,
                event_name,
                depth,
                self._max_delta_depth,
            )
            return

        self._local.delta_depth = depth + 1
        try:
            self.notify(DELTA_EVENT, self)
        finally:
            self._local.delta_depth = depth

    # -- broadcast ------------------------------------------------------------

    def notify(self, event_name: str, *args: Any) -> int:
        """Invoke the queued listeners for event_name in order with args.

        The queue is snapshotted when the broadcast starts; listeners added or
        removed while it runs take effect from the next broadcast. A listener
        returning exactly ``False`` stops the chain.

        Returns the number of listeners invoked.
        Raises BadListenerError if a deferred listener cannot be materialized.
        """
        with self._lock:
            self._broadcast_counts[event_name] += 1
            snapshot = list(self._listeners.get(event_name, ()))

        invoked = 0
        for position, entry in enumerate(snapshot):
            listener = self._materialize(event_name, position, entry)
            with self._lock:
                self._invocation_counts[event_name] += 1
            result = listener(*args)
            invoked += 1
            if result is False:
                logger.debug("{} halted by listener at position {}", event_name, position)
                break

        logger.debug("Notified {}: {}/{} listener(s) invoked", event_name, invoked, len(snapshot))
        return invoked

    def _materialize(self, event_name: str, position: int, entry: ListenerEntry) -> Any:
        """Return a callable for entry, building deferred listeners through the instantiator."""
        if not isinstance(entry, Deferred):
            return entry

        try:
            listener = self._instantiator.resolve(entry.identifier)
        except ProviderDefinitionError as exc:
            raise BadListenerError(
                f"Invalid listener ({entry.identifier}) in the {event_name!r} queue at position "
                f"{position}; instantiation failed: {exc}",
                event_name=event_name,
                position=position,
                original_error=exc,
            ) from exc

        if not callable(listener):
            raise BadListenerError(
                f"Invalid listener in the {event_name!r} queue at position {position}: "
                f"object of type {type(listener).__name__} is not callable",
                event_name=event_name,
                position=position,
            )
        return listener

    # -- read accessors -------------------------------------------------------

    def all(self, event_name: str) -> list[ListenerEntry]:
        """All queued listeners for event_name, in invocation order."""
        with self._lock:
            return list(self._listeners.get(event_name, ()))

    def first(self, event_name: str) -> ListenerEntry | None:
        with self._lock:
            queue = self._listeners.get(event_name)
            return queue[0] if queue else None

    def last(self, event_name: str) -> ListenerEntry | None:
        with self._lock:
            queue = self._listeners.get(event_name)
            return queue[-1] if queue else None

    def keys(self) -> list[str]:
        """Event names that currently have listeners queued."""
        with self._lock:
            return list(self._listeners)

    def count(self, event_name: str) -> int:
        with self._lock:
            return len(self._listeners.get(event_name, ()))

    def count_invocations(self, event_name: str) -> int:
        """Total listener invocations across all broadcasts of event_name."""
        with self._lock:
            return self._invocation_counts.get(event_name, 0)

    def count_notifications(self, event_name: str) -> int:
        """Total number of times event_name has been broadcast."""
        with self._lock:
            return self._broadcast_counts.get(event_name, 0)

    def get_last_queue_delta(self) -> QueueDelta | None:
        """(event_name, kind) of the most recent queue mutation, or None before any."""
        with self._lock:
            return self._last_delta
