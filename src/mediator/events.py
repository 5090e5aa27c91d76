"""Listener entry types and the mediator interface."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, NamedTuple, Protocol, Union, runtime_checkable

from mediator.core.constants import DeltaKind


@runtime_checkable
class Listener(Protocol):
    """Anything invocable with the broadcast arguments."""

    def __call__(self, *args: Any) -> Any: ...


@dataclass(frozen=True)
class Deferred:
    """Listener stored by identifier; materialized through an Instantiator at broadcast time."""

    identifier: str

    def __str__(self) -> str:
        return self.identifier


ListenerEntry = Union[Listener, Deferred]


class QueueDelta(NamedTuple):
    """Most recent queue mutation: which event, and which operation."""

    event_name: str
    kind: DeltaKind


def to_entry(listener: object) -> ListenerEntry | None:
    """Return the stored form of a single listener, or None if it is not one."""
    if isinstance(listener, Deferred):
        return listener
    if isinstance(listener, str):
        return Deferred(listener)
    if callable(listener):
        return listener  # type: ignore[return-value]
    return None


def is_listener_group(listener: object) -> bool:
    """True for non-string iterables that push() fans out element by element."""
    if isinstance(listener, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(listener, Iterable)


class Mediator(Protocol):
    """Event mediator interface: ordered listener queues per event name."""

    def push_all(self, listeners: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> None: ...

    def push(self, event_name: str, listener: Any) -> int: ...

    def unshift(self, event_name: str, listener: Any) -> int: ...

    def shift(self, event_name: str) -> ListenerEntry | None: ...

    def pop(self, event_name: str) -> ListenerEntry | None: ...

    def clear(self, event_name: str) -> None: ...

    def notify(self, event_name: str, *args: Any) -> int: ...

    def all(self, event_name: str) -> list[ListenerEntry]: ...

    def first(self, event_name: str) -> ListenerEntry | None: ...

    def last(self, event_name: str) -> ListenerEntry | None: ...

    def keys(self) -> list[str]: ...

    def count(self, event_name: str) -> int: ...

    def count_invocations(self, event_name: str) -> int: ...

    def count_notifications(self, event_name: str) -> int: ...

    def get_last_queue_delta(self) -> QueueDelta | None: ...
