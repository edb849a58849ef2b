"""
Event list interface.

An event list keeps scheduled events sorted by (time, priority); events
with equal keys leave in insertion order unless `add_first`, `add_before`
or `add_after` place them explicitly. Lookups of a reference event are by
identity.

Lists are single-writer structures and take no locks. Iterators are
fail-fast: any structural change made after the iterator was created
raises ConcurrentModificationError on the next step.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterator, Union

from qmcsim.errors import ConcurrentModificationError

if TYPE_CHECKING:
    from qmcsim.simevents.event import Event

EventKey = tuple[float, float]
EventClass = Union[type, str]


def event_key(ev: Event) -> EventKey:
    return (ev.time, ev.priority)


def is_of_class(ev: Event, cls: EventClass) -> bool:
    """Exact class match, by class object or by class name."""
    if isinstance(cls, str):
        return type(ev).__name__ == cls or f"{type(ev).__module__}.{type(ev).__qualname__}" == cls
    return type(ev) is cls


class EventList(ABC):
    """Abstract base class for event lists."""

    def __init__(self) -> None:
        self._mod_count = 0

    def _modified(self) -> None:
        self._mod_count += 1

    def _check(self, expected: int) -> None:
        if self._mod_count != expected:
            raise ConcurrentModificationError(f"{type(self).__name__} modified during iteration")

    def is_empty(self) -> bool:
        return len(self) == 0

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def clear(self) -> None:
        """Remove all events."""
        ...

    @abstractmethod
    def add(self, ev: Event) -> None:
        """Insert `ev` after all events whose key is less than or equal to its own."""
        ...

    @abstractmethod
    def add_first(self, ev: Event) -> None:
        """Insert `ev` ahead of the events sharing its key."""
        ...

    @abstractmethod
    def add_before(self, ev: Event, other: Event) -> None:
        """Insert `ev` immediately before `other`; raise EventNotFoundError if `other` is absent."""
        ...

    @abstractmethod
    def add_after(self, ev: Event, other: Event) -> None:
        """Insert `ev` immediately after `other`; raise EventNotFoundError if `other` is absent."""
        ...

    @abstractmethod
    def get_first(self) -> Event | None:
        """Return the next event to occur, or None if the list is empty."""
        ...

    def get_first_of_class(self, cls: EventClass) -> Event | None:
        """Return the first event whose class is exactly `cls` (a class or a class name)."""
        for ev in self:
            if is_of_class(ev, cls):
                return ev
        return None

    @abstractmethod
    def remove(self, ev: Event) -> None:
        """Remove `ev`; raise EventNotFoundError if it is not in the list."""
        ...

    @abstractmethod
    def remove_first(self) -> Event | None:
        """Remove and return the next event to occur, or None if the list is empty."""
        ...

    def __iter__(self) -> Iterator[Event]:
        return self._iterate(self._mod_count)

    @abstractmethod
    def _iterate(self, expected: int) -> Iterator[Event]:
        """Yield events in order, calling `_check(expected)` after every yield."""
        ...

    def __str__(self) -> str:
        lines = [f"Contents of the event list {type(self).__name__}:"]
        for ev in self:
            lines.append(f"{ev.time:12.7g}, {ev.priority:8.4g} : {ev}")
        return "\n".join(lines)
