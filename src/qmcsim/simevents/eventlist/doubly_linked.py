"""
Doubly-linked event list.

Insertion scans backward from the tail, since new events are usually
scheduled near the end of the list. Removing the first event is O(1).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator

from qmcsim.errors import EventNotFoundError
from qmcsim.simevents.eventlist.base import EventList, event_key

if TYPE_CHECKING:
    from qmcsim.simevents.event import Event


class _Node:
    __slots__ = ("ev", "prev", "next")

    def __init__(self, ev: Event) -> None:
        self.ev = ev
        self.prev: _Node | None = None
        self.next: _Node | None = None


class DoublyLinked(EventList):
    """Event list stored as a doubly-linked list of nodes."""

    def __init__(self) -> None:
        super().__init__()
        self._first: _Node | None = None
        self._last: _Node | None = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._first is None

    def clear(self) -> None:
        if self._first is None:
            return
        self._first = None
        self._last = None
        self._size = 0
        self._modified()

    def _link_after(self, node: _Node | None, new: _Node) -> None:
        """Link `new` after `node`, or at the head when `node` is None."""
        if node is None:
            new.prev = None
            new.next = self._first
            if self._first is not None:
                self._first.prev = new
            else:
                self._last = new
            self._first = new
        else:
            new.prev = node
            new.next = node.next
            node.next = new
            if new.next is not None:
                new.next.prev = new
            else:
                self._last = new
        self._size += 1
        self._modified()

    def _find(self, ev: Event) -> _Node:
        """Scan backward from the tail for the node holding `ev`."""
        key = event_key(ev)
        node = self._last
        while node is not None and node.ev is not ev and event_key(node.ev) >= key:
            node = node.prev
        if node is None or node.ev is not ev:
            raise EventNotFoundError(f"Event not in list: {ev}")
        return node

    def add(self, ev: Event) -> None:
        key = event_key(ev)
        node = self._last
        while node is not None and key < event_key(node.ev):
            node = node.prev
        self._link_after(node, _Node(ev))

    def add_first(self, ev: Event) -> None:
        # Forward scan: schedule_next() puts events at the head.
        key = event_key(ev)
        node = self._first
        while node is not None and event_key(node.ev) < key:
            node = node.next
        self._link_after(self._last if node is None else node.prev, _Node(ev))

    def add_before(self, ev: Event, other: Event) -> None:
        node = self._find(other)
        self._link_after(node.prev, _Node(ev))

    def add_after(self, ev: Event, other: Event) -> None:
        node = self._find(other)
        self._link_after(node, _Node(ev))

    def get_first(self) -> Event | None:
        return None if self._first is None else self._first.ev

    def _unlink(self, node: _Node) -> None:
        if node.prev is not None:
            node.prev.next = node.next
        else:
            self._first = node.next
        if node.next is not None:
            node.next.prev = node.prev
        else:
            self._last = node.prev
        node.prev = None
        node.next = None
        self._size -= 1
        self._modified()

    def remove(self, ev: Event) -> None:
        self._unlink(self._find(ev))

    def remove_first(self) -> Event | None:
        node = self._first
        if node is None:
            return None
        self._unlink(node)
        return node.ev

    def _iterate(self, expected: int) -> Iterator[Event]:
        node = self._first
        while node is not None:
            yield node.ev
            self._check(expected)
            node = node.next
