"""
Red-black tree event list.

One tree node per distinct (time, priority) key; each node holds a FIFO
deque of the events sharing that key. Nodes live in parallel arrays and
are addressed by integer handles. Handle 0 is the black NIL sentinel, and
released handles go to a free list for reuse.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Iterator

from qmcsim.errors import EventNotFoundError
from qmcsim.simevents.eventlist.base import EventKey, EventList, event_key

if TYPE_CHECKING:
    from qmcsim.simevents.event import Event

NIL = 0


class RedblackTree(EventList):
    """
    Event list stored in a red-black tree keyed by (time, priority).

    Insertion and removal of a key are O(log k) for k distinct keys.
    Events added with `add_before` or `add_after` join the node of the
    reference event, so they should carry the same key (Event's
    schedule_before and schedule_after ensure this).
    """

    def __init__(self) -> None:
        super().__init__()
        self._reset_arena()

    def _reset_arena(self) -> None:
        self._key: list[EventKey | None] = [None]
        self._events: list[deque | None] = [None]
        self._left = [NIL]
        self._right = [NIL]
        self._parent = [NIL]
        self._red = [False]
        self._free: list[int] = []
        self._root = NIL
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def clear(self) -> None:
        self._reset_arena()
        self._modified()

    # ---------------------------------------------------------------- arena

    def _alloc(self, key: EventKey, ev: Event) -> int:
        if self._free:
            x = self._free.pop()
            self._key[x] = key
            self._events[x] = deque([ev])
            self._left[x] = self._right[x] = self._parent[x] = NIL
            self._red[x] = True
            return x
        self._key.append(key)
        self._events.append(deque([ev]))
        self._left.append(NIL)
        self._right.append(NIL)
        self._parent.append(NIL)
        self._red.append(True)
        return len(self._key) - 1

    def _release(self, x: int) -> None:
        self._key[x] = None
        self._events[x] = None
        self._free.append(x)

    # --------------------------------------------------------------- search

    def _find(self, key: EventKey) -> int:
        x = self._root
        while x != NIL:
            k = self._key[x]
            if key < k:
                x = self._left[x]
            elif k < key:
                x = self._right[x]
            else:
                return x
        return NIL

    def _minimum(self, x: int) -> int:
        while self._left[x] != NIL:
            x = self._left[x]
        return x

    def _successor(self, x: int) -> int:
        if self._right[x] != NIL:
            return self._minimum(self._right[x])
        y = self._parent[x]
        while y != NIL and x == self._right[y]:
            x = y
            y = self._parent[y]
        return y

    # ------------------------------------------------------------ rotations

    def _rotate_left(self, x: int) -> None:
        left, right, parent = self._left, self._right, self._parent
        y = right[x]
        right[x] = left[y]
        if left[y] != NIL:
            parent[left[y]] = x
        parent[y] = parent[x]
        if parent[x] == NIL:
            self._root = y
        elif x == left[parent[x]]:
            left[parent[x]] = y
        else:
            right[parent[x]] = y
        left[y] = x
        parent[x] = y

    def _rotate_right(self, x: int) -> None:
        left, right, parent = self._left, self._right, self._parent
        y = left[x]
        left[x] = right[y]
        if right[y] != NIL:
            parent[right[y]] = x
        parent[y] = parent[x]
        if parent[x] == NIL:
            self._root = y
        elif x == right[parent[x]]:
            right[parent[x]] = y
        else:
            left[parent[x]] = y
        right[y] = x
        parent[x] = y

    # ------------------------------------------------------------ insertion

    def _insert(self, ev: Event, front: bool) -> None:
        key = event_key(ev)
        y = NIL
        x = self._root
        while x != NIL:
            y = x
            k = self._key[x]
            if key < k:
                x = self._left[x]
            elif k < key:
                x = self._right[x]
            else:
                if front:
                    self._events[x].appendleft(ev)
                else:
                    self._events[x].append(ev)
                return
        z = self._alloc(key, ev)
        self._parent[z] = y
        if y == NIL:
            self._root = z
        elif key < self._key[y]:
            self._left[y] = z
        else:
            self._right[y] = z
        self._insert_fixup(z)

    def _insert_fixup(self, z: int) -> None:
        left, right, parent, red = self._left, self._right, self._parent, self._red
        while red[parent[z]]:
            p = parent[z]
            g = parent[p]
            if p == left[g]:
                y = right[g]
                if red[y]:
                    red[p] = False
                    red[y] = False
                    red[g] = True
                    z = g
                else:
                    if z == right[p]:
                        z = p
                        self._rotate_left(z)
                        p = parent[z]
                        g = parent[p]
                    red[p] = False
                    red[g] = True
                    self._rotate_right(g)
            else:
                y = left[g]
                if red[y]:
                    red[p] = False
                    red[y] = False
                    red[g] = True
                    z = g
                else:
                    if z == left[p]:
                        z = p
                        self._rotate_right(z)
                        p = parent[z]
                        g = parent[p]
                    red[p] = False
                    red[g] = True
                    self._rotate_left(g)
        red[self._root] = False

    # ------------------------------------------------------------- deletion

    def _transplant(self, u: int, v: int) -> None:
        parent = self._parent
        if parent[u] == NIL:
            self._root = v
        elif u == self._left[parent[u]]:
            self._left[parent[u]] = v
        else:
            self._right[parent[u]] = v
        parent[v] = parent[u]

    def _delete(self, z: int) -> None:
        left, right, parent, red = self._left, self._right, self._parent, self._red
        y = z
        y_was_red = red[y]
        if left[z] == NIL:
            x = right[z]
            self._transplant(z, right[z])
        elif right[z] == NIL:
            x = left[z]
            self._transplant(z, left[z])
        else:
            y = self._minimum(right[z])
            y_was_red = red[y]
            x = right[y]
            if parent[y] == z:
                parent[x] = y
            else:
                self._transplant(y, right[y])
                right[y] = right[z]
                parent[right[y]] = y
            self._transplant(z, y)
            left[y] = left[z]
            parent[left[y]] = y
            red[y] = red[z]
        if not y_was_red:
            self._delete_fixup(x)
        self._release(z)

    def _delete_fixup(self, x: int) -> None:
        left, right, parent, red = self._left, self._right, self._parent, self._red
        while x != self._root and not red[x]:
            if x == left[parent[x]]:
                w = right[parent[x]]
                if red[w]:
                    red[w] = False
                    red[parent[x]] = True
                    self._rotate_left(parent[x])
                    w = right[parent[x]]
                if not red[left[w]] and not red[right[w]]:
                    red[w] = True
                    x = parent[x]
                else:
                    if not red[right[w]]:
                        red[left[w]] = False
                        red[w] = True
                        self._rotate_right(w)
                        w = right[parent[x]]
                    red[w] = red[parent[x]]
                    red[parent[x]] = False
                    red[right[w]] = False
                    self._rotate_left(parent[x])
                    x = self._root
            else:
                w = left[parent[x]]
                if red[w]:
                    red[w] = False
                    red[parent[x]] = True
                    self._rotate_right(parent[x])
                    w = left[parent[x]]
                if not red[right[w]] and not red[left[w]]:
                    red[w] = True
                    x = parent[x]
                else:
                    if not red[left[w]]:
                        red[right[w]] = False
                        red[w] = True
                        self._rotate_left(w)
                        w = left[parent[x]]
                    red[w] = red[parent[x]]
                    red[parent[x]] = False
                    red[left[w]] = False
                    self._rotate_right(parent[x])
                    x = self._root
        red[x] = False

    # ----------------------------------------------------------- event list

    def add(self, ev: Event) -> None:
        self._insert(ev, front=False)
        self._size += 1
        self._modified()

    def add_first(self, ev: Event) -> None:
        self._insert(ev, front=True)
        self._size += 1
        self._modified()

    def _locate(self, ev: Event) -> tuple[int, int]:
        """Return (node handle, position in its deque) of `ev`."""
        x = self._find(event_key(ev))
        if x != NIL:
            for k, listed in enumerate(self._events[x]):
                if listed is ev:
                    return x, k
        raise EventNotFoundError(f"Event not in list: {ev}")

    def add_before(self, ev: Event, other: Event) -> None:
        x, k = self._locate(other)
        self._events[x].insert(k, ev)
        self._size += 1
        self._modified()

    def add_after(self, ev: Event, other: Event) -> None:
        x, k = self._locate(other)
        self._events[x].insert(k + 1, ev)
        self._size += 1
        self._modified()

    def get_first(self) -> Event | None:
        if self._root == NIL:
            return None
        return self._events[self._minimum(self._root)][0]

    def remove(self, ev: Event) -> None:
        x, k = self._locate(ev)
        events = self._events[x]
        del events[k]
        if not events:
            self._delete(x)
        self._size -= 1
        self._modified()

    def remove_first(self) -> Event | None:
        if self._root == NIL:
            return None
        x = self._minimum(self._root)
        events = self._events[x]
        ev = events.popleft()
        if not events:
            self._delete(x)
        self._size -= 1
        self._modified()
        return ev

    def _iterate(self, expected: int) -> Iterator[Event]:
        if self._root == NIL:
            return
        x = self._minimum(self._root)
        while x != NIL:
            for ev in self._events[x]:
                yield ev
                self._check(expected)
            x = self._successor(x)

    # -------------------------------------------------------------- checks

    def _black_height(self, x: int) -> int:
        """Black height of the subtree at `x`; raise AssertionError if a red-black rule is broken."""
        if x == NIL:
            return 1
        left, right = self._left[x], self._right[x]
        if self._red[x] and (self._red[left] or self._red[right]):
            raise AssertionError(f"red node {x} has a red child")
        if left != NIL and not self._key[left] < self._key[x]:
            raise AssertionError(f"left child of node {x} is out of order")
        if right != NIL and not self._key[x] < self._key[right]:
            raise AssertionError(f"right child of node {x} is out of order")
        hl = self._black_height(left)
        hr = self._black_height(right)
        if hl != hr:
            raise AssertionError(f"unequal black heights under node {x}")
        return hl + (0 if self._red[x] else 1)

    def check_invariants(self) -> None:
        """Verify the red-black properties and the event count."""
        if self._red[self._root]:
            raise AssertionError("root is red")
        self._black_height(self._root)
        count = 0
        x = self._minimum(self._root) if self._root != NIL else NIL
        while x != NIL:
            count += len(self._events[x])
            x = self._successor(x)
        if count != self._size:
            raise AssertionError(f"size {self._size} does not match {count} stored events")
