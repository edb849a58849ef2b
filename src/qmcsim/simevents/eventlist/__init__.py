"""Event lists: ordered containers of scheduled events."""

from qmcsim.simevents.eventlist.base import EventList
from qmcsim.simevents.eventlist.doubly_linked import DoublyLinked
from qmcsim.simevents.eventlist.redblack import RedblackTree

__all__ = ["EventList", "DoublyLinked", "RedblackTree"]
