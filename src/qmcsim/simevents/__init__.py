"""Discrete-event simulation: events, event lists and the simulator."""

from qmcsim.simevents.event import Event
from qmcsim.simevents.eventlist import DoublyLinked, EventList, RedblackTree
from qmcsim.simevents.simulator import UNSCHEDULED, Simulator

__all__ = ["Event", "EventList", "DoublyLinked", "RedblackTree", "Simulator", "UNSCHEDULED"]
