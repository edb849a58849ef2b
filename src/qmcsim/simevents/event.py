"""
Event - something that happens at a given simulation time.

Subclasses implement `actions()`, called by the simulator when the event
fires. An event is in at most one event list at a time; its time and
priority cannot be changed while it is scheduled.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from qmcsim.errors import EventNotFoundError, IllegalStateError
from qmcsim.simevents.eventlist.base import EventClass
from qmcsim.simevents.simulator import UNSCHEDULED, Simulator


class Event(ABC):
    """
    Abstract base class for events.

    Events are ordered by time, then priority (lower first). Events sharing
    both run in the order they were scheduled.
    """

    def __init__(self, sim: Simulator | None = None) -> None:
        self._sim = sim if sim is not None else Simulator.default()
        self._time = UNSCHEDULED
        self._priority = 1.0

    @abstractmethod
    def actions(self) -> None:
        """Executed when the event fires."""
        ...

    def is_scheduled(self) -> bool:
        return self._time > -1.0

    def _require_unscheduled(self, what: str) -> None:
        if self.is_scheduled():
            raise IllegalStateError(f"Unable to {what}, event already scheduled")

    def schedule(self, delay: float) -> None:
        """Schedule this event `delay` time units from now."""
        if delay < 0.0:
            raise ValueError("Cannot schedule in the past.")
        self._require_unscheduled("schedule")
        self._time = self._sim.time() + delay
        self._sim.event_list.add(self)

    def schedule_next(self) -> None:
        """Schedule this event as the very next one, at the current time."""
        self._require_unscheduled("schedule")
        self._time = self._sim.time()
        self._priority = 0.0
        self._sim.event_list.add_first(self)

    def schedule_before(self, other: Event) -> None:
        """Schedule this event just before `other`, at the same time and priority."""
        self._schedule_beside(other, self._sim.event_list.add_before)

    def schedule_after(self, other: Event) -> None:
        """Schedule this event just after `other`, at the same time and priority."""
        self._schedule_beside(other, self._sim.event_list.add_after)

    def _schedule_beside(self, other: Event, insert: Callable[[Event, Event], None]) -> None:
        self._require_unscheduled("schedule")
        priority = self._priority
        self._time = other.time
        self._priority = other.priority
        try:
            insert(self, other)
        except EventNotFoundError:
            # `other` is not listed; leave this event unscheduled.
            self._time = UNSCHEDULED
            self._priority = priority
            raise

    def reschedule(self, delay: float) -> None:
        """Move a scheduled event to `delay` time units from now."""
        if delay < 0.0:
            raise ValueError("Cannot schedule in the past.")
        if not self.is_scheduled():
            raise IllegalStateError("Event not scheduled")
        self._sim.event_list.remove(self)
        self._time = self._sim.time() + delay
        self._sim.event_list.add(self)

    def cancel(self) -> bool:
        """Remove this event from the event list; return True if it was scheduled."""
        removed = False
        if self.is_scheduled() and self._time >= self._sim.time():
            self._sim.event_list.remove(self)
            removed = True
        self._time = UNSCHEDULED
        return removed

    def cancel_first_of_class(self, cls: EventClass) -> bool:
        """Cancel the first scheduled event of class `cls`; False if there is none."""
        ev = self._sim.event_list.get_first_of_class(cls)
        if ev is None:
            return False
        return ev.cancel()

    @property
    def simulator(self) -> Simulator:
        return self._sim

    @simulator.setter
    def simulator(self, sim: Simulator) -> None:
        if sim is None:
            raise ValueError("simulator must not be None")
        self._require_unscheduled("set simulator")
        self._sim = sim

    @property
    def time(self) -> float:
        """Scheduled time, or a negative value when not scheduled."""
        return self._time

    @time.setter
    def time(self, time: float) -> None:
        self._require_unscheduled("set time")
        self._time = time

    @property
    def priority(self) -> float:
        return self._priority

    @priority.setter
    def priority(self, priority: float) -> None:
        self._require_unscheduled("set priority")
        self._priority = priority

    def __repr__(self) -> str:
        return f"{type(self).__name__}(time={self._time}, priority={self._priority})"
