"""
Simulator - discrete-event executive driven by SimPy.

The simulator owns an event list and a SimPy environment. `start()` runs an
executive process in the environment: it repeatedly removes the first event
of the list, lets SimPy time advance to the event's time, and fires the
event's `actions()`. Other SimPy processes created on `sim.env` run
interleaved with the events.

`time()` is the time of the last event fired, taken exactly from the event.
SimPy environments cannot rewind their clock, so `init()` creates a fresh
environment.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Generator

import simpy

from qmcsim.errors import IllegalStateError
from qmcsim.simevents.eventlist import EventList, RedblackTree

if TYPE_CHECKING:
    from qmcsim.simevents.event import Event

logger = logging.getLogger(__name__)

# Time of an event that is not in any event list.
UNSCHEDULED = -10.0


class Simulator:
    """
    Simulation clock and event list.

    A process-wide default simulator is available through `default()`;
    events constructed without an explicit simulator attach to it.
    """

    _default: Simulator | None = None

    def __init__(self, event_list: EventList | None = None) -> None:
        self._event_list = event_list if event_list is not None else RedblackTree()
        self._env = simpy.Environment()
        self._now = 0.0
        self._stopped = True
        self._simulating = False

    @classmethod
    def default(cls) -> Simulator:
        """Get or create the default simulator."""
        if cls._default is None:
            cls._default = Simulator()
        return cls._default

    @classmethod
    def reset_default(cls) -> None:
        """Drop the default simulator; the next `default()` call creates a new one."""
        cls._default = None

    @property
    def env(self) -> simpy.Environment:
        """The SimPy environment hosting the executive."""
        return self._env

    @property
    def event_list(self) -> EventList:
        return self._event_list

    def time(self) -> float:
        """Current simulation time."""
        return self._now

    def init(self, event_list: EventList | None = None) -> None:
        """
        Reset the clock to 0 and clear the event list.

        If `event_list` is given it replaces the current list (and is cleared).
        """
        if event_list is not None:
            self._event_list = event_list
        self._env = simpy.Environment()
        self._now = 0.0
        self._event_list.clear()
        self._stopped = False
        self._simulating = False

    def is_simulating(self) -> bool:
        return self._simulating

    def is_stopped(self) -> bool:
        return self._stopped

    def stop(self) -> None:
        """Stop the simulation after the current event; remaining events stay in the list."""
        self._stopped = True

    def _remove_first_event(self) -> Event | None:
        if self._stopped:
            return None
        return self._event_list.remove_first()

    def _executive(self) -> Generator[simpy.Event, None, None]:
        while True:
            ev = self._remove_first_event()
            if ev is None:
                return
            delay = ev.time - self._env.now
            if delay > 0.0:
                yield self._env.timeout(delay)
            elif delay < 0.0:
                logger.warning("event %s at time %g fired late, clock is at %g", ev, ev.time, self._env.now)
            self._now = ev.time
            ev._time = UNSCHEDULED
            ev.actions()

    def start(self) -> None:
        """
        Run events until the list is empty or `stop()` is called.

        Exceptions raised by an event's actions propagate to the caller.
        """
        if self._event_list.is_empty():
            raise IllegalStateError("start() called with an empty event list")
        self._stopped = False
        self._simulating = True
        logger.debug("simulation started at time %g", self._now)
        try:
            executive = self._env.process(self._executive())
            self._env.run(until=executive)
        finally:
            self._stopped = True
            self._simulating = False
            logger.debug("simulation stopped at time %g", self._now)
