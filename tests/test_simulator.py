"""
Tests for the simulator and events.
"""

import pytest

from qmcsim.errors import EventNotFoundError, IllegalStateError
from qmcsim.simevents import UNSCHEDULED, DoublyLinked, Event, RedblackTree, Simulator


class Recorder(Event):
    """Appends (label, time) to a shared log when it fires."""

    def __init__(self, sim, log, label):
        super().__init__(sim)
        self.log = log
        self.label = label

    def actions(self) -> None:
        self.log.append((self.label, self.simulator.time()))


class Repeater(Event):
    """Reschedules itself every `period` until it has fired `count` times."""

    def __init__(self, sim, period, count):
        super().__init__(sim)
        self.period = period
        self.count = count
        self.times = []

    def actions(self) -> None:
        self.times.append(self.simulator.time())
        if len(self.times) < self.count:
            self.schedule(self.period)


class Stopper(Event):
    def actions(self) -> None:
        self.simulator.stop()


class Boom(Event):
    def actions(self) -> None:
        raise RuntimeError("boom")


@pytest.fixture(params=[RedblackTree, DoublyLinked], ids=["RedblackTree", "DoublyLinked"])
def any_sim(request):
    sim = Simulator(request.param())
    sim.init()
    return sim


class TestRunning:
    """start, stop and the clock."""

    def test_events_fire_in_time_order(self, any_sim) -> None:
        """The clock reads each event's time while it fires."""
        log = []
        for label, delay in (("c", 3.0), ("a", 1.0), ("b", 2.0)):
            Recorder(any_sim, log, label).schedule(delay)
        any_sim.start()
        assert log == [("a", 1.0), ("b", 2.0), ("c", 3.0)]
        assert any_sim.time() == 3.0
        assert any_sim.event_list.is_empty()

    def test_events_scheduled_from_actions(self, any_sim) -> None:
        """Events may schedule further events while the simulation runs."""
        ev = Repeater(any_sim, 0.1, 10)
        ev.schedule(0.1)
        any_sim.start()
        assert len(ev.times) == 10
        # The clock is accumulated exactly as the events computed their times.
        expected = 0.0
        for t in ev.times:
            expected += 0.1
            assert t == expected

    def test_stop_leaves_remaining_events(self, any_sim) -> None:
        """stop ends the run after the current event; later events stay listed."""
        log = []
        Recorder(any_sim, log, "before").schedule(1.0)
        Stopper(any_sim).schedule(2.0)
        late = Recorder(any_sim, log, "after")
        late.schedule(3.0)
        any_sim.start()
        assert log == [("before", 1.0)]
        assert any_sim.is_stopped()
        assert not any_sim.is_simulating()
        assert any_sim.time() == 2.0
        assert any_sim.event_list.get_first() is late

    def test_start_with_empty_list(self, any_sim) -> None:
        """Nothing to simulate is a state error."""
        with pytest.raises(IllegalStateError):
            any_sim.start()

    def test_exception_propagates(self, any_sim) -> None:
        """An error raised by actions reaches the caller of start."""
        Boom(any_sim).schedule(1.0)
        with pytest.raises(RuntimeError, match="boom"):
            any_sim.start()
        assert not any_sim.is_simulating()
        assert any_sim.is_stopped()

    def test_is_simulating_inside_actions(self, any_sim) -> None:
        """is_simulating is True while events fire."""
        seen = []

        class Probe(Event):
            def actions(self) -> None:
                seen.append(self.simulator.is_simulating())

        Probe(any_sim).schedule(0.5)
        any_sim.start()
        assert seen == [True]

    def test_init_resets(self, any_sim) -> None:
        """init puts the clock back to 0 and empties the list."""
        Repeater(any_sim, 1.0, 2).schedule(1.0)
        any_sim.start()
        Recorder(any_sim, [], "pending").schedule(5.0)
        any_sim.init()
        assert any_sim.time() == 0.0
        assert any_sim.event_list.is_empty()
        assert any_sim.env.now == 0

    def test_init_replaces_event_list(self, any_sim) -> None:
        """init may swap in a new event list."""
        new_list = DoublyLinked()
        any_sim.init(new_list)
        assert any_sim.event_list is new_list

    def test_simpy_processes_interleave(self, sim) -> None:
        """Processes on sim.env run between events at their own times."""
        log = []

        def process(env):
            yield env.timeout(1.5)
            log.append(("process", env.now))

        sim.env.process(process(sim.env))
        Recorder(sim, log, "first").schedule(1.0)
        Recorder(sim, log, "second").schedule(2.0)
        sim.start()
        assert log == [("first", 1.0), ("process", 1.5), ("second", 2.0)]


class TestScheduling:
    """Event scheduling operations."""

    def test_schedule_negative_delay(self, sim) -> None:
        """Events cannot be scheduled in the past."""
        with pytest.raises(ValueError):
            Recorder(sim, [], "x").schedule(-1.0)

    def test_schedule_twice(self, sim) -> None:
        """A scheduled event cannot be scheduled again."""
        ev = Recorder(sim, [], "x")
        ev.schedule(1.0)
        with pytest.raises(IllegalStateError):
            ev.schedule(2.0)

    def test_key_frozen_while_scheduled(self, sim) -> None:
        """Time and priority cannot change while the event is listed."""
        ev = Recorder(sim, [], "x")
        ev.priority = 3.0
        ev.schedule(1.0)
        with pytest.raises(IllegalStateError):
            ev.time = 4.0
        with pytest.raises(IllegalStateError):
            ev.priority = 0.5

    def test_fired_event_is_unscheduled(self, sim) -> None:
        """After firing, an event reports itself as not scheduled."""
        ev = Recorder(sim, [], "x")
        ev.schedule(1.0)
        sim.start()
        assert not ev.is_scheduled()
        assert ev.time == UNSCHEDULED

    def test_schedule_next(self, sim) -> None:
        """schedule_next fires before other events at the current time."""
        log = []
        Recorder(sim, log, "later").schedule(0.0)
        Recorder(sim, log, "next").schedule_next()
        sim.start()
        assert [label for label, _ in log] == ["next", "later"]

    def test_schedule_before_and_after(self, sim) -> None:
        """Relative scheduling copies the reference key and position."""
        log = []
        ref = Recorder(sim, log, "ref")
        ref.schedule(2.0)
        before = Recorder(sim, log, "before")
        before.schedule_before(ref)
        Recorder(sim, log, "after").schedule_after(ref)
        assert before.time == 2.0
        assert before.priority == ref.priority
        sim.start()
        assert log == [("before", 2.0), ("ref", 2.0), ("after", 2.0)]

    @pytest.mark.parametrize("method", ["schedule_before", "schedule_after"])
    def test_relative_to_unlisted_event(self, any_sim, method) -> None:
        """A failed relative insert leaves the event unscheduled and reusable."""
        log = []
        unlisted = Recorder(any_sim, log, "unlisted")
        ev = Recorder(any_sim, log, "ev")
        ev.priority = 3.0
        with pytest.raises(EventNotFoundError):
            getattr(ev, method)(unlisted)
        assert not ev.is_scheduled()
        assert ev.time == UNSCHEDULED
        assert ev.priority == 3.0
        assert not ev.cancel()
        ev.schedule(1.0)
        any_sim.start()
        assert log == [("ev", 1.0)]

    def test_reschedule(self, sim) -> None:
        """reschedule moves a listed event to a new time."""
        log = []
        ev = Recorder(sim, log, "moved")
        ev.schedule(5.0)
        Recorder(sim, log, "fixed").schedule(3.0)
        ev.reschedule(1.0)
        sim.start()
        assert log == [("moved", 1.0), ("fixed", 3.0)]

    def test_reschedule_unscheduled(self, sim) -> None:
        """Only scheduled events can be rescheduled."""
        with pytest.raises(IllegalStateError):
            Recorder(sim, [], "x").reschedule(1.0)

    def test_cancel(self, sim) -> None:
        """cancel removes the event and reports whether it was listed."""
        log = []
        ev = Recorder(sim, log, "cancelled")
        ev.schedule(1.0)
        Recorder(sim, log, "kept").schedule(2.0)
        assert ev.cancel()
        assert not ev.cancel()
        sim.start()
        assert log == [("kept", 2.0)]

    def test_cancel_first_of_class(self, sim) -> None:
        """The first event of the named class is cancelled."""
        log = []
        Stopper(sim).schedule(1.0)
        Recorder(sim, log, "r").schedule(2.0)
        caller = Recorder(sim, log, "caller")
        assert caller.cancel_first_of_class(Stopper)
        assert not caller.cancel_first_of_class("Stopper")
        sim.start()
        assert log == [("r", 2.0)]

    def test_default_simulator(self) -> None:
        """Events built without a simulator use the default one."""
        ev = Recorder(None, [], "x")
        assert ev.simulator is Simulator.default()
        Simulator.reset_default()
        assert Simulator.default() is not ev.simulator

    def test_change_simulator(self, sim) -> None:
        """An unscheduled event can move to another simulator."""
        other = Simulator()
        ev = Recorder(sim, [], "x")
        ev.simulator = other
        assert ev.simulator is other
        ev.schedule(1.0)
        with pytest.raises(IllegalStateError):
            ev.simulator = sim
