"""
Single-server queue simulated with events.

Demonstrates:
- Event subclasses for arrivals and departures
- ExponentialGen driven by MRG32k3a streams
- One substream per replication (common random numbers)
- Tally for waiting times and across replications

Customers arrive at rate 1 and are served at rate 1/0.9 (load 0.9). The
expected waiting time in queue is rho / (mu - lambda) = 8.1.

Run with --dlist to use the doubly-linked event list instead of the tree.
"""

from __future__ import annotations

import sys

from qmcsim import (
    DoublyLinked,
    Event,
    ExponentialGen,
    MRG32k3a,
    RandomStreamManager,
    RedblackTree,
    Simulator,
    Tally,
    reset_package_seeds,
)


class Queue:
    """Shared state of the model."""

    def __init__(self, sim: Simulator, manager: RandomStreamManager) -> None:
        self.sim = sim
        self.arrival_gen = ExponentialGen(manager.add(MRG32k3a("arrivals")), 1.0)
        self.service_gen = ExponentialGen(manager.add(MRG32k3a("service")), 0.9)
        self.waiting: list[float] = []
        self.busy = False
        self.waits = Tally("Waiting times")


class Arrival(Event):
    def __init__(self, model: Queue) -> None:
        super().__init__(model.sim)
        self.model = model

    def actions(self) -> None:
        model = self.model
        Arrival(model).schedule(model.arrival_gen())
        now = self.simulator.time()
        if model.busy:
            model.waiting.append(now)
        else:
            model.busy = True
            model.waits.add(0.0)
            Departure(model).schedule(model.service_gen())


class Departure(Event):
    def __init__(self, model: Queue) -> None:
        super().__init__(model.sim)
        self.model = model

    def actions(self) -> None:
        model = self.model
        if not model.waiting:
            model.busy = False
            return
        arrived = model.waiting.pop(0)
        model.waits.add(self.simulator.time() - arrived)
        Departure(model).schedule(model.service_gen())


class EndOfSimulation(Event):
    def actions(self) -> None:
        self.simulator.stop()


def run_simulation(replications: int, horizon: float, use_dlist: bool = False) -> Tally:
    """Run independent replications and return the tally of their average waits."""
    reset_package_seeds()
    sim = Simulator(DoublyLinked() if use_dlist else RedblackTree())
    manager = RandomStreamManager()
    model = Queue(sim, manager)
    averages = Tally("Average waiting time per replication")

    for _ in range(replications):
        sim.init()
        model.waiting.clear()
        model.busy = False
        model.waits.init()

        EndOfSimulation(sim).schedule(horizon)
        Arrival(model).schedule(model.arrival_gen())
        sim.start()

        averages.add(model.waits.average)
        manager.reset_next_substream()

    return averages


def main() -> None:
    use_dlist = "--dlist" in sys.argv
    print(f"Event list: {'DoublyLinked' if use_dlist else 'RedblackTree'}")
    print()

    averages = run_simulation(replications=10, horizon=10000.0, use_dlist=use_dlist)
    print(averages)
    center, half = averages.confidence_interval(95)
    print(f"95% confidence interval: {center:.4f} +/- {half:.4f}")


if __name__ == "__main__":
    main()
