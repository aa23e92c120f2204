"""
Simulation Runner

Drives a Simulation from a SimPy process on a fixed tick and publishes
what happens on the message broker:

- escalator/<id>/finished : one message per agent reaching the top
- simulation/snapshot     : a minimal snapshot every snapshot_interval ticks
"""

from typing import List

import simpy

from .entity import Entity
from .simulation import FinishEvent, Simulation


class SimulationRunner(Entity):
    """
    SimPy entity ticking the simulation

    States:
        RUNNING: update() is called every tick
        PAUSED: ticks pass without updating; step() advances one tick manually
    """

    RUNNING = "RUNNING"
    PAUSED = "PAUSED"

    def __init__(self, env: simpy.Environment, simulation: Simulation, broker,
                 tick: float = 0.005, snapshot_interval: int = 100,
                 start_paused: bool = False, name: str = "Runner"):
        """
        Initialize runner

        Args:
            env: SimPy environment
            simulation: Simulation to drive
            broker: MessageBroker for finish events and snapshots
            tick: Simulated seconds per update
            snapshot_interval: Ticks between published snapshots
            start_paused: Start in PAUSED state
            name: Entity name
        """
        self.simulation = simulation
        self.broker = broker
        self.tick = tick
        self.snapshot_interval = snapshot_interval
        self.tick_count = 0
        self.state = self.PAUSED if start_paused else self.RUNNING
        super().__init__(env, name)

    def run(self):
        while True:
            yield self.env.timeout(self.tick)
            if self.state == self.PAUSED:
                continue
            self._advance()

    def _advance(self) -> List[FinishEvent]:
        events = self.simulation.update(self.tick)
        self.tick_count += 1

        for event in events:
            self.broker.put(f"escalator/{event.escalator_id}/finished", event.to_dict())

        if self.tick_count % self.snapshot_interval == 0:
            self.broker.put("simulation/snapshot", self.simulation.snapshot(minimal=True))

        return events

    def toggle_pause(self) -> str:
        """Switch between RUNNING and PAUSED; returns the new state"""
        self.set_state(self.RUNNING if self.state == self.PAUSED else self.PAUSED)
        return self.state

    def step(self) -> List[FinishEvent]:
        """
        Advance exactly one tick while paused

        Returns:
            Finish events of that tick (empty when not paused, nothing happens)
        """
        if self.state != self.PAUSED:
            return []
        return self._advance()
