"""
Simulation Runner Test

Runs the simulation from a SimPy process and checks ticking, pause /
single step control and what gets published on the message broker.
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root))

import simpy
import pytest

from config.simulation import SimulationConfig, EscalatorConfig, CrowdConfig
from simulator.core.geometry import vec3
from simulator.core.runner import SimulationRunner
from simulator.core.simulation import Simulation
from simulator.infrastructure.message_broker import MessageBroker


def make_simulation(people=2):
    config = SimulationConfig(
        escalator=EscalatorConfig(escalator_pad=0, stairs_num=15),
        crowd=CrowdConfig(people_num=people),
        random_seed=5,
        tick=0.01,
    )
    return Simulation(config)


def test_runner_ticks_and_publishes_snapshots():
    env = simpy.Environment()
    broker = MessageBroker(env, verbose=False)
    simulation = make_simulation()
    runner = SimulationRunner(env, simulation, broker, tick=0.01, snapshot_interval=5)

    env.run(until=0.105)

    assert runner.tick_count == 10
    assert simulation.time == pytest.approx(0.1)
    snapshots = broker.get_pipe("simulation/snapshot").items
    assert len(snapshots) == 2
    assert set(snapshots[0]) == {'t', 'e', 'f'}
    assert broker.published["simulation/snapshot"] == 2


def test_runner_publishes_finish_events():
    env = simpy.Environment()
    broker = MessageBroker(env, verbose=False)
    simulation = make_simulation(people=1)
    belt, crowd = simulation.belts[0], simulation.crowds[0]
    crowd.positions[0] = vec3(belt.x0, belt.ymax + 0.5, belt.zmax + 0.5)
    SimulationRunner(env, simulation, broker, tick=0.01, snapshot_interval=100)

    env.run(until=0.015)

    finished = broker.get_pipe(f"escalator/{belt.id}/finished").items
    assert len(finished) == 1
    assert finished[0]['agent_index'] == 0
    assert finished[0]['escalator_id'] == belt.id


def test_pause_and_single_step(capsys):
    env = simpy.Environment()
    broker = MessageBroker(env, verbose=False)
    simulation = make_simulation()
    runner = SimulationRunner(env, simulation, broker, tick=0.01, start_paused=True)

    env.run(until=0.05)
    assert runner.get_state() == SimulationRunner.PAUSED
    assert runner.tick_count == 0
    assert simulation.time == 0.0

    runner.step()
    assert runner.tick_count == 1

    assert runner.toggle_pause() == SimulationRunner.RUNNING
    assert "PAUSED -> RUNNING" in capsys.readouterr().out

    # Single step is ignored while running
    assert runner.step() == []
    assert runner.tick_count == 1


def test_broker_verbose_logging(capsys):
    env = simpy.Environment()
    broker = MessageBroker(env)
    broker.put("simulation/snapshot", {'t': 0.0})
    assert "[Broker] Publish on 'simulation/snapshot'" in capsys.readouterr().out
    envelope = broker.get_broadcast_pipe().items[0]
    assert envelope["topic"] == "simulation/snapshot"
    assert envelope["time"] == 0.0
    assert broker.published == {"simulation/snapshot": 1}


def test_realtime_environment_paces_runner():
    import time
    from simulator.infrastructure.realtime_env import RealtimeEnvironment

    simulation = make_simulation()
    start = time.monotonic()
    env = RealtimeEnvironment(speed_factor=2.0)
    broker = MessageBroker(env, verbose=False)
    runner = SimulationRunner(env, simulation, broker, tick=0.01)

    env.run(until=0.105)
    elapsed = time.monotonic() - start

    assert runner.tick_count == 10
    # 0.1 simulated seconds at double speed take at least 0.05 real seconds
    assert elapsed >= 0.045

    env.set_speed(0.0)
    assert env.get_speed() == 0.0
    assert env.lag() == 0.0
