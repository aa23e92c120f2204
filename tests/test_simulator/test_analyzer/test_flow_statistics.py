"""
Flow Statistics Test

Checks that FlowStatistics picks finish events and snapshots off the
broadcast pipe, writes the JSON Lines log, prints its summary and plots;
then runs main.run_simulation end to end on a small scenario.
"""

import sys
import json
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root))

import matplotlib
matplotlib.use("Agg")

import simpy

from analyzer.statistics import FlowStatistics
from config.simulation import SimulationConfig, EscalatorConfig, CrowdConfig
from simulator.core.geometry import vec3
from simulator.core.runner import SimulationRunner
from simulator.core.simulation import Simulation
from simulator.infrastructure.message_broker import MessageBroker


def run_with_statistics(until=0.25):
    env = simpy.Environment()
    broker = MessageBroker(env, verbose=False)
    stats = FlowStatistics(env, broker.get_broadcast_pipe())
    env.process(stats.start_listening())

    config = SimulationConfig(
        escalator=EscalatorConfig(escalator_pad=0, stairs_num=15),
        crowd=CrowdConfig(people_num=2),
        random_seed=9,
        tick=0.01,
    )
    simulation = Simulation(config)
    belt, crowd = simulation.belts[0], simulation.crowds[0]
    crowd.positions[0] = vec3(belt.x0, belt.ymax + 0.5, belt.zmax + 0.5)
    stats.set_simulation_metadata(simulation.snapshot_meta())

    SimulationRunner(env, simulation, broker, tick=0.01, snapshot_interval=10)
    env.run(until=until)
    return stats, belt


def test_records_finishes_and_snapshots():
    stats, belt = run_with_statistics()

    assert stats.total_finished() == 1
    assert stats.total_finished(belt.id) == 1
    assert len(stats.snapshots) == 2
    assert stats.throughput(belt.id, 0.25) == 4.0
    types = [event['type'] for event in stats.event_log]
    assert types.count('finish') == 1
    assert types.count('snapshot') == 2


def test_save_event_log(tmp_path):
    stats, _ = run_with_statistics()
    path = tmp_path / "log.jsonl"

    stats.save_event_log(str(path))

    lines = path.read_text(encoding='utf-8').splitlines()
    assert json.loads(lines[0])['type'] == 'metadata'
    assert len(lines) == 1 + len(stats.event_log)
    assert json.loads(lines[1])['type'] in ('finish', 'snapshot')


def test_summary_and_plot(tmp_path, capsys):
    stats, belt = run_with_statistics()

    stats.print_summary(0.25)
    out = capsys.readouterr().out
    assert "ESCALATOR FLOW SUMMARY" in out
    assert belt.id in out

    image = tmp_path / "throughput.png"
    stats.plot_throughput(str(image), show=False)
    assert image.exists()


def test_run_simulation_end_to_end(tmp_path):
    from main import run_simulation

    scenario = tmp_path / "tiny.yaml"
    scenario.write_text(
        "simulation:\n"
        "  escalator:\n"
        "    escalator_pad: 0\n"
        "    stairs_num: 10\n"
        "  crowd:\n"
        "    people_num: 5\n"
        "  random_seed: 1\n"
        "  duration: 0.5\n"
        "  tick: 0.01\n"
        "  snapshot_interval: 10\n",
        encoding='utf-8'
    )
    log_path = tmp_path / "run.jsonl"

    stats = run_simulation(str(scenario), log_path=str(log_path), plot=False)

    assert log_path.exists()
    assert len(stats.snapshots) >= 4
