import simpy
import sys

# Configuration
from config import load_simulation_config

# Simulator components
from simulator.infrastructure.message_broker import MessageBroker
from simulator.infrastructure.realtime_env import RealtimeEnvironment
from simulator.core.simulation import Simulation
from simulator.core.runner import SimulationRunner

# Analyzer
from analyzer.statistics import FlowStatistics

DEFAULT_CONFIG_PATH = "scenarios/simulation/default.yaml"


def run_simulation(sim_config_path=DEFAULT_CONFIG_PATH, log_path='simulation_log.jsonl', plot=True):
    """
    Set up and run the entire simulation

    Args:
        sim_config_path: Path to simulation configuration YAML file
        log_path: Output JSON Lines event log
        plot: Draw the cumulative finishes plot at the end

    Returns:
        FlowStatistics collected during the run
    """
    print("--- Loading Configuration ---")
    sim_config = load_simulation_config(sim_config_path)
    print(f"Simulation Config: {sim_config_path}")

    if sim_config.random_seed is not None:
        print(f"Random seed fixed to {sim_config.random_seed} for reproducible results")
    else:
        print("Random seed not set - results will vary")

    print("\n--- Simulation Setup ---")
    if sim_config.realtime_factor > 0:
        env = RealtimeEnvironment(speed_factor=sim_config.realtime_factor)
        print(f"Realtime mode: speed factor {sim_config.realtime_factor}")
    else:
        env = simpy.Environment()
    broker = MessageBroker(env, verbose=False)
    broadcast_pipe = broker.get_broadcast_pipe()

    # Create statistics collector
    flow_stats = FlowStatistics(env, broadcast_pipe)
    env.process(flow_stats.start_listening())

    simulation = Simulation(sim_config)
    flow_stats.set_simulation_metadata({
        'snapshot_meta': simulation.snapshot_meta(),
        'config': sim_config.to_dict(),
    })

    SimulationRunner(
        env, simulation, broker,
        tick=sim_config.tick,
        snapshot_interval=sim_config.snapshot_interval
    )

    print("\n--- Simulation Start ---")
    env.run(until=sim_config.duration)
    print("--- Simulation End ---")
    for topic, count in sorted(broker.published.items()):
        print(f"[Broker] {count} message(s) on '{topic}'")

    flow_stats.save_event_log(log_path)
    flow_stats.print_summary(sim_config.duration)

    if plot:
        flow_stats.plot_throughput()

    simulation.dispose()
    return flow_stats


def main():
    # Accept command line argument for the config file
    sim_config_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_PATH
    run_simulation(sim_config_path=sim_config_path)


if __name__ == '__main__':
    main()
