import re
import json
from datetime import datetime

import matplotlib.pyplot as plt


class FlowStatistics:
    """
    Receives all broker communications and, as an independent "recorder",
    keeps the finishing events per escalator and the periodic snapshots.
    Collects all events in JSON Lines format for offline analysis.
    """
    def __init__(self, env, broadcast_pipe):
        self.env = env
        self.broadcast_pipe = broadcast_pipe
        self.finish_times = {}  # {escalator_id: [time, ...]}
        self.snapshots = []  # Minimal snapshots in publication order

        # JSON Lines event log
        self.event_log = []
        self.simulation_metadata = {}

    def _add_event_log(self, event_type, event_data):
        """
        Add an event to the JSON Lines log.

        Args:
            event_type (str): Type of event ('finish' or 'snapshot')
            event_data (dict): Event-specific data
        """
        event = {
            "time": self.env.now,
            "type": event_type,
            "data": event_data
        }
        self.event_log.append(event)

    def set_simulation_metadata(self, metadata):
        """
        Set simulation metadata (called before simulation starts).

        Args:
            metadata (dict): Simulation.snapshot_meta() and/or the configuration
        """
        self.simulation_metadata = {
            "format_version": "1.0",
            "timestamp": datetime.now().isoformat(),
            "config": metadata
        }

    def start_listening(self):
        """
        Main process to start intercepting global broadcasts.
        """
        while True:
            data = yield self.broadcast_pipe.get()

            topic = data.get('topic', '')
            message = data.get('message', {})

            finish_match = re.search(r'escalator/(.*?)/finished', topic)
            if finish_match:
                escalator_id = finish_match.group(1)
                self.finish_times.setdefault(escalator_id, []).append(message.get('time', data.get('time', self.env.now)))
                self._add_event_log('finish', {
                    'escalator': escalator_id,
                    'agent': message.get('agent_index'),
                    'sim_time': message.get('time'),
                })
                continue

            if topic == 'simulation/snapshot':
                self.snapshots.append(message)
                self._add_event_log('snapshot', message)

    # ========================================
    # Metrics
    # ========================================

    def total_finished(self, escalator_id=None):
        if escalator_id is not None:
            return len(self.finish_times.get(escalator_id, []))
        return sum(len(times) for times in self.finish_times.values())

    def throughput(self, escalator_id, duration):
        """Finished agents per second of simulated time"""
        if duration <= 0:
            return 0.0
        return self.total_finished(escalator_id) / duration

    def print_summary(self, duration=None):
        """Print finishing counts and throughput per escalator"""
        if duration is None:
            duration = self.env.now

        print("\n" + "=" * 60)
        print("   ESCALATOR FLOW SUMMARY")
        print("=" * 60)
        print(f"Simulated time: {duration:.2f} s")

        for escalator_id in sorted(self.finish_times):
            times = self.finish_times[escalator_id]
            line = f"  {escalator_id:<16} finished: {len(times):>6}   throughput: {self.throughput(escalator_id, duration):>6.2f} /s"
            if len(times) > 1:
                gaps = [b - a for a, b in zip(times, times[1:])]
                line += f"   mean gap: {sum(gaps) / len(gaps):>6.2f} s"
            print(line)

        if not self.finish_times:
            print("  No agent reached the top.")

        print(f"Total finished: {self.total_finished()}")
        print("=" * 60)

    # ========================================
    # Output
    # ========================================

    def plot_throughput(self, output_filename='escalator_throughput.png', show=True):
        """Draw cumulative finishes over time for every escalator"""
        print("\n--- Plotting: Cumulative Finishes ---")
        plt.figure(figsize=(12, 7))

        for escalator_id in sorted(self.finish_times):
            times = sorted(self.finish_times[escalator_id])
            if not times:
                continue
            counts = list(range(1, len(times) + 1))
            plt.step(times, counts, where='post', label=escalator_id, linewidth=2.0, alpha=0.8)

        plt.title("Cumulative Finishes per Escalator")
        plt.xlabel("Time (s)")
        plt.ylabel("Finished agents")
        plt.grid(True, which='both', linestyle='--', alpha=0.7)
        if self.finish_times:
            plt.legend(loc='upper left', fontsize=9)

        plt.savefig(output_filename, dpi=150, bbox_inches='tight')
        print(f"Throughput plot saved to: {output_filename}")

        if show:
            plt.show()
        plt.close()
        return output_filename

    def save_event_log(self, filename='simulation_log.jsonl'):
        """
        Save the event log to a JSON Lines file.

        Args:
            filename (str): Name of the output file (default: 'simulation_log.jsonl')
        """
        print(f"\nSaving event log to {filename}...")

        with open(filename, 'w', encoding='utf-8') as f:
            # Metadata as first line
            if self.simulation_metadata:
                f.write(json.dumps({
                    "type": "metadata",
                    "data": self.simulation_metadata
                }) + '\n')

            for event in self.event_log:
                f.write(json.dumps(event, ensure_ascii=False) + '\n')

        print(f"Event log saved: {len(self.event_log)} events written to {filename}")
        return filename
