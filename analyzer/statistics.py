import json
import re
import threading
from datetime import datetime

import matplotlib.pyplot as plt

from simulator.core import events


class Statistics:
    """
    Receives all communications and
    analyzes and records necessary information as an independent "recorder".
    Collects all events in JSON Lines format for offline playback.

    Messages arrive on whichever thread published them, so every record
    is guarded by one lock.
    """
    def __init__(self, broker):
        self.broker = broker
        self.elevator_trajectories = {}  # {elevator_name: [(timestamp, floor), ...]}
        self.door_events_history = {}  # Door events history by elevator
        self.assignment_history = []  # Dispatcher decisions in arrival order

        # Track current elevator states for real-time display
        self.current_elevator_states = {}

        # JSON Lines event log for offline playback
        self.event_log = []
        self.simulation_metadata = {}
        self._lock = threading.Lock()

    def start_listening(self):
        """Subscribe to the global broadcast. Call before the elevators are created."""
        self.broker.subscribe_all(self._on_message)

    def stop_listening(self):
        self.broker.unsubscribe(self._on_message)

    def set_simulation_metadata(self, metadata):
        """
        Set simulation metadata (called before simulation starts).

        Args:
            metadata (dict): Simulation configuration (num_floors, elevators, etc.)
        """
        self.simulation_metadata = {
            "format_version": "1.0",
            "timestamp": datetime.now().isoformat(),
            "config": metadata
        }

    def _add_event_log(self, event_type, event_data, timestamp):
        self.event_log.append({
            "time": timestamp,
            "type": event_type,
            "data": event_data
        })

    def _on_message(self, topic, message):
        timestamp = message.get('timestamp')
        kind = message.get('event')

        with self._lock:
            elevator_match = re.match(r'elevator/(.*?)/(\w+)$', topic)
            if elevator_match:
                elevator_name = elevator_match.group(1)
                floor = message.get('floor')

                if kind in (events.MOVED, events.STATE) and floor is not None:
                    trajectory = self.elevator_trajectories.setdefault(elevator_name, [])
                    # Record if the floor actually changed
                    if not trajectory or trajectory[-1][1] != floor:
                        trajectory.append((timestamp, floor))

                if kind in (events.DOOR_OPENING, events.DOOR_CLOSING):
                    self.door_events_history.setdefault(elevator_name, []).append({
                        'timestamp': timestamp,
                        'floor': floor,
                        'event': kind
                    })

                state = self.current_elevator_states.setdefault(elevator_name, {'elevator_name': elevator_name})
                if floor is not None:
                    state['floor'] = floor
                if kind == events.STATE:
                    state['state'] = message.get('state')
                    state['direction'] = message.get('direction')
                elif kind == events.SHUTTING_DOWN:
                    state['state'] = 'SHUTDOWN'
                state['timestamp'] = timestamp

            elif topic == events.ASSIGNMENT_TOPIC:
                self.assignment_history.append({
                    'timestamp': timestamp,
                    'elevator_name': message.get('elevator_name'),
                    'floor': message.get('floor'),
                    'direction': message.get('direction'),
                    'internal': message.get('internal')
                })

            data = {key: value for key, value in message.items() if key != 'timestamp'}
            self._add_event_log(kind or topic, data, timestamp)

    def events_since(self, index=0):
        """
        Events recorded from position `index` onwards.

        Returns:
            (events, total_count)
        """
        with self._lock:
            return list(self.event_log[index:]), len(self.event_log)

    def get_events(self, elevator_name=None, kind=None):
        """Recorded events, optionally filtered by elevator and event kind"""
        with self._lock:
            return [
                event for event in self.event_log
                if (elevator_name is None or event['data'].get('elevator_name') == elevator_name)
                and (kind is None or event['type'] == kind)
            ]

    def get_trajectory(self, elevator_name):
        with self._lock:
            return list(self.elevator_trajectories.get(elevator_name, []))

    def save_event_log(self, filename='simulation_log.jsonl'):
        """
        Save the event log to a JSON Lines file.

        Args:
            filename (str): Name of the output file (default: 'simulation_log.jsonl')
        """
        with self._lock:
            event_log = list(self.event_log)

        with open(filename, 'w', encoding='utf-8') as f:
            # Write metadata as first line
            if self.simulation_metadata:
                f.write(json.dumps({
                    "type": "metadata",
                    "data": self.simulation_metadata
                }) + '\n')

            for event in event_log:
                f.write(json.dumps(event, ensure_ascii=False) + '\n')

        print(f"Event log saved: {len(event_log)} events written to {filename}")
        return filename

    def plot_trajectory_diagram(self, output_filename='elevator_trajectory_diagram.png', show=False):
        """Draw floor-over-time trajectories after the simulation ends"""
        with self._lock:
            trajectories = {name: list(points) for name, points in self.elevator_trajectories.items()}
            door_events = {name: list(items) for name, items in self.door_events_history.items()}

        fig = plt.figure(figsize=(14, 8))

        # Define colors for different elevators
        elevator_colors = ['#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd', '#8c564b']

        for idx, name in enumerate(sorted(trajectories)):
            trajectory = trajectories[name]
            if not trajectory:
                continue
            color = elevator_colors[idx % len(elevator_colors)]

            times, floors = zip(*sorted(trajectory, key=lambda x: x[0]))
            plt.step(times, floors, where='post', label=name, linewidth=2.5, color=color, alpha=0.8)

            openings = [(e['timestamp'], e['floor']) for e in door_events.get(name, [])
                        if e['event'] == events.DOOR_OPENING]
            if openings:
                open_times, open_floors = zip(*openings)
                plt.scatter(open_times, open_floors, marker='s', s=60, color=color, zorder=5)

        plt.title("Elevator Trajectory Diagram")
        plt.xlabel("Time (s)")
        plt.ylabel("Floor")
        plt.grid(True, which='both', linestyle='--', alpha=0.7)

        all_floors = [floor for trajectory in trajectories.values() for _, floor in trajectory]
        if all_floors:
            plt.yticks(range(int(min(all_floors)), int(max(all_floors)) + 2))
            plt.legend(loc='upper right', fontsize=10)

        plt.savefig(output_filename, dpi=150, bbox_inches='tight')
        print(f"Trajectory diagram saved to: {output_filename}")

        if show:
            plt.show()
        plt.close(fig)
        return output_filename
