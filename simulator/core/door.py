import threading

from ..infrastructure.message_broker import MessageBroker
from ..infrastructure.realtime_env import RealtimeClock
from . import events


class Door:
    """
    Car door driven directly by its elevator.

    A door cycle is open -> dwell -> close. Cycles are serialized by the
    door's own lock, never by the elevator's, so requests keep being
    accepted while the doors are open.
    """
    def __init__(self, broker: MessageBroker, clock: RealtimeClock, elevator_id: int,
                 elevator_name: str, dwell_time: float = 0.3):
        self.broker = broker
        self.clock = clock
        self.elevator_id = elevator_id
        self.elevator_name = elevator_name
        self.dwell_time = dwell_time
        self.name = f"{elevator_name}_Door"
        self.state = 'CLOSED'  # CLOSED, OPEN
        self.cycle_count = 0
        self._lock = threading.Lock()

    def cycle(self, floor: int):
        """Run one complete door cycle at the given floor."""
        with self._lock:
            self.state = 'OPEN'
            self._broadcast_door_event(events.DOOR_OPENING, floor)
            self.clock.sleep(self.dwell_time)
            self.state = 'CLOSED'
            self.cycle_count += 1
            self._broadcast_door_event(events.DOOR_CLOSING, floor)

    def _broadcast_door_event(self, event_type: str, floor: int):
        door_event_message = {
            "timestamp": self.clock.now(),
            "elevator_id": self.elevator_id,
            "elevator_name": self.elevator_name,
            "door_id": self.name,
            "event": event_type,
            "floor": floor,
        }
        self.broker.put(events.elevator_topic(self.elevator_name, event_type), door_event_message)
