import threading
from typing import Optional, Set, Tuple

from ..infrastructure.message_broker import MessageBroker
from ..infrastructure.realtime_env import RealtimeClock
from . import events
from .door import Door
from .entity import Entity
from .request import Direction, ElevatorSnapshot

FIXED_PRIORITY = "FIXED_PRIORITY"
SCAN = "SCAN"
SERVICE_POLICIES = (FIXED_PRIORITY, SCAN)


class Elevator(Entity):
    """
    One car of the bank, serviced by its own thread.

    Position, direction, both stop sets and the stop flag are guarded by a
    single condition variable. The service loop sleeps on it while idle and
    releases it for every travel and door delay, so callers on other threads
    only ever wait for a short critical section.

    States: IDLE, MOVING_UP, MOVING_DOWN, DOORS_OPEN, SHUTDOWN.
    """

    def __init__(self, elevator_id: int, broker: MessageBroker, clock: Optional[RealtimeClock] = None,
                 start_floor: int = 1, floor_travel_time: float = 0.4, dwell_time: float = 0.3,
                 service_policy: str = FIXED_PRIORITY, name: str = None):
        if service_policy not in SERVICE_POLICIES:
            raise ValueError(f"Unknown service policy: {service_policy}. Must be one of {SERVICE_POLICIES}")

        # Identifiers are needed by _on_state_changed before Entity.__init__ returns
        self.elevator_id = elevator_id
        super().__init__(broker, name if name is not None else f"Elevator_{elevator_id}")
        self.clock = clock if clock is not None else broker.clock
        self.floor_travel_time = floor_travel_time
        self.service_policy = service_policy

        self._condition = threading.Condition()
        self._current_floor = start_floor
        self._direction = Direction.IDLE
        self._last_travel = Direction.IDLE
        self._up_stops: Set[int] = set()
        self._down_stops: Set[int] = set()
        self._stopped = False

        self.door = Door(broker, self.clock, elevator_id, self.name, dwell_time)
        self.set_state("IDLE")

    # --- Thread-safe queries ---

    @property
    def current_floor(self) -> int:
        with self._condition:
            return self._current_floor

    @property
    def direction(self) -> Direction:
        with self._condition:
            return self._direction

    @property
    def up_stops(self) -> Tuple[int, ...]:
        """Pending up-stops in visiting order (ascending)."""
        with self._condition:
            return tuple(sorted(self._up_stops))

    @property
    def down_stops(self) -> Tuple[int, ...]:
        """Pending down-stops in visiting order (descending)."""
        with self._condition:
            return tuple(sorted(self._down_stops, reverse=True))

    @property
    def stopped(self) -> bool:
        with self._condition:
            return self._stopped

    def has_pending_requests(self) -> bool:
        with self._condition:
            return self._has_pending_locked()

    def snapshot(self) -> ElevatorSnapshot:
        with self._condition:
            return ElevatorSnapshot(
                elevator_id=self.elevator_id,
                name=self.name,
                current_floor=self._current_floor,
                direction=self._direction,
                state=self.get_state(),
                up_stops=tuple(sorted(self._up_stops)),
                down_stops=tuple(sorted(self._down_stops, reverse=True)),
            )

    # --- Mutators ---

    def add_request(self, floor: int):
        """
        Queue a stop at the given floor.

        A request for the floor the car is standing at is answered with a
        door cycle on the calling thread and never queued.
        """
        if not self.queue_stop(floor):
            self.door.cycle(floor)

    def queue_stop(self, floor: int) -> bool:
        """
        Put floor into the stop set on its side of the car.

        A floor that is already pending in either set stays where it is, so
        the two sets never share a floor.

        Returns:
            False if the car stands at floor; the caller owes it a door cycle
        """
        with self._condition:
            if floor == self._current_floor:
                return False
            if floor not in self._up_stops and floor not in self._down_stops:
                if floor > self._current_floor:
                    self._up_stops.add(floor)
                else:
                    self._down_stops.add(floor)
            self._condition.notify_all()
            return True

    def shutdown(self):
        """Ask the service loop to stop at its next suspension point. Idempotent."""
        with self._condition:
            self._stopped = True
            self._condition.notify_all()

    # --- Service loop ---

    def run(self):
        while True:
            next_stop = self._await_next_stop()
            if next_stop is None:
                break
            stop_set, target = next_stop

            if not self._travel_to(target):
                break

            with self._condition:
                stop_set.discard(target)
            self.set_state("DOORS_OPEN")
            self.door.cycle(target)

        self._finish()

    def _await_next_stop(self):
        """
        Block until a stop is pending, then commit to it.

        Returns:
            (stop_set, target) or None once shutdown has been signaled
        """
        with self._condition:
            going_idle = not self._has_pending_locked() and not self._stopped
            if going_idle:
                self._direction = Direction.IDLE
        if going_idle:
            self.set_state("IDLE")

        with self._condition:
            while not self._has_pending_locked() and not self._stopped:
                self._direction = Direction.IDLE
                self._condition.wait()
            if self._stopped:
                return None

            stop_set, target = self._select_next_stop()
            if target > self._current_floor:
                self._direction = Direction.UP
            elif target < self._current_floor:
                self._direction = Direction.DOWN
            else:
                self._direction = Direction.UP if stop_set is self._up_stops else Direction.DOWN
            self._last_travel = self._direction
            direction = self._direction

        self.set_state("MOVING_UP" if direction is Direction.UP else "MOVING_DOWN")
        return stop_set, target

    def _select_next_stop(self):
        # Caller holds the lock and has checked that a stop is pending
        if self.service_policy == SCAN and self._last_travel is Direction.DOWN:
            # Only stops still below the car continue the downward sweep
            below = [floor for floor in self._down_stops if floor < self._current_floor]
            if below:
                return self._down_stops, max(below)
        if self._up_stops:
            return self._up_stops, min(self._up_stops)
        return self._down_stops, max(self._down_stops)

    def _travel_to(self, target: int) -> bool:
        """
        Move one floor at a time toward target.

        Returns:
            False if shutdown was observed between floors
        """
        while True:
            with self._condition:
                if self._stopped:
                    return False
                if self._current_floor == target:
                    return True
                step = 1 if target > self._current_floor else -1

            self.clock.sleep(self.floor_travel_time)

            with self._condition:
                self._current_floor += step
                floor = self._current_floor
            self._broadcast(events.MOVED, floor, direction=Direction.UP if step > 0 else Direction.DOWN)

    def _finish(self):
        with self._condition:
            self._direction = Direction.IDLE
            floor = self._current_floor
        self.set_state("SHUTDOWN")
        self._broadcast(events.SHUTTING_DOWN, floor)

    def _has_pending_locked(self) -> bool:
        return bool(self._up_stops or self._down_stops)

    # --- Reporting ---

    def _broadcast(self, kind: str, floor: int, direction: Optional[Direction] = None):
        message = {
            "timestamp": self.clock.now(),
            "elevator_id": self.elevator_id,
            "elevator_name": self.name,
            "event": kind,
            "floor": floor,
        }
        if direction is not None:
            message["direction"] = direction.value
        self.broker.put(events.elevator_topic(self.name, kind), message)

    def _on_state_changed(self, old_state: str, new_state: str):
        with self._condition:
            floor = self._current_floor
            direction = self._direction
        self._log_state_change(old_state, new_state, {
            "elevator_id": self.elevator_id,
            "elevator_name": self.name,
            "floor": floor,
            "direction": direction.value,
        })

    def __repr__(self):
        return f"<Elevator {self.name} floor={self.current_floor} direction={self.direction.value}>"
