import contextlib
import threading
import time
from typing import Iterable, List, Optional

from simulator.core import events
from simulator.core.elevator import Elevator, FIXED_PRIORITY
from simulator.core.request import ElevatorSnapshot, Request
from simulator.infrastructure.message_broker import MessageBroker
from simulator.infrastructure.realtime_env import RealtimeClock
from .algorithms.idle_first_nearest import IdleFirstNearestStrategy
from .interfaces.allocation_strategy import IAllocationStrategy


class Dispatcher:
    """
    Owns the elevator bank and routes requests to it.

    Hall calls go to the elevator chosen by the allocation strategy, car
    calls go straight to the addressed elevator. Every call returns as soon
    as the stop is queued; the elevators' own threads do the travelling.

    Selection reads each elevator's snapshot separately and then enqueues,
    so two concurrent hall calls can pick the same idle car. With
    atomic_assignment=True the select-and-enqueue step is serialized.
    """
    def __init__(self, elevators: Iterable[Elevator], broker: MessageBroker,
                 strategy: Optional[IAllocationStrategy] = None,
                 atomic_assignment: bool = False, name: str = "Dispatcher"):
        self.elevators: List[Elevator] = list(elevators)
        if not self.elevators:
            raise ValueError("Dispatcher needs at least one elevator")
        self.broker = broker
        self.strategy = strategy if strategy is not None else IdleFirstNearestStrategy()
        self.atomic_assignment = atomic_assignment
        self.name = name
        self._by_id = {elevator.elevator_id: elevator for elevator in self.elevators}
        self._assignment_lock = threading.Lock()

    @classmethod
    def create(cls, broker: MessageBroker, num_elevators: int = 3, start_floor: int = 1,
               start_floors: Optional[List[int]] = None, clock: Optional[RealtimeClock] = None,
               floor_travel_time: float = 0.4, dwell_time: float = 0.3,
               service_policy: str = FIXED_PRIORITY, **kwargs) -> 'Dispatcher':
        """
        Build a bank of elevators numbered 1..num_elevators.

        Args:
            start_floors: Optional per-elevator start floors, overriding start_floor
            **kwargs: Passed on to the Dispatcher constructor (strategy, atomic_assignment)
        """
        if start_floors is not None and len(start_floors) != num_elevators:
            raise ValueError(f"start_floors length ({len(start_floors)}) must match num_elevators ({num_elevators})")
        elevators = [
            Elevator(
                elevator_id=i,
                broker=broker,
                clock=clock,
                start_floor=start_floors[i - 1] if start_floors is not None else start_floor,
                floor_travel_time=floor_travel_time,
                dwell_time=dwell_time,
                service_policy=service_policy,
            )
            for i in range(1, num_elevators + 1)
        ]
        return cls(elevators, broker, **kwargs)

    def start(self):
        """Start every elevator's service thread."""
        for elevator in self.elevators:
            elevator.start()

    # --- Submission interface ---

    def external_request(self, floor: int, direction) -> int:
        """
        Assign a hall call to an elevator and queue it there.

        Returns:
            elevator_id of the chosen elevator
        """
        return self.submit(Request.external(floor, direction))

    def internal_request(self, elevator_id: int, floor: int):
        """Queue a car call on the addressed elevator (ids are 1-based)."""
        self.submit(Request.car_call(elevator_id, floor))

    def submit(self, request: Request) -> int:
        """Route either kind of request. Returns the id of the elevator that got it."""
        if request.internal:
            elevator = self.get_elevator(request.elevator_id)
            self._announce(elevator, request)
            elevator.add_request(request.floor)
            return elevator.elevator_id

        lock = self._assignment_lock if self.atomic_assignment else contextlib.nullcontext()
        with lock:
            elevator_id = self.strategy.select_elevator(request, self.status())
            elevator = self._by_id[elevator_id]
            self._announce(elevator, request)
            queued = elevator.queue_stop(request.floor)
        # Same-floor door cycle runs after the lock is released
        if not queued:
            elevator.door.cycle(request.floor)
        return elevator_id

    def get_elevator(self, elevator_id: int) -> Elevator:
        try:
            return self._by_id[elevator_id]
        except KeyError:
            raise IndexError(
                f"No elevator with id {elevator_id}; valid ids are 1..{len(self.elevators)}") from None

    def shutdown(self):
        """Signal every elevator to stop. Does not wait for their threads."""
        for elevator in self.elevators:
            elevator.shutdown()

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the elevator threads after shutdown().

        timeout bounds the whole wait, not each thread.

        Returns:
            True if every thread has terminated
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        for elevator in self.elevators:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            elevator.join(remaining)
        return not any(elevator.is_alive() for elevator in self.elevators)

    def status(self) -> List[ElevatorSnapshot]:
        """Snapshot of every elevator, in bank order."""
        return [elevator.snapshot() for elevator in self.elevators]

    def _announce(self, elevator: Elevator, request: Request):
        message = {
            "timestamp": self.broker.get_current_time(),
            "elevator_id": elevator.elevator_id,
            "elevator_name": elevator.name,
            "event": events.ASSIGNED,
            "floor": request.floor,
            "direction": request.direction.value,
            "internal": request.internal,
            "request": str(request),
        }
        self.broker.put(events.ASSIGNMENT_TOPIC, message)
