"""
Nearest Car Strategy

Direction-aware distance allocation. An alternative to the default
idle-first policy for buildings with a known floor count.
"""

from typing import Sequence

from simulator.core.request import Direction, ElevatorSnapshot, Request
from ..interfaces.allocation_strategy import IAllocationStrategy


class NearestCarStrategy(IAllocationStrategy):
    """
    Nearest car allocation strategy

    Selection Logic:
    - IDLE elevators: Simple distance calculation
    - Moving elevators: Consider circular movement
      * UP: Goes to top floor, then reverses to DOWN
      * DOWN: Goes to floor 1, then reverses to UP

    Usage:
        strategy = NearestCarStrategy(num_floors=10)
        elevator_id = strategy.select_elevator(request, snapshots)
    """

    def __init__(self, num_floors: int = 10):
        """
        Args:
            num_floors: Total number of floors in the building
        """
        self.num_floors = num_floors

    def select_elevator(
        self,
        request: Request,
        snapshots: Sequence[ElevatorSnapshot]
    ) -> int:
        best_elevator = None
        best_score = float('inf')

        for snapshot in snapshots:
            distance = self._calculate_circular_distance(
                snapshot.current_floor, snapshot.direction, request.floor, request.direction
            )
            if distance < best_score:
                best_score = distance
                best_elevator = snapshot

        if best_elevator is None:
            raise ValueError("Cannot allocate a call without elevators")
        return best_elevator.elevator_id

    def _calculate_circular_distance(
        self,
        car_floor: int,
        direction: Direction,
        call_floor: int,
        call_direction: Direction
    ) -> float:
        """
        Estimated travel distance in floors

        Circular Movement Logic:
        - UP elevator: Continues to top floor, then reverses to DOWN
        - DOWN elevator: Continues to floor 1, then reverses to UP
        - IDLE: Simple distance
        """
        if direction is Direction.UP:
            if call_direction is Direction.UP and call_floor > car_floor:
                # Call is ahead in the same direction: picked up on the way
                return call_floor - car_floor
            # Call is behind: current -> top -> call_floor
            return (self.num_floors - car_floor) + (self.num_floors - call_floor)

        if direction is Direction.DOWN:
            if call_direction is Direction.DOWN and call_floor < car_floor:
                return car_floor - call_floor
            # current -> bottom -> call_floor
            return (car_floor - 1) + (call_floor - 1)

        return abs(call_floor - car_floor)

    def get_strategy_name(self) -> str:
        return "Nearest Car (Circular Distance-based)"
