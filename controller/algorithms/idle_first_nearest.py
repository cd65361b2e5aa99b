"""
Idle-First Nearest Strategy

Two-pass greedy allocation: the nearest idle car if there is one,
otherwise the nearest car overall.
"""

from typing import Iterable, Optional, Sequence

from simulator.core.request import ElevatorSnapshot, Request
from ..interfaces.allocation_strategy import IAllocationStrategy


class IdleFirstNearestStrategy(IAllocationStrategy):
    """
    Idle-first, else nearest-overall allocation

    Selection Logic:
    - Pass 1: among elevators with no pending stops, the one with the
      smallest |current_floor - call_floor|
    - Pass 2 (no idle elevator): the same distance over all elevators
    - Ties go to the first elevator in bank order
    - The call direction is not used
    """

    def select_elevator(
        self,
        request: Request,
        snapshots: Sequence[ElevatorSnapshot]
    ) -> int:
        idle = [s for s in snapshots if not s.has_pending_requests]
        best = self._nearest(idle, request.floor)
        if best is None:
            best = self._nearest(snapshots, request.floor)
        if best is None:
            raise ValueError("Cannot allocate a call without elevators")
        return best.elevator_id

    @staticmethod
    def _nearest(snapshots: Iterable[ElevatorSnapshot], floor: int) -> Optional[ElevatorSnapshot]:
        best = None
        best_distance = None
        for snapshot in snapshots:
            distance = abs(snapshot.current_floor - floor)
            # Strict comparison keeps the first elevator on ties
            if best_distance is None or distance < best_distance:
                best = snapshot
                best_distance = distance
        return best

    def get_strategy_name(self) -> str:
        return "Idle First, Nearest Overall (Distance-based)"
