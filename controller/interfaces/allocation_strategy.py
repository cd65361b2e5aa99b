"""
Allocation Strategy Interface

Defines how elevators are selected for hall calls.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from simulator.core.request import ElevatorSnapshot, Request


class IAllocationStrategy(ABC):
    """
    Interface for elevator allocation strategies

    Defines how to select the best elevator for a given hall call.

    Usage Examples:
    - IdleFirstNearest: idle cars first, then the nearest car overall
    - NearestCar: direction-aware circular distance
    """

    @abstractmethod
    def select_elevator(
        self,
        request: Request,
        snapshots: Sequence[ElevatorSnapshot]
    ) -> int:
        """
        Select the best elevator for a hall call

        Args:
            request: External request (floor and informational direction)
            snapshots: Current state of every elevator, in bank order.
                Each snapshot was taken separately, so the set as a whole
                may already be stale when the strategy sees it.

        Returns:
            int: elevator_id of the selected elevator

        Design Notes:
            - Must return the id of one of the given snapshots
            - Ties are broken by bank order (first encountered wins)
        """

    @abstractmethod
    def get_strategy_name(self) -> str:
        """
        Get the name of this strategy

        Returns:
            str: Strategy name (for logging and debugging)
        """
