"""Allocation algorithms, selectable by name from configuration"""

from ..interfaces.allocation_strategy import IAllocationStrategy
from .idle_first_nearest import IdleFirstNearestStrategy
from .nearest_car import NearestCarStrategy

STRATEGIES = {
    'IdleFirstNearest': IdleFirstNearestStrategy,
    'NearestCar': NearestCarStrategy,
}


def create_allocation_strategy(name: str, **parameters) -> IAllocationStrategy:
    """Build an allocation strategy from its configured name and parameters"""
    try:
        strategy_class = STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown allocation strategy: {name}. Must be one of {sorted(STRATEGIES)}") from None
    return strategy_class(**parameters)


__all__ = [
    'IdleFirstNearestStrategy',
    'NearestCarStrategy',
    'STRATEGIES',
    'create_allocation_strategy',
]
