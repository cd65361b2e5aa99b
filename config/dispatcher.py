"""
Dispatcher Configuration

Control logic settings only, not physical specifications.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional


@dataclass
class AllocationStrategyConfig:
    """Configuration for call allocation strategy"""
    name: str = "IdleFirstNearest"
    parameters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            raise ValueError("allocation_strategy.name cannot be empty")


@dataclass
class DispatcherConfig:
    """
    Dispatcher configuration

    atomic_assignment serializes select-then-enqueue for hall calls so that
    concurrent calls never both see the same car as idle.
    """
    allocation_strategy: Optional[AllocationStrategyConfig] = None
    atomic_assignment: bool = False

    def __post_init__(self):
        if self.allocation_strategy is None:
            self.allocation_strategy = AllocationStrategyConfig()

    @classmethod
    def from_dict(cls, data: dict) -> 'DispatcherConfig':
        """Create DispatcherConfig from dictionary"""
        data = data or {}
        dispatcher_data = data.get('dispatcher', data)

        alloc_data = dispatcher_data.get('allocation_strategy', {})
        allocation_strategy = AllocationStrategyConfig(
            name=alloc_data.get('name', 'IdleFirstNearest'),
            parameters=alloc_data.get('parameters', {})
        )

        return cls(
            allocation_strategy=allocation_strategy,
            atomic_assignment=dispatcher_data.get('atomic_assignment', False)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            'dispatcher': {
                'allocation_strategy': {
                    'name': self.allocation_strategy.name,
                    'parameters': self.allocation_strategy.parameters
                },
                'atomic_assignment': self.atomic_assignment
            }
        }

    def validate(self):
        """Validate configuration consistency"""
        if not self.allocation_strategy.name:
            raise ValueError("allocation_strategy.name is required")
        if not isinstance(self.atomic_assignment, bool):
            raise ValueError("atomic_assignment must be true or false")
