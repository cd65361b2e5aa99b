"""Core simulation entities"""

from .entity import Entity
from .elevator import Elevator, FIXED_PRIORITY, SCAN, SERVICE_POLICIES
from .door import Door
from .request import Direction, Request, ElevatorSnapshot

__all__ = [
    'Entity',
    'Elevator',
    'Door',
    'Direction',
    'Request',
    'ElevatorSnapshot',
    'FIXED_PRIORITY',
    'SCAN',
    'SERVICE_POLICIES',
]
