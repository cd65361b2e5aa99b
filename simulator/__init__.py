"""
Elevator Bank Simulator - Core simulation engine

This package provides the threaded elevator actors and the message
broker they report through.
"""

__version__ = "0.1.0"

from .core.elevator import Elevator
from .core.door import Door
from .core.entity import Entity
from .core.request import Direction, Request, ElevatorSnapshot

from .infrastructure.message_broker import MessageBroker
from .infrastructure.realtime_env import RealtimeClock

__all__ = [
    'Elevator',
    'Door',
    'Entity',
    'Direction',
    'Request',
    'ElevatorSnapshot',
    'MessageBroker',
    'RealtimeClock',
]
