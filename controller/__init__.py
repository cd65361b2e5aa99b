"""
Elevator Dispatch Control

This package provides the dispatcher and the allocation algorithms
it uses to pick an elevator for each hall call.
"""

__version__ = "0.1.0"

from .dispatcher import Dispatcher
from .algorithms import create_allocation_strategy

__all__ = ['Dispatcher', 'create_allocation_strategy']
