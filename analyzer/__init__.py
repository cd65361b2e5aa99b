"""
Analyzer package

Subscribers that record, render and plot the simulation's event stream.
"""

from .statistics import Statistics
from .console_reporter import ConsoleReporter

__all__ = [
    'Statistics',
    'ConsoleReporter',
]
