"""HTTP interface for the elevator bank"""

from .http_server import create_app, run_server

__all__ = ['create_app', 'run_server']
