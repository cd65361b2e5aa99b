"""Infrastructure components for simulation"""

from .message_broker import MessageBroker
from .realtime_env import RealtimeClock

__all__ = [
    'MessageBroker',
    'RealtimeClock',
]
