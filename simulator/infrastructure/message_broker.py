import threading
import traceback
from typing import Callable, Dict, List, Optional

from .realtime_env import RealtimeClock

Subscriber = Callable[[str, dict], None]


class MessageBroker:
    """
    Mediates communication between components within the simulation.
    Implements a topic-based publish-subscribe model.

    Elevator threads, dispatcher callers and the HTTP server all publish
    through the same broker, so every method is thread-safe. Subscribers
    are invoked synchronously on the publishing thread, in publish order.
    """
    def __init__(self, clock: Optional[RealtimeClock] = None, verbose: bool = False):
        """
        Initialize the message broker

        Args:
            clock (RealtimeClock): Time source used for message timestamps
            verbose (bool): Echo every publish to the console
        """
        self.clock = clock if clock is not None else RealtimeClock()
        self.verbose = verbose
        self.topics: Dict[str, List[Subscriber]] = {}  # Subscribers for each topic
        self.broadcast_subscribers: List[Subscriber] = []
        self._lock = threading.Lock()

    def subscribe(self, topic: str, callback: Subscriber):
        """
        Register a callback for the specified topic
        """
        with self._lock:
            self.topics.setdefault(topic, []).append(callback)

    def subscribe_all(self, callback: Subscriber):
        """
        Register a callback that receives every message (global broadcast)
        """
        with self._lock:
            self.broadcast_subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber):
        """Remove a callback from every topic and from the broadcast list"""
        with self._lock:
            for subscribers in self.topics.values():
                if callback in subscribers:
                    subscribers.remove(callback)
            if callback in self.broadcast_subscribers:
                self.broadcast_subscribers.remove(callback)

    def put(self, topic: str, message: dict):
        """
        Publish (put) a message to the specified topic
        """
        if self.verbose:
            print(f"{self.clock.now():.2f} [Broker] Publish on '{topic}': {message}")
        with self._lock:
            subscribers = list(self.topics.get(topic, ())) + list(self.broadcast_subscribers)
        for callback in subscribers:
            try:
                callback(topic, message)
            except Exception:
                # A broken subscriber must not take down the publishing elevator
                print(f"{self.clock.now():.2f} [Broker] Subscriber failed on '{topic}'")
                traceback.print_exc()

    def get_current_time(self) -> float:
        """
        Get current simulation time

        Returns:
            Current simulation time
        """
        return self.clock.now()
