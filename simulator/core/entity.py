import itertools  # Helper for entity ID counter
import threading
from abc import ABC, abstractmethod
from typing import Optional

from ..infrastructure.message_broker import MessageBroker
from . import events


class Entity(ABC):
    """
    Abstract base class for actors in the simulation.

    Each entity owns one daemon thread that executes run(). The thread is
    created in the constructor but only started by start(), so an entity
    can be built and inspected before it begins to act.
    """
    # Entity ID counter shared across all class instances
    _entity_id_counter = itertools.count()

    def __init__(self, broker: MessageBroker, name: str = None):
        """
        Initialize the entity.

        Args:
            broker: Message broker state changes are reported to.
            name: Entity name. Optional. If not specified, auto-generated from class name and ID.
        """
        self.broker = broker
        # Generate unique entity ID
        self.entity_id: int = next(self._entity_id_counter)
        self.name: str = name if name is not None else f"{self.__class__.__name__}_{self.entity_id}"

        # Specific state values are defined by concrete classes
        self.state: str = "initial_state"
        self._state_lock = threading.Lock()

        self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)

    @abstractmethod
    def run(self):
        """
        Main body of the entity's thread (abstract method).

        Typically a loop that returns once the entity has been told to stop.
        """

    # --- Common utility methods ---

    def start(self):
        """Start the entity's thread."""
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the entity's thread to finish.

        Returns:
            True if the thread has terminated.
        """
        if self._thread.ident is not None:
            self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def set_state(self, new_state: str):
        """
        Transition the entity's state.

        Args:
            new_state: String representing the target state for transition.
        """
        with self._state_lock:
            if self.state == new_state:
                return
            old_state = self.state
            self.state = new_state
        self._on_state_changed(old_state, new_state)

    def get_state(self) -> str:
        with self._state_lock:
            return self.state

    def _on_state_changed(self, old_state: str, new_state: str):
        """
        Hook method called when state changes.
        Subclasses extend this to attach their own identifiers to the report.
        """
        self._log_state_change(old_state, new_state, {})

    def _log_state_change(self, old_state: str, new_state: str, extra: dict):
        message = {
            "timestamp": self.broker.get_current_time(),
            "entity": self.name,
            "event": events.STATE,
            "old_state": old_state,
            "state": new_state,
        }
        message.update(extra)
        self.broker.put(events.elevator_topic(self.name, events.STATE), message)

    @property
    def thread(self) -> threading.Thread:
        """The thread object backing this entity."""
        return self._thread
