"""
Shared fixtures for the elevator bank tests.

Threads run against clocks that never really sleep: RecordingClock returns
at once, GatedClock holds every delay until the test opens the gate.
"""

import sys
import threading
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from simulator.infrastructure.message_broker import MessageBroker
from simulator.infrastructure.realtime_env import RealtimeClock

WAIT_TIMEOUT = 5.0


class RecordingClock(RealtimeClock):
    """Zero-delay clock that remembers every requested delay and who asked for it"""

    def __init__(self):
        super().__init__(speed_factor=0.0)
        self.sleeps = []
        self._lock = threading.Lock()

    def sleep(self, seconds):
        with self._lock:
            self.sleeps.append((threading.current_thread().name, seconds))

    def sleeps_of(self, thread_name):
        with self._lock:
            return [seconds for name, seconds in self.sleeps if name == thread_name]


class GatedClock(RecordingClock):
    """Every delay blocks until open() is called"""

    def __init__(self):
        super().__init__()
        self.gate = threading.Event()
        self._parked = threading.Condition()

    def sleep(self, seconds):
        super().sleep(seconds)
        with self._parked:
            self._parked.notify_all()
        if not self.gate.wait(WAIT_TIMEOUT):
            raise RuntimeError("GatedClock was never opened")

    def wait_until_parked(self, thread_name, count=1, timeout=WAIT_TIMEOUT):
        """Block until thread_name has entered its count-th delay"""
        with self._parked:
            ok = self._parked.wait_for(lambda: len(self.sleeps_of(thread_name)) >= count, timeout)
        assert ok, f"{thread_name} never reached a delay"

    def open(self):
        self.gate.set()


class SteppedClock(RecordingClock):
    """Every delay waits for one step() until open() lets the rest run"""

    def __init__(self):
        super().__init__()
        self._condition = threading.Condition()
        self._permits = 0
        self._opened = False

    def sleep(self, seconds):
        super().sleep(seconds)
        with self._condition:
            self._condition.notify_all()
            if not self._condition.wait_for(lambda: self._opened or self._permits > 0, WAIT_TIMEOUT):
                raise RuntimeError("SteppedClock was never stepped")
            if not self._opened:
                self._permits -= 1

    def wait_until_parked(self, thread_name, count=1, timeout=WAIT_TIMEOUT):
        """Block until thread_name has entered its count-th delay"""
        with self._condition:
            ok = self._condition.wait_for(lambda: len(self.sleeps_of(thread_name)) >= count, timeout)
        assert ok, f"{thread_name} never reached delay {count}"

    def advance(self, thread_name, steps):
        """Let thread_name finish `steps` delays and park in the next one"""
        parked = len(self.sleeps_of(thread_name))
        for _ in range(steps):
            self.step()
            parked += 1
            self.wait_until_parked(thread_name, parked)

    def step(self):
        with self._condition:
            self._permits += 1
            self._condition.notify_all()

    def open(self):
        with self._condition:
            self._opened = True
            self._condition.notify_all()


class EventCollector:
    """Broker subscriber that keeps every message and lets tests wait for one"""

    def __init__(self, broker):
        self.messages = []
        self._condition = threading.Condition()
        broker.subscribe_all(self._on_message)

    def _on_message(self, topic, message):
        with self._condition:
            self.messages.append((topic, message))
            self._condition.notify_all()

    def of_kind(self, kind, elevator_name=None):
        with self._condition:
            return [
                message for _, message in self.messages
                if message.get('event') == kind
                and (elevator_name is None or message.get('elevator_name') == elevator_name)
            ]

    def floors(self, kind, elevator_name):
        return [message['floor'] for message in self.of_kind(kind, elevator_name)]

    def wait_for(self, predicate, timeout=WAIT_TIMEOUT):
        """Block until predicate(self) holds; fail the test on timeout"""
        with self._condition:
            ok = self._condition.wait_for(lambda: predicate(self), timeout)
        assert ok, "timed out waiting for elevator events"

    def wait_for_count(self, kind, count, elevator_name=None, timeout=WAIT_TIMEOUT):
        self.wait_for(lambda c: len(c.of_kind(kind, elevator_name)) >= count, timeout)

    def wait_for_state(self, elevator_name, state, timeout=WAIT_TIMEOUT, after=0):
        """Wait for the `after`-th or later transition into `state`"""
        self.wait_for(
            lambda c: len([m for m in c.of_kind('state', elevator_name) if m['state'] == state]) > after,
            timeout
        )


@pytest.fixture
def clock():
    return RecordingClock()


@pytest.fixture
def gated_clock():
    clock = GatedClock()
    yield clock
    # Never leave a service thread parked on the gate
    clock.open()


@pytest.fixture
def stepped_clock():
    clock = SteppedClock()
    yield clock
    clock.open()


@pytest.fixture
def stepped_broker(stepped_clock):
    return MessageBroker(stepped_clock)


@pytest.fixture
def stepped_collector(stepped_broker):
    return EventCollector(stepped_broker)


@pytest.fixture
def broker(clock):
    return MessageBroker(clock)


@pytest.fixture
def gated_broker(gated_clock):
    return MessageBroker(gated_clock)


@pytest.fixture
def collector(broker):
    return EventCollector(broker)


@pytest.fixture
def gated_collector(gated_broker):
    return EventCollector(gated_broker)
