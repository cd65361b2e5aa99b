"""
realtime_env.py

Scaled wall clock shared by the elevator threads.
Allows controlling simulation speed for debugging and visualization purposes.
"""

import time


class RealtimeClock:
    """
    Clock that maps simulated delays onto real time.

    Every travel and door delay goes through sleep(), so the whole bank
    speeds up or slows down together.

    Args:
        speed_factor (float): Speed multiplier for simulation
            - 1.0 = real-time (1 sim second = 1 real second)
            - 0.5 = half speed (1 sim second = 2 real seconds)
            - 2.0 = double speed (1 sim second = 0.5 real seconds)
            - 0.0 = no delay (fastest possible)

    Example:
        >>> clock = RealtimeClock(speed_factor=0.5)  # Half speed
        >>> clock.sleep(0.4)  # Blocks the calling thread for 0.8 seconds
    """

    def __init__(self, speed_factor=1.0):
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        self.speed_factor = speed_factor
        self.real_start_time = time.monotonic()
        self.sim_start_time = 0.0

    def now(self) -> float:
        """
        Simulated seconds since the clock started.

        With speed_factor 0.0 there is no meaningful scaling and the
        elapsed real time is reported instead.
        """
        elapsed = time.monotonic() - self.real_start_time
        if self.speed_factor > 0:
            elapsed *= self.speed_factor
        return self.sim_start_time + elapsed

    def sleep(self, seconds: float):
        """Block the calling thread for a simulated duration."""
        if seconds <= 0 or self.speed_factor <= 0:
            return
        time.sleep(seconds / self.speed_factor)

    def set_speed(self, speed_factor):
        """
        Dynamically change simulation speed during runtime.

        Example:
            >>> clock.set_speed(0.1)  # Slow down to 10% for debugging
            >>> clock.set_speed(10.0)  # Speed up 10x for testing
        """
        if speed_factor < 0:
            raise ValueError("speed_factor cannot be negative")
        # Reset timing references when changing speed
        self.sim_start_time = self.now()
        self.real_start_time = time.monotonic()
        self.speed_factor = speed_factor

    def get_speed(self):
        return self.speed_factor
