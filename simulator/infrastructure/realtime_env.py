"""
RealtimeEnvironment

A SimPy environment that paces simulated time against the wall clock, so a
crowd run can be watched (or streamed) at a chosen speed.
"""

import simpy
import time


class RealtimeEnvironment(simpy.Environment):
    """
    SimPy environment with wall-clock pacing.

    After every processed event the environment sleeps until the wall clock
    catches up with now / speed_factor. The runner ticks every few
    milliseconds, so pacing is smooth at any factor.

    Args:
        speed_factor (float): Simulated seconds per real second
            - 1.0 = real-time
            - 0.5 = half speed
            - 0.0 = no pacing (plain simpy.Environment behaviour)
    """

    def __init__(self, speed_factor=1.0, initial_time=0):
        super().__init__(initial_time=initial_time)
        self.speed_factor = speed_factor
        self._reset_reference()

    def _reset_reference(self):
        self.real_start_time = time.monotonic()
        self.sim_start_time = self.now

    def lag(self) -> float:
        """
        Real seconds the run is behind schedule (negative when ahead)
        """
        if self.speed_factor <= 0:
            return 0.0
        target = self.real_start_time + (self.now - self.sim_start_time) / self.speed_factor
        return time.monotonic() - target

    def step(self):
        result = super().step()
        if self.speed_factor > 0:
            ahead = -self.lag()
            if ahead > 0:
                time.sleep(ahead)
        return result

    def set_speed(self, speed_factor):
        """
        Change pacing during a run; timing restarts from the current instant.
        """
        self.speed_factor = speed_factor
        self._reset_reference()

    def get_speed(self):
        return self.speed_factor
