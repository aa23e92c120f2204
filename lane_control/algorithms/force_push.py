"""
Force Push Strategy

Pushes agents sideways toward their assigned lane while they queue.
"""

import numpy as np

from ..interfaces.lane_strategy import ILaneStrategy


class ForcePushStrategy(ILaneStrategy):
    """
    Lateral velocity nudge toward the assigned lane

    Left-lane agents get -push added to their x velocity, everyone else
    +push. The nudge is applied every tick the agent stays in the entry
    zone, so it competes with repulsion from the neighbours instead of
    overriding it.

    Usage:
        strategy = ForcePushStrategy()
        strategy.apply(pos, vel, goes_left, belt)
    """

    def __init__(self, push: float = 1.0):
        """
        Initialize strategy

        Args:
            push: Lateral speed added per tick (units/s)
        """
        self.push = push

    def apply(self, pos: np.ndarray, vel: np.ndarray, goes_left: bool, belt) -> None:
        if goes_left:
            vel[0] -= self.push
        else:
            vel[0] += self.push

    def get_strategy_name(self) -> str:
        return "forcePush"
