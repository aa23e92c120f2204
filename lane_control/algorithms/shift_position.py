"""
Shift Position Strategy

Places agents directly on the aisle of their assigned lane.
"""

import numpy as np

from ..interfaces.lane_strategy import ILaneStrategy


class ShiftPositionStrategy(ILaneStrategy):
    """
    Snap lateral position to the left / right aisle

    Usage:
        strategy = ShiftPositionStrategy()
        strategy.apply(pos, vel, goes_left, belt)
    """

    def apply(self, pos: np.ndarray, vel: np.ndarray, goes_left: bool, belt) -> None:
        pos[0] = belt.aisle_left if goes_left else belt.aisle_right

    def get_strategy_name(self) -> str:
        return "shiftPosition"
