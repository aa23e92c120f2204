"""
Do Nothing Strategy

Baseline: no lane adjustment at the belt entry.
"""

import numpy as np

from ..interfaces.lane_strategy import ILaneStrategy


class DoNothingStrategy(ILaneStrategy):
    """Leaves agents to the wall and repulsion forces"""

    def apply(self, pos: np.ndarray, vel: np.ndarray, goes_left: bool, belt) -> None:
        return None

    def get_strategy_name(self) -> str:
        return "doNothing"
