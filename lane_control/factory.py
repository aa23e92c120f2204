"""
Lane Strategy Factory

Resolves a configured strategy name to an ILaneStrategy instance.
"""

from .interfaces.lane_strategy import ILaneStrategy
from .algorithms.force_push import ForcePushStrategy
from .algorithms.shift_position import ShiftPositionStrategy
from .algorithms.do_nothing import DoNothingStrategy


STRATEGY_CLASSES = {
    'forcePush': ForcePushStrategy,
    'shiftPosition': ShiftPositionStrategy,
    'doNothing': DoNothingStrategy,
}


def create_lane_strategy(name: str) -> ILaneStrategy:
    """
    Create lane strategy by name

    Args:
        name: One of 'forcePush', 'shiftPosition', 'doNothing'

    Returns:
        ILaneStrategy instance

    Raises:
        ValueError: If the name is not a known strategy
    """
    if name not in STRATEGY_CLASSES:
        raise ValueError(
            f"Unknown lane strategy: {name} (expected one of {', '.join(STRATEGY_CLASSES)})"
        )
    return STRATEGY_CLASSES[name]()
