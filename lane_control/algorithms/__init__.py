"""Lane-discipline strategy implementations"""

from .force_push import ForcePushStrategy
from .shift_position import ShiftPositionStrategy
from .do_nothing import DoNothingStrategy

__all__ = [
    'ForcePushStrategy',
    'ShiftPositionStrategy',
    'DoNothingStrategy',
]
