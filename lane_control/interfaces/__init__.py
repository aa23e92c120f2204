"""Interface definitions for lane control"""

from .lane_strategy import ILaneStrategy

__all__ = [
    'ILaneStrategy',
]
