"""
Escalator Lane Control

This package provides the lane-discipline strategies applied to agents
queuing at the escalator entry, and the per-agent lane assignment.
"""

__version__ = "0.1.0"

from .interfaces.lane_strategy import ILaneStrategy
from .algorithms import ForcePushStrategy, ShiftPositionStrategy, DoNothingStrategy
from .factory import create_lane_strategy
from .assignment import LaneAssignment

__all__ = [
    'ILaneStrategy',
    'ForcePushStrategy',
    'ShiftPositionStrategy',
    'DoNothingStrategy',
    'create_lane_strategy',
    'LaneAssignment',
]
