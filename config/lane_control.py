"""
Lane Control Configuration

Selects the lane-discipline strategy applied near the belt entry and the
probabilities used to split the crowd into left / right lanes.
"""

from dataclasses import dataclass


# Names accepted by lane_control.create_lane_strategy()
LANE_STRATEGIES = ("forcePush", "shiftPosition", "doNothing")


@dataclass
class LaneControlConfig:
    """
    Lane discipline configuration

    Attributes:
        strategy: One of forcePush, shiftPosition, doNothing
        go_left_prob: Probability that an agent is assigned to the left lane
        go_left_walk_prob: Probability that an agent keeps walking on the left lane
        left_walk_speed: Extra forward speed of walking riders (units/s)
    """
    strategy: str = "doNothing"
    go_left_prob: float = 0.0
    go_left_walk_prob: float = 0.0
    left_walk_speed: float = 1.0

    def __post_init__(self):
        if self.strategy not in LANE_STRATEGIES:
            raise ValueError(f"strategy must be one of {LANE_STRATEGIES}, got '{self.strategy}'")
        if not (0.0 <= self.go_left_prob <= 1.0):
            raise ValueError("go_left_prob must be between 0 and 1")
        if not (0.0 <= self.go_left_walk_prob <= 1.0):
            raise ValueError("go_left_walk_prob must be between 0 and 1")
        if self.left_walk_speed < 0:
            raise ValueError("left_walk_speed cannot be negative")

    @classmethod
    def from_dict(cls, data: dict) -> 'LaneControlConfig':
        """Create LaneControlConfig from dictionary"""
        lane_data = data.get('lane_control', data)
        return cls(
            strategy=lane_data.get('strategy', 'doNothing'),
            go_left_prob=lane_data.get('go_left_prob', 0.0),
            go_left_walk_prob=lane_data.get('go_left_walk_prob', 0.0),
            left_walk_speed=lane_data.get('left_walk_speed', 1.0)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            'strategy': self.strategy,
            'go_left_prob': self.go_left_prob,
            'go_left_walk_prob': self.go_left_walk_prob,
            'left_walk_speed': self.left_walk_speed
        }
