"""
Lane Strategy Interface

Defines how agents split into the left and right lane just before they
step onto the belt.
"""

from abc import ABC, abstractmethod

import numpy as np


class ILaneStrategy(ABC):
    """
    Interface for lane-discipline strategies

    Called once per tick for every free-walking agent that stands in the
    entry zone of its escalator (EscalatorBelt.ready_to_enter), after the
    forces have been composed and before the position is integrated.

    Design Philosophy:
    - Pure adjustment (mutates only the agent's own position / velocity)
    - Stateless (decisions based on lane assignment and belt geometry)
    - Pluggable (selected by name from configuration)

    Usage Examples:
    - forcePush: nudge lateral velocity toward the assigned lane
    - shiftPosition: place the agent directly on the assigned aisle
    - doNothing: let forces alone decide
    """

    @abstractmethod
    def apply(self, pos: np.ndarray, vel: np.ndarray, goes_left: bool, belt) -> None:
        """
        Adjust an agent about to enter the belt

        Args:
            pos: Agent position (modified in place)
            vel: Agent velocity (modified in place)
            goes_left: True if the agent is assigned to the left lane
            belt: EscalatorBelt the agent is queuing for (aisle coordinates)
        """
        pass

    @abstractmethod
    def get_strategy_name(self) -> str:
        """
        Get the name of this strategy

        Returns:
            str: Strategy name (for logging and snapshots)
        """
        pass
