"""
Lane Assignment

Decides once per agent whether it keeps to the left lane and whether it
walks up the belt while riding on the left half.
"""

from dataclasses import dataclass, field
from typing import Set

import numpy as np


@dataclass
class LaneAssignment:
    """
    Per-agent lane membership for one crowd

    Attributes:
        go_left: Indices of agents assigned to the left lane
        go_left_walk: Indices of agents that walk when on the left half
    """
    go_left: Set[int] = field(default_factory=set)
    go_left_walk: Set[int] = field(default_factory=set)

    @classmethod
    def draw(cls, count: int, go_left_prob: float, go_left_walk_prob: float,
             rng: np.random.Generator) -> 'LaneAssignment':
        """
        Two independent Bernoulli draws per agent index

        The walk draw is independent of the lane draw: an agent may be in
        go_left_walk without being in go_left (it then walks only if it
        happens to end up on the left half).
        """
        assignment = cls()
        for i in range(count):
            if rng.random() < go_left_prob:
                assignment.go_left.add(i)
            if rng.random() < go_left_walk_prob:
                assignment.go_left_walk.add(i)
        return assignment

    def goes_left(self, index: int) -> bool:
        return index in self.go_left

    def walks_left(self, index: int) -> bool:
        return index in self.go_left_walk
