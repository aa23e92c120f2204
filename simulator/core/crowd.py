"""
Crowd - agents walking toward one escalator

Agent state lives in numpy arrays. Repulsion between agents uses the
compact-support kernel from kernel.py.
"""

import math
from typing import Callable, Optional

import numpy as np

from .geometry import Box, normalize, vec3
from .kernel import weight, weights


class Crowd:
    """
    Fixed-size group of agents walking toward one escalator.

    Agents are stored as rows of the positions / velocities arrays and are
    identified by their row index for the whole simulation: an agent that
    finishes its ride is moved back to the catchment area, never removed.
    Every agent shares the same body box (half extents).
    """

    def __init__(self, count: int, position, rng: np.random.Generator,
                 max_speed: float = 1.0, width: float = 0.2, depth: float = 0.1,
                 height: float = 0.6, name: str = None):
        """
        Initialize crowd

        Args:
            count: Number of agents
            position: Crowd origin on the ground (centre of the catchment disk)
            rng: Random generator used for placement and respawn
            max_speed: Speed limit of free-walking agents
            width: Body size across (x)
            depth: Body size along the walking direction (y)
            height: Body height (z)
            name: Crowd name (for logging)
        """
        self.count = count
        self.position = np.asarray(position, dtype=np.float64)
        self.rng = rng
        self.max_speed = max_speed
        self.width = width
        self.depth = depth
        self.height = height
        self.name = name if name is not None else "Crowd"

        self.half_size = vec3(width / 2, depth / 2, height / 2)
        self.min_separation = max(width, depth) * 3
        self.repulsion_radius = self.min_separation * 3
        self.catchment_radius = max(
            max(30 / math.sqrt(count), 1.0) * self.min_separation, 10.0
        )

        self.positions = np.zeros((count, 3))
        self.velocities = np.zeros((count, 3))

    @classmethod
    def from_config(cls, crowd_config, position, rng: np.random.Generator, name: str = None) -> 'Crowd':
        """Create a crowd from a CrowdConfig"""
        return cls(
            count=crowd_config.people_num,
            position=position,
            rng=rng,
            max_speed=crowd_config.max_speed,
            width=crowd_config.body_width,
            depth=crowd_config.body_depth,
            height=crowd_config.body_height,
            name=name
        )

    # ========================================
    # Placement
    # ========================================

    def generate_random_point(self, offset=None) -> np.ndarray:
        """
        Draw a standing point from the catchment disk around the crowd origin.

        The radius is drawn uniformly (not area-uniform), so points cluster
        toward the centre.
        """
        if offset is None:
            offset = np.zeros(3)
        theta = self.rng.random() * 2 * math.pi
        radii = self.catchment_radius * self.rng.random()
        return vec3(
            self.position[0] + offset[0] + radii * math.cos(theta),
            self.position[1] + offset[1] + radii * math.sin(theta),
            self.position[2] + offset[2] + self.height * 0.5
        )

    def initialize_positions(self, excluded_box: Optional[Box] = None,
                             max_attempts: int = 200, offset=None) -> int:
        """
        Rejection-sample a start position for every agent.

        A draw is accepted if it lies outside excluded_box and keeps at least
        min_separation from every agent placed before it. When all attempts
        fail, the last draw is kept anyway; residual overlap is resolved later
        by repulsion.

        Args:
            excluded_box: Region agents must not start in (the escalator ramp)
            max_attempts: Draws per agent before giving up
            offset: Shift applied to the catchment disk centre

        Returns:
            Number of agents placed without a valid draw
        """
        failed = 0
        for i in range(self.count):
            pos = None
            is_valid = False
            attempts = 0
            while attempts < max_attempts and not is_valid:
                pos = self.generate_random_point(offset)
                attempts += 1
                if excluded_box is not None and excluded_box.contains_point(pos):
                    continue
                if i > 0:
                    distances = np.linalg.norm(self.positions[:i] - pos, axis=1)
                    if np.any(distances < self.min_separation):
                        continue
                is_valid = True

            self.positions[i] = pos
            if not is_valid:
                failed += 1
                print(f"[{self.name}] WARNING: Could not find non-colliding position for agent {i} after {max_attempts} attempts")

            vx = 0.5 * (self.rng.random() - 0.5)
            vy = 0.5 * (self.rng.random() - 0.5)
            self.velocities[i] = vec3(vx, vy, -1.0)

        return failed

    # ========================================
    # Queries
    # ========================================

    def box_at(self, pos: np.ndarray) -> Box:
        """Body box of an agent standing at pos"""
        return Box.from_center(pos, self.half_size)

    def repulsion_from(self, index: int, pos: np.ndarray, positions: np.ndarray = None) -> np.ndarray:
        """
        Kernel-weighted push away from every other agent, horizontal only.

        Args:
            index: Index of the agent being pushed (skipped in the sum)
            pos: Position to evaluate at
            positions: Positions of the others (defaults to the live positions)
        """
        if positions is None:
            positions = self.positions
        h = self.repulsion_radius
        force = np.zeros(3)
        for j in range(len(positions)):
            if j == index:
                continue
            dr = pos - positions[j]
            r = float(np.linalg.norm(dr))
            if 0.0 < r < h:
                force += normalize(dr) * weight(r, h)
        force[2] = 0.0
        return force

    def repulsion_field(self, positions: np.ndarray = None) -> np.ndarray:
        """
        repulsion_from() for every agent at once.

        Returns:
            (count, 3) array; row i is the push on agent i
        """
        if positions is None:
            positions = self.positions
        n = positions.shape[0]
        if n == 0:
            return np.zeros((0, 3))

        diff = positions[:, np.newaxis, :] - positions[np.newaxis, :, :]
        dists = np.linalg.norm(diff, axis=2)

        active = (dists > 0.0) & (dists < self.repulsion_radius)
        np.fill_diagonal(active, False)

        safe_dists = np.where(active, dists, 1.0)
        magnitude = np.where(active, weights(dists, self.repulsion_radius), 0.0)

        field = np.sum(diff / safe_dists[:, :, np.newaxis] * magnitude[:, :, np.newaxis], axis=1)
        field[:, 2] = 0.0
        return field

    def is_occupied_near(self, candidate: np.ndarray, excluding_index: int) -> bool:
        """True if another agent stands within half the minimum separation of candidate"""
        distances = np.linalg.norm(self.positions - candidate, axis=1)
        distances[excluding_index] = np.inf
        return bool(np.any(distances < self.min_separation * 0.5))

    # ========================================
    # Tick
    # ========================================

    def update(self, dt: float, agent_step: Callable[[int, np.ndarray, float], None]):
        """
        Run one tick over all agents in index order.

        Phase 1 freezes the positions and computes every agent's repulsion
        from that snapshot; phase 2 hands each agent its repulsion vector.
        Agents mutated early in phase 2 therefore never influence the
        repulsion seen by later ones.

        Args:
            dt: Time step of this tick, handed through to agent_step
            agent_step: Called as agent_step(index, repulsion, dt) for each agent
        """
        frozen = self.positions.copy()
        repulsion = self.repulsion_field(frozen)
        for i in range(self.count):
            agent_step(i, repulsion[i], dt)

    def __repr__(self) -> str:
        return f"Crowd(name={self.name}, count={self.count}, origin={self.position.tolist()})"
