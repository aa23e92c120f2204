"""
Escalator - moving stair belt

This module provides the EscalatorBelt class which manages:
- A fixed set of evenly spaced step boxes that loop from bottom to top
- Transport velocity of the belt (eased vertically near the top landing)
- Collision queries snapping agents onto step surfaces
- Wall, steering and arrival helpers used by free-walking agents

The visual model of the escalator is loaded elsewhere; the belt only needs
its bounding box and size (EscalatorGeometry).
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .geometry import Box, horizontal, vec3
from .kernel import weight


@dataclass
class EscalatorGeometry:
    """
    Static bounds of the loaded escalator model.

    Attributes:
        ramp_box: Bounding box of the whole escalator (ramp, landings, handrails)
        size: Overall size vector of the model
    """
    ramp_box: Box
    size: np.ndarray

    @classmethod
    def synthesize(cls, position, stairs_num: int, dy: float = 0.226, dz: float = 0.128,
                   width: float = 1.0) -> 'EscalatorGeometry':
        """
        Build the bounds a loaded model of stairs_num steps would report.

        Used when no external geometry is available (tests, headless runs).
        """
        position = np.asarray(position, dtype=np.float64)
        y0 = EscalatorBelt.Y_OFFSET + position[1]
        z0 = EscalatorBelt.Z_OFFSET + position[2]
        ground = EscalatorBelt.GROUND_OFFSET + position[2]
        ymax = stairs_num * dy + y0
        zmax = stairs_num * dz + z0

        ramp_box = Box(
            vec3(position[0] - width / 2, position[1], ground),
            vec3(position[0] + width / 2, ymax + 0.7, zmax + 1.0)
        )
        return cls(ramp_box=ramp_box, size=ramp_box.size)


class EscalatorBelt:
    """
    Looping belt of count + pad steps.

    Steps keep exactly one pitch (dy, dz) between index neighbours. A step
    that runs past the top is moved one pitch behind the step that follows
    it in index order (wrapping), so the belt never accumulates drift.
    """

    # Offsets of the first step relative to the escalator position
    Y_OFFSET = 0.49
    Z_OFFSET = -0.22
    GROUND_OFFSET = -0.24

    STEP_WIDTH_RATIO = 0.85   # step width relative to model width
    TOP_BUFFER = 0.3          # vertical easing band below the top landing
    MIN_EASING = 0.05         # floor of the vertical easing factor
    WRAP_MARGIN = 0.1         # fraction of a pitch past the top before recycling
    ENTRY_PITCHES = 3         # entering point distance below y0, in pitches
    CONTACT_TOLERANCE = 1e-3
    SURFACE_EPSILON = 1e-4
    CENTERING_GAIN = 0.1
    LANE_GAIN = 1.0

    def __init__(self, position, geometry: EscalatorGeometry, count: int = 15, pad: int = 2,
                 dy: float = 0.226, dz: float = 0.128, handrail_margin: float = 0.12,
                 escalator_id: str = None):
        """
        Initialize belt

        Args:
            position: Escalator position in the world
            geometry: Ramp box and size of the loaded model
            count: Number of visible steps
            pad: Extra steps kept for wrap continuity
            dy: Horizontal pitch between steps
            dz: Vertical pitch between steps
            handrail_margin: Inset from the step sides an agent may stand in
            escalator_id: Identifier used in snapshots and broker topics
        """
        self.position = np.asarray(position, dtype=np.float64)
        self.geometry = geometry
        self.count = count
        self.pad = pad
        self.dy = dy
        self.dz = dz
        self.handrail_margin = handrail_margin
        self.id = escalator_id if escalator_id is not None else f"Esca{count}"

        self.x0 = self.position[0]
        self.y0 = self.Y_OFFSET + self.position[1]
        self.z0 = self.Z_OFFSET + self.position[2]
        self.ground_z = self.GROUND_OFFSET + self.position[2]
        self.ymax = count * dy + self.y0
        self.zmax = count * dz + self.z0

        step_width = geometry.size[0] * self.STEP_WIDTH_RATIO
        self.step_half_size = vec3(step_width / 2, dy / 2, dz / 2)

        self.entering_point = vec3(self.x0, self.y0 - self.ENTRY_PITCHES * dy, self.ground_z)
        self.exiting_point = vec3(self.x0, self.ymax + dy, self.zmax + dz)

        # Lane centres on the left / right half of the steps
        self.aisle_left = self.x0 - self.step_half_size[0] / 2
        self.aisle_right = self.x0 + self.step_half_size[0] / 2

        self.total_steps = count + pad
        self._layout_steps()

    # ========================================
    # Step layout and motion
    # ========================================

    def _layout_steps(self):
        i = np.arange(self.total_steps, dtype=np.float64)
        self.steps = np.column_stack([
            np.full(self.total_steps, self.x0),
            i * self.dy + self.y0 - self.dy,
            i * self.dz + self.z0 - self.dz,
        ])
        # Highest index first: a relocated step may be the anchor of the next one
        for index in reversed(range(self.total_steps)):
            pos = self.steps[index]
            if pos[1] > self.ymax + 1e-9 or pos[2] > self.zmax + 1e-9:
                self._place_behind_next(index)

    def _place_behind_next(self, index: int):
        ahead = self.steps[(index + 1) % self.total_steps]
        self.steps[index] = vec3(self.x0, ahead[1] - self.dy, ahead[2] - self.dz)

    def belt_velocity(self, pos: np.ndarray) -> np.ndarray:
        """
        Transport velocity at pos.

        One pitch per unit time. Inside the top buffer band the vertical
        component is scaled down (never below MIN_EASING) so steps flatten
        out before the landing; the horizontal component is never eased.
        """
        distance_to_top = abs(self.zmax - pos[2])
        dz_factor = 1.0
        if distance_to_top < self.TOP_BUFFER:
            dz_factor = max(distance_to_top / self.TOP_BUFFER, self.MIN_EASING)
        return vec3(0.0, self.dy, self.dz * dz_factor)

    def advance(self, dt: float):
        """Move every step by the belt velocity and recycle steps past the top"""
        for index in range(self.total_steps):
            self.steps[index] += self.belt_velocity(self.steps[index]) * dt

        # Recycle after all steps moved, so the anchor step is already up to date
        y_limit = self.ymax + self.dy * self.WRAP_MARGIN
        z_limit = self.zmax + self.dz * self.WRAP_MARGIN
        for index in range(self.total_steps):
            pos = self.steps[index]
            if pos[2] > z_limit or pos[1] > y_limit:
                self._place_behind_next(index)

    def update(self, dt: float):
        self.advance(dt)

    # ========================================
    # Collision
    # ========================================

    def stair_box(self, step_pos: np.ndarray) -> Box:
        return Box.from_center(step_pos, self.step_half_size)

    def surface_if_colliding(self, agent_pos: np.ndarray, agent_box: Box,
                             agent_half_size: np.ndarray) -> Optional[np.ndarray]:
        """
        Standing point on the first step (in index order) the agent touches.

        The first intersecting step wins, not the nearest one. The returned
        point keeps the agent's y, clamps x inside the handrails and puts the
        agent's feet just above the step top.

        Returns:
            Snapped position, or None if no step intersects
        """
        step_min = self.steps - self.step_half_size
        step_max = self.steps + self.step_half_size
        tol = self.CONTACT_TOLERANCE
        hits = np.all(step_min <= agent_box.max + tol, axis=1) & np.all(step_max >= agent_box.min - tol, axis=1)
        if not np.any(hits):
            return None

        index = int(np.argmax(hits))
        lo = step_min[index]
        hi = step_max[index]
        x = min(max(agent_pos[0], lo[0] + self.handrail_margin), hi[0] - self.handrail_margin)
        return vec3(x, agent_pos[1], hi[2] + agent_half_size[2] + self.SURFACE_EPSILON)

    def ground_correction_if_below(self, pos: np.ndarray, box: Box,
                                   half_size: np.ndarray) -> Optional[np.ndarray]:
        """Point standing on the ground plane if the agent sank below it, else None"""
        if box.min[2] < self.ground_z:
            return vec3(pos[0], pos[1], self.ground_z + half_size[2])
        return None

    # ========================================
    # Forces for free-walking agents
    # ========================================

    def force_from_walls(self, agent_pos: np.ndarray, agent_box: Box,
                         agent_vel: np.ndarray) -> np.ndarray:
        """
        Side-wall and lane force on an agent near the belt.

        Inside the corridor before the exit line this also zeroes the agent's
        lateral velocity in place: agents there do not steer sideways, they
        are pulled to the aisle of the half they stand on.
        """
        force = np.zeros(3)
        if agent_pos[1] < self.y0 - self.dy:
            return force

        x = agent_pos[0]
        left_wall = self.x0 - self.step_half_size[0]
        right_wall = self.x0 + self.step_half_size[0]
        reach = agent_box.size[0]

        if x < left_wall:
            force[0] = weight(left_wall - x, reach)
            return force
        if x > right_wall:
            force[0] = -weight(x - right_wall, reach)
            return force

        if agent_pos[1] > self.exiting_point[1]:
            dz2bottom = abs(agent_box.min[2] - self.zmax)
            if dz2bottom * 0.9 < self.dz:
                force[0] = self.CENTERING_GAIN * (self.x0 - x)
            return force

        agent_vel[0] = 0.0
        target = self.aisle_left if x < self.x0 else self.aisle_right
        force[0] = self.LANE_GAIN * (target - x)
        return force

    def in_footprint(self, pos: np.ndarray) -> bool:
        """True if pos lies over the belt area between entering and exiting points"""
        ramp = self.geometry.ramp_box
        return (ramp.min[0] <= pos[0] <= ramp.max[0]
                and self.entering_point[1] <= pos[1] <= self.exiting_point[1])

    def steering_to_stairs(self, pos: np.ndarray) -> np.ndarray:
        """
        Horizontal pull drawing a free walker toward the belt.

        Near the exiting point (and below it) the pull vanishes, on the belt
        footprint it points at the exiting point, elsewhere at the entering
        point where the queue forms.
        """
        to_exit = self.exiting_point - pos
        if np.hypot(to_exit[0], to_exit[1]) < self.dy and pos[2] < self.exiting_point[2]:
            return np.zeros(3)
        if self.in_footprint(pos) and self.entering_point[2] <= pos[2] <= self.exiting_point[2]:
            return horizontal(to_exit)
        return horizontal(self.entering_point - pos)

    # ========================================
    # Predicates
    # ========================================

    def is_finished(self, pos: np.ndarray) -> bool:
        return pos[2] > self.zmax and pos[1] > self.ymax

    def ready_to_enter(self, pos: np.ndarray, box: Box) -> bool:
        """
        True when the agent stands in the entry zone in front of the belt
        (used to trigger the lane-discipline strategy).
        """
        zone = Box(
            vec3(self.x0 - self.step_half_size[0], self.entering_point[1], self.entering_point[2]),
            vec3(self.x0 + self.step_half_size[0], self.y0, self.exiting_point[2])
        )
        return (box.overlaps_xy(zone)
                and box.min[2] >= zone.min[2] - 1e-6
                and box.max[2] <= zone.max[2])

    def __repr__(self) -> str:
        return f"EscalatorBelt(id={self.id}, steps={self.count}+{self.pad}, origin={self.position.tolist()})"
