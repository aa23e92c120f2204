"""
Simulation - escalator / crowd pairs and the per-agent state machine

Each escalator is paired with its own crowd. Every tick the belts advance,
then each crowd runs its two-phase update where every agent is in one of
three situations:

1. Finished (above the top landing): respawned in the catchment area and
   counted.
2. On stair: carried by the belt and kept snapped to the step surface.
3. Free walking: steered toward the belt, pushed by neighbours and walls,
   and lined up by the lane strategy at the entry.

Pairs are independent: agents only ever interact with their own crowd and
their own escalator.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

import numpy as np

from config.simulation import SimulationConfig
from lane_control import LaneAssignment, create_lane_strategy
from .crowd import Crowd
from .escalator import EscalatorBelt, EscalatorGeometry


@dataclass
class FinishEvent:
    """An agent reached the top of an escalator"""
    escalator_id: str
    pair_index: int
    agent_index: int
    time: float

    def to_dict(self) -> dict:
        return {
            'escalator_id': self.escalator_id,
            'pair_index': self.pair_index,
            'agent_index': self.agent_index,
            'time': self.time,
        }


class Simulation:
    """
    Escalator crowd simulation

    Usage:
        simulation = Simulation(config)
        for _ in range(1000):
            events = simulation.update(0.005)
        print(simulation.finishing_counts)
    """

    # Offset of escalator (ix, iy) in the grid, in units of spacing (z fixed)
    GRID_Y_SHIFT = -2.0
    GRID_Z = -0.5

    def __init__(self, config: SimulationConfig = None, seed_sequence: np.random.SeedSequence = None):
        """
        Initialize simulation

        Args:
            config: Simulation configuration (defaults used if None)
            seed_sequence: Root of the random streams (built from config.random_seed if None).
                The lane draw and every pair get their own child stream.
        """
        self.config = config if config is not None else SimulationConfig()
        if seed_sequence is None:
            seed_sequence = np.random.SeedSequence(self.config.random_seed)
        self.seed_sequence = seed_sequence
        lane_rng = self.spawn_rng()
        self.time = 0.0

        lane_config = self.config.lane_control
        self.strategy = create_lane_strategy(lane_config.strategy)
        print(f"{self.time:.2f} [Simulation] Lane strategy: {self.strategy.get_strategy_name()}")

        self.belts: List[EscalatorBelt] = []
        self.crowds: List[Crowd] = []
        self.on_stair: List[Set[int]] = []
        self._finishing_counts: List[int] = []

        self._create_pairs()

        self.lanes = LaneAssignment.draw(
            self.config.crowd.people_num,
            lane_config.go_left_prob,
            lane_config.go_left_walk_prob,
            lane_rng
        )

    # ========================================
    # Construction
    # ========================================

    def spawn_rng(self) -> np.random.Generator:
        """Independent random stream, so no two pairs share generator state"""
        return np.random.default_rng(self.seed_sequence.spawn(1)[0])

    def grid_offset(self, ix: int, iy: int) -> np.ndarray:
        """World position of escalator (ix, iy) in the grid"""
        spacing = self.config.escalator.spacing
        return np.array([ix * spacing, iy * spacing + self.GRID_Y_SHIFT, self.GRID_Z])

    def _create_pairs(self):
        esc = self.config.escalator
        pad = esc.escalator_pad
        for ix in range(-pad, pad + 1):
            for iy in range(-pad, pad + 1):
                position = self.grid_offset(ix, iy)
                escalator_id = f"Esca{esc.stairs_num}-({ix},{iy})"
                geometry = EscalatorGeometry.synthesize(
                    position, esc.stairs_num, dy=esc.dy, dz=esc.dz, width=esc.ramp_width
                )
                self.add_pair(position, geometry, escalator_id)

    def add_pair(self, position, geometry: EscalatorGeometry, escalator_id: str) -> int:
        """
        Create an escalator and its crowd

        The crowd gathers on the ground below the escalator position and is
        placed outside the ramp box. It draws from its own random stream.

        Returns:
            Index of the new pair
        """
        esc = self.config.escalator
        belt = EscalatorBelt(
            position, geometry,
            count=esc.stairs_num,
            pad=esc.step_pad,
            dy=esc.dy,
            dz=esc.dz,
            handrail_margin=esc.handrail_margin,
            escalator_id=escalator_id
        )
        origin = np.array([belt.position[0], belt.position[1], belt.ground_z])
        crowd = Crowd.from_config(self.config.crowd, origin, self.spawn_rng(), name=f"Crowd {escalator_id}")
        crowd.initialize_positions(geometry.ramp_box, self.config.crowd.placement_attempts)

        self.belts.append(belt)
        self.crowds.append(crowd)
        self.on_stair.append(set())
        self._finishing_counts.append(0)

        print(f"{self.time:.2f} [Simulation] Created {belt} with {crowd.count} people.")
        return len(self.belts) - 1

    # ========================================
    # Tick
    # ========================================

    def clamp_dt(self, dt: float) -> float:
        return min(max(dt, self.config.dt_min), self.config.dt_max)

    def update(self, dt: float) -> List[FinishEvent]:
        """
        Advance the simulation by one tick

        Args:
            dt: Requested time step (clamped into [dt_min, dt_max])

        Returns:
            Agents that finished during this tick, in pair / index order
        """
        dt = self.clamp_dt(dt)
        self.time += dt
        events: List[FinishEvent] = []
        for pair_index, belt in enumerate(self.belts):
            belt.update(dt)
            self._update_crowd(pair_index, dt, events)
        return events

    def _update_crowd(self, pair_index: int, dt: float, events: List[FinishEvent]):
        belt = self.belts[pair_index]
        crowd = self.crowds[pair_index]
        on_stair = self.on_stair[pair_index]

        def agent_step(i: int, repulsion: np.ndarray, dt: float):
            pos = crowd.positions[i]
            vel = crowd.velocities[i]

            if belt.is_finished(pos):
                self._finish(pair_index, i, events)
                return

            if i in on_stair:
                self._ride(belt, crowd, i, pos, dt)
                return

            self._walk(belt, crowd, on_stair, i, pos, vel, repulsion, dt)

        crowd.update(dt, agent_step)

    def _finish(self, pair_index: int, i: int, events: List[FinishEvent]):
        crowd = self.crowds[pair_index]
        crowd.positions[i] = crowd.generate_random_point()
        self.on_stair[pair_index].discard(i)
        self._finishing_counts[pair_index] += 1
        events.append(FinishEvent(self.belts[pair_index].id, pair_index, i, self.time))

    def _ride(self, belt: EscalatorBelt, crowd: Crowd, i: int, pos: np.ndarray, dt: float):
        """Carry an on-stair agent with the belt; velocity is left untouched"""
        half = crowd.half_size
        feet = pos.copy()
        feet[2] = pos[2] - half[2] - belt.step_half_size[2]
        belt_vel = belt.belt_velocity(feet)

        if pos[0] < belt.x0 and self.lanes.walks_left(i):
            pos[1] += self.config.lane_control.left_walk_speed * dt

        pos += belt_vel * dt
        surface = belt.surface_if_colliding(pos, crowd.box_at(pos), half)
        if surface is not None:
            pos[:] = surface

    def _walk(self, belt: EscalatorBelt, crowd: Crowd, on_stair: Set[int], i: int,
              pos: np.ndarray, vel: np.ndarray, repulsion: np.ndarray, dt: float):
        """Compose forces for a free-walking agent and integrate"""
        half = crowd.half_size
        box = crowd.box_at(pos)

        surface = belt.surface_if_colliding(pos, box, half)
        if surface is not None:
            vel[:] = 0.0
            if not crowd.is_occupied_near(surface, i):
                on_stair.add(i)
                pos[:] = surface
                return

        ground = belt.ground_correction_if_below(pos, box, half)
        if ground is not None and vel[2] < 0:
            on_stair.discard(i)
            pos[:] = ground
            vel[2] = 0.0
            return

        gains = self.config.forces
        steering = belt.steering_to_stairs(pos)
        walls = belt.force_from_walls(pos, box, vel)
        vel += steering * (0.0 if surface is not None else gains.steering * dt)
        vel += repulsion * (gains.repulsion * dt)
        vel += walls * (gains.wall * dt)
        vel += vel * (-gains.damping * dt)

        speed = np.linalg.norm(vel)
        if speed > crowd.max_speed:
            vel *= crowd.max_speed / speed

        if belt.ready_to_enter(pos, box):
            self.strategy.apply(pos, vel, self.lanes.goes_left(i), belt)

        pos += vel * dt

    # ========================================
    # Queries
    # ========================================

    @property
    def escalator_ids(self) -> List[str]:
        return [belt.id for belt in self.belts]

    @property
    def finishing_counts(self) -> List[int]:
        return list(self._finishing_counts)

    def is_on_stair(self, pair_index: int, agent_index: int) -> bool:
        return agent_index in self.on_stair[pair_index]

    def pair(self, escalator_id: str) -> Optional[Tuple[EscalatorBelt, Crowd]]:
        """Escalator and crowd for an escalator id, or None"""
        for belt, crowd in zip(self.belts, self.crowds):
            if belt.id == escalator_id:
                return belt, crowd
        return None

    # ========================================
    # Snapshots
    # ========================================

    def snapshot(self, minimal: bool = False) -> Dict:
        """
        State of the whole simulation at the current time

        Full snapshot: t (time), x (positions per crowd), v (velocities per
        crowd), s (sorted on-stair indices per pair), f (finishing counts).
        Minimal snapshot: t, e (escalator ids), f.
        """
        if minimal:
            return {
                't': self.time,
                'e': self.escalator_ids,
                'f': self.finishing_counts,
            }
        return {
            't': self.time,
            'x': [crowd.positions.tolist() for crowd in self.crowds],
            'v': [crowd.velocities.tolist() for crowd in self.crowds],
            's': [sorted(indices) for indices in self.on_stair],
            'f': self.finishing_counts,
        }

    def snapshot_meta(self) -> Dict:
        """Static description of the run, written once before the snapshots"""
        lane_config = self.config.lane_control
        return {
            'header': {
                't': 'time [code_time]',
                'x': 'position [code_length]',
                'v': 'velocity [code_length/code_time]',
                's': 'on_stair_people_indices [dimensionless]',
                'f': 'finishing_number_of_people [dimensionless]',
            },
            'escalator_id': self.escalator_ids,
            'escalator_num': len(self.belts),
            'stairs_num': self.config.escalator.stairs_num,
            'people_num': self.config.crowd.people_num,
            'crowd_max_speed': self.config.crowd.max_speed,
            'escalator_position': [belt.position.tolist() for belt in self.belts],
            'escalator_dy': [belt.dy for belt in self.belts],
            'escalator_dz': [belt.dz for belt in self.belts],
            'strategy': self.strategy.get_strategy_name(),
            'go_left_prob': lane_config.go_left_prob,
            'go_left_walk_prob': lane_config.go_left_walk_prob,
            'go_left_indices': sorted(self.lanes.go_left),
            'go_left_walk_indices': sorted(self.lanes.go_left_walk),
        }

    def dispose(self):
        """Tear down all escalator / crowd pairs together"""
        count = len(self.belts)
        self.belts.clear()
        self.crowds.clear()
        self.on_stair.clear()
        self._finishing_counts.clear()
        print(f"{self.time:.2f} [Simulation] Disposed {count} escalator(s).")
