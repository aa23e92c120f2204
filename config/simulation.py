"""
Simulation Configuration

Physical specifications of the escalators and crowds, force tuning,
and simulation control (time step bounds, duration, seed).
"""

from dataclasses import dataclass, field
from typing import Optional

from .lane_control import LaneControlConfig


@dataclass
class CrowdConfig:
    """Crowd specifications (one crowd per escalator)"""
    people_num: int = 200
    max_speed: float = 4.0  # units/s
    body_width: float = 0.2
    body_depth: float = 0.1
    body_height: float = 0.6
    placement_attempts: int = 500

    def __post_init__(self):
        if self.people_num < 1:
            raise ValueError("people_num must be at least 1")
        if self.max_speed <= 0:
            raise ValueError("max_speed must be positive")
        if self.body_width <= 0 or self.body_depth <= 0 or self.body_height <= 0:
            raise ValueError("body dimensions must be positive")
        if self.placement_attempts < 1:
            raise ValueError("placement_attempts must be at least 1")


@dataclass
class EscalatorConfig:
    """Escalator specifications"""
    escalator_pad: int = 1  # grid of (2*pad+1)^2 escalators
    stairs_num: int = 30
    step_pad: int = 2  # extra steps kept for wrap continuity
    dy: float = 0.226  # horizontal pitch
    dz: float = 0.128  # vertical pitch
    spacing: float = 20.0  # distance between neighbouring escalators
    handrail_margin: float = 0.12
    ramp_width: float = 1.0

    def __post_init__(self):
        if self.escalator_pad < 0:
            raise ValueError("escalator_pad cannot be negative")
        if self.stairs_num < 1:
            raise ValueError("stairs_num must be at least 1")
        if self.step_pad < 1:
            raise ValueError("step_pad must be at least 1")
        if self.dy <= 0 or self.dz <= 0:
            raise ValueError("step pitch (dy, dz) must be positive")
        if self.spacing <= 0:
            raise ValueError("spacing must be positive")
        if self.ramp_width <= 0:
            raise ValueError("ramp_width must be positive")
        if not (0 <= self.handrail_margin < self.ramp_width * 0.85 / 2):
            raise ValueError("handrail_margin must be smaller than half the step width")


@dataclass
class ForceConfig:
    """Per-second gains of the forces composed for free-walking agents"""
    steering: float = 40.0
    repulsion: float = 400.0
    wall: float = 1000.0
    damping: float = 10.0

    def __post_init__(self):
        for name in ('steering', 'repulsion', 'wall', 'damping'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} gain cannot be negative")


@dataclass
class SimulationConfig:
    """
    Complete simulation configuration

    Combines escalator, crowd, lane control and force settings.
    """
    escalator: EscalatorConfig = field(default_factory=EscalatorConfig)
    crowd: CrowdConfig = field(default_factory=CrowdConfig)
    lane_control: LaneControlConfig = field(default_factory=LaneControlConfig)
    forces: ForceConfig = field(default_factory=ForceConfig)

    # Simulation control
    random_seed: Optional[int] = None
    duration: float = 60.0  # seconds of simulated time
    tick: float = 0.005  # seconds per update
    dt_min: float = 1e-5
    dt_max: float = 0.02
    snapshot_interval: int = 100  # ticks between published snapshots
    realtime_factor: float = 0.0  # 1.0 = realtime, 0.0 = as fast as possible

    def __post_init__(self):
        if self.duration <= 0:
            raise ValueError("duration must be positive")
        if self.tick <= 0:
            raise ValueError("tick must be positive")
        if not (0 < self.dt_min <= self.dt_max):
            raise ValueError("dt bounds must satisfy 0 < dt_min <= dt_max")
        if self.snapshot_interval < 1:
            raise ValueError("snapshot_interval must be at least 1")
        if self.realtime_factor < 0:
            raise ValueError("realtime_factor cannot be negative")

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationConfig':
        """Create SimulationConfig from dictionary"""
        sim_data = data.get('simulation', data)

        escalator_data = sim_data.get('escalator', {})
        escalator = EscalatorConfig(
            escalator_pad=escalator_data.get('escalator_pad', 1),
            stairs_num=escalator_data.get('stairs_num', 30),
            step_pad=escalator_data.get('step_pad', 2),
            dy=escalator_data.get('dy', 0.226),
            dz=escalator_data.get('dz', 0.128),
            spacing=escalator_data.get('spacing', 20.0),
            handrail_margin=escalator_data.get('handrail_margin', 0.12),
            ramp_width=escalator_data.get('ramp_width', 1.0)
        )

        crowd_data = sim_data.get('crowd', {})
        crowd = CrowdConfig(
            people_num=crowd_data.get('people_num', 200),
            max_speed=crowd_data.get('max_speed', 4.0),
            body_width=crowd_data.get('body_width', 0.2),
            body_depth=crowd_data.get('body_depth', 0.1),
            body_height=crowd_data.get('body_height', 0.6),
            placement_attempts=crowd_data.get('placement_attempts', 500)
        )

        lane_control = LaneControlConfig.from_dict(sim_data.get('lane_control', {}))

        force_data = sim_data.get('forces', {})
        forces = ForceConfig(
            steering=force_data.get('steering', 40.0),
            repulsion=force_data.get('repulsion', 400.0),
            wall=force_data.get('wall', 1000.0),
            damping=force_data.get('damping', 10.0)
        )

        return cls(
            escalator=escalator,
            crowd=crowd,
            lane_control=lane_control,
            forces=forces,
            random_seed=sim_data.get('random_seed'),
            duration=sim_data.get('duration', 60.0),
            tick=sim_data.get('tick', 0.005),
            dt_min=sim_data.get('dt_min', 1e-5),
            dt_max=sim_data.get('dt_max', 0.02),
            snapshot_interval=sim_data.get('snapshot_interval', 100),
            realtime_factor=sim_data.get('realtime_factor', 0.0)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        result = {
            'simulation': {
                'escalator': {
                    'escalator_pad': self.escalator.escalator_pad,
                    'stairs_num': self.escalator.stairs_num,
                    'step_pad': self.escalator.step_pad,
                    'dy': self.escalator.dy,
                    'dz': self.escalator.dz,
                    'spacing': self.escalator.spacing,
                    'handrail_margin': self.escalator.handrail_margin,
                    'ramp_width': self.escalator.ramp_width
                },
                'crowd': {
                    'people_num': self.crowd.people_num,
                    'max_speed': self.crowd.max_speed,
                    'body_width': self.crowd.body_width,
                    'body_depth': self.crowd.body_depth,
                    'body_height': self.crowd.body_height,
                    'placement_attempts': self.crowd.placement_attempts
                },
                'lane_control': self.lane_control.to_dict(),
                'forces': {
                    'steering': self.forces.steering,
                    'repulsion': self.forces.repulsion,
                    'wall': self.forces.wall,
                    'damping': self.forces.damping
                },
                'duration': self.duration,
                'tick': self.tick,
                'dt_min': self.dt_min,
                'dt_max': self.dt_max,
                'snapshot_interval': self.snapshot_interval,
                'realtime_factor': self.realtime_factor
            }
        }

        if self.random_seed is not None:
            result['simulation']['random_seed'] = self.random_seed

        return result

    def validate(self):
        """Validate configuration consistency"""
        if not (self.dt_min <= self.tick <= self.dt_max):
            raise ValueError(f"tick ({self.tick}) must lie within [dt_min, dt_max] = [{self.dt_min}, {self.dt_max}]")

        if self.duration < self.tick * self.snapshot_interval:
            raise ValueError("duration is shorter than one snapshot interval")
