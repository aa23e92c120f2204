"""
Configuration management package

Provides configuration classes for the escalator simulation and lane control.
"""

from .lane_control import (
    LaneControlConfig,
    LANE_STRATEGIES
)

from .simulation import (
    SimulationConfig,
    EscalatorConfig,
    CrowdConfig,
    ForceConfig
)

from .config_loader import (
    ConfigLoader,
    load_simulation_config,
    save_simulation_config
)

__all__ = [
    # Lane control
    'LaneControlConfig',
    'LANE_STRATEGIES',

    # Simulation
    'SimulationConfig',
    'EscalatorConfig',
    'CrowdConfig',
    'ForceConfig',

    # Loader
    'ConfigLoader',
    'load_simulation_config',
    'save_simulation_config',
]
