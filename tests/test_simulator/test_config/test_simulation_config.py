"""
Configuration Test

Tests defaults, validation of the configuration dataclasses and the YAML
loader (round trip, missing file, shipped scenarios).
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest

from config import (
    SimulationConfig,
    EscalatorConfig,
    CrowdConfig,
    ForceConfig,
    LaneControlConfig,
    load_simulation_config,
    save_simulation_config,
)


def test_defaults():
    config = SimulationConfig()
    assert config.escalator.escalator_pad == 1
    assert config.escalator.stairs_num == 30
    assert config.crowd.people_num == 200
    assert config.crowd.max_speed == 4.0
    assert config.lane_control.strategy == "doNothing"
    assert config.forces.repulsion == 400.0
    config.validate()


@pytest.mark.parametrize("kwargs", [
    {'go_left_prob': 1.5},
    {'go_left_prob': -0.1},
    {'go_left_walk_prob': 2.0},
    {'strategy': 'keepRight'},
])
def test_lane_control_validation(kwargs):
    with pytest.raises(ValueError):
        LaneControlConfig(**kwargs)


def test_dataclass_validation():
    with pytest.raises(ValueError):
        CrowdConfig(people_num=0)
    with pytest.raises(ValueError):
        EscalatorConfig(stairs_num=0)
    with pytest.raises(ValueError):
        EscalatorConfig(handrail_margin=0.5)
    with pytest.raises(ValueError):
        ForceConfig(wall=-1.0)
    with pytest.raises(ValueError):
        SimulationConfig(dt_min=0.1, dt_max=0.01)


def test_validate_tick_within_dt_bounds():
    config = SimulationConfig(tick=0.05)
    with pytest.raises(ValueError):
        config.validate()


def test_yaml_round_trip(tmp_path):
    config = SimulationConfig(
        escalator=EscalatorConfig(escalator_pad=0, stairs_num=20),
        crowd=CrowdConfig(people_num=50, max_speed=3.0),
        lane_control=LaneControlConfig(strategy="shiftPosition", go_left_prob=0.4, go_left_walk_prob=0.2),
        random_seed=3,
        duration=30.0,
    )
    path = tmp_path / "scenario.yaml"

    save_simulation_config(config, path)
    loaded = load_simulation_config(path)

    assert loaded == config


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_simulation_config(tmp_path / "missing.yaml")


def test_partial_yaml_uses_defaults(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text("simulation:\n  crowd:\n    people_num: 12\n", encoding='utf-8')

    config = load_simulation_config(path)

    assert config.crowd.people_num == 12
    assert config.escalator.stairs_num == 30
    assert config.random_seed is None


@pytest.mark.parametrize("name", ["default.yaml", "keep_left.yaml"])
def test_shipped_scenarios_load(name):
    config = load_simulation_config(project_root / "scenarios" / "simulation" / name)
    assert config.crowd.people_num > 0
