"""
Crowd Test

Tests placement sampling, the kernel repulsion (loop and vectorised forms)
and the two-phase update of a crowd.
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root))

import numpy as np
import pytest

from simulator.core.crowd import Crowd
from simulator.core.geometry import Box, vec3
from simulator.core.kernel import weight


def make_crowd(count=20, seed=0, origin=(0.0, 0.0, 0.0)):
    return Crowd(count, origin, np.random.default_rng(seed), max_speed=4.0, name="TestCrowd")


def test_derived_parameters():
    crowd = make_crowd(count=100)
    assert crowd.min_separation == pytest.approx(0.6)
    assert crowd.repulsion_radius == pytest.approx(1.8)
    # 30 / sqrt(100) * 0.6 = 1.8 < 10
    assert crowd.catchment_radius == pytest.approx(10.0)

    single = make_crowd(count=1)
    assert single.catchment_radius == pytest.approx(18.0)


def test_initialize_positions_respects_separation_and_exclusion():
    crowd = make_crowd(count=20, origin=(1.0, 2.0, -0.5))
    excluded = Box(vec3(-1.0, 0.0, -1.0), vec3(3.0, 6.0, 3.0))

    failed = crowd.initialize_positions(excluded, max_attempts=500)

    assert failed == 0
    for i in range(crowd.count):
        assert not excluded.contains_point(crowd.positions[i])
        assert crowd.positions[i][2] == pytest.approx(-0.5 + 0.3)
        assert crowd.velocities[i][2] == -1.0
        assert abs(crowd.velocities[i][0]) <= 0.25
        assert abs(crowd.velocities[i][1]) <= 0.25
        for j in range(i):
            assert np.linalg.norm(crowd.positions[i] - crowd.positions[j]) >= crowd.min_separation


def test_initialize_positions_exhaustion_is_not_fatal(capsys):
    crowd = make_crowd(count=3)
    everything = Box(vec3(-100.0, -100.0, -100.0), vec3(100.0, 100.0, 100.0))

    failed = crowd.initialize_positions(everything, max_attempts=5)

    assert failed == 3
    assert "WARNING: Could not find non-colliding position" in capsys.readouterr().out
    # Last draw is kept
    assert np.all(np.isfinite(crowd.positions))


def test_generate_random_point_inside_catchment():
    crowd = make_crowd(count=50, origin=(5.0, -3.0, 1.0))
    for _ in range(100):
        point = crowd.generate_random_point()
        assert np.hypot(point[0] - 5.0, point[1] + 3.0) <= crowd.catchment_radius
        assert point[2] == pytest.approx(1.3)


def test_repulsion_symmetric_and_horizontal():
    crowd = make_crowd(count=2)
    crowd.positions[0] = vec3(0.0, 0.0, 0.0)
    crowd.positions[1] = vec3(0.5, 0.0, 0.0)

    f0 = crowd.repulsion_from(0, crowd.positions[0])
    f1 = crowd.repulsion_from(1, crowd.positions[1])

    assert np.allclose(f0, -f1)
    assert f0[0] == pytest.approx(-weight(0.5, crowd.repulsion_radius))
    assert f0[1] == 0.0

    # Height difference never produces a vertical push
    crowd.positions[1] = vec3(0.3, 0.0, 0.4)
    assert crowd.repulsion_from(0, crowd.positions[0])[2] == 0.0


def test_repulsion_zero_beyond_radius_and_when_coincident():
    crowd = make_crowd(count=2)
    crowd.positions[0] = vec3(0.0, 0.0, 0.0)
    crowd.positions[1] = vec3(crowd.repulsion_radius + 0.1, 0.0, 0.0)
    assert np.allclose(crowd.repulsion_from(0, crowd.positions[0]), 0.0)

    crowd.positions[1] = vec3(0.0, 0.0, 0.0)
    assert np.allclose(crowd.repulsion_from(0, crowd.positions[0]), 0.0)
    assert np.allclose(crowd.repulsion_field(), 0.0)


def test_repulsion_field_matches_per_agent_sum():
    crowd = make_crowd(count=12, seed=3)
    rng = np.random.default_rng(11)
    crowd.positions[:] = rng.uniform(-1.5, 1.5, size=(12, 3))

    field = crowd.repulsion_field()

    for i in range(crowd.count):
        assert np.allclose(field[i], crowd.repulsion_from(i, crowd.positions[i]))


def test_is_occupied_near():
    crowd = make_crowd(count=2)
    crowd.positions[0] = vec3(0.0, 0.0, 0.0)
    crowd.positions[1] = vec3(0.2, 0.0, 0.0)

    # Agent 1 is 0.2 away, closer than min_separation / 2 = 0.3
    assert crowd.is_occupied_near(vec3(0.0, 0.0, 0.0), excluding_index=0)
    # The excluded agent itself never counts
    assert not crowd.is_occupied_near(vec3(0.55, 0.0, 0.0), excluding_index=1)
    assert not crowd.is_occupied_near(vec3(5.0, 0.0, 0.0), excluding_index=0)


def test_update_uses_frozen_positions():
    crowd = make_crowd(count=3)
    crowd.positions[0] = vec3(0.0, 0.0, 0.0)
    crowd.positions[1] = vec3(0.5, 0.0, 0.0)
    crowd.positions[2] = vec3(10.0, 0.0, 0.0)
    expected = crowd.repulsion_field()

    visited = []
    received = {}

    def agent_step(i, repulsion, dt):
        visited.append(i)
        received[i] = repulsion.copy()
        # Moving agent 0 away must not change what agent 1 sees this tick
        if i == 0:
            crowd.positions[0] = vec3(100.0, 0.0, 0.0)

    crowd.update(0.01, agent_step)

    assert visited == [0, 1, 2]
    assert np.allclose(received[1], expected[1])
    assert received[1][0] > 0.0
