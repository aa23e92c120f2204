"""
Smoothing Kernel Test

Checks the shape of the cubic spline kernel used by repulsion and walls:
value at the centre, continuity at h/2, compact support and monotonic decay.
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root))

import numpy as np
import pytest

from simulator.core.kernel import weight, weights


def test_weight_at_centre_is_one():
    assert weight(0.0, 1.0) == pytest.approx(1.0)
    assert weight(0.0, 3.7) == pytest.approx(1.0)


def test_weight_continuous_at_half_support():
    h = 2.0
    left = weight(0.5 * h - 1e-9, h)
    right = weight(0.5 * h + 1e-9, h)
    assert weight(0.5 * h, h) == pytest.approx(0.25)
    assert left == pytest.approx(0.25, abs=1e-6)
    assert right == pytest.approx(0.25, abs=1e-6)


def test_weight_zero_outside_support():
    assert weight(1.0, 1.0) == pytest.approx(0.0)
    assert weight(1.5, 1.0) == 0.0
    assert weight(-0.1, 1.0) == 0.0


def test_weight_monotonically_decreasing():
    h = 1.8
    values = [weight(r, h) for r in np.linspace(0.0, h, 200)]
    for a, b in zip(values, values[1:]):
        assert b <= a + 1e-12


def test_vectorised_weights_match_scalar():
    h = 1.8
    r = np.array([-0.2, 0.0, 0.3, 0.9, 1.2, 1.8, 2.5])
    expected = np.array([weight(v, h) for v in r])
    assert np.allclose(weights(r, h), expected)
