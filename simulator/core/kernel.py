"""
Smoothing kernel shared by crowd repulsion and wall avoidance.

Cubic spline shape with compact support: weight is 1 at r=0, 0.25 at r=h/2
(both branches agree there) and falls smoothly to exactly 0 at r=h.
The weight is un-normalized; callers scale it with their own gains.
"""

import numpy as np


def weight(r: float, h: float) -> float:
    """
    Kernel weight for distance r and support radius h.

    Args:
        r: Distance between the two points
        h: Support (smoothing) radius

    Returns:
        Weight in [0, 1]; 0 for r < 0 or r > h
    """
    q = r / h
    if q < 0.0 or q > 1.0:
        return 0.0
    if q <= 0.5:
        return 1.0 - 6.0 * q * q + 6.0 * q * q * q
    return 2.0 * (1.0 - q) ** 3


def weights(r: np.ndarray, h: float) -> np.ndarray:
    """Vectorised weight() over an array of distances"""
    q = np.asarray(r, dtype=np.float64) / h
    inner = 1.0 - 6.0 * q ** 2 + 6.0 * q ** 3
    outer = 2.0 * (1.0 - q) ** 3
    w = np.where(q <= 0.5, inner, outer)
    return np.where((q < 0.0) | (q > 1.0), 0.0, w)
