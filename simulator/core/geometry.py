"""
Geometry - axis-aligned boxes and vector helpers

Coordinates are (x, y, z): x lateral across the belt, y along the belt
(forward), z up.
"""

from dataclasses import dataclass

import numpy as np


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    """Create a float64 3-vector"""
    return np.array([x, y, z], dtype=np.float64)


def normalize(v: np.ndarray) -> np.ndarray:
    """Unit vector along v (zero vector stays zero)"""
    length = np.linalg.norm(v)
    if length == 0.0:
        return np.zeros(3)
    return v / length


def horizontal(v: np.ndarray) -> np.ndarray:
    """Projection of v onto the ground (x, y) plane"""
    out = np.array(v, dtype=np.float64)
    out[2] = 0.0
    return out


@dataclass
class Box:
    """
    Axis-aligned bounding box.

    Attributes:
        min: Lower corner (x, y, z)
        max: Upper corner (x, y, z)
    """
    min: np.ndarray
    max: np.ndarray

    def __post_init__(self):
        self.min = np.asarray(self.min, dtype=np.float64)
        self.max = np.asarray(self.max, dtype=np.float64)
        if np.any(self.min > self.max):
            raise ValueError(f"Box min {self.min} exceeds max {self.max}")

    @classmethod
    def from_center(cls, center: np.ndarray, half_size: np.ndarray) -> 'Box':
        center = np.asarray(center, dtype=np.float64)
        return cls(center - half_size, center + half_size)

    @property
    def center(self) -> np.ndarray:
        return (self.min + self.max) * 0.5

    @property
    def size(self) -> np.ndarray:
        return self.max - self.min

    @property
    def half_size(self) -> np.ndarray:
        return self.size * 0.5

    def contains_point(self, point: np.ndarray) -> bool:
        return bool(np.all(point >= self.min) and np.all(point <= self.max))

    def intersects(self, other: 'Box', tolerance: float = 0.0) -> bool:
        """
        Overlap test; boxes closer than tolerance on every axis also count.
        """
        return bool(
            np.all(self.min <= other.max + tolerance)
            and np.all(self.max >= other.min - tolerance)
        )

    def overlaps_xy(self, other: 'Box') -> bool:
        """Overlap test ignoring the vertical axis"""
        return bool(
            np.all(self.min[:2] <= other.max[:2])
            and np.all(self.max[:2] >= other.min[:2])
        )

    def __repr__(self) -> str:
        lo = ", ".join(f"{v:.3f}" for v in self.min)
        hi = ", ".join(f"{v:.3f}" for v in self.max)
        return f"Box(min=({lo}), max=({hi}))"
