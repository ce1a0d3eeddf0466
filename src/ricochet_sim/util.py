# MIT License (see LICENSE)
"""
Utility functions for 3D vector math.

Vectors are numpy float64 arrays of shape (3,) laid out as (x, y, z)
with y pointing up, so (x, z) is the horizontal map plane.
"""
from __future__ import annotations

import numpy as np

UP = np.array([0.0, 1.0, 0.0], dtype=np.float64)
DOWN = np.array([0.0, -1.0, 0.0], dtype=np.float64)


def f64(x) -> np.ndarray:
    """Convert any array-like to a float64 numpy array."""
    return np.array(x, dtype=np.float64)


def norm(v: np.ndarray) -> float:
    """Magnitude (length) of a vector."""
    return float(np.sqrt(np.dot(v, v)))


def unit(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """
    Return a unit vector in the same direction as v.

    Returns zero vector if |v| < eps to avoid division by zero.
    """
    n = norm(v)
    if n < eps:
        return np.zeros_like(v, dtype=np.float64)
    return v / n


def any_perpendicular(v: np.ndarray) -> np.ndarray:
    """
    Return some unit vector perpendicular to v.

    Prefers a horizontal axis so a vertical v yields a vector in the map plane.
    """
    helper = UP if abs(float(np.dot(unit(v), UP))) < 0.9 else np.array([1.0, 0.0, 0.0])
    return unit(np.cross(v, helper))


def rotate_about_axis(v: np.ndarray, axis: np.ndarray, angle: float) -> np.ndarray:
    """
    Rotate v by angle (radians) about axis using Rodrigues' formula.

    v_rot = v cosθ + (k × v) sinθ + k (k·v)(1 - cosθ)

    Positive angles turn counter-clockwise when looking down the axis.
    See maths.md Eq (9).
    """
    k = unit(axis)
    c, s = np.cos(angle), np.sin(angle)
    return v * c + np.cross(k, v) * s + k * float(np.dot(k, v)) * (1.0 - c)


def rotate_horizontal(x: float, z: float, degrees: float) -> tuple[float, float]:
    """Rotate a horizontal (x, z) offset counter-clockwise by degrees."""
    r = np.radians(degrees)
    c, s = float(np.cos(r)), float(np.sin(r))
    return x * c - z * s, x * s + z * c


def horizontal_length(v: np.ndarray) -> float:
    """Length of the (x, z) projection."""
    return float(np.hypot(v[0], v[2]))


def elevation(v: np.ndarray) -> float:
    """Vertical angle of v above the map plane, radians."""
    return float(np.arctan2(v[1], horizontal_length(v)))


def heading_degrees(v: np.ndarray) -> float:
    """
    Map heading of v in degrees, normalised to [0, 360).

    Uses the host launcher's convention: -90 + atan2(z, x), so +z is 0°
    and +x is 270°.
    """
    h = -90.0 + float(np.degrees(np.arctan2(v[2], v[0])))
    return h % 360.0
