"""Vector and angle utility functions."""

import math

import numpy as np

EPS = 1e-9


def clamp(v: float, lo: float, hi: float) -> float:
    """Clamp value to range [lo, hi]."""
    return max(lo, min(hi, v))


def clamp01(v: float) -> float:
    return clamp(v, 0.0, 1.0)


def normalize(value: float, lo: float, hi: float) -> float:
    """Map value from [lo, hi] onto [0, 1], clamped."""
    return clamp01((value - lo) / (hi - lo))


def dist2(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between the x, y components of two points."""
    return float(np.linalg.norm(a[:2] - b[:2]))


def dist3(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance between 3D points."""
    return float(np.linalg.norm(a - b))


def unit(v: np.ndarray) -> np.ndarray:
    """Normalize vector to unit length (zero vector stays zero)."""
    return v / (np.linalg.norm(v) + EPS)


def plane_normal(origin: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Unit normal of the plane through origin, a and b: (a - origin) x (b - origin)."""
    return unit(np.cross(a - origin, b - origin))


def wrap_deg(angle: float) -> float:
    """Wrap angle to [-180, 180) range."""
    return (angle + 180.0) % 360.0 - 180.0


def angle_delta_deg(a0: float, a1: float) -> float:
    """Shortest signed angular difference from a0 to a1."""
    return wrap_deg(a1 - a0)


def heading_deg(normal: np.ndarray) -> float:
    """Yaw of a direction around the vertical axis, in [0, 360)."""
    return math.degrees(math.atan2(normal[0], normal[2])) % 360.0


def dead_zone(value: float, width: float) -> float:
    """Zero out values whose magnitude is below width."""
    return 0.0 if abs(value) < width else value
