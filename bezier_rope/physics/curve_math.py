"""
Curve Math Module
=================
Closed-form cubic Bezier evaluation for the rope.

    B(t)  = (1-t)^3 P0 + 3(1-t)^2 t P1 + 3(1-t) t^2 P2 + t^3 P3
    B'(t) = 3(1-t)^2 (P1-P0) + 6(1-t) t (P2-P1) + 3 t^2 (P3-P2)

All functions are pure: they read the four control points of a
ControlPolygon (or any 4-sequence of points) and never mutate them.
"""

import numpy as np
from typing import Sequence, Tuple


# Minimum magnitude used when normalizing a (near) zero tangent
TANGENT_FLOOR = 1e-6


def as_point(value: Sequence[float]) -> np.ndarray:
    """Convert any 2-sequence into a float64 point/vector (always a copy)."""
    point = np.array(value, dtype=np.float64)
    if point.shape != (2,):
        raise ValueError(f"Expected a 2D point, got shape {point.shape}")
    return point


def _control_points(polygon) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    if hasattr(polygon, "points"):
        return polygon.points()
    p0, p1, p2, p3 = polygon
    return as_point(p0), as_point(p1), as_point(p2), as_point(p3)


def position(polygon, t: float) -> np.ndarray:
    """
    Point on the cubic Bezier at parameter t.

    Args:
        polygon: ControlPolygon, or a 4-sequence of 2D points
        t: Curve parameter in [0, 1]

    Returns:
        Curve point (float64 array, shape (2,))
    """
    p0, p1, p2, p3 = _control_points(polygon)

    u = 1.0 - t
    tt = t * t
    uu = u * u

    # Bernstein basis
    return (uu * u) * p0 + (3.0 * uu * t) * p1 + (3.0 * u * tt) * p2 + (tt * t) * p3


def tangent(polygon, t: float) -> np.ndarray:
    """
    First derivative B'(t), not normalized.

    Coincident control points can make this (numerically) zero;
    normalize() applies the floor before dividing.
    """
    p0, p1, p2, p3 = _control_points(polygon)

    u = 1.0 - t
    return (
        3.0 * u * u * (p1 - p0) +
        6.0 * u * t * (p2 - p1) +
        3.0 * t * t * (p3 - p2)
    )


def second_derivative(polygon, t: float) -> np.ndarray:
    """B''(t) = 6(1-t)(P2 - 2P1 + P0) + 6t(P3 - 2P2 + P1)"""
    p0, p1, p2, p3 = _control_points(polygon)
    return 6.0 * (1.0 - t) * (p2 - 2.0 * p1 + p0) + 6.0 * t * (p3 - 2.0 * p2 + p1)


def normalize(vector: np.ndarray, floor: float = TANGENT_FLOOR) -> np.ndarray:
    """Divide by the magnitude, floored at `floor` so zero never divides."""
    vector = np.asarray(vector, dtype=np.float64)
    magnitude = max(floor, float(np.hypot(vector[0], vector[1])))
    return vector / magnitude


def unit_tangent(polygon, t: float, floor: float = TANGENT_FLOOR) -> np.ndarray:
    """
    Direction of travel along the curve at t (unit length).

    When P0 == P1 (or P2 == P3) the first derivative vanishes at the end
    of the curve. The direction is then taken from the second derivative,
    then from the chord P0 -> P3, and finally +X for a fully collapsed
    polygon.
    """
    p0, _, _, p3 = _control_points(polygon)
    for candidate in (tangent(polygon, t), second_derivative(polygon, t), p3 - p0):
        if np.hypot(candidate[0], candidate[1]) >= floor:
            return normalize(candidate, floor)
    return np.array([1.0, 0.0])
