"""
Control Polygon Module
======================
State of the four Bezier control points.

P0 and P3 are anchors pinned to fractional viewport positions. They are
recomputed on resize and never touched by physics.
P1 and P2 are point masses (position + velocity) integrated every frame.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Tuple

from .curve_math import as_point


@dataclass(frozen=True)
class Viewport:
    """Drawable area in pixels (y grows downward)."""
    width: float
    height: float

    def __post_init__(self):
        if not (self.width > 0 and self.height > 0):
            raise ValueError(f"Viewport must have positive size, got {self.width}x{self.height}")

    @property
    def center(self) -> np.ndarray:
        return np.array([self.width * 0.5, self.height * 0.5])

    @property
    def short_side(self) -> float:
        return float(min(self.width, self.height))

    def at(self, fraction: Tuple[float, float]) -> np.ndarray:
        """Absolute point for a fractional (fx, fy) offset."""
        return np.array([fraction[0] * self.width, fraction[1] * self.height], dtype=np.float64)


@dataclass(frozen=True)
class RopeLayout:
    """Fractional viewport offsets of the default pose."""
    anchor_start: Tuple[float, float] = (0.1, 0.5)   # P0
    control_1: Tuple[float, float] = (0.3, 0.4)      # P1
    control_2: Tuple[float, float] = (0.7, 0.6)      # P2
    anchor_end: Tuple[float, float] = (0.9, 0.5)     # P3

    @classmethod
    def from_dict(cls, data: dict) -> "RopeLayout":
        return cls(**{key: tuple(value) for key, value in data.items()})


@dataclass
class PointMass:
    """A dynamic control point. Both arrays are mutated in place."""
    position: np.ndarray
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(2))

    def __post_init__(self):
        self.position = as_point(self.position)
        self.velocity = as_point(self.velocity)

    def place(self, position: np.ndarray):
        """Move to `position` at rest."""
        self.position[:] = position
        self.velocity[:] = 0.0

    def copy(self) -> "PointMass":
        return PointMass(self.position.copy(), self.velocity.copy())


class ControlPolygon:
    """
    Four ordered control points of the rope.

    Usage:
        poly = ControlPolygon.from_layout(Viewport(800, 600))
        p0, p1, p2, p3 = poly.points()
    """

    def __init__(self,
                 p0: np.ndarray,
                 m1: PointMass,
                 m2: PointMass,
                 p3: np.ndarray):
        self.p0 = as_point(p0)
        self.p3 = as_point(p3)
        self.m1 = m1
        self.m2 = m2

    @classmethod
    def from_layout(cls, viewport: Viewport, layout: RopeLayout = None) -> "ControlPolygon":
        layout = layout or RopeLayout()
        return cls(
            viewport.at(layout.anchor_start),
            PointMass(viewport.at(layout.control_1)),
            PointMass(viewport.at(layout.control_2)),
            viewport.at(layout.anchor_end),
        )

    # Dynamic point shortcuts
    @property
    def p1(self) -> np.ndarray:
        return self.m1.position

    @property
    def p2(self) -> np.ndarray:
        return self.m2.position

    @property
    def v1(self) -> np.ndarray:
        return self.m1.velocity

    @property
    def v2(self) -> np.ndarray:
        return self.m2.velocity

    def points(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        return self.p0, self.m1.position, self.m2.position, self.p3

    def reanchor(self, viewport: Viewport, layout: RopeLayout = None):
        """Keep the endpoints pinned on resize. P1/P2 keep drifting."""
        layout = layout or RopeLayout()
        self.p0[:] = viewport.at(layout.anchor_start)
        self.p3[:] = viewport.at(layout.anchor_end)

    def reset(self, viewport: Viewport, layout: RopeLayout = None):
        """Restore the default pose with both dynamic points at rest."""
        layout = layout or RopeLayout()
        self.reanchor(viewport, layout)
        self.m1.place(viewport.at(layout.control_1))
        self.m2.place(viewport.at(layout.control_2))

    def copy(self) -> "ControlPolygon":
        return ControlPolygon(self.p0.copy(), self.m1.copy(), self.m2.copy(), self.p3.copy())

    def __repr__(self):
        p0, p1, p2, p3 = (tuple(np.round(p, 2)) for p in self.points())
        return f"ControlPolygon(P0={p0}, P1={p1}, P2={p2}, P3={p3})"
