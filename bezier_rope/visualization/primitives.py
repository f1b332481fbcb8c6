"""
Draw Primitives
===============
RenderState -> interleaved vertex arrays.

Pure numpy so the geometry can be checked without a GL context.
Every array uses the same layout the line shader expects:

    in_position: 2 x f4 (viewport pixels, y down)
    in_color:    4 x f4 (rgba)
"""

import numpy as np
from typing import Iterable, List, Sequence, Tuple

from .engine_interface import RenderState


# Theme (rgb)
BACKGROUND_COLOR = (0.043, 0.059, 0.078)
GRID_COLOR = (0.063, 0.094, 0.129)
GRID_ALPHA = 0.25
GRID_SPACING = 32.0
CURVE_COLOR = (0.486, 0.780, 1.0)
CURVE_WIDTH = 3.0
TANGENT_COLOR = (0.62, 0.94, 0.66)
TANGENT_WIDTH = 1.5
POLYGON_COLOR = (0.941, 0.706, 0.435)
POLYGON_WIDTH = 1.5
ANCHOR_COLOR = (1.0, 0.231, 0.188)      # red
DYNAMIC_COLOR = (1.0, 0.8, 0.0)         # yellow
MARKER_RADIUS = 5.0

VERTEX_DTYPE = [('in_position', 'f4', 2), ('in_color', 'f4', 4)]


def _vertices(points: Sequence[Sequence[float]], color: Tuple[float, ...], alpha: float = 1.0) -> np.ndarray:
    data = np.zeros(len(points), dtype=VERTEX_DTYPE)
    if len(points):
        data['in_position'] = np.asarray(points, dtype='f4').reshape(-1, 2)
        data['in_color'] = (*color[:3], alpha)
    return data


def grid_lines(width: float, height: float, spacing: float = GRID_SPACING) -> np.ndarray:
    """Vertical then horizontal lines every `spacing` px (LINES)."""
    points: List[Tuple[float, float]] = []
    for x in np.arange(0.0, width + 1e-9, spacing):
        points.extend([(x, 0.0), (x, height)])
    for y in np.arange(0.0, height + 1e-9, spacing):
        points.extend([(0.0, y), (width, y)])
    return _vertices(points, GRID_COLOR, GRID_ALPHA)


def curve_strip(state: RenderState) -> np.ndarray:
    """Sampled curve as one connected polyline (LINE_STRIP)."""
    return _vertices(state.curve_points, CURVE_COLOR)


def tangent_lines(state: RenderState) -> np.ndarray:
    """Two vertices per tangent segment (LINES)."""
    points = [p for segment in state.tangent_segments for p in segment]
    return _vertices(points, TANGENT_COLOR)


def polygon_strip(state: RenderState) -> np.ndarray:
    """P0-P1-P2-P3 (LINE_STRIP)."""
    return _vertices(state.control_points, POLYGON_COLOR)


def marker_quads(points: Iterable[Sequence[float]], color: Tuple[float, ...],
                 radius: float = MARKER_RADIUS, segments: int = 12) -> np.ndarray:
    """Filled discs as triangle fans unrolled into TRIANGLES."""
    angles = np.linspace(0.0, 2.0 * np.pi, segments + 1)
    rim = np.stack([np.cos(angles), np.sin(angles)], axis=1) * radius

    triangles: List[np.ndarray] = []
    for center in points:
        center = np.asarray(center, dtype=np.float64)
        for i in range(segments):
            triangles.extend([center, center + rim[i], center + rim[i + 1]])
    return _vertices(triangles, color)


def control_markers(state: RenderState, radius: float = MARKER_RADIUS) -> Tuple[np.ndarray, np.ndarray]:
    """(anchor discs, dynamic point discs), drawn in different colors."""
    return (
        marker_quads(state.anchors, ANCHOR_COLOR, radius),
        marker_quads(state.dynamic_points, DYNAMIC_COLOR, radius),
    )
