"""
Visualization Module
====================
Rendering boundary for the Bezier rope.

The ModernGL window (rope_renderer) is imported lazily by
ModernGLRenderer so headless use never needs an OpenGL stack.
"""

from .engine_interface import (
    RenderState,
    RendererInterface,
    HeadlessRenderer,
    ModernGLRenderer,
    create_renderer,
    list_available_engines,
    get_recommended_engine
)

from .primitives import (
    grid_lines,
    curve_strip,
    tangent_lines,
    polygon_strip,
    marker_quads,
    control_markers
)

__all__ = [
    'RenderState',
    'RendererInterface',
    'HeadlessRenderer',
    'ModernGLRenderer',
    'create_renderer',
    'list_available_engines',
    'get_recommended_engine',
    'grid_lines',
    'curve_strip',
    'tangent_lines',
    'polygon_strip',
    'marker_quads',
    'control_markers',
]
