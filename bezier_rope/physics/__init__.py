"""
Physics Module
==============
Pure state and math for the Bezier rope. Nothing here knows about
windows, input devices or drawing.

Submodules:
- curve_math: Cubic Bezier position / derivative evaluation
- control_polygon: Anchors, dynamic point masses, viewport layout
- sampler: Lazy fixed-density curve and tangent sampling
- spring_integrator: Semi-implicit Euler spring-damper
"""

from .curve_math import (
    TANGENT_FLOOR,
    as_point,
    position,
    tangent,
    second_derivative,
    normalize,
    unit_tangent
)

from .control_polygon import (
    Viewport,
    RopeLayout,
    PointMass,
    ControlPolygon
)

from .sampler import (
    DEFAULT_SEGMENT_COUNT,
    DEFAULT_TANGENT_COUNT,
    LazySamples,
    TangentSample,
    sample_curve,
    sample_tangents
)

from .spring_integrator import (
    MIN_TIME_STEP,
    MAX_TIME_STEP,
    SpringParameter,
    SpringParams,
    SpringLimits,
    clamp_time_step,
    acceleration,
    integrate,
    spring_energy
)

__all__ = [
    # Curve math
    'TANGENT_FLOOR',
    'as_point',
    'position',
    'tangent',
    'second_derivative',
    'normalize',
    'unit_tangent',
    # Control polygon
    'Viewport',
    'RopeLayout',
    'PointMass',
    'ControlPolygon',
    # Sampler
    'DEFAULT_SEGMENT_COUNT',
    'DEFAULT_TANGENT_COUNT',
    'LazySamples',
    'TangentSample',
    'sample_curve',
    'sample_tangents',
    # Springs
    'MIN_TIME_STEP',
    'MAX_TIME_STEP',
    'SpringParameter',
    'SpringParams',
    'SpringLimits',
    'clamp_time_step',
    'acceleration',
    'integrate',
    'spring_energy',
]
