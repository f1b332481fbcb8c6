"""
Interaction Module
=================
Input signal -> spring targets.

- PointerSource: mouse / touch drag
- TiltSource: device pitch and roll
"""

from .target_sources import (
    POINTER_SPREAD_FRACTION,
    TILT_SCALE_FRACTION,
    TILT_SPREAD,
    TILT_SHARED_OFFSET,
    InputConfig,
    TargetSource,
    PointerSource,
    TiltSource,
    map_pointer_to_targets,
    map_tilt_to_targets,
    tilt_scale,
    create_target_source,
    list_target_sources
)

__all__ = [
    'POINTER_SPREAD_FRACTION',
    'TILT_SCALE_FRACTION',
    'TILT_SPREAD',
    'TILT_SHARED_OFFSET',
    'InputConfig',
    'TargetSource',
    'PointerSource',
    'TiltSource',
    'map_pointer_to_targets',
    'map_tilt_to_targets',
    'tilt_scale',
    'create_target_source',
    'list_target_sources',
]
