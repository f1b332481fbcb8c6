"""
Target Sources
==============
Turn a raw input sample into the two spring targets (T1 for P1, T2 for P2).

Two interchangeable sources, same output shape:
- PointerSource: (x, y) in viewport pixels. Targets straddle the pointer,
  so dragging bows the rope.
- TiltSource: (pitch, roll) in radians. Targets sit left/right of the
  viewport center and share the tilt offset, so the rope sways as one.

          T1 ---- pointer ---- T2          pointer mode
          |<-off->|     |<-off->|

Usage:
    source = create_target_source('tilt', Viewport(800, 600))
    t1, t2 = source.targets((pitch, roll))
"""

import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from ..physics import Viewport, as_point


# Fraction of the short viewport side between the pointer and each target
POINTER_SPREAD_FRACTION = 0.15

# Tilt scale as a fraction of the short viewport side
TILT_SCALE_FRACTION = 0.25

# Targets sit +/- TILT_SPREAD * scale from center
TILT_SPREAD = 0.6

# Share of the roll offset applied to both targets
TILT_SHARED_OFFSET = 0.6

TargetPair = Tuple[np.ndarray, np.ndarray]


def _clamp_unit(value: float) -> float:
    return max(-1.0, min(1.0, float(value)))


def tilt_scale(viewport: Viewport, fraction: float = TILT_SCALE_FRACTION) -> float:
    """Pixel scale of a full (1 radian) tilt."""
    return viewport.short_side * fraction


def map_pointer_to_targets(pointer: Sequence[float],
                           viewport: Viewport,
                           spread_fraction: float = POINTER_SPREAD_FRACTION) -> TargetPair:
    """
    Targets offset symmetrically left/right of the pointer.

    Args:
        pointer: (x, y) in viewport pixels
        viewport: Current drawable area
        spread_fraction: Offset as a fraction of the short viewport side

    Returns:
        (target1, target2)
    """
    pointer = as_point(pointer)
    offset = np.array([spread_fraction * viewport.short_side, 0.0])
    return pointer - offset, pointer + offset


def map_tilt_to_targets(pitch: float,
                        roll: float,
                        center: Sequence[float],
                        scale: float,
                        spread: float = TILT_SPREAD,
                        shared_offset: float = TILT_SHARED_OFFSET) -> TargetPair:
    """
    Targets from device attitude.

    Pitch and roll are clamped to [-1, 1] rad. Roll drives the horizontal
    offset, pitch the vertical one. Both targets get the same vertical
    offset and `shared_offset` of the horizontal one.

    Args:
        pitch: Pitch angle (rad)
        roll: Roll angle (rad)
        center: Viewport center (px)
        scale: Pixels per radian of tilt
        spread: Half distance between targets, as a multiple of scale
        shared_offset: Fraction of the roll offset applied to both targets
    """
    cx, cy = as_point(center)
    off_x = _clamp_unit(roll) * scale
    off_y = _clamp_unit(pitch) * scale

    shared_x = off_x * shared_offset
    target1 = np.array([cx - scale * spread + shared_x, cy + off_y])
    target2 = np.array([cx + scale * spread + shared_x, cy + off_y])
    return target1, target2


class TargetSource(ABC):
    """Maps one input sample to (target1, target2) for the frame."""

    name = "abstract"

    def __init__(self, viewport: Viewport):
        self.viewport = viewport

    def resize(self, viewport: Viewport):
        self.viewport = viewport

    @abstractmethod
    def targets(self, sample: Sequence[float]) -> TargetPair:
        """Targets for a fresh sample. Missing samples are handled by the caller."""
        pass


class PointerSource(TargetSource):
    """Pointer / drag driven targets."""

    name = "pointer"

    def __init__(self, viewport: Viewport, spread_fraction: float = POINTER_SPREAD_FRACTION):
        super().__init__(viewport)
        self.spread_fraction = spread_fraction

    def targets(self, sample: Sequence[float]) -> TargetPair:
        return map_pointer_to_targets(sample, self.viewport, self.spread_fraction)


class TiltSource(TargetSource):
    """Pitch/roll driven targets (motion sensor)."""

    name = "tilt"

    def __init__(self,
                 viewport: Viewport,
                 scale_fraction: float = TILT_SCALE_FRACTION,
                 spread: float = TILT_SPREAD,
                 shared_offset: float = TILT_SHARED_OFFSET):
        super().__init__(viewport)
        self.scale_fraction = scale_fraction
        self.spread = spread
        self.shared_offset = shared_offset

    @property
    def scale(self) -> float:
        return tilt_scale(self.viewport, self.scale_fraction)

    def targets(self, sample: Sequence[float]) -> TargetPair:
        pitch, roll = sample
        return map_tilt_to_targets(
            pitch, roll,
            self.viewport.center,
            self.scale,
            self.spread,
            self.shared_offset
        )


@dataclass
class InputConfig:
    """Input section of the rope configuration"""
    kind: str = "pointer"
    pointer_spread_fraction: float = POINTER_SPREAD_FRACTION
    tilt_scale_fraction: float = TILT_SCALE_FRACTION
    tilt_spread: float = TILT_SPREAD
    tilt_shared_offset: float = TILT_SHARED_OFFSET


# Registry of available sources
TARGET_SOURCES = {
    'pointer': PointerSource,
    'mouse': PointerSource,  # Alias
    'drag': PointerSource,   # Alias
    'tilt': TiltSource,
    'motion': TiltSource,    # Alias
}


def create_target_source(kind: str,
                         viewport: Viewport,
                         config: Optional[InputConfig] = None) -> TargetSource:
    """
    Create a target source by name.

    Args:
        kind: One of 'pointer', 'tilt' (or an alias)
        viewport: Current drawable area
        config: Tuning constants (defaults if omitted)
    """
    config = config or InputConfig()
    kind = kind.lower()

    if kind not in TARGET_SOURCES:
        available = ', '.join(TARGET_SOURCES.keys())
        raise ValueError(f"Unknown input kind '{kind}'. Available: {available}")

    source_class = TARGET_SOURCES[kind]
    if source_class is TiltSource:
        return TiltSource(
            viewport,
            scale_fraction=config.tilt_scale_fraction,
            spread=config.tilt_spread,
            shared_offset=config.tilt_shared_offset
        )
    return PointerSource(viewport, spread_fraction=config.pointer_spread_fraction)


def list_target_sources() -> Dict[str, str]:
    """Alias -> canonical source name."""
    return {alias: source.name for alias, source in TARGET_SOURCES.items()}
