"""
Sampler Module
==============
Fixed-density sampling of the curve for display.

Both samplers return LazySamples: nothing is evaluated until the
sequence is iterated, and every iteration starts again from t = 0,
so one object can be drawn as many times as needed in a frame.
"""

import numpy as np
from dataclasses import dataclass
from typing import Callable, Iterator, Tuple

from .curve_math import position, unit_tangent, TANGENT_FLOOR


DEFAULT_SEGMENT_COUNT = 100
DEFAULT_TANGENT_COUNT = 10


@dataclass(frozen=True)
class TangentSample:
    """Unit tangent scaled to `length`, anchored on the curve."""
    t: float
    anchor: np.ndarray
    direction: np.ndarray     # |direction| == length

    def segment(self) -> Tuple[np.ndarray, np.ndarray]:
        """Line segment centered on the anchor, +/- length/2 along the tangent."""
        half = self.direction * 0.5
        return self.anchor - half, self.anchor + half


class LazySamples:
    """Restartable finite sequence produced by `factory(i)` for i in [0, count]."""

    def __init__(self, count: int, factory: Callable[[int], object]):
        if count < 1:
            raise ValueError(f"Sample count must be >= 1, got {count}")
        self.count = count
        self._factory = factory

    def __iter__(self) -> Iterator:
        for i in range(self.count + 1):
            yield self._factory(i)

    def __len__(self) -> int:
        return self.count + 1

    def parameter(self, i: int) -> float:
        # Exact endpoints: t == 1.0 at i == count
        return i / self.count


def sample_curve(polygon, segment_count: int = DEFAULT_SEGMENT_COUNT) -> LazySamples:
    """
    `segment_count + 1` curve points at uniform t = i / segment_count.

    The polygon is read at iteration time, so a sampler built once per
    frame always reflects the latest physics state.
    """
    samples = LazySamples(segment_count, lambda i: position(polygon, samples.parameter(i)))
    return samples


def sample_tangents(polygon,
                    tangent_count: int = DEFAULT_TANGENT_COUNT,
                    length: float = 1.0,
                    floor: float = TANGENT_FLOOR) -> LazySamples:
    """
    `tangent_count + 1` TangentSamples at uniform t.

    Each direction is the unit tangent (degenerate tangents use the
    floor) scaled to `length`.
    """
    def build(i: int) -> TangentSample:
        t = samples.parameter(i)
        return TangentSample(
            t=t,
            anchor=position(polygon, t),
            direction=unit_tangent(polygon, t, floor) * length,
        )

    samples = LazySamples(tangent_count, build)
    return samples
