"""
Test Suite: Sampler
===================
Unit tests for fixed-density curve and tangent sampling.
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bezier_rope.physics import (
    ControlPolygon,
    Viewport,
    DEFAULT_SEGMENT_COUNT,
    DEFAULT_TANGENT_COUNT,
    position,
    sample_curve,
    sample_tangents
)


@pytest.fixture
def polygon():
    return ControlPolygon.from_layout(Viewport(800, 600))


class TestSampleCurve:
    """Tests for the curve polyline sampler"""

    @pytest.mark.parametrize("count", [1, 2, 7, 100, 333])
    def test_yields_count_plus_one_points(self, polygon, count):
        samples = sample_curve(polygon, count)
        points = list(samples)

        assert len(points) == count + 1
        assert len(samples) == count + 1

    @pytest.mark.parametrize("count", [1, 10, 100])
    def test_first_and_last_are_curve_endpoints(self, polygon, count):
        points = list(sample_curve(polygon, count))

        np.testing.assert_array_equal(points[0], position(polygon, 0.0))
        np.testing.assert_array_equal(points[-1], position(polygon, 1.0))
        np.testing.assert_allclose(points[0], polygon.p0)
        np.testing.assert_allclose(points[-1], polygon.p3)

    def test_uniform_parameter_spacing(self, polygon):
        points = list(sample_curve(polygon, 4))
        for i, point in enumerate(points):
            np.testing.assert_allclose(point, position(polygon, i / 4))

    def test_default_density(self, polygon):
        assert len(list(sample_curve(polygon))) == DEFAULT_SEGMENT_COUNT + 1

    def test_restartable(self, polygon):
        """Iterating twice gives the same sequence"""
        samples = sample_curve(polygon, 20)
        first = list(samples)
        second = list(samples)

        assert len(first) == len(second) == 21
        for a, b in zip(first, second):
            np.testing.assert_array_equal(a, b)

    def test_lazy_reads_current_state(self, polygon):
        """Points are evaluated at iteration time, not at construction"""
        samples = sample_curve(polygon, 2)
        polygon.m1.position += np.array([0.0, 100.0])

        midpoint = list(samples)[1]
        np.testing.assert_allclose(midpoint, position(polygon, 0.5))

    def test_rejects_zero_segments(self, polygon):
        with pytest.raises(ValueError):
            sample_curve(polygon, 0)


class TestSampleTangents:
    """Tests for the tangent tick sampler"""

    def test_count_and_defaults(self, polygon):
        assert len(list(sample_tangents(polygon, 5, 10.0))) == 6
        assert len(list(sample_tangents(polygon))) == DEFAULT_TANGENT_COUNT + 1

    def test_directions_scaled_to_length(self, polygon):
        for sample in sample_tangents(polygon, 10, 24.0):
            assert np.hypot(*sample.direction) == pytest.approx(24.0)

    def test_anchor_on_curve(self, polygon):
        for sample in sample_tangents(polygon, 10, 24.0):
            np.testing.assert_allclose(sample.anchor, position(polygon, sample.t))

    def test_segment_centered_on_anchor(self, polygon):
        for sample in sample_tangents(polygon, 10, 24.0):
            start, end = sample.segment()
            np.testing.assert_allclose((start + end) / 2, sample.anchor)
            assert np.linalg.norm(end - start) == pytest.approx(24.0)

    def test_segment_follows_derivative(self):
        """A horizontal line gives horizontal ticks"""
        poly = ControlPolygon.from_layout(
            Viewport(100, 100),
        )
        for p in (poly.p0, poly.p1, poly.p2, poly.p3):
            p[1] = 50.0

        for sample in sample_tangents(poly, 4, 2.0):
            start, end = sample.segment()
            assert start[1] == pytest.approx(50.0)
            assert end[0] - start[0] == pytest.approx(2.0)

    def test_degenerate_polygon_still_unit(self):
        """Fully collapsed polygon yields finite, correctly sized ticks"""
        poly = ControlPolygon.from_layout(Viewport(100, 100))
        for p in (poly.p0, poly.p1, poly.p2, poly.p3):
            p[:] = (50.0, 50.0)

        for sample in sample_tangents(poly, 10, 4.0):
            assert np.all(np.isfinite(sample.direction))
            assert np.hypot(*sample.direction) == pytest.approx(4.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
