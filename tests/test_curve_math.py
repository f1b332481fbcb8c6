"""
Test Suite: Curve Math
======================
Unit tests for cubic Bezier evaluation.

Tests:
- Endpoint interpolation
- Bernstein closed form at known parameters
- Derivative against finite differences
- Unit tangents on degenerate polygons
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bezier_rope.physics import (
    ControlPolygon,
    PointMass,
    TANGENT_FLOOR,
    as_point,
    position,
    tangent,
    normalize,
    unit_tangent
)


def make_polygon(p0, p1, p2, p3) -> ControlPolygon:
    return ControlPolygon(as_point(p0), PointMass(p1), PointMass(p2), as_point(p3))


@pytest.fixture
def arch():
    """Symmetric arch: (0,0) (0,1) (1,1) (1,0)"""
    return make_polygon((0, 0), (0, 1), (1, 1), (1, 0))


class TestPosition:
    """Tests for B(t)"""

    def test_endpoints_are_anchors(self):
        """B(0) == P0 and B(1) == P3 for arbitrary polygons"""
        rng = np.random.default_rng(7)
        for _ in range(50):
            pts = rng.uniform(-1000, 1000, size=(4, 2))
            poly = make_polygon(*pts)
            np.testing.assert_allclose(position(poly, 0.0), pts[0], atol=1e-12)
            np.testing.assert_allclose(position(poly, 1.0), pts[3], atol=1e-12)

    def test_midpoint_of_arch(self, arch):
        """B(0.5) = 1/8 P0 + 3/8 P1 + 3/8 P2 + 1/8 P3"""
        np.testing.assert_allclose(position(arch, 0.5), [0.5, 0.75])

    def test_accepts_point_sequence(self, arch):
        """Plain 4-sequences work the same as a ControlPolygon"""
        pts = [(0, 0), (0, 1), (1, 1), (1, 0)]
        for t in (0.0, 0.25, 0.6, 1.0):
            np.testing.assert_allclose(position(pts, t), position(arch, t))

    def test_does_not_mutate_polygon(self, arch):
        before = [p.copy() for p in arch.points()]
        position(arch, 0.3)
        tangent(arch, 0.3)
        for a, b in zip(before, arch.points()):
            np.testing.assert_array_equal(a, b)


class TestTangent:
    """Tests for B'(t)"""

    def test_endpoint_derivatives(self, arch):
        """B'(0) = 3(P1 - P0), B'(1) = 3(P3 - P2)"""
        np.testing.assert_allclose(tangent(arch, 0.0), [0.0, 3.0])
        np.testing.assert_allclose(tangent(arch, 1.0), [0.0, -3.0])

    def test_midpoint_derivative(self, arch):
        np.testing.assert_allclose(tangent(arch, 0.5), [1.5, 0.0])

    def test_matches_finite_difference(self):
        poly = make_polygon((10, 20), (200, -50), (-30, 400), (500, 90))
        h = 1e-6
        for t in np.linspace(0.05, 0.95, 10):
            numeric = (position(poly, t + h) - position(poly, t - h)) / (2 * h)
            np.testing.assert_allclose(tangent(poly, t), numeric, rtol=1e-5, atol=1e-4)

    def test_straight_line_has_constant_derivative(self):
        """Evenly spaced collinear points give uniform speed"""
        poly = make_polygon((0, 0), (1, 0), (2, 0), (3, 0))
        for t in np.linspace(0, 1, 7):
            np.testing.assert_allclose(tangent(poly, t), [3.0, 0.0])


class TestNormalization:
    """Tests for floor-protected normalization"""

    def test_regular_vector(self):
        np.testing.assert_allclose(normalize(np.array([3.0, 4.0])), [0.6, 0.8])

    def test_zero_vector_does_not_divide_by_zero(self):
        result = normalize(np.zeros(2))
        assert np.all(np.isfinite(result))
        np.testing.assert_array_equal(result, [0.0, 0.0])

    def test_tiny_vector_uses_floor(self):
        result = normalize(np.array([TANGENT_FLOOR / 10, 0.0]))
        assert result[0] == pytest.approx(0.1)

    @pytest.mark.parametrize("points", [
        [(0, 0), (0, 0), (5, 5), (10, 0)],      # P0 == P1
        [(0, 0), (5, 5), (10, 0), (10, 0)],     # P2 == P3
        [(0, 0), (0, 0), (0, 0), (10, 0)],      # P0 == P1 == P2
        [(3, 3), (3, 3), (3, 3), (3, 3)],       # fully collapsed
        [(0, 0), (5, 0), (5, 0), (10, 0)],      # P1 == P2
    ])
    def test_unit_tangent_is_unit_on_degenerate_polygons(self, points):
        poly = make_polygon(*points)
        for t in np.linspace(0, 1, 21):
            direction = unit_tangent(poly, t)
            assert np.hypot(*direction) == pytest.approx(1.0, abs=1e-9)

    def test_unit_tangent_follows_curve_when_start_collapses(self):
        """With P0 == P1 the start direction points toward P2"""
        poly = make_polygon((0, 0), (0, 0), (10, 0), (10, 10))
        np.testing.assert_allclose(unit_tangent(poly, 0.0), [1.0, 0.0], atol=1e-12)


class TestAsPoint:
    def test_copies(self):
        source = np.array([1.0, 2.0])
        point = as_point(source)
        point[0] = 99
        assert source[0] == 1.0

    def test_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            as_point((1, 2, 3))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
