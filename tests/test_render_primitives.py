"""
Test Suite: Rendering Boundary
==============================
Vertex generation and the renderer registry. No GL context needed,
except for the window helpers, which are skipped without moderngl_window.
"""

import numpy as np
import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bezier_rope.main import RopeSimulation
from bezier_rope.physics import Viewport
from bezier_rope.visualization import (
    HeadlessRenderer,
    create_renderer,
    list_available_engines,
    grid_lines,
    curve_strip,
    tangent_lines,
    polygon_strip,
    marker_quads,
    control_markers
)
from bezier_rope.visualization.primitives import (
    ANCHOR_COLOR,
    DYNAMIC_COLOR,
    GRID_ALPHA,
    VERTEX_DTYPE
)


@pytest.fixture
def state():
    return RopeSimulation(viewport=Viewport(800, 600)).snapshot()


class TestPrimitives:

    def test_grid_includes_both_edges(self):
        # x: 0, 32, 64 -> 3 lines, y: 0, 32 -> 2 lines, 2 vertices each
        grid = grid_lines(64, 32, 32)
        assert len(grid) == 10
        np.testing.assert_allclose(grid['in_color'][:, 3], GRID_ALPHA)

    def test_grid_spans_viewport(self):
        grid = grid_lines(100, 50, 25)
        assert grid['in_position'][:, 0].max() == pytest.approx(100.0)
        assert grid['in_position'][:, 1].max() == pytest.approx(50.0)

    def test_vertex_counts(self, state):
        assert len(curve_strip(state)) == 101
        assert len(tangent_lines(state)) == 22
        assert len(polygon_strip(state)) == 4

    def test_layout(self, state):
        assert curve_strip(state).dtype == np.dtype(VERTEX_DTYPE)

    def test_curve_endpoints_on_anchors(self, state):
        curve = curve_strip(state)
        np.testing.assert_allclose(curve['in_position'][0], [80.0, 300.0], atol=1e-4)
        np.testing.assert_allclose(curve['in_position'][-1], [720.0, 300.0], atol=1e-4)

    def test_marker_discs(self):
        discs = marker_quads([(0.0, 0.0), (10.0, 10.0)], (1.0, 0.0, 0.0), radius=2.0, segments=8)
        assert len(discs) == 2 * 8 * 3

        first = discs['in_position'][:24]
        distances = np.linalg.norm(first, axis=1)
        assert distances.max() == pytest.approx(2.0, abs=1e-5)

    def test_marker_colors(self, state):
        anchors, dynamic = control_markers(state)
        assert len(anchors) == len(dynamic)
        np.testing.assert_allclose(anchors['in_color'][:, :3], np.tile(ANCHOR_COLOR, (len(anchors), 1)), atol=1e-6)
        np.testing.assert_allclose(dynamic['in_color'][:, :3], np.tile(DYNAMIC_COLOR, (len(dynamic), 1)), atol=1e-6)

    def test_empty_input(self):
        assert len(marker_quads([], DYNAMIC_COLOR)) == 0


class TestRenderers:

    def test_headless_lifecycle(self, state, capsys):
        renderer = create_renderer('headless')
        assert isinstance(renderer, HeadlessRenderer)
        assert renderer.is_running()

        renderer.update_state(state)
        renderer.render_frame(1.0 / 60.0)
        renderer.render_frame(1.0 / 60.0)
        renderer.shutdown()

        assert renderer.last_state is state
        assert renderer.frame_count == 2
        assert not renderer.is_running()
        assert "Shutdown after 2 frames" in capsys.readouterr().out

    def test_unknown_engine(self):
        with pytest.raises(ValueError, match="Unknown engine"):
            create_renderer('vulkan')

    def test_list_engines(self):
        assert list_available_engines() == ['HeadlessRenderer', 'ModernGLRenderer']


class TestWindowHelpers:
    """Pure helpers from the ModernGL window module"""

    @pytest.fixture(autouse=True)
    def window_module(self):
        pytest.importorskip("moderngl_window")
        pytest.importorskip("pyrr")

    def test_projection_is_y_down(self):
        from bezier_rope.visualization.rope_renderer import screen_projection

        projection = screen_projection(800, 600)
        top_left = np.dot([0.0, 0.0, 0.0, 1.0], projection)
        bottom_right = np.dot([800.0, 600.0, 0.0, 1.0], projection)
        center = np.dot([400.0, 300.0, 0.0, 1.0], projection)

        np.testing.assert_allclose(top_left[:2], [-1.0, 1.0], atol=1e-6)
        np.testing.assert_allclose(bottom_right[:2], [1.0, -1.0], atol=1e-6)
        np.testing.assert_allclose(center[:2], [0.0, 0.0], atol=1e-6)

    def test_grid_rebuild_releases_old_buffers(self):
        """Each resize frees the previous grid VAO and VBO"""
        from bezier_rope.visualization.rope_renderer import RopeWindow

        window = RopeWindow.__new__(RopeWindow)
        window.ctx = MagicMock()
        window.ctx.buffer.side_effect = lambda *args, **kwargs: MagicMock()
        window.ctx.vertex_array.side_effect = lambda *args, **kwargs: MagicMock()
        window.prog = MagicMock()
        window._grid_vao = None
        window._grid_vbo = None

        window._create_grid(800, 600)
        first_vao, first_vbo = window._grid_vao, window._grid_vbo
        window._create_grid(1024, 768)

        first_vao.release.assert_called_once()
        first_vbo.release.assert_called_once()
        window._grid_vao.release.assert_not_called()
        window._grid_vbo.release.assert_not_called()

    def test_mouse_to_tilt(self):
        from bezier_rope.visualization.rope_renderer import mouse_to_tilt

        viewport = Viewport(800, 600)
        assert mouse_to_tilt(400, 300, viewport) == pytest.approx((0.0, 0.0))
        assert mouse_to_tilt(800, 0, viewport) == pytest.approx((-1.0, 1.0))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
