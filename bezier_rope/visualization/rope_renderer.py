"""
Rope Window
===========

ModernGL window for the Bezier rope.

This renderer:
1. Feeds mouse input to the session (pointer, or emulated tilt)
2. Ticks the RopeSimulation once per refresh with the real frame time
3. Draws a snapshot: grid, curve, tangents, control polygon, markers

Controls:
    Mouse move / drag - Move the targets (pointer mode) or tilt (tilt mode)
    UP / DOWN         - Stiffness +/-
    RIGHT / LEFT      - Damping +/-
    R                 - Reset
    SPACE             - Pause
"""

import numpy as np
import moderngl
import moderngl_window as mglw
from pyrr import matrix44

from ..main import RopeSimulation, RopeCommand
from ..physics import Viewport
from ..session import SessionHandle, stop
from .primitives import (
    BACKGROUND_COLOR, CURVE_WIDTH, TANGENT_WIDTH, POLYGON_WIDTH,
    grid_lines, curve_strip, tangent_lines, polygon_strip, control_markers
)


LINE_VERTEX = """
#version 330
in vec2 in_position;
in vec4 in_color;
out vec4 v_color;
uniform mat4 projection;
void main() {
    v_color = in_color;
    gl_Position = projection * vec4(in_position, 0.0, 1.0);
}
"""

LINE_FRAGMENT = """
#version 330
in vec4 v_color;
out vec4 fragColor;
void main() {
    fragColor = v_color;
}
"""


def screen_projection(width: float, height: float) -> np.ndarray:
    """Orthographic projection with (0, 0) top-left and y down."""
    return matrix44.create_orthogonal_projection(
        left=0.0, right=width, bottom=height, top=0.0, near=-1.0, far=1.0
    )


def mouse_to_tilt(x: float, y: float, viewport: Viewport) -> tuple:
    """Emulate a tilt sensor on desktop: window edges are +/- 1 rad."""
    roll = (x / viewport.width - 0.5) * 2.0
    pitch = (y / viewport.height - 0.5) * 2.0
    return pitch, roll


class RopeWindow(mglw.WindowConfig):
    """
    Renders the rope simulation.
    """

    gl_version = (3, 3)
    title = "Bezier Rope"
    window_size = (1280, 720)
    aspect_ratio = None
    resizable = True
    samples = 4

    # Injected by ModernGLRenderer
    sim_instance = None

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.ctx.enable(moderngl.BLEND)

        width, height = self.wnd.size
        sim = self.sim_instance or RopeSimulation()
        sim.resize(Viewport(width, height), relayout=True)

        self.session = SessionHandle(sim)
        self.session.on_stop(lambda: print("Session stopped"))
        self.paused = False

        self.prog = self.ctx.program(vertex_shader=LINE_VERTEX, fragment_shader=LINE_FRAGMENT)
        self._grid_vao = None
        self._grid_vbo = None
        self._create_grid(width, height)

        print("\n=== BEZIER ROPE ===")
        print(f"Input: {sim.source.name}")
        print("Controls:")
        print("  Mouse - Move targets")
        print("  UP/DOWN - Stiffness +/-")
        print("  RIGHT/LEFT - Damping +/-")
        print("  R - Reset")
        print("  SPACE - Pause")
        print()

    @property
    def sim(self) -> RopeSimulation:
        return self.session.simulation

    def _create_grid(self, width: float, height: float):
        """Static grid, rebuilt on resize."""
        if self._grid_vao is not None:
            self._grid_vao.release()
        if self._grid_vbo is not None:
            self._grid_vbo.release()
        self._grid_vbo = self.ctx.buffer(grid_lines(width, height).tobytes())
        self._grid_vao = self.ctx.vertex_array(
            self.prog, [(self._grid_vbo, '2f 4f', 'in_position', 'in_color')]
        )

    def _draw(self, data: np.ndarray, mode: int, line_width: float = 1.0):
        if len(data) == 0:
            return
        self.ctx.line_width = line_width
        vbo = self.ctx.buffer(data.tobytes())
        vao = self.ctx.vertex_array(self.prog, [(vbo, '2f 4f', 'in_position', 'in_color')])
        vao.render(mode)
        vao.release()
        vbo.release()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_key_event(self, key, action, modifiers):
        if action != self.wnd.keys.ACTION_PRESS:
            return

        keys = self.wnd.keys
        commands = {
            keys.UP: RopeCommand.INCREASE_STIFFNESS,
            keys.DOWN: RopeCommand.DECREASE_STIFFNESS,
            keys.RIGHT: RopeCommand.INCREASE_DAMPING,
            keys.LEFT: RopeCommand.DECREASE_DAMPING,
            keys.R: RopeCommand.RESET,
        }

        if key == keys.SPACE:
            self.paused = not self.paused
            print("PAUSED" if self.paused else "RUNNING")
        elif key == keys.ESCAPE:
            stop(self.session)
            self.wnd.close()
        elif key in commands:
            self.session.command(commands[key].value)
            if commands[key] == RopeCommand.RESET:
                print("RESET")

    def _submit_mouse(self, x: float, y: float):
        if self.sim.source.name == "tilt":
            self.session.submit(mouse_to_tilt(x, y, self.sim.viewport))
        else:
            self.session.submit((x, y))

    def on_mouse_position_event(self, x, y, dx, dy):
        self._submit_mouse(x, y)

    def on_mouse_drag_event(self, x, y, dx, dy):
        self._submit_mouse(x, y)

    def on_resize(self, width: int, height: int):
        if width > 0 and height > 0:
            self.session.resize(width, height)
            self._create_grid(width, height)

    def on_close(self):
        stop(self.session)

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def on_render(self, time: float, frame_time: float):
        """Tick physics with the real frame time, then draw a snapshot."""
        if not self.paused:
            self.session.tick(frame_time)

        state = self.sim.snapshot()
        self.wnd.title = f"Bezier Rope | {state.hud_line}"

        self.ctx.clear(*BACKGROUND_COLOR)
        self.ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA

        projection = screen_projection(state.width, state.height)
        self.prog['projection'].write(projection.astype('f4').tobytes())

        # Grid
        self.ctx.line_width = 1.0
        self._grid_vao.render(moderngl.LINES)

        # Curve, tangents, control polygon
        self._draw(curve_strip(state), moderngl.LINE_STRIP, CURVE_WIDTH)
        self._draw(tangent_lines(state), moderngl.LINES, TANGENT_WIDTH)
        self._draw(polygon_strip(state), moderngl.LINE_STRIP, POLYGON_WIDTH)

        # Control points (anchors red, dynamic yellow)
        anchors, dynamic = control_markers(state)
        self._draw(anchors, moderngl.TRIANGLES)
        self._draw(dynamic, moderngl.TRIANGLES)


def run(sim: RopeSimulation = None):
    """Run the rope window."""
    class ConfiguredWindow(RopeWindow):
        sim_instance = sim

    mglw.run_window_config(ConfiguredWindow, args=[])


if __name__ == "__main__":
    run()
