"""
Rope Visualization Engine Interface
===================================

Pluggable renderer abstraction.
Swap between engines without touching the physics.

Supported engines:
- ModernGL (default) - OpenGL 3.3 window, line shader
- Headless - No rendering, keeps the last snapshot

Renderers only ever see a RenderState snapshot, never the live
simulation state.

Usage:
    from bezier_rope.visualization import create_renderer

    renderer = create_renderer('headless')  # or 'moderngl'
    renderer.set_simulation(sim)
    renderer.run()
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple
import numpy as np
from dataclasses import dataclass, field


@dataclass
class RenderState:
    """Snapshot of everything needed to draw one frame."""

    width: float
    height: float

    # P0, P1, P2, P3
    control_points: List[np.ndarray]

    # Sampled curve polyline
    curve_points: List[np.ndarray]

    # Short tangent segments [(start, end), ...]
    tangent_segments: List[Tuple[np.ndarray, np.ndarray]]

    # Current spring targets (T1, T2)
    targets: Optional[Tuple[np.ndarray, np.ndarray]] = None

    # HUD
    hud_text: Dict[str, str] = field(default_factory=dict)

    @property
    def anchors(self) -> List[np.ndarray]:
        return [self.control_points[0], self.control_points[3]]

    @property
    def dynamic_points(self) -> List[np.ndarray]:
        return [self.control_points[1], self.control_points[2]]

    @property
    def hud_line(self) -> str:
        return " | ".join(f"{key}: {value}" for key, value in self.hud_text.items())


class RendererInterface(ABC):
    """Abstract base for all rope renderers."""

    @abstractmethod
    def initialize(self):
        """Initialize the rendering engine."""
        pass

    @abstractmethod
    def set_simulation(self, sim):
        """Connect to a RopeSimulation."""
        pass

    @abstractmethod
    def update_state(self, state: RenderState):
        """Push new state to renderer."""
        pass

    @abstractmethod
    def render_frame(self, dt: float):
        """Render one frame."""
        pass

    @abstractmethod
    def run(self):
        """Run the render loop (blocking)."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if renderer is still active."""
        pass

    @abstractmethod
    def shutdown(self):
        """Clean up resources."""
        pass


class HeadlessRenderer(RendererInterface):
    """No-op renderer for tests and batch runs."""

    def __init__(self):
        self._running = False
        self._frame_count = 0
        self.sim = None
        self.last_state: Optional[RenderState] = None

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def initialize(self):
        self._running = True
        print("[Headless] Renderer initialized (no display)")

    def set_simulation(self, sim):
        self.sim = sim

    def update_state(self, state: RenderState):
        self.last_state = state

    def render_frame(self, dt: float):
        self._frame_count += 1

    def run(self):
        self._running = True
        print("[Headless] Running (no visual output)")

    def is_running(self) -> bool:
        return self._running

    def shutdown(self):
        self._running = False
        print(f"[Headless] Shutdown after {self._frame_count} frames")


class ModernGLRenderer(RendererInterface):
    """ModernGL window renderer."""

    def __init__(self):
        self._running = False
        self._run_window = None
        self.sim = None

    def initialize(self):
        # Lazy import to avoid requiring moderngl if not used
        from .rope_renderer import run as run_window

        self._run_window = run_window
        self._running = True
        print("[ModernGL] Renderer initialized")

    def set_simulation(self, sim):
        self.sim = sim

    def update_state(self, state: RenderState):
        # The window pulls snapshots itself every frame
        pass

    def render_frame(self, dt: float):
        # Handled by moderngl_window event loop
        pass

    def run(self):
        # Blocks until the window closes
        self._run_window(self.sim)
        self._running = False

    def is_running(self) -> bool:
        return self._running

    def shutdown(self):
        self._running = False


# Registry of available engines
RENDERERS = {
    'moderngl': ModernGLRenderer,
    'opengl': ModernGLRenderer,  # Alias
    'headless': HeadlessRenderer,
    'none': HeadlessRenderer,  # Alias
}


def create_renderer(engine: str = 'moderngl') -> RendererInterface:
    """
    Create a renderer instance.

    Args:
        engine: One of 'moderngl', 'headless'

    Returns:
        Initialized renderer
    """
    engine = engine.lower()

    if engine not in RENDERERS:
        available = ', '.join(RENDERERS.keys())
        raise ValueError(f"Unknown engine '{engine}'. Available: {available}")

    renderer = RENDERERS[engine]()
    renderer.initialize()

    return renderer


def list_available_engines() -> list:
    """List available rendering engines."""
    return sorted({cls.__name__ for cls in RENDERERS.values()})


def get_recommended_engine() -> str:
    """Get the recommended engine for this system."""
    try:
        import moderngl  # noqa: F401
        return 'moderngl'
    except ImportError:
        return 'headless'
