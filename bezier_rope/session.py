"""
Rope Session
============
Explicit lifecycle around a RopeSimulation.

    handle = start({'input': {'kind': 'tilt'}})
    handle.submit((pitch, roll))       # from a sensor / event callback, any thread
    handle.tick(frame_delta)           # from the display refresh callback
    stop(handle)

The platform side (window, sensor manager, display link) stays outside:
it pushes samples in, calls tick() once per refresh, and registers its
own release hooks with on_stop().
"""

import threading
from typing import Callable, Dict, List, Optional, Sequence, Union

from .main import RopeSimulation
from .physics import Viewport


class InputSnapshot:
    """
    Latest-value slot for asynchronous input.

    Producers overwrite, the frame loop takes. take() never blocks and
    returns None when nothing new arrived since the previous take().
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._sample: Optional[Sequence[float]] = None
        self._fresh = False
        self.received = 0

    def push(self, sample: Sequence[float]):
        with self._lock:
            self._sample = tuple(sample)
            self._fresh = True
            self.received += 1

    def take(self) -> Optional[Sequence[float]]:
        with self._lock:
            if not self._fresh:
                return None
            self._fresh = False
            return self._sample

    @property
    def latest(self) -> Optional[Sequence[float]]:
        """Last sample seen, fresh or not."""
        with self._lock:
            return self._sample


class SessionHandle:
    """One running rope session."""

    def __init__(self, simulation: RopeSimulation):
        self.simulation = simulation
        self.inputs = InputSnapshot()
        self._running = True
        self._stop_hooks: List[Callable[[], None]] = []

    @property
    def running(self) -> bool:
        return self._running

    def submit(self, sample: Sequence[float]):
        """Deliver an input sample. Ignored after stop()."""
        if self._running:
            self.inputs.push(sample)

    def tick(self, wall_clock_delta: float) -> Optional[Dict]:
        """Advance one frame with the newest sample. No-op once stopped."""
        if not self._running:
            return None
        return self.simulation.advance(self.inputs.take(), wall_clock_delta)

    def command(self, command: str):
        if self._running:
            self.simulation.apply_command(command)

    def resize(self, width: float, height: float):
        self.simulation.resize(Viewport(width, height))

    def on_stop(self, callback: Callable[[], None]):
        """Register a release hook (sensor unsubscription, timer invalidation)."""
        self._stop_hooks.append(callback)

    def _shutdown(self):
        if not self._running:
            return
        self._running = False
        hooks, self._stop_hooks = self._stop_hooks, []
        for hook in hooks:
            hook()


def start(config: Union[None, str, Dict] = None,
          viewport: Optional[Viewport] = None) -> SessionHandle:
    """
    Create a session.

    Args:
        config: YAML path, config dict (overlaid on defaults) or None
        viewport: Initial drawable area (config value if omitted)
    """
    if isinstance(config, str):
        simulation = RopeSimulation(config_path=config, viewport=viewport)
    else:
        simulation = RopeSimulation(config=config, viewport=viewport)
    return SessionHandle(simulation)


def stop(handle: SessionHandle):
    """Stop ticking and release input subscriptions. Safe to call twice."""
    handle._shutdown()
