"""
Bezier Rope - Main Simulation
=============================
Frame loop for the interactive Bezier rope.

Each display refresh:
1. Clamp the wall-clock delta into the stable range
2. Map the newest input sample to two spring targets (or hold the last ones)
3. Integrate P1 and P2 toward their targets
4. Leave the control polygon ready for sampling / rendering

Keyboard-style commands tune stiffness and damping or reset the rope.
"""

import argparse
import copy
import math
import numpy as np
import time
import yaml
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Tuple

# Physics
from .physics import (
    Viewport, RopeLayout, ControlPolygon,
    SpringParams, SpringLimits, SpringParameter,
    MIN_TIME_STEP, MAX_TIME_STEP,
    clamp_time_step, integrate,
    sample_curve, sample_tangents
)

# Input
from .interaction import InputConfig, TargetSource, create_target_source

# Render snapshot
from .visualization.engine_interface import RenderState, create_renderer


DEFAULT_CONFIG_PATH = Path(__file__).parent / "config" / "rope_params.yaml"


class LoopState(Enum):
    """Frame loop states"""
    RUNNING = "running"        # Normal per-frame advance
    RESETTING = "resetting"    # Re-laid out by reset(), back to RUNNING next frame


class RopeCommand(Enum):
    """Discrete tuning commands (key presses)"""
    INCREASE_STIFFNESS = "increase_stiffness"
    DECREASE_STIFFNESS = "decrease_stiffness"
    INCREASE_DAMPING = "increase_damping"
    DECREASE_DAMPING = "decrease_damping"
    RESET = "reset"


def merge_config(base: Dict, override: Optional[Dict]) -> Dict:
    """Recursively overlay `override` on a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None, overrides: Optional[Dict] = None) -> Dict:
    """
    Default configuration, overlaid with a YAML file and then `overrides`.

    A missing file is an error when given explicitly; the bundled
    default path is optional.
    """
    config = RopeSimulation._default_config()

    if config_path:
        with open(config_path, 'r') as f:
            config = merge_config(config, yaml.safe_load(f))

    return merge_config(config, overrides)


class RopeSimulation:
    """
    Main frame loop for the Bezier rope.

    Owns the single mutable session state:
    - ControlPolygon (anchors + two point masses)
    - SpringParams
    - Last known targets
    - Frame timing

    Usage:
        sim = RopeSimulation(viewport=Viewport(800, 600))
        telemetry = sim.advance((400, 300), 1 / 60)
        state = sim.snapshot()
    """

    def __init__(self,
                 config_path: Optional[str] = None,
                 config: Optional[Dict] = None,
                 viewport: Optional[Viewport] = None,
                 source: Optional[TargetSource] = None):
        # Load configuration
        self.config = load_config(config_path, config)

        view_cfg = self.config['viewport']
        self.viewport = viewport or Viewport(view_cfg['width'], view_cfg['height'])
        self.layout = RopeLayout.from_dict(self.config['layout'])

        spring_cfg = self.config['spring']
        self.default_params = SpringParams(
            stiffness=spring_cfg['stiffness'],
            damping=spring_cfg['damping']
        )
        self.limits = SpringLimits(
            min_stiffness=spring_cfg['min_stiffness'],
            max_stiffness=spring_cfg['max_stiffness'],
            stiffness_step=spring_cfg['stiffness_step'],
            min_damping=spring_cfg['min_damping'],
            max_damping=spring_cfg['max_damping'],
            damping_step=spring_cfg['damping_step']
        )
        self.params = self.limits.clamp(self.default_params.copy())

        step_cfg = self.config['time_step']
        self.min_dt = step_cfg['min']
        self.max_dt = step_cfg['max']

        sampling_cfg = self.config['sampling']
        self.segment_count = sampling_cfg['segments']
        self.tangent_count = sampling_cfg['tangents']
        self.tangent_length_fraction = sampling_cfg['tangent_length_fraction']

        # Input
        input_cfg = self.config['input']
        self.input_config = InputConfig(
            kind=input_cfg['kind'],
            pointer_spread_fraction=input_cfg['pointer_spread_fraction'],
            tilt_scale_fraction=input_cfg['tilt_scale_fraction'],
            tilt_spread=input_cfg['tilt_spread'],
            tilt_shared_offset=input_cfg['tilt_shared_offset']
        )
        self.source = source or create_target_source(
            self.input_config.kind, self.viewport, self.input_config
        )

        # Rope state
        self.polygon = ControlPolygon.from_layout(self.viewport, self.layout)
        self.targets = self._default_targets()
        self.state = LoopState.RUNNING

        # Timing
        self.time = 0.0
        self.frame_count = 0
        self.last_dt = 0.0
        self._fps = 0.0
        self._fps_smoothing = self.config['session']['fps_smoothing']

    @staticmethod
    def _default_config() -> Dict:
        """Default configuration if no file provided"""
        return {
            'viewport': {
                'width': 800.0,
                'height': 600.0
            },
            'layout': {
                'anchor_start': [0.1, 0.5],
                'control_1': [0.3, 0.4],
                'control_2': [0.7, 0.6],
                'anchor_end': [0.9, 0.5]
            },
            'spring': {
                'stiffness': 18.0,
                'damping': 7.0,
                'min_stiffness': 0.5,
                'max_stiffness': 200.0,
                'stiffness_step': 2.0,
                'min_damping': 0.0,
                'max_damping': 60.0,
                'damping_step': 0.5
            },
            'time_step': {
                'min': MIN_TIME_STEP,
                'max': MAX_TIME_STEP
            },
            'sampling': {
                'segments': 100,
                'tangents': 10,
                'tangent_length_fraction': 0.04
            },
            'input': {
                'kind': 'pointer',
                'pointer_spread_fraction': 0.15,
                'tilt_scale_fraction': 0.25,
                'tilt_spread': 0.6,
                'tilt_shared_offset': 0.6
            },
            'session': {
                'rate': 60.0,
                'duration': 10.0,
                'fps_smoothing': 0.1
            }
        }

    def _default_targets(self) -> Tuple[np.ndarray, np.ndarray]:
        """Before any input arrives the springs hold the default pose."""
        return (
            self.viewport.at(self.layout.control_1),
            self.viewport.at(self.layout.control_2)
        )

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def advance(self, raw_input: Optional[Sequence[float]], wall_clock_delta: float) -> Dict:
        """
        Run one frame of physics.

        Args:
            raw_input: Newest pointer (x, y) or tilt (pitch, roll) sample,
                or None when nothing new arrived (last targets are held)
            wall_clock_delta: Real seconds since the previous frame

        Returns telemetry for the HUD / status output.
        """
        if self.state == LoopState.RESETTING:
            self.state = LoopState.RUNNING

        # 1. Stable time step
        dt = clamp_time_step(wall_clock_delta, self.min_dt, self.max_dt)
        self._track_frame_rate(wall_clock_delta)

        # 2. Targets (snapshot of the newest sample)
        if raw_input is not None:
            self.targets = self.source.targets(raw_input)
        target1, target2 = self.targets

        # 3. Integrate both dynamic points independently
        integrate(self.polygon.m1, target1, self.params, dt)
        integrate(self.polygon.m2, target2, self.params, dt)

        # 4. Bookkeeping
        self.time += dt
        self.last_dt = dt
        self.frame_count += 1

        return self.telemetry(wall_clock_delta)

    def _track_frame_rate(self, wall_clock_delta: float):
        # Measured on the raw delta, not the clamped physics step
        if wall_clock_delta is None or not math.isfinite(wall_clock_delta) or wall_clock_delta <= 0:
            return
        instant = 1.0 / wall_clock_delta
        if self._fps == 0.0:
            self._fps = instant
        else:
            self._fps += self._fps_smoothing * (instant - self._fps)

    @property
    def fps(self) -> float:
        return self._fps

    def telemetry(self, wall_clock_delta: Optional[float] = None) -> Dict:
        """Read-only view of the current state."""
        target1, target2 = self.targets
        return {
            'time': self.time,
            'frame': self.frame_count,
            'dt': self.last_dt,
            'frame_delta': wall_clock_delta,
            'fps': self._fps,
            'state': self.state.value,
            'stiffness': self.params.stiffness,
            'damping': self.params.damping,
            'damping_ratio': self.params.damping_ratio,
            'targets': (target1.copy(), target2.copy()),
            'p1': self.polygon.p1.copy(),
            'p2': self.polygon.p2.copy(),
            'v1': self.polygon.v1.copy(),
            'v2': self.polygon.v2.copy(),
            'error1': float(np.linalg.norm(self.polygon.p1 - target1)),
            'error2': float(np.linalg.norm(self.polygon.p2 - target2)),
        }

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def increase_stiffness(self) -> float:
        return self.limits.adjust(self.params, SpringParameter.STIFFNESS, +1)

    def decrease_stiffness(self) -> float:
        return self.limits.adjust(self.params, SpringParameter.STIFFNESS, -1)

    def increase_damping(self) -> float:
        return self.limits.adjust(self.params, SpringParameter.DAMPING, +1)

    def decrease_damping(self) -> float:
        return self.limits.adjust(self.params, SpringParameter.DAMPING, -1)

    def reset(self):
        """
        Restore default spring params and the default pose (zero velocity).

        Synchronous: the rope is re-laid out before this returns and the
        next advance() runs normally.
        """
        self.params = self.limits.clamp(self.default_params.copy())
        self.polygon.reset(self.viewport, self.layout)
        self.targets = self._default_targets()
        self.state = LoopState.RESETTING

    def apply_command(self, command) -> None:
        """Dispatch a RopeCommand (or its string value)."""
        try:
            command = RopeCommand(command)
        except ValueError:
            available = ', '.join(c.value for c in RopeCommand)
            raise ValueError(f"Unknown command '{command}'. Available: {available}") from None

        getattr(self, command.value)()

    def resize(self, viewport: Viewport, relayout: bool = False):
        """
        Keep anchors pinned to the new viewport; P1/P2 keep their physics state.

        With `relayout` (first attach to a real window) the whole default
        pose and the held targets are laid out for the new viewport.
        Spring params are left alone.
        """
        self.viewport = viewport
        self.source.resize(viewport)
        if relayout:
            self.polygon.reset(viewport, self.layout)
            self.targets = self._default_targets()
        else:
            self.polygon.reanchor(viewport, self.layout)

    # ------------------------------------------------------------------
    # Rendering boundary
    # ------------------------------------------------------------------

    @property
    def tangent_length(self) -> float:
        return self.viewport.short_side * self.tangent_length_fraction

    def snapshot(self,
                 segment_count: Optional[int] = None,
                 tangent_count: Optional[int] = None) -> RenderState:
        """Copy of the current frame for a renderer."""
        polygon = self.polygon.copy()
        if segment_count is None:
            segment_count = self.segment_count
        if tangent_count is None:
            tangent_count = self.tangent_count
        curve = sample_curve(polygon, segment_count)
        tangents = sample_tangents(polygon, tangent_count, self.tangent_length)

        return RenderState(
            width=self.viewport.width,
            height=self.viewport.height,
            control_points=[p.copy() for p in polygon.points()],
            curve_points=list(curve),
            tangent_segments=[sample.segment() for sample in tangents],
            targets=(self.targets[0].copy(), self.targets[1].copy()),
            hud_text={
                'k': f"{self.params.stiffness:.1f}",
                'c': f"{self.params.damping:.1f}",
                'fps': f"{self._fps:.0f}",
            }
        )

    # ------------------------------------------------------------------
    # Headless driver
    # ------------------------------------------------------------------

    def run(self,
            duration: Optional[float] = None,
            input_feed: Optional[Callable[[float], Optional[Sequence[float]]]] = None,
            callback=None,
            verbose: bool = True):
        """
        Run at a fixed frame rate without a display.

        Args:
            duration: Simulated seconds (default from config)
            input_feed: f(time) -> sample or None, polled once per frame
            callback: Optional function called each frame with telemetry
        """
        if duration is None:
            duration = self.config['session']['duration']
        frame_dt = 1.0 / self.config['session']['rate']

        start_time = time.time()
        if verbose:
            print(f"Starting Bezier rope ({self.source.name} input) - Duration: {duration}s")
            print("=" * 50)

        telemetry = None
        while self.time < duration:
            sample = input_feed(self.time) if input_feed else None
            telemetry = self.advance(sample, frame_dt)

            if callback:
                callback(telemetry)

            # Status line once per simulated second
            if verbose and int(self.time) != int(self.time - frame_dt):
                self._print_status(telemetry)

        if verbose:
            real_time = time.time() - start_time
            print("=" * 50)
            print(f"Run complete. Sim time: {self.time:.2f}s, Real time: {real_time:.2f}s")

        return telemetry

    def _print_status(self, telemetry: Dict):
        """Print compact status line"""
        print(f"T={telemetry['time']:6.1f}s | "
              f"k={telemetry['stiffness']:6.1f} | "
              f"c={telemetry['damping']:5.1f} | "
              f"fps={telemetry['fps']:5.1f} | "
              f"|P1-T1|={telemetry['error1']:8.3f} | "
              f"|P2-T2|={telemetry['error2']:8.3f}")


def sway_feed(kind: str, viewport: Viewport) -> Callable[[float], Sequence[float]]:
    """Synthetic input for headless runs: a slow figure-eight."""
    if kind in ('tilt', 'motion'):
        return lambda t: (0.5 * math.sin(1.3 * t), 0.8 * math.sin(0.7 * t))

    center = viewport.center
    radius = viewport.short_side * 0.3

    def pointer(t: float) -> Sequence[float]:
        return (center[0] + radius * math.sin(0.7 * t),
                center[1] + 0.5 * radius * math.sin(1.4 * t))
    return pointer


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive spring-driven Bezier rope")
    parser.add_argument('--engine', default=None,
                        help="Renderer: moderngl or headless (default: best available)")
    parser.add_argument('--input', dest='input_kind', default=None,
                        help="Input source: pointer or tilt")
    parser.add_argument('--config', default=None, help="YAML config file")
    parser.add_argument('--duration', type=float, default=None,
                        help="Headless run length in seconds")
    parser.add_argument('--stiffness', type=float, default=None)
    parser.add_argument('--damping', type=float, default=None)
    return parser


def main(argv: Optional[Sequence[str]] = None):
    from .visualization.engine_interface import HeadlessRenderer, get_recommended_engine

    args = build_arg_parser().parse_args(argv)

    config_path = args.config
    if config_path is None and DEFAULT_CONFIG_PATH.exists():
        config_path = str(DEFAULT_CONFIG_PATH)

    overrides: Dict = {}
    if args.input_kind:
        overrides['input'] = {'kind': args.input_kind}
    spring = {}
    if args.stiffness is not None:
        spring['stiffness'] = args.stiffness
    if args.damping is not None:
        spring['damping'] = args.damping
    if spring:
        overrides['spring'] = spring

    sim = RopeSimulation(config_path, overrides)

    renderer = create_renderer(args.engine or get_recommended_engine())
    renderer.set_simulation(sim)

    if isinstance(renderer, HeadlessRenderer):
        def on_frame(telemetry):
            renderer.update_state(sim.snapshot())
            renderer.render_frame(telemetry["dt"])

        renderer.run()
        sim.run(
            duration=args.duration,
            input_feed=sway_feed(sim.source.name, sim.viewport),
            callback=on_frame
        )
        renderer.shutdown()
    else:
        renderer.run()


if __name__ == "__main__":
    main()
