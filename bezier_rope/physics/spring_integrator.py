"""
Spring Integrator Module
========================
Spring-damper model pulling each dynamic control point toward its target.

    a = -k * (x - target) - c * v

Integrated with semi-implicit (symplectic) Euler:

    v += a * dt
    x += v * dt

Velocity is updated first, which keeps the scheme stable at the
stiffness / time-step ranges the rope uses. Axes are independent and
P1 / P2 never interact.

Critical damping is c = 2 * sqrt(k). That is a tuning note only:
under- and over-damped settings are both allowed.
"""

import math
import numpy as np
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


# Stable frame-step range (s)
MIN_TIME_STEP = 1.0 / 120.0
MAX_TIME_STEP = 1.0 / 30.0


class SpringParameter(Enum):
    """Tunable spring parameters"""
    STIFFNESS = "stiffness"
    DAMPING = "damping"


@dataclass
class SpringParams:
    """Process-wide spring settings (no unit system, tuned by eye)"""
    stiffness: float = 18.0    # k
    damping: float = 7.0       # c

    @property
    def critical_damping(self) -> float:
        return 2.0 * math.sqrt(max(0.0, self.stiffness))

    @property
    def damping_ratio(self) -> float:
        """c / c_crit. < 1 under-damped, > 1 over-damped."""
        critical = self.critical_damping
        return self.damping / critical if critical > 0 else float("inf")

    def copy(self) -> "SpringParams":
        return SpringParams(self.stiffness, self.damping)


@dataclass(frozen=True)
class SpringLimits:
    """Saturation bounds and command step sizes for SpringParams"""
    min_stiffness: float = 0.5
    max_stiffness: float = 200.0
    stiffness_step: float = 2.0
    min_damping: float = 0.0
    max_damping: float = 60.0
    damping_step: float = 0.5

    def __post_init__(self):
        if self.min_stiffness > self.max_stiffness:
            raise ValueError("min_stiffness must not exceed max_stiffness")
        if self.min_damping > self.max_damping:
            raise ValueError("min_damping must not exceed max_damping")
        if self.min_damping < 0:
            raise ValueError(f"min_damping must be >= 0, got {self.min_damping}")

    def bounds(self, parameter: SpringParameter) -> Tuple[float, float]:
        if parameter == SpringParameter.STIFFNESS:
            return self.min_stiffness, self.max_stiffness
        return self.min_damping, self.max_damping

    def step(self, parameter: SpringParameter) -> float:
        if parameter == SpringParameter.STIFFNESS:
            return self.stiffness_step
        return self.damping_step

    def clamp(self, params: SpringParams) -> SpringParams:
        """Saturate both parameters at their bounds (in place)."""
        params.stiffness = min(self.max_stiffness, max(self.min_stiffness, params.stiffness))
        params.damping = min(self.max_damping, max(self.min_damping, params.damping))
        return params

    def adjust(self, params: SpringParams, parameter: SpringParameter, direction: int) -> float:
        """
        Move one parameter by one step (direction +1 / -1), saturating.

        Returns the new value. Never raises for out-of-range requests.
        """
        low, high = self.bounds(parameter)
        current = getattr(params, parameter.value)
        updated = min(high, max(low, current + direction * self.step(parameter)))
        setattr(params, parameter.value, updated)
        return updated


def clamp_time_step(dt: float,
                    min_dt: float = MIN_TIME_STEP,
                    max_dt: float = MAX_TIME_STEP) -> float:
    """
    Clamp a wall-clock delta into the stable range.

    NaN, infinities and negative deltas (clock hiccups) fall back to the
    minimum step.
    """
    if dt is None or not math.isfinite(dt) or dt < 0:
        return min_dt
    return min(max_dt, max(min_dt, dt))


def acceleration(position: np.ndarray,
                 velocity: np.ndarray,
                 target: np.ndarray,
                 params: SpringParams) -> np.ndarray:
    """Spring-damper acceleration (unit mass)."""
    displacement = position - target
    return -params.stiffness * displacement - params.damping * velocity


def integrate(point_mass, target: np.ndarray, params: SpringParams, dt: float):
    """
    Advance one point mass by dt, in place.

    dt must already be clamped by the caller; no clamping happens here.

    Args:
        point_mass: Object with `position` and `velocity` float arrays
        target: Point the spring pulls toward
        params: Stiffness / damping
        dt: Time step (s)
    """
    accel = acceleration(point_mass.position, point_mass.velocity, target, params)

    # Semi-implicit: velocity first, then position with the new velocity
    point_mass.velocity += accel * dt
    point_mass.position += point_mass.velocity * dt


def spring_energy(point_mass, target: np.ndarray, params: SpringParams) -> float:
    """Kinetic + spring potential energy (unit mass). Diagnostic only."""
    displacement = point_mass.position - target
    kinetic = 0.5 * float(np.dot(point_mass.velocity, point_mass.velocity))
    potential = 0.5 * params.stiffness * float(np.dot(displacement, displacement))
    return kinetic + potential
