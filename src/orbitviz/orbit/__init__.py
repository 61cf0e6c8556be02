"""Sampling of baked orbits

A body's position at time ``t`` (in periods) is the sum of its frequency
components, each contributing ``amplitude * (cos(theta), sin(theta))`` with
``theta = -(2 pi t freq + phase)``.
"""

import math
from typing import Sequence

import numpy as np

from orbitviz.utils import C, FloatArray
from orbitviz.utils.data import BakedBody, BakedOrbit

TRAIL_SAMPLES = 40  # Segments per trail, N + 1 points
TRAIL_DURATION = 0.2  # [periods at natural speed]
AFTERIMAGE_LAYERS = 8
AFTERIMAGE_DURATION = 0.02  # [periods at natural speed]


def sample_body(t: float, body: BakedBody) -> tuple[float, float]:
    """Position of a body at time t"""
    x = 0.0
    y = 0.0
    for c in body.frequencies:
        theta = -(C.TAU * t * c.freq + c.phase)
        x += math.cos(theta) * c.amplitude
        y += math.sin(theta) * c.amplitude
    return x, y


def sample_orbit(t: float, orbit: BakedOrbit) -> list[tuple[float, float]]:
    """Position of every body of an orbit at time t"""
    return [sample_body(t, body) for body in orbit.bodies]


def component_arrays(body: BakedBody) -> tuple[FloatArray, FloatArray, FloatArray]:
    """Frequencies, amplitudes and phases of a body as arrays"""
    freq = np.array([c.freq for c in body.frequencies], dtype=np.float64)
    amplitude = np.array([c.amplitude for c in body.frequencies], dtype=np.float64)
    phase = np.array([c.phase for c in body.frequencies], dtype=np.float64)
    return freq, amplitude, phase


def sample_body_at(times: FloatArray | Sequence[float], body: BakedBody) -> FloatArray:
    """Vectorized ``sample_body``, returns positions of shape (len(times), 2)"""
    times = np.atleast_1d(np.asarray(times, dtype=np.float64))
    freq, amplitude, phase = component_arrays(body)

    theta = -(C.TAU * np.outer(times, freq) + phase)  # Shape: (k, components)
    return np.stack([np.cos(theta) @ amplitude, np.sin(theta) @ amplitude], axis=-1)


def speed(orbit: BakedOrbit) -> float:
    """Display speed [periods/s], normalizing orbits to a comparable pace"""
    if orbit.period <= 0 or orbit.energy == 0:
        raise ValueError(
            f"Orbit '{orbit.name}' has a degenerate period ({orbit.period}) "
            f"or energy ({orbit.energy})"
        )
    return 10.0 / orbit.period / orbit.energy**2


def display_time(orbit: BakedOrbit, wall_clock: float) -> float:
    """Map wall clock seconds to orbit time [periods]"""
    return speed(orbit) * wall_clock


def sample_times(
    time: float, orbit_speed: float, duration: float, samples: int, points: int
) -> FloatArray:
    """Times ``time - k * substep`` for ``k = 0..points - 1``, newest first

    ``substep = duration * orbit_speed / samples``
    """
    if samples <= 0:
        raise ValueError(f"Number of samples must be positive, got {samples}")
    substep = duration * orbit_speed / samples
    return time - np.arange(points) * substep


def trail_points(
    orbit: BakedOrbit,
    time: float,
    orbit_speed: float,
    samples: int = TRAIL_SAMPLES,
    duration: float = TRAIL_DURATION,
) -> FloatArray:
    """Trail polyline of every body, shape (bodies, samples + 1, 2)

    The newest point comes first, the polyline has ``samples`` segments.
    """
    times = sample_times(time, orbit_speed, duration, samples, samples + 1)
    if not orbit.bodies:
        return np.empty((0, samples + 1, 2))
    return np.stack([sample_body_at(times, body) for body in orbit.bodies])


def afterimage_points(
    orbit: BakedOrbit,
    time: float,
    orbit_speed: float,
    layers: int = AFTERIMAGE_LAYERS,
    duration: float = AFTERIMAGE_DURATION,
) -> FloatArray:
    """Afterimage positions of every body, shape (bodies, layers, 2)

    Layer 0 is the current position.
    """
    times = sample_times(time, orbit_speed, duration, layers, layers)
    if not orbit.bodies:
        return np.empty((0, layers, 2))
    return np.stack([sample_body_at(times, body) for body in orbit.bodies])


def afterimage_alphas(layers: int = AFTERIMAGE_LAYERS) -> list[float]:
    """Opacity of each afterimage layer; fully overlapping layers add up to 1"""
    if layers <= 0:
        raise ValueError(f"Number of layers must be positive, got {layers}")
    return [1.0 / layers] * layers
