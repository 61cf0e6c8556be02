from dataclasses import dataclass

import numpy as np

from orbitviz.simulation.model import KERNELS
from orbitviz.simulation.propagator import IntegratorName, Propagator
from orbitviz.utils import FloatArray, rms_error
from orbitviz.utils.data import OrbitConfig


class ClosureError(ValueError):
    """Forward and backward simulations of an orbit do not meet"""


@dataclass(frozen=True)
class SimulationConfig:
    frames: int = 140
    subframes: int = 100
    substeps: int = 30  # Integrator steps per recorded sample
    integrator: IntegratorName = "rk4"
    kernel: str = "numba"
    closure_tolerance: float = 1e-3  # Mean squared distance per body

    @property
    def steps(self) -> int:
        return self.frames * self.subframes


def simulate(config: SimulationConfig, orbit: OrbitConfig) -> FloatArray:
    """Integrate one period of an orbit

    Returns positions of shape (frames * subframes + 1, bodies, 2), the last
    sample lying one period after the first.
    """
    if config.kernel not in KERNELS:
        raise ValueError(f"Unknown force kernel: {config.kernel}")

    p = Propagator(config.integrator, KERNELS[config.kernel]())
    positions = p.propagate(
        time_step=orbit.period / config.steps,
        steps=config.steps,
        orbit=orbit,
        substeps=config.substeps,
    )

    drift = rms_error(positions[0], positions[-1])
    print(f"{orbit.name}: start-end simulation drift: {drift:.3e}")

    return positions


def simulate_closed(config: SimulationConfig, orbit: OrbitConfig) -> FloatArray:
    """Simulate an orbit forwards and backwards and blend them into a loop

    Returns positions of shape (frames * subframes, bodies, 2). Sample ``i``
    lies at ``i / (frames * subframes)`` periods and wraps around exactly.

    Raises
    ------
    ClosureError
        If the two runs disagree by more than ``config.closure_tolerance``.
    """
    forwards = simulate(config, orbit)
    backwards = simulate(config, orbit.reversed())[::-1]

    # Both runs end where the other starts, drop the duplicate sample
    forwards = forwards[:-1]
    backwards = backwards[:-1]

    for body in range(orbit.n):
        error = rms_error(forwards[:, body], backwards[:, body])
        print(f"{orbit.name}: closed simulation RMS error (body {body}): {error:.3e}")
        if error >= config.closure_tolerance:
            raise ClosureError(
                f"Orbit '{orbit.name}' does not close: body {body} error "
                f"{error:.3e} >= {config.closure_tolerance:.3e}"
            )

    frame_num = forwards.shape[0]
    blend = (np.arange(frame_num) / frame_num)[:, np.newaxis, np.newaxis]
    return forwards + (backwards - forwards) * blend
