from typing import Literal

from orbitviz.simulation.integrator import Integrator
from orbitviz.simulation.model import ForceKernel
from orbitviz.utils import FloatArray
from orbitviz.utils.data import OrbitConfig

IntegratorName = Literal["euler", "symplectic_euler", "rk4"]


class Propagator:
    def __init__(self, integrator: IntegratorName, force_model: ForceKernel) -> None:
        if not hasattr(Integrator, integrator):
            raise ValueError(f"Unknown integrator: {integrator}")
        self.integrator = getattr(Integrator, integrator)
        self.force_model = force_model

    def propagate(
        self, time_step: float, steps: int, orbit: OrbitConfig, substeps: int = 1
    ) -> FloatArray:
        """Integrate an orbit, returning positions of shape (steps + 1, n, 2)

        Every recorded step is split into ``substeps`` integrator steps of
        ``time_step / substeps``.
        """
        if substeps <= 0:
            raise ValueError(f"Number of substeps must be positive, got {substeps}")

        y = self.integrator(
            orbit.y_0,
            time_step / substeps,
            steps * substeps,
            self.force_model,
            n=orbit.n,
            mass=orbit.mass,
        )[::substeps]  # y.shape = (steps + 1, 4*bodies)

        return y[:, : 2 * orbit.n].reshape(steps + 1, orbit.n, 2)
