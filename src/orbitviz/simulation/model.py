from typing import Any

import numba as nb
import numpy as np

from orbitviz.utils import FloatArray


class ForceKernel:
    def __call__(self, state: FloatArray, *args: Any, **kwargs: Any) -> FloatArray:
        raise NotImplementedError


class NumpyPointMass(ForceKernel):
    def __call__(
        self, state: FloatArray, n: int, mass: FloatArray, out: FloatArray | None = None
    ) -> FloatArray:
        if out is None:
            out = np.empty_like(state)
        point_mass_numpy(state, n, mass, out)
        return out


class NumbaPointMass(ForceKernel):
    def __call__(
        self, state: FloatArray, n: int, mass: FloatArray, out: FloatArray | None = None
    ) -> FloatArray:
        if out is None:
            out = np.empty_like(state)
        point_mass_numba(state, n, mass, out)
        return out


KERNELS: dict[str, type[ForceKernel]] = {
    "numpy": NumpyPointMass,
    "numba": NumbaPointMass,
}


def point_mass_numpy(
    state: FloatArray, n: int, mass: FloatArray, out: FloatArray
) -> None:
    """
    Vectorized NumPy point-mass gravity kernel in the plane (G = 1).

    Parameters
    ----------
    state : (4*n,) array
        Positions and velocities: [x0,y0,x1,y1,...,vx0,vy0,vx1,vy1,...]
    n : int
        Number of bodies
    mass : (n,) array
        Masses of bodies
    out : (4*n,) array
        Output buffer for [v, a] (same layout as state)
    """
    # r' = v
    out[: 2 * n] = state[2 * n :]

    # Positions reshaped
    r = state[: 2 * n].reshape(n, 2)

    # Pairwise differences (r_i - r_j)
    r_ij = r[:, np.newaxis, :] - r[np.newaxis, :, :]  # Shape: (n, n, 2)

    # Distances cubed, no self-interaction
    dist_sq = np.sum(r_ij**2, axis=2)
    np.fill_diagonal(dist_sq, np.inf)
    inv_r3 = 1.0 / (dist_sq * np.sqrt(dist_sq))  # Shape: (n, n)

    # a_i = -sum_j m_j (r_i - r_j) / |r_ij|^3
    weights = mass[np.newaxis, :] * inv_r3  # Shape: (n, n)
    out[2 * n :] = -np.sum(r_ij * weights[:, :, np.newaxis], axis=1).reshape(2 * n)


@nb.njit(fastmath=True, cache=True)
def point_mass_numba(
    state: FloatArray, n: int, mass: FloatArray, out: FloatArray
) -> None:
    # r' = v
    for k in range(2 * n):
        out[k] = state[k + 2 * n]

    # zero accelerations
    for k in range(2 * n):
        out[k + 2 * n] = 0.0

    # symmetric gravity
    for i in range(n):
        xi = state[2 * i]
        yi = state[2 * i + 1]

        mi = mass[i]

        for j in range(i + 1, n):
            dx = xi - state[2 * j]
            dy = yi - state[2 * j + 1]

            r2 = dx * dx + dy * dy
            inv_r = 1.0 / np.sqrt(r2)
            inv_r3 = inv_r * inv_r * inv_r

            fx = dx * inv_r3
            fy = dy * inv_r3

            mj = mass[j]

            out[2 * i + 2 * n] -= mj * fx
            out[2 * i + 1 + 2 * n] -= mj * fy

            out[2 * j + 2 * n] += mi * fx
            out[2 * j + 1 + 2 * n] += mi * fy
