"""Integrator module"""

from typing import Callable, Concatenate

import numpy as np

from orbitviz.utils import A, P


class Integrator:
    @staticmethod
    def euler(
        state: A,
        time_step: float,
        steps: int,
        func: Callable[Concatenate[A, P], A],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> A:
        """Euler integrator

        Parameters
        ----------
        state : A
            Initial state vector
        time_step : float
            Time step
        steps : int
            Number of steps
        func : Callable[Concatenate[A, P], A]
            Function to integrate

        Returns
        -------
        A
            States at every step, shape (steps + 1, state.size)
        """
        y = np.zeros((steps + 1, state.size))
        y[0, :] = state
        for i in range(steps):
            y[i + 1, :] = y[i, :] + time_step * func(y[i, :], *args, **kwargs)

        return y

    @staticmethod
    def symplectic_euler(
        state: A,
        time_step: float,
        steps: int,
        func: Callable[Concatenate[A, P], A],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> A:
        """Semi-implicit Euler integrator

        Velocities are kicked with the current accelerations first, positions
        then drift with the updated velocities. The state must be laid out as
        [positions, velocities] with equal halves.

        Parameters
        ----------
        state : A
            Initial state vector
        time_step : float
            Time step
        steps : int
            Number of steps
        func : Callable[Concatenate[A, P], A]
            Function returning [velocities, accelerations]

        Returns
        -------
        A
            States at every step, shape (steps + 1, state.size)
        """
        half = state.size // 2
        y = np.zeros((steps + 1, state.size))
        y[0, :] = state
        for i in range(steps):
            acceleration = func(y[i, :], *args, **kwargs)[half:]
            y[i + 1, half:] = y[i, half:] + time_step * acceleration
            y[i + 1, :half] = y[i, :half] + time_step * y[i + 1, half:]

        return y

    @staticmethod
    def rk4(
        state: A,
        time_step: float,
        steps: int,
        func: Callable[Concatenate[A, P], A],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> A:
        """Runge-Kutta 4 integrator

        Parameters
        ----------
        state : A
            Initial state vector
        time_step : float
            Time step
        steps : int
            Number of steps
        func : Callable[Concatenate[A, P], A]
            Function to integrate

        Returns
        -------
        A
            States at every step, shape (steps + 1, state.size)
        """
        y = np.zeros((steps + 1, state.size))
        y[0, :] = state
        for i in range(steps):
            k_1 = func(y[i, :], *args, **kwargs)
            k_2 = func(y[i, :] + k_1 * time_step / 2, *args, **kwargs)
            k_3 = func(y[i, :] + k_2 * time_step / 2, *args, **kwargs)
            k_4 = func(y[i, :] + k_3 * time_step, *args, **kwargs)
            y[i + 1, :] = y[i, :] + time_step / 6 * (k_1 + 2 * k_2 + 2 * k_3 + k_4)

        return y
