import time
from dataclasses import dataclass
from pathlib import Path
from typing import ParamSpec

import numpy as np
import numpy.typing as npt

# Types
FloatArray = npt.NDArray[np.floating]  # Array type (floating)
A = npt.NDArray[np.float64]  # State vector type

P = ParamSpec("P")


@dataclass(frozen=True)
class C:
    """Constants of the normalized three-body problem"""

    G = 1.0  # Gravitational constant in orbit units
    TAU = 2.0 * np.pi


class Dir:
    """Paths relative to the project root."""

    # File where this class is defined
    _current_file = Path(__file__).resolve()

    # src/orbitviz/utils/... -> project root = three levels up
    root = _current_file.parents[3]

    # Directories
    data = root / "data"
    cache = root / "cache"
    baked = cache / "baked"
    preview = cache / "preview"

    # Files
    orbits = data / "orbits.toml"


class ProgressTracker:
    def __init__(
        self,
        n: int,
        start_time: float | None = None,
        print_step: int = 10000,
        name: str = "Progress",
    ) -> None:
        """Print progress of a process with multiple steps

        Parameters
        ----------
        n : int
            Total number of steps
        start_time : float
            Initial time of process, initialization time by default
        print_step : int
            Number of steps between successive progress reports
        name : str
            Name of progress bar
        """
        self.n = n
        self.start_time = start_time or time.time()
        self.print_step = max(1, print_step)
        self.name = name

    def print(self, i: int) -> None:
        """Print progress of a process with multiple steps

        Parameters
        ----------
        i : int
            Current step
        """
        if i == self.n:
            self.print_done()
        elif i % self.print_step == 0:
            progress = int(i / self.n * 50)
            bar = "[" + "#" * progress + "-" * (50 - progress) + "]"
            elapsed = self.elapsed
            if i > 0:
                est_total = elapsed / i * self.n
                est_remain = est_total - elapsed
                hrs = int(est_remain // 3600)
                mins = int((est_remain % 3600) // 60)
                secs = int(est_remain % 60)
                est_str = f" | ETA: {hrs:02d}:{mins:02d}:{secs:02d}"
            else:
                est_str = ""
            print(f"\r{self.name} {bar} {i / self.n * 100:.2f}%{est_str}", end="")

    def print_done(self) -> None:
        """Print process concluded"""
        print(
            f"\r{self.name} [" + "#" * 50 + f"] 100.00% | Time: {self.elapsed:.3f} s"
        )  # Show full bar at the end

    @property
    def elapsed(self) -> float:
        return time.time() - self.start_time


def rms_error(lhs: FloatArray, rhs: FloatArray) -> float:
    """Mean squared distance between two equally long (k, 2) point sequences"""
    lhs = np.asarray(lhs, dtype=np.float64)
    rhs = np.asarray(rhs, dtype=np.float64)
    if lhs.shape != rhs.shape:
        raise ValueError(f"Shape mismatch: {lhs.shape} != {rhs.shape}")
    if lhs.shape[0] == 0:
        return 0.0
    return float(np.sum((lhs - rhs) ** 2) / lhs.shape[0])
