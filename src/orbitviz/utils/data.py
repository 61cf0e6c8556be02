import math
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable

import numpy as np
import tomli_w
from pydantic import BaseModel, ValidationError, field_validator, model_validator

from orbitviz.utils import A, C

Vector2 = tuple[float, float]


def _check_period(value: float) -> float:
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"Period must be a positive number, got {value}")
    return value


def _check_energy(value: float) -> float:
    # The display speed divides by energy squared
    if not math.isfinite(value) or value == 0:
        raise ValueError(f"Energy must be a non-zero number, got {value}")
    return value


# ---------------------------------------------------------------------------
# Baked orbits (truncated Fourier series)
# ---------------------------------------------------------------------------


class FrequencyComponent(BaseModel):
    """One rotating vector ``amplitude * exp(-i(2 pi freq t + phase))``"""

    freq: int
    amplitude: float
    phase: float

    model_config = dict(frozen=True)


class BakedBody(BaseModel):
    """Body whose position is the sum of its frequency components"""

    frequencies: tuple[FrequencyComponent, ...] = ()

    model_config = dict(frozen=True)


class BakedOrbit(BaseModel):
    """Closed periodic orbit described per body by a Fourier series"""

    name: str
    period: float
    energy: float
    bodies: tuple[BakedBody, ...] = ()

    model_config = dict(frozen=True)

    @field_validator("period")
    def validate_period(cls, v):  # pylint: disable=no-self-argument
        return _check_period(v)

    @field_validator("energy")
    def validate_energy(cls, v):  # pylint: disable=no-self-argument
        return _check_energy(v)

    @classmethod
    def load(cls, orbit: Dict[str, Any]) -> "BakedOrbit":
        """Load baked orbit."""
        try:
            return cls(**orbit)
        except ValidationError as e:
            print(e.errors())
            raise

    def dump(self) -> Dict[str, Any]:
        """Dump baked orbit"""
        return self.model_dump(mode="json")


# Stand-in for an empty table; bypasses validation and has nothing to draw
INVALID_ORBIT = BakedOrbit.model_construct(
    name="invalid orbit", period=0.0, energy=0.0, bodies=()
)


class OrbitTable(tuple[BakedOrbit, ...]):
    """Read-only table of baked orbits"""

    def __new__(cls, orbits: Iterable[BakedOrbit] = ()) -> "OrbitTable":
        return super().__new__(cls, tuple(orbits))

    @property
    def names(self) -> list[str]:
        return [orbit.name for orbit in self]

    @staticmethod
    def load(file_path: Path) -> "OrbitTable":
        """Load baked orbit table from file."""
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
        return OrbitTable(BakedOrbit.load(orbit) for orbit in data.get("orbit", []))

    def dump(self, file_path: Path) -> None:
        """Dump baked orbit table to file."""
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "wb") as f:
            tomli_w.dump({"orbit": [orbit.dump() for orbit in self]}, f)


# ---------------------------------------------------------------------------
# Initial conditions
# ---------------------------------------------------------------------------


class BodyState(BaseModel):
    """Mass, position and velocity of one body"""

    mass: float
    position: Vector2
    velocity: Vector2

    model_config = dict(frozen=True)


class OrbitConfig(BaseModel):
    """Initial conditions of a periodic orbit"""

    name: str
    period: float
    energy: float
    masses: list[float]
    positions: list[Vector2]
    velocities: list[Vector2]

    @field_validator("period")
    def validate_period(cls, v):  # pylint: disable=no-self-argument
        return _check_period(v)

    @field_validator("energy")
    def validate_energy(cls, v):  # pylint: disable=no-self-argument
        return _check_energy(v)

    @field_validator("masses")
    def validate_masses(cls, v):  # pylint: disable=no-self-argument
        if any(m <= 0 for m in v):
            raise ValueError("Masses must be positive")
        return v

    @model_validator(mode="after")
    def validate_lengths(self) -> "OrbitConfig":
        n = len(self.masses)
        if n < 2:
            raise ValueError("An orbit needs at least two bodies")
        if len(self.positions) != n or len(self.velocities) != n:
            raise ValueError(
                f"Got {n} masses, {len(self.positions)} positions "
                f"and {len(self.velocities)} velocities"
            )
        return self

    @classmethod
    def load(cls, orbit: Dict[str, Any]) -> "OrbitConfig":
        """Load orbit initial conditions."""
        try:
            return cls(**orbit)
        except ValidationError as e:
            print(e.errors())
            raise

    @property
    def n(self) -> int:
        return len(self.masses)

    @property
    def bodies(self) -> list[BodyState]:
        return [
            BodyState(mass=m, position=r, velocity=v)
            for m, r, v in zip(self.masses, self.positions, self.velocities)
        ]

    @property
    def mass(self) -> A:
        return np.array(self.masses, dtype=np.float64)

    @property
    def y_0(self) -> A:
        """State vector [x0, y0, x1, y1, ..., vx0, vy0, vx1, vy1, ...]"""
        return np.concatenate(
            [
                np.array(self.positions, dtype=np.float64).reshape(-1),
                np.array(self.velocities, dtype=np.float64).reshape(-1),
            ]
        )

    def reversed(self) -> "OrbitConfig":
        """Same orbit with all velocities flipped, i.e. running backwards"""
        return self.model_copy(
            update={"velocities": [(-vx, -vy) for vx, vy in self.velocities]}
        )

    def total_energy(self) -> float:
        """Kinetic plus potential energy of the initial conditions"""
        r = np.array(self.positions, dtype=np.float64)
        v = np.array(self.velocities, dtype=np.float64)
        m = self.mass

        kinetic = 0.5 * np.sum(m * np.sum(v**2, axis=1))
        potential = 0.0
        for i in range(self.n):
            for j in range(i + 1, self.n):
                potential -= C.G * m[i] * m[j] / np.linalg.norm(r[i] - r[j])
        return float(kinetic + potential)


class OrbitConfigList(list[OrbitConfig]):
    """Class to list orbit initial conditions"""

    @staticmethod
    def load(file_path: Path) -> "OrbitConfigList":
        """Load orbit initial conditions from file."""
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
        return OrbitConfigList(
            [OrbitConfig.load(orbit) for orbit in data.get("orbit", [])]
        )

    def dump(self, file_path: Path) -> None:
        """Dump orbit initial conditions to file."""
        with open(file_path, "wb") as f:
            tomli_w.dump(
                {"orbit": [orbit.model_dump(mode="json") for orbit in self]}, f
            )
