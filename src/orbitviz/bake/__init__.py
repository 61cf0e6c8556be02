"""Baking of orbit initial conditions into truncated Fourier series

An orbit is simulated over one period, closed into a loop, transformed per
body with an FFT of ``x + iy`` and stripped of negligible components.
"""

import math
from pathlib import Path
from typing import Iterable

import numpy as np

from orbitviz.orbit import sample_body_at
from orbitviz.simulation import ClosureError, SimulationConfig, simulate_closed
from orbitviz.utils import Dir, FloatArray, ProgressTracker, rms_error
from orbitviz.utils.data import (
    BakedBody,
    BakedOrbit,
    FrequencyComponent,
    OrbitConfig,
    OrbitConfigList,
    OrbitTable,
)

CUTOFF = 1e-3  # Smallest amplitude kept


def fft_to_freq(idx: int, value: complex, frame_num: int) -> FrequencyComponent:
    """Turn FFT bin ``idx`` of ``frame_num`` into a frequency component"""
    half = frame_num // 2
    if idx == 0:
        freq = 0
    elif idx < half:
        freq = -idx
    else:
        freq = frame_num - idx

    return FrequencyComponent(
        freq=freq,
        amplitude=abs(value) / frame_num,
        phase=math.atan2(-value.imag, value.real),
    )


def analyze(positions: FloatArray) -> list[BakedBody]:
    """Fourier series of every body from positions of shape (frames, bodies, 2)

    Sample ``i`` is taken to lie at ``i / frames`` periods.
    """
    frame_num = positions.shape[0]
    signal = positions[:, :, 0] + 1j * positions[:, :, 1]  # Shape: (frames, bodies)
    spectrum = np.fft.fft(signal, axis=0)

    return [
        BakedBody(
            frequencies=tuple(
                fft_to_freq(idx, complex(value), frame_num)
                for idx, value in enumerate(spectrum[:, body])
            )
        )
        for body in range(positions.shape[1])
    ]


def inverse_analyze(frames: int, body: BakedBody) -> FloatArray:
    """Positions of a body at ``i / frames`` periods, shape (frames, 2)"""
    return sample_body_at(np.arange(frames) / frames, body)


def optimize(body: BakedBody, cutoff: float = CUTOFF) -> BakedBody:
    """Drop components whose amplitude does not exceed the cutoff"""
    kept = tuple(c for c in body.frequencies if c.amplitude > cutoff)
    print(f"optimized #freqs from {len(body.frequencies)} to {len(kept)}")
    return BakedBody(frequencies=kept)


def bake(
    orbit: OrbitConfig,
    config: SimulationConfig = SimulationConfig(),
    cutoff: float = CUTOFF,
) -> BakedOrbit:
    """Simulate, analyze and truncate one orbit"""
    energy = orbit.total_energy()
    if not math.isclose(energy, orbit.energy, rel_tol=1e-3):
        print(
            f"{orbit.name}: declared energy {orbit.energy:.6f} "
            f"differs from initial conditions {energy:.6f}"
        )

    simulated = simulate_closed(config, orbit)
    bodies = [optimize(body, cutoff) for body in analyze(simulated)]

    for i, body in enumerate(bodies):
        error = rms_error(inverse_analyze(simulated.shape[0], body), simulated[:, i])
        print(f"{orbit.name}: optimization error (body {i}): {error:.3e}")

    return BakedOrbit(
        name=orbit.name,
        period=orbit.period,
        energy=orbit.energy,
        bodies=tuple(bodies),
    )


def bake_all(
    orbits: Iterable[OrbitConfig],
    config: SimulationConfig = SimulationConfig(),
    cutoff: float = CUTOFF,
    strict: bool = False,
) -> OrbitTable:
    """Bake several orbits, skipping those that do not close unless strict"""
    orbits = list(orbits)
    progress = ProgressTracker(n=len(orbits), print_step=1, name="Baking")
    baked = []
    for i, orbit in enumerate(orbits):
        progress.print(i)
        print()
        try:
            baked.append(bake(orbit, config, cutoff))
        except ClosureError as e:
            if strict:
                raise
            print(f"Skipping {orbit.name}: {e}")
    progress.print(len(orbits))

    return OrbitTable(baked)


def baked_path(orbits_file: Path) -> Path:
    return Dir.baked / (orbits_file.stem + ".toml")


def load_or_bake(
    orbits_file: Path = Dir.orbits,
    config: SimulationConfig = SimulationConfig(),
    cutoff: float = CUTOFF,
    rebake: bool = False,
) -> OrbitTable:
    """Load the baked table of an orbits file, baking it first if needed"""
    file_baked = baked_path(orbits_file)

    if rebake or not file_baked.exists():
        print(f"Baking orbits from {orbits_file}...")
        table = bake_all(OrbitConfigList.load(orbits_file), config, cutoff)
        table.dump(file_baked)
        print(f"Wrote {len(table)} orbits to {file_baked}")
        return table

    return OrbitTable.load(file_baked)
