import cmath
import math

import numpy as np
import pytest

from orbitviz import bake as bake_module
from orbitviz.bake import (
    analyze,
    bake,
    bake_all,
    fft_to_freq,
    inverse_analyze,
    load_or_bake,
    optimize,
)
from orbitviz.orbit import sample_body, sample_body_at, sample_orbit
from orbitviz.simulation import ClosureError, SimulationConfig
from orbitviz.ui.state import ViewState, selected_orbit
from orbitviz.utils import Dir
from orbitviz.utils.data import (
    INVALID_ORBIT,
    BakedBody,
    FrequencyComponent,
    OrbitConfigList,
    OrbitTable,
)

CONFIG = SimulationConfig(frames=64, subframes=50, substeps=1)


@pytest.fixture(scope="module")
def figure_8():
    return next(o for o in OrbitConfigList.load(Dir.orbits) if o.name == "figure-8")


@pytest.fixture(scope="module")
def baked_figure_8(figure_8):
    return bake(figure_8, CONFIG)


@pytest.mark.parametrize(
    "idx,frame_num,freq",
    [
        (0, 8, 0),
        (1, 8, -1),
        (3, 8, -3),
        (4, 8, 4),
        (5, 8, 3),
        (7, 8, 1),
        (2, 5, 3),
    ],
)
def test_fft_to_freq_mapping(idx, frame_num, freq):
    assert fft_to_freq(idx, 1.0 + 0j, frame_num).freq == freq


def test_fft_to_freq_amplitude_and_phase():
    component = fft_to_freq(1, 8 * 0.5 * cmath.exp(-0.3j), 8)
    assert component.amplitude == pytest.approx(0.5)
    assert component.phase == pytest.approx(0.3)


def test_analyze_recovers_components():
    body = BakedBody(
        frequencies=(
            FrequencyComponent(freq=-1, amplitude=0.5, phase=0.0),
            FrequencyComponent(freq=2, amplitude=0.1, phase=0.4),
        )
    )
    frames = 64
    positions = inverse_analyze(frames, body)[:, np.newaxis, :]

    (analyzed,) = analyze(positions)
    assert len(analyzed.frequencies) == frames

    kept = optimize(analyzed, cutoff=1e-6)
    by_freq = {c.freq: c for c in kept.frequencies}
    assert sorted(by_freq) == [-1, 2]
    assert by_freq[-1].amplitude == pytest.approx(0.5)
    assert by_freq[2].amplitude == pytest.approx(0.1)
    assert by_freq[2].phase == pytest.approx(0.4)
    assert by_freq[-1].phase == pytest.approx(0.0, abs=1e-12)


def test_inverse_analyze_of_analyze_is_identity():
    rng = np.random.default_rng(3)
    positions = rng.normal(size=(32, 2, 2))

    bodies = analyze(positions)

    for i, body in enumerate(bodies):
        np.testing.assert_allclose(inverse_analyze(32, body), positions[:, i], atol=1e-12)


def test_optimize_drops_small_amplitudes():
    body = BakedBody(
        frequencies=(
            FrequencyComponent(freq=0, amplitude=0.0005, phase=0.0),
            FrequencyComponent(freq=1, amplitude=0.001, phase=0.0),
            FrequencyComponent(freq=2, amplitude=0.002, phase=0.0),
        )
    )
    assert [c.freq for c in optimize(body, cutoff=0.001).frequencies] == [2]


def test_bake_figure_8(figure_8, baked_figure_8):
    assert baked_figure_8.name == figure_8.name
    assert baked_figure_8.period == figure_8.period
    assert baked_figure_8.energy == figure_8.energy
    assert len(baked_figure_8.bodies) == 3

    for body in baked_figure_8.bodies:
        assert 0 < len(body.frequencies) < CONFIG.steps
        assert all(c.amplitude > 1e-3 for c in body.frequencies)

    # The truncated series still starts at the initial conditions
    np.testing.assert_allclose(sample_orbit(0.0, baked_figure_8), figure_8.positions, atol=2e-2)


def test_baked_figure_8_is_periodic(baked_figure_8):
    for body in baked_figure_8.bodies:
        for t in [0.0, 0.3, 0.71]:
            np.testing.assert_allclose(
                sample_body(t, body), sample_body(t + 1.0, body), atol=1e-9
            )


def test_baked_figure_8_bodies_share_the_curve(baked_figure_8):
    # Each body follows the next one a third of a period later
    first, second = baked_figure_8.bodies[:2]
    times = np.linspace(0.0, 1.0, 50)
    shifted = [
        sample_body_at(times + shift, second) for shift in (1 / 3, 2 / 3)
    ]
    errors = [np.max(np.linalg.norm(s - sample_body_at(times, first), axis=1)) for s in shifted]
    assert min(errors) < 5e-2


def test_bake_all_skips_orbits_that_do_not_close(figure_8):
    config = SimulationConfig(frames=20, subframes=50, substeps=1)
    broken = figure_8.model_copy(update={"name": "broken", "period": 5.0})

    table = bake_all([broken, figure_8], config)

    assert isinstance(table, OrbitTable)
    assert table.names == ["figure-8"]

    with pytest.raises(ClosureError):
        bake_all([broken], config, strict=True)


def test_load_or_bake_caches(tmp_path, monkeypatch, figure_8):
    orbits_file = tmp_path / "orbits.toml"
    OrbitConfigList([figure_8]).dump(orbits_file)
    monkeypatch.setattr(Dir, "baked", tmp_path / "baked")

    config = SimulationConfig(frames=20, subframes=50, substeps=1)
    table = load_or_bake(orbits_file, config)

    assert (tmp_path / "baked" / "orbits.toml").exists()

    calls = []
    monkeypatch.setattr(bake_module, "bake_all", lambda *args, **kwargs: calls.append(args))
    assert load_or_bake(orbits_file, config) == table
    assert calls == []


def test_energy_sanity(figure_8):
    assert math.isclose(figure_8.total_energy(), figure_8.energy, rel_tol=1e-3)


def test_load_or_bake_empty_orbits_file(tmp_path, monkeypatch):
    orbits_file = tmp_path / "empty.toml"
    orbits_file.write_text("")
    monkeypatch.setattr(Dir, "baked", tmp_path / "baked")

    table = load_or_bake(orbits_file)

    assert table == OrbitTable()
    assert OrbitTable.load(tmp_path / "baked" / "empty.toml") == OrbitTable()
    assert selected_orbit(ViewState(), table) is INVALID_ORBIT


def test_bake_all_bundled_orbits_at_default_config():
    orbits = OrbitConfigList.load(Dir.orbits)

    table = bake_all(orbits, strict=True)

    assert table.names == [orbit.name for orbit in orbits]
    for orbit in table:
        assert len(orbit.bodies) == 3
        assert all(body.frequencies for body in orbit.bodies)
