import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np  # noqa: E402
import pygame  # noqa: E402
import pytest  # noqa: E402
from PIL import Image  # noqa: E402

from orbitviz.bake.preview import render_preview  # noqa: E402
from orbitviz.orbit import speed, trail_points  # noqa: E402
from orbitviz.ui.constants import VisC  # noqa: E402
from orbitviz.ui.elements import OrbitSelector  # noqa: E402
from orbitviz.ui.render import (  # noqa: E402
    layer_color,
    render_scene,
    render_view,
    to_screen,
)
from orbitviz.ui.state import ViewState, select, tick  # noqa: E402
from orbitviz.utils.data import (  # noqa: E402
    BakedBody,
    BakedOrbit,
    FrequencyComponent,
    OrbitTable,
)

SIZE = 400


@pytest.fixture(scope="module")
def resting_orbit() -> BakedOrbit:
    """One red body sitting still at (0.5, 0)"""
    return BakedOrbit(
        name="resting",
        period=10.0,
        energy=-1.0,
        bodies=(
            BakedBody(frequencies=(FrequencyComponent(freq=0, amplitude=0.5, phase=0.0),)),
        ),
    )


@pytest.fixture(scope="module")
def circle_orbit() -> BakedOrbit:
    """One body on the unit circle, one period per second of display"""
    return BakedOrbit(
        name="circle",
        period=10.0,
        energy=-1.0,
        bodies=(
            BakedBody(frequencies=(FrequencyComponent(freq=-1, amplitude=1.0, phase=0.0),)),
        ),
    )


@pytest.fixture
def surface() -> pygame.Surface:
    return pygame.Surface((SIZE, SIZE))


def test_to_screen():
    points = np.array([[0.0, 0.0], [1.0, -0.5]])
    np.testing.assert_array_equal(to_screen(points, SIZE, SIZE), [[200, 200], [300, 150]])
    np.testing.assert_array_equal(
        to_screen(points, 800, 800, scale=200.0), [[400, 400], [600, 300]]
    )


def test_layer_color():
    assert layer_color((255, 0, 0), 1 / 8) == (32, 0, 0)
    assert layer_color((255, 255, 255), 1.0) == (255, 255, 255)


def test_stacked_layers_reach_full_color(surface, resting_orbit):
    render_scene(surface, resting_orbit, 0.0, speed(resting_orbit))

    r, g, b, *_ = surface.get_at((250, 200))
    assert r >= 248
    # Far away from everything
    assert tuple(surface.get_at((5, 5)))[:3] == VisC.black


def test_single_layer_is_faint(surface, circle_orbit):
    # Fast enough that no two layers overlap
    render_scene(surface, circle_orbit, 0.0, 50.0)

    r, *_ = surface.get_at((300, 200))
    assert 0 < r < 255


def test_trail_is_drawn(surface, circle_orbit):
    orbit_speed = speed(circle_orbit)
    render_scene(surface, circle_orbit, 0.0, orbit_speed)

    # A vertex halfway along the trail, well clear of the body
    x, y = to_screen(trail_points(circle_orbit, 0.0, orbit_speed), SIZE, SIZE)[0, 20]
    color = surface.get_at((int(x), int(y)))
    assert color.r > 0 and color.r == color.g == color.b


def test_render_view_of_empty_table(surface):
    surface.fill(VisC.white)
    render_view(surface, OrbitTable(), tick(ViewState(), 1000))

    assert pygame.transform.average_color(surface)[:3] == (0, 0, 0)


def test_render_view_follows_selection(surface, resting_orbit, circle_orbit):
    table = OrbitTable([circle_orbit, resting_orbit])
    state = select(ViewState(), 1)

    render_view(surface, table, state)

    assert surface.get_at((250, 200)).r >= 248


def test_orbit_selector_click():
    selector = OrbitSelector(labels=["figure-8", "butterfly I"])
    button = selector.buttons[1]

    click = pygame.event.Event(
        pygame.MOUSEBUTTONDOWN, button=1, pos=button.rect.center
    )
    elsewhere = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(399, 399))
    right_click = pygame.event.Event(
        pygame.MOUSEBUTTONDOWN, button=3, pos=button.rect.center
    )

    assert selector.handle_event(click) == 1
    assert selector.handle_event(elsewhere) is None
    assert selector.handle_event(right_click) is None


def test_orbit_selector_layout():
    selector = OrbitSelector(labels=["a", "b", "c"], x=10, y=40)
    tops = [button.rect.y for button in selector.buttons]
    assert tops == [40, 40 + 24, 40 + 48]

    selector.y = 100
    assert selector.buttons[0].rect.y == 100


def test_render_preview(tmp_path, circle_orbit):
    path = render_preview(circle_orbit, tmp_path / "circle.gif", frames=4, size=100, scale=25.0)

    with Image.open(path) as image:
        assert image.size == (100, 100)
        assert image.n_frames == 4


def test_render_view_maps_wall_clock_to_orbit_time(circle_orbit):
    # speed(circle_orbit) == 1, so a quarter second is a quarter period
    state = tick(ViewState(), 250)
    viewed = pygame.Surface((SIZE, SIZE))
    expected = pygame.Surface((SIZE, SIZE))

    render_view(viewed, OrbitTable([circle_orbit]), state)
    render_scene(expected, circle_orbit, 0.25, 1.0)

    assert pygame.image.tobytes(viewed, "RGB") == pygame.image.tobytes(expected, "RGB")
    # The body has moved a quarter turn from (1, 0) to (0, 1)
    assert viewed.get_at((200, 300)).r > 0
    assert tuple(viewed.get_at((300, 200)))[:3] == VisC.black
