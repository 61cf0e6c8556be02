import numpy as np
import pygame

from orbitviz.orbit import (
    afterimage_alphas,
    afterimage_points,
    display_time,
    speed,
    trail_points,
)
from orbitviz.ui.constants import VisC
from orbitviz.ui.state import ViewState, selected_orbit
from orbitviz.utils import FloatArray
from orbitviz.utils.data import BakedOrbit, OrbitTable


def to_screen(
    points: FloatArray, width: int, height: int, scale: float = VisC.scale
) -> FloatArray:
    """Orbit coordinates to pixels, origin at the centre of the surface"""
    pixels = np.empty_like(points)
    pixels[..., 0] = width // 2 + points[..., 0] * scale
    pixels[..., 1] = height // 2 + points[..., 1] * scale
    return pixels.round().astype(int)


def layer_color(
    color: tuple[int, int, int], alpha: float
) -> tuple[int, int, int]:
    """Color premultiplied by alpha, for additive blending over black"""
    return tuple(int(round(c * alpha)) for c in color)  # type: ignore[return-value]


def draw_trails(
    surface: pygame.Surface, trails: FloatArray, scale: float = VisC.scale
) -> None:
    """Draw every body's trail polyline onto one layer and blit it once"""
    width, height = surface.get_size()
    layer = pygame.Surface((width, height), pygame.SRCALPHA)
    for trail in to_screen(trails, width, height, scale):
        if trail.shape[0] > 1:
            pygame.draw.lines(
                layer,
                VisC.trail_color,
                False,
                [(int(px), int(py)) for px, py in trail],
                VisC.trail_width,
            )
    surface.blit(layer, (0, 0))


def draw_bodies(
    surface: pygame.Surface,
    afterimages: FloatArray,
    alphas: list[float],
    scale: float = VisC.scale,
    radius: float = VisC.body_radius,
) -> None:
    """Stack faint copies of every body additively, newest layer first"""
    width, height = surface.get_size()
    radius_px = max(1, int(round(radius * scale)))
    sprites: dict[tuple[tuple[int, int, int], float], pygame.Surface] = {}

    for i, layers in enumerate(to_screen(afterimages, width, height, scale)):
        color = VisC.colors[i % len(VisC.colors)]
        for (x, y), alpha in zip(layers, alphas):
            key = (color, alpha)
            if key not in sprites:
                sprite = pygame.Surface((2 * radius_px + 1, 2 * radius_px + 1))
                sprite.fill(VisC.black)
                pygame.draw.circle(
                    sprite, layer_color(color, alpha), (radius_px, radius_px), radius_px
                )
                sprites[key] = sprite
            surface.blit(
                sprites[key],
                (int(x) - radius_px, int(y) - radius_px),
                special_flags=pygame.BLEND_RGB_ADD,
            )


def render_scene(
    surface: pygame.Surface,
    orbit: BakedOrbit,
    time: float,
    orbit_speed: float,
    scale: float = VisC.scale,
) -> None:
    """Clear the surface and draw trails and bodies at orbit time ``time``"""
    surface.fill(VisC.black)
    if not orbit.bodies:
        return

    draw_trails(surface, trail_points(orbit, time, orbit_speed), scale)
    alphas = afterimage_alphas()
    draw_bodies(
        surface,
        afterimage_points(orbit, time, orbit_speed, layers=len(alphas)),
        alphas,
        scale,
    )


def render_view(
    surface: pygame.Surface,
    table: OrbitTable,
    state: ViewState,
    scale: float = VisC.scale,
) -> None:
    """Draw the selected orbit at the state's wall clock time"""
    orbit = selected_orbit(state, table)
    if not orbit.bodies:
        surface.fill(VisC.black)
        return

    render_scene(surface, orbit, display_time(orbit, state.time), speed(orbit), scale)
