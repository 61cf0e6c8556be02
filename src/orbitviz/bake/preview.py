from pathlib import Path

import pygame
from PIL import Image

from orbitviz.orbit import speed
from orbitviz.ui.constants import VisC
from orbitviz.ui.render import render_scene
from orbitviz.utils import Dir, ProgressTracker
from orbitviz.utils.data import BakedOrbit, OrbitTable

FRAMES = 140
FRAME_DURATION = 20  # [ms]


def render_preview(
    orbit: BakedOrbit,
    path: Path,
    frames: int = FRAMES,
    size: int = VisC.size,
    scale: float = VisC.scale,
) -> Path:
    """Render one period of an orbit into a looping GIF"""
    if frames <= 0:
        raise ValueError(f"Number of frames must be positive, got {frames}")
    orbit_speed = speed(orbit)
    surface = pygame.Surface((size, size))

    images = []
    for frame in range(frames):
        render_scene(surface, orbit, frame / frames, orbit_speed, scale)
        images.append(
            Image.frombytes("RGB", (size, size), pygame.image.tobytes(surface, "RGB"))
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    images[0].save(
        path,
        save_all=True,
        append_images=images[1:],
        duration=FRAME_DURATION,
        loop=0,
    )
    return path


def render_previews(
    table: OrbitTable, directory: Path = Dir.preview, frames: int = FRAMES
) -> list[Path]:
    progress = ProgressTracker(n=len(table), print_step=1, name="Rendering")
    paths = []
    for i, orbit in enumerate(table):
        progress.print(i)
        paths.append(render_preview(orbit, directory / f"{orbit.name}.gif", frames))
    progress.print(len(table))
    return paths
