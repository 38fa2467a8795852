from __future__ import annotations

import math
import random
from typing import NamedTuple, Sequence, TYPE_CHECKING

import pygame

from orrery.core.model import BodyTransform, OrbitingBody
from orrery.core.orbits import orbit_path

from .assets import AssetLibrary
from .camera import Camera

if TYPE_CHECKING:  # pragma: no cover
    from orrery.core.config import RenderCfg


def draw_orbit_path(
    surface: pygame.Surface,
    body: OrbitingBody,
    camera: Camera,
    *,
    render_cfg: RenderCfg,
) -> None:
    if body.is_stationary:
        return
    points = orbit_path(body, render_cfg.orbit_samples)
    screen_points = camera.project_many(points)
    pygame.draw.lines(
        surface,
        render_cfg.orbit_line_color,
        False,
        [tuple(point) for point in screen_points],
        render_cfg.orbit_line_width,
    )


def draw_body(
    surface: pygame.Surface,
    body: OrbitingBody,
    transform: BodyTransform,
    camera: Camera,
    *,
    assets: AssetLibrary,
    render_cfg: RenderCfg,
) -> None:
    center = camera.world_to_screen(*transform.position)
    radius = max(render_cfg.min_body_pixels, int(body.radius * camera.ppu))
    sprite = None
    if body.texture is not None:
        sprite = assets.get_disc_sprite(body.texture, radius * 2)
    if sprite is None:
        pygame.draw.circle(surface, body.color, center, radius)
        return
    rotated = pygame.transform.rotate(sprite, math.degrees(transform.rotation_y))
    surface.blit(rotated, rotated.get_rect(center=center))


def depth_sorted(
    bodies: Sequence[OrbitingBody],
    transforms: Sequence[BodyTransform],
) -> list[tuple[OrbitingBody, BodyTransform]]:
    """Pair bodies with transforms by position, farthest (smallest z) first.

    ``transforms`` must be in the engine's body order; names are not unique.
    """

    if len(bodies) != len(transforms):
        raise ValueError(f"Got {len(transforms)} transforms for {len(bodies)} bodies")
    pairs = list(zip(bodies, transforms))
    return sorted(pairs, key=lambda pair: pair[1].position[2])


class Star(NamedTuple):
    x: float
    y: float
    radius: int
    color: tuple[int, int, int, int]


def scatter_stars(count: int, size: tuple[int, int], rng: random.Random) -> list[Star]:
    """Place ``count`` faint bluish-white stars uniformly over ``size``."""

    width, height = size
    stars: list[Star] = []
    for _ in range(count):
        blue = rng.randint(200, 240)
        stars.append(
            Star(
                x=rng.uniform(0, width),
                y=rng.uniform(0, height),
                radius=2 if rng.random() < 0.25 else 1,
                color=(blue - rng.randint(10, 25), blue - rng.randint(5, 15), blue, rng.randint(80, 150)),
            )
        )
    return stars


def generate_starfield(
    num_stars: int,
    *,
    size: tuple[int, int],
    seed: str | int | None = None,
) -> pygame.Surface:
    """Bake a starfield onto one transparent layer.

    The same ``seed`` (the view passes the scene key) always gives the same sky,
    so every scene keeps its own backdrop across switches.
    """

    layer = pygame.Surface(size, pygame.SRCALPHA)
    for star in scatter_stars(num_stars, size, random.Random(seed)):
        pygame.draw.circle(layer, star.color, (int(star.x), int(star.y)), star.radius)
    return layer


def draw_starfield(surface: pygame.Surface, starfield: pygame.Surface) -> None:
    surface.blit(starfield, (0, 0))
