from __future__ import annotations

import random
from pathlib import Path

import numpy as np
import pygame
import pytest

from orrery.core.model import BodyTransform, OrbitingBody
from orrery.data.feeds import Fireball
from orrery.render import (
    AssetLibrary,
    Camera,
    depth_sorted,
    fireball_lines,
    generate_starfield,
    scatter_stars,
)


def test_top_down_camera_maps_plane_to_screen() -> None:
    camera = Camera((800, 600), 2.0, min_ppu=0.1, max_ppu=10.0, elevation_deg=90.0)
    assert camera.world_to_screen(0.0, 0.0, 0.0) == (400, 300)
    assert camera.world_to_screen(10.0, 0.0, 5.0) == (420, 310)


def test_project_many_matches_single_projection() -> None:
    camera = Camera((800, 600), 3.0, min_ppu=0.1, max_ppu=10.0, elevation_deg=55.0)
    points = np.array([[10.0, 0.0, -4.0], [-7.5, 0.0, 12.0]])
    projected = camera.project_many(points)
    for point, screen in zip(points, projected):
        assert tuple(screen) == camera.world_to_screen(*point)


def test_fit_extent_and_zoom_clamp() -> None:
    camera = Camera((800, 600), 1.0, min_ppu=0.1, max_ppu=10.0)
    camera.fit_extent(150.0, margin=1.0)
    assert camera.ppu == pytest.approx(2.0)
    camera.set_zoom(100.0)
    assert camera.ppu == 10.0


def test_pan_moves_center() -> None:
    camera = Camera((800, 600), 2.0, min_ppu=0.1, max_ppu=10.0)
    camera.begin_pan((100, 100))
    camera.pan((120, 90))
    camera.end_pan()
    camera.pan((500, 500))
    assert camera.center[0] == pytest.approx(-10.0)
    assert camera.center[1] == pytest.approx(5.0)


def test_depth_sorted_draws_far_bodies_first() -> None:
    near = OrbitingBody("Near", 1.0, 10.0, 10.0, 0.01)
    far = OrbitingBody("Far", 1.0, 10.0, 10.0, 0.01)
    transforms = [
        BodyTransform("Near", (0.0, 0.0, 5.0), 0.0),
        BodyTransform("Far", (0.0, 0.0, -5.0), 0.0),
    ]
    assert [body.name for body, _ in depth_sorted([near, far], transforms)] == ["Far", "Near"]


def test_depth_sorted_pairs_same_named_bodies_by_position() -> None:
    first = OrbitingBody("(2010 PK9)", 0.3, 80.0, 75.0, 0.001)
    second = OrbitingBody("(2010 PK9)", 0.3, 85.0, 80.0, 0.001)
    transforms = [
        BodyTransform("(2010 PK9)", (-47.6, 0.0, -59.8), 0.0),
        BodyTransform("(2010 PK9)", (65.5, 0.0, -41.1), 0.0),
    ]
    pairs = depth_sorted([first, second], transforms)
    assert pairs == [(first, transforms[0]), (second, transforms[1])]
    with pytest.raises(ValueError):
        depth_sorted([first, second], transforms[:1])


def test_starfield_is_stable_per_seed() -> None:
    rng_a = random.Random("earth-moon")
    rng_b = random.Random("earth-moon")
    stars = scatter_stars(50, (320, 200), rng_a)
    assert stars == scatter_stars(50, (320, 200), rng_b)
    assert stars != scatter_stars(50, (320, 200), random.Random("solar-system"))
    assert all(0 <= star.x <= 320 and 0 <= star.y <= 200 for star in stars)
    assert {star.radius for star in stars} <= {1, 2}

    layer = generate_starfield(50, size=(320, 200), seed="earth-moon")
    assert layer.get_size() == (320, 200)


def test_disc_sprite_cache_is_bounded(tmp_path: Path) -> None:
    texture = pygame.Surface((16, 16), pygame.SRCALPHA)
    texture.fill((200, 120, 40, 255))
    pygame.image.save(texture, (tmp_path / "rock.bmp").as_posix())

    assets = AssetLibrary(tmp_path, max_sprites=3)
    for diameter in range(2, 10):
        assert assets.get_disc_sprite("rock.bmp", diameter).get_size() == (diameter, diameter)
    assert assets.sprite_count == 3
    assert assets.get_disc_sprite("missing.png", 4) is None


def test_fireball_lines_are_limited() -> None:
    fireballs = [Fireball(f"2024-01-0{i}", 1.5, None) for i in range(1, 6)]
    lines = fireball_lines(fireballs, limit=2)
    assert lines[0] == "Fireballs (5)"
    assert lines[1] == "2024-01-01  E=1.5 e10 J  impact=n/a"
    assert lines[-1] == "... 3 more"
    assert fireball_lines([], limit=2) == []
