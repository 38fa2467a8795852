from __future__ import annotations

import math
import random

import pytest

from orrery.core.config import EngineCfg
from orrery.core.engine import OrbitalEngine
from orrery.core.model import OrbitConfigError
from orrery.core.orbits import BASE_SPEED
from orrery.data.scenes import (
    DEFAULT_SCENE_KEY,
    EARTH_MOON,
    INNER_PLANETS,
    SCENE_DISPLAY_ORDER,
    SOLAR_SYSTEM,
    BodySpec,
    Scene,
    build_bodies,
    generate_asteroids,
    get_scene,
    next_scene_key,
)


def test_every_scene_builds_valid_bodies() -> None:
    for key in SCENE_DISPLAY_ORDER:
        bodies = build_bodies(get_scene(key))
        assert bodies
        assert len({body.name for body in bodies}) == len(bodies)


def test_solar_system_speeds_follow_period_ratios() -> None:
    bodies = {body.name: body for body in build_bodies(SOLAR_SYSTEM)}
    assert bodies["Earth"].angular_speed == pytest.approx(BASE_SPEED)
    assert bodies["Mercury"].angular_speed == pytest.approx(BASE_SPEED * 4)
    assert bodies["Neptune"].angular_speed == pytest.approx(BASE_SPEED * 0.0125)
    assert bodies["Sun"].is_stationary
    assert bodies["Earth"].radius == pytest.approx(math.log(6_371.0) * EngineCfg().planet_scaling_factor)


def test_inner_planets_use_literal_sizes_and_circles() -> None:
    bodies = {body.name: body for body in build_bodies(INNER_PLANETS)}
    assert bodies["Sun"].radius == 8.0
    assert bodies["Sun"].self_rotation_speed == 0.001
    assert bodies["Mars"].semi_major_axis == bodies["Mars"].semi_minor_axis == 64.0
    assert bodies["Venus"].angular_speed == pytest.approx(BASE_SPEED * 2)


def test_earth_moon_scene_wires_parent_and_lock() -> None:
    earth, moon = build_bodies(EARTH_MOON)
    assert moon.parent is earth
    assert moon.tidally_locked
    assert moon.angular_speed == pytest.approx(BASE_SPEED * 3)
    assert moon.self_rotation_speed == pytest.approx(-moon.angular_speed)

    engine = OrbitalEngine([earth, moon])
    engine.start()
    for _ in range(600):
        engine.tick()
    assert moon.phase_angle == pytest.approx(600 * BASE_SPEED * 3)
    assert moon.self_rotation == pytest.approx(-moon.phase_angle)
    distance = math.dist(moon.position, earth.position)
    assert distance == pytest.approx(384.0)


def test_moon_keeps_orbiting_between_ticks() -> None:
    earth, moon = build_bodies(EARTH_MOON)
    engine = OrbitalEngine([earth, moon])
    engine.start()
    seen = set()
    for _ in range(200):
        engine.tick()
        seen.add(round(float(moon.position[0]), 6))
    assert len(seen) == 200


def test_parent_must_be_declared_first() -> None:
    scene = Scene(
        key="broken",
        name="Broken",
        description="",
        bodies=(
            BodySpec("moon", "Moon", "moon", 10.0, 10.0, 1.0, radius=1.0, parent="earth"),
            BodySpec("earth", "Earth", "planet", 50.0, 50.0, 1.0, radius=2.0),
        ),
    )
    with pytest.raises(OrbitConfigError, match="parent"):
        build_bodies(scene)


def test_spec_without_size_is_rejected() -> None:
    scene = Scene(
        key="sizeless",
        name="Sizeless",
        description="",
        bodies=(BodySpec("rock", "Rock", "planet", 10.0, 10.0, 1.0),),
    )
    with pytest.raises(OrbitConfigError, match="radius"):
        build_bodies(scene)


def test_scene_lookup_and_cycling() -> None:
    assert get_scene(DEFAULT_SCENE_KEY) is SOLAR_SYSTEM
    with pytest.raises(KeyError):
        get_scene("pluto-system")
    key = DEFAULT_SCENE_KEY
    visited = []
    for _ in SCENE_DISPLAY_ORDER:
        key = next_scene_key(key)
        visited.append(key)
    assert visited[-1] == DEFAULT_SCENE_KEY
    assert sorted(visited) == sorted(SCENE_DISPLAY_ORDER)


def test_generated_asteroids_are_independent_and_spinless() -> None:
    cfg = EngineCfg()
    asteroids = generate_asteroids(25, rng=random.Random(3), cfg=cfg, names=["Apophis"])
    assert len(asteroids) == 25
    assert asteroids[0].name == "Apophis"
    assert asteroids[1].name == "Asteroid 2"
    for asteroid in asteroids:
        assert asteroid.parent is None
        assert asteroid.self_rotation_speed == 0.0
        assert asteroid.kind == "asteroid"
        assert cfg.asteroid_belt_inner <= asteroid.semi_major_axis <= cfg.asteroid_belt_outer
        assert 0.0 < asteroid.semi_minor_axis <= asteroid.semi_major_axis
        assert 0.0 <= asteroid.phase_angle < 2 * math.pi
    with pytest.raises(ValueError):
        generate_asteroids(-1)
