"""Scene tables describing which bodies each view animates."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from orrery.core.config import ENGINE_CFG, EngineCfg
from orrery.core.model import OrbitConfigError, OrbitingBody
from orrery.core.orbits import random_phase, speed_from_factor, visual_radius


@dataclass(frozen=True)
class BodySpec:
    """Static orbital parameters for one body.

    ``radius`` wins over ``real_radius_km`` when both are given. A
    ``rotation_speed`` of ``None`` marks a tidally locked body.
    """

    key: str
    name: str
    kind: str
    semi_major_axis: float
    semi_minor_axis: float
    speed_factor: float
    rotation_speed: Optional[float] = 0.0
    real_radius_km: Optional[float] = None
    radius: Optional[float] = None
    texture: Optional[str] = None
    parent: Optional[str] = None
    color: tuple[int, int, int] = (200, 200, 255)

    def resolve_radius(self, cfg: EngineCfg = ENGINE_CFG) -> float:
        if self.radius is not None:
            return self.radius
        if self.real_radius_km is not None:
            return visual_radius(self.real_radius_km, cfg.planet_scaling_factor)
        raise OrbitConfigError(f"{self.name}: either radius or real_radius_km is required")


@dataclass(frozen=True)
class Scene:
    key: str
    name: str
    bodies: tuple[BodySpec, ...]
    description: str
    asteroid_belt: bool = False


SUN = BodySpec(
    key="sun",
    name="Sun",
    kind="star",
    semi_major_axis=0.0,
    semi_minor_axis=0.0,
    speed_factor=0.0,
    rotation_speed=0.001,
    radius=10.0,
    texture="sun.jpeg",
    color=(255, 204, 0),
)

SOLAR_SYSTEM = Scene(
    key="solar-system",
    name="Solar system",
    description="Sun and the eight planets on slightly elliptical paths.",
    asteroid_belt=True,
    bodies=(
        SUN,
        BodySpec("mercury", "Mercury", "planet", 20.0, 18.0, 4.0, 0.01, 2_439.7, texture="mercury.png", color=(169, 169, 169)),
        BodySpec("venus", "Venus", "planet", 30.0, 28.0, 2.0, -0.004, 6_051.8, texture="venus.jpeg", color=(230, 190, 120)),
        BodySpec("earth", "Earth", "planet", 42.0, 40.0, 1.0, 0.01, 6_371.0, texture="earth.jpeg", color=(100, 149, 237)),
        BodySpec("mars", "Mars", "planet", 54.0, 50.0, 0.5, 0.0097, 3_389.5, texture="mars.jpeg", color=(193, 68, 14)),
        BodySpec("jupiter", "Jupiter", "planet", 100.0, 92.0, 0.1, 0.024, 69_911.0, texture="jupiter.jpeg", color=(216, 202, 157)),
        BodySpec("saturn", "Saturn", "planet", 130.0, 120.0, 0.05, 0.022, 58_232.0, texture="saturn.jpeg", color=(234, 214, 184)),
        BodySpec("uranus", "Uranus", "planet", 160.0, 150.0, 0.025, -0.014, 25_362.0, texture="uranus.jpeg", color=(172, 229, 238)),
        BodySpec("neptune", "Neptune", "planet", 190.0, 180.0, 0.0125, 0.015, 24_622.0, texture="neptune.jpeg", color=(91, 93, 223)),
    ),
)

INNER_PLANETS = Scene(
    key="inner-planets",
    name="Inner planets",
    description="Sun with the four rocky planets on circular paths.",
    bodies=(
        BodySpec("sun", "Sun", "star", 0.0, 0.0, 0.0, 0.001, radius=8.0, texture="sun.jpeg", color=(255, 204, 0)),
        BodySpec("mercury", "Mercury", "planet", 16.0, 16.0, 4.0, 0.01, radius=2.0, texture="mercury.png", color=(169, 169, 169)),
        BodySpec("venus", "Venus", "planet", 32.0, 32.0, 2.0, 0.01, radius=3.0, texture="venus.jpeg", color=(230, 190, 120)),
        BodySpec("earth", "Earth", "planet", 48.0, 48.0, 1.0, 0.01, radius=4.0, texture="earth.jpeg", color=(100, 149, 237)),
        BodySpec("mars", "Mars", "planet", 64.0, 64.0, 0.5, 0.01, radius=3.0, texture="mars.jpeg", color=(193, 68, 14)),
    ),
)

EARTH_MOON = Scene(
    key="earth-moon",
    name="Earth and Moon",
    description="Spinning Earth with a tidally locked Moon.",
    bodies=(
        BodySpec("earth", "Earth", "planet", 0.0, 0.0, 0.0, 0.01, radius=6.3781, texture="earth.jpeg", color=(100, 149, 237)),
        BodySpec("moon", "Moon", "moon", 384.0, 384.0, 3.0, None, radius=1.737, texture="moon.png", parent="earth", color=(200, 200, 200)),
    ),
)

SCENE_DEFINITIONS: tuple[Scene, ...] = (SOLAR_SYSTEM, INNER_PLANETS, EARTH_MOON)
SCENES: dict[str, Scene] = {scene.key: scene for scene in SCENE_DEFINITIONS}
SCENE_DISPLAY_ORDER: list[str] = [scene.key for scene in SCENE_DEFINITIONS]
DEFAULT_SCENE_KEY = SCENE_DISPLAY_ORDER[0]


def get_scene(key: str) -> Scene:
    try:
        return SCENES[key]
    except KeyError:
        raise KeyError(f"Unknown scene {key!r}; choose one of {', '.join(SCENE_DISPLAY_ORDER)}") from None


def next_scene_key(key: str) -> str:
    index = SCENE_DISPLAY_ORDER.index(key)
    return SCENE_DISPLAY_ORDER[(index + 1) % len(SCENE_DISPLAY_ORDER)]


def build_bodies(
    scene: Scene,
    *,
    cfg: EngineCfg = ENGINE_CFG,
) -> list[OrbitingBody]:
    """Instantiate the bodies of a scene, wiring parents by key.

    Parents must appear in the table before their children.
    """

    built: dict[str, OrbitingBody] = {}
    bodies: list[OrbitingBody] = []
    for spec in scene.bodies:
        if spec.key in built:
            raise OrbitConfigError(f"{scene.key}: duplicate body key {spec.key!r}")
        parent = None
        if spec.parent is not None:
            parent = built.get(spec.parent)
            if parent is None:
                raise OrbitConfigError(
                    f"{spec.name}: parent {spec.parent!r} must be declared earlier in {scene.key!r}"
                )
        locked = spec.rotation_speed is None
        body = OrbitingBody(
            name=spec.name,
            radius=spec.resolve_radius(cfg),
            semi_major_axis=spec.semi_major_axis,
            semi_minor_axis=spec.semi_minor_axis,
            angular_speed=speed_from_factor(spec.speed_factor, cfg.base_speed),
            self_rotation_speed=0.0 if locked else spec.rotation_speed,
            parent=parent,
            tidally_locked=locked,
            kind=spec.kind,
            texture=spec.texture,
            color=spec.color,
        )
        built[spec.key] = body
        bodies.append(body)
    return bodies


def generate_asteroids(
    count: int,
    *,
    rng: Optional[random.Random] = None,
    cfg: EngineCfg = ENGINE_CFG,
    names: Optional[list[str]] = None,
) -> list[OrbitingBody]:
    """Random, independent belt bodies: no parent and no self-rotation."""

    if count < 0:
        raise ValueError("count must not be negative")
    rng = rng or random.Random()
    asteroids: list[OrbitingBody] = []
    for idx in range(count):
        semi_major = rng.uniform(cfg.asteroid_belt_inner, cfg.asteroid_belt_outer)
        squash = 1.0 - rng.uniform(0.0, cfg.asteroid_eccentricity_max)
        factor = rng.uniform(*cfg.asteroid_speed_factor_range)
        name = names[idx] if names is not None and idx < len(names) else f"Asteroid {idx + 1}"
        shade = rng.randint(110, 170)
        asteroids.append(
            OrbitingBody(
                name=name,
                radius=rng.uniform(*cfg.asteroid_radius_range),
                semi_major_axis=semi_major,
                semi_minor_axis=semi_major * squash,
                angular_speed=speed_from_factor(factor, cfg.base_speed),
                phase_angle=random_phase(rng),
                kind="asteroid",
                color=(shade, shade - 10, shade - 25),
            )
        )
    return asteroids


__all__ = [
    "BodySpec",
    "DEFAULT_SCENE_KEY",
    "EARTH_MOON",
    "INNER_PLANETS",
    "SCENE_DEFINITIONS",
    "SCENE_DISPLAY_ORDER",
    "SCENES",
    "SOLAR_SYSTEM",
    "Scene",
    "build_bodies",
    "generate_asteroids",
    "get_scene",
    "next_scene_key",
]
