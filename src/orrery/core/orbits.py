"""Closed-form orbit helpers for the animation engine."""
from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from .config import ENGINE_CFG
from .model import OrbitConfigError, OrbitingBody


# One revolution every 60 x 60 ticks, i.e. a minute at 60 frames per second.
EARTH_YEAR = 2 * math.pi * (1 / 60) * (1 / 60)
BASE_SPEED = EARTH_YEAR
TWO_PI = 2.0 * math.pi


def speed_from_factor(factor: float, base_speed: float = BASE_SPEED) -> float:
    """Angular speed for a body that revolves ``factor`` times per Earth year."""

    return base_speed * factor


def visual_radius(real_radius_km: float, scaling_factor: float = ENGINE_CFG.planet_scaling_factor) -> float:
    """Compress a real radius in kilometres to a drawable size."""

    if real_radius_km <= 1.0:
        raise OrbitConfigError(
            f"real radius must be larger than 1 km for log scaling, got {real_radius_km!r}"
        )
    return math.log(real_radius_km) * scaling_factor


def parent_position(body: OrbitingBody) -> np.ndarray:
    if body.parent is None:
        return np.zeros(3, dtype=float)
    return body.parent.position


def compute_position(body: OrbitingBody) -> np.ndarray:
    """Return ``(x, 0, z)`` for the body's current phase, offset by its parent."""

    theta = body.phase_angle
    offset = np.array(
        [
            body.semi_major_axis * math.cos(theta),
            0.0,
            body.semi_minor_axis * math.sin(theta),
        ],
        dtype=float,
    )
    return parent_position(body) + offset


def advance_phase(body: OrbitingBody) -> float:
    body.phase_angle += body.angular_speed
    return body.phase_angle


def compute_self_rotation(body: OrbitingBody) -> float:
    """Accumulate one tick of spin. The angle is never wrapped."""

    body.self_rotation += body.self_rotation_speed
    return body.self_rotation


def update_order(bodies: Iterable[OrbitingBody]) -> list[OrbitingBody]:
    """Order bodies so every parent is updated before its children.

    The sort is stable, so bodies at the same depth keep their table order.
    """

    ordered = list(bodies)
    members = {id(body) for body in ordered}
    for body in ordered:
        if body.parent is not None and id(body.parent) not in members:
            raise OrbitConfigError(
                f"{body.name}: parent {body.parent.name!r} is not managed by this engine"
            )
    depths = {id(body): body.depth for body in ordered}
    return sorted(ordered, key=lambda body: depths[id(body)])


def orbit_path(body: OrbitingBody, samples: int = 180) -> np.ndarray:
    """Sample the full ellipse as an ``(samples + 1, 3)`` array around the parent."""

    if samples < 3:
        raise ValueError("samples must be at least 3")
    theta = np.linspace(0.0, TWO_PI, samples + 1)
    center = parent_position(body)
    points = np.zeros((samples + 1, 3), dtype=float)
    points[:, 0] = center[0] + body.semi_major_axis * np.cos(theta)
    points[:, 1] = center[1]
    points[:, 2] = center[2] + body.semi_minor_axis * np.sin(theta)
    return points


def random_phase(rng) -> float:
    """Uniform phase in ``[0, 2π)``."""

    return rng.uniform(0.0, TWO_PI) % TWO_PI


__all__ = [
    "BASE_SPEED",
    "EARTH_YEAR",
    "TWO_PI",
    "advance_phase",
    "compute_position",
    "compute_self_rotation",
    "orbit_path",
    "parent_position",
    "random_phase",
    "speed_from_factor",
    "update_order",
    "visual_radius",
]
