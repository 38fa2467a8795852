"""Data models for the animated bodies."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np


class OrbitConfigError(ValueError):
    """Raised when a body is constructed with unusable orbital parameters."""


@dataclass(eq=False)
class OrbitingBody:
    """One animated object travelling an ellipse around its parent or the origin.

    ``phase_angle`` and ``self_rotation`` are mutated by the engine every tick.
    A body with both axes and ``angular_speed`` at zero is stationary; it stays
    at its parent's position (or the origin) and may still spin.
    """

    name: str
    radius: float
    semi_major_axis: float
    semi_minor_axis: float
    angular_speed: float
    phase_angle: float = 0.0
    self_rotation_speed: float = 0.0
    self_rotation: float = 0.0
    parent: Optional["OrbitingBody"] = None
    tidally_locked: bool = False
    kind: str = "planet"
    texture: Optional[str] = None
    color: tuple[int, int, int] = (200, 200, 255)
    position: np.ndarray = field(
        default_factory=lambda: np.zeros(3, dtype=float)
    )

    def __post_init__(self) -> None:
        for label in (
            "radius",
            "semi_major_axis",
            "semi_minor_axis",
            "angular_speed",
            "phase_angle",
            "self_rotation_speed",
            "self_rotation",
        ):
            value = getattr(self, label)
            if not math.isfinite(value):
                raise OrbitConfigError(f"{self.name}: {label} must be finite, got {value!r}")
        if self.radius <= 0.0:
            raise OrbitConfigError(f"{self.name}: radius must be positive, got {self.radius!r}")
        if self.semi_major_axis < 0.0 or self.semi_minor_axis < 0.0:
            raise OrbitConfigError(
                f"{self.name}: orbit axes must not be negative "
                f"(a={self.semi_major_axis!r}, b={self.semi_minor_axis!r})"
            )
        if not self.is_stationary and (self.semi_major_axis == 0.0 or self.semi_minor_axis == 0.0):
            raise OrbitConfigError(
                f"{self.name}: degenerate orbit, both axes must be positive "
                f"(a={self.semi_major_axis!r}, b={self.semi_minor_axis!r})"
            )
        if self.parent is self:
            raise OrbitConfigError(f"{self.name}: a body cannot orbit itself")
        if self.tidally_locked:
            self.lock_rotation()
        self.position = np.asarray(self.position, dtype=float).reshape(3)

    def lock_rotation(self) -> None:
        """Keep the same face towards the parent by spinning against the orbit."""

        self.self_rotation_speed = -self.angular_speed
        self.self_rotation = -self.phase_angle

    @property
    def is_stationary(self) -> bool:
        return (
            self.semi_major_axis == 0.0
            and self.semi_minor_axis == 0.0
            and self.angular_speed == 0.0
        )

    @property
    def depth(self) -> int:
        """Number of ancestors above this body."""

        seen = {id(self)}
        depth = 0
        node = self.parent
        while node is not None:
            if id(node) in seen:
                raise OrbitConfigError(f"{self.name}: parent chain contains a cycle")
            seen.add(id(node))
            depth += 1
            node = node.parent
        return depth

    def transform(self) -> "BodyTransform":
        return BodyTransform(
            name=self.name,
            position=(float(self.position[0]), float(self.position[1]), float(self.position[2])),
            rotation_y=self.self_rotation,
        )


@dataclass(frozen=True)
class BodyTransform:
    """Per-tick hand-off to the renderer."""

    name: str
    position: tuple[float, float, float]
    rotation_y: float


__all__ = ["BodyTransform", "OrbitConfigError", "OrbitingBody"]
