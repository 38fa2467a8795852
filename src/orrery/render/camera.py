from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass
class CameraState:
    center: np.ndarray
    ppu: float
    ppu_target: float


class Camera:
    """Tilted top-down camera handling zoom and panning.

    World units are scene units; the orbital plane is ``y = 0``. ``elevation_deg``
    is the angle between the line of sight and that plane, 90 looks straight down.
    """

    def __init__(
        self,
        size: tuple[int, int],
        ppu: float,
        *,
        min_ppu: float,
        max_ppu: float,
        elevation_deg: float = 90.0,
    ) -> None:
        self._size = size
        self._min_ppu = min_ppu
        self._max_ppu = max_ppu
        ppu = _clamp(ppu, min_ppu, max_ppu)
        self._state = CameraState(
            center=np.array([0.0, 0.0], dtype=float),
            ppu=ppu,
            ppu_target=ppu,
        )
        elevation = math.radians(_clamp(elevation_deg, 1.0, 90.0))
        self._depth_scale = math.sin(elevation)
        self._height_scale = math.cos(elevation)
        self._pan_anchor: tuple[int, int] | None = None

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size

    @property
    def ppu(self) -> float:
        return self._state.ppu

    @property
    def center(self) -> np.ndarray:
        return self._state.center

    def set_zoom(self, ppu: float) -> None:
        clamped = _clamp(ppu, self._min_ppu, self._max_ppu)
        self._state.ppu = clamped
        self._state.ppu_target = clamped

    def zoom_by_factor(self, factor: float) -> None:
        self._state.ppu_target = _clamp(self._state.ppu_target * factor, self._min_ppu, self._max_ppu)

    def fit_extent(self, extent: float, margin: float = 0.9) -> None:
        """Zoom so a disc of radius ``extent`` fills the shorter screen side."""

        if extent <= 0.0:
            return
        half_side = min(self._size) / 2.0
        self.set_zoom(half_side * margin / extent)

    def update(self, smoothing: float = 0.15) -> None:
        state = self._state
        state.ppu += (state.ppu_target - state.ppu) * smoothing
        state.ppu = _clamp(state.ppu, self._min_ppu, self._max_ppu)

    def begin_pan(self, position: tuple[int, int]) -> None:
        self._pan_anchor = position

    def pan(self, position: tuple[int, int]) -> None:
        if self._pan_anchor is None:
            return
        dx = position[0] - self._pan_anchor[0]
        dy = position[1] - self._pan_anchor[1]
        if dx == 0 and dy == 0:
            return
        ppu = max(self.ppu, 1e-9)
        self._state.center[0] -= dx / ppu
        self._state.center[1] -= dy / (ppu * max(self._depth_scale, 1e-6))
        self._pan_anchor = position

    def end_pan(self) -> None:
        self._pan_anchor = None

    def world_to_screen(self, x: float, y: float, z: float) -> tuple[int, int]:
        width, height = self._size
        cx, cz = self._state.center
        ppu = self._state.ppu
        sx = width // 2 + int((x - cx) * ppu)
        sy = height // 2 + int(((z - cz) * self._depth_scale - y * self._height_scale) * ppu)
        return sx, sy

    def project_many(self, points: np.ndarray) -> np.ndarray:
        """Vectorised :meth:`world_to_screen` for an ``(n, 3)`` array."""

        width, height = self._size
        cx, cz = self._state.center
        ppu = self._state.ppu
        screen = np.empty((len(points), 2), dtype=int)
        screen[:, 0] = width // 2 + ((points[:, 0] - cx) * ppu).astype(int)
        screen[:, 1] = height // 2 + (
            ((points[:, 2] - cz) * self._depth_scale - points[:, 1] * self._height_scale) * ppu
        ).astype(int)
        return screen


__all__ = ["Camera", "CameraState"]
