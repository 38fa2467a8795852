"""Configuration dataclasses for the orbital animation."""
from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class EngineCfg:
    frame_rate: int = 60
    seconds_per_year: int = 60
    randomize_phases: bool = False
    planet_scaling_factor: float = 0.4
    asteroid_belt_inner: float = 70.0
    asteroid_belt_outer: float = 90.0
    asteroid_radius_range: tuple[float, float] = (0.15, 0.6)
    asteroid_speed_factor_range: tuple[float, float] = (0.2, 0.5)
    asteroid_eccentricity_max: float = 0.15
    max_asteroids: int = 200
    record_every_ticks: int = 10

    @property
    def ticks_per_year(self) -> int:
        return self.frame_rate * self.seconds_per_year

    @property
    def base_speed(self) -> float:
        """Radians per tick for one revolution per simulated year."""

        return 2.0 * math.pi * (1.0 / self.frame_rate) * (1.0 / self.seconds_per_year)


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1200
    height: int = 800
    max_fps: int = 60
    background_color: tuple[int, int, int] = (4, 6, 16)
    star_count: int = 400
    camera_elevation_deg: float = 55.0
    default_ppu: float = 4.5
    min_ppu: float = 0.2
    max_ppu: float = 60.0
    zoom_step: float = 1.15
    orbit_line_color: tuple[int, int, int, int] = (255, 255, 255, 60)
    orbit_line_width: int = 1
    orbit_samples: int = 180
    min_body_pixels: int = 2
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_panel_color: tuple[int, int, int, int] = (12, 18, 30, int(255 * 0.55))
    hud_max_fireballs: int = 8
    fps_text_alpha: int = int(255 * 0.6)


ENGINE_CFG = EngineCfg()
RENDER_CFG = RenderCfg()


__all__ = ["ENGINE_CFG", "RENDER_CFG", "EngineCfg", "RenderCfg"]
