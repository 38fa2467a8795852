from __future__ import annotations

import logging
from collections import OrderedDict
from pathlib import Path
from typing import Iterable

import pygame


logger = logging.getLogger(__name__)

Color = tuple[int, int, int] | tuple[int, int, int, int]


class AssetLibrary:
    """Cache for body textures scaled to their on-screen size.

    A texture that fails to load is logged once and remembered as missing; the
    caller then falls back to a flat coloured disc.
    """

    def __init__(self, asset_dir: Path | None = None, *, max_sprites: int = 64) -> None:
        self._asset_dir = asset_dir or Path(__file__).resolve().parents[3] / "assets"
        self._textures: dict[str, pygame.Surface | None] = {}
        self._max_sprites = max_sprites
        self._scaled_cache: OrderedDict[tuple[str, int], pygame.Surface] = OrderedDict()

    @property
    def asset_dir(self) -> Path:
        return self._asset_dir

    def load_texture(self, filename: str) -> pygame.Surface | None:
        if filename in self._textures:
            return self._textures[filename]
        path = self._asset_dir / filename
        try:
            texture = pygame.image.load(path.as_posix())
            if pygame.display.get_surface() is not None:
                texture = texture.convert_alpha()
        except (pygame.error, OSError) as exc:
            logger.warning("Texture %s unavailable, drawing flat colour instead: %s", path, exc)
            texture = None
        self._textures[filename] = texture
        return texture

    def get_disc_sprite(self, filename: str, diameter: int) -> pygame.Surface | None:
        """Return the texture cropped to a disc of ``diameter`` pixels."""

        if diameter <= 0:
            raise ValueError("Sprite diameter must be positive")
        key = (filename, diameter)
        cached = self._scaled_cache.get(key)
        if cached is not None:
            self._scaled_cache.move_to_end(key)
            return cached
        texture = self.load_texture(filename)
        if texture is None:
            return None
        scaled = pygame.transform.smoothscale(texture, (diameter, diameter))
        mask = pygame.Surface((diameter, diameter), pygame.SRCALPHA)
        pygame.draw.circle(mask, (255, 255, 255, 255), (diameter // 2, diameter // 2), diameter // 2)
        sprite = scaled.copy()
        sprite.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MIN)
        self._scaled_cache[key] = sprite
        if len(self._scaled_cache) > self._max_sprites:
            self._scaled_cache.popitem(last=False)
        return sprite

    @property
    def sprite_count(self) -> int:
        return len(self._scaled_cache)

    def clear(self) -> None:
        self._scaled_cache.clear()


_TEXT_SURFACE_CACHE_MAX_SIZE = 256
_TEXT_SURFACE_CACHE: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Return a cached rendered surface for the given font, text and color."""

    key = (id(font), text, color)
    cached = _TEXT_SURFACE_CACHE.get(key)
    if cached is not None:
        _TEXT_SURFACE_CACHE.move_to_end(key)
        return cached
    rendered = font.render(text, True, color)
    _TEXT_SURFACE_CACHE[key] = rendered
    if len(_TEXT_SURFACE_CACHE) > _TEXT_SURFACE_CACHE_MAX_SIZE:
        _TEXT_SURFACE_CACHE.popitem(last=False)
    return rendered


def load_font(preferred_names: Iterable[str], size: int, *, bold: bool = False) -> pygame.font.Font:
    names = list(preferred_names)
    for name in names:
        match = pygame.font.match_font(name, bold=bold)
        if match:
            return pygame.font.Font(match, size)
    fallback = names[0] if names else None
    return pygame.font.SysFont(fallback, size, bold=bold)
