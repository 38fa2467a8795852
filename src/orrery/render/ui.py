from __future__ import annotations

from typing import Sequence

import pygame

from orrery.data.feeds import Fireball

from .assets import Color, get_text_surface


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: int = 14,
) -> pygame.Surface:
    """Stack HUD lines on a rounded translucent card; blank lines leave a gap."""

    if not lines:
        raise ValueError("lines must not be empty")
    line_height = font.get_linesize()
    text_width = max(font.size(text)[0] for text, _ in lines)
    panel = pygame.Surface(
        (text_width + padding * 2, line_height * len(lines) + padding * 2), pygame.SRCALPHA
    )
    pygame.draw.rect(panel, background_color, panel.get_rect(), border_radius=12)
    y = padding
    for text, color in lines:
        if text:
            panel.blit(get_text_surface(font, text, color), (padding, y))
        y += line_height
    return panel


def _format_optional(value: float | None, unit: str) -> str:
    if value is None:
        return "n/a"
    return f"{value:g} {unit}"


def fireball_lines(fireballs: Sequence[Fireball], limit: int) -> list[str]:
    """Text rows for the fireball overlay, newest first as delivered by the feed."""

    if not fireballs:
        return []
    lines = [f"Fireballs ({len(fireballs)})"]
    for fireball in fireballs[:limit]:
        lines.append(
            f"{fireball.date}  E={_format_optional(fireball.energy, 'e10 J')}"
            f"  impact={_format_optional(fireball.impact_e, 'kt')}"
        )
    if len(fireballs) > limit:
        lines.append(f"... {len(fireballs) - limit} more")
    return lines
