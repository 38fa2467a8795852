"""Rendering helpers for the orrery view."""

from .camera import Camera
from .assets import (
    AssetLibrary,
    get_text_surface,
    load_font,
)
from .draw import (
    depth_sorted,
    draw_body,
    draw_orbit_path,
    draw_starfield,
    generate_starfield,
    scatter_stars,
)
from .ui import (
    build_text_panel,
    fireball_lines,
)

__all__ = [
    "AssetLibrary",
    "Camera",
    "build_text_panel",
    "depth_sorted",
    "draw_body",
    "draw_orbit_path",
    "draw_starfield",
    "fireball_lines",
    "generate_starfield",
    "get_text_surface",
    "load_font",
    "scatter_stars",
]
