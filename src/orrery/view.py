"""Pygame host for the orbital animation engine.

The view owns the window, a frame scheduler and one engine at a time. Every
display refresh pumps the scheduler once, so the engine ticks at the capped
frame rate, then the latest body transforms are drawn. Switching scene tears
the engine down and builds a fresh one from another table.
"""
from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Optional, Sequence

import pygame

from orrery.core.config import ENGINE_CFG, RENDER_CFG, EngineCfg, RenderCfg
from orrery.core.engine import OrbitalEngine
from orrery.core.logging_utils import RunLogger, configure_logging
from orrery.core.model import BodyTransform, OrbitingBody
from orrery.core.timekeeping import FrameScheduler, FrameTimer
from orrery.data.feeds import (
    Fireball,
    NearEarthObject,
    asteroid_count_for,
    load_feed,
    parse_fireballs,
    parse_neo_feed,
)
from orrery.data.scenes import (
    DEFAULT_SCENE_KEY,
    SCENE_DISPLAY_ORDER,
    build_bodies,
    generate_asteroids,
    get_scene,
    next_scene_key,
)
from orrery.render import (
    AssetLibrary,
    Camera,
    build_text_panel,
    depth_sorted,
    draw_body,
    draw_orbit_path,
    draw_starfield,
    fireball_lines,
    generate_starfield,
    get_text_surface,
    load_font,
)


logger = logging.getLogger(__name__)

SETTINGS_DIR = Path.home() / ".orrery"
SETTINGS_PATH = SETTINGS_DIR / "settings.json"


def load_user_settings() -> dict[str, object]:
    """Return persisted runtime settings if the JSON file is readable."""

    try:
        with SETTINGS_PATH.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def save_user_settings(settings: dict[str, object]) -> None:
    """Persist runtime settings, ignoring filesystem errors."""

    try:
        SETTINGS_DIR.mkdir(parents=True, exist_ok=True)
        with SETTINGS_PATH.open("w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2, sort_keys=True)
    except OSError as exc:
        logger.warning("Could not save settings to %s: %s", SETTINGS_PATH, exc)


def scene_extent(bodies: Sequence[OrbitingBody]) -> float:
    """Farthest reach of any orbit from the origin, including parent offsets."""

    extent = 0.0
    for body in bodies:
        reach = body.radius
        node: Optional[OrbitingBody] = body
        while node is not None:
            reach += max(node.semi_major_axis, node.semi_minor_axis)
            node = node.parent
        extent = max(extent, reach)
    return extent


def asteroid_names(neos: Sequence[NearEarthObject]) -> list[str]:
    """Label asteroids after their NEOs, adding the id where names repeat."""

    counts: dict[str, int] = {}
    for neo in neos:
        counts[neo.name] = counts.get(neo.name, 0) + 1
    return [neo.name if counts[neo.name] == 1 else f"{neo.name} [{neo.id}]" for neo in neos]


class OrreryView:
    def __init__(
        self,
        scene_key: str = DEFAULT_SCENE_KEY,
        *,
        randomize: Optional[bool] = None,
        neos: Sequence[NearEarthObject] = (),
        fireballs: Sequence[Fireball] = (),
        record: bool = False,
        runs_dir: str | Path = "data/runs",
        engine_cfg: EngineCfg = ENGINE_CFG,
        render_cfg: RenderCfg = RENDER_CFG,
        assets_dir: Optional[Path] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.scene = get_scene(scene_key)
        self.randomize = engine_cfg.randomize_phases if randomize is None else randomize
        self.neos = list(neos)
        self.fireballs = list(fireballs)
        self.record = record
        self.runs_dir = Path(runs_dir)
        self.engine_cfg = engine_cfg
        self.render_cfg = render_cfg
        self.assets_dir = assets_dir
        self.rng = rng or random.Random()
        self.scheduler = FrameScheduler()
        self.engine: Optional[OrbitalEngine] = None
        self.recorder: Optional[RunLogger] = None
        self.latest: list[BodyTransform] = []

    def build_engine(self) -> OrbitalEngine:
        bodies = build_bodies(self.scene, cfg=self.engine_cfg)
        if self.scene.asteroid_belt and self.neos:
            count = asteroid_count_for(self.neos, self.engine_cfg)
            names = asteroid_names(self.neos[:count])
            bodies.extend(
                generate_asteroids(count, rng=self.rng, cfg=self.engine_cfg, names=names)
            )
        engine = OrbitalEngine(bodies, cfg=self.engine_cfg)
        engine.add_renderer(self._on_transforms)
        return engine

    def _on_transforms(self, transforms: Sequence[BodyTransform]) -> None:
        self.latest = list(transforms)

    def start(self) -> None:
        if self.engine is not None and self.engine.running:
            return
        self.engine = self.build_engine()
        if self.record:
            self.recorder = RunLogger(self.runs_dir, every_ticks=self.engine_cfg.record_every_ticks)
            self.recorder.write_meta(
                {
                    "scene_key": self.scene.key,
                    "scene_name": self.scene.name,
                    "bodies": [body.name for body in self.engine.bodies],
                    "base_speed": self.engine_cfg.base_speed,
                    "ticks_per_year": self.engine_cfg.ticks_per_year,
                    "frame_rate": self.engine_cfg.frame_rate,
                    "randomized_phases": bool(self.randomize),
                    "record_every_ticks": self.engine_cfg.record_every_ticks,
                }
            )
            self.engine.add_tick_listener(self.recorder.log_bodies)
        self.engine.start(self.scheduler, randomize=self.randomize, rng=self.rng)
        self.latest = self.engine.transforms()
        logger.info("Scene %s started with %d bodies", self.scene.key, len(self.engine.bodies))

    def stop(self) -> None:
        if self.engine is not None:
            self.engine.stop()
        if self.recorder is not None:
            self.recorder.close()
            logger.info("Run recorded to %s", self.recorder.run_dir)
            self.recorder = None

    def switch_scene(self, key: Optional[str] = None) -> None:
        self.stop()
        self.scene = get_scene(key or next_scene_key(self.scene.key))
        self.start()

    def collect_user_settings(self) -> dict[str, object]:
        return {"scene_key": self.scene.key, "randomize_phases": bool(self.randomize)}

    def run(self) -> None:
        cfg = self.render_cfg
        pygame.init()
        pygame.display.set_caption("Orrery")
        screen = pygame.display.set_mode((cfg.width, cfg.height), pygame.RESIZABLE)
        clock = pygame.time.Clock()
        frame_timer = FrameTimer()
        font = load_font(["consolas", "dejavusansmono", "menlo"], 14)
        assets = AssetLibrary(self.assets_dir)
        camera = Camera(
            screen.get_size(),
            cfg.default_ppu,
            min_ppu=cfg.min_ppu,
            max_ppu=cfg.max_ppu,
            elevation_deg=cfg.camera_elevation_deg,
        )
        starfield = generate_starfield(cfg.star_count, size=screen.get_size(), seed=self.scene.key)

        self.start()
        camera.fit_extent(scene_extent(self.engine.bodies))
        running = True
        try:
            while running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    elif event.type == pygame.KEYDOWN:
                        if event.key == pygame.K_ESCAPE:
                            running = False
                        elif event.key == pygame.K_TAB:
                            self.switch_scene()
                            assets.clear()
                            camera.fit_extent(scene_extent(self.engine.bodies))
                            starfield = generate_starfield(
                                cfg.star_count, size=screen.get_size(), seed=self.scene.key
                            )
                    elif event.type == pygame.MOUSEWHEEL:
                        camera.zoom_by_factor(cfg.zoom_step ** event.y)
                    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                        camera.begin_pan(event.pos)
                    elif event.type == pygame.MOUSEMOTION:
                        camera.pan(event.pos)
                    elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                        camera.end_pan()
                    elif event.type == pygame.VIDEORESIZE:
                        camera.update_size(screen.get_size())
                        starfield = generate_starfield(
                            cfg.star_count, size=screen.get_size(), seed=self.scene.key
                        )

                self.scheduler.emit()
                camera.update()
                self._draw(screen, font, assets, camera, starfield)

                elapsed = frame_timer.tick()
                fps = 1.0 / elapsed if elapsed > 0 else 0.0
                fps_text = get_text_surface(font, f"FPS: {fps:.0f}", cfg.hud_text_color).copy()
                fps_text.set_alpha(cfg.fps_text_alpha)
                width, height = screen.get_size()
                screen.blit(fps_text, fps_text.get_rect(bottomright=(width - 16, height - 16)))

                pygame.display.flip()
                clock.tick(cfg.max_fps)
        finally:
            self.stop()
            save_user_settings(self.collect_user_settings())
            pygame.quit()

    def _draw(
        self,
        screen: pygame.Surface,
        font: pygame.font.Font,
        assets: AssetLibrary,
        camera: Camera,
        starfield: pygame.Surface,
    ) -> None:
        cfg = self.render_cfg
        screen.fill(cfg.background_color)
        draw_starfield(screen, starfield)
        if self.engine is None:
            return

        bodies = self.engine.bodies
        orbit_layer = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        for body in bodies:
            if body.kind != "asteroid":
                draw_orbit_path(orbit_layer, body, camera, render_cfg=cfg)
        screen.blit(orbit_layer, (0, 0))

        for body, transform in depth_sorted(bodies, self.latest):
            draw_body(screen, body, transform, camera, assets=assets, render_cfg=cfg)

        lines = [
            (f"{self.scene.name}  [Tab: next scene]", cfg.hud_text_color),
            (f"Tick {self.engine.tick_count}", cfg.hud_text_color),
        ]
        lines.extend(
            (line, cfg.hud_text_color)
            for line in fireball_lines(self.fireballs, cfg.hud_max_fireballs)
        )
        panel = build_text_panel(font, lines, background_color=cfg.hud_panel_color)
        screen.blit(panel, (16, 16))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Animated solar system and Earth-Moon orrery.")
    parser.add_argument("--scene", choices=SCENE_DISPLAY_ORDER, default=None, help="Scene to open")
    parser.add_argument(
        "--random-phases",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Start every body at a random point on its orbit (default: saved setting)",
    )
    parser.add_argument("--neo-feed", type=Path, help="Saved near-Earth-object feed (JSON)")
    parser.add_argument("--fireball-feed", type=Path, help="Saved fireball feed (JSON)")
    parser.add_argument("--record", action="store_true", help="Record body transforms to data/runs")
    parser.add_argument("--runs-dir", type=Path, default=Path("data") / "runs")
    parser.add_argument("--assets-dir", type=Path, help="Directory holding body textures")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level)
    except ValueError as exc:
        parser.error(str(exc))

    settings = load_user_settings()
    scene_key = args.scene or settings.get("scene_key") or DEFAULT_SCENE_KEY
    if scene_key not in SCENE_DISPLAY_ORDER:
        logger.warning("Ignoring unknown saved scene %r", scene_key)
        scene_key = DEFAULT_SCENE_KEY

    randomize = args.random_phases
    if randomize is None and isinstance(settings.get("randomize_phases"), bool):
        randomize = settings["randomize_phases"]

    neos = load_feed(args.neo_feed, parse_neo_feed) if args.neo_feed else []
    fireballs = load_feed(args.fireball_feed, parse_fireballs) if args.fireball_feed else []

    orrery_view = OrreryView(
        str(scene_key),
        randomize=randomize,
        neos=neos,
        fireballs=fireballs,
        record=args.record,
        runs_dir=args.runs_dir,
        assets_dir=args.assets_dir,
    )
    orrery_view.run()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pygame.quit()
        sys.exit()
