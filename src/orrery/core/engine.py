"""Per-frame orbital animation engine."""
from __future__ import annotations

import logging
import random
from typing import Callable, Iterable, Optional, Sequence

from .config import ENGINE_CFG, EngineCfg
from .model import BodyTransform, OrbitingBody
from .orbits import (
    advance_phase,
    compute_position,
    compute_self_rotation,
    random_phase,
    update_order,
)
from .timekeeping import FrameScheduler


logger = logging.getLogger(__name__)

RenderCallback = Callable[[Sequence[BodyTransform]], None]


class OrbitalEngine:
    """Owns a set of bodies and advances them once per tick.

    Bodies are updated parent first, so a moon always reads its planet's
    position from the same tick.
    """

    def __init__(
        self,
        bodies: Iterable[OrbitingBody],
        *,
        cfg: EngineCfg = ENGINE_CFG,
    ) -> None:
        self._bodies = update_order(bodies)
        self._cfg = cfg
        self._renderers: list[RenderCallback] = []
        self._tick_listeners: list[Callable[[int, Sequence[OrbitingBody]], None]] = []
        self._scheduler: Optional[FrameScheduler] = None
        self._handle: Optional[int] = None
        self._running = False
        self.tick_count = 0

    @property
    def bodies(self) -> list[OrbitingBody]:
        return list(self._bodies)

    @property
    def running(self) -> bool:
        return self._running

    def body(self, name: str) -> OrbitingBody:
        for body in self._bodies:
            if body.name == name:
                return body
        raise KeyError(name)

    def add_renderer(self, callback: RenderCallback) -> None:
        self._renderers.append(callback)

    def add_tick_listener(self, callback: Callable[[int, Sequence[OrbitingBody]], None]) -> None:
        self._tick_listeners.append(callback)

    def start(
        self,
        scheduler: Optional[FrameScheduler] = None,
        *,
        randomize: Optional[bool] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Seed phases, place every body and begin receiving frames."""

        if self._running:
            return
        if randomize is None:
            randomize = self._cfg.randomize_phases
        if randomize:
            rng = rng or random.Random()
            for body in self._bodies:
                if body.is_stationary:
                    continue
                body.phase_angle = random_phase(rng)
                if body.tidally_locked:
                    body.lock_rotation()
        for body in self._bodies:
            body.position = compute_position(body)
        self.tick_count = 0
        self._running = True
        if scheduler is not None:
            self._scheduler = scheduler
            self._handle = scheduler.subscribe(self._on_frame)
        logger.debug(
            "Engine started with %d bodies (randomized phases: %s)",
            len(self._bodies),
            bool(randomize),
        )

    def stop(self) -> None:
        if self._scheduler is not None and self._handle is not None:
            self._scheduler.unsubscribe(self._handle)
        self._scheduler = None
        self._handle = None
        if self._running:
            logger.debug("Engine stopped after %d ticks", self.tick_count)
        self._running = False

    def _on_frame(self) -> None:
        if self._running:
            self.tick()

    def tick(self) -> None:
        for body in self._bodies:
            advance_phase(body)
            compute_self_rotation(body)
            body.position = compute_position(body)
        self.tick_count += 1
        for listener in self._tick_listeners:
            try:
                listener(self.tick_count, self._bodies)
            except Exception:
                logger.exception("Tick listener failed on tick %d", self.tick_count)
        if self._renderers:
            transforms = self.transforms()
            for renderer in self._renderers:
                try:
                    renderer(transforms)
                except Exception:
                    logger.exception("Renderer failed on tick %d", self.tick_count)

    def transforms(self) -> list[BodyTransform]:
        return [body.transform() for body in self._bodies]


__all__ = ["OrbitalEngine", "RenderCallback"]
