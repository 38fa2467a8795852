"""Frame scheduling and timing utilities."""
from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from typing import Callable


FrameCallback = Callable[[], None]


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    last_time: float = field(default_factory=time.perf_counter)

    def tick(self) -> float:
        now = time.perf_counter()
        dt = now - self.last_time
        self.last_time = now
        return dt


class FrameScheduler:
    """Calls every subscriber once per display refresh.

    The host loop calls :meth:`emit` once per frame. Subscribers are called in
    subscription order; a callback unsubscribed during an emit is skipped for
    the rest of that emit.
    """

    def __init__(self) -> None:
        self._callbacks: dict[int, FrameCallback] = {}
        self._handles = itertools.count(1)
        self.frame_count = 0

    def subscribe(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._callbacks[handle] = callback
        return handle

    def unsubscribe(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def emit(self) -> None:
        self.frame_count += 1
        for handle in list(self._callbacks):
            callback = self._callbacks.get(handle)
            if callback is not None:
                callback()


__all__ = ["FrameCallback", "FrameScheduler", "FrameTimer"]
