from __future__ import annotations

import math
from pathlib import Path

import numpy as np
import pytest

from orrery.analyze_run import (
    ensure_fig_dir,
    estimate_period,
    load_timeseries,
    plot_paths,
    plot_phases,
    revolutions,
)
from orrery.core.engine import OrbitalEngine
from orrery.core.logging_utils import RunLogger
from orrery.data.scenes import INNER_PLANETS, build_bodies


@pytest.fixture()
def recorded_run(tmp_path: Path) -> Path:
    engine = OrbitalEngine(build_bodies(INNER_PLANETS))
    with RunLogger(tmp_path, run_id="inner", every_ticks=30) as recorder:
        engine.add_tick_listener(recorder.log_bodies)
        engine.start()
        for _ in range(1800):
            engine.tick()
    return recorder.run_dir


def test_measured_periods_match_speed_factors(recorded_run: Path) -> None:
    ts = load_timeseries(recorded_run / "timeseries.csv")
    assert set(ts) == {"Sun", "Mercury", "Venus", "Earth", "Mars"}
    assert estimate_period(ts["Earth"]["tick"], ts["Earth"]["phase"]) == pytest.approx(3600.0)
    assert estimate_period(ts["Mercury"]["tick"], ts["Mercury"]["phase"]) == pytest.approx(900.0)
    assert estimate_period(ts["Sun"]["tick"], ts["Sun"]["phase"]) is None
    assert revolutions(ts["Mercury"]["phase"]) == pytest.approx((1800 - 30) / 900.0)


def test_plots_are_written(recorded_run: Path) -> None:
    ts = load_timeseries(recorded_run / "timeseries.csv")
    fig_dir = ensure_fig_dir(recorded_run)
    plot_paths(fig_dir, ts)
    plot_phases(fig_dir, ts)
    assert (fig_dir / "paths_xz.png").stat().st_size > 0
    assert (fig_dir / "phases.png").stat().st_size > 0


def test_estimate_period_edge_cases() -> None:
    assert estimate_period(np.array([1.0]), np.array([0.0])) is None
    assert estimate_period(np.array([1.0, 1.0]), np.array([0.0, 1.0])) is None
    assert estimate_period(np.array([0.0, 10.0]), np.array([0.0, -math.pi])) == pytest.approx(20.0)
    assert revolutions(np.array([])) == 0.0
