"""Analyze a recorded orrery run and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
import math
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


TIMESERIES_FILENAME = "timeseries.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
NUMERIC_COLUMNS = ("tick", "x", "y", "z", "phase", "rotation")


def load_timeseries(path: Path) -> Dict[str, Dict[str, np.ndarray]]:
    """Return ``{body name: {column: values}}`` from a recorded timeseries."""

    per_body: Dict[str, Dict[str, List[float]]] = {}
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        for row in reader:
            name = row.get("name")
            if not name:
                continue
            columns = per_body.setdefault(name, {key: [] for key in NUMERIC_COLUMNS})
            for key in NUMERIC_COLUMNS:
                columns[key].append(float(row[key]))
    return {
        name: {key: np.asarray(values) for key, values in columns.items()}
        for name, columns in per_body.items()
    }


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def revolutions(phases: np.ndarray) -> float:
    """Signed number of revolutions between the first and last sample."""

    if phases.size < 2:
        return 0.0
    return float((phases[-1] - phases[0]) / (2.0 * math.pi))


def estimate_period(ticks: np.ndarray, phases: np.ndarray) -> float | None:
    """Ticks per revolution, from the mean phase advance per tick."""

    if ticks.size < 2 or ticks[-1] == ticks[0]:
        return None
    rate = (phases[-1] - phases[0]) / (ticks[-1] - ticks[0])
    if rate == 0:
        return None
    return float(2.0 * math.pi / abs(rate))


def plot_paths(fig_dir: Path, ts: Dict[str, Dict[str, np.ndarray]]) -> None:
    fig, ax = plt.subplots(figsize=(7, 7))
    for name, columns in ts.items():
        ax.plot(columns["x"], columns["z"], lw=1.0, label=name)
    ax.set_aspect("equal", "box")
    ax.set_xlabel("x")
    ax.set_ylabel("z")
    ax.set_title("Body paths (x–z)")
    if len(ts) <= 12:
        ax.legend(fontsize="small")
    fig.tight_layout()
    fig.savefig(fig_dir / "paths_xz.png", dpi=150)
    plt.close(fig)


def plot_phases(fig_dir: Path, ts: Dict[str, Dict[str, np.ndarray]]) -> None:
    fig, ax = plt.subplots(figsize=(8, 4))
    for name, columns in ts.items():
        ax.plot(columns["tick"], columns["phase"], lw=1.0, label=name)
    ax.set_xlabel("tick")
    ax.set_ylabel("phase [rad]")
    ax.set_title("Phase angle over ticks")
    ax.grid(True, alpha=0.3)
    if len(ts) <= 12:
        ax.legend(fontsize="small")
    fig.tight_layout()
    fig.savefig(fig_dir / "phases.png", dpi=150)
    plt.close(fig)


def print_summary(run_dir: Path, meta: dict, ts: Dict[str, Dict[str, np.ndarray]]) -> None:
    print(f"Run: {run_dir.name}")
    print(f" Scene: {meta.get('scene_name', 'unknown')}")
    ticks_per_year = meta.get("ticks_per_year")
    for name, columns in ts.items():
        period = estimate_period(columns["tick"], columns["phase"])
        turns = revolutions(columns["phase"])
        if period is None:
            print(f" {name}: stationary")
            continue
        line = f" {name}: {turns:+.3f} revolutions, {period:.1f} ticks per revolution"
        if ticks_per_year:
            line += f" ({period / float(ticks_per_year):.3f} years)"
        print(line)


def main() -> None:
    parser = argparse.ArgumentParser(description="Analyze a recorded run and create figures.")
    parser.add_argument("run_dir", nargs="?", help="Path to a specific run directory")
    parser.add_argument("--runs-dir", type=Path, default=Path("data") / "runs")
    args = parser.parse_args()

    base_runs_dir = args.runs_dir
    if args.run_dir:
        run_path = Path(args.run_dir)
        if not run_path.is_dir():
            run_path = base_runs_dir / args.run_dir
    else:
        last_run_file = base_runs_dir / "last_run.txt"
        if not last_run_file.exists():
            parser.error("No run given and last_run.txt is missing.")
        run_id = last_run_file.read_text(encoding="utf-8").strip()
        run_path = base_runs_dir / run_id

    if not run_path.is_dir():
        parser.error(f"Run directory not found: {run_path}")

    meta_path = run_path / META_FILENAME
    ts_path = run_path / TIMESERIES_FILENAME
    if not meta_path.exists() or not ts_path.exists():
        parser.error("Run directory is missing meta.json or timeseries.csv.")

    with meta_path.open("r", encoding="utf-8") as fh:
        meta = json.load(fh)

    ts = load_timeseries(ts_path)
    if not ts:
        parser.error("timeseries.csv is empty, nothing to analyze.")

    fig_dir = ensure_fig_dir(run_path)
    plot_paths(fig_dir, ts)
    plot_phases(fig_dir, ts)
    print_summary(run_path, meta, ts)


if __name__ == "__main__":
    main()
