"""Readers for the near-Earth-object and fireball feeds.

The feeds are fetched elsewhere and saved as JSON. Two payload shapes are
understood for each:

* NEO: the NeoWs ``feed`` response (``{"near_earth_objects": {date: [...]}}``)
  or a plain list of ``{"id", "name"}`` records.
* Fireballs: the SSD fireball API response (``{"fields": [...], "data":
  [[...]]}``) or a plain list of ``{"date", "energy", "impact-e"}`` records.

Neither feed takes part in orbit computation; they only seed the asteroid count
and fill the read-only overlay.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from orrery.core.config import ENGINE_CFG, EngineCfg


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class NearEarthObject:
    id: str
    name: str


@dataclass(frozen=True)
class Fireball:
    date: str
    energy: Optional[float]
    impact_e: Optional[float]


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _flatten_buckets(grouped: dict[str, Any]) -> list[Any]:
    records: list[Any] = []
    for date in sorted(grouped):
        bucket = grouped[date]
        if not isinstance(bucket, list):
            logger.warning("Skipping NEO bucket %s: expected a list, got %r", date, bucket)
            continue
        records.extend(bucket)
    return records


def parse_neo_feed(payload: Any) -> list[NearEarthObject]:
    if isinstance(payload, dict):
        grouped = payload.get("near_earth_objects", {})
        if isinstance(grouped, dict):
            records = _flatten_buckets(grouped)
        elif isinstance(grouped, list):
            records = grouped
        else:
            raise ValueError(f"Unsupported near_earth_objects type: {type(grouped).__name__}")
    elif isinstance(payload, list):
        records = payload
    else:
        raise ValueError(f"Unsupported NEO payload type: {type(payload).__name__}")

    neos: list[NearEarthObject] = []
    for record in records:
        try:
            neos.append(NearEarthObject(id=str(record["id"]), name=str(record["name"])))
        except (KeyError, TypeError):
            logger.warning("Skipping malformed NEO record: %r", record)
    return neos


def parse_fireballs(payload: Any) -> list[Fireball]:
    if isinstance(payload, dict):
        fields = payload.get("fields") or []
        rows = payload.get("data") or []
        if not isinstance(fields, list) or not isinstance(rows, list):
            raise ValueError("Fireball table needs list-valued 'fields' and 'data'")
        records = []
        for row in rows:
            if not isinstance(row, list):
                logger.warning("Skipping malformed fireball row: %r", row)
                continue
            records.append(dict(zip(fields, row)))
    elif isinstance(payload, list):
        records = payload
    else:
        raise ValueError(f"Unsupported fireball payload type: {type(payload).__name__}")

    fireballs: list[Fireball] = []
    for record in records:
        try:
            impact = record.get("impact-e", record.get("impact_e"))
            fireballs.append(
                Fireball(
                    date=str(record["date"]),
                    energy=_optional_float(record.get("energy")),
                    impact_e=_optional_float(impact),
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Skipping malformed fireball record: %r", record)
    return fireballs


def load_feed(path: str | Path, parser: Callable[[Any], list[T]]) -> list[T]:
    """Read and parse a feed file; any failure is logged and yields ``[]``."""

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
        records = parser(payload)
    except (OSError, json.JSONDecodeError, ValueError, TypeError) as exc:
        logger.warning("Could not load feed %s: %s", path, exc)
        return []
    logger.info("Loaded %d records from %s", len(records), path)
    return records


def asteroid_count_for(neos: list[NearEarthObject], cfg: EngineCfg = ENGINE_CFG) -> int:
    return min(len(neos), cfg.max_asteroids)


__all__ = [
    "Fireball",
    "NearEarthObject",
    "asteroid_count_for",
    "load_feed",
    "parse_fireballs",
    "parse_neo_feed",
]
