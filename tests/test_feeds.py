from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from orrery.core.config import EngineCfg
from orrery.data.feeds import (
    Fireball,
    NearEarthObject,
    asteroid_count_for,
    load_feed,
    parse_fireballs,
    parse_neo_feed,
)


NEO_FEED = {
    "element_count": 3,
    "near_earth_objects": {
        "2024-05-02": [{"id": "3542519", "name": "(2010 PK9)", "is_potentially_hazardous_asteroid": False}],
        "2024-05-01": [
            {"id": "2465633", "name": "465633 (2009 JR5)"},
            {"id": "3426410", "name": "(2008 QV11)"},
        ],
    },
}

FIREBALL_FEED = {
    "signature": {"version": "1.0"},
    "count": "2",
    "fields": ["date", "energy", "impact-e", "lat", "lon"],
    "data": [
        ["2024-04-27 16:54:42", "3.6", "0.12", "12.3", "45.6"],
        ["2024-04-20 02:11:09", None, "0.073", None, None],
    ],
}


def test_parse_neo_feed_flattens_dates_in_order() -> None:
    neos = parse_neo_feed(NEO_FEED)
    assert neos == [
        NearEarthObject("2465633", "465633 (2009 JR5)"),
        NearEarthObject("3426410", "(2008 QV11)"),
        NearEarthObject("3542519", "(2010 PK9)"),
    ]


def test_parse_neo_list_skips_malformed(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        neos = parse_neo_feed([{"id": 1, "name": "One"}, {"name": "no id"}])
    assert neos == [NearEarthObject("1", "One")]
    assert "malformed NEO" in caplog.text


def test_parse_fireballs_from_field_table() -> None:
    fireballs = parse_fireballs(FIREBALL_FEED)
    assert fireballs == [
        Fireball("2024-04-27 16:54:42", 3.6, 0.12),
        Fireball("2024-04-20 02:11:09", None, 0.073),
    ]


def test_parse_fireballs_from_records() -> None:
    fireballs = parse_fireballs([{"date": "2024-01-01", "energy": 2, "impact_e": "0.5"}, {"energy": 1}])
    assert fireballs == [Fireball("2024-01-01", 2.0, 0.5)]


def test_unsupported_payload_raises() -> None:
    with pytest.raises(ValueError):
        parse_neo_feed("nope")
    with pytest.raises(ValueError):
        parse_fireballs(42)


def test_load_feed_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "neo.json"
    path.write_text(json.dumps(NEO_FEED), encoding="utf-8")
    assert len(load_feed(path, parse_neo_feed)) == 3


def test_load_feed_failures_are_logged_and_empty(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="orrery.data.feeds"):
        assert load_feed(broken, parse_fireballs) == []
        assert load_feed(tmp_path / "missing.json", parse_neo_feed) == []
    assert caplog.text.count("Could not load feed") == 2


def test_parsers_skip_non_list_buckets_and_rows() -> None:
    neos = parse_neo_feed(
        {"near_earth_objects": {"2024-05-01": None, "2024-05-02": [{"id": "7", "name": "Seven"}]}}
    )
    assert neos == [NearEarthObject("7", "Seven")]
    fireballs = parse_fireballs({"fields": ["date", "energy"], "data": [5, ["2024-02-02", "1.0"]]})
    assert fireballs == [Fireball("2024-02-02", 1.0, None)]


@pytest.mark.parametrize(
    ("payload", "parser"),
    [
        ({"near_earth_objects": {"2024-05-01": None}}, parse_neo_feed),
        ({"near_earth_objects": 12}, parse_neo_feed),
        ({"fields": ["date"], "data": [5]}, parse_fireballs),
        ({"fields": None, "data": [["2024-01-01"]]}, parse_fireballs),
        ({"fields": "date", "data": [["2024-01-01"]]}, parse_fireballs),
        ({"fields": ["date"], "data": {"row": 1}}, parse_fireballs),
    ],
)
def test_load_feed_survives_unexpected_shapes(tmp_path: Path, payload, parser) -> None:
    path = tmp_path / "feed.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    assert load_feed(path, parser) == []


def test_asteroid_count_is_capped() -> None:
    neos = [NearEarthObject(str(i), f"NEO {i}") for i in range(10)]
    assert asteroid_count_for(neos, EngineCfg(max_asteroids=4)) == 4
    assert asteroid_count_for(neos[:3], EngineCfg(max_asteroids=4)) == 3
