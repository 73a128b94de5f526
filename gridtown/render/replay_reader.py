"""Read run logs and yield frames or itineraries."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

from gridtown.sim.city import CityGrid, parse_city_map
from gridtown.sim.contracts import FrameSnapshot, Itinerary


def read_frames(path: Path) -> Iterator[FrameSnapshot]:
    for payload in _payloads(path, record_type="frame"):
        yield FrameSnapshot.model_validate(payload)


def read_itineraries(path: Path) -> Iterator[Itinerary]:
    for payload in _payloads(path, record_type="itinerary"):
        yield Itinerary.model_validate(payload)


def read_header(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            record = parse_record(line)
            if record and record.get("type") == "header":
                return dict(record.get("metadata") or {})
    return {}


def read_city(path: Path) -> CityGrid | None:
    city = read_header(path).get("city")
    if not city or not city.get("lines"):
        return None
    names = {(int(x), int(y)): str(name) for x, y, name in city.get("names", [])}
    return parse_city_map(city["lines"], names=names)


def _payloads(path: Path, *, record_type: str) -> Iterator[dict[str, Any]]:
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            record = parse_record(line)
            if not record:
                continue
            if record.get("type") != record_type:
                continue
            payload = record.get("payload")
            if payload is None:
                continue
            yield payload


def parse_record(line: str) -> dict | None:
    try:
        return json.loads(line)
    except json.JSONDecodeError:
        return None
