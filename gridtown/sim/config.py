"""Simulation settings with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping

ENV_PREFIX = "GRIDTOWN_"


@dataclass(frozen=True)
class SimConfig:
    day_seconds: float = 180.0
    day_hours: float = 24.0
    max_residents: int = 150
    delivery_distance: int = 20
    city_width: int = 60
    city_height: int = 40
    tick_seconds: float = 1 / 30
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.day_seconds <= 0 or self.day_hours <= 0:
            raise ValueError("day_seconds and day_hours must be positive")
        if self.tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")
        if self.max_residents < 0:
            raise ValueError("max_residents must be non-negative")

    @property
    def sim_hours_per_second(self) -> float:
        return self.day_hours / self.day_seconds


_FIELD_PARSERS = {
    "day_seconds": float,
    "max_residents": int,
    "delivery_distance": int,
    "city_width": int,
    "city_height": int,
    "tick_seconds": float,
    "seed": int,
}


def load_sim_config(
    *, env: Mapping[str, str] | None = None, base: SimConfig | None = None
) -> SimConfig:
    source = os.environ if env is None else env
    overrides: dict[str, object] = {}
    for name, parse in _FIELD_PARSERS.items():
        raw = source.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None or raw == "":
            continue
        try:
            overrides[name] = parse(raw)
        except ValueError as exc:
            raise ValueError(f"Invalid {ENV_PREFIX}{name.upper()}={raw!r}") from exc
    return replace(base or SimConfig(), **overrides)
