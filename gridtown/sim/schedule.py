"""Randomised daily schedules, expressed in fractional simulated hours."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass

from gridtown.sim.city import Cell


@dataclass(frozen=True)
class Schedule:
    wake: float
    work_start: float
    work_duration: float
    wants_leisure: bool
    leisure_duration: float
    bedtime: float
    lunch_start: float | None = None
    lunch_end: float | None = None
    order_time: float | None = None

    def __post_init__(self) -> None:
        if not self.wake <= self.work_start:
            raise ValueError("wake must not be after work_start")
        if self.work_duration < 0:
            raise ValueError("work_duration must be non-negative")
        if (self.lunch_start is None) != (self.lunch_end is None):
            raise ValueError("lunch_start and lunch_end must be set together")
        if self.order_time is not None and self.lunch_start is None:
            raise ValueError("order_time requires a lunch window")

    @property
    def work_end(self) -> float:
        return self.work_start + self.work_duration

    @property
    def curfew(self) -> float:
        return self.bedtime - 1.0

    @property
    def takes_lunch(self) -> bool:
        return self.lunch_start is not None

    @property
    def orders_delivery(self) -> bool:
        return self.order_time is not None


def build_schedule(
    rng: random.Random,
    *,
    workplace: Cell,
    eatery: Cell | None,
    delivery_distance: int,
) -> Schedule:
    work_start = 6 + rng.random() * 3
    wake = work_start - (0.5 + rng.random() * 1.5)
    work_duration = 7 + rng.random() * 3

    lunch_start = lunch_end = order_time = None
    takes_lunch = rng.random() < (0.4 + rng.random() * 0.2) and eatery is not None
    lunch_duration = 0.5 + rng.random() * 0.5
    if takes_lunch and eatery is not None:
        lunch_start = round_half_hour(work_start + work_duration / 2)
        lunch_end = lunch_start + lunch_duration
        if chebyshev(workplace, eatery) > delivery_distance:
            order_time = lunch_start - (25 + rng.random() * 10) / 60

    wants_leisure = rng.random() < 0.4
    leisure_duration = 1 + rng.random() * 2
    bedtime = 20 + rng.random() * 4

    return Schedule(
        wake=wake,
        work_start=work_start,
        work_duration=work_duration,
        wants_leisure=wants_leisure,
        leisure_duration=leisure_duration,
        bedtime=bedtime,
        lunch_start=lunch_start,
        lunch_end=lunch_end,
        order_time=order_time,
    )


def round_half_hour(hours: float) -> float:
    # Half-up, not banker's rounding.
    return math.floor(hours * 2 + 0.5) / 2


def chebyshev(a: Cell, b: Cell) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def format_sim_time(hours: float) -> str:
    whole = math.floor(hours)
    minutes = math.floor((hours - whole) * 60)
    return f"{whole % 24:02d}:{minutes:02d}"
