"""Delivery couriers: a round trip from an eatery to a resident's workplace."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Protocol

from gridtown.sim.city import Cell
from gridtown.sim.contracts import CourierPhase, EventKind, LogEntry
from gridtown.sim.movement import Mover, advance_along_route, begin_route, current_cell
from gridtown.sim.pathfinding import Router
from gridtown.sim.resident import Resident

DROP_OFF_HOURS = 10 / 60


class EventSink(Protocol):
    def append_event(self, resident_id: int, entry: LogEntry) -> None:
        """Append one entry to a resident's log."""


@dataclass
class Courier:
    owner_id: int
    eatery: Cell
    workplace: Cell
    speed: float
    departure_time: float
    outbound_route: list[Cell] | None = None
    mover: Mover | None = None
    phase: CourierPhase = CourierPhase.IDLE
    drop_off_end: float | None = None
    eatery_name: str = "Eatery"

    def __post_init__(self) -> None:
        if self.mover is None:
            self.mover = Mover.at(self.eatery)

    @property
    def position(self) -> tuple[float, float]:
        return self.mover.position

    @property
    def active(self) -> bool:
        return self.phase not in {CourierPhase.IDLE, CourierPhase.FINISHED}


def build_courier(
    resident: Resident,
    *,
    router: Router,
    sim_hours_per_second: float,
    rng: random.Random,
) -> Courier:
    if resident.eatery is None or resident.schedule.lunch_start is None:
        raise ValueError("Couriers need a resident with an eatery and a lunch window.")
    speed = 7 + rng.random() * 2
    route = router.route(resident.eatery, resident.workplace)
    eatery_name = router.grid.name_at(resident.eatery) or "Eatery"
    if route is None or len(route) <= 1:
        return Courier(
            owner_id=resident.resident_id,
            eatery=resident.eatery,
            workplace=resident.workplace,
            speed=speed,
            departure_time=math.inf,
            phase=CourierPhase.FINISHED,
            eatery_name=eatery_name,
        )
    steps = len(route) - 1
    travel_hours = (steps / speed) * sim_hours_per_second
    return Courier(
        owner_id=resident.resident_id,
        eatery=resident.eatery,
        workplace=resident.workplace,
        speed=speed,
        departure_time=max(0.0, resident.schedule.lunch_start - travel_hours),
        outbound_route=route,
        eatery_name=eatery_name,
    )


def advance_courier(
    courier: Courier,
    sim_hour: float,
    delta_seconds: float,
    *,
    router: Router,
    sink: EventSink,
) -> None:
    if courier.phase == CourierPhase.IDLE:
        if sim_hour < courier.departure_time:
            return
        if courier.outbound_route is None:
            courier.phase = CourierPhase.FINISHED
            return
        begin_route(courier.mover, courier.outbound_route)
        courier.outbound_route = None
        courier.phase = CourierPhase.EN_ROUTE
    elif courier.phase == CourierPhase.EN_ROUTE:
        if not advance_along_route(courier.mover, courier.speed, delta_seconds):
            return
        courier.drop_off_end = sim_hour + DROP_OFF_HOURS
        courier.phase = CourierPhase.AT_DROP_OFF
        sink.append_event(
            courier.owner_id,
            LogEntry(
                kind=EventKind.DELIVERY_RECEIVED,
                time=sim_hour,
                location=courier.eatery_name,
            ),
        )
    elif courier.phase == CourierPhase.AT_DROP_OFF:
        if courier.drop_off_end is None or sim_hour < courier.drop_off_end:
            return
        route = router.route(current_cell(courier.mover), courier.eatery)
        if route is None:
            courier.phase = CourierPhase.FINISHED
            return
        begin_route(courier.mover, route)
        courier.phase = CourierPhase.RETURNING
    elif courier.phase == CourierPhase.RETURNING:
        if advance_along_route(courier.mover, courier.speed, delta_seconds):
            courier.phase = CourierPhase.FINISHED
