"""Resident daily routine as an explicit phase machine.

A resident lives one simulated day: wake, commute, work (with an optional
lunch errand or a delivered lunch), commute home, an optional evening leisure
trip that must finish before curfew, then sleep.

``advance_resident`` performs at most one phase transition per call. Checks
are level-triggered: a tick that arrives late still fires the transition the
first time it observes the threshold has passed.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from gridtown.sim.city import Cell
from gridtown.sim.contracts import EventKind, LogEntry, PathSegment, VisibleState
from gridtown.sim.movement import Mover, advance_along_route, begin_route, current_cell
from gridtown.sim.pathfinding import Router
from gridtown.sim.schedule import Schedule, build_schedule

REST_BUFFER_HOURS = 0.5
TRAVEL_BUFFER_HOURS = 0.5
LEISURE_TRAVEL_ALLOWANCE = 0.2


class ResidentPhase(str, Enum):
    ASLEEP = "asleep"
    WAITING_FOR_DEPARTURE = "waiting_for_departure"
    COMMUTING_TO_WORK = "commuting_to_work"
    AT_WORK = "at_work"
    COMMUTING_TO_LUNCH = "commuting_to_lunch"
    AT_LUNCH = "at_lunch"
    RETURNING_FROM_LUNCH = "returning_from_lunch"
    COMMUTING_HOME = "commuting_home"
    AT_HOME_JUST_ARRIVED = "at_home_just_arrived"
    CONSIDERING_LEISURE = "considering_leisure"
    COMMUTING_TO_LEISURE = "commuting_to_leisure"
    AT_LEISURE = "at_leisure"
    COMMUTING_HOME_FROM_LEISURE = "commuting_home_from_leisure"
    EVENING_AT_HOME = "evening_at_home"
    ASLEEP_NIGHT = "asleep_night"


P = ResidentPhase

# Every early-home exit from the work block may land in AT_HOME_JUST_ARRIVED
# directly when no route home exists.
LEGAL_TRANSITIONS: dict[ResidentPhase, frozenset[ResidentPhase]] = {
    P.ASLEEP: frozenset({P.WAITING_FOR_DEPARTURE}),
    P.WAITING_FOR_DEPARTURE: frozenset({P.COMMUTING_TO_WORK}),
    P.COMMUTING_TO_WORK: frozenset({P.AT_WORK}),
    P.AT_WORK: frozenset(
        {P.COMMUTING_TO_LUNCH, P.COMMUTING_HOME, P.AT_HOME_JUST_ARRIVED}
    ),
    P.COMMUTING_TO_LUNCH: frozenset(
        {P.AT_LUNCH, P.COMMUTING_HOME, P.AT_HOME_JUST_ARRIVED}
    ),
    P.AT_LUNCH: frozenset(
        {
            P.RETURNING_FROM_LUNCH,
            P.AT_WORK,
            P.COMMUTING_HOME,
            P.AT_HOME_JUST_ARRIVED,
        }
    ),
    P.RETURNING_FROM_LUNCH: frozenset(
        {P.AT_WORK, P.COMMUTING_HOME, P.AT_HOME_JUST_ARRIVED}
    ),
    P.COMMUTING_HOME: frozenset({P.AT_HOME_JUST_ARRIVED}),
    P.AT_HOME_JUST_ARRIVED: frozenset({P.CONSIDERING_LEISURE, P.EVENING_AT_HOME}),
    P.CONSIDERING_LEISURE: frozenset({P.COMMUTING_TO_LEISURE, P.EVENING_AT_HOME}),
    P.COMMUTING_TO_LEISURE: frozenset({P.AT_LEISURE}),
    P.AT_LEISURE: frozenset({P.COMMUTING_HOME_FROM_LEISURE, P.EVENING_AT_HOME}),
    P.COMMUTING_HOME_FROM_LEISURE: frozenset({P.EVENING_AT_HOME}),
    P.EVENING_AT_HOME: frozenset({P.ASLEEP_NIGHT}),
    P.ASLEEP_NIGHT: frozenset(),
}

LUNCH_PHASES: frozenset[ResidentPhase] = frozenset(
    {P.COMMUTING_TO_LUNCH, P.AT_LUNCH, P.RETURNING_FROM_LUNCH}
)


@dataclass
class Resident:
    resident_id: int
    home: Cell
    workplace: Cell
    schedule: Schedule
    speed: float
    leisure_site: Cell | None = None
    eatery: Cell | None = None
    rng: random.Random = field(default_factory=random.Random, repr=False)
    mover: Mover | None = None
    state: VisibleState = VisibleState.SLEEPING
    phase: ResidentPhase = ResidentPhase.ASLEEP
    log: list[LogEntry] = field(default_factory=list)
    path_history: list[PathSegment] = field(default_factory=list)
    lunch_consumed: bool = False
    delivery_ordered: bool = False
    leisure_departure: float | None = None
    leisure_end: float | None = None

    def __post_init__(self) -> None:
        if self.mover is None:
            self.mover = Mover.at(self.home)

    @property
    def label(self) -> str:
        return f"#{self.resident_id:03d}"

    @property
    def position(self) -> tuple[float, float]:
        return self.mover.position

    def record(self, kind: EventKind, hour: float, location: str | None = None) -> None:
        self.log.append(LogEntry(kind=kind, time=hour, location=location))


def build_resident(
    resident_id: int,
    *,
    home: Cell,
    workplace: Cell,
    leisure_site: Cell | None,
    eatery: Cell | None,
    rng: random.Random,
    delivery_distance: int,
) -> Resident:
    speed = 5 + rng.random() * 3
    schedule = build_schedule(
        rng,
        workplace=workplace,
        eatery=eatery,
        delivery_distance=delivery_distance,
    )
    return Resident(
        resident_id=resident_id,
        home=home,
        workplace=workplace,
        schedule=schedule,
        speed=speed,
        leisure_site=leisure_site,
        eatery=eatery,
        rng=random.Random(rng.getrandbits(32)),
    )


def advance_resident(
    resident: Resident, sim_hour: float, delta_seconds: float, *, router: Router
) -> None:
    if resident.phase in LUNCH_PHASES and sim_hour >= resident.schedule.work_end:
        _abandon_lunch(resident, sim_hour, router)
        return
    _HANDLERS[resident.phase](resident, sim_hour, delta_seconds, router)


def _asleep(resident: Resident, hour: float, delta: float, router: Router) -> None:
    if hour >= resident.schedule.wake:
        resident.phase = P.WAITING_FOR_DEPARTURE
        resident.state = VisibleState.HOME
        resident.record(EventKind.WAKE, hour, _name_at(router, resident.home))


def _waiting_for_departure(
    resident: Resident, hour: float, delta: float, router: Router
) -> None:
    if hour < resident.schedule.work_start:
        return
    route = _plan_route(resident, resident.workplace, router)
    if route is None:
        return
    begin_route(resident.mover, route)
    resident.phase = P.COMMUTING_TO_WORK
    resident.state = VisibleState.TRAVELING
    resident.record(EventKind.LEFT_HOME, hour, _name_at(router, resident.home))


def _commuting_to_work(
    resident: Resident, hour: float, delta: float, router: Router
) -> None:
    if advance_along_route(resident.mover, resident.speed, delta):
        resident.phase = P.AT_WORK
        resident.state = VisibleState.WORKING
        resident.record(EventKind.ARRIVED_WORK, hour, _name_at(router, resident.workplace))


def _at_work(resident: Resident, hour: float, delta: float, router: Router) -> None:
    schedule = resident.schedule
    if (
        schedule.order_time is not None
        and not resident.delivery_ordered
        and hour >= schedule.order_time
    ):
        resident.delivery_ordered = True
        resident.record(EventKind.ORDERED_DELIVERY, hour, _name_at(router, resident.eatery))

    lunch_due = (
        schedule.lunch_start is not None
        and not resident.lunch_consumed
        and schedule.lunch_start <= hour < schedule.work_end
    )
    if lunch_due:
        resident.lunch_consumed = True
        if schedule.orders_delivery or resident.eatery is None:
            return
        route = _plan_route(resident, resident.eatery, router)
        if route is None:
            return
        begin_route(resident.mover, route)
        resident.phase = P.COMMUTING_TO_LUNCH
        resident.state = VisibleState.TRAVELING
        resident.record(EventKind.LEFT_FOR_LUNCH, hour, _name_at(router, resident.workplace))
        return

    if hour >= schedule.work_end:
        resident.record(EventKind.LEFT_WORK, hour, _name_at(router, resident.workplace))
        _head_home(resident, hour, router, next_phase=P.COMMUTING_HOME)


def _commuting_to_lunch(
    resident: Resident, hour: float, delta: float, router: Router
) -> None:
    if advance_along_route(resident.mover, resident.speed, delta):
        resident.phase = P.AT_LUNCH
        resident.state = VisibleState.LEISURE
        resident.record(EventKind.ARRIVED_EATERY, hour, _name_at(router, resident.eatery))


def _at_lunch(resident: Resident, hour: float, delta: float, router: Router) -> None:
    lunch_end = resident.schedule.lunch_end
    if lunch_end is None or hour < lunch_end:
        return
    resident.record(EventKind.LEFT_EATERY, hour, _name_at(router, resident.eatery))
    route = _plan_route(resident, resident.workplace, router)
    if route is None:
        resident.phase = P.AT_WORK
        resident.state = VisibleState.WORKING
        resident.record(
            EventKind.RETURNED_TO_WORK, hour, _name_at(router, resident.workplace)
        )
        return
    begin_route(resident.mover, route)
    resident.phase = P.RETURNING_FROM_LUNCH
    resident.state = VisibleState.TRAVELING


def _returning_from_lunch(
    resident: Resident, hour: float, delta: float, router: Router
) -> None:
    if advance_along_route(resident.mover, resident.speed, delta):
        resident.phase = P.AT_WORK
        resident.state = VisibleState.WORKING
        resident.record(
            EventKind.RETURNED_TO_WORK, hour, _name_at(router, resident.workplace)
        )


def _commuting_home(resident: Resident, hour: float, delta: float, router: Router) -> None:
    if advance_along_route(resident.mover, resident.speed, delta):
        resident.phase = P.AT_HOME_JUST_ARRIVED
        resident.state = VisibleState.HOME
        resident.record(EventKind.ARRIVED_HOME, hour, _name_at(router, resident.home))


def _at_home_just_arrived(
    resident: Resident, hour: float, delta: float, router: Router
) -> None:
    schedule = resident.schedule
    if schedule.wants_leisure and resident.leisure_site is not None:
        estimated_return = (
            hour + REST_BUFFER_HOURS + schedule.leisure_duration + TRAVEL_BUFFER_HOURS
        )
        if estimated_return <= schedule.curfew:
            rest = 0.3 + resident.rng.random() * 0.4
            resident.leisure_departure = hour + rest
            resident.leisure_end = (
                resident.leisure_departure
                + LEISURE_TRAVEL_ALLOWANCE
                + schedule.leisure_duration
            )
            resident.phase = P.CONSIDERING_LEISURE
            return
    resident.phase = P.EVENING_AT_HOME


def _considering_leisure(
    resident: Resident, hour: float, delta: float, router: Router
) -> None:
    departure = resident.leisure_departure
    if departure is None or hour < departure:
        return
    route = None
    if resident.leisure_site is not None:
        route = _plan_route(resident, resident.leisure_site, router)
    if route is None:
        resident.phase = P.EVENING_AT_HOME
        return
    begin_route(resident.mover, route)
    resident.phase = P.COMMUTING_TO_LEISURE
    resident.state = VisibleState.TRAVELING
    resident.record(EventKind.LEFT_HOME, hour, _name_at(router, resident.home))


def _commuting_to_leisure(
    resident: Resident, hour: float, delta: float, router: Router
) -> None:
    if advance_along_route(resident.mover, resident.speed, delta):
        resident.phase = P.AT_LEISURE
        resident.state = VisibleState.LEISURE
        resident.record(
            EventKind.ARRIVED_LEISURE, hour, _name_at(router, resident.leisure_site)
        )


def _at_leisure(resident: Resident, hour: float, delta: float, router: Router) -> None:
    leisure_end = resident.leisure_end
    if leisure_end is None or hour < leisure_end:
        return
    resident.record(EventKind.LEFT_LEISURE, hour, _name_at(router, resident.leisure_site))
    _head_home(resident, hour, router, next_phase=P.COMMUTING_HOME_FROM_LEISURE)


def _commuting_home_from_leisure(
    resident: Resident, hour: float, delta: float, router: Router
) -> None:
    if advance_along_route(resident.mover, resident.speed, delta):
        resident.phase = P.EVENING_AT_HOME
        resident.state = VisibleState.HOME
        resident.record(EventKind.ARRIVED_HOME, hour, _name_at(router, resident.home))


def _evening_at_home(
    resident: Resident, hour: float, delta: float, router: Router
) -> None:
    if hour >= resident.schedule.bedtime:
        resident.phase = P.ASLEEP_NIGHT
        resident.state = VisibleState.SLEEPING
        resident.record(EventKind.WENT_TO_SLEEP, hour, _name_at(router, resident.home))


def _asleep_night(resident: Resident, hour: float, delta: float, router: Router) -> None:
    return None


_HANDLERS: dict[ResidentPhase, Callable[[Resident, float, float, Router], None]] = {
    P.ASLEEP: _asleep,
    P.WAITING_FOR_DEPARTURE: _waiting_for_departure,
    P.COMMUTING_TO_WORK: _commuting_to_work,
    P.AT_WORK: _at_work,
    P.COMMUTING_TO_LUNCH: _commuting_to_lunch,
    P.AT_LUNCH: _at_lunch,
    P.RETURNING_FROM_LUNCH: _returning_from_lunch,
    P.COMMUTING_HOME: _commuting_home,
    P.AT_HOME_JUST_ARRIVED: _at_home_just_arrived,
    P.CONSIDERING_LEISURE: _considering_leisure,
    P.COMMUTING_TO_LEISURE: _commuting_to_leisure,
    P.AT_LEISURE: _at_leisure,
    P.COMMUTING_HOME_FROM_LEISURE: _commuting_home_from_leisure,
    P.EVENING_AT_HOME: _evening_at_home,
    P.ASLEEP_NIGHT: _asleep_night,
}


def _abandon_lunch(resident: Resident, hour: float, router: Router) -> None:
    if resident.phase == P.AT_LUNCH:
        resident.record(
            EventKind.LEFT_EATERY_LATE, hour, _name_at(router, resident.eatery)
        )
    else:
        resident.record(EventKind.LEFT_WORK, hour)
    _head_home(resident, hour, router, next_phase=P.COMMUTING_HOME)


def _head_home(
    resident: Resident, hour: float, router: Router, *, next_phase: ResidentPhase
) -> None:
    route = _plan_route(resident, resident.home, router)
    if route is not None:
        begin_route(resident.mover, route)
        resident.phase = next_phase
        resident.state = VisibleState.TRAVELING
        return
    # Unreachable home: stay put but treat the trip as complete.
    resident.state = VisibleState.HOME
    resident.record(EventKind.ARRIVED_HOME, hour, _name_at(router, resident.home))
    if next_phase == P.COMMUTING_HOME:
        resident.phase = P.AT_HOME_JUST_ARRIVED
    else:
        resident.phase = P.EVENING_AT_HOME


def _plan_route(resident: Resident, target: Cell, router: Router) -> list[Cell] | None:
    start = current_cell(resident.mover)
    route = router.route(start, target)
    if route is not None and len(route) > 1:
        resident.path_history.append(
            PathSegment(cells=tuple(route), origin_tile=router.grid.tile_at(start))
        )
    return route


def _name_at(router: Router, cell: Cell | None) -> str | None:
    return router.grid.name_at(cell)
