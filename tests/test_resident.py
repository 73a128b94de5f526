import random

from gridtown.sim.city import CityGrid, parse_city_map
from gridtown.sim.city_gen import generate_city
from gridtown.sim.contracts import EventKind, VisibleState
from gridtown.sim.movement import Mover
from gridtown.sim.pathfinding import Router
from gridtown.sim.resident import (
    LEGAL_TRANSITIONS,
    Resident,
    ResidentPhase,
    advance_resident,
    build_resident,
)
from gridtown.sim.schedule import Schedule
from gridtown.sim.tick_loop import SimClock, run_day
from gridtown.sim.world_state import CityState, build_population

HOME = (5, 0)
WORKPLACE = (10, 0)
NEAR_EATERY = (14, 0)
LEISURE = (20, 0)


def test_every_phase_change_is_legal() -> None:
    grid = generate_city(30, 20, rng=random.Random(7))
    state = build_population(grid, rng=random.Random(7))
    clock = SimClock()
    tick_seconds = 0.1
    elapsed = 0.0

    for tick in range(1, 1800):
        next_elapsed = tick * tick_seconds
        delta = next_elapsed - elapsed
        elapsed = next_elapsed
        hour = clock.sim_hour(elapsed)
        for resident in state.residents.values():
            before = resident.phase
            advance_resident(resident, hour, delta, router=state.router)
            if resident.phase != before:
                assert resident.phase in LEGAL_TRANSITIONS[before], (before, resident.phase)

    for resident in state.residents.values():
        kinds = [entry.kind for entry in resident.log]
        assert kinds[0] == EventKind.WAKE
        if EventKind.ARRIVED_WORK in kinds:
            assert kinds.index(EventKind.WAKE) < kinds.index(EventKind.ARRIVED_WORK)
        times = [entry.time for entry in resident.log]
        assert times == sorted(times)
        if resident.leisure_end is not None:
            assert resident.leisure_end < resident.schedule.curfew


def test_build_resident_ranges() -> None:
    rng = random.Random(4)
    for resident_id in range(50):
        resident = build_resident(
            resident_id,
            home=HOME,
            workplace=WORKPLACE,
            leisure_site=LEISURE,
            eatery=NEAR_EATERY,
            rng=rng,
            delivery_distance=20,
        )
        assert 5 <= resident.speed < 8
        assert resident.position == (5.0, 0.0)
        assert resident.phase == ResidentPhase.ASLEEP
        assert resident.state == VisibleState.SLEEPING
    assert resident.label == "#049"


def test_one_transition_per_call_even_when_late() -> None:
    grid = _street_city()
    router = Router(grid)
    resident = _resident(_schedule())

    advance_resident(resident, 12.0, 0.1, router=router)
    assert resident.phase == ResidentPhase.WAITING_FOR_DEPARTURE

    advance_resident(resident, 12.0, 0.1, router=router)
    assert resident.phase == ResidentPhase.COMMUTING_TO_WORK
    assert [entry.kind for entry in resident.log] == [
        EventKind.WAKE,
        EventKind.LEFT_HOME,
    ]


def test_plain_working_day() -> None:
    resident = _run_single(_schedule())

    assert _kinds(resident) == [
        EventKind.WAKE,
        EventKind.LEFT_HOME,
        EventKind.ARRIVED_WORK,
        EventKind.LEFT_WORK,
        EventKind.ARRIVED_HOME,
        EventKind.WENT_TO_SLEEP,
    ]
    assert resident.phase == ResidentPhase.ASLEEP_NIGHT
    assert resident.position == (5.0, 0.0)
    assert resident.log[0].location == "Residence (5, 0)"
    assert len(resident.path_history) == 2


def test_lunch_errand_returns_to_work() -> None:
    resident = _run_single(
        _schedule(lunch_start=11.0, lunch_end=11.75), eatery=NEAR_EATERY
    )

    assert _kinds(resident) == [
        EventKind.WAKE,
        EventKind.LEFT_HOME,
        EventKind.ARRIVED_WORK,
        EventKind.LEFT_FOR_LUNCH,
        EventKind.ARRIVED_EATERY,
        EventKind.LEFT_EATERY,
        EventKind.RETURNED_TO_WORK,
        EventKind.LEFT_WORK,
        EventKind.ARRIVED_HOME,
        EventKind.WENT_TO_SLEEP,
    ]
    assert resident.lunch_consumed


def test_lunch_running_past_work_end_heads_home() -> None:
    resident = _run_single(
        _schedule(lunch_start=14.5, lunch_end=15.5), eatery=NEAR_EATERY
    )

    kinds = _kinds(resident)
    assert kinds == [
        EventKind.WAKE,
        EventKind.LEFT_HOME,
        EventKind.ARRIVED_WORK,
        EventKind.LEFT_FOR_LUNCH,
        EventKind.ARRIVED_EATERY,
        EventKind.LEFT_EATERY_LATE,
        EventKind.ARRIVED_HOME,
        EventKind.WENT_TO_SLEEP,
    ]
    late = resident.log[kinds.index(EventKind.LEFT_EATERY_LATE)]
    assert late.time >= resident.schedule.work_end


def test_lunch_starting_after_work_end_is_skipped() -> None:
    resident = _run_single(
        _schedule(lunch_start=15.5, lunch_end=16.0), eatery=NEAR_EATERY
    )

    assert EventKind.LEFT_FOR_LUNCH not in _kinds(resident)
    assert not resident.lunch_consumed


def test_evening_leisure_trip() -> None:
    resident = _run_single(
        _schedule(wants_leisure=True, leisure_duration=1.5, bedtime=23.0),
        leisure_site=LEISURE,
    )

    assert _kinds(resident) == [
        EventKind.WAKE,
        EventKind.LEFT_HOME,
        EventKind.ARRIVED_WORK,
        EventKind.LEFT_WORK,
        EventKind.ARRIVED_HOME,
        EventKind.LEFT_HOME,
        EventKind.ARRIVED_LEISURE,
        EventKind.LEFT_LEISURE,
        EventKind.ARRIVED_HOME,
        EventKind.WENT_TO_SLEEP,
    ]
    assert resident.log[6].location == "Leisure (20, 0)"


def test_leisure_refused_when_return_passes_curfew() -> None:
    router = Router(_street_city())
    schedule = _schedule(wants_leisure=True, leisure_duration=2.0, bedtime=21.0)
    resident = _resident(schedule, leisure_site=LEISURE)
    resident.phase = ResidentPhase.AT_HOME_JUST_ARRIVED

    advance_resident(resident, 17.5, 0.1, router=router)

    assert resident.phase == ResidentPhase.EVENING_AT_HOME
    assert resident.leisure_departure is None


def test_late_arrival_skips_leisure_for_the_whole_evening() -> None:
    resident = _run_single(
        _schedule(wants_leisure=True, leisure_duration=2.9, bedtime=20.0),
        leisure_site=LEISURE,
    )

    kinds = _kinds(resident)
    first_home = kinds.index(EventKind.ARRIVED_HOME)
    assert EventKind.LEFT_HOME not in kinds[first_home:]
    assert resident.leisure_departure is None
    assert resident.phase == ResidentPhase.ASLEEP_NIGHT


def test_leisure_accepted_before_curfew() -> None:
    router = Router(_street_city())
    schedule = _schedule(wants_leisure=True, leisure_duration=2.0, bedtime=21.0)
    resident = _resident(schedule, leisure_site=LEISURE)
    resident.phase = ResidentPhase.AT_HOME_JUST_ARRIVED

    advance_resident(resident, 16.5, 0.1, router=router)

    assert resident.phase == ResidentPhase.CONSIDERING_LEISURE
    assert 16.8 <= resident.leisure_departure <= 17.2
    assert abs(resident.leisure_end - (resident.leisure_departure + 2.2)) < 1e-9


def test_disconnected_home_waits_in_place() -> None:
    router = Router(_island_city())
    resident = _resident(_schedule(), home=(0, 0), workplace=(3, 0))

    advance_resident(resident, 6.5, 0.1, router=router)
    advance_resident(resident, 7.5, 0.1, router=router)
    advance_resident(resident, 8.5, 0.1, router=router)

    assert resident.phase == ResidentPhase.WAITING_FOR_DEPARTURE
    assert resident.position == (0.0, 0.0)
    assert resident.path_history == []


def test_unreachable_home_counts_as_arrived_without_moving() -> None:
    router = Router(_island_city())
    resident = _resident(_schedule(), home=(0, 0), workplace=(3, 0))
    resident.mover = Mover.at((3, 0))
    resident.phase = ResidentPhase.AT_WORK
    resident.state = VisibleState.WORKING

    advance_resident(resident, 15.5, 0.1, router=router)

    assert resident.phase == ResidentPhase.AT_HOME_JUST_ARRIVED
    assert resident.state == VisibleState.HOME
    assert resident.position == (3.0, 0.0)
    assert _kinds(resident) == [EventKind.LEFT_WORK, EventKind.ARRIVED_HOME]


def _street_city() -> CityGrid:
    top = ["."] * 40
    top[HOME[0]] = "H"
    top[WORKPLACE[0]] = "W"
    top[NEAR_EATERY[0]] = "E"
    top[LEISURE[0]] = "L"
    top[35] = "E"
    return parse_city_map(["".join(top), "=" * 40])


def _island_city() -> CityGrid:
    return parse_city_map(["H..W", "..=="])


def _schedule(
    *,
    lunch_start: float | None = None,
    lunch_end: float | None = None,
    wants_leisure: bool = False,
    leisure_duration: float = 1.0,
    bedtime: float = 22.0,
) -> Schedule:
    return Schedule(
        wake=6.0,
        work_start=7.0,
        work_duration=8.0,
        wants_leisure=wants_leisure,
        leisure_duration=leisure_duration,
        bedtime=bedtime,
        lunch_start=lunch_start,
        lunch_end=lunch_end,
    )


def _resident(
    schedule: Schedule,
    *,
    home=HOME,
    workplace=WORKPLACE,
    eatery=None,
    leisure_site=None,
) -> Resident:
    return Resident(
        resident_id=0,
        home=home,
        workplace=workplace,
        schedule=schedule,
        speed=6.0,
        leisure_site=leisure_site,
        eatery=eatery,
        rng=random.Random(0),
    )


def _run_single(schedule: Schedule, *, eatery=None, leisure_site=None) -> Resident:
    grid = _street_city()
    state = CityState(grid=grid, router=Router(grid))
    resident = _resident(schedule, eatery=eatery, leisure_site=leisure_site)
    state.add_resident(resident)
    for _ in run_day(state):
        pass
    return resident


def _kinds(resident: Resident) -> list[EventKind]:
    return [entry.kind for entry in resident.log]
