import random

import pytest

from gridtown.sim.schedule import (
    Schedule,
    build_schedule,
    chebyshev,
    format_sim_time,
    round_half_hour,
)


def test_built_schedules_stay_in_range() -> None:
    for seed in range(200):
        schedule = build_schedule(
            random.Random(seed), workplace=(0, 0), eatery=(30, 0), delivery_distance=20
        )

        assert schedule.wake <= schedule.work_start
        assert 6 <= schedule.work_start < 9
        assert 7 <= schedule.work_duration < 10
        assert 20 <= schedule.bedtime < 24
        assert 1 <= schedule.leisure_duration < 3
        if schedule.takes_lunch:
            assert schedule.lunch_start is not None
            assert schedule.lunch_end is not None
            assert (schedule.lunch_start * 2).is_integer()
            assert 0.5 <= schedule.lunch_end - schedule.lunch_start < 1
            # Eatery is 30 tiles away, past the delivery distance.
            assert schedule.orders_delivery
            lead = schedule.lunch_start - schedule.order_time
            assert 25 / 60 - 1e-9 <= lead <= 35 / 60 + 1e-9
        else:
            assert schedule.order_time is None


def test_nearby_eatery_never_orders_delivery() -> None:
    for seed in range(100):
        schedule = build_schedule(
            random.Random(seed), workplace=(0, 0), eatery=(5, 5), delivery_distance=20
        )

        assert not schedule.orders_delivery


def test_no_eatery_means_no_lunch() -> None:
    for seed in range(50):
        schedule = build_schedule(
            random.Random(seed), workplace=(0, 0), eatery=None, delivery_distance=20
        )

        assert not schedule.takes_lunch


def test_schedule_derived_times() -> None:
    schedule = Schedule(
        wake=6.0,
        work_start=7.0,
        work_duration=8.5,
        wants_leisure=False,
        leisure_duration=1.0,
        bedtime=22.0,
    )

    assert schedule.work_end == 15.5
    assert schedule.curfew == 21.0
    assert not schedule.takes_lunch


def test_schedule_rejects_inconsistent_windows() -> None:
    with pytest.raises(ValueError):
        Schedule(8.0, 7.0, 8.0, False, 1.0, 22.0)
    with pytest.raises(ValueError):
        Schedule(6.0, 7.0, 8.0, False, 1.0, 22.0, lunch_start=11.0)
    with pytest.raises(ValueError):
        Schedule(6.0, 7.0, 8.0, False, 1.0, 22.0, order_time=10.5)


def test_round_half_hour_rounds_half_up() -> None:
    assert round_half_hour(11.25) == 11.5
    assert round_half_hour(11.24) == 11.0
    assert round_half_hour(12.75) == 13.0


def test_chebyshev_distance() -> None:
    assert chebyshev((0, 0), (3, -5)) == 5
    assert chebyshev((2, 2), (2, 2)) == 0


def test_format_sim_time() -> None:
    assert format_sim_time(7.5) == "07:30"
    assert format_sim_time(13.999) == "13:59"
    assert format_sim_time(0.0) == "00:00"
    assert format_sim_time(24.0) == "00:00"
