"""Tick orchestration: map real time onto the simulated day and step the city."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from gridtown.sim.contracts import CourierSnapshot, FrameSnapshot, ResidentSnapshot
from gridtown.sim.courier import advance_courier
from gridtown.sim.resident import advance_resident
from gridtown.sim.world_state import CityState


@dataclass(frozen=True)
class SimClock:
    day_seconds: float = 180.0
    day_hours: float = 24.0

    @property
    def sim_hours_per_second(self) -> float:
        return self.day_hours / self.day_seconds

    def sim_hour(self, elapsed_seconds: float) -> float:
        return (elapsed_seconds / self.day_seconds) * self.day_hours

    def finished(self, elapsed_seconds: float) -> bool:
        return elapsed_seconds >= self.day_seconds


def step_city(state: CityState, sim_hour: float, delta_seconds: float) -> None:
    """Advance every resident, then every courier, in creation order."""
    for resident in state.residents.values():
        advance_resident(resident, sim_hour, delta_seconds, router=state.router)
    for courier in state.couriers:
        advance_courier(
            courier, sim_hour, delta_seconds, router=state.router, sink=state
        )


def capture_frame(
    state: CityState, *, tick: int, real_time: float, sim_hour: float
) -> FrameSnapshot:
    residents = tuple(
        ResidentSnapshot(
            resident_id=resident.resident_id,
            x=resident.mover.x,
            y=resident.mover.y,
            state=resident.state,
        )
        for resident in state.residents.values()
    )
    couriers = tuple(
        CourierSnapshot(
            owner_id=courier.owner_id,
            x=courier.mover.x,
            y=courier.mover.y,
            phase=courier.phase,
        )
        for courier in state.couriers
    )
    return FrameSnapshot(
        tick=tick,
        real_time=real_time,
        sim_hour=sim_hour,
        residents=residents,
        couriers=couriers,
    )


def run_day(
    state: CityState,
    *,
    clock: SimClock | None = None,
    tick_seconds: float = 1 / 30,
) -> Iterable[FrameSnapshot]:
    """Headless driver: fixed real-time steps until the day budget is spent.

    The last frame is always pinned to the end of the day.
    """
    clock = clock or SimClock()
    if tick_seconds <= 0:
        raise ValueError("tick_seconds must be positive")
    tick = 0
    elapsed = 0.0
    while True:
        tick += 1
        # Multiplying avoids drift from repeated float addition.
        next_elapsed = tick * tick_seconds
        delta = next_elapsed - elapsed
        elapsed = next_elapsed
        if clock.finished(elapsed):
            yield capture_frame(
                state,
                tick=tick,
                real_time=clock.day_seconds,
                sim_hour=clock.day_hours,
            )
            return
        sim_hour = clock.sim_hour(elapsed)
        step_city(state, sim_hour, delta)
        yield capture_frame(state, tick=tick, real_time=elapsed, sim_hour=sim_hour)
