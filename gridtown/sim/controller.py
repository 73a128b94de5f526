"""Run control for one simulated day: start, pause, resume, reset, replay.

The controller owns no timer. Whatever drives it (a test, a headless batch
loop, a terminal viewer) calls ``tick()``; elapsed time comes from the
injected ``time_source`` with paused spans excluded.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Callable

from gridtown.sim.city import CityGrid
from gridtown.sim.config import SimConfig
from gridtown.sim.contracts import FrameSnapshot, Itinerary
from gridtown.sim.replay import ReplayCursor
from gridtown.sim.tick_loop import SimClock, capture_frame, step_city
from gridtown.sim.world_state import CityState, PopulationError, build_population

logger = logging.getLogger("gridtown.sim.controller")

TimeSource = Callable[[], float]


class ManualTimeSource:
    """Deterministic clock for tests and headless runs."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class SimulationController:
    def __init__(
        self,
        grid: CityGrid,
        *,
        config: SimConfig | None = None,
        seed: int | None = None,
        time_source: TimeSource | None = None,
    ) -> None:
        self.grid = grid
        self.config = config or SimConfig()
        self.clock = SimClock(
            day_seconds=self.config.day_seconds, day_hours=self.config.day_hours
        )
        self.seed = seed if seed is not None else self.config.seed
        self._time = time_source or time.monotonic
        self.state: CityState | None = None
        self.status = "City ready. Start the simulation to begin."
        self.running = False
        self.paused = False
        self.finished = False
        self._frames: list[FrameSnapshot] = []
        self._start_time = 0.0
        self._last_time = 0.0
        self._pause_start = 0.0
        self._paused_total = 0.0
        self._tick = 0
        self._replay: ReplayCursor | None = None
        self._replay_start = 0.0

    @property
    def frames(self) -> tuple[FrameSnapshot, ...]:
        return tuple(self._frames)

    @property
    def replaying(self) -> bool:
        return self._replay is not None

    def start(self) -> bool:
        if self.running or self.replaying:
            return False
        rng = random.Random(self.seed)
        try:
            state = build_population(self.grid, rng=rng, config=self.config)
        except PopulationError as exc:
            self.status = str(exc)
            logger.warning("[SIM] Start refused: %s", exc)
            return False
        if not state.residents:
            self.status = "No residents could be created — generate a new city."
            logger.warning("[SIM] Start refused: no residents")
            return False

        self.state = state
        self._frames = []
        self._tick = 0
        self.running = True
        self.paused = False
        self.finished = False
        self._paused_total = 0.0
        self._pause_start = 0.0
        self._start_time = self._time()
        self._last_time = self._start_time
        self.status = self._running_status()
        logger.info("[SIM] Started: %s", self.status)
        return True

    def pause(self) -> bool:
        if not self.running or self.paused:
            return False
        self.paused = True
        self._pause_start = self._time()
        self.status = "Simulation paused."
        logger.info("[SIM] Paused at tick %d", self._tick)
        return True

    def resume(self) -> bool:
        if not self.running or not self.paused:
            return False
        now = self._time()
        self._paused_total += now - self._pause_start
        self._pause_start = 0.0
        self._last_time = now
        self.paused = False
        self.status = self._running_status()
        logger.info("[SIM] Resumed at tick %d", self._tick)
        return True

    def reset(self) -> bool:
        """Drop the current run; the next ``start`` rebuilds every resident."""
        if self.state is None and not self._frames:
            return False
        self.running = False
        self.paused = False
        self.finished = False
        self.state = None
        self._frames = []
        self._tick = 0
        self._replay = None
        self.status = "City ready. Start the simulation to begin."
        logger.info("[SIM] Reset")
        return True

    def elapsed(self) -> float:
        now = self._pause_start if self.paused else self._time()
        return now - self._start_time - self._paused_total

    def tick(self) -> FrameSnapshot | None:
        """Advance one step; ``None`` when not running or paused."""
        if not self.running or self.paused or self.state is None:
            return None
        now = self._time()
        delta = now - self._last_time
        self._last_time = now
        elapsed = now - self._start_time - self._paused_total
        self._tick += 1

        if self.clock.finished(elapsed):
            frame = capture_frame(
                self.state,
                tick=self._tick,
                real_time=self.clock.day_seconds,
                sim_hour=self.clock.day_hours,
            )
            self._frames.append(frame)
            self.running = False
            self.finished = True
            self.status = "Simulation complete!"
            logger.info("[SIM] Complete after %d ticks", self._tick)
            return frame

        sim_hour = self.clock.sim_hour(elapsed)
        step_city(self.state, sim_hour, delta)
        frame = capture_frame(
            self.state, tick=self._tick, real_time=elapsed, sim_hour=sim_hour
        )
        self._frames.append(frame)
        return frame

    def run_to_completion(self, *, tick_seconds: float | None = None) -> int:
        """Drive a ``ManualTimeSource`` until the day ends; returns tick count."""
        if not isinstance(self._time, ManualTimeSource):
            raise TypeError("run_to_completion needs a ManualTimeSource")
        step = tick_seconds or self.config.tick_seconds
        ticks = 0
        while self.running and not self.paused:
            self._time.advance(step)
            self.tick()
            ticks += 1
        return ticks

    def replay(self) -> bool:
        if not self.finished or not self._frames:
            return False
        self._replay = ReplayCursor(self._frames)
        self._replay_start = self._time()
        self.status = "Replaying…"
        logger.info("[REPLAY] Replaying %d frames", len(self._frames))
        return True

    def replay_frame(self) -> FrameSnapshot | None:
        if self._replay is None:
            return None
        frame = self._replay.frame_at(self._time() - self._replay_start)
        if self._replay.done:
            self._replay = None
            self.status = "Replay complete!"
            logger.info("[REPLAY] Complete")
        return frame

    def itineraries(self) -> list[Itinerary]:
        if self.state is None:
            return []
        return [
            Itinerary(
                resident_id=resident.resident_id,
                label=resident.label,
                log=tuple(resident.log),
                path_history=tuple(resident.path_history),
            )
            for resident in self.state.residents.values()
        ]

    def _running_status(self) -> str:
        assert self.state is not None
        return (
            f"Simulation running — {len(self.state.residents)} residents, "
            f"{len(self.state.couriers)} deliveries"
        )
