"""Application entry for running one simulated day."""

from __future__ import annotations

import logging
import random
import time
from pathlib import Path

from rich.console import Console, Group
from rich.live import Live

from gridtown.db.replay_log import (
    append_frame,
    append_itineraries,
    city_metadata,
    create_run_folder,
    write_header,
)
from gridtown.render.city_map import render_city_map
from gridtown.render.viewer import render_frame
from gridtown.sim.city import CityGrid
from gridtown.sim.city_gen import generate_city
from gridtown.sim.config import SimConfig, load_sim_config
from gridtown.sim.controller import ManualTimeSource, SimulationController
from gridtown.sim.world_state import PopulationError

logger = logging.getLogger("gridtown.app")


def run_simulation(
    base_dir: Path,
    *,
    config: SimConfig | None = None,
    seed: int | None = None,
    grid: CityGrid | None = None,
) -> Path:
    config = config or load_sim_config()
    seed = seed if seed is not None else config.seed
    grid = grid or generate_city(
        config.city_width, config.city_height, rng=random.Random(seed)
    )
    controller = SimulationController(
        grid, config=config, seed=seed, time_source=ManualTimeSource()
    )
    if not controller.start():
        raise PopulationError(controller.status)

    run_dir, log_path = create_run_folder(base_dir)
    _write_run_header(log_path, run_dir, controller, seed)
    ticks = controller.run_to_completion()
    for frame in controller.frames:
        append_frame(log_path, frame)
    append_itineraries(log_path, controller.itineraries())
    logger.info(
        "[RUN] Saved %d frames (%d ticks) to %s", len(controller.frames), ticks, run_dir
    )
    return run_dir


def run_simulation_with_viewer(
    base_dir: Path,
    *,
    config: SimConfig | None = None,
    seed: int | None = None,
    selected_resident_id: int | None = None,
    console: Console | None = None,
) -> Path:
    config = config or load_sim_config()
    seed = seed if seed is not None else config.seed
    grid = generate_city(config.city_width, config.city_height, rng=random.Random(seed))
    controller = SimulationController(grid, config=config, seed=seed)
    if not controller.start():
        raise PopulationError(controller.status)

    run_dir, log_path = create_run_folder(base_dir)
    _write_run_header(log_path, run_dir, controller, seed)
    console = console or Console()
    with Live(console=console, auto_refresh=False, screen=True) as live:
        try:
            while controller.running:
                frame = controller.tick()
                if frame is None:
                    break
                append_frame(log_path, frame)
                live.update(
                    Group(
                        render_city_map(
                            grid, frame, selected_resident_id=selected_resident_id
                        ),
                        render_frame(
                            frame,
                            day_seconds=config.day_seconds,
                            status=controller.status,
                        ),
                    ),
                    refresh=True,
                )
                time.sleep(config.tick_seconds)
        except KeyboardInterrupt:
            logger.info("[RUN] Interrupted at %.1fs", controller.elapsed())
    append_itineraries(log_path, controller.itineraries())
    return run_dir


def _write_run_header(
    log_path: Path, run_dir: Path, controller: SimulationController, seed: int | None
) -> None:
    state = controller.state
    assert state is not None
    write_header(
        log_path,
        metadata={
            "run_id": run_dir.name,
            "created_at": run_dir.name,
            "seed": seed,
            "residents": len(state.residents),
            "couriers": len(state.couriers),
            "day_seconds": controller.config.day_seconds,
            "city": city_metadata(controller.grid),
        },
    )
