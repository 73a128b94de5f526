"""Replay a saved run in the terminal."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from rich.console import Console, Group
from rich.live import Live

from gridtown.db.replay_log import RUN_LOG_NAME
from gridtown.render.city_map import render_city_map
from gridtown.render.replay_reader import (
    read_city,
    read_frames,
    read_header,
    read_itineraries,
)
from gridtown.render.viewer import render_frame, render_itinerary
from gridtown.sim.contracts import FrameSnapshot, Itinerary
from gridtown.sim.replay import ReplayCursor

logger = logging.getLogger("gridtown.render.replay_player")


def load_replay_frames(log_path: Path) -> list[FrameSnapshot]:
    return list(read_frames(log_path))


def run_replay_player(
    run_folder: Path,
    *,
    speed: float = 1.0,
    selected_resident_id: int | None = None,
    console: Console | None = None,
) -> None:
    log_path = run_folder / RUN_LOG_NAME
    frames = load_replay_frames(log_path)
    if not frames:
        logger.warning("[REPLAY] No frames in %s", log_path)
        return
    grid = read_city(log_path)
    day_seconds = float(read_header(log_path).get("day_seconds", 180.0))
    highlight = _find_itinerary(log_path, selected_resident_id)
    cursor = ReplayCursor(frames)
    console = console or Console()
    started = time.monotonic()

    with Live(console=console, auto_refresh=False, screen=True) as live:
        try:
            while True:
                frame = cursor.frame_at((time.monotonic() - started) * speed)
                parts = []
                if grid is not None:
                    parts.append(
                        render_city_map(
                            grid,
                            frame,
                            selected_resident_id=selected_resident_id,
                            highlight=highlight,
                        )
                    )
                parts.append(render_frame(frame, day_seconds=day_seconds))
                live.update(Group(*parts), refresh=True)
                if cursor.done:
                    break
                time.sleep(0.05)
        except KeyboardInterrupt:
            return
    if highlight is not None:
        console.print(render_itinerary(highlight))


def _find_itinerary(log_path: Path, resident_id: int | None) -> Itinerary | None:
    if resident_id is None:
        return None
    for itinerary in read_itineraries(log_path):
        if itinerary.resident_id == resident_id:
            return itinerary
    return None
