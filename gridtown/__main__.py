"""Module entry point for `python -m gridtown`."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from gridtown.app import run_simulation, run_simulation_with_viewer
from gridtown.db.replay_log import RUN_LOG_NAME
from gridtown.render.live_tail import tail_run_log
from gridtown.render.replay_player import run_replay_player
from gridtown.render.replay_reader import read_header, read_itineraries
from gridtown.render.viewer import render_itinerary
from gridtown.sim.config import load_sim_config
from gridtown.sim.world_state import PopulationError

DEFAULT_REPLAY_DIR = Path("replay")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run one Gridtown day.")
    parser.add_argument(
        "--view",
        action="store_true",
        help="Tail the latest run log and render live frames.",
    )
    parser.add_argument(
        "--main-view",
        action="store_true",
        help="Run the day in real time with the city map.",
    )
    parser.add_argument(
        "--replay",
        type=Path,
        default=None,
        help="Replay a saved run folder.",
    )
    parser.add_argument(
        "--run-folder",
        type=Path,
        default=None,
        help="Run folder to view or inspect (defaults to latest).",
    )
    parser.add_argument(
        "--replay-dir",
        type=Path,
        default=DEFAULT_REPLAY_DIR,
        help="Base directory for run folders.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for city generation and population.",
    )
    parser.add_argument(
        "--itinerary",
        type=int,
        default=None,
        metavar="ID",
        help="Show one resident's itinerary (and highlight it during replay).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    console = Console()

    if args.view:
        run_folder = _require_run_folder(args.run_folder, args.replay_dir)
        log_path = run_folder / RUN_LOG_NAME
        day_seconds = 180.0
        if log_path.exists():
            day_seconds = float(read_header(log_path).get("day_seconds", day_seconds))
        tail_run_log(log_path, day_seconds=day_seconds)
        return

    if args.replay is not None:
        if not (args.replay / RUN_LOG_NAME).exists():
            raise SystemExit(f"No run log in {args.replay}.")
        run_replay_player(
            args.replay, selected_resident_id=args.itinerary, console=console
        )
        return

    if args.itinerary is not None and args.run_folder is not None:
        _show_itinerary(args.run_folder, args.itinerary, console)
        return

    config = load_sim_config()
    try:
        if args.main_view:
            created_run = run_simulation_with_viewer(
                args.replay_dir,
                config=config,
                seed=args.seed,
                selected_resident_id=args.itinerary,
                console=console,
            )
        else:
            created_run = run_simulation(args.replay_dir, config=config, seed=args.seed)
    except PopulationError as exc:
        raise SystemExit(str(exc)) from exc
    console.print(f"Run saved to {created_run}")
    if args.itinerary is not None:
        _show_itinerary(created_run, args.itinerary, console)


def _latest_run_folder(base_dir: Path) -> Path | None:
    if not base_dir.exists():
        return None
    run_dirs = [path for path in base_dir.iterdir() if path.is_dir()]
    if not run_dirs:
        return None
    return sorted(run_dirs)[-1]


def _require_run_folder(run_folder: Path | None, base_dir: Path) -> Path:
    folder = run_folder or _latest_run_folder(base_dir)
    if folder is None:
        raise SystemExit("No run folder found. Run a simulation first.")
    return folder


def _show_itinerary(run_folder: Path, resident_id: int, console: Console) -> None:
    log_path = run_folder / RUN_LOG_NAME
    if not log_path.exists():
        raise SystemExit(f"No run log in {run_folder}.")
    for itinerary in read_itineraries(log_path):
        if itinerary.resident_id == resident_id:
            console.print(render_itinerary(itinerary))
            return
    raise SystemExit(f"No resident #{resident_id:03d} in {run_folder}.")


if __name__ == "__main__":
    main()
