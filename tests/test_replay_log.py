import json
from pathlib import Path

import pytest

from gridtown.app import run_simulation
from gridtown.db.replay_log import (
    RUN_LOG_NAME,
    append_frame,
    append_itineraries,
    city_metadata,
    create_run_folder,
    write_header,
)
from gridtown.render.replay_reader import (
    read_city,
    read_frames,
    read_header,
    read_itineraries,
)
from gridtown.sim.city import parse_city_map
from gridtown.sim.config import SimConfig
from gridtown.sim.contracts import EventKind, FrameSnapshot, Itinerary, LogEntry
from gridtown.sim.world_state import PopulationError


def test_run_log_header_frames_and_itineraries(tmp_path: Path) -> None:
    run_dir, log_path = create_run_folder(tmp_path, timestamp="2026-01-31T15-50-00Z")
    grid = parse_city_map(["H=W"], names={(2, 0): "Apex Labs"})
    write_header(
        log_path, metadata={"run_id": run_dir.name, "city": city_metadata(grid)}
    )
    append_frame(log_path, FrameSnapshot(tick=1, real_time=0.1, sim_hour=0.01))
    append_itineraries(
        log_path,
        [
            Itinerary(
                resident_id=0,
                label="#000",
                log=(LogEntry(kind=EventKind.WAKE, time=6.0),),
            )
        ],
    )

    with log_path.open("r", encoding="utf-8") as handle:
        records = [json.loads(line) for line in handle]

    assert log_path.name == RUN_LOG_NAME
    assert run_dir.name == "2026-01-31T15-50-00Z"
    assert [record["type"] for record in records] == ["header", "frame", "itinerary"]
    assert records[0]["metadata"]["run_id"] == run_dir.name
    assert records[1]["payload"]["tick"] == 1
    assert records[2]["payload"]["log"][0]["kind"] == "Wake up"
    assert read_city(log_path) == grid


def test_reader_skips_header_and_bad_lines(tmp_path: Path) -> None:
    _, log_path = create_run_folder(tmp_path, timestamp="2026-01-31T15-51-00Z")
    write_header(log_path, metadata={"run_id": "run"})
    with log_path.open("a", encoding="utf-8") as handle:
        handle.write("not json\n")
    append_frame(log_path, FrameSnapshot(tick=2, real_time=0.2, sim_hour=0.02))

    frames = list(read_frames(log_path))

    assert [frame.tick for frame in frames] == [2]
    assert list(read_itineraries(log_path)) == []
    assert read_city(log_path) is None


def test_run_simulation_writes_replayable_log(tmp_path: Path) -> None:
    grid = _city()
    config = SimConfig(day_seconds=6.0, tick_seconds=0.1)

    run_dir = run_simulation(tmp_path, config=config, seed=3, grid=grid)

    log_path = run_dir / RUN_LOG_NAME
    header = read_header(log_path)
    frames = list(read_frames(log_path))
    itineraries = list(read_itineraries(log_path))
    assert header["seed"] == 3
    assert header["day_seconds"] == 6.0
    assert header["residents"] == len(grid.residences)
    assert read_city(log_path) == grid
    assert frames[-1].sim_hour == 24.0
    assert frames[-1].real_time == 6.0
    assert [frame.tick for frame in frames] == list(range(1, len(frames) + 1))
    assert sorted(itinerary.resident_id for itinerary in itineraries) == list(
        range(len(grid.residences))
    )
    assert all(itinerary.log[0].kind == EventKind.WAKE for itinerary in itineraries)


def test_run_simulation_refuses_city_without_workplaces(tmp_path: Path) -> None:
    with pytest.raises(PopulationError):
        run_simulation(tmp_path, grid=parse_city_map(["H=L"]), seed=1)

    assert list(tmp_path.iterdir()) == []


def _city():
    return parse_city_map(
        [
            "H.H.W.L.E",
            "=========",
            "H.W.H.E.L",
        ]
    )
