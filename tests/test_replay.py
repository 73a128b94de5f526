import pytest

from gridtown.sim.contracts import FrameSnapshot
from gridtown.sim.replay import ReplayCursor


def test_frame_at_picks_latest_recorded_frame() -> None:
    cursor = ReplayCursor(_frames())

    assert cursor.frame_at(0.0).tick == 1
    assert cursor.frame_at(1.2).tick == 2
    assert cursor.frame_at(1.9).tick == 2
    assert cursor.frame_at(2.0).tick == 3
    assert not cursor.done
    assert cursor.frame_at(99.0).tick == 4
    assert cursor.done


def test_frame_at_only_moves_forward() -> None:
    cursor = ReplayCursor(_frames())
    cursor.frame_at(2.5)

    assert cursor.frame_at(0.0).tick == 3

    cursor.restart()
    assert cursor.current.tick == 1


def test_step_stops_at_last_frame() -> None:
    cursor = ReplayCursor(_frames())

    ticks = [cursor.step().tick for _ in range(5)]

    assert ticks == [2, 3, 4, 4, 4]


def test_empty_replay_is_rejected() -> None:
    with pytest.raises(ValueError):
        ReplayCursor([])


def _frames() -> list[FrameSnapshot]:
    return [
        FrameSnapshot(tick=index + 1, real_time=float(index), sim_hour=index * 0.1)
        for index in range(4)
    ]
