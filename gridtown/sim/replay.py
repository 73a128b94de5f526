"""Read-only playback over recorded frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from gridtown.sim.contracts import FrameSnapshot


@dataclass
class ReplayCursor:
    frames: Sequence[FrameSnapshot]
    index: int = 0

    def __post_init__(self) -> None:
        if not self.frames:
            raise ValueError("Replay needs at least one recorded frame.")
        self.frames = tuple(self.frames)

    @property
    def current(self) -> FrameSnapshot:
        return self.frames[self.index]

    @property
    def done(self) -> bool:
        return self.index >= len(self.frames) - 1

    def restart(self) -> None:
        self.index = 0

    def frame_at(self, elapsed: float) -> FrameSnapshot:
        """Latest frame recorded at or before ``elapsed`` real seconds.

        Playback only moves forward; rewind with ``restart``.
        """
        while (
            self.index < len(self.frames) - 1
            and self.frames[self.index + 1].real_time <= elapsed
        ):
            self.index += 1
        return self.frames[self.index]

    def step(self) -> FrameSnapshot:
        self.index = min(self.index + 1, len(self.frames) - 1)
        return self.frames[self.index]
