"""Tail a JSONL run log and show the newest frame (Textual)."""

from __future__ import annotations

import threading
import time
from pathlib import Path

from rich.panel import Panel
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Static

from gridtown.render.replay_reader import parse_record
from gridtown.render.textual_app import GridtownApp
from gridtown.render.viewer import render_frame
from gridtown.sim.contracts import FrameSnapshot


class TailViewerScreen(Screen):
    CSS = """
    Screen {
        layout: vertical;
    }
    #tail-view {
        height: 1fr;
    }
    """

    def __init__(
        self,
        path: Path,
        *,
        poll_interval: float = 0.2,
        day_seconds: float = 180.0,
    ) -> None:
        super().__init__()
        self._path = path
        self._poll_interval = poll_interval
        self._day_seconds = day_seconds
        self._view: Static | None = None
        self._stop_event = threading.Event()

    def compose(self) -> ComposeResult:
        with Vertical(id="root"):
            yield Static(id="tail-view")

    def on_mount(self) -> None:
        self._view = self.query_one("#tail-view", Static)
        self._view.update(Panel(Text("Waiting for frames..."), title="Live Run"))
        thread = threading.Thread(target=self._tail_loop, daemon=True)
        thread.start()

    def on_unmount(self) -> None:
        self._stop_event.set()

    def _tail_loop(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.touch(exist_ok=True)
        with self._path.open("r", encoding="utf-8") as handle:
            handle.seek(0, 2)
            while not self._stop_event.is_set():
                line = handle.readline()
                if not line:
                    time.sleep(self._poll_interval)
                    continue
                frame = frame_from_line(line)
                if frame is not None:
                    self.app.call_from_thread(self._show_frame, frame)

    def _show_frame(self, frame: FrameSnapshot) -> None:
        if self._view:
            self._view.update(render_frame(frame, day_seconds=self._day_seconds))


def frame_from_line(line: str) -> FrameSnapshot | None:
    record = parse_record(line)
    if record is None or record.get("type") != "frame":
        return None
    payload = record.get("payload")
    if payload is None:
        return None
    return FrameSnapshot.model_validate(payload)


def tail_run_log(
    path: Path, *, poll_interval: float = 0.2, day_seconds: float = 180.0
) -> None:
    app = GridtownApp(
        TailViewerScreen(path, poll_interval=poll_interval, day_seconds=day_seconds),
        title="Gridtown Tail",
        sub_title=path.parent.name,
    )
    app.run()
