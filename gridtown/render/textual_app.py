"""Textual host for Gridtown screens."""

from __future__ import annotations

from textual.app import App
from textual.screen import Screen


class GridtownApp(App):
    """Push one screen on mount; q quits."""

    BINDINGS = [("q", "quit", "Quit")]

    def __init__(
        self,
        screen: Screen,
        *,
        title: str = "Gridtown",
        sub_title: str | None = None,
    ) -> None:
        super().__init__()
        self._first_screen = screen
        self.title = title
        if sub_title:
            self.sub_title = sub_title

    def on_mount(self) -> None:
        self.push_screen(self._first_screen)
