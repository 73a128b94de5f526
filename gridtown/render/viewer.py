"""Rich rendering for frames and resident itineraries."""

from __future__ import annotations

from collections import Counter

from rich.columns import Columns
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gridtown.sim.contracts import (
    CourierPhase,
    FrameSnapshot,
    Itinerary,
    VisibleState,
)
from gridtown.sim.schedule import format_sim_time

STATE_STYLES = {
    VisibleState.SLEEPING: "grey50",
    VisibleState.HOME: "bright_green",
    VisibleState.TRAVELING: "white",
    VisibleState.WORKING: "bright_red",
    VisibleState.LEISURE: "bright_magenta",
}


def format_time_display(real_time: float, sim_hour: float, *, day_seconds: float) -> str:
    real_minutes, real_seconds = divmod(int(real_time), 60)
    total_minutes, total_seconds = divmod(int(day_seconds), 60)
    return (
        f"Real: {real_minutes}:{real_seconds:02d} / "
        f"{total_minutes}:{total_seconds:02d}  |  "
        f"In-World: {format_sim_time(sim_hour)}"
    )


def render_frame(
    frame: FrameSnapshot, *, day_seconds: float = 180.0, status: str | None = None
) -> RenderableType:
    header = Text(
        format_time_display(frame.real_time, frame.sim_hour, day_seconds=day_seconds),
        style="bold",
    )
    parts: list[RenderableType] = [header]
    if status:
        parts.append(Text(status, style="italic"))
    layout = Columns(
        [
            Panel(Group(*parts, _render_state_counts(frame)), title="Simulation"),
            Panel(_render_couriers(frame), title="Deliveries"),
        ]
    )
    return layout


def render_itinerary(itinerary: Itinerary) -> RenderableType:
    table = Table(
        title=f"Resident {itinerary.label}", show_header=True, header_style="bold"
    )
    table.add_column("Event")
    table.add_column("Time")
    table.add_column("Location")
    for entry in itinerary.log:
        table.add_row(entry.kind.value, format_sim_time(entry.time), entry.location or "")
    if not itinerary.log:
        table.add_row("No activity recorded.", "-", "")
    return table


def _render_state_counts(frame: FrameSnapshot) -> RenderableType:
    table = Table(title="Residents", show_header=True, header_style="bold")
    table.add_column("State")
    table.add_column("Count", justify="right")
    counts = Counter(snapshot.state for snapshot in frame.residents)
    for state in VisibleState:
        table.add_row(
            Text(state.value, style=STATE_STYLES[state]), str(counts.get(state, 0))
        )
    return table


def _render_couriers(frame: FrameSnapshot) -> RenderableType:
    table = Table(title="Couriers", show_header=True, header_style="bold")
    table.add_column("For")
    table.add_column("Phase")
    table.add_column("Position")
    active = [
        courier
        for courier in frame.couriers
        if courier.phase not in {CourierPhase.IDLE, CourierPhase.FINISHED}
    ]
    for courier in active:
        table.add_row(
            f"#{courier.owner_id:03d}",
            courier.phase.value,
            f"({courier.x:.1f}, {courier.y:.1f})",
        )
    if not active:
        table.add_row("-", "None", "-")
    return table
