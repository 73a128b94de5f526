"""Data contracts exposed by the simulation core."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gridtown.sim.city_tiles import TileKind


class VisibleState(str, Enum):
    SLEEPING = "sleeping"
    HOME = "home"
    TRAVELING = "traveling"
    WORKING = "working"
    LEISURE = "leisure"


class CourierPhase(str, Enum):
    IDLE = "idle"
    EN_ROUTE = "en_route"
    AT_DROP_OFF = "at_drop_off"
    RETURNING = "returning"
    FINISHED = "finished"


class EventKind(str, Enum):
    WAKE = "Wake up"
    LEFT_HOME = "Left home"
    ARRIVED_WORK = "Arrived work"
    ORDERED_DELIVERY = "Ordered delivery"
    DELIVERY_RECEIVED = "Delivery received"
    LEFT_FOR_LUNCH = "Left for lunch"
    ARRIVED_EATERY = "Arrived eatery"
    LEFT_EATERY = "Left eatery"
    LEFT_EATERY_LATE = "Left eatery (late)"
    RETURNED_TO_WORK = "Returned to work"
    LEFT_WORK = "Left work"
    ARRIVED_HOME = "Arrived home"
    ARRIVED_LEISURE = "Arrived leisure"
    LEFT_LEISURE = "Left leisure"
    WENT_TO_SLEEP = "Went to sleep"


class LogEntry(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: EventKind
    time: float
    location: str | None = None


class PathSegment(BaseModel):
    """A walked route plus the tile class it started from (for highlighting)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    cells: tuple[tuple[int, int], ...]
    origin_tile: TileKind

    @model_validator(mode="after")
    def validate_cells(self) -> "PathSegment":
        if len(self.cells) < 2:
            raise ValueError("path segment needs at least two cells")
        return self


class ResidentSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    resident_id: int
    x: float
    y: float
    state: VisibleState


class CourierSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    owner_id: int
    x: float
    y: float
    phase: CourierPhase


class FrameSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    tick: int
    real_time: float
    sim_hour: float
    residents: tuple[ResidentSnapshot, ...] = Field(default_factory=tuple)
    couriers: tuple[CourierSnapshot, ...] = Field(default_factory=tuple)


class Itinerary(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    resident_id: int
    label: str
    log: tuple[LogEntry, ...] = Field(default_factory=tuple)
    path_history: tuple[PathSegment, ...] = Field(default_factory=tuple)
