"""Simulation core: city grid, routing, residents, couriers and the tick driver."""

from gridtown.sim.city import Cell, CityGrid, parse_city_map
from gridtown.sim.city_gen import generate_city
from gridtown.sim.city_tiles import TileKind
from gridtown.sim.config import SimConfig, load_sim_config
from gridtown.sim.contracts import (
    CourierPhase,
    CourierSnapshot,
    EventKind,
    FrameSnapshot,
    Itinerary,
    LogEntry,
    PathSegment,
    ResidentSnapshot,
    VisibleState,
)
from gridtown.sim.controller import ManualTimeSource, SimulationController
from gridtown.sim.courier import Courier, advance_courier, build_courier
from gridtown.sim.pathfinding import Router, find_route
from gridtown.sim.replay import ReplayCursor
from gridtown.sim.resident import (
    LEGAL_TRANSITIONS,
    Resident,
    ResidentPhase,
    advance_resident,
    build_resident,
)
from gridtown.sim.schedule import Schedule, build_schedule, format_sim_time
from gridtown.sim.tick_loop import SimClock, capture_frame, run_day, step_city
from gridtown.sim.world_state import CityState, PopulationError, build_population

__all__ = [
    "Cell",
    "CityGrid",
    "CityState",
    "Courier",
    "CourierPhase",
    "CourierSnapshot",
    "EventKind",
    "FrameSnapshot",
    "Itinerary",
    "LEGAL_TRANSITIONS",
    "LogEntry",
    "ManualTimeSource",
    "PathSegment",
    "PopulationError",
    "ReplayCursor",
    "Resident",
    "ResidentPhase",
    "ResidentSnapshot",
    "Router",
    "Schedule",
    "SimClock",
    "SimConfig",
    "SimulationController",
    "TileKind",
    "VisibleState",
    "advance_courier",
    "advance_resident",
    "build_courier",
    "build_population",
    "build_resident",
    "build_schedule",
    "capture_frame",
    "find_route",
    "format_sim_time",
    "generate_city",
    "load_sim_config",
    "parse_city_map",
    "run_day",
    "step_city",
]
