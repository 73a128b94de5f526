"""Route-following movement shared by residents and couriers."""

from __future__ import annotations

from dataclasses import dataclass

from gridtown.sim.city import Cell


@dataclass
class Mover:
    x: float
    y: float
    route: list[Cell] | None = None
    route_index: int = 0
    progress: float = 0.0

    @classmethod
    def at(cls, cell: Cell) -> "Mover":
        return cls(x=float(cell[0]), y=float(cell[1]))

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def in_transit(self) -> bool:
        return self.route is not None and len(self.route) > 1


def current_cell(mover: Mover) -> Cell:
    return (round(mover.x), round(mover.y))


def begin_route(mover: Mover, route: list[Cell]) -> None:
    mover.route = route
    mover.route_index = 0
    mover.progress = 0.0


def clear_route(mover: Mover) -> None:
    mover.route = None
    mover.route_index = 0
    mover.progress = 0.0


def advance_along_route(mover: Mover, speed: float, delta_seconds: float) -> bool:
    """Move ``speed`` tiles per real second; return True once the route is done."""
    route = mover.route
    if not route or len(route) <= 1:
        if route:
            mover.x, mover.y = float(route[-1][0]), float(route[-1][1])
        clear_route(mover)
        return True

    mover.progress += speed * delta_seconds
    last_index = len(route) - 1
    while mover.progress >= 1 and mover.route_index < last_index:
        mover.route_index += 1
        mover.progress -= 1

    if mover.route_index >= last_index:
        end = route[-1]
        mover.x, mover.y = float(end[0]), float(end[1])
        clear_route(mover)
        return True

    current = route[mover.route_index]
    following = route[mover.route_index + 1]
    t = min(mover.progress, 1.0)
    mover.x = current[0] + (following[0] - current[0]) * t
    mover.y = current[1] + (following[1] - current[1]) * t
    return False
