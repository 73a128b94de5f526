"""Road-network routing (unweighted BFS)."""

from __future__ import annotations

from collections import deque

from gridtown.sim.city import Cell, CityGrid
from gridtown.sim.city_tiles import is_walkable

# Expansion order fixes tie-breaking between equal-length routes.
NEIGHBOR_OFFSETS: tuple[Cell, ...] = (
    (0, -1),  # north
    (0, 1),  # south
    (-1, 0),  # west
    (1, 0),  # east
)


def find_route(grid: CityGrid, start: Cell, goal: Cell) -> list[Cell] | None:
    """Return the shortest hop route from ``start`` to ``goal`` inclusive.

    Only road tiles are traversed, except that ``goal`` itself is accepted
    whatever its tile class. ``None`` means the goal is unreachable.
    """
    if start == goal:
        return [start]

    queue: deque[Cell] = deque([start])
    came_from: dict[Cell, Cell | None] = {start: None}

    while queue:
        current = queue.popleft()
        for neighbor in _neighbors(grid, current, goal):
            if neighbor in came_from:
                continue
            came_from[neighbor] = current
            if neighbor == goal:
                return _reconstruct_route(came_from, neighbor)
            queue.append(neighbor)

    return None


class Router:
    """Grid-bound route lookups; counts calls so callers can audit usage."""

    def __init__(self, grid: CityGrid) -> None:
        self._grid = grid
        self.lookups = 0

    @property
    def grid(self) -> CityGrid:
        return self._grid

    def route(self, start: Cell, goal: Cell) -> list[Cell] | None:
        self.lookups += 1
        return find_route(self._grid, start, goal)


def _neighbors(grid: CityGrid, current: Cell, goal: Cell) -> list[Cell]:
    x, y = current
    candidates = [(x + dx, y + dy) for dx, dy in NEIGHBOR_OFFSETS]
    return [
        cell
        for cell in candidates
        if grid.in_bounds(cell)
        and (cell == goal or is_walkable(grid.tile_at(cell)))
    ]


def _reconstruct_route(came_from: dict[Cell, Cell | None], current: Cell) -> list[Cell]:
    route = [current]
    previous = came_from[current]
    while previous is not None:
        route.append(previous)
        previous = came_from[previous]
    route.reverse()
    return route
