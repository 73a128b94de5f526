"""Procedural city generation: a road lattice lined with buildings."""

from __future__ import annotations

import logging
import random

from gridtown.sim.city import Cell, CityGrid
from gridtown.sim.city_tiles import TileKind
from gridtown.sim.names import NameGenerator

logger = logging.getLogger("gridtown.sim.city_gen")

# Cumulative thresholds; anything above the last one stays empty.
BUILDING_ODDS: list[tuple[float, TileKind]] = [
    (0.45, TileKind.RESIDENCE),
    (0.65, TileKind.WORKPLACE),
    (0.80, TileKind.LEISURE),
    (0.88, TileKind.EATERY),
]

MIN_OF_EACH = 2
MIN_RESIDENCES_KEPT = 4


def generate_city(width: int, height: int, *, rng: random.Random) -> CityGrid:
    if width < 3 or height < 3:
        raise ValueError("City must be at least 3x3 tiles.")
    grid = [[TileKind.EMPTY] * width for _ in range(height)]
    names: dict[Cell, str] = {}
    namer = NameGenerator(rng)

    for y in _road_lines(height, rng):
        for x in range(width):
            grid[y][x] = TileKind.ROAD
    for x in _road_lines(width, rng):
        for y in range(height):
            grid[y][x] = TileKind.ROAD

    placed: dict[TileKind, list[Cell]] = {kind: [] for _, kind in BUILDING_ODDS}
    for y in range(height):
        for x in range(width):
            if grid[y][x] != TileKind.EMPTY or not _next_to_road(grid, x, y):
                continue
            kind = _pick_building(rng.random())
            if kind is None:
                continue
            grid[y][x] = kind
            placed[kind].append((x, y))
            names[(x, y)] = namer.name_for(kind)

    residences = placed[TileKind.RESIDENCE]
    for kind in (TileKind.WORKPLACE, TileKind.LEISURE, TileKind.EATERY):
        while len(placed[kind]) < MIN_OF_EACH and len(residences) > MIN_RESIDENCES_KEPT:
            x, y = residences.pop()
            grid[y][x] = kind
            placed[kind].append((x, y))
            names[(x, y)] = namer.name_for(kind)

    logger.debug(
        "[CITY] Generated %dx%d city: %d residences, %d workplaces, %d leisure, %d eateries",
        width,
        height,
        len(residences),
        len(placed[TileKind.WORKPLACE]),
        len(placed[TileKind.LEISURE]),
        len(placed[TileKind.EATERY]),
    )
    return CityGrid(
        width=width,
        height=height,
        tiles=tuple(tuple(row) for row in grid),
        names=names,
    )


def _road_lines(extent: int, rng: random.Random) -> list[int]:
    lines: list[int] = []
    current = rng.randint(1, 3)
    while current < extent - 1:
        lines.append(current)
        current += rng.randint(5, 8)
    return lines


def _pick_building(roll: float) -> TileKind | None:
    for threshold, kind in BUILDING_ODDS:
        if roll < threshold:
            return kind
    return None


def _next_to_road(grid: list[list[TileKind]], x: int, y: int) -> bool:
    height = len(grid)
    width = len(grid[0])
    for dx, dy in ((-1, 0), (1, 0), (0, -1), (0, 1)):
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height and grid[ny][nx] == TileKind.ROAD:
            return True
    return False
