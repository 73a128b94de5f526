"""Read-only city grid consumed by the simulation core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from gridtown.sim.city_tiles import (
    BUILDING_TILES,
    SYMBOL_FOR_TILE,
    TILE_SYMBOLS,
    TileKind,
)

Cell = tuple[int, int]


@dataclass(frozen=True)
class CityGrid:
    """Fixed-size tile grid plus the display names of its buildings.

    Cells are ``(x, y)`` tuples; rows are indexed by ``y``.
    """

    width: int
    height: int
    tiles: tuple[tuple[TileKind, ...], ...]
    names: dict[Cell, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if len(self.tiles) != self.height:
            raise ValueError("tile rows must match grid height")
        for row in self.tiles:
            if len(row) != self.width:
                raise ValueError("tile columns must match grid width")

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, cell: Cell) -> TileKind:
        if not self.in_bounds(cell):
            return TileKind.EMPTY
        x, y = cell
        return self.tiles[y][x]

    def name_at(self, cell: Cell | None) -> str | None:
        if cell is None:
            return None
        return self.names.get(cell)

    def cells_of(self, kind: TileKind) -> list[Cell]:
        return [
            (x, y)
            for y, row in enumerate(self.tiles)
            for x, tile in enumerate(row)
            if tile == kind
        ]

    @property
    def residences(self) -> list[Cell]:
        return self.cells_of(TileKind.RESIDENCE)

    @property
    def workplaces(self) -> list[Cell]:
        return self.cells_of(TileKind.WORKPLACE)

    @property
    def leisure_sites(self) -> list[Cell]:
        return self.cells_of(TileKind.LEISURE)

    @property
    def eateries(self) -> list[Cell]:
        return self.cells_of(TileKind.EATERY)


def parse_city_map(
    lines: Iterable[str], *, names: dict[Cell, str] | None = None
) -> CityGrid:
    rows = [line for line in lines if line.strip()]
    if not rows:
        raise ValueError("City map must contain at least one row.")
    width = len(rows[0])
    tiles: list[tuple[TileKind, ...]] = []
    for y, line in enumerate(rows):
        if len(line) != width:
            raise ValueError(f"City map row {y} has width {len(line)}, expected {width}.")
        row: list[TileKind] = []
        for x, symbol in enumerate(line):
            kind = TILE_SYMBOLS.get(symbol)
            if kind is None:
                raise ValueError(f"Unknown map symbol {symbol!r} at ({x}, {y}).")
            row.append(kind)
        tiles.append(tuple(row))

    resolved = dict(names or {})
    for y, row in enumerate(tiles):
        for x, kind in enumerate(row):
            if kind in BUILDING_TILES and (x, y) not in resolved:
                resolved[(x, y)] = _default_name(kind, (x, y))
    return CityGrid(width=width, height=len(tiles), tiles=tuple(tiles), names=resolved)


def _default_name(kind: TileKind, cell: Cell) -> str:
    label = kind.name.replace("_", " ").title()
    return f"{label} ({cell[0]}, {cell[1]})"


def city_to_lines(grid: CityGrid) -> list[str]:
    return [
        "".join(SYMBOL_FOR_TILE[kind] for kind in row) for row in grid.tiles
    ]
