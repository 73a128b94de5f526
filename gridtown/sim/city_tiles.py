"""Shared tile definitions for city grids."""

from __future__ import annotations

from enum import IntEnum


class TileKind(IntEnum):
    EMPTY = 0
    ROAD = 1
    RESIDENCE = 2
    WORKPLACE = 3
    LEISURE = 4
    EATERY = 5


TILE_SYMBOLS: dict[str, TileKind] = {
    ".": TileKind.EMPTY,
    "=": TileKind.ROAD,
    "H": TileKind.RESIDENCE,
    "W": TileKind.WORKPLACE,
    "L": TileKind.LEISURE,
    "E": TileKind.EATERY,
}

SYMBOL_FOR_TILE: dict[TileKind, str] = {
    kind: symbol for symbol, kind in TILE_SYMBOLS.items()
}

BUILDING_TILES: set[TileKind] = {
    TileKind.RESIDENCE,
    TileKind.WORKPLACE,
    TileKind.LEISURE,
    TileKind.EATERY,
}

WALKABLE_TILES: set[TileKind] = {TileKind.ROAD}


def is_walkable(kind: TileKind) -> bool:
    return kind in WALKABLE_TILES
