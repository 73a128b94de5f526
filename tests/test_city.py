import random

import pytest

from gridtown.sim.city import city_to_lines, parse_city_map
from gridtown.sim.city_gen import MIN_OF_EACH, generate_city
from gridtown.sim.city_tiles import TileKind, is_walkable


def test_parse_city_map_registries() -> None:
    grid = parse_city_map(["H=W", "L=E"])

    assert (grid.width, grid.height) == (3, 2)
    assert grid.residences == [(0, 0)]
    assert grid.workplaces == [(2, 0)]
    assert grid.leisure_sites == [(0, 1)]
    assert grid.eateries == [(2, 1)]
    assert grid.tile_at((1, 0)) == TileKind.ROAD
    assert grid.tile_at((9, 9)) == TileKind.EMPTY
    assert grid.name_at((0, 0)) == "Residence (0, 0)"
    assert grid.name_at((1, 0)) is None
    assert grid.name_at(None) is None


def test_parse_city_map_keeps_given_names() -> None:
    grid = parse_city_map(["H=W"], names={(2, 0): "Apex Labs"})

    assert grid.name_at((2, 0)) == "Apex Labs"
    assert grid.name_at((0, 0)) == "Residence (0, 0)"


def test_parse_city_map_rejects_ragged_rows() -> None:
    with pytest.raises(ValueError):
        parse_city_map(["H=W", "=="])


def test_parse_city_map_rejects_unknown_symbols() -> None:
    with pytest.raises(ValueError):
        parse_city_map(["H?W"])


def test_city_to_lines_round_trip() -> None:
    lines = ["H.W.L", "=====", "E.H.W"]

    assert city_to_lines(parse_city_map(lines)) == lines


def test_generate_city_is_reproducible() -> None:
    first = generate_city(60, 40, rng=random.Random(11))
    second = generate_city(60, 40, rng=random.Random(11))

    assert first == second


def test_generated_buildings_touch_roads() -> None:
    grid = generate_city(60, 40, rng=random.Random(5))

    for kind in (TileKind.WORKPLACE, TileKind.LEISURE, TileKind.EATERY):
        assert len(grid.cells_of(kind)) >= MIN_OF_EACH
    for y, row in enumerate(grid.tiles):
        for x, kind in enumerate(row):
            if kind in (TileKind.EMPTY, TileKind.ROAD):
                continue
            neighbors = [(x, y - 1), (x, y + 1), (x - 1, y), (x + 1, y)]
            assert any(is_walkable(grid.tile_at(cell)) for cell in neighbors)
            assert grid.name_at((x, y))


def test_generated_addresses_are_unique() -> None:
    grid = generate_city(60, 40, rng=random.Random(3))

    addresses = [grid.name_at(cell) for cell in grid.residences]

    assert len(addresses) == len(set(addresses))


def test_generate_city_rejects_tiny_sizes() -> None:
    with pytest.raises(ValueError):
        generate_city(2, 2, rng=random.Random(0))
