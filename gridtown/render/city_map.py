"""Render the city grid with residents, couriers and path highlights."""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from gridtown.render.viewer import STATE_STYLES
from gridtown.sim.city import CityGrid
from gridtown.sim.city_tiles import SYMBOL_FOR_TILE, TileKind
from gridtown.sim.contracts import CourierPhase, FrameSnapshot, Itinerary

TILE_STYLES = {
    TileKind.EMPTY: "grey15",
    TileKind.ROAD: "grey50",
    TileKind.RESIDENCE: "green4",
    TileKind.WORKPLACE: "steel_blue",
    TileKind.LEISURE: "medium_purple",
    TileKind.EATERY: "dark_orange",
}

# Highlight colour follows the tile class the walked route started from.
PATH_STYLES = {
    TileKind.RESIDENCE: "on dark_sea_green4",
    TileKind.WORKPLACE: "on sky_blue3",
    TileKind.LEISURE: "on medium_purple4",
    TileKind.EATERY: "on orange4",
}
DEFAULT_PATH_STYLE = "on grey37"

RESIDENT_GLYPH = "o"
SELECTED_GLYPH = "@"
COURIER_GLYPH = "c"
COURIER_STYLE = "bold dodger_blue1"
SELECTED_STYLE = "bold white"


def render_city_lines(
    grid: CityGrid,
    frame: FrameSnapshot | None = None,
    *,
    selected_resident_id: int | None = None,
    highlight: Itinerary | None = None,
) -> list[Text]:
    glyphs = [[SYMBOL_FOR_TILE[kind] for kind in row] for row in grid.tiles]
    styles = [[TILE_STYLES[kind] for kind in row] for row in grid.tiles]

    backgrounds: dict[tuple[int, int], str] = {}
    if highlight is not None:
        for segment in highlight.path_history:
            path_style = PATH_STYLES.get(segment.origin_tile, DEFAULT_PATH_STYLE)
            for cell in segment.cells:
                backgrounds[cell] = path_style

    if frame is not None:
        for resident in frame.residents:
            x, y = round(resident.x), round(resident.y)
            if not grid.in_bounds((x, y)):
                continue
            if resident.resident_id == selected_resident_id:
                glyphs[y][x] = SELECTED_GLYPH
                styles[y][x] = SELECTED_STYLE
            elif glyphs[y][x] != SELECTED_GLYPH:
                glyphs[y][x] = RESIDENT_GLYPH
                styles[y][x] = STATE_STYLES[resident.state]
        for courier in frame.couriers:
            if courier.phase in {CourierPhase.IDLE, CourierPhase.FINISHED}:
                continue
            x, y = round(courier.x), round(courier.y)
            if grid.in_bounds((x, y)):
                glyphs[y][x] = COURIER_GLYPH
                styles[y][x] = COURIER_STYLE

    lines: list[Text] = []
    for y, (row_glyphs, row_styles) in enumerate(zip(glyphs, styles)):
        line = Text()
        for x, (glyph, style) in enumerate(zip(row_glyphs, row_styles)):
            background = backgrounds.get((x, y))
            line.append(glyph, style=f"{style} {background}" if background else style)
        lines.append(line)
    return lines


def render_city_map(
    grid: CityGrid,
    frame: FrameSnapshot | None = None,
    *,
    selected_resident_id: int | None = None,
    highlight: Itinerary | None = None,
) -> RenderableType:
    lines = render_city_lines(
        grid,
        frame,
        selected_resident_id=selected_resident_id,
        highlight=highlight,
    )
    return Panel(Group(*lines), title="City")
