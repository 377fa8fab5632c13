"""
draw.py - Tile, map and printable sheet rendering

Every export is an svgwrite Drawing built in memory; callers decide when
to save it. Positions passed around here are tile centers in hex units
and are only multiplied by the map scale when an element is created.
"""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np
import svgwrite

from errors import DataIntegrityError
from game import Game, MapInfo
from hexgrid import BORDER, SQRT3, Orientation, convert_coord, cube_to_position, local_to_screen, scale
from map_utils import Bounds, LayerManager, MapLayer, RotationConfig, TileLayer
from render_helpers import (
    city_circle_pos,
    draw_arrow,
    draw_barrier,
    draw_city,
    draw_city_contrast,
    draw_coordinate_labels,
    draw_hex_background,
    draw_hex_edge,
    draw_lawson,
    draw_path,
    draw_path_contrast,
    draw_revenue_track,
    draw_stop,
    draw_terrain,
    draw_text,
    draw_token,
)
from tiles import TileDefinition, TileSpec, sorted_names


# === Page Layout ===
TILES_PER_ROW = 4
TILES_PER_PAGE = 30
TILES_PER_COL = 6

A4_WIDTH = "210mm"
A4_HEIGHT = "297mm"
DEFINITIONS_ROW_HEIGHT_MM = 42
MANIFEST_ROW_HEIGHT_MM = 30

VERTICAL_TEXT_ANGLE = -30  # degrees; pointy-top hexes read along a flat edge


@dataclass
class RenderOptions:
    """Command line toggles that affect rendering."""
    verbose: bool = False
    debug_coordinates: bool = False


# === Tiles ===

def draw_tile(dwg, tile: TileSpec, pos, map_info: MapInfo):
    """
    Draw a single tile centered at pos (hex units).

    Returns:
        svgwrite group with one child group per non-empty layer, outline last
    """
    pos = np.asarray(pos, dtype=float)
    rotation = tile.orientation
    factor = scale(map_info)

    layers = LayerManager(dwg, use_ids=False)
    background = layers.register_layer("background", TileLayer.BACKGROUND)
    contrast = layers.register_layer("contrast", TileLayer.CONTRAST)
    terrain = layers.register_layer("terrain", TileLayer.TERRAIN)
    lawson = layers.register_layer("lawson", TileLayer.LAWSON)
    paths = layers.register_layer("paths", TileLayer.PATHS)
    stops = layers.register_layer("stops", TileLayer.STOPS)
    cities = layers.register_layer("cities", TileLayer.CITIES)
    arrows = layers.register_layer("arrows", TileLayer.ARROWS)
    text = layers.register_layer("text", TileLayer.TEXT)
    revenue_track = layers.register_layer("revenue-track", TileLayer.REVENUE_TRACK)
    outline = layers.register_layer("outline", TileLayer.OUTLINE)

    background.add(draw_hex_background(dwg, pos, map_info, tile.color))

    # White underlay so crossing track stays readable
    for path in tile.paths:
        contrast.add(draw_path_contrast(dwg, path, pos, rotation, map_info))
    for city in tile.cities:
        contrast.add(draw_city_contrast(dwg, city, pos, rotation, map_info))

    if tile.terrain is not None:
        terrain.add(draw_terrain(dwg, tile.terrain, pos, map_info))

    if tile.is_lawson:
        lawson.add(draw_lawson(dwg, pos, map_info))

    for path in tile.paths:
        paths.add(draw_path(dwg, path, pos, rotation, map_info))

    for stop in tile.stops:
        stops.add(draw_stop(dwg, stop, pos, tile, rotation, map_info))

    for city in tile.cities:
        cities.add(draw_city(dwg, city, pos, rotation, map_info))

    for arrow in tile.arrows:
        arrows.add(draw_arrow(dwg, arrow, pos, rotation, map_info))

    for spec in tile.text_spec:
        text_pos = factor * (local_to_screen(spec.position, rotation, map_info.orientation) + pos)
        label = draw_text(dwg, tile.get_text(spec.id), text_pos, spec.anchor, spec.size, spec.weight)
        if map_info.orientation is Orientation.VERTICAL:
            angle = VERTICAL_TEXT_ANGLE
            if spec.id == "number":
                angle += int(round(math.degrees(rotation)))
            label['transform'] = f"rotate({angle} {float(text_pos[0])} {float(text_pos[1])})"
        text.add(label)

    if tile.revenue_track is not None:
        revenue_track.add(draw_revenue_track(dwg, tile.revenue_track, pos, map_info))

    outline.add(draw_hex_edge(dwg, pos, map_info))

    return layers.assemble_into_group(dwg.g(class_="tile"))


# === Map ===

def page_layout(map_info: MapInfo) -> Tuple[Bounds, np.ndarray]:
    """
    Page bounds (hex units, border included) and the center of cell (0, 0).
    """
    if map_info.orientation is Orientation.HORIZONTAL:
        width = 0.3 * SQRT3 + map_info.width * 1.5
        height = (0.5 + map_info.height) * SQRT3
        offset = np.array([BORDER + 1.0, BORDER + SQRT3 / 2])
    else:
        width = (0.5 + map_info.width) * SQRT3
        height = 0.3 * SQRT3 + map_info.height * 1.5
        offset = np.array([BORDER + SQRT3 / 2, BORDER + 1.0])
    return Bounds(0.0, width, 0.0, height).expand(BORDER), offset


def cell_center(location: Tuple[int, int], map_info: MapInfo, offset) -> np.ndarray:
    """Center of a grid cell in hex units."""
    col, row = location
    return offset + cube_to_position(convert_coord(col, row, map_info.orientation), map_info.orientation)


def draw_map(game: Game, options: Optional[RenderOptions] = None, filename: Optional[str] = None):
    """
    Draw the map of a game: topmost tiles, barriers, tokens and the
    optional coordinate overlay.

    Raises:
        DataIntegrityError: a token refers to a location without a tile,
            a missing city or a missing circle
    """
    options = options or RenderOptions()
    map_info = game.map
    bounds, offset = page_layout(map_info)
    page_width, page_height = bounds.scaled(scale(map_info))

    dwg = svgwrite.Drawing(filename or f"{game.name}-map.svg", size=(float(page_width), float(page_height)))

    layers = LayerManager(dwg)
    tiles_layer = layers.register_layer("Tiles", MapLayer.TILES)
    barriers_layer = layers.register_layer("Barriers", MapLayer.BARRIERS)
    tokens_layer = layers.register_layer("Tokens", MapLayer.TOKENS)
    coordinates_layer = layers.register_layer("Coordinates", MapLayer.COORDINATES)

    tiles = game.top_tiles()
    for location, tile in tiles.items():
        if options.verbose:
            print(f"  Tile {tile.name} at {location}, rotation {tile.rotation}")
        tiles_layer.add(draw_tile(dwg, tile, cell_center(location, map_info, offset), map_info))

    for barrier in map_info.barriers:
        barriers_layer.add(draw_barrier(dwg, barrier.side, cell_center(barrier.location, map_info, offset), map_info))

    for location, tokens in game.tokens().items():
        tile = tiles.get(location)
        if tile is None:
            raise DataIntegrityError(f"Token {tokens[0].name} placed at {location}, which has no tile")
        center = cell_center(location, map_info, offset)
        for token in tokens:
            if not 0 <= token.station < len(tile.cities):
                raise DataIntegrityError(
                    f"Token {token.name} at {location}: tile {tile.name} has no city {token.station}")
            city = tile.cities[token.station]
            token_pos = city_circle_pos(city, token.circle, center, map_info, tile.orientation)
            g = draw_token(dwg, token.name, token.color, token.is_home, token_pos, map_info)
            if map_info.orientation is Orientation.VERTICAL:
                RotationConfig(VERTICAL_TEXT_ANGLE, *token_pos).apply(g)
            tokens_layer.add(g)

    if options.debug_coordinates:
        cells = [
            ((col, row), cell_center((col, row), map_info, offset))
            for row in range(map_info.height)
            for col in range(map_info.width)
        ]
        coordinates_layer.add(draw_coordinate_labels(dwg, map_info, cells))

    for layer in layers.get_layers_by_z_order():
        dwg.add(layer)
    return dwg


# === Printable sheets ===

def _grid_position(i: int) -> np.ndarray:
    return np.array([1.1 + 2.25 * (i % TILES_PER_ROW), 1.0 + 2.0 * (i // TILES_PER_ROW)])


def draw_tile_definitions(tile_definitions: Mapping[str, TileDefinition], filename: str = "definitions.svg"):
    """Catalog overview: every definition with its name, four per row."""
    print("Drawing tile definitions...")
    map_info = MapInfo()
    rows = math.ceil(len(tile_definitions) / TILES_PER_ROW)
    dwg = svgwrite.Drawing(filename, size=(A4_WIDTH, f"{rows * DEFINITIONS_ROW_HEIGHT_MM}mm"))

    g = dwg.g(id="definitions")
    for i, name in enumerate(sorted_names(tile_definitions)):
        pos = _grid_position(i)
        g.add(draw_tile(dwg, tile_definitions[name], pos, map_info))
        label_pos = scale(map_info) * (pos + np.array([-1.0, -0.7]))
        g.add(draw_text(dwg, name, label_pos, "start"))
    dwg.add(g)
    return dwg


def draw_tile_manifest(game: Game, filename: Optional[str] = None):
    """
    The tiles of a game in manifest order, each with the number still available.

    Raises:
        DataIntegrityError: a manifest tile has no amount
    """
    rows = math.ceil(len(game.manifest.tiles) / 3)
    dwg = svgwrite.Drawing(
        filename or f"{game.name}-manifest.svg",
        size=(A4_WIDTH, f"{rows * MANIFEST_ROW_HEIGHT_MM + 3}mm"),
    )
    remaining = game.manifest.remaining(game.log)

    g = dwg.g(id="manifest")
    for i, tile in enumerate(game.manifest.tiles):
        if tile.name not in remaining:
            raise DataIntegrityError(f"No tile amount found for {tile.name}")
        pos = _grid_position(i)
        g.add(draw_tile(dwg, tile, pos, game.map))
        label_pos = scale(game.map) * (pos + np.array([-1.0, -0.7]))
        g.add(draw_text(dwg, f"{remaining[tile.name]}×", label_pos, "start"))
    dwg.add(g)
    return dwg


def _new_sheet(game: Game, number: int, map_info: MapInfo, output_dir: Path):
    dwg = svgwrite.Drawing(str(output_dir / f"{game.name}-sheet-{number}.svg"), size=(A4_WIDTH, A4_HEIGHT))
    heading_pos = scale(map_info) * np.array([2.0, 0.5])
    dwg.add(draw_text(dwg, f"Tile sheet {number}", heading_pos, "start", size="200%"))
    return dwg


def draw_tile_sheets(game: Game, output_dir: Path = Path(".")) -> List:
    """
    Printable sheets holding every physical tile of the game.

    Tiles are repeated by their static amount (the log is ignored) and
    always drawn pointy-top, 30 to a page in columns of 6. No pages are
    produced for a game without tiles.

    Raises:
        DataIntegrityError: a manifest tile has no amount
    """
    map_info = game.map.with_orientation(Orientation.VERTICAL)
    amounts: Dict[str, int] = game.manifest.remaining()
    sheets = []
    drawn = 0
    for tile in game.manifest.tiles:
        if tile.name not in amounts:
            raise DataIntegrityError(f"No tile amount found for {tile.name}")
        for _ in range(amounts[tile.name]):
            if drawn % TILES_PER_PAGE == 0:
                sheets.append(_new_sheet(game, drawn // TILES_PER_PAGE, map_info, output_dir))
            col = (drawn % TILES_PER_PAGE) // TILES_PER_COL
            row = drawn % TILES_PER_COL
            pos = np.array([SQRT3 * (col + 1), 2 * row + 1.75 + col % 2])
            sheets[-1].add(draw_tile(sheets[-1], tile, pos, map_info))
            drawn += 1
    return sheets
