"""
Rendering helper functions for tile and map SVG generation.

Each function builds the svgwrite element(s) for one tile or map feature.
Positions come in as a tile center in hex units; helpers rotate and project
tile-local vectors through the map's basis and scale them to pixels.
"""

import math
from typing import List, Optional, Tuple

import numpy as np
from shapely.geometry import MultiPoint

from errors import DataIntegrityError
from hexgrid import (
    CORNER_VECTORS,
    EDGE_VECTORS,
    TOKEN_RADIUS,
    circle_offsets,
    edge_corners,
    get_basis,
    hex_polygon,
    local_to_screen,
    rotate,
    scale,
)
from map_utils import RotationConfig
from tiles import TILE_COLORS, City, Path, Stop, Terrain, Arrow, RevenueTrack


# === SVG Style Constants (sizes in hex units) ===
TRACK_COLOR = "#000000"
TRACK_WIDTH = 0.1
CONTRAST_COLOR = "#ffffff"
CONTRAST_WIDTH = 0.2
CITY_CONTRAST_PAD = 0.05

HEX_STROKE_COLOR = "#000000"
HEX_STROKE_WIDTH = 0.02

LINE_WIDTH = 0.015            # outlines of cities, bubbles, boxes
STOP_RADIUS = 0.1
REVENUE_RADIUS = 0.14
REVENUE_FONT_SIZE = 0.16
LAWSON_RADIUS = 0.1

SHARP_RADIUS = 0.5            # around the corner shared by adjacent edges
GENTLE_RADIUS = 1.5           # around the center of the hex beyond the middle edge

TERRAIN_COLORS = {
    "mountain": "#8b4513",
    "hill": "#b5651d",
    "water": "#4a90d9",
    "swamp": "#5f9ea0",
    "forest": "#228b22",
}
TERRAIN_FONT_SIZE = 0.18

ARROW_COLOR = "#000000"
ARROW_LENGTH = 0.2
ARROW_WIDTH = 0.2

REVENUE_BOX_WIDTH = 0.32
REVENUE_BOX_HEIGHT = 0.24

BARRIER_COLOR = "#003399"
BARRIER_WIDTH = 0.12

TOKEN_FONT_SIZE = 0.14
TOKEN_HOME_DASH = "3,2"

COORD_FONT_SIZE = 0.2
COORD_FONT_COLOR = "#666666"
AXIS_COLORS = ("#cc0000", "#00aa00", "#0000cc")


def _pt(vector) -> Tuple[float, float]:
    return (float(vector[0]), float(vector[1]))


def screen_point(local, pos, rotation: float, map_info) -> Tuple[float, float]:
    """Pixel position of a tile-local vector on a tile centered at pos (hex units)."""
    return _pt(scale(map_info) * (local_to_screen(local, rotation, map_info.orientation) + pos))


# === Hex ===

def hex_points(pos, map_info) -> List[Tuple[float, float]]:
    """Pixel corners of the hex centered at pos."""
    poly = hex_polygon(pos, map_info.orientation)
    factor = scale(map_info)
    return [(float(x * factor), float(y * factor)) for x, y in list(poly.exterior.coords)[:-1]]


def draw_hex_background(dwg, pos, map_info, color: str):
    return dwg.polygon(points=hex_points(pos, map_info), fill=TILE_COLORS[color], stroke="none")


def draw_hex_edge(dwg, pos, map_info):
    return dwg.polygon(
        points=hex_points(pos, map_info),
        fill="none",
        stroke=HEX_STROKE_COLOR,
        stroke_width=HEX_STROKE_WIDTH * scale(map_info),
    )


# === Track ===

def _arc_center(path: Path) -> Optional[Tuple[np.ndarray, float]]:
    """Local center and radius of a curved path, or None when it is drawn straight."""
    if path.end is None:
        return None
    distance = (path.end - path.start) % 6
    if path.kind == "sharp" and distance in (1, 5):
        first = path.start if distance == 1 else path.end
        return CORNER_VECTORS[(5 + first) % 6], SHARP_RADIUS
    if path.kind == "gentle" and distance in (2, 4):
        first = path.start if distance == 2 else path.end
        return 2 * EDGE_VECTORS[(first + 1) % 6], GENTLE_RADIUS
    return None


def path_data(path: Path, pos, rotation: float, map_info) -> str:
    """SVG path data for a track segment."""
    start = screen_point(EDGE_VECTORS[path.start], pos, rotation, map_info)
    end_local = EDGE_VECTORS[path.end] if path.end is not None else np.zeros(3)
    end = screen_point(end_local, pos, rotation, map_info)

    arc = _arc_center(path)
    if arc is None:
        return f"M {start[0]} {start[1]} L {end[0]} {end[1]}"

    center_local, radius = arc
    cx, cy = screen_point(center_local, pos, rotation, map_info)
    ax, ay = start[0] - cx, start[1] - cy
    bx, by = end[0] - cx, end[1] - cy
    sweep = 1 if ax * by - ay * bx > 0 else 0
    r = radius * scale(map_info)
    return f"M {start[0]} {start[1]} A {r} {r} 0 0 {sweep} {end[0]} {end[1]}"


def draw_path_contrast(dwg, path: Path, pos, rotation: float, map_info):
    return dwg.path(
        d=path_data(path, pos, rotation, map_info),
        stroke=CONTRAST_COLOR,
        stroke_width=CONTRAST_WIDTH * scale(map_info),
        fill="none",
    )


def draw_path(dwg, path: Path, pos, rotation: float, map_info):
    return dwg.path(
        d=path_data(path, pos, rotation, map_info),
        stroke=TRACK_COLOR,
        stroke_width=TRACK_WIDTH * scale(map_info),
        fill="none",
    )


def draw_lawson(dwg, pos, map_info):
    center = _pt(scale(map_info) * np.asarray(pos, dtype=float))
    return dwg.circle(center=center, r=LAWSON_RADIUS * scale(map_info), fill=TRACK_COLOR)


# === Cities and stops ===

def city_circle_pos(city: City, circle: int, pos, map_info, rotation: float) -> Tuple[float, float]:
    """
    Pixel center of one token circle of a city.

    Raises:
        DataIntegrityError: if the city has no such circle
    """
    if not 0 <= circle < city.circles:
        raise DataIntegrityError(f"City has {city.circles} circle(s), no circle {circle}")
    offset = rotate(rotation) @ circle_offsets(city.circles, map_info.orientation)[circle]
    base = local_to_screen(city.position, rotation, map_info.orientation) + pos
    return _pt(scale(map_info) * (base + offset))


def _city_centers(city: City, pos, map_info, rotation: float) -> List[Tuple[float, float]]:
    return [city_circle_pos(city, i, pos, map_info, rotation) for i in range(city.circles)]


def _city_outline(centers, radius: float) -> List[Tuple[float, float]]:
    """Rounded outline enclosing every circle of a multi-slot city."""
    shape = MultiPoint(centers).convex_hull.buffer(radius)
    return [(float(x), float(y)) for x, y in list(shape.exterior.coords)[:-1]]


def draw_city_contrast(dwg, city: City, pos, rotation: float, map_info):
    factor = scale(map_info)
    radius = (TOKEN_RADIUS + CITY_CONTRAST_PAD) * factor
    centers = _city_centers(city, pos, map_info, rotation)
    if city.circles == 1:
        return dwg.circle(center=centers[0], r=radius, fill=CONTRAST_COLOR)
    return dwg.polygon(points=_city_outline(centers, radius), fill=CONTRAST_COLOR)


def draw_city(dwg, city: City, pos, rotation: float, map_info):
    factor = scale(map_info)
    radius = TOKEN_RADIUS * factor
    centers = _city_centers(city, pos, map_info, rotation)
    g = dwg.g(class_="city")
    if city.circles > 1:
        g.add(dwg.polygon(
            points=_city_outline(centers, radius),
            fill="#ffffff",
            stroke="#000000",
            stroke_width=LINE_WIDTH * factor,
        ))
    for center in centers:
        g.add(dwg.circle(
            center=center,
            r=radius,
            fill="#ffffff",
            stroke="#000000",
            stroke_width=LINE_WIDTH * factor,
        ))
    return g


def draw_stop(dwg, stop: Stop, pos, tile, rotation: float, map_info):
    """
    Draw a stop: a dot with a revenue bubble beside it.

    A stop nested in a city only adds the bubble, placed relative to the
    city.
    """
    factor = scale(map_info)
    g = dwg.g(class_="stop")
    if stop.city is not None:
        if not 0 <= stop.city < len(tile.cities):
            raise DataIntegrityError(f"Tile {tile.name}: stop refers to missing city {stop.city}")
        base = np.asarray(tile.cities[stop.city].position, dtype=float)
    else:
        base = np.asarray(stop.position, dtype=float)
        g.add(dwg.circle(center=screen_point(base, pos, rotation, map_info), r=STOP_RADIUS * factor,
                         fill=TRACK_COLOR))

    if stop.revenue:
        bubble = screen_point(base + np.asarray(stop.revenue_offset), pos, rotation, map_info)
        g.add(dwg.circle(
            center=bubble,
            r=REVENUE_RADIUS * factor,
            fill="#ffffff",
            stroke="#000000",
            stroke_width=LINE_WIDTH * factor,
        ))
        g.add(draw_text(dwg, str(stop.revenue), bubble, "middle", size=REVENUE_FONT_SIZE * factor))
    return g


# === Overlays ===

def draw_terrain(dwg, terrain: Terrain, pos, map_info):
    """Terrain glyph with its build cost underneath. Terrain never rotates with the tile."""
    factor = scale(map_info)
    x, y = screen_point(terrain.position, pos, 0.0, map_info)
    color = TERRAIN_COLORS[terrain.kind]
    s = 0.2 * factor
    g = dwg.g(class_=f"terrain-{terrain.kind}")

    if terrain.kind in ("mountain", "hill"):
        h = s if terrain.kind == "mountain" else s * 0.6
        g.add(dwg.polygon(points=[(x - s, y), (x, y - h * 1.5), (x + s, y)], fill=color))
    elif terrain.kind == "water":
        d = (f"M {x - s} {y - s / 3} q {s / 2} {-s / 2} {s} 0 t {s} 0 "
             f"M {x - s} {y - s} q {s / 2} {-s / 2} {s} 0 t {s} 0")
        g.add(dwg.path(d=d, stroke=color, stroke_width=LINE_WIDTH * 3 * factor, fill="none"))
    elif terrain.kind == "swamp":
        for dx in (-s, 0.0, s):
            g.add(dwg.line(start=(x + dx, y), end=(x + dx, y - s), stroke=color,
                           stroke_width=LINE_WIDTH * 3 * factor))
    else:
        g.add(dwg.circle(center=(x, y - s / 2), r=s * 0.7, fill=color))

    if terrain.cost:
        g.add(draw_text(dwg, str(terrain.cost), (x, y + TERRAIN_FONT_SIZE * factor), "middle",
                        size=TERRAIN_FONT_SIZE * factor))
    return g


def draw_arrow(dwg, arrow: Arrow, pos, rotation: float, map_info):
    """Triangle at arrow.position pointing out through its edge."""
    factor = scale(map_info)
    px, py = screen_point(arrow.position, pos, rotation, map_info)
    direction = local_to_screen(EDGE_VECTORS[arrow.edge], rotation, map_info.orientation)
    turn = RotationConfig(math.degrees(math.atan2(direction[1], direction[0])), px, py)

    length = ARROW_LENGTH * factor
    half_width = ARROW_WIDTH * factor / 2
    template = [
        (px + length / 2, py),
        (px - length / 2, py - half_width),
        (px - length / 2, py + half_width),
    ]
    return dwg.polygon(points=[turn.rotate_point(x, y) for x, y in template], fill=ARROW_COLOR)


def draw_revenue_track(dwg, track: RevenueTrack, pos, map_info):
    """Row of phase-colored boxes, one per revenue value, centered on the track position."""
    factor = scale(map_info)
    cx, cy = screen_point(track.position, pos, 0.0, map_info)
    width = REVENUE_BOX_WIDTH * factor
    height = REVENUE_BOX_HEIGHT * factor
    left = cx - width * len(track.values) / 2

    g = dwg.g(class_="revenue-values")
    for i, (phase, value) in enumerate(track.values):
        x = left + i * width
        g.add(dwg.rect(
            insert=(x, cy - height / 2),
            size=(width, height),
            fill=TILE_COLORS[phase],
            stroke="#000000",
            stroke_width=LINE_WIDTH * factor,
        ))
        g.add(draw_text(dwg, str(value), (x + width / 2, cy), "middle", size=REVENUE_FONT_SIZE * factor))
    return g


def draw_text(dwg, text: str, pos, anchor: str, size=None, weight: Optional[str] = None,
              fill: Optional[str] = None):
    """Text element centered vertically on pos (pixels)."""
    props = {
        'insert': _pt(pos),
        'text_anchor': anchor,
        'dominant_baseline': "central",
        'font_family': "sans-serif",
    }
    if size is not None:
        props['font_size'] = size
    if weight is not None:
        props['font_weight'] = weight
    if fill is not None:
        props['fill'] = fill
    return dwg.text(text, **props)


# === Map features ===

def draw_barrier(dwg, side: int, pos, map_info):
    """Thick line along one hex side."""
    first, second = edge_corners(side)
    return dwg.line(
        start=screen_point(first, pos, 0.0, map_info),
        end=screen_point(second, pos, 0.0, map_info),
        stroke=BARRIER_COLOR,
        stroke_width=BARRIER_WIDTH * scale(map_info),
        stroke_linecap="round",
    )


def draw_token(dwg, name: str, color: str, is_home: bool, pos, map_info):
    """
    A station token. Home tokens are drawn as a dashed reservation ring
    in the company color.
    """
    factor = scale(map_info)
    g = dwg.g(class_="token")
    circle = {
        'center': _pt(pos),
        'r': TOKEN_RADIUS * 0.9 * factor,
        'stroke_width': LINE_WIDTH * 2 * factor,
    }
    if is_home:
        g.add(dwg.circle(fill="#ffffff", stroke=color, stroke_dasharray=TOKEN_HOME_DASH, **circle))
        text_color = color
    else:
        g.add(dwg.circle(fill=color, stroke="#000000", **circle))
        text_color = "#ffffff"
    g.add(draw_text(dwg, name, pos, "middle", size=TOKEN_FONT_SIZE * factor, weight="bold", fill=text_color))
    return g


def draw_coordinate_labels(dwg, map_info, cells):
    """
    Debug overlay: "col,row" on every cell plus the three basis axes.

    Args:
        cells: Iterable of ((col, row), center) with centers in hex units
    """
    factor = scale(map_info)
    g = dwg.g(class_="coordinates")
    first = None
    for (col, row), center in cells:
        if first is None:
            first = center
        g.add(draw_text(dwg, f"{col},{row}", factor * np.asarray(center), "middle",
                        size=COORD_FONT_SIZE * factor, fill=COORD_FONT_COLOR))

    if first is not None:
        origin = _pt(factor * np.asarray(first))
        basis = get_basis(map_info.orientation)
        for axis, color, name in zip(basis.T, AXIS_COLORS, "xyz"):
            tip = _pt(factor * (np.asarray(first) + 0.6 * axis))
            g.add(dwg.line(start=origin, end=tip, stroke=color, stroke_width=LINE_WIDTH * 2 * factor))
            g.add(draw_text(dwg, name, tip, "middle", size=COORD_FONT_SIZE * factor, fill=color))
    return g
