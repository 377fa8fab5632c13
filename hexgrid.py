"""
hexgrid.py - Core hex grid geometry for railway tile maps

Handles both hex orientations (flat-top "horizontal" and pointy-top
"vertical"), offset-grid to cube coordinate conversion and the basis used to
project tile-local cube vectors onto the page.
"""

import math
from enum import Enum
from typing import Tuple

import numpy as np
from shapely.geometry import Polygon

from errors import DataIntegrityError


class Orientation(Enum):
    """Hex convention of a map: flat-top (horizontal) or pointy-top (vertical)."""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


SQRT3 = math.sqrt(3)

# Blank space around the map, in hex units
BORDER = 0.5

# Token slot radius, in hex units
TOKEN_RADIUS = 0.25

# Hex corners as tile-local cube vectors, clockwise from the right-hand vertex
CORNER_VECTORS = np.array([
    [1.0, 0.0, 0.0],
    [0.0, 0.0, 1.0],
    [0.0, -1.0, 0.0],
    [-1.0, 0.0, 0.0],
    [0.0, 0.0, -1.0],
    [0.0, 1.0, 0.0],
])

# Edge midpoints, clockwise from the top edge of a flat-top hex
EDGE_VECTORS = np.array([
    [0.0, 0.5, -0.5],
    [0.5, 0.5, 0.0],
    [0.5, 0.0, 0.5],
    [0.0, -0.5, 0.5],
    [-0.5, -0.5, 0.0],
    [-0.5, 0.0, -0.5],
])

# Token slot offsets (in token radii) for cities with 1-6 circles
_R3 = 2 / SQRT3
_R5 = 1 / math.sin(math.pi / 5)
CIRCLE_LAYOUTS = {
    1: [(0.0, 0.0)],
    2: [(-1.0, 0.0), (1.0, 0.0)],
    3: [(0.0, -_R3), (1.0, _R3 / 2), (-1.0, _R3 / 2)],
    4: [(-1.0, -1.0), (1.0, -1.0), (1.0, 1.0), (-1.0, 1.0)],
    5: [
        (_R5 * math.cos(math.radians(-90 + 72 * i)),
         _R5 * math.sin(math.radians(-90 + 72 * i)))
        for i in range(5)
    ],
    6: [
        (2 * math.cos(math.radians(-90 + 60 * i)),
         2 * math.sin(math.radians(-90 + 60 * i)))
        for i in range(6)
    ],
}


def rotate(angle: float) -> np.ndarray:
    """
    Rotation matrix for an angle in radians.

    Screen coordinates have y pointing down, so a positive angle turns
    clockwise on the page.
    """
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array([[c, -s], [s, c]])


_HORIZONTAL_BASIS = np.array([
    [1.0, 0.5, 0.5],
    [0.0, -SQRT3 / 2, SQRT3 / 2],
])
_VERTICAL_BASIS = rotate(math.pi / 2) @ _HORIZONTAL_BASIS


def get_basis(orientation: Orientation) -> np.ndarray:
    """
    2x3 matrix projecting a cube vector onto the page (in hex units).

    The vertical basis is the horizontal one turned by 90 degrees, which
    takes a flat-top hex to a pointy-top one.
    """
    if orientation is Orientation.VERTICAL:
        return _VERTICAL_BASIS
    return _HORIZONTAL_BASIS


def scale(map_info) -> float:
    """Pixels per hex unit for a map."""
    return map_info.scale


def convert_coord(col: int, row: int, orientation: Orientation) -> Tuple[int, int, int]:
    """
    Convert offset-grid (col, row) to cube coordinates (x, y, z).

    Vertical maps offset every other row, horizontal maps every other
    column. Floor division keeps negative rows/columns on the same lattice
    as positive ones.

    Returns:
        (x, y, z) with x + y + z == 0
    """
    if orientation is Orientation.VERTICAL:
        x = col - row // 2
        z = row
    else:
        x = col
        z = row - col // 2
    return (x, -x - z, z)


def cube_to_position(cube: Tuple[int, int, int], orientation: Orientation) -> np.ndarray:
    """
    Project a cube coordinate to a hex center, in hex units.

    The x axis spans two grid columns per unit step, hence the (2, 1, 1)
    component scale. Vertical grids lead with the z axis.
    """
    x, y, z = cube
    if orientation is Orientation.VERTICAL:
        aligned = np.array([z, x, y], dtype=float)
    else:
        aligned = np.array([x, y, z], dtype=float)
    return get_basis(orientation) @ (aligned * np.array([2.0, 1.0, 1.0]))


def local_to_screen(local, rotation: float, orientation: Orientation) -> np.ndarray:
    """Rotate and project a tile-local cube vector (hex units, relative to the tile center)."""
    return rotate(rotation) @ get_basis(orientation) @ np.asarray(local, dtype=float)


def hex_polygon(center, orientation: Orientation) -> Polygon:
    """
    Generate a Shapely Polygon for a hex centered at `center` (hex units).

    Returns:
        Polygon with 6 vertices, circumradius 1
    """
    basis = get_basis(orientation)
    cx, cy = center
    vertices = []
    for corner in CORNER_VECTORS:
        vx, vy = basis @ corner
        vertices.append((cx + vx, cy + vy))
    return Polygon(vertices)


def edge_corners(edge: int) -> Tuple[np.ndarray, np.ndarray]:
    """The two corner vectors bounding an edge, in clockwise order."""
    return CORNER_VECTORS[(4 + edge) % 6], CORNER_VECTORS[(5 + edge) % 6]


def circle_offsets(count: int, orientation: Orientation) -> list:
    """
    Relative slot offsets (hex units) for a city with `count` circles.

    Raises:
        DataIntegrityError: if count is outside 1..6
    """
    if count not in CIRCLE_LAYOUTS:
        raise DataIntegrityError(f"Unsupported city circle count: {count}")
    frame = get_basis(orientation)[:, 0]
    turn = rotate(math.atan2(frame[1], frame[0]))
    return [turn @ (np.array(offset) * TOKEN_RADIUS) for offset in CIRCLE_LAYOUTS[count]]
