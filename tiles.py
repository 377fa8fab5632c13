"""
tiles.py - Tile specifications for railway hex tiles

A tile is either a catalog TileDefinition (always unrotated) or a
PlacedTile (a definition laid on a map location with a rotation). Both
expose the same read-only accessors, so the renderer never needs to know
which one it was given.

Tile definitions are plain JSON-shaped dicts, e.g.:

    "57": {
        "color": "yellow",
        "paths": [[0], [3]],
        "cities": [{"circles": 1, "revenue": 20}],
        "stops": [{"city": 0, "revenue": 20}]
    }
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from catalog import BUILTIN_TILES
from errors import ConfigurationError, DataIntegrityError
from hexgrid import CIRCLE_LAYOUTS, CORNER_VECTORS, EDGE_VECTORS


Vector3 = Tuple[float, float, float]
CENTER: Vector3 = (0.0, 0.0, 0.0)

# === Tile Colors ===
TILE_COLORS = {
    "ground": "#fdd9b5",
    "yellow": "#fdee00",
    "green": "#00a550",
    "brown": "#cd7f32",
    "grey": "#acacac",
    "red": "#e03c31",
    "blue": "#0070bb",
    "white": "#ffffff",
}

CURVE_KINDS = ("straight", "gentle", "sharp", "stub")
TEXT_ANCHORS = ("start", "middle", "end")
TERRAIN_KINDS = ("mountain", "hill", "water", "swamp", "forest")

DEFAULT_STOP_REVENUE_OFFSET: Vector3 = (0.4, 0.0, 0.0)


@dataclass(frozen=True)
class Path:
    """Track between two edges, or from an edge into the tile center (end=None)."""
    start: int
    end: Optional[int] = None
    kind: str = "stub"


@dataclass(frozen=True)
class City:
    """A station with one or more token circles."""
    position: Vector3 = CENTER
    circles: int = 1
    name: str = ""
    revenue: int = 0


@dataclass(frozen=True)
class Stop:
    """
    A revenue point that is not a city.

    When `city` is set the stop belongs to that city on the same tile: no
    dot is drawn and the revenue bubble sits next to the city.
    """
    position: Vector3 = CENTER
    revenue: int = 0
    city: Optional[int] = None
    revenue_offset: Vector3 = DEFAULT_STOP_REVENUE_OFFSET


@dataclass(frozen=True)
class Terrain:
    kind: str
    position: Vector3 = CENTER
    cost: int = 0


@dataclass(frozen=True)
class Arrow:
    edge: int
    position: Vector3 = CENTER


@dataclass(frozen=True)
class RevenueTrack:
    """Phase-dependent revenue values, as (phase color, value) pairs."""
    position: Vector3
    values: Tuple[Tuple[str, int], ...]


@dataclass(frozen=True)
class TextSpec:
    id: str
    anchor: str = "middle"
    position: Vector3 = CENTER
    size: Optional[str] = None
    weight: Optional[str] = None


# Tile number near the bottom-right vertex
DEFAULT_TEXT_SPEC = (
    TextSpec(id="number", anchor="middle", position=(0.0, 0.0, 0.72), size="80%"),
)


@dataclass(frozen=True)
class TileDefinition:
    """A catalog tile. Never rotated."""
    name: str
    color: str
    paths: Tuple[Path, ...] = ()
    cities: Tuple[City, ...] = ()
    stops: Tuple[Stop, ...] = ()
    terrain: Optional[Terrain] = None
    arrows: Tuple[Arrow, ...] = ()
    revenue_track: Optional[RevenueTrack] = None
    text_spec: Tuple[TextSpec, ...] = DEFAULT_TEXT_SPEC
    text: Tuple[Tuple[str, str], ...] = ()
    is_lawson: bool = False

    @property
    def orientation(self) -> float:
        return 0.0

    def get_text(self, text_id: str) -> str:
        """Text shown for a label id. Unknown ids give an empty string."""
        table = dict(self.text)
        if text_id in table:
            return table[text_id]
        if text_id == "number":
            return self.name
        if text_id == "revenue":
            if self.cities:
                return str(self.cities[0].revenue)
            if self.stops:
                return str(self.stops[0].revenue)
        if text_id == "name" and self.cities:
            return self.cities[0].name
        return ""


@dataclass(frozen=True)
class PlacedTile:
    """A tile definition laid on a map location with a rotation in 60 degree steps."""
    definition: TileDefinition
    location: Tuple[int, int]
    rotation: int = 0
    text: Tuple[Tuple[str, str], ...] = ()

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def color(self) -> str:
        return self.definition.color

    @property
    def paths(self) -> Tuple[Path, ...]:
        return self.definition.paths

    @property
    def cities(self) -> Tuple[City, ...]:
        return self.definition.cities

    @property
    def stops(self) -> Tuple[Stop, ...]:
        return self.definition.stops

    @property
    def terrain(self) -> Optional[Terrain]:
        return self.definition.terrain

    @property
    def arrows(self) -> Tuple[Arrow, ...]:
        return self.definition.arrows

    @property
    def revenue_track(self) -> Optional[RevenueTrack]:
        return self.definition.revenue_track

    @property
    def text_spec(self) -> Tuple[TextSpec, ...]:
        return self.definition.text_spec

    @property
    def is_lawson(self) -> bool:
        return self.definition.is_lawson

    @property
    def orientation(self) -> float:
        """Placement rotation in radians."""
        return self.rotation * math.pi / 3

    def get_text(self, text_id: str) -> str:
        overrides = dict(self.text)
        if text_id in overrides:
            return overrides[text_id]
        return self.definition.get_text(text_id)


TileSpec = Union[TileDefinition, PlacedTile]


# === Parsing ===

def curve_kind(start: int, end: Optional[int]) -> str:
    """Curve kind implied by the distance between two edges."""
    if end is None:
        return "stub"
    distance = (end - start) % 6
    if distance == 3:
        return "straight"
    if distance in (2, 4):
        return "gentle"
    return "sharp"


def _check_edge(tile_name: str, edge, what: str) -> int:
    if not isinstance(edge, int) or isinstance(edge, bool) or not 0 <= edge <= 5:
        raise ConfigurationError(f"Tile {tile_name}: {what} must be an edge index 0-5, got {edge!r}")
    return edge


def parse_position(value, tile_name: str = "", default: Vector3 = CENTER) -> Vector3:
    """
    Parse a tile-local position.

    Accepts None (default), "center", a [a, b, c] cube vector, or
    {"edge": i, "scale": f} / {"corner": k, "scale": f}.
    """
    if value is None:
        return default
    if value == "center":
        return CENTER
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return tuple(float(v) for v in value)
    if isinstance(value, dict):
        factor = float(value.get("scale", 1.0))
        if "edge" in value:
            vector = EDGE_VECTORS[_check_edge(tile_name, value["edge"], "position edge")]
        elif "corner" in value:
            vector = CORNER_VECTORS[_check_edge(tile_name, value["corner"], "position corner")]
        else:
            raise ConfigurationError(f"Tile {tile_name}: position needs 'edge' or 'corner': {value!r}")
        return tuple(float(v) * factor for v in vector)
    raise ConfigurationError(f"Tile {tile_name}: cannot parse position {value!r}")


def parse_path(tile_name: str, data) -> Path:
    """Parse [start], [start, end] or {"start", "end", "kind"}."""
    if isinstance(data, dict):
        start = data.get("start")
        end = data.get("end")
        kind = data.get("kind")
    elif isinstance(data, (list, tuple)) and len(data) in (1, 2):
        start = data[0]
        end = data[1] if len(data) == 2 else None
        kind = None
    else:
        raise ConfigurationError(f"Tile {tile_name}: cannot parse path {data!r}")

    _check_edge(tile_name, start, "path start")
    if end is not None:
        _check_edge(tile_name, end, "path end")
        if end == start:
            raise ConfigurationError(f"Tile {tile_name}: path starts and ends on edge {start}")
    if kind is None:
        kind = curve_kind(start, end)
    if kind not in CURVE_KINDS:
        raise ConfigurationError(f"Tile {tile_name}: unknown curve kind {kind!r}")
    return Path(start=start, end=end, kind=kind)


def parse_text_spec(tile_name: str, data: dict) -> TextSpec:
    anchor = data.get("anchor", "middle")
    if anchor not in TEXT_ANCHORS:
        raise ConfigurationError(f"Tile {tile_name}: unknown text anchor {anchor!r}")
    weight = data.get("weight")
    return TextSpec(
        id=data["id"],
        anchor=anchor,
        position=parse_position(data.get("position"), tile_name),
        size=data.get("size"),
        weight=str(weight) if weight is not None else None,
    )


def parse_definition(name: str, data: dict) -> TileDefinition:
    """
    Build a TileDefinition from its JSON-shaped dict.

    Raises:
        ConfigurationError: malformed values (edges, colors, anchors, ...)
        DataIntegrityError: a stop refers to a city the tile does not have
    """
    try:
        color = data.get("color", "ground")
        if color not in TILE_COLORS:
            raise ConfigurationError(f"Tile {name}: unknown color {color!r}")

        paths = tuple(parse_path(name, p) for p in data.get("paths", []))

        cities = []
        for c in data.get("cities", []):
            circles = c.get("circles", 1)
            if circles not in CIRCLE_LAYOUTS:
                raise ConfigurationError(f"Tile {name}: city must have 1-6 circles, got {circles!r}")
            cities.append(City(
                position=parse_position(c.get("position"), name),
                circles=circles,
                name=c.get("name", ""),
                revenue=int(c.get("revenue", 0)),
            ))

        stops = []
        for s in data.get("stops", []):
            city = s.get("city")
            if city is not None and not 0 <= city < len(cities):
                raise DataIntegrityError(f"Tile {name}: stop refers to missing city {city}")
            stops.append(Stop(
                position=parse_position(s.get("position"), name),
                revenue=int(s.get("revenue", 0)),
                city=city,
                revenue_offset=parse_position(s.get("revenue_offset"), name, DEFAULT_STOP_REVENUE_OFFSET),
            ))

        terrain = None
        if data.get("terrain"):
            t = data["terrain"]
            if t.get("kind") not in TERRAIN_KINDS:
                raise ConfigurationError(f"Tile {name}: unknown terrain {t.get('kind')!r}")
            terrain = Terrain(
                kind=t["kind"],
                position=parse_position(t.get("position"), name),
                cost=int(t.get("cost", 0)),
            )

        arrows = []
        for a in data.get("arrows", []):
            edge = _check_edge(name, a.get("edge"), "arrow edge")
            default = tuple(0.75 * v for v in EDGE_VECTORS[edge])
            arrows.append(Arrow(edge=edge, position=parse_position(a.get("position"), name, default)))

        revenue_track = None
        if data.get("revenue_track"):
            rt = data["revenue_track"]
            values = []
            for phase, value in rt.get("values", []):
                if phase not in TILE_COLORS:
                    raise ConfigurationError(f"Tile {name}: unknown phase color {phase!r}")
                values.append((phase, int(value)))
            revenue_track = RevenueTrack(position=parse_position(rt.get("position"), name), values=tuple(values))

        if "text_spec" in data:
            text_spec = tuple(parse_text_spec(name, t) for t in data["text_spec"])
        else:
            text_spec = DEFAULT_TEXT_SPEC

        text = tuple(sorted((str(k), str(v)) for k, v in data.get("text", {}).items()))
    except (ConfigurationError, DataIntegrityError):
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ConfigurationError(f"Tile {name}: malformed definition ({e})") from e

    return TileDefinition(
        name=name,
        color=color,
        paths=paths,
        cities=tuple(cities),
        stops=tuple(stops),
        terrain=terrain,
        arrows=tuple(arrows),
        revenue_track=revenue_track,
        text_spec=text_spec,
        text=text,
        is_lawson=bool(data.get("lawson", False)),
    )


def parse_definitions(data: Mapping[str, dict]) -> Dict[str, TileDefinition]:
    """Parse a name -> definition dict."""
    return {name: parse_definition(name, spec) for name, spec in data.items()}


@lru_cache(maxsize=None)
def definitions() -> Mapping[str, TileDefinition]:
    """
    The built-in tile catalog.

    Parsed once per process; the returned mapping is read-only.
    """
    return MappingProxyType(parse_definitions(BUILTIN_TILES))


def sorted_names(tile_definitions: Mapping[str, TileDefinition]) -> List[str]:
    """Tile names ordered by length, then alphabetically ("9" before "14")."""
    return sorted(tile_definitions, key=lambda n: (len(n), n))
