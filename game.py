"""
game.py - Games, maps, tile manifests and usage logs

A game lives in its own directory:

    games/<name>/manifest.json   tile types and how many of each exist
    games/<name>/map.json        map size, orientation, preprinted hexes

A usage log (created by `hexrail.py newgame`) records tiles laid and
tokens placed during play. Laid tiles are taken out of the manifest's
remaining amounts and drawn on top of the preprinted map.
"""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from errors import ConfigurationError, DataIntegrityError
from hexgrid import Orientation
from tiles import PlacedTile, TileDefinition, definitions, parse_definition, parse_definitions


# === Configuration ===
GAMES_DIR = Path("games")
MANIFEST_FILE = "manifest.json"
MAP_FILE = "map.json"

DEFAULT_SCALE = 50.0  # pixels per hex unit (hex circumradius)

Location = Tuple[int, int]


@dataclass(frozen=True)
class Barrier:
    """An impassable hex side, independent of the track on the tile."""
    location: Location
    side: int


@dataclass(frozen=True)
class Token:
    """A company station token sitting in one circle of a city."""
    name: str
    color: str
    location: Location
    is_home: bool = False
    station: int = 0
    circle: int = 0


@dataclass(frozen=True)
class TileLay:
    """One tile laid during play."""
    tile: str
    location: Location
    rotation: int = 0


@dataclass(frozen=True)
class MapInfo:
    """
    Map layout and preprinted content.

    Attributes:
        width, height: Grid size in hexes
        orientation: Hex convention for the whole map
        scale: Pixels per hex unit
        tiles: Preprinted tiles, in declared order
        barriers: Impassable hex sides
        tokens: Preprinted tokens (e.g. home stations)
    """
    width: int = 0
    height: int = 0
    orientation: Orientation = Orientation.HORIZONTAL
    scale: float = DEFAULT_SCALE
    tiles: Tuple[PlacedTile, ...] = ()
    barriers: Tuple[Barrier, ...] = ()
    tokens: Tuple[Token, ...] = ()

    def with_orientation(self, orientation: Orientation) -> "MapInfo":
        return replace(self, orientation=orientation)


@dataclass(frozen=True)
class Log:
    """Record of a game in progress."""
    game: str
    tiles: Tuple[TileLay, ...] = ()
    tokens: Tuple[Token, ...] = ()

    @classmethod
    def new_game(cls, game: str) -> "Log":
        return cls(game=game)

    def consumed(self) -> Dict[str, int]:
        """Number of tiles laid, by tile name."""
        counts: Dict[str, int] = {}
        for lay in self.tiles:
            counts[lay.tile] = counts.get(lay.tile, 0) + 1
        return counts

    def to_dict(self) -> dict:
        return {
            "game": self.game,
            "tiles": [
                {"tile": lay.tile, "location": list(lay.location), "rotation": lay.rotation}
                for lay in self.tiles
            ],
            "tokens": [_token_to_dict(t) for t in self.tokens],
        }


@dataclass(frozen=True)
class Manifest:
    """Tile types of a game, in declared order, and how many of each exist."""
    tiles: Tuple[TileDefinition, ...] = ()
    amounts: Mapping[str, int] = field(default_factory=dict)

    def find(self, name: str) -> Optional[TileDefinition]:
        for tile in self.tiles:
            if tile.name == name:
                return tile
        return None

    def remaining(self, log: Optional[Log] = None) -> Dict[str, int]:
        """
        Tiles still available, by name.

        Without a log this is the static amount. Laying more tiles than
        exist leaves zero available rather than a negative count.
        """
        if log is None:
            return dict(self.amounts)

        used = log.consumed()
        result = {}
        for name, amount in self.amounts.items():
            left = amount - used.get(name, 0)
            if left < 0:
                print(f"  Warning: log lays {used[name]} of tile {name} but only {amount} exist")
                left = 0
            result[name] = left
        return result

    def amount(self, name: str, log: Optional[Log] = None) -> int:
        """Remaining amount of one tile type."""
        remaining = self.remaining(log)
        if name not in remaining:
            raise DataIntegrityError(f"No tile amount found for {name}")
        return remaining[name]


@dataclass(frozen=True)
class Game:
    name: str
    manifest: Manifest
    map: MapInfo
    log: Optional[Log] = None

    def lookup_tile(self, name: str) -> TileDefinition:
        """Tile definition by name: the manifest first, then the built-in catalog."""
        tile = self.manifest.find(name)
        if tile is not None:
            return tile
        catalog = definitions()
        if name in catalog:
            return catalog[name]
        raise DataIntegrityError(f"Unknown tile {name}")

    def placed_tiles(self) -> List[PlacedTile]:
        """Tiles laid during play, in log order."""
        if self.log is None:
            return []
        return [
            PlacedTile(definition=self.lookup_tile(lay.tile), location=lay.location, rotation=lay.rotation)
            for lay in self.log.tiles
        ]

    def top_tiles(self) -> Dict[Location, PlacedTile]:
        """Topmost tile per location: preprinted tiles, then log lays."""
        return top_tiles(self.map.tiles, self.placed_tiles())

    def tokens(self) -> Dict[Location, List[Token]]:
        """Preprinted and logged tokens grouped by location, in placement order."""
        grouped: Dict[Location, List[Token]] = {}
        logged = self.log.tokens if self.log is not None else ()
        for token in list(self.map.tokens) + list(logged):
            grouped.setdefault(token.location, []).append(token)
        return grouped


def top_tiles(*layers) -> Dict[Location, PlacedTile]:
    """
    Resolve one tile per location from several sequences of placed tiles.

    When more than one tile claims a location, the last one inserted wins.
    """
    result: Dict[Location, PlacedTile] = {}
    for layer in layers:
        for tile in layer:
            result[tile.location] = tile
    return result


# === Loading ===

def load_json(path: Path):
    """Read a JSON file, turning I/O and syntax problems into ConfigurationError."""
    try:
        with open(path) as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Can't find {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Couldn't read {path}: {e}") from e


def parse_location(value) -> Location:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ConfigurationError(f"Location must be [col, row], got {value!r}")
    try:
        return (int(value[0]), int(value[1]))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Location must be [col, row] integers, got {value!r}") from e


def parse_orientation(value) -> Orientation:
    try:
        return Orientation(value)
    except ValueError as e:
        raise ConfigurationError(f"Unknown orientation {value!r}") from e


def _text_overrides(data: dict) -> Tuple[Tuple[str, str], ...]:
    return tuple(sorted((str(k), str(v)) for k, v in data.get("text", {}).items()))


def parse_token(data: dict) -> Token:
    try:
        return Token(
            name=data["name"],
            color=data.get("color", "#000000"),
            location=parse_location(data["location"]),
            is_home=bool(data.get("home", False)),
            station=int(data.get("station", 0)),
            circle=int(data.get("circle", 0)),
        )
    except ConfigurationError:
        raise
    except KeyError as e:
        raise ConfigurationError(f"Token is missing {e}") from e
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigurationError(f"Malformed token {data!r} ({e})") from e


def _token_to_dict(token: Token) -> dict:
    return {
        "name": token.name,
        "color": token.color,
        "location": list(token.location),
        "home": token.is_home,
        "station": token.station,
        "circle": token.circle,
    }


def parse_manifest(data: dict) -> Manifest:
    """
    Parse a manifest.

    Entries carrying only a name refer to the built-in catalog; anything
    else is a full inline definition.
    """
    catalog = definitions()
    try:
        tiles = []
        for entry in data.get("tiles", []):
            if "name" not in entry:
                raise ConfigurationError(f"Manifest tile entry has no name: {entry!r}")
            name = str(entry["name"])
            if set(entry) == {"name"}:
                if name not in catalog:
                    raise DataIntegrityError(f"Unknown tile {name}")
                tiles.append(catalog[name])
            else:
                tiles.append(parse_definition(name, {k: v for k, v in entry.items() if k != "name"}))

        amounts = {str(k): int(v) for k, v in data.get("amounts", {}).items()}
    except (ConfigurationError, DataIntegrityError):
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ConfigurationError(f"Malformed manifest ({e})") from e
    return Manifest(tiles=tuple(tiles), amounts=amounts)


def parse_map(data: dict, manifest: Manifest) -> MapInfo:
    """Parse map.json. Preprinted tiles may name a tile or carry an inline definition."""
    catalog = definitions()
    try:
        tiles = []
        for entry in data.get("tiles", []):
            location = parse_location(entry.get("location"))
            name = str(entry.get("tile", f"{location[0]},{location[1]}"))
            if "definition" in entry:
                definition = parse_definition(name, entry["definition"])
            else:
                definition = manifest.find(name) or catalog.get(name)
                if definition is None:
                    raise DataIntegrityError(f"Unknown tile {name} at {location}")
            tiles.append(PlacedTile(
                definition=definition,
                location=location,
                rotation=int(entry.get("rotation", 0)),
                text=_text_overrides(entry),
            ))

        barriers = []
        for entry in data.get("barriers", []):
            side = entry.get("side")
            if not isinstance(side, int) or not 0 <= side <= 5:
                raise ConfigurationError(f"Barrier side must be 0-5, got {side!r}")
            barriers.append(Barrier(location=parse_location(entry.get("location")), side=side))

        return MapInfo(
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
            orientation=parse_orientation(data.get("orientation", "horizontal")),
            scale=float(data.get("scale", DEFAULT_SCALE)),
            tiles=tuple(tiles),
            barriers=tuple(barriers),
            tokens=tuple(parse_token(t) for t in data.get("tokens", [])),
        )
    except (ConfigurationError, DataIntegrityError):
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ConfigurationError(f"Malformed map ({e})") from e


def parse_log(data: dict) -> Log:
    try:
        lays = []
        for entry in data.get("tiles", []):
            if "tile" not in entry:
                raise ConfigurationError(f"Logged tile lay has no tile: {entry!r}")
            lays.append(TileLay(
                tile=str(entry["tile"]),
                location=parse_location(entry.get("location")),
                rotation=int(entry.get("rotation", 0)),
            ))
        return Log(
            game=data.get("game", ""),
            tiles=tuple(lays),
            tokens=tuple(parse_token(t) for t in data.get("tokens", [])),
        )
    except (ConfigurationError, DataIntegrityError):
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ConfigurationError(f"Malformed log ({e})") from e


def load_log(path: Path) -> Log:
    return parse_log(load_json(path))


def load_definitions(path: Path) -> Dict[str, TileDefinition]:
    """Load an extra tile catalog (JSON object of name -> definition)."""
    return parse_definitions(load_json(path))


def load_game(name: str, games_dir: Path = GAMES_DIR, log_path: Optional[Path] = None,
              verbose: bool = False) -> Game:
    """
    Load a game directory and, optionally, a usage log.

    Raises:
        ConfigurationError: missing directory or unreadable files
        DataIntegrityError: tiles referenced by name that don't exist
    """
    game_dir = Path(games_dir) / name
    if not game_dir.is_dir():
        raise ConfigurationError(f"Can't find a game in {game_dir}")

    print("Reading tile manifest...")
    manifest = parse_manifest(load_json(game_dir / MANIFEST_FILE))
    if verbose:
        print(f"  {len(manifest.tiles)} tile types, {sum(manifest.amounts.values())} tiles")

    print("Reading map...")
    map_info = parse_map(load_json(game_dir / MAP_FILE), manifest)
    if verbose:
        print(f"  {map_info.width}x{map_info.height} {map_info.orientation.value} map, "
              f"{len(map_info.tiles)} preprinted hexes")

    log = None
    if log_path is not None:
        print(f"Reading log {log_path}...")
        log = load_log(log_path)
        if log.game and log.game != name:
            print(f"  Warning: log is for game '{log.game}', not '{name}'")

    return Game(name=name, manifest=manifest, map=map_info, log=log)


def write_new_log(game: str, path: Path) -> Log:
    """
    Start a new usage log. Never overwrites an existing file.

    Raises:
        ConfigurationError: if the file already exists
    """
    log = Log.new_game(game)
    try:
        with open(path, "x") as f:
            json.dump(log.to_dict(), f, indent=2)
    except FileExistsError as e:
        raise ConfigurationError(f"Couldn't create game file {path}: already exists") from e
    return log
