"""
Tests for game module.

Run with: pytest tests/test_game.py -v
"""

import json
import pytest

from errors import ConfigurationError, DataIntegrityError
from game import (
    Game,
    Log,
    Manifest,
    MapInfo,
    TileLay,
    Token,
    load_game,
    parse_log,
    parse_manifest,
    parse_map,
    top_tiles,
    write_new_log,
)
from hexgrid import Orientation
from tiles import PlacedTile, definitions


# === Test Fixtures ===

@pytest.fixture
def manifest():
    return parse_manifest({
        "tiles": [{"name": "8"}, {"name": "9"}, {"name": "57"}],
        "amounts": {"8": 4, "9": 7, "57": 2},
    })


def write_game(games_dir, name="test", manifest=None, map_data=None):
    game_dir = games_dir / name
    game_dir.mkdir(parents=True)
    manifest = manifest or {"tiles": [{"name": "9"}], "amounts": {"9": 2}}
    map_data = map_data or {"width": 2, "height": 2, "orientation": "vertical"}
    (game_dir / "manifest.json").write_text(json.dumps(manifest))
    (game_dir / "map.json").write_text(json.dumps(map_data))
    return game_dir


class TestManifest:
    """Tests for remaining tile amounts."""

    def test_remaining_without_log(self, manifest):
        """Test that without a log the static amounts are returned."""
        assert manifest.remaining() == {"8": 4, "9": 7, "57": 2}

    def test_remaining_with_log(self, manifest):
        """Test that laid tiles are subtracted."""
        log = Log(game="test", tiles=(
            TileLay(tile="8", location=(0, 0)),
            TileLay(tile="8", location=(1, 0)),
            TileLay(tile="57", location=(2, 0)),
        ))
        assert manifest.remaining(log) == {"8": 2, "9": 7, "57": 1}

    def test_remaining_floors_at_zero(self, manifest, capsys):
        """Test that laying more tiles than exist leaves zero, with a warning."""
        log = Log(game="test", tiles=tuple(TileLay(tile="57", location=(i, 0)) for i in range(3)))
        assert manifest.remaining(log)["57"] == 0
        assert "Warning" in capsys.readouterr().out

    def test_amount(self, manifest):
        """Test looking up a single amount."""
        assert manifest.amount("9") == 7

    def test_missing_amount(self, manifest):
        """Test that a tile without an amount is a data error."""
        with pytest.raises(DataIntegrityError, match="No tile amount found for 14"):
            manifest.amount("14")

    def test_inline_definition(self):
        """Test that entries with more than a name are parsed as definitions."""
        result = parse_manifest({
            "tiles": [{"name": "X1", "color": "grey", "paths": [[0, 3]]}],
            "amounts": {"X1": 1},
        })
        assert result.find("X1").color == "grey"

    def test_unknown_catalog_tile(self):
        """Test that a name-only entry must exist in the catalog."""
        with pytest.raises(DataIntegrityError, match="Unknown tile"):
            parse_manifest({"tiles": [{"name": "no-such-tile"}]})


class TestTopTiles:
    """Tests for resolving the topmost tile per location."""

    def test_last_inserted_wins(self):
        """Test that a later tile on the same location replaces an earlier one."""
        first = PlacedTile(definition=definitions()["8"], location=(1, 1))
        second = PlacedTile(definition=definitions()["9"], location=(1, 1))
        other = PlacedTile(definition=definitions()["7"], location=(0, 0))
        result = top_tiles([first, other], [second])
        assert result[(1, 1)] is second
        assert result[(0, 0)] is other

    def test_log_lays_over_preprinted(self, manifest):
        """Test that tiles laid during play cover preprinted tiles."""
        map_info = parse_map({
            "width": 2, "height": 2,
            "tiles": [{"location": [0, 0], "tile": "river"}],
        }, manifest)
        log = Log(game="test", tiles=(TileLay(tile="8", location=(0, 0), rotation=3),))
        game = Game(name="test", manifest=manifest, map=map_info, log=log)
        top = game.top_tiles()
        assert top[(0, 0)].name == "8"
        assert top[(0, 0)].rotation == 3


class TestTokens:
    """Tests for grouping tokens by location."""

    def test_grouped_in_placement_order(self, manifest):
        """Test that map tokens come before logged tokens at the same location."""
        home = Token(name="PRR", color="#cc0000", location=(0, 0), is_home=True)
        logged = Token(name="NYC", color="#00cc00", location=(0, 0), circle=1)
        elsewhere = Token(name="B&O", color="#0000cc", location=(1, 0))
        game = Game(
            name="test",
            manifest=manifest,
            map=MapInfo(tokens=(home,)),
            log=Log(game="test", tokens=(logged, elsewhere)),
        )
        grouped = game.tokens()
        assert grouped[(0, 0)] == [home, logged]
        assert grouped[(1, 0)] == [elsewhere]


class TestParseMap:
    """Tests for map.json parsing."""

    def test_orientation_and_scale(self, manifest):
        """Test map size, orientation and scale."""
        map_info = parse_map({"width": 3, "height": 2, "orientation": "vertical", "scale": 40}, manifest)
        assert (map_info.width, map_info.height) == (3, 2)
        assert map_info.orientation is Orientation.VERTICAL
        assert map_info.scale == 40.0

    def test_bad_orientation(self, manifest):
        """Test that unknown orientations are rejected."""
        with pytest.raises(ConfigurationError, match="orientation"):
            parse_map({"orientation": "diagonal"}, manifest)

    def test_inline_tile_with_text(self, manifest):
        """Test a preprinted hex with its own definition and label text."""
        map_info = parse_map({
            "tiles": [{
                "location": [1, 0],
                "tile": "Chicago",
                "definition": {"color": "red", "paths": [[3]]},
                "text": {"number": "CHI"},
            }],
        }, manifest)
        tile = map_info.tiles[0]
        assert tile.color == "red"
        assert tile.get_text("number") == "CHI"

    def test_barrier_side_range(self, manifest):
        """Test that barrier sides must be 0-5."""
        with pytest.raises(ConfigurationError, match="0-5"):
            parse_map({"barriers": [{"location": [0, 0], "side": 6}]}, manifest)

    def test_unknown_tile(self, manifest):
        """Test that preprinted tiles must exist."""
        with pytest.raises(DataIntegrityError):
            parse_map({"tiles": [{"location": [0, 0], "tile": "nope"}]}, manifest)

    @pytest.mark.parametrize("data", [
        {"width": "wide"},
        {"scale": "big"},
        {"tiles": [{"location": [0, "a"], "tile": "57"}]},
        {"tiles": [{"location": [0, 0], "tile": "57", "rotation": "left"}]},
        {"tiles": [{"location": [0, 0], "tile": "57", "text": ["CHI"]}]},
        {"tokens": [{"name": "PRR", "location": [0, 0], "station": "two"}]},
        {"tiles": ["57"]},
    ])
    def test_malformed_values(self, manifest, data):
        """Test badly typed map values are reported as configuration errors."""
        with pytest.raises(ConfigurationError):
            parse_map(data, manifest)

    def test_malformed_manifest(self):
        """Test badly typed manifest amounts are reported as configuration errors."""
        with pytest.raises(ConfigurationError):
            parse_manifest({"tiles": [{"name": "8"}], "amounts": {"8": "many"}})

    def test_malformed_log(self):
        """Test badly typed log entries are reported as configuration errors."""
        with pytest.raises(ConfigurationError):
            parse_log({"tiles": [{"tile": "8", "location": [0, 0], "rotation": None}]})
        with pytest.raises(ConfigurationError):
            parse_log({"tokens": [{"name": "PRR"}]})


class TestLoading:
    """Tests for loading games from disk and starting logs."""

    def test_load_game(self, tmp_path, capsys):
        """Test loading a game directory and a usage log."""
        write_game(tmp_path)
        log_path = tmp_path / "mygame.json"
        log_path.write_text(json.dumps({
            "game": "test",
            "tiles": [{"tile": "9", "location": [1, 1], "rotation": 1}],
        }))

        game = load_game("test", games_dir=tmp_path, log_path=log_path)
        assert game.map.orientation is Orientation.VERTICAL
        assert game.manifest.remaining(game.log) == {"9": 1}
        assert "Reading tile manifest..." in capsys.readouterr().out

    def test_missing_game(self, tmp_path):
        """Test that a missing game directory is a configuration error."""
        with pytest.raises(ConfigurationError, match="Can't find"):
            load_game("nothing", games_dir=tmp_path)

    def test_invalid_json(self, tmp_path):
        """Test that broken JSON is a configuration error."""
        game_dir = write_game(tmp_path)
        (game_dir / "map.json").write_text("{not json")
        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_game("test", games_dir=tmp_path)

    def test_write_new_log(self, tmp_path):
        """Test that a new log is written as an empty game record."""
        path = tmp_path / "mygame.json"
        log = write_new_log("1830", path)
        assert log == Log.new_game("1830")
        assert json.loads(path.read_text()) == {"game": "1830", "tiles": [], "tokens": []}

    def test_new_log_never_overwrites(self, tmp_path):
        """Test that an existing log file is left alone."""
        path = tmp_path / "mygame.json"
        path.write_text("keep me")
        with pytest.raises(ConfigurationError, match="already exists"):
            write_new_log("1830", path)
        assert path.read_text() == "keep me"
