"""
Tests for map_utils module.

Run with: pytest tests/test_map_utils.py -v
"""

import math
import pytest
import svgwrite

from map_utils import Bounds, RotationConfig, LayerManager, TileLayer, MapLayer


class TestBounds:
    """Tests for the Bounds dataclass."""

    def test_bounds_width_height(self):
        """Test width and height properties."""
        bounds = Bounds(min_x=10, max_x=110, min_y=20, max_y=70)
        assert bounds.width == 100
        assert bounds.height == 50

    def test_bounds_expand(self):
        """Test bounds expansion."""
        bounds = Bounds(min_x=10, max_x=90, min_y=20, max_y=80)
        expanded = bounds.expand(10)
        assert expanded.min_x == 0
        assert expanded.max_x == 100
        assert expanded.min_y == 10
        assert expanded.max_y == 90

    def test_bounds_scaled(self):
        """Test conversion from hex units to pixels."""
        bounds = Bounds(min_x=0, max_x=2, min_y=0, max_y=3).expand(0.5)
        assert bounds.scaled(50) == (150, 200)


class TestRotationConfig:
    """Tests for the RotationConfig class."""

    def test_no_rotation(self):
        """Test with zero rotation."""
        rot = RotationConfig(angle_deg=0, center_x=100, center_y=100)
        assert rot.is_rotated is False
        assert rot.angle_rad == 0

    def test_rotate_point_no_rotation(self):
        """Test point rotation with zero angle."""
        rot = RotationConfig(angle_deg=0, center_x=50, center_y=50)
        assert rot.rotate_point(100, 100) == (100, 100)

    def test_rotate_point_90_degrees(self):
        """Test 90-degree rotation turns clockwise on a y-down page."""
        rot = RotationConfig(angle_deg=90, center_x=0, center_y=0)
        x, y = rot.rotate_point(10, 0)
        assert x == pytest.approx(0, abs=1e-10)
        assert y == pytest.approx(10)

    def test_rotate_point_about_center(self):
        """Test 180-degree rotation around an off-origin center."""
        rot = RotationConfig(angle_deg=180, center_x=50, center_y=50)
        x, y = rot.rotate_point(100, 50)
        assert x == pytest.approx(0)
        assert y == pytest.approx(50)

    def test_rotate_point_minus_30_degrees(self):
        """Test the label rotation used on pointy-top maps."""
        rot = RotationConfig(angle_deg=-30, center_x=0, center_y=0)
        x, y = rot.rotate_point(10, 0)
        assert x == pytest.approx(10 * math.cos(math.radians(30)))
        assert y == pytest.approx(-5)

    def test_get_svg_transform_no_rotation(self):
        """Test SVG transform string with no rotation."""
        rot = RotationConfig(angle_deg=0, center_x=100, center_y=100)
        assert rot.get_svg_transform() == ""

    def test_get_svg_transform_with_rotation(self):
        """Test SVG transform string with rotation."""
        rot = RotationConfig(angle_deg=-30, center_x=100, center_y=200)
        assert rot.get_svg_transform() == "rotate(-30 100 200)"

    def test_apply_sets_transform(self):
        """Test applying the rotation to an svgwrite element."""
        dwg = svgwrite.Drawing()
        g = RotationConfig(angle_deg=-30, center_x=5, center_y=6).apply(dwg.g())
        assert g.attribs['transform'] == "rotate(-30 5 6)"

    def test_apply_without_rotation_leaves_element(self):
        """Test that a zero rotation adds no transform attribute."""
        dwg = svgwrite.Drawing()
        g = RotationConfig(angle_deg=0, center_x=5, center_y=6).apply(dwg.g())
        assert 'transform' not in g.attribs


class TestLayerOrder:
    """Tests for the tile and map z-order constants."""

    def test_tile_layers_ordered(self):
        """Test the fixed drawing order inside a tile."""
        order = [
            TileLayer.BACKGROUND, TileLayer.CONTRAST, TileLayer.TERRAIN,
            TileLayer.LAWSON, TileLayer.PATHS, TileLayer.STOPS,
            TileLayer.CITIES, TileLayer.ARROWS, TileLayer.TEXT,
            TileLayer.REVENUE_TRACK, TileLayer.OUTLINE,
        ]
        assert order == sorted(order)
        assert len(set(order)) == len(order)

    def test_map_layers_ordered(self):
        """Test tiles below barriers below tokens below the debug overlay."""
        assert MapLayer.TILES < MapLayer.BARRIERS < MapLayer.TOKENS < MapLayer.COORDINATES


class TestLayerManager:
    """Tests for the LayerManager class."""

    @pytest.fixture
    def dwg(self):
        """Create a drawing object."""
        return svgwrite.Drawing()

    @pytest.fixture
    def manager(self, dwg):
        """Create a LayerManager for testing."""
        return LayerManager(dwg)

    def test_register_layer(self, manager):
        """Test layer registration."""
        layer = manager.register_layer("test_layer", z_order=100)
        assert layer is not None
        assert layer.attribs['id'] == "test_layer"

    def test_register_multiple_layers(self, manager):
        """Test registering multiple layers."""
        layer1 = manager.register_layer("layer1", z_order=100)
        layer2 = manager.register_layer("layer2", z_order=200)
        layer3 = manager.register_layer("layer3", z_order=50)

        layers = manager.get_layers_by_z_order()
        assert layers == [layer3, layer1, layer2]

    def test_class_names(self, dwg):
        """Test naming layers by class for groups repeated on one page."""
        manager = LayerManager(dwg, use_ids=False)
        layer = manager.register_layer("paths", z_order=40)
        assert layer.attribs['class'] == "paths"
        assert 'id' not in layer.attribs

    def test_assemble_skips_empty_layers(self, dwg, manager):
        """Test that assembly keeps z-order and leaves out empty layers."""
        top = manager.register_layer("top", z_order=20)
        manager.register_layer("empty", z_order=10)
        bottom = manager.register_layer("bottom", z_order=0)
        top.add(dwg.circle(center=(0, 0), r=1))
        bottom.add(dwg.circle(center=(0, 0), r=2))

        parent = manager.assemble_into_group(dwg.g(class_="tile"))
        assert parent.elements == [bottom, top]
        assert parent.attribs["class"] == "tile"
        assert "transform" not in parent.attribs
