"""
Utility classes for tile and map rendering.

This module provides page bounds, SVG rotation transforms and SVG layer
management with fixed z-ordering.
"""

import math
from dataclasses import dataclass
from typing import Tuple, List, Dict, Any


@dataclass
class Bounds:
    """Represents a rectangular area of the page, in hex units.

    Attributes:
        min_x: Left boundary
        max_x: Right boundary
        min_y: Top boundary
        max_y: Bottom boundary
    """
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        """Width of the bounds."""
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Height of the bounds."""
        return self.max_y - self.min_y

    def expand(self, buffer: float) -> 'Bounds':
        """Return a new Bounds expanded by buffer in all directions."""
        return Bounds(
            min_x=self.min_x - buffer,
            max_x=self.max_x + buffer,
            min_y=self.min_y - buffer,
            max_y=self.max_y + buffer
        )

    def scaled(self, factor: float) -> Tuple[float, float]:
        """Return (width, height) multiplied by factor, e.g. hex units to pixels."""
        return (self.width * factor, self.height * factor)


@dataclass
class RotationConfig:
    """A rotation about a point, as used for SVG label transforms.

    Attributes:
        angle_deg: Rotation angle in degrees (positive = clockwise in SVG)
        center_x: X coordinate of rotation center
        center_y: Y coordinate of rotation center
    """
    angle_deg: float
    center_x: float
    center_y: float

    @property
    def angle_rad(self) -> float:
        """Rotation angle in radians."""
        return math.radians(self.angle_deg)

    @property
    def is_rotated(self) -> bool:
        """Check if any rotation is applied."""
        return self.angle_deg != 0

    def rotate_point(self, x: float, y: float) -> Tuple[float, float]:
        """Rotate a point around the rotation center.

        Args:
            x: X coordinate of point to rotate
            y: Y coordinate of point to rotate

        Returns:
            Tuple of (rotated_x, rotated_y)
        """
        if not self.is_rotated:
            return (x, y)

        cos_a = math.cos(self.angle_rad)
        sin_a = math.sin(self.angle_rad)
        dx = x - self.center_x
        dy = y - self.center_y

        rotated_x = self.center_x + dx * cos_a - dy * sin_a
        rotated_y = self.center_y + dx * sin_a + dy * cos_a

        return (rotated_x, rotated_y)

    def get_svg_transform(self) -> str:
        """Get SVG transform attribute string for this rotation."""
        if not self.is_rotated:
            return ""
        return f"rotate({self.angle_deg} {self.center_x} {self.center_y})"

    def apply(self, element) -> Any:
        """Set the transform on an svgwrite element (no-op without rotation)."""
        transform = self.get_svg_transform()
        if transform:
            element['transform'] = transform
        return element


class LayerManager:
    """Manages SVG layer groups and their z-ordering.

    Layers are registered with a z-order value (higher = on top) and
    assembled into a parent group lowest first. Layers that received no
    elements are left out.

    Attributes:
        layers: Dictionary mapping layer name to layer info
    """

    def __init__(self, dwg, use_ids: bool = True):
        """Initialize the layer manager.

        Args:
            dwg: svgwrite Drawing object
            use_ids: Name layers with an id attribute; when False the
                name goes in the class attribute (for groups repeated on
                one page, such as tile layers)
        """
        self.dwg = dwg
        self.use_ids = use_ids
        self.layers: Dict[str, Dict[str, Any]] = {}

    def register_layer(self, layer_id: str, z_order: int) -> Any:
        """Register and create a new layer group.

        Args:
            layer_id: Unique name for the layer
            z_order: Stacking order (higher values render on top)

        Returns:
            The created SVG group element
        """
        if self.use_ids:
            group = self.dwg.g(id=layer_id)
        else:
            group = self.dwg.g(class_=layer_id)

        self.layers[layer_id] = {
            'group': group,
            'z_order': z_order,
        }
        return group

    def get_layers_by_z_order(self, skip_empty: bool = False) -> List[Any]:
        """Get layers sorted by z-order.

        Args:
            skip_empty: Leave out layers without child elements

        Returns:
            List of layer groups sorted by z-order (lowest first)
        """
        sorted_layers = sorted(self.layers.values(), key=lambda info: info['z_order'])
        groups = [info['group'] for info in sorted_layers]
        if skip_empty:
            groups = [g for g in groups if g.elements]
        return groups

    def assemble_into_group(self, parent_group: Any) -> Any:
        """Add all non-empty layers to a parent group in z-order.

        Args:
            parent_group: The parent SVG group to add layers to

        Returns:
            The parent group
        """
        for layer in self.get_layers_by_z_order(skip_empty=True):
            parent_group.add(layer)
        return parent_group


class TileLayer:
    """Z-order of the layers inside one tile.

    Lower values render first (underneath). The outline is always last.
    """
    BACKGROUND = 0
    CONTRAST = 10
    TERRAIN = 20
    LAWSON = 30
    PATHS = 40
    STOPS = 50
    CITIES = 60
    ARROWS = 70
    TEXT = 80
    REVENUE_TRACK = 90
    OUTLINE = 100


class MapLayer:
    """Z-order of the layers of a full map page."""
    TILES = 0
    BARRIERS = 10
    TOKENS = 20
    COORDINATES = 30
