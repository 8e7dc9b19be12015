"""
Zone type classification for Site Plan Exporter.

ZoneType is a closed enum. Everything the exporters need to know about a
type (display name, material, colour, base and extrude heights, area
statistics bucket) comes from the ZONE_TYPE_INFO table, so no label
string is ever parsed at export time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from ..errors import SceneFormatError


class ZoneType(Enum):
    """Function zone category drawn by the user."""
    WATER = "water"
    GREENERY = "greenery"
    PAVING = "paving"
    STRUCTURE = "structure"

    @classmethod
    def from_label(cls, label: str) -> 'ZoneType':
        """
        Resolve a zone type from a scene document label.

        Accepts enum values ('water'), display names ('Water'), common
        synonyms ('plaza', 'building') and the drawing surface's bilingual
        labels such as '水体 (Water)'.

        Args:
            label: Zone type label from the scene document

        Returns:
            Matching ZoneType

        Raises:
            SceneFormatError: If the label names no known zone type
        """
        if not isinstance(label, str):
            raise SceneFormatError(f"Zone type must be a string, got {label!r}")

        text = label.strip().lower()

        # Bilingual labels carry the english name in parentheses
        if '(' in text and text.endswith(')'):
            text = text[text.rindex('(') + 1:-1].strip()

        zone_type = _ZONE_TYPE_ALIASES.get(text)
        if zone_type is None:
            for native, candidate in _NATIVE_LABELS.items():
                if label.strip().startswith(native):
                    return candidate
            raise SceneFormatError(f"Unknown zone type '{label}'")

        return zone_type

    @property
    def info(self) -> 'ZoneTypeInfo':
        """Metadata for this zone type."""
        return ZONE_TYPE_INFO[self]

    @property
    def is_extruded(self) -> bool:
        """True if zones of this type are raised into prisms."""
        return self.info.extrude_height > 0


@dataclass(frozen=True)
class ZoneTypeInfo:
    """
    Per-type export parameters.

    Attributes:
        display_name: Short name used in OBJ group names and DXF labels
        material: OBJ material name
        color: Sketch colour as '#rrggbb' (also the MTL diffuse colour)
        base_height: Z of the bottom ring (meters)
        extrude_height: Prism height above base (0 = flat surface)
        stats_bucket: AreaStats field the zone's area accumulates into
    """
    display_name: str
    material: str
    color: str
    base_height: float
    extrude_height: float
    stats_bucket: str

    @property
    def top_height(self) -> float:
        """Z of the top ring for extruded zones."""
        return self.base_height + self.extrude_height


ZONE_TYPE_INFO: Dict[ZoneType, ZoneTypeInfo] = {
    # Water is sunken below the ground plane
    ZoneType.WATER: ZoneTypeInfo(
        display_name="Water",
        material="Material_Water",
        color="#3b82f6",
        base_height=-0.5,
        extrude_height=0.0,
        stats_bucket="water",
    ),
    ZoneType.GREENERY: ZoneTypeInfo(
        display_name="Greenery",
        material="Material_Greenery",
        color="#22c55e",
        base_height=0.05,
        extrude_height=0.0,
        stats_bucket="greenery",
    ),
    ZoneType.PAVING: ZoneTypeInfo(
        display_name="Paving",
        material="Material_Paving",
        color="#9ca3af",
        base_height=0.05,
        extrude_height=0.0,
        stats_bucket="paving",
    ),
    ZoneType.STRUCTURE: ZoneTypeInfo(
        display_name="Structure",
        material="Material_Structure",
        color="#9333ea",
        base_height=0.05,
        extrude_height=6.0,
        stats_bucket="structures",
    ),
}


_ZONE_TYPE_ALIASES: Dict[str, ZoneType] = {
    'water': ZoneType.WATER,
    'pond': ZoneType.WATER,
    'lake': ZoneType.WATER,
    'greenery': ZoneType.GREENERY,
    'green': ZoneType.GREENERY,
    'grass': ZoneType.GREENERY,
    'planting': ZoneType.GREENERY,
    'paving': ZoneType.PAVING,
    'plaza': ZoneType.PAVING,
    'hardscape': ZoneType.PAVING,
    'structure': ZoneType.STRUCTURE,
    'building': ZoneType.STRUCTURE,
}

_NATIVE_LABELS: Dict[str, ZoneType] = {
    '水体': ZoneType.WATER,
    '绿地': ZoneType.GREENERY,
    '硬质广场': ZoneType.PAVING,
    '建筑': ZoneType.STRUCTURE,
}
