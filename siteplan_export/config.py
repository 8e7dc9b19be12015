"""
Configuration constants for Site Plan Exporter.

Contains all tunable parameters for mesh and drawing export, including
marker geometry, text sizes, numeric precision and output file names.
Per-zone-type heights live in models/zone_types.py.
"""

from dataclasses import dataclass, field
from typing import Tuple


# =============================================================================
# SCALE
# =============================================================================

# Pixel-to-meter scale used when the canvas has no width yet
DEFAULT_PIXEL_TO_METER_SCALE = 0.1

# =============================================================================
# MESH HEIGHTS (meters)
# =============================================================================

# Ground plane elevation
GROUND_Z = 0.0

# Road centerlines sit above zone surfaces (0.05) to avoid z-fighting
ROAD_Z = 0.08

# Elevation marker pyramid
ELEVATION_MARKER_HALF_SIZE = 0.5  # Base offset in X and Y from the apex
ELEVATION_MARKER_DEPTH = 0.5      # Base sits this far below the apex

# =============================================================================
# OBJ EXPORT
# =============================================================================

OBJ_HEADER = "LandscapeGenie Pro 3D Export"
OBJ_OBJECT_NAME = "SiteModel"
OBJ_VERTEX_PRECISION = 3
OBJ_MATERIAL_LIBRARY = "landscape.mtl"

GROUND_GROUP = "Site_Ground"
ROADS_GROUP = "Roads"
ELEVATIONS_GROUP = "Elevations"

GROUND_MATERIAL = "Material_Grass"
ROAD_MATERIAL = "Material_Road"
MARKER_MATERIAL = "Material_Marker"

# Diffuse colours for non-zone materials
GROUND_COLOR = "#d9f99d"
ROAD_COLOR = "#475569"
MARKER_COLOR = "#1d4ed8"

# =============================================================================
# DXF EXPORT
# =============================================================================

DXF_VERSION = "R2010"
DXF_PRECISION = 3

# Text heights (drawing units = meters)
ZONE_LABEL_HEIGHT = 0.8
ELEVATION_LABEL_HEIGHT = 0.3
AREA_LABEL_HEIGHT = 1.2
DIMENSION_LABEL_HEIGHT = 0.4

# Elevation labels are offset from the marker in X and Y
ELEVATION_LABEL_OFFSET = 0.2

# =============================================================================
# OUTPUT
# =============================================================================

DEFAULT_OUTPUT_NAME = "landscape"
SUPPORTED_FORMATS = ("obj", "dxf")


# =============================================================================
# RUNTIME CONFIGURATION
# =============================================================================

@dataclass
class ExportConfig:
    """
    Runtime configuration for the export pipeline.

    Holds all parameters that can be adjusted per-run via CLI
    arguments or programmatically.
    """

    # Output
    name: str = DEFAULT_OUTPUT_NAME
    output_dir: str = "./output"
    formats: Tuple[str, ...] = field(default=SUPPORTED_FORMATS)

    # OBJ
    material_library: str = OBJ_MATERIAL_LIBRARY
    include_materials: bool = True

    # DXF
    dimension_labels: bool = False

    # Overrides the scene's own scale when set (meters across the canvas)
    site_width_meters: float = 0.0

    # Debug/report
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration values."""
        if not self.name:
            raise ValueError("name must not be empty")

        self.formats = tuple(self.formats)
        if not self.formats:
            raise ValueError("at least one output format is required")

        for fmt in self.formats:
            if fmt not in SUPPORTED_FORMATS:
                raise ValueError(
                    f"unsupported format '{fmt}' (expected one of {', '.join(SUPPORTED_FORMATS)})"
                )

        if self.site_width_meters < 0:
            raise ValueError("site_width_meters must be non-negative")

        if not self.material_library.endswith(".mtl"):
            raise ValueError("material_library must be a .mtl file name")


# Default configuration instance
DEFAULT_CONFIG = ExportConfig()
