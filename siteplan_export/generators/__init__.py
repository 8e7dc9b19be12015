"""
Mesh generators for Site Plan Exporter.

Contains the site mesh generator that emits the ground plane, zones,
roads and elevation markers into one emission context.
"""

from .site_mesh import (
    generate_site_mesh,
    generate_ground,
    generate_zone,
    generate_roads,
    generate_elevation_markers,
    SiteMeshResult,
)

__all__ = [
    'generate_site_mesh',
    'generate_ground',
    'generate_zone',
    'generate_roads',
    'generate_elevation_markers',
    'SiteMeshResult',
]
