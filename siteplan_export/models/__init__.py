"""
Data models for Site Plan Exporter.
"""

from .geometry import Point2D, Point3D
from .zone_types import ZoneType, ZoneTypeInfo, ZONE_TYPE_INFO
from .scene import Point, ElevationPoint, Road, Zone, SiteScene, scale_from_site_width
from .mesh import MeshData, MeshGroup

__all__ = [
    'Point2D', 'Point3D',
    'ZoneType', 'ZoneTypeInfo', 'ZONE_TYPE_INFO',
    'Point', 'ElevationPoint', 'Road', 'Zone', 'SiteScene', 'scale_from_site_width',
    'MeshData', 'MeshGroup',
]
