"""
Site Plan Exporter

A standalone Python pipeline that turns a sketched site plan (boundary,
roads, function zones, elevation markers drawn in pixel space) into a
solid 3D model and a 2D CAD drawing.

Can be used as:
- CLI tool: python -m siteplan_export.main --scene scene.json
- Library: export_obj(scene) / export_dxf(scene)

Outputs:
- Wavefront OBJ mesh (+ MTL material library), Z-up, meters
- DXF drawing with named layers, meters as units
"""

__version__ = "1.0.0"
__author__ = "Site Plan Exporter Team"

from .errors import SiteplanError, SceneFormatError, DegenerateGeometryError
from .models.scene import SiteScene, Point, ElevationPoint, Road, Zone
from .models.zone_types import ZoneType
from .io.obj_exporter import export_obj
from .io.dxf_exporter import export_dxf

__all__ = [
    'SiteplanError',
    'SceneFormatError',
    'DegenerateGeometryError',
    'SiteScene',
    'Point',
    'ElevationPoint',
    'Road',
    'Zone',
    'ZoneType',
    'export_obj',
    'export_dxf',
]
