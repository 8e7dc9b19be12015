"""
Input/Output modules for Site Plan Exporter.
"""

from .scene_loader import load_scene, scene_from_dict, scene_to_dict
from .obj_exporter import (
    ExportStats,
    ObjDocument,
    format_obj,
    format_mtl,
    build_obj_document,
    export_obj,
    write_obj,
    write_text,
    validate_obj_text,
)
from .dxf_exporter import (
    LayerSpec,
    LAYERS,
    DxfDocument,
    build_drawing,
    build_dxf_document,
    export_dxf,
)

__all__ = [
    # Scene loading
    'load_scene',
    'scene_from_dict',
    'scene_to_dict',
    # OBJ export
    'ExportStats',
    'ObjDocument',
    'format_obj',
    'format_mtl',
    'build_obj_document',
    'export_obj',
    'write_obj',
    'write_text',
    'validate_obj_text',
    # DXF export
    'LayerSpec',
    'LAYERS',
    'DxfDocument',
    'build_drawing',
    'build_dxf_document',
    'export_dxf',
]
