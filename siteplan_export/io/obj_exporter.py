"""
OBJ mesh exporter for Site Plan Exporter.

Serialises the site MeshData to Wavefront OBJ text:
- Z up, meters, X east / Y north
- one 'o' object with one 'g' group per site element
- 'v' lines with 3 decimals, 'f' triangles and 'l' road polylines
  referencing global 1-based vertex indices

Also writes the companion MTL material library. The format_* functions
are pure; only write_text() touches the filesystem.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

from ..models.mesh import MeshData
from ..models.scene import SiteScene
from ..models.zone_types import ZONE_TYPE_INFO
from ..generators.site_mesh import generate_site_mesh, SiteMeshResult
from ..config import (
    ExportConfig,
    DEFAULT_CONFIG,
    OBJ_HEADER,
    OBJ_VERTEX_PRECISION,
    GROUND_MATERIAL,
    ROAD_MATERIAL,
    MARKER_MATERIAL,
    GROUND_COLOR,
    ROAD_COLOR,
    MARKER_COLOR,
)

logger = logging.getLogger(__name__)


@dataclass
class ExportStats:
    """Statistics from OBJ export."""
    total_vertices: int = 0
    total_faces: int = 0
    total_lines: int = 0
    total_groups: int = 0
    skipped_entities: int = 0


@dataclass
class ObjDocument:
    """
    A complete OBJ export.

    Attributes:
        obj_text: OBJ document
        mtl_text: Material library (empty when materials are disabled)
        result: Generator result (mesh, skipped entities, warnings)
        stats: Export statistics
    """
    obj_text: str
    mtl_text: str
    result: SiteMeshResult
    stats: ExportStats = field(default_factory=ExportStats)


def material_colors() -> Dict[str, str]:
    """Diffuse colour ('#rrggbb') for every material the mesh can reference."""
    colors = {
        GROUND_MATERIAL: GROUND_COLOR,
        ROAD_MATERIAL: ROAD_COLOR,
        MARKER_MATERIAL: MARKER_COLOR,
    }
    for info in ZONE_TYPE_INFO.values():
        colors[info.material] = info.color
    return colors


def format_obj(
    mesh: MeshData,
    material_library: Optional[str] = None,
    comment: Optional[str] = None
) -> str:
    """
    Serialise a mesh to OBJ text.

    Empty groups are omitted. Vertex indices are already global, so
    groups are written in order without any offset bookkeeping.

    Args:
        mesh: Emission context to serialise
        material_library: MTL file name; None omits 'mtllib'/'usemtl'
        comment: Optional comment to include in file header

    Returns:
        OBJ document text
    """
    groups = mesh.non_empty_groups()
    p = OBJ_VERTEX_PRECISION

    lines = [f"# {OBJ_HEADER}"]
    lines.append(f"# Vertices: {mesh.vertex_count}")
    lines.append(f"# Faces: {mesh.face_count()}")
    lines.append(f"# Lines: {mesh.line_count()}")
    if comment:
        lines.append(f"# {comment}")

    if material_library:
        lines.append(f"mtllib {material_library}")
    lines.append(f"o {mesh.object_name}")

    for group in groups:
        lines.append(f"g {group.name}")
        if material_library and group.material:
            lines.append(f"usemtl {group.material}")

        for x, y, z in group.vertices:
            lines.append(f"v {x:.{p}f} {y:.{p}f} {z:.{p}f}")

        for face in group.faces:
            lines.append("f " + " ".join(str(idx) for idx in face))

        for line in group.lines:
            lines.append("l " + " ".join(str(idx) for idx in line))

    return "\n".join(lines) + "\n"


def format_mtl(mesh: MeshData) -> str:
    """
    Serialise the material library for the materials a mesh uses.

    Args:
        mesh: Mesh whose group materials are defined

    Returns:
        MTL document text
    """
    colors = material_colors()

    used = []
    for group in mesh.non_empty_groups():
        if group.material and group.material not in used:
            used.append(group.material)

    lines = [f"# {OBJ_HEADER} materials", f"# Materials: {len(used)}"]

    for name in used:
        r, g, b = hex_to_rgb(colors.get(name, "#cccccc"))
        lines.append("")
        lines.append(f"newmtl {name}")
        lines.append(f"Ka {r:.3f} {g:.3f} {b:.3f}")
        lines.append(f"Kd {r:.3f} {g:.3f} {b:.3f}")
        lines.append("Ks 0.000 0.000 0.000")
        lines.append("d 1.000")
        lines.append("illum 1")

    return "\n".join(lines) + "\n"


def hex_to_rgb(color: str) -> tuple:
    """
    Convert '#rrggbb' to an (r, g, b) tuple in [0, 1].

    Raises:
        ValueError: If the colour is not in '#rrggbb' form
    """
    value = color.lstrip('#')
    if len(value) != 6:
        raise ValueError(f"Expected '#rrggbb' colour, got '{color}'")

    return tuple(int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4))


def build_obj_document(
    scene: SiteScene,
    config: Optional[ExportConfig] = None
) -> ObjDocument:
    """
    Generate the site mesh and serialise it with its material library.

    Args:
        scene: Scene snapshot
        config: Export configuration (defaults to DEFAULT_CONFIG)

    Returns:
        ObjDocument with OBJ/MTL text, generator result and stats
    """
    if config is None:
        config = DEFAULT_CONFIG

    result = generate_site_mesh(scene)
    mesh = result.mesh

    material_library = config.material_library if config.include_materials else None
    obj_text = format_obj(mesh, material_library=material_library)
    mtl_text = format_mtl(mesh) if config.include_materials else ""

    stats = ExportStats(
        total_vertices=mesh.vertex_count,
        total_faces=mesh.face_count(),
        total_lines=mesh.line_count(),
        total_groups=len(mesh.non_empty_groups()),
        skipped_entities=len(result.skipped),
    )

    logger.info(
        f"Built OBJ: {stats.total_vertices} vertices, {stats.total_faces} faces, "
        f"{stats.total_lines} lines, {stats.total_groups} groups"
    )

    return ObjDocument(obj_text=obj_text, mtl_text=mtl_text, result=result, stats=stats)


def export_obj(scene: SiteScene, config: Optional[ExportConfig] = None) -> str:
    """
    Export a scene as OBJ text.

    Args:
        scene: Scene snapshot
        config: Export configuration (defaults to DEFAULT_CONFIG)

    Returns:
        OBJ document text
    """
    return build_obj_document(scene, config).obj_text


def write_text(text: str, filepath: str) -> int:
    """
    Write an export document to disk, creating parent directories.

    Args:
        text: Document text
        filepath: Output file path

    Returns:
        File size in bytes
    """
    os.makedirs(os.path.dirname(filepath) or '.', exist_ok=True)

    with open(filepath, 'w', encoding='utf-8', newline='\n') as f:
        f.write(text)

    return os.path.getsize(filepath)


def validate_obj_text(text: str) -> List[str]:
    """
    Validate OBJ text for common issues.

    Args:
        text: OBJ document

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    vertex_count = 0
    face_count = 0
    max_vertex_ref = 0

    for line_num, line in enumerate(text.splitlines(), 1):
        line = line.strip()

        if not line or line.startswith('#'):
            continue

        parts = line.split()

        if parts[0] == 'v':
            vertex_count += 1
            if len(parts) < 4:
                errors.append(f"Line {line_num}: Vertex has < 3 coordinates")

        elif parts[0] in ('f', 'l'):
            minimum = 3 if parts[0] == 'f' else 2
            if parts[0] == 'f':
                face_count += 1

            if len(parts) - 1 < minimum:
                errors.append(
                    f"Line {line_num}: '{parts[0]}' has < {minimum} vertices"
                )

            for part in parts[1:]:
                idx_str = part.split('/')[0]
                try:
                    idx = int(idx_str)
                except ValueError:
                    errors.append(f"Line {line_num}: Invalid vertex index '{idx_str}'")
                    continue

                if idx < 1:
                    errors.append(f"Line {line_num}: Invalid vertex index {idx}")
                max_vertex_ref = max(max_vertex_ref, idx)

    if max_vertex_ref > vertex_count:
        errors.append(
            f"Element references vertex {max_vertex_ref} but only {vertex_count} vertices exist"
        )

    if vertex_count == 0:
        errors.append("Document contains no vertices")

    return errors


def write_obj(document: ObjDocument, filepath: str) -> List[str]:
    """
    Write an OBJ export and, when present, its material library.

    The MTL file is written next to the OBJ file under the name the OBJ
    references in its 'mtllib' line.

    Args:
        document: Built OBJ document
        filepath: Output OBJ path

    Returns:
        Paths of the files written
    """
    written = [filepath]
    size = write_text(document.obj_text, filepath)
    logger.info(f"Wrote {filepath} ({size} bytes)")

    if document.mtl_text:
        mtl_name = None
        for line in document.obj_text.splitlines():
            if line.startswith("mtllib "):
                mtl_name = line.split(None, 1)[1]
                break

        if mtl_name:
            mtl_path = os.path.join(os.path.dirname(filepath), mtl_name)
            size = write_text(document.mtl_text, mtl_path)
            logger.info(f"Wrote {mtl_path} ({size} bytes)")
            written.append(mtl_path)

    return written
