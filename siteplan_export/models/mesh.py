"""
Mesh data model for Site Plan Exporter.

MeshData is the emission context for one OBJ export: it owns the running
1-based vertex counter and the ordered list of named groups. Every
emission step receives the same MeshData, opens its group, adds vertices
(getting back their global index) and references those indices in
faces and polylines. Nothing is shared between export calls.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Optional


@dataclass
class MeshGroup:
    """
    One named OBJ group.

    Attributes:
        name: Group name written as 'g <name>'
        material: Optional material written as 'usemtl <material>'
        vertices: (x, y, z) positions in emission order
        faces: Triangle faces as global 1-based vertex indices
        lines: Open polylines as global 1-based vertex indices
        first_index: Global 1-based index of this group's first vertex
    """
    name: str
    material: Optional[str] = None
    vertices: List[Tuple[float, float, float]] = field(default_factory=list)
    faces: List[List[int]] = field(default_factory=list)
    lines: List[List[int]] = field(default_factory=list)
    first_index: int = 1

    def is_empty(self) -> bool:
        """Check if group has no geometry."""
        return len(self.vertices) == 0


@dataclass
class MeshData:
    """
    Emission context for a whole OBJ document.

    Vertex indices are global across the document and 1-based, as in
    OBJ. add_vertex() advances the counter and returns the index of the
    vertex just added, so callers never compute offsets by hand.

    Attributes:
        object_name: Name written as 'o <name>'
        groups: Groups in emission order
        vertex_count: Running number of vertices emitted so far
    """
    object_name: str = "SiteModel"
    groups: List[MeshGroup] = field(default_factory=list)
    vertex_count: int = 0

    @property
    def current_group(self) -> MeshGroup:
        """Group receiving new geometry."""
        if not self.groups:
            raise RuntimeError("begin_group() must be called before adding geometry")
        return self.groups[-1]

    @property
    def next_index(self) -> int:
        """Global index the next vertex will receive."""
        return self.vertex_count + 1

    def begin_group(self, name: str, material: Optional[str] = None) -> MeshGroup:
        """
        Start a new group; subsequent geometry goes into it.

        Args:
            name: Group name
            material: Optional material name

        Returns:
            The new MeshGroup
        """
        group = MeshGroup(name=name, material=material, first_index=self.next_index)
        self.groups.append(group)
        return group

    def add_vertex(self, x: float, y: float, z: float) -> int:
        """
        Add a vertex to the current group and return its global 1-based index.

        Args:
            x, y, z: Vertex coordinates

        Returns:
            1-based index of the new vertex
        """
        self.current_group.vertices.append((x, y, z))
        self.vertex_count += 1
        return self.vertex_count

    def add_triangle(self, v1: int, v2: int, v3: int) -> None:
        """
        Add a triangle face.

        Args:
            v1, v2, v3: Vertex indices (1-based)
        """
        self.current_group.faces.append([v1, v2, v3])

    def add_quad(self, v1: int, v2: int, v3: int, v4: int) -> None:
        """
        Add a quad face (will be triangulated).

        Splits quad into two triangles: (v1, v2, v3) and (v1, v3, v4)

        Args:
            v1, v2, v3, v4: Vertex indices (1-based, in ring order)
        """
        self.add_triangle(v1, v2, v3)
        self.add_triangle(v1, v3, v4)

    def add_polyline(self, indices: List[int]) -> None:
        """
        Add an open polyline.

        Args:
            indices: Vertex indices (1-based), at least 2
        """
        if len(indices) < 2:
            raise ValueError("A polyline needs at least 2 vertices")
        self.current_group.lines.append(list(indices))

    def non_empty_groups(self) -> List[MeshGroup]:
        """Groups that received at least one vertex, in emission order."""
        return [g for g in self.groups if not g.is_empty()]

    def get_group(self, name: str) -> Optional[MeshGroup]:
        """Find a group by name."""
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def face_count(self) -> int:
        """Total number of faces."""
        return sum(len(g.faces) for g in self.groups)

    def line_count(self) -> int:
        """Total number of polylines."""
        return sum(len(g.lines) for g in self.groups)

    def is_empty(self) -> bool:
        """Check if mesh has no geometry."""
        return self.vertex_count == 0

    def validate(self) -> List[str]:
        """
        Validate mesh integrity.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if self.is_empty():
            errors.append("Mesh has no vertices")
            return errors

        max_idx = self.vertex_count

        for group in self.groups:
            for i, face in enumerate(group.faces):
                if len(face) < 3:
                    errors.append(f"{group.name}: face {i} has fewer than 3 vertices")

                for idx in face:
                    if idx < 1 or idx > max_idx:
                        errors.append(
                            f"{group.name}: face {i} has invalid vertex index {idx} "
                            f"(valid range: 1-{max_idx})"
                        )

            for i, line in enumerate(group.lines):
                for idx in line:
                    if idx < 1 or idx > max_idx:
                        errors.append(
                            f"{group.name}: line {i} has invalid vertex index {idx} "
                            f"(valid range: 1-{max_idx})"
                        )

        return errors

    def compute_bounds(self) -> Optional[Tuple[Tuple[float, float, float],
                                                 Tuple[float, float, float]]]:
        """
        Compute bounding box of the mesh.

        Returns:
            ((min_x, min_y, min_z), (max_x, max_y, max_z)) or None if empty
        """
        vertices = [v for g in self.groups for v in g.vertices]
        if not vertices:
            return None

        xs = [v[0] for v in vertices]
        ys = [v[1] for v in vertices]
        zs = [v[2] for v in vertices]

        return (
            (min(xs), min(ys), min(zs)),
            (max(xs), max(ys), max(zs))
        )

    def __repr__(self) -> str:
        return (
            f"MeshData(groups={len(self.groups)}, vertices={self.vertex_count}, "
            f"faces={self.face_count()}, lines={self.line_count()})"
        )
