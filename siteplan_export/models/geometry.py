"""
Core geometry types for Site Plan Exporter.

Provides the Point2D and Point3D classes used throughout the pipeline.
Pixel-space scene points (models/scene.py) derive from Point2D so every
kernel function accepts them directly.
"""

from dataclasses import dataclass
import math


@dataclass(frozen=True, slots=True)
class Point2D:
    """2D point (pixel space or meters, depending on context)."""
    x: float
    y: float

    def distance_to(self, other: 'Point2D') -> float:
        """Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)


@dataclass(frozen=True, slots=True)
class Point3D:
    """3D point in real-world meters (X east, Y north, Z up)."""
    x: float
    y: float
    z: float
