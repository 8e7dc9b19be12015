"""
Projection module for Site Plan Exporter.

Provides a projection interface and the pixel projector that converts
canvas coordinates into real-world meters for both exporters.
"""

from abc import ABC, abstractmethod

from ..models.geometry import Point2D, Point3D
from ..models.scene import SiteScene
from .pixel_projector import PixelProjector, pixel_to_mesh, pixel_to_cad


class IProjector(ABC):
    """
    Abstract interface for coordinate projection.

    Implementations convert drawing coordinates into the real-world
    frame used by the exporters.
    """

    @abstractmethod
    def to_mesh(self, point: Point2D, z: float = 0.0) -> Point3D:
        """
        Project a drawing point into 3D mesh space.

        Args:
            point: Drawing-space point
            z: Height in meters

        Returns:
            Point3D in meters, Z up
        """
        pass

    @abstractmethod
    def to_cad(self, point: Point2D, z: float = 0.0) -> Point3D:
        """
        Project a drawing point into CAD space.

        Args:
            point: Drawing-space point
            z: Optional elevation in meters

        Returns:
            Point3D in meters
        """
        pass

    @abstractmethod
    def length(self, pixels: float) -> float:
        """Convert a drawing-space distance to meters."""
        pass

    @abstractmethod
    def area(self, square_pixels: float) -> float:
        """Convert a drawing-space area to square meters."""
        pass


IProjector.register(PixelProjector)


def create_projector(scene: SiteScene) -> IProjector:
    """
    Factory function to create the projector for a scene.

    Args:
        scene: Scene snapshot supplying scale and canvas height

    Returns:
        IProjector implementation
    """
    return PixelProjector(
        scale=scene.pixel_to_meter_scale,
        canvas_height=scene.canvas_height
    )


__all__ = [
    'IProjector',
    'PixelProjector',
    'pixel_to_mesh',
    'pixel_to_cad',
    'create_projector',
]
