"""
Pixel-to-world projection for Site Plan Exporter.

Converts canvas pixel coordinates (origin top-left, Y growing downward)
into real-world meters (X east, Y north, Z up). Both the mesh and the
CAD conventions scale by the pixel-to-meter factor and flip Y against
the canvas height; they differ only in how callers use Z.
"""

from ..models.geometry import Point2D, Point3D


def pixel_to_mesh(
    point: Point2D,
    scale: float,
    canvas_height: float,
    z: float = 0.0
) -> Point3D:
    """
    Convert a pixel-space point to 3D mesh space.

    Args:
        point: Pixel-space point
        scale: Meters per pixel
        canvas_height: Canvas height in pixels
        z: Height in meters

    Returns:
        (x * scale, (canvas_height - y) * scale, z)
    """
    return Point3D(
        point.x * scale,
        (canvas_height - point.y) * scale,
        z
    )


def pixel_to_cad(
    point: Point2D,
    scale: float,
    canvas_height: float,
    z: float = 0.0
) -> Point3D:
    """
    Convert a pixel-space point to CAD drawing space.

    Args:
        point: Pixel-space point
        scale: Meters per pixel
        canvas_height: Canvas height in pixels
        z: Optional elevation in meters

    Returns:
        (x * scale, (canvas_height - y) * scale, z)
    """
    return Point3D(
        point.x * scale,
        (canvas_height - point.y) * scale,
        z
    )


class PixelProjector:
    """
    Projection bound to one scene's scale and canvas height.

    Attributes:
        scale: Meters per pixel
        canvas_height: Canvas height in pixels
    """

    def __init__(self, scale: float, canvas_height: float):
        """
        Initialize projector.

        Args:
            scale: Meters per pixel (must be positive)
            canvas_height: Canvas height in pixels
        """
        if scale <= 0:
            raise ValueError("scale must be positive")

        self.scale = scale
        self.canvas_height = canvas_height

    def to_mesh(self, point: Point2D, z: float = 0.0) -> Point3D:
        """Project a pixel point into 3D mesh space at height z."""
        return pixel_to_mesh(point, self.scale, self.canvas_height, z)

    def to_cad(self, point: Point2D, z: float = 0.0) -> Point3D:
        """Project a pixel point into CAD space with elevation z."""
        return pixel_to_cad(point, self.scale, self.canvas_height, z)

    def length(self, pixels: float) -> float:
        """Convert a pixel distance to meters."""
        return pixels * self.scale

    def area(self, square_pixels: float) -> float:
        """Convert an area in square pixels to square meters."""
        return square_pixels * self.scale * self.scale

    def __repr__(self) -> str:
        return f"PixelProjector(scale={self.scale}, canvas_height={self.canvas_height})"
