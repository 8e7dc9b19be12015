"""
Utility functions for Site Plan Exporter.
"""

from .polygon_utils import (
    distance,
    midpoint,
    edge_lengths,
    polygon_signed_area,
    polygon_area,
    polygon_centroid,
    polygon_label_point,
    point_in_triangle,
)
from .triangulation import (
    triangulate_polygon,
    validate_triangulation,
)

__all__ = [
    'distance',
    'midpoint',
    'edge_lengths',
    'polygon_signed_area',
    'polygon_area',
    'polygon_centroid',
    'polygon_label_point',
    'point_in_triangle',
    'triangulate_polygon',
    'validate_triangulation',
]
