"""
Processing modules for Site Plan Exporter.

Contains degenerate entity filtering and area statistics.
"""

from .entity_filter import (
    filter_exportable,
    FilterResult,
    SkippedEntity,
    SkipReason,
    EntityKind,
)
from .area_stats import AreaStats, compute_area_stats

__all__ = [
    'filter_exportable',
    'FilterResult',
    'SkippedEntity',
    'SkipReason',
    'EntityKind',
    'AreaStats',
    'compute_area_stats',
]
