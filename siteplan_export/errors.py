"""
Exception types for Site Plan Exporter.
"""


class SiteplanError(Exception):
    """Base class for all errors raised by the exporter."""
    pass


class SceneFormatError(SiteplanError):
    """Raised when a scene document cannot be parsed into a SiteScene."""
    pass


class DegenerateGeometryError(SiteplanError):
    """Raised when a polygon has zero signed area where one is required."""
    pass
