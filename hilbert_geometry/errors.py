"""
Exception types raised by the Hilbert geometry codec.
"""


class HilbertGeometryError(Exception):
    """Base class for all errors raised by hilbert_geometry."""


class UnsupportedGeometryKind(HilbertGeometryError, ValueError):
    """The geometry has no Hilbert encoding rule (e.g. GeometryCollection)."""


class EncodingFailure(HilbertGeometryError):
    """The binary facility could not serialize a HilbertGeometry."""


class DecodingFailure(HilbertGeometryError, ValueError):
    """Encoded data is truncated, malformed or describes no valid geometry."""


class InternalInvariantViolation(HilbertGeometryError, RuntimeError):
    """A decoded multi-geometry member does not match its expected type."""


class ConfigurationError(HilbertGeometryError, ValueError):
    """Invalid codec configuration."""
