"""
Coordinate normalization conventions.

Every convention maps a native coordinate pair onto the unit square consumed
by the curve mapping and back. The convention is fixed for the lifetime of an
encoder/decoder pair: nothing in the encoded bytes records which one was used,
so mixing conventions between producer and consumer corrupts coordinates
without any error.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


# =============================================================================
# CONSTANTS
# =============================================================================

# Fractional digits kept when denormalizing
PRECISION = 7

GEOGRAPHIC_EXTENTS: Tuple[float, float] = (180.0, 90.0)


def round_decimal(value: float, precision: int = PRECISION) -> float:
    """
    Round a value to a fixed number of fractional decimal digits.

    Absorbs the floating point error of the inverse curve mapping. A value
    supplied with at most ``precision`` fractional digits comes back exactly.

    Args:
        value: Value to round
        precision: Number of fractional digits (default: 7)

    Returns:
        Rounded value

    Example:
        >>> round_decimal(0.50000000000004)
        0.5
    """
    scale = 10.0 ** precision
    return round(value * scale) / scale


# =============================================================================
# CONVENTIONS
# =============================================================================

@dataclass(frozen=True)
class LinearNormalizer:
    """
    Fixed linear scale convention.

    Coordinates are divided by the extents into the signed unit square
    [-1, 1] x [-1, 1], which is then centred onto the curve's unit square.
    With extents (180, 90) this is the geographic divide-by-(180, 90) form.

    Attributes:
        x_extent: Half-width of the native x domain
        y_extent: Half-height of the native y domain
        precision: Fractional digits kept by denormalize()
    """
    x_extent: float = GEOGRAPHIC_EXTENTS[0]
    y_extent: float = GEOGRAPHIC_EXTENTS[1]
    precision: int = PRECISION

    def __post_init__(self):
        if self.x_extent <= 0 or self.y_extent <= 0:
            raise ValueError(
                f"Extents must be positive, got ({self.x_extent}, {self.y_extent})"
            )

    @property
    def name(self) -> str:
        if (self.x_extent, self.y_extent) == GEOGRAPHIC_EXTENTS:
            return "geographic"
        return "cartesian"

    @property
    def spans(self) -> Tuple[float, float]:
        """Native width and height covered by the unit square."""
        return 2.0 * self.x_extent, 2.0 * self.y_extent

    def normalize(self, x: float, y: float) -> Tuple[float, float]:
        nx = (x / self.x_extent + 1.0) / 2.0
        ny = (y / self.y_extent + 1.0) / 2.0
        return nx, ny

    def denormalize(self, nx: float, ny: float) -> Tuple[float, float]:
        x = (nx * 2.0 - 1.0) * self.x_extent
        y = (ny * 2.0 - 1.0) * self.y_extent
        return round_decimal(x, self.precision), round_decimal(y, self.precision)


@dataclass(frozen=True)
class WrapNormalizer:
    """
    Wrap-and-scale geographic convention.

    Longitude and latitude outside the canonical range are folded back into
    it before scaling, so lon=180 and lon=-180 land on the same position.
    """
    precision: int = PRECISION

    name = "wrap"
    spans = (360.0, 180.0)

    def normalize(self, lon: float, lat: float) -> Tuple[float, float]:
        lon_norm = ((lon + 180.0) % 360.0) / 360.0
        lat_norm = ((lat + 90.0) % 180.0) / 180.0
        return lon_norm, lat_norm

    def denormalize(self, lon_norm: float, lat_norm: float) -> Tuple[float, float]:
        lon = lon_norm * 360.0 - 180.0
        lat = lat_norm * 180.0 - 90.0
        return round_decimal(lon, self.precision), round_decimal(lat, self.precision)


GEOGRAPHIC = LinearNormalizer()

NORMALIZATIONS = ("geographic", "wrap", "cartesian")


def get_normalizer(
    name: str = "geographic",
    precision: int = PRECISION,
    x_extent: Optional[float] = None,
    y_extent: Optional[float] = None,
):
    """
    Resolve a normalization convention by name.

    Args:
        name: One of 'geographic', 'wrap', 'cartesian'
        precision: Fractional digits kept on decode
        x_extent: Half-width of the domain (cartesian only, required)
        y_extent: Half-height of the domain (cartesian only, defaults to x_extent)

    Returns:
        Normalizer instance

    Raises:
        ValueError: If the name is unknown or cartesian extents are missing
    """
    if name == "geographic":
        return LinearNormalizer(*GEOGRAPHIC_EXTENTS, precision=precision)

    elif name == "wrap":
        return WrapNormalizer(precision=precision)

    elif name == "cartesian":
        if x_extent is None:
            raise ValueError("Cartesian normalization requires x_extent")
        if y_extent is None:
            y_extent = x_extent
        return LinearNormalizer(x_extent, y_extent, precision=precision)

    else:
        raise ValueError(
            f"Unknown normalization: '{name}'. Valid: {list(NORMALIZATIONS)}"
        )
