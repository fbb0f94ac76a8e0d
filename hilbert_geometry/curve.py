"""
Curve codec: coordinate <-> Hilbert scalar.

The Hilbert walk itself comes from the ``hilbertcurve`` package. This module
lays it over a grid whose steps match the decimal precision of the
normalization convention, and owns the convention applied around it.
"""

import struct
from typing import Optional, Protocol, Tuple

from hilbertcurve.hilbertcurve import HilbertCurve

from .normalize import GEOGRAPHIC


# =============================================================================
# CONSTANTS
# =============================================================================

CURVE_VARIANT = "hilbert"

# Bits per axis of one curve tile. Two tiles side by side give 63 bits of
# curve position, enough for a 1e-7 degree grid over the whole globe.
CURVE_ORDER = 31
MAX_CURVE_ORDER = 31

_INDEX = struct.Struct("<Q")
_SCALAR = struct.Struct("<d")


def scalar_from_index(index: int) -> float:
    """
    Store a curve position as a float64 scalar.

    The scalar is the float whose bit pattern is ``index``. Non-negative
    floats order like their bit patterns, so scalars sort in curve order.

    Example:
        >>> scalar_from_index(0)
        0.0
        >>> scalar_from_index(1) < scalar_from_index(2)
        True
    """
    return _SCALAR.unpack(_INDEX.pack(index))[0]


def index_from_scalar(h: float) -> int:
    """Curve position stored in a scalar (inverse of scalar_from_index)."""
    return _INDEX.unpack(_SCALAR.pack(h))[0]


def max_cells(order: int) -> Tuple[int, int]:
    """Largest grid (x steps, y steps) a curve of the given order can hold."""
    side = 1 << order
    if order == MAX_CURVE_ORDER:
        # The last 2**52 positions of the second tile have inf/NaN bit
        # patterns. They fill the corner square at the end of the walk, so
        # both axes stop short of it.
        side -= 1 << (order - 5)
    return 2 * side - 1, side - 1


def grid_cells(normalizer, order: int = CURVE_ORDER) -> Tuple[int, int]:
    """
    Grid steps per axis that put one grid step on each decimal rounding step.

    A coordinate given with at most ``normalizer.precision`` fractional
    digits then sits exactly on a grid node. Domains too large for the curve
    get the finest grid it holds instead.

    Args:
        normalizer: Normalization convention (needs ``spans`` and ``precision``)
        order: Curve order

    Returns:
        (x steps, y steps)

    Example:
        >>> grid_cells(GEOGRAPHIC)
        (3600000000, 1800000000)
    """
    x_span, y_span = normalizer.spans
    scale = 10 ** normalizer.precision
    x_max, y_max = max_cells(order)
    return (
        max(1, min(round(x_span * scale), x_max)),
        max(1, min(round(y_span * scale), y_max)),
    )


class CurveMapping(Protocol):
    """Bijection between the unit square and scalar curve positions."""

    def coord_to_scalar(self, x: float, y: float) -> float:
        ...

    def scalar_to_coord(self, h: float) -> Tuple[float, float]:
        ...


class HilbertCurveMapping:
    """
    2D Hilbert mapping on the unit square.

    The square is divided into ``x_cells`` by ``y_cells`` grid steps and a
    coordinate snaps to the nearest grid node; coordinates outside [0, 1]
    are clamped to the border. The nodes are walked by two Hilbert tiles of
    ``2**order`` columns each, placed side by side along x. The position
    along that walk becomes the scalar through scalar_from_index(), so every
    grid node converts to a scalar and back exactly.

    Args:
        order: Bits per axis of one tile (1-31), default 31
        cells: Grid steps (x, y), default the largest grid the order holds

    Example:
        >>> mapping = HilbertCurveMapping(cells=(3600000000, 1800000000))
        >>> mapping.coord_to_scalar(0.0, 0.0)
        0.0
        >>> mapping.scalar_to_coord(mapping.coord_to_scalar(0.25, 0.625))
        (0.25, 0.625)
    """

    variant = CURVE_VARIANT

    def __init__(self, order: int = CURVE_ORDER, cells: Optional[Tuple[int, int]] = None):
        if not 1 <= order <= MAX_CURVE_ORDER:
            raise ValueError(f"Curve order must be in [1, {MAX_CURVE_ORDER}], got {order}")

        x_max, y_max = max_cells(order)
        x_cells, y_cells = cells if cells is not None else (x_max, y_max)
        if not (1 <= x_cells <= x_max and 1 <= y_cells <= y_max):
            raise ValueError(
                f"Grid ({x_cells}, {y_cells}) does not fit curve order {order}, "
                f"max is ({x_max}, {y_max})"
            )

        self.order = order
        self.cells = (x_cells, y_cells)
        self._curve = HilbertCurve(order, 2)
        self._tile_length = 1 << (2 * order)
        self._last_index = 2 * self._tile_length - 1

    @property
    def resolution(self) -> Tuple[float, float]:
        """Grid step per axis in unit-square coordinates."""
        return 1.0 / self.cells[0], 1.0 / self.cells[1]

    @staticmethod
    def _snap(v: float, cells: int) -> int:
        if not v > 0.0:
            return 0
        if v >= 1.0:
            return cells
        return round(v * cells)

    def coord_to_scalar(self, x: float, y: float) -> float:
        col = self._snap(x, self.cells[0])
        row = self._snap(y, self.cells[1])
        tile, col = divmod(col, 1 << self.order)
        index = tile * self._tile_length + self._curve.distance_from_point([col, row])
        return scalar_from_index(index)

    def scalar_to_coord(self, h: float) -> Tuple[float, float]:
        # Negative and NaN scalars are never produced; clamp them to the end
        index = min(index_from_scalar(h), self._last_index)
        tile, distance = divmod(index, self._tile_length)
        col, row = self._curve.point_from_distance(distance)
        col = min(col + (tile << self.order), self.cells[0])
        row = min(row, self.cells[1])
        return col / self.cells[0], row / self.cells[1]

    def __repr__(self) -> str:
        return f"HilbertCurveMapping(order={self.order}, cells={self.cells})"


class CurveCodec:
    """
    Encode single coordinates to Hilbert scalars and back.

    Combines one normalization convention with one curve mapping. Both are
    fixed at construction; an instance holds no other state and can be shared
    between threads. Without an explicit mapping the curve grid is aligned
    with the normalizer's decimal precision, so coordinates with at most that
    many fractional digits round trip exactly.

    Attributes:
        normalizer: Normalization convention (default: geographic divide-by-(180, 90))
        mapping: Curve mapping (default: HilbertCurveMapping on grid_cells(normalizer))
    """

    def __init__(self, normalizer=None, mapping: Optional[CurveMapping] = None):
        self.normalizer = normalizer if normalizer is not None else GEOGRAPHIC
        if mapping is None:
            mapping = HilbertCurveMapping(cells=grid_cells(self.normalizer))
        self.mapping = mapping

    def encode_coord(self, x: float, y: float) -> float:
        nx, ny = self.normalizer.normalize(x, y)
        return self.mapping.coord_to_scalar(nx, ny)

    def decode_coord(self, h: float) -> Tuple[float, float]:
        nx, ny = self.mapping.scalar_to_coord(h)
        return self.normalizer.denormalize(nx, ny)

    def __repr__(self) -> str:
        return f"CurveCodec(normalizer={self.normalizer!r}, mapping={self.mapping!r})"


DEFAULT_CODEC = CurveCodec()
