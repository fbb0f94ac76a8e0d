"""
Hilbert encoded geometry types.

A closed tagged union mirroring the six supported geometry kinds. Each type
is an array-like msgspec Struct with an integer tag, so on the wire a value is
``[tag, payload]``. Changing these definitions breaks the binary format.
"""

from typing import Tuple, Union

import msgspec

Scalar = float
Ring = Tuple[Scalar, ...]


class HilbertPoint(msgspec.Struct, frozen=True, array_like=True, tag=0):
    scalar: Scalar


class HilbertLineString(msgspec.Struct, frozen=True, array_like=True, tag=1):
    scalars: Tuple[Scalar, ...] = ()


# Ring 0 is the exterior, the rest are interiors. Zero rings is an empty polygon.
class HilbertPolygon(msgspec.Struct, frozen=True, array_like=True, tag=2):
    rings: Tuple[Ring, ...] = ()


class HilbertMultiPoint(msgspec.Struct, frozen=True, array_like=True, tag=3):
    scalars: Tuple[Scalar, ...] = ()


class HilbertMultiLineString(msgspec.Struct, frozen=True, array_like=True, tag=4):
    lines: Tuple[Tuple[Scalar, ...], ...] = ()


class HilbertMultiPolygon(msgspec.Struct, frozen=True, array_like=True, tag=5):
    polygons: Tuple[Tuple[Ring, ...], ...] = ()


HilbertGeometry = Union[
    HilbertPoint,
    HilbertLineString,
    HilbertPolygon,
    HilbertMultiPoint,
    HilbertMultiLineString,
    HilbertMultiPolygon,
]
