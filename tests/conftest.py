"""Shared test fixtures."""

from __future__ import annotations

import pytest
from shapely.geometry import (
    LineString, MultiLineString, MultiPoint, MultiPolygon, Point, Polygon,
)

from hilbert_geometry.curve import CurveCodec


class LookupCurve:
    """Exact stand-in for the curve mapping.

    Remembers every normalized coordinate and hands out its table position as
    the scalar, so decode returns exactly what was encoded.
    """

    def __init__(self):
        self.table: list[tuple[float, float]] = []

    def coord_to_scalar(self, x: float, y: float) -> float:
        self.table.append((x, y))
        return float(len(self.table) - 1)

    def scalar_to_coord(self, h: float) -> tuple[float, float]:
        return self.table[int(h)]


# Concrete scenarios

UNIT_SQUARE = Polygon([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.0, 0.0)])

DONUT = Polygon(
    [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), (0.0, 0.0)],
    [
        [(1.0, 1.0), (2.0, 1.0), (2.0, 2.0), (1.0, 2.0), (1.0, 1.0)],
        [(5.0, 5.0), (6.0, 5.0), (6.0, 6.0), (5.0, 6.0), (5.0, 5.0)],
        [(7.5, 1.25), (8.5, 1.25), (8.5, 2.5), (7.5, 1.25)],
    ],
)

ZURICH_AREA = Polygon([
    (8.4480, 47.3202), (8.6250, 47.3202), (8.6250, 47.4347),
    (8.4480, 47.4347), (8.4480, 47.3202),
])

# Spread over the four quadrants of the geographic domain, corner included
GRID_POINTS = [
    (0.0, 0.0),
    (45.0, 22.5),
    (-90.0, -45.0),
    (11.25, -5.625),
    (-180.0, -90.0),
    (135.0, 67.5),
]


@pytest.fixture
def lookup_codec() -> CurveCodec:
    return CurveCodec(mapping=LookupCurve())


@pytest.fixture
def sample_geometries():
    return [
        Point(0.5, 0.5),
        Point(-44.0, -22.0),
        LineString([(1.0, 1.0), (5.0, 5.0)]),
        UNIT_SQUARE,
        DONUT,
        MultiPoint([(8.5417, 47.3769), (-122.4194, 37.7749), (151.2093, -33.8688)]),
        MultiLineString([
            [(0.0, 0.0), (1.0, 1.0)],
            [(-3.25, 4.5), (2.1234567, -7.7654321), (9.0, 9.0)],
        ]),
        MultiPolygon([DONUT, UNIT_SQUARE, ZURICH_AREA]),
    ]
