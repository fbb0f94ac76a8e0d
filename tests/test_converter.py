"""Tests for the geometry <-> Hilbert geometry transform."""

import geopandas as gpd
import pytest
from shapely.geometry import (
    GeometryCollection, LinearRing, LineString, MultiLineString, MultiPoint,
    MultiPolygon, Point, Polygon,
)

import hilbert_geometry.converter as converter
from hilbert_geometry.converter import (
    convert_geodataframe_to_hilbert,
    convert_hilbert_to_geoseries,
    decode_geometry,
    encode_geometry,
    line_to_hilbert,
    point_to_hilbert,
    polygon_to_hilbert,
)
from hilbert_geometry.curve import CurveCodec
from hilbert_geometry.errors import (
    DecodingFailure,
    InternalInvariantViolation,
    UnsupportedGeometryKind,
)
from hilbert_geometry.structs import (
    HilbertLineString,
    HilbertMultiLineString,
    HilbertMultiPoint,
    HilbertMultiPolygon,
    HilbertPoint,
    HilbertPolygon,
)
from tests.conftest import DONUT, GRID_POINTS, UNIT_SQUARE, LookupCurve


# ---------------------------------------------------------------------------
# Concrete scenarios
# ---------------------------------------------------------------------------

def test_point_encoding():
    for pt in (Point(0.5, 0.5), Point(-44.0, -22.0)):
        encoded = encode_geometry(pt)
        assert isinstance(encoded, HilbertPoint)
        assert decode_geometry(encoded) == pt


def test_linestring_encoding():
    ls = LineString([(1.0, 1.0), (5.0, 5.0)])
    encoded = encode_geometry(ls)
    assert isinstance(encoded, HilbertLineString)
    assert len(encoded.scalars) == 2
    decoded = decode_geometry(encoded)
    assert list(decoded.coords) == [(1.0, 1.0), (5.0, 5.0)]


def test_polygon_encoding():
    encoded = encode_geometry(UNIT_SQUARE)
    assert isinstance(encoded, HilbertPolygon)
    assert len(encoded.rings) == 1
    decoded = decode_geometry(encoded)
    assert decoded == UNIT_SQUARE
    assert list(decoded.exterior.coords) == list(UNIT_SQUARE.exterior.coords)
    assert len(decoded.interiors) == 0


def test_round_trip_identity(sample_geometries):
    for geom in sample_geometries:
        decoded = decode_geometry(encode_geometry(geom))
        assert decoded.geom_type == geom.geom_type
        assert decoded == geom


def test_round_trip_identity_with_lookup_curve(lookup_codec, sample_geometries):
    for geom in sample_geometries:
        assert decode_geometry(encode_geometry(geom, lookup_codec), lookup_codec) == geom


# ---------------------------------------------------------------------------
# Precision
# ---------------------------------------------------------------------------

def test_round_trip_on_world_corners():
    ls = LineString(GRID_POINTS + [(180.0, 90.0), (-179.9999999, 89.9999999)])
    assert decode_geometry(encode_geometry(ls)) == ls


def test_bounded_precision_loss():
    coords = [
        (8.541694123456, 47.376887654321),
        (-122.41941552, 37.77492950),
        (3.14159265358979, -2.71828182845904),
        (179.99999996, -89.99999996),
    ]
    decoded = decode_geometry(encode_geometry(LineString(coords)))
    for (x, y), (dx, dy) in zip(coords, decoded.coords):
        assert abs(dx - x) < 1e-6
        assert abs(dy - y) < 1e-6


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------

def test_ring_order_preserved():
    encoded = polygon_to_hilbert(DONUT)
    assert len(encoded.rings) == 4
    assert [len(r) for r in encoded.rings] == [5, 5, 5, 4]

    decoded = decode_geometry(encoded)
    assert list(decoded.exterior.coords) == list(DONUT.exterior.coords)
    assert [list(r.coords) for r in decoded.interiors] == [list(r.coords) for r in DONUT.interiors]


def test_empty_polygon_degeneracy():
    decoded = decode_geometry(HilbertPolygon(()))
    assert isinstance(decoded, Polygon)
    assert decoded.is_empty
    assert len(decoded.interiors) == 0

    assert encode_geometry(Polygon()) == HilbertPolygon(())


def test_empty_collections():
    assert encode_geometry(LineString()) == HilbertLineString(())
    assert encode_geometry(MultiPoint()) == HilbertMultiPoint(())
    assert encode_geometry(MultiPolygon()) == HilbertMultiPolygon(())

    decoded = decode_geometry(HilbertMultiLineString(()))
    assert isinstance(decoded, MultiLineString)
    assert decoded.is_empty


def test_multi_member_order_preserved():
    a = LineString([(0.0, 0.0), (1.0, 1.0)])
    b = LineString([(9.0, 9.0), (-3.25, 4.5), (2.0, 2.0)])
    mls = MultiLineString([a, b, a])
    decoded = decode_geometry(encode_geometry(mls))
    assert [list(g.coords) for g in decoded.geoms] == [list(a.coords), list(b.coords), list(a.coords)]

    mpoly = MultiPolygon([DONUT, UNIT_SQUARE])
    encoded = encode_geometry(mpoly)
    assert isinstance(encoded, HilbertMultiPolygon)
    assert [len(p) for p in encoded.polygons] == [4, 1]
    decoded = decode_geometry(encoded)
    assert list(decoded.geoms) == [DONUT, UNIT_SQUARE]


def test_multipoint():
    mp = MultiPoint([(3.0, 4.0), (-1.5, 0.25), (3.0, 4.0)])
    encoded = encode_geometry(mp)
    assert isinstance(encoded, HilbertMultiPoint)
    assert len(encoded.scalars) == 3
    assert encoded.scalars[0] == encoded.scalars[2]
    assert decode_geometry(encoded) == mp


def test_helpers_match_encode_geometry():
    codec = CurveCodec(mapping=LookupCurve())
    assert point_to_hilbert(Point(1.0, 2.0), codec) == HilbertPoint(0.0)
    assert line_to_hilbert(LineString([(0.0, 0.0), (1.0, 1.0)]), codec) == HilbertLineString((1.0, 2.0))


def test_z_values_are_dropped():
    decoded = decode_geometry(encode_geometry(Point(1.0, 2.0, 3.0)))
    assert decoded == Point(1.0, 2.0)
    assert not decoded.has_z


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("geom", [
    GeometryCollection([Point(0.0, 0.0)]),
    LinearRing([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]),
    Point(),
    "POINT (0 0)",
    None,
])
def test_unsupported_geometry_kind(geom):
    with pytest.raises(UnsupportedGeometryKind):
        encode_geometry(geom)


def test_unsupported_is_value_error():
    # Callers written against ValueError keep working
    with pytest.raises(ValueError, match="Unsupported geometry type"):
        encode_geometry(GeometryCollection())


def test_decode_rejects_non_hilbert_values():
    with pytest.raises(UnsupportedGeometryKind):
        decode_geometry(Point(0.0, 0.0))


@pytest.mark.parametrize("hgeom", [
    HilbertLineString((0.5,)),
    HilbertPolygon(((0.1, 0.2),)),
    HilbertMultiLineString(((0.1, 0.2), (0.3,))),
    HilbertMultiPolygon((((0.1, 0.2),),)),
])
def test_unbuildable_geometry_is_decoding_failure(hgeom):
    with pytest.raises(DecodingFailure) as excinfo:
        decode_geometry(hgeom)
    assert excinfo.value.__cause__ is not None


def test_empty_exterior_with_holes_is_decoding_failure():
    hole = encode_geometry(DONUT).rings[1]
    with pytest.raises(DecodingFailure, match="empty exterior"):
        decode_geometry(HilbertPolygon(((), hole)))


def test_invariant_violation_on_mismatched_member(monkeypatch, lookup_codec):
    encoded = encode_geometry(MultiPolygon([UNIT_SQUARE]), lookup_codec)
    monkeypatch.setattr(converter, "_decode_polygon", lambda hgeom, codec: Point(0.0, 0.0))
    with pytest.raises(InternalInvariantViolation, match="expected Polygon"):
        decode_geometry(encoded, lookup_codec)


def test_invariant_violation_on_mismatched_line(monkeypatch, lookup_codec):
    encoded = encode_geometry(MultiLineString([[(0.0, 0.0), (1.0, 1.0)]]), lookup_codec)
    monkeypatch.setattr(converter, "_decode_line", lambda hgeom, codec: Point(0.0, 0.0))
    with pytest.raises(InternalInvariantViolation):
        decode_geometry(encoded, lookup_codec)


# ---------------------------------------------------------------------------
# CRS + batch
# ---------------------------------------------------------------------------

def test_source_and_target_crs():
    # Web Mercator metres around Zurich
    pt = Point(950000.0, 6000000.0)
    encoded = encode_geometry(pt, source_crs=3857)
    wgs84 = decode_geometry(encoded)
    assert 8.0 < wgs84.x < 9.0
    assert 47.0 < wgs84.y < 48.0

    back = decode_geometry(encoded, target_crs="EPSG:3857")
    assert back.distance(pt) < 0.1


def test_geodataframe_round_trip():
    gdf = gpd.GeoDataFrame(
        {"name": ["point", "triangle", "line"]},
        geometry=[
            Point(8.5417, 47.3769),
            Polygon([(0.0, 0.0), (45.0, 0.0), (45.0, 22.5), (0.0, 0.0)]),
            LineString(GRID_POINTS),
        ],
        crs="EPSG:4326",
    )
    hgeoms = convert_geodataframe_to_hilbert(gdf)
    assert [type(hg) for hg in hgeoms] == [HilbertPoint, HilbertPolygon, HilbertLineString]

    series = convert_hilbert_to_geoseries(hgeoms, index=gdf.index)
    assert series.crs.to_epsg() == 4326
    assert list(series) == list(gdf.geometry)


def test_geodataframe_is_reprojected():
    gdf = gpd.GeoDataFrame(geometry=[Point(950000.0, 6000000.0)], crs="EPSG:3857")
    [hgeom] = convert_geodataframe_to_hilbert(gdf)
    decoded = decode_geometry(hgeom)
    assert 8.0 < decoded.x < 9.0
