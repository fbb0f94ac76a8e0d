"""
Vector geometry to Hilbert index conversion functions.

Supports conversion of points, lines, polygons and their Multi* variants to
Hilbert encoded geometries and back, with optional coordinate transformation.
"""

import logging
from typing import List, Optional, Union, Any

from shapely.geometry import (
    Point, LineString, LinearRing, Polygon, MultiPoint, MultiLineString, MultiPolygon,
)
from shapely.geometry.base import BaseGeometry
from shapely.errors import GEOSException
from shapely.ops import transform
from pyproj import Transformer, CRS
import geopandas as gpd

from .curve import CurveCodec, DEFAULT_CODEC
from .errors import DecodingFailure, InternalInvariantViolation, UnsupportedGeometryKind
from .structs import (
    HilbertGeometry,
    HilbertPoint,
    HilbertLineString,
    HilbertPolygon,
    HilbertMultiPoint,
    HilbertMultiLineString,
    HilbertMultiPolygon,
)

logger = logging.getLogger(__name__)

Geometry = Union[Point, LineString, Polygon, MultiPoint, MultiLineString, MultiPolygon]
CrsInput = Optional[Union[str, int]]


# =============================================================================
# CRS HELPERS
# =============================================================================

def _to_crs(crs: Union[str, int]) -> CRS:
    # Handle different CRS input formats
    if isinstance(crs, int):
        crs = f"EPSG:{crs}"
    return CRS.from_user_input(crs)


def _ensure_wgs84(geometry, source_crs: CrsInput = None):
    """
    Transform geometry to WGS84 if needed.

    Args:
        geometry: Shapely geometry object
        source_crs: Source CRS (EPSG code as int, string like 'EPSG:2056', or None for WGS84)

    Returns:
        Transformed geometry in WGS84
    """
    if source_crs is None:
        return geometry

    transformer = Transformer.from_crs(
        _to_crs(source_crs),
        CRS.from_epsg(4326),  # WGS84
        always_xy=True
    )
    logger.debug("Reprojecting %s from %s to EPSG:4326", geometry.geom_type, source_crs)
    return transform(transformer.transform, geometry)


def _from_wgs84(geometry, target_crs: CrsInput = None):
    """Transform a WGS84 geometry to target_crs (no-op for None)."""
    if target_crs is None:
        return geometry

    transformer = Transformer.from_crs(
        CRS.from_epsg(4326),
        _to_crs(target_crs),
        always_xy=True
    )
    logger.debug("Reprojecting %s from EPSG:4326 to %s", geometry.geom_type, target_crs)
    return transform(transformer.transform, geometry)


# =============================================================================
# ENCODING
# =============================================================================

def _encode_coords(coords, codec: CurveCodec) -> tuple:
    # Only x and y take part; a z value is dropped
    return tuple(codec.encode_coord(c[0], c[1]) for c in coords)


def point_to_hilbert(point: Point, codec: CurveCodec = DEFAULT_CODEC) -> HilbertPoint:
    """
    Convert a point geometry to a Hilbert encoded point.

    Args:
        point: Shapely Point (not empty)
        codec: Curve codec to use

    Returns:
        HilbertPoint holding one curve scalar

    Raises:
        UnsupportedGeometryKind: If the point is empty
    """
    if point.is_empty:
        raise UnsupportedGeometryKind("Empty Point has no coordinate to encode")
    x, y = point.coords[0][:2]
    return HilbertPoint(codec.encode_coord(x, y))


def line_to_hilbert(line: LineString, codec: CurveCodec = DEFAULT_CODEC) -> HilbertLineString:
    """Convert a line geometry to a Hilbert encoded line, vertex order kept."""
    return HilbertLineString(_encode_coords(line.coords, codec))


def polygon_to_hilbert(polygon: Polygon, codec: CurveCodec = DEFAULT_CODEC) -> HilbertPolygon:
    """
    Convert a polygon geometry to a Hilbert encoded polygon.

    The exterior ring is always ring 0, followed by the interior rings in
    their original order. The point order of every ring is preserved. An
    empty polygon encodes to zero rings.

    Args:
        polygon: Shapely Polygon
        codec: Curve codec to use

    Returns:
        HilbertPolygon with the exterior first
    """
    if polygon.is_empty:
        return HilbertPolygon(())

    exterior = _encode_coords(polygon.exterior.coords, codec)
    interiors = [_encode_coords(ring.coords, codec) for ring in polygon.interiors]
    return HilbertPolygon((exterior, *interiors))


def encode_geometry(
    geometry: Geometry,
    codec: Optional[CurveCodec] = None,
    source_crs: CrsInput = None
) -> HilbertGeometry:
    """
    Convert any supported geometry type to its Hilbert encoded form.

    Handles Point, LineString, Polygon, and Multi* variants. Multi* members
    are encoded one by one through the single geometry case, member order is
    preserved.

    Args:
        geometry: Shapely geometry object
        codec: Curve codec (default: geographic normalization on a 1e-7 degree grid)
        source_crs: Source CRS (e.g., 2056 for LV95, None for WGS84)

    Returns:
        HilbertGeometry of the matching kind

    Raises:
        UnsupportedGeometryKind: If geometry type is not supported

    Example:
        >>> from shapely.geometry import LineString
        >>> hg = encode_geometry(LineString([(1.0, 1.0), (5.0, 5.0)]))
        >>> len(hg.scalars)
        2
    """
    if codec is None:
        codec = DEFAULT_CODEC

    if not isinstance(geometry, BaseGeometry):
        raise UnsupportedGeometryKind(f"Unsupported geometry type: {type(geometry)}")

    geometry = _ensure_wgs84(geometry, source_crs)

    if isinstance(geometry, Point):
        return point_to_hilbert(geometry, codec)

    # LinearRing is a LineString subclass but not one of the supported kinds
    elif isinstance(geometry, LinearRing):
        raise UnsupportedGeometryKind(f"Unsupported geometry type: {type(geometry)}")

    elif isinstance(geometry, LineString):
        return line_to_hilbert(geometry, codec)

    elif isinstance(geometry, Polygon):
        return polygon_to_hilbert(geometry, codec)

    elif isinstance(geometry, MultiPoint):
        return HilbertMultiPoint(tuple(
            point_to_hilbert(pt, codec).scalar for pt in geometry.geoms
        ))

    elif isinstance(geometry, MultiLineString):
        return HilbertMultiLineString(tuple(
            line_to_hilbert(ls, codec).scalars for ls in geometry.geoms
        ))

    elif isinstance(geometry, MultiPolygon):
        return HilbertMultiPolygon(tuple(
            polygon_to_hilbert(poly, codec).rings for poly in geometry.geoms
        ))

    else:
        raise UnsupportedGeometryKind(f"Unsupported geometry type: {type(geometry)}")


# =============================================================================
# DECODING
# =============================================================================

def _decode_coords(scalars, codec: CurveCodec) -> List[tuple]:
    return [codec.decode_coord(h) for h in scalars]


def _build(geometry_type, *args):
    # A well formed payload can still describe a geometry shapely rejects,
    # e.g. a one-vertex line or a ring with fewer than four coordinates
    try:
        return geometry_type(*args)
    except (ValueError, GEOSException) as exc:
        raise DecodingFailure(
            f"Cannot build {geometry_type.__name__} from decoded coordinates: {exc}"
        ) from exc


def _decode_point(hgeom: HilbertPoint, codec: CurveCodec) -> Point:
    return Point(codec.decode_coord(hgeom.scalar))


def _decode_line(hgeom: HilbertLineString, codec: CurveCodec) -> LineString:
    return _build(LineString, _decode_coords(hgeom.scalars, codec))


def _decode_polygon(hgeom: HilbertPolygon, codec: CurveCodec) -> Polygon:
    # Zero rings is the empty polygon, not an error
    if not hgeom.rings:
        return Polygon()

    if not hgeom.rings[0]:
        if len(hgeom.rings) > 1:
            raise DecodingFailure(
                f"Polygon has an empty exterior but {len(hgeom.rings) - 1} interior ring(s)"
            )
        return Polygon()

    exterior = _decode_coords(hgeom.rings[0], codec)
    interiors = [_decode_coords(ring, codec) for ring in hgeom.rings[1:]]
    return _build(Polygon, exterior, interiors)


def _expect(geometry, expected_type, member_index: int):
    if not isinstance(geometry, expected_type):
        raise InternalInvariantViolation(
            f"Member {member_index} decoded to {geometry.geom_type}, "
            f"expected {expected_type.__name__}"
        )
    return geometry


def _decode(hgeom: HilbertGeometry, codec: CurveCodec):
    if isinstance(hgeom, HilbertPoint):
        return _decode_point(hgeom, codec)

    elif isinstance(hgeom, HilbertLineString):
        return _decode_line(hgeom, codec)

    elif isinstance(hgeom, HilbertPolygon):
        return _decode_polygon(hgeom, codec)

    elif isinstance(hgeom, HilbertMultiPoint):
        return _build(MultiPoint, _decode_coords(hgeom.scalars, codec))

    elif isinstance(hgeom, HilbertMultiLineString):
        # Each member is decoded as a standalone LineString
        lines = [
            _expect(_decode(HilbertLineString(scalars), codec), LineString, i)
            for i, scalars in enumerate(hgeom.lines)
        ]
        return _build(MultiLineString, lines)

    elif isinstance(hgeom, HilbertMultiPolygon):
        polygons = [
            _expect(_decode(HilbertPolygon(rings), codec), Polygon, i)
            for i, rings in enumerate(hgeom.polygons)
        ]
        return _build(MultiPolygon, polygons)

    else:
        raise UnsupportedGeometryKind(f"Unsupported Hilbert geometry type: {type(hgeom)}")


def decode_geometry(
    hgeom: HilbertGeometry,
    codec: Optional[CurveCodec] = None,
    target_crs: CrsInput = None
) -> Geometry:
    """
    Convert a Hilbert encoded geometry back to a shapely geometry.

    Structural inverse of encode_geometry(). Every coordinate is rounded to
    the codec's precision (7 fractional digits by default).

    Args:
        hgeom: HilbertGeometry value
        codec: Curve codec, must use the same convention as the encoder
        target_crs: CRS to reproject the WGS84 result into (None keeps WGS84)

    Returns:
        Shapely geometry of the matching kind

    Raises:
        UnsupportedGeometryKind: If hgeom is not a HilbertGeometry
        DecodingFailure: If the scalars describe a geometry that cannot be built
        InternalInvariantViolation: If a Multi* member decodes to the wrong type

    Example:
        >>> from shapely.geometry import Point
        >>> decode_geometry(encode_geometry(Point(45.0, 22.5)))
        <POINT (45 22.5)>
    """
    if codec is None:
        codec = DEFAULT_CODEC

    return _from_wgs84(_decode(hgeom, codec), target_crs)


# =============================================================================
# BATCH CONVERSION
# =============================================================================

def convert_geodataframe_to_hilbert(
    gdf: Any,
    geometry_column: str = 'geometry',
    codec: Optional[CurveCodec] = None
) -> List[HilbertGeometry]:
    """
    Batch conversion of GeoDataFrame geometries to Hilbert geometries.

    Transforms the whole frame to WGS84 in one operation instead of
    reprojecting row by row.

    Args:
        gdf: GeoDataFrame with geometries to convert
        geometry_column: Name of the geometry column, default 'geometry'
        codec: Curve codec to use

    Returns:
        List of HilbertGeometry, one per row

    Example:
        >>> import geopandas as gpd
        >>> gdf = gpd.read_file('data.gpkg')
        >>> gdf['hilbert'] = convert_geodataframe_to_hilbert(gdf)
    """
    # Batch transform to WGS84 once
    if gdf.crs is not None and gdf.crs.to_epsg() != 4326:
        logger.warning("Reprojecting %d rows from %s to EPSG:4326", len(gdf), gdf.crs)
        gdf = gdf.to_crs(epsg=4326)

    return [encode_geometry(geom, codec) for geom in gdf[geometry_column]]


def convert_hilbert_to_geoseries(
    hgeoms: List[HilbertGeometry],
    codec: Optional[CurveCodec] = None,
    index=None
):
    """
    Decode a batch of Hilbert geometries into a GeoSeries in EPSG:4326.

    Args:
        hgeoms: Hilbert geometries
        codec: Curve codec, same convention as the encoder
        index: Optional index for the resulting series

    Returns:
        GeoSeries of shapely geometries
    """
    geometries = [decode_geometry(hg, codec) for hg in hgeoms]
    return gpd.GeoSeries(geometries, index=index, crs="EPSG:4326")
