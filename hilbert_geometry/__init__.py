"""
Hilbert curve encoding of vector geometries.
"""

from .converter import (
    point_to_hilbert,
    line_to_hilbert,
    polygon_to_hilbert,
    encode_geometry,
    decode_geometry,
    convert_geodataframe_to_hilbert,
    convert_hilbert_to_geoseries,
)

from .normalize import (
    LinearNormalizer,
    WrapNormalizer,
    GEOGRAPHIC,
    PRECISION,
    round_decimal,
    get_normalizer,
)

from .curve import (
    CurveCodec,
    CurveMapping,
    HilbertCurveMapping,
    grid_cells,
    CURVE_ORDER,
    CURVE_VARIANT,
    DEFAULT_CODEC,
)

from .structs import (
    HilbertGeometry,
    HilbertPoint,
    HilbertLineString,
    HilbertPolygon,
    HilbertMultiPoint,
    HilbertMultiLineString,
    HilbertMultiPolygon,
)

from .serializer import HilbertSerializer, dumps, loads
from .config import HilbertConfig, load_config, build_codec

from .errors import (
    HilbertGeometryError,
    UnsupportedGeometryKind,
    EncodingFailure,
    DecodingFailure,
    InternalInvariantViolation,
    ConfigurationError,
)

__all__ = [
    "point_to_hilbert",
    "line_to_hilbert",
    "polygon_to_hilbert",
    "encode_geometry",
    "decode_geometry",
    "convert_geodataframe_to_hilbert",
    "convert_hilbert_to_geoseries",
    "LinearNormalizer",
    "WrapNormalizer",
    "GEOGRAPHIC",
    "PRECISION",
    "round_decimal",
    "get_normalizer",
    "CurveCodec",
    "CurveMapping",
    "HilbertCurveMapping",
    "grid_cells",
    "CURVE_ORDER",
    "CURVE_VARIANT",
    "DEFAULT_CODEC",
    "HilbertGeometry",
    "HilbertPoint",
    "HilbertLineString",
    "HilbertPolygon",
    "HilbertMultiPoint",
    "HilbertMultiLineString",
    "HilbertMultiPolygon",
    "HilbertSerializer",
    "dumps",
    "loads",
    "HilbertConfig",
    "load_config",
    "build_codec",
    "HilbertGeometryError",
    "UnsupportedGeometryKind",
    "EncodingFailure",
    "DecodingFailure",
    "InternalInvariantViolation",
    "ConfigurationError",
]
