"""
Binary codec for Hilbert encoded geometries.

HilbertGeometry values are handed to msgspec's MessagePack codec with one
fixed configuration: no compression and no version field. Each value is
written as ``[tag, payload]``; any structural change to the types in
``structs`` is a breaking format change.
"""

import logging
from typing import Any, Iterable, List, Optional

import msgspec

from .converter import (
    convert_geodataframe_to_hilbert,
    convert_hilbert_to_geoseries,
    decode_geometry,
    encode_geometry,
)
from .curve import CurveCodec, DEFAULT_CODEC
from .errors import DecodingFailure, EncodingFailure
from .structs import HilbertGeometry

logger = logging.getLogger(__name__)

_encoder = msgspec.msgpack.Encoder()
_decoder = msgspec.msgpack.Decoder(HilbertGeometry)


def dumps(hgeom: HilbertGeometry) -> bytes:
    """Serialize a HilbertGeometry to bytes."""
    try:
        return _encoder.encode(hgeom)
    except (msgspec.EncodeError, TypeError, ValueError, OverflowError) as exc:
        raise EncodingFailure(f"Cannot serialize {type(hgeom).__name__}: {exc}") from exc


def loads(data: bytes) -> HilbertGeometry:
    """Deserialize bytes into a HilbertGeometry."""
    try:
        return _decoder.decode(data)
    except msgspec.DecodeError as exc:
        # ValidationError (unknown tag, wrong payload shape) is a DecodeError too
        raise DecodingFailure(f"Invalid Hilbert geometry data: {exc}") from exc


class HilbertSerializer:
    """
    Geometry <-> bytes in one step.

    Composes the geometry transform with the binary codec. The only state is
    the curve codec fixed at construction, so one instance can be reused for
    any number of calls and from several threads.

    Attributes:
        codec: Curve codec shared by encode() and decode()

    Example:
        >>> from shapely.geometry import Polygon
        >>> serializer = HilbertSerializer()
        >>> data = serializer.encode(Polygon([(0, 0), (1, 0), (1, 1), (0, 1)]))
        >>> serializer.decode(data).geom_type
        'Polygon'
    """

    def __init__(self, codec: Optional[CurveCodec] = None):
        self.codec = codec if codec is not None else DEFAULT_CODEC

    @classmethod
    def from_config(cls, config) -> "HilbertSerializer":
        """Build a serializer from a HilbertConfig."""
        from .config import build_codec

        return cls(build_codec(config))

    def encode(self, geometry) -> bytes:
        """
        Encode a shapely geometry to bytes.

        Raises:
            UnsupportedGeometryKind: If the geometry kind has no Hilbert form
            EncodingFailure: If the binary codec rejects the value
        """
        data = dumps(encode_geometry(geometry, self.codec))
        logger.debug("Encoded %s to %d bytes", geometry.geom_type, len(data))
        return data

    def decode(self, data: bytes):
        """
        Decode bytes produced by encode() back to a shapely geometry.

        Raises:
            DecodingFailure: If the bytes are truncated, malformed, carry an
                unknown variant tag or describe a geometry that cannot be built
        """
        return decode_geometry(loads(data), self.codec)

    def encode_geodataframe(self, gdf: Any, geometry_column: str = 'geometry') -> List[bytes]:
        """Encode every geometry of a GeoDataFrame, one bytes value per row."""
        return [dumps(hg) for hg in convert_geodataframe_to_hilbert(gdf, geometry_column, self.codec)]

    def decode_many(self, blobs: Iterable[bytes], index=None):
        """Decode a sequence of encoded geometries into a GeoSeries (EPSG:4326)."""
        return convert_hilbert_to_geoseries([loads(b) for b in blobs], self.codec, index=index)
