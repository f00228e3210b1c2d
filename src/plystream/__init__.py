"""An incremental decoder for Polygon File Format (PLY) streams."""

__all__ = [
    "ElementRecord",
    "ElementSchema",
    "Format",
    "ListProperty",
    "PLYData",
    "PLYDecoder",
    "PLYError",
    "PLYHeader",
    "PLYParseError",
    "PLYSchemaError",
    "PLYType",
    "ScalarProperty",
    "iter_ply",
    "load_ply",
]

from plystream.datatypes import PLYType
from plystream.decoder import PLYDecoder
from plystream.exceptions import PLYError, PLYParseError, PLYSchemaError
from plystream.loader import PLYData, iter_ply, load_ply
from plystream.schema import ElementRecord, ElementSchema, Format, ListProperty, PLYHeader, ScalarProperty
