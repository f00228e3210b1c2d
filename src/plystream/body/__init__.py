"""Body decoders for the PLY body formats."""

from __future__ import annotations

__all__ = [
    "ASCIIBodyDecoder",
    "BaseBodyDecoder",
    "BinaryBodyDecoder",
    "ElementCursor",
    "get_decoder",
]

import typing as t

from plystream.body.ascii import ASCIIBodyDecoder
from plystream.body.base import BaseBodyDecoder, ElementCursor
from plystream.body.binary import BinaryBodyDecoder
from plystream.schema import Format

if t.TYPE_CHECKING:
    from plystream.schema import ElementRecord, PLYHeader

#: Mapping of body formats to their decoder classes.
_BODY_DECODERS: t.Final[t.Dict[Format, t.Type[BaseBodyDecoder]]] = {
    Format.ASCII: ASCIIBodyDecoder,
    Format.BINARY_LITTLE_ENDIAN: BinaryBodyDecoder,
    Format.BINARY_BIG_ENDIAN: BinaryBodyDecoder,
}


def get_decoder(header: PLYHeader, emit: t.Callable[[ElementRecord], None]) -> BaseBodyDecoder:
    """Get the body decoder for a parsed header.

    :param header: The parsed header.
    :param emit: The function receiving each completed record.
    :return: An instance of the decoder matching the header's format.
    """
    decoder_class = _BODY_DECODERS[header.format]
    return decoder_class(header.elements, emit)
