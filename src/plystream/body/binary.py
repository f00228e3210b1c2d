"""Decoder for binary PLY bodies."""

from __future__ import annotations

__all__ = ["BinaryBodyDecoder"]

import typing as t

from plystream.body.base import BaseBodyDecoder
from plystream.exceptions import UnexpectedBodyDataError
from plystream.schema import Progress, ScalarProperty

if t.TYPE_CHECKING:
    from plystream.body.base import ElementCursor
    from plystream.buffer import ByteBuffer


class BinaryBodyDecoder(BaseBodyDecoder):
    """Decoder for binary bodies in either byte order.

    Each step reads a single property of the in-progress record. The byte order
    is taken from the buffer, which the header parser configures.
    """

    def _step_record(self, buffer: ByteBuffer, cursor: ElementCursor) -> Progress:
        prop = cursor.pending[0]
        if isinstance(prop, ScalarProperty):
            value = buffer.try_consume_scalar(prop.value_type)
        else:
            value = buffer.try_consume_list(prop.length_type, prop.value_type)

        if value is None:
            return Progress.SUSPENDED

        cursor.fields[prop.name] = value
        cursor.pending.popleft()

        if not cursor.pending:
            self._complete_record(cursor.fields)

        return Progress.ADVANCED

    def _step_exhausted(self, buffer: ByteBuffer) -> Progress:
        if buffer.has_bytes():
            raise UnexpectedBodyDataError(f"{len(buffer)} unexpected byte(s) after the last element")

        return Progress.FINISHED
