"""Decoder for ASCII PLY bodies."""

from __future__ import annotations

__all__ = ["ASCIIBodyDecoder", "parse_record_line"]

import typing as t

from plystream.body.base import BaseBodyDecoder
from plystream.exceptions import ListLengthMismatchError, PropertyCountMismatchError, UnexpectedBodyDataError
from plystream.schema import Progress, ScalarProperty

if t.TYPE_CHECKING:
    from plystream.body.base import ElementCursor
    from plystream.buffer import ByteBuffer
    from plystream.datatypes import Number
    from plystream.schema import ElementSchema


class ASCIIBodyDecoder(BaseBodyDecoder):
    """Decoder for ASCII bodies, one record per line.

    Blank lines are skipped.
    """

    def _step_record(self, buffer: ByteBuffer, cursor: ElementCursor) -> Progress:
        line = buffer.try_consume_line()
        if line is None:
            return Progress.SUSPENDED

        tokens = line.split()
        if tokens:
            self._complete_record(parse_record_line(cursor.schema, tokens, line))

        return Progress.ADVANCED

    def _step_exhausted(self, buffer: ByteBuffer) -> Progress:
        line = buffer.try_consume_line()
        if line is None:
            return Progress.SUSPENDED if buffer.has_bytes() else Progress.FINISHED

        if line.strip():
            raise UnexpectedBodyDataError("Unexpected data after the last element", line)

        return Progress.ADVANCED


def parse_record_line(schema: ElementSchema, tokens: list[str], line: str) -> dict[str, Number | list[Number]]:
    """Decode the tokens of one ASCII body line into record values.

    :param schema: The schema of the element the line belongs to.
    :param tokens: The whitespace-separated tokens of the line.
    :param line: The raw line, for error reporting.
    :return: The decoded values by property name.
    :raises PropertyCountMismatchError: If the line holds too few or too many values.
    :raises ListLengthMismatchError: If a list declares a length different from the values present.
    :raises InvalidValueError: If a token is not a valid value of its type.
    """
    properties = schema.properties
    if all(isinstance(p, ScalarProperty) for p in properties):
        if len(tokens) != len(properties):
            raise PropertyCountMismatchError(len(properties), len(tokens), line)

        return {p.name: p.value_type.parse_text(token) for p, token in zip(properties, tokens)}

    fields: dict[str, Number | list[Number]] = {}
    pos = 0
    for index, prop in enumerate(properties):
        if pos >= len(tokens):
            # Each remaining scalar needs a token, each remaining list at least its length.
            raise PropertyCountMismatchError(pos + len(properties) - index, len(tokens), line)

        if isinstance(prop, ScalarProperty):
            fields[prop.name] = prop.value_type.parse_text(tokens[pos])
            pos += 1
            continue

        length = prop.length_type.parse_text(tokens[pos])
        available = len(tokens) - pos - 1
        is_last = index == len(properties) - 1
        if length < 0 or length > available or (is_last and length != available):
            raise ListLengthMismatchError(length, available, line)

        values = tokens[pos + 1 : pos + 1 + length]
        fields[prop.name] = [prop.value_type.parse_text(token) for token in values]
        pos += 1 + length

    if pos != len(tokens):
        raise PropertyCountMismatchError(pos, len(tokens), line)

    return fields
