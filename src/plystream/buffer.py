"""Accumulator for not-yet-consumed bytes of a PLY stream."""

from __future__ import annotations

__all__ = ["COMPACT_THRESHOLD", "ByteBuffer"]

import typing as t

from plystream.datatypes import Endianness
from plystream.exceptions import InvalidValueError

if t.TYPE_CHECKING:
    from plystream.datatypes import Number, PLYType

#: Size of the consumed prefix after which the backing storage is compacted.
COMPACT_THRESHOLD: t.Final[int] = 64 * 1024


class ByteBuffer:
    """A growable byte region with a read cursor.

    Every ``try_consume_*`` operation is atomic: it either consumes a whole unit
    and returns its value, or consumes nothing and returns ``None``.
    """

    #: The byte order used for binary reads.
    endianness: Endianness

    #: Whether a carriage return before the line feed is dropped from lines.
    strip_carriage_return: bool

    def __init__(self, endianness: Endianness = Endianness.LITTLE, *, strip_carriage_return: bool = True) -> None:
        """Initialize an empty buffer.

        :param endianness: The byte order used for binary reads. Default is little-endian.
        :param strip_carriage_return: Whether to drop a trailing ``\\r`` from lines. Default is ``True``.
        """
        self.endianness = endianness
        self.strip_carriage_return = strip_carriage_return

        self._data = bytearray()
        self._start = 0
        self._scan_from = 0

    def __len__(self) -> int:
        """The number of unconsumed bytes."""
        return len(self._data) - self._start

    @property
    def position(self) -> int:
        """The offset of the read cursor within the backing storage."""
        return self._start

    def append(self, data: bytes) -> None:
        """Append newly arrived bytes.

        :param data: The bytes to append.
        """
        self._data += data

    def has_bytes(self) -> bool:
        """Whether any unconsumed byte remains."""
        return self._start < len(self._data)

    def peek(self) -> bytes:
        """Return a copy of all unconsumed bytes without consuming them."""
        return bytes(self._data[self._start :])

    def try_consume_line(self) -> str | None:
        """Consume one line terminated by a line feed.

        :return: The line without its terminator, or ``None`` if no complete line is buffered.
        """
        end = self._data.find(b"\n", max(self._start, self._scan_from))
        if end == -1:
            self._scan_from = len(self._data)
            return None

        raw = self._data[self._start : end]
        if self.strip_carriage_return and raw.endswith(b"\r"):
            raw = raw[:-1]

        self._advance(end + 1 - self._start)
        return raw.decode("ascii", errors="replace")

    def try_consume_scalar(self, value_type: PLYType) -> Number | None:
        """Consume one binary value.

        :param value_type: The type of the value.
        :return: The decoded value, or ``None`` if not enough bytes are buffered.
        """
        if len(self) < value_type.width:
            return None

        value = value_type.decode(self._data, self._start, self.endianness)
        self._advance(value_type.width)
        return value

    def try_consume_list(self, length_type: PLYType, value_type: PLYType) -> list[Number] | None:
        """Consume one length-prefixed binary list.

        The length prefix is only committed together with the list values.

        :param length_type: The type of the length prefix.
        :param value_type: The type of the list values.
        :return: The decoded values, or ``None`` if the whole list is not buffered yet.
        """
        if len(self) < length_type.width:
            return None

        length = length_type.decode(self._data, self._start, self.endianness)
        if length < 0:
            raise InvalidValueError(f"Negative list length {length}")

        total = length_type.width + length * value_type.width
        if len(self) < total:
            return None

        values = value_type.decode_many(self._data, self._start + length_type.width, length, self.endianness)
        self._advance(total)
        return values

    def _advance(self, count: int) -> None:
        """Move the read cursor forward, compacting the storage when the consumed prefix grows large.

        :param count: The number of bytes consumed.
        """
        self._start += count
        if self._start >= COMPACT_THRESHOLD and self._start * 2 >= len(self._data):
            del self._data[: self._start]
            self._start = 0

        self._scan_from = self._start
