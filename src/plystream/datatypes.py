"""Registry of the primitive PLY property types."""

from __future__ import annotations

__all__ = ["Endianness", "PLYType"]

import enum
import math
import re
import struct
import typing as t

import numpy as np

from plystream.exceptions import InvalidValueError, UnknownTypeError

Number: t.TypeAlias = t.Union[int, float]

#: An ASCII integer token: decimal digits with an optional sign.
_INTEGER_PATTERN: t.Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")

#: An ASCII float token: decimal with an optional exponent, or a signed nan/inf.
_FLOAT_PATTERN: t.Final[re.Pattern[str]] = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|nan|inf|infinity)",
    re.IGNORECASE,
)

#: The largest finite float32 magnitude.
_FLOAT32_MAX: t.Final[float] = float(np.finfo(np.float32).max)


class Endianness(enum.Enum):
    """Byte order of a binary PLY body."""

    LITTLE = "<"
    BIG = ">"

    @property
    def prefix(self) -> str:
        """The :mod:`struct` byte order prefix."""
        return self.value


class PLYType(enum.Enum):
    """A primitive PLY property type.

    Each member carries its canonical name, byte width, :mod:`struct` format
    character and numpy dtype. The width-suffixed aliases (``int8``, ``float32``,
    ...) resolve to the same members through :meth:`from_name`.
    """

    CHAR = ("char", 1, "b", np.int8)
    UCHAR = ("uchar", 1, "B", np.uint8)
    SHORT = ("short", 2, "h", np.int16)
    USHORT = ("ushort", 2, "H", np.uint16)
    INT = ("int", 4, "i", np.int32)
    UINT = ("uint", 4, "I", np.uint32)
    FLOAT = ("float", 4, "f", np.float32)
    DOUBLE = ("double", 8, "d", np.float64)

    def __init__(self, type_name: str, width: int, struct_char: str, dtype: type[np.generic]) -> None:
        self.type_name = type_name
        self.width = width
        self.struct_char = struct_char
        self.dtype = np.dtype(dtype)

    @property
    def is_integer(self) -> bool:
        """Whether the type holds integer values."""
        return self.dtype.kind in "iu"

    @classmethod
    def from_name(cls, name: str) -> PLYType:
        """Look up a type by its canonical name or width-suffixed alias.

        :param name: The type name as written in the header.
        :return: The matching type.
        :raises UnknownTypeError: If the name is not recognized.
        """
        try:
            return _TYPES_BY_NAME[name]
        except KeyError:
            raise UnknownTypeError(name, _TYPES_BY_NAME) from None

    def decode(self, data: t.Union[bytes, bytearray, memoryview], offset: int, endianness: Endianness) -> Number:
        """Decode a single value from binary data.

        :param data: The buffer to read from.
        :param offset: The byte offset of the value.
        :param endianness: The byte order of the value.
        :return: The decoded value.
        """
        return struct.unpack_from(endianness.prefix + self.struct_char, data, offset)[0]

    def decode_many(
        self,
        data: t.Union[bytes, bytearray, memoryview],
        offset: int,
        count: int,
        endianness: Endianness,
    ) -> list[Number]:
        """Decode ``count`` consecutive values from binary data.

        :param data: The buffer to read from.
        :param offset: The byte offset of the first value.
        :param count: The number of values to decode.
        :param endianness: The byte order of the values.
        :return: The decoded values.
        """
        return list(struct.unpack_from(f"{endianness.prefix}{count}{self.struct_char}", data, offset))

    def parse_text(self, token: str) -> Number:
        """Parse a single value from an ASCII body token.

        Integers are plain decimal digits with an optional sign. Floats are
        decimal with an optional exponent, or ``nan``/``inf``/``infinity``.

        :param token: The whitespace-free token.
        :return: The parsed value.
        :raises InvalidValueError: If the token is not a valid value of this type.
        """
        if self.is_integer:
            if not _INTEGER_PATTERN.fullmatch(token):
                raise InvalidValueError(f"Invalid {self.type_name} value", token)

            value = int(token, 10)
            info = np.iinfo(self.dtype)
            if not info.min <= value <= info.max:
                raise InvalidValueError(f"Value out of range for {self.type_name}", token)

            return value

        if not _FLOAT_PATTERN.fullmatch(token):
            raise InvalidValueError(f"Invalid {self.type_name} value", token)

        value = float(token)
        if self is PLYType.FLOAT:
            if math.isfinite(value) and abs(value) > _FLOAT32_MAX:
                raise InvalidValueError(f"Value out of range for {self.type_name}", token)

            # Match the precision of a binary float32 value.
            return float(np.float32(value))

        return value


#: Mapping of every recognized type name to its type.
_TYPES_BY_NAME: t.Final[dict[str, PLYType]] = {
    "char": PLYType.CHAR,
    "int8": PLYType.CHAR,
    "uchar": PLYType.UCHAR,
    "uint8": PLYType.UCHAR,
    "short": PLYType.SHORT,
    "int16": PLYType.SHORT,
    "ushort": PLYType.USHORT,
    "uint16": PLYType.USHORT,
    "int": PLYType.INT,
    "int32": PLYType.INT,
    "uint": PLYType.UINT,
    "uint32": PLYType.UINT,
    "float": PLYType.FLOAT,
    "float32": PLYType.FLOAT,
    "double": PLYType.DOUBLE,
    "float64": PLYType.DOUBLE,
}
