"""Data structures describing PLY headers and decoded records."""

from __future__ import annotations

__all__ = [
    "AnyProperty",
    "ElementRecord",
    "ElementSchema",
    "Format",
    "ListProperty",
    "PLYHeader",
    "Progress",
    "ScalarProperty",
]

import dataclasses
import enum
import typing as t

from plystream.datatypes import Endianness

if t.TYPE_CHECKING:
    from plystream.datatypes import Number, PLYType


class Format(enum.Enum):
    """The encoding of a PLY body."""

    ASCII = "ascii"
    BINARY_LITTLE_ENDIAN = "binary_little_endian"
    BINARY_BIG_ENDIAN = "binary_big_endian"

    @classmethod
    def from_line(cls, line: str) -> Format | None:
        """Match a complete format line.

        :param line: The header line, e.g. ``format ascii 1.0``.
        :return: The declared format, or ``None`` if the line is not a recognized declaration.
        """
        return _FORMAT_LINES.get(line)

    @property
    def is_binary(self) -> bool:
        """Whether the body is binary."""
        return self is not Format.ASCII

    @property
    def endianness(self) -> Endianness:
        """The byte order of binary values. ASCII bodies report little-endian."""
        if self is Format.BINARY_BIG_ENDIAN:
            return Endianness.BIG

        return Endianness.LITTLE


#: The exact format lines accepted in the header.
_FORMAT_LINES: t.Final[dict[str, Format]] = {f"format {f.value} 1.0": f for f in Format}


@dataclasses.dataclass(frozen=True)
class ScalarProperty:
    """A property holding a single value per record."""

    #: The property name.
    name: str

    #: The type of the value.
    value_type: PLYType


@dataclasses.dataclass(frozen=True)
class ListProperty:
    """A property holding a length-prefixed sequence of values per record."""

    #: The property name.
    name: str

    #: The integer type of the length prefix.
    length_type: PLYType

    #: The type of the list values.
    value_type: PLYType


AnyProperty: t.TypeAlias = t.Union[ScalarProperty, ListProperty]


@dataclasses.dataclass(frozen=True)
class ElementSchema:
    """A named, counted group of records sharing one property layout."""

    #: The element name (e.g. ``vertex``).
    name: str

    #: The number of records declared in the header.
    count: int

    #: The property definitions, in declaration order.
    properties: tuple[AnyProperty, ...] = ()

    @property
    def property_names(self) -> list[str]:
        """The property names, in declaration order."""
        return [p.name for p in self.properties]

    def get_property(self, name: str) -> AnyProperty:
        """Get a property definition by name.

        :param name: The property name.
        :return: The property definition.
        :raises KeyError: If the element has no such property.
        """
        for prop in self.properties:
            if prop.name == name:
                return prop

        raise KeyError(f"Element '{self.name}' has no property '{name}'")


@dataclasses.dataclass(frozen=True)
class PLYHeader:
    """The parsed header of a PLY stream."""

    #: The body encoding.
    format: Format

    #: The element schemas, in declaration order.
    elements: tuple[ElementSchema, ...]

    #: The text of each ``comment`` line.
    comments: tuple[str, ...] = ()

    #: The text of each ``obj_info`` line.
    obj_info: tuple[str, ...] = ()

    def get_element(self, name: str) -> ElementSchema:
        """Get an element schema by name.

        :param name: The element name.
        :return: The element schema.
        :raises KeyError: If no element has that name.
        """
        for element in self.elements:
            if element.name == name:
                return element

        raise KeyError(f"No element named '{name}'")


@dataclasses.dataclass(frozen=True)
class ElementRecord:
    """A single decoded element record."""

    #: The name of the element the record belongs to.
    element: str

    #: The decoded values by property name, in declaration order.
    fields: dict[str, Number | list[Number]]

    def __getitem__(self, name: str) -> Number | list[Number]:
        """Get the value of a property."""
        return self.fields[name]


class Progress(enum.Enum):
    """Outcome of a single decoding step."""

    #: Something was consumed; stepping again may make further progress.
    ADVANCED = "advanced"

    #: Not enough bytes are buffered; nothing was consumed.
    SUSPENDED = "suspended"

    #: The phase has nothing left to decode.
    FINISHED = "finished"
