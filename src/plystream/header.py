"""State machine parsing the header of a PLY stream."""

from __future__ import annotations

__all__ = ["HeaderParser", "HeaderState"]

import dataclasses
import enum
import logging
import typing as t

from plystream.datatypes import PLYType
from plystream.exceptions import (
    DecoderStateError,
    InvalidFormatLineError,
    InvalidHeaderLineError,
    MagicMismatchError,
    MalformedElementLineError,
    UnsupportedSchemaError,
)
from plystream.schema import ElementSchema, Format, ListProperty, PLYHeader, Progress, ScalarProperty

if t.TYPE_CHECKING:
    from plystream.buffer import ByteBuffer
    from plystream.schema import AnyProperty

logger = logging.getLogger(__name__)


class HeaderState(enum.Enum):
    """The position of the header parser within the header grammar."""

    BEGIN = "begin"
    FORMAT = "format"
    HEADER = "header"
    DONE = "done"


@dataclasses.dataclass
class _ElementDraft:
    """An element whose properties are still being declared."""

    name: str
    count: int
    properties: list[AnyProperty] = dataclasses.field(default_factory=list)

    def add_property(self, prop: AnyProperty) -> None:
        if any(p.name == prop.name for p in self.properties):
            raise UnsupportedSchemaError(self.name, f"duplicate property '{prop.name}'")

        if self.properties and isinstance(self.properties[0], ListProperty):
            raise UnsupportedSchemaError(self.name, "a list property must be the only property of its element")

        self.properties.append(prop)

    def freeze(self) -> ElementSchema:
        if self.count > 0 and not self.properties:
            raise UnsupportedSchemaError(self.name, "element declares records but no properties")

        return ElementSchema(self.name, self.count, tuple(self.properties))


class HeaderParser:
    """Incremental parser for the header section of a PLY stream.

    Each call to :meth:`step` consumes at most one line. A line that is not yet
    fully buffered suspends the parser without consuming anything.
    """

    #: The current grammar state.
    state: HeaderState

    #: The declared body format, once the format line has been read.
    format: Format | None

    #: The parsed header, once ``end_header`` has been read.
    header: PLYHeader | None

    def __init__(self) -> None:
        self.state = HeaderState.BEGIN
        self.format = None
        self.header = None

        self._elements: list[_ElementDraft] = []
        self._comments: list[str] = []
        self._obj_info: list[str] = []

    def step(self, buffer: ByteBuffer) -> Progress:
        """Consume and interpret one header line.

        :param buffer: The buffer to read from.
        :return: The outcome of the step.
        :raises PLYParseError: If the line is not valid in the current state.
        :raises PLYSchemaError: If the line declares an unsupported element or property.
        """
        if self.state is HeaderState.DONE:
            return Progress.FINISHED

        line = buffer.try_consume_line()
        if line is None:
            return Progress.SUSPENDED

        if self.state is HeaderState.BEGIN:
            self._parse_magic(line)
        elif self.state is HeaderState.FORMAT:
            self._parse_format(line, buffer)
        else:
            self._parse_declaration(line)

        if self.state is HeaderState.DONE:
            return Progress.FINISHED

        return Progress.ADVANCED

    def _parse_magic(self, line: str) -> None:
        if line != "ply":
            raise MagicMismatchError(line)

        logger.debug("Magic line accepted")
        self.state = HeaderState.FORMAT

    def _parse_format(self, line: str, buffer: ByteBuffer) -> None:
        fmt = Format.from_line(line)
        if fmt is None:
            raise InvalidFormatLineError(line)

        logger.debug("Body format is %s", fmt.value)

        self.format = fmt
        buffer.endianness = fmt.endianness
        self.state = HeaderState.HEADER

    def _parse_declaration(self, line: str) -> None:
        """Interpret a line in the declaration section of the header.

        :param line: The header line.
        """
        tokens = line.split()
        keyword = tokens[0] if tokens else ""

        if keyword == "comment":
            self._comments.append(_rest_of_line(line))
        elif keyword == "obj_info":
            self._obj_info.append(_rest_of_line(line))
        elif keyword == "element":
            self._parse_element(line, tokens)
        elif keyword == "property":
            self._parse_property(line, tokens)
        elif tokens == ["end_header"]:
            self._finish()
        else:
            raise InvalidHeaderLineError("Invalid header line", line)

    def _parse_element(self, line: str, tokens: list[str]) -> None:
        if len(tokens) != 3:
            raise MalformedElementLineError(line)

        _, name, count_text = tokens
        if not count_text.isdigit():
            raise MalformedElementLineError(line)

        if any(e.name == name for e in self._elements):
            raise UnsupportedSchemaError(name, "duplicate element name")

        if self._elements:
            self._elements[-1].freeze()

        logger.debug("Declared element '%s' with %s records", name, count_text)
        self._elements.append(_ElementDraft(name, int(count_text)))

    def _parse_property(self, line: str, tokens: list[str]) -> None:
        if not self._elements:
            raise InvalidHeaderLineError("Property declared before any element", line)

        prop: AnyProperty
        if len(tokens) == 5 and tokens[1] == "list":
            _, _, length_name, value_name, name = tokens
            length_type = PLYType.from_name(length_name)
            if not length_type.is_integer:
                raise UnsupportedSchemaError(
                    self._elements[-1].name, f"list length type '{length_name}' is not an integer type"
                )

            prop = ListProperty(name, length_type, PLYType.from_name(value_name))
        elif len(tokens) == 3 and tokens[1] != "list":
            _, value_name, name = tokens
            prop = ScalarProperty(name, PLYType.from_name(value_name))
        else:
            raise InvalidHeaderLineError("Malformed property line", line)

        self._elements[-1].add_property(prop)

    def _finish(self) -> None:
        """Freeze the declared elements and complete the header."""
        if self.format is None:
            raise DecoderStateError("Header ended before the format line was read")

        self.header = PLYHeader(
            format=self.format,
            elements=tuple(e.freeze() for e in self._elements),
            comments=tuple(self._comments),
            obj_info=tuple(self._obj_info),
        )
        self.state = HeaderState.DONE

        logger.debug("End of header, %d element(s) declared", len(self.header.elements))


def _rest_of_line(line: str) -> str:
    """Return the text following the leading keyword of a line."""
    parts = line.split(maxsplit=1)
    return parts[1] if len(parts) > 1 else ""
