"""Exceptions raised while decoding PLY streams."""

from __future__ import annotations

__all__ = [
    "DecoderStateError",
    "InvalidFormatLineError",
    "InvalidHeaderLineError",
    "InvalidValueError",
    "ListLengthMismatchError",
    "MagicMismatchError",
    "MalformedElementLineError",
    "PLYError",
    "PLYParseError",
    "PLYSchemaError",
    "PrematureEndOfStreamError",
    "PropertyCountMismatchError",
    "UnexpectedBodyDataError",
    "UnknownTypeError",
    "UnsupportedSchemaError",
]

import typing as t


class PLYError(Exception):
    """Base class for all PLY decoding errors."""


class PLYParseError(PLYError):
    """Raised when the byte stream is not a structurally valid PLY file."""

    #: The offending raw line, if the error is tied to one.
    line: str | None

    def __init__(self, message: str, line: str | None = None) -> None:
        """Initialize the error.

        :param message: The error message.
        :param line: The offending raw line, if any.
        """
        self.line = line
        if line is not None:
            message = f"{message}: {line!r}"

        super().__init__(message)


class MagicMismatchError(PLYParseError):
    """Raised when the first line of the stream is not ``ply``."""

    def __init__(self, line: str) -> None:
        super().__init__("'ply' expected", line)


class InvalidFormatLineError(PLYParseError):
    """Raised when the format line is not one of the recognized declarations."""

    def __init__(self, line: str) -> None:
        super().__init__("Invalid format line", line)


class InvalidHeaderLineError(PLYParseError):
    """Raised when a header line matches none of the recognized keywords."""


class MalformedElementLineError(PLYParseError):
    """Raised when an ``element`` line does not declare exactly a name and a count."""

    def __init__(self, line: str) -> None:
        super().__init__("Malformed element line", line)


class ListLengthMismatchError(PLYParseError):
    """Raised when an ASCII list declares a length different from the values present."""

    #: The length declared by the list prefix.
    declared: int

    #: The number of values actually present.
    actual: int

    def __init__(self, declared: int, actual: int, line: str) -> None:
        self.declared = declared
        self.actual = actual
        super().__init__(f"Invalid property list line (declared {declared} values, found {actual})", line)


class PropertyCountMismatchError(PLYParseError):
    """Raised when an ASCII body line holds a different number of values than the element declares."""

    #: The number of values the element declares.
    expected: int

    #: The number of values found on the line.
    actual: int

    def __init__(self, expected: int, actual: int, line: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} values, found {actual}", line)


class InvalidValueError(PLYParseError):
    """Raised when an ASCII token cannot be parsed as its declared type."""


class UnexpectedBodyDataError(PLYParseError):
    """Raised when body data arrives after every declared element has been read."""


class PrematureEndOfStreamError(PLYParseError):
    """Raised when the stream ends before the declared content is complete."""


class PLYSchemaError(PLYError):
    """Raised when the header declares an element or property the decoder cannot handle."""


class UnknownTypeError(PLYSchemaError):
    """Raised when a property declares a type name missing from the type registry."""

    #: The unrecognized type name.
    type_name: str

    #: The recognized type names.
    supported: tuple[str, ...]

    def __init__(self, type_name: str, supported: t.Iterable[str]) -> None:
        """Initialize the error.

        :param type_name: The unrecognized type name.
        :param supported: The recognized type names.
        """
        self.type_name = type_name
        self.supported = tuple(supported)
        super().__init__(f"Unknown property type '{type_name}'. Supported: {', '.join(self.supported)}")


class UnsupportedSchemaError(PLYSchemaError):
    """Raised when an element declares a property layout the decoder does not support."""

    #: The name of the offending element.
    element: str

    def __init__(self, element: str, reason: str) -> None:
        self.element = element
        super().__init__(f"Unsupported schema for element '{element}': {reason}")


class DecoderStateError(PLYError):
    """Raised when a decoder is driven out of order, e.g. after it has finished."""
