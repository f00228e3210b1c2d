"""Shared element bookkeeping for PLY body decoders."""

from __future__ import annotations

__all__ = ["BaseBodyDecoder", "ElementCursor"]

import abc
import collections
import dataclasses
import logging
import typing as t

from plystream.exceptions import DecoderStateError, PrematureEndOfStreamError
from plystream.schema import ElementRecord

if t.TYPE_CHECKING:
    from plystream.buffer import ByteBuffer
    from plystream.datatypes import Number
    from plystream.schema import AnyProperty, ElementSchema, Progress

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ElementCursor:
    """Decoding state for the element currently being read."""

    #: The schema of the element.
    schema: ElementSchema

    #: The number of records still to be emitted.
    remaining: int

    #: The properties of the in-progress record that have not been read yet.
    pending: collections.deque[AnyProperty] = dataclasses.field(default_factory=collections.deque)

    #: The values read so far for the in-progress record.
    fields: dict[str, Number | list[Number]] = dataclasses.field(default_factory=dict)

    @classmethod
    def start(cls, schema: ElementSchema) -> ElementCursor:
        """Create a cursor positioned at the first record of an element.

        :param schema: The element schema.
        :return: The new cursor.
        """
        cursor = cls(schema, schema.count)
        cursor.begin_record()
        return cursor

    @property
    def in_progress(self) -> bool:
        """Whether some properties of the current record have been read."""
        return len(self.fields) > 0

    def begin_record(self) -> None:
        """Reset the in-progress record."""
        self.pending = collections.deque(self.schema.properties)
        self.fields = {}


class BaseBodyDecoder(abc.ABC):
    """Abstract base class for PLY body decoders.

    Subclasses decode record content; this class walks the element schemas in
    order and enforces that each emits exactly its declared number of records.
    """

    #: The cursor of the element being decoded, or ``None`` once every element is complete.
    cursor: ElementCursor | None

    def __init__(self, elements: t.Sequence[ElementSchema], emit: t.Callable[[ElementRecord], None]) -> None:
        """Initialize the decoder.

        :param elements: The element schemas, in declaration order.
        :param emit: The function receiving each completed record.
        """
        self._elements = iter(elements)
        self._emit = emit
        self.cursor = None
        self._next_element()

    @property
    def is_complete(self) -> bool:
        """Whether every declared record has been emitted."""
        return self.cursor is None

    def step(self, buffer: ByteBuffer) -> Progress:
        """Decode as much of the next unit as the policy reads in one step.

        :param buffer: The buffer to read from.
        :return: The outcome of the step.
        :raises PLYParseError: If the body is malformed.
        """
        if self.cursor is None:
            return self._step_exhausted(buffer)

        return self._step_record(buffer, self.cursor)

    def check_complete(self) -> None:
        """Verify that the body is complete at the end of the stream.

        :raises PrematureEndOfStreamError: If records are still outstanding.
        """
        cursor = self.cursor
        if cursor is None:
            return

        message = (
            f"Stream ended with {cursor.remaining} of {cursor.schema.count} "
            f"'{cursor.schema.name}' record(s) outstanding"
        )
        if cursor.in_progress:
            message += f" (record partially read: {', '.join(cursor.fields)})"

        raise PrematureEndOfStreamError(message)

    @abc.abstractmethod
    def _step_record(self, buffer: ByteBuffer, cursor: ElementCursor) -> Progress:
        """Decode part or all of the next record of the current element.

        :param buffer: The buffer to read from.
        :param cursor: The cursor of the current element.
        :return: The outcome of the step.
        """
        pass

    @abc.abstractmethod
    def _step_exhausted(self, buffer: ByteBuffer) -> Progress:
        """Handle data arriving after every element is complete.

        :param buffer: The buffer to read from.
        :return: The outcome of the step.
        :raises UnexpectedBodyDataError: If the data is not allowed.
        """
        pass

    def _complete_record(self, fields: dict[str, Number | list[Number]]) -> None:
        """Emit a record for the current element and move the cursor on.

        :param fields: The decoded values of the record.
        """
        cursor = self.cursor
        if cursor is None:
            raise DecoderStateError("No element is being decoded")

        self._emit(ElementRecord(cursor.schema.name, fields))

        cursor.remaining -= 1
        if cursor.remaining > 0:
            cursor.begin_record()
        else:
            logger.debug("Finished element '%s'", cursor.schema.name)
            self._next_element()

    def _next_element(self) -> None:
        """Position the cursor at the next element with records to decode."""
        for schema in self._elements:
            if schema.count > 0:
                self.cursor = ElementCursor.start(schema)
                return

        self.cursor = None
