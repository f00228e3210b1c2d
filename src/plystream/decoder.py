"""Incremental decoder driving a PLY stream from raw bytes to element records."""

from __future__ import annotations

__all__ = ["DecoderPhase", "PLYDecoder"]

import enum
import logging
import typing as t

from plystream.body import get_decoder
from plystream.buffer import ByteBuffer
from plystream.exceptions import DecoderStateError, PLYError, PrematureEndOfStreamError
from plystream.header import HeaderParser
from plystream.schema import Format, Progress

if t.TYPE_CHECKING:
    from plystream.body import BaseBodyDecoder
    from plystream.schema import ElementRecord, PLYHeader

logger = logging.getLogger(__name__)


class DecoderPhase(enum.Enum):
    """The lifecycle phase of a :class:`PLYDecoder`."""

    HEADER = "header"
    BODY = "body"
    DONE = "done"
    FAILED = "failed"


class PLYDecoder:
    """Push-style decoder for PLY streams delivered in arbitrary chunks.

    Bytes are supplied with :meth:`feed` in file order and the end of the stream
    is signalled with :meth:`close`. Both return the records completed during
    the call; records are also passed to ``callback`` as soon as they complete.
    Any error is terminal: once raised, every later call raises it again.

    .. code-block:: python

        decoder = PLYDecoder()
        for chunk in chunks:
            for record in decoder.feed(chunk):
                print(record.element, record.fields)

        decoder.close()

    """

    #: The current lifecycle phase.
    phase: DecoderPhase

    def __init__(
        self,
        callback: t.Callable[[ElementRecord], None] | None = None,
        *,
        strip_carriage_return: bool = True,
    ) -> None:
        """Initialize the decoder.

        :param callback: A function receiving each record as it completes (optional).
        :param strip_carriage_return: Whether to accept ``\\r\\n`` line endings in the header
            and ASCII bodies. Default is ``True``.
        """
        self.phase = DecoderPhase.HEADER

        self._callback = callback
        self._buffer = ByteBuffer(strip_carriage_return=strip_carriage_return)
        self._header_parser = HeaderParser()
        self._body: BaseBodyDecoder | None = None
        self._batch: list[ElementRecord] = []
        self._error: PLYError | None = None

    @property
    def header(self) -> PLYHeader | None:
        """The parsed header, available once ``end_header`` has been read."""
        return self._header_parser.header

    @property
    def is_done(self) -> bool:
        """Whether the stream has been closed and fully decoded."""
        return self.phase is DecoderPhase.DONE

    @property
    def buffered(self) -> int:
        """The number of received bytes not consumed yet."""
        return len(self._buffer)

    def feed(self, data: bytes) -> list[ElementRecord]:
        """Supply the next chunk of the stream and decode as far as possible.

        :param data: The next chunk, in file order. May be empty.
        :return: The records completed during this call.
        :raises PLYError: If the stream is malformed.
        :raises DecoderStateError: If the decoder has already been closed.
        """
        self._check_open()
        self._batch = []

        self._buffer.append(data)
        self._guard(self._run)

        return self._batch

    def close(self) -> list[ElementRecord]:
        """Signal the end of the stream and verify that it was complete.

        :return: The records completed during this call.
        :raises PrematureEndOfStreamError: If the header or any element is incomplete.
        :raises PLYError: If the remaining data is malformed.
        :raises DecoderStateError: If the decoder has already been closed.
        """
        self._check_open()
        self._batch = []

        self._guard(self._finish)

        return self._batch

    def step(self) -> Progress:
        """Perform a single transition on the buffered bytes.

        Records completed by the step are delivered to the callback and to the
        result of the enclosing :meth:`feed` or :meth:`close` call, if any.

        :return: The outcome of the step.
        :raises PLYError: If the stream is malformed.
        """
        self._check_open()
        return self._guard(self._step)

    def _check_open(self) -> None:
        if self._error is not None:
            raise self._error

        if self.phase is DecoderPhase.DONE:
            raise DecoderStateError("Decoder is closed")

    def _guard(self, func: t.Callable[[], Progress | None]) -> t.Any:
        """Run a state transition, recording any error as terminal."""
        try:
            return func()
        except PLYError as e:
            self.phase = DecoderPhase.FAILED
            self._error = e
            logger.debug("Decoding failed: %s", e)
            raise

    def _step(self) -> Progress:
        if self.phase is DecoderPhase.HEADER:
            progress = self._header_parser.step(self._buffer)
            if progress is Progress.FINISHED:
                self._start_body()
                return Progress.ADVANCED

            return progress

        if self._body is None:
            raise DecoderStateError("Body decoding has not started")
        return self._body.step(self._buffer)

    def _run(self) -> None:
        """Step until the buffered bytes are exhausted or insufficient."""
        while self._step() is Progress.ADVANCED:
            pass

    def _finish(self) -> None:
        self._run()

        if self.phase is DecoderPhase.HEADER:
            raise PrematureEndOfStreamError("Stream ended inside the header")

        if self.header is None or self._body is None:
            raise DecoderStateError("Body decoding has not started")
        if self.header.format is Format.ASCII and self._buffer.has_bytes():
            # The final body line may lack its line feed.
            self._buffer.append(b"\n")
            self._run()

        self._body.check_complete()
        self.phase = DecoderPhase.DONE

        logger.debug("Stream decoded completely")

    def _start_body(self) -> None:
        header = self.header
        if header is None:
            raise DecoderStateError("Header has not been parsed")

        self._body = get_decoder(header, self._emit)
        self.phase = DecoderPhase.BODY

    def _emit(self, record: ElementRecord) -> None:
        self._batch.append(record)
        if self._callback is not None:
            self._callback(record)
