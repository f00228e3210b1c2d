"""Convenience functions for decoding PLY data from files, bytes and chunk iterables."""

from __future__ import annotations

__all__ = ["DEFAULT_CHUNK_SIZE", "PLYData", "iter_chunks", "iter_ply", "load_ply"]

import collections
import dataclasses
import os
import typing as t

import numpy as np

from plystream.decoder import PLYDecoder
from plystream.exceptions import DecoderStateError, PLYError
from plystream.schema import ListProperty

if t.TYPE_CHECKING:
    import numpy.typing as npt

    from plystream.schema import ElementRecord, PLYHeader

#: Number of bytes read from files per chunk.
DEFAULT_CHUNK_SIZE: t.Final[int] = 64 * 1024

PLYSource: t.TypeAlias = t.Union[
    str,
    "os.PathLike[str]",
    bytes,
    bytearray,
    memoryview,
    t.BinaryIO,
    t.Iterable[bytes],
]


@dataclasses.dataclass
class PLYData:
    """A fully decoded PLY stream."""

    #: The parsed header.
    header: PLYHeader

    #: The decoded records, grouped by element name in declaration order.
    elements: dict[str, list[ElementRecord]]

    def __getitem__(self, element: str) -> list[ElementRecord]:
        """Get the records of an element."""
        return self.elements[element]

    def as_array(self, element: str, prop: str) -> npt.NDArray[t.Any]:
        """Collect the values of one property into a numpy array.

        Scalar properties yield an (N,) array. List properties yield an (N, K)
        array and require every list to have the same length.

        :param element: The element name.
        :param prop: The property name.
        :return: The values, using the property's declared dtype.
        :raises KeyError: If the element or property does not exist.
        :raises ValueError: If a list property holds lists of different lengths.
        """
        definition = self.header.get_element(element).get_property(prop)
        values = [record[prop] for record in self.elements[element]]
        dtype = definition.value_type.dtype

        if not isinstance(definition, ListProperty):
            return np.asarray(values, dtype=dtype)

        lengths = {len(v) for v in values}  # type: ignore[arg-type]
        if len(lengths) > 1:
            raise ValueError(f"Property '{element}.{prop}' holds lists of different lengths: {sorted(lengths)}")

        width = lengths.pop() if lengths else 0
        return np.asarray(values, dtype=dtype).reshape(len(values), width)


def iter_chunks(source: PLYSource, chunk_size: int = DEFAULT_CHUNK_SIZE) -> t.Iterator[bytes]:
    """Split a PLY source into byte chunks.

    :param source: A file path, raw bytes, a binary file object, or an iterable of byte chunks.
    :param chunk_size: The maximum chunk size for paths, bytes and file objects.
    :return: An iterator over the chunks, in file order.
    """
    if chunk_size <= 0:
        raise ValueError(f"Chunk size must be positive, got {chunk_size}")

    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            yield from _read_chunks(f, chunk_size)
    elif isinstance(source, (bytes, bytearray, memoryview)):
        view = memoryview(source)
        for offset in range(0, len(view), chunk_size):
            yield bytes(view[offset : offset + chunk_size])
    elif hasattr(source, "read"):
        yield from _read_chunks(t.cast(t.BinaryIO, source), chunk_size)
    else:
        yield from source


def _read_chunks(f: t.BinaryIO, chunk_size: int) -> t.Iterator[bytes]:
    while chunk := f.read(chunk_size):
        yield chunk


def iter_ply(
    source: PLYSource,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    *,
    strip_carriage_return: bool = True,
) -> t.Iterator[ElementRecord]:
    """Lazily decode the records of a PLY source.

    Records are yielded as soon as they are complete. If the stream is
    malformed, every record decoded before the error is yielded first.

    :param source: A file path, raw bytes, a binary file object, or an iterable of byte chunks.
    :param chunk_size: The read size for paths, bytes and file objects.
    :param strip_carriage_return: Whether to accept ``\\r\\n`` line endings. Default is ``True``.
    :return: An iterator over the records, in file order.
    :raises PLYError: If the stream is malformed or incomplete.
    """
    ready: collections.deque[ElementRecord] = collections.deque()
    decoder = PLYDecoder(ready.append, strip_carriage_return=strip_carriage_return)

    for chunk in iter_chunks(source, chunk_size):
        try:
            decoder.feed(chunk)
        except PLYError:
            yield from _drain(ready)
            raise

        yield from _drain(ready)

    try:
        decoder.close()
    except PLYError:
        yield from _drain(ready)
        raise

    yield from _drain(ready)


def _drain(ready: collections.deque[ElementRecord]) -> t.Iterator[ElementRecord]:
    while ready:
        yield ready.popleft()


def load_ply(
    source: PLYSource,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    *,
    strip_carriage_return: bool = True,
) -> PLYData:
    """Decode a complete PLY source.

    :param source: A file path, raw bytes, a binary file object, or an iterable of byte chunks.
    :param chunk_size: The read size for paths, bytes and file objects.
    :param strip_carriage_return: Whether to accept ``\\r\\n`` line endings. Default is ``True``.
    :return: The header and the decoded records.
    :raises PLYError: If the stream is malformed or incomplete.

    .. code-block:: python

        data = load_ply("cube.ply")
        vertices = np.column_stack([data.as_array("vertex", axis) for axis in "xyz"])
        print(f"Loaded {len(vertices)} vertices and {len(data['face'])} faces.")

    """
    decoder = PLYDecoder(strip_carriage_return=strip_carriage_return)

    records: list[ElementRecord] = []
    for chunk in iter_chunks(source, chunk_size):
        records.extend(decoder.feed(chunk))

    records.extend(decoder.close())

    header = decoder.header
    if header is None:
        raise DecoderStateError("Header has not been parsed")

    elements: dict[str, list[ElementRecord]] = {e.name: [] for e in header.elements}
    for record in records:
        elements[record.element].append(record)

    return PLYData(header=header, elements=elements)
