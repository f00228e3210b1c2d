import struct

import pytest

#: The corners of a unit cube.
CUBE_VERTICES = [
    (0.0, 0.0, 0.0),
    (0.0, 0.0, 1.0),
    (0.0, 1.0, 1.0),
    (0.0, 1.0, 0.0),
    (1.0, 0.0, 0.0),
    (1.0, 0.0, 1.0),
    (1.0, 1.0, 1.0),
    (1.0, 1.0, 0.0),
]

#: The quad faces of a unit cube, as indices into ``CUBE_VERTICES``.
CUBE_FACES = [
    [0, 1, 2, 3],
    [7, 6, 5, 4],
    [0, 4, 5, 1],
    [1, 5, 6, 2],
    [2, 6, 7, 3],
    [3, 7, 4, 0],
]


def _cube_header(fmt: str) -> bytes:
    lines = [
        "ply",
        f"format {fmt} 1.0",
        "comment made by anonymous",
        "comment this file is a cube",
        "element vertex 8",
        "property float32 x",
        "property float32 y",
        "property float32 z",
        "element face 6",
        "property list uint8 int32 vertex_index",
        "end_header",
    ]

    return ("\n".join(lines) + "\n").encode("ascii")


def _cube_binary(fmt: str, prefix: str) -> bytes:
    body = b"".join(struct.pack(f"{prefix}3f", *v) for v in CUBE_VERTICES)
    body += b"".join(struct.pack(f"{prefix}B4i", len(f), *f) for f in CUBE_FACES)
    return _cube_header(fmt) + body


@pytest.fixture
def cube_vertices() -> list[tuple[float, float, float]]:
    """The vertex coordinates of the cube fixtures."""
    return list(CUBE_VERTICES)


@pytest.fixture
def cube_faces() -> list[list[int]]:
    """The face indices of the cube fixtures."""
    return [list(f) for f in CUBE_FACES]


@pytest.fixture
def cube_ascii() -> bytes:
    """An ASCII PLY cube with 8 vertices and 6 quad faces."""
    body = "".join(f"{x:g} {y:g} {z:g}\n" for x, y, z in CUBE_VERTICES)
    body += "".join(f"{len(f)} {' '.join(map(str, f))}\n" for f in CUBE_FACES)
    return _cube_header("ascii") + body.encode("ascii")


@pytest.fixture
def cube_binary_le() -> bytes:
    """A binary little-endian PLY cube with 8 vertices and 6 quad faces."""
    return _cube_binary("binary_little_endian", "<")


@pytest.fixture
def cube_binary_be() -> bytes:
    """A binary big-endian PLY cube with 8 vertices and 6 quad faces."""
    return _cube_binary("binary_big_endian", ">")
