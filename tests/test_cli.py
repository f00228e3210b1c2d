from pathlib import Path

import pytest

from plystream.__main__ import format_bytes, main


class TestInspectCommand:
    """Tests for the inspect command."""

    def test_inspect_cube(self, cube_ascii: bytes, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Print the header summary and decoded counts."""
        ply_file = tmp_path / "cube.ply"
        ply_file.write_bytes(cube_ascii)

        assert main(["inspect", str(ply_file), "--chunk-size", "5"]) == 0

        out = capsys.readouterr().out
        assert "Format: ascii" in out
        assert "Comment: this file is a cube" in out
        assert "[vertex]" in out
        assert "Declared: 8" in out
        assert "Decoded: 8" in out
        assert "- vertex_index: list of int (uchar length)" in out

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Report a missing input file."""
        assert main(["inspect", str(tmp_path / "missing.ply")]) == 1
        assert "Input file not found" in capsys.readouterr().err

    def test_malformed_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Report a parse error."""
        ply_file = tmp_path / "bad.ply"
        ply_file.write_bytes(b"plyx\n")

        assert main(["inspect", str(ply_file)]) == 1
        assert "Failed to parse PLY file" in capsys.readouterr().err

    def test_unsupported_schema(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Report an unsupported schema."""
        ply_file = tmp_path / "bad.ply"
        ply_file.write_bytes(b"ply\nformat ascii 1.0\nelement vertex 1\nproperty half x\n")

        assert main(["inspect", str(ply_file)]) == 1
        assert "Unsupported PLY schema" in capsys.readouterr().err

    def test_invalid_chunk_size(self, cube_ascii: bytes, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Reject a non-positive chunk size."""
        ply_file = tmp_path / "cube.ply"
        ply_file.write_bytes(cube_ascii)

        assert main(["inspect", str(ply_file), "-c", "0"]) == 1
        assert "Chunk size must be positive" in capsys.readouterr().err


class TestFormatBytes:
    """Tests for the format_bytes helper."""

    def test_units(self) -> None:
        """Pick the largest unit below 1024."""
        assert format_bytes(512) == "512.00 B"
        assert format_bytes(2048) == "2.00 KB"
        assert format_bytes(3 * 1024**2) == "3.00 MB"
