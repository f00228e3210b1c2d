"""Command-line interface for plystream."""

from __future__ import annotations

import argparse
import collections
import logging
import sys
from pathlib import Path

from plystream.decoder import PLYDecoder
from plystream.exceptions import PLYError, PLYParseError, PLYSchemaError
from plystream.loader import DEFAULT_CHUNK_SIZE, iter_chunks
from plystream.schema import ListProperty


def format_bytes(size: int) -> str:
    """Format a byte size into a human-readable string.

    :param size: The size in bytes.
    :return: A formatted string with appropriate units (B, KB, MB, GB, TB).
    """
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.2f} {unit}"

        size /= 1024

    return f"{size:.2f} TB"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    :return: The configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="plystream",
        description="Incrementally decode Polygon File Format (PLY) files",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log decoder phase transitions to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Decode a PLY file and summarize its header and contents",
        description="Decode a PLY file chunk by chunk and print its header and record counts",
    )

    inspect_parser.add_argument(
        "input",
        type=Path,
        help="path to the input PLY file",
    )

    inspect_parser.add_argument(
        "-c",
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        metavar="BYTES",
        help=f"number of bytes fed to the decoder at a time (default: {DEFAULT_CHUNK_SIZE})",
    )

    return parser


def inspect_command(args: argparse.Namespace) -> int:
    """Execute the inspect command.

    :param args: The parsed command-line arguments.
    :return: Exit code (0 for success, non-zero for error).
    """
    if args.chunk_size <= 0:
        print("Error: Chunk size must be positive", file=sys.stderr)
        return 1

    counts: collections.Counter[str] = collections.Counter()
    decoder = PLYDecoder(lambda record: counts.update((record.element,)))

    try:
        for chunk in iter_chunks(args.input, args.chunk_size):
            decoder.feed(chunk)

        decoder.close()
    except FileNotFoundError:
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1
    except PLYSchemaError as e:
        print(f"Error: Unsupported PLY schema: {e}", file=sys.stderr)
        return 1
    except PLYParseError as e:
        print(f"Error: Failed to parse PLY file: {e}", file=sys.stderr)
        return 1
    except PLYError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    header = decoder.header
    if header is None:
        print("Error: Failed to parse PLY file: header is incomplete", file=sys.stderr)
        return 1

    print(f"=== Inspecting: {args.input.name} ===")
    print(f"File Size: {format_bytes(args.input.stat().st_size)}")
    print(f"Format: {header.format.value}")

    for comment in header.comments:
        print(f"Comment: {comment}")

    for info in header.obj_info:
        print(f"Object Info: {info}")

    for element in header.elements:
        print(f"\n[{element.name}]")
        print(f"  Declared: {element.count}")
        print(f"  Decoded: {counts[element.name]}")

        for prop in element.properties:
            if isinstance(prop, ListProperty):
                print(f"  - {prop.name}: list of {prop.value_type.type_name} ({prop.length_type.type_name} length)")
            else:
                print(f"  - {prop.name}: {prop.value_type.type_name}")

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    :param argv: The command-line arguments. Defaults to ``sys.argv[1:]``.
    :return: The exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if args.command == "inspect":
        return inspect_command(args)

    return 1


if __name__ == "__main__":
    sys.exit(main())
