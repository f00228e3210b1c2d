import argparse
import pathlib

import numpy as np

from plystream import PLYError, load_ply


def main() -> None:
    """Print the bounding box of the vertices in a PLY file."""
    parser = argparse.ArgumentParser(description="Compute the bounds of a PLY mesh.")
    parser.add_argument("input", type=pathlib.Path, help="Path to the PLY file.")

    args = parser.parse_args()
    if not args.input.exists():
        print(f"Error: File '{args.input}' does not exist.")
        return

    try:
        data = load_ply(args.input)
    except PLYError as e:
        print(f"Error loading PLY file: {e}")
        return

    if "vertex" not in data.elements or not data["vertex"]:
        print("No vertices found.")
        return

    vertices = np.column_stack([data.as_array("vertex", axis) for axis in "xyz"])
    bounds_min = vertices.min(axis=0)
    bounds_max = vertices.max(axis=0)
    dimensions = bounds_max - bounds_min

    print(f"=== {args.input.name} ===")
    print(f"  Vertices: {len(vertices)}")
    print(f"  Min: {bounds_min[0]:.3f}, {bounds_min[1]:.3f}, {bounds_min[2]:.3f}")
    print(f"  Max: {bounds_max[0]:.3f}, {bounds_max[1]:.3f}, {bounds_max[2]:.3f}")
    print(f"  Size: {dimensions[0]:.3f} x {dimensions[1]:.3f} x {dimensions[2]:.3f}")


if __name__ == "__main__":
    main()
