#!/usr/bin/env python3
"""
Reassembly Shapes - Main Entry Point

Command-line tools for checking and reformatting Reassembly shapes.lua files.
"""

import argparse
import sys


def load_shapes(args):
    """Read and build the shapes file named on the command line."""
    from reassembly_shapes.config import DEFAULT_CONFIG
    from reassembly_shapes.shapes.builder import parse_and_build

    config = DEFAULT_CONFIG.with_overrides(max_parse_depth=args.max_depth)
    with open(args.file, encoding="utf-8") as f:
        text = f.read()
    return parse_and_build(text, config)


def run_check(args):
    """Validate a shapes file and report warnings."""
    try:
        collection, warnings = load_shapes(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    num_variants = sum(shape.num_scales for shape in collection)
    print(f"{args.file}: {len(collection)} shapes, {num_variants} scale variants")
    for warning in warnings:
        print(f"Warning: {warning}")
    return 0


def run_format(args):
    """Rewrite a shapes file in canonical layout."""
    from reassembly_shapes.config import DEFAULT_CONFIG
    from reassembly_shapes.shapes.serializer import render

    try:
        collection, warnings = load_shapes(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for warning in warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    config = DEFAULT_CONFIG.with_overrides(indent=" " * args.indent if args.indent else None)
    text = render(collection, config)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"Wrote {len(collection)} shapes to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(text)
    return 0


def run_info(args):
    """Print per-shape geometry details."""
    from reassembly_shapes.shapes.geometry import area, bounding_box, is_clockwise

    try:
        collection, _ = load_shapes(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    for shape in collection:
        flags = " [launcher_radial]" if shape.launcher_radial else ""
        print(f"Shape {shape.shape_id}: {shape.name}{flags}")
        for i, variant in enumerate(shape.scale_variants):
            min_x, min_y, max_x, max_y = bounding_box(variant.vertices)
            winding = "clockwise" if is_clockwise(variant.vertices) else "counter-clockwise"
            print(
                f"  scale {i}: {variant.num_vertices} verts, {len(variant.ports)} ports, "
                f"area {area(variant.vertices):g}, {winding}, "
                f"bounds ({min_x:g}, {min_y:g})..({max_x:g}, {max_y:g})"
            )
    return 0


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Reassembly Shapes - Check and format shapes.lua files"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging"
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file"
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum table nesting accepted by the parser (default: 64)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Check command
    check_parser = subparsers.add_parser("check", help="Validate a shapes file")
    check_parser.add_argument("file", help="Path to shapes.lua")

    # Format command
    format_parser = subparsers.add_parser("format", help="Rewrite a shapes file canonically")
    format_parser.add_argument("file", help="Path to shapes.lua")
    format_parser.add_argument(
        "-o", "--output",
        help="Output path (default: stdout)"
    )
    format_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Spaces per indentation level (default: 2)"
    )

    # Info command
    info_parser = subparsers.add_parser("info", help="Show shape geometry details")
    info_parser.add_argument("file", help="Path to shapes.lua")

    args = parser.parse_args(argv)

    from reassembly_shapes.logging_config import setup_logging
    setup_logging(args.verbose, args.log_file)

    if args.command == "check":
        return run_check(args)
    elif args.command == "format":
        return run_format(args)
    elif args.command == "info":
        return run_info(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
