"""
Command line front-end: argument parsing, logging setup, console summary.
"""

import os
import sys
import logging
import argparse

from . import __version__ as APP_VERSION
from .errors import ExtractionError
from .extractor import ExtractionOptions
from .manager import (
    SOURCE_EXTENSION,
    extract_images_from_file,
    extract_images_from_directory,
    export_report_json,
)

logger = logging.getLogger(__name__)


def parse_min_size(value: str) -> tuple[int, int]:
    """'WxH' → (W, H)."""
    parts = value.lower().split("x")
    try:
        if len(parts) != 2:
            raise ValueError(value)
        width, height = int(parts[0]), int(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected WIDTHxHEIGHT, e.g. 32x32 (got {value!r})")
    if width < 0 or height < 0:
        raise argparse.ArgumentTypeError("minimum size must not be negative")
    return width, height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract embedded JPEG/PNG/GIF images from UHTML files.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("path", help="UHTML file, or a directory containing UHTML files")
    parser.add_argument("-o", "--output", default="",
                        help="Output directory (single file only; default: <file stem>/)")
    parser.add_argument("-r", "--recursive", action="store_true",
                        help="Search subdirectories for UHTML files")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Debug logging and per-file results")
    parser.add_argument("-a", "--all", action="store_true",
                        help="Keep every image (default skips images under 20x20 px)")
    parser.add_argument("--min-size", type=parse_min_size, default=None, metavar="WxH",
                        help="Custom minimum image size instead of 20x20")
    parser.add_argument("--ext", default=SOURCE_EXTENSION,
                        help=f"Source file extension (default: {SOURCE_EXTENSION})")
    parser.add_argument("-j", "--jobs", type=int, default=1,
                        help="Worker processes for directories (0 = auto)")
    parser.add_argument("--report", default="",
                        help="Write a JSON report of the run to this path")
    return parser


def run_file(args, options: ExtractionOptions, ext: str) -> list:
    print(f"Extracting: {args.path}")
    result = extract_images_from_file(args.path, args.output or None, options, ext)

    print()
    print("=" * 60)
    print("  Extraction complete")
    print("=" * 60)
    print(f"  Source:       {result.source_file}")
    print(f"  Output:       {result.output_directory}")
    print(f"  Images found: {result.total_images}")
    print(f"  Images saved: {result.saved_images}")
    return [result]


def run_directory(args, options: ExtractionOptions, ext: str) -> list:
    print(f"Batch extracting: {args.path}")
    print(f"Recursive:        {'yes' if args.recursive else 'no'}")
    results = extract_images_from_directory(
        args.path, args.recursive, options, ext, workers=args.jobs)

    if not results:
        print(f"No {ext} files found in {args.path}")
        return results

    successful = sum(1 for r in results if r.ok)
    saved = sum(r.saved_images for r in results)
    print()
    print("=" * 60)
    print("  Batch extraction complete")
    print("=" * 60)
    print(f"  Files processed: {len(results)}")
    print(f"  Successful:      {successful}")
    print(f"  Images saved:    {saved}")

    if args.verbose:
        print()
        for r in results:
            if r.error:
                print(f"  ✗ {r.source_file}: {r.error}")
            else:
                print(f"  ✓ {r.source_file}: {r.saved_images} image(s)")
    return results


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    ext = args.ext if args.ext.startswith(".") else f".{args.ext}"
    options = ExtractionOptions(include_all=args.all, min_dimensions=args.min_size)

    try:
        if os.path.isfile(args.path):
            results = run_file(args, options, ext)
        elif os.path.isdir(args.path):
            results = run_directory(args, options, ext)
        else:
            print(f"Error: path does not exist: {args.path}", file=sys.stderr)
            return 1
    except ExtractionError as e:
        logger.debug("Extraction failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.report:
        try:
            export_report_json(results, args.report)
        except OSError as e:
            logger.debug("Report write failed", exc_info=True)
            print(f"Error: cannot write report {args.report}: {e}", file=sys.stderr)
            return 1
        print(f"  Report: {args.report}")
    print()
    return 0
