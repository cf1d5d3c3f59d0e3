#!/usr/bin/env python3
"""
slf2gpx command line.

Usage:
    slf2gpx [-hpkds] input.slf output.gpx

Examples:
    slf2gpx ride.slf ride.gpx           # Convert with pause handling
    slf2gpx -p ride.slf ride.gpx        # Ignore pause markers
    slf2gpx -k -d ride.slf ride.gpx     # Keep points without GPS, debug output
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from slf2gpx.config import ConversionOptions
from slf2gpx.errors import SlfError
from slf2gpx.services.converter import convert


logger = logging.getLogger("slf2gpx")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slf2gpx",
        description="Convert a Sigma SLF log to GPX with pause-corrected timestamps",
        add_help=False,
    )
    parser.add_argument("input", nargs="?", help="SLF log to read")
    parser.add_argument("output", nargs="?", help="GPX file to write")
    parser.add_argument(
        "--help", "-h",
        action="store_true",
        help="Show this help and exit"
    )
    parser.add_argument(
        "--nopauses", "-p",
        action="store_true",
        help="Do not process pause markers. This will lead to wrong daytimes in trkpts"
    )
    parser.add_argument(
        "--keepnongps", "-k",
        action="store_true",
        help="Do not filter out points without GPS coords"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Debug output"
    )
    parser.add_argument(
        "--silent", "-s",
        action="store_true",
        help="Rig for silent running"
    )
    return parser


def setup_logging(debug: bool, silent: bool) -> None:
    if debug:
        level = logging.DEBUG
    elif silent:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.help:
        parser.print_help()
        return EXIT_FAILURE

    if not args.input or not args.output:
        parser.print_usage()
        return EXIT_FAILURE

    setup_logging(args.debug, args.silent)

    defaults = ConversionOptions.from_env()
    options = ConversionOptions(
        process_pauses=defaults.process_pauses and not args.nopauses,
        filter_out_non_gps=defaults.filter_out_non_gps and not args.keepnongps,
    )

    try:
        result = convert(args.input, args.output, options)
    except SlfError as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except OSError as e:
        logger.error(f"Failed to write {args.output}: {e}")
        return EXIT_FAILURE

    logger.info(
        f"Wrote {result.point_count} of {result.entry_count} points "
        f"({result.pause_count} pauses, {result.pause_seconds:g}s)"
    )
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
