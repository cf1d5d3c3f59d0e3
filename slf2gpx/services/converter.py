"""
SLF -> GPX conversion.

Runs the reader, the timeline pipeline and the GPX writer in sequence.
The pipeline itself (convert_log) is pure; all I/O happens before or
after it.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from slf2gpx.config import ConversionOptions
from slf2gpx.models.activity import ActivityLog, TimedPoint, TrackPoint
from slf2gpx.services.decoder import decode_document
from slf2gpx.services.gpx_writer import build_gpx, write_gpx
from slf2gpx.services.slf_reader import read_slf
from slf2gpx.services.timeline import (
    applied_pause_seconds,
    build_timeline,
    compute_offsets,
    match_pause_markers,
)
from slf2gpx.services.track import filter_fixes, project_track_points


logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Outcome of a single conversion."""

    input_file: Path
    output_file: Path
    entry_count: int
    point_count: int
    pause_count: int
    pause_seconds: float


def build_timed_points(log: ActivityLog, options: ConversionOptions) -> list[TimedPoint]:
    """Offsets, marker matching and timestamps for every entry of the log."""
    points = compute_offsets(log.entries)
    if options.process_pauses:
        points = match_pause_markers(log.markers, points)
    return build_timeline(points, log.start_date, process_pauses=options.process_pauses)


def convert_log(log: ActivityLog, options: Optional[ConversionOptions] = None) -> list[TrackPoint]:
    options = options or ConversionOptions()
    points = build_timed_points(log, options)
    points = filter_fixes(points, enabled=options.filter_out_non_gps)
    return project_track_points(points)


def convert(
    input_path: Path,
    output_path: Path,
    options: Optional[ConversionOptions] = None,
) -> ConversionResult:
    """
    Convert an SLF file to GPX.

    Raises:
        SlfReadError: input cannot be read or has the wrong shape
        SlfDecodeError: input fields are malformed
        OSError: output cannot be written
    """
    options = options or ConversionOptions()
    input_path = Path(input_path)
    output_path = Path(output_path)

    logger.info(f"Reading {input_path}")
    log = decode_document(read_slf(input_path))

    logger.info(f"Processing Log with {len(log.entries)} log entries")
    logger.info("fixing timings")
    timed = build_timed_points(log, options)

    logger.info("filtering")
    kept = filter_fixes(timed, enabled=options.filter_out_non_gps)
    if len(kept) < len(timed):
        logger.debug(f"Dropped {len(timed) - len(kept)} points without GPS fix")
    track_points = project_track_points(kept)

    logger.info(f"writing gpx to {output_path}")
    write_gpx(output_path, build_gpx(log.name, log.start_date, track_points))

    return ConversionResult(
        input_file=input_path,
        output_file=output_path,
        entry_count=len(log.entries),
        point_count=len(track_points),
        pause_count=sum(len(p.pauses) for p in timed) if options.process_pauses else 0,
        pause_seconds=applied_pause_seconds(timed) if options.process_pauses else 0.0,
    )
