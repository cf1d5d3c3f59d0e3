"""
Timeline reconstruction.

Log entries carry relative time deltas on the nominal (pause-free) clock;
pause markers carry absolute nominal offsets. This module places every
entry on the nominal timeline, attributes pause markers to the entry whose
interval contains them, and folds the result into wall-clock timestamps.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable, Sequence

import numpy as np
from numpy.typing import NDArray

from slf2gpx.models.activity import LogEntry, Marker, TimedPoint


logger = logging.getLogger(__name__)


def compute_offsets(entries: Sequence[LogEntry]) -> list[TimedPoint]:
    """
    Assign each entry its cumulative nominal offset.

    offset[0] == 0 and offset[i] == offset[i-1] + duration[i-1].
    Negative durations are passed through unchecked.
    """
    if not entries:
        return []

    durations = np.array([e.ride_time for e in entries], dtype=np.float64)
    # Exclusive running sum: each point starts where the previous one ends
    offsets = np.concatenate(([0.0], np.cumsum(durations)[:-1]))

    return [
        TimedPoint(entry=entry, nominal_offset=offset, nominal_duration=duration)
        for entry, offset, duration in zip(entries, offsets.tolist(), durations.tolist())
    ]


def match_pause_markers(markers: Iterable[Marker], points: Sequence[TimedPoint]) -> list[TimedPoint]:
    """
    Attach to every point the pause markers falling inside its nominal interval.

    Non-pause markers are dropped before matching. A marker exactly at a
    point's start belongs to that point; one exactly at its end belongs to
    the next. Matches keep marker-list order.
    """
    pauses = [m for m in markers if m.is_pause]
    if not pauses or not points:
        return list(points)

    times = np.array([m.time_absolute for m in pauses], dtype=np.float64)
    starts = np.array([p.nominal_offset for p in points], dtype=np.float64)
    ends = np.array([p.nominal_end for p in points], dtype=np.float64)

    # (points x markers) membership matrix
    inside: NDArray[np.bool_] = (times[np.newaxis, :] >= starts[:, np.newaxis]) & (
        times[np.newaxis, :] < ends[:, np.newaxis]
    )

    matched = []
    for point, row in zip(points, inside):
        hits = tuple(pauses[j] for j in np.flatnonzero(row))
        matched.append(replace(point, pauses=hits) if hits else point)
    return matched


def build_timeline(
    points: Sequence[TimedPoint],
    start: datetime,
    process_pauses: bool = True,
) -> list[TimedPoint]:
    """
    Stamp every point with its wall-clock time.

    Folds a cursor over the points in recording order: matched pauses are
    added before a point is stamped, then the cursor moves on by the
    point's own nominal duration. With process_pauses off, matched pauses
    are ignored and timestamps understate elapsed wall time.
    """
    stamped: list[TimedPoint] = []
    cursor = start
    for idx, point in enumerate(points):
        cursor, point = _stamp(cursor, idx, point, process_pauses)
        stamped.append(point)
    return stamped


def _stamp(
    cursor: datetime,
    idx: int,
    point: TimedPoint,
    process_pauses: bool,
) -> tuple[datetime, TimedPoint]:
    if process_pauses:
        for marker in point.pauses:
            logger.debug(f"inserting break of {marker.duration:g} seconds before trkpt {idx}")
            cursor = cursor + timedelta(seconds=marker.duration)
    stamped = replace(point, timestamp=cursor)
    return cursor + timedelta(seconds=point.nominal_duration), stamped


def applied_pause_seconds(points: Sequence[TimedPoint]) -> float:
    return float(sum(p.pause_seconds for p in points))
