"""
Fix filtering and projection of timed points into export track points.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from slf2gpx.models.activity import LogEntry, TimedPoint, TrackPoint


COORD_DECIMALS = 7
ELEVATION_DECIMALS = 1
MM_PER_M = 1000.0


def round_half_up(value: float, decimals: int) -> float:
    """Round the exact binary value, ties away from zero."""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def exported_coordinates(entry: LogEntry) -> tuple[float, float]:
    """Latitude and longitude as written to the track."""
    return (
        round_half_up(entry.latitude, COORD_DECIMALS),
        round_half_up(entry.longitude, COORD_DECIMALS),
    )


def has_fix(point: TimedPoint) -> bool:
    """
    Whether the point carries a usable GPS fix.

    Devices report (0, 0) without a fix. The check is lat > 0 and lon > 0
    on the exported coordinates, which also rejects real fixes south of the
    equator or west of Greenwich.
    """
    lat, lon = exported_coordinates(point.entry)
    return lat > 0 and lon > 0


def filter_fixes(points: Iterable[TimedPoint], enabled: bool = True) -> list[TimedPoint]:
    if not enabled:
        return list(points)
    return [p for p in points if has_fix(p)]


def project_track_point(point: TimedPoint) -> TrackPoint:
    if point.timestamp is None:
        raise ValueError(f"trkpt {point.entry.number} has no timestamp; build the timeline first")

    entry = point.entry
    lat, lon = exported_coordinates(entry)
    return TrackPoint(
        latitude=lat,
        longitude=lon,
        elevation=_elevation_m(entry.altitude),
        time=point.timestamp,
        temperature=_floor_int(entry.temperature),
        heart_rate=_trunc_int(entry.heart_rate),
        cadence=_trunc_int(entry.cadence),
    )


def project_track_points(points: Iterable[TimedPoint]) -> list[TrackPoint]:
    return [project_track_point(p) for p in points]


def _elevation_m(altitude_mm: float) -> Optional[float]:
    if math.isnan(altitude_mm):
        return None
    return round_half_up(altitude_mm / MM_PER_M, ELEVATION_DECIMALS)


def _floor_int(value: float) -> Optional[int]:
    if math.isnan(value):
        return None
    return math.floor(value)


def _trunc_int(value: float) -> Optional[int]:
    # Fractional readings are discarded, not rounded
    if math.isnan(value):
        return None
    return int(value)
