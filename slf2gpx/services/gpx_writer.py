"""
GPX 1.1 output with Garmin TrackPointExtension sensor data.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence
from xml.etree.ElementTree import Element

import gpxpy
import gpxpy.gpx

from slf2gpx.models.activity import TrackPoint


logger = logging.getLogger(__name__)


CREATOR = "SigmaTools slf2gpx"
GPX_VERSION = "1.1"

GPXTPX_NS = "http://www.garmin.com/xmlschemas/TrackPointExtension/v1"
GPXX_NS = "http://www.garmin.com/xmlschemas/GpxExtensions/v3"

NSMAP = {
    "gpxtpx": GPXTPX_NS,
    "gpxx": GPXX_NS,
}

SCHEMA_LOCATIONS = [
    "http://www.topografix.com/GPX/1/1",
    "http://www.topografix.com/GPX/1/1/gpx.xsd",
    GPXX_NS,
    "http://www.garmin.com/xmlschemas/GpxExtensionsv3.xsd",
    GPXTPX_NS,
    "http://www.garmin.com/xmlschemas/TrackPointExtensionv1.xsd",
]

# TrackPoint attribute -> extension element
EXTENSION_FIELDS = (
    ("temperature", "gpxtpx:atemp"),
    ("heart_rate", "gpxtpx:hr"),
    ("cadence", "gpxtpx:cad"),
)


def build_gpx(name: str, start: datetime, track_points: Sequence[TrackPoint]) -> gpxpy.gpx.GPX:
    """
    Assemble a single-track, single-segment GPX document.

    Args:
        name: Track name
        start: Ride start, written as the metadata time
        track_points: Points in recording order
    """
    gpx = gpxpy.gpx.GPX()
    gpx.creator = CREATOR
    gpx.nsmap = dict(NSMAP)
    gpx.schema_locations = list(SCHEMA_LOCATIONS)
    gpx.time = _utc(start)

    track = gpxpy.gpx.GPXTrack(name=name)
    gpx.tracks.append(track)
    segment = gpxpy.gpx.GPXTrackSegment()
    track.segments.append(segment)

    for tp in track_points:
        segment.points.append(_to_gpx_point(tp))

    return gpx


def write_gpx(filepath: Path, gpx: gpxpy.gpx.GPX) -> None:
    """
    Serialize and write a GPX document.

    The XML is produced in full before the file is opened.
    """
    xml = gpx.to_xml(version=GPX_VERSION)
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(xml)
    logger.debug(f"Wrote {len(xml)} characters to {filepath}")


def _to_gpx_point(tp: TrackPoint) -> gpxpy.gpx.GPXTrackPoint:
    point = gpxpy.gpx.GPXTrackPoint(
        latitude=tp.latitude,
        longitude=tp.longitude,
        elevation=tp.elevation,
        time=_utc(tp.time),
    )
    if tp.has_extensions:
        point.extensions.append(_track_point_extension(tp))
    return point


def _track_point_extension(tp: TrackPoint) -> Element:
    ext = Element("gpxtpx:TrackPointExtension")
    for attr, tag in EXTENSION_FIELDS:
        value = getattr(tp, attr)
        if value is None:
            continue
        sub = Element(tag)
        sub.text = str(value)
        ext.append(sub)
    return ext


def _utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)
