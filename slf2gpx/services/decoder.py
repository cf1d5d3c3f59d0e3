"""
Record decoder.

Turns the string rows of an SlfDocument into typed LogEntry / Marker
records. Every numeric field is validated here, once: a value that is
present but not a finite number fails the whole decode, as does a
missing required field. Optional sensor fields that are absent decode
to NaN.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from slf2gpx.errors import SlfDecodeError
from slf2gpx.models.activity import PAUSE_MARKER_TYPE, ActivityLog, LogEntry, Marker
from slf2gpx.models.raw import SlfDocument
from slf2gpx.utils.dates import parse_start_date


logger = logging.getLogger(__name__)


REQUIRED_ENTRY_FIELDS = ("RideTime", "Latitude", "Longitude")
OPTIONAL_ENTRY_FIELDS = ("Altitude", "Temperature", "Heartrate", "Cadence")
MAX_REPORTED_ROWS = 5


def decode_document(doc: SlfDocument) -> ActivityLog:
    """
    Decode a raw SLF document into an ActivityLog.

    Raises:
        SlfDecodeError: on malformed or missing numeric fields, or an
            unparsable start date
    """
    start_date = parse_start_date(doc.start_date)
    entries = decode_entries(doc.entries)
    markers = decode_markers(doc.markers)

    logger.debug(
        f"Decoded {len(entries)} entries, {len(markers)} markers "
        f"({sum(m.is_pause for m in markers)} pauses), start {start_date.isoformat()}"
    )
    return ActivityLog(name=doc.name, start_date=start_date, entries=entries, markers=markers)


def decode_entries(df: pd.DataFrame) -> list[LogEntry]:
    n_rows = len(df)
    if n_rows == 0:
        return []

    columns: dict[str, NDArray[np.float64]] = {}
    for name in REQUIRED_ENTRY_FIELDS:
        columns[name] = _numeric_column(df, name, "LogEntry", required=np.ones(n_rows, dtype=np.bool_))
    for name in OPTIONAL_ENTRY_FIELDS:
        columns[name] = _numeric_column(df, name, "LogEntry")

    numbers = _numeric_column(df, "Number", "LogEntry")
    numbers = np.where(np.isnan(numbers), np.arange(1, n_rows + 1), numbers)

    return [
        LogEntry(
            number=int(number),
            ride_time=ride_time,
            latitude=lat,
            longitude=lon,
            altitude=alt,
            temperature=temp,
            heart_rate=hr,
            cadence=cad,
        )
        for number, ride_time, lat, lon, alt, temp, hr, cad in zip(
            numbers.tolist(),
            columns["RideTime"].tolist(),
            columns["Latitude"].tolist(),
            columns["Longitude"].tolist(),
            columns["Altitude"].tolist(),
            columns["Temperature"].tolist(),
            columns["Heartrate"].tolist(),
            columns["Cadence"].tolist(),
        )
    ]


def decode_markers(df: pd.DataFrame) -> list[Marker]:
    """
    Decode marker rows.

    Timing fields are only required for pause markers; other marker
    kinds never affect the timeline.
    """
    n_rows = len(df)
    if n_rows == 0:
        return []

    marker_types = _string_column(df, "MarkerType")
    is_pause = marker_types == PAUSE_MARKER_TYPE

    time_absolute = _numeric_column(df, "TimeAbsolute", "Marker", required=is_pause)
    duration = _numeric_column(df, "Duration", "Marker", required=is_pause)

    return [
        Marker(time_absolute=t, duration=d, marker_type=kind)
        for t, d, kind in zip(time_absolute.tolist(), duration.tolist(), marker_types.tolist())
    ]


def _string_column(df: pd.DataFrame, name: str) -> NDArray[np.object_]:
    if name not in df.columns:
        return np.full(len(df), "", dtype=object)
    return df[name].fillna("").astype(str).str.strip().values


def _numeric_column(
    df: pd.DataFrame,
    name: str,
    record: str,
    required: NDArray[np.bool_] | None = None,
) -> NDArray[np.float64]:
    """
    Convert one column to float64, rejecting malformed values.

    Args:
        df: Rows as strings
        name: SLF field name
        record: Record kind used in error messages
        required: Per-row mask of rows that must carry the field
    """
    raw = _string_column(df, name)
    present = raw != ""

    values = pd.to_numeric(pd.Series(raw).where(present), errors="coerce").values.astype(np.float64)

    malformed = present & ~np.isfinite(values)
    if np.any(malformed):
        rows = _row_numbers(malformed)
        sample = raw[malformed][0]
        raise SlfDecodeError(
            f"{record} field {name!r} is not a number in row(s) {rows} (e.g. {sample!r})"
        )

    if required is not None:
        missing = required & ~present
        if np.any(missing):
            raise SlfDecodeError(f"{record} field {name!r} is missing in row(s) {_row_numbers(missing)}")

    return values


def _row_numbers(mask: NDArray[np.bool_]) -> str:
    rows = (np.flatnonzero(mask) + 1).tolist()
    shown = ", ".join(str(r) for r in rows[:MAX_REPORTED_ROWS])
    if len(rows) > MAX_REPORTED_ROWS:
        shown += f", ... ({len(rows)} total)"
    return shown
