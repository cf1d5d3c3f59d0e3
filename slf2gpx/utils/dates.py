"""
Start date parsing for SLF GeneralInformation.

Sigma DataCenter writes dates like "Sun Jul 12 09:32:05 GMT+0200 2015"
or the JavaScript form "Sun Jul 12 2015 09:32:05 GMT+0200 (CEST)";
other exporters write ISO-8601. Naive values are taken as UTC.
"""

import re
from datetime import datetime, timezone

from slf2gpx.errors import SlfDecodeError


SIGMA_DATE_FORMATS = (
    "%a %b %d %H:%M:%S %z %Y",
    "%a %b %d %Y %H:%M:%S %z",
)
_GMT_OFFSET = re.compile(r"\b(?:GMT|UTC)([+-]\d{2}:?\d{2})?\b")
_ZONE_NAME = re.compile(r"\s*\([^)]*\)\s*$")


def parse_start_date(value: str) -> datetime:
    """
    Parse an SLF start date into a timezone-aware datetime.

    Raises:
        SlfDecodeError: if the value matches no supported format
    """
    text = (value or "").strip()
    if not text:
        raise SlfDecodeError("StartDate is empty")

    parsed = _parse_iso(text)
    if parsed is None:
        parsed = _parse_sigma(text)
    if parsed is None:
        raise SlfDecodeError(f"Unrecognized StartDate: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_iso(text: str):
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _gmt_to_offset(match: re.Match) -> str:
    # bare "GMT" means +0000
    offset = match.group(1)
    return offset.replace(":", "") if offset else "+0000"


def _parse_sigma(text: str):
    # "GMT+0200 (CEST)" -> "+0200" so strptime's %z can take it
    normalized = _ZONE_NAME.sub("", text)
    normalized = _GMT_OFFSET.sub(_gmt_to_offset, normalized)
    normalized = re.sub(r"\s+", " ", normalized).strip()
    for fmt in SIGMA_DATE_FORMATS:
        try:
            return datetime.strptime(normalized, fmt)
        except ValueError:
            continue
    return None
