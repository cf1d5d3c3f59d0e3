"""
SLF (Sigma log format) reader.

Parses the XML exported by Sigma DataCenter into an SlfDocument.
Decoding of numeric fields happens in slf2gpx.services.decoder.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

import pandas as pd

from slf2gpx.errors import SlfReadError
from slf2gpx.models.raw import SlfDocument


logger = logging.getLogger(__name__)


ROOT_TAG = "Log"

ENTRY_COLUMNS = [
    "Number",
    "RideTime",
    "Latitude",
    "Longitude",
    "Altitude",
    "Temperature",
    "Heartrate",
    "Cadence",
]
MARKER_COLUMNS = ["TimeAbsolute", "Duration", "MarkerType"]


def read_slf(filepath: Path) -> SlfDocument:
    """
    Read an SLF file.

    Args:
        filepath: Path to the .slf file

    Returns:
        SlfDocument with entry and marker rows as string DataFrames

    Raises:
        SlfReadError: if the file cannot be read or is not an SLF log
    """
    filepath = Path(filepath)
    try:
        tree = ET.parse(filepath)
    except OSError as e:
        raise SlfReadError(f"Cannot read {filepath}: {e}") from e
    except ET.ParseError as e:
        raise SlfReadError(f"{filepath} is not valid XML: {e}") from e

    return parse_slf_tree(tree.getroot(), filepath)


def parse_slf_tree(root: ET.Element, filepath: Path) -> SlfDocument:
    if root.tag != ROOT_TAG:
        raise SlfReadError(f"Expected <{ROOT_TAG}> root element, found <{root.tag}>")

    general = root.find("GeneralInformation")
    if general is None:
        raise SlfReadError("Missing Log/GeneralInformation")

    start_date = general.findtext("StartDate")
    if start_date is None:
        raise SlfReadError("Missing Log/GeneralInformation/StartDate")

    name = (general.findtext("Name") or "").strip() or filepath.stem

    entries = _rows_to_frame(root.findall("LogEntries/LogEntry"), ENTRY_COLUMNS)
    markers = _rows_to_frame(root.findall("Markers/Marker"), MARKER_COLUMNS)

    logger.debug(f"Read {len(entries)} log entries and {len(markers)} markers from {filepath}")

    return SlfDocument(
        source_file=filepath,
        name=name,
        start_date=start_date.strip(),
        entries=entries,
        markers=markers,
    )


def _element_to_row(element: ET.Element) -> dict[str, str]:
    """Flatten an element's attributes and child texts into one row."""
    row = dict(element.attrib)
    for child in element:
        row[child.tag] = (child.text or "").strip()
    return row


def _rows_to_frame(elements: list[ET.Element], columns: list[str]) -> pd.DataFrame:
    df = pd.DataFrame([_element_to_row(e) for e in elements], dtype=object)
    # Keep known columns in a stable order, extras after them
    extra = [c for c in df.columns if c not in columns]
    return df.reindex(columns=columns + extra)
