"""
Raw SLF document model (source-format, undecoded).

The reader loads an SLF file into this structure before decoding.
"""

from dataclasses import dataclass
from pathlib import Path

import pandas as pd


@dataclass
class SlfDocument:
    """Raw content extracted from an SLF file, all values still strings."""

    source_file: Path
    name: str
    start_date: str

    entries: pd.DataFrame   # one row per LogEntry, columns are SLF tag names
    markers: pd.DataFrame   # one row per Marker

    @property
    def entry_count(self) -> int:
        return len(self.entries)

    @property
    def marker_count(self) -> int:
        return len(self.markers)
