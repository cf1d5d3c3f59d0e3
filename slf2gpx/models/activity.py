"""
Decoded activity model.

All SLF content is decoded into these structures with:
- numeric fields validated once at decode time
- fixed units (seconds, degrees, millimetres for altitude)
- immutable records; pipeline stages return enriched copies
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


PAUSE_MARKER_TYPE = "p"


@dataclass(frozen=True)
class LogEntry:
    """One periodic sensor sample from the device."""

    number: int
    ride_time: float          # seconds since previous entry
    latitude: float           # decimal degrees
    longitude: float          # decimal degrees
    altitude: float           # millimetres
    temperature: float        # raw device units
    heart_rate: float
    cadence: float


@dataclass(frozen=True)
class Marker:
    """Discrete event recorded at a nominal offset into the ride."""

    time_absolute: float      # seconds from ride start, pause-free clock
    duration: float           # seconds
    marker_type: str

    @property
    def is_pause(self) -> bool:
        return self.marker_type == PAUSE_MARKER_TYPE


@dataclass
class ActivityLog:
    """A fully decoded SLF log."""

    name: str
    start_date: datetime
    entries: list[LogEntry] = field(default_factory=list)
    markers: list[Marker] = field(default_factory=list)

    @property
    def pause_markers(self) -> list[Marker]:
        return [m for m in self.markers if m.is_pause]


@dataclass(frozen=True)
class TimedPoint:
    """
    A LogEntry placed on the ride timeline.

    nominal_offset and nominal_duration live on the pause-free clock;
    timestamp is the reconstructed wall-clock instant and stays None
    until the timeline has been built.
    """

    entry: LogEntry
    nominal_offset: float
    nominal_duration: float
    pauses: tuple[Marker, ...] = ()
    timestamp: Optional[datetime] = None

    @property
    def nominal_end(self) -> float:
        return self.nominal_offset + self.nominal_duration

    @property
    def pause_seconds(self) -> float:
        return sum(m.duration for m in self.pauses)


@dataclass(frozen=True)
class TrackPoint:
    """Export-only track point, ready for GPX serialization."""

    latitude: float
    longitude: float
    elevation: Optional[float]  # metres
    time: datetime
    temperature: Optional[int] = None
    heart_rate: Optional[int] = None
    cadence: Optional[int] = None

    @property
    def has_extensions(self) -> bool:
        return any(v is not None for v in (self.temperature, self.heart_rate, self.cadence))
