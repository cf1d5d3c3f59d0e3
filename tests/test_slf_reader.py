"""
Tests for the SLF reader, record decoder and start date parsing.
"""

import math
from datetime import datetime, timedelta, timezone

import pandas as pd
import pytest

from slf2gpx.errors import SlfDecodeError, SlfReadError
from slf2gpx.services.decoder import decode_document, decode_entries, decode_markers
from slf2gpx.services.slf_reader import read_slf
from slf2gpx.utils.dates import parse_start_date


def _entry_xml(number, ride_time, lat, lon, alt="100000", temp="20", hr="120", cad="80"):
    return (
        f"<LogEntry><Number>{number}</Number><RideTime>{ride_time}</RideTime>"
        f"<Latitude>{lat}</Latitude><Longitude>{lon}</Longitude><Altitude>{alt}</Altitude>"
        f"<Temperature>{temp}</Temperature><Heartrate>{hr}</Heartrate><Cadence>{cad}</Cadence></LogEntry>"
    )


def _slf(entries="", markers="", start_date="2024-01-01T00:00:00Z", name="Morning Ride"):
    return f"""<?xml version="1.0" encoding="utf-8"?>
<Log>
  <GeneralInformation>
    <Name>{name}</Name>
    <StartDate>{start_date}</StartDate>
  </GeneralInformation>
  <LogEntries>{entries}</LogEntries>
  <Markers>{markers}</Markers>
</Log>
"""


@pytest.fixture
def sample_slf_content():
    """Three entries, one pause marker and one lap marker."""
    entries = (
        _entry_xml(1, "10", "50.1234567", "8.7654321", alt="123456", temp="21.7", hr="120.9", cad="85.5")
        + _entry_xml(2, "20", "50.1235000", "8.7655000")
        + _entry_xml(3, "30", "0", "0")
    )
    markers = (
        "<Marker><TimeAbsolute>10</TimeAbsolute><Duration>5</Duration><MarkerType>p</MarkerType></Marker>"
        "<Marker><TimeAbsolute>20</TimeAbsolute><MarkerType>l</MarkerType></Marker>"
    )
    return _slf(entries, markers)


@pytest.fixture
def sample_slf_file(sample_slf_content, tmp_path):
    slf_file = tmp_path / "ride.slf"
    slf_file.write_text(sample_slf_content)
    return slf_file


def _write(tmp_path, content, name="ride.slf"):
    path = tmp_path / name
    path.write_text(content)
    return path


class TestReadSlf:
    """Tests for read_slf."""

    def test_reads_general_information(self, sample_slf_file):
        doc = read_slf(sample_slf_file)

        assert doc.name == "Morning Ride"
        assert doc.start_date == "2024-01-01T00:00:00Z"
        assert doc.source_file == sample_slf_file

    def test_reads_rows(self, sample_slf_file):
        doc = read_slf(sample_slf_file)

        assert doc.entry_count == 3
        assert doc.marker_count == 2
        assert doc.entries["Latitude"].tolist() == ["50.1234567", "50.1235000", "0"]
        assert doc.markers["MarkerType"].tolist() == ["p", "l"]

    def test_attribute_rows(self, tmp_path):
        """Fields may also be written as attributes."""
        entries = '<LogEntry Number="1" RideTime="2" Latitude="50" Longitude="8"/>'
        doc = read_slf(_write(tmp_path, _slf(entries)))
        assert doc.entries.loc[0, "RideTime"] == "2"

    def test_empty_sections(self, tmp_path):
        doc = read_slf(_write(tmp_path, _slf()))
        assert doc.entry_count == 0
        assert doc.marker_count == 0
        assert "RideTime" in doc.entries.columns

    def test_missing_sections(self, tmp_path):
        content = "<Log><GeneralInformation><StartDate>2024-01-01</StartDate></GeneralInformation></Log>"
        doc = read_slf(_write(tmp_path, content))
        assert doc.entry_count == 0
        assert doc.name == "ride"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SlfReadError):
            read_slf(tmp_path / "nope.slf")

    def test_not_xml(self, tmp_path):
        with pytest.raises(SlfReadError):
            read_slf(_write(tmp_path, "Time,Latitude\n0,1\n"))

    def test_wrong_root(self, tmp_path):
        with pytest.raises(SlfReadError, match="Log"):
            read_slf(_write(tmp_path, "<gpx></gpx>"))

    def test_missing_start_date(self, tmp_path):
        content = "<Log><GeneralInformation><Name>x</Name></GeneralInformation></Log>"
        with pytest.raises(SlfReadError, match="StartDate"):
            read_slf(_write(tmp_path, content))


class TestDecoder:
    """Tests for decode_document and friends."""

    def test_decode_sample(self, sample_slf_file):
        log = decode_document(read_slf(sample_slf_file))

        assert log.name == "Morning Ride"
        assert log.start_date == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert [e.ride_time for e in log.entries] == [10.0, 20.0, 30.0]
        assert log.entries[0].latitude == 50.1234567
        assert log.entries[0].heart_rate == 120.9
        assert [m.is_pause for m in log.markers] == [True, False]
        assert log.pause_markers[0].duration == 5.0

    def test_non_numeric_field_rejected(self):
        df = pd.DataFrame(
            [
                {"RideTime": "1", "Latitude": "50", "Longitude": "8"},
                {"RideTime": "1", "Latitude": "north", "Longitude": "8"},
            ]
        )
        with pytest.raises(SlfDecodeError, match=r"'Latitude'.*row\(s\) 2"):
            decode_entries(df)

    def test_non_numeric_optional_field_rejected(self):
        df = pd.DataFrame([{"RideTime": "1", "Latitude": "50", "Longitude": "8", "Cadence": "n/a"}])
        with pytest.raises(SlfDecodeError, match="Cadence"):
            decode_entries(df)

    def test_missing_required_field(self):
        df = pd.DataFrame([{"RideTime": "1", "Latitude": "50", "Longitude": "8"}, {"Latitude": "50", "Longitude": "8"}])
        with pytest.raises(SlfDecodeError, match="RideTime.*missing"):
            decode_entries(df)

    def test_missing_optional_fields_are_nan(self):
        df = pd.DataFrame([{"RideTime": "1", "Latitude": "50", "Longitude": "8"}])
        entry = decode_entries(df)[0]
        assert math.isnan(entry.altitude)
        assert math.isnan(entry.heart_rate)

    def test_number_defaults_to_position(self):
        df = pd.DataFrame([{"RideTime": "1", "Latitude": "50", "Longitude": "8"}] * 3)
        assert [e.number for e in decode_entries(df)] == [1, 2, 3]

    def test_pause_marker_requires_duration(self):
        df = pd.DataFrame([{"TimeAbsolute": "10", "MarkerType": "p"}])
        with pytest.raises(SlfDecodeError, match="Duration"):
            decode_markers(df)

    def test_other_marker_without_duration(self):
        df = pd.DataFrame([{"TimeAbsolute": "10", "MarkerType": "l"}])
        marker = decode_markers(df)[0]
        assert not marker.is_pause
        assert math.isnan(marker.duration)

    def test_empty_frames(self):
        assert decode_entries(pd.DataFrame()) == []
        assert decode_markers(pd.DataFrame()) == []

    def test_bad_start_date(self, tmp_path):
        doc = read_slf(_write(tmp_path, _slf(start_date="sometime")))
        with pytest.raises(SlfDecodeError, match="StartDate"):
            decode_document(doc)


class TestStartDate:
    """Tests for parse_start_date."""

    def test_iso_utc(self):
        assert parse_start_date("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_iso_offset(self):
        parsed = parse_start_date("2024-01-01T02:00:00+02:00")
        assert parsed == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert parse_start_date("2024-01-01 08:30:00").tzinfo == timezone.utc

    def test_sigma_format(self):
        parsed = parse_start_date("Sun Jul 12 09:32:05 GMT+0200 2015")
        assert parsed.utcoffset() == timedelta(hours=2)
        assert parsed == datetime(2015, 7, 12, 7, 32, 5, tzinfo=timezone.utc)

    def test_sigma_bare_gmt(self):
        parsed = parse_start_date("Sun Jul 12 09:32:05 GMT 2015")
        assert parsed == datetime(2015, 7, 12, 9, 32, 5, tzinfo=timezone.utc)

    def test_sigma_bare_utc(self):
        parsed = parse_start_date("Sun Jul 12 09:32:05 UTC 2015")
        assert parsed.utcoffset() == timedelta(0)

    def test_javascript_date_string(self):
        """Date.toString() form with a trailing zone name."""
        parsed = parse_start_date("Sun Jul 12 2015 09:32:05 GMT+0200 (CEST)")
        assert parsed.utcoffset() == timedelta(hours=2)
        assert parsed == datetime(2015, 7, 12, 7, 32, 5, tzinfo=timezone.utc)

    def test_javascript_date_string_long_zone_name(self):
        parsed = parse_start_date("Sun Jul 12 2015 09:32:05 GMT+0200 (Central European Summer Time)")
        assert parsed == datetime(2015, 7, 12, 7, 32, 5, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["", "   ", "yesterday", "Sun Jul 99 09:32:05 GMT+0200 2015"])
    def test_invalid(self, value):
        with pytest.raises(SlfDecodeError):
            parse_start_date(value)
