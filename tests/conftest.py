import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from transit_feed.data.config import FeedConfig
from transit_feed.feed import Feed, load_feed

# A small feed: one Monday-only service (MON), one daily service (DAILY),
# a station with one platform, and a stop whose parent does not exist.
SAMPLE_FEED: dict[str, str] = {
    "agency.txt": (
        "agency_id,agency_name,agency_url,agency_timezone\n"
        "MTA,Metro Transit,http://transit.example.com,America/New_York\n"
    ),
    "stops.txt": (
        "stop_id,stop_name,stop_lat,stop_lon,location_type,parent_station,"
        "stop_timezone,wheelchair_boarding\n"
        "STN,Central Station,40.750,-73.990,1,,,1\n"
        "STN-A,Central Station Platform A,40.750,-73.990,0,STN,,0\n"
        "S1,First Avenue,40.700,-73.950,,,,2\n"
        "S2,Second Avenue,40.710,-73.960,,,,\n"
        "S3,Third Avenue,40.720,-73.970,,GHOST,America/Chicago,\n"
    ),
    "routes.txt": (
        "route_id,agency_id,route_short_name,route_long_name,route_type,route_color\n"
        "R1,MTA,1,Crosstown,3,FF0000\n"
    ),
    "trips.txt": (
        "route_id,service_id,trip_id,trip_headsign,shape_id\n"
        "R1,MON,T1,Eastbound,SH1\n"
        "R1,MON,T2,Eastbound,SH1\n"
        "R1,DAILY,T3,Westbound,\n"
    ),
    "calendar.txt": (
        "service_id,monday,tuesday,wednesday,thursday,friday,saturday,sunday,"
        "start_date,end_date\n"
        "MON,1,0,0,0,0,0,0,20160101,20161231\n"
        "DAILY,1,1,1,1,1,1,1,20160101,20161231\n"
    ),
    "calendar_dates.txt": (
        "service_id,date,exception_type\n"
        "MON,20160105,1\n"
        "DAILY,20160104,2\n"
    ),
    "stop_times.txt": (
        "trip_id,arrival_time,departure_time,stop_id,stop_sequence,timepoint\n"
        "T1,08:00:00,08:00:00,STN-A,1,1\n"
        "T1,,,S1,2,0\n"
        "T1,08:10:00,08:12:00,S2,3,1\n"
        "T2,07:30:00,07:30:00,STN-A,1,1\n"
        "T2,07:40:00,07:40:00,S1,2,1\n"
        "T2,07:50:00,07:50:00,S2,3,1\n"
        "T3,24:30:00,24:30:00,S2,1,\n"
        "T3,25:05:00,25:05:00,S1,2,\n"
    ),
    "shapes.txt": (
        "shape_id,shape_pt_lat,shape_pt_lon,shape_pt_sequence\n"
        "SH1,40.710,-73.960,2\n"
        "SH1,40.700,-73.950,1\n"
    ),
    "transfers.txt": (
        "from_stop_id,to_stop_id,transfer_type,min_transfer_time\n"
        "S1,S2,2,120\n"
        "S1,NOWHERE,0,\n"
    ),
}


def write_feed(directory: Path, files: dict[str, str]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in files.items():
        (directory / name).write_text(text, encoding="utf-8")
    return directory


def zip_feed(directory: Path, zip_path: Path) -> Path:
    with zipfile.ZipFile(zip_path, "w") as zf:
        for file_path in sorted(directory.iterdir()):
            zf.write(file_path, file_path.name)
    return zip_path


@pytest.fixture
def feed_config() -> FeedConfig:
    """Configuration with default settings."""
    return FeedConfig(case_sensitive_headers=True, encoding="utf-8-sig")


@pytest.fixture
def sample_feed_dir(tmp_path: Path) -> Path:
    """Create the sample GTFS feed as a directory."""
    return write_feed(tmp_path / "gtfs", SAMPLE_FEED)


@pytest.fixture
def sample_feed_zip(sample_feed_dir: Path, tmp_path: Path) -> Path:
    """Create the sample GTFS feed as a ZIP file."""
    return zip_feed(sample_feed_dir, tmp_path / "gtfs.zip")


@pytest.fixture
def sample_feed(sample_feed_dir: Path, feed_config: FeedConfig) -> Feed:
    """Load the sample feed."""
    return load_feed(sample_feed_dir, config=feed_config)


@pytest.fixture
def make_feed_dir(tmp_path: Path) -> Callable[..., Path]:
    """Factory for a variant of the sample feed.

    Keyword arguments name a file (with "." replaced by "_", e.g. stops_txt)
    and give its new content, or None to leave the file out.
    """
    counter = 0

    def _make(**overrides: str | None) -> Path:
        nonlocal counter
        counter += 1
        files = dict(SAMPLE_FEED)
        for key, text in overrides.items():
            name = key.replace("_txt", ".txt")
            if text is None:
                files.pop(name, None)
            else:
                files[name] = text
        return write_feed(tmp_path / f"variant{counter}", files)

    return _make
