"""Tests for entity collections."""

from datetime import date

import pytest

from transit_feed.data.csv_table import CsvTable
from transit_feed.errors import (
    DatasetUniquenessError,
    InvalidDataError,
    MissingRequiredFieldError,
)
from transit_feed.stores import (
    AgencyStore,
    CalendarEntryStore,
    CalendarOverrideStore,
    RouteStore,
    ShapeStore,
    StopStore,
    TripStore,
    load_stop_times,
    load_transfer_rules,
)


def table(filename: str, text: str) -> CsvTable:
    return CsvTable.from_text(text, filename=filename)


class TestAgencyStore:
    """Tests for AgencyStore."""

    def test_single_agency_keyed_by_empty_id(self) -> None:
        """Test that an agency without an id is keyed by an empty string."""
        agencies = AgencyStore.from_table(
            table(
                "agency.txt",
                "agency_name,agency_url,agency_timezone\nMetro,http://example.com,UTC\n",
            )
        )
        assert list(agencies) == [""]
        assert agencies.first().agency_name == "Metro"

    def test_duplicate_agency_id(self) -> None:
        """Test that agency ids must be unique when there are several agencies."""
        with pytest.raises(DatasetUniquenessError) as exc_info:
            AgencyStore.from_table(
                table(
                    "agency.txt",
                    "agency_id,agency_name,agency_url,agency_timezone\n"
                    "A,First,http://a.example.com,UTC\n"
                    "A,Second,http://b.example.com,UTC\n",
                )
            )
        assert exc_info.value.filename == "agency.txt"
        assert exc_info.value.field_name == "agency_id"
        assert exc_info.value.duplicated_value == "A"

    def test_empty_agency_file(self) -> None:
        """Test that an empty agency file gives an empty store."""
        agencies = AgencyStore.from_table(
            table("agency.txt", "agency_name,agency_url,agency_timezone\n")
        )
        assert len(agencies) == 0
        assert agencies.first() is None


class TestStopStore:
    """Tests for StopStore."""

    def test_stops_keyed_by_id(self) -> None:
        """Test building stops in file order."""
        stops = StopStore.from_table(
            table(
                "stops.txt",
                "stop_id,stop_name,stop_lat,stop_lon,location_type\n"
                "STN,Station,1,1,1\n"
                "S1,Stop,1,1,0\n",
            )
        )
        assert list(stops) == ["STN", "S1"]
        assert "S1" in stops
        assert stops.get("missing") is None
        assert [stop.stop_id for stop in stops.stations()] == ["STN"]

    def test_duplicate_stop_id(self) -> None:
        """Test that a repeated stop_id is rejected with the duplicated value."""
        with pytest.raises(DatasetUniquenessError) as exc_info:
            StopStore.from_table(
                table(
                    "stops.txt",
                    "stop_id,stop_name,stop_lat,stop_lon\nS1,A,1,1\nS2,B,1,1\nS1,C,1,1\n",
                )
            )
        assert exc_info.value.field_name == "stop_id"
        assert exc_info.value.duplicated_value == "S1"

    def test_required_columns_checked_without_rows(self) -> None:
        """Test that required columns are checked even for an empty file."""
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            StopStore.from_table(table("stops.txt", "stop_id,stop_name,stop_lon\n"))
        assert exc_info.value.field_name == "stop_lat"

    def test_invalid_row_aborts(self) -> None:
        """Test that one invalid row aborts the whole collection."""
        with pytest.raises(InvalidDataError) as exc_info:
            StopStore.from_table(
                table(
                    "stops.txt",
                    "stop_id,stop_name,stop_lat,stop_lon\nS1,A,1,1\nS2,B,100,1\n",
                )
            )
        assert exc_info.value.record == 2

    def test_store_is_read_only(self) -> None:
        """Test that the collection cannot be modified."""
        stops = StopStore.from_table(
            table("stops.txt", "stop_id,stop_name,stop_lat,stop_lon\nS1,A,1,1\n")
        )
        with pytest.raises(TypeError):
            stops["S2"] = stops["S1"]  # type: ignore[index]


class TestRouteAndTripStores:
    """Tests for RouteStore and TripStore."""

    def test_duplicate_route_id(self) -> None:
        """Test that a repeated route_id is rejected."""
        with pytest.raises(DatasetUniquenessError) as exc_info:
            RouteStore.from_table(
                table(
                    "routes.txt",
                    "route_id,route_short_name,route_long_name,route_type\n"
                    "R1,1,One,3\n"
                    "R1,2,Two,3\n",
                )
            )
        assert exc_info.value.field_name == "route_id"
        assert exc_info.value.duplicated_value == "R1"

    def test_duplicate_reported_before_later_invalid_row(self) -> None:
        """Test that a duplicate is raised before an invalid row further down."""
        with pytest.raises(DatasetUniquenessError) as exc_info:
            RouteStore.from_table(
                table(
                    "routes.txt",
                    "route_id,route_short_name,route_long_name,route_type\n"
                    "R1,1,One,3\n"
                    "R1,2,Two,3\n"
                    "R9,9,Nine,99\n",
                )
            )
        assert exc_info.value.duplicated_value == "R1"

    def test_invalid_row_reported_before_later_duplicate(self) -> None:
        """Test that an invalid row is raised before a duplicate further down."""
        with pytest.raises(InvalidDataError) as exc_info:
            RouteStore.from_table(
                table(
                    "routes.txt",
                    "route_id,route_short_name,route_long_name,route_type\n"
                    "R1,1,One,3\n"
                    "R9,9,Nine,99\n"
                    "R1,2,Two,3\n",
                )
            )
        assert exc_info.value.record == 2

    def test_duplicate_trip_id(self) -> None:
        """Test that a repeated trip_id is rejected."""
        with pytest.raises(DatasetUniquenessError) as exc_info:
            TripStore.from_table(
                table("trips.txt", "route_id,service_id,trip_id\nR1,WK,T1\nR2,WK,T1\n")
            )
        assert exc_info.value.field_name == "trip_id"
        assert exc_info.value.duplicated_value == "T1"

    def test_trips_for_route(self) -> None:
        """Test finding trips by route."""
        trips = TripStore.from_table(
            table("trips.txt", "route_id,service_id,trip_id\nR1,WK,T1\nR2,WK,T2\nR1,WK,T3\n")
        )
        assert [trip.trip_id for trip in trips.for_route("R1")] == ["T1", "T3"]


class TestCalendarStores:
    """Tests for CalendarEntryStore and CalendarOverrideStore."""

    HEADER = (
        "service_id,monday,tuesday,wednesday,thursday,friday,saturday,sunday,start_date,end_date\n"
    )

    def test_duplicate_service_id(self) -> None:
        """Test that calendar.txt service ids are unique."""
        text = (
            self.HEADER
            + "WK,1,1,1,1,1,0,0,20160101,20161231\n"
            + "WK,0,0,0,0,0,1,1,20160101,20161231\n"
        )
        with pytest.raises(DatasetUniquenessError) as exc_info:
            CalendarEntryStore.from_table(table("calendar.txt", text))
        assert exc_info.value.field_name == "service_id"
        assert exc_info.value.duplicated_value == "WK"

    def test_duplicate_override_pair(self) -> None:
        """Test that (service_id, date) pairs are unique."""
        with pytest.raises(DatasetUniquenessError) as exc_info:
            CalendarOverrideStore.from_table(
                table(
                    "calendar_dates.txt",
                    "service_id,date,exception_type\nWK,20160104,1\nWK,20160104,2\n",
                )
            )
        assert exc_info.value.filename == "calendar_dates.txt"
        assert exc_info.value.field_name == "service_id+date"
        assert exc_info.value.duplicated_value == "WK+20160104"

    def test_override_duplicate_reported_before_later_invalid_row(self) -> None:
        """Test that a repeated pair is raised before an invalid row further down."""
        with pytest.raises(DatasetUniquenessError) as exc_info:
            CalendarOverrideStore.from_table(
                table(
                    "calendar_dates.txt",
                    "service_id,date,exception_type\n"
                    "WK,20160104,1\n"
                    "WK,20160104,2\n"
                    "WK,20160105,7\n",
                )
            )
        assert exc_info.value.duplicated_value == "WK+20160104"

    def test_same_date_different_services(self) -> None:
        """Test that one date may carry exceptions for several services."""
        overrides = CalendarOverrideStore.from_table(
            table(
                "calendar_dates.txt",
                "service_id,date,exception_type\nWK,20160104,2\nSAT,20160104,1\nWK,20160105,2\n",
            )
        )
        assert len(overrides) == 3
        assert overrides.service_ids() == ["WK", "SAT"]
        assert overrides.get("SAT", date(2016, 1, 4)) is not None
        assert overrides.get("SAT", date(2016, 1, 5)) is None

    def test_absent_files_give_empty_stores(self) -> None:
        """Test that an absent calendar file gives an empty store."""
        assert len(CalendarEntryStore.from_table(None)) == 0
        assert len(CalendarOverrideStore.from_table(None)) == 0


class TestScheduleCollections:
    """Tests for stop time, transfer and shape collections."""

    def test_stop_times_keep_file_order_and_row_numbers(self) -> None:
        """Test that stop times carry the row they came from."""
        stop_times = load_stop_times(
            table(
                "stop_times.txt",
                "trip_id,arrival_time,departure_time,stop_id,stop_sequence\n"
                "T1,08:10:00,08:10:00,S2,2\n"
                "T1,08:00:00,08:00:00,S1,1\n",
            )
        )
        assert [st.stop_id for st in stop_times] == ["S2", "S1"]
        assert [st.record_number for st in stop_times] == [1, 2]

    def test_transfer_rules(self) -> None:
        """Test loading transfer rules."""
        rules = load_transfer_rules(
            table("transfers.txt", "from_stop_id,to_stop_id,transfer_type\nA,B,1\n")
        )
        assert len(rules) == 1
        assert rules[0].from_stop_id == "A"

    def test_shapes_sorted_by_sequence(self) -> None:
        """Test that shape points are grouped and sorted by sequence."""
        shapes = ShapeStore.from_table(
            table(
                "shapes.txt",
                "shape_id,shape_pt_lat,shape_pt_lon,shape_pt_sequence\n"
                "SH1,1.0,1.0,3\n"
                "SH2,5.0,5.0,0\n"
                "SH1,2.0,2.0,1\n"
                "SH1,3.0,3.0,2\n",
            )
        )
        assert len(shapes) == 2
        shape = shapes["SH1"]
        assert [p.shape_pt_sequence for p in shape.points] == [1, 2, 3]
        assert shape.point_count == 3
