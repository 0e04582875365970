import pytest

from charging_app.client.filters import PAGE_SIZE, Paginator, StationFilters, filter_stations, matches
from factories import make_station


@pytest.fixture
def stations():
    return [
        make_station(1, "Alpha", status="Operational", pin_code="560001", connector_type="TYPE_2_AC"),
        make_station(2, "Beta", status="Maintenance", pin_code="560002", connector_type="CCS2_DC"),
        make_station(3, "Gamma", status="Operational", pin_code="560001", connector_type="CCS2_DC"),
        make_station(4, "Delta", status="operational", connector_type=None, pin_code=None),
        make_station(5, "Epsilon", status="Offline", pin_code="110001", connector_type="BHARAT_AC_001"),
    ]


def ids(stations):
    return [s.id for s in stations]


def test_no_filters_returns_everything_in_order(stations):
    assert ids(filter_stations(stations, StationFilters())) == [1, 2, 3, 4, 5]


def test_pin_code_scenario(stations):
    result = filter_stations(stations[:3], StationFilters(pin_code="560001"))
    assert ids(result) == [1, 3]


def test_pin_code_is_substring_and_excludes_missing_pin(stations):
    assert ids(filter_stations(stations, StationFilters(pin_code="5600"))) == [1, 2, 3]
    assert 4 not in ids(filter_stations(stations, StationFilters(pin_code=" ")))


def test_search_covers_every_field_case_insensitively(stations):
    assert ids(filter_stations(stations, StationFilters(search="ALPHA"))) == [1]
    assert ids(filter_stations(stations, StationFilters(search="delta street"))) == [4]
    assert ids(filter_stations(stations, StationFilters(search="110001"))) == [5]
    assert ids(filter_stations(stations, StationFilters(search="maintenance"))) == [2]


def test_search_matches_connector_with_spaces(stations):
    assert ids(filter_stations(stations, StationFilters(search="type 2 ac"))) == [1]
    assert ids(filter_stations(stations, StationFilters(search="TYPE_2_AC"))) == []


def test_connector_filter_is_exact(stations):
    assert ids(filter_stations(stations, StationFilters(connector_type="CCS2_DC"))) == [2, 3]
    assert ids(filter_stations(stations, StationFilters(connector_type="ccs2_dc"))) == []


def test_status_filter_is_case_insensitive_exact(stations):
    assert ids(filter_stations(stations, StationFilters(status="OPERATIONAL"))) == [1, 3, 4]
    assert ids(filter_stations(stations, StationFilters(status="Operation"))) == []


def test_filters_are_combined_with_and(stations):
    filters = StationFilters(status="Operational", connector_type="CCS2_DC", pin_code="5600")
    assert ids(filter_stations(stations, filters)) == [3]


@pytest.mark.parametrize(
    "filters",
    [
        StationFilters(search="a"),
        StationFilters(search="a", status="operational"),
        StationFilters(pin_code="1", connector_type="CCS2_DC"),
        StationFilters(search="street", pin_code="560", status="Maintenance"),
    ],
)
def test_result_equals_and_of_single_filters(stations, filters):
    singles = [
        StationFilters(search=filters.search),
        StationFilters(pin_code=filters.pin_code),
        StationFilters(connector_type=filters.connector_type),
        StationFilters(status=filters.status),
    ]
    expected = [s for s in stations if all(matches(s, f) for f in singles)]
    assert filter_stations(stations, filters) == expected


def test_active_count():
    assert StationFilters().active_count == 0
    assert StationFilters(search="x", status="Operational").active_count == 2
    assert StationFilters(pin_code="1").has_active


# ------------------ PAGINACIÓN ------------------ #
@pytest.mark.parametrize("size, pages", [(0, 0), (1, 1), (6, 1), (7, 2), (12, 2), (13, 3)])
def test_page_count_is_ceiling(size, pages):
    assert Paginator(list(range(size))).page_count == pages


def test_pages_concatenate_to_input_order():
    items = list(range(17))
    paginator = Paginator(items, PAGE_SIZE)
    flattened = [item for page in paginator.pages() for item in page]
    assert flattened == items
    assert [len(p) for p in paginator.pages()] == [6, 6, 5]


def test_clamp_resets_out_of_range_page():
    paginator = Paginator(list(range(7)))
    assert paginator.clamp(2) == 2
    assert paginator.clamp(3) == 1
    assert paginator.clamp(0) == 1
    assert Paginator([]).clamp(1) == 1
    assert Paginator([]).page(1) == []


def test_invalid_page_size():
    with pytest.raises(ValueError):
        Paginator([], page_size=0)
