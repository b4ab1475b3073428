from __future__ import annotations

import pytest

from digest_builder_core.locations import collect_locations, format_event_date, parse_coordinates, parse_place
from digest_builder_core.models import EventEntry, LocationOverride, PublicationEntry, Section


def _section(*entries) -> Section:
    return Section(id="s1", type="conferences", title="Conferences", entries=list(entries))


def test_conference_with_same_start_and_end() -> None:
    entry = EventEntry(
        id="e1",
        type="conference",
        title="X",
        place="Paris, France",
        date_start="2025-05-01",
        date_end="2025-05-01",
    )
    [loc] = collect_locations([_section(entry)])
    assert loc.city == "Paris"
    assert loc.country == "France"
    assert loc.date == "2025-05-01"
    assert loc.title == "Conference: X"
    assert loc.entry_id == "e1"


def test_date_range_venue_and_coords() -> None:
    entry = EventEntry(
        id="e1",
        type="festival",
        title="Doc Fest",
        place="Lyon, Auvergne, France",
        venue="Institut Lumière",
        coords="45.745, 4.870",
        date_start="2025-05-01",
        date_end="2025-05-04",
        description="Screenings",
    )
    [loc] = collect_locations([_section(entry)])
    assert loc.title == "Festival: Doc Fest"
    assert (loc.city, loc.country, loc.venue) == ("Lyon", "France", "Institut Lumière")
    assert loc.coords == (45.745, 4.87)
    assert loc.date == "2025-05-01 to 2025-05-04"
    assert loc.description == "Screenings"


def test_custom_event_type_and_untitled() -> None:
    entry = EventEntry(id="e1", type="exhibition", custom_event_type="Retrospective")
    [loc] = collect_locations([_section(entry)])
    assert loc.title == "Retrospective: Untitled"
    assert loc.date == ""
    assert loc.coords == ()


def test_override_replaces_title_and_description_only() -> None:
    entry = EventEntry(id="e1", type="conference", title="X", place="Paris, France", description="orig")
    overrides = [LocationOverride(entry_id="e1", title="Custom title", description="Custom desc")]
    [loc] = collect_locations([_section(entry)], overrides)
    assert loc.title == "Custom title"
    assert loc.description == "Custom desc"
    assert loc.city == "Paris"


def test_empty_override_fields_fall_back() -> None:
    entry = EventEntry(id="e1", type="conference", title="X", description="orig")
    [loc] = collect_locations([_section(entry)], [LocationOverride(entry_id="e1", title="")])
    assert loc.title == "Conference: X"
    assert loc.description == "orig"


def test_non_events_and_dangling_overrides_are_ignored() -> None:
    sections = [_section(PublicationEntry(id="p1", title="Paper"))]
    overrides = [LocationOverride(entry_id="gone", title="Stale")]
    assert collect_locations(sections, overrides) == []


def test_section_and_entry_order_is_kept() -> None:
    a = Section(id="s1", type="conferences", title="C", entries=[EventEntry(id="e2", type="conference")])
    b = Section(
        id="s2",
        type="exhibitions",
        title="E",
        entries=[EventEntry(id="e3", type="exhibition"), EventEntry(id="e1", type="exhibition")],
    )
    assert [loc.entry_id for loc in collect_locations([a, b])] == ["e2", "e3", "e1"]


@pytest.mark.parametrize(
    ("coords", "expected"),
    [
        ("48.8566, 2.3522", (48.8566, 2.3522)),
        ("48.85°N, 2.35°E", (48.85, 2.35)),
        ("abc, 2", (2.0,)),
        ("-33.9, 18.4", (-33.9, 18.4)),
        ("", ()),
        (None, ()),
    ],
)
def test_parse_coordinates(coords: str | None, expected: tuple[float, ...]) -> None:
    assert parse_coordinates(coords) == expected


def test_parse_place_and_event_date() -> None:
    assert parse_place("Berlin") == ("Berlin", "")
    assert parse_place("") == ("", "")
    assert parse_place(" Rome ,  Italy ") == ("Rome", "Italy")
    assert format_event_date("2025-01-01", "") == "2025-01-01"
    assert format_event_date("", "2025-01-02") == ""
