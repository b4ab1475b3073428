from __future__ import annotations

import re
from typing import Iterable, Sequence

from digest_builder_core.models import EVENT_TYPES, DerivedLocation, LocationOverride, Section

# Longest numeric prefix of a token, the way a lenient float parser reads "48.85°N".
_FLOAT_PREFIX_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_coordinates(coords: str | None) -> tuple[float, ...]:
    if not coords:
        return ()
    values: list[float] = []
    for token in coords.split(","):
        m = _FLOAT_PREFIX_RE.match(token.strip())
        if m:
            values.append(float(m.group(0)))
    return tuple(values)


def parse_place(place: str | None) -> tuple[str, str]:
    """
    "City, Region, Country" -> ("City", "Country"). A single segment is the city.
    """
    if not place:
        return "", ""
    parts = [p.strip() for p in place.split(",")]
    if len(parts) >= 2:
        return parts[0], parts[-1]
    return parts[0], ""


def format_event_date(start: str | None, end: str | None) -> str:
    if not start:
        return ""
    if not end or start == end:
        return start
    return f"{start} to {end}"


def event_type_label(entry_type: str, custom_event_type: str | None = None) -> str:
    if custom_event_type:
        return custom_event_type
    return entry_type[:1].upper() + entry_type[1:]


def collect_locations(
    sections: Sequence[Section],
    overrides: Iterable[LocationOverride] = (),
) -> list[DerivedLocation]:
    by_entry_id: dict[str, LocationOverride] = {}
    for o in overrides:
        by_entry_id.setdefault(o.entry_id, o)

    locations: list[DerivedLocation] = []
    for section in sections:
        for entry in section.entries or []:
            if entry.type not in EVENT_TYPES:
                continue

            city, country = parse_place(entry.place)
            label = event_type_label(entry.type, entry.custom_event_type)
            override = by_entry_id.get(entry.id)

            title = f"{label}: {entry.title or 'Untitled'}"
            description = entry.description or ""
            if override is not None:
                title = override.title or title
                description = override.description or description

            locations.append(
                DerivedLocation(
                    title=title,
                    city=city,
                    venue=entry.venue or "",
                    country=country,
                    coords=parse_coordinates(entry.coords),
                    date=format_event_date(entry.date_start, entry.date_end),
                    description=description,
                    entry_id=entry.id,
                )
            )
    return locations
