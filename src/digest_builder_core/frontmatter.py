from __future__ import annotations

import re
from typing import Any, Sequence

from digest_builder_core.models import DerivedLocation, Frontmatter

LAYOUT = "digest-entry"
DEFAULT_TITLE = "Untitled"
DEFAULT_DATE = "2025-01-01"

_NEWLINES_RE = re.compile(r"\n+")


def yaml_escape(value: Any = "") -> str:
    """
    Escape a value for a double-quoted YAML scalar on a single line.
    """
    if value is None:
        value = ""
    text = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return _NEWLINES_RE.sub(" ", text).strip()


def _number(value: float) -> str:
    # Integral floats print without a trailing ".0" (48.0 -> "48").
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _bool(value: Any) -> str:
    return "true" if value else "false"


def generate_frontmatter(frontmatter: Frontmatter, locations: Sequence[DerivedLocation] = ()) -> str:
    """
    Fixed-schema metadata block. Field names and their order are a contract with
    whatever consumes the exported digest; do not reorder.
    """
    tags = ", ".join(f'"{yaml_escape(t)}"' for t in (frontmatter.tags or []))
    lines = [
        "---",
        f"layout: {LAYOUT}",
        f'title: "{yaml_escape(frontmatter.title or DEFAULT_TITLE)}"',
        f'date: "{frontmatter.date or DEFAULT_DATE}"',
        f"tags: [{tags}]",
        f"draft: {_bool(True if frontmatter.draft is None else frontmatter.draft)}",
    ]

    if locations:
        lines.append("locations:")
        for loc in locations:
            coords = ", ".join(_number(c) for c in loc.coords)
            lines.extend(
                [
                    f'  - title: "{yaml_escape(loc.title)}"',
                    f'    city: "{yaml_escape(loc.city)}"',
                    f'    venue: "{yaml_escape(loc.venue)}"',
                    f'    country: "{yaml_escape(loc.country)}"',
                    f'    date: "{yaml_escape(loc.date)}"',
                    f"    coords: [{coords}]",
                    f'    description: "{yaml_escape(loc.description)}"',
                ]
            )

    lines.append("---")
    return "\n".join(lines) + "\n\n"
