from __future__ import annotations

from digest_builder_core.frontmatter import generate_frontmatter, yaml_escape
from digest_builder_core.models import DerivedLocation, Frontmatter


def test_yaml_escape() -> None:
    assert yaml_escape('He said "hi"\nand left') == 'He said \\"hi\\" and left'
    assert yaml_escape("a\\b") == "a\\\\b"
    assert yaml_escape("  a\n\n\nb  ") == "a b"
    assert yaml_escape(None) == ""
    assert yaml_escape(3) == "3"


def test_defaults() -> None:
    assert generate_frontmatter(Frontmatter()) == (
        "---\n"
        "layout: digest-entry\n"
        'title: "Untitled"\n'
        'date: "2025-01-01"\n'
        "tags: []\n"
        "draft: true\n"
        "---\n\n"
    )


def test_full_block_with_locations() -> None:
    fm = Frontmatter(title='My "Digest"', date="2025-06-01", tags=["film", 'new\n"wave"'], draft=False)
    loc = DerivedLocation(
        title="Conference: X",
        city="Paris",
        venue="Sorbonne",
        country="France",
        coords=(48.8566, 2.0),
        date="2025-05-01",
        description="Line one\nline two",
        entry_id="e1",
    )
    assert generate_frontmatter(fm, [loc]) == (
        "---\n"
        "layout: digest-entry\n"
        'title: "My \\"Digest\\""\n'
        'date: "2025-06-01"\n'
        'tags: ["film", "new \\"wave\\""]\n'
        "draft: false\n"
        "locations:\n"
        '  - title: "Conference: X"\n'
        '    city: "Paris"\n'
        '    venue: "Sorbonne"\n'
        '    country: "France"\n'
        '    date: "2025-05-01"\n'
        "    coords: [48.8566, 2]\n"
        '    description: "Line one line two"\n'
        "---\n\n"
    )


def test_location_without_coords() -> None:
    loc = DerivedLocation(
        title="T", city="", venue="", country="", coords=(), date="", description="", entry_id="e"
    )
    out = generate_frontmatter(Frontmatter(), [loc])
    assert "    coords: []\n" in out
    assert out.index("draft: true") < out.index("locations:")
