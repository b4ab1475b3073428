from __future__ import annotations

from digest_builder_core.assembler import (
    build_digest,
    build_preview,
    export_filename,
    normalize_markdown,
    section_anchor,
    strip_emoji,
    table_of_contents,
)
from digest_builder_core.models import (
    Author,
    Document,
    EventEntry,
    Frontmatter,
    LocationOverride,
    PublicationEntry,
    Section,
    TextEntry,
)


def _document() -> Document:
    return Document(
        frontmatter=Frontmatter(title="Weekly Digest", date="2025-06-01", tags=["film"], draft=False),
        sections=[
            Section(
                id="s1",
                type="publications",
                title="Publications 📚",
                entries=[
                    PublicationEntry(
                        id="p1",
                        authors=[Author(name="Jane", surname="Doe")],
                        title="Minor Paper",
                        importance=3,
                        why_it_matters="Line one\nline two",
                    ),
                    PublicationEntry(id="p2", title="Major Paper", importance=1),
                ],
            ),
            Section(id="s2", type="news", title="News 📰"),
            Section(
                id="s3",
                type="conferences",
                title="Conferences 📢",
                entries=[
                    EventEntry(
                        id="e1",
                        type="conference",
                        title="Film Studies Now",
                        place="Paris, France",
                        coords="48.8566, 2.3522",
                        date_start="2025-05-01",
                    )
                ],
            ),
        ],
        frontmatter_locations=[LocationOverride(entry_id="e1", description="In person")],
    )


def test_minimal_document_exact_output() -> None:
    doc = Document(
        sections=[Section(id="s1", type="news", title="News 📰", entries=[TextEntry(id="t1", content="Hello")])]
    )
    assert build_digest(doc) == (
        "---\n"
        "layout: digest-entry\n"
        'title: "Untitled"\n'
        'date: "2025-01-01"\n'
        "tags: []\n"
        "draft: true\n"
        "---\n"
        "\n"
        "## Jump to\n"
        "\n"
        "- [News](#news-)\n"
        "\n"
        "## News 📰\n"
        "\n"
        "Hello\n"
    )


def test_contents_and_sections_skip_empty_sections() -> None:
    md = build_digest(_document())
    assert "## Jump to\n\n- [Publications](#publications-)\n- [Conferences](#conferences-)\n\n" in md
    assert "News" not in md
    assert md.index("## Publications 📚") < md.index("## Conferences 📢")


def test_entries_follow_sort_order() -> None:
    md = build_digest(_document())
    assert md.index("Major Paper") < md.index("Minor Paper")


def test_frontmatter_carries_locations_with_overrides() -> None:
    md = build_digest(_document())
    assert 'title: "Weekly Digest"' in md
    assert "draft: false" in md
    assert '  - title: "Conference: Film Studies Now"' in md
    assert "    coords: [48.8566, 2.3522]" in md
    assert '    description: "In person"' in md


def test_export_whitespace_is_normalized() -> None:
    md = build_digest(_document())
    assert md.endswith("\n") and not md.endswith("\n\n")
    assert "\n\n\n" not in md
    assert all(line == line.rstrip(" \t") for line in md.split("\n"))


def test_build_is_idempotent() -> None:
    doc = _document()
    assert build_digest(doc) == build_digest(doc)


def test_preview_uses_frontmatter_override_and_keeps_hard_breaks() -> None:
    doc = _document()
    preview = build_preview(doc, Frontmatter(title="Unsaved Title"))
    assert 'title: "Unsaved Title"' in preview
    assert "*Line one  \nline two*" in preview
    assert preview.startswith("---\n")
    assert "---\n\n## Jump to" in preview
    assert 'title: "Weekly Digest"' in build_preview(doc)


def test_empty_document() -> None:
    md = build_digest(Document())
    assert md.endswith("---\n\n## Jump to\n")


def test_table_of_contents_helpers() -> None:
    assert strip_emoji("Exhibitions 🖼️") == "Exhibitions"
    assert strip_emoji("Custom Section ✏️") == "Custom Section"
    assert strip_emoji("Festivals & Screenings 🎬") == "Festivals & Screenings"
    assert section_anchor("Festivals & Screenings 🎬") == "festivals-screenings-"
    assert section_anchor("Reading List") == "reading-list"
    assert table_of_contents([Section(id="s", type="custom", title="Empty")]) == "## Jump to\n\n\n"


def test_normalize_markdown() -> None:
    assert normalize_markdown("\n\na  \n\n\n\nb\t\n\n") == "a\n\nb\n"


def test_export_filename() -> None:
    assert export_filename(Frontmatter(title="June Digest 2025")) == "june-digest-2025.md"
    assert export_filename(Frontmatter()) == "digest.md"
