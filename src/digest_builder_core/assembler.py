from __future__ import annotations

import re
from typing import Sequence

from digest_builder_core.frontmatter import generate_frontmatter
from digest_builder_core.locations import collect_locations
from digest_builder_core.models import Document, Frontmatter, Section
from digest_builder_core.renderers import render_entry
from digest_builder_core.sorting import sorted_section_entries
from digest_builder_core.util import sanitize_filename

_EMOJI_RE = re.compile(
    "[\U0001F300-\U0001F9FF\u2600-\u26FF\u2700-\u27BF"
    # variation selector-16 and zero-width joiner left behind by emoji sequences
    "\uFE0F\u200D]"
)
_ANCHOR_RE = re.compile(r"[^a-z0-9]+")
_BLANK_RUN_RE = re.compile(r"\n{3,}")
_TRAILING_WS_RE = re.compile(r"[ \t]+$", re.MULTILINE)
_WHITESPACE_RE = re.compile(r"\s+")


def strip_emoji(title: str) -> str:
    return _EMOJI_RE.sub("", title).strip()


def section_anchor(title: str) -> str:
    return _ANCHOR_RE.sub("-", title.lower())


def table_of_contents(sections: Sequence[Section]) -> str:
    md = "## Jump to\n\n"
    for section in sections:
        if section.entries:
            md += f"- [{strip_emoji(section.title)}](#{section_anchor(section.title)})\n"
    return md + "\n"


def _body(document: Document, frontmatter: Frontmatter, separator: str) -> str:
    locations = collect_locations(document.sections, document.frontmatter_locations)
    md = generate_frontmatter(frontmatter, locations) + separator
    md += table_of_contents(document.sections)
    for section, entries in sorted_section_entries(document.sections):
        md += f"## {section.title}\n\n"
        for entry in entries:
            md += render_entry(entry)
    return md


def normalize_markdown(md: str) -> str:
    md = _BLANK_RUN_RE.sub("\n\n", md)
    md = _TRAILING_WS_RE.sub("", md)
    return md.strip() + "\n"


def build_digest(document: Document) -> str:
    """
    Full exported digest: frontmatter, "Jump to" contents, then each non-empty
    section with its entries in sort order.
    """
    return normalize_markdown(_body(document, document.frontmatter, "\n\n"))


def build_preview(document: Document, frontmatter: Frontmatter | None = None) -> str:
    """
    Live preview text. `frontmatter` overrides the stored one (editor form values
    that have not been committed to the store yet). Output is not normalized so
    hard line breaks stay visible.
    """
    return _body(document, frontmatter or document.frontmatter, "")


def export_filename(frontmatter: Frontmatter) -> str:
    title = frontmatter.title or "digest"
    return sanitize_filename(_WHITESPACE_RE.sub("-", title)) + ".md"
