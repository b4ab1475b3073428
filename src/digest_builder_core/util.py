from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any
from uuid import uuid4

DOI_RE = re.compile(r"10\.\d{4,}/[^\s]+")
_PARTIAL_DATE_RE = re.compile(r"^(\d{4})(?:-(\d{1,2}))?(?:-(\d{1,2}))?$")
_FILENAME_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_-]")

OPEN_ACCESS_BADGE = (
    '<span style="background-color: #5a96d0; color: white; padding: 0.25em 0.4em; '
    'border-radius: 0.25rem; font-size: 75%; line-height: 1;">Open Access</span>'
)

# MLA abbreviations; May, June and July are never abbreviated.
MLA_MONTHS = (
    "Jan.",
    "Feb.",
    "Mar.",
    "Apr.",
    "May",
    "June",
    "July",
    "Aug.",
    "Sept.",
    "Oct.",
    "Nov.",
    "Dec.",
)

_TITLE_SMALL_WORDS = frozenset(
    {
        "a", "an", "the", "and", "but", "or", "nor", "for", "yet", "so",
        "at", "by", "in", "of", "on", "to", "up", "as", "is", "if", "it",
        "from", "into", "with", "via", "per", "vs",
    }
)

CSL_TYPE_MAP = {
    "book": "Book",
    "chapter": "Chapter",
    "article-journal": "Article",
    "article-magazine": "Article",
    "article-newspaper": "Article",
    "paper-conference": "Article",
    "thesis": "Thesis",
    "webpage": "Online Article",
    "post-weblog": "Blog Post",
}


def generate_id() -> str:
    return uuid4().hex


def hard_breaks(text: str | None) -> str:
    """
    Turn single newlines into Markdown hard breaks (two trailing spaces).
    """
    if not text:
        return ""
    return text.replace("\n", "  \n")


def extract_doi(text: str | None) -> str | None:
    if not text:
        return None
    m = DOI_RE.search(text)
    return m.group(0) if m else None


def format_link(url: str | None, custom_text: str | None = None, open_access: bool = False) -> str:
    """
    Trailing link for a citation, with a leading space. Empty when there is no URL.
    """
    if not url:
        return ""
    if open_access:
        return f" [{OPEN_ACCESS_BADGE}]({url})"
    if "doi.org/" in url and extract_doi(url):
        return f" [DOI]({url})"
    return f" [{custom_text or 'link'}]({url})"


def format_mla_date(value: str | None) -> str:
    if not value:
        return ""
    parts = value.split("-")
    if len(parts) == 1:
        return value
    if len(parts) > 3 or not all(p.isdigit() for p in parts):
        return value
    month = int(parts[1])
    if not 1 <= month <= 12:
        return value
    if len(parts) == 3:
        return f"{int(parts[2])} {MLA_MONTHS[month - 1]} {parts[0]}"
    return f"{MLA_MONTHS[month - 1]} {parts[0]}"


def parse_calendar_date(value: str | None) -> date | None:
    value = (value or "").strip()
    if not value:
        return None
    m = _PARTIAL_DATE_RE.match(value)
    if m:
        year, month, day = m.groups()
        try:
            return date(int(year), int(month or 1), int(day or 1))
        except ValueError:
            return None
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def title_case(text: str | None) -> str | None:
    if not text:
        return text
    words = text.lower().split(" ")
    out: list[str] = []
    for idx, word in enumerate(words):
        if 0 < idx < len(words) - 1 and word in _TITLE_SMALL_WORDS:
            out.append(word)
        else:
            out.append(word[:1].upper() + word[1:])
    return " ".join(out)


def map_csl_type(csl_type: str | None) -> str:
    return CSL_TYPE_MAP.get(csl_type or "", "Article")


def format_csl_date(issued: Any) -> str:
    """
    CSL `issued` -> "Y-M-D" / "Y-M" / "Y" (parts joined as given, not zero-padded),
    falling back to the `raw` string.
    """
    if not isinstance(issued, dict):
        return ""
    date_parts = issued.get("date-parts")
    if isinstance(date_parts, list) and date_parts and date_parts[0]:
        return "-".join(str(p) for p in date_parts[0])
    raw = issued.get("raw")
    if raw:
        return str(raw)
    return ""


def sanitize_filename(name: str) -> str:
    return _FILENAME_UNSAFE_RE.sub("-", name).lower()
