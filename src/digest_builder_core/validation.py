from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from digest_builder_core.models import MEDIA_TYPES, SIGNALS, Document


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    message: str
    details: dict[str, object] | None = None


_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Fields holding full calendar dates, per entry type.
_DATE_FIELDS = {
    "conference": ("date_start", "date_end", "cfp_deadline"),
    "festival": ("date_start", "date_end"),
    "exhibition": ("date_start", "date_end"),
    "callForPapers": ("deadline",),
}


def validate_date(value: str | None) -> bool:
    if not value:
        return True
    return bool(_ISO_DATE_RE.match(value))


def validate_url(value: str | None) -> bool:
    if not value:
        return True
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def validate_entry(entry: Any) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    for field in _DATE_FIELDS.get(entry.type, ()):
        value = getattr(entry, field, "")
        if not validate_date(value):
            issues.append(
                ValidationIssue(
                    code="invalid_date",
                    message="Date must be formatted as YYYY-MM-DD.",
                    details={"entry_id": entry.id, "field": field, "value": value},
                )
            )

    for field, choices in (("signal", SIGNALS), ("media_type", MEDIA_TYPES)):
        value = getattr(entry, field, "")
        if value and value not in choices:
            issues.append(
                ValidationIssue(
                    code="invalid_choice",
                    message=f"Must be one of: {', '.join(choices)}.",
                    details={"entry_id": entry.id, "field": field, "value": value},
                )
            )

    url = getattr(entry, "url", "")
    if not validate_url(url):
        issues.append(
            ValidationIssue(
                code="invalid_url",
                message="URL must be absolute (scheme and host).",
                details={"entry_id": entry.id, "field": "url", "value": url},
            )
        )

    return issues


def validate_document(document: Document) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if not validate_date(document.frontmatter.date):
        issues.append(
            ValidationIssue(
                code="invalid_date",
                message="Digest date must be formatted as YYYY-MM-DD.",
                details={"field": "date", "value": document.frontmatter.date},
            )
        )
    for section in document.sections:
        for entry in section.entries:
            issues.extend(validate_entry(entry))
    return issues
