from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from digest_builder_core.interchange import DigestImportError
from digest_builder_core.models import SECTION_TYPES, Author, Document, PublicationEntry, Section
from digest_builder_core.store import DigestStore
from digest_builder_core.util import extract_doi, format_csl_date, map_csl_type

logger = logging.getLogger(__name__)

_WS_RE = re.compile(r"\s+")
_MAX_LISTED_SKIPS = 5


@dataclass(frozen=True)
class CslImportResult:
    imported: int
    skipped: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        msg = f"Successfully imported {self.imported} new item(s) from Zotero!"
        if self.skipped:
            msg += f"\n\nSkipped {len(self.skipped)} duplicate(s):\n"
            msg += "\n".join(f"• {t}" for t in self.skipped[:_MAX_LISTED_SKIPS])
            if len(self.skipped) > _MAX_LISTED_SKIPS:
                msg += f"\n... and {len(self.skipped) - _MAX_LISTED_SKIPS} more"
        return msg


def _normalize_title(title: str) -> str:
    return _WS_RE.sub(" ", title.lower().strip())


def is_duplicate(item: dict[str, Any], existing: Iterable[Any]) -> bool:
    """
    Same normalized title, or same DOI (taken from the item's DOI and from the
    existing entry's URL).
    """
    title = str(item.get("title") or "")
    doi_raw = str(item.get("DOI") or "")
    doi = (extract_doi(doi_raw) or doi_raw).lower()
    for entry in existing:
        existing_title = getattr(entry, "title", "") or ""
        if title and existing_title and _normalize_title(title) == _normalize_title(existing_title):
            return True
        existing_doi = extract_doi(getattr(entry, "url", "") or "")
        if doi and existing_doi and doi == existing_doi.lower():
            return True
    return False


def csl_item_to_entry(item: dict[str, Any], entry_id: str) -> PublicationEntry:
    authors = item.get("author")
    doi = item.get("DOI") or ""
    return PublicationEntry(
        id=entry_id,
        authors=(
            [Author(name=a.get("given") or "", surname=a.get("family") or "") for a in authors]
            if authors is not None
            else [Author()]
        ),
        title=str(item.get("title") or ""),
        pub_type=map_csl_type(item.get("type")),
        container_title=str(item.get("container-title") or ""),
        publisher=str(item.get("publisher") or ""),
        date=format_csl_date(item.get("issued")),
        url=str(item.get("URL") or (f"https://doi.org/{doi}" if doi else "")),
        url_text="link",
        open_access=False,
        abstract=str(item.get("abstract") or ""),
        volume=str(item.get("volume") or ""),
        issue=str(item.get("issue") or ""),
    )


def _validate_payload(payload: Any) -> list[dict[str, Any]]:
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise DigestImportError(f"Invalid CSL-JSON: {e.msg} (line {e.lineno})") from e
    if not isinstance(payload, list):
        raise DigestImportError("Invalid CSL-JSON: Expected an array of items")
    for idx, item in enumerate(payload):
        if not isinstance(item, dict):
            raise DigestImportError(f"Invalid CSL-JSON: item {idx} is not an object")
        authors = item.get("author")
        if authors is not None and (
            not isinstance(authors, list) or not all(isinstance(a, dict) for a in authors)
        ):
            raise DigestImportError(f"Invalid CSL-JSON: item {idx} has a malformed author list")
    return payload


def _find_publications(document: Document) -> Section | None:
    for s in document.sections:
        if s.type == "publications":
            return s
    return None


def import_csl(store: DigestStore, payload: Any) -> CslImportResult:
    """
    Append CSL-JSON records to the first publications section (created if needed),
    skipping duplicates. Every record is converted before anything changes, so a
    bad record leaves the store untouched.
    """
    items = _validate_payload(payload)

    with store.mutation() as document:
        section = _find_publications(document)
        existing = list(section.entries) if section is not None else []

        pending: list[PublicationEntry] = []
        skipped: list[str] = []
        for idx, item in enumerate(items):
            if is_duplicate(item, [*existing, *pending]):
                skipped.append(str(item.get("title") or ""))
                continue
            try:
                pending.append(csl_item_to_entry(item, store.new_id()))
            except (TypeError, ValueError) as e:
                raise DigestImportError(f"Invalid CSL-JSON: item {idx} could not be converted ({e})") from e

        if section is None:
            section = Section(
                id=store.new_id(),
                type="publications",
                title=SECTION_TYPES["publications"].title,
            )
            document.sections.append(section)
        section.entries.extend(pending)

    logger.info("CSL import: %d added, %d duplicate(s) skipped", len(pending), len(skipped))
    return CslImportResult(imported=len(pending), skipped=skipped)
