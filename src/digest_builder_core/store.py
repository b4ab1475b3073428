from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Sequence

from pydantic import ValidationError

from digest_builder_core.models import (
    SECTION_TYPES,
    Author,
    Document,
    Frontmatter,
    LocationOverride,
    PublicationEntry,
    Section,
    entry_class_for,
)
from digest_builder_core.util import generate_id, title_case

logger = logging.getLogger(__name__)

Listener = Callable[[Document], None]

_BOOLEAN_FIELDS = {"open_access", "draft"}
_IMMUTABLE_FIELDS = {"id", "type"}


def _resolve_field(model_cls: Any, field: str) -> str | None:
    """
    Map a Python attribute name or its camelCase interchange alias to the model
    attribute. Unknown names resolve to None.
    """
    fields = model_cls.model_fields
    if field in fields:
        return field
    for name, info in fields.items():
        if info.alias == field:
            return name
    return None


def _assign(model: Any, name: str, value: Any) -> bool:
    """
    Set a field through pydantic assignment validation. Values that do not fit the
    field type are logged and left unapplied.
    """
    if name in _BOOLEAN_FIELDS:
        value = bool(value)
    try:
        setattr(model, name, value)
    except ValidationError as e:
        logger.warning("rejected %s.%s=%r: %s", type(model).__name__, name, value, e.errors()[0]["msg"])
        return False
    return True


class DigestStore:
    """
    Mutable owner of one digest `Document`.

    Every successful mutation notifies subscribers synchronously, in registration
    order, after the change is fully applied. Operations that reference a missing
    section, entry or author index are silent no-ops and do not notify.
    """

    def __init__(
        self,
        document: Document | None = None,
        *,
        id_factory: Callable[[], str] = generate_id,
    ):
        self._document = document if document is not None else Document()
        self._listeners: list[Listener] = []
        self._new_id = id_factory
        self._lock = threading.RLock()

    def get(self) -> Document:
        return self._document

    def replace(self, document: Document) -> None:
        with self._lock:
            self._document = document
            self.notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        with self._lock:
            for listener in list(self._listeners):
                listener(self._document)

    def new_id(self) -> str:
        return self._new_id()

    @contextmanager
    def mutation(self) -> Iterator[Document]:
        """
        Apply several changes under the store lock and notify once when the block
        completes. Nothing is notified if the block raises.
        """
        with self._lock:
            yield self._document
            self.notify()

    # Sections

    def find_section(self, section_id: str) -> Section | None:
        for s in self._document.sections:
            if s.id == section_id:
                return s
        return None

    def _section_index(self, section_id: str) -> int:
        for idx, s in enumerate(self._document.sections):
            if s.id == section_id:
                return idx
        return -1

    def add_section(self, section_type: str, custom_title: str | None = None) -> Section | None:
        info = SECTION_TYPES.get(section_type)
        if info is None:
            logger.debug("add_section: unknown section type %r", section_type)
            return None
        with self._lock:
            section = Section(id=self._new_id(), type=section_type, title=custom_title or info.title)
            self._document.sections.append(section)
            self.notify()
        return section

    def delete_section(self, section_id: str) -> None:
        with self._lock:
            idx = self._section_index(section_id)
            if idx == -1:
                logger.debug("delete_section: section %s not found", section_id)
                return
            del self._document.sections[idx]
            self.notify()

    def move_section_up(self, section_id: str) -> None:
        with self._lock:
            sections = self._document.sections
            idx = self._section_index(section_id)
            if idx <= 0:
                return
            sections[idx - 1], sections[idx] = sections[idx], sections[idx - 1]
            self.notify()

    def move_section_down(self, section_id: str) -> None:
        with self._lock:
            sections = self._document.sections
            idx = self._section_index(section_id)
            if idx == -1 or idx >= len(sections) - 1:
                return
            sections[idx + 1], sections[idx] = sections[idx], sections[idx + 1]
            self.notify()

    def reorder_sections(self, id_order: Sequence[str]) -> None:
        """
        Sort sections to follow `id_order`. Sections whose id is not listed move to
        the front, keeping their relative order.
        """
        position = {sid: i for i, sid in enumerate(id_order)}
        with self._lock:
            self._document.sections.sort(key=lambda s: position.get(s.id, -1))
            self.notify()

    # Entries

    def find_entry(self, section_id: str, entry_id: str) -> Any | None:
        section = self.find_section(section_id)
        if section is None:
            return None
        for e in section.entries:
            if e.id == entry_id:
                return e
        return None

    def add_entry(self, section_id: str, entry_type: str) -> Any | None:
        cls = entry_class_for(entry_type)
        with self._lock:
            section = self.find_section(section_id)
            if section is None or cls is None:
                logger.debug("add_entry: section %s / type %r not usable", section_id, entry_type)
                return None
            entry = cls(id=self._new_id(), type=entry_type)
            section.entries.append(entry)
            self.notify()
        return entry

    def delete_entry(self, section_id: str, entry_id: str) -> None:
        with self._lock:
            section = self.find_section(section_id)
            if section is None:
                logger.debug("delete_entry: section %s not found", section_id)
                return
            kept = [e for e in section.entries if e.id != entry_id]
            if len(kept) == len(section.entries):
                logger.debug("delete_entry: entry %s not found", entry_id)
                return
            section.entries = kept
            self._document.frontmatter_locations = [
                loc for loc in self._document.frontmatter_locations if loc.entry_id != entry_id
            ]
            self.notify()

    def update_entry(self, section_id: str, entry_id: str, field: str, value: Any) -> None:
        """
        Set one field on an entry. Boolean fields are coerced; other values are
        validated against the field type and dropped when they do not fit. Fields
        not defined on the entry's variant are ignored.
        """
        with self._lock:
            entry = self.find_entry(section_id, entry_id)
            if entry is None:
                logger.debug("update_entry: entry %s in section %s not found", entry_id, section_id)
                return
            name = _resolve_field(type(entry), field)
            if name is None or name in _IMMUTABLE_FIELDS:
                logger.debug("update_entry: ignoring field %r on %s entry", field, entry.type)
                return
            if _assign(entry, name, value):
                self.notify()

    def move_entry(self, from_section_id: str, to_section_id: str, from_idx: int, to_idx: int) -> None:
        """
        Move the entry at `from_idx` to position `to_idx` of the target section
        (same section reorders). An index past the end of the target appends.
        """
        with self._lock:
            source = self.find_section(from_section_id)
            target = self.find_section(to_section_id)
            if source is None or target is None:
                return
            if not 0 <= from_idx < len(source.entries):
                logger.debug("move_entry: index %s out of range", from_idx)
                return
            entry = source.entries.pop(from_idx)
            target.entries.insert(to_idx, entry)
            self.notify()

    # Authors

    def _publication(self, section_id: str, entry_id: str) -> PublicationEntry | None:
        entry = self.find_entry(section_id, entry_id)
        if entry is None or getattr(entry, "authors", None) is None:
            return None
        return entry

    def add_author(self, section_id: str, entry_id: str) -> None:
        with self._lock:
            entry = self._publication(section_id, entry_id)
            if entry is None:
                return
            entry.authors.append(Author())
            self.notify()

    def update_author(self, section_id: str, entry_id: str, idx: int, field: str, value: Any) -> None:
        with self._lock:
            entry = self._publication(section_id, entry_id)
            if entry is None or not 0 <= idx < len(entry.authors):
                return
            name = _resolve_field(Author, field)
            if name is None:
                return
            if _assign(entry.authors[idx], name, value):
                self.notify()

    def delete_author(self, section_id: str, entry_id: str, idx: int) -> None:
        with self._lock:
            entry = self._publication(section_id, entry_id)
            if entry is None or not 0 <= idx < len(entry.authors):
                return
            del entry.authors[idx]
            self.notify()

    # Frontmatter

    def update_frontmatter(self, field: str, value: Any) -> None:
        with self._lock:
            name = _resolve_field(Frontmatter, field)
            if name is None:
                logger.debug("update_frontmatter: ignoring field %r", field)
                return
            if _assign(self._document.frontmatter, name, value):
                self.notify()

    def update_frontmatter_location(self, entry_id: str, field: str, value: Any) -> None:
        """
        Upsert the location override for `entry_id`. Only `title` and `description`
        can be overridden.
        """
        with self._lock:
            name = _resolve_field(LocationOverride, field)
            if name is None or name == "entry_id":
                logger.debug("update_frontmatter_location: ignoring field %r", field)
                return
            overrides = self._document.frontmatter_locations
            override = next((o for o in overrides if o.entry_id == entry_id), None)
            created = override is None
            if override is None:
                override = LocationOverride(entry_id=entry_id)
            if not _assign(override, name, value):
                return
            if created:
                overrides.append(override)
            self.notify()

    # Bulk edits

    def normalize_titles(self) -> int:
        """
        Title-case every entry title. Returns how many titles changed; subscribers
        are notified once, and only when something changed.
        """
        count = 0
        with self._lock:
            for section in self._document.sections:
                for entry in section.entries:
                    title = getattr(entry, "title", "")
                    if not title or not title.strip():
                        continue
                    normalized = title_case(title)
                    if normalized != title:
                        entry.title = normalized
                        count += 1
            if count:
                self.notify()
        logger.info("normalized %d title(s)", count)
        return count
