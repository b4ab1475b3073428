from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SectionType = Literal[
    "publications",
    "journalIssues",
    "conferences",
    "callForPapers",
    "festivals",
    "exhibitions",
    "news",
    "media",
    "quickLinks",
    "custom",
]

EntryType = Literal[
    "publication",
    "journalIssue",
    "conference",
    "festival",
    "exhibition",
    "callForPapers",
    "media",
    "text",
]

EVENT_TYPES = frozenset({"conference", "festival", "exhibition"})

MEDIA_TYPES = ("Video", "Podcast", "Audio")
SIGNALS = ("institutional", "methodological", "funding", "event", "debate", "resource")


@dataclass(frozen=True)
class SectionTypeInfo:
    title: str
    entry_type: str


SECTION_TYPES: dict[str, SectionTypeInfo] = {
    "publications": SectionTypeInfo("Publications 📚", "publication"),
    "journalIssues": SectionTypeInfo("New Journal Issues 📖", "journalIssue"),
    "conferences": SectionTypeInfo("Conferences 📢", "conference"),
    "callForPapers": SectionTypeInfo("Call for Papers 📝", "callForPapers"),
    "festivals": SectionTypeInfo("Festivals & Screenings 🎬", "festival"),
    "exhibitions": SectionTypeInfo("Exhibitions 🖼️", "exhibition"),
    "news": SectionTypeInfo("News 📰", "text"),
    "media": SectionTypeInfo("Media & Podcasts 🎧", "media"),
    "quickLinks": SectionTypeInfo("Quick Links 🔗", "text"),
    "custom": SectionTypeInfo("Custom Section ✏️", "text"),
}

ENTRY_TYPE_FOR_SECTION: dict[str, str] = {k: v.entry_type for k, v in SECTION_TYPES.items()}


class _Model(BaseModel):
    # Interchange JSON uses camelCase keys; Python code uses snake_case.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        validate_assignment=True,
    )


class Frontmatter(_Model):
    title: str = ""
    date: str = ""
    tags: list[str] = Field(default_factory=list)
    draft: bool = True


class Author(_Model):
    name: str = ""
    surname: str = ""


class _EntryBase(_Model):
    id: str
    importance: int = 2
    why_it_matters: str = ""
    signal: str = ""


class PublicationEntry(_EntryBase):
    type: Literal["publication"] = "publication"
    authors: list[Author] = Field(default_factory=lambda: [Author()])
    title: str = ""
    pub_type: str = "Article"
    container_title: str = ""
    publisher: str = ""
    date: str = ""
    url: str = ""
    url_text: str = "link"
    open_access: bool = False
    abstract: str = ""
    volume: str = ""
    issue: str = ""


class JournalIssueEntry(_EntryBase):
    type: Literal["journalIssue"] = "journalIssue"
    journal_name: str = ""
    volume: str = ""
    issue: str = ""
    date: str = ""
    theme: str = ""
    guest_editor: str = ""
    url: str = ""
    url_text: str = "link"
    open_access: bool = False
    description: str = ""


class EventEntry(_EntryBase):
    """Conference, festival or exhibition. `theme` is unused for exhibitions and
    `cfp_deadline` is only shown for conferences."""

    type: Literal["conference", "festival", "exhibition"] = "conference"
    title: str = ""
    theme: str = ""
    date_start: str = ""
    date_end: str = ""
    cfp_deadline: str = ""
    place: str = ""
    venue: str = ""
    coords: str = ""
    url: str = ""
    description: str = ""
    custom_event_type: str = ""


class CallForPapersEntry(_EntryBase):
    type: Literal["callForPapers"] = "callForPapers"
    title: str = ""
    theme: str = ""
    deadline: str = ""
    url: str = ""


class MediaEntry(_EntryBase):
    type: Literal["media"] = "media"
    title: str = ""
    media_type: str = ""
    creator: str = ""
    url: str = ""
    description: str = ""


class TextEntry(_EntryBase):
    type: Literal["text"] = "text"
    content: str = ""


Entry = Annotated[
    Union[
        PublicationEntry,
        JournalIssueEntry,
        EventEntry,
        CallForPapersEntry,
        MediaEntry,
        TextEntry,
    ],
    Field(discriminator="type"),
]

ENTRY_CLASSES: tuple[type[_EntryBase], ...] = (
    PublicationEntry,
    JournalIssueEntry,
    EventEntry,
    CallForPapersEntry,
    MediaEntry,
    TextEntry,
)


def entry_class_for(entry_type: str) -> type[_EntryBase] | None:
    if entry_type in EVENT_TYPES:
        return EventEntry
    for cls in ENTRY_CLASSES:
        if cls.model_fields["type"].default == entry_type:
            return cls
    return None


class Section(_Model):
    id: str
    type: SectionType
    title: str
    entries: list[Entry] = Field(default_factory=list)


class LocationOverride(_Model):
    entry_id: str
    title: str | None = None
    description: str | None = None


class Document(_Model):
    frontmatter: Frontmatter = Field(default_factory=Frontmatter)
    sections: list[Section] = Field(default_factory=list)
    frontmatter_locations: list[LocationOverride] = Field(default_factory=list)


@dataclass(frozen=True)
class DerivedLocation:
    title: str
    city: str
    venue: str
    country: str
    coords: tuple[float, ...]
    date: str
    description: str
    entry_id: str
