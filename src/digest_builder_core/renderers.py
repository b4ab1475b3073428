from __future__ import annotations

from typing import Any

from digest_builder_core.models import (
    CallForPapersEntry,
    EventEntry,
    JournalIssueEntry,
    MediaEntry,
    PublicationEntry,
    TextEntry,
)
from digest_builder_core.util import OPEN_ACCESS_BADGE, format_link, format_mla_date, hard_breaks

_ANNOTATED_PUB_TYPES = {"Book", "Chapter", "Thesis"}


def _year(value: str) -> str:
    return value.split("-")[0]


def _annotations(entry: Any, line_end: str) -> str:
    md = ""
    if entry.why_it_matters:
        md += f"*{hard_breaks(entry.why_it_matters)}*{line_end}"
    if entry.signal:
        md += f"**Signal**: {entry.signal}{line_end}"
    return md


def format_authors(entry: PublicationEntry) -> str:
    """
    MLA author list: "Surname, Name" for the first author, "Name Surname" after.
    """
    named = [a for a in entry.authors or [] if a.surname or a.name]
    out: list[str] = []
    for idx, a in enumerate(named):
        if idx == 0:
            out.append(f"{a.surname}, {a.name}")
        else:
            out.append(f"{a.name} {a.surname}")
    return ", ".join(out)


def _citation(entry: PublicationEntry) -> str:
    link = format_link(entry.url, entry.url_text, entry.open_access)
    pub_type = entry.pub_type

    if pub_type == "Book":
        md = f"*{entry.title}*"
        if entry.publisher:
            md += f". {entry.publisher}"
        if entry.date:
            md += f", {_year(entry.date)}"
        return md + "." + link

    if pub_type == "Chapter":
        md = f'"{entry.title}."'
        if entry.container_title:
            md += f" *{entry.container_title}*"
        if entry.publisher:
            md += f", {entry.publisher}"
        if entry.date:
            md += f", {_year(entry.date)}"
        return md + "." + link

    if pub_type in ("Article", "Online Article"):
        md = f'"{entry.title}."'
        if entry.container_title:
            md += f" *{entry.container_title}*"
        if entry.volume:
            md += f", vol. {entry.volume}"
        if entry.issue:
            md += f", no. {entry.issue}"
        if entry.date:
            md += f", {format_mla_date(entry.date)}"
        return md + link + "."

    if pub_type == "Thesis":
        md = f"*{entry.title}*"
        if entry.date:
            md += f". {_year(entry.date)}"
        if entry.publisher:
            md += f". {entry.publisher}"
        return md + "." + link

    md = f'"{entry.title}."'
    if entry.container_title:
        md += f" *{entry.container_title}*"
    if entry.volume:
        md += f", vol. {entry.volume}"
    if entry.issue:
        md += f", no. {entry.issue}"
    if entry.publisher:
        md += f", {entry.publisher}"
    if entry.date:
        md += f", {entry.date}"
    return md + link + "."


def render_publication(entry: PublicationEntry) -> str:
    md = ""
    authors = format_authors(entry)
    if authors:
        md += f"{authors}. "
    md += _citation(entry) + "\n"
    md += _annotations(entry, "\n")

    if entry.abstract:
        label = "Annotation" if entry.pub_type in _ANNOTATED_PUB_TYPES else "Abstract"
        md += (
            f'<details markdown="1"><summary>{label}</summary>\n'
            f"{hard_breaks(entry.abstract)}\n</details>\n"
        )

    return md + "\n"


def render_journal_issue(entry: JournalIssueEntry) -> str:
    md = ""
    if entry.journal_name:
        md += f"*{entry.journal_name}*"
    if entry.volume:
        md += f", Vol. {entry.volume}"
    if entry.issue:
        md += f", No. {entry.issue}"
    if entry.date:
        md += f" ({entry.date})"
    if entry.theme:
        md += f': "{entry.theme}"'
    if entry.guest_editor:
        md += f", edited by {entry.guest_editor}"
    md += ".  \n"

    if entry.description:
        md += f"{hard_breaks(entry.description)}  \n"
    md += _annotations(entry, "  \n")

    if entry.url:
        if entry.open_access:
            md += f"[{OPEN_ACCESS_BADGE}]({entry.url})"
        else:
            md += f"[{entry.url_text or 'Link'}]({entry.url})"

    return md + "\n\n"


def render_event(entry: EventEntry) -> str:
    md = ""
    if entry.title:
        md += f"**{entry.title}**"
        if entry.theme:
            md += f' "{entry.theme}"'
        md += "  \n"
    if entry.date_start:
        end = f" to {entry.date_end}" if entry.date_end else ""
        md += f"Dates: {entry.date_start}{end}  \n"
    if entry.cfp_deadline:
        md += f"CfP Deadline: {entry.cfp_deadline}  \n"
    if entry.place:
        venue = f", {entry.venue}" if entry.venue else ""
        md += f"Place: {entry.place}{venue}  \n"
    if entry.description:
        md += f"Description: {hard_breaks(entry.description)}  \n"
    md += _annotations(entry, "  \n")
    if entry.url:
        md += f"[Website]({entry.url})  \n"
    return md + "\n"


def render_call_for_papers(entry: CallForPapersEntry) -> str:
    md = ""
    if entry.title:
        md += f"**{entry.title}** - {entry.theme or ''}  \n"
    if entry.deadline:
        md += f"Deadline: {entry.deadline}  \n"
    md += _annotations(entry, "  \n")
    if entry.url:
        md += f"[Apply]({entry.url})  \n"
    return md + "\n"


def render_media(entry: MediaEntry) -> str:
    md = ""
    if entry.title:
        md += f"**{entry.title}** ({entry.media_type or 'Media'})  \n"
    if entry.creator:
        md += f"By: {entry.creator}  \n"
    if entry.description:
        md += f"{hard_breaks(entry.description)}  \n"
    md += _annotations(entry, "  \n")
    if entry.url:
        md += f"[Watch/Listen]({entry.url})  \n"
    return md + "\n"


def render_text(entry: TextEntry) -> str:
    return f"{entry.content or ''}\n\n"


_RENDERERS = {
    PublicationEntry: render_publication,
    JournalIssueEntry: render_journal_issue,
    EventEntry: render_event,
    CallForPapersEntry: render_call_for_papers,
    MediaEntry: render_media,
    TextEntry: render_text,
}


def render_entry(entry: Any) -> str:
    renderer = _RENDERERS.get(type(entry))
    if renderer is None:
        raise TypeError(f"No renderer for entry of type {type(entry).__name__}")
    return renderer(entry)
