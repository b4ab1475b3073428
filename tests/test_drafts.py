from __future__ import annotations

import json
from pathlib import Path

import pytest

from digest_builder_core.drafts import DraftStorageError, LocalDraftStore, attach_autosave
from digest_builder_core.models import Document, Frontmatter, Section
from digest_builder_core.store import DigestStore


def test_missing_file_loads_empty_document(tmp_path: Path) -> None:
    assert LocalDraftStore(tmp_path / "draft.json").load() == Document()


def test_save_and_load(tmp_path: Path) -> None:
    drafts = LocalDraftStore(tmp_path / "nested" / "draft.json")
    doc = Document(frontmatter=Frontmatter(title="June"), sections=[Section(id="s1", type="news", title="News")])
    drafts.save(doc)
    assert drafts.load() == doc
    assert not (tmp_path / "nested" / "draft.json.tmp").exists()


def test_save_with_frontmatter_override(tmp_path: Path) -> None:
    drafts = LocalDraftStore(tmp_path / "draft.json")
    doc = Document(frontmatter=Frontmatter(title="Stored"))
    drafts.save(doc, Frontmatter(title="From form", tags=["a"]))
    data = json.loads(drafts.path.read_text(encoding="utf-8"))
    assert data["frontmatter"]["title"] == "From form"
    assert data["frontmatter"]["tags"] == ["a"]
    assert doc.frontmatter.title == "Stored"


def test_corrupt_draft_loads_empty_document(tmp_path: Path) -> None:
    path = tmp_path / "draft.json"
    path.write_text("{not json", encoding="utf-8")
    assert LocalDraftStore(path).load() == Document()


def test_clear(tmp_path: Path) -> None:
    drafts = LocalDraftStore(tmp_path / "draft.json")
    drafts.save(Document())
    drafts.clear()
    drafts.clear()
    assert not drafts.path.exists()


def test_save_failure_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "file.txt"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(DraftStorageError) as excinfo:
        LocalDraftStore(blocker / "draft.json").save(Document())
    assert isinstance(excinfo.value.__cause__, OSError)


def test_autosave(tmp_path: Path) -> None:
    store = DigestStore()
    drafts = LocalDraftStore(tmp_path / "draft.json")
    unsubscribe = attach_autosave(store, drafts)

    store.add_section("news")
    assert len(drafts.load().sections) == 1

    unsubscribe()
    store.add_section("media")
    assert len(drafts.load().sections) == 1


def test_autosave_failure_does_not_interrupt_other_subscribers(tmp_path: Path) -> None:
    blocker = tmp_path / "file.txt"
    blocker.write_text("x", encoding="utf-8")
    store = DigestStore()
    attach_autosave(store, LocalDraftStore(blocker / "draft.json"))
    later: list[int] = []
    store.subscribe(lambda doc: later.append(len(doc.sections)))

    store.add_section("news")

    assert later == [1]
