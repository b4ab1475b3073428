from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable

from digest_builder_core.interchange import DigestImportError, dump_state, load_state
from digest_builder_core.models import Document, Frontmatter
from digest_builder_core.store import DigestStore

logger = logging.getLogger(__name__)


class DraftStorageError(RuntimeError):
    pass


class LocalDraftStore:
    """
    Single-file JSON draft on local disk.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Document:
        if not self._path.exists():
            logger.info("no saved draft at %s", self._path)
            return Document()
        try:
            document = load_state(self._path.read_text(encoding="utf-8"))
        except (OSError, DigestImportError) as e:
            # A broken draft must not block starting a fresh one.
            logger.error("could not load draft %s: %s", self._path, e)
            return Document()
        logger.info("loaded draft %s (%d sections)", self._path, len(document.sections))
        return document

    def save(self, document: Document, frontmatter: Frontmatter | None = None) -> None:
        data = dump_state(document)
        if frontmatter is not None:
            data["frontmatter"] = frontmatter.model_dump(mode="json", by_alias=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp.replace(self._path)
        except OSError as e:
            logger.error("could not save draft %s: %s", self._path, e)
            raise DraftStorageError(f"Failed to save draft to {self._path}: {e}") from e

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


def attach_autosave(store: DigestStore, drafts: LocalDraftStore) -> Callable[[], None]:
    """
    Save the draft after every store change. Returns the unsubscribe callable.
    A failed save is logged and does not interrupt the other subscribers.
    """

    def autosave(document: Document) -> None:
        try:
            drafts.save(document)
        except DraftStorageError as e:
            logger.error("autosave failed: %s", e)

    return store.subscribe(autosave)
