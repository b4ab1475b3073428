from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from digest_builder_core.models import Document
from digest_builder_core.store import DigestStore

logger = logging.getLogger(__name__)

DRAFT_FILENAME = "digest-draft.json"


class DigestImportError(ValueError):
    pass


def dump_state(document: Document) -> dict[str, Any]:
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def to_json(document: Document) -> str:
    return json.dumps(dump_state(document), indent=2, ensure_ascii=False)


def _parse_json(payload: str | bytes, *, what: str) -> Any:
    try:
        return json.loads(payload)
    except json.JSONDecodeError as e:
        raise DigestImportError(f"Invalid {what}: {e.msg} (line {e.lineno})") from e


def load_state(payload: dict[str, Any] | str | bytes) -> Document:
    """
    Validate a serialized digest (dict or JSON text) and build a `Document`.

    Raises `DigestImportError` with a readable message on any structural problem;
    nothing is partially applied.
    """
    data = _parse_json(payload, what="digest file") if isinstance(payload, (str, bytes)) else payload
    if not isinstance(data, dict):
        raise DigestImportError("Invalid digest file structure: expected an object")
    if "frontmatter" not in data or "sections" not in data:
        logger.warning("rejected digest payload without frontmatter/sections")
        raise DigestImportError("Invalid digest file structure: missing frontmatter or sections")

    try:
        return Document.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        logger.warning("rejected digest payload: %s", e)
        raise DigestImportError(
            f"Invalid digest file structure at {loc or '<root>'}: {first.get('msg')}"
        ) from e


def import_state(store: DigestStore, payload: dict[str, Any] | str | bytes) -> Document:
    document = load_state(payload)
    store.replace(document)
    return document
