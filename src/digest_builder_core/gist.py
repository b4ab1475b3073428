from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from digest_builder_core.config import Settings
from digest_builder_core.interchange import DRAFT_FILENAME, DigestImportError, dump_state, load_state
from digest_builder_core.models import Document

logger = logging.getLogger(__name__)


class GistError(RuntimeError):
    pass


def _api_error(resp: httpx.Response) -> str:
    try:
        message = resp.json().get("message")
    except (ValueError, AttributeError):
        message = None
    return f"GitHub API Error ({resp.status_code}): {message or resp.reason_phrase}"


def _body(resp: httpx.Response, expected: type, action: str) -> Any:
    try:
        data = resp.json()
    except ValueError as e:
        raise GistError(f"{action}: GitHub returned a non-JSON response") from e
    if not isinstance(data, expected):
        raise GistError(f"{action}: unexpected response from GitHub")
    return data


@dataclass(frozen=True)
class GistDraftStorage:
    """
    Saves and loads the serialized digest state as a single file in a private
    GitHub gist.
    """

    token: str | None
    gist_id: str | None = None
    filename: str = DRAFT_FILENAME
    api_url: str = "https://api.github.com"
    timeout_s: float = 30.0
    transport: httpx.BaseTransport | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> GistDraftStorage:
        return cls(
            token=settings.github_token,
            gist_id=settings.gist_id,
            filename=settings.gist_filename,
            api_url=settings.github_api_url,
            timeout_s=settings.gist_timeout_s,
        )

    def _client(self) -> httpx.Client:
        if not self.token:
            raise GistError("A GitHub personal access token is required for gist storage.")
        return httpx.Client(
            base_url=self.api_url.rstrip("/"),
            timeout=self.timeout_s,
            headers={
                "Authorization": f"token {self.token}",
                "Accept": "application/vnd.github.v3+json",
            },
            transport=self.transport,
        )

    def save(self, document: Document, *, gist_id: str | None = None) -> str:
        """
        Create a new private gist, or update `gist_id` (default: the configured id).
        Returns the gist id.
        """
        target = gist_id or self.gist_id
        title = document.frontmatter.title or "Untitled"
        payload = {
            "description": f"Digest Generator Draft - {title}",
            "public": False,
            "files": {self.filename: {"content": json.dumps(dump_state(document), indent=2, ensure_ascii=False)}},
        }
        with self._client() as client:
            try:
                if target:
                    r = client.patch(f"/gists/{target}", json=payload)
                else:
                    r = client.post("/gists", json=payload)
                if r.is_error:
                    raise GistError(f"Error saving to Gist: {_api_error(r)}")
                new_id = _body(r, dict, "Error saving to Gist").get("id")
            except httpx.HTTPError as e:
                logger.error("gist save failed: %s", e)
                raise GistError(f"Error saving to Gist: {e}. Check your token, gist id and network.") from e
        if not new_id:
            raise GistError("Error saving to Gist: response did not include a gist id")
        return str(new_id)

    def load(self, gist_id: str | None = None) -> Document:
        """
        Fetch and validate the draft file. The caller decides whether to apply the
        returned document; nothing is mutated here.
        """
        target = gist_id or self.gist_id
        with self._client() as client:
            if not target:
                raise GistError("A gist id is required to load a draft.")
            try:
                r = client.get(f"/gists/{target}")
                if r.is_error:
                    raise GistError(f"Error loading from Gist: {_api_error(r)}")
                files: dict[str, Any] = _body(r, dict, "Error loading from Gist").get("files") or {}
            except httpx.HTTPError as e:
                logger.error("gist load failed: %s", e)
                raise GistError(f"Error loading from Gist: {e}. Check your token, gist id and network.") from e

        file = files.get(self.filename) if isinstance(files, dict) else None
        content = file.get("content") if isinstance(file, dict) else None
        if not content:
            raise GistError(f'File "{self.filename}" not found in gist {target}.')
        try:
            return load_state(content)
        except DigestImportError as e:
            raise GistError(f"Error loading from Gist: {e}") from e

    def list_drafts(self) -> list[dict[str, Any]]:
        """
        The user's gists that contain a draft file.
        """
        with self._client() as client:
            try:
                r = client.get("/gists")
                if r.is_error:
                    raise GistError(f"Error listing gists: {_api_error(r)}")
                gists = _body(r, list, "Error listing gists")
            except httpx.HTTPError as e:
                logger.error("gist listing failed: %s", e)
                raise GistError(f"Error listing gists: {e}") from e
        return [g for g in gists if isinstance(g, dict) and self.filename in (g.get("files") or {})]
