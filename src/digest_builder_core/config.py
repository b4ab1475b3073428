from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    github_token: str | None = Field(default=None, alias="GITHUB_TOKEN")
    gist_id: str | None = Field(default=None, alias="GIST_ID")
    gist_filename: str = Field(default="digest-draft.json", alias="GIST_FILENAME")
    github_api_url: str = Field(default="https://api.github.com", alias="GITHUB_API_URL")
    gist_timeout_s: float = Field(default=30.0, alias="GIST_TIMEOUT_S")

    draft_path: str = Field(default="digest-draft.json", alias="DRAFT_PATH")


def load_settings() -> Settings:
    return Settings()
