"""DraftStore — local JSON cache of the in-progress draft.

The CLI edits one draft across many invocations. Each store gets one file,
``store-{id}.json``, holding the persisted document shape plus the session
bookkeeping that never travels to the server (edit counter, dirty flag,
publish version, slug, and the store name last fetched from the profile).

Writes go to a sibling temp file first and are then renamed into place,
so a crash never leaves a truncated draft behind.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

DRAFT_FORMAT_VERSION = 1


class DraftMeta(BaseModel):
    """Session bookkeeping kept beside the document."""

    edit_counter: int = 0
    dirty: bool = False
    state: str = "draft"
    publish_version: int = 0
    load_generation: int = 0
    slug: str | None = None
    public_url: str | None = None
    store_name: str | None = None


class DraftRecord(BaseModel):
    format_version: int = DRAFT_FORMAT_VERSION
    document: dict[str, Any]
    meta: DraftMeta = Field(default_factory=DraftMeta)


class DraftStore:
    """Reads and writes draft records under one directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, store_id: int) -> Path:
        return self._directory / f"store-{store_id}.json"

    def exists(self, store_id: int) -> bool:
        return self.path_for(store_id).is_file()

    def load(self, store_id: int) -> DraftRecord | None:
        """Return the cached draft, or None when nothing is cached.

        Raises:
            pydantic.ValidationError: If the file exists but is malformed.
        """
        path = self.path_for(store_id)
        if not path.is_file():
            return None
        return DraftRecord.model_validate_json(path.read_text(encoding="utf-8"))

    def save(self, store_id: int, record: DraftRecord) -> Path:
        path = self.path_for(store_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        payload = json.dumps(record.model_dump(mode="json"), indent=2, sort_keys=False)
        tmp.write_text(payload + "\n", encoding="utf-8")
        os.replace(tmp, path)
        return path

    def delete(self, store_id: int) -> bool:
        path = self.path_for(store_id)
        if not path.is_file():
            return False
        path.unlink()
        return True
