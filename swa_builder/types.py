"""Shared Pydantic models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ContentRootMapping(BaseModel):
    """One ``<ContentRoot>`` of a static web assets manifest.

    ``source_path`` is the library's asset folder (``Path`` attribute);
    ``base_path`` is where it lands relative to the staging parent
    (``BasePath`` attribute, conventionally ``_content/<Library>``).
    """

    model_config = ConfigDict(frozen=True)

    source_path: str
    base_path: str


class ArchiveEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry_name: str
    source_file: Path
