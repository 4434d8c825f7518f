"""Stage Razor class library assets into the dist folder.

Every run starts from an empty ``<dist>/_content`` and copies each manifest
content root to ``<dist>/<BasePath>``, in manifest order (later roots overwrite
earlier files on collision).
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from swa_builder.logging import get_logger
from swa_builder.manifest.parser import read_manifest
from swa_builder.types import ContentRootMapping

CONTENT_DIR_NAME = "_content"

log = get_logger("swa_builder.staging")


@dataclass
class StageResult:
    mappings: list[ContentRootMapping] = field(default_factory=list)
    staged: bool = False
    # False when the previous staging tree could not be removed
    reset_clean: bool = True


def _is_within(base: Path, target: Path) -> bool:
    try:
        target.relative_to(base)
        return True
    except ValueError:
        return False


def remove_tree_best_effort(path: Path) -> bool:
    """Delete *path* recursively; report failure instead of raising.

    Returns True when nothing is left at *path* afterwards.
    """
    if not path.exists():
        return True
    try:
        shutil.rmtree(path)
    except OSError as exc:
        log.warning("Could not remove stale staging tree %s: %s", path, exc)
        return False
    return True


def reset_staging_root(staging_parent: Path) -> tuple[Path, bool]:
    """Recreate ``<staging_parent>/_content`` empty; creation errors propagate."""
    staging_root = staging_parent / CONTENT_DIR_NAME
    removed = remove_tree_best_effort(staging_root)
    staging_root.mkdir(parents=True, exist_ok=True)
    return staging_root, removed


def _destination(staging_parent: Path, mapping: ContentRootMapping) -> Path:
    parent = staging_parent.resolve()
    dest = (parent / mapping.base_path).resolve()
    if not _is_within(parent, dest):
        raise ValueError(f"Content root destination escapes {parent}: {mapping.base_path}")
    return dest


def stage_mappings(mappings: Iterable[ContentRootMapping], staging_parent: Path) -> None:
    for mapping in mappings:
        src = Path(mapping.source_path)
        if not src.exists():
            raise FileNotFoundError(f"Content root does not exist: {src}")
        if not src.is_dir():
            raise NotADirectoryError(f"Content root is not a directory: {src}")
        dest = _destination(staging_parent, mapping)
        log.info("Staging %s -> %s", src, dest)
        shutil.copytree(src, dest, dirs_exist_ok=True)


def stage_assets(manifest_path: Path, staging_parent: Path) -> StageResult:
    """Reset the staging root and copy every content root listed in *manifest_path*.

    No manifest means the project references no class libraries: nothing is
    reset or copied.
    """
    if not manifest_path.is_file():
        log.info("No static web assets manifest at %s; nothing to stage", manifest_path)
        return StageResult()

    mappings = read_manifest(manifest_path)
    _, removed = reset_staging_root(staging_parent)
    stage_mappings(mappings, staging_parent)
    return StageResult(mappings=mappings, staged=True, reset_clean=removed)
