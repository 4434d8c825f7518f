"""Zip packaging of the app (dist tree + project wwwroot).

Creates one archive whose entries are the files of both trees, flattened to
root-relative forward-slash names:
- no wrapping top-level folder and no directory entries
- entries sorted per root so repeated runs produce the same layout
- when both trees hold the same name, the root A (dist) file wins
- a file is named relative to the most specific root containing it, so a root
  nested in the other is never emitted twice
"""

from __future__ import annotations

import os
import zipfile
from collections.abc import Iterator, Sequence
from pathlib import Path

from swa_builder.logging import get_logger
from swa_builder.types import ArchiveEntry

log = get_logger("swa_builder.package")


def _as_rel_arcname(root: Path, path: Path) -> str:
    """Relative arcname for *path* under *root*, forward slashes, no leading '/'."""
    rel = path.relative_to(root)
    return rel.as_posix().lstrip("/")


def _owning_root(path: Path, roots: Sequence[Path]) -> Path | None:
    # Deepest containing root wins; on equal depth the earlier root wins.
    best: Path | None = None
    for root in roots:
        try:
            path.relative_to(root)
        except ValueError:
            continue
        if best is None or len(root.parts) > len(best.parts):
            best = root
    return best


def entry_name_for(path: Path, roots: Sequence[Path]) -> str | None:
    """Archive entry name of *path*, or None when no root contains it."""
    root = _owning_root(path, roots)
    if root is None:
        return None
    return _as_rel_arcname(root, path)


def _walk_files(root: Path) -> Iterator[Path]:
    found: list[Path] = []
    # Symlinked folders are packaged like regular ones
    for dirpath, _dirnames, filenames in os.walk(root, followlinks=True):
        for name in filenames:
            found.append(Path(dirpath) / name)
    yield from sorted(found, key=lambda p: p.relative_to(root).as_posix())


def collect_entries(root_a: Path, root_b: Path) -> list[ArchiveEntry]:
    """Plan the archive: files under *root_b* first, then *root_a*.

    Each file is named relative to its owning root; files another root owns are
    left for that root's pass. On a name collision the later file (root A) takes
    over the earlier entry's slot.
    """
    root_a = root_a.resolve()
    root_b = root_b.resolve()
    # Prefix tests go A before B, enumeration goes B before A.
    prefix_order = [root_a, root_b]

    for root in (root_b, root_a):
        if not root.is_dir():
            raise FileNotFoundError(f"Directory to package does not exist: {root}")

    entries: dict[str, ArchiveEntry] = {}
    for root in (root_b, root_a):
        for fp in _walk_files(root):
            owner = _owning_root(fp, prefix_order)
            if owner is None:
                log.warning("Skipping %s: outside every packaged root", fp)
                continue
            if owner != root:
                # Picked up by the owner's own pass
                continue
            name = _as_rel_arcname(owner, fp)
            if name in entries:
                log.warning(
                    "Duplicate entry %s: %s replaces %s", name, fp, entries[name].source_file
                )
            entries[name] = ArchiveEntry(entry_name=name, source_file=fp)
    return list(entries.values())


def package_archive(root_a: Path, root_b: Path, output_zip: Path) -> list[ArchiveEntry]:
    """Write every file of *root_a* and *root_b* into *output_zip*.

    Any existing file at *output_zip* is replaced. A read or write failure
    aborts packaging and leaves a partial archive behind; callers treat it as
    invalid.
    """
    if output_zip.exists():
        output_zip.unlink()
    output_zip.parent.mkdir(parents=True, exist_ok=True)

    entries = collect_entries(root_a, root_b)

    with zipfile.ZipFile(output_zip, "w", compression=zipfile.ZIP_DEFLATED) as z:
        for entry in entries:
            z.write(entry.source_file, arcname=entry.entry_name)

    log.info("Wrote %d entries to %s", len(entries), output_zip)
    return entries
