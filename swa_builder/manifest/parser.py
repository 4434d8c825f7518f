"""Static web assets manifest reader.

The build writes ``<name>.StaticWebAssets.xml`` next to the dist folder when the
project references Razor class libraries::

    <StaticWebAssets Version="1.0">
      <ContentRoot BasePath="_content/Lib" Path="/src/Lib/wwwroot/" />
    </StaticWebAssets>

Only ``ContentRoot`` elements carrying both ``BasePath`` and ``Path`` are kept;
anything else in the document is ignored.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

from swa_builder.logging import get_logger
from swa_builder.types import ContentRootMapping

MANIFEST_SUFFIX = ".StaticWebAssets.xml"
CONTENT_ROOT_TAG = "ContentRoot"

log = get_logger("swa_builder.manifest")


class ManifestError(ValueError):
    """The manifest file exists but is not a well-formed XML document."""


def _local_name(tag: str) -> str:
    # "{namespace}ContentRoot" -> "ContentRoot"
    return tag.rsplit("}", 1)[-1]


def parse_manifest(text: str) -> list[ContentRootMapping]:
    """Return the manifest's content roots in document order.

    Elements missing either attribute (or with an empty value) are dropped.
    Blank text is an empty manifest, not an error.
    """
    if not text.strip():
        return []
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ManifestError(f"Invalid static web assets manifest: {exc}") from exc

    mappings: list[ContentRootMapping] = []
    for el in root.iter():
        if not isinstance(el.tag, str) or _local_name(el.tag) != CONTENT_ROOT_TAG:
            continue
        base_path = el.get("BasePath")
        source_path = el.get("Path")
        if not base_path or not source_path:
            log.debug("Skipping incomplete ContentRoot element: %s", el.attrib)
            continue
        mappings.append(ContentRootMapping(source_path=source_path, base_path=base_path))
    return mappings


def manifest_path_for(dist_dir: Path, artifact_name: str) -> Path:
    """Conventional manifest location: beside *dist_dir*, named after the project."""
    return (dist_dir / "..").resolve() / f"{artifact_name}{MANIFEST_SUFFIX}"


def read_manifest(path: Path) -> list[ContentRootMapping]:
    """Parse *path*; a missing file means no referenced libraries, so ``[]``."""
    if not path.is_file():
        log.info("No static web assets manifest at %s", path)
        return []
    return parse_manifest(path.read_text(encoding="utf-8-sig"))
