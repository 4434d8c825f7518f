"""Publish orchestration: validate → stage static web assets → zip."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from swa_builder.logging import get_logger
from swa_builder.manifest.parser import manifest_path_for
from swa_builder.package.zip import package_archive
from swa_builder.paths import fix_quoted_path
from swa_builder.staging.assets import stage_assets
from swa_builder.types import ArchiveEntry, ContentRootMapping

PROJECT_SUFFIX = ".csproj"
WWWROOT_DIR_NAME = "wwwroot"
ARCHIVE_SUFFIX = ".zip"

log = get_logger("swa_builder.core")


class InvalidOperationError(RuntimeError):
    """A publish precondition does not hold; raised before touching the disk."""


@dataclass(frozen=True)
class PublishContext:
    project_file: Path
    artifact_name: str
    output_dir: Path
    dist_dir: Path

    @property
    def wwwroot_dir(self) -> Path:
        return self.project_file.parent / WWWROOT_DIR_NAME

    @property
    def manifest_path(self) -> Path:
        return manifest_path_for(self.dist_dir, self.artifact_name)


@dataclass
class PublishResult:
    artifact: Path
    mappings: list[ContentRootMapping] = field(default_factory=list)
    entries: list[ArchiveEntry] = field(default_factory=list)


def build_context(project_file: str, output_dir: str, dist_dir: str) -> PublishContext:
    """Validate raw arguments and derive the artifact name from the project file."""
    project = Path(project_file)
    if not project.is_file() or not project.name.lower().endswith(PROJECT_SUFFIX):
        raise InvalidOperationError(
            f"The input file does not exist or is not a {PROJECT_SUFFIX} project: {project_file}"
        )

    out = fix_quoted_path(output_dir)
    dist = fix_quoted_path(dist_dir)
    if not out:
        raise InvalidOperationError("The output path is not set")

    return PublishContext(
        project_file=project.resolve(),
        artifact_name=project.stem,
        output_dir=Path(out).resolve(),
        dist_dir=Path(dist).resolve(),
    )


def artifact_zip_path(ctx: PublishContext) -> Path:
    return ctx.output_dir / f"{ctx.artifact_name}{ARCHIVE_SUFFIX}"


def _clear_artifact(ctx: PublishContext) -> None:
    stale = artifact_zip_path(ctx)
    if stale.exists():
        log.info("Removing previous artifact %s", stale)
        stale.unlink()


def publish(ctx: PublishContext) -> PublishResult:
    ctx.output_dir.mkdir(parents=True, exist_ok=True)
    _clear_artifact(ctx)

    staged = stage_assets(ctx.manifest_path, ctx.dist_dir)

    artifact = artifact_zip_path(ctx)
    entries = package_archive(ctx.dist_dir, ctx.wwwroot_dir, artifact)

    log.info("App package present in %s", artifact)
    return PublishResult(artifact=artifact, mappings=staged.mappings, entries=entries)


def publish_and_zip(project_file: str, output_dir: str, dist_dir: str) -> PublishResult:
    """Stage referenced static web assets into *dist_dir* and zip the app.

    The archive ``<output_dir>/<project name>.zip`` holds the dist tree merged
    with the project's ``wwwroot`` folder.
    """
    return publish(build_context(project_file, output_dir, dist_dir))
