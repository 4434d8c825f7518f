"""swa-builder CLI: package a published web app and its static web assets.

Commands:
- publish PROJECT --out DIR --dist DIR   stage _content assets and write <name>.zip
- manifest PATH                          show the content roots a manifest declares
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from swa_builder.core import InvalidOperationError, publish_and_zip
from swa_builder.logging import get_logger
from swa_builder.manifest.parser import ManifestError, read_manifest

app = typer.Typer(add_completion=False, help="Package web app builds into a single zip")
console = Console()
log = get_logger("swa_builder.cli")


@app.command()
def publish(
    project: str = typer.Argument(..., help="Path to the .csproj of the app"),
    out: str = typer.Option(..., "--out", help="Directory receiving <name>.zip"),
    dist: str = typer.Option(..., "--dist", help="Published dist folder to package"),
    show_entries: bool = typer.Option(False, "--show-entries", help="List archive entries"),
) -> None:
    try:
        result = publish_and_zip(project, out, dist)
    except (InvalidOperationError, ManifestError, OSError, ValueError) as exc:
        log.error("Publish failed", exc_info=True)
        rprint(f"[red]Publish failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if show_entries:
        table = Table(title=f"{result.artifact.name} ({len(result.entries)} entries)")
        table.add_column("Entry", style="cyan")
        table.add_column("Source")
        for entry in result.entries:
            table.add_row(entry.entry_name, str(entry.source_file))
        console.print(table)
    rprint(f"[green]Build result ->[/green] App package present in {result.artifact}.")


@app.command()
def manifest(path: str = typer.Argument(..., help="Path to <name>.StaticWebAssets.xml")) -> None:
    try:
        mappings = read_manifest(Path(path))
    except ManifestError as exc:
        rprint(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    if not mappings:
        rprint("[yellow]No content roots declared.[/yellow]")
        return
    table = Table(title="Content roots")
    table.add_column("BasePath", style="cyan")
    table.add_column("Path")
    for m in mappings:
        table.add_row(m.base_path, m.source_path)
    console.print(table)


if __name__ == "__main__":
    app()
