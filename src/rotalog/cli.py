"""Typer CLI: init, status, rotate commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from rotalog import __version__

app = typer.Typer(
    name="rotalog",
    help="Inspect and rotate size-limited log files with numbered backups.",
    no_args_is_help=True,
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"rotalog v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version.", callback=_version_callback, is_eager=True
    ),
) -> None:
    """rotalog - numbered log rotation."""


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Write a default .rotalog/config.json."""
    from rotalog.config import CONFIG_DIR, CONFIG_NAME, DEFAULT_CONFIG, save_config
    from rotalog.utils import deep_merge, load_json

    config_path = project_dir / CONFIG_DIR / CONFIG_NAME
    if config_path.exists() and not force:
        config = deep_merge(DEFAULT_CONFIG, load_json(config_path))
        console.print("  [yellow]Merged with existing config[/yellow]")
    else:
        config = DEFAULT_CONFIG.copy()
        console.print("  [green]Created default config[/green]")

    save_config(config, project_dir)
    console.print(f"  Config: [cyan]{config_path}[/cyan]")


@app.command()
def status(
    path: Path = typer.Argument(..., help="Main log file"),
    width: int = typer.Option(2, "--width", help="Digits in the backup index"),
) -> None:
    """Show the main file and its numbered backups."""
    from rotalog.inventory import build_inventory

    inventory = build_inventory(path, width)

    table = Table(title=f"Rotation status: {path}", show_lines=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row(
        "Main file",
        f"{inventory.main_size} bytes" if inventory.main_exists else "[dim]missing[/dim]",
    )
    table.add_row("Backups", str(len(inventory.backup_files)))
    if inventory.backup_files:
        table.add_row("Lowest index", str(inventory.lowest_index))
        table.add_row("Highest index", str(inventory.highest_index))
        contiguous = "[green]yes[/green]" if inventory.is_contiguous else "[yellow]no[/yellow]"
        table.add_row("Contiguous", contiguous)
    console.print(table)

    for name in inventory.backup_files:
        console.print(f"  {name}")


@app.command()
def rotate(
    path: Path = typer.Argument(None, help="Main log file (default: log_file from config)"),
    keep: int = typer.Option(None, "--keep", "-k", help="Number of backups to keep"),
    size: str = typer.Option(None, "--size", "-s", help="Rotate at this size, e.g. 5K or 10MB"),
    width: int = typer.Option(None, "--width", help="Digits in the backup index"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 if any rename/delete failed"),
    project_dir: Path = typer.Option(Path.cwd(), "--dir", help="Project directory"),
) -> None:
    """Rotate a log file now if it is due."""
    from rotalog.config import load_config, rotation_config_from, validate_config
    from rotalog.rotation import maybe_rotate

    config = load_config(project_dir)
    if path is not None:
        config["log_file"] = str(path)
    if keep is not None:
        config["retention_count"] = keep
    if size is not None:
        config["size_threshold"] = size
    if width is not None:
        config["index_width"] = width

    errors = validate_config(config)
    if errors:
        for e in errors:
            console.print(f"  [red]Config error: {e}[/red]")
        raise typer.Exit(1)

    rotation = rotation_config_from(config)
    if not rotation.enabled:
        console.print("[yellow]Rotation disabled (retention count is 0)[/yellow]")
        return

    result = maybe_rotate(rotation)

    for src, dst in result.renamed:
        console.print(f"  [cyan]renamed[/cyan] {src} -> {dst}")
    for deleted in result.deleted:
        console.print(f"  [red]deleted[/red] {deleted}")
    for op, failed in result.failures:
        console.print(f"  [red bold]failed {op}[/red bold] {failed}")

    if result.rotated:
        console.print(Panel(f"[green]Rotated {rotation.base_path}[/green]", style="green"))
    else:
        console.print("[dim]No rotation needed[/dim]")

    if strict and not result.ok:
        raise typer.Exit(1)
