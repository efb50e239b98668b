#!/usr/bin/env python3
"""
Emotional tone management CLI.

List, add, edit and delete the tones echoes are tagged with.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from echocollector.core.config import Config
from echocollector.core.errors import EchoCollectorError
from echocollector.core.logging_config import setup_logging
from echocollector.core.utils import hex_to_rgba
from echocollector.store import EchoRepository

app = typer.Typer(help="Emotional tone management")
console = Console()


def get_repository() -> EchoRepository:
    load_dotenv()
    config = Config.from_env()
    setup_logging(config)
    return EchoRepository(config)


@app.command("list")
def list_tones():
    """List all tones with usage counts."""
    repo = get_repository()

    tones = repo.list_all_tones()
    if not tones:
        console.print("[yellow]No tones yet. Run 'seed' to add the built-in ones.[/yellow]")
        return

    usage = repo.tone_usage()

    table = Table(title="Emotional Tones")
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Color")
    table.add_column("Icon")
    table.add_column("Echoes", justify="right")
    table.add_column("Description")

    for tone in tones:
        if tone.color_hex:
            r, g, b, _ = hex_to_rgba(tone.color_hex)
            color = f"[rgb({r},{g},{b})]■[/] #{tone.color_hex}"
        else:
            color = "-"
        table.add_row(
            str(tone.id),
            tone.name,
            color,
            tone.icon_name or "-",
            str(usage.get(tone.id, 0)),
            tone.description or "",
        )

    console.print(table)


@app.command()
def add(
    name: str = typer.Argument(..., help="Tone name"),
    color: str = typer.Option("0A4D5E", "--color", "-c", help="Hex color (3, 6 or 8 digits)"),
    icon: str = typer.Option("circle.fill", "--icon", "-i", help="Icon name"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
):
    """Add a tone."""
    repo = get_repository()

    try:
        tone = repo.create_tone(name, color, icon, description)
    except EchoCollectorError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Tone #{tone.id} '{tone.name}' added.[/green]")


@app.command()
def edit(
    tone_id: int = typer.Argument(..., help="Tone ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    color: Optional[str] = typer.Option(None, "--color", "-c", help="New hex color"),
    icon: Optional[str] = typer.Option(None, "--icon", "-i", help="New icon name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
):
    """Edit a tone. Omitted fields keep their value."""
    repo = get_repository()

    try:
        tone = repo.get_tone(tone_id)
        tone = repo.update_tone(
            tone_id,
            name=name if name is not None else tone.name,
            color_hex=color if color is not None else tone.color_hex,
            icon_name=icon if icon is not None else tone.icon_name,
            description=description if description is not None else tone.description,
        )
    except EchoCollectorError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Tone #{tone.id} '{tone.name}' updated.[/green]")


@app.command()
def delete(
    tone_id: int = typer.Argument(..., help="Tone ID"),
):
    """Delete a tone. It is removed from every echo."""
    repo = get_repository()

    try:
        repo.delete_tone(tone_id)
    except EchoCollectorError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Tone #{tone_id} deleted.[/green]")


@app.command()
def seed():
    """Add the built-in tones to an empty journal."""
    repo = get_repository()

    created = repo.seed_default_tones()
    if not created:
        console.print("[yellow]Tones already exist, nothing added.[/yellow]")
        return

    console.print(f"[green]Added {len(created)} tones: {', '.join(t.name for t in created)}[/green]")


if __name__ == "__main__":
    app()
