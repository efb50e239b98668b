#!/usr/bin/env python3
"""
Export, import and reset journal data.

JSON backups restore into any journal; CSV is for external analysis;
the PDF booklet is for reading.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from datetime import datetime

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.prompt import Confirm

from echocollector.core.config import Config
from echocollector.core.errors import EchoCollectorError
from echocollector.core.logging_config import setup_logging
from echocollector.export.backup import export_backup, import_backup
from echocollector.export.csv_export import export_echoes_csv
from echocollector.export.pdf_export import export_echoes_pdf
from echocollector.store import EchoRepository

app = typer.Typer(help="Export and import journal data")
console = Console()


def _bootstrap() -> tuple:
    load_dotenv()
    config = Config.from_env()
    setup_logging(config)
    return config, EchoRepository(config)


@app.command("json")
def json_backup(
    output: str = typer.Option(None, "--output", "-o", help="Output file path"),
):
    """
    Export all echoes and tones to a JSON backup.
    """
    config, repo = _bootstrap()

    if not output:
        output = str(Path(config.export_dir) / f"FinancialEchoes_Backup_{datetime.now():%Y%m%d_%H%M%S}.json")

    echoes = repo.list_all_echoes()
    path = export_backup(echoes, repo.list_all_tones(), output)

    console.print(f"[green]Backed up {len(echoes)} echoes to {path}[/green]")


@app.command()
def csv(
    output: str = typer.Option(None, "--output", "-o", help="Output file path"),
):
    """
    Export all echoes to CSV.
    """
    config, repo = _bootstrap()

    if not output:
        output = str(Path(config.export_dir) / f"echoes_export_{datetime.now():%Y%m%d_%H%M%S}.csv")

    count = export_echoes_csv(repo.list_all_echoes(), repo.list_all_tones(), output)

    console.print(f"[green]Exported {count} echoes to {output}[/green]")


@app.command()
def pdf(
    output: str = typer.Option(None, "--output", "-o", help="Output file path"),
):
    """
    Export all echoes as a PDF booklet.
    """
    config, repo = _bootstrap()

    if not output:
        output = str(Path(config.export_dir) / f"My_Financial_Echoes_{datetime.now():%Y%m%d}.pdf")

    count = export_echoes_pdf(repo.list_all_echoes(), repo.list_all_tones(), output)

    console.print(f"[green]Wrote {count} echoes to {output}[/green]")


@app.command("import")
def import_json(
    path: str = typer.Argument(..., help="Backup file to restore"),
):
    """
    Restore a JSON backup. Existing records are kept.
    """
    config, repo = _bootstrap()

    try:
        counts = import_backup(repo, path)
    except (EchoCollectorError, FileNotFoundError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]Imported {counts['echoes']} echoes, {counts['tones']} tones, "
        f"{counts['links']} chain links.[/green]"
    )


@app.command()
def reset():
    """
    Permanently delete all echoes and tones.
    """
    config, repo = _bootstrap()

    console.print("[red]This will permanently delete all your echoes and tones.[/red]")
    for attempt in range(3):
        if not Confirm.ask(f"Confirm reset ({attempt + 1}/3)?", console=console, default=False):
            console.print("Reset cancelled.")
            raise typer.Exit(0)

    repo.reset_all()
    console.print("[green]All data deleted.[/green]")


if __name__ == "__main__":
    app()
