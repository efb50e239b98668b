#!/usr/bin/env python3
"""
Browse echoes.

Search, filter and sort the journal. Read-only.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from echocollector.core.config import Config
from echocollector.core.errors import EchoCollectorError
from echocollector.core.logging_config import setup_logging
from echocollector.core.utils import truncate
from echocollector.review.browse import EchoFilter, EchoSort, filter_and_sort, resolved_echoes
from echocollector.review.chains import chain_depth
from echocollector.store import EchoRepository

app = typer.Typer(help="Browse echoes")
console = Console()


def get_repository() -> EchoRepository:
    load_dotenv()
    config = Config.from_env()
    setup_logging(config)
    return EchoRepository(config)


def _echo_table(title: str, echoes) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Created")
    table.add_column("Title")
    table.add_column("Strength", justify="right")
    table.add_column("Parent", justify="right")
    table.add_column("Status")

    for echo in echoes:
        table.add_row(
            str(echo.id),
            f"{echo.created_at:%Y-%m-%d}" if echo.created_at else "-",
            truncate(echo.title, 50),
            str(echo.connection_strength),
            str(echo.parent_id) if echo.parent_id else "-",
            "[green]Resolved[/green]" if echo.is_resolved else "Open",
        )
    return table


@app.command("list")
def list_echoes(
    query: str = typer.Option("", "--search", "-q", help="Search text"),
    status: EchoFilter = typer.Option(EchoFilter.ALL, "--filter", "-f", help="Status filter"),
    sort: EchoSort = typer.Option(EchoSort.NEWEST_FIRST, "--sort", "-s", help="Sort order"),
    limit: int = typer.Option(0, "--limit", "-n", help="Max rows (0 = all)"),
):
    """
    List echoes matching a search, filter and sort.
    """
    repo = get_repository()

    echoes = filter_and_sort(repo.list_all_echoes(), query, status, sort)
    if limit > 0:
        echoes = echoes[:limit]

    if not echoes:
        console.print("[yellow]No echoes match. Try adjusting your search or filters.[/yellow]")
        return

    console.print(_echo_table(f"Echoes ({len(echoes)})", echoes))


@app.command()
def resolved():
    """
    List resolved echoes, most recently resolved first.
    """
    repo = get_repository()

    echoes = resolved_echoes(repo.list_all_echoes())
    if not echoes:
        console.print("[yellow]No resolved echoes yet.[/yellow]")
        return

    console.print(_echo_table(f"Resolved Echoes ({len(echoes)})", echoes))


@app.command()
def show(
    echo_id: int = typer.Argument(..., help="Echo ID"),
):
    """
    Show one echo in full.
    """
    repo = get_repository()

    try:
        echo = repo.get_echo(echo_id)
    except EchoCollectorError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    tones = {t.id: t.name for t in repo.list_all_tones()}
    tone_names = ", ".join(sorted(tones[t] for t in echo.tone_ids if t in tones)) or "-"
    depth = chain_depth(echo.id, repo.list_all_echoes())

    lines = [
        f"[bold]Past decision[/bold] ({echo.past_date:%Y-%m-%d})",
        echo.past_situation or "",
        "",
        "[bold]Present trigger[/bold]",
        echo.current_trigger or "",
        "",
        f"[bold]Connection strength:[/bold] {echo.connection_strength}/10",
        f"[bold]Tones:[/bold] {tone_names}",
        f"[bold]Chain depth:[/bold] {depth}",
    ]

    if echo.parent_id:
        lines.append(f"[bold]Follows:[/bold] #{echo.parent_id}")
    if echo.insight:
        lines.extend(["", "[bold]Insight[/bold]", echo.insight])
    if echo.is_resolved:
        lines.extend(["", f"[green]Resolved on {echo.resolved_date:%Y-%m-%d}[/green]"])

    console.print(Panel("\n".join(lines), title=f"#{echo.id} {echo.title}"))


if __name__ == "__main__":
    app()
