#!/usr/bin/env python3
"""
Log a financial echo.

Prompts for the past decision and the trigger that brought it back,
then asks for a lesson. Also handles follow-ups and resolution.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from datetime import date
from typing import List, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.prompt import Prompt, IntPrompt, Confirm

from echocollector.core.config import Config
from echocollector.core.errors import EchoCollectorError
from echocollector.core.logging_config import setup_logging
from echocollector.store import EchoDraft, EchoRepository

app = typer.Typer(help="Log and update financial echoes")
console = Console()


def get_repository() -> EchoRepository:
    load_dotenv()
    config = Config.from_env()
    setup_logging(config)
    return EchoRepository(config)


def _resolve_tone_ids(repo: EchoRepository, names: List[str]) -> frozenset:
    by_name = {t.name.lower(): t.id for t in repo.list_all_tones()}
    ids = set()
    for name in names:
        tone_id = by_name.get(name.strip().lower())
        if tone_id is None:
            console.print(f"[yellow]Unknown tone '{name}', skipped.[/yellow]")
            continue
        ids.add(tone_id)
    return frozenset(ids)


@app.command()
def add(
    title: str = typer.Option(..., "--title", "-t", help="Short label for the echo"),
    past_date: str = typer.Option(..., "--past-date", "-d", help="Date of the past decision (YYYY-MM-DD)"),
    strength: Optional[int] = typer.Option(None, "--strength", "-s", help="Connection strength 1-10"),
    parent_id: Optional[int] = typer.Option(None, "--parent", "-p", help="Echo this one follows up on"),
    tone: List[str] = typer.Option([], "--tone", help="Emotional tone name (repeatable)"),
):
    """
    Log a new echo with guided reflection.

    Prompts for the past situation, present trigger and insight.
    """
    repo = get_repository()

    try:
        when = date.fromisoformat(past_date)
    except ValueError:
        console.print(f"[red]Invalid date: {past_date} (expected YYYY-MM-DD)[/red]")
        raise typer.Exit(1)

    console.print("\n[bold]Log Echo[/bold]\n")
    console.print("[yellow]Reflection Questions[/yellow]\n")

    past_situation = Prompt.ask("What did you decide back then?", console=console)
    current_trigger = Prompt.ask("What brought it back today?", console=console)

    if strength is None:
        strength = IntPrompt.ask(
            "How strongly does it resonate? (1-10)", console=console, default=5
        )

    insight = Prompt.ask("What did you learn? (optional)", console=console, default="")

    draft = EchoDraft(
        title=title,
        past_date=when,
        past_situation=past_situation,
        current_trigger=current_trigger,
        connection_strength=strength,
        insight=insight,
        tone_ids=_resolve_tone_ids(repo, tone),
        parent_id=parent_id,
    )

    try:
        echo = repo.create_echo(draft)
    except EchoCollectorError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[green]Echo #{echo.id} logged successfully.[/green]\n")


@app.command("follow-up")
def follow_up(
    parent_id: int = typer.Argument(..., help="Echo being followed up"),
    title: str = typer.Option(..., "--title", "-t", help="Short label for the follow-up"),
    strength: int = typer.Option(5, "--strength", "-s", help="Connection strength 1-10"),
    tone: List[str] = typer.Option([], "--tone", help="Emotional tone name (repeatable)"),
):
    """
    Record the same past decision echoing again.

    Reuses the parent's past date and situation.
    """
    repo = get_repository()

    try:
        parent = repo.get_echo(parent_id)
    except EchoCollectorError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]Follow-up to:[/bold] {parent.title}\n")
    current_trigger = Prompt.ask("What brought it back this time?", console=console)
    insight = Prompt.ask("What did you learn? (optional)", console=console, default="")

    try:
        echo = repo.create_follow_up(
            parent_id,
            title=title,
            current_trigger=current_trigger,
            connection_strength=strength,
            insight=insight,
            tone_ids=_resolve_tone_ids(repo, tone),
        )
    except EchoCollectorError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[green]Echo #{echo.id} linked to #{parent_id}.[/green]\n")


@app.command()
def link(
    echo_id: int = typer.Argument(..., help="Echo to re-link"),
    parent_id: Optional[int] = typer.Option(None, "--parent", "-p", help="New parent (omit to unlink)"),
):
    """
    Change which echo this one follows up on.
    """
    repo = get_repository()

    try:
        echo = repo.get_echo(echo_id)
        draft = EchoDraft(
            title=echo.title,
            past_date=echo.past_date,
            past_situation=echo.past_situation,
            current_trigger=echo.current_trigger,
            connection_strength=echo.connection_strength,
            insight=echo.insight,
            tone_ids=echo.tone_ids,
            parent_id=parent_id,
        )
        repo.update_echo(echo_id, draft)
    except EchoCollectorError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if parent_id is None:
        console.print(f"\n[green]Echo #{echo_id} is now standalone.[/green]\n")
    else:
        console.print(f"\n[green]Echo #{echo_id} now follows #{parent_id}.[/green]\n")


@app.command()
def resolve(
    echo_id: int = typer.Argument(..., help="Echo ID"),
):
    """
    Mark an echo as resolved.
    """
    repo = get_repository()

    try:
        echo = repo.get_echo(echo_id)
        if echo.is_resolved:
            console.print(f"[yellow]Echo #{echo_id} already resolved on {echo.resolved_date:%Y-%m-%d}[/yellow]")
            raise typer.Exit(1)
        echo = repo.resolve_echo(echo_id)
    except EchoCollectorError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[green]Echo #{echo_id} resolved on {echo.resolved_date:%Y-%m-%d}.[/green]\n")


@app.command()
def reopen(
    echo_id: int = typer.Argument(..., help="Echo ID"),
):
    """
    Mark a resolved echo as open again.
    """
    repo = get_repository()

    try:
        repo.reopen_echo(echo_id)
    except EchoCollectorError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[green]Echo #{echo_id} reopened.[/green]\n")


@app.command()
def delete(
    echo_id: int = typer.Argument(..., help="Echo ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """
    Delete an echo. Follow-ups become standalone.
    """
    repo = get_repository()

    if not yes and not Confirm.ask(f"Delete echo #{echo_id}?", console=console, default=False):
        raise typer.Exit(0)

    try:
        repo.delete_echo(echo_id)
    except EchoCollectorError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[green]Echo #{echo_id} deleted.[/green]\n")


if __name__ == "__main__":
    app()
