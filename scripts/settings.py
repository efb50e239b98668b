#!/usr/bin/env python3
"""
Settings and reminder CLI.

View settings templates and the next reflection reminder.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import typer
from dotenv import load_dotenv

app = typer.Typer(help="Financial Echo Collector settings")


@app.command()
def current():
    """Show current settings."""
    from echocollector.core.config import Config

    load_dotenv()
    config = Config.from_env()

    typer.echo(config.get_settings_summary())


@app.command("list")
def list_templates():
    """List all available settings templates."""
    from echocollector.core.config import Config

    settings_dir = Path("config/settings")

    typer.secho("\nAvailable Settings Templates:", bold=True)
    typer.echo("─" * 50)

    for template_file in sorted(settings_dir.glob("*.json")):
        template_name = template_file.stem
        try:
            data = Config._load_json(template_file)
            reminder = data.get("reminder", {})

            typer.echo(f"\n{template_name}")
            typer.echo(f"  Name: {data.get('name', template_name)}")
            typer.echo(f"  Description: {data.get('description', '')}")
            if reminder.get("enabled", True):
                typer.echo(
                    f"  Reminder: {str(reminder.get('weekday', 'sunday')).capitalize()} "
                    f"at {int(reminder.get('hour', 10)):02d}:00"
                )
            else:
                typer.echo("  Reminder: Off")
        except (OSError, ValueError) as e:
            typer.echo(f"\n{template_name} (error loading: {e})")

    typer.echo("\nSwitch with SETTINGS_TEMPLATE=<name> in .env\n")


@app.command()
def reminder():
    """Show when the next reflection reminder is due."""
    from echocollector.core.config import Config
    from echocollector.notify.reminder import next_reminder

    load_dotenv()
    config = Config.from_env()

    upcoming = next_reminder(config)
    if upcoming is None:
        typer.echo("Reflection reminder is off.")
        return

    typer.secho(f"\n{upcoming.title}", bold=True)
    typer.echo(upcoming.body)
    typer.echo(f"Next: {upcoming.due_at:%A %Y-%m-%d %H:%M %Z}\n")


if __name__ == "__main__":
    app()
