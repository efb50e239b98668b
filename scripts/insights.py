#!/usr/bin/env python3
"""
Insights report.

Shows resolution rate, strength trend, recurring themes and tones.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from datetime import datetime

import typer
from dotenv import load_dotenv
from rich.console import Console

from echocollector.core.config import Config
from echocollector.core.logging_config import setup_logging
from echocollector.review.insights import compute_insights, format_insights, tone_frequency
from echocollector.store import EchoRepository

app = typer.Typer(help="Insights & patterns")
console = Console()


@app.command()
def main(
    export: bool = typer.Option(False, "--export", "-e", help="Export report to file"),
):
    """
    Generate the insights report.
    """
    load_dotenv()
    config = Config.from_env()
    setup_logging(config)
    repo = EchoRepository(config)

    echoes = repo.list_all_echoes()
    report = format_insights(compute_insights(echoes))

    ranked = tone_frequency(echoes, repo.list_all_tones())
    if ranked:
        report += "\nEmotional tones:\n"
        report += "\n".join(f"  {tone.name}: {count}" for tone, count in ranked)
        report += "\n"

    if export:
        filepath = Path(config.export_dir) / f"insights_{datetime.now():%Y%m%d}.txt"
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_text(report, encoding="utf-8")
        console.print(f"[green]Report exported to {filepath}[/green]")
    else:
        print(report)


if __name__ == "__main__":
    app()
