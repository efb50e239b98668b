#!/usr/bin/env python3
"""
Echo chains gallery.

Shows how echoes link back to the decisions that started them.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from echocollector.core.config import Config
from echocollector.core.logging_config import setup_logging
from echocollector.core.utils import truncate
from echocollector.review.chains import build_chains, chain_depths
from echocollector.store import EchoRepository

app = typer.Typer(help="Echo chains")
console = Console()


@app.command()
def main(
    min_length: int = typer.Option(1, "--min-length", "-m", help="Hide chains shorter than this"),
    tree: bool = typer.Option(False, "--tree", help="Show each chain as a tree"),
):
    """
    List echo chains, strongest first.
    """
    load_dotenv()
    config = Config.from_env()
    setup_logging(config)
    repo = EchoRepository(config)

    echoes = repo.list_all_echoes()
    chains = [c for c in build_chains(echoes) if c.length >= min_length]

    if not chains:
        console.print("[yellow]No chains yet. Link an echo to a past one to start a chain.[/yellow]")
        return

    if tree:
        depths = chain_depths(echoes)
        for chain in chains:
            root = Tree(
                f"[bold]{chain.root.title}[/bold] "
                f"(strength {chain.total_strength}, {chain.length} echoes, {chain.years_span}y span)"
            )
            nodes = {chain.root.id: root}
            for member in sorted(chain.members, key=lambda m: depths[m.id]):
                if member.id == chain.root.id:
                    continue
                parent_node = nodes.get(member.parent_id, root)
                nodes[member.id] = parent_node.add(
                    f"#{member.id} {truncate(member.title, 50)} [dim]({member.connection_strength})[/dim]"
                )
            console.print(root)
        return

    table = Table(title=f"Echo Chains ({len(chains)})")
    table.add_column("Root")
    table.add_column("Echoes", justify="right")
    table.add_column("Total Strength", justify="right")
    table.add_column("Years Span", justify="right")

    for chain in chains:
        table.add_row(
            f"#{chain.root.id} {truncate(chain.root.title, 50)}",
            str(chain.length),
            str(chain.total_strength),
            str(chain.years_span),
        )

    console.print(table)


if __name__ == "__main__":
    app()
