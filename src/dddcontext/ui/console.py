"""Rich-powered console output for dddcontext."""

from __future__ import annotations

import logging

from rich.console import Console as RichConsole
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from dddcontext.context.models import InclusionLevel, SelectionResult


class Console:
    """Terminal output for dddcontext using Rich."""

    def __init__(self, stderr: bool = False) -> None:
        self.console = RichConsole(stderr=stderr)

    def banner(self) -> None:
        """Show the dddcontext banner."""
        from dddcontext import __version__

        self.console.print(
            Panel(
                f"[bold cyan]dddcontext[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Budgeted, DDD-aware context for LLM prompts[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {escape(message)}")

    def show_stats(self, stats: dict) -> None:
        """Display catalog statistics."""
        table = Table(title="Artifact Catalog", border_style="cyan")
        table.add_column("Bounded Context", style="bold")
        table.add_column("Artifacts", justify="right", style="cyan")

        for name, count in stats.get("bounded_contexts", {}).items():
            table.add_row(name, str(count))
        table.add_section()
        table.add_row("Total", str(stats.get("artifacts", 0)))

        kinds = stats.get("kinds", {})
        if kinds:
            table.add_section()
            for kind, count in sorted(kinds.items(), key=lambda x: -x[1]):
                table.add_row(f"  {kind}", str(count))

        self.console.print(table)

    def show_selection(self, result: SelectionResult) -> None:
        """Display which artifacts were selected and why."""
        table = Table(
            title=f"Context for {result.user_story_id} ({result.target_bounded_context})",
            border_style="cyan",
        )
        table.add_column("#", justify="right", style="dim")
        table.add_column("Artifact", style="bold")
        table.add_column("Kind")
        table.add_column("Level")
        table.add_column("Weight", justify="right")
        table.add_column("Cost", justify="right", style="cyan")

        for i, item in enumerate(result.items, 1):
            level_style = "green" if item.level == InclusionLevel.FULL else "yellow"
            table.add_row(
                str(i),
                item.artifact.id,
                item.artifact.kind,
                f"[{level_style}]{item.level.value}[/{level_style}]",
                f"{item.artifact.semantic_weight:.2f}",
                str(item.cost),
            )

        self.console.print(table)
        self.console.print(
            f"  Budget: {result.used_budget:,} / {result.budget:,} "
            f"({result.budget_used_pct:.0f}%)  "
            f"Dropped: {result.dropped_count}  Skipped: {len(result.skipped_ids)}"
        )


def setup_logging(verbose: bool = False) -> None:
    """Route dddcontext log records through Rich on stderr."""
    handler = RichHandler(
        console=RichConsole(stderr=True), show_path=False, show_time=False
    )
    logger = logging.getLogger("dddcontext")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
