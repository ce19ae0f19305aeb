"""
Terminal output helpers for the memo8 CLI.

Renders errors, indexing summaries and dry-run batch plans with Rich.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from memo8.core.batching import Batch
from memo8.core.file_scanner import ScanResult
from memo8.infrastructure.api import ValidationError
from memo8.services.indexing_models import IndexingResult


def _format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KiB"
    return f"{size / (1024 * 1024):.1f} MiB"


def render_error(console: Console, error: BaseException) -> None:
    """
    Print a fatal error as a single line, plus field details for validation errors.
    """
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}", soft_wrap=True)
    if isinstance(error, ValidationError):
        for field_name, messages in error.errors.items():
            for message in messages:
                console.print(f"  [red]{field_name}: {message}[/red]")


def render_warning(console: Console, message: str) -> None:
    console.print(f"[yellow]![/yellow] {escape(message)}", soft_wrap=True)


def render_index_summary(console: Console, result: IndexingResult) -> None:
    """Render the summary panel for a completed indexing run."""
    summary = Table.grid(padding=1)
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Files Scanned:", str(result.files_scanned))
    summary.add_row("Files Indexed:", f"[green]{result.files_indexed}[/green]")
    summary.add_row("Files Skipped:", str(result.files_skipped))
    summary.add_row("Batches:", str(result.total_batches))
    summary.add_row("Requests:", str(result.requests_sent))
    if result.splits:
        summary.add_row("Splits (413):", f"[yellow]{result.splits}[/yellow]")
    summary.add_row("Duration:", f"{result.duration_seconds:.2f}s")

    console.print(
        Panel(
            summary,
            title="[bold green]Indexing Complete[/bold green]",
            border_style="green",
            expand=False,
        )
    )


def render_batch_plan(console: Console, scan: ScanResult, batches: list[Batch]) -> None:
    """Render the batches a dry run would upload."""
    table = Table(title="Planned Batches (dry run)", border_style="blue")
    table.add_column("Batch", justify="right", style="cyan")
    table.add_column("Files", justify="right")
    table.add_column("Estimated Size", justify="right", style="magenta")
    table.add_column("First File", style="green")

    for i, batch in enumerate(batches, start=1):
        table.add_row(
            str(i),
            str(len(batch)),
            _format_bytes(batch.size_bytes),
            batch.entries[0].path,
        )

    console.print(table)
    console.print(
        f"{scan.files_discovered} files in {len(batches)} batches "
        f"({scan.files_scanned} scanned, {scan.files_skipped} skipped as binary or empty)."
    )
