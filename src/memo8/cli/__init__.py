"""
CLI for memo8.

Provides the `memo8 codebase index` command, which scans the working tree
and uploads it to the project's codebase index.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)

from memo8 import __version__
from memo8.cli.options import (
    IndexOptions,
    MissingProjectError,
    OptionsError,
    resolve_index_options,
)
from memo8.cli.ui import (
    render_batch_plan,
    render_error,
    render_index_summary,
    render_warning,
)
from memo8.core.config import LoggingConfig, load_config
from memo8.services import (
    IndexingResult,
    IndexingService,
    ServicesContainer,
    create_services,
)

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="memo8",
    help="memo8 CLI - AI-powered developer productivity tool",
    add_completion=False,
)

codebase_app = typer.Typer(help="Manage codebase indexing", add_completion=False)
app.add_typer(codebase_app, name="codebase")


def configure_logging(cfg: LoggingConfig, verbose: bool = False) -> None:
    """Configure the root logger from the logging config section."""
    level = logging.DEBUG if verbose else getattr(logging, cfg.level.upper(), logging.WARNING)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=cfg.format, stream=sys.stderr)
    root.setLevel(level)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"memo8 {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
):
    """memo8 CLI - AI-powered developer productivity tool."""
    load_dotenv()
    ctx.obj = {"verbose": verbose}


async def _index_async(
    options: IndexOptions,
    services: ServicesContainer,
    progress_callback: Callable[[int, int, str], None],
) -> IndexingResult:
    cfg = services.config
    indexing_service = IndexingService(
        api_client=services.api_client,
        file_scanner=services.file_scanner,
        max_batch_bytes=cfg.indexing.max_batch_bytes,
        entry_overhead=cfg.indexing.entry_overhead,
        progress_callback=progress_callback,
    )
    try:
        return await indexing_service.index_directory(options.root, options.project_id)
    finally:
        await services.api_client.close()


def _dry_run(options: IndexOptions, services: ServicesContainer) -> None:
    cfg = services.config
    indexing_service = IndexingService(
        api_client=None,
        file_scanner=services.file_scanner,
        max_batch_bytes=cfg.indexing.max_batch_bytes,
        entry_overhead=cfg.indexing.entry_overhead,
    )
    with console.status("Scanning files..."):
        scan, batches = indexing_service.plan(options.root)

    if not batches:
        render_warning(console, "No indexable files found (all binary or empty).")
        return
    render_batch_plan(console, scan, batches)


def execute_index(options: IndexOptions, services: ServicesContainer) -> Optional[IndexingResult]:
    """Run `codebase index` for already-resolved options."""
    if options.dry_run:
        _dry_run(options, services)
        return None

    console.print(f"[bold blue]Indexing[/bold blue] {options.root}...")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Scanning files...", total=None)

        def update_progress(current: int, total: int, message: str) -> None:
            progress.update(
                task, completed=current, total=total or None, description=escape(message)
            )

        result = asyncio.run(_index_async(options, services, update_progress))

    if result.files_scanned == 0:
        render_warning(console, "No files found to index.")
    elif result.files_discovered == 0:
        render_warning(console, "No indexable files found (all binary or empty).")
    else:
        render_index_summary(console, result)
    return result


@codebase_app.command("index")
def index(
    ctx: typer.Context,
    path: Path = typer.Argument(
        Path("."), help="Directory to index (default: current directory)"
    ),
    project: Optional[int] = typer.Option(
        None,
        "--project",
        "-p",
        help="Project ID (default: from the .memo8.json nearest the working directory)",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Scan and plan batches without uploading"
    ),
):
    """Index directory files into the project's codebase index."""
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))

    try:
        cfg = load_config()
        configure_logging(cfg.logging, verbose)

        options = resolve_index_options(
            path,
            project,
            dry_run,
            cfg,
            interactive=sys.stdin.isatty(),
        )
    except MissingProjectError as e:
        render_warning(console, str(e))
        return
    except (OptionsError, OSError, ValueError) as e:
        render_error(console, e)
        raise typer.Exit(1)

    try:
        services = create_services(config=cfg)
        execute_index(options, services)
    except Exception as e:
        render_error(console, e)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
