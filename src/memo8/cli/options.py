"""
Input resolution for CLI commands.

Turns command-line flags, configuration and (when attached to a terminal)
interactive answers into a validated options object. Command execution only
ever sees the resolved object.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import typer

from memo8.core.config import Memo8Config
from memo8.core.path_utils import validate_indexable_path

NO_PROJECT_MESSAGE = "No project specified. Run: memo8 init"


class OptionsError(ValueError):
    """Raised when command input cannot be resolved into valid options."""

    pass


class MissingProjectError(OptionsError):
    """No project id from flags, .memo8.json, environment or prompt."""

    pass


@dataclass(frozen=True)
class IndexOptions:
    """Validated input for `memo8 codebase index`.

    Attributes:
        root: Absolute directory to scan
        project_id: Target project; None only for dry runs
        dry_run: Scan and batch without uploading
    """

    root: Path
    project_id: Optional[int]
    dry_run: bool = False


def prompt_project_id() -> Optional[int]:
    """Ask for a project id on the terminal."""
    return typer.prompt("Project ID", type=int)


def resolve_index_options(
    path: Path,
    project_id: Optional[int],
    dry_run: bool,
    config: Memo8Config,
    interactive: bool = False,
    prompt: Callable[[], Optional[int]] = prompt_project_id,
) -> IndexOptions:
    """
    Resolve `codebase index` input.

    The project id comes from the --project flag, then the loaded config
    (.memo8.json or MEMO8_PROJECT_ID), then an interactive prompt when
    `interactive` is set. Dry runs do not need a project.

    Raises:
        OptionsError: If the path cannot be indexed
        MissingProjectError: If no project id could be determined
    """
    validation = validate_indexable_path(path)
    if not validation.valid:
        raise OptionsError(validation.error_message)

    resolved_project = project_id if project_id is not None else config.project.project_id

    if resolved_project is None and not dry_run:
        if interactive:
            resolved_project = prompt()
        if resolved_project is None:
            raise MissingProjectError(NO_PROJECT_MESSAGE)

    if resolved_project is not None and resolved_project < 1:
        raise OptionsError(f"Invalid project ID: {resolved_project}")

    return IndexOptions(
        root=Path(path).resolve(),
        project_id=resolved_project,
        dry_run=dry_run,
    )
