"""Shared utility functions for create-effect-app.

Provides Rich-based console output, JSON manifest I/O, best-effort file
removal, and project-name validation.
"""

from __future__ import annotations

import contextlib
import json
import re
import shutil
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from create_effect_app.errors import ManifestError, ProjectNameError

console = Console()

# npm package-name rules: optional scope, lowercase, URL-safe characters.
_NPM_NAME_RE = re.compile(r"^(?:@[a-z0-9-*~][a-z0-9-*._~]*/)?[a-z0-9-~][a-z0-9-._~]*$")
_NPM_NAME_MAX_LENGTH = 214


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON manifest that must contain a top-level object.

    Raises:
        ManifestError: If the file is missing, unreadable, not valid JSON,
            or does not hold a JSON object.
    """
    file_path = Path(path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Could not read {file_path}: {exc}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"{file_path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"{file_path} does not contain a JSON object")
    return data


def save_json(data: dict[str, Any], path: str | Path) -> None:
    """Write *data* as JSON with 2-space indentation."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path.resolve()


def remove_path(path: str | Path) -> bool:
    """Remove a file or directory tree, ignoring OS errors.

    Returns ``True`` when something was removed.
    """
    target = Path(path)
    with contextlib.suppress(OSError):
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
        return True
    return False


# ---------------------------------------------------------------------------
# Project-name validation
# ---------------------------------------------------------------------------


def is_valid_package_name(name: str) -> bool:
    """Return ``True`` if *name* is usable as an npm package name."""
    if not name or len(name) > _NPM_NAME_MAX_LENGTH:
        return False
    if name.startswith((".", "_")):
        return False
    return bool(_NPM_NAME_RE.match(name))


def validate_project_name(name: str) -> Path:
    """Validate a project directory argument and resolve it.

    The last path component becomes the package name, so it must be a valid
    npm package name.  The target directory must not exist yet.

    Raises:
        ProjectNameError: On an invalid name or an existing directory.
    """
    stripped = name.strip()
    if not stripped:
        raise ProjectNameError("Project name must not be empty")
    project_path = Path(stripped).expanduser().resolve()
    if not is_valid_package_name(project_path.name):
        raise ProjectNameError(
            f"Invalid project name '{project_path.name}': "
            "use lowercase letters, digits, '-', '.', '_' or '~'"
        )
    if project_path.exists():
        raise ProjectNameError(f"Project directory already exists: {project_path}")
    return project_path


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_info(message: str) -> None:
    """Print a plain informational message (Rich markup allowed)."""
    console.print(message)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_file_list(header: str, files: list[str] | list[Path]) -> None:
    """Print a header followed by an indented bullet list of files."""
    console.print(header)
    for file in files:
        console.print(f"  - [cyan]{file}[/cyan]")


def create_progress() -> Progress:
    """Create a Rich spinner used while an archive downloads."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
