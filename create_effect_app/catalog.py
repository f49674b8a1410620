"""Built-in template and example catalog.

Available templates and examples are discovered by scanning the local
checkout's ``templates/`` and ``examples/`` directories.  When the tool runs
from an installed package those directories are absent and a fixed list is
used instead; the sources are then downloaded from GitHub.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

FALLBACK_TEMPLATES: tuple[str, ...] = ("basic", "cli", "expo-app", "monorepo")
FALLBACK_EXAMPLES: tuple[str, ...] = ("http-server",)

EXAMPLE_DESCRIPTIONS: dict[str, str] = {
    "http-server": "An HTTP server application with authentication / authorization",
}


@dataclass(frozen=True)
class Choice:
    """One entry of an interactive selection list."""

    title: str
    value: str
    description: str | None = None


def to_title(slug: str) -> str:
    """Convert ``expo-app`` or ``http_server`` to ``Expo App`` / ``Http Server``."""
    return " ".join(part[0].upper() + part[1:] for part in re.split(r"[-_]+", slug) if part)


def _list_directories(directory: Path | None) -> list[str] | None:
    if directory is None or not directory.is_dir():
        return None
    try:
        return sorted(entry.name for entry in directory.iterdir() if entry.is_dir())
    except OSError:
        return None


def discover_templates(templates_dir: Path | None) -> tuple[str, ...]:
    """Return the names of the available templates, sorted."""
    names = _list_directories(templates_dir)
    return tuple(names) if names is not None else FALLBACK_TEMPLATES


def discover_examples(examples_dir: Path | None) -> tuple[str, ...]:
    """Return the names of the available examples, sorted."""
    names = _list_directories(examples_dir)
    return tuple(names) if names is not None else FALLBACK_EXAMPLES


def _read_description(package_json: Path) -> str | None:
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    description = data.get("description")
    if isinstance(description, str) and description.strip():
        return description
    return None


def template_choices(templates_dir: Path | None) -> list[Choice]:
    """Build prompt choices for every template.

    The description comes from the template's ``package.json`` when it has a
    non-empty ``description``; unreadable manifests are ignored.
    """
    choices: list[Choice] = []
    for name in discover_templates(templates_dir):
        description = None
        if templates_dir is not None:
            description = _read_description(templates_dir / name / "package.json")
        choices.append(Choice(title=to_title(name), value=name, description=description))
    return choices


def example_choices(examples_dir: Path | None) -> list[Choice]:
    """Build prompt choices for every example."""
    return [
        Choice(title=to_title(name), value=name, description=EXAMPLE_DESCRIPTIONS.get(name))
        for name in discover_examples(examples_dir)
    ]
