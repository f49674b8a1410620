"""Post-download customization of template projects.

Removes opt-out tooling (Changesets, Nix flake, ESLint, GitHub workflows)
from a freshly materialized template, normalizes dotfiles that some
distribution channels ship without their leading dot, and reports files that
still carry ``<PLACEHOLDER>`` markers.

File removals are best-effort: a file that is already gone is not an error.
Manifest edits are sequential read-modify-write on ``package.json``.
"""

from __future__ import annotations

import contextlib
import re
from pathlib import Path
from typing import Any

import yaml

from create_effect_app.domain import TemplateProject
from create_effect_app.errors import ManifestError
from create_effect_app.utils import load_json, remove_path, save_json

PLACEHOLDER = "<PLACEHOLDER>"
MONOREPO_PACKAGES = ("cli", "domain", "server")

_BOOL_TAG = "tag:yaml.org,2002:bool"


# ---------------------------------------------------------------------------
# YAML round-tripping for workflow files
# ---------------------------------------------------------------------------

# GitHub workflows use an ``on:`` key, which YAML 1.1 resolves to a boolean.
# Only true/false are treated as booleans so keys survive a round trip.
_WORKFLOW_RESOLVERS = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class _WorkflowLoader(yaml.SafeLoader):
    yaml_implicit_resolvers = {key: list(value) for key, value in _WORKFLOW_RESOLVERS.items()}


class _WorkflowDumper(yaml.SafeDumper):
    yaml_implicit_resolvers = {key: list(value) for key, value in _WORKFLOW_RESOLVERS.items()}


for _cls in (_WorkflowLoader, _WorkflowDumper):
    _cls.add_implicit_resolver(
        _BOOL_TAG,
        re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
        list("tTfF"),
    )


def load_workflow(path: Path) -> dict[str, Any]:
    """Parse a GitHub workflow file."""
    try:
        data = yaml.load(path.read_text(encoding="utf-8"), Loader=_WorkflowLoader)
    except yaml.YAMLError as exc:
        raise ManifestError(f"{path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"{path} does not contain a YAML mapping")
    return data


def dump_workflow(data: dict[str, Any], path: Path) -> None:
    """Write a workflow mapping back with 2-space indentation."""
    text = yaml.dump(
        data,
        Dumper=_WorkflowDumper,
        indent=2,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
    path.write_text(text, encoding="utf-8")


def remove_workflow_job(workflow_path: Path, job: str) -> bool:
    """Drop *job* from a workflow's ``jobs`` mapping.

    Returns ``True`` if the job existed and the file was rewritten.
    """
    if not workflow_path.is_file():
        return False
    workflow = load_workflow(workflow_path)
    jobs = workflow.get("jobs")
    if not isinstance(jobs, dict) or job not in jobs:
        return False
    del jobs[job]
    dump_workflow(workflow, workflow_path)
    return True


# ---------------------------------------------------------------------------
# package.json helpers
# ---------------------------------------------------------------------------


def delete_matching_keys(mapping: Any, needle: str) -> list[str]:
    """Delete every key of *mapping* containing *needle*; return the removed keys.

    Anything that is not a dict is left alone.
    """
    if not isinstance(mapping, dict):
        return []
    removed = [key for key in mapping if needle in key]
    for key in removed:
        del mapping[key]
    return removed


def normalize_gitignore(project_dir: Path) -> bool:
    """Rename ``gitignore`` to ``.gitignore`` when only the former exists.

    Best-effort: a failed rename leaves the file as it is.
    """
    plain = project_dir / "gitignore"
    dotted = project_dir / ".gitignore"
    if dotted.exists() or not plain.exists():
        return False
    with contextlib.suppress(OSError):
        plain.rename(dotted)
        return True
    return False


def prune_changesets(project_dir: Path, package_json: dict[str, Any], with_workflows: bool) -> None:
    remove_path(project_dir / ".changeset")

    patches_dir = project_dir / "patches"
    if patches_dir.is_dir():
        for patch in patches_dir.iterdir():
            if "changeset" in patch.name:
                remove_path(patch)

    pnpm = package_json.get("pnpm")
    if isinstance(pnpm, dict):
        delete_matching_keys(pnpm.get("patchedDependencies"), "changeset")
    delete_matching_keys(package_json.get("scripts"), "changeset")
    delete_matching_keys(package_json.get("devDependencies"), "changeset")

    if with_workflows:
        remove_path(project_dir / ".github" / "workflows" / "release.yml")


def prune_nix_flake(project_dir: Path) -> None:
    for name in (".envrc", "flake.nix"):
        remove_path(project_dir / name)


def prune_eslint(project_dir: Path, package_json: dict[str, Any], with_workflows: bool) -> None:
    remove_path(project_dir / "eslint.config.mjs")
    delete_matching_keys(package_json.get("devDependencies"), "eslint")
    delete_matching_keys(package_json.get("scripts"), "lint")

    if with_workflows:
        remove_workflow_job(project_dir / ".github" / "workflows" / "check.yml", "lint")


def prune_workflows(project_dir: Path) -> None:
    remove_path(project_dir / ".github")


def apply_template_preferences(project_dir: Path, project: TemplateProject) -> dict[str, Any]:
    """Strip the tooling the user opted out of and rewrite ``package.json``.

    Returns:
        The ``package.json`` content as written.

    Raises:
        ManifestError: If ``package.json`` is missing or malformed, or the
            check workflow cannot be parsed.
    """
    package_path = project_dir / "package.json"
    package_json = load_json(package_path)

    if not project.with_changesets:
        prune_changesets(project_dir, package_json, project.with_workflows)
    if not project.with_nix_flake:
        prune_nix_flake(project_dir)
    if not project.with_eslint:
        prune_eslint(project_dir, package_json, project.with_workflows)
    if not project.with_workflows:
        prune_workflows(project_dir)

    save_json(package_json, package_path)
    return package_json


# ---------------------------------------------------------------------------
# Placeholder report
# ---------------------------------------------------------------------------


def placeholder_candidates(project_dir: Path, project: TemplateProject) -> list[Path]:
    """Files that templates usually ship with ``<PLACEHOLDER>`` entries."""
    candidates: list[Path] = []
    if project.with_changesets:
        candidates.append(project_dir / ".changeset" / "config.json")
    if project.template == "monorepo" and not (project.template_repo or project.template_folder):
        for package in MONOREPO_PACKAGES:
            candidates.append(project_dir / "packages" / package / "package.json")
        for package in MONOREPO_PACKAGES:
            candidates.append(project_dir / "packages" / package / "LICENSE")
    else:
        candidates.append(project_dir / "package.json")
        candidates.append(project_dir / "LICENSE")
    return candidates


def find_placeholder_files(project_dir: Path, project: TemplateProject) -> list[Path]:
    """Return the candidate files that exist and still contain ``<PLACEHOLDER>``."""
    found: list[Path] = []
    for path in placeholder_candidates(project_dir, project):
        try:
            if PLACEHOLDER in path.read_text(encoding="utf-8"):
                found.append(path)
        except (OSError, UnicodeDecodeError):
            continue
    return found
