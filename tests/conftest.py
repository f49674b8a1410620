"""Shared pytest fixtures for the create-effect-app test suite.

Provides reusable fixtures for:
- A configuration that never touches the network or the local checkout
- In-memory gzip tarballs shaped like GitHub codeload archives
- A fake codeload server built on ``httpx.MockTransport``
- A realistic Effect template tree (package.json, workflows, Nix, ESLint)
"""

from __future__ import annotations

import io
import json
import tarfile
import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from create_effect_app.config import Config

CODELOAD_URL = "https://codeload.test"


# ---------------------------------------------------------------------------
# Archives
# ---------------------------------------------------------------------------


def build_tarball(files: dict[str, str], wrapper: str = "examples-main") -> bytes:
    """Build a ``tar.gz`` whose entries all live under *wrapper*.

    Directory entries are emitted for every parent folder, mirroring the
    archives served by GitHub.
    """
    buffer = io.BytesIO()
    directories: set[str] = set()
    for path in files:
        parts = path.split("/")[:-1]
        for depth in range(1, len(parts) + 1):
            directories.add("/".join(parts[:depth]))

    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        root = tarfile.TarInfo(wrapper)
        root.type = tarfile.DIRTYPE
        root.mode = 0o755
        archive.addfile(root)
        for directory in sorted(directories):
            info = tarfile.TarInfo(f"{wrapper}/{directory}")
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            archive.addfile(info)
        for path, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(f"{wrapper}/{path}")
            info.size = len(data)
            info.mode = 0o644
            archive.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


class FakeCodeload:
    """Serves registered archives by URL path and records every request."""

    def __init__(self) -> None:
        self.archives: dict[str, bytes] = {}
        self.status_overrides: dict[str, int] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, archive: bytes) -> None:
        self.archives[path] = archive

    def fail(self, path: str, status: int) -> None:
        self.status_overrides[path] = status

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path in self.status_overrides:
            return httpx.Response(self.status_overrides[path], text="error")
        if path not in self.archives:
            return httpx.Response(404, text="Not Found")
        return httpx.Response(
            200,
            content=self.archives[path],
            headers={"content-type": "application/x-gzip"},
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def requested_paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def tarball() -> Callable[..., bytes]:
    """Factory building in-memory codeload-style archives."""
    return build_tarball


@pytest.fixture
def codeload() -> FakeCodeload:
    return FakeCodeload()


@pytest.fixture
def offline_config() -> Config:
    """Configuration with no local checkout and a fake codeload host."""
    return Config(codeload_base_url=CODELOAD_URL, local_root=None)


@pytest.fixture
def checkout_root(tmp_path: Path) -> Path:
    """A fake source checkout with one template and one example."""
    root = tmp_path / "checkout"
    basic = root / "templates" / "basic"
    basic.mkdir(parents=True)
    (basic / "package.json").write_text(
        json.dumps({"name": "basic", "description": "A basic Effect package"}), encoding="utf-8"
    )
    (basic / "src").mkdir()
    (basic / "src" / "main.ts").write_text("export {}\n", encoding="utf-8")

    cli = root / "templates" / "cli"
    cli.mkdir(parents=True)
    (cli / "package.json").write_text(json.dumps({"name": "cli"}), encoding="utf-8")

    server = root / "examples" / "http-server"
    server.mkdir(parents=True)
    (server / "package.json").write_text(json.dumps({"name": "http-server"}), encoding="utf-8")
    (server / "gitignore").write_text("node_modules\n", encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Template content
# ---------------------------------------------------------------------------


def _template_package_json() -> dict[str, Any]:
    """A package.json in the shape shipped by the Effect templates."""
    return {
        "name": "<PLACEHOLDER>",
        "version": "0.0.0",
        "type": "module",
        "description": "A basic Effect package",
        "scripts": {
            "codegen": "build-utils prepare-v2",
            "build": "pnpm build-esm && pnpm build-annotate && pnpm build-cjs",
            "check": "tsc -b tsconfig.json",
            "lint": "eslint \"**/{src,test,examples,scripts,dtslint}/**/*.{ts,mjs}\"",
            "lint-fix": "pnpm lint --fix",
            "test": "vitest",
            "changeset-version": "changeset version",
            "changeset-publish": "pnpm build && changeset publish",
        },
        "devDependencies": {
            "@changesets/changelog-github": "^0.5.1",
            "@changesets/cli": "^2.29.4",
            "@effect/eslint-plugin": "^0.3.2",
            "@effect/vitest": "^0.23.3",
            "eslint": "^9.28.0",
            "eslint-import-resolver-typescript": "^4.4.3",
            "typescript": "^5.8.3",
            "vitest": "^3.2.0",
        },
        "pnpm": {
            "patchedDependencies": {
                "@changesets/get-github-info@0.6.0": "patches/@changesets__get-github-info@0.6.0.patch",
                "babel-plugin-annotate-pure-calls@0.4.0": "patches/babel-plugin-annotate-pure-calls@0.4.0.patch",
            }
        },
    }


CHECK_WORKFLOW = textwrap.dedent(
    """\
    name: Check

    on:
      workflow_dispatch:
      pull_request:
        branches: [main]
      push:
        branches: [main]

    permissions: {}

    jobs:
      build:
        name: Build
        runs-on: ubuntu-latest
        timeout-minutes: 10
        steps:
          - uses: actions/checkout@v4
          - run: pnpm codegen
      types:
        name: Types
        runs-on: ubuntu-latest
        steps:
          - uses: actions/checkout@v4
          - run: pnpm check
      lint:
        name: Lint
        runs-on: ubuntu-latest
        steps:
          - uses: actions/checkout@v4
          - run: pnpm lint
      test:
        name: Test
        runs-on: ubuntu-latest
        steps:
          - uses: actions/checkout@v4
          - run: pnpm vitest
    """
)


def _template_files() -> dict[str, str]:
    """Relative path -> content for a complete template project."""
    return {
        "package.json": json.dumps(_template_package_json(), indent=2),
        "LICENSE": "MIT License\n\nCopyright (c) 2025 <PLACEHOLDER>\n",
        "README.md": "# Effect Package Template\n",
        "gitignore": "node_modules/\ndist/\n",
        ".envrc": "use flake\n",
        "flake.nix": "{ outputs = _: {}; }\n",
        "eslint.config.mjs": "export default []\n",
        ".changeset/config.json": json.dumps({"changelog": ["@changesets/changelog-github", {"repo": "<PLACEHOLDER>"}]}),
        ".changeset/README.md": "# Changesets\n",
        "patches/@changesets__get-github-info@0.6.0.patch": "diff --git a b\n",
        "patches/babel-plugin-annotate-pure-calls@0.4.0.patch": "diff --git a b\n",
        ".github/workflows/check.yml": CHECK_WORKFLOW,
        ".github/workflows/release.yml": "name: Release\non:\n  push:\n    branches: [main]\njobs:\n  release:\n    runs-on: ubuntu-latest\n",
        ".github/workflows/snapshot.yml": "name: Snapshot\non:\n  pull_request:\njobs: {}\n",
        "src/Program.ts": "console.log('hello')\n",
    }


def _write_tree(root: Path, files: dict[str, str]) -> Path:
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def template_project(tmp_path: Path) -> Path:
    """A freshly materialized template project on disk."""
    return _write_tree(tmp_path / "my-app", _template_files())


@pytest.fixture
def template_files() -> dict[str, str]:
    return _template_files()


@pytest.fixture
def package_json_data() -> dict[str, Any]:
    return _template_package_json()


@pytest.fixture
def write_tree() -> Callable[[Path, dict[str, str]], Path]:
    return _write_tree
