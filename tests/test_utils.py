"""Unit tests for shared utilities (create_effect_app.utils).

Tests cover:
- load_json / save_json
- ensure_dir / remove_path
- is_valid_package_name / validate_project_name
- Rich print helpers (smoke tests)
"""

from __future__ import annotations

import json

import pytest

from create_effect_app.errors import ManifestError, ProjectNameError
from create_effect_app.utils import (
    create_progress,
    ensure_dir,
    is_valid_package_name,
    load_json,
    print_error,
    print_file_list,
    print_info,
    print_success,
    print_warning,
    remove_path,
    save_json,
    validate_project_name,
)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


class TestJsonIO:
    @pytest.mark.unit
    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "package.json"
        save_json({"name": "app", "version": "0.0.0"}, path)
        assert load_json(path) == {"name": "app", "version": "0.0.0"}

    @pytest.mark.unit
    def test_save_uses_two_space_indent(self, tmp_path):
        path = tmp_path / "package.json"
        save_json({"scripts": {"build": "tsc"}}, path)
        assert path.read_text() == json.dumps({"scripts": {"build": "tsc"}}, indent=2)

    @pytest.mark.unit
    def test_save_keeps_unicode(self, tmp_path):
        path = tmp_path / "package.json"
        save_json({"author": "Zoë"}, path)
        assert "Zoë" in path.read_text(encoding="utf-8")

    @pytest.mark.unit
    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ManifestError, match="Could not read"):
            load_json(tmp_path / "missing.json")

    @pytest.mark.unit
    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ManifestError, match="not valid JSON"):
            load_json(path)

    @pytest.mark.unit
    def test_load_non_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ManifestError, match="JSON object"):
            load_json(path)


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


class TestFileHelpers:
    @pytest.mark.unit
    def test_ensure_dir_creates_parents(self, tmp_path):
        result = ensure_dir(tmp_path / "a" / "b")
        assert result.is_dir()

    @pytest.mark.unit
    def test_remove_file(self, tmp_path):
        path = tmp_path / "flake.nix"
        path.write_text("{}")
        assert remove_path(path) is True
        assert not path.exists()

    @pytest.mark.unit
    def test_remove_directory_tree(self, tmp_path):
        (tmp_path / ".github" / "workflows").mkdir(parents=True)
        (tmp_path / ".github" / "workflows" / "check.yml").write_text("name: Check\n")
        assert remove_path(tmp_path / ".github") is True
        assert not (tmp_path / ".github").exists()

    @pytest.mark.unit
    def test_remove_missing_is_silent(self, tmp_path):
        assert remove_path(tmp_path / "nothing-here") is False


# ---------------------------------------------------------------------------
# Project names
# ---------------------------------------------------------------------------


class TestProjectNames:
    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["my-app", "app2", "@scope/pkg", "a.b_c~d"])
    def test_valid_package_names(self, name):
        assert is_valid_package_name(name)

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["", "MyApp", ".hidden", "_private", "has space", "a" * 215])
    def test_invalid_package_names(self, name):
        assert not is_valid_package_name(name)

    @pytest.mark.unit
    def test_validate_resolves_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert validate_project_name("  my-app  ") == (tmp_path / "my-app").resolve()

    @pytest.mark.unit
    def test_validate_nested_path_uses_basename(self, tmp_path):
        assert validate_project_name(str(tmp_path / "apps" / "web")).name == "web"

    @pytest.mark.unit
    def test_validate_empty(self):
        with pytest.raises(ProjectNameError, match="must not be empty"):
            validate_project_name("   ")

    @pytest.mark.unit
    def test_validate_bad_basename(self, tmp_path):
        with pytest.raises(ProjectNameError, match="Invalid project name 'Bad'"):
            validate_project_name(str(tmp_path / "Bad"))

    @pytest.mark.unit
    def test_validate_existing_directory(self, tmp_path):
        (tmp_path / "taken").mkdir()
        with pytest.raises(ProjectNameError, match="already exists"):
            validate_project_name(str(tmp_path / "taken"))


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


class TestPrintHelpers:
    @pytest.mark.unit
    def test_print_helpers_do_not_raise(self, capsys):
        print_info("info")
        print_success("done")
        print_warning("careful")
        print_error("broken")
        print_file_list("Files:", ["package.json", "LICENSE"])
        out = capsys.readouterr().out
        assert "done" in out
        assert "Error:" in out
        assert "package.json" in out

    @pytest.mark.unit
    def test_create_progress(self):
        with create_progress() as progress:
            task = progress.add_task("Fetching...", total=None)
            assert task is not None
