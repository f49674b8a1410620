"""GitHub sources: repo spec parsing and archive materialization.

Quick usage::

    from create_effect_app.config import Config
    from create_effect_app.github import ArchiveMaterializer, parse_repo_spec

    reference = parse_repo_spec("Effect-TS/examples/templates/basic@main")
    materializer = ArchiveMaterializer(Config())
    await materializer.extract_reference(reference, "/tmp/my-app")
"""

from create_effect_app.github.archive import (
    ArchiveMaterializer,
    entry_filter,
    strip_count,
    strip_entry_path,
)
from create_effect_app.github.spec import RepoReference, parse_repo_spec

__all__ = [
    "ArchiveMaterializer",
    "RepoReference",
    "entry_filter",
    "parse_repo_spec",
    "strip_count",
    "strip_entry_path",
]
