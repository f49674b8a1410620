"""create-effect-app configuration.

Centralised, typed settings for the scaffolder. All settings use Pydantic v2
models so they are validated at construction time and can be overridden
from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

# Root of the source checkout when running from a clone of the repository.
_CHECKOUT_ROOT = Path(__file__).resolve().parent.parent


class Config(BaseModel):
    """Global create-effect-app configuration.

    Instances are created once by the CLI entry point and passed to the
    archive materializer and the catalog helpers.
    """

    codeload_base_url: str = Field(default="https://codeload.github.com")
    catalog_owner: str = Field(default="Effect-TS", min_length=1)
    catalog_repo: str = Field(default="examples", min_length=1)
    catalog_ref: str = Field(default="main", min_length=1)
    default_ref: str = Field(
        default="main", min_length=1, description="Commit-ish used when a repo spec has no @ref"
    )
    local_root: Path | None = Field(
        default=_CHECKOUT_ROOT,
        description="Directory holding local templates/ and examples/ folders",
    )
    http_timeout: float = Field(default=60.0, ge=1.0, description="Per-request timeout in seconds")
    chunk_size: int = Field(default=65536, ge=1024, description="Streaming read size in bytes")

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def templates_dir(self) -> Path | None:
        """Local ``templates/`` directory, or ``None`` without a local root."""
        if self.local_root is None:
            return None
        return self.local_root / "templates"

    @property
    def examples_dir(self) -> Path | None:
        """Local ``examples/`` directory, or ``None`` without a local root."""
        if self.local_root is None:
            return None
        return self.local_root / "examples"

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CEA_CODELOAD_URL, CEA_CATALOG_OWNER, CEA_CATALOG_REPO,
            CEA_CATALOG_REF, CEA_DEFAULT_REF, CEA_LOCAL_ROOT,
            CEA_HTTP_TIMEOUT.

        ``CEA_LOCAL_ROOT`` set to an empty string disables the local copy
        strategy entirely.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CEA_CODELOAD_URL"):
            kwargs["codeload_base_url"] = os.environ["CEA_CODELOAD_URL"].rstrip("/")
        if os.environ.get("CEA_CATALOG_OWNER"):
            kwargs["catalog_owner"] = os.environ["CEA_CATALOG_OWNER"]
        if os.environ.get("CEA_CATALOG_REPO"):
            kwargs["catalog_repo"] = os.environ["CEA_CATALOG_REPO"]
        if os.environ.get("CEA_CATALOG_REF"):
            kwargs["catalog_ref"] = os.environ["CEA_CATALOG_REF"]
        if os.environ.get("CEA_DEFAULT_REF"):
            kwargs["default_ref"] = os.environ["CEA_DEFAULT_REF"]
        if "CEA_LOCAL_ROOT" in os.environ:
            raw_root = os.environ["CEA_LOCAL_ROOT"].strip()
            kwargs["local_root"] = Path(raw_root) if raw_root else None
        if os.environ.get("CEA_HTTP_TIMEOUT"):
            kwargs["http_timeout"] = float(os.environ["CEA_HTTP_TIMEOUT"])

        return cls(**kwargs)
