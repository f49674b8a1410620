"""GitHub repository spec parsing.

Turns user input such as ``owner/repo``, ``owner/repo/sub/dir@ref``,
``gh:owner/repo`` or ``https://github.com/owner/repo/tree/main/sub/dir``
into an immutable :class:`RepoReference`.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

from create_effect_app.errors import RepoSpecError

GITHUB_HOST = "github.com"

_PREFIXES = ("gh:", "github:")
_URL_SCHEMES = ("http://", "https://")


class RepoReference(BaseModel):
    """A parsed pointer into a GitHub repository."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., min_length=1)
    repo: str = Field(..., min_length=1)
    ref: str | None = Field(default=None, description="Branch, tag or commit hash")
    subdirectory: str | None = Field(
        default=None, description="'/'-joined path inside the repository"
    )

    @field_validator("subdirectory")
    @classmethod
    def _check_subdirectory(cls, value: str | None) -> str | None:
        if value is None:
            return None
        segments = value.split("/")
        if any(segment in ("", ".", "..") for segment in segments):
            raise ValueError(f"subdirectory must be a plain relative path, got {value!r}")
        return value

    @property
    def subdirectory_segments(self) -> tuple[str, ...]:
        if self.subdirectory is None:
            return ()
        return tuple(self.subdirectory.split("/"))

    @property
    def strip_count(self) -> int:
        """Leading path components removed from every archive entry.

        One for the archive's wrapper folder plus one per subdirectory
        segment.
        """
        return 1 + len(self.subdirectory_segments)

    def commitish(self, default: str = "main") -> str:
        return self.ref or default

    def archive_path(self, default_ref: str = "main") -> str:
        """Path of the gzip tarball on the codeload host."""
        return f"/{self.owner}/{self.repo}/tar.gz/{self.commitish(default_ref)}"

    def describe(self, default_ref: str = "main") -> str:
        """Human-readable ``owner/repo@ref[/subdir]`` used in messages."""
        text = f"{self.owner}/{self.repo}@{self.commitish(default_ref)}"
        if self.subdirectory:
            text += f"/{self.subdirectory}"
        return text


def _join_subdirectory(segments: list[str]) -> str | None:
    return "/".join(segments) or None


def _build(spec: str, owner: str, repo: str, ref: str | None, subdir: str | None) -> RepoReference:
    try:
        return RepoReference(owner=owner, repo=repo, ref=ref, subdirectory=subdir)
    except ValueError as exc:
        # pydantic.ValidationError is a ValueError subclass
        raise RepoSpecError(spec, "path segments must not be '.' or '..'") from exc


def _parse_url(spec: str, text: str) -> RepoReference:
    try:
        parts = urlsplit(text)
        hostname = parts.hostname
        parts.port  # noqa: B018 - raises ValueError on a malformed port
    except ValueError as exc:
        raise RepoSpecError(spec, "malformed URL") from exc

    if not hostname or hostname.lower() != GITHUB_HOST:
        raise RepoSpecError(spec, f"host must be {GITHUB_HOST}")

    segments = [segment for segment in parts.path.split("/") if segment]
    if len(segments) < 2:
        raise RepoSpecError(spec, "expected https://github.com/<owner>/<repo>")

    owner, repo = segments[0], segments[1]
    ref: str | None = None
    if len(segments) >= 4 and segments[2] == "tree":
        ref = segments[3]
        subdir = _join_subdirectory(segments[4:])
    else:
        subdir = _join_subdirectory(segments[2:])
    return _build(spec, owner, repo, ref, subdir)


def _parse_shorthand(spec: str, text: str) -> RepoReference:
    ref: str | None = None
    at = text.rfind("@")
    if at > 0:
        ref = text[at + 1 :]
        text = text[:at]
        if not ref:
            raise RepoSpecError(spec, "empty ref after '@'")

    segments = [segment for segment in text.split("/") if segment]
    if len(segments) < 2:
        raise RepoSpecError(spec, "expected <owner>/<repo>")
    return _build(spec, segments[0], segments[1], ref, _join_subdirectory(segments[2:]))


def parse_repo_spec(spec: str) -> RepoReference:
    """Parse a GitHub repository spec.

    Accepted shapes, tried in order:

    * an optional ``gh:`` or ``github:`` prefix, stripped first;
    * ``http(s)://github.com/<owner>/<repo>[/tree/<ref>][/<subdir>...]``;
    * ``<owner>/<repo>[/<subdir>...][@<ref>]``, where the ref is taken from
      the last ``@`` that is not the first character.

    Raises:
        RepoSpecError: If no owner and repo can be identified, the URL host
            is not ``github.com``, or the URL is malformed.
    """
    text = spec.strip()
    for prefix in _PREFIXES:
        if text.startswith(prefix):
            text = text[len(prefix) :]

    if text.startswith(_URL_SCHEMES):
        return _parse_url(spec, text)
    return _parse_shorthand(spec, text)
