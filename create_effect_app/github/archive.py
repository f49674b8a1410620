"""Template and example materialization.

Populates a project directory either by copying a folder from the local
source checkout or by streaming a gzip tarball from GitHub's codeload host
and extracting only the requested subtree.  The tarball is never held in
memory or written to disk as a whole: the HTTP response is read in chunks,
decompressed and unpacked in a single pass.
"""

from __future__ import annotations

import asyncio
import io
import shutil
import tarfile
from collections.abc import Iterator
from pathlib import Path

import httpx

from create_effect_app.config import Config
from create_effect_app.errors import FetchError
from create_effect_app.github.spec import RepoReference, parse_repo_spec


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def strip_count(reference: RepoReference) -> int:
    """Number of leading components stripped from each archive entry."""
    return reference.strip_count


def strip_entry_path(path: str, count: int) -> str | None:
    """Drop the first *count* components of an archive entry path.

    Returns ``None`` when nothing is left, i.e. the entry is one of the
    stripped directories itself.
    """
    segments = [segment for segment in path.split("/") if segment and segment != "."]
    if len(segments) <= count:
        return None
    return "/".join(segments[count:])


def entry_filter(path: str, subdirectory: str | None) -> bool:
    """Return ``True`` if a wrapper-stripped entry path lies in *subdirectory*.

    ``packages/cli`` matches ``packages/cli`` and ``packages/cli/x.ts`` but
    not ``packages/cli-extra/x.ts``.
    """
    if not subdirectory:
        return True
    return path == subdirectory or path.startswith(subdirectory + "/")


class _ChunkReader(io.RawIOBase):
    """Read-only file object over an iterator of byte chunks."""

    def __init__(self, chunks: Iterator[bytes]) -> None:
        super().__init__()
        self._chunks = chunks
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:  # type: ignore[override]
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size


# ---------------------------------------------------------------------------
# ArchiveMaterializer
# ---------------------------------------------------------------------------


class ArchiveMaterializer:
    """Copies or downloads project sources into a destination directory.

    Built-in examples and templates are looked up in the local checkout
    first (``<local_root>/examples/<name>``, ``<local_root>/templates/<name>``)
    and otherwise fetched from the catalog repository configured in
    :class:`~create_effect_app.config.Config`.

    Args:
        config: Global configuration (codeload URL, catalog coordinates,
            local root, timeouts).
        transport: Optional ``httpx`` transport, used by tests to serve
            archives without network access.
    """

    def __init__(self, config: Config, transport: httpx.BaseTransport | None = None) -> None:
        self.config = config
        self._transport = transport

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.Client:
        """Return a fresh client bound to the codeload host."""
        return httpx.Client(
            base_url=self.config.codeload_base_url,
            timeout=httpx.Timeout(self.config.http_timeout, connect=10.0),
            follow_redirects=True,
            transport=self._transport,
        )

    def _catalog_reference(self, folder: str, name: str, kind: str) -> RepoReference:
        try:
            return RepoReference(
                owner=self.config.catalog_owner,
                repo=self.config.catalog_repo,
                ref=self.config.catalog_ref,
                subdirectory=f"{folder}/{name.strip('/')}",
            )
        except ValueError as exc:
            raise FetchError(f"{kind} {name}", "invalid name") from exc

    @staticmethod
    def _copy_directory_contents(source: Path, destination: Path) -> None:
        destination.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)

    async def _materialize_builtin(
        self, local_dir: Path | None, folder: str, name: str, kind: str, destination: Path
    ) -> None:
        if local_dir is not None:
            local_path = local_dir / name
            if local_path.is_dir():
                await asyncio.to_thread(self._copy_directory_contents, local_path, destination)
                return
        reference = self._catalog_reference(folder, name, kind)
        await self.extract_reference(reference, destination, label=f"{kind} {name}")

    def _extract_stream(self, reference: RepoReference, destination: Path, source: str) -> int:
        subdirectory = reference.subdirectory
        count = reference.strip_count
        written = 0

        def select(member: tarfile.TarInfo, dest_path: str) -> tarfile.TarInfo | None:
            nonlocal written
            inner = strip_entry_path(member.name, 1)
            if inner is None or not entry_filter(inner, subdirectory):
                return None
            name = strip_entry_path(member.name, count)
            if name is None:
                return None
            if member.islnk():
                linkname = strip_entry_path(member.linkname, count)
                if linkname is None:
                    return None
                member = member.replace(name=name, linkname=linkname, deep=False)
            else:
                member = member.replace(name=name, deep=False)
            member = tarfile.data_filter(member, dest_path)
            written += 1
            return member

        path = reference.archive_path(self.config.default_ref)
        try:
            with self._client() as client, client.stream("GET", path) as response:
                if not response.is_success:
                    raise FetchError(source, f"HTTP {response.status_code} for {path}")
                reader = _ChunkReader(response.iter_bytes(self.config.chunk_size))
                with tarfile.open(fileobj=reader, mode="r|gz") as archive:
                    archive.extractall(destination, filter=select)
        except httpx.HTTPError as exc:
            raise FetchError(source, f"{type(exc).__name__}: {exc}") from exc
        except tarfile.TarError as exc:
            raise FetchError(source, f"corrupt archive: {exc}") from exc
        except OSError as exc:
            raise FetchError(source, f"could not write files: {exc}") from exc

        if subdirectory and written == 0:
            raise FetchError(source, f"nothing found at '{subdirectory}'")
        return written

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def extract_reference(
        self,
        reference: RepoReference,
        destination: str | Path,
        *,
        label: str = "template",
    ) -> int:
        """Stream the tarball for *reference* into *destination*.

        Only entries under the reference's subdirectory are written, with
        the wrapper folder and the subdirectory prefix removed.  Existing
        files at the destination are left in place unless overwritten.

        Returns:
            The number of archive entries written.

        Raises:
            FetchError: On a non-success HTTP status, a transport error, a
                corrupt archive, or a subdirectory with no entries.
        """
        target = Path(destination)
        await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
        source = f"{label} from {reference.describe(self.config.default_ref)}"
        return await asyncio.to_thread(self._extract_stream, reference, target, source)

    async def download_example(self, example: str, destination: str | Path) -> None:
        """Materialize a built-in example into *destination*."""
        await self._materialize_builtin(
            self.config.examples_dir, "examples", example, "example", Path(destination)
        )

    async def download_template(self, template: str, destination: str | Path) -> None:
        """Materialize a built-in template into *destination*."""
        await self._materialize_builtin(
            self.config.templates_dir, "templates", template, "template", Path(destination)
        )

    async def download_from_repo(self, spec: str, destination: str | Path) -> int:
        """Parse a GitHub repo spec and extract it into *destination*.

        Raises:
            RepoSpecError: If *spec* is not a valid repo spec.
            FetchError: If the download or extraction fails.
        """
        reference = parse_repo_spec(spec)
        return await self.extract_reference(reference, destination, label="template")

    async def copy_template_folder(self, folder: str | Path, destination: str | Path) -> None:
        """Copy the contents of a local template folder into *destination*."""
        source = Path(folder).expanduser().resolve()
        if not source.is_dir():
            raise FetchError(f"template folder {source}", "directory does not exist")
        try:
            await asyncio.to_thread(self._copy_directory_contents, source, Path(destination))
        except OSError as exc:
            raise FetchError(f"template folder {source}", str(exc)) from exc
