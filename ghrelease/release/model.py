from __future__ import annotations

import mimetypes
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import quote

import httpx

from ghrelease.core.result import Err, Ok, Result
from ghrelease.release.errors import ReleaseError

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_ACCEPT_HEADER = "application/vnd.github.v3+json"
DEFAULT_TARGET_COMMITISH = "master"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# GitHub returns upload_url as an RFC 6570 template ending in this suffix.
UPLOAD_TEMPLATE_SUFFIX = "{?name,label}"


def asset_set(paths: Iterable[str | Path]) -> frozenset[Path]:
    """Collapse duplicate asset paths.

    Paths are made absolute and normalized, but symlinks are kept so a linked
    asset uploads under the configured name.
    """
    return frozenset(Path(os.path.normpath(Path(p).expanduser().absolute())) for p in paths)


@dataclass(frozen=True, slots=True)
class ReleaseSpec:
    """Everything needed for one release run."""

    owner: str
    repo: str
    token: str = field(repr=False)
    tag_name: str | None = None
    target_commitish: str = DEFAULT_TARGET_COMMITISH
    name: str | None = None
    body: str | None = None
    prerelease: bool = False
    draft: bool = False
    base_url: str = DEFAULT_BASE_URL
    accept_header: str = DEFAULT_ACCEPT_HEADER
    assets: frozenset[Path] = frozenset()
    # Seconds; None waits indefinitely.
    timeout: float | None = None

    @property
    def releases_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/repos/{self.owner}/{self.repo}/releases"

    def validate(self) -> Result[ReleaseSpec, ReleaseError]:
        missing = [
            label
            for label, value in (
                ("owner", self.owner),
                ("repo", self.repo),
                ("token", self.token),
            )
            if not value or not value.strip()
        ]
        if missing:
            return Err(
                ReleaseError(
                    kind="configuration",
                    message=f"missing required setting(s): {', '.join(missing)}",
                    hint="set them in ghrelease.toml or pass --owner/--repo/--token",
                )
            )
        return Ok(self)


@dataclass(frozen=True, slots=True)
class UploadEndpoint:
    """Asset upload URL of a created release, template suffix removed."""

    url: str

    @classmethod
    def from_template(cls, template: str) -> UploadEndpoint:
        return cls(url=template.removesuffix(UPLOAD_TEMPLATE_SUFFIX))

    def literal_url(self, name: str) -> str:
        """URL the upload is sent to; ``name`` is percent-encoded."""
        q = quote(name, safe="")
        return f"{self.url}?name={q}&label={q}"

    def query_url(self, name: str) -> str:
        """Same endpoint with escaped query parameters, for display."""
        return str(httpx.URL(self.url, params={"name": name, "label": name}))


@dataclass(frozen=True, slots=True)
class AssetJob:
    """One upload: ``upload_path`` is sent under ``name``.

    For a directory asset ``upload_path`` is the generated zip and
    ``packaged`` is True.
    """

    source: Path
    upload_path: Path
    name: str
    packaged: bool = False

    @property
    def content_type(self) -> str:
        guessed, _encoding = mimetypes.guess_type(self.name)
        return guessed or DEFAULT_CONTENT_TYPE


@dataclass(frozen=True, slots=True)
class PublishReport:
    endpoint: UploadEndpoint
    uploaded: tuple[str, ...] = ()
    skipped: tuple[Path, ...] = ()
