from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from ghrelease.core.config import ReleaseConfig
from ghrelease.release.model import (
    DEFAULT_ACCEPT_HEADER,
    DEFAULT_BASE_URL,
    DEFAULT_TARGET_COMMITISH,
    ReleaseSpec,
    asset_set,
)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PublishOptions:
    """Values given on the command line; None means "not given"."""

    owner: str | None = None
    repo: str | None = None
    token: str | None = None
    tag_name: str | None = None
    target_commitish: str | None = None
    name: str | None = None
    body: str | None = None
    prerelease: bool | None = None
    draft: bool | None = None
    base_url: str | None = None
    accept_header: str | None = None
    assets: tuple[Path, ...] = ()
    timeout: float | None = None


def resolve_spec(config: ReleaseConfig, options: PublishOptions) -> ReleaseSpec:
    """Merge config file values with command line values (command line wins).

    Assets from both sources are combined. Missing owner/repo/token are left
    empty here and reported by ``ReleaseSpec.validate``.
    """

    def pick(cli: T | None, file: T | None, default: T) -> T:
        if cli is not None:
            return cli
        if file is not None:
            return file
        return default

    return ReleaseSpec(
        owner=pick(options.owner, config.owner, ""),
        repo=pick(options.repo, config.repo, ""),
        token=options.token or "",
        tag_name=pick(options.tag_name, config.tag_name, None),
        target_commitish=pick(
            options.target_commitish, config.target_commitish, DEFAULT_TARGET_COMMITISH
        ),
        name=pick(options.name, config.name, None),
        body=pick(options.body, config.body, None),
        prerelease=pick(options.prerelease, config.prerelease, False),
        draft=pick(options.draft, config.draft, False),
        base_url=pick(options.base_url, config.base_url, DEFAULT_BASE_URL),
        accept_header=pick(options.accept_header, config.accept_header, DEFAULT_ACCEPT_HEADER),
        assets=asset_set((*config.assets, *options.assets)),
        timeout=pick(options.timeout, config.timeout, None),
    )
