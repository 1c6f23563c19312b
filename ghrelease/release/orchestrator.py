"""Release run: create the release, then upload every asset concurrently.

Uploads start only once the creation call has returned the upload endpoint.
Each asset gets its own asyncio task; all tasks are created before any is
awaited and the run joins all of them before reporting. When several uploads
fail, every failure is printed and the first one (in launch order) becomes the
run's error.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TypeAlias

import httpx

from ghrelease.core.result import Err, Ok, Result
from ghrelease.output.console import ConsoleProtocol
from ghrelease.release.creator import create_release
from ghrelease.release.errors import PackagingError, ReleaseError
from ghrelease.release.http import HttpTransport
from ghrelease.release.model import AssetJob, PublishReport, ReleaseSpec, UploadEndpoint
from ghrelease.release.packager import packaged
from ghrelease.release.uploader import upload_asset

__all__ = ["publish", "run"]

_AssetOutcome: TypeAlias = Result[AssetJob | None, ReleaseError]


async def _publish_asset(
    http: HttpTransport,
    endpoint: UploadEndpoint,
    path: Path,
    spec: ReleaseSpec,
    *,
    console: ConsoleProtocol,
) -> _AssetOutcome:
    try:
        with packaged(path, console=console) as job:
            if job is None:
                return Ok(None)
            result = await upload_asset(http, endpoint, job, spec, console=console)
    except PackagingError as e:
        return Err(ReleaseError(kind="packaging", message=str(e)))

    if isinstance(result, Ok):
        console.success(f"uploaded {result.value.name}")
    return result


def _collect(
    paths: list[Path],
    outcomes: list[_AssetOutcome | BaseException],
    *,
    endpoint: UploadEndpoint,
    console: ConsoleProtocol,
) -> Result[PublishReport, ReleaseError]:
    uploaded: list[str] = []
    skipped: list[Path] = []
    failures: list[ReleaseError] = []

    for path, outcome in zip(paths, outcomes, strict=True):
        if isinstance(outcome, BaseException):
            # Not an expected failure mode of a unit; let it surface as-is.
            raise outcome
        match outcome:
            case Ok(None):
                skipped.append(path)
            case Ok(job):
                uploaded.append(job.name)
            case Err(error):
                failures.append(error)

    if failures:
        first, *others = failures
        for error in others:
            console.error(f"also failed: {error.pretty()}")
        if others:
            first = ReleaseError(
                kind=first.kind,
                message=first.message,
                hint=f"{len(others)} other asset upload(s) also failed",
                detail=first.detail,
            )
        return Err(first)

    return Ok(PublishReport(endpoint=endpoint, uploaded=tuple(uploaded), skipped=tuple(skipped)))


async def publish(
    spec: ReleaseSpec,
    *,
    console: ConsoleProtocol,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Result[PublishReport, ReleaseError]:
    """Create the release described by ``spec`` and upload all its assets.

    Args:
        spec: Release metadata and asset paths
        console: Progress, warnings and (verbose) request traces
        transport: Optional httpx transport override, used by tests

    Returns:
        Ok with what was uploaded and skipped, or Err with the first failure
    """
    validated = spec.validate()
    if isinstance(validated, Err):
        return validated

    async with HttpTransport(timeout=spec.timeout, transport=transport) as http:
        created = await create_release(http, spec, console=console)
        if isinstance(created, Err):
            return created
        endpoint = created.value

        paths = sorted(spec.assets)
        if paths:
            console.info(f"release created, uploading {len(paths)} asset(s)")
        tasks = [
            asyncio.create_task(_publish_asset(http, endpoint, path, spec, console=console))
            for path in paths
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

    return _collect(paths, list(outcomes), endpoint=endpoint, console=console)


def run(
    spec: ReleaseSpec,
    *,
    console: ConsoleProtocol,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Result[PublishReport, ReleaseError]:
    """Blocking entry point for build scripts and the CLI."""
    return asyncio.run(publish(spec, console=console, transport=transport))
