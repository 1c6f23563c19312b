from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from ghrelease.cli.context import PublishOptions, resolve_spec
from ghrelease.core.config import load_config_or_default
from ghrelease.core.errors import ErrorCode
from ghrelease.core.result import Err
from ghrelease.output.console import ConsoleProtocol, RichConsole, Style
from ghrelease.output.errors import print_release_error, release_error_exit_code
from ghrelease.release.creator import JSON_CONTENT_TYPE
from ghrelease.release.http import auth_headers, describe_request
from ghrelease.release.model import ReleaseSpec
from ghrelease.release.orchestrator import run
from ghrelease.release.packager import plan_job
from ghrelease.release.payload import encode_payload, release_payload


def _exit(err: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=int(code))


def _read_body(body: str | None, body_file: Path | None) -> str | None:
    if body_file is None:
        return body
    if body is not None:
        _exit("--body and --body-file are mutually exclusive", code=ErrorCode.USER_ERROR)
    try:
        return body_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _exit(f"cannot read --body-file {body_file}: {e}", code=ErrorCode.USER_ERROR)


def _print_plan(spec: ReleaseSpec, console: ConsoleProtocol) -> None:
    headers = auth_headers(spec)
    headers["Content-Type"] = JSON_CONTENT_TYPE
    body = encode_payload(release_payload(spec)).decode("utf-8")
    console.header("Planned release")
    console.print(describe_request("POST", spec.releases_url, headers, body=body))

    console.header("Planned uploads")
    if not spec.assets:
        console.print("  (none)", Style.DIM)
    for path in sorted(spec.assets):
        job = plan_job(path)
        if job is None:
            console.warning(f"File {path} does not exist.")
            continue
        if job.packaged and job.upload_path.exists():
            console.warning(f"Would overwrite existing {job.upload_path}")
        zipped = " (zipped directory)" if job.packaged else ""
        console.print(f"  - {job.name} [{job.content_type}]{zipped} <- {path}")


def publish(
    assets: list[Path] | None = typer.Argument(
        None, help="Files or directories to attach (directories are zipped)"
    ),
    config: Path | None = typer.Option(
        None, "--config", help="Config file (default: ./ghrelease.toml if present)"
    ),
    owner: str | None = typer.Option(None, "--owner", help="Repository owner"),
    repo: str | None = typer.Option(None, "--repo", help="Repository name"),
    token: str | None = typer.Option(
        None, "--token", envvar="GITHUB_TOKEN", show_envvar=True, help="API token"
    ),
    tag: str | None = typer.Option(None, "--tag", help="Tag name of the release"),
    target: str | None = typer.Option(
        None, "--target", help="Commitish the tag is created from (default: master)"
    ),
    name: str | None = typer.Option(None, "--name", help="Release title"),
    body: str | None = typer.Option(None, "--body", help="Release notes"),
    body_file: Path | None = typer.Option(None, "--body-file", help="Read release notes from file"),
    prerelease: bool | None = typer.Option(None, "--prerelease/--no-prerelease"),
    draft: bool | None = typer.Option(None, "--draft/--no-draft"),
    base_url: str | None = typer.Option(None, "--base-url", help="API root URL"),
    accept: str | None = typer.Option(None, "--accept", help="Accept header media type"),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Per-request timeout in seconds (default: none)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace HTTP requests"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the plan, send nothing"),
) -> None:
    """Create a GitHub release and upload its assets."""
    console = RichConsole(verbose=verbose)

    loaded = load_config_or_default(config)
    if isinstance(loaded, Err):
        _exit(loaded.error.message, code=ErrorCode.USER_ERROR)

    options = PublishOptions(
        owner=owner,
        repo=repo,
        token=token,
        tag_name=tag,
        target_commitish=target,
        name=name,
        body=_read_body(body, body_file),
        prerelease=prerelease,
        draft=draft,
        base_url=base_url,
        accept_header=accept,
        assets=tuple(assets or ()),
        timeout=timeout,
    )
    spec = resolve_spec(loaded.value, options)

    if dry_run:
        _print_plan(spec, console)
        return

    result = run(spec, console=console)
    if isinstance(result, Err):
        print_release_error(result.error, console)
        raise typer.Exit(code=release_error_exit_code(result.error))

    report = result.value
    for path in report.skipped:
        console.print(f"skipped missing asset: {path}", Style.DIM)
    console.success(f"release {spec.tag_name or '(untagged)'} published")
    for asset_name in report.uploaded:
        typer.echo(asset_name)
