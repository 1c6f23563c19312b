"""Tests for the ``ghrelease publish`` command."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from typer.testing import CliRunner

import ghrelease.cli.commands.publish_cmd as publish_cmd
from ghrelease.cli.app import app
from ghrelease.core.result import Result
from ghrelease.output.console import ConsoleProtocol
from ghrelease.release.errors import ReleaseError
from ghrelease.release.http import MockReleaseAPI
from ghrelease.release.model import PublishReport, ReleaseSpec
from ghrelease.release.orchestrator import run as real_run

TOKEN = "this_is_not_a_real_token"

runner = CliRunner(env={"COLUMNS": "400"})


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return tmp_path


def _use_api(monkeypatch: pytest.MonkeyPatch, github: MockReleaseAPI) -> list[ReleaseSpec]:
    seen: list[ReleaseSpec] = []

    def fake_run(
        spec: ReleaseSpec,
        *,
        console: ConsoleProtocol,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Result[PublishReport, ReleaseError]:
        seen.append(spec)
        return real_run(spec, console=console, transport=github.transport)

    monkeypatch.setattr(publish_cmd, "run", fake_run)
    return seen


def _base_args() -> list[str]:
    return [
        "publish",
        "--owner",
        "octocat",
        "--repo",
        "Hello-World",
        "--tag",
        "v1.0.0",
        "--base-url",
        "https://api.example.test",
    ]


class TestPublish:
    def test_uploads_and_lists_asset_names(
        self, workdir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        github = MockReleaseAPI()
        _use_api(monkeypatch, github)
        (workdir / "app.tar.gz").write_bytes(b"tarball")
        (workdir / "notes.txt").write_text("notes", encoding="utf-8")

        result = runner.invoke(
            app,
            [*_base_args(), "--token", TOKEN, "app.tar.gz", "notes.txt"],
        )

        assert result.exit_code == 0, result.output
        assert "app.tar.gz" in result.output
        assert "notes.txt" in result.output
        assert len(github.upload_requests) == 2
        assert github.create_json()["tag_name"] == "v1.0.0"
        assert TOKEN not in result.output

    def test_token_from_environment(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        github = MockReleaseAPI()
        seen = _use_api(monkeypatch, github)

        result = runner.invoke(app, _base_args(), env={"GITHUB_TOKEN": TOKEN})

        assert result.exit_code == 0, result.output
        assert seen[0].token == TOKEN
        assert github.create_requests[0].headers["Authorization"] == f"token {TOKEN}"

    def test_config_file_supplies_values(
        self, workdir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        github = MockReleaseAPI()
        seen = _use_api(monkeypatch, github)
        (workdir / "dist").mkdir()
        (workdir / "dist" / "app.bin").write_bytes(b"\x00\x01")
        (workdir / "ghrelease.toml").write_text(
            """
[release]
owner = "octocat"
repo = "Hello-World"
tag_name = "v2.0.0"
prerelease = true
base_url = "https://api.example.test"
assets = ["dist/app.bin"]
""",
            encoding="utf-8",
        )

        result = runner.invoke(app, ["publish", "--token", TOKEN, "--name", "Two"])

        assert result.exit_code == 0, result.output
        spec = seen[0]
        assert spec.tag_name == "v2.0.0"
        assert spec.name == "Two"
        assert spec.prerelease is True
        assert spec.assets == frozenset({Path.cwd() / "dist" / "app.bin"})
        assert github.create_json()["prerelease"] is True

    def test_body_file(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        github = MockReleaseAPI()
        _use_api(monkeypatch, github)
        (workdir / "NOTES.md").write_text("## Changes\n- fixed", encoding="utf-8")

        result = runner.invoke(
            app, [*_base_args(), "--token", TOKEN, "--body-file", "NOTES.md"]
        )

        assert result.exit_code == 0, result.output
        assert github.create_json()["body"] == "## Changes\n- fixed"


class TestPublishErrors:
    def test_missing_token_is_user_error(
        self, workdir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        github = MockReleaseAPI()
        _use_api(monkeypatch, github)

        result = runner.invoke(app, _base_args())

        assert result.exit_code == 1
        assert "token" in result.output
        assert github.requests == []

    def test_api_failure_is_network_error(
        self, workdir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        github = MockReleaseAPI(create_status=401)
        _use_api(monkeypatch, github)

        result = runner.invoke(app, [*_base_args(), "--token", TOKEN])

        assert result.exit_code == 4
        assert result.output.count("Bad credentials") == 1
        assert TOKEN not in result.output

    def test_body_and_body_file_are_exclusive(
        self, workdir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        github = MockReleaseAPI()
        _use_api(monkeypatch, github)
        (workdir / "NOTES.md").write_text("notes", encoding="utf-8")

        result = runner.invoke(
            app,
            [*_base_args(), "--token", TOKEN, "--body", "x", "--body-file", "NOTES.md"],
        )

        assert result.exit_code == 1
        assert "mutually exclusive" in result.output
        assert github.requests == []

    def test_invalid_config_file(self, workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        github = MockReleaseAPI()
        _use_api(monkeypatch, github)
        (workdir / "ghrelease.toml").write_text('[release]\ntoken = "x"\n', encoding="utf-8")

        result = runner.invoke(app, [*_base_args(), "--token", TOKEN])

        assert result.exit_code == 1
        assert github.requests == []


class TestDryRun:
    def test_prints_plan_and_sends_nothing(
        self, workdir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        github = MockReleaseAPI()
        seen = _use_api(monkeypatch, github)
        site = workdir / "site"
        site.mkdir()
        (site / "index.html").write_text("<html></html>", encoding="utf-8")

        result = runner.invoke(
            app, [*_base_args(), "--token", TOKEN, "--dry-run", "site", "missing.bin"]
        )

        assert result.exit_code == 0, result.output
        assert seen == []
        assert github.requests == []
        assert site.is_dir()
        assert not (workdir / "site.zip").exists()
        assert "site.zip" in result.output
        assert "does not exist" in result.output
        assert "(not shown)" in result.output
        assert TOKEN not in result.output


def test_version() -> None:
    from ghrelease import __version__

    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_plan_body_is_json(workdir: Path) -> None:
    from ghrelease.output.console import MockConsole

    console = MockConsole()
    spec = ReleaseSpec(owner="o", repo="r", token=TOKEN, tag_name="v1")
    publish_cmd._print_plan(spec, console)  # pyright: ignore[reportPrivateUsage]

    trace = console.find("POST https://api.github.com/repos/o/r/releases")[0].message
    body = trace.split(" > body: ", 1)[1]
    assert json.loads(body)["tag_name"] == "v1"
    assert TOKEN not in console.text


def test_plan_warns_about_existing_zip(tmp_path: Path) -> None:
    from ghrelease.output.console import MockConsole

    site = tmp_path / "site"
    site.mkdir()
    (tmp_path / "site.zip").write_bytes(b"old")
    console = MockConsole()
    spec = ReleaseSpec(owner="o", repo="r", token=TOKEN, assets=frozenset({site}))
    publish_cmd._print_plan(spec, console)  # pyright: ignore[reportPrivateUsage]

    assert console.find(f"Would overwrite existing {tmp_path / 'site.zip'}")
    assert (tmp_path / "site.zip").read_bytes() == b"old"
