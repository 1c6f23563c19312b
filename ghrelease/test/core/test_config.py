"""Tests for ghrelease.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from ghrelease.core.config import (
    ReleaseConfig,
    load_config,
    load_config_or_default,
)
from ghrelease.core.result import Err, Ok


class TestReleaseConfig:
    def test_defaults_are_unset(self) -> None:
        config = ReleaseConfig()
        assert config.owner is None
        assert config.prerelease is None
        assert config.assets == ()
        assert config.timeout is None

    def test_from_dict_empty(self, tmp_path: Path) -> None:
        assert ReleaseConfig.from_dict({}, base_dir=tmp_path) == ReleaseConfig()

    def test_from_dict_full(self, tmp_path: Path) -> None:
        data: dict[str, object] = {
            "release": {
                "owner": "octocat",
                "repo": "Hello-World",
                "tag_name": "v1.0.0",
                "target_commitish": "main",
                "name": "First",
                "body": "Notes",
                "prerelease": True,
                "draft": False,
                "base_url": "https://ghe.example.com/api/v3",
                "accept_header": "application/vnd.github+json",
                "assets": ["dist/app.tar.gz", "docs"],
                "timeout": 30,
            }
        }
        config = ReleaseConfig.from_dict(data, base_dir=tmp_path)
        assert config.owner == "octocat"
        assert config.target_commitish == "main"
        assert config.prerelease is True
        assert config.draft is False
        assert config.base_url == "https://ghe.example.com/api/v3"
        assert config.assets == (tmp_path / "dist/app.tar.gz", tmp_path / "docs")
        assert config.timeout == 30.0

    def test_wrong_types_are_ignored(self, tmp_path: Path) -> None:
        data: dict[str, object] = {"release": {"owner": 5, "draft": "yes", "timeout": True}}
        config = ReleaseConfig.from_dict(data, base_dir=tmp_path)
        assert config.owner is None
        assert config.draft is None
        assert config.timeout is None

    def test_token_is_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="token"):
            ReleaseConfig.from_dict({"release": {"token": "x"}}, base_dir=tmp_path)

    def test_assets_must_be_a_list_of_strings(self, tmp_path: Path) -> None:
        with pytest.raises(TypeError, match="assets"):
            ReleaseConfig.from_dict({"release": {"assets": "dist"}}, base_dir=tmp_path)


class TestLoadConfig:
    def test_load_valid_config(self, tmp_path: Path) -> None:
        config_file = tmp_path / "ghrelease.toml"
        config_file.write_text(
            """
# release settings
[release]
owner = "octocat"
repo = "Hello-World"
draft = true
assets = ["build/app.zip"]
""",
            encoding="utf-8",
        )
        result = load_config(config_file)
        assert isinstance(result, Ok)
        assert result.value.owner == "octocat"
        assert result.value.draft is True
        assert result.value.assets == (tmp_path / "build/app.zip",)

    def test_load_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "missing.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_load_invalid_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "ghrelease.toml"
        config_file.write_text("this is not valid toml [[[", encoding="utf-8")
        result = load_config(config_file)
        assert isinstance(result, Err)
        assert "TOML" in result.error.message

    def test_load_token_in_file_is_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "ghrelease.toml"
        config_file.write_text('[release]\ntoken = "ghp_x"\n', encoding="utf-8")
        result = load_config(config_file)
        assert isinstance(result, Err)
        assert "Invalid config structure" in result.error.message
        assert result.error.path == config_file


class TestLoadConfigOrDefault:
    def test_no_file_gives_defaults(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert load_config_or_default(None) == Ok(ReleaseConfig())

    def test_picks_up_file_in_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "ghrelease.toml").write_text('[release]\nowner = "me"\n', encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        result = load_config_or_default(None)
        assert isinstance(result, Ok)
        assert result.value.owner == "me"

    def test_explicit_missing_path_is_error(self, tmp_path: Path) -> None:
        result = load_config_or_default(tmp_path / "custom.toml")
        assert isinstance(result, Err)
