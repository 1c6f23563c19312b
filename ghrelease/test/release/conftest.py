from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from ghrelease.release.http import MockReleaseAPI
from ghrelease.release.model import ReleaseSpec, asset_set


@pytest.fixture
def github() -> MockReleaseAPI:
    return MockReleaseAPI()


@pytest.fixture
def make_spec() -> Callable[..., ReleaseSpec]:
    """Factory for the octocat/Hello-World release used across these tests."""

    def _make(*assets: Path, **overrides: object) -> ReleaseSpec:
        values: dict[str, object] = {
            "owner": "octocat",
            "repo": "Hello-World",
            "token": "this_is_not_a_real_token",
            "tag_name": "v1.0.0",
            "target_commitish": "master",
            "name": "v1.0.0",
            "body": "Description of the release",
            "base_url": "https://api.example.test",
            "assets": asset_set(assets),
        }
        values.update(overrides)
        return ReleaseSpec(**values)  # type: ignore[arg-type]

    return _make
