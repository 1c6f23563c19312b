"""Release settings read from ``ghrelease.toml``.

The file holds a single ``[release]`` table. Every key is optional; values
given on the command line win. The API token is not a config key; it comes
from ``--token`` or ``GITHUB_TOKEN`` only.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_float,
    get_str,
    get_str_list,
    get_table,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "ghrelease.toml"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Values from the ``[release]`` table; None means "not set"."""

    owner: str | None = None
    repo: str | None = None
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

    @classmethod
    def from_dict(cls, data: StrDict, *, base_dir: Path) -> ReleaseConfig:
        """Create a ReleaseConfig from parsed TOML.

        Relative asset paths are resolved against ``base_dir``.
        """
        release: StrDict = get_table(data, "release") or {}
        if "token" in release:
            raise ValueError("token must not be stored in the config file")

        assets_raw = release.get("assets")
        assets = get_str_list(release, "assets")
        if assets_raw is not None and assets is None:
            raise TypeError("release.assets must be a list of paths")

        return cls(
            owner=get_str(release, "owner"),
            repo=get_str(release, "repo"),
            tag_name=get_str(release, "tag_name"),
            target_commitish=get_str(release, "target_commitish"),
            name=get_str(release, "name"),
            body=get_str(release, "body"),
            prerelease=get_bool(release, "prerelease"),
            draft=get_bool(release, "draft"),
            base_url=get_str(release, "base_url"),
            accept_header=get_str(release, "accept_header"),
            assets=tuple(base_dir / a for a in (assets or [])),
            timeout=get_float(release, "timeout"),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and parse a ``ghrelease.toml`` file.

    Args:
        path: Path to the config file

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(result.value, base_dir=path.parent))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path | None) -> Result[ReleaseConfig, ConfigError]:
    """Load ``path`` if given, else ``./ghrelease.toml`` if present, else defaults."""
    if path is not None:
        return load_config(path)
    default = Path.cwd() / CONFIG_FILENAME
    if default.is_file():
        return load_config(default)
    return Ok(ReleaseConfig())
