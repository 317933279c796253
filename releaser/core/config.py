"""Typed configuration loading.

Configuration lives in an optional ``releaser.toml`` at the root of the
tree being released:

    [release]
    extra_scopes = ["apps/foo-docker", "apps/bar-docker"]
    doc_extensions = [".md", ".sh"]
    descriptor_extension = ".xml"
    tag_placeholder = "HEAD"
    strict = false

    [tool]
    command = "mvn"
    skip_tests = true
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_EXTRA_SCOPES",
    "ConfigError",
    "ReleaseConfig",
    "ReleaseSettings",
    "ToolSettings",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "releaser.toml"

# Docker aggregator modules whose pom.xml versions the release tool does not manage.
DEFAULT_EXTRA_SCOPES: tuple[str, ...] = (
    "lighty-applications/lighty-rcgnmi-app-aggregator/lighty-rcgnmi-app-docker",
    "lighty-applications/lighty-rnc-app-aggregator/lighty-rnc-app-docker",
)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseSettings:
    """What gets substituted, and how failures are treated."""

    extra_scopes: tuple[str, ...] = DEFAULT_EXTRA_SCOPES
    doc_extensions: tuple[str, ...] = (".md", ".sh")
    descriptor_extension: str = ".xml"
    tag_placeholder: str = "HEAD"
    strict: bool = False


@dataclass(frozen=True, slots=True)
class ToolSettings:
    """External release tool invocation."""

    command: str = "mvn"
    skip_tests: bool = True


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Main configuration container."""

    release: ReleaseSettings = field(default_factory=ReleaseSettings)
    tool: ToolSettings = field(default_factory=ToolSettings)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create a config from parsed TOML.

        Raises:
            ValueError: If a present key has the wrong type.
        """
        release: StrDict = get_table(data, "release") or {}
        tool: StrDict = get_table(data, "tool") or {}
        defaults = ReleaseSettings()
        tool_defaults = ToolSettings()

        return cls(
            release=ReleaseSettings(
                extra_scopes=_str_list(release, "extra_scopes", defaults.extra_scopes),
                doc_extensions=_str_list(release, "doc_extensions", defaults.doc_extensions),
                descriptor_extension=_str(
                    release, "descriptor_extension", defaults.descriptor_extension
                ),
                tag_placeholder=_str(release, "tag_placeholder", defaults.tag_placeholder),
                strict=_bool(release, "strict", defaults.strict),
            ),
            tool=ToolSettings(
                command=_str(tool, "command", tool_defaults.command),
                skip_tests=_bool(tool, "skip_tests", tool_defaults.skip_tests),
            ),
        )


def _str(table: StrDict, key: str, default: str) -> str:
    if key not in table:
        return default
    value = get_str(table, key)
    if value is None:
        raise ValueError(f"'{key}' must be a non-empty string")
    return value


def _bool(table: StrDict, key: str, default: bool) -> bool:
    if key not in table:
        return default
    value = get_bool(table, key)
    if value is None:
        raise ValueError(f"'{key}' must be a boolean")
    return value


def _str_list(table: StrDict, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    if key not in table:
        return default
    value = get_str_list(table, key)
    if value is None:
        raise ValueError(f"'{key}' must be a list of strings")
    return value


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
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
    """Load and validate configuration from a TOML file.

    Args:
        path: Path to releaser.toml

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(result.value))
    except ValueError as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def load_config_or_default(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load config if the file exists, otherwise return the defaults.

    Unlike a missing file, a file that exists but cannot be parsed is an error.
    """
    if not path.exists():
        return Ok(ReleaseConfig())
    return load_config(path)
