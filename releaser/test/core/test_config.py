"""Tests for releaser.core.config module."""

from __future__ import annotations

from pathlib import Path

from releaser.core.config import (
    DEFAULT_EXTRA_SCOPES,
    ReleaseConfig,
    load_config,
    load_config_or_default,
)
from releaser.core.result import Err, Ok


class TestReleaseConfigDefaults:
    def test_defaults(self) -> None:
        cfg = ReleaseConfig()
        assert cfg.release.extra_scopes == DEFAULT_EXTRA_SCOPES
        assert cfg.release.doc_extensions == (".md", ".sh")
        assert cfg.release.descriptor_extension == ".xml"
        assert cfg.release.tag_placeholder == "HEAD"
        assert cfg.release.strict is False
        assert cfg.tool.command == "mvn"
        assert cfg.tool.skip_tests is True

    def test_from_empty_dict(self) -> None:
        assert ReleaseConfig.from_dict({}) == ReleaseConfig()


class TestLoadConfig:
    def test_full_file(self, tmp_path: Path) -> None:
        path = tmp_path / "releaser.toml"
        path.write_text(
            """
[release]
extra_scopes = ["apps/a-docker", "apps/b-docker"]
doc_extensions = [".md", ".adoc"]
tag_placeholder = "main"
strict = true

[tool]
command = "./mvnw -B"
skip_tests = false
""",
            encoding="utf-8",
        )

        result = load_config(path)

        assert isinstance(result, Ok)
        cfg = result.value
        assert cfg.release.extra_scopes == ("apps/a-docker", "apps/b-docker")
        assert cfg.release.doc_extensions == (".md", ".adoc")
        assert cfg.release.descriptor_extension == ".xml"
        assert cfg.release.tag_placeholder == "main"
        assert cfg.release.strict is True
        assert cfg.tool.command == "./mvnw -B"
        assert cfg.tool.skip_tests is False

    def test_empty_scope_list_is_allowed(self, tmp_path: Path) -> None:
        path = tmp_path / "releaser.toml"
        path.write_text("[release]\nextra_scopes = []\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.release.extra_scopes == ()

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.toml")

        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "releaser.toml"
        path.write_text("[release\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_wrong_type(self, tmp_path: Path) -> None:
        path = tmp_path / "releaser.toml"
        path.write_text('[release]\nextra_scopes = "apps/a-docker"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "extra_scopes" in result.error.message

    def test_wrong_bool(self, tmp_path: Path) -> None:
        path = tmp_path / "releaser.toml"
        path.write_text('[tool]\nskip_tests = "yes"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "skip_tests" in result.error.message


class TestLoadConfigOrDefault:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        result = load_config_or_default(tmp_path / "releaser.toml")

        assert result == Ok(ReleaseConfig())

    def test_broken_file_is_still_an_error(self, tmp_path: Path) -> None:
        path = tmp_path / "releaser.toml"
        path.write_text("not = [valid", encoding="utf-8")

        assert isinstance(load_config_or_default(path), Err)
