"""Tests for release configuration loading and precedence."""
from __future__ import annotations

import json
import os

import pytest

from constants import Constants
from release_config import (
    ConfigError,
    ReleaseConfig,
    load_config_file,
    load_release_config,
    parse_overrides,
    split_repository_urls,
)
from versioning.parser import MalformedVersionError


def _write(path, text):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


@pytest.fixture
def project(tmp_path):
    _write(
        str(tmp_path / "gradle.properties"),
        "version=3.3.1\n"
        "gemfireVersion=1.15.2\n"
        "springSessionVersion=3.3.0\n"
        "docsGCSBucket=docs\n"
        "docsGCSProject=docs-project\n"
        "additionalMavenRepoURLs=https://repo.example/a, ,null,https://repo.example/b\n",
    )
    return tmp_path


class TestLoadReleaseConfig:
    """Precedence of defaults, config file, properties and overrides."""

    def test_defaults_without_any_files(self, tmp_path):
        config = load_release_config(str(tmp_path))
        assert config.product == Constants.PRODUCT
        assert config.project_version is None
        assert config.dependency_version is None
        assert config.repositories == [Constants.REPOSITORY_URL_MAVEN_CENTRAL]

    def test_properties_populate_release_settings(self, project):
        config = load_release_config(str(project))
        assert config.project_version == "3.3.1"
        assert config.dependency_version == "1.15.2"
        assert config.product_line_version == "3.3"
        assert config.docs_bucket == "docs"
        assert config.docs_project == "docs-project"
        assert config.repositories == [
            Constants.REPOSITORY_URL_MAVEN_CENTRAL,
            "https://repo.example/a",
            "https://repo.example/b",
        ]
        assert config.properties["gemfireVersion"] == "1.15.2"

    def test_overrides_win_over_properties(self, project):
        config = load_release_config(str(project), overrides={"gemfireVersion": "10.1.0", "version": "3.3.2"})
        assert config.dependency_version == "10.1.0"
        assert config.project_version == "3.3.2"
        assert config.properties["gemfireVersion"] == "10.1.0"

    def test_yaml_config_file_is_discovered(self, project):
        _write(
            str(project / "releasegate.yml"),
            "release:\n"
            "  product: spring-session\n"
            "  product_line_version: '2.7'\n"
            "  java_version: 8\n"
            "  repositories:\n"
            "    - https://repo.example/extra\n",
        )
        config = load_release_config(str(project))
        # explicit product line wins over the derived one
        assert config.product_line_version == "2.7"
        assert config.java_version == "8"
        assert "https://repo.example/extra" in config.repositories

    def test_properties_win_over_config_file(self, project):
        _write(str(project / "release.yml"), "docs:\n  bucket: from-config\n  project: p\n")
        config = load_release_config(str(project), config_path=str(project / "release.yml"))
        assert config.docs_bucket == "docs"

    def test_json_config_file(self, tmp_path):
        path = tmp_path / "release.json"
        path.write_text(json.dumps({"long_name": "Long", "dependency_version_property": "geodeVersion"}))
        (tmp_path / "gradle.properties").write_text("geodeVersion=1.15.1\n")
        config = load_release_config(str(tmp_path), config_path=str(path))
        assert config.long_name == "Long"
        assert config.dependency_version == "1.15.1"

    def test_missing_explicit_config_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            load_release_config(str(tmp_path), config_path=str(tmp_path / "nope.yml"))

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("release: [unclosed\n")
        with pytest.raises(ConfigError):
            load_release_config(str(tmp_path), config_path=str(path))

    def test_non_mapping_config_raises(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config_file(str(path))

    def test_malformed_product_version_raises(self, tmp_path):
        (tmp_path / "gradle.properties").write_text("springSessionVersion=3\n")
        with pytest.raises(MalformedVersionError):
            load_release_config(str(tmp_path))


class TestHelpers:
    """Override parsing, repository splitting and required settings."""

    def test_parse_overrides(self):
        assert parse_overrides(["a=1", " b = x=y "]) == {"a": "1", "b": "x=y"}

    @pytest.mark.parametrize("pair", ["novalue", "=1"])
    def test_parse_overrides_rejects_invalid(self, pair):
        with pytest.raises(ConfigError):
            parse_overrides([pair])

    def test_split_repository_urls(self):
        assert split_repository_urls("null") == []
        assert split_repository_urls(None) == []
        assert split_repository_urls("a, b,,") == ["a", "b"]

    def test_require_reports_missing_setting(self):
        config = ReleaseConfig()
        with pytest.raises(ConfigError) as exc_info:
            config.require("docs_bucket")
        assert "docs_bucket" in str(exc_info.value)

    def test_resolve_path(self, tmp_path):
        config = ReleaseConfig(project_dir=str(tmp_path))
        assert config.resolve_path("gradle.properties") == os.path.join(str(tmp_path), "gradle.properties")
        assert config.resolve_path("/abs/file") == "/abs/file"


class TestVersionFieldTypes:
    """Version fields loaded from YAML keep every digit or are rejected."""

    def test_unquoted_float_version_is_rejected(self, project):
        _write(str(project / "releasegate.yml"), "release:\n  product_line_version: 3.10\n")
        with pytest.raises(ConfigError) as exc_info:
            load_release_config(str(project))
        assert "product_line_version" in str(exc_info.value)

    @pytest.mark.parametrize("field_name", ["project_version", "dependency_version", "java_version"])
    def test_float_rejected_for_every_version_field(self, tmp_path, field_name):
        path = tmp_path / "release.json"
        path.write_text(json.dumps({field_name: 1.5}))
        with pytest.raises(ConfigError):
            load_release_config(str(tmp_path), config_path=str(path))

    def test_quoted_version_keeps_trailing_zero(self, project):
        _write(str(project / "releasegate.yml"), "release:\n  product_line_version: '3.10'\n")
        config = load_release_config(str(project))
        assert config.product_line_version == "3.10"


class TestEscapedProperties:
    """gradle.properties values are decoded before they reach the config."""

    def test_escaped_repository_url(self, tmp_path):
        (tmp_path / "gradle.properties").write_text(
            "additionalMavenRepoURLs=https\\://repo.example.com/maven\n"
        )
        config = load_release_config(str(tmp_path))
        assert config.repositories == [
            Constants.REPOSITORY_URL_MAVEN_CENTRAL,
            "https://repo.example.com/maven",
        ]

    def test_malformed_escape_is_a_config_error(self, tmp_path):
        (tmp_path / "gradle.properties").write_text("version=\\uZZZZ\n")
        with pytest.raises(ConfigError):
            load_release_config(str(tmp_path))


class TestProductLinePrecedence:
    """An explicit product line is kept; otherwise it is derived."""

    def test_config_file_product_line_beats_derived(self, project):
        _write(str(project / "releasegate.yml"), "product_line_version: '3.2'\n")
        config = load_release_config(str(project))
        assert config.product_line_version == "3.2"

    def test_override_product_line_beats_config_file(self, project):
        _write(str(project / "releasegate.yml"), "product_line_version: '3.2'\n")
        config = load_release_config(str(project), overrides={"product_line_version": "3.4"})
        assert config.product_line_version == "3.4"

    def test_derived_from_overridden_product_version(self, project):
        config = load_release_config(str(project), overrides={"springSessionVersion": "3.5.0"})
        assert config.product_line_version == "3.5"
