"""Release configuration: defaults, YAML/JSON config file, gradle.properties and overrides.

Precedence, lowest first: built-in defaults, the release config file, the
project's ``gradle.properties`` and finally ``--set KEY=VALUE`` overrides,
which replace properties the way ``-D`` system properties do in the build.

``product_line_version`` is the exception: a value set in the config file or
with ``--set product_line_version=...`` is explicit and is kept; only when it
is unset is it derived from the ``springSessionVersion`` property.

Version fields in YAML or JSON must be strings or integers. An unquoted
``3.10`` loads as the float ``3.1``, so floats are rejected.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Mapping, Optional

import yaml

from constants import Constants
from common.properties import load_properties
from versioning.parser import get_base_version

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when release configuration is missing or invalid."""


@dataclass
class ReleaseConfig:  # pylint: disable=too-many-instance-attributes
    """Everything the naming and publishing steps need about one release line."""

    project_dir: str = "."
    product: str = Constants.PRODUCT
    product_line_version: Optional[str] = None
    java_version: str = Constants.JAVA_VERSION
    artifact_name_template: str = Constants.ARTIFACT_NAME_TEMPLATE
    javadoc_title_template: str = Constants.JAVADOC_TITLE_TEMPLATE
    long_name: str = Constants.LONG_NAME
    description: str = Constants.DESCRIPTION
    project_version: Optional[str] = None
    dependency_version: Optional[str] = None
    dependency_version_property: str = Constants.PROP_DEPENDENCY_VERSION
    product_version_property: str = Constants.PROP_PRODUCT_VERSION
    docs_bucket: Optional[str] = None
    docs_project: Optional[str] = None
    catalog_path: str = Constants.CATALOG_FILE
    properties_path: str = Constants.PROPERTIES_FILE
    repositories: List[str] = field(default_factory=lambda: [Constants.REPOSITORY_URL_MAVEN_CENTRAL])
    properties: Dict[str, str] = field(default_factory=dict)

    def require(self, name: str) -> str:
        """Return a mandatory string setting or raise ConfigError naming it."""
        value = getattr(self, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ConfigError(f"Missing release setting '{name}'")
        return value

    def resolve_path(self, path: str) -> str:
        """Resolve ``path`` relative to the project directory."""
        if os.path.isabs(path):
            return path
        return os.path.join(self.project_dir, path)


_CONFIG_FIELDS = {f.name for f in fields(ReleaseConfig)} - {"project_dir", "properties"}
_VERSION_FIELDS = ("product_line_version", "project_version", "dependency_version", "java_version")


def parse_overrides(pairs: Iterable[str]) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` pairs; the value may itself contain '='."""
    overrides: Dict[str, str] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ConfigError(f"Invalid override '{pair}'. Expected KEY=VALUE.")
        key, value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise ConfigError(f"Invalid override '{pair}'. Key must not be empty.")
        overrides[key] = value.strip()
    return overrides


def _find_config_file(project_dir: str) -> Optional[str]:
    for candidate in Constants.CONFIG_FILE_CANDIDATES:
        path = os.path.join(project_dir, candidate)
        if os.path.isfile(path):
            return path
    return None


def load_config_file(path: str) -> Dict[str, Any]:
    """Load the release section of a YAML or JSON config file.

    A top-level ``release`` mapping is used when present, otherwise the whole
    document.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    section = data.get("release", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'release' section in {path} must be a mapping")
    docs = section.get("docs")
    if isinstance(docs, dict):
        section = dict(section)
        section.setdefault("docs_bucket", docs.get("bucket"))
        section.setdefault("docs_project", docs.get("project"))
    return section


def split_repository_urls(raw: Optional[str]) -> List[str]:
    """Split a comma-separated repository list, ignoring blanks and ``null``."""
    if not raw:
        return []
    return [url.strip() for url in raw.split(",") if url.strip() and url.strip() != "null"]


def _apply_file_settings(config: ReleaseConfig, settings: Mapping[str, Any]) -> None:
    for key, value in settings.items():
        if key not in _CONFIG_FIELDS or value is None:
            continue
        if key == "repositories":
            if isinstance(value, str):
                value = split_repository_urls(value)
            elif not isinstance(value, list):
                raise ConfigError("'repositories' must be a list of URLs")
            merged = list(config.repositories)
            for url in value:
                if str(url) not in merged:
                    merged.append(str(url))
            config.repositories = merged
        elif key in _VERSION_FIELDS and (isinstance(value, bool) or not isinstance(value, (str, int))):
            raise ConfigError(
                f"'{key}' must be a quoted string, got {type(value).__name__} {value!r}"
            )
        else:
            setattr(config, key, str(value))


def _apply_properties(config: ReleaseConfig, props: Mapping[str, str]) -> None:
    config.properties = dict(props)
    if Constants.PROP_PROJECT_VERSION in props:
        config.project_version = props[Constants.PROP_PROJECT_VERSION]
    if config.dependency_version_property in props:
        config.dependency_version = props[config.dependency_version_property]
    if config.product_line_version is None and config.product_version_property in props:
        config.product_line_version = get_base_version(props[config.product_version_property])
    if Constants.PROP_DOCS_BUCKET in props:
        config.docs_bucket = props[Constants.PROP_DOCS_BUCKET]
    if Constants.PROP_DOCS_PROJECT in props:
        config.docs_project = props[Constants.PROP_DOCS_PROJECT]
    for url in split_repository_urls(props.get(Constants.PROP_ADDITIONAL_REPOS)):
        if url not in config.repositories:
            config.repositories.append(url)


def load_release_config(
    project_dir: str = ".",
    config_path: Optional[str] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> ReleaseConfig:
    """Assemble the release configuration for ``project_dir``.

    Raises:
        ConfigError: if an explicit config file cannot be read or is invalid,
            or gradle.properties holds a malformed escape.
        MalformedVersionError: if the product version property has no minor segment.
    """
    config = ReleaseConfig(project_dir=project_dir)

    path = config_path or _find_config_file(project_dir)
    if path:
        if config_path and not os.path.isfile(config_path):
            raise ConfigError(f"Config file not found: {config_path}")
        logger.debug("Loading release config from %s", path)
        _apply_file_settings(config, load_config_file(path))

    properties_path = config.resolve_path(config.properties_path)
    try:
        props = load_properties(properties_path)
    except ValueError as exc:
        raise ConfigError(f"Invalid properties file {properties_path}: {exc}") from exc
    props.update(overrides or {})
    if (overrides or {}).get("product_line_version"):
        config.product_line_version = overrides["product_line_version"]
    _apply_properties(config, props)
    return config
