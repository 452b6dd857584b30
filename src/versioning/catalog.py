"""Gradle version catalog reader.

Loads ``[versions]`` and ``[libraries]`` from a ``libs.versions.toml`` file
into ``DependencyPin`` records. The property-backed versions
(``Constants.CATALOG_PROPERTY_VERSIONS``) are declared from ``gradle.properties``
values, replacing any ``[versions]`` entry of the same name; other properties
never touch the catalog.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

try:
    import tomllib as toml  # type: ignore
except Exception:  # pylint: disable=broad-exception-caught
    import tomli as toml  # type: ignore

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from .models import DependencyPin

logger = logging.getLogger(__name__)

_RICH_VERSION_KEYS = ("strictly", "require", "prefer")


def _rich_version(value: Any) -> Optional[str]:
    """Return a plain version from a string or a rich version table."""
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        for key in _RICH_VERSION_KEYS:
            candidate = value.get(key)
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
    return None


def _resolve_versions(
    raw: Mapping[str, Any],
    overrides: Mapping[str, str],
    property_versions: Iterable[str],
) -> Dict[str, str]:
    versions: Dict[str, str] = {}
    for name, value in raw.items():
        resolved = _rich_version(value)
        if resolved is not None:
            versions[name] = resolved
    for name in property_versions:
        override = (overrides.get(name) or "").strip()
        if override:
            versions[name] = override
    return versions


def _library_module(entry: Any) -> Optional[str]:
    if isinstance(entry, str):
        parts = entry.split(":")
        if len(parts) >= 2:
            return f"{parts[0]}:{parts[1]}"
        return None
    if not isinstance(entry, dict):
        return None
    module = entry.get("module")
    if isinstance(module, str) and ":" in module:
        return module
    group, name = entry.get("group"), entry.get("name")
    if isinstance(group, str) and isinstance(name, str):
        return f"{group}:{name}"
    return None


def _library_version(entry: Any, versions: Mapping[str, str]) -> Optional[str]:
    if isinstance(entry, str):
        parts = entry.split(":")
        return parts[2] if len(parts) >= 3 and parts[2] else None
    if not isinstance(entry, dict):
        return None
    version = entry.get("version")
    if isinstance(version, dict) and "ref" in version:
        return versions.get(version["ref"])
    return _rich_version(version)


def parse_catalog(
    data: Mapping[str, Any],
    overrides: Optional[Mapping[str, str]] = None,
    property_versions: Iterable[str] = Constants.CATALOG_PROPERTY_VERSIONS,
) -> List[DependencyPin]:
    """Build pins from an already parsed catalog document.

    Args:
        data: Parsed TOML document.
        overrides: Property values keyed by catalog version name.
        property_versions: Version names that properties declare or replace.

    Returns:
        Pins in catalog order; libraries without a module or version are skipped.
    """
    versions = _resolve_versions(data.get("versions", {}) or {}, overrides or {}, property_versions)
    pins: List[DependencyPin] = []
    for alias, entry in (data.get("libraries", {}) or {}).items():
        module = _library_module(entry)
        version = _library_version(entry, versions)
        if module is None or version is None:
            if is_debug_enabled(logger):
                logger.debug(
                    "Skipping catalog library",
                    extra=extra_context(
                        event="decision",
                        component="catalog",
                        action="parse_catalog",
                        outcome="skipped",
                        target=alias
                    )
                )
            continue
        pins.append(DependencyPin(alias=alias, module=module, version=version))
    return pins


def load_catalog(path: str, overrides: Optional[Mapping[str, str]] = None) -> List[DependencyPin]:
    """Read a ``libs.versions.toml`` file into pins.

    Raises:
        FileNotFoundError: if the catalog does not exist.
        ValueError: if the file is not valid TOML.
    """
    with open(path, "rb") as fh:
        data = toml.load(fh) or {}
    pins = parse_catalog(data, overrides)
    logger.info("Loaded %d pinned libraries from %s", len(pins), path)
    return pins
