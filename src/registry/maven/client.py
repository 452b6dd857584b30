"""Maven repository client: candidate versions from ``maven-metadata.xml``."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Iterable, List, Optional

from constants import Constants
from common.http_client import robust_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url


logger = logging.getLogger(__name__)


def metadata_url(repository: str, module: str) -> str:
    """Build the metadata URL for ``groupId:artifactId`` in ``repository``.

    Raises:
        ValueError: if ``module`` is not a ``groupId:artifactId`` coordinate.
    """
    parts = module.split(":")
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise ValueError(f"Invalid Maven coordinate '{module}'. Expected 'groupId:artifactId'.")
    group_id, artifact_id = parts[0].strip(), parts[1].strip()
    base = repository.rstrip("/")
    return f"{base}/{group_id.replace('.', '/')}/{artifact_id}/{Constants.MAVEN_METADATA_FILE}"


def parse_metadata(text: str) -> List[str]:
    """Return the versions listed in a ``maven-metadata.xml`` document, in file order."""
    root = ET.fromstring(text)
    versions: List[str] = []
    versioning = root.find("versioning")
    if versioning is not None:
        versions_elem = versioning.find("versions")
        if versions_elem is not None:
            for version_elem in versions_elem.findall("version"):
                ver_text = version_elem.text
                if ver_text and ver_text.strip():
                    versions.append(ver_text.strip())
    return versions


def _fetch_from(repository: str, module: str) -> Optional[List[str]]:
    """Versions from one repository, or None when it has no usable metadata."""
    url = metadata_url(repository, module)
    status_code, _, text = robust_get(url)
    if status_code != 200 or not text:
        if status_code == 0:
            logger.warning("Maven metadata lookup failed for %s at %s: %s", module, safe_url(url), text)
        elif is_debug_enabled(logger):
            logger.debug(
                "Maven metadata not available",
                extra=extra_context(
                    event="http_response",
                    component="maven_client",
                    action="fetch_versions",
                    outcome="handled_non_2xx",
                    status_code=status_code,
                    target=safe_url(url)
                )
            )
        return None
    try:
        return parse_metadata(text)
    except ET.ParseError as exc:
        logger.warning("Malformed Maven metadata for %s at %s: %s", module, safe_url(url), exc)
        return None


def fetch_versions(module: str, repositories: Iterable[str]) -> Optional[List[str]]:
    """Collect candidate versions for ``module`` across ``repositories``.

    The union keeps first-seen order. Returns None when no repository
    served metadata, which callers report instead of treating as "no updates".
    """
    found = False
    versions: List[str] = []
    seen = set()
    for repository in repositories:
        repo_versions = _fetch_from(repository, module)
        if repo_versions is None:
            continue
        found = True
        for ver in repo_versions:
            if ver not in seen:
                seen.add(ver)
                versions.append(ver)
    if not found:
        return None
    return versions
