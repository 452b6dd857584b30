"""Release artifact naming and the release descriptor."""

from dataclasses import asdict, dataclass
from typing import Dict, Optional

from release_config import ConfigError, ReleaseConfig
from versioning.parser import get_base_version


@dataclass(frozen=True)
class ReleaseDescriptor:
    """Publishing metadata handed to the package registry."""
    artifact_name: str
    long_name: str
    description: str
    javadoc_title: str
    project_version: Optional[str]
    java_version: str

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Serialize with camelCase keys, matching the publishing metadata names."""
        data = asdict(self)
        return {
            "artifactName": data["artifact_name"],
            "longName": data["long_name"],
            "description": data["description"],
            "javadocTitle": data["javadoc_title"],
            "projectVersion": data["project_version"],
            "javaVersion": data["java_version"],
        }


def _template_values(config: ReleaseConfig) -> Dict[str, str]:
    return {
        "product": config.product,
        "product_line_version": config.require("product_line_version"),
        "base_version": get_base_version(config.require("dependency_version")),
        "java_version": config.java_version,
        "project_version": config.project_version or "",
    }


def _render(template: str, values: Dict[str, str], setting: str) -> str:
    try:
        return template.format(**values)
    except (KeyError, IndexError, ValueError) as exc:
        raise ConfigError(f"Invalid {setting} '{template}': {exc}") from exc


def artifact_name(config: ReleaseConfig) -> str:
    """Name under which the release's artifacts and docs are published,
    e.g. ``spring-session-3.3-gemfire-1.15``."""
    return _render(config.artifact_name_template, _template_values(config), "artifact_name_template")


def javadoc_title(config: ReleaseConfig) -> str:
    """Title of the generated Java API reference."""
    return _render(config.javadoc_title_template, _template_values(config), "javadoc_title_template")


def build_descriptor(config: ReleaseConfig) -> ReleaseDescriptor:
    """Collect the publishing metadata for ``config``."""
    return ReleaseDescriptor(
        artifact_name=artifact_name(config),
        long_name=config.long_name,
        description=config.description,
        javadoc_title=javadoc_title(config),
        project_version=config.project_version,
        java_version=config.java_version,
    )
