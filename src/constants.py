"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_WARNINGS = 3
    VERSION_ERROR = 4
    PUBLISH_ERROR = 5
    CONFIG_ERROR = 6


class ReportFormats(Enum):
    """Export formats for the dependency audit report.

    Args:
        Enum (string): Export formats supported by the audit.
    """

    JSON = "json"
    CSV = "csv"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REPOSITORY_URL_MAVEN_CENTRAL = "https://repo1.maven.org/maven2"
    MAVEN_METADATA_FILE = "maven-metadata.xml"
    PRERELEASE_MARKERS = ("rc", "alpha", "beta")

    PROPERTIES_FILE = "gradle.properties"
    CATALOG_FILE = "gradle/libs.versions.toml"
    CONFIG_FILE_CANDIDATES = ["releasegate.yml", "releasegate.yaml", "releasegate.json"]
    DOCS_DIR = "build/libs"
    DOCS_PATTERN = "*-javadoc.jar"

    PRODUCT = "spring-session"
    LONG_NAME = "Spring Session VMware GemFire"
    DESCRIPTION = "Spring Session For VMware GemFire"
    JAVA_VERSION = "17"
    ARTIFACT_NAME_TEMPLATE = "{product}-{product_line_version}-gemfire-{base_version}"
    JAVADOC_TITLE_TEMPLATE = (
        "Spring Session {product_line_version} for VMware GemFire {base_version} Java API Reference"
    )

    # Property names read from gradle.properties
    PROP_PROJECT_VERSION = "version"
    PROP_DEPENDENCY_VERSION = "gemfireVersion"
    PROP_PRODUCT_VERSION = "springSessionVersion"
    PROP_DOCS_BUCKET = "docsGCSBucket"
    PROP_DOCS_PROJECT = "docsGCSProject"
    PROP_ADDITIONAL_REPOS = "additionalMavenRepoURLs"
    # Catalog versions declared from properties (or --set) rather than [versions]
    CATALOG_PROPERTY_VERSIONS = ("gemfireVersion", "springDataGemFireVersion", "springTestGemFireVersion")

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVEL_ENV = "RELEASEGATE_LOG_LEVEL"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BACKOFF_SEC = 0.5
