"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    NOTHING_FOUND = 3


class ArtifactType(Enum):
    """Descriptor artifact types the resolver may download."""

    POM = "pom"
    IVY = "ivy"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration defaults; not intended to provide behavior.
    """

    MAVEN_CENTRAL_NAME = "public"
    MAVEN_CENTRAL_URL = "https://repo1.maven.org/maven2/"
    MAVEN_METADATA_FILE = "maven-metadata.xml"
    IVY_DEFAULT_PATTERN = (
        "[organisation]/[module]/(scala_[scalaVersion]/)(sbt_[sbtVersion]/)"
        "[revision]/[type]s/[artifact](-[classifier]).[ext]"
    )
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVEL_ENV = "DEPMETA_LOG_LEVEL"
    USER_AGENT = "depmeta/0.1"

    CACHE_TTL_SEC = 2 * 60 * 60
    MAX_PARENT_DEPTH = 20
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    MAX_CONCURRENCY = 8
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
