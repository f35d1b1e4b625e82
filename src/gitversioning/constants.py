"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    CONFIG_ERROR = 1
    REPOSITORY_ERROR = 2


class TagOrdering(Enum):
    """Version orderings available for ranking tags matched by one rule.

    Args:
        Enum (string): Ordering names as written in the configuration file.
    """

    MAVEN = "maven"
    PEP440 = "pep440"
    SEMVER = "semver"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    CONFIG_FILE = ".gitversioning.yml"
    POM_XML_FILE = "pom.xml"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    GIT_EXECUTABLE = "git"
    GIT_TIMEOUT = 30  # Timeout in seconds for each git invocation

    SNAPSHOT_SUFFIX = "-SNAPSHOT"
    SHORT_COMMIT_LENGTH = 7

    DEFAULT_COMMIT_PATTERN = ".*"
    DEFAULT_COMMIT_FORMAT = "{commit}"
    DEFAULT_BRANCH_PATTERN = ".*"
    DEFAULT_BRANCH_FORMAT = "{branch}-SNAPSHOT"
    DEFAULT_TAG_PATTERN = ".*"
    DEFAULT_TAG_FORMAT = "{tag}"
    DEFAULT_TAG_ORDERING = TagOrdering.MAVEN.value

    # Environment overrides
    ENV_LOG_LEVEL = "GITVERSIONING_LOG_LEVEL"
    ENV_DISABLE = "GITVERSIONING_DISABLE"
    ENV_PROVIDED_BRANCH = "GITVERSIONING_BRANCH"
    ENV_PROVIDED_TAG = "GITVERSIONING_TAG"

    # Flat properties handed to the model rewriter
    PROPERTY_COMMIT = "project.commit"
    PROPERTY_TAG = "project.tag"
    PROPERTY_BRANCH = "project.branch"
