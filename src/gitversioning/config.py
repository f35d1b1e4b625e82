"""Versioning configuration: rule sets, YAML loading and overrides.

Precedence, lowest first: built-in defaults, the YAML file, environment
variables, CLI arguments (see :func:`apply_overrides`).

Example ``.gitversioning.yml``::

    tag_ordering: maven
    commit:
      version_format: "{commit.short}"
    branch:
      - pattern: "release/(?<release>.*)"
        prefix: "release/"
        version_format: "{release}-SNAPSHOT"
      - pattern: ".*"
        version_format: "{version.release}-{branch}-SNAPSHOT"
    tag:
      - pattern: "v[0-9].*"
        prefix: "v"
        version_format: "{tag}"

Ref names and formats must be YAML strings: quote values such as
``provided_tag: "1.10"``, which YAML would otherwise read as the float 1.1.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import yaml

from .constants import Constants, TagOrdering
from .errors import ConfigurationError
from .models import FormatDescription
from .versioning.ordering import parse_ordering

logger = logging.getLogger(__name__)

_TOP_LEVEL_KEYS = {"enabled", "provided_branch", "provided_tag", "tag_ordering", "commit", "branch", "tag"}
_DESCRIPTION_KEYS = {"pattern", "prefix", "version_format"}
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def default_commit_description() -> FormatDescription:
    return FormatDescription(
        pattern=Constants.DEFAULT_COMMIT_PATTERN,
        version_format=Constants.DEFAULT_COMMIT_FORMAT,
    )


def default_branch_descriptions() -> Tuple[FormatDescription, ...]:
    return (FormatDescription(
        pattern=Constants.DEFAULT_BRANCH_PATTERN,
        version_format=Constants.DEFAULT_BRANCH_FORMAT,
    ),)


def default_tag_descriptions() -> Tuple[FormatDescription, ...]:
    return (FormatDescription(
        pattern=Constants.DEFAULT_TAG_PATTERN,
        version_format=Constants.DEFAULT_TAG_FORMAT,
    ),)


@dataclass(frozen=True)
class PatternRuleSet:
    """Ordered versioning rules; declaration order is priority order."""
    commit: FormatDescription = field(default_factory=default_commit_description)
    branches: Tuple[FormatDescription, ...] = field(default_factory=default_branch_descriptions)
    tags: Tuple[FormatDescription, ...] = field(default_factory=default_tag_descriptions)


@dataclass(frozen=True)
class VersioningConfiguration:
    """Process wide versioning settings."""
    enabled: bool = True
    provided_branch: Optional[str] = None  # "" forces "no branch"
    provided_tag: Optional[str] = None  # "" forces "no tags"
    tag_ordering: TagOrdering = TagOrdering.MAVEN
    rules: PatternRuleSet = field(default_factory=PatternRuleSet)


def _parse_description(raw: Any, where: str, default_pattern: Optional[str] = None) -> FormatDescription:
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"{where}: expected a mapping, got {type(raw).__name__}")

    unknown = set(raw) - _DESCRIPTION_KEYS
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", where, ", ".join(sorted(map(str, unknown))))

    pattern = raw.get("pattern", default_pattern)
    version_format = raw.get("version_format")
    if pattern is None:
        raise ConfigurationError(f"{where}: 'pattern' is required")
    if version_format is None:
        raise ConfigurationError(f"{where}: 'version_format' is required")

    prefix = raw.get("prefix") or ""
    for key, value in (("pattern", pattern), ("version_format", version_format), ("prefix", prefix)):
        if not isinstance(value, str):
            raise ConfigurationError(f"{where}: '{key}' must be a string, got {type(value).__name__} {value!r}")
    return FormatDescription(pattern=pattern, version_format=version_format, prefix=prefix)


def _parse_descriptions(raw: Any, where: str) -> Tuple[FormatDescription, ...]:
    if not isinstance(raw, list):
        raise ConfigurationError(f"{where}: expected a list of rules")
    return tuple(_parse_description(item, f"{where}[{index}]") for index, item in enumerate(raw))


def _optional_str(value: Any, key: str) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    raise ConfigurationError(
        f"'{key}' must be a string, got {type(value).__name__} {value!r}; quote numeric ref names such as \"1.10\""
    )


def _parse_enabled(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        flag = value.strip().lower()
        if flag in _TRUTHY:
            return True
        if flag in _FALSY:
            return False
    raise ConfigurationError(f"'enabled' must be true or false, got {value!r}")


def configuration_from_dict(data: Mapping[str, Any]) -> VersioningConfiguration:
    """Build a configuration from already parsed YAML data.

    Raises:
        ConfigurationError: for malformed rule definitions or values.
    """
    unknown = set(data) - _TOP_LEVEL_KEYS
    if unknown:
        logger.warning("Ignoring unknown configuration keys: %s", ", ".join(sorted(map(str, unknown))))

    defaults = PatternRuleSet()
    commit = defaults.commit
    if data.get("commit") is not None:
        commit = _parse_description(data["commit"], "commit", default_pattern=Constants.DEFAULT_COMMIT_PATTERN)

    branches = defaults.branches
    if data.get("branch") is not None:
        branches = _parse_descriptions(data["branch"], "branch")

    tags = defaults.tags
    if data.get("tag") is not None:
        tags = _parse_descriptions(data["tag"], "tag")

    return VersioningConfiguration(
        enabled=_parse_enabled(data.get("enabled", True)),
        provided_branch=_optional_str(data.get("provided_branch"), "provided_branch"),
        provided_tag=_optional_str(data.get("provided_tag"), "provided_tag"),
        tag_ordering=parse_ordering(data.get("tag_ordering", Constants.DEFAULT_TAG_ORDERING)),
        rules=PatternRuleSet(commit=commit, branches=branches, tags=tags),
    )


def load_configuration(path: Optional[str] = None, project_dir: Optional[str] = None) -> VersioningConfiguration:
    """Load the YAML configuration.

    ``path`` must exist when given. Without it, ``.gitversioning.yml`` in
    ``project_dir`` is used when present, otherwise the defaults.

    Raises:
        ConfigurationError: if the file cannot be read or parsed.
    """
    explicit = path is not None
    if path is None:
        path = os.path.join(project_dir or os.getcwd(), Constants.CONFIG_FILE)

    if not os.path.isfile(path):
        if explicit:
            raise ConfigurationError(f"Config file not found: {path}")
        logger.debug("No configuration file at %s, using defaults", path)
        return VersioningConfiguration()

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to load config {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config {path}: top level must be a mapping")
    logger.debug("Loaded configuration from %s", path)
    return configuration_from_dict(data)


def apply_env_overrides(
    config: VersioningConfiguration, environ: Optional[Mapping[str, str]] = None
) -> VersioningConfiguration:
    """Apply GITVERSIONING_* environment variables.

    A set but empty GITVERSIONING_BRANCH / GITVERSIONING_TAG forces
    "no branch" / "no tags".
    """
    env = os.environ if environ is None else environ
    changes: Dict[str, Any] = {}
    if env.get(Constants.ENV_DISABLE, "").strip().lower() in _TRUTHY:
        changes["enabled"] = False
    if Constants.ENV_PROVIDED_BRANCH in env:
        changes["provided_branch"] = env[Constants.ENV_PROVIDED_BRANCH]
    if Constants.ENV_PROVIDED_TAG in env:
        changes["provided_tag"] = env[Constants.ENV_PROVIDED_TAG]
    return replace(config, **changes) if changes else config


def apply_overrides(
    config: VersioningConfiguration,
    provided_branch: Optional[str] = None,
    provided_tag: Optional[str] = None,
    tag_ordering: Optional[str] = None,
) -> VersioningConfiguration:
    """Apply CLI overrides; None leaves the configured value in place."""
    changes: Dict[str, Any] = {}
    if provided_branch is not None:
        changes["provided_branch"] = provided_branch
    if provided_tag is not None:
        changes["provided_tag"] = provided_tag
    if tag_ordering is not None:
        changes["tag_ordering"] = parse_ordering(tag_ordering)
    return replace(config, **changes) if changes else config


def describe(descriptions: Iterable[FormatDescription]) -> str:
    """Short human readable listing of rules, used in DEBUG logs."""
    return "; ".join(f"{d.pattern} -> {d.version_format}" for d in descriptions)
