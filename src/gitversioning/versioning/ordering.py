"""Orderings used to pick the latest of several tags matched by one rule."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Tuple

import semantic_version
from packaging import version as pep440

from ..common.logging_utils import extra_context, is_debug_enabled
from ..common.string_util import remove_prefix
from ..constants import TagOrdering
from ..errors import ConfigurationError
from .comparable import ComparableVersion

logger = logging.getLogger(__name__)

VersionKey = Callable[[str], Any]


def _maven_key(value: str) -> ComparableVersion:
    return ComparableVersion(value)


def _pep440_key(value: str) -> Tuple[int, Any]:
    # Unparseable versions rank below every valid one, ordered among themselves Maven style.
    try:
        return 1, pep440.Version(value)
    except pep440.InvalidVersion:
        return 0, ComparableVersion(value)


def _semver_key(value: str) -> Tuple[int, Any]:
    try:
        return 1, semantic_version.Version.coerce(value)
    except ValueError:
        return 0, ComparableVersion(value)


_KEYS = {
    TagOrdering.MAVEN: _maven_key,
    TagOrdering.PEP440: _pep440_key,
    TagOrdering.SEMVER: _semver_key,
}


def version_key(ordering: TagOrdering) -> VersionKey:
    """Return the sort key function for ``ordering``."""
    return _KEYS[ordering]


def parse_ordering(name: str) -> TagOrdering:
    """Map a configured ordering name to :class:`TagOrdering`.

    Raises:
        ConfigurationError: for an unknown name.
    """
    try:
        return TagOrdering(str(name).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(o.value for o in TagOrdering)
        raise ConfigurationError(f"Unknown tag ordering '{name}', expected one of: {allowed}") from exc


def latest_tag(tags: Iterable[str], prefix: str, ordering: TagOrdering = TagOrdering.MAVEN) -> Optional[str]:
    """Return the tag with the greatest version, comparing with ``prefix`` stripped.

    On equal versions the tag seen first wins. Returns None for no tags.
    """
    key = version_key(ordering)
    best: Optional[str] = None
    best_key: Any = None
    for tag in tags:
        tag_key = key(remove_prefix(tag, prefix))
        if best is None or tag_key > best_key:
            best, best_key = tag, tag_key

    if best is not None and is_debug_enabled(logger):
        logger.debug(
            "Selected latest tag",
            extra=extra_context(
                event="decision",
                component="ordering",
                action="latest_tag",
                target=best,
                ordering=ordering.value,
            ),
        )
    return best
