"""Resolve a project version from branch, tag and commit rules."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .common.log_once import LoggingBouncer
from .common.logging_utils import extra_context, is_debug_enabled
from .common.string_util import matches
from .config import PatternRuleSet, VersioningConfiguration, describe
from .constants import TagOrdering
from .errors import ConfigurationError
from .inspector import RepositoryInspector
from .models import GAV, GAVGit, RefType, ResolutionFacts, VersionSource
from .versioning.ordering import latest_tag
from .versioning.substitution import build_version_data, format_version

logger = logging.getLogger(__name__)


def apply_provided_refs(
    facts: ResolutionFacts,
    provided_branch: Optional[str],
    provided_tag: Optional[str],
) -> ResolutionFacts:
    """Replace detected branch/tags with provided values.

    None keeps detection, "" forces none, anything else replaces.
    """
    head_branch = facts.head_branch
    if provided_branch is not None:
        head_branch = provided_branch or None

    head_tags = facts.head_tags
    if provided_tag is not None:
        head_tags = (provided_tag,) if provided_tag else ()

    return ResolutionFacts(
        head_commit=facts.head_commit,
        head_branch=head_branch,
        head_tags=head_tags,
        dirty=facts.dirty,
        location=facts.location,
    )


def select_version_source(
    rules: PatternRuleSet,
    head_commit: str,
    head_branch: Optional[str],
    head_tags: Sequence[str],
    tag_forced: bool = False,
    tag_ordering: TagOrdering = TagOrdering.MAVEN,
) -> VersionSource:
    """Pick the winning ref and rule.

    A branch is only considered when no tag is forced; tags are only
    considered when branch detection did not apply. The first rule with a
    match wins; among the tags matched by one rule the latest version wins.
    Without any match the commit rule is used.
    """
    source = VersionSource(RefType.COMMIT, head_commit, rules.commit)

    if head_branch and not tag_forced:
        for description in rules.branches:
            if matches(description.pattern, head_branch):
                source = VersionSource(RefType.BRANCH, head_branch, description)
                break
    elif head_tags:
        for description in rules.tags:
            candidates: List[str] = [tag for tag in head_tags if matches(description.pattern, tag)]
            tag = latest_tag(candidates, description.prefix, tag_ordering)
            if tag is not None:
                source = VersionSource(RefType.TAG, tag, description)
                break

    return source


class VersionResolver:
    """Turns repository facts and a project coordinate into a version.

    Args:
        configuration: rules, provided refs and tag ordering.
        bouncer: de-duplicates the dirty tree warning across resolutions.
    """

    def __init__(self, configuration: VersioningConfiguration, bouncer: Optional[LoggingBouncer] = None):
        self.configuration = configuration
        self.bouncer = bouncer if bouncer is not None else LoggingBouncer()

    def determine(self, gav: GAV, facts: ResolutionFacts) -> GAVGit:
        """Resolve ``gav`` against ``facts``.

        Raises:
            ConfigurationError: if ``gav`` has no declared version.
            TemplateError: if the winning rule references an unknown placeholder.
            PatternError: if a rule consulted on the way has an invalid pattern.
        """
        if not gav.version:
            raise ConfigurationError(f"'version' is missing for {gav.group_id}:{gav.artifact_id}")

        config = self.configuration
        effective = apply_provided_refs(facts, config.provided_branch, config.provided_tag)

        if is_debug_enabled(logger):
            logger.debug(
                "Resolving %s (branch=%s, tags=%s) with branch rules [%s], tag rules [%s]",
                gav, effective.head_branch, list(effective.head_tags),
                describe(config.rules.branches), describe(config.rules.tags),
                extra=extra_context(event="function_entry", component="resolver", action="determine"),
            )

        source = select_version_source(
            config.rules,
            effective.head_commit,
            effective.head_branch,
            effective.head_tags,
            tag_forced=bool(config.provided_tag),
            tag_ordering=config.tag_ordering,
        )

        data = build_version_data(gav, effective.head_commit, source.ref_type, source.ref_name, source.description)
        version = format_version(source.description.version_format, data)

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved %s to %s",
                gav, version,
                extra=extra_context(
                    event="function_exit", component="resolver", action="determine",
                    outcome="success", ref_type=source.ref_type.value, target=source.ref_name,
                ),
            )

        return GAVGit(
            group_id=gav.group_id,
            artifact_id=gav.artifact_id,
            version=version,
            commit=effective.head_commit,
            ref_name=source.ref_name,
            ref_type=source.ref_type,
        )

    def resolve(self, gav: GAV, inspector: RepositoryInspector) -> GAVGit:
        """Inspect the repository and resolve ``gav``.

        Repository access errors are propagated unchanged.
        """
        facts = inspector.facts()
        if facts.dirty and self.bouncer.add(f"dirty:{facts.location}"):
            logger.warning("Git working tree is not clean %s", facts.location)
        return self.determine(gav, facts)
