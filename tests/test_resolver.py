"""Tests for the version resolution precedence rules."""

import logging

import pytest

from gitversioning.common.log_once import LoggingBouncer
from gitversioning.config import PatternRuleSet, VersioningConfiguration
from gitversioning.constants import TagOrdering
from gitversioning.errors import ConfigurationError, PatternError, TemplateError
from gitversioning.inspector import StaticRepositoryInspector
from gitversioning.models import GAV, FormatDescription, RefType, ResolutionFacts
from gitversioning.resolver import VersionResolver, apply_provided_refs

COMMIT = "0123456789abcdef0123456789abcdef01234567"
GAV_SNAPSHOT = GAV("org.example", "demo", "2.0-SNAPSHOT")


def make_resolver(branches=(), tags=(), commit=None, **config):
    rules = PatternRuleSet(
        commit=commit or FormatDescription(pattern=".*", version_format="{commit}"),
        branches=tuple(branches),
        tags=tuple(tags),
    )
    return VersionResolver(VersioningConfiguration(rules=rules, **config), LoggingBouncer())


def facts(branch=None, tags=(), dirty=False):
    return ResolutionFacts(head_commit=COMMIT, head_branch=branch, head_tags=tuple(tags), dirty=dirty, location="/repo/.git")


class TestCommitFallback:
    """Resolution without a matching branch or tag."""

    def test_detached_head_without_tags(self):
        result = make_resolver().determine(GAV_SNAPSHOT, facts())
        assert result.ref_type is RefType.COMMIT
        assert result.ref_name == COMMIT
        assert result.version == COMMIT

    def test_branch_without_matching_rule_uses_commit_rule(self):
        resolver = make_resolver(
            branches=[FormatDescription(pattern="release/.*", version_format="{branch}")],
            commit=FormatDescription(pattern=".*", version_format="{commit.short}"),
        )
        result = resolver.determine(GAV_SNAPSHOT, facts(branch="main", tags=["v1.0"]))
        assert result.ref_type is RefType.COMMIT
        assert result.version == "0123456"

    def test_tags_without_matching_rule_uses_commit_rule(self):
        resolver = make_resolver(tags=[FormatDescription(pattern=r"v\d+", version_format="{tag}")])
        result = resolver.determine(GAV_SNAPSHOT, facts(tags=["nightly"]))
        assert result.ref_type is RefType.COMMIT

    def test_missing_declared_version(self):
        with pytest.raises(ConfigurationError):
            make_resolver().determine(GAV("g", "a", None), facts())
        with pytest.raises(ConfigurationError):
            make_resolver().determine(GAV("g", "a", ""), facts())


class TestBranchResolution:
    """Branch rules, first match wins."""

    def test_release_branch_prefix_and_group(self):
        resolver = make_resolver(branches=[
            FormatDescription(pattern="release/(.*)", version_format="{branch}|{0}", prefix="release/"),
        ])
        result = resolver.determine(GAV_SNAPSHOT, facts(branch="release/1.2"))
        assert result.version == "1.2|1.2"
        assert result.ref_type is RefType.BRANCH
        assert result.ref_name == "release/1.2"

    def test_first_capture_group_is_zero(self):
        resolver = make_resolver(branches=[
            FormatDescription(pattern="release/(.*)", version_format="{0}", prefix="release/"),
        ])
        result = resolver.determine(GAV("g", "a", "1.0"), facts(branch="release/1.2"))
        assert result.version == "1.2"

    def test_java_named_group(self):
        resolver = make_resolver(branches=[
            FormatDescription(pattern="release/(?<release>.*)", version_format="{release}"),
        ])
        assert resolver.determine(GAV_SNAPSHOT, facts(branch="release/1.2")).version == "1.2"

    def test_first_match_wins(self):
        resolver = make_resolver(branches=[
            FormatDescription(pattern="main", version_format="first"),
            FormatDescription(pattern=".*", version_format="second"),
        ])
        assert resolver.determine(GAV_SNAPSHOT, facts(branch="main")).version == "first"
        assert resolver.determine(GAV_SNAPSHOT, facts(branch="dev")).version == "second"

    def test_branch_beats_tags(self):
        resolver = make_resolver(
            branches=[FormatDescription(pattern=".*", version_format="{branch}-SNAPSHOT")],
            tags=[FormatDescription(pattern=".*", version_format="{tag}")],
        )
        result = resolver.determine(GAV_SNAPSHOT, facts(branch="main", tags=["1.0"]))
        assert result.ref_type is RefType.BRANCH
        assert result.version == "main-SNAPSHOT"

    def test_slashes_escaped(self):
        resolver = make_resolver(branches=[FormatDescription(pattern=".*", version_format="{branch}")])
        assert resolver.determine(GAV_SNAPSHOT, facts(branch="feature/x")).version == "feature-x"

    def test_release_and_declared_version_available_together(self):
        resolver = make_resolver(branches=[
            FormatDescription(pattern=".*", version_format="{version.release}+{version}"),
        ])
        assert resolver.determine(GAV_SNAPSHOT, facts(branch="main")).version == "2.0+2.0-SNAPSHOT"

    def test_invalid_pattern_only_fails_when_reached(self):
        resolver = make_resolver(branches=[
            FormatDescription(pattern="main", version_format="ok"),
            FormatDescription(pattern="([", version_format="broken"),
        ])
        assert resolver.determine(GAV_SNAPSHOT, facts(branch="main")).version == "ok"
        with pytest.raises(PatternError):
            resolver.determine(GAV_SNAPSHOT, facts(branch="dev"))


class TestTagResolution:
    """Tag rules with version ordering."""

    TAG_RULE = FormatDescription(pattern=r"v\d+\.\d+", version_format="{tag}", prefix="v")

    def test_highest_version_not_lexicographic(self):
        resolver = make_resolver(tags=[self.TAG_RULE])
        result = resolver.determine(GAV_SNAPSHOT, facts(tags=["v1.0", "v1.10", "v1.2"]))
        assert result.ref_type is RefType.TAG
        assert result.ref_name == "v1.10"
        assert result.version == "1.10"

    def test_first_rule_with_any_match_wins(self):
        resolver = make_resolver(tags=[
            FormatDescription(pattern=r"rc-.*", version_format="rc:{tag}", prefix="rc-"),
            self.TAG_RULE,
        ])
        result = resolver.determine(GAV_SNAPSHOT, facts(tags=["v9.0", "rc-1.0"]))
        assert result.version == "rc:1.0"

    def test_pep440_ordering(self):
        resolver = make_resolver(
            tags=[FormatDescription(pattern=".*", version_format="{tag}")],
            tag_ordering=TagOrdering.PEP440,
        )
        assert resolver.determine(GAV_SNAPSHOT, facts(tags=["1.0rc1", "1.0"])).version == "1.0"


class TestProvidedRefs:
    """Branch and tag overrides."""

    BRANCH_RULE = FormatDescription(pattern=".*", version_format="{branch}-SNAPSHOT")
    TAG_RULE = FormatDescription(pattern=".*", version_format="{tag}")

    def test_provided_branch_replaces_detected(self):
        resolver = make_resolver(branches=[self.BRANCH_RULE], provided_branch="ci")
        assert resolver.determine(GAV_SNAPSHOT, facts(branch="main")).version == "ci-SNAPSHOT"

    def test_empty_provided_branch_forces_no_branch(self):
        resolver = make_resolver(branches=[self.BRANCH_RULE], tags=[self.TAG_RULE], provided_branch="")
        result = resolver.determine(GAV_SNAPSHOT, facts(branch="main", tags=["1.0"]))
        assert result.ref_type is RefType.TAG

    def test_provided_tag_suppresses_branch(self):
        resolver = make_resolver(branches=[self.BRANCH_RULE], tags=[self.TAG_RULE], provided_tag="3.0")
        result = resolver.determine(GAV_SNAPSHOT, facts(branch="main", tags=["1.0"]))
        assert result.ref_type is RefType.TAG
        assert result.version == "3.0"

    def test_empty_provided_tag_falls_through_to_branch(self):
        resolver = make_resolver(branches=[self.BRANCH_RULE], tags=[self.TAG_RULE], provided_tag="")
        result = resolver.determine(GAV_SNAPSHOT, facts(branch="main", tags=["1.0"]))
        assert result.ref_type is RefType.BRANCH

    def test_empty_provided_tag_falls_through_to_commit(self):
        resolver = make_resolver(tags=[self.TAG_RULE], provided_tag="")
        result = resolver.determine(GAV_SNAPSHOT, facts(tags=["1.0"]))
        assert result.ref_type is RefType.COMMIT

    def test_apply_provided_refs_keeps_detection_for_none(self):
        original = facts(branch="main", tags=["1.0"])
        assert apply_provided_refs(original, None, None) == original


class TestResolverContract:
    """Errors, determinism and side effects."""

    @pytest.mark.parametrize("fact", [facts(), facts(branch="main"), facts(tags=["1.0"])])
    def test_unknown_placeholder_always_fails(self, fact):
        bad = FormatDescription(pattern=".*", version_format="{unknownPlaceholder}")
        resolver = make_resolver(branches=[bad], tags=[bad], commit=bad)
        with pytest.raises(TemplateError):
            resolver.determine(GAV_SNAPSHOT, fact)

    def test_idempotent(self):
        resolver = make_resolver(branches=[FormatDescription(pattern=".*", version_format="{branch}-{commit.short}")])
        first = resolver.determine(GAV_SNAPSHOT, facts(branch="main"))
        second = resolver.determine(GAV_SNAPSHOT, facts(branch="main"))
        assert first == second

    def test_dirty_tree_does_not_change_version_and_warns_once(self, caplog):
        resolver = make_resolver(branches=[FormatDescription(pattern=".*", version_format="{branch}")])
        inspector = StaticRepositoryInspector(COMMIT, "main", clean=False, location="/repo/.git")
        with caplog.at_level(logging.WARNING):
            first = resolver.resolve(GAV_SNAPSHOT, inspector)
            second = resolver.resolve(GAV_SNAPSHOT, inspector)
        assert first.version == second.version == "main"
        warnings = [r for r in caplog.records if "not clean" in r.getMessage()]
        assert len(warnings) == 1

    def test_properties(self):
        resolver = make_resolver(tags=[FormatDescription(pattern=".*", version_format="{tag}")])
        result = resolver.determine(GAV_SNAPSHOT, facts(tags=["1.0"]))
        assert result.properties() == {
            "project.commit": COMMIT,
            "project.tag": "1.0",
            "project.branch": "",
        }
