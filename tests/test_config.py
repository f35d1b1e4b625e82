"""Tests for configuration loading and overrides."""

import textwrap

import pytest

from gitversioning.config import (
    PatternRuleSet,
    VersioningConfiguration,
    apply_env_overrides,
    apply_overrides,
    configuration_from_dict,
    load_configuration,
)
from gitversioning.constants import TagOrdering
from gitversioning.errors import ConfigurationError
from gitversioning.models import FormatDescription


def write_config(tmp_path, body, name=".gitversioning.yml"):
    path = tmp_path / name
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


class TestDefaults:
    """Built in rules."""

    def test_default_rules(self):
        rules = PatternRuleSet()
        assert rules.commit == FormatDescription(pattern=".*", version_format="{commit}")
        assert rules.branches == (FormatDescription(pattern=".*", version_format="{branch}-SNAPSHOT"),)
        assert rules.tags == (FormatDescription(pattern=".*", version_format="{tag}"),)

    def test_missing_file_uses_defaults(self, tmp_path):
        config = load_configuration(project_dir=str(tmp_path))
        assert config == VersioningConfiguration()

    def test_missing_explicit_file_fails(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_configuration(str(tmp_path / "nope.yml"))


class TestLoadConfiguration:
    """YAML parsing."""

    def test_full_file(self, tmp_path):
        write_config(tmp_path, """
            enabled: true
            provided_tag: ""
            tag_ordering: semver
            commit:
              version_format: "{commit.short}"
            branch:
              - pattern: "release/(?<release>.*)"
                prefix: "release/"
                version_format: "{release}-SNAPSHOT"
              - pattern: ".*"
                version_format: "{branch}-SNAPSHOT"
            tag:
              - pattern: "v[0-9].*"
                prefix: "v"
                version_format: "{tag}"
        """)
        config = load_configuration(project_dir=str(tmp_path))
        assert config.enabled is True
        assert config.provided_branch is None
        assert config.provided_tag == ""
        assert config.tag_ordering is TagOrdering.SEMVER
        assert config.rules.commit == FormatDescription(pattern=".*", version_format="{commit.short}")
        assert [d.pattern for d in config.rules.branches] == ["release/(?<release>.*)", ".*"]
        assert config.rules.branches[0].prefix == "release/"
        assert config.rules.tags[0].prefix == "v"

    def test_rule_order_preserved(self):
        config = configuration_from_dict({"tag": [
            {"pattern": "b", "version_format": "2"},
            {"pattern": "a", "version_format": "1"},
        ]})
        assert [d.pattern for d in config.rules.tags] == ["b", "a"]

    def test_missing_version_format(self):
        with pytest.raises(ConfigurationError):
            configuration_from_dict({"branch": [{"pattern": ".*"}]})

    def test_rules_must_be_a_list(self):
        with pytest.raises(ConfigurationError):
            configuration_from_dict({"tag": {"pattern": ".*", "version_format": "{tag}"}})

    def test_unknown_keys_warn(self, caplog):
        configuration_from_dict({"colour": "blue"})
        assert "colour" in caplog.text

    def test_invalid_yaml(self, tmp_path):
        path = write_config(tmp_path, "branch: [unclosed\n", name="broken.yml")
        with pytest.raises(ConfigurationError):
            load_configuration(str(path))

    def test_non_mapping(self, tmp_path):
        path = write_config(tmp_path, "- a\n- b\n", name="list.yml")
        with pytest.raises(ConfigurationError):
            load_configuration(str(path))

    def test_enabled_string_values(self, tmp_path):
        write_config(tmp_path, 'enabled: "false"\n')
        assert load_configuration(project_dir=str(tmp_path)).enabled is False
        assert configuration_from_dict({"enabled": "on"}).enabled is True

    def test_enabled_rejects_other_values(self):
        with pytest.raises(ConfigurationError):
            configuration_from_dict({"enabled": "maybe"})

    def test_numeric_provided_tag_rejected(self, tmp_path):
        path = write_config(tmp_path, "provided_tag: 1.10\n", name="numeric.yml")
        with pytest.raises(ConfigurationError, match="quote numeric ref names"):
            load_configuration(str(path))

    def test_quoted_provided_tag_kept(self, tmp_path):
        path = write_config(tmp_path, 'provided_tag: "1.10"\n', name="quoted.yml")
        assert load_configuration(str(path)).provided_tag == "1.10"

    def test_numeric_version_format_rejected(self):
        with pytest.raises(ConfigurationError):
            configuration_from_dict({"tag": [{"pattern": ".*", "version_format": 1.10}]})

    def test_patterns_not_validated_at_load(self):
        config = configuration_from_dict({"branch": [{"pattern": "([", "version_format": "x"}]})
        assert config.rules.branches[0].pattern == "(["


class TestOverrides:
    """Environment and CLI precedence."""

    def test_env_overrides(self):
        config = apply_env_overrides(VersioningConfiguration(), {
            "GITVERSIONING_DISABLE": "true",
            "GITVERSIONING_BRANCH": "ci",
            "GITVERSIONING_TAG": "",
        })
        assert config.enabled is False
        assert config.provided_branch == "ci"
        assert config.provided_tag == ""

    def test_env_untouched_when_unset(self):
        config = VersioningConfiguration(provided_branch="main")
        assert apply_env_overrides(config, {}) is config

    def test_cli_overrides_env(self):
        config = apply_env_overrides(VersioningConfiguration(), {"GITVERSIONING_BRANCH": "ci"})
        config = apply_overrides(config, provided_branch="local", tag_ordering="pep440")
        assert config.provided_branch == "local"
        assert config.tag_ordering is TagOrdering.PEP440
