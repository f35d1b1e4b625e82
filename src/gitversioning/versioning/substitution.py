"""Version format substitution.

A version format is plain text with ``{name}`` placeholders, e.g.
``{version.release}-{branch}-SNAPSHOT``. Placeholders are filled from a
:class:`VersionData` map built for one resolution: fixed keys describing the
declared version and head commit, the winning ref under its category name, and
the capture groups of the winning rule's pattern.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict

from ..common.string_util import regex_group_value_map, remove_prefix, remove_suffix
from ..constants import Constants
from ..errors import TemplateError
from ..models import GAV, FormatDescription, RefType

PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


@dataclass
class VersionData:
    """Values available to a version format."""
    version: str
    version_release: str
    commit: str
    commit_short: str
    ref_type: RefType
    ref_value: str
    groups: Dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, str]:
        """Flatten into placeholder name -> value; fixed keys win over groups."""
        values = dict(self.groups)
        values.update({
            "version": self.version,
            "version.release": self.version_release,
            "commit": self.commit,
            "commit.short": self.commit_short,
            self.ref_type.value: self.ref_value,
        })
        return values


def build_version_data(
    gav: GAV,
    head_commit: str,
    ref_type: RefType,
    ref_name: str,
    description: FormatDescription,
) -> VersionData:
    """Collect the placeholder values for one resolution."""
    declared = gav.version or ""
    return VersionData(
        version=declared,
        version_release=remove_suffix(declared, Constants.SNAPSHOT_SUFFIX),
        commit=head_commit,
        commit_short=head_commit[:Constants.SHORT_COMMIT_LENGTH],
        ref_type=ref_type,
        ref_value=remove_prefix(ref_name, description.prefix),
        groups=regex_group_value_map(description.pattern, ref_name),
    )


def substitute_text(template: str, values: Dict[str, str]) -> str:
    """Replace every ``{name}`` in ``template`` with ``values[name]``.

    Single pass: text produced by a replacement is not scanned again.

    Raises:
        TemplateError: if a placeholder has no value.
    """
    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name not in values:
            raise TemplateError(name, template)
        return values[name]

    return PLACEHOLDER.sub(_replace, template)


def escape_version(version: str) -> str:
    """Versions end up in paths and coordinates, so they must not contain ``/``."""
    return version.replace("/", "-")


def format_version(template: str, data: VersionData) -> str:
    """Expand ``template`` with ``data`` and escape the result."""
    return escape_version(substitute_text(template, data.as_dict()))
