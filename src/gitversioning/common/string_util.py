"""String and regular expression helpers for ref names and patterns."""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, Pattern

from ..errors import PatternError

# Java style named group, e.g. "(?<version>.*)"; lookbehind "(?<=" / "(?<!" does not match.
_JAVA_NAMED_GROUP = re.compile(r"\(\?<([A-Za-z][A-Za-z0-9_]*)>")


def remove_prefix(text: str, prefix: str) -> str:
    """Strip the literal ``prefix`` from ``text`` when present."""
    if prefix and text.startswith(prefix):
        return text[len(prefix):]
    return text


def remove_suffix(text: str, suffix: str) -> str:
    """Strip the literal ``suffix`` from ``text`` when present."""
    if suffix and text.endswith(suffix):
        return text[:-len(suffix)]
    return text


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> Pattern[str]:
    """Compile a configured pattern, accepting Java style named groups.

    Raises:
        PatternError: if the pattern is not a valid regular expression.
    """
    translated = _JAVA_NAMED_GROUP.sub(r"(?P<\1>", pattern)
    try:
        return re.compile(translated)
    except re.error as exc:
        raise PatternError(pattern, str(exc)) from exc


def matches(pattern: str, text: str) -> bool:
    """Return True when ``pattern`` matches the whole of ``text``."""
    return compile_pattern(pattern).fullmatch(text) is not None


def regex_group_value_map(pattern: str, text: str) -> Dict[str, str]:
    """Map capture groups of ``pattern`` applied to ``text`` to their values.

    Named groups are keyed by name, unnamed groups by their 0-based position (the
    first group is ``{0}``).
    Groups that did not take part in the match are left out.
    """
    compiled = compile_pattern(pattern)
    match = compiled.fullmatch(text) or compiled.search(text)
    if match is None:
        return {}

    values: Dict[str, str] = {}
    named_indexes = set(compiled.groupindex.values())
    for index in range(1, compiled.groups + 1):
        if index in named_indexes:
            continue
        value = match.group(index)
        if value is not None:
            values[str(index - 1)] = value
    for name, value in match.groupdict().items():
        if value is not None:
            values[name] = value
    return values
