"""Exception types raised while resolving git based versions."""

from __future__ import annotations


class GitVersioningError(Exception):
    """Base class for every error raised by gitversioning."""


class ConfigurationError(GitVersioningError):
    """Raised for an unusable configuration or an invalid project coordinate."""


class PatternError(ConfigurationError):
    """Raised when a configured pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid pattern '{pattern}': {reason}")
        self.pattern = pattern
        self.reason = reason


class TemplateError(GitVersioningError):
    """Raised when a version format references an unknown placeholder."""

    def __init__(self, placeholder: str, template: str):
        super().__init__(f"Unknown placeholder '{{{placeholder}}}' in version format '{template}'")
        self.placeholder = placeholder
        self.template = template


class RepositoryAccessError(GitVersioningError):
    """Raised by repository inspectors when git cannot be queried."""
