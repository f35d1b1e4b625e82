"""gitversioning - derive project versions from git branches, tags and commits."""

__version__ = "1.0.0"

from .models import GAV, GAVGit, FormatDescription, RefType, ResolutionFacts  # noqa: E402
from .resolver import VersionResolver  # noqa: E402

__all__ = [
    "GAV",
    "GAVGit",
    "FormatDescription",
    "RefType",
    "ResolutionFacts",
    "VersionResolver",
]
