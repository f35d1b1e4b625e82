"""Data models for coordinates, format descriptions and resolved versions."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .constants import Constants


class RefType(Enum):
    """Category of the ref a version was derived from."""
    COMMIT = "commit"
    BRANCH = "branch"
    TAG = "tag"


@dataclass(frozen=True)
class GAV:
    """Coordinate of the component being versioned."""
    group_id: Optional[str]
    artifact_id: Optional[str]
    version: Optional[str]  # declared version, before git based resolution

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass(frozen=True)
class FormatDescription:
    """One versioning rule: which refs it matches and how to format them."""
    pattern: str
    version_format: str
    prefix: str = ""


@dataclass(frozen=True)
class ResolutionFacts:
    """Snapshot of the repository state used for a single resolution."""
    head_commit: str
    head_branch: Optional[str] = None
    head_tags: Tuple[str, ...] = ()
    dirty: bool = False
    location: Optional[str] = None  # repository path, keys the dirty tree warning


@dataclass(frozen=True)
class GAVGit:
    """Resolution outcome handed to the model rewriter."""
    group_id: Optional[str]
    artifact_id: Optional[str]
    version: str
    commit: str
    ref_name: str
    ref_type: RefType

    def properties(self) -> Dict[str, str]:
        """Flat project properties describing where the version came from."""
        return {
            Constants.PROPERTY_COMMIT: self.commit,
            Constants.PROPERTY_TAG: self.ref_name if self.ref_type is RefType.TAG else "",
            Constants.PROPERTY_BRANCH: self.ref_name if self.ref_type is RefType.BRANCH else "",
        }

    def to_dict(self) -> Dict[str, str]:
        """Serializable form used by the JSON output of the CLI."""
        return {
            "groupId": self.group_id or "",
            "artifactId": self.artifact_id or "",
            "version": self.version,
            "commit": self.commit,
            "refName": self.ref_name,
            "refType": self.ref_type.value,
            "properties": self.properties(),
        }

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass
class VersionSource:
    """Winning ref of a resolution: its category, name and rule."""
    ref_type: RefType
    ref_name: str
    description: FormatDescription
