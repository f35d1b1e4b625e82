"""Repository inspectors supply the facts a version is resolved from."""

from __future__ import annotations

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .common.logging_utils import extra_context, is_debug_enabled
from .constants import Constants
from .errors import RepositoryAccessError
from .models import ResolutionFacts

logger = logging.getLogger(__name__)


class RepositoryInspector(ABC):
    """Read-only view of a repository's head."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Path identifying the repository."""

    @abstractmethod
    def head_commit(self) -> str:
        """Full id of the checked out commit."""

    @abstractmethod
    def head_branch(self) -> Optional[str]:
        """Checked out branch, or None for a detached head."""

    @abstractmethod
    def head_tags(self) -> List[str]:
        """Tags pointing exactly at the head commit."""

    @abstractmethod
    def is_clean(self) -> bool:
        """True when the working tree has no changes."""

    def facts(self) -> ResolutionFacts:
        """Snapshot everything a resolution needs."""
        return ResolutionFacts(
            head_commit=self.head_commit(),
            head_branch=self.head_branch(),
            head_tags=tuple(self.head_tags()),
            dirty=not self.is_clean(),
            location=self.location,
        )


class StaticRepositoryInspector(RepositoryInspector):
    """Inspector over facts that are already known, e.g. from CI variables."""

    def __init__(
        self,
        head_commit: str,
        head_branch: Optional[str] = None,
        head_tags: Sequence[str] = (),
        clean: bool = True,
        location: str = "<static>",
    ):
        self._head_commit = head_commit
        self._head_branch = head_branch
        self._head_tags = list(head_tags)
        self._clean = clean
        self._location = location

    @property
    def location(self) -> str:
        return self._location

    def head_commit(self) -> str:
        return self._head_commit

    def head_branch(self) -> Optional[str]:
        return self._head_branch

    def head_tags(self) -> List[str]:
        return list(self._head_tags)

    def is_clean(self) -> bool:
        return self._clean


class GitRepositoryInspector(RepositoryInspector):
    """Inspector backed by the ``git`` command line.

    Args:
        path: any directory inside the work tree.
        git: git executable to run.
    """

    def __init__(self, path: str = ".", git: str = Constants.GIT_EXECUTABLE):
        self._path = os.path.abspath(path)
        self._git = git
        self._git_dir: Optional[str] = None

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        cmd = [self._git, *args]
        if is_debug_enabled(logger):
            logger.debug(
                "Running git",
                extra=extra_context(
                    event="subprocess", component="inspector", action=args[0], target=self._path
                ),
            )
        try:
            result = subprocess.run(
                cmd,
                cwd=self._path,
                capture_output=True,
                text=True,
                timeout=Constants.GIT_TIMEOUT,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise RepositoryAccessError(f"Failed to run {' '.join(cmd)}: {exc}") from exc

        if check and result.returncode != 0:
            raise RepositoryAccessError(
                f"{' '.join(cmd)} failed with exit code {result.returncode}: {result.stderr.strip()}"
            )
        return result

    @property
    def location(self) -> str:
        if self._git_dir is None:
            self._git_dir = self._run("rev-parse", "--absolute-git-dir").stdout.strip()
        return self._git_dir

    def head_commit(self) -> str:
        return self._run("rev-parse", "HEAD").stdout.strip()

    def head_branch(self) -> Optional[str]:
        # exit code 1 without output means a detached head
        result = self._run("symbolic-ref", "--quiet", "--short", "HEAD", check=False)
        if result.returncode == 0:
            return result.stdout.strip() or None
        if result.returncode == 1 and not result.stderr.strip():
            return None
        raise RepositoryAccessError(f"git symbolic-ref failed: {result.stderr.strip()}")

    def head_tags(self) -> List[str]:
        output = self._run("tag", "--points-at", "HEAD").stdout
        return [line.strip() for line in output.splitlines() if line.strip()]

    def is_clean(self) -> bool:
        return not self._run("status", "--porcelain").stdout.strip()
