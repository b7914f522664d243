"""Lifecycle classification from git commit recency."""

import logging
import subprocess
import time
from pathlib import Path
from typing import Protocol

from projets_indexer.config import DEFAULT_GIT_TIMEOUT
from projets_indexer.errors import ClassificationError
from projets_indexer.indexer.models import ProjectStatus

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400
ACTIVE_MAX_DAYS = 7  # exclusive
ON_HOLD_MAX_DAYS = 28  # exclusive


class CommitTimestampSource(Protocol):
    """Anything that can tell when the last commit of a project happened."""

    def last_commit_timestamp(self, project_dir: Path) -> int:
        """Return the Unix timestamp of the latest commit on HEAD.

        Raises:
            ClassificationError: If the history cannot be queried.
        """
        ...


class GitCommitSource:
    """Reads the latest commit timestamp with the git executable."""

    def __init__(self, timeout: float = DEFAULT_GIT_TIMEOUT, git: str = "git"):
        self.timeout = timeout
        self.git = git

    def last_commit_timestamp(self, project_dir: Path) -> int:
        try:
            result = subprocess.run(
                [self.git, "log", "-1", "--format=%ct", "HEAD"],
                cwd=project_dir,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        except FileNotFoundError as e:
            raise ClassificationError(f"git executable not found: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise ClassificationError(
                f"git log timed out after {self.timeout}s in {project_dir}"
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise ClassificationError(
                f"git log failed in {project_dir}: {stderr or e.returncode}"
            ) from e
        except OSError as e:
            raise ClassificationError(f"Cannot run git in {project_dir}: {e}") from e

        output = result.stdout.strip()
        if not output:
            raise ClassificationError(f"No commits found in {project_dir}")
        try:
            return int(output.splitlines()[0])
        except ValueError as e:
            raise ClassificationError(
                f"Unexpected git log output in {project_dir}: {output!r}"
            ) from e


def age_in_days(commit_timestamp: float, now: float) -> int:
    """Whole days elapsed since the commit. Future commits count as age 0."""
    elapsed = max(0.0, now - commit_timestamp)
    return int(elapsed // SECONDS_PER_DAY)


def classify_age(age_days: int) -> ProjectStatus:
    """Map a commit age to a status. Boundary days go to the older bucket."""
    if age_days < ACTIVE_MAX_DAYS:
        return ProjectStatus.ACTIVE
    if age_days < ON_HOLD_MAX_DAYS:
        return ProjectStatus.ON_HOLD
    return ProjectStatus.ARCHIVED


class LifecycleInspector:
    """Determines the lifecycle status of a project directory."""

    def __init__(self, source: CommitTimestampSource | None = None):
        self.source = source if source is not None else GitCommitSource()

    def inspect(self, project_dir: Path, now: float | None = None) -> ProjectStatus:
        """
        Classify a project by the age of its latest commit.

        Projects without a .git entry, or whose history cannot be read, are
        Archived.

        Args:
            project_dir: Path to the project directory
            now: Reference Unix time; defaults to the current time
        """
        if not (project_dir / ".git").exists():
            logger.debug("No git metadata in %s, classifying as archived", project_dir)
            return ProjectStatus.ARCHIVED

        try:
            timestamp = self.source.last_commit_timestamp(project_dir)
        except Exception as e:
            logger.warning("Cannot read git history of %s: %s", project_dir, e)
            return ProjectStatus.ARCHIVED

        if now is None:
            now = time.time()
        return classify_age(age_in_days(timestamp, now))
