"""Shared fixtures for the projets-indexer tests."""

import os
import subprocess
import time
from pathlib import Path

import pytest


def git_commit(repo: Path, timestamp: int, message: str = "commit") -> None:
    """Create an empty commit in repo dated at the given Unix time."""
    env = dict(os.environ)
    env["GIT_AUTHOR_DATE"] = f"@{timestamp} +0000"
    env["GIT_COMMITTER_DATE"] = f"@{timestamp} +0000"
    subprocess.run(
        [
            "git",
            "-c", "user.name=Test",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            "commit", "--allow-empty", "-q", "-m", message,
        ],
        cwd=repo,
        env=env,
        check=True,
        capture_output=True,
    )


@pytest.fixture
def make_git_repo():
    """Factory turning a directory into a git repo whose last commit is `age_days` old."""

    def _make(path: Path, age_days: float | None = None) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        subprocess.run(["git", "init", "-q"], cwd=path, check=True, capture_output=True)
        if age_days is not None:
            git_commit(path, int(time.time() - age_days * 86400))
        return path

    return _make


@pytest.fixture
def projects_root(tmp_path: Path) -> Path:
    """A projects tree laid out as <root>/<category>/<placeholder>/<project>."""
    root = tmp_path / "projects"
    for rel in (
        "web/active/alpha",
        "web/active/beta",
        "web/archived/gamma",
        "tools/_/cli-kit",
        "ml/on-hold/trainer/src",
    ):
        (root / rel).mkdir(parents=True)
    (root / "README.md").write_text("# Projects\n")
    (root / "web" / "active" / "notes.txt").write_text("not a project\n")
    return root
