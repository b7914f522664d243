"""JSON persistence for the project index."""

import json
import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from projets_indexer.errors import DataError, PersistenceError
from projets_indexer.indexer.models import Project

logger = logging.getLogger(__name__)


def _atomic_write(path: Path, text: str) -> None:
    """Write text to path through a temporary file and an atomic rename."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
    except OSError as e:
        raise PersistenceError(f"Cannot write {path}: {e}") from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        # mkstemp creates 0600 files
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise PersistenceError(f"Cannot write {path}: {e}") from e


def _dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class IndexStore:
    """
    Reads and writes the index file.

    The file is a JSON list of project records with exactly the fields
    name, category, status, tags and path. There is no envelope.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def save(self, projects: Sequence[Project]) -> None:
        """
        Write the full project list, replacing any existing file.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        _atomic_write(self.path, _dumps([p.to_dict() for p in projects]))
        logger.info("Wrote %d projects to %s", len(projects), self.path)

    def load(self) -> list[Project]:
        """
        Read the project list back, in file order.

        Raises:
            DataError: If the file is missing, unreadable or malformed.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise DataError(f"Index file not found: {self.path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise DataError(f"Cannot read index file {self.path}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DataError(f"Index file {self.path} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise DataError(f"Index file {self.path} must contain a list of projects")

        projects: list[Project] = []
        seen_paths: set[str] = set()
        for position, record in enumerate(data):
            if not isinstance(record, dict):
                raise DataError(
                    f"Index file {self.path}: entry {position} is not an object"
                )
            try:
                project = Project.from_dict(record)
            except ValueError as e:
                raise DataError(f"Index file {self.path}: entry {position}: {e}") from e
            if project.path in seen_paths:
                raise DataError(
                    f"Index file {self.path}: duplicate project path {project.path}"
                )
            seen_paths.add(project.path)
            projects.append(project)

        logger.debug("Loaded %d projects from %s", len(projects), self.path)
        return projects


def write_tags(output: Path, name: str, project_path: str, tags: Sequence[str]) -> None:
    """Write the result of a single-project tag generation."""
    _atomic_write(
        Path(output),
        _dumps({"name": name, "path": project_path, "tags": list(tags)}),
    )
