"""Directory walker for discovering project directories under a projects root."""

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from projets_indexer.errors import TraversalError

logger = logging.getLogger(__name__)


@dataclass
class ProjectDir:
    """A candidate project directory found by the walker."""

    path: Path  # Root joined with the relative parts
    relative_parts: tuple[str, ...]  # Segments below the root
    name: str
    category: str  # "" when the tree is too shallow

    @property
    def depth(self) -> int:
        return len(self.relative_parts)


def classify_path(relative_parts: tuple[str, ...]) -> tuple[str, str]:
    """
    Derive (name, category) from the segments of a path below the root.

    The name is the last segment. The category is the segment two levels
    above it (the grandparent), or "" when there is none:

        web/_/alpha   -> ("alpha", "web")
        tools/cli     -> ("cli", "")
    """
    if not relative_parts:
        return "", ""
    name = relative_parts[-1]
    category = relative_parts[-3] if len(relative_parts) >= 3 else ""
    return name, category


def _list_subdirs(directory: Path) -> list[os.DirEntry]:
    """Return the real (non-symlink) subdirectories of a directory, by name."""
    try:
        with os.scandir(directory) as it:
            entries = []
            for entry in it:
                try:
                    if entry.is_symlink() or not entry.is_dir(follow_symlinks=False):
                        continue
                except OSError:
                    continue
                entries.append(entry)
    except OSError as e:
        raise TraversalError(f"Cannot read directory {directory}: {e}") from e
    return sorted(entries, key=lambda e: e.name)


def walk_projects(
    root: Path,
    min_depth: int,
    max_depth: int,
    exclude: Iterable[str] = (),
    skip_hidden: bool = False,
) -> Iterator[ProjectDir]:
    """
    Walk the projects root and yield every directory whose depth is within
    [min_depth, max_depth]. The root itself is depth 0.

    Layout expected with the default depth of 3:
    <root>/
    ├── web/                 # category
    │   ├── active/          # lifecycle placeholder (never read)
    │   │   ├── alpha/       # project
    │   │   └── beta/
    │   └── ...
    └── tools/
        └── ...

    Directories named in `exclude` are neither yielded nor descended into.
    Symlinked directories are skipped, and so is any subtree that cannot be
    read; one bad subtree never stops the walk.
    """
    excluded = frozenset(exclude)

    def is_excluded(name: str) -> bool:
        if name in excluded:
            return True
        return skip_hidden and name.startswith(".")

    if min_depth == 0:
        yield ProjectDir(path=root, relative_parts=(), name=root.name, category="")

    # Explicit stack keeps deep trees off the recursion limit
    stack: list[tuple[Path, tuple[str, ...]]] = [(root, ())]
    while stack:
        directory, parts = stack.pop()
        if len(parts) >= max_depth:
            continue

        try:
            subdirs = _list_subdirs(directory)
        except TraversalError as e:
            logger.debug("Skipping unreadable subtree: %s", e)
            continue

        children: list[tuple[Path, tuple[str, ...]]] = []
        for entry in subdirs:
            if is_excluded(entry.name):
                continue

            child_parts = parts + (entry.name,)
            child_path = directory / entry.name
            if min_depth <= len(child_parts) <= max_depth:
                name, category = classify_path(child_parts)
                yield ProjectDir(
                    path=child_path,
                    relative_parts=child_parts,
                    name=name,
                    category=category,
                )
            children.append((child_path, child_parts))

        # Reverse so the stack pops children in name order
        stack.extend(reversed(children))
