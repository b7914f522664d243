"""
Indexer module for projets-indexer.

This module walks a projects root, classifies every project it finds by git
recency, optionally tags it through a language model, and persists the
result as a JSON index that the query functions read back.
"""

from projets_indexer.indexer.indexer import ProjectIndexer
from projets_indexer.indexer.lifecycle import (
    CommitTimestampSource,
    GitCommitSource,
    LifecycleInspector,
    classify_age,
)
from projets_indexer.indexer.models import Project, ProjectStatus
from projets_indexer.indexer.query import IndexStats, SearchScope, compute_stats, search
from projets_indexer.indexer.store import IndexStore, write_tags
from projets_indexer.indexer.tagger import TagEnricher, TagSuggestionSource, parse_tags
from projets_indexer.indexer.walker import ProjectDir, classify_path, walk_projects

__all__ = [
    "CommitTimestampSource",
    "GitCommitSource",
    "IndexStats",
    "IndexStore",
    "LifecycleInspector",
    "Project",
    "ProjectDir",
    "ProjectIndexer",
    "ProjectStatus",
    "SearchScope",
    "TagEnricher",
    "TagSuggestionSource",
    "classify_age",
    "classify_path",
    "compute_stats",
    "parse_tags",
    "search",
    "walk_projects",
    "write_tags",
]
