"""Search and statistics over a loaded index."""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from projets_indexer.indexer.models import Project, ProjectStatus

TOP_TAGS_LIMIT = 10


class SearchScope(str, Enum):
    """Which project fields a search looks at."""

    ALL = "all"  # name, category or any tag
    TAGS = "tags"
    CATEGORY = "category"


def _matches(project: Project, needle: str, scope: SearchScope) -> bool:
    tag_hit = any(needle in tag.lower() for tag in project.tags)
    if scope is SearchScope.TAGS:
        return tag_hit
    category_hit = needle in project.category.lower()
    if scope is SearchScope.CATEGORY:
        return category_hit
    return tag_hit or category_hit or needle in project.name.lower()


def search(
    projects: Sequence[Project],
    query: str,
    scope: SearchScope = SearchScope.ALL,
) -> list[Project]:
    """
    Return the projects whose scoped fields contain the query, ignoring case.

    Results keep index order; there is no ranking.
    """
    needle = query.lower()
    return [p for p in projects if _matches(p, needle, scope)]


@dataclass
class IndexStats:
    """Aggregate counts over an index."""

    total: int
    by_status: dict[ProjectStatus, int]
    total_tags: int
    by_category: dict[str, int] | None = None
    top_tags: list[tuple[str, int]] = field(default_factory=list)


def compute_stats(projects: Sequence[Project], detailed: bool = False) -> IndexStats:
    """
    Count projects per status and, when detailed, per category.

    Every project lands in exactly one status bucket (and one category
    bucket), so each breakdown sums to the total.
    """
    by_status = {status: 0 for status in ProjectStatus}
    for project in projects:
        by_status[project.status] += 1

    stats = IndexStats(
        total=len(projects),
        by_status=by_status,
        total_tags=sum(len(p.tags) for p in projects),
    )

    if detailed:
        categories = Counter(p.category for p in projects)
        stats.by_category = dict(sorted(categories.items()))

        tag_counts = Counter(tag for p in projects for tag in p.tags)
        stats.top_tags = sorted(tag_counts.items(), key=lambda item: (-item[1], item[0]))[
            :TOP_TAGS_LIMIT
        ]

    return stats
