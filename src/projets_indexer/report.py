"""Plain-text rendering of projects and statistics for the CLI."""

from collections.abc import Sequence

from projets_indexer.indexer.models import Project
from projets_indexer.indexer.query import IndexStats

UNCATEGORIZED_LABEL = "(uncategorized)"


def format_project(project: Project) -> str:
    """Render one project as an indented block."""
    tags = ", ".join(project.tags) if project.tags else "none"
    return "\n".join(
        [
            project.name,
            f"   Category: {project.category or UNCATEGORIZED_LABEL}",
            f"   Status:   {project.status.value}",
            f"   Tags:     {tags}",
            f"   Path:     {project.path}",
        ]
    )


def format_projects(projects: Sequence[Project]) -> str:
    return "\n\n".join(format_project(p) for p in projects)


def format_stats(stats: IndexStats) -> str:
    """Render statistics; category and tag sections only when present."""
    lines = [
        "Project Statistics",
        "=" * 50,
        f"Total Projects: {stats.total}",
    ]
    for status, count in stats.by_status.items():
        lines.append(f"{status.value} Projects: {count}")
    lines.append(f"Total Tags: {stats.total_tags}")

    if stats.by_category is not None:
        lines += ["", "Projects by Category", "-" * 30]
        for category, count in stats.by_category.items():
            lines.append(f"{category or UNCATEGORIZED_LABEL}: {count}")

    if stats.top_tags:
        lines += ["", "Most Used Tags", "-" * 30]
        for tag, count in stats.top_tags:
            lines.append(f"{tag}: {count}")

    return "\n".join(lines)
