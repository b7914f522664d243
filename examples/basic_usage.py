"""Example: index a projects tree from Python and query the result.

This example builds an index with tag generation through a local Ollama,
then searches it and prints statistics.
Run with: python examples/basic_usage.py ~/projects
"""

import logging
import sys
from pathlib import Path

from projets_indexer.config import IndexerConfig
from projets_indexer.indexer import (
    IndexStore,
    ProjectIndexer,
    SearchScope,
    TagEnricher,
    compute_stats,
    search,
)
from projets_indexer.ollama import OllamaClient
from projets_indexer.report import format_projects, format_stats


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    root = Path(sys.argv[1] if len(sys.argv) > 1 else "~/projects").expanduser()
    config = IndexerConfig(
        projects_dir=root,
        index_file=Path("projects_index.json"),
        enable_ollama=True,
    )

    with OllamaClient() as client:
        if not client.check_availability():
            print("Ollama is not running - projects will be indexed without tags")
        indexer = ProjectIndexer(config, enricher=TagEnricher(client))
        indexer.run()

    # Read the index back like the search/stats commands do
    projects = IndexStore(config.index_file).load()
    print(format_stats(compute_stats(projects, detailed=True)))

    print("\nProjects tagged 'python':")
    print(format_projects(search(projects, "python", SearchScope.TAGS)) or "  none")


if __name__ == "__main__":
    main()
