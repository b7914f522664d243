"""Main entry point for the projets-indexer command line."""

import argparse
import logging
import sys
from pathlib import Path

from projets_indexer import __version__
from projets_indexer.config import DEFAULT_DEPTH, Config, IndexerConfig, parse_exclude
from projets_indexer.errors import ConfigurationError, IndexerError
from projets_indexer.indexer import (
    GitCommitSource,
    IndexStore,
    LifecycleInspector,
    ProjectIndexer,
    SearchScope,
    TagEnricher,
    compute_stats,
    search,
    write_tags,
)
from projets_indexer.ollama import OllamaClient, OllamaError
from projets_indexer.report import format_projects, format_stats

logger = logging.getLogger(__name__)


def create_ollama_client(config: Config) -> OllamaClient:
    """Build the Ollama client from configuration."""
    return OllamaClient(
        base_url=config.ollama_url,
        model=config.ollama_model,
        timeout=config.ollama_timeout,
    )


def check_ollama(client: OllamaClient, config: Config) -> bool:
    """Log whether Ollama and the configured model can be used for tagging."""
    if not client.check_availability():
        logger.warning(
            "Ollama service is not available at %s - tags will not be generated",
            config.ollama_url,
        )
        return False
    logger.info("Ollama service is available at %s", config.ollama_url)

    try:
        has_model = client.has_model()
    except OllamaError as e:
        logger.warning("Cannot list Ollama models: %s", e)
        return False
    if not has_model:
        logger.warning(
            "Model %s is not available in Ollama - run 'ollama pull %s' to enable tags",
            config.ollama_model,
            config.ollama_model,
        )
        return False
    return True


def cmd_index(args: argparse.Namespace, config: Config) -> int:
    """Index a projects tree and write the index file."""
    enable_ollama = config.ollama if args.ollama is None else args.ollama
    indexer_config = IndexerConfig(
        projects_dir=(args.projects_dir or config.projects_dir).expanduser().absolute(),
        index_file=args.output or config.index_file,
        enable_ollama=enable_ollama,
        min_depth=args.min_depth,
        max_depth=args.max_depth,
        exclude=parse_exclude(args.exclude) if args.exclude is not None else config.exclude,
        skip_hidden=args.skip_hidden,
        workers=args.workers if args.workers is not None else config.workers,
    )

    client = create_ollama_client(config) if enable_ollama else None
    try:
        indexer = ProjectIndexer(
            indexer_config,
            inspector=LifecycleInspector(GitCommitSource(timeout=config.git_timeout)),
            enricher=TagEnricher(client, enabled=enable_ollama),
        )

        logger.info("  Projects directory: %s", indexer_config.projects_dir)
        logger.info("  Index file:         %s", indexer_config.index_file)
        logger.info(
            "  Depth:              %d-%d", indexer_config.min_depth, indexer_config.max_depth
        )
        logger.info("  Ollama:             %s", "enabled" if enable_ollama else "disabled")

        if client is not None:
            check_ollama(client, config)

        projects = indexer.run(
            progress_callback=lambda p: logger.debug("Indexed project: %s", p.name)
        )
    finally:
        if client is not None:
            client.close()

    if projects:
        print(format_projects(projects))
        print()
    print(f"Successfully indexed {len(projects)} projects into {indexer_config.index_file}")
    print()
    print(format_stats(compute_stats(projects, detailed=True)))
    return 0


def cmd_search(args: argparse.Namespace, config: Config) -> int:
    """Search the index for a query."""
    if args.tags_only:
        scope = SearchScope.TAGS
    elif args.category_only:
        scope = SearchScope.CATEGORY
    else:
        scope = SearchScope.ALL

    projects = IndexStore(args.index_file or config.index_file).load()
    matches = search(projects, args.query, scope)

    if not matches:
        print(f"No projects match '{args.query}'")
        return 0

    print(format_projects(matches))
    print()
    print(f"{len(matches)} of {len(projects)} projects match '{args.query}'")
    return 0


def cmd_stats(args: argparse.Namespace, config: Config) -> int:
    """Print statistics about the index."""
    projects = IndexStore(args.index_file or config.index_file).load()
    print(format_stats(compute_stats(projects, detailed=args.detailed)))
    return 0


def cmd_generate_tags(args: argparse.Namespace, config: Config) -> int:
    """Generate tags for a single project directory."""
    project_dir = args.project_dir.expanduser().absolute()
    if not project_dir.is_dir():
        raise ConfigurationError(f"Project directory does not exist: {project_dir}")

    with create_ollama_client(config) as client:
        check_ollama(client, config)
        tags = TagEnricher(client).enrich(project_dir.name, project_dir)

    if tags:
        print(f"Tags for {project_dir.name}: {', '.join(tags)}")
    else:
        print(f"No tags generated for {project_dir.name}")

    if args.output is not None:
        write_tags(args.output, project_dir.name, str(project_dir), tags)
        logger.info("Tags written to %s", args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projets-indexer",
        description="Index and organize your projects with AI-powered tag generation",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (debug level logging)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: $PROJETS_CONFIG or "
        "~/.config/projets-indexer/config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    index = subparsers.add_parser(
        "index",
        help="Index projects in the specified directory",
        description="Scan the directory for projects, detect their status from git "
        "history, optionally generate tags with Ollama and save the index as JSON.",
    )
    index.add_argument(
        "-d", "--projects-dir", type=Path, help="Directory containing projects to index"
    )
    index.add_argument("-o", "--output", type=Path, help="JSON file to store the project index")
    index.add_argument(
        "--ollama",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Generate tags with Ollama",
    )
    index.add_argument(
        "-m",
        "--min-depth",
        type=int,
        default=DEFAULT_DEPTH,
        help="Minimum directory depth to index (default: %(default)s)",
    )
    index.add_argument(
        "-x",
        "--max-depth",
        type=int,
        default=DEFAULT_DEPTH,
        help="Maximum directory depth to traverse (default: %(default)s)",
    )
    index.add_argument("-e", "--exclude", help="Directories to exclude (comma-separated)")
    index.add_argument(
        "--skip-hidden", action="store_true", help="Also exclude directories starting with '.'"
    )
    index.add_argument("-w", "--workers", type=int, help="Number of worker threads")
    index.set_defaults(handler=cmd_index)

    search_parser = subparsers.add_parser(
        "search",
        help="Search through indexed projects",
        description="Search for projects in the index based on name, tags, or category.",
    )
    search_parser.add_argument(
        "query", help="Text to search for in project names, tags, or categories"
    )
    search_parser.add_argument(
        "-i", "--index-file", type=Path, help="JSON file containing the project index"
    )
    scope = search_parser.add_mutually_exclusive_group()
    scope.add_argument("-t", "--tags-only", action="store_true", help="Only search in project tags")
    scope.add_argument(
        "-c", "--category-only", action="store_true", help="Only search in project categories"
    )
    search_parser.set_defaults(handler=cmd_search)

    stats = subparsers.add_parser(
        "stats",
        help="Show statistics about indexed projects",
        description="Display the number of projects per status and, in detailed mode, "
        "per category along with the most used tags.",
    )
    stats.add_argument(
        "-i", "--index-file", type=Path, help="JSON file containing the project index"
    )
    stats.add_argument(
        "-d", "--detailed", action="store_true", help="Show statistics for each category"
    )
    stats.set_defaults(handler=cmd_stats)

    generate = subparsers.add_parser(
        "generate-tags",
        help="Generate tags for a specific project",
        description="Use Ollama to generate descriptive tags for a project directory.",
    )
    generate.add_argument(
        "-p",
        "--project-dir",
        type=Path,
        required=True,
        help="Directory containing the project to generate tags for",
    )
    generate.add_argument("-o", "--output", type=Path, help="Optional file to save the tags")
    generate.set_defaults(handler=cmd_generate_tags)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main function - parses arguments and runs a command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging here to avoid side effects on import
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = Config.from_env(config_file=args.config)
        return args.handler(args, config)
    except IndexerError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
