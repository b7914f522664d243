"""Main indexer that turns a projects tree into an index file."""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed

from projets_indexer.config import IndexerConfig
from projets_indexer.indexer.lifecycle import LifecycleInspector
from projets_indexer.indexer.models import Project
from projets_indexer.indexer.store import IndexStore
from projets_indexer.indexer.tagger import TagEnricher
from projets_indexer.indexer.walker import ProjectDir, walk_projects

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Project], None]


class ProjectIndexer:
    """
    Indexer that scans a projects root and builds Project records.

    Each candidate directory goes through classify -> inspect -> enrich in
    one worker thread. Candidates are independent, so they are spread over a
    bounded pool; the calling thread is the only one that collects results.

    The index is always rebuilt from scratch: nothing is merged with a
    previous index file.
    """

    def __init__(
        self,
        config: IndexerConfig,
        inspector: LifecycleInspector | None = None,
        enricher: TagEnricher | None = None,
    ):
        """
        Initialize the indexer.

        Args:
            config: Options for the run (validated here)
            inspector: Lifecycle inspector; defaults to one backed by git
            enricher: Tag enricher; defaults to a disabled one
        """
        config.validate()
        self.config = config
        self.inspector = inspector or LifecycleInspector()
        self.enricher = enricher or TagEnricher(None, enabled=False)

    def discover(self) -> list[ProjectDir]:
        """List candidate project directories in discovery order."""
        return list(
            walk_projects(
                self.config.projects_dir,
                self.config.min_depth,
                self.config.max_depth,
                exclude=self.config.exclude,
                skip_hidden=self.config.skip_hidden,
            )
        )

    def process_project(self, candidate: ProjectDir) -> Project:
        """Build the Project record for one candidate directory."""
        status = self.inspector.inspect(candidate.path)
        if self.config.enable_ollama:
            tags = self.enricher.enrich(candidate.name, candidate.path)
        else:
            tags = []

        return Project(
            name=candidate.name,
            category=candidate.category,
            status=status,
            tags=tags,
            path=str(candidate.path),
        )

    def index_projects(self, progress_callback: ProgressCallback | None = None) -> list[Project]:
        """
        Scan the projects root and return the Project records, sorted by path.

        A failure while processing one project is logged and that project is
        left out; the others are still indexed.

        Args:
            progress_callback: Called from this thread with each finished
                project.
        """
        logger.info("Starting project indexing from: %s", self.config.projects_dir)
        candidates = self.discover()
        logger.info("Found %d candidate directories", len(candidates))

        projects: list[Project] = []
        with ThreadPoolExecutor(
            max_workers=self.config.workers,
            thread_name_prefix="project-index",
        ) as executor:
            futures = {
                executor.submit(self.process_project, candidate): candidate
                for candidate in candidates
            }
            for future in as_completed(futures):
                candidate = futures[future]
                try:
                    project = future.result()
                except Exception:
                    logger.exception("Unexpected error indexing %s", candidate.path)
                    continue
                projects.append(project)
                if progress_callback is not None:
                    progress_callback(project)

        projects.sort(key=lambda p: p.path)
        logger.info("Indexed %d projects", len(projects))
        return projects

    def run(self, progress_callback: ProgressCallback | None = None) -> list[Project]:
        """
        Index the projects root and write the index file.

        The whole list is built in memory before the single write, so a
        failed run never leaves a partial index behind.

        Raises:
            PersistenceError: If the index file cannot be written.
        """
        projects = self.index_projects(progress_callback)
        IndexStore(self.config.index_file).save(projects)
        return projects
