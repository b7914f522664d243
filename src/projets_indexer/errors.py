"""Exception hierarchy for projets-indexer.

Per-project problems (TraversalError, ClassificationError, EnrichmentError)
are recovered where they happen and never abort an indexing run. File-level
and configuration problems (PersistenceError, ConfigurationError) are fatal
for the command that hits them.
"""


class IndexerError(Exception):
    """Base class for all projets-indexer errors."""


class ConfigurationError(IndexerError):
    """Invalid combination of inputs, detected before any traversal starts."""


class TraversalError(IndexerError):
    """A subtree of the projects root could not be read."""


class ClassificationError(IndexerError):
    """The commit history of a project could not be queried."""


class EnrichmentError(IndexerError):
    """The tag service was unreachable or returned unusable data."""


class PersistenceError(IndexerError):
    """The index file could not be written or read."""


class DataError(PersistenceError):
    """The index file is missing or structurally invalid."""
