"""
projets-indexer - catalog of the software projects living under a directory tree.

Walks a projects root, classifies each project by how recently its git
history moved, optionally asks a local Ollama model for descriptive tags,
and writes the result to a JSON index that the search and stats commands
read back.

Stack:
- Python + argparse (CLI)
- git (commit recency)
- Ollama over httpx (tag generation)
- JSON (index file)
"""

__version__ = "0.1.2"
