"""Tag enrichment through a language model."""

import logging
import re
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a technical project tagger. "
    "Output ONLY comma-separated tags, no explanations or additional text."
)

MAX_TAG_LENGTH = 40

# Characters models like to decorate tags with
_STRIP_CHARS = re.compile(r"[*:.()\[\]{}]")
# Leading list markers: "-", "•", "1.", "2)"
_LIST_MARKER = re.compile(r"^\s*(?:[-•]+|\d+[.)])\s*")
_WHITESPACE = re.compile(r"\s+")


class TagSuggestionSource(Protocol):
    """A text-completion service used to suggest tags."""

    def complete(self, prompt: str, system: str | None = None) -> str:
        """Return the model's completion for a prompt."""
        ...


def build_prompt(name: str, path: Path | str) -> str:
    """Build the tag request for a project."""
    return (
        f"Generate 3-5 technical tags for this project named '{name}'. "
        f"Path: {path}. "
        "Output ONLY comma-separated tags, no explanations or additional text."
    )


def parse_tags(text: str) -> list[str]:
    """
    Turn a model completion into a flat list of short tags.

    Splits on newlines and commas, strips list markers and decoration,
    lowercases, and drops empty, overlong and duplicate tags. Order follows
    the completion.
    """
    tags: list[str] = []
    seen: set[str] = set()
    for line in text.strip().splitlines():
        for raw in line.split(","):
            tag = _LIST_MARKER.sub("", raw)
            tag = _STRIP_CHARS.sub("", tag.strip().lower())
            tag = _WHITESPACE.sub(" ", tag).strip()
            if not tag or len(tag) > MAX_TAG_LENGTH or tag in seen:
                continue
            seen.add(tag)
            tags.append(tag)
    return tags


class TagEnricher:
    """Best-effort tag generation for projects.

    Every failure degrades to an empty tag list; enrich() never raises.
    """

    def __init__(self, source: TagSuggestionSource | None, enabled: bool = True):
        self.source = source
        self.enabled = enabled and source is not None

    def enrich(self, name: str, path: Path | str) -> list[str]:
        """Return tags for a project, or [] when disabled or on any failure."""
        if not self.enabled:
            return []

        prompt = build_prompt(name, path)
        try:
            completion = self.source.complete(prompt, system=SYSTEM_PROMPT)
        except Exception as e:
            logger.warning("Failed to generate tags for %s: %s", name, e)
            return []

        if not isinstance(completion, str):
            logger.warning("Failed to generate tags for %s: completion is not text", name)
            return []

        tags = parse_tags(completion)
        if not tags:
            logger.warning("Failed to generate tags for %s: no usable tags in response", name)
        else:
            logger.debug("Tags for %s: %s", name, ", ".join(tags))
        return tags
