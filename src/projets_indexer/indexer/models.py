"""Data models for the indexer."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ProjectStatus(str, Enum):
    """Lifecycle status derived from the age of the latest commit."""

    ACTIVE = "Active"  # last commit under 7 days old
    ON_HOLD = "OnHold"  # 7 to 27 days
    ARCHIVED = "Archived"  # 28 days or more, or no usable history

    def __str__(self) -> str:
        return self.value


@dataclass
class Project:
    """Represents one indexed project directory."""

    name: str
    category: str
    status: ProjectStatus
    tags: list[str] = field(default_factory=list)
    path: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the index file record shape."""
        return {
            "name": self.name,
            "category": self.category,
            "status": self.status.value,
            "tags": list(self.tags),
            "path": self.path,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Project":
        """Build a Project from an index file record.

        Raises:
            ValueError: If a field is missing, has the wrong type, or the
                status is not one of the known literals.
        """
        for key in ("name", "category", "path"):
            if key not in data:
                raise ValueError(f"missing field '{key}'")
            if not isinstance(data[key], str):
                raise ValueError(f"field '{key}' must be a string")

        if "status" not in data:
            raise ValueError("missing field 'status'")
        if not isinstance(data["status"], str):
            raise ValueError("field 'status' must be a string")
        try:
            status = ProjectStatus(data["status"])
        except ValueError:
            raise ValueError(f"unknown status {data['status']!r}") from None

        if "tags" not in data:
            raise ValueError("missing field 'tags'")
        tags = data["tags"]
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ValueError("field 'tags' must be a list of strings")

        return cls(
            name=data["name"],
            category=data["category"],
            status=status,
            tags=list(tags),
            path=data["path"],
        )
