"""Issue Module - Severity levels and diagnostic records for sanitized resources."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List

# Group for issues about the resource as a whole rather than one container.
ROOT = "__root__"


class Level(Enum):
    """Severity levels for issues, ordered from OK to ERROR."""
    OK = "ok"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def weight(self) -> int:
        """Get numeric weight for the level."""
        weights = {
            Level.OK: 0,
            Level.INFO: 1,
            Level.WARN: 2,
            Level.ERROR: 3,
        }
        return weights[self]

    @property
    def color(self) -> str:
        """Get color name for the level."""
        colors = {
            Level.OK: "green",
            Level.INFO: "blue",
            Level.WARN: "yellow",
            Level.ERROR: "red",
        }
        return colors[self]

    def __lt__(self, other: "Level") -> bool:
        if not isinstance(other, Level):
            return NotImplemented
        return self.weight < other.weight

    def __le__(self, other: "Level") -> bool:
        if not isinstance(other, Level):
            return NotImplemented
        return self.weight <= other.weight

    def __gt__(self, other: "Level") -> bool:
        if not isinstance(other, Level):
            return NotImplemented
        return self.weight > other.weight

    def __ge__(self, other: "Level") -> bool:
        if not isinstance(other, Level):
            return NotImplemented
        return self.weight >= other.weight


@dataclass(frozen=True)
class Issue:
    """A single finding about a resource or one of its containers."""
    group: str
    level: Level
    message: str

    @property
    def is_root(self) -> bool:
        """True when the issue concerns the whole resource."""
        return self.group == ROOT

    def to_dict(self) -> Dict[str, Any]:
        """Convert issue to dictionary."""
        return {
            "group": self.group,
            "level": self.level.value,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        """Create issue from dictionary."""
        return cls(
            group=data.get("group", ROOT),
            level=Level(data["level"]),
            message=data["message"],
        )


# Ordered sequence of issues for one resource; empty means nothing was found.
Issues = List[Issue]


def max_level(issues: Iterable[Issue]) -> Level:
    """Get the highest level among issues, OK when there are none."""
    level = Level.OK
    for issue in issues:
        if issue.level > level:
            level = issue.level
    return level
