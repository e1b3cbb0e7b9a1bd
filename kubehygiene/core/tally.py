"""Tally Module - Scores an outcome by the health of its resources."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict

from .collector import Outcome
from .issues import Level


@dataclass
class Tally:
    """Per-kind summary of an outcome.

    Each resource counts once, under its highest issue level. The score is
    the share of resources whose worst finding is OK or Info.
    """
    kind: str
    counts: Dict[Level, int] = field(default_factory=lambda: {level: 0 for level in Level})

    @classmethod
    def from_outcome(cls, kind: str, outcome: Outcome) -> "Tally":
        """Build a tally from a sanitizer outcome."""
        return cls(kind=kind, counts=outcome.counts())

    @property
    def total(self) -> int:
        """Get number of resources tallied."""
        return sum(self.counts.values())

    @property
    def score(self) -> int:
        """Get score in 0-100, 100 when nothing was tallied."""
        if self.total == 0:
            return 100
        valid = self.counts[Level.OK] + self.counts[Level.INFO]
        return int(math.ceil(valid * 100 / self.total))

    @property
    def grade(self) -> str:
        """Get letter grade for the score."""
        if self.score >= 90:
            return "A"
        elif self.score >= 80:
            return "B"
        elif self.score >= 70:
            return "C"
        elif self.score >= 60:
            return "D"
        elif self.score >= 50:
            return "E"
        else:
            return "F"

    @property
    def error_count(self) -> int:
        """Get count of resources with at least one error."""
        return self.counts[Level.ERROR]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind,
            "score": self.score,
            "grade": self.grade,
            "total": self.total,
            "counts": {level.value: count for level, count in self.counts.items()},
        }
