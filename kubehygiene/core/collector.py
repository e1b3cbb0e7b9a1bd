"""Collector Module - Aggregates issues per resource identity."""

import threading
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, Optional

from .issues import Issue, Issues, Level, max_level


class Outcome(Mapping):
    """Read-only mapping of resource FQN to its issues.

    An outcome is a snapshot taken from a collector; writes made to the
    collector afterwards are not reflected here.
    """

    def __init__(self, issues: Optional[Dict[str, Issues]] = None):
        self._issues: Dict[str, Issues] = {
            fqn: list(items) for fqn, items in (issues or {}).items()
        }

    def __getitem__(self, fqn: str) -> Issues:
        return list(self._issues[fqn])

    def __iter__(self) -> Iterator[str]:
        return iter(self._issues)

    def __len__(self) -> int:
        return len(self._issues)

    def __repr__(self) -> str:
        return f"Outcome({self._issues!r})"

    def max_level(self, fqn: str) -> Level:
        """Get the highest issue level for a resource."""
        return max_level(self._issues.get(fqn, []))

    def counts(self) -> Dict[Level, int]:
        """Count resources by their highest issue level."""
        counts = {level: 0 for level in Level}
        for items in self._issues.values():
            counts[max_level(items)] += 1
        return counts

    @property
    def issue_count(self) -> int:
        """Get total number of issues across all resources."""
        return sum(len(items) for items in self._issues.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert outcome to dictionary."""
        return {
            fqn: [issue.to_dict() for issue in items]
            for fqn, items in sorted(self._issues.items())
        }


class Collector:
    """Thread-safe issue aggregator shared by one or more sanitizers."""

    def __init__(self):
        self._lock = threading.Lock()
        self._outcome: Dict[str, Issues] = {}

    def init_outcome(self, fqn: str) -> None:
        """Ensure the resource has an entry, even if no issue is ever added."""
        with self._lock:
            self._outcome.setdefault(fqn, [])

    def add_issue(self, fqn: str, issue: Issue) -> None:
        """Append an issue for a resource, creating its entry if needed."""
        with self._lock:
            self._outcome.setdefault(fqn, []).append(issue)

    def add_issues(self, fqn: str, issues: Iterable[Issue]) -> None:
        """Append several issues for a resource under a single lock."""
        with self._lock:
            self._outcome.setdefault(fqn, []).extend(issues)

    def add(self, fqn: str, group: str, level: Level, message: str) -> None:
        """Build and append an issue for a resource."""
        self.add_issue(fqn, Issue(group=group, level=level, message=message))

    def outcome(self) -> Outcome:
        """Get a snapshot of all issues collected so far."""
        with self._lock:
            return Outcome(self._outcome)
