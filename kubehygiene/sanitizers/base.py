"""Base Sanitizer Module - Shared shape of per-kind sanitizers."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from ..core.collector import Collector, Outcome
from ..core.config import SanitizeOptions
from ..core.issues import ROOT, Issue, Level

logger = logging.getLogger(__name__)


class BaseSanitizer(ABC):
    """Abstract base class for all sanitizers.

    A sanitizer evaluates every resource of one kind and writes its findings
    into a collector, which may be shared with sanitizers of other kinds.
    """

    def __init__(self, kind: str, collector: Collector):
        """Initialize the sanitizer.

        Args:
            kind: Resource kind handled, e.g. "deployment"
            collector: Collector receiving the issues
        """
        self.kind = kind
        self.collector = collector

    @abstractmethod
    def sanitize(self, options: Optional[SanitizeOptions] = None) -> None:
        """Evaluate every resource of this kind.

        Args:
            options: Per-call options, defaults to SanitizeOptions()
        """

    def outcome(self) -> Outcome:
        """Get the issues collected so far."""
        return self.collector.outcome()

    def _sanitize_resource(
        self,
        fqn: str,
        obj: Dict[str, Any],
        options: SanitizeOptions,
        check: Callable[[str, Dict[str, Any], SanitizeOptions, List[Issue]], None],
    ) -> None:
        """Run a resource's check sequence and finalize its entry.

        Issues are staged and only reach the collector once the whole
        sequence completes; an exception leaves the resource's entry empty.
        """
        self.collector.init_outcome(fqn)
        issues: List[Issue] = []
        check(fqn, obj, options, issues)
        self.collector.add_issues(fqn, issues)
        logger.debug("%s %s: %d issue(s)", self.kind, fqn, len(issues))

    @staticmethod
    def _root(issues: List[Issue], level: Level, message: str) -> None:
        issues.append(Issue(group=ROOT, level=level, message=message))
