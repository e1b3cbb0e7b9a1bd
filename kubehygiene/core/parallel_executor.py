"""Parallel Executor Module - Runs sanitizers of several kinds concurrently."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .config import SanitizeOptions

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Result of parallel execution of multiple sanitizers."""
    total_duration_ms: int = 0
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    sanitizer_count: int = 0
    successful: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def failed_count(self) -> int:
        """Get number of sanitizers that raised."""
        return len(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_duration_ms": self.total_duration_ms,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "sanitizer_count": self.sanitizer_count,
            "successful": self.successful,
            "errors": self.errors,
        }


class ParallelExecutor:
    """Executes multiple sanitizers in parallel.

    Sanitizers are synchronous; each one runs in a worker thread. Outcomes
    are complete once execute() returns.
    """

    def __init__(self, max_concurrent: int = 4):
        """Initialize the parallel executor.

        Args:
            max_concurrent: Maximum number of concurrent sanitizers
        """
        self.max_concurrent = max_concurrent
        self.sanitizers: List[Any] = []

    def add_sanitizer(self, sanitizer) -> "ParallelExecutor":
        """Add a sanitizer to execute.

        Args:
            sanitizer: Sanitizer instance to add

        Returns:
            Self for chaining
        """
        self.sanitizers.append(sanitizer)
        return self

    def add_sanitizers(self, sanitizers) -> "ParallelExecutor":
        """Add multiple sanitizers to execute.

        Returns:
            Self for chaining
        """
        self.sanitizers.extend(sanitizers)
        return self

    async def execute(self, options: Optional[SanitizeOptions] = None) -> ExecutionResult:
        """Execute all sanitizers in parallel.

        Args:
            options: Options passed to every sanitize call

        Returns:
            ExecutionResult with the names of succeeded and failed sanitizers
        """
        started_at = datetime.now()
        result = ExecutionResult(
            started_at=started_at,
            sanitizer_count=len(self.sanitizers),
        )

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def run_sanitizer(sanitizer) -> None:
            """Run a single sanitizer with semaphore."""
            async with semaphore:
                try:
                    await asyncio.to_thread(sanitizer.sanitize, options)
                    result.successful.append(sanitizer.kind)
                except Exception as e:
                    logger.error("sanitizer %s failed: %s", sanitizer.kind, e)
                    result.errors[sanitizer.kind] = str(e)

        await asyncio.gather(*(run_sanitizer(s) for s in self.sanitizers))

        completed_at = datetime.now()
        result.completed_at = completed_at
        result.total_duration_ms = int(
            (completed_at - started_at).total_seconds() * 1000
        )
        return result

    def run(self, options: Optional[SanitizeOptions] = None) -> ExecutionResult:
        """Execute all sanitizers from synchronous code."""
        return asyncio.run(self.execute(options))
