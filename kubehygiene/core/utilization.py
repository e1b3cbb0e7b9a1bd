"""Utilization Module - Allocation versus usage ratio analysis.

Requested resources are the baseline, never limits. For each dimension the
analyzer first looks for usage running above the request (under-allocated),
then for a request dwarfing usage (over-allocated). The under check wins, so
at most one issue is reported per dimension.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable, List, Optional

from .config import Allocations
from .issues import ROOT, Issue, Level
from .quantity import format_bytes, format_millicores


class Dimension(Enum):
    """Resource dimensions subject to utilization analysis."""
    CPU = "CPU"
    MEMORY = "Memory"

    @property
    def formatter(self) -> Callable[[Decimal], str]:
        """Get the quantity renderer for this dimension's native unit."""
        if self is Dimension.CPU:
            return format_millicores
        return format_bytes


@dataclass
class ConsumptionMetrics:
    """Aggregated requests and current usage for a workload.

    CPU amounts are millicores, memory amounts are bytes.
    """
    requested_cpu: Decimal = Decimal(0)
    requested_mem: Decimal = Decimal(0)
    current_cpu: Decimal = Decimal(0)
    current_mem: Decimal = Decimal(0)

    def add_requests(self, cpu: Decimal, mem: Decimal) -> None:
        self.requested_cpu += cpu
        self.requested_mem += mem

    def add_usage(self, cpu: Decimal, mem: Decimal) -> None:
        self.current_cpu += cpu
        self.current_mem += mem


def to_perc(numerator: Decimal, denominator: Decimal) -> float:
    """Get numerator as a percentage of denominator, 0 when undefined."""
    if denominator == 0:
        return 0.0
    return float(numerator) * 100 / float(denominator)


class UtilizationAnalyzer:
    """Classifies usage against requests for CPU and memory."""

    UNDER_MESSAGE = (
        "At current load, {dimension} under allocated. "
        "Current:{current} vs Requested:{requested} ({ratio:.2f}%)"
    )
    OVER_MESSAGE = (
        "At current load, {dimension} over allocated. "
        "Current:{current} vs Requested:{requested} ({ratio:.2f}%)"
    )

    def check(
        self,
        dimension: Dimension,
        requested: Decimal,
        current: Decimal,
        allocations: Allocations,
    ) -> Optional[Issue]:
        """Check one dimension for under or over allocation.

        Args:
            dimension: Dimension being analyzed
            requested: Total requested amount, in the dimension's native unit
            current: Total observed usage, in the same unit
            allocations: Tolerance band for this dimension

        Returns:
            A Warn issue at the root group, or None when within tolerance
        """
        if requested == 0:
            return None

        under_ratio = to_perc(current, requested)
        if under_ratio >= 100 + allocations.under_perc:
            return self._issue(self.UNDER_MESSAGE, dimension, requested, current, under_ratio)

        # No usage reported: the over ratio is undefined.
        if current == 0:
            return None

        over_ratio = to_perc(requested, current)
        if over_ratio >= 100 + allocations.over_perc:
            return self._issue(self.OVER_MESSAGE, dimension, requested, current, over_ratio)

        return None

    def analyze(
        self,
        metrics: ConsumptionMetrics,
        cpu_allocations: Allocations,
        mem_allocations: Allocations,
    ) -> List[Issue]:
        """Check CPU then memory, each independently.

        Args:
            metrics: Aggregated requests and usage
            cpu_allocations: Tolerance band for CPU
            mem_allocations: Tolerance band for memory

        Returns:
            Issues found, CPU first
        """
        issues: List[Issue] = []
        cpu_issue = self.check(
            Dimension.CPU, metrics.requested_cpu, metrics.current_cpu, cpu_allocations
        )
        if cpu_issue:
            issues.append(cpu_issue)

        mem_issue = self.check(
            Dimension.MEMORY, metrics.requested_mem, metrics.current_mem, mem_allocations
        )
        if mem_issue:
            issues.append(mem_issue)

        return issues

    def _issue(
        self,
        template: str,
        dimension: Dimension,
        requested: Decimal,
        current: Decimal,
        ratio: float,
    ) -> Issue:
        render = dimension.formatter
        return Issue(
            group=ROOT,
            level=Level.WARN,
            message=template.format(
                dimension=dimension.value,
                current=render(current),
                requested=render(requested),
                ratio=ratio,
            ),
        )
