"""Pod Sanitizer - Resource, restart and limit threshold checks for pods."""

import logging
from typing import Any, Dict, List, Optional

from ..core.collector import Collector
from ..core.config import SanitizeOptions
from ..core.issues import Issue, Level
from ..core.utilization import to_perc
from . import container
from .base import BaseSanitizer
from .listers import PodLister

logger = logging.getLogger(__name__)

RESTARTS = "Pod was restarted ({count}) times"
CPU_THRESHOLD = "CPU threshold ({ceiling:g}%) reached ({perc:.2f}%)"
MEM_THRESHOLD = "Memory threshold ({ceiling:g}%) reached ({perc:.2f}%)"


class PodSanitizer(BaseSanitizer):
    """Sanitizes every pod listed by a PodLister."""

    def __init__(self, collector: Collector, lister: PodLister):
        super().__init__(kind="pod", collector=collector)
        self.lister = lister
        self._pods_metrics: Dict[str, Dict[str, Any]] = {}

    def sanitize(self, options: Optional[SanitizeOptions] = None) -> None:
        """Sanitize all pods.

        Args:
            options: Per-call options; ``over_allocs`` enables the usage
                versus limits checks
        """
        options = options or SanitizeOptions()
        pods = self.lister.list_pods()
        self._pods_metrics = self.lister.list_pods_metrics() if options.over_allocs else {}

        for fqn in sorted(pods):
            self._sanitize_resource(fqn, pods[fqn], options, self._check)

    def _check(
        self,
        fqn: str,
        pod: Dict[str, Any],
        options: SanitizeOptions,
        issues: List[Issue],
    ) -> None:
        restarts_limit = self.lister.restarts_limit()

        pod_spec = pod["spec"]
        issues.extend(container.check_pod_spec_resources(pod_spec))
        self._check_restarts(pod.get("status") or {}, restarts_limit, issues)

        if options.over_allocs:
            self._check_utilization(pod_spec, self._pods_metrics.get(fqn), issues)

    def _check_restarts(
        self, status: Dict[str, Any], limit: int, issues: List[Issue]
    ) -> None:
        statuses = (status.get("initContainerStatuses") or []) + (
            status.get("containerStatuses") or []
        )
        for cs in statuses:
            count = cs.get("restartCount") or 0
            if count > limit:
                issues.append(Issue(
                    group=cs["name"],
                    level=Level.WARN,
                    message=RESTARTS.format(count=count),
                ))

    def _check_utilization(
        self,
        pod_spec: Dict[str, Any],
        pod_metrics: Optional[Dict[str, Any]],
        issues: List[Issue],
    ) -> None:
        if pod_metrics is None:
            return

        cpu_ceiling = self.lister.pod_cpu_limit()
        mem_ceiling = self.lister.pod_mem_limit()
        usage = container.container_usage(pod_metrics)

        for co in pod_spec["containers"]:
            name = co["name"]
            if name not in usage:
                continue
            cpu, mem = usage[name]
            cpu_limit, mem_limit = container.limits(co)

            cpu_perc = to_perc(cpu, cpu_limit)
            if cpu_limit and cpu_perc >= cpu_ceiling:
                issues.append(Issue(
                    group=name,
                    level=Level.WARN,
                    message=CPU_THRESHOLD.format(ceiling=cpu_ceiling, perc=cpu_perc),
                ))

            mem_perc = to_perc(mem, mem_limit)
            if mem_limit and mem_perc >= mem_ceiling:
                issues.append(Issue(
                    group=name,
                    level=Level.WARN,
                    message=MEM_THRESHOLD.format(ceiling=mem_ceiling, perc=mem_perc),
                ))
