"""Deployment Sanitizer - Scale, availability and allocation checks for deployments."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..core.collector import Collector
from ..core.config import Allocations, SanitizeOptions
from ..core.issues import Issue, Level
from ..core.utilization import ConsumptionMetrics, UtilizationAnalyzer
from . import container
from .base import BaseSanitizer
from .listers import DeploymentLister

logger = logging.getLogger(__name__)

ZERO_SCALE = "Zero scale detected"
NO_AVAILABLE_REPLICAS = "Used? No available replicas found"
COLLISIONS = "ReplicaSet collisions detected ({count})"


class DeploymentSanitizer(BaseSanitizer):
    """Sanitizes every deployment listed by a DeploymentLister.

    Checks run in a fixed order for each deployment and none of them stops
    the others: scale, availability, collisions, container resources and,
    when requested, utilization of the deployment's pods.
    """

    def __init__(
        self,
        collector: Collector,
        lister: DeploymentLister,
        analyzer: Optional[UtilizationAnalyzer] = None,
    ):
        """Initialize the deployment sanitizer.

        Args:
            collector: Collector receiving the issues
            lister: Data access for deployments, pods, metrics and thresholds
            analyzer: Utilization analyzer, a default one when omitted
        """
        super().__init__(kind="deployment", collector=collector)
        self.lister = lister
        self.analyzer = analyzer or UtilizationAnalyzer()
        self._pods_metrics: Dict[str, Dict[str, Any]] = {}

    def sanitize(self, options: Optional[SanitizeOptions] = None) -> None:
        """Sanitize all deployments.

        Args:
            options: Per-call options; ``over_allocs`` enables utilization
                analysis against current pod metrics
        """
        options = options or SanitizeOptions()
        deployments = self.lister.list_deployments()
        self._pods_metrics = self.lister.list_pods_metrics() if options.over_allocs else {}

        for fqn in sorted(deployments):
            self._sanitize_resource(fqn, deployments[fqn], options, self._check)

    def _check(
        self,
        fqn: str,
        dp: Dict[str, Any],
        options: SanitizeOptions,
        issues: List[Issue],
    ) -> None:
        spec = dp["spec"]
        status = dp.get("status") or {}
        allocations = (self.lister.cpu_resource_limits(), self.lister.mem_resource_limits())

        replicas = spec.get("replicas", 1)
        available = status.get("availableReplicas") or 0
        collisions = status.get("collisionCount") or 0

        self._check_scale(replicas, issues)
        self._check_availability(replicas, available, issues)
        self._check_collisions(collisions, issues)

        pod_spec = spec["template"]["spec"]
        issues.extend(container.check_pod_spec_resources(pod_spec))

        if options.over_allocs:
            self._check_utilization(dp, pod_spec, available, allocations, issues)

    def _check_scale(self, replicas: int, issues: List[Issue]) -> None:
        if replicas == 0:
            self._root(issues, Level.WARN, ZERO_SCALE)

    def _check_availability(self, replicas: int, available: int, issues: List[Issue]) -> None:
        if replicas != 0 and available == 0:
            self._root(issues, Level.WARN, NO_AVAILABLE_REPLICAS)

    def _check_collisions(self, collisions: int, issues: List[Issue]) -> None:
        if collisions > 0:
            self._root(issues, Level.ERROR, COLLISIONS.format(count=collisions))

    def _check_utilization(
        self,
        dp: Dict[str, Any],
        pod_spec: Dict[str, Any],
        available: int,
        allocations: Tuple[Allocations, Allocations],
        issues: List[Issue],
    ) -> None:
        cpu_allocations, mem_allocations = allocations

        mx = self.deployment_usage(dp, pod_spec, available)
        logger.debug(
            "deployment %s: requested cpu=%s mem=%s, current cpu=%s mem=%s",
            dp["metadata"]["name"],
            mx.requested_cpu,
            mx.requested_mem,
            mx.current_cpu,
            mx.current_mem,
        )
        issues.extend(self.analyzer.analyze(mx, cpu_allocations, mem_allocations))

    def deployment_usage(
        self, dp: Dict[str, Any], pod_spec: Dict[str, Any], available: int
    ) -> ConsumptionMetrics:
        """Aggregate requests and current usage for a deployment.

        Requests come from the pod template times the available replicas.
        Usage is summed over the metrics of the pods the deployment selects;
        pods without metrics contribute nothing.
        """
        mx = ConsumptionMetrics()
        cpu, mem = container.pod_requests(pod_spec)
        mx.add_requests(cpu * available, mem * available)

        namespace = dp["metadata"].get("namespace", "")
        pods = self.lister.list_pods_by_selector(namespace, dp["spec"].get("selector"))
        for pod_fqn in sorted(pods):
            pod_mx = self._pods_metrics.get(pod_fqn)
            if pod_mx is None:
                logger.debug("no metrics for pod %s", pod_fqn)
                continue
            for cx_cpu, cx_mem in container.container_usage(pod_mx).values():
                mx.add_usage(cx_cpu, cx_mem)
        return mx
