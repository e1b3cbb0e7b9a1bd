"""Lister Module - Data access capabilities consumed by sanitizers.

Each capability is a small abstract interface satisfied by a cluster cache.
Objects are API-shaped dicts keyed by their fully qualified name.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..core.config import Allocations

Object = Dict[str, Any]


class DeploymentsLister(ABC):
    """Lists deployments."""

    @abstractmethod
    def list_deployments(self) -> Dict[str, Object]:
        """List all deployments keyed by FQN."""


class PodsLister(ABC):
    """Lists pods."""

    @abstractmethod
    def list_pods(self) -> Dict[str, Object]:
        """List all pods keyed by FQN."""


class PodSelectorLister(ABC):
    """Lists pods matching a label selector."""

    @abstractmethod
    def list_pods_by_selector(
        self, namespace: str, selector: Optional[Object]
    ) -> Dict[str, Object]:
        """List pods in a namespace matching a label selector, keyed by FQN."""


class PodsMetricsLister(ABC):
    """Lists current pod metrics."""

    @abstractmethod
    def list_pods_metrics(self) -> Dict[str, Object]:
        """List PodMetrics objects keyed by the FQN of their pod."""


class AllocationsLister(ABC):
    """Resolves utilization tolerance bands."""

    @abstractmethod
    def cpu_resource_limits(self) -> Allocations:
        """Get CPU allocation thresholds."""

    @abstractmethod
    def mem_resource_limits(self) -> Allocations:
        """Get memory allocation thresholds."""


class PodLimiter(ABC):
    """Resolves per-pod ceilings."""

    @abstractmethod
    def restarts_limit(self) -> int:
        """Get the number of restarts tolerated per container."""

    @abstractmethod
    def pod_cpu_limit(self) -> float:
        """Get the CPU usage ceiling as a percentage of the CPU limit."""

    @abstractmethod
    def pod_mem_limit(self) -> float:
        """Get the memory usage ceiling as a percentage of the memory limit."""


class DeploymentLister(
    DeploymentsLister,
    PodSelectorLister,
    PodsMetricsLister,
    AllocationsLister,
    PodLimiter,
):
    """Everything the deployment sanitizer needs from the cluster."""


class PodLister(PodsLister, PodsMetricsLister, PodLimiter):
    """Everything the pod sanitizer needs from the cluster."""
