"""Container Module - Container level resource accounting and checks."""

from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..core.issues import Issue, Level
from ..core.quantity import resource_amount

NO_RESOURCES = "No resources defined"

_DIMENSIONS = ("cpu", "memory")


def _resources(container: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    resources = container.get("resources") or {}
    return resources.get("requests") or {}, resources.get("limits") or {}


def all_containers(pod_spec: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    """Iterate init containers then main containers of a pod spec."""
    yield from pod_spec.get("initContainers") or []
    yield from pod_spec["containers"]


def requests(container: Dict[str, Any]) -> Tuple[Decimal, Decimal]:
    """Get requested (millicores, bytes) for a container."""
    reqs, _ = _resources(container)
    return resource_amount(reqs, "cpu"), resource_amount(reqs, "memory")


def limits(container: Dict[str, Any]) -> Tuple[Decimal, Decimal]:
    """Get (millicores, bytes) limits for a container."""
    _, lims = _resources(container)
    return resource_amount(lims, "cpu"), resource_amount(lims, "memory")


def has_resources(container: Dict[str, Any]) -> bool:
    """True when any CPU or memory request or limit is declared."""
    reqs, lims = _resources(container)
    return any(reqs.get(d) is not None or lims.get(d) is not None for d in _DIMENSIONS)


def check_resources(container: Dict[str, Any]) -> Optional[Issue]:
    """Flag a container declaring no CPU or memory requests or limits."""
    if has_resources(container):
        return None
    return Issue(group=container["name"], level=Level.WARN, message=NO_RESOURCES)


def check_pod_spec_resources(pod_spec: Dict[str, Any]) -> List[Issue]:
    """Run the resource profile check over every container of a pod spec."""
    issues: List[Issue] = []
    for container in all_containers(pod_spec):
        issue = check_resources(container)
        if issue:
            issues.append(issue)
    return issues


def pod_requests(pod_spec: Dict[str, Any]) -> Tuple[Decimal, Decimal]:
    """Sum requests over the long running (main) containers of a pod spec."""
    cpu, mem = Decimal(0), Decimal(0)
    for container in pod_spec["containers"]:
        c, m = requests(container)
        cpu += c
        mem += m
    return cpu, mem


def container_usage(pod_metrics: Optional[Dict[str, Any]]) -> Dict[str, Tuple[Decimal, Decimal]]:
    """Map container name to current (millicores, bytes) from a PodMetrics object."""
    usage: Dict[str, Tuple[Decimal, Decimal]] = {}
    if not pod_metrics:
        return usage
    for cx in pod_metrics.get("containers") or []:
        cx_usage = cx.get("usage") or {}
        usage[cx["name"]] = (
            resource_amount(cx_usage, "cpu"),
            resource_amount(cx_usage, "memory"),
        )
    return usage
