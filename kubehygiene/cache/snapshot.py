"""Snapshot Module - File backed cluster cache implementing every lister.

A snapshot is a YAML or JSON dump of API objects, as produced by
``kubectl get deploy,pods -A -o yaml`` plus the metrics API pod list. Both
multi-document YAML and ``List`` objects with ``items`` are accepted.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

import yaml

from ..core.config import Allocations, SanitizerConfig
from ..core.exceptions import SnapshotError
from ..core.fqn import meta_fqn
from ..sanitizers.listers import DeploymentLister, Object, PodLister

logger = logging.getLogger(__name__)

DEPLOYMENT = "Deployment"
POD = "Pod"
POD_METRICS = "PodMetrics"

SUPPORTED_KINDS = (DEPLOYMENT, POD, POD_METRICS)


def _flatten(docs: Iterable[Any]) -> Iterator[Dict[str, Any]]:
    for doc in docs:
        if isinstance(doc, list):
            yield from _flatten(doc)
            continue
        if not isinstance(doc, dict):
            continue

        kind = doc.get("kind", "")
        if "items" in doc and kind.endswith("List"):
            item_kind = kind[: -len("List")]
            for item in doc.get("items") or []:
                if isinstance(item, dict):
                    item.setdefault("kind", item_kind)
                    yield item
            continue
        yield doc


def _separate_documents(content: str) -> str:
    """Start a new YAML document at every top-level JSON object or array."""
    separated: List[str] = []
    for line in content.splitlines(keepends=True):
        if separated and line[:1] in ("{", "[") and not separated[-1].startswith("---"):
            separated.append("---\n")
        separated.append(line)
    return "".join(separated)


def match_selector(selector: Optional[Dict[str, Any]], labels: Dict[str, str]) -> bool:
    """Check labels against a label selector.

    An absent selector matches nothing, an empty one matches everything.
    """
    if selector is None:
        return False

    for key, value in (selector.get("matchLabels") or {}).items():
        if labels.get(key) != value:
            return False

    for expr in selector.get("matchExpressions") or []:
        key = expr["key"]
        operator = expr["operator"]
        values = expr.get("values") or []
        if operator == "In":
            if labels.get(key) not in values:
                return False
        elif operator == "NotIn":
            if key in labels and labels[key] in values:
                return False
        elif operator == "Exists":
            if key not in labels:
                return False
        elif operator == "DoesNotExist":
            if key in labels:
                return False
        else:
            raise SnapshotError(
                f"Unsupported selector operator: {operator}",
                details={"expression": expr},
            )
    return True


class ClusterSnapshot(DeploymentLister, PodLister):
    """Point-in-time cluster state served through the lister interfaces."""

    def __init__(
        self,
        objects: Optional[Iterable[Dict[str, Any]]] = None,
        config: Optional[SanitizerConfig] = None,
    ):
        """Initialize the snapshot.

        Args:
            objects: API objects; unsupported kinds are skipped
            config: Thresholds served to sanitizers, defaults when omitted
        """
        self.config = config or SanitizerConfig()
        self._objects: Dict[str, Dict[str, Object]] = {kind: {} for kind in SUPPORTED_KINDS}
        for obj in _flatten(objects or []):
            self.add(obj)

    @classmethod
    def from_file(
        cls, path: Union[str, Path], config: Optional[SanitizerConfig] = None
    ) -> "ClusterSnapshot":
        """Load a snapshot from a YAML or JSON file.

        Raises:
            SnapshotError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SnapshotError(f"Cannot read snapshot file: {path}") from e

        try:
            docs = list(yaml.safe_load_all(content))
        except yaml.YAMLError as e:
            # kubectl output appended with >> carries no document marker.
            try:
                docs = list(yaml.safe_load_all(_separate_documents(content)))
            except yaml.YAMLError:
                raise SnapshotError(f"Invalid snapshot file: {path}") from e

        snapshot = cls(docs, config=config)
        logger.info(
            "loaded snapshot %s: %d deployment(s), %d pod(s), %d pod metric(s)",
            path,
            len(snapshot._objects[DEPLOYMENT]),
            len(snapshot._objects[POD]),
            len(snapshot._objects[POD_METRICS]),
        )
        return snapshot

    def add(self, obj: Dict[str, Any]) -> None:
        """Add an API object to the snapshot."""
        kind = obj.get("kind", "")
        if kind not in self._objects:
            logger.debug("skipping unsupported kind %r", kind)
            return
        if not (obj.get("metadata") or {}).get("name"):
            logger.warning("skipping %s without metadata.name", kind)
            return
        self._objects[kind][meta_fqn(obj)] = obj

    def list_deployments(self) -> Dict[str, Object]:
        return dict(self._objects[DEPLOYMENT])

    def list_pods(self) -> Dict[str, Object]:
        return dict(self._objects[POD])

    def list_pods_by_selector(
        self, namespace: str, selector: Optional[Object]
    ) -> Dict[str, Object]:
        pods: Dict[str, Object] = {}
        for fqn, pod in self._objects[POD].items():
            metadata = pod["metadata"]
            if metadata.get("namespace", "") != namespace:
                continue
            if match_selector(selector, metadata.get("labels") or {}):
                pods[fqn] = pod
        return pods

    def list_pods_metrics(self) -> Dict[str, Object]:
        return dict(self._objects[POD_METRICS])

    def cpu_resource_limits(self) -> Allocations:
        return self.config.cpu

    def mem_resource_limits(self) -> Allocations:
        return self.config.memory

    def restarts_limit(self) -> int:
        return self.config.pod.restarts

    def pod_cpu_limit(self) -> float:
        return self.config.pod.cpu_perc

    def pod_mem_limit(self) -> float:
        return self.config.pod.mem_perc

