"""Resource identity helpers."""

from typing import Any, Dict, Tuple


def fqn(namespace: str, name: str) -> str:
    """Build a fully qualified name, namespace/name.

    Cluster scoped resources (empty namespace) are identified by name only.
    """
    if not namespace:
        return name
    return f"{namespace}/{name}"


def namespaced(resource_fqn: str) -> Tuple[str, str]:
    """Split a fully qualified name into (namespace, name)."""
    if "/" not in resource_fqn:
        return "", resource_fqn
    namespace, name = resource_fqn.split("/", 1)
    return namespace, name


def meta_fqn(obj: Dict[str, Any]) -> str:
    """Build the fully qualified name of an API object from its metadata."""
    metadata = obj["metadata"]
    return fqn(metadata.get("namespace", ""), metadata["name"])
