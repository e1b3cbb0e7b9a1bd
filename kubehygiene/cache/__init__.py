"""Cluster data access backed by snapshot files."""

from .snapshot import ClusterSnapshot

__all__ = ["ClusterSnapshot"]
