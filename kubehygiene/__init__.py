"""Kube Hygiene - Read-only health and hygiene analyzer for Kubernetes workloads."""

__version__ = "1.0.0"
