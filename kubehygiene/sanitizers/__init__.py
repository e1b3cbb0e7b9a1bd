"""Sanitizer implementations for Kube Hygiene."""

from .base import BaseSanitizer
from .deployment import DeploymentSanitizer
from .pod import PodSanitizer
from .listers import DeploymentLister, PodLister

__all__ = [
    "BaseSanitizer",
    "DeploymentSanitizer",
    "PodSanitizer",
    "DeploymentLister",
    "PodLister",
]
