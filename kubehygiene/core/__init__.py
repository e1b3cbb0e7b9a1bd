"""Core modules for Kube Hygiene."""

from .issues import ROOT, Issue, Issues, Level, max_level
from .collector import Collector, Outcome
from .config import Allocations, PodLimits, SanitizerConfig, SanitizeOptions, load_config
from .exceptions import ConfigError, HygieneError, QuantityError, SnapshotError
from .fqn import fqn, namespaced
from .utilization import ConsumptionMetrics, Dimension, UtilizationAnalyzer
from .tally import Tally
from .parallel_executor import ParallelExecutor

__all__ = [
    "ROOT",
    "Issue",
    "Issues",
    "Level",
    "max_level",
    "Collector",
    "Outcome",
    "Allocations",
    "PodLimits",
    "SanitizerConfig",
    "SanitizeOptions",
    "load_config",
    "ConfigError",
    "HygieneError",
    "QuantityError",
    "SnapshotError",
    "fqn",
    "namespaced",
    "ConsumptionMetrics",
    "Dimension",
    "UtilizationAnalyzer",
    "Tally",
    "ParallelExecutor",
]
