"""Configuration Module - Threshold value objects and YAML loading."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .exceptions import ConfigError

DEFAULT_UNDER_PERC = 200
DEFAULT_OVER_PERC = 50
DEFAULT_RESTARTS = 3
DEFAULT_POD_CPU_PERC = 80.0
DEFAULT_POD_MEM_PERC = 80.0


@dataclass(frozen=True)
class Allocations:
    """Tolerance band around 100% utilization of requested resources.

    Usage at or above ``100 + under_perc`` percent of the request is
    under-allocated; a request at or above ``100 + over_perc`` percent of usage
    is over-allocated.
    """
    under_perc: float = DEFAULT_UNDER_PERC
    over_perc: float = DEFAULT_OVER_PERC

    def __post_init__(self):
        if self.under_perc < 0 or self.over_perc < 0:
            raise ConfigError(
                "Allocation percentages must be non-negative",
                details={"under_perc": self.under_perc, "over_perc": self.over_perc},
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"underPerc": self.under_perc, "overPerc": self.over_perc}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Allocations":
        """Create allocations from dictionary, defaulting missing keys."""
        data = data or {}
        return cls(
            under_perc=_number(data, "underPerc", DEFAULT_UNDER_PERC),
            over_perc=_number(data, "overPerc", DEFAULT_OVER_PERC),
        )


@dataclass(frozen=True)
class PodLimits:
    """Per-pod ceilings: restart count and CPU/memory percent of limits."""
    restarts: int = DEFAULT_RESTARTS
    cpu_perc: float = DEFAULT_POD_CPU_PERC
    mem_perc: float = DEFAULT_POD_MEM_PERC

    def __post_init__(self):
        if self.restarts < 0 or self.cpu_perc < 0 or self.mem_perc < 0:
            raise ConfigError(
                "Pod limits must be non-negative",
                details=self.to_dict(),
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "restarts": self.restarts,
            "limits": {"cpu": self.cpu_perc, "memory": self.mem_perc},
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PodLimits":
        """Create pod limits from dictionary, defaulting missing keys."""
        data = data or {}
        limits = data.get("limits") or {}
        return cls(
            restarts=int(_number(data, "restarts", DEFAULT_RESTARTS)),
            cpu_perc=_number(limits, "cpu", DEFAULT_POD_CPU_PERC),
            mem_perc=_number(limits, "memory", DEFAULT_POD_MEM_PERC),
        )


@dataclass(frozen=True)
class SanitizerConfig:
    """Validated thresholds consumed by the sanitizers."""
    cpu: Allocations = field(default_factory=Allocations)
    memory: Allocations = field(default_factory=Allocations)
    pod: PodLimits = field(default_factory=PodLimits)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "allocations": {
                "cpu": self.cpu.to_dict(),
                "memory": self.memory.to_dict(),
            },
            "pod": self.pod.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SanitizerConfig":
        """Create configuration from dictionary."""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping")
        allocations = data.get("allocations") or {}
        return cls(
            cpu=Allocations.from_dict(allocations.get("cpu")),
            memory=Allocations.from_dict(allocations.get("memory")),
            pod=PodLimits.from_dict(data.get("pod")),
        )


@dataclass(frozen=True)
class SanitizeOptions:
    """Per-call options for a sanitize pass.

    Attributes:
        over_allocs: Include the over/under allocation analysis, which needs
            pod metrics and is skipped by default
    """
    over_allocs: bool = False


def load_config(path: Union[str, Path]) -> SanitizerConfig:
    """Load sanitizer configuration from a YAML file.

    Args:
        path: Path to the configuration file

    Returns:
        Parsed SanitizerConfig

    Raises:
        ConfigError: If the file cannot be read or holds invalid values
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file: {path}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {path}") from e

    return SanitizerConfig.from_dict(data)


def _number(data: Dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(
            f"Configuration value '{key}' must be a number",
            details={key: value},
        )
    return value
