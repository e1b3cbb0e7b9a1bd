"""Exceptions raised by the sanitization engine and its collaborators."""

from typing import Any, Dict, Optional


class HygieneError(Exception):
    """Base class for all kube-hygiene errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(HygieneError):
    """Invalid configuration value or unreadable configuration file."""


class QuantityError(HygieneError, ValueError):
    """Malformed resource quantity supplied by the data access layer."""

    def __init__(self, quantity: Any):
        super().__init__(
            f"Invalid resource quantity: {quantity!r}",
            details={"quantity": str(quantity)},
        )


class SnapshotError(HygieneError):
    """Cluster snapshot could not be read or parsed."""
