"""Quantity Module - Parse and render Kubernetes resource quantities.

CPU amounts are handled in millicores and memory amounts in bytes. Parsing is
delegated to the kubernetes client so every suffix the API server accepts is
understood; rendering mirrors the canonical form the API server prints.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Union

from kubernetes.utils import parse_quantity

from .exceptions import QuantityError

QuantityLike = Union[str, int, float, Decimal]

_BINARY_SUFFIXES = [
    ("Ei", 1024 ** 6),
    ("Pi", 1024 ** 5),
    ("Ti", 1024 ** 4),
    ("Gi", 1024 ** 3),
    ("Mi", 1024 ** 2),
    ("Ki", 1024),
]

_DECIMAL_SUFFIXES = [
    ("E", 1000 ** 6),
    ("P", 1000 ** 5),
    ("T", 1000 ** 4),
    ("G", 1000 ** 3),
    ("M", 1000 ** 2),
    ("k", 1000),
]


def to_decimal(quantity: QuantityLike) -> Decimal:
    """Parse a quantity into its base unit value.

    Raises:
        QuantityError: If the quantity is not a valid Kubernetes quantity
    """
    try:
        return parse_quantity(quantity)
    except (ValueError, TypeError, InvalidOperation) as e:
        raise QuantityError(quantity) from e


def to_millicores(quantity: QuantityLike) -> Decimal:
    """Parse a CPU quantity into millicores."""
    return to_decimal(quantity) * 1000


def to_bytes(quantity: QuantityLike) -> Decimal:
    """Parse a memory quantity into bytes."""
    return to_decimal(quantity)


def format_millicores(millicores: Decimal) -> str:
    """Render millicores the way the API server prints CPU, e.g. 20m or 2."""
    value = int(math.ceil(millicores))
    if value % 1000 == 0:
        return str(value // 1000)
    return f"{value}m"


def _with_suffix(value: int, suffixes) -> Optional[str]:
    for suffix, factor in suffixes:
        if value % factor == 0:
            return f"{value // factor}{suffix}"
    return None


def format_bytes(amount: Decimal) -> str:
    """Render bytes with the shortest exact suffix, e.g. 10Mi or 100M.

    Binary suffixes win a tie; amounts no suffix divides print as plain bytes.
    """
    value = int(math.ceil(amount))
    if value == 0:
        return "0"
    candidates = [
        rendered
        for rendered in (
            _with_suffix(value, _BINARY_SUFFIXES),
            _with_suffix(value, _DECIMAL_SUFFIXES),
        )
        if rendered
    ]
    if not candidates:
        return str(value)
    return min(candidates, key=len)


def resource_amount(resources: Optional[Dict[str, Any]], name: str) -> Decimal:
    """Get a resource amount from a requests/limits/usage block.

    CPU is returned in millicores and memory in bytes; absent entries are 0.
    """
    if not resources or resources.get(name) is None:
        return Decimal(0)
    if name == "cpu":
        return to_millicores(resources[name])
    return to_bytes(resources[name])
