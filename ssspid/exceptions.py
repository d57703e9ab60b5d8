"""Custom exception types used across :mod:`ssspid`."""

from __future__ import annotations

from typing import Optional


class SSSPIDError(Exception):
    """Base class for all package-specific errors."""


class InputError(SSSPIDError, ValueError):
    """Raised for invalid user input such as out-of-range vertex ids."""


class GraphFormatError(InputError):
    """Raised for malformed edges or when parsing a graph file fails."""


class ConfigError(SSSPIDError, ValueError):
    """Raised for invalid configuration options."""


class AlgorithmError(SSSPIDError, RuntimeError):
    """Raised when algorithm invariants are violated at runtime."""


class HeapContractError(SSSPIDError, AssertionError):
    """Raised when a heap or record precondition is violated by the caller.

    These are programming errors (pushing into a full heap, popping an empty
    one, touching a retired slot id). They subclass :class:`AssertionError`
    but are raised explicitly so they are not stripped by ``python -O``.
    """


class TargetNotReachableError(SSSPIDError, LookupError):
    """Raised when a queried target has no path from the source."""

    def __init__(self, source: int, target: int, message: Optional[str] = None) -> None:
        self.source = source
        self.target = target
        super().__init__(message or f"vertex {target} is not reachable from {source}")


__all__ = [
    "SSSPIDError",
    "InputError",
    "GraphFormatError",
    "ConfigError",
    "AlgorithmError",
    "HeapContractError",
    "TargetNotReachableError",
]
