"""Contract ABI: method registry, argument validation and call handlers."""

from .registry import AbiRegistry, Method, Param
from .validation import CallValidator, ValidationIssue

__all__ = ["AbiRegistry", "Method", "Param", "CallValidator", "ValidationIssue"]
