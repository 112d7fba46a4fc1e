"""Argument validation for contract calls - rejects malformed input before any state is touched."""

from __future__ import annotations
from typing import Any, Optional
import re

from pydantic import BaseModel

from warlands.abi.registry import Method, Param
from warlands.errors import InvariantFault, INVALID_ARGUMENT


class ValidationIssue(BaseModel):
    """A specific problem found in a call's arguments."""
    severity: str  # "error" or "warning"
    code: str  # Machine-readable error code
    message: str  # Human-readable explanation
    path: Optional[str] = None  # Parameter name, with index for arrays
    suggestion: Optional[str] = None


class CallValidator:
    """Checks arity and Solidity types of call arguments."""

    ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
    UINT256_MAX = 2**256 - 1

    def validate(self, method: Method, args: tuple | list) -> list[ValidationIssue]:
        """Run validation. Returns the issues found (empty when the call is well-formed)."""
        issues: list[ValidationIssue] = []

        if len(args) != len(method.params):
            issues.append(ValidationIssue(
                severity="error",
                code="ARITY_MISMATCH",
                message=f"{method.signature()} takes {len(method.params)} argument(s), got {len(args)}",
            ))
            return issues

        for param, value in zip(method.params, args):
            self._check_value(param.type, value, param.name, issues)

        return issues

    def _check_value(self, type_: str, value: Any, path: str, issues: list[ValidationIssue]) -> None:
        if type_.endswith("[]"):
            if not isinstance(value, (list, tuple)):
                issues.append(ValidationIssue(
                    severity="error",
                    code="NOT_AN_ARRAY",
                    message=f"'{path}' must be a list, got {type(value).__name__}",
                    path=path,
                ))
                return
            for index, item in enumerate(value):
                self._check_value(type_[:-2], item, f"{path}[{index}]", issues)
            return

        if type_ == "address":
            if not isinstance(value, str) or not self.ADDRESS_PATTERN.match(value):
                issues.append(ValidationIssue(
                    severity="error",
                    code="INVALID_ADDRESS",
                    message=f"'{path}' is not a 20-byte hex address: {value!r}",
                    path=path,
                    suggestion="Use a 0x-prefixed address with 40 hex digits",
                ))

        elif type_ == "uint256":
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                issues.append(ValidationIssue(
                    severity="error",
                    code="NOT_AN_INTEGER",
                    message=f"'{path}' must be an integer, got {type(value).__name__}",
                    path=path,
                ))
            elif value < 0 or value > self.UINT256_MAX:
                issues.append(ValidationIssue(
                    severity="error",
                    code="UINT_OUT_OF_RANGE",
                    message=f"'{path}' is outside the uint256 range: {value}",
                    path=path,
                ))

        elif type_ == "bool":
            if not isinstance(value, bool):
                issues.append(ValidationIssue(
                    severity="error",
                    code="NOT_A_BOOL",
                    message=f"'{path}' must be a bool, got {type(value).__name__}",
                    path=path,
                ))

    def normalize(self, method: Method, args: tuple | list) -> list[Any]:
        """Validate and return arguments in canonical form (lowercase addresses, lists).

        Raises InvariantFault when any error-level issue is found.
        """
        issues = self.validate(method, args)
        errors = [i for i in issues if i.severity == "error"]
        if errors:
            raise InvariantFault(INVALID_ARGUMENT, {
                "method": method.signature(),
                "issues": [i.model_dump() for i in errors],
            })
        return [self._normalize_value(p, v) for p, v in zip(method.params, args)]

    def _normalize_value(self, param: Param | str, value: Any) -> Any:
        type_ = param.type if isinstance(param, Param) else param
        if type_.endswith("[]"):
            return [self._normalize_value(type_[:-2], item) for item in value]
        if type_ == "address":
            return value.lower()
        return value
