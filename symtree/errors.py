"""Structured error objects for symtree.

Every fatal condition is a machine-readable record wrapped in a single
exception type, so a host tool can report it without parsing messages.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    UNBOUND_VARIABLE = "unbound_variable"
    INVALID_CONDITION = "invalid_condition"
    INVALID_NEGATION = "invalid_negation"
    EMPTY_BLOCK = "empty_block"
    INVALID_EXPRESSION = "invalid_expression"
    UNKNOWN_SYMBOLIC_REFERENCE = "unknown_symbolic_reference"
    UNTRANSLATABLE_EXPRESSION = "untranslatable_expression"
    CONFIG_ERROR = "config_error"


@dataclass
class SymtreeError:
    kind: ErrorKind
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.details:
            d["details"] = self.details
        return d

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __str__(self) -> str:
        return f"[{self.kind.value}]: {self.message}"


def unbound_variable_error(name: str, store: Optional[dict] = None) -> SymtreeError:
    details: dict[str, Any] = {"variable": name}
    if store is not None:
        details["bound"] = sorted(str(k) for k in store)
    return SymtreeError(
        kind=ErrorKind.UNBOUND_VARIABLE,
        message=f"Variable '{name}' not found in store",
        details=details,
    )


def invalid_condition_error(condition: Any) -> SymtreeError:
    return SymtreeError(
        kind=ErrorKind.INVALID_CONDITION,
        message=f"Invalid condition {condition}, must be Eq or NEq",
        details={"condition": str(condition)},
    )


def invalid_negation_error(expr: Any) -> SymtreeError:
    return SymtreeError(
        kind=ErrorKind.INVALID_NEGATION,
        message=f"Cannot negate {expr}",
        details={"expression": str(expr)},
    )


def empty_block_error() -> SymtreeError:
    return SymtreeError(
        kind=ErrorKind.EMPTY_BLOCK,
        message="Cannot evaluate empty block",
    )


def invalid_expression_error(expr: Any, reason: str = "evaluates to no value") -> SymtreeError:
    return SymtreeError(
        kind=ErrorKind.INVALID_EXPRESSION,
        message=f"Invalid expression {expr}: {reason}",
        details={"expression": str(expr), "reason": reason},
    )


def unknown_symbolic_error(name: str, declared: list[str]) -> SymtreeError:
    return SymtreeError(
        kind=ErrorKind.UNKNOWN_SYMBOLIC_REFERENCE,
        message=f"Unknown symbolic variable '{name}'",
        details={"name": name, "declared": sorted(declared)},
    )


def untranslatable_error(expr: Any, reason: str) -> SymtreeError:
    return SymtreeError(
        kind=ErrorKind.UNTRANSLATABLE_EXPRESSION,
        message=f"Cannot translate {expr} to a solver formula: {reason}",
        details={"expression": str(expr), "reason": reason},
    )


def config_error(path: str, reason: str) -> SymtreeError:
    return SymtreeError(
        kind=ErrorKind.CONFIG_ERROR,
        message=f"Cannot load configuration from '{path}': {reason}",
        details={"path": path, "reason": reason},
    )


class AnalysisError(Exception):
    """Exception wrapping a SymtreeError; aborts the current analysis."""

    def __init__(self, error: SymtreeError):
        self.error = error
        super().__init__(str(error))

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def to_json(self, indent: int = 2) -> str:
        return self.error.to_json(indent=indent)
