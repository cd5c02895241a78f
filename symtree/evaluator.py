"""Partial evaluator.

Reduces an expression to a form over constants and symbolic placeholders
under a mutable symbolic store:

  - program variables are replaced by their stored values
  - integer arithmetic over two constants is folded
  - comparisons are rebuilt over their evaluated operands but never folded
    to a boolean; they only decide a branch inside an If
  - an If whose condition has two constant operands collapses to the
    selected branch, otherwise a residual If is returned

A Let mutates the store it is evaluated against, so callers that must not
observe the binding pass a copy.
"""

from __future__ import annotations

from typing import Dict, Optional

from symtree.ast_nodes import (
    Expr, Const, Var, SymVal, Let, Block, If,
    Eq, NEq, Plus, Minus, Mul, Assert,
)
from symtree.errors import (
    AnalysisError,
    unbound_variable_error, invalid_condition_error,
    empty_block_error, invalid_expression_error,
)


Store = Dict[Var, Expr]


_FOLD = {
    Plus: lambda l, r: l + r,
    Minus: lambda l, r: l - r,
    Mul: lambda l, r: l * r,
}


def evaluate(expr: Expr, store: Store) -> Optional[Expr]:
    """Evaluate expr against store. Returns None only for an If whose
    condition is constant-false and which has no else branch."""
    if isinstance(expr, Var):
        if expr not in store:
            raise AnalysisError(unbound_variable_error(expr.name, store))
        return store[expr]

    if isinstance(expr, Const):
        return Const(expr.value)

    if isinstance(expr, SymVal):
        return SymVal(expr.name)

    if isinstance(expr, Block):
        if not expr.statements:
            raise AnalysisError(empty_block_error())
        result: Optional[Expr] = None
        for stmt in expr.statements:
            result = evaluate(stmt, store)
        return result

    if isinstance(expr, Let):
        value = _require(expr.value, store)
        store[expr.variable] = value
        return value

    if isinstance(expr, (Eq, NEq)):
        return type(expr)(_require(expr.left, store), _require(expr.right, store))

    if isinstance(expr, (Plus, Minus, Mul)):
        left = _require(expr.left, store)
        right = _require(expr.right, store)
        if isinstance(left, Const) and isinstance(right, Const):
            return Const(_FOLD[type(expr)](left.value, right.value))
        return type(expr)(left, right)

    if isinstance(expr, If):
        return _evaluate_if(expr, store)

    if isinstance(expr, Assert):
        return Assert(_require(expr.constraint, store))

    raise TypeError(f"Unknown expression node {type(expr).__name__}")


def evaluate_condition(cond: Expr, store: Store) -> Expr:
    """Evaluate a branch condition; the result must be Eq or NEq."""
    result = evaluate(cond, store)
    if not isinstance(result, (Eq, NEq)):
        raise AnalysisError(invalid_condition_error(result if result is not None else cond))
    return result


def is_constant_comparison(cond: Expr) -> bool:
    return (isinstance(cond, (Eq, NEq))
            and isinstance(cond.left, Const)
            and isinstance(cond.right, Const))


def comparison_holds(cond: Expr) -> bool:
    """Decide a comparison over two constants."""
    equal = cond.left.value == cond.right.value
    return equal if isinstance(cond, Eq) else not equal


def _evaluate_if(expr: If, store: Store) -> Optional[Expr]:
    cond = evaluate_condition(expr.cond, store)

    if is_constant_comparison(cond):
        if comparison_holds(cond):
            return evaluate(expr.then_expr, store)
        if expr.else_expr is not None:
            return evaluate(expr.else_expr, store)
        return None

    # Forking is the tree builder's job; the else branch stays unevaluated.
    then_value = _require(expr.then_expr, store)
    return If(cond, then_value, expr.else_expr)


def _require(expr: Expr, store: Store) -> Expr:
    value = evaluate(expr, store)
    if value is None:
        raise AnalysisError(invalid_expression_error(expr))
    return value
