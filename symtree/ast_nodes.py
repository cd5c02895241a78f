"""symtree expression model.

Programs are built directly as trees of immutable expression nodes:
literals, program variables, symbolic placeholders, bindings, sequential
blocks, conditionals, comparisons, integer arithmetic and assertions.

Static analyses over the tree live here as well:
  free_variables       -- variables referenced without a preceding binding
  symbolic_references  -- symbolic placeholders mentioned in an expression
  negate               -- flips an Eq/NEq comparison
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from symtree.errors import AnalysisError, invalid_negation_error


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Expr:
    """Base class for every expression and statement node."""

    def short_str(self) -> str:
        return str(self)


@dataclass(frozen=True)
class Const(Expr):
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Var(Expr):
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class SymVal(Expr):
    """Placeholder for an unknown program input."""
    name: str

    def __str__(self) -> str:
        return f"Sym({self.name})"


@dataclass(frozen=True)
class Let(Expr):
    variable: Var
    value: Expr

    def __str__(self) -> str:
        return f"let {self.variable} = {self.value}"


@dataclass(frozen=True)
class Block(Expr):
    statements: Tuple[Expr, ...]

    def __str__(self) -> str:
        return "{" + "\n".join(str(s) for s in self.statements) + "}"


@dataclass(frozen=True)
class Eq(Expr):
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"{self.left} == {self.right}"


@dataclass(frozen=True)
class NEq(Expr):
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"{self.left} != {self.right}"


@dataclass(frozen=True)
class If(Expr):
    cond: Expr
    then_expr: Expr
    else_expr: Optional[Expr] = None

    def __str__(self) -> str:
        text = f"if ({self.cond}) {self.then_expr}"
        if self.else_expr is not None:
            text += f" else {self.else_expr}"
        return text

    def short_str(self) -> str:
        return f"if ({self.cond})"


@dataclass(frozen=True)
class Plus(Expr):
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"({self.left} + {self.right})"


@dataclass(frozen=True)
class Minus(Expr):
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"({self.left} - {self.right})"


@dataclass(frozen=True)
class Mul(Expr):
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"({self.left} * {self.right})"


@dataclass(frozen=True)
class Assert(Expr):
    constraint: Expr

    def __str__(self) -> str:
        return f"assert({self.constraint})"


COMPARISONS = (Eq, NEq)
ARITHMETIC = (Plus, Minus, Mul)
BINARY = COMPARISONS + ARITHMETIC


def block(*statements: Expr) -> Block:
    """Build a Block from positional statements."""
    return Block(statements=tuple(statements))


# ---------------------------------------------------------------------------
# Static analyses
#
# Programs can nest arbitrarily deep, so the traversals below keep their
# own work-stack instead of recursing.
# ---------------------------------------------------------------------------

def children(expr: Expr) -> Tuple[Expr, ...]:
    """Direct sub-expressions of expr, in program order."""
    if isinstance(expr, (Var, Const, SymVal)):
        return ()
    if isinstance(expr, Block):
        return expr.statements
    if isinstance(expr, Let):
        return (expr.value,)
    if isinstance(expr, If):
        if expr.else_expr is None:
            return (expr.cond, expr.then_expr)
        return (expr.cond, expr.then_expr, expr.else_expr)
    if isinstance(expr, BINARY):
        return (expr.left, expr.right)
    if isinstance(expr, Assert):
        return (expr.constraint,)
    raise TypeError(f"Unknown expression node {type(expr).__name__}")


def free_variables(expr: Expr) -> Set[Var]:
    """Collect the program variables referenced in expr without a binding.

    Inside a Block, a Let binds its variable for every later statement of
    the same block. A use that comes before the Let in program order is
    still free.
    """
    results: Dict[int, Set[Var]] = {}
    stack: List[Tuple[Expr, bool]] = [(expr, False)]
    while stack:
        node, expanded = stack.pop()
        if id(node) in results:
            continue
        subs = children(node)
        if subs and not expanded:
            stack.append((node, True))
            stack.extend((sub, False) for sub in subs)
            continue
        results[id(node)] = _combine_free(node, [results[id(sub)] for sub in subs])
    return results[id(expr)]


def _combine_free(node: Expr, parts: List[Set[Var]]) -> Set[Var]:
    if isinstance(node, Var):
        return {node}
    if isinstance(node, Block):
        bound: Set[Var] = set()
        result: Set[Var] = set()
        for stmt, free in zip(node.statements, parts):
            if isinstance(stmt, Let):
                bound.add(stmt.variable)
            # subtract per statement, a variable may be free before its Let
            result |= free - bound
        return result
    if isinstance(node, Let):
        return parts[0] - {node.variable}
    result = set()
    for free in parts:
        result |= free
    return result


def symbolic_references(expr: Expr) -> Set[SymVal]:
    """Collect the symbolic placeholders mentioned anywhere in expr."""
    result: Set[SymVal] = set()
    stack = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, SymVal):
            result.add(node)
        stack.extend(children(node))
    return result


def negate(expr: Expr) -> Expr:
    """Swap Eq and NEq. Only comparisons can be negated."""
    if isinstance(expr, Eq):
        return NEq(expr.left, expr.right)
    if isinstance(expr, NEq):
        return Eq(expr.left, expr.right)
    raise AnalysisError(invalid_negation_error(expr))
