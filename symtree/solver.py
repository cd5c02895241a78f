"""Solver bridge — obligations to Z3 queries.

Each obligation becomes an independent query: one Z3 integer per distinct
symbolic input, one assertion per formula, a fresh z3.Solver per check.
Z3 integers are unbounded, matching the evaluator's arbitrary-precision
constant folding.

Outcomes:
  SATISFIABLE    model maps every declared input to a concrete int
  UNSATISFIABLE  the assertion cannot be violated on this path
  UNKNOWN        the solver gave up (timeout, resource limit); opaque
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

import z3

from symtree.ast_nodes import (
    Expr, Const, Var, SymVal, Eq, NEq, Plus, Minus, Mul,
)
from symtree.config import SymtreeConfig
from symtree.constraints import Constraints, collect_obligations
from symtree.errors import AnalysisError, unknown_symbolic_error, untranslatable_error
from symtree.execution_tree import ExecutionTreeNode, build_tree

logger = logging.getLogger(__name__)


class SolverStatus(Enum):
    SATISFIABLE = "sat"
    UNSATISFIABLE = "unsat"
    UNKNOWN = "unknown"


@dataclass
class SolverResult:
    status: SolverStatus
    model: Dict[str, int] = field(default_factory=dict)
    reason: str = ""

    @property
    def satisfiable(self) -> bool:
        return self.status == SolverStatus.SATISFIABLE


@dataclass
class Counterexample:
    """A satisfiable obligation and the inputs that violate its assertion."""
    obligation: Constraints
    model: Dict[str, int]

    def as_list(self) -> List[str]:
        return [f"{name}: {value}" for name, value in sorted(self.model.items())]

    def __str__(self) -> str:
        return "[" + ", ".join(self.as_list()) + "]"


def to_z3(expr: Expr, variables: Dict[str, Any]) -> Any:
    """Translate an evaluated expression to a Z3 term."""
    if isinstance(expr, Const):
        return z3.IntVal(expr.value)

    if isinstance(expr, SymVal):
        if expr.name not in variables:
            raise AnalysisError(unknown_symbolic_error(expr.name, list(variables)))
        return variables[expr.name]

    if isinstance(expr, Var):
        raise AnalysisError(untranslatable_error(
            expr, f"contains the program variable '{expr.name}', expected only symbolic inputs"))

    if isinstance(expr, (Eq, NEq, Plus, Minus, Mul)):
        left = to_z3(expr.left, variables)
        right = to_z3(expr.right, variables)
        if isinstance(expr, Eq):
            return left == right
        if isinstance(expr, NEq):
            return left != right
        if isinstance(expr, Plus):
            return left + right
        if isinstance(expr, Minus):
            return left - right
        return left * right

    raise AnalysisError(untranslatable_error(expr, f"{type(expr).__name__} has no formula form"))


class Z3Solver:
    """Checks obligations with Z3, one fresh solver per query."""

    def __init__(self, timeout_ms: int = 5000):
        self.timeout_ms = timeout_ms
        self.queries = 0

    def check(self, formulas: Iterable[Expr], names: Iterable[str]) -> SolverResult:
        """Check the conjunction of formulas over the named integer inputs."""
        variables: Dict[str, Any] = {name: z3.Int(name) for name in sorted(names)}
        solver = z3.Solver()
        if self.timeout_ms:
            solver.set("timeout", self.timeout_ms)
        for formula in formulas:
            solver.add(to_z3(formula, variables))

        self.queries += 1
        answer = solver.check()
        if answer == z3.sat:
            model = solver.model()
            values = {
                name: model.evaluate(var, model_completion=True).as_long()
                for name, var in variables.items()
            }
            return SolverResult(SolverStatus.SATISFIABLE, model=values)
        if answer == z3.unsat:
            return SolverResult(SolverStatus.UNSATISFIABLE)
        return SolverResult(SolverStatus.UNKNOWN, reason=solver.reason_unknown())

    def solve(self, obligation: Constraints) -> SolverResult:
        result = self.check(obligation.constraint_exprs(), obligation.symbolic_names())
        logger.debug("solve %s -> %s", obligation, result.status.value)
        return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def find_counterexamples(tree: Optional[ExecutionTreeNode],
                         solver: Optional[Z3Solver] = None,
                         config: Optional[SymtreeConfig] = None) -> List[Counterexample]:
    """Solve every obligation in the tree and keep the satisfiable ones.

    Obligations whose query comes back UNKNOWN are logged and skipped.
    """
    config = config or SymtreeConfig()
    solver = solver or Z3Solver(timeout_ms=config.solver_timeout_ms)

    found: List[Counterexample] = []
    for obligation in collect_obligations(tree):
        result = solver.solve(obligation)
        if result.status == SolverStatus.UNKNOWN:
            logger.warning("solver gave up on %s: %s", obligation, result.reason)
            continue
        if result.satisfiable:
            found.append(Counterexample(obligation, result.model))
            if config.stop_at_first:
                break
    return found


def analyze(program: Expr,
            solver: Optional[Z3Solver] = None,
            config: Optional[SymtreeConfig] = None) -> List[Counterexample]:
    """Build the execution tree for program and report its counterexamples."""
    config = config or SymtreeConfig()
    tree = build_tree(program)
    if tree is not None and config.render_trees:
        logger.debug("execution tree:\n%s", tree.render())
    found = find_counterexamples(tree, solver=solver, config=config)
    logger.info("%d counterexample(s) found", len(found))
    return found
