"""Constraint extraction: execution tree -> assertion obligations.

An obligation pairs a reached assertion with the path constraints that
lead to it. The solver request it derives is

    { NOT assertion } + path constraints

over the symbolic inputs mentioned in those formulas. A satisfying
assignment reaches the assertion and makes it false, i.e. it is a
counterexample.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from symtree.ast_nodes import Expr, Assert, negate, symbolic_references
from symtree.evaluator import evaluate
from symtree.execution_tree import ExecutionTreeNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Constraints:
    """Solver obligation for one reachable assertion on one path."""
    assertion: Assert
    path_constraints: Tuple[Expr, ...]

    def constraint_exprs(self) -> List[Expr]:
        """Negated assertion followed by the path constraints, duplicates dropped."""
        result: List[Expr] = []
        for expr in (negate(self.assertion.constraint),) + self.path_constraints:
            if expr not in result:
                result.append(expr)
        return result

    def symbolic_names(self) -> Set[str]:
        names: Set[str] = set()
        for expr in self.constraint_exprs():
            names |= {s.name for s in symbolic_references(expr)}
        return names

    def __str__(self) -> str:
        pi = " /\\ ".join(str(c) for c in self.path_constraints) or "true"
        return f"{self.assertion} under {pi}"


def collect_obligations(tree: Optional[ExecutionTreeNode]) -> List[Constraints]:
    """Emit one obligation per Assert node, in pre-order (then before else)."""
    if tree is None:
        return []
    obligations: List[Constraints] = []
    for node in tree.walk():
        if isinstance(node.statement, Assert):
            evaluated = evaluate(node.statement, dict(node.store))
            obligations.append(Constraints(evaluated, node.constraints))
            logger.debug("obligation: %s", obligations[-1])
    logger.debug("collected %d obligations", len(obligations))
    return obligations
