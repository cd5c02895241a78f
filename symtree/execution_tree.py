"""symtree Execution Tree Builder — forward symbolic execution.

A symbolic state is (queue, sigma, pi):
  - queue = pending statements, front is executed next
  - sigma = symbolic store (program variable -> symbolic expression)
  - pi    = path constraints (branch decisions taken so far)

Every statement executed on a path becomes one tree node recording the
state *before* the statement runs. At an If the state forks:
  - then-path: pi + cond
  - else-path: pi + NOT cond
Both sides are always explored; an infeasible side is left for the solver
to reject. Constraints are only ever appended, so each root-to-leaf path
is an independently checkable execution.

Blocks are transparent: their statements are pushed onto the front of
the queue and no node is created for the Block itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from symtree.ast_nodes import Expr, Var, SymVal, Let, Block, If, free_variables, negate
from symtree.evaluator import evaluate, evaluate_condition
from symtree.errors import AnalysisError, invalid_expression_error

logger = logging.getLogger(__name__)


Store = Dict[Var, Expr]
PathConstraints = Tuple[Expr, ...]
# Pending statements as a linked list of (head, rest) pairs, None when
# empty. Forked paths share the tail, and splicing a Block costs only its
# own length.
Queue = Optional[Tuple[Expr, "Queue"]]


def _push_front(statements: Sequence[Expr], rest: Queue) -> Queue:
    for stmt in reversed(statements):
        rest = (stmt, rest)
    return rest


@dataclass
class ExecutionTreeNode:
    """One step of one path. Read-only once the tree is built."""
    statement: Expr
    store: Store
    constraints: PathConstraints
    children: List[ExecutionTreeNode] = field(default_factory=list, repr=False, compare=False)

    def __repr__(self) -> str:
        return (f"ExecutionTreeNode(statement={self.statement.short_str()!r}, "
                f"depth={len(self.constraints)}, children={len(self.children)})")

    def walk(self) -> Iterator[ExecutionTreeNode]:
        """Pre-order traversal, then-branch before else-branch."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def leaves(self) -> List[ExecutionTreeNode]:
        return [n for n in self.walk() if not n.children]

    def render(self) -> str:
        lines: List[str] = []
        stack: List[Tuple[ExecutionTreeNode, int]] = [(self, 0)]
        while stack:
            node, indent = stack.pop()
            pad = " " * indent
            store = ", ".join(f"{k}: {v}" for k, v in node.store.items())
            pi = ", ".join(str(c) for c in node.constraints)
            lines.append(f"{pad}σ: {{{store}}}")
            lines.append(f"{pad}π: [{pi}]")
            lines.append(f"{pad}Next Expression: {node.statement.short_str()}")
            stack.extend((c, indent + 2) for c in reversed(node.children))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


@dataclass
class _Task:
    queue: Queue
    store: Store
    constraints: PathConstraints
    siblings: List[ExecutionTreeNode]


def initial_store(program: Expr) -> Store:
    """Map every free variable of program to a symbolic input of the same name."""
    return {v: SymVal(v.name) for v in sorted(free_variables(program), key=lambda v: v.name)}


def build_subtree(queue: Sequence[Expr], store: Store,
                  constraints: PathConstraints = ()) -> Optional[ExecutionTreeNode]:
    """Build the execution tree for the pending statements in queue.

    Returns None when the queue is empty (the path has ended). The tree is
    built with an explicit work-stack rather than recursion; tasks are
    pushed so that the then-path is finished before the else-path starts.
    """
    roots: List[ExecutionTreeNode] = []
    stack = [_Task(_push_front(queue, None), dict(store), tuple(constraints), roots)]
    forks = 0
    nodes = 0

    while stack:
        task = stack.pop()
        pending = task.queue
        while pending is not None and isinstance(pending[0], Block):
            pending = _push_front(pending[0].statements, pending[1])
        if pending is None:
            continue

        stmt, rest = pending
        node = ExecutionTreeNode(stmt, task.store, task.constraints)
        task.siblings.append(node)
        nodes += 1

        if isinstance(stmt, Let):
            value = evaluate(stmt.value, dict(task.store))
            if value is None:
                raise AnalysisError(invalid_expression_error(stmt.value))
            child_store = dict(task.store)
            child_store[stmt.variable] = value
            stack.append(_Task(rest, child_store, task.constraints, node.children))

        elif isinstance(stmt, If):
            cond = evaluate_condition(stmt.cond, dict(task.store))
            then_queue = (stmt.then_expr, rest)
            else_queue = rest if stmt.else_expr is None else (stmt.else_expr, rest)
            forks += 1
            logger.debug("fork at %s: pi + %s", stmt.short_str(), cond)
            stack.append(_Task(else_queue, dict(task.store),
                               task.constraints + (negate(cond),), node.children))
            stack.append(_Task(then_queue, dict(task.store),
                               task.constraints + (cond,), node.children))

        else:
            stack.append(_Task(rest, task.store, task.constraints, node.children))

    logger.debug("built %d nodes, %d forks", nodes, forks)
    return roots[0] if roots else None


def build_tree(program: Expr) -> Optional[ExecutionTreeNode]:
    """Symbolically execute program from a store of fresh symbolic inputs."""
    store = initial_store(program)
    logger.debug("symbolic inputs: %s", ", ".join(v.name for v in store))
    return build_subtree((program,), store, ())
