"""symtree — symbolic execution trees and assertion counterexamples."""

__version__ = "0.1.0"

from symtree.ast_nodes import (
    Expr, Const, Var, SymVal, Let, Block, If, Eq, NEq, Plus, Minus, Mul, Assert,
    block, free_variables, symbolic_references, negate,
)
from symtree.errors import AnalysisError, ErrorKind, SymtreeError
from symtree.evaluator import evaluate
from symtree.execution_tree import ExecutionTreeNode, build_tree, build_subtree
from symtree.constraints import Constraints, collect_obligations
from symtree.config import SymtreeConfig, load_config
from symtree.log import configure_logging
from symtree.solver import (
    Z3Solver, SolverResult, SolverStatus, Counterexample,
    find_counterexamples, analyze,
)
