"""symtree Expression Model Tests — AST-001 through AST-005."""

import dataclasses

import pytest

from symtree.ast_nodes import (
    Expr, Const, Var, SymVal, Let, Block, If, Eq, NEq, Plus, Minus, Mul, Assert,
    block, free_variables, symbolic_references, negate,
)
from symtree.errors import AnalysisError, ErrorKind


x, y, z = Var("x"), Var("y"), Var("z")


class TestAST001:
    """AST-001: Nodes are immutable and compare structurally."""

    def test_var_equality_by_name(self):
        assert Var("x") == Var("x")
        assert Var("x") != Var("y")

    def test_var_and_symval_differ(self):
        assert Var("a") != SymVal("a")

    def test_comparisons_differ_by_tag(self):
        assert Eq(x, Const(1)) != NEq(x, Const(1))

    def test_nodes_are_hashable(self):
        store = {Var("x"): Const(1)}
        assert store[Var("x")] == Const(1)

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Const(1).value = 2

    def test_block_helper(self):
        assert block(Const(1), Const(2)) == Block((Const(1), Const(2)))


class TestAST002:
    """AST-002: Source-like rendering."""

    def test_leaves(self):
        assert str(Const(3)) == "3"
        assert str(x) == "x"
        assert str(SymVal("a")) == "Sym(a)"

    def test_arithmetic(self):
        assert str(Plus(x, Mul(Const(2), y))) == "(x + (2 * y))"
        assert str(Minus(x, y)) == "(x - y)"

    def test_let_and_assert(self):
        assert str(Let(x, Const(1))) == "let x = 1"
        assert str(Assert(NEq(x, Const(0)))) == "assert(x != 0)"

    def test_if_full_and_short(self):
        stmt = If(Eq(x, Const(1)), Const(2), Const(3))
        assert str(stmt) == "if (x == 1) 2 else 3"
        assert stmt.short_str() == "if (x == 1)"

    def test_if_without_else(self):
        assert str(If(Eq(x, Const(1)), Const(2))) == "if (x == 1) 2"

    def test_block(self):
        assert str(block(Let(x, Const(1)), x)) == "{let x = 1\nx}"

    def test_short_str_defaults_to_str(self):
        assert Plus(x, y).short_str() == str(Plus(x, y))


class TestAST003:
    """AST-003: free_variables honours sequential scoping."""

    def test_use_before_let_is_free(self):
        assert free_variables(block(x, Let(x, y))) == {x, y}

    def test_use_after_let_is_bound(self):
        assert free_variables(block(Let(x, Const(1)), Plus(x, y))) == {y}

    def test_let_excludes_own_variable(self):
        assert free_variables(Let(x, Plus(y, Const(1)))) == {y}

    def test_if_unions_all_parts(self):
        stmt = If(Eq(x, Const(0)), Let(y, z), Var("w"))
        assert free_variables(stmt) == {x, z, Var("w")}

    def test_assert_contributes_constraint(self):
        assert free_variables(Assert(NEq(z, Const(0)))) == {z}

    def test_leaves(self):
        assert free_variables(Const(1)) == set()
        assert free_variables(SymVal("a")) == set()

    def test_example_program_inputs(self):
        a, b = Var("a"), Var("b")
        program = block(
            Let(x, Const(1)),
            Let(y, Const(0)),
            If(NEq(a, Const(0)), block(
                Let(y, Plus(Const(3), x)),
                If(Eq(b, Const(0)), Let(x, Mul(Const(2), Plus(a, b)))),
            )),
            Assert(NEq(Minus(x, y), Const(0))),
        )
        assert free_variables(program) == {a, b}

    def test_deeply_nested_ifs(self):
        program = Assert(NEq(y, Const(0)))
        for i in range(5000):
            program = If(NEq(x, Const(i)), program, Let(z, Const(i)))
        assert free_variables(program) == {x, y}

    def test_shared_subexpression(self):
        shared = Plus(x, y)
        assert free_variables(block(shared, Let(x, shared), shared)) == {x, y}
        assert free_variables(block(Let(x, shared), shared)) == {y}

    def test_unknown_node_rejected(self):
        class Weird(Expr):
            pass

        with pytest.raises(TypeError):
            free_variables(Weird())


class TestAST004:
    """AST-004: symbolic_references collects only SymVal leaves."""

    def test_mixed_tree(self):
        expr = Plus(SymVal("a"), Mul(SymVal("b"), x))
        assert symbolic_references(expr) == {SymVal("a"), SymVal("b")}

    def test_assert(self):
        expr = Assert(Eq(SymVal("a"), Const(0)))
        assert symbolic_references(expr) == {SymVal("a")}

    def test_block_and_if(self):
        expr = block(Let(x, SymVal("a")), If(Eq(SymVal("b"), Const(0)), SymVal("c")))
        assert {s.name for s in symbolic_references(expr)} == {"a", "b", "c"}

    def test_deeply_nested_ifs(self):
        expr = SymVal("a")
        for i in range(5000):
            expr = If(Eq(SymVal("b"), Const(i)), expr)
        assert symbolic_references(expr) == {SymVal("a"), SymVal("b")}

    def test_program_variables_ignored(self):
        assert symbolic_references(Plus(x, Const(1))) == set()


class TestAST005:
    """AST-005: negate flips comparisons and nothing else."""

    def test_eq_to_neq(self):
        assert negate(Eq(x, Const(1))) == NEq(x, Const(1))

    def test_neq_to_eq(self):
        assert negate(NEq(x, Const(1))) == Eq(x, Const(1))

    def test_double_negation(self):
        cond = Eq(SymVal("a"), Const(0))
        assert negate(negate(cond)) == cond

    @pytest.mark.parametrize("expr", [Plus(x, y), Const(1), Assert(Eq(x, y)), x])
    def test_non_comparison_rejected(self, expr):
        with pytest.raises(AnalysisError) as info:
            negate(expr)
        assert info.value.kind == ErrorKind.INVALID_NEGATION
