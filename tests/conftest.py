import pytest

from symtree.ast_nodes import Var, Const, Let, If, Eq, NEq, Plus, Minus, Mul, Assert, block


@pytest.fixture
def example_program():
    """x = 1; y = 0; if a != 0 { y = 3 + x; if b == 0 { x = 2 * (a + b) } }; assert(x - y != 0)"""
    x, y, a, b = Var("x"), Var("y"), Var("a"), Var("b")
    return block(
        Let(x, Const(1)),
        Let(y, Const(0)),
        If(
            NEq(a, Const(0)),
            block(
                Let(y, Plus(Const(3), x)),
                If(Eq(b, Const(0)), Let(x, Mul(Const(2), Plus(a, b)))),
            ),
        ),
        Assert(NEq(Minus(x, y), Const(0))),
    )


@pytest.fixture
def sequential_ifs():
    """Factory for k independent two-armed Ifs in a row."""
    def build(k):
        return block(*[
            If(Eq(Var(f"v{i}"), Const(0)), Let(Var(f"x{i}"), Const(1)), Let(Var(f"x{i}"), Const(2)))
            for i in range(k)
        ])
    return build
