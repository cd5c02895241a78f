"""Find the counterexample for the classic forking example.

    x = 1
    y = 0
    if (a != 0) {
        y = 3 + x
        if (b == 0) {
            x = 2 * (a + b)
        }
    }
    assert(x - y != 0)

Expected output: Found counter example: [a: 2, b: 0]
"""

from symtree import (
    Var, Const, Let, If, Eq, NEq, Plus, Minus, Mul, Assert, block,
    analyze, configure_logging, load_config,
)


def example_program():
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


def main():
    config = load_config()
    configure_logging(config.log_level)
    counterexamples = analyze(example_program(), config=config)
    if not counterexamples:
        print("No counter example found")
        return
    print(f"Found counter example: {counterexamples[0]}")


if __name__ == "__main__":
    main()
