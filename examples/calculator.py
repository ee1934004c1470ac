from math import prod
from combiparse import (
    Grammar,
    char_range,
    choice,
    create_recursion,
    literal,
    literal_choice,
    repeat,
    repeat_alternating,
    repeat_at_least_once,
    sequence,
    with_action,
)

_ws = repeat(literal_choice(" ", "\t"))


def _tok(node):
    return with_action(sequence(_ws, node, _ws), lambda raw: raw[1])


expr_ref, resolve_expr = create_recursion("expr")
factor_ref, resolve_factor = create_recursion("factor")

number = with_action(
    repeat_at_least_once(char_range("0", "9")),
    lambda raw: int(raw[0] + "".join(raw[1])),
)


def _factorial(raw):
    val, bangs = raw
    for _ in bangs:
        val = prod(range(1, val + 1))
    return val


# atom '!'*
postfix = with_action(
    sequence(
        choice(
            _tok(number),
            with_action(
                sequence(_tok(literal("(")), expr_ref, _tok(literal(")"))),
                lambda raw: raw[1],
            ),
        ),
        repeat(_tok(literal("!"))),
    ),
    _factorial,
)

# '-' factor | postfix
factor = choice(
    with_action(sequence(_tok(literal("-")), factor_ref), lambda raw: -raw[1]),
    postfix,
)

_OPS = {
    "+": lambda x, y: x + y,
    "-": lambda x, y: x - y,
    "*": lambda x, y: x * y,
    "/": lambda x, y: x / y,
}


def _fold(raw):
    # left associative
    val, rest = raw
    for op, rhs in rest:
        val = _OPS[op](val, rhs)
    return val


term = with_action(repeat_alternating(factor_ref, _tok(literal_choice("*", "/"))), _fold)
expr = with_action(repeat_alternating(term, _tok(literal_choice("+", "-"))), _fold)

resolve_factor(factor)
resolve_expr(expr)

Calculator = Grammar(expr_ref, name="calculator")


def evaluate(text: str):
    return Calculator.parse(text)


if __name__ == "__main__":
    tests = [
        "1 + 2 * 3",  # 7
        "-1 + 4",  # 3
        "2 * 3 + 4",  # 10
        "2 * (3 + 4)",  # 14
        "3! + 1",  # 7
        "5! / 5",  # 24.0
    ]
    for t in tests:
        print(t, "->", evaluate(t))
