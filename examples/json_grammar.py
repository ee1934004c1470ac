# json_grammar.py
# JSON built from combiparse primitives.
#
# value  = ws ( 'true' | 'false' | 'null' | number | string | object | array ) ws
# array  = '[' ( value (',' value)* | ws ) ']'
# object = '{' ( pair (',' pair)* | ws ) '}'
# pair   = ws string ws ':' value
import math

from combiparse import (
    Captured,
    Grammar,
    capture,
    char_range,
    choice,
    create_recursion,
    exclusion,
    literal,
    literal_choice,
    optional,
    repeat,
    repeat_alternating,
    repeat_at_least_once,
    repeat_exact,
    sequence,
    with_action,
)

whitespace = repeat(literal_choice(" ", "\n", "\r", "\t"))

# ---------------- numbers ----------------
digit19 = with_action(char_range("1", "9"), int)
digit = choice(with_action(literal("0"), int), digit19)

# raw result: (sign|None, '0'|(first, [rest]), ('.', (d, [ds]))|None, (e, sign|None, (d, [ds]))|None)
number = sequence(
    optional(literal("-")),
    choice(literal("0"), sequence(digit19, repeat(digit))),
    optional(sequence(literal("."), repeat_at_least_once(digit))),
    optional(
        sequence(
            literal_choice("e", "E"),
            optional(literal_choice("+", "-")),
            repeat_at_least_once(digit),
        )
    ),
)


def _fold_int(digits):
    first, rest = digits
    num = first
    for d in rest:
        num *= 10
        num += d
    return num


def _number(raw):
    sign, int_part, frac, exp = raw
    polarity = -1 if sign == "-" else 1
    integer = 0 if int_part == "0" else _fold_int(int_part)
    if frac is None and exp is None:
        return polarity * integer

    fraction = 0.0
    if frac is not None:
        first, rest = frac[1]
        for d in reversed([first, *rest]):
            fraction += d
            fraction /= 10

    factor = 1.0
    if exp is not None:
        magnitude = _fold_int(exp[2])
        try:
            factor = 10.0 ** (-magnitude if exp[1] == "-" else magnitude)
        except OverflowError:
            factor = math.inf

    try:
        mantissa = integer + fraction
    except OverflowError:
        mantissa = math.inf
    # 0e400 is 0.0, not nan
    if mantissa == 0:
        return polarity * 0.0
    return polarity * mantissa * factor


number_with_action = with_action(number, _number)

# ---------------- strings ----------------
_HEX_LETTERS = "abcdef"

hex_digit = choice(
    digit,
    with_action(char_range("a", "f"), lambda c: 10 + _HEX_LETTERS.index(c)),
    with_action(char_range("A", "F"), lambda c: 10 + _HEX_LETTERS.index(c.lower())),
)

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

string = sequence(
    literal('"'),
    repeat(
        choice(
            exclusion(char_range(" ", "\U0010ffff"), literal_choice('"', "\\")),
            sequence(
                literal("\\"),
                choice(
                    literal_choice(*_ESCAPES),
                    sequence(literal("u"), repeat_exact(hex_digit, 4)),
                ),
            ),
        )
    ),
    literal('"'),
)


def _string(raw):
    chars = []
    for item in raw[1]:
        if isinstance(item, str):
            chars.append(item)
            continue
        escape = item[1]
        if isinstance(escape, str):
            chars.append(_ESCAPES[escape])
            continue
        code = 0
        for d in escape[1]:
            code = code * 16 + d
        chars.append(chr(code))
    return "".join(chars)


string_with_action = with_action(string, _string)

# ---------------- values ----------------
value_ref, resolve_value = create_recursion("value")
array_ref, resolve_array = create_recursion("array")
object_ref, resolve_object = create_recursion("object")

_KEYWORDS = {"true": True, "false": False, "null": None}


def _value(raw):
    v = raw[1]
    if isinstance(v, Captured):
        return v.value
    return _KEYWORDS[v]


def _array(raw):
    body = raw[1]
    if body.label == "empty":
        return []
    first, rest = body.value
    return [first] + [v for _, v in rest]


def _object(raw):
    body = raw[1]
    if body.label == "empty":
        return {}
    first, rest = body.value
    obj = {}
    for pair in [first] + [p for _, p in rest]:
        obj[pair[1]] = pair[4]
    return obj


value = with_action(
    sequence(
        whitespace,
        choice(
            literal_choice("true", "false", "null"),
            capture("number", number_with_action),
            capture("string", string_with_action),
            capture("object", object_ref),
            capture("array", array_ref),
        ),
        whitespace,
    ),
    _value,
)

array = with_action(
    sequence(
        literal("["),
        choice(
            capture("items", repeat_alternating(value_ref, literal(","))),
            capture("empty", whitespace),
        ),
        literal("]"),
    ),
    _array,
)

pair = sequence(whitespace, string_with_action, whitespace, literal(":"), value_ref)

json_object = with_action(
    sequence(
        literal("{"),
        choice(
            capture("pairs", repeat_alternating(pair, literal(","))),
            capture("empty", whitespace),
        ),
        literal("}"),
    ),
    _object,
)

resolve_value(value)
resolve_array(array)
resolve_object(json_object)

JSON = Grammar(value_ref, name="json")


def loads(text: str):
    return JSON.parse(text)


if __name__ == "__main__":
    tests = [
        "null",
        "true",
        "false",
        '"hello"',
        '"esc\\\\nline \\u00e9"',
        "123",
        "-12.34e+2",
        "[]",
        "[1, 2, 3]",
        '[ "a", null, true, 3.14 ]',
        "{}",
        '{"a": 1, "b": [true, false], "c": {"x": "y"}}',
        "[1, 2,]",
    ]

    for t in tests:
        try:
            val = loads(t)
            print("INPUT:", t.strip())
            print("PARSED:", val)
            print("-" * 40)
        except Exception as e:
            print("INPUT:", t.strip())
            print("ERROR:", e)
            print("-" * 40)
