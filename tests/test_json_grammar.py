"""Acceptance tests: the JSON grammar in examples/json_grammar.py."""

import json
import math
import sys

import pytest

from combiparse import NestingTooDeepError, ParseError, parse, validate
from json_grammar import (
    JSON,
    loads,
    number,
    number_with_action,
    string_with_action,
    whitespace,
)


class TestWhitespace:
    def test_validate(self) -> None:
        assert validate(whitespace, "    ")
        assert validate(whitespace, " \n\t\r   ")
        assert not validate(whitespace, "    a   ")

    def test_parse(self) -> None:
        assert parse(whitespace, "   \n\n\r\t\t\t   \n") == list("   \n\n\r\t\t\t   \n")

    def test_parse_rejects_garbage(self) -> None:
        with pytest.raises(ParseError):
            parse(whitespace, "    a   ")


class TestNumber:
    @pytest.mark.parametrize("text", ["0", "-0", "-3.09e2", "10", "1.5E+3", "2e-2"])
    def test_valid(self, text) -> None:
        assert validate(number, text)

    @pytest.mark.parametrize("text", ["00", "0.", ".f", "0.e", "-", "01", "1e", ""])
    def test_invalid(self, text) -> None:
        assert not validate(number, text)

    def test_raw_zero(self) -> None:
        assert parse(number, "0") == (None, "0", None, None)
        assert parse(number, "-0") == ("-", "0", None, None)

    def test_raw_shape(self) -> None:
        assert parse(number, "-3.09e2") == (
            "-",
            (3, []),
            (".", (0, [9])),
            ("e", None, (2, [])),
        )

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("-3.09e2", -309),
            ("0", 0),
            ("-0", 0),
            ("1234", 1234),
            ("0.5", 0.5),
            ("12.25", 12.25),
            ("1e3", 1000),
            ("5E-1", 0.5),
        ],
    )
    def test_value(self, text, expected) -> None:
        assert parse(number_with_action, text) == pytest.approx(expected)

    def test_integers_stay_exact(self) -> None:
        val = parse(number_with_action, "9007199254740993")
        assert val == 9007199254740993
        assert isinstance(val, int)

    @pytest.mark.parametrize("text", ["1.5e400", "1e400", "-2.5E+999", "0e400", "1e-400"])
    def test_out_of_float_range_matches_json_module(self, text) -> None:
        assert parse(number_with_action, text) == json.loads(text)

    def test_overflow_is_infinity(self) -> None:
        assert loads("1.5e400") == math.inf
        assert loads("-1e400") == -math.inf
        assert isinstance(loads("1e400"), float)


class TestString:
    def test_plain(self) -> None:
        assert parse(string_with_action, '"sss"') == "sss"

    def test_empty(self) -> None:
        assert parse(string_with_action, '""') == ""

    def test_escapes(self) -> None:
        assert parse(string_with_action, '"\\\\\\"\\n"') == '\\"\n'

    @pytest.mark.parametrize(
        "text,expected",
        [
            ('"\\/\\b\\f\\r\\t"', "/\b\f\r\t"),
            ('"\\u0041"', "A"),
            ('"\\u00e9t\\u00C9"', "\u00e9t\u00c9"),
            ('"x\\u20ACy"', "x\u20acy"),
        ],
    )
    def test_escape_table(self, text, expected) -> None:
        assert parse(string_with_action, text) == expected

    @pytest.mark.parametrize(
        "text", ['"abc', '"\\x"', '"\\u12"', '"\\u12G4"', '"a\nb"', 'abc"']
    )
    def test_invalid(self, text) -> None:
        assert not validate(string_with_action, text)


SIMPLE_DOC = """
    {
        "abc": 0
    }
"""

NESTED_DOC = """
    {
        "abc": 0,
        "def": {
            "ghi": [],
            "dd": {},
            "ff": {
                "a": false,
                "v": [{}, false, true, null],
                "b": [{
                    "abc": 0
                }]
            }
        }
    }
"""


class TestDocuments:
    def test_simple_object(self) -> None:
        assert loads(SIMPLE_DOC) == {"abc": 0}

    def test_nested_matches_json_module(self) -> None:
        assert loads(NESTED_DOC) == json.loads(NESTED_DOC)

    @pytest.mark.parametrize(
        "text",
        [
            "null",
            "true",
            " false ",
            "[]",
            "[ ]",
            "{ }",
            "[1, -2.5, 3e2]",
            '["a", ["b", ["c", ["d"]]]]',
            '{"k": {"k": {"k": {"k": [null]}}}}',
            '{"esc": "tab\\there", "u": "\\u00fc"}',
        ],
    )
    def test_matches_json_module(self, text) -> None:
        assert loads(text) == json.loads(text)

    @pytest.mark.parametrize(
        "text",
        ["", "[1,]", "{,}", '{"a" 1}', "[1 2]", "tru", '{"a": 1', "nul l", "{a: 1}"],
    )
    def test_rejects_invalid(self, text) -> None:
        assert not JSON.validate(text)
        with pytest.raises(ParseError):
            loads(text)

    def test_duplicate_keys_keep_last(self) -> None:
        assert loads('{"a": 1, "a": 2}') == {"a": 2}

    def test_deep_nesting_is_reported(self) -> None:
        depth = sys.getrecursionlimit()
        text = "[" * depth + "]" * depth
        assert not JSON.validate(text)
        with pytest.raises(NestingTooDeepError):
            loads(text)
