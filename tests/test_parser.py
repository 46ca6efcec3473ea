import random
import string

import pytest
from lispexpr.parser import ParseError, parse, parse_prefix
from lispexpr.types import Atom, Boolean, Character, Complex, Float, Integer, Options, Ratio, Text


# --- Atoms ---

@pytest.mark.parametrize("src", ["foo", "list->vector", "set!", "a1b2", "+", "-", "<=", "#", "#zap", "x?"])
def test_parse_atom(src):
    assert parse(src) == Atom(src)


@pytest.mark.parametrize("src", ["#define", "#xyz", "#box", "#dog", "#ok", "#d", "#x"])
def test_hash_atoms_that_are_not_literals(src):
    assert parse(src, Options(strict=True)) == Atom(src)


def test_signed_number_is_an_atom():
    assert parse("-5") == Atom("-5")


def test_atom_stops_at_whitespace():
    assert parse_prefix("abc def") == (Atom("abc"), 3)


# --- Strings ---

def test_parse_string():
    assert parse('"hello world"') == Text("hello world")


def test_parse_empty_string():
    assert parse('""') == Text("")


def test_parse_string_newline_escape():
    assert parse('"ab\\nc"') == Text("ab\nc")


def test_parse_string_escapes():
    assert parse('"\\t\\r\\\\\\""') == Text('\t\r\\"')


def test_parse_string_escaped_quote():
    assert parse('"say \\"hi\\""') == Text('say "hi"')


def test_parse_string_unknown_escape():
    with pytest.raises(ParseError, match="expecting escape code"):
        parse('"a\\q"')


# --- Characters ---

def test_parse_char_space():
    assert parse("#\\space") == Character(" ")


def test_parse_char_newline():
    assert parse("#\\newline") == Character("\n")


def test_parse_char_names_ignore_case():
    assert parse("#\\SPACE") == Character(" ")


def test_parse_char_letter():
    assert parse("#\\a") == Character("a")


def test_parse_char_keeps_case():
    assert parse("#\\A") == Character("A")


def test_parse_char_unknown_name():
    with pytest.raises(ParseError, match="expecting character name"):
        parse("#\\abc", Options(strict=True))


# --- Booleans ---

def test_parse_bool_true():
    assert parse("#t") == Boolean(True)


def test_parse_bool_false():
    assert parse("#f") == Boolean(False)


# --- Integers ---

def test_parse_integer():
    assert parse("42") == Integer(42)


def test_parse_integer_leading_zeros():
    assert parse("007") == Integer(7)


def test_parse_big_integer():
    assert parse("123456789012345678901234567890") == Integer(123456789012345678901234567890)


def test_parse_binary():
    assert parse("#b1011") == Integer(11)


def test_parse_hex():
    assert parse("#x1F") == Integer(31)


def test_parse_hex_lowercase():
    assert parse("#xff") == Integer(255)


def test_parse_decimal_radix():
    assert parse("#d42") == Integer(42)


def test_parse_octal_is_base_eight():
    assert parse("#o17") == Integer(15)


@pytest.mark.parametrize("src", ["#d", "#b", "#o", "#x"])
def test_radix_without_digits_is_an_atom(src):
    assert parse(src) == Atom(src)


def test_octal_digits_stop_at_eight():
    assert parse_prefix("#o78") == (Integer(7), 3)


def test_octal_with_bad_digit_is_an_atom():
    assert parse("#o8") == Atom("#o8")


# --- Floats, ratios, complex numbers ---

def test_parse_float():
    assert parse("3.14") == Float(3.14)


def test_parse_ratio():
    assert parse("3/4") == Ratio(3, 4)


def test_parse_ratio_is_not_reduced():
    assert parse("6/8") == Ratio(6, 8)


def test_zero_denominator_falls_back_to_integer():
    assert parse_prefix("1/0") == (Integer(1), 1)


def test_parse_complex():
    assert parse("1+2i") == Complex(1.0, 2.0)


def test_parse_complex_floats():
    assert parse("1.5+2.25i") == Complex(1.5, 2.25)


def test_parse_complex_mixed():
    assert parse("3+0.5i") == Complex(3.0, 0.5)


def test_complex_without_i_is_integer():
    assert parse_prefix("1+2") == (Integer(1), 1)


# --- Dispatch order ---

@pytest.mark.parametrize("src, expected", [
    ("12", Integer(12)),
    ("1.25", Float(1.25)),
    ("1/2", Ratio(1, 2)),
    ("1.0+2i", Complex(1.0, 2.0)),
    ("a1", Atom("a1")),
    ("#t", Boolean(True)),
])
def test_shared_prefixes_classify(src, expected):
    assert parse(src) == expected


def test_trailing_input_is_ignored():
    assert parse("42xyz") == Integer(42)


def test_hash_literal_prefix_wins_over_atom():
    assert parse_prefix("#true") == (Boolean(True), 2)


# --- Properties over generated inputs ---

_rng = random.Random(20261018)


def _digit_string(min_len=1, max_len=25):
    return "".join(_rng.choice(string.digits) for _ in range(_rng.randint(min_len, max_len)))


DIGIT_STRINGS = [_digit_string() for _ in range(40)]
FLOAT_PARTS = [(_digit_string(1, 12), _digit_string(1, 12)) for _ in range(40)]
RATIO_PARTS = [(_digit_string(), str(_rng.randint(1, 10**12))) for _ in range(40)]


@pytest.mark.parametrize("s", DIGIT_STRINGS)
def test_digit_strings_read_as_integers(s):
    assert parse(s) == Integer(int(s))


@pytest.mark.parametrize("whole, decimal", FLOAT_PARTS)
def test_decimal_strings_read_as_nearest_double(whole, decimal):
    text = whole + "." + decimal
    assert parse(text) == Float(float(text))


@pytest.mark.parametrize("num, denom", RATIO_PARTS)
def test_ratios_keep_both_parts(num, denom):
    assert parse(num + "/" + denom) == Ratio(int(num), int(denom))


# --- Long literals ---

SEVENS = 7 * (10**5000 - 1) // 9  # 5000 sevens


def test_long_integer():
    assert parse("7" * 5000) == Integer(SEVENS)


def test_long_decimal_radix():
    assert parse("#d" + "7" * 5000) == Integer(SEVENS)


def test_long_ratio():
    assert parse("7" * 5000 + "/" + "3" * 5000) == Ratio(SEVENS, SEVENS // 7 * 3)
