"""Canonical literal syntax for expressions.

For every leaf that renders, ``parse(render(x)) == x``. Lists, dotted pairs
and quoted forms render as parenthesised text, which reads back with
``Options(composites=True)``.
"""

import math
from decimal import Decimal

from .parser import DECIMAL_CHUNK, ParseError, parse
from .types import (
    Atom,
    Boolean,
    Character,
    Complex,
    DottedPair,
    Expression,
    Float,
    Integer,
    List,
    Options,
    Ratio,
    Text,
)

_STRICT = Options(strict=True)
_ESCAPED = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_CHAR_NAMES = {" ": "space", "\n": "newline"}
_SMALL = 10 ** DECIMAL_CHUNK


def render(expr: Expression) -> str:
    """Render expr as the literal text the reader parses back to it.

    Raises ValueError for values with no literal syntax: negative numbers,
    non-finite floats, characters other than letters, space and newline, and
    atom names the reader would classify differently.
    """
    if isinstance(expr, Atom):
        return _atom(expr)
    if isinstance(expr, Boolean):
        return "#t" if expr.value else "#f"
    if isinstance(expr, Integer):
        return _natural(expr.value)
    if isinstance(expr, Text):
        return '"' + "".join(_ESCAPED.get(c, c) for c in expr.value) + '"'
    if isinstance(expr, Character):
        return _character(expr.value)
    if isinstance(expr, Float):
        return _decimal(expr.value)
    if isinstance(expr, Ratio):
        return f"{_natural(expr.numerator)}/{_natural(expr.denominator)}"
    if isinstance(expr, Complex):
        return f"{_decimal(expr.real)}+{_decimal(expr.imag)}i"
    if isinstance(expr, List):
        return "(" + " ".join(render(x) for x in expr.items) + ")"
    if isinstance(expr, DottedPair):
        head = "".join(render(x) + " " for x in expr.items)
        return f"({head}. {render(expr.tail)})"
    raise TypeError(f"not an Expression: {expr!r}")


def _atom(expr: Atom) -> str:
    try:
        ok = parse(expr.name, _STRICT) == expr
    except ParseError:
        ok = False
    if not ok:
        raise ValueError(f"no literal syntax for atom {expr.name!r}")
    return expr.name


def _natural(n: int) -> str:
    if n < 0:
        raise ValueError(f"no literal syntax for negative number {n}")
    return _decimal_digits(n)


def _decimal_digits(n: int) -> str:
    # str() has the same digit limit as int(); split like parser.decimal_to_int.
    if n < _SMALL:
        return str(n)
    k = n.bit_length() * 3 // 20
    high, low = divmod(n, 10 ** k)
    return _decimal_digits(high) + _decimal_digits(low).zfill(k)


def _character(c: str) -> str:
    if c in _CHAR_NAMES:
        return "#\\" + _CHAR_NAMES[c]
    if c.isalpha():
        return "#\\" + c
    raise ValueError(f"no literal syntax for character {c!r}")


def _decimal(x: float) -> str:
    if not math.isfinite(x) or math.copysign(1.0, x) < 0:
        raise ValueError(f"no literal syntax for float {x!r}")
    # repr gives the shortest round-tripping digits; spell them out positionally.
    text = format(Decimal(repr(x)), "f")
    if "." not in text:
        text += ".0"
    return text
