from .parser import ParseError, DepthExceeded, parse, parse_prefix, parse_list, parse_dotted_list, parse_quoted
from .reader import read_expr
from .render import render
from .types import (
    Atom, Boolean, Character, Complex, DottedPair, Expression, Float, Integer, List, Options, Ratio, Text, quote,
)

__all__ = [
    "parse", "parse_prefix", "parse_list", "parse_dotted_list", "parse_quoted", "read_expr", "render",
    "ParseError", "DepthExceeded", "Options", "Expression", "Atom", "Boolean", "Character", "Complex",
    "DottedPair", "Float", "Integer", "List", "Ratio", "Text", "quote",
]
