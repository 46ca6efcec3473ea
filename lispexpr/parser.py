"""Recursive-descent reader for Lisp expressions.

Every recognizer takes the parse state and a start offset and returns
``(expression, end)`` or ``None``. ``None`` never consumes input, so the
dispatcher retries the next alternative from the same offset. Failing
primitives record what they expected; the furthest failure is what a
``ParseError`` reports.
"""

from typing import Callable, Iterable, Optional

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
    quote,
)

SYMBOL_CHARS = "!#$%&*|+-/:<=>?@^_~"
DIGITS = "0123456789"
HEX_DIGITS = "0123456789abcdefABCDEF"

# Longest digit string handed to int() in one piece.
DECIMAL_CHUNK = 640

# Characters after '#' that start a literal rather than an atom.
HASH_TAGS = ("t", "f", "\\", "b", "o", "d", "x")

# tag -> (digit set, base, description)
RADIXES = {
    "b": ("01", 2, "binary digit"),
    "o": ("01234567", 8, "octal digit"),
    "d": (DIGITS, 10, "digit"),
    "x": (HEX_DIGITS, 16, "hexadecimal digit"),
}

ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}
CHAR_NAMES = {"space": " ", "newline": "\n"}

Result = Optional[tuple[Expression, int]]


class ParseError(SyntaxError):
    """Input did not match at the furthest offset any alternative reached."""

    def __init__(self, src: str, pos: int, expected: Iterable[str] = ()):
        self.pos = pos
        self.expected = tuple(sorted(set(expected)))
        self.found = src[pos] if pos < len(src) else None
        self.line = src.count("\n", 0, pos) + 1
        self.column = pos - src.rfind("\n", 0, pos)
        super().__init__(self._describe())
        self.lineno = self.line
        self.offset = self.column

    def _where(self) -> str:
        return f"line {self.line}, column {self.column}"

    def _describe(self) -> str:
        found = "end of input" if self.found is None else repr(self.found)
        text = f"{self._where()}: unexpected {found}"
        if self.expected:
            text += "; expecting " + _alternatives(self.expected)
        return text

    def __str__(self):
        return self.msg


class DepthExceeded(ParseError):
    def __init__(self, src: str, pos: int, limit: int):
        self.limit = limit
        super().__init__(src, pos)

    def _describe(self) -> str:
        return f"{self._where()}: nesting deeper than {self.limit}"


def _alternatives(items: tuple[str, ...]) -> str:
    if len(items) == 1:
        return items[0]
    return ", ".join(items[:-1]) + " or " + items[-1]


class _ParseState:
    __slots__ = ("src", "options", "depth", "fail_pos", "expected")

    def __init__(self, src: str, options: Options):
        self.src = src
        self.options = options
        self.depth = 0
        self.fail_pos = -1
        self.expected: set[str] = set()

    def fail(self, pos: int, what: str) -> None:
        if pos > self.fail_pos:
            self.fail_pos = pos
            self.expected = {what}
        elif pos == self.fail_pos:
            self.expected.add(what)
        return None

    def error(self) -> ParseError:
        return ParseError(self.src, max(self.fail_pos, 0), self.expected)


# --- Primitives: return the end offset or None ---

def _literal(st: _ParseState, pos: int, text: str) -> Optional[int]:
    if st.src.startswith(text, pos):
        return pos + len(text)
    return st.fail(pos, repr(text))


def _satisfy(st: _ParseState, pos: int, accept: Callable[[str], bool], what: str) -> Optional[int]:
    if pos < len(st.src) and accept(st.src[pos]):
        return pos + 1
    return st.fail(pos, what)


def _many(st: _ParseState, pos: int, accept: Callable[[str], bool], what: str,
          at_least: int = 0) -> Optional[int]:
    src = st.src
    end = pos
    while end < len(src) and accept(src[end]):
        end += 1
    if end - pos < at_least:
        return st.fail(end, what)
    return end


def _is_digit(c: str) -> bool:
    return c in DIGITS


def _is_atom_start(c: str) -> bool:
    return c.isalpha() or c in SYMBOL_CHARS


def _is_atom_char(c: str) -> bool:
    return _is_atom_start(c) or c in DIGITS


def decimal_to_int(text: str) -> int:
    """int(text) for any length of decimal digits.

    int() refuses strings longer than sys.get_int_max_str_digits() (at least
    640), so long runs are split and recombined.
    """
    if len(text) <= DECIMAL_CHUNK:
        return int(text)
    half = len(text) // 2
    rest = text[half:]
    return decimal_to_int(text[:half]) * 10 ** len(rest) + decimal_to_int(rest)


def _digits(st: _ParseState, pos: int) -> Optional[int]:
    return _many(st, pos, _is_digit, "digit", at_least=1)


def _whitespace(st: _ParseState, pos: int) -> Optional[int]:
    return _many(st, pos, str.isspace, "whitespace", at_least=1)


def _first(st: _ParseState, pos: int, alternatives) -> Result:
    for alt in alternatives:
        result = alt(st, pos)
        if result is not None:
            return result
    return None


# --- Literals ---

def _atom(st: _ParseState, pos: int) -> Result:
    src = st.src
    if src.startswith("#", pos) and src[pos + 1:pos + 2] in HASH_TAGS:
        # '#t', '#\a', '#x1F' belong to their literals; '#define' is still an atom.
        if _first(st, pos, HASH_LITERALS) is not None:
            return None
    end = _satisfy(st, pos, _is_atom_start, "letter or symbol")
    if end is None:
        return None
    end = _many(st, end, _is_atom_char, "letter, digit or symbol")
    return Atom(src[pos:end]), end


def _text(st: _ParseState, pos: int) -> Result:
    end = _literal(st, pos, '"')
    if end is None:
        return None
    src = st.src
    chars = []
    while end < len(src) and src[end] != '"':
        c = src[end]
        if c == "\\":
            code = src[end + 1:end + 2]
            if code not in ESCAPES:
                return st.fail(end + 1, "escape code")
            chars.append(ESCAPES[code])
            end += 2
        else:
            chars.append(c)
            end += 1
    if _literal(st, end, '"') is None:
        return None
    return Text("".join(chars)), end + 1


def _character(st: _ParseState, pos: int) -> Result:
    start = _literal(st, pos, "#\\")
    if start is None:
        return None
    end = _many(st, start, str.isalpha, "letter", at_least=1)
    if end is None:
        return None
    name = st.src[start:end]
    if name.lower() in CHAR_NAMES:
        return Character(CHAR_NAMES[name.lower()]), end
    if len(name) == 1:
        return Character(name), end
    return st.fail(start, "character name")


def _boolean(st: _ParseState, pos: int) -> Result:
    end = _literal(st, pos, "#")
    if end is None:
        return None
    flag = st.src[end:end + 1]
    if flag == "t":
        return Boolean(True), end + 1
    if flag == "f":
        return Boolean(False), end + 1
    return st.fail(end, "'t' or 'f'")


def _plain_integer(st: _ParseState, pos: int) -> Result:
    end = _digits(st, pos)
    if end is None:
        return None
    return Integer(decimal_to_int(st.src[pos:end])), end


def _radix_integer(st: _ParseState, pos: int) -> Result:
    end = _literal(st, pos, "#")
    if end is None:
        return None
    tag = st.src[end:end + 1]
    if tag not in RADIXES:
        return st.fail(end, "radix tag")
    digits, base, what = RADIXES[tag]
    start = end + 1
    stop = _many(st, start, lambda c: c in digits, what, at_least=1)
    if stop is None:
        return None
    text = st.src[start:stop]
    value = decimal_to_int(text) if base == 10 else int(text, base)
    return Integer(value), stop


def _integer(st: _ParseState, pos: int) -> Result:
    return _first(st, pos, (_plain_integer, _radix_integer))


def _float(st: _ParseState, pos: int) -> Result:
    whole = _digits(st, pos)
    if whole is None:
        return None
    dot = _literal(st, whole, ".")
    if dot is None:
        return None
    end = _digits(st, dot)
    if end is None:
        return None
    return Float(float(st.src[pos:end])), end


def _ratio(st: _ParseState, pos: int) -> Result:
    slash = _digits(st, pos)
    if slash is None:
        return None
    start = _literal(st, slash, "/")
    if start is None:
        return None
    end = _digits(st, start)
    if end is None:
        return None
    denominator = decimal_to_int(st.src[start:end])
    if denominator == 0:
        return st.fail(start, "non-zero denominator")
    return Ratio(decimal_to_int(st.src[pos:slash]), denominator), end


def _to_float(x: Expression) -> float:
    if isinstance(x, Float):
        return x.value
    try:
        return float(x.value)
    except OverflowError:
        return float("inf")


def _real_part(st: _ParseState, pos: int) -> Result:
    return _first(st, pos, (_float, _plain_integer))


def _complex(st: _ParseState, pos: int) -> Result:
    real = _real_part(st, pos)
    if real is None:
        return None
    plus = _literal(st, real[1], "+")
    if plus is None:
        return None
    imag = _real_part(st, plus)
    if imag is None:
        return None
    end = _literal(st, imag[1], "i")
    if end is None:
        return None
    return Complex(_to_float(real[0]), _to_float(imag[0])), end


# --- Composites ---

def _subexpr(st: _ParseState, pos: int) -> Result:
    st.depth += 1
    if st.depth > st.options.max_depth:
        st.depth -= 1
        raise DepthExceeded(st.src, pos, st.options.max_depth)
    try:
        return _expr(st, pos)
    finally:
        st.depth -= 1


def _list(st: _ParseState, pos: int) -> Result:
    items = []
    end = pos
    item = _subexpr(st, pos)
    while item is not None:
        items.append(item[0])
        end = item[1]
        gap = _whitespace(st, end)
        if gap is None:
            break
        item = _subexpr(st, gap)
    return List(items), end


def _dotted_pair(st: _ParseState, pos: int) -> Result:
    items = []
    end = pos
    while True:
        item = _subexpr(st, end)
        if item is None:
            break
        gap = _whitespace(st, item[1])
        if gap is None:
            break
        items.append(item[0])
        end = gap
    dot = _literal(st, end, ".")
    if dot is None:
        return None
    gap = _whitespace(st, dot)
    if gap is None:
        return None
    tail = _subexpr(st, gap)
    if tail is None:
        return None
    return DottedPair(items, tail[0]), tail[1]


def _quoted(st: _ParseState, pos: int) -> Result:
    end = _literal(st, pos, "'")
    if end is None:
        return None
    inner = _subexpr(st, end)
    if inner is None:
        return None
    return quote(inner[0]), inner[1]


def _dotted_tail(st: _ParseState, pos: int) -> Result:
    dot = _literal(st, pos, ".")
    if dot is None:
        return None
    gap = _whitespace(st, dot)
    if gap is None:
        return None
    return _subexpr(st, gap)


def _form_body(st: _ParseState, pos: int) -> Result:
    """Items of a list or dotted pair, each read once.

    Reading a dotted pair and then re-reading the same items as a list would
    double the work at every nesting level.
    """
    tail = _dotted_tail(st, pos)
    if tail is not None:
        return DottedPair((), tail[0]), tail[1]
    items = []
    end = pos
    item = _subexpr(st, pos)
    while item is not None:
        items.append(item[0])
        end = item[1]
        gap = _whitespace(st, end)
        if gap is None:
            break
        tail = _dotted_tail(st, gap)
        if tail is not None:
            return DottedPair(items, tail[0]), tail[1]
        item = _subexpr(st, gap)
    return List(items), end


def _parenthesized(st: _ParseState, pos: int) -> Result:
    start = _literal(st, pos, "(")
    if start is None:
        return None
    inner = _form_body(st, start)
    close = _many(st, inner[1], str.isspace, "whitespace")
    end = _literal(st, close, ")")
    if end is None:
        return None
    return inner[0], end


# --- Dispatch ---

# Order matters: a digit run is a prefix of complex, float, ratio and integer.
LITERALS = (_atom, _text, _character, _complex, _float, _ratio, _integer, _boolean)
COMPOSITES = (_quoted, _parenthesized)
HASH_LITERALS = (_boolean, _character, _radix_integer)


def _expr(st: _ParseState, pos: int) -> Result:
    result = _first(st, pos, LITERALS)
    if result is None and st.options.composites:
        result = _first(st, pos, COMPOSITES)
    return result


def _run(entry, src: str, options: Optional[Options]) -> tuple[Expression, int]:
    st = _ParseState(src, options or Options())
    result = entry(st, 0)
    if result is None:
        raise st.error()
    expr, end = result
    if st.options.strict and end != len(src):
        st.fail(end, "end of input")
        raise st.error()
    return expr, end


def parse_prefix(src: str, options: Optional[Options] = None) -> tuple[Expression, int]:
    """Parse one expression at the start of src.

    Returns the expression and the offset just past it. Trailing input is
    left alone unless ``options.strict`` is set.
    """
    return _run(_expr, src, options)


def parse(src: str, options: Optional[Options] = None) -> Expression:
    """Parse one expression at the start of src into an Expression tree."""
    return _run(_expr, src, options)[0]


def parse_list(src: str, options: Optional[Options] = None) -> List:
    """Whitespace-separated expressions, no parentheses: ``a b c``."""
    return _run(_list, src, options)[0]


def parse_dotted_list(src: str, options: Optional[Options] = None) -> DottedPair:
    """Whitespace-terminated expressions, then ``. tail``: ``a b . c``."""
    return _run(_dotted_pair, src, options)[0]


def parse_quoted(src: str, options: Optional[Options] = None) -> List:
    return _run(_quoted, src, options)[0]
