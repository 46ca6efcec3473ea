from dataclasses import dataclass
from typing import Any

# Expression tree: every node is a frozen dataclass, children live in tuples.


class Expression:
    __slots__ = ()


def _freeze(items: Any) -> tuple:
    items = tuple(items)
    for item in items:
        _check(item)
    return items


def _check(item: Any) -> None:
    if not isinstance(item, Expression):
        raise TypeError(f"not an Expression: {item!r}")


@dataclass(frozen=True)
class Atom(Expression):
    name: str


@dataclass(frozen=True)
class List(Expression):
    items: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "items", _freeze(self.items))


@dataclass(frozen=True)
class DottedPair(Expression):
    items: tuple
    tail: Expression

    def __post_init__(self):
        object.__setattr__(self, "items", _freeze(self.items))
        _check(self.tail)


@dataclass(frozen=True)
class Integer(Expression):
    value: int


@dataclass(frozen=True)
class Text(Expression):
    value: str


@dataclass(frozen=True)
class Boolean(Expression):
    value: bool


@dataclass(frozen=True)
class Character(Expression):
    value: str

    def __post_init__(self):
        if len(self.value) != 1:
            raise ValueError(f"Character needs exactly one code point, got {self.value!r}")


@dataclass(frozen=True)
class Float(Expression):
    value: float


@dataclass(frozen=True)
class Ratio(Expression):
    numerator: int
    denominator: int

    def __post_init__(self):
        if self.denominator == 0:
            raise ZeroDivisionError("Ratio denominator is zero")


@dataclass(frozen=True)
class Complex(Expression):
    real: float
    imag: float


def quote(expr: Expression) -> List:
    """Expand ``'expr`` into ``(quote expr)``."""
    return List((Atom("quote"), expr))


@dataclass(frozen=True)
class Options:
    strict: bool = False  # whole input must be one expression
    composites: bool = False  # reach '(...)' and 'x from the dispatcher
    max_depth: int = 64
