"""
prometheus_reasoning/tags/arguments.py - Predicate Arguments

Implements the atomic values that appear inside a fact:
- STRING: literal constants (e.g., "dog", "red")
- NUMERIC: numbers with a relational operator (e.g., "5", ">5", "!=0")
- VAR: binders that unify with any value (e.g., "?x", "&items")
- MATCHALL: the "*" wildcard, which absorbs the rest of a fact

An argument's symbol is fixed once, from its source token.
"""
from __future__ import annotations

import operator
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from ..exceptions import ParseError

_NUMBER = re.compile(r"-?\d+(\.\d+)?")
_OPERATOR_PREFIX = re.compile(r"^[=><!]*")


class ArgType(Enum):
    """Kind of an argument."""

    STRING = "string"
    NUMERIC = "numeric"
    VAR = "var"
    MATCHALL = "matchall"


class Relation(Enum):
    """Relational operator carried by a numeric argument."""

    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="

    def holds(self, left: float, right: float) -> bool:
        """Evaluate ``left <op> right``."""
        return _RELATION_OPS[self](left, right)

    @classmethod
    def from_prefix(cls, prefix: str) -> Relation:
        try:
            return _PREFIXES[prefix]
        except KeyError:
            raise ParseError("Unknown relational operator", prefix) from None


_RELATION_OPS = {
    Relation.EQ: operator.eq,
    Relation.NE: operator.ne,
    Relation.GT: operator.gt,
    Relation.LT: operator.lt,
    Relation.GE: operator.ge,
    Relation.LE: operator.le,
}

_PREFIXES = {
    "": Relation.EQ,
    "=": Relation.EQ,
    "==": Relation.EQ,
    "!": Relation.NE,
    "!=": Relation.NE,
    ">": Relation.GT,
    "<": Relation.LT,
    ">=": Relation.GE,
    "<=": Relation.LE,
}


class Binder(Enum):
    """How a variable binds: one value (``?``) or many (``&name``)."""

    SINGLE = "?"
    MULTI = "&"


@dataclass(frozen=True)
class Argument:
    """A single argument of a fact.

    Equality is structural over kind, value, operator and variable name;
    the source token is kept for display only.

    Example:
        Argument.parse("dog")    # STRING
        Argument.parse(">5")     # NUMERIC, Relation.GT
        Argument.parse("?x")     # VAR named "x"
        Argument.parse("*")      # MATCHALL
    """

    symbol: ArgType
    value: Union[str, float, None] = None
    relation: Relation = Relation.EQ
    name: str = ""
    binder: Optional[Binder] = None
    token: str = field(default="", compare=False)

    @classmethod
    def parse(cls, token: str) -> Argument:
        """Build an argument from its source token.

        A trailing number makes it NUMERIC; ``*`` is MATCHALL; a leading
        ``?`` or ``&`` makes it a VAR; anything else is a STRING.
        """
        if not token or any(ch.isspace() for ch in token):
            raise ParseError("Malformed argument", token)

        prefix = _OPERATOR_PREFIX.match(token).group(0)
        body = token[len(prefix):]

        if body and _NUMBER.fullmatch(body):
            return cls(
                ArgType.NUMERIC,
                float(body),
                Relation.from_prefix(prefix),
                token=token,
            )
        if body == "*":
            return cls(ArgType.MATCHALL, token=token)
        if body.startswith("?"):
            return cls.variable(body[1:] or "?", Binder.SINGLE, token=token)
        if body.startswith("&"):
            return cls.variable(body[1:] or "&", Binder.MULTI, token=token)
        return cls(ArgType.STRING, token, token=token)

    @classmethod
    def literal(cls, value: str) -> Argument:
        return cls(ArgType.STRING, value, token=value)

    @classmethod
    def numeric(cls, value: float, relation: Relation = Relation.EQ) -> Argument:
        number = f"{value:g}"
        prefix = "" if relation is Relation.EQ else relation.value
        return cls(ArgType.NUMERIC, float(value), relation, token=prefix + number)

    @classmethod
    def variable(
        cls,
        name: str,
        binder: Binder = Binder.SINGLE,
        token: str = "",
    ) -> Argument:
        if not token:
            token = binder.value + name if name != binder.value else name
        return cls(ArgType.VAR, None, Relation.EQ, name, binder, token=token)

    @classmethod
    def wildcard(cls) -> Argument:
        return cls(ArgType.MATCHALL, token="*")

    @property
    def is_variable(self) -> bool:
        return self.symbol is ArgType.VAR

    @property
    def is_anonymous(self) -> bool:
        """A bare ``?`` or ``&``: matches anything and never binds."""
        return self.is_variable and self.name == self.binder.value

    @property
    def is_wildcard(self) -> bool:
        return self.symbol is ArgType.MATCHALL

    def matches(self, other: Argument) -> bool:
        """Check whether two arguments are compatible.

        Wildcards and variables on either side always match; otherwise
        both must be the same kind and satisfy the numeric operator.
        """
        if self.is_wildcard or other.is_wildcard:
            return True
        if self.is_variable or other.is_variable:
            return True
        if self.symbol is not other.symbol:
            return False
        if self.symbol is ArgType.STRING:
            return self.value == other.value
        return _numeric_matches(self, other)

    def __str__(self) -> str:
        return self.token

    def __repr__(self) -> str:
        return f"Argument({self.symbol.value}:{self.token})"


def _numeric_matches(arg: Argument, other: Argument) -> bool:
    """The operator of whichever side carries one constrains the other."""
    if arg.relation is not Relation.EQ and other.relation is not Relation.EQ:
        return arg.relation is other.relation and arg.value == other.value
    if other.relation is not Relation.EQ:
        return other.relation.holds(arg.value, other.value)
    if arg.relation is not Relation.EQ:
        return arg.relation.holds(other.value, arg.value)
    return arg.value == other.value
