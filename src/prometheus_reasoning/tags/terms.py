"""
prometheus_reasoning/tags/terms.py - Tag Algebra for the Expert System

Implements the reasoning units the engine works with:
- Fact: predicate with ordered arguments and a confidence, e.g. "Dog(rex,4)"
- Rule: ordered input tags => ordered output tags
- Recommendation: terminal output marker, e.g. "@feed"

Tag is the closed union of the three. Every tag exposes ``type`` and a
cached string form ``value``; identity never depends on confidence.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING, Iterable, Optional, Sequence, Union

from ..exceptions import ParseError
from .arguments import Argument

if TYPE_CHECKING:
    from ..matching import MatchResult, Substitution

_FACT = re.compile(r"([^(),\s]+)\(([^()]*)\)")
_FACT_LIKE = re.compile(r".*\(.*\).*")
_ARROW = re.compile(r"=>|->")


class TagType(Enum):
    """Discriminant of the Tag union."""

    FACT = "fact"
    RULE = "rule"
    RECOMMENDATION = "recommendation"


@dataclass(frozen=True)
class Fact:
    """A predicate that is held to be true.

    Facts are written ``P(ARG1,ARG2,...)`` with no spaces. Two facts with
    the same predicate and arguments are equal whatever their confidence.

    Example:
        Fact.parse("Temperature(>38)")
        Fact.parse("Dog(rex)", confidence=0.8)
    """

    predicate_name: str
    arguments: tuple[Argument, ...] = ()
    confidence: float = field(default=1.0, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "arguments", tuple(self.arguments))
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be in [0, 1], got {self.confidence}")

    @classmethod
    def parse(cls, value: str, confidence: float = 1.0) -> Fact:
        """Parse ``P(ARG1,ARG2,...)`` into a Fact."""
        found = _FACT.fullmatch(value)
        if found is None:
            raise ParseError("Malformed fact", value)
        name, body = found.groups()
        tokens = body.split(",") if body else []
        arguments = tuple(Argument.parse(token) for token in tokens)
        return cls(name, arguments, confidence)

    @property
    def type(self) -> TagType:
        return TagType.FACT

    @property
    def arity(self) -> int:
        return len(self.arguments)

    @cached_property
    def value(self) -> str:
        return f"{self.predicate_name}({','.join(str(a) for a in self.arguments)})"

    def variables(self) -> set[str]:
        return {a.name for a in self.arguments if a.is_variable}

    def is_ground(self) -> bool:
        return not any(a.is_variable or a.is_wildcard for a in self.arguments)

    def match_result(
        self, input_fact: Fact, bindings: Optional[Substitution] = None
    ) -> MatchResult:
        """Match ``input_fact`` (usually a rule pattern) against this fact."""
        from ..matching import match_facts

        return match_facts(self, input_fact, bindings)

    def matches(self, input_fact: Fact) -> bool:
        return self.match_result(input_fact).matched

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Recommendation:
    """Terminal output of the reasoning, written ``@name``."""

    value: str

    def __post_init__(self):
        if (
            len(self.value) < 2
            or not self.value.startswith("@")
            or any(ch.isspace() for ch in self.value)
        ):
            raise ParseError("Malformed recommendation", self.value)

    @classmethod
    def parse(cls, value: str) -> Recommendation:
        return cls(value)

    @property
    def type(self) -> TagType:
        return TagType.RECOMMENDATION

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Rule:
    """Ordered input tags that, once all satisfied, produce the output tags.

    The rule with no inputs and no outputs is the "empty rule", returned
    when two rules cannot be composed.

    Example:
        Rule.parse("Dog(?x),Hungry(?x)=>@feed")
    """

    input_tags: tuple[Tag, ...] = ()
    output_tags: tuple[Tag, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "input_tags", tuple(self.input_tags))
        object.__setattr__(self, "output_tags", tuple(self.output_tags))

    @classmethod
    def empty(cls) -> Rule:
        return cls()

    @classmethod
    def from_strings(
        cls,
        input_tags: Sequence[str],
        output_tags: Sequence[str],
        tag_type: TagType,
    ) -> Rule:
        """Create a rule whose input and output tags all share ``tag_type``."""
        return cls(
            tuple(parse_tag(s, tag_type) for s in input_tags),
            tuple(parse_tag(s, tag_type) for s in output_tags),
        )

    @classmethod
    def parse(cls, value: str) -> Rule:
        """Parse ``A(1),B(2)=>C(1),@rec`` (``->`` is accepted too)."""
        parts = _ARROW.split(value, maxsplit=1)
        if len(parts) != 2:
            raise ParseError("Rule needs '=>' or '->'", value)
        inputs = split_tag_list(parts[0])
        outputs = split_tag_list(parts[1])
        if not inputs or not outputs:
            raise ParseError("Rule needs both inputs and outputs", value)
        return cls(
            tuple(_parse_simple_tag(s) for s in inputs),
            tuple(_parse_simple_tag(s) for s in outputs),
        )

    @property
    def type(self) -> TagType:
        return TagType.RULE

    @property
    def is_empty(self) -> bool:
        return not self.input_tags and not self.output_tags

    @property
    def input_facts(self) -> tuple[Fact, ...]:
        return tuple(t for t in self.input_tags if isinstance(t, Fact))

    @property
    def output_facts(self) -> tuple[Fact, ...]:
        return tuple(t for t in self.output_tags if isinstance(t, Fact))

    @cached_property
    def value(self) -> str:
        inputs = ",".join(str(t) for t in self.input_tags)
        outputs = ",".join(str(t) for t in self.output_tags)
        return f"{inputs}=>{outputs}"

    def __str__(self) -> str:
        return self.value


Tag = Union[Fact, Rule, Recommendation]


def parse_tag(value: str, tag_type: Optional[TagType] = None) -> Tag:
    """Parse a tag string.

    Without an explicit ``tag_type``: a leading ``@`` makes a
    Recommendation, an arrow makes a Rule, ``...(...)...`` makes a Fact.

    Raises:
        ParseError: if the string fits none of the forms
    """
    value = value.strip()
    if tag_type is None:
        if value.startswith("@"):
            tag_type = TagType.RECOMMENDATION
        elif _ARROW.search(value):
            tag_type = TagType.RULE
        elif _FACT_LIKE.fullmatch(value):
            tag_type = TagType.FACT
        else:
            raise ParseError("Unrecognised tag", value)

    match tag_type:
        case TagType.FACT:
            return Fact.parse(value)
        case TagType.RULE:
            return Rule.parse(value)
        case TagType.RECOMMENDATION:
            return Recommendation.parse(value)
    raise TypeError(f"Unknown tag type: {tag_type!r}")


def split_tag_list(value: str) -> list[str]:
    """Split ``[A(1,2), B(3)]`` on top-level commas."""
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        value = value[1:-1]

    items: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(value):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise ParseError("Unbalanced parentheses", value)
        elif ch == "," and depth == 0:
            items.append(value[start:i].strip())
            start = i + 1
    if depth != 0:
        raise ParseError("Unbalanced parentheses", value)

    tail = value[start:].strip()
    if tail or items:
        items.append(tail)
    if any(not item for item in items):
        raise ParseError("Empty tag in list", value)
    return items


def _parse_simple_tag(value: str) -> Tag:
    tag = parse_tag(value)
    if isinstance(tag, Rule):
        raise ParseError("Rules cannot be nested in a rule string", value)
    return tag


def tag_sort_key(tag: Tag) -> tuple[str, str]:
    """Stable ordering for tags (used when a set becomes a rule side)."""
    return (tag.type.value, str(tag))


def sorted_tags(tags: Iterable[Tag]) -> list[Tag]:
    return sorted(tags, key=tag_sort_key)
