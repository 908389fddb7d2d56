"""
prometheus_reasoning/matching.py - Fact Matching and Variable Substitution

Unifies a known fact with a pattern fact, argument by argument:
- predicate names must be equal
- a "*" wildcard on either side matches the rest of the fact
- a variable on either side binds to the argument opposite it, except a
  bare "?" or "&", which matches anything without binding
- everything else must agree under the numeric operator, if any

Bindings are explicit values: every call takes the substitution built so
far and returns a new one. Nothing is shared between calls.

Key operations:
- match_facts(fact, pattern, theta): MatchResult with extended bindings
- satisfy(patterns, facts): every substitution satisfying all patterns
- substitute(tag, theta): apply bindings to a tag
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field, replace
from typing import Optional

from .tags.arguments import Argument
from .tags.terms import Fact, Recommendation, Rule, Tag

# Type alias for substitution: variable name -> argument it stands for
Substitution = dict[str, Argument]


@dataclass
class MatchResult:
    """Verdict of a fact match plus the bindings it produced."""

    matched: bool
    bindings: Substitution = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.matched


def match_facts(
    fact: Fact,
    pattern: Fact,
    theta: Optional[Substitution] = None,
) -> MatchResult:
    """Match ``pattern`` against ``fact``.

    Args:
        fact: Known fact
        pattern: Fact to compare with, usually taken from a rule
        theta: Bindings already in force (default: empty)

    Returns:
        MatchResult; on failure, ``bindings`` is ``theta`` unchanged

    Example:
        match_facts(Fact.parse("P(1,2)"), Fact.parse("P(1,?x)"))
        # MatchResult(matched=True, bindings={"x": Argument(numeric:2)})
    """
    theta = dict(theta) if theta else {}
    failed = MatchResult(False, theta)

    if fact.predicate_name != pattern.predicate_name:
        return failed

    # Extra trailing pattern slots are only allowed as wildcards
    extra = pattern.arguments[len(fact.arguments):]
    if any(not arg.is_wildcard for arg in extra):
        return failed

    bindings: Optional[Substitution] = theta
    for arg, other in zip(fact.arguments, pattern.arguments):
        if arg.is_wildcard or other.is_wildcard:
            return MatchResult(True, bindings)
        bindings = unify_arguments(arg, other, bindings)
        if bindings is None:
            return failed

    if len(fact.arguments) > len(pattern.arguments):
        return failed
    return MatchResult(True, bindings)


def unify_arguments(
    arg: Argument,
    other: Argument,
    theta: Substitution,
) -> Optional[Substitution]:
    """Unify two arguments under ``theta``; None if incompatible."""
    if arg.is_anonymous or other.is_anonymous:
        return theta

    arg = resolve(arg, theta)
    other = resolve(other, theta)

    if arg == other:
        return theta
    if other.is_variable:
        return _bind(other, arg, theta)
    if arg.is_variable:
        return _bind(arg, other, theta)
    if arg.matches(other):
        return theta
    return None


def _bind(var: Argument, value: Argument, theta: Substitution) -> Substitution:
    theta = dict(theta)
    theta[var.name] = value
    return theta


def resolve(arg: Argument, theta: Substitution) -> Argument:
    """Follow variable bindings until a value or an unbound variable."""
    seen: set[str] = set()
    while arg.is_variable and arg.name in theta and arg.name not in seen:
        seen.add(arg.name)
        arg = theta[arg.name]
    return arg


def satisfy(
    patterns: Sequence[Fact],
    facts: Iterable[Fact],
    theta: Optional[Substitution] = None,
) -> Iterator[Substitution]:
    """Find all substitutions under which every pattern matches some fact.

    Bindings made for one pattern constrain the later ones, so
    ``A(?x),B(?x)`` needs an ``A`` and a ``B`` fact agreeing on ``x``.
    """
    yield from _satisfy(list(patterns), list(facts), dict(theta or {}))


def _satisfy(
    patterns: list[Fact],
    facts: list[Fact],
    theta: Substitution,
) -> Iterator[Substitution]:
    if not patterns:
        yield theta
        return

    first, *rest = patterns
    for fact in facts:
        result = match_facts(fact, first, theta)
        if result.matched:
            yield from _satisfy(rest, facts, result.bindings)


def substitute(tag: Tag, theta: Substitution) -> Tag:
    """Apply substitution to a tag.

    Variables bound in ``theta`` are replaced by their values; unbound
    variables are left in place. Returns ``tag`` itself if nothing changes.
    """
    if not theta:
        return tag

    match tag:
        case Fact():
            arguments = tuple(
                resolve(arg, theta) if arg.is_variable else arg
                for arg in tag.arguments
            )
            if arguments == tag.arguments:
                return tag
            return replace(tag, arguments=arguments)
        case Rule():
            return Rule(
                tuple(substitute(t, theta) for t in tag.input_tags),
                tuple(substitute(t, theta) for t in tag.output_tags),
            )
        case Recommendation():
            return tag
    raise TypeError(f"Unknown tag type: {type(tag).__name__}")
