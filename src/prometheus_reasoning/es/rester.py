"""
prometheus_reasoning/es/rester.py - Rule Synthesis by Composition

While "resting", the expert system chains its own rules:

    A => mid    and    mid => C    give    A => C

A pair (A, B) composes only if every output of A matches some input of
B. Variables bound while matching carry over into B's outputs, so
``Dog(?x)=>Animal(?x)`` and ``Animal(?y)=>@pet`` give ``Dog(?x)=>@pet``.

One pass is a full Cartesian sweep (O(n^2)); the number of passes is
always bounded by the caller.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from ..matching import Substitution, match_facts, substitute
from ..tags.arguments import Argument
from ..tags.terms import Fact, Recommendation, Rule, Tag

logger = logging.getLogger(__name__)


def compose(first: Rule, second: Rule) -> Rule:
    """Compose ``first`` into ``second``.

    ``second`` is renamed apart first, so a variable it shares by name
    with ``first`` stays independent.

    Returns:
        ``first.inputs => second.outputs``, or the empty rule when some
        output of ``first`` matches no input of ``second``
    """
    if first.is_empty or second.is_empty or not first.output_tags:
        return Rule.empty()

    second = rename_apart(second, _variables(first.input_tags + first.output_tags))

    theta: Substitution = {}
    for output in first.output_tags:
        for candidate in second.input_tags:
            bindings = _match_tags(output, candidate, theta)
            if bindings is not None:
                theta = bindings
                break
        else:
            return Rule.empty()

    return Rule(
        first.input_tags,
        tuple(substitute(tag, theta) for tag in second.output_tags),
    )


def rename_apart(rule: Rule, taken: dict[str, Argument]) -> Rule:
    """Rename the variables of ``rule`` that also appear in ``taken``.

    ``?x`` becomes ``?x1`` (or ``?x2``, ...), whichever is unused by
    either side. Anonymous binders are left alone.
    """
    own = _variables(rule.input_tags + rule.output_tags)
    clashes = sorted(own.keys() & taken.keys())
    if not clashes:
        return rule

    used = own.keys() | taken.keys()
    theta: Substitution = {}
    for name in clashes:
        suffix = 1
        while f"{name}{suffix}" in used:
            suffix += 1
        fresh = f"{name}{suffix}"
        used.add(fresh)
        theta[name] = Argument.variable(fresh, own[name].binder)
    return substitute(rule, theta)


def _variables(tags: Iterable[Tag]) -> dict[str, Argument]:
    found: dict[str, Argument] = {}
    for tag in tags:
        match tag:
            case Fact():
                for arg in tag.arguments:
                    if arg.is_variable and not arg.is_anonymous:
                        found.setdefault(arg.name, arg)
            case Rule():
                found.update(_variables(tag.input_tags + tag.output_tags))
    return found


def _match_tags(
    output: Tag, candidate: Tag, theta: Substitution
) -> Optional[Substitution]:
    match output:
        case Fact():
            if not isinstance(candidate, Fact):
                return None
            # The premise of the second rule is the pattern: its variables
            # bind to the first rule's arguments and only its tail may be "*"
            result = match_facts(output, candidate, theta)
            return result.bindings if result.matched else None
        case Recommendation() | Rule():
            return theta if output == candidate else None
    raise TypeError(f"Unknown tag type: {type(output).__name__}")


def pairwise_compose(rules: Iterable[Rule]) -> set[Rule]:
    """Single resolution pass over every ordered pair, self-pairs included."""
    rules = list(rules)
    composed: set[Rule] = set()
    for first in rules:
        for second in rules:
            merged = compose(first, second)
            if not merged.is_empty:
                composed.add(merged)
    return composed


class Rester:
    """Synthesizes new ready rules from the existing ones."""

    def __init__(self, ready_rules: set[Rule]):
        self._ready_rules = ready_rules

    def pairwise_comp(self, number_of_cycles: int) -> set[Rule]:
        """Run ``number_of_cycles`` composition passes.

        Each pass composes the rules produced by the previous one,
        starting from the current ready rules.

        Returns:
            Every rule generated across all passes
        """
        generated: set[Rule] = set()
        current = set(self._ready_rules)
        for _ in range(number_of_cycles):
            current = pairwise_compose(current)
            if not current:
                break
            generated |= current
        return generated

    def rest(self, number_of_cycles: int = 1) -> set[Rule]:
        """Synthesize rules and merge them into the ready rules.

        Returns:
            Rules that were not ready before
        """
        if number_of_cycles < 0:
            raise ValueError(f"number_of_cycles must be >= 0, got {number_of_cycles}")

        added = self.pairwise_comp(number_of_cycles) - self._ready_rules
        self._ready_rules |= added
        logger.info(
            "Rested for %d pass(es): %d new rule(s)", number_of_cycles, len(added)
        )
        return added
