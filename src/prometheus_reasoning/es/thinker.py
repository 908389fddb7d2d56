"""
prometheus_reasoning/es/thinker.py - Forward Chaining over Ready Rules

Each cycle tests every ready rule against the known facts. Rules whose
inputs are all satisfied move to the active set and their outputs, with
the cycle's bindings substituted in, are asserted if new.

NATURAL QUIESCENCE:
    think() repeats cycles until one derives nothing.

THRESHOLD QUIESCENCE:
    think(n) stops after n cycles. A rule activated in cycle k only
    cascades in cycle k+1, because the rules to activate are selected
    from a snapshot taken before any output is asserted.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..matching import Substitution, satisfy, substitute
from ..tags.terms import Fact, Recommendation, Rule, Tag, sorted_tags

logger = logging.getLogger(__name__)


@dataclass
class CycleContext:
    """State scoped to one think cycle.

    A fresh context is built for every cycle, so bindings found while
    matching one rule never leak into another rule or another cycle.
    """

    bindings: dict[Rule, Substitution] = field(default_factory=dict)
    activated: set[Tag] = field(default_factory=set)


class Thinker:
    """Runs inference cycles over the working sets of an expert system.

    The sets are shared with the owning ExpertSystem and mutated in place.
    """

    def __init__(
        self,
        ready_rules: set[Rule],
        active_rules: set[Rule],
        facts: set[Fact],
        recommendations: set[Recommendation],
        cycle_cap: int = 10_000,
    ):
        self._ready_rules = ready_rules
        self._active_rules = active_rules
        self._facts = facts
        self._recommendations = recommendations
        self._cycle_cap = cycle_cap

    def think(
        self,
        generate_rule: bool = False,
        number_of_cycles: Optional[int] = None,
    ) -> set[Recommendation]:
        """Think until quiescence or for ``number_of_cycles`` cycles.

        Args:
            generate_rule: Add a rule from the starting facts to everything
                derived, so the run can be replayed in a single step
            number_of_cycles: Cycle limit (None = until natural quiescence,
                bounded by the configured safety cap)

        Returns:
            Recommendations activated during this run
        """
        if number_of_cycles is not None and number_of_cycles < 0:
            raise ValueError(f"number_of_cycles must be >= 0, got {number_of_cycles}")

        limit = self._cycle_cap if number_of_cycles is None else number_of_cycles
        starting_facts = frozenset(self._facts)
        all_activated: set[Tag] = set()

        cycles = 0
        activated: set[Tag] = set()
        while cycles < limit:
            activated = self.think_cycle()
            cycles += 1
            if not activated:
                break
            all_activated |= activated

        if number_of_cycles is None and cycles >= limit and activated:
            logger.warning(
                "Stopped thinking after %d cycles without reaching quiescence", cycles
            )

        if generate_rule and all_activated and starting_facts:
            self._generate_proven_rule(starting_facts, all_activated)

        recommendations = {t for t in all_activated if isinstance(t, Recommendation)}
        logger.info(
            "Thought for %d cycle(s): %d tag(s) derived, %d recommendation(s)",
            cycles,
            len(all_activated),
            len(recommendations),
        )
        return recommendations

    def think_cycle(self) -> set[Tag]:
        """Run a single cycle.

        Returns:
            Tags newly asserted by this cycle (empty at quiescence)
        """
        context = CycleContext()
        facts = list(self._facts)

        for rule in list(self._ready_rules):
            theta = next(satisfy(rule.input_facts, facts), None)
            if theta is not None:
                context.bindings[rule] = theta

        for rule, theta in context.bindings.items():
            self._ready_rules.discard(rule)
            self._active_rules.add(rule)
            for tag in rule.output_tags:
                tag = substitute(tag, theta)
                if self._assert_if_new(tag):
                    context.activated.add(tag)

        logger.debug(
            "Cycle activated %d rule(s), derived %d tag(s)",
            len(context.bindings),
            len(context.activated),
        )
        return context.activated

    def facts_contain(self, fact: Fact) -> bool:
        """True if some known fact matches ``fact``."""
        return any(known.matches(fact) for known in self._facts)

    def _assert_if_new(self, tag: Tag) -> bool:
        match tag:
            case Fact():
                if self.facts_contain(tag):
                    return False
                self._facts.add(tag)
                return True
            case Recommendation():
                if tag in self._recommendations:
                    return False
                self._recommendations.add(tag)
                return True
            case Rule():
                if tag in self._ready_rules or tag in self._active_rules:
                    return False
                self._ready_rules.add(tag)
                return True
        raise TypeError(f"Unknown tag type: {type(tag).__name__}")

    def _generate_proven_rule(
        self, starting_facts: frozenset[Fact], activated: set[Tag]
    ) -> None:
        proven = Rule(tuple(sorted_tags(starting_facts)), tuple(sorted_tags(activated)))
        if proven not in self._active_rules and proven not in self._ready_rules:
            self._ready_rules.add(proven)
            logger.debug("Generated proven rule %s", proven)
