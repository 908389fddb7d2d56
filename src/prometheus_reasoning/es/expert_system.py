"""
prometheus_reasoning/es/expert_system.py - Expert System (ES)

Owns the four working sets and delegates the work:
- Thinker: forward chaining to quiescence
- Teacher: parsing and merging taught sentences
- Rester: rule synthesis by composition

Example:
    es = ExpertSystem()
    es.teach("Dog(?x)=>Animal(?x)")
    es.teach("if Animal(?x) and Hungry(?x) then @feed")
    es.add_fact(Fact.parse("Dog(rex)"))
    es.add_fact(Fact.parse("Hungry(rex)"))

    es.think()  # {Recommendation("@feed")}

Instances are not thread-safe; serialize calls to a given instance.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from ..config import EngineSettings, get_settings
from ..tags.terms import Fact, Recommendation, Rule, Tag
from .rester import Rester
from .teacher import Teacher
from .thinker import Thinker

logger = logging.getLogger(__name__)


class ExpertSystem:
    """Forward-chaining expert system over facts, rules and recommendations."""

    def __init__(
        self,
        ready_rules: Optional[Iterable[Rule]] = None,
        facts: Optional[Iterable[Fact]] = None,
        recommendations: Optional[Iterable[Recommendation]] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self.settings = settings or get_settings()

        self._ready_rules: set[Rule] = set(ready_rules or ())
        self._active_rules: set[Rule] = set()
        self._facts: set[Fact] = set(facts or ())
        self._recommendations: set[Recommendation] = set(recommendations or ())

        self._thinker = Thinker(
            self._ready_rules,
            self._active_rules,
            self._facts,
            self._recommendations,
            cycle_cap=self.settings.think_cycle_cap,
        )
        self._teacher = Teacher(self._ready_rules, self._facts, self._recommendations)
        self._rester = Rester(self._ready_rules)

    # -------------------------------------------------------------------------
    # Reasoning
    # -------------------------------------------------------------------------

    def think(
        self,
        number_of_cycles: Optional[int] = None,
        *,
        generate_rule: bool = False,
    ) -> set[Recommendation]:
        """Derive new tags from the ready rules.

        Args:
            number_of_cycles: Cycle limit; None thinks until no cycle
                derives anything. Prefer a limit for untrusted rule sets.
            generate_rule: Also add a rule summarising the run

        Returns:
            Recommendations activated during this run
        """
        if isinstance(number_of_cycles, bool):
            raise TypeError("number_of_cycles must be an int or None")
        return self._thinker.think(generate_rule, number_of_cycles)

    def think_cycle(self) -> set[Tag]:
        """Run one inference cycle; returns the tags it derived."""
        return self._thinker.think_cycle()

    def teach(self, sentence: str) -> Tag:
        """Parse a sentence and add the resulting tag."""
        return self._teacher.teach(sentence)

    def rest(self, number_of_cycles: Optional[int] = None) -> set[Rule]:
        """Synthesize new ready rules by composing existing ones.

        Returns:
            Newly added rules
        """
        if number_of_cycles is None:
            number_of_cycles = self.settings.rest_cycles
        return self._rester.rest(number_of_cycles)

    def reset(self) -> None:
        """Clear all rules, facts and recommendations."""
        self._active_rules.clear()
        self._ready_rules.clear()
        self._facts.clear()
        self._recommendations.clear()
        logger.debug("Expert system reset")

    def deactivate_rules(self) -> None:
        """Move every active rule back to the ready rules."""
        self._ready_rules |= self._active_rules
        self._active_rules.clear()

    def facts_contain(self, fact: Fact) -> bool:
        """True if some known fact matches ``fact``."""
        return self._thinker.facts_contain(fact)

    # -------------------------------------------------------------------------
    # Working sets
    # -------------------------------------------------------------------------

    def add_tags(self, tags: Iterable[Tag]) -> bool:
        """Add several tags; True if every one of them was new."""
        all_added = True
        for tag in tags:
            if not self.add_tag(tag):
                all_added = False
        return all_added

    def add_tag(self, tag: Tag) -> bool:
        match tag:
            case Rule():
                return self.add_ready_rule(tag)
            case Fact():
                return self.add_fact(tag)
            case Recommendation():
                return self.add_recommendation(tag)
        raise TypeError(f"Unknown tag type: {type(tag).__name__}")

    def add_ready_rule(self, rule: Rule) -> bool:
        return _add(self._ready_rules, rule)

    add_rule = add_ready_rule

    def remove_ready_rule(self, rule: Rule) -> bool:
        return _remove(self._ready_rules, rule)

    def add_fact(self, fact: Fact) -> bool:
        return _add(self._facts, fact)

    def remove_fact(self, fact: Fact) -> bool:
        return _remove(self._facts, fact)

    def add_recommendation(self, recommendation: Recommendation) -> bool:
        return _add(self._recommendations, recommendation)

    def remove_recommendation(self, recommendation: Recommendation) -> bool:
        return _remove(self._recommendations, recommendation)

    def get_ready_rules(self) -> frozenset[Rule]:
        return frozenset(self._ready_rules)

    def get_active_rules(self) -> frozenset[Rule]:
        return frozenset(self._active_rules)

    def get_facts(self) -> frozenset[Fact]:
        return frozenset(self._facts)

    def get_recommendations(self) -> frozenset[Recommendation]:
        return frozenset(self._recommendations)

    def __repr__(self) -> str:
        return (
            f"ExpertSystem(ready_rules={len(self._ready_rules)}, "
            f"active_rules={len(self._active_rules)}, facts={len(self._facts)}, "
            f"recommendations={len(self._recommendations)})"
        )


def _add(target: set, item) -> bool:
    if item in target:
        return False
    target.add(item)
    return True


def _remove(target: set, item) -> bool:
    if item not in target:
        return False
    target.remove(item)
    return True
