"""
prometheus_reasoning/es/teacher.py - Teaching the Expert System

A sentence is either a single tag string:

    Dog(rex)
    @feed
    Dog(?x),Hungry(?x)=>@feed

or the structured form (keywords are case-insensitive):

    if Dog(?x) and Hungry(?x) then @feed and Fed(?x)
"""
from __future__ import annotations

import logging
import re

from ..exceptions import ParseError
from ..tags.terms import Fact, Recommendation, Rule, Tag, parse_tag

logger = logging.getLogger(__name__)

_IF_THEN = re.compile(r"^\s*if\s+(?P<inputs>.+?)\s+then\s+(?P<outputs>.+?)\s*$", re.I)
_AND = re.compile(r"\s+and\s+", re.I)


def parse_sentence(sentence: str) -> Tag:
    """Parse a teaching sentence into a Fact, Rule or Recommendation."""
    if not sentence or not sentence.strip():
        raise ParseError("Empty sentence", sentence)

    found = _IF_THEN.match(sentence)
    if found is None:
        return parse_tag(sentence)

    inputs = [_parse_clause(s, sentence) for s in _AND.split(found["inputs"])]
    outputs = [_parse_clause(s, sentence) for s in _AND.split(found["outputs"])]
    return Rule(tuple(inputs), tuple(outputs))


def _parse_clause(clause: str, sentence: str) -> Tag:
    tag = parse_tag(clause)
    if isinstance(tag, Rule):
        raise ParseError("Nested rule in sentence", sentence)
    return tag


class Teacher:
    """Merges taught tags into an expert system's working sets."""

    def __init__(
        self,
        ready_rules: set[Rule],
        facts: set[Fact],
        recommendations: set[Recommendation],
    ):
        self._ready_rules = ready_rules
        self._facts = facts
        self._recommendations = recommendations

    def teach(self, sentence: str) -> Tag:
        """Parse ``sentence`` and add the result.

        Returns:
            The tag that was taught

        Raises:
            ParseError: if the sentence cannot be parsed (nothing is added)
        """
        tag = parse_sentence(sentence)
        match tag:
            case Rule():
                self._ready_rules.add(tag)
            case Fact():
                self._facts.add(tag)
            case Recommendation():
                self._recommendations.add(tag)
        logger.debug("Taught %s %s", tag.type.value, tag)
        return tag
