"""
prometheus_reasoning - Forward-Chaining Expert System and Knowledge Node Network

Two engines that derive new knowledge from asserted facts and rules:

- Expert system: facts, rules and recommendations ("tags"), matched with
  wildcards and variable bindings, chained forward to quiescence, and
  composed into new rules while resting
- Knowledge node network: nodes that accumulate activation toward a
  threshold, fire to activate weighted output tags, age, and aggregate
  a belief from related truths

Example:
    from prometheus_reasoning import ExpertSystem, Fact

    es = ExpertSystem()
    es.teach("if Fever(>38) and Cough(yes) then @see_doctor")
    es.add_fact(Fact.parse("Fever(39.5)"))
    es.add_fact(Fact.parse("Cough(yes)"))

    es.think()  # {Recommendation("@see_doctor")}
"""

from .config import EngineSettings, configure_logging, get_settings
from .es import ExpertSystem, compose, pairwise_compose, parse_sentence
from .exceptions import EmptyAggregateError, ParseError, ReasoningError
from .knn import (
    BreadthFirstSearcher,
    DirectSearcher,
    KnowledgeNode,
    KnowledgeNodeNetwork,
    Searcher,
    load_knowledge_nodes,
)
from .matching import MatchResult, Substitution, match_facts, satisfy, substitute
from .tags import (
    Argument,
    ArgType,
    Fact,
    Recommendation,
    Relation,
    Rule,
    Tag,
    TagType,
    parse_tag,
)

__all__ = [
    # Tags
    "Argument",
    "ArgType",
    "Relation",
    "Fact",
    "Rule",
    "Recommendation",
    "Tag",
    "TagType",
    "parse_tag",
    # Matching
    "MatchResult",
    "Substitution",
    "match_facts",
    "satisfy",
    "substitute",
    # Expert system
    "ExpertSystem",
    "compose",
    "pairwise_compose",
    "parse_sentence",
    # Knowledge node network
    "KnowledgeNode",
    "KnowledgeNodeNetwork",
    "Searcher",
    "DirectSearcher",
    "BreadthFirstSearcher",
    "load_knowledge_nodes",
    # Config / errors
    "EngineSettings",
    "get_settings",
    "configure_logging",
    "ReasoningError",
    "ParseError",
    "EmptyAggregateError",
]
