"""Tag data model: arguments, facts, rules and recommendations."""

from .arguments import Argument, ArgType, Binder, Relation
from .terms import (
    Fact,
    Recommendation,
    Rule,
    Tag,
    TagType,
    parse_tag,
    sorted_tags,
    split_tag_list,
)

__all__ = [
    "Argument",
    "ArgType",
    "Binder",
    "Relation",
    "Fact",
    "Recommendation",
    "Rule",
    "Tag",
    "TagType",
    "parse_tag",
    "sorted_tags",
    "split_tag_list",
]
