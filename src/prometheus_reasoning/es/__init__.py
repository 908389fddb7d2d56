"""Expert system: forward chaining, teaching and rule synthesis."""

from .expert_system import ExpertSystem
from .rester import Rester, compose, pairwise_compose, rename_apart
from .teacher import Teacher, parse_sentence
from .thinker import CycleContext, Thinker

__all__ = [
    "ExpertSystem",
    "Thinker",
    "CycleContext",
    "Teacher",
    "parse_sentence",
    "Rester",
    "compose",
    "pairwise_compose",
    "rename_apart",
]
