"""
prometheus_reasoning/knn/knowledge_node.py - Knowledge Node

A knowledge node wraps one input tag and a weighted map of output tags.
Seeing the input tag raises the node's activation; once activation
reaches the threshold the node fires and its outputs become candidates
for activation in the network.

Lifecycle:
    inactive -> activated (activation accumulating) -> fired

Nodes age against an injectable clock and may be evicted once older than
``max_age`` seconds. Belief is the mean of the related truths observed.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Optional

from ..config import get_settings
from ..exceptions import EmptyAggregateError, ParseError
from ..tags.terms import Tag, TagType, parse_tag

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

# Sigmoid activation steps, indexed by stimulation level
ACCURACY: tuple[float, ...] = (0, 2, 5, 11, 27, 50, 73, 88, 95, 98, 100)


@dataclass(eq=False)
class KnowledgeNode:
    """Single activation unit of the knowledge node network.

    Attributes:
        input_tag: Tag that stimulates this node (also its key in a network)
        outputs: Output tag -> weight exposed when the node fires
        threshold: Activation at which the node fires
        strength: Strength bias of the node
        max_age: Seconds after creation before the node may be evicted
        clock: Time source in seconds (defaults to time.time)
    """

    input_tag: Tag
    outputs: dict[Tag, float] = field(default_factory=dict)
    threshold: int = 1
    strength: Optional[int] = None
    max_age: Optional[float] = None
    clock: Clock = field(default=time.time, repr=False)

    activation: float = field(default=0.0, init=False)
    belief: float = field(default=0.0, init=False)
    related_truths: dict[Tag, float] = field(default_factory=dict, init=False)
    is_activated: bool = field(default=False, init=False)
    is_fired: bool = field(default=False, init=False)
    created_at: float = field(default=0.0, init=False)
    age: float = field(default=0.0, init=False)

    def __post_init__(self):
        settings = get_settings()
        if self.strength is None:
            self.strength = settings.node_strength
        if self.max_age is None:
            self.max_age = settings.node_max_age
        self.outputs = dict(self.outputs)
        self.created_at = self.clock()

    @classmethod
    def from_record(
        cls,
        tokens: Sequence[str],
        clock: Optional[Clock] = None,
    ) -> KnowledgeNode:
        """Build a node from a flat-file record.

        Record layout: ``[tag, threshold, out_1, weight_1, out_2, weight_2, ...]``

        Raises:
            ParseError: on a malformed record
        """
        tokens = [t.strip() for t in tokens]
        if len(tokens) < 2:
            raise ParseError("Record needs a tag and a threshold", ",".join(tokens))
        if len(tokens) % 2:
            raise ParseError("Record has an output without a weight", ",".join(tokens))

        input_tag = parse_tag(tokens[0])
        try:
            threshold = int(tokens[1])
        except ValueError:
            raise ParseError("Threshold must be an integer", tokens[1]) from None

        outputs: dict[Tag, float] = {}
        for i in range(2, len(tokens), 2):
            try:
                weight = float(tokens[i + 1])
            except ValueError:
                raise ParseError("Weight must be a number", tokens[i + 1]) from None
            outputs[parse_tag(tokens[i])] = weight

        kwargs = {"clock": clock} if clock is not None else {}
        return cls(input_tag, outputs, threshold, **kwargs)

    def to_record(self) -> list[str]:
        tokens = [str(self.input_tag), f"{self.threshold:g}"]
        for tag, weight in self.outputs.items():
            tokens.extend((str(tag), f"{weight:g}"))
        return tokens

    @property
    def input_type(self) -> TagType:
        return self.input_tag.type

    def increase_activation(self, level: Optional[int] = None) -> bool:
        """Stimulate the node.

        Args:
            level: None adds one unit; otherwise adds ``ACCURACY[level]``
                with ``level`` clamped to the curve

        Returns:
            True if this call made the node fire
        """
        if level is None:
            self.activation += 1
        else:
            index = min(max(level, 0), len(ACCURACY) - 1)
            self.activation += ACCURACY[index]

        self.is_activated = True
        if not self.is_fired and self.activation >= self.threshold:
            self.is_fired = True
            logger.debug("Node %s fired at activation %g", self.input_tag, self.activation)
            return True
        return False

    def reset_activation(self) -> None:
        self.activation = 0.0
        self.is_activated = False
        self.is_fired = False

    def update_age(self) -> float:
        """Recompute and return seconds elapsed since creation."""
        self.age = self.clock() - self.created_at
        return self.age

    def is_expired(self) -> bool:
        return self.update_age() > self.max_age

    def add_related_truth(self, tag: Tag, truth: float) -> None:
        self.related_truths[tag] = truth

    def update_belief(self) -> float:
        """Set belief to the mean of the related truths.

        Raises:
            EmptyAggregateError: if there are no related truths
        """
        if not self.related_truths:
            raise EmptyAggregateError(f"No related truths for {self.input_tag}")
        self.belief = sum(self.related_truths.values()) / len(self.related_truths)
        return self.belief

    def __str__(self) -> str:
        result = f"{self.input_tag} threshold is {self.threshold:g}"
        if self.input_type is not TagType.FACT:
            return result
        parts = [result, " => "]
        for tag, weight in self.outputs.items():
            parts.append(f"{tag} with membershipTruth={weight:g}; ")
        return "".join(parts)
