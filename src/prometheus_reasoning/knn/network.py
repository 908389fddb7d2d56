"""
prometheus_reasoning/knn/network.py - Knowledge Node Network (KNN)

Holds knowledge nodes keyed by input tag plus the set of currently active
tags. Search strategies stimulate nodes through this class's public API;
the network itself only decides what a fired node's outputs do:

- outputs weighted below ``output_weight_cutoff`` are ignored
- every other output becomes active, and if it keys a node of its own,
  that node records the firing node's input tag as a related truth and
  refreshes its belief

Expired nodes are evicted at the start of every search.

Example:
    knn = KnowledgeNodeNetwork()
    knn.load_data("data/animals.txt")
    knn.add_active_tag(Fact.parse("Fur(yes)"))
    knn.search()  # tags activated by nodes that fired
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union

from ..config import EngineSettings, get_settings
from ..tags.terms import Tag
from .knowledge_node import Clock, KnowledgeNode
from .loader import load_knowledge_nodes
from .searchers import DirectSearcher, Searcher

logger = logging.getLogger(__name__)


class KnowledgeNodeNetwork:
    """Network of knowledge nodes with swappable search strategies.

    Instances are not thread-safe; serialize calls to a given instance.
    """

    def __init__(
        self,
        nodes: Iterable[KnowledgeNode] = (),
        searcher: Optional[Searcher] = None,
        settings: Optional[EngineSettings] = None,
        clock: Optional[Clock] = None,
    ):
        self.settings = settings or get_settings()
        self.searcher: Searcher = searcher or DirectSearcher()
        self._clock = clock
        self._nodes: dict[Tag, KnowledgeNode] = {}
        self._active_tags: set[Tag] = set()
        self.add_knowledge_nodes(nodes)

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def load_data(self, path: Union[str, Path]) -> int:
        """Load nodes from a flat-file or YAML data file.

        Returns:
            Number of nodes added
        """
        nodes = load_knowledge_nodes(
            path, delimiter=self.settings.record_delimiter, clock=self._clock
        )
        added = self.add_knowledge_nodes(nodes)
        logger.info("Loaded %d knowledge node(s) from %s", added, path)
        return added

    def add_knowledge_node(self, node: KnowledgeNode) -> bool:
        """Add a node; False if a node with the same input tag exists."""
        if node.input_tag in self._nodes:
            return False
        self._nodes[node.input_tag] = node
        return True

    def add_knowledge_nodes(self, nodes: Iterable[KnowledgeNode]) -> int:
        return sum(1 for node in nodes if self.add_knowledge_node(node))

    def remove_knowledge_node(self, tag: Tag) -> bool:
        if self._nodes.pop(tag, None) is None:
            return False
        self._active_tags.discard(tag)
        return True

    def get_knowledge_nodes(self) -> tuple[KnowledgeNode, ...]:
        return tuple(self._nodes.values())

    def get_knowledge_node(self, tag: Tag) -> Optional[KnowledgeNode]:
        return self._nodes.get(tag)

    def evict_expired(self) -> list[Tag]:
        """Remove nodes older than their ``max_age``.

        Returns:
            Input tags of the evicted nodes
        """
        expired = [tag for tag, node in self._nodes.items() if node.is_expired()]
        for tag in expired:
            self.remove_knowledge_node(tag)
        if expired:
            logger.debug("Evicted %d expired node(s)", len(expired))
        return expired

    def reset_activations(self) -> None:
        """Return every node to the inactive state."""
        for node in self._nodes.values():
            node.reset_activation()

    # -------------------------------------------------------------------------
    # Active tags
    # -------------------------------------------------------------------------

    def add_active_tag(self, tag: Tag) -> bool:
        """Activate a tag that keys a node.

        Returns:
            True if the tag was not already active; False if it was, or if
            no node is keyed by it
        """
        if tag not in self._nodes or tag in self._active_tags:
            return False
        self._active_tags.add(tag)
        return True

    def add_active_tags(self, tags: Iterable[Tag]) -> int:
        return sum(1 for tag in tags if self.add_active_tag(tag))

    def clear_active_tags(self) -> None:
        self._active_tags.clear()

    def get_active_tags(self) -> frozenset[Tag]:
        return frozenset(self._active_tags)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def search(self, searcher: Optional[Searcher] = None) -> set[Tag]:
        """Evict expired nodes, then run a search strategy.

        Args:
            searcher: Strategy for this call (defaults to ``self.searcher``)

        Returns:
            Tags newly activated by the search
        """
        self.evict_expired()
        return (searcher or self.searcher).search(self)

    def propagate(self, node: KnowledgeNode) -> set[Tag]:
        """Activate the outputs of a fired node.

        Returns:
            Output tags that were not active before
        """
        newly_active: set[Tag] = set()
        for tag, weight in node.outputs.items():
            if weight < self.settings.output_weight_cutoff:
                continue

            target = self._nodes.get(tag)
            if target is not None:
                target.add_related_truth(node.input_tag, weight)
                target.update_belief()

            if tag not in self._active_tags:
                self._active_tags.add(tag)
                newly_active.add(tag)
        return newly_active

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, tag: Tag) -> bool:
        return tag in self._nodes
