"""
prometheus_reasoning/knn/searchers.py - Search Strategies over the Network

A searcher takes the network's current active tags, stimulates the nodes
they key, and returns the tags newly activated by nodes that fired. The
network decides which fired outputs actually become active.

DIRECT:
    One stimulation of every node keyed by an active tag.

BREADTH-FIRST:
    Layer by layer: only tags activated by the previous layer are
    stimulated next, up to ``ply`` layers.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol

from ..tags.terms import Tag

if TYPE_CHECKING:
    from .network import KnowledgeNodeNetwork

logger = logging.getLogger(__name__)


class Searcher(Protocol):
    """Capability shared by all search strategies."""

    def search(self, network: KnowledgeNodeNetwork) -> set[Tag]:
        ...


def _stimulate(network: KnowledgeNodeNetwork, tags: frozenset[Tag]) -> set[Tag]:
    newly_active: set[Tag] = set()
    for tag in tags:
        node = network.get_knowledge_node(tag)
        if node is None or node.is_fired:
            continue
        if node.increase_activation():
            newly_active |= network.propagate(node)
    return newly_active


class DirectSearcher:
    """Stimulates each active tag's node once."""

    def search(self, network: KnowledgeNodeNetwork) -> set[Tag]:
        newly_active = _stimulate(network, network.get_active_tags())
        logger.debug("Direct search activated %d tag(s)", len(newly_active))
        return newly_active


class BreadthFirstSearcher:
    """Propagates activation outward one layer per step."""

    def __init__(self, ply: Optional[int] = None):
        self.ply = ply

    def search(self, network: KnowledgeNodeNetwork) -> set[Tag]:
        ply = self.ply if self.ply is not None else network.settings.search_ply
        newly_active: set[Tag] = set()
        frontier = network.get_active_tags()

        for depth in range(ply):
            layer = _stimulate(network, frontier)
            if not layer:
                break
            logger.debug("Layer %d activated %d tag(s)", depth, len(layer))
            newly_active |= layer
            frontier = frozenset(layer)
        return newly_active
