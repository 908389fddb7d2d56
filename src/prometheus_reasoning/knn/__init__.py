"""Knowledge node network: activation units, search strategies, data loading."""

from .knowledge_node import ACCURACY, Clock, KnowledgeNode
from .loader import load_knowledge_nodes, read_records
from .network import KnowledgeNodeNetwork
from .searchers import BreadthFirstSearcher, DirectSearcher, Searcher

__all__ = [
    "ACCURACY",
    "Clock",
    "KnowledgeNode",
    "KnowledgeNodeNetwork",
    "Searcher",
    "DirectSearcher",
    "BreadthFirstSearcher",
    "load_knowledge_nodes",
    "read_records",
]
