"""
prometheus_reasoning/knn/loader.py - Knowledge Node Data Files

Two formats are read:

Flat file (one record per line, ``#`` starts a comment):

    Fur(yes);2;Mammal(yes);0.9;Bird(yes);0.1

YAML (``.yaml`` / ``.yml``), a list of maps:

    - tag: Fur(yes)
      threshold: 2
      outputs:
        Mammal(yes): 0.9
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from ..exceptions import ParseError
from .knowledge_node import Clock, KnowledgeNode

logger = logging.getLogger(__name__)


def read_records(lines: Iterable[str], delimiter: str = ";") -> Iterator[tuple[int, list[str]]]:
    """Yield ``(line_number, tokens)`` for every non-blank, non-comment line."""
    for number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        yield number, line.split(delimiter)


def _yaml_to_record(entry: dict[str, Any]) -> list[str]:
    if not isinstance(entry, dict) or "tag" not in entry or "threshold" not in entry:
        raise ParseError("YAML entry needs 'tag' and 'threshold'", str(entry))
    outputs = entry.get("outputs") or {}
    if not isinstance(outputs, dict):
        raise ParseError("YAML 'outputs' must map tags to weights", str(outputs))

    tokens = [str(entry["tag"]), str(entry["threshold"])]
    for tag, weight in outputs.items():
        tokens.extend((str(tag), str(weight)))
    return tokens


def load_knowledge_nodes(
    path: Union[str, Path],
    delimiter: str = ";",
    clock: Optional[Clock] = None,
    strict: bool = True,
) -> list[KnowledgeNode]:
    """Load knowledge nodes from ``path``.

    Args:
        path: Data file
        delimiter: Token delimiter of flat-file records
        clock: Time source handed to every node
        strict: Raise on a malformed record instead of skipping it

    Raises:
        ParseError: on a malformed record when ``strict``
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f) or []
            if not isinstance(data, list):
                raise ParseError("YAML data must be a list of nodes", str(path))
            records = list(enumerate(data, start=1))
        else:
            records = list(read_records(f, delimiter))

    nodes: list[KnowledgeNode] = []
    for number, record in records:
        try:
            if isinstance(record, list):
                tokens = [str(token) for token in record]
            else:
                tokens = _yaml_to_record(record)
            nodes.append(KnowledgeNode.from_record(tokens, clock=clock))
        except ParseError as exc:
            if strict:
                raise ParseError(f"{path}:{number}: {exc}") from exc
            logger.warning("Skipping malformed record %s:%d: %s", path, number, exc)
    return nodes
