"""
prometheus_reasoning/exceptions.py - Error types raised by the engine.

Parsing failures surface as ParseError; an empty belief aggregate surfaces
as EmptyAggregateError. Set mutations never raise.
"""
from __future__ import annotations


class ReasoningError(Exception):
    """Base class for all engine errors."""


class ParseError(ReasoningError, ValueError):
    """Raised when a tag, sentence or record string cannot be parsed."""

    def __init__(self, message: str, text: str = ""):
        self.text = text
        super().__init__(f"{message}: {text!r}" if text else message)


class EmptyAggregateError(ReasoningError, ZeroDivisionError):
    """Raised when a belief is aggregated over zero observations."""
