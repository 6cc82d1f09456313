"""
AIResult - the outcome of an AI-backed operation with its provenance.

AI calls never fail a request: when the model is unreachable or answers
nonsense, a deterministic heuristic produces the value instead. Both variants
are served the same way, but callers and tests can still tell them apart.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Provenance(str, Enum):
    ai = "ai"
    fallback = "fallback"


@dataclass(frozen=True)
class AIResult(Generic[T]):
    value: T
    source: Provenance
    error: Optional[str] = None

    @classmethod
    def from_ai(cls, value: T) -> "AIResult[T]":
        return cls(value=value, source=Provenance.ai)

    @classmethod
    def from_fallback(cls, value: T, error: Optional[str] = None) -> "AIResult[T]":
        return cls(value=value, source=Provenance.fallback, error=error)

    @property
    def is_fallback(self) -> bool:
        return self.source is Provenance.fallback
