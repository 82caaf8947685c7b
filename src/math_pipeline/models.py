"""Domain models for the math pipeline services."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


@dataclass(slots=True)
class ConversionResult:
    """Converted markup plus the diagnostic trail of one conversion."""

    markup: str | None
    log: str = ""
    elapsed_ms: int = 0
    status: str = ""
    status_code: int = 0
    diagnostic: str | None = None

    def append_log(self, text: str) -> None:
        self.log = (self.log or "") + text


@dataclass(slots=True)
class TranslationResult:
    output: str | None = None
    log: str = ""


class SimilarityStatus(str, Enum):
    OKAY = "Okay"
    ERROR = "Error"


@dataclass(slots=True)
class Match:
    """A subtree of the comparison document found in the reference document."""

    reference_id: str
    comparison_id: str
    depth: int
    coverage: float
    type: str


@dataclass(slots=True)
class SimilarityResult:
    status: SimilarityStatus
    message: str = ""
    matches: list[Match] = field(default_factory=list)
    original_factors: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(cls, message: str) -> "SimilarityResult":
        return cls(status=SimilarityStatus.ERROR, message=message)

    def to_payload(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "matches": [asdict(match) for match in self.matches],
            "originalFactors": dict(self.original_factors),
        }


@dataclass(slots=True)
class Example:
    name: str
    title: str
    latex: str
    mathml1: str
    mathml2: str


__all__ = [
    "ConversionResult",
    "Example",
    "Match",
    "SimilarityResult",
    "SimilarityStatus",
    "TranslationResult",
]
