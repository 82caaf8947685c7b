from __future__ import annotations

import logging
from enum import Enum

from .backends.base import MarkupMatcher
from .backends.matcher import SubtreeMatcher
from .models import SimilarityResult, SimilarityStatus

logger = logging.getLogger(__name__)


class ComparisonMode(str, Enum):
    SIMILAR = "similar"
    IDENTICAL = "identical"

    @classmethod
    def parse(cls, value: str | None) -> "ComparisonMode":
        """Only ``similar`` selects the loose comparison; anything else is strict."""

        if value == cls.SIMILAR.value:
            return cls.SIMILAR
        if value != cls.IDENTICAL.value:
            logger.warning("Unrecognized comparison type %r, comparing for identity", value)
        return cls.IDENTICAL


class SimilarityOrchestrator:
    def __init__(self, matcher: MarkupMatcher | None = None) -> None:
        self._matcher = matcher or SubtreeMatcher()

    def compare(
        self, mathml_a: str, mathml_b: str, mode: str | ComparisonMode, origin: str = "unknown"
    ) -> SimilarityResult:
        comparison = mode if isinstance(mode, ComparisonMode) else ComparisonMode.parse(mode)
        try:
            if comparison is ComparisonMode.SIMILAR:
                logger.info("similarity comparison from: %s", origin)
                matches = self._matcher.compare_similar(mathml_a, mathml_b)
            else:
                logger.info("identical comparison from: %s", origin)
                matches = self._matcher.compare_identical(mathml_a, mathml_b)
            originals = self._matcher.compare_original_factors(mathml_a, mathml_b)
        except Exception as exc:  # noqa: BLE001 - reported as an Error result
            logger.error("similarity error", exc_info=True)
            return SimilarityResult.failure(str(exc) or type(exc).__name__)
        return SimilarityResult(
            status=SimilarityStatus.OKAY,
            message="",
            matches=list(matches),
            original_factors=dict(sorted(originals.items())),
        )


__all__ = ["ComparisonMode", "SimilarityOrchestrator"]
