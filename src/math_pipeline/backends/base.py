from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from ..config import ConversionConfig
from ..models import Match, TranslationResult


class BackendError(RuntimeError):
    """Raised when an external backend cannot produce a usable response."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


# LaTeXML defaults for plain (non-semantic) LaTeX.
DEFAULT_PRELOADS: tuple[str, ...] = (
    "LaTeX.pool",
    "article.cls",
    "amsmath.sty",
    "amsthm.sty",
    "amstext.sty",
    "amssymb.sty",
    "eucal.sty",
    "[dvipsnames]xcolor.sty",
    "url.sty",
    "hyperref.sty",
    "[ids]latexml.sty",
    "texvc",
)

# Semantic LaTeX needs the DLMF/DRMF macro packages found under the content path.
SEMANTIC_PRELOADS: tuple[str, ...] = DEFAULT_PRELOADS + (
    "DLMFmath.sty",
    "DRMFfcns.sty",
)


@dataclass(frozen=True, slots=True)
class LaTeXMLOptions:
    semantic: bool = False
    preloads: tuple[str, ...] = DEFAULT_PRELOADS
    search_path: Path | None = None
    flags: Mapping[str, str | None] = field(
        default_factory=lambda: {
            "whatsin": "math",
            "whatsout": "math",
            "format": "xhtml",
            "pmml": None,
            "cmml": None,
            "mathtex": None,
            "nodefaultresources": None,
            "linelength": "90",
            "quiet": None,
        }
    )

    @classmethod
    def semantic_mode(cls, content_path: Path) -> "LaTeXMLOptions":
        return cls(semantic=True, preloads=SEMANTIC_PRELOADS, search_path=content_path)

    @classmethod
    def non_semantic_mode(cls) -> "LaTeXMLOptions":
        return cls()

    def as_pairs(self) -> list[tuple[str, str | None]]:
        pairs: list[tuple[str, str | None]] = list(self.flags.items())
        pairs.extend(("preload", name) for name in self.preloads)
        if self.search_path is not None:
            pairs.append(("path", str(self.search_path)))
        return pairs


@dataclass(slots=True)
class LaTeXMLResponse:
    result: str | None
    log: str
    status: str
    status_code: int


class LaTeXMLBackend(Protocol):
    def convert(
        self, latex: str, options: LaTeXMLOptions, config: ConversionConfig
    ) -> LaTeXMLResponse:  # pragma: no cover - interface
        ...


class Translator(Protocol):
    def translate(self, latex: str) -> TranslationResult:  # pragma: no cover - interface
        ...


class MarkupMatcher(Protocol):
    def compare_similar(self, mathml_a: str, mathml_b: str) -> list[Match]:  # pragma: no cover
        ...

    def compare_identical(self, mathml_a: str, mathml_b: str) -> list[Match]:  # pragma: no cover
        ...

    def compare_original_factors(self, mathml_a: str, mathml_b: str) -> dict[str, Any]:  # pragma: no cover
        ...


class SearchProvider(Protocol):
    def search(self, config: Any) -> Sequence[Any] | Mapping[str, Any]:  # pragma: no cover - interface
        ...


__all__ = [
    "BackendError",
    "DEFAULT_PRELOADS",
    "LaTeXMLBackend",
    "LaTeXMLOptions",
    "LaTeXMLResponse",
    "MarkupMatcher",
    "SEMANTIC_PRELOADS",
    "SearchProvider",
    "Translator",
]
