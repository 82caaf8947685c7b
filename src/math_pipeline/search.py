"""Search configuration for the MOI (mathematical objects of interest) search."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from .backends.base import SearchProvider
from .config import parse_bool

logger = logging.getLogger(__name__)

MAX_INT = 2**31 - 1


class Database(str, Enum):
    ARQMATH = "ARQMath"
    ZBMATH = "zbMATH"


class TermFrequency(str, Enum):
    RAW = "RAW"
    RELATIVE = "RELATIVE"
    LOG = "LOG"
    BM25 = "BM25"
    MBM25 = "mBM25"


class InverseDocumentFrequency(str, Enum):
    IDF = "IDF"
    IDF_SMOOTH = "IDF_SMOOTH"
    PROP_IDF = "PROP_IDF"
    BM25_IDF = "BM25_IDF"


@dataclass(frozen=True, slots=True)
class SearchConfig:
    query: str
    database: Database = Database.ARQMATH
    tf_option: TermFrequency = TermFrequency.BM25
    idf_option: InverseDocumentFrequency = InverseDocumentFrequency.IDF
    k1: float = 1.2
    b: float = 0.95
    min_global_tf: int = 1
    min_global_df: int = 1
    min_complexity: int = 1
    max_global_tf: int = MAX_INT
    max_global_df: int = MAX_INT
    max_complexity: int = MAX_INT
    number_of_docs_to_retrieve: int = 10
    min_number_of_doc_hits_per_moi: int = 1
    max_number_of_results: int = 10
    enable_mathml: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "db": self.database.value,
            "tfidfOptions": {
                "tfOption": self.tf_option.value,
                "idfOption": self.idf_option.value,
                "k1": self.k1,
                "b": self.b,
            },
            "minGlobalTF": self.min_global_tf,
            "minGlobalDF": self.min_global_df,
            "minComplexity": self.min_complexity,
            "maxGlobalTF": self.max_global_tf,
            "maxGlobalDF": self.max_global_df,
            "maxComplexity": self.max_complexity,
            "numberOfDocsToRetrieve": self.number_of_docs_to_retrieve,
            "minNumberOfDocHitsPerMOI": self.min_number_of_doc_hits_per_moi,
            "maxNumberOfResults": self.max_number_of_results,
            "enableMathML": self.enable_mathml,
        }


# Request parameter names of the web API mapped onto config fields.
REQUEST_ALIASES: dict[str, str] = {
    "termFrequencyCalculator": "tf_option",
    "inverseDocumentFrequencyCalculator": "idf_option",
    "minTF": "min_global_tf",
    "minDF": "min_global_df",
    "minC": "min_complexity",
    "maxTF": "max_global_tf",
    "maxDF": "max_global_df",
    "maxC": "max_complexity",
    "numberOfDocsToRetrieve": "number_of_docs_to_retrieve",
    "minNumberOfDocHitsPerMOI": "min_number_of_doc_hits_per_moi",
    "maxNumberOfResults": "max_number_of_results",
    "enableMathML": "enable_mathml",
}

_ENUM_FIELDS: dict[str, type[Enum]] = {
    "database": Database,
    "tf_option": TermFrequency,
    "idf_option": InverseDocumentFrequency,
}
_FLOAT_FIELDS = frozenset({"k1", "b"})
_OPTION_FIELDS = frozenset(f.name for f in dataclasses.fields(SearchConfig)) - {"query"}


def _coerce(name: str, value: object) -> object:
    enum_type = _ENUM_FIELDS.get(name)
    if enum_type is not None:
        return value if isinstance(value, enum_type) else enum_type(str(value))
    if name in _FLOAT_FIELDS:
        return float(value)  # type: ignore[arg-type]
    if name == "enable_mathml":
        return parse_bool(value)
    return int(value)  # type: ignore[call-overload]


class SearchConfigBuilder:
    """Applies optional overrides to the search defaults, each independently.

    Values are not cross-checked (a minimum above its maximum passes through);
    that is left to the search backend.
    """

    def build(self, query: str, overrides: Mapping[str, object | None] | None = None) -> SearchConfig:
        if query is None or not str(query).strip():
            raise ValueError("A search query is required")
        updates: dict[str, object] = {}
        for key, value in (overrides or {}).items():
            name = REQUEST_ALIASES.get(key, key)
            if name not in _OPTION_FIELDS:
                raise ValueError(f"Unknown search option: {key}")
            if value is None:
                continue
            updates[name] = _coerce(name, value)
        return dataclasses.replace(SearchConfig(query=query), **updates)


class SearchService:
    def __init__(self, provider: SearchProvider, builder: SearchConfigBuilder | None = None) -> None:
        self._provider = provider
        self._builder = builder or SearchConfigBuilder()

    def search(self, query: str, overrides: Mapping[str, object | None] | None = None, origin: str = "unknown") -> Any:
        config = self._builder.build(query, overrides)
        logger.info("MOI search for %r on %s from: %s", config.query, config.database.value, origin)
        return self._provider.search(config)


__all__ = [
    "Database",
    "InverseDocumentFrequency",
    "MAX_INT",
    "REQUEST_ALIASES",
    "SearchConfig",
    "SearchConfigBuilder",
    "SearchService",
    "TermFrequency",
]
