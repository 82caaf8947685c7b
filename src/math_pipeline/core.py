from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from .backends.base import MarkupMatcher, SearchProvider
from .backends.mathoid import MathoidClient
from .backends.search import HttpSearchProvider
from .config import AppConfig, ConversionConfig, build_conversion
from .conversion import ConversionRouter
from .enrichment import EnrichmentNormalizer
from .examples import DEFAULT_EXAMPLE, load_example
from .models import ConversionResult, Example, SimilarityResult, TranslationResult
from .postprocess import MarkupPostProcessor
from .search import SearchService
from .similarity import SimilarityOrchestrator
from .translation import REGISTRY, CASIdentifier, TranslationDispatcher, TranslatorRegistry

logger = logging.getLogger(__name__)

MATHOID_UNAVAILABLE = "mathoid not available under: "


class ConfigError(ValueError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.code = "INVALID_CONFIG"


def parse_conversion_config(raw: str | None, default: ConversionConfig) -> ConversionConfig:
    """Build a per-request config from JSON; absent keys keep *default*'s values."""

    if raw is None or not raw.strip():
        return default
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Configuration is not valid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object")
    try:
        return build_conversion(data, default)
    except (TypeError, ValueError) as exc:
        raise ConfigError(str(exc)) from exc


class MathService:
    def __init__(
        self,
        config: AppConfig,
        *,
        router: ConversionRouter | None = None,
        post_processor: MarkupPostProcessor | None = None,
        normalizer: EnrichmentNormalizer | None = None,
        mathoid: MathoidClient | None = None,
        registry: TranslatorRegistry | None = None,
        matcher: MarkupMatcher | None = None,
        search_provider: SearchProvider | None = None,
    ) -> None:
        self._config = config
        self._router = router or ConversionRouter()
        self._post_processor = post_processor or MarkupPostProcessor()
        self._normalizer = normalizer or EnrichmentNormalizer()
        self._mathoid = mathoid or MathoidClient(timeout_s=config.mathoid.timeout_s)
        self._registry = registry if registry is not None else REGISTRY
        self._registry.init(config.translation)
        self._dispatcher = TranslationDispatcher(self._registry)
        self._similarity = SimilarityOrchestrator(matcher)
        self._search = SearchService(
            search_provider or HttpSearchProvider(config.search.url, config.search.timeout_s)
        )

    @property
    def config(self) -> AppConfig:
        return self._config

    def convert_latexml(
        self,
        latex: str,
        *,
        config_json: str | None = None,
        raw_latex: str | None = None,
        origin: str = "unknown",
    ) -> ConversionResult:
        used_config = parse_conversion_config(config_json, self._config.latexml)
        result = self._router.convert(latex, used_config, origin)
        return self._post_processor.post_process(raw_latex, result)

    def convert_mathoid(self, latex: str, url: str | None = None, *, origin: str = "unknown") -> str:
        url = url or self._config.mathoid.url
        try:
            logger.info("latex conversion via mathoid from: %s", origin)
            enriched = self._mathoid.convert_latex(latex, url)
            return self._normalizer.normalize(enriched)
        except httpx.TransportError:
            return f"{MATHOID_UNAVAILABLE}{url}"
        except Exception as exc:  # noqa: BLE001 - the message is the response
            logger.error("mathoid service error", exc_info=True)
            return str(exc) or type(exc).__name__

    def translate(self, cas: str, latex: str, *, origin: str = "unknown") -> TranslationResult:
        return self._dispatcher.translate(cas, latex, origin)

    def available_translators(self) -> tuple[CASIdentifier, ...]:
        return self._registry.available()

    def compare(self, mathml_a: str, mathml_b: str, mode: str, *, origin: str = "unknown") -> SimilarityResult:
        return self._similarity.compare(mathml_a, mathml_b, mode, origin)

    def search(
        self, query: str, overrides: Mapping[str, object | None] | None = None, *, origin: str = "unknown"
    ) -> Any:
        return self._search.search(query, overrides, origin)

    def example(self, name: str = DEFAULT_EXAMPLE) -> Example:
        return load_example(name)


__all__ = ["ConfigError", "MATHOID_UNAVAILABLE", "MathService", "parse_conversion_config"]
