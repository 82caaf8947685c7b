"""Translation of semantic LaTeX to computer algebra systems."""

from __future__ import annotations

import logging
import threading
from enum import Enum

from .backends.base import Translator
from .backends.cas import CommandTranslator, HttpTranslator
from .config import TranslationConfig
from .models import TranslationResult

logger = logging.getLogger(__name__)

UNKNOWN_CAS = "Unknown CAS!"
ERROR_PREFIX = "[ERROR] "


class CASIdentifier(str, Enum):
    MAPLE = "Maple"
    MATHEMATICA = "Mathematica"

    @classmethod
    def parse(cls, value: "str | CASIdentifier | None") -> "CASIdentifier | None":
        if isinstance(value, CASIdentifier):
            return value
        if not value:
            return None
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return None


def build_translators(config: TranslationConfig) -> dict[CASIdentifier, Translator]:
    translators: dict[CASIdentifier, Translator] = {}
    for name in config.systems:
        cas = CASIdentifier.parse(name)
        if cas is None:
            raise ValueError(f"Unknown computer algebra system: {name}")
        if config.command:
            translators[cas] = CommandTranslator(config.command, cas.value, config.timeout_s)
        elif config.url:
            translators[cas] = HttpTranslator(config.url, cas.value, config.timeout_s)
        else:
            raise ValueError(f"No translator backend configured for {cas.value}")
    return translators


class TranslatorRegistry:
    """Process-wide CAS translator table, initialized at most once.

    A failed initialization leaves the registry empty; every lookup then
    answers ``None`` like an unknown identifier would.
    """

    def __init__(self) -> None:
        self._translators: dict[CASIdentifier, Translator] = {}
        self._initialized = False
        self._lock = threading.Lock()
        self.failure: str | None = None

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(self, config: TranslationConfig) -> None:
        with self._lock:
            if self._initialized:
                return
            self._initialized = True
            logger.info("Construct translators.")
            try:
                self._translators = build_translators(config)
            except Exception as exc:  # noqa: BLE001 - degrade to an empty registry
                logger.warning("Cannot construct translators.", exc_info=True)
                self._translators = {}
                self.failure = str(exc)

    def register(self, cas: CASIdentifier, translator: Translator) -> None:
        with self._lock:
            self._initialized = True
            self._translators[cas] = translator

    def lookup(self, cas: CASIdentifier | None) -> Translator | None:
        if cas is None:
            return None
        return self._translators.get(cas)

    def available(self) -> tuple[CASIdentifier, ...]:
        return tuple(self._translators)


REGISTRY = TranslatorRegistry()


class TranslationDispatcher:
    def __init__(self, registry: TranslatorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else REGISTRY

    def translate(self, cas: "str | CASIdentifier | None", latex: str, origin: str = "unknown") -> TranslationResult:
        logger.info("Start translation process to %s from: %s", cas, origin)
        translator = self._registry.lookup(CASIdentifier.parse(cas))
        if translator is None:
            return TranslationResult(output=None, log=UNKNOWN_CAS)
        try:
            return translator.translate(latex)
        except Exception as exc:  # noqa: BLE001 - failures are reported in the log
            logger.warning("Error due translation for %s", latex, exc_info=True)
            return TranslationResult(output=None, log=f"{ERROR_PREFIX}{type(exc).__name__}: {exc}")


__all__ = [
    "CASIdentifier",
    "ERROR_PREFIX",
    "REGISTRY",
    "TranslationDispatcher",
    "TranslatorRegistry",
    "UNKNOWN_CAS",
    "build_translators",
]
