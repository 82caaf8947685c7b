from __future__ import annotations

from .base import (
    BackendError,
    LaTeXMLBackend,
    LaTeXMLOptions,
    LaTeXMLResponse,
    MarkupMatcher,
    SearchProvider,
    Translator,
)
from .cas import CommandTranslator, HttpTranslator, TranslationError
from .latexml import LocalLaTeXML, RemoteLaTeXML
from .mathoid import MathoidClient, MathoidError
from .matcher import SubtreeMatcher
from .search import HttpSearchProvider, SearchUnavailableError

__all__ = [
    "BackendError",
    "CommandTranslator",
    "HttpSearchProvider",
    "HttpTranslator",
    "LaTeXMLBackend",
    "LaTeXMLOptions",
    "LaTeXMLResponse",
    "LocalLaTeXML",
    "MarkupMatcher",
    "MathoidClient",
    "MathoidError",
    "RemoteLaTeXML",
    "SearchProvider",
    "SearchUnavailableError",
    "SubtreeMatcher",
    "TranslationError",
    "Translator",
]
