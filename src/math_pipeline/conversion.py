"""Routing of LaTeX conversions to the local or remote LaTeXML backend."""

from __future__ import annotations

import logging
import time

from .backends.base import LaTeXMLBackend, LaTeXMLOptions
from .backends.latexml import LocalLaTeXML, RemoteLaTeXML
from .config import ConversionConfig
from .models import ConversionResult

logger = logging.getLogger(__name__)


def options_for(config: ConversionConfig) -> LaTeXMLOptions:
    if config.semantic_mode:
        return LaTeXMLOptions.semantic_mode(config.content_path)
    return LaTeXMLOptions.non_semantic_mode()


class ConversionRouter:
    """Picks mode and locality from a config and runs exactly one backend.

    Backend failures propagate to the caller.
    """

    def __init__(
        self,
        local: LaTeXMLBackend | None = None,
        remote: LaTeXMLBackend | None = None,
    ) -> None:
        self._local = local or LocalLaTeXML()
        self._remote = remote or RemoteLaTeXML()

    def convert(self, latex: str, config: ConversionConfig, origin: str = "unknown") -> ConversionResult:
        options = options_for(config)
        start = time.perf_counter()
        if config.remote:
            note = f"Call remote LaTeXML service from: {origin}"
            logger.info(note)
            response = self._remote.convert(latex, options, config)
        else:
            note = f"Call LaTeXML locally requested from: {origin}"
            logger.info(note)
            response = self._local.convert(latex, options, config)
        elapsed_ms = int((time.perf_counter() - start) * 1000)

        result = ConversionResult(
            markup=response.result,
            log=response.log,
            elapsed_ms=elapsed_ms,
            status=response.status,
            status_code=response.status_code,
        )
        result.append_log(("\n" if result.log else "") + note)
        result.append_log(f" Time in MS: {elapsed_ms}")
        return result


__all__ = ["ConversionRouter", "options_for"]
