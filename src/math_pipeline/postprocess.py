from __future__ import annotations

import logging
import os
import traceback

from .mathdoc import MathDoc, try_fix_header
from .models import ConversionResult

logger = logging.getLogger(__name__)


class MarkupPostProcessor:
    """Best-effort repair of converted markup.

    Never fails a request: on any error the original markup is kept and the
    reason, with traceback, is appended to the result log.
    """

    def post_process(self, original_input_tex: str | None, result: ConversionResult) -> ConversionResult:
        try:
            result.markup = self._repair(result.markup, original_input_tex)
        except Exception as exc:  # noqa: BLE001 - every failure degrades to a log entry
            logger.warning("Cannot post process MathML: %s", exc)
            stack_trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            reason = f"Cannot post process MML response from LaTeXML. Reason: {exc}"
            result.diagnostic = reason
            result.append_log(os.linesep + reason + os.linesep + stack_trace)
        return result

    def _repair(self, markup: str | None, original_input_tex: str | None) -> str:
        math = MathDoc(try_fix_header(markup))
        math.fix_gold_cd()
        if original_input_tex is not None:
            math.change_tex_annotation(original_input_tex)
        return math.to_string()


__all__ = ["MarkupPostProcessor"]
