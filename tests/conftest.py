from __future__ import annotations

import pytest

from math_pipeline.backends.base import BackendError, LaTeXMLResponse
from math_pipeline.models import TranslationResult
from math_pipeline.translation import TranslatorRegistry

MATHML_NS = "http://www.w3.org/1998/Math/MathML"

LATEXML_MARKUP = (
    f'<math xmlns="{MATHML_NS}" alttext="a+b" display="inline">'
    "<semantics>"
    '<mrow id="p1.1" xref="c1.1"><mi>a</mi><mo>+</mo><mi>b</mi></mrow>'
    '<annotation-xml encoding="MathML-Content">'
    '<apply id="c1.1" xref="p1.1"><plus/><ci>a</ci><csymbol cd="latexml">Q42</csymbol></apply>'
    "</annotation-xml>"
    '<annotation encoding="application/x-tex">a+b</annotation>'
    "</semantics>"
    "</math>"
)


class RecordingBackend:
    """LaTeXML stand-in that records calls and replays one response."""

    def __init__(self, response: LaTeXMLResponse | None = None, error: BackendError | None = None) -> None:
        self.calls: list[tuple] = []
        self._response = response or LaTeXMLResponse(
            result=LATEXML_MARKUP, log="", status="No obvious problems", status_code=0
        )
        self._error = error

    def convert(self, latex, options, config):
        self.calls.append((latex, options, config))
        if self._error is not None:
            raise self._error
        return self._response


class StaticTranslator:
    def __init__(self, output: str = "a + b", error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.seen: list[str] = []

    def translate(self, latex: str) -> TranslationResult:
        self.seen.append(latex)
        if self.error is not None:
            raise self.error
        return TranslationResult(output=self.output, log="Translation successful.")


@pytest.fixture
def latexml_markup() -> str:
    return LATEXML_MARKUP


@pytest.fixture
def backend_factory():
    return RecordingBackend


@pytest.fixture
def translator_factory():
    return StaticTranslator


@pytest.fixture
def registry() -> TranslatorRegistry:
    return TranslatorRegistry()
