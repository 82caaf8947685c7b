from math_pipeline.mathdoc import MathDoc
from math_pipeline.models import ConversionResult
from math_pipeline.postprocess import MarkupPostProcessor


def test_annotation_carries_original_tex(latexml_markup: str) -> None:
    result = ConversionResult(markup=latexml_markup, log="converted")
    processed = MarkupPostProcessor().post_process(r"\frac{a}{b}", result)
    doc = MathDoc(processed.markup)
    assert doc.tex_annotation().text == r"\frac{a}{b}"
    assert next(doc.iter_local("csymbol")).get("cd") == "wikidata"
    assert processed.log == "converted"
    assert processed.diagnostic is None


def test_annotation_untouched_without_raw_tex(latexml_markup: str) -> None:
    result = ConversionResult(markup=latexml_markup)
    processed = MarkupPostProcessor().post_process(None, result)
    assert MathDoc(processed.markup).tex_annotation().text == "a+b"


def test_header_is_repaired() -> None:
    result = ConversionResult(markup='<?xml version="1.0"?><math><mi>x</mi></math>')
    processed = MarkupPostProcessor().post_process("x", result)
    assert processed.markup.startswith("<math")
    assert MathDoc(processed.markup).tex_annotation().text == "x"


def test_malformed_markup_is_kept_and_logged() -> None:
    broken = "<math><mi>x</mo></math>"
    result = ConversionResult(markup=broken, log="latexml log")
    processed = MarkupPostProcessor().post_process("x", result)
    assert processed.markup == broken
    assert processed.log.startswith("latexml log")
    assert "Cannot post process MML response from LaTeXML. Reason:" in processed.log
    assert "Traceback" in processed.log
    assert processed.diagnostic is not None


def test_missing_markup_degrades() -> None:
    result = ConversionResult(markup=None)
    processed = MarkupPostProcessor().post_process("x", result)
    assert processed.markup is None
    assert "Cannot post process" in processed.log


def test_header_repair_without_raw_tex_keeps_log() -> None:
    result = ConversionResult(markup='<?xml version="1.0"?><math><mi>x</mi></math>', log="orig")
    processed = MarkupPostProcessor().post_process(None, result)
    root = MathDoc(processed.markup).root
    assert root.tag == "{http://www.w3.org/1998/Math/MathML}math"
    assert processed.log == "orig"
    assert processed.diagnostic is None
