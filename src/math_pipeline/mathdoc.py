"""lxml-backed MathML document with the repairs LaTeXML output needs."""

from __future__ import annotations

import re

from lxml import etree

MATHML_NS = "http://www.w3.org/1998/Math/MathML"
TEX_ENCODING = "application/x-tex"
TEX_ENCODINGS = frozenset({TEX_ENCODING, "application/x-latex", "TeX"})
CONTENT_ENCODINGS = frozenset({"MathML-Content", "application/mathml-content+xml"})

_PROLOG_RE = re.compile(r"^\s*(?:<\?xml.*?\?>\s*|<!DOCTYPE[^>]*>\s*|<!--.*?-->\s*)*", re.S | re.I)
_MATH_OPEN_RE = re.compile(
    r"<(?:(?P<prefix>[A-Za-z_][\w.-]*):)?math(?=[\s/>])(?P<attrs>[^>]*?)(?P<close>/?)>"
)
_WIKIDATA_ID_RE = re.compile(r"^Q\d+$")


class MarkupError(ValueError):
    """Raised when markup cannot be treated as a MathML document."""


def localname(element: etree._Element) -> str:
    if not isinstance(element.tag, str):
        return ""
    return etree.QName(element).localname


def make_parser() -> etree.XMLParser:
    # Parsers are not shared between threads.
    return etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=False)


def parse_markup(markup: str) -> etree._Element:
    if markup is None:
        raise MarkupError("No markup given")
    return etree.fromstring(markup.encode("utf-8"), make_parser())


def _ensure_namespace(attrs: str, prefix: str | None) -> str:
    attr_name = f"xmlns:{prefix}" if prefix else "xmlns"
    declaration = f' {attr_name}="{MATHML_NS}"'
    pattern = re.compile(rf"\s{re.escape(attr_name)}\s*=\s*([\"']).*?\1", re.S)
    if pattern.search(attrs):
        return pattern.sub(lambda _: declaration, attrs, count=1)
    return declaration + attrs


def try_fix_header(markup: str) -> str:
    """Return *markup* with a well-formed, namespaced ``math`` root.

    Anything before the root (XML declaration, doctype, wrapper tags) is
    dropped. Markup without a ``math`` element gets wrapped in one.
    """

    if markup is None:
        raise MarkupError("No markup to repair")
    text = markup.lstrip("\ufeff")
    match = _MATH_OPEN_RE.search(text)
    if match is None:
        body = _PROLOG_RE.sub("", text, count=1).strip()
        return f'<math xmlns="{MATHML_NS}">{body}</math>'

    prefix = match.group("prefix")
    qualified = f"{prefix}:math" if prefix else "math"
    attrs = _ensure_namespace(match.group("attrs"), prefix)
    head = f"<{qualified}{attrs}{match.group('close')}>"
    if match.group("close"):
        return head
    closing = f"</{qualified}>"
    end = text.rfind(closing)
    if end < match.end():
        return head + text[match.end():] + closing
    return head + text[match.end(): end + len(closing)]


class MathDoc:
    def __init__(self, markup: str) -> None:
        self._root = parse_markup(markup)
        if localname(self._root) != "math":
            raise MarkupError(f"Root element is <{localname(self._root)}>, expected <math>")
        self._namespace = etree.QName(self._root).namespace

    @property
    def root(self) -> etree._Element:
        return self._root

    def _tag(self, name: str) -> str:
        return f"{{{self._namespace}}}{name}" if self._namespace else name

    def iter_local(self, name: str):
        for element in self._root.iter(self._tag(name)):
            yield element

    def fix_gold_cd(self) -> int:
        """Point csymbols that carry Wikidata item ids at the wikidata cd.

        LaTeXML emits gold-standard semantic macros as ``<csymbol
        cd="latexml">Q1234</csymbol>``. Returns the number of fixed symbols.
        """

        fixed = 0
        for csymbol in self.iter_local("csymbol"):
            text = (csymbol.text or "").strip()
            if _WIKIDATA_ID_RE.match(text) and csymbol.get("cd") != "wikidata":
                csymbol.set("cd", "wikidata")
                fixed += 1
        return fixed

    def tex_annotation(self) -> etree._Element | None:
        for annotation in self.iter_local("annotation"):
            if annotation.get("encoding") in TEX_ENCODINGS:
                return annotation
        return None

    def content_tree(self) -> etree._Element | None:
        for annotation in self.iter_local("annotation-xml"):
            if annotation.get("encoding") in CONTENT_ENCODINGS:
                children = [child for child in annotation if isinstance(child.tag, str)]
                return children[0] if children else None
        return None

    def presentation_tree(self) -> etree._Element:
        for child in self._root:
            if localname(child) == "semantics":
                first = next((c for c in child if isinstance(c.tag, str)), None)
                return first if first is not None else child
        return self._root

    def _semantics(self) -> etree._Element:
        for child in self._root:
            if localname(child) == "semantics":
                return child
        elements = [child for child in self._root if isinstance(child.tag, str)]
        semantics = etree.SubElement(self._root, self._tag("semantics"))
        if len(elements) == 1:
            semantics.append(elements[0])
        elif elements:
            mrow = etree.SubElement(semantics, self._tag("mrow"))
            for element in elements:
                mrow.append(element)
        return semantics

    def change_tex_annotation(self, tex: str) -> None:
        if tex is None:
            raise MarkupError("No TeX given for the annotation")
        annotation = self.tex_annotation()
        if annotation is None:
            annotation = etree.SubElement(self._semantics(), self._tag("annotation"))
            annotation.set("encoding", TEX_ENCODING)
        for child in list(annotation):
            annotation.remove(child)
        annotation.text = tex

    def to_string(self) -> str:
        return etree.tostring(self._root, encoding="unicode")

    def __str__(self) -> str:
        return self.to_string()


__all__ = [
    "MATHML_NS",
    "MarkupError",
    "MathDoc",
    "TEX_ENCODING",
    "localname",
    "parse_markup",
    "try_fix_header",
]
