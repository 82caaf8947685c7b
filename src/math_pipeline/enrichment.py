"""Normalization of semantically enriched MathML into pMML + cMML.

Mathoid answers with presentation MathML whose elements carry the semantic
tree of the speech rule engine as ``data-semantic-*`` attributes. The
normalizer rebuilds that tree as content MathML and returns both in one
``semantics`` element, cross-linked through ``id``/``xref``.
"""

from __future__ import annotations

import copy
import re

from lxml import etree

from .mathdoc import CONTENT_ENCODINGS, MATHML_NS, TEX_ENCODING, localname, parse_markup, try_fix_header

SEMANTIC_PREFIX = "data-semantic-"

OPERATOR_ELEMENTS: dict[str, str] = {
    "+": "plus",
    "-": "minus",
    "−": "minus",
    "*": "times",
    "×": "times",
    "⋅": "times",
    "·": "times",
    "\u2062": "times",
    "/": "divide",
    "÷": "divide",
    "=": "eq",
    "≠": "neq",
    "<": "lt",
    ">": "gt",
    "≤": "leq",
    "≥": "geq",
    "≈": "approx",
    "≡": "equivalent",
    "∈": "in",
    "∉": "notin",
    "⊂": "prsubset",
    "⊆": "subset",
    "∪": "union",
    "∩": "intersect",
    "∧": "and",
    "∨": "or",
    "¬": "not",
    "!": "factorial",
    "∑": "sum",
    "∏": "product",
    "∫": "int",
}

ROLE_ELEMENTS: dict[str, str] = {
    "addition": "plus",
    "subtraction": "minus",
    "multiplication": "times",
    "implicit": "times",
    "division": "divide",
    "equality": "eq",
    "negative": "minus",
}

_INTEGER_RE = re.compile(r"^\d+$")
_REAL_RE = re.compile(r"^\d*[.,]\d+$")


class EnrichmentError(ValueError):
    """Raised when markup is not semantically enriched MathML."""


def _m(name: str) -> str:
    return f"{{{MATHML_NS}}}{name}"


def _detached(element: etree._Element) -> etree._Element:
    # Operands shared by two relations of a chain are copied without ids.
    clone = copy.deepcopy(element)
    for node in clone.iter():
        if isinstance(node.tag, str):
            node.attrib.pop("id", None)
            node.attrib.pop("xref", None)
    return clone


def _ids(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class _ContentBuilder:
    def __init__(self, index: dict[str, etree._Element]) -> None:
        self._index = index

    def _node(self, sid: str) -> etree._Element | None:
        return self._index.get(sid)

    def _children(self, element: etree._Element) -> list[etree._Element]:
        result = []
        for sid in _ids(element.get(SEMANTIC_PREFIX + "children")):
            content = self.build(sid)
            if content is not None:
                result.append(content)
        return result

    def _operators(self, element: etree._Element) -> list[str]:
        texts = []
        for sid in _ids(element.get(SEMANTIC_PREFIX + "content")):
            node = self._node(sid)
            if node is not None:
                texts.append("".join(node.itertext()).strip())
        if not texts:
            operator = element.get(SEMANTIC_PREFIX + "operator", "")
            if "," in operator:
                texts.append(operator.split(",", 1)[1])
        return texts

    def _operator_element(self, text: str, role: str | None = None) -> etree._Element:
        name = OPERATOR_ELEMENTS.get(text) or (ROLE_ELEMENTS.get(role or "") if not text else None)
        if name:
            return etree.Element(_m(name))
        symbol = etree.Element(_m("csymbol"), cd="ambiguous")
        symbol.text = text or role or "unknown"
        return symbol

    def _apply(self, head: etree._Element, *args: etree._Element) -> etree._Element:
        apply = etree.Element(_m("apply"))
        apply.append(head)
        for arg in args:
            apply.append(arg)
        return apply

    def _symbol(self, name: str) -> etree._Element:
        symbol = etree.Element(_m("csymbol"), cd="ambiguous")
        symbol.text = name
        return symbol

    def build(self, sid: str) -> etree._Element | None:
        element = self._node(sid)
        if element is None:
            return None
        content = self._build(element)
        if content is not None and content.get("id") is None:
            content.set("id", f"c{sid}")
            content.set("xref", f"p{sid}")
        return content

    def _build(self, element: etree._Element) -> etree._Element | None:
        kind = element.get(SEMANTIC_PREFIX + "type", "unknown")
        role = element.get(SEMANTIC_PREFIX + "role")
        text = "".join(element.itertext()).strip()

        if kind == "empty":
            return None
        if kind == "identifier":
            ci = etree.Element(_m("ci"))
            ci.text = text
            return ci
        if kind == "number":
            cn = etree.Element(_m("cn"))
            if _INTEGER_RE.match(text):
                cn.set("type", "integer")
            elif _REAL_RE.match(text):
                cn.set("type", "real")
            cn.text = text
            return cn
        if kind == "text":
            cs = etree.Element(_m("cs"))
            cs.text = text
            return cs
        if kind in {"operator", "relation"}:
            return self._operator_element(text, role)

        children = self._children(element)
        if kind in {"infixop", "relseq", "multirel"}:
            operators = self._operators(element)
            if len(set(operators)) > 1 and len(children) == len(operators) + 1:
                pairs = [
                    self._apply(self._operator_element(op), _detached(children[i]), _detached(children[i + 1]))
                    for i, op in enumerate(operators)
                ]
                return self._apply(etree.Element(_m("and")), *pairs)
            op = operators[0] if operators else ""
            return self._apply(self._operator_element(op, role), *children)
        if kind in {"prefixop", "postfixop"}:
            operators = self._operators(element)
            return self._apply(self._operator_element(operators[0] if operators else "", role), *children)
        if kind == "fraction" and len(children) == 2:
            return self._apply(etree.Element(_m("divide")), *children)
        if kind == "sqrt" and children:
            return self._apply(etree.Element(_m("root")), *children)
        if kind == "root" and len(children) == 2:
            degree = etree.Element(_m("degree"))
            degree.append(children[0])
            return self._apply(etree.Element(_m("root")), degree, children[1])
        if kind == "superscript" and len(children) == 2:
            return self._apply(etree.Element(_m("power")), *children)
        if kind == "subscript" and len(children) == 2:
            return self._apply(self._symbol("subscript"), *children)
        if kind == "appl" and len(children) == 2:
            function, argument = children
            if localname(argument) == "apply" and len(argument) and localname(argument[0]) == "list":
                return self._apply(function, *list(argument)[1:])
            return self._apply(function, argument)
        if kind == "fenced" and len(children) == 1:
            return children[0]
        if kind == "punctuated":
            return self._apply(etree.Element(_m("list")), *children)
        if kind == "punctuation":
            return None

        if children:
            return self._apply(self._symbol(kind), *children)
        symbol = self._symbol(kind)
        if text:
            symbol.text = text
        return symbol


def _strip_semantic_attributes(element: etree._Element) -> None:
    for node in element.iter():
        if not isinstance(node.tag, str):
            continue
        sid = node.get(SEMANTIC_PREFIX + "id")
        for name in [key for key in node.attrib if key.startswith(SEMANTIC_PREFIX)]:
            del node.attrib[name]
        if sid is not None:
            node.set("id", f"p{sid}")
            node.set("xref", f"c{sid}")


class EnrichmentNormalizer:
    def normalize(self, enriched_markup: str) -> str:
        root = parse_markup(try_fix_header(enriched_markup))

        presentation_nodes: list[etree._Element] = []
        annotations: list[etree._Element] = []
        for child in root:
            if localname(child) == "semantics":
                parts = [node for node in child if isinstance(node.tag, str)]
                presentation_nodes.extend(parts[:1])
                annotations.extend(
                    node
                    for node in parts[1:]
                    if not (localname(node) == "annotation-xml" and node.get("encoding") in CONTENT_ENCODINGS)
                )
            elif isinstance(child.tag, str):
                presentation_nodes.append(child)

        index: dict[str, etree._Element] = {}
        semantic_root: str | None = None
        for node in presentation_nodes:
            for element in node.iter():
                if not isinstance(element.tag, str):
                    continue
                sid = element.get(SEMANTIC_PREFIX + "id")
                if sid is None:
                    continue
                index.setdefault(sid, element)
                if semantic_root is None and element.get(SEMANTIC_PREFIX + "parent") is None:
                    semantic_root = sid
        if semantic_root is None:
            raise EnrichmentError("Markup carries no semantic enrichment")

        content = _ContentBuilder(index).build(semantic_root)

        math = etree.Element(_m("math"), nsmap={None: MATHML_NS})
        for key, value in root.attrib.items():
            if not key.startswith(SEMANTIC_PREFIX):
                math.set(key, value)
        semantics = etree.SubElement(math, _m("semantics"))

        copies = [copy.deepcopy(node) for node in presentation_nodes]
        for node in copies:
            _strip_semantic_attributes(node)
        if len(copies) == 1:
            semantics.append(copies[0])
        else:
            mrow = etree.SubElement(semantics, _m("mrow"))
            for node in copies:
                mrow.append(node)

        if content is not None:
            annotation_xml = etree.SubElement(semantics, _m("annotation-xml"), encoding="MathML-Content")
            annotation_xml.append(content)

        for annotation in annotations:
            semantics.append(copy.deepcopy(annotation))
        alttext = root.get("alttext")
        if alttext and not any(a.get("encoding") == TEX_ENCODING for a in annotations):
            tex = etree.SubElement(semantics, _m("annotation"), encoding=TEX_ENCODING)
            tex.text = alttext

        return etree.tostring(math, encoding="unicode")


def normalize(enriched_markup: str) -> str:
    return EnrichmentNormalizer().normalize(enriched_markup)


__all__ = ["EnrichmentError", "EnrichmentNormalizer", "normalize"]
