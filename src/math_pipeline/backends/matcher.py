from __future__ import annotations

from collections import Counter
from typing import Any, Iterator

from lxml import etree

from ..mathdoc import MathDoc, localname, try_fix_header
from ..models import Match

IGNORED_ATTRIBUTES = frozenset({"id", "xref", "class", "style", "href"})
SKIPPED_ELEMENTS = frozenset({"annotation", "annotation-xml"})


def _children(element: etree._Element) -> list[etree._Element]:
    return [
        child
        for child in element
        if isinstance(child.tag, str) and localname(child) not in SKIPPED_ELEMENTS
    ]


def _walk(element: etree._Element) -> Iterator[etree._Element]:
    yield element
    for child in _children(element):
        yield from _walk(child)


def _locate(element: etree._Element, root: etree._Element) -> str:
    parts: list[str] = []
    node: etree._Element | None = element
    while node is not None:
        name = localname(node)
        parent = node.getparent()
        if node is root or parent is None:
            parts.append(name)
            break
        siblings = [child for child in parent if localname(child) == name]
        parts.append(f"{name}[{siblings.index(node) + 1}]")
        node = parent
    return "/" + "/".join(reversed(parts))


def _depth(element: etree._Element, root: etree._Element) -> int:
    depth = 0
    node = element
    while node is not root and node.getparent() is not None:
        node = node.getparent()
        depth += 1
    return depth


class _Signatures:
    """Canonical subtree strings; leaf data is dropped for structural matching."""

    def __init__(self, with_data: bool) -> None:
        self._with_data = with_data
        self._cache: dict[etree._Element, tuple[str, int]] = {}

    def of(self, element: etree._Element) -> str:
        return self._compute(element)[0]

    def size(self, element: etree._Element) -> int:
        return self._compute(element)[1]

    def _compute(self, element: etree._Element) -> tuple[str, int]:
        cached = self._cache.get(element)
        if cached is not None:
            return cached
        name = localname(element)
        attrs = ""
        if self._with_data:
            attrs = ",".join(
                f"{key}={value}"
                for key, value in sorted(element.attrib.items())
                if key not in IGNORED_ATTRIBUTES
            )
        children = _children(element)
        if children:
            parts = [self._compute(child) for child in children]
            body = ",".join(part[0] for part in parts)
            size = 1 + sum(part[1] for part in parts)
        else:
            body = (element.text or "").strip() if self._with_data else ""
            size = 1
        result = (f"{name}[{attrs}]({body})", size)
        self._cache[element] = result
        return result


class SubtreeMatcher:
    """Finds maximal subtrees of the comparison formula inside the reference.

    Content MathML is compared when both documents carry it, presentation
    MathML otherwise.
    """

    def _trees(self, mathml_a: str, mathml_b: str) -> tuple[etree._Element, etree._Element]:
        doc_a = MathDoc(try_fix_header(mathml_a))
        doc_b = MathDoc(try_fix_header(mathml_b))
        content_a, content_b = doc_a.content_tree(), doc_b.content_tree()
        if content_a is not None and content_b is not None:
            return content_a, content_b
        return doc_a.presentation_tree(), doc_b.presentation_tree()

    def _compare(self, mathml_a: str, mathml_b: str, *, with_data: bool, kind: str) -> list[Match]:
        reference, comparison = self._trees(mathml_a, mathml_b)
        signatures = _Signatures(with_data)
        known: dict[str, etree._Element] = {}
        for element in _walk(reference):
            known.setdefault(signatures.of(element), element)

        total = signatures.size(comparison)
        min_size = 1 if with_data else 2
        matches: list[Match] = []

        def visit(element: etree._Element) -> None:
            found = known.get(signatures.of(element))
            if found is not None and signatures.size(element) >= min_size:
                matches.append(
                    Match(
                        reference_id=_locate(found, reference),
                        comparison_id=_locate(element, comparison),
                        depth=_depth(found, reference),
                        coverage=round(signatures.size(element) / total, 4),
                        type=kind,
                    )
                )
                return
            for child in _children(element):
                visit(child)

        visit(comparison)
        return matches

    def compare_identical(self, mathml_a: str, mathml_b: str) -> list[Match]:
        return self._compare(mathml_a, mathml_b, with_data=True, kind="identical")

    def compare_similar(self, mathml_a: str, mathml_b: str) -> list[Match]:
        return self._compare(mathml_a, mathml_b, with_data=False, kind="similar")

    def compare_original_factors(self, mathml_a: str, mathml_b: str) -> dict[str, Any]:
        reference, comparison = self._trees(mathml_a, mathml_b)
        leaves_a = Counter(_leaf_tokens(reference))
        leaves_b = Counter(_leaf_tokens(comparison))
        common = sum((leaves_a & leaves_b).values())
        structure = _Signatures(with_data=False)
        factors: dict[str, Any] = {
            "coverage": round(common / max(sum(leaves_b.values()), 1), 4),
            "dataMatch": leaves_a == leaves_b,
            "isEquation": _is_equation(reference) or _is_equation(comparison),
            "structureMatch": structure.of(reference) == structure.of(comparison),
        }
        return dict(sorted(factors.items()))


def _leaf_tokens(root: etree._Element) -> Iterator[tuple[str, str]]:
    for element in _walk(root):
        if not _children(element):
            yield localname(element), (element.text or "").strip()


def _is_equation(root: etree._Element) -> bool:
    for element in _walk(root):
        name = localname(element)
        if name == "eq" or (name == "mo" and (element.text or "").strip() == "="):
            return True
    return False


__all__ = ["SubtreeMatcher"]
