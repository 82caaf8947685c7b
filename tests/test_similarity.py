import pytest

from math_pipeline.examples import load_example
from math_pipeline.models import SimilarityStatus
from math_pipeline.similarity import ComparisonMode, SimilarityOrchestrator


class RecordingMatcher:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def compare_similar(self, a, b):
        self.calls.append("similar")
        return []

    def compare_identical(self, a, b):
        self.calls.append("identical")
        return []

    def compare_original_factors(self, a, b):
        return {"zeta": 1, "alpha": 2}


def test_identical_comparison_of_example() -> None:
    example = load_example()
    result = SimilarityOrchestrator().compare(example.mathml1, example.mathml2, "identical")
    assert result.status is SimilarityStatus.OKAY
    assert result.matches
    assert all(match.type == "identical" for match in result.matches)
    assert list(result.original_factors) == sorted(result.original_factors)
    assert result.original_factors["isEquation"] is True


def test_same_formula_is_fully_covered() -> None:
    example = load_example()
    result = SimilarityOrchestrator().compare(example.mathml1, example.mathml1, "identical")
    assert len(result.matches) == 1
    assert result.matches[0].coverage == 1.0
    assert result.original_factors["dataMatch"] is True


def test_similar_comparison_ignores_leaf_data() -> None:
    example = load_example()
    result = SimilarityOrchestrator().compare(example.mathml1, example.mathml2, "similar")
    assert result.status is SimilarityStatus.OKAY
    assert all(match.type == "similar" for match in result.matches)


def test_malformed_input_yields_error_result() -> None:
    result = SimilarityOrchestrator().compare("<math><mi>x</mo></math>", load_example().mathml1, "identical")
    assert result.status is SimilarityStatus.ERROR
    assert result.message
    assert result.matches == []
    assert result.original_factors == {}
    assert result.to_payload()["status"] == "Error"


@pytest.mark.parametrize(("mode", "expected"), [("similar", "similar"), ("identical", "identical"), ("fuzzy", "identical")])
def test_mode_selection(mode: str, expected: str) -> None:
    matcher = RecordingMatcher()
    result = SimilarityOrchestrator(matcher).compare("<math/>", "<math/>", mode)
    assert matcher.calls == [expected]
    assert list(result.original_factors) == ["alpha", "zeta"]


def test_unknown_mode_parses_as_identical() -> None:
    assert ComparisonMode.parse("Similar") is ComparisonMode.IDENTICAL
    assert ComparisonMode.parse(None) is ComparisonMode.IDENTICAL
