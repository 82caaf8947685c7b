"""Response bodies of the HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from math_pipeline.models import ConversionResult, Example, SimilarityResult, TranslationResult


class HealthStatus(BaseModel):
    status: str
    version: str
    translators: list[str] = Field(default_factory=list)


class ConversionResponse(BaseModel):
    result: str | None
    log: str
    status: str
    status_code: int

    @classmethod
    def from_result(cls, result: ConversionResult) -> "ConversionResponse":
        return cls(result=result.markup, log=result.log, status=result.status, status_code=result.status_code)


class TranslationResponse(BaseModel):
    output: str | None
    log: str

    @classmethod
    def from_result(cls, result: TranslationResult) -> "TranslationResponse":
        return cls(output=result.output, log=result.log)


class MatchInfo(BaseModel):
    reference_id: str
    comparison_id: str
    depth: int
    coverage: float
    type: str


class SimilarityResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    message: str
    matches: list[MatchInfo]
    original_factors: dict[str, Any] = Field(alias="originalFactors")

    @classmethod
    def from_result(cls, result: SimilarityResult) -> "SimilarityResponse":
        return cls.model_validate(result.to_payload())


class ExampleResponse(BaseModel):
    name: str
    title: str
    latex: str
    mathml1: str
    mathml2: str

    @classmethod
    def from_example(cls, example: Example) -> "ExampleResponse":
        return cls(
            name=example.name,
            title=example.title,
            latex=example.latex,
            mathml1=example.mathml1,
            mathml2=example.mathml2,
        )


__all__ = [
    "ConversionResponse",
    "ExampleResponse",
    "HealthStatus",
    "MatchInfo",
    "SimilarityResponse",
    "TranslationResponse",
]
