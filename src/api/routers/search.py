from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Form, HTTPException, Request

from api.dependencies import get_service
from api.utils import client_origin, run_sync
from math_pipeline.backends.search import SearchUnavailableError
from math_pipeline.core import MathService

router = APIRouter(tags=["search"])


@router.post("/search", summary="Search mathematical objects of interest")
async def search(
    request: Request,
    query: str = Form(...),
    database: str | None = Form(None),
    term_frequency: str | None = Form(None, alias="termFrequencyCalculator"),
    inverse_document_frequency: str | None = Form(None, alias="inverseDocumentFrequencyCalculator"),
    k1: float | None = Form(None),
    b: float | None = Form(None),
    min_tf: int | None = Form(None, alias="minTF"),
    min_df: int | None = Form(None, alias="minDF"),
    min_c: int | None = Form(None, alias="minC"),
    max_tf: int | None = Form(None, alias="maxTF"),
    max_df: int | None = Form(None, alias="maxDF"),
    max_c: int | None = Form(None, alias="maxC"),
    docs_to_retrieve: int | None = Form(None, alias="numberOfDocsToRetrieve"),
    min_doc_hits: int | None = Form(None, alias="minNumberOfDocHitsPerMOI"),
    max_results: int | None = Form(None, alias="maxNumberOfResults"),
    enable_mathml: bool | None = Form(None, alias="enableMathML"),
    service: MathService = Depends(get_service),
) -> Any:
    overrides = {
        "database": database,
        "termFrequencyCalculator": term_frequency,
        "inverseDocumentFrequencyCalculator": inverse_document_frequency,
        "k1": k1,
        "b": b,
        "minTF": min_tf,
        "minDF": min_df,
        "minC": min_c,
        "maxTF": max_tf,
        "maxDF": max_df,
        "maxC": max_c,
        "numberOfDocsToRetrieve": docs_to_retrieve,
        "minNumberOfDocHitsPerMOI": min_doc_hits,
        "maxNumberOfResults": max_results,
        "enableMathML": enable_mathml,
    }
    try:
        return await run_sync(service.search, query, overrides, origin=client_origin(request))
    except SearchUnavailableError as exc:
        raise HTTPException(status_code=500, detail="SEARCH_UNAVAILABLE") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="INVALID_SEARCH") from exc


__all__ = ["router"]
