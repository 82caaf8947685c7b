from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import PlainTextResponse

from api.dependencies import get_service
from api.utils import client_origin, run_sync
from math_pipeline.backends.base import BackendError
from math_pipeline.core import ConfigError, MathService
from math_pipeline.examples import DEFAULT_EXAMPLE, ExampleNotFoundError
from models.schemas import ConversionResponse, ExampleResponse, SimilarityResponse, TranslationResponse

router = APIRouter(prefix="/math", tags=["math"])


@router.post("", summary="Convert LaTeX to MathML via LaTeXML", response_model=ConversionResponse)
async def convert_latex(
    request: Request,
    latex: str = Form(...),
    config: str | None = Form(None),
    raw_latex: str | None = Form(None, alias="rawLatex"),
    service: MathService = Depends(get_service),
) -> ConversionResponse:
    try:
        result = await run_sync(
            service.convert_latexml,
            latex,
            config_json=config,
            raw_latex=raw_latex,
            origin=client_origin(request),
        )
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=exc.code) from exc
    except BackendError as exc:
        raise HTTPException(status_code=500, detail="BACKEND_FAILURE") from exc
    return ConversionResponse.from_result(result)


@router.post("/translation", summary="Translate semantic LaTeX to a CAS", response_model=TranslationResponse)
async def translate(
    request: Request,
    cas: str = Form(...),
    latex: str = Form(...),
    service: MathService = Depends(get_service),
) -> TranslationResponse:
    result = await run_sync(service.translate, cas, latex, origin=client_origin(request))
    return TranslationResponse.from_result(result)


@router.post("/mathoid", summary="Convert LaTeX to MathML via Mathoid", response_class=PlainTextResponse)
async def convert_mathoid(
    request: Request,
    latex: str = Form(...),
    endpoint_url: str | None = Form(None, alias="endpointUrl"),
    service: MathService = Depends(get_service),
) -> str:
    return await run_sync(service.convert_mathoid, latex, endpoint_url, origin=client_origin(request))


@router.post("/similarity", summary="Compare two MathML documents", response_model=SimilarityResponse)
async def compare(
    request: Request,
    mathml1: str = Form(...),
    mathml2: str = Form(...),
    mode: str = Form("identical", alias="type"),
    service: MathService = Depends(get_service),
) -> SimilarityResponse:
    result = await run_sync(service.compare, mathml1, mathml2, mode, origin=client_origin(request))
    return SimilarityResponse.from_result(result)


@router.get("/example", summary="Packaged example input", response_model=ExampleResponse)
def example(name: str = DEFAULT_EXAMPLE, service: MathService = Depends(get_service)) -> ExampleResponse:
    try:
        return ExampleResponse.from_example(service.example(name))
    except ExampleNotFoundError as exc:
        raise HTTPException(status_code=404, detail="EXAMPLE_NOT_FOUND") from exc


__all__ = ["router"]
