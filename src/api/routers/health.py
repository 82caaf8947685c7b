from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_service
from math_pipeline import __version__
from math_pipeline.core import MathService
from models.schemas import HealthStatus

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check", response_model=HealthStatus)
def health(service: MathService = Depends(get_service)) -> HealthStatus:
    return HealthStatus(
        status="ok",
        version=__version__,
        translators=[cas.value for cas in service.available_translators()],
    )


__all__ = ["router"]
