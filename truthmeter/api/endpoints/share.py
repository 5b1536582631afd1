"""Shared result lookup endpoint."""

from fastapi import APIRouter, Depends, HTTPException

from ...domain.models.analysis_result import AnalysisResult
from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(tags=["analysis"])


@router.get("/share/{analysis_id}", response_model=AnalysisResult)
def get_shared_result(
    analysis_id: str,
    container: ServiceContainer = Depends(get_service_container),
) -> AnalysisResult:
    """Return a stored analysis by id, however old it is.

    Plain ``def`` so FastAPI runs the blocking store lookup in its threadpool.
    """
    result = container.store.get_by_id(analysis_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Shared result not found")
    return result
