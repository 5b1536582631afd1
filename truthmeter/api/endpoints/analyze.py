"""Claim analysis endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import AliasChoices, BaseModel, Field

from ...domain.errors import (
    AnalysisError,
    ClaimValidationError,
    NoSourcesFoundError,
    SourceRetrievalError,
)
from ...domain.models.analysis_result import AnalysisResult
from ...domain.models.claim import validate_claim_text
from ...infrastructure.dependencies import ServiceContainer, get_service_container

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


class AnalyzeRequest(BaseModel):
    """Request model for claim analysis."""

    claim_text: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("claimText", "contentText", "claim_text"),
        description="Claim to fact-check, 10 to 2000 characters",
    )


@router.post("/analyze", response_model=AnalysisResult)
async def analyze_claim(
    request: AnalyzeRequest,
    container: ServiceContainer = Depends(get_service_container),
) -> AnalysisResult:
    """Fact-check a claim against web sources.

    The claim is validated before any provider is touched. Identical claims
    (ignoring case and whitespace) are served from the cache for the TTL.

    Raises:
        HTTPException: 400 for an invalid claim, 500 when search or
            analysis fails
    """
    try:
        claim_text = validate_claim_text(request.claim_text)
    except ClaimValidationError as e:
        raise HTTPException(status_code=400, detail=e.user_message)

    try:
        orchestrator = await container.get_orchestrator()
        return await orchestrator.analyze_claim(claim_text)
    except (SourceRetrievalError, NoSourcesFoundError, AnalysisError) as e:
        logger.error(f"❌ Analysis failed: {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail=e.user_message)
    except Exception as e:
        logger.error(f"❌ Unexpected error analyzing claim: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
