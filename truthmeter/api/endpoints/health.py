"""Health check endpoints."""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ...infrastructure.dependencies import ServiceContainer, get_service_container

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(
    container: ServiceContainer = Depends(get_service_container),
) -> Dict[str, Any]:
    """Check the health of all service components.

    Returns:
        Service status, configured providers and the number of stored analyses
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **container.provider_status(),
        "cached_analyses": container.store.count(),
    }
