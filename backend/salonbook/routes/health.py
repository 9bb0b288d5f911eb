# backend/salonbook/routes/health.py
from fastapi import APIRouter, Response

from ..monitoring.prometheus_metrics import prometheus_metrics
from ..schemas.base_responses import PingResponse

router = APIRouter(tags=["health"])


@router.get("/api/ping", response_model=PingResponse)
def ping() -> PingResponse:
    return PingResponse(ok=True)


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    """Prometheus exposition of the private registry."""
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )
