"""
Metrics Router

POST /metrics/status    - Group metrics into the three dashboard health cards
POST /metrics/classify  - normal / warning / critical per metric
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from labassist.core.health_ranges import build_health_cards, classify_many
from labassist.core.i18n import require_language
from labassist.core.report_synthesizer import clean_metrics, usable_number
from labassist.models.schemas import HealthCard, MetricsRequest

router = APIRouter()


@router.post("/status", response_model=list[HealthCard])
async def health_status(
    request: MetricsRequest,
    language: str = Query(default="en"),
) -> list[HealthCard]:
    return build_health_cards(clean_metrics(request.metrics), require_language(language))


@router.post("/classify")
async def classify_metrics(request: MetricsRequest) -> dict[str, str]:
    """Classify each numeric metric; unknown names are reported as normal."""
    numeric = {}
    for key, raw in request.metrics.items():
        value = usable_number(raw)
        if value is not None:
            numeric[key] = value
    return classify_many(numeric)
