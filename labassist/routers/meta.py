"""
Meta Router

GET /health            - Liveness and Gemini availability
GET /i18n/{language}   - Full localization table for the client
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from labassist.core.context import AppContext
from labassist.core.i18n import LANGUAGE_NAMES, SPEECH_LANG_CODES, require_language, table
from labassist.models.schemas import HealthResponse
from labassist.routers.deps import get_context

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(ctx: AppContext = Depends(get_context)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        gemini_available=ctx.gateway.is_available,
        sessions=len(ctx.sessions),
    )


@router.get("/i18n/{language}")
async def get_translations(language: str) -> dict[str, Any]:
    require_language(language)
    return {
        "language": language,
        "name": LANGUAGE_NAMES[language],
        "speech_lang": SPEECH_LANG_CODES[language],
        "strings": table(language),
    }
