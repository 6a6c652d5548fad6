"""
Chat Router

POST   /chat/sessions                      - Start a session (optional language / metrics)
GET    /chat/sessions/{session_id}          - Current session view
DELETE /chat/sessions/{session_id}          - Discard a session
POST   /chat/sessions/{session_id}/messages - Typed user turn
POST   /chat/sessions/{session_id}/voice    - Recognised voice utterance (same path as typed)
PUT    /chat/sessions/{session_id}/language - Change language (full conversation reset)
POST   /chat/sessions/{session_id}/flow/choose - Value for the current booking step
POST   /chat/sessions/{session_id}/flow/back   - Previous booking step
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from labassist.agents.chat_workflow import run_turn
from labassist.core.context import AppContext
from labassist.core.report_synthesizer import synthesize
from labassist.models.schemas import (
    ChooseRequest,
    CreateSessionRequest,
    LanguageRequest,
    MessageRequest,
    SessionView,
    VoiceRequest,
)
from labassist.routers.deps import get_context

router = APIRouter()


# ── Sessions ──────────────────────────────────────────────────────────────────

@router.post("/sessions", response_model=SessionView, status_code=201)
async def create_session(
    request: CreateSessionRequest,
    ctx: AppContext = Depends(get_context),
) -> SessionView:
    """Start a conversation about the supplied metrics, or the demo report."""
    report = synthesize(request.metrics) if request.metrics else None
    session = ctx.sessions.create(language=request.language, report=report)
    return session.view()


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(session_id: str, ctx: AppContext = Depends(get_context)) -> SessionView:
    return ctx.sessions.get(session_id).view()


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, ctx: AppContext = Depends(get_context)) -> dict[str, str]:
    ctx.sessions.delete(session_id)
    return {"status": "deleted", "session_id": session_id}


# ── Turns ─────────────────────────────────────────────────────────────────────

@router.post("/sessions/{session_id}/messages", response_model=SessionView)
async def send_message(
    session_id: str,
    request: MessageRequest,
    ctx: AppContext = Depends(get_context),
) -> SessionView:
    session = ctx.sessions.get(session_id)
    return await run_turn(session, request.text, ctx.gateway)


@router.post("/sessions/{session_id}/voice", response_model=SessionView)
async def send_voice(
    session_id: str,
    request: VoiceRequest,
    ctx: AppContext = Depends(get_context),
) -> SessionView:
    session = ctx.sessions.get(session_id)
    return await run_turn(session, request.transcript, ctx.gateway)


@router.put("/sessions/{session_id}/language", response_model=SessionView)
async def change_language(
    session_id: str,
    request: LanguageRequest,
    ctx: AppContext = Depends(get_context),
) -> SessionView:
    session = ctx.sessions.get(session_id)
    session.reset_language(request.language)
    return session.view()


# ── Booking flows ─────────────────────────────────────────────────────────────

@router.post("/sessions/{session_id}/flow/choose", response_model=SessionView)
async def choose_flow_value(
    session_id: str,
    request: ChooseRequest,
    ctx: AppContext = Depends(get_context),
) -> SessionView:
    session = ctx.sessions.get(session_id)
    session.choose(request.value)
    return session.view()


@router.post("/sessions/{session_id}/flow/back", response_model=SessionView)
async def flow_back(session_id: str, ctx: AppContext = Depends(get_context)) -> SessionView:
    session = ctx.sessions.get(session_id)
    session.back()
    return session.view()
