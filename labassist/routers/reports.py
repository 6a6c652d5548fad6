"""
Reports Router

GET  /reports/demo        - Fixed demonstration report
POST /reports/synthesize  - Metric map -> LabReport (empty map -> demo report)
POST /reports/upload      - PDF lab report -> extracted metrics + LabReport
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from labassist.core.context import AppContext
from labassist.core.demo_report import demo_report
from labassist.core.report_analysis import analyze_upload, validate_upload
from labassist.core.report_synthesizer import synthesize
from labassist.models.schemas import LabReport, SynthesizeRequest, UploadResponse
from labassist.routers.deps import get_context

logger = logging.getLogger(__name__)

router = APIRouter()


# ── GET /reports/demo ─────────────────────────────────────────────────────────

@router.get("/demo", response_model=LabReport)
async def get_demo_report() -> LabReport:
    return demo_report()


# ── POST /reports/synthesize ──────────────────────────────────────────────────

@router.post("/synthesize", response_model=LabReport)
async def synthesize_report(request: SynthesizeRequest) -> LabReport:
    """Build a report from an externally supplied metric map."""
    return synthesize(
        request.metrics,
        patient_name=request.patient_name,
        report_date=request.report_date,
    )


# ── POST /reports/upload ──────────────────────────────────────────────────────

@router.post("/upload", response_model=UploadResponse)
async def upload_report(
    file: UploadFile = File(...),
    patient_name: Optional[str] = Form(default=None),
    ctx: AppContext = Depends(get_context),
) -> UploadResponse:
    """Validate a PDF upload, extract its metrics and synthesize the report.

    Nothing is sent to Gemini unless the upload passes validation.  At most
    one byte past the size limit is read, enough to reject an oversized file.
    """
    data = await file.read(ctx.settings.max_upload_bytes + 1)
    validate_upload(file.filename, file.content_type, data, ctx.settings.max_upload_bytes)

    metrics, report = await analyze_upload(
        ctx.gateway, data, file.filename or "report.pdf", patient_name=patient_name
    )
    return UploadResponse(metrics=metrics, report=report)
