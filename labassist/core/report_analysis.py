"""
Report Analysis

Upload validation and the extraction hand-off:
  uploaded PDF -> validate_upload -> gateway.extract_metrics
              -> canonical metric map -> synthesize -> LabReport

Validation runs before any network call.  Extraction failures propagate
to the caller; no partial report is ever returned.
"""

from __future__ import annotations

import logging
from typing import Optional

from labassist.core.errors import UnrecognizedDocumentError, UploadRejectedError
from labassist.core.report_synthesizer import clean_metrics, synthesize
from labassist.models.schemas import LabReport

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}
PDF_SIGNATURE = b"%PDF-"


def validate_upload(
    filename: Optional[str],
    content_type: Optional[str],
    data: bytes,
    max_bytes: int,
) -> None:
    """Reject anything that is not a PDF within the size limit.

    Raises:
        UploadRejectedError: 400 for a non-PDF or empty file, 413 when too large.
    """
    name = (filename or "").lower()
    if not (name.endswith(".pdf") or (content_type or "").lower() in PDF_CONTENT_TYPES):
        raise UploadRejectedError("Please upload a PDF file")
    if not data:
        raise UploadRejectedError("The uploaded file is empty")
    if len(data) > max_bytes:
        raise UploadRejectedError(
            f"File too large. Max size is {max_bytes // (1024 * 1024)}MB",
            status_code=413,
        )
    if not data.startswith(PDF_SIGNATURE):
        raise UploadRejectedError("The uploaded file is not a valid PDF")


async def analyze_upload(
    gateway,
    data: bytes,
    filename: str,
    patient_name: Optional[str] = None,
) -> tuple[dict[str, float], LabReport]:
    """Extract metrics from a validated PDF and synthesize its report.

    Returns:
        (canonical metric map, report)

    Raises:
        UnrecognizedDocumentError: not a lab report, or no supported metric.
        ExtractionError: extraction transport / response failure.
    """
    raw = await gateway.extract_metrics(data, filename)
    metrics = clean_metrics(raw)
    if not metrics:
        logger.warning("No supported metrics in %s (got %s)", filename, sorted(raw))
        raise UnrecognizedDocumentError("No supported health metrics were found in this report")

    report = synthesize(metrics, patient_name=patient_name)
    logger.info("Analyzed upload %s: %d metrics", filename, len(metrics))
    return metrics, report
