"""
Error Taxonomy

Domain exceptions raised by the report and chat layers.  Each carries the
HTTP status and machine-readable error code used by the JSON error
envelope registered in ``labassist.main``.
"""


class LabAssistError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    error: str = "internal_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or self.error


# ---------------------------------------------------------------------------
# Report analysis (no local fallback -> surfaced to the user)
# ---------------------------------------------------------------------------

class ReportAnalysisError(LabAssistError):
    """The uploaded report could not be analysed."""

    status_code = 502
    error = "analysis_failed"


class UnrecognizedDocumentError(ReportAnalysisError):
    """The uploaded file is not a recognised lab report."""

    status_code = 422
    error = "unrecognized_document"


class ExtractionError(ReportAnalysisError):
    """Metric extraction failed (transport, timeout or malformed response)."""


class UploadRejectedError(LabAssistError):
    """The upload was rejected before any analysis started."""

    status_code = 400
    error = "upload_rejected"

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Chat sessions
# ---------------------------------------------------------------------------

class ChatSessionError(LabAssistError):
    """Base class for chat session errors."""

    status_code = 409
    error = "chat_session_error"


class SessionNotFoundError(ChatSessionError):
    """No chat session exists with the given id."""

    status_code = 404
    error = "session_not_found"


class TurnInProgressError(ChatSessionError):
    """A previous message is still awaiting its reply."""

    error = "turn_in_progress"


class NoActiveFlowError(ChatSessionError):
    """There is no booking card waiting for input."""

    error = "no_active_flow"


class FlowValidationError(ChatSessionError):
    """The value cannot be applied to the current booking step."""

    status_code = 422
    error = "flow_validation_error"


class UnsupportedLanguageError(LabAssistError):
    """The requested display language is not supported."""

    status_code = 422
    error = "unsupported_language"
