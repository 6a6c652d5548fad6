"""
Pydantic Schemas

Defines the data model and the request/response models for all API endpoints:
- TestResult, PatternInsight, LabReport for report synthesis
- HealthCard / HealthCardRow for the dashboard status cards
- Message, selections and SessionView for the chat agent
- Request bodies for the reports, metrics and chat routers
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field

TestStatus = Literal["normal", "low", "high"]
RiskLevel = Literal["Low", "Moderate", "High"]
CardKind = Literal["booking", "lab_booking", "hospitals", "confirmation", "lab_confirmation"]


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

class NormalRange(BaseModel):
    min: float
    max: float


class TestResult(BaseModel):
    """A single analysed metric with its status and commentary."""

    __test__ = False  # not a pytest test class

    id: str
    name: str
    value: float
    unit: str
    normal_range: NormalRange
    status: TestStatus
    explanation: str
    causes: Optional[list[str]] = None
    suggested_intakes: Optional[list[str]] = None


class PatternInsight(BaseModel):
    """Narrative derived from a combination of test results."""

    id: str
    title: str
    description: str
    icon: str


class LabReport(BaseModel):
    """Status-annotated report built from a metric map."""

    patient_name: str
    date: str
    overall_insight: str
    health_score: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    tests: list[TestResult]
    patterns: list[PatternInsight]


class HealthCardRow(BaseModel):
    key: str
    label: str
    value: Optional[float] = None
    unit: str
    status: Optional[str] = None
    color: Optional[str] = None


class HealthCard(BaseModel):
    """One of the three dashboard status cards."""

    id: str
    title: str
    status: Optional[str] = None
    color: Optional[str] = None
    rows: list[HealthCardRow]


# ---------------------------------------------------------------------------
# Chat agent
# ---------------------------------------------------------------------------

class Doctor(BaseModel):
    name: str
    specialty: str


class ScanType(BaseModel):
    name: str
    description: str


class Hospital(BaseModel):
    name: str
    specialty: str
    distance: str
    phone: str
    address: str
    rating: float


class AppointmentSelection(BaseModel):
    """Completed doctor-booking selection; every field is required."""

    doctor: str = Field(min_length=1)
    specialty: str = Field(min_length=1)
    date: str = Field(min_length=1)
    time: str = Field(min_length=1)


class LabTestSelection(BaseModel):
    """Completed lab-test selection; every field is required."""

    patient_name: str = Field(min_length=1)
    scan_type: str = Field(min_length=1)
    date: str = Field(min_length=1)
    time: str = Field(min_length=1)


Selection = Union[AppointmentSelection, LabTestSelection]

# pending card kind -> confirmed card kind
_CONFIRMATIONS: dict[str, tuple[str, type]] = {
    "booking": ("confirmation", AppointmentSelection),
    "lab_booking": ("lab_confirmation", LabTestSelection),
}


class Message(BaseModel):
    """A chat message.  Only booking cards may change after creation."""

    id: str
    role: Literal["agent", "user"]
    text: str
    timestamp: datetime = Field(default_factory=datetime.now)
    card: Optional[CardKind] = None
    card_data: Optional[Union[AppointmentSelection, LabTestSelection, list[Hospital]]] = None

    def confirm(self, selection: Selection, text: str) -> None:
        """Turn a pending booking card into its confirmation card.

        Raises:
            ValueError: the message is not a pending card for *selection*.
        """
        target = _CONFIRMATIONS.get(self.card or "")
        if target is None or not isinstance(selection, target[1]):
            raise ValueError(
                f"Message {self.id} ({self.card}) cannot be confirmed with "
                f"{type(selection).__name__}"
            )
        self.card = target[0]
        self.card_data = selection
        self.text = text


class FlowView(BaseModel):
    kind: Literal["booking", "lab_booking"]
    step: int
    step_name: str
    options: list[Any]
    selection: dict[str, Any]
    can_go_back: bool


class SessionView(BaseModel):
    """Snapshot of a chat session for the client."""

    session_id: str
    language: str
    status: str
    messages: list[Message]
    flow: Optional[FlowView] = None
    suggestions: list[str] = []
    placeholder: str
    speech_lang: str


# ---------------------------------------------------------------------------
# Requests / responses
# ---------------------------------------------------------------------------

class MetricsRequest(BaseModel):
    """A raw metric map; non-numeric values are ignored downstream."""

    metrics: dict[str, Any] = {}


class SynthesizeRequest(MetricsRequest):
    patient_name: Optional[str] = None
    report_date: Optional[str] = None


class UploadResponse(BaseModel):
    metrics: dict[str, float]
    report: LabReport


class CreateSessionRequest(BaseModel):
    language: Optional[str] = None
    metrics: Optional[dict[str, Any]] = None


class MessageRequest(BaseModel):
    text: str = Field(min_length=1)


class VoiceRequest(BaseModel):
    transcript: str = Field(min_length=1)


class LanguageRequest(BaseModel):
    language: str


class ChooseRequest(BaseModel):
    value: str


class HealthResponse(BaseModel):
    status: str
    gemini_available: bool
    sessions: int
