"""
Booking Flows

Multi-step card flows driven by the chat agent:
  BookingFlow:  doctor -> date -> time
  LabTestFlow:  patient_name -> scan_type -> date -> time

Each ``choose`` validates the value against the current step before
touching any state, so a rejected value leaves the flow exactly as it was.
The final step returns the completed selection.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Optional

from labassist.core.errors import FlowValidationError
from labassist.models.schemas import (
    AppointmentSelection,
    Doctor,
    FlowView,
    Hospital,
    LabTestSelection,
    ScanType,
    Selection,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Static catalogs
# ---------------------------------------------------------------------------

DOCTORS: list[Doctor] = [
    Doctor(name="Dr. Priya Sharma", specialty="General Physician"),
    Doctor(name="Dr. Rahul Mehta", specialty="Cardiologist"),
    Doctor(name="Dr. Anita Reddy", specialty="Hematologist"),
    Doctor(name="Dr. Suresh Kumar", specialty="Endocrinologist"),
]

SCAN_TYPES: list[ScanType] = [
    ScanType(name="MRI Scan", description="Magnetic Resonance Imaging"),
    ScanType(name="CT Scan", description="Computed Tomography"),
    ScanType(name="X-Ray", description="Radiography"),
    ScanType(name="Ultrasound", description="Sonography"),
    ScanType(name="Blood Test", description="Complete Blood Count, Lipid Profile, etc."),
]

TIME_SLOTS: list[str] = ["09:00 AM", "10:30 AM", "12:00 PM", "02:30 PM", "04:00 PM", "05:30 PM"]

NEARBY_HOSPITALS: list[Hospital] = [
    Hospital(
        name="Apollo Hospitals",
        specialty="Multi-Specialty",
        distance="1.2 km",
        phone="+91-040-2360-7777",
        address="Jubilee Hills, Hyderabad",
        rating=4.8,
    ),
    Hospital(
        name="KIMS Hospitals",
        specialty="Cardiology & Ortho",
        distance="2.5 km",
        phone="+91-040-4488-5000",
        address="Secunderabad, Hyderabad",
        rating=4.7,
    ),
    Hospital(
        name="Yashoda Hospitals",
        specialty="Neurology & General",
        distance="3.1 km",
        phone="+91-040-4567-4567",
        address="Somajiguda, Hyderabad",
        rating=4.6,
    ),
    Hospital(
        name="Care Hospitals",
        specialty="Oncology & Nephrology",
        distance="4.0 km",
        phone="+91-040-6165-6165",
        address="Banjara Hills, Hyderabad",
        rating=4.5,
    ),
]

BOOKABLE_DAYS = 5


def format_day(day: date) -> str:
    """Format like ``Tue, 20 Oct``."""
    return f"{day:%a}, {day.day} {day:%b}"


def upcoming_dates(today: Optional[date] = None) -> list[str]:
    """The next five calendar days, starting tomorrow."""
    start = today or date.today()
    return [format_day(start + timedelta(days=offset)) for offset in range(1, BOOKABLE_DAYS + 1)]


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------

class CardFlow:
    """Base class: step index plus a partially filled selection."""

    kind: str = ""
    steps: tuple[str, ...] = ()

    def __init__(self, today: Optional[date] = None) -> None:
        self.step = 0
        self.selection: dict[str, str] = {}
        self.dates = upcoming_dates(today)

    @property
    def step_name(self) -> str:
        return self.steps[self.step]

    def options(self) -> list[Any]:
        """Choices offered for the current step (empty for free text)."""
        name = self.step_name
        if name == "date":
            return list(self.dates)
        if name == "time":
            return list(TIME_SLOTS)
        return []

    def _validate(self, name: str, value: str) -> dict[str, str]:
        """Return the selection fields set by *value*, or raise."""
        if name == "date":
            if value not in self.dates:
                raise FlowValidationError(f"'{value}' is not an available date")
            return {"date": value}
        if name == "time":
            if value not in TIME_SLOTS:
                raise FlowValidationError(f"'{value}' is not an available time slot")
            return {"time": value}
        raise FlowValidationError(f"Unknown step '{name}'")

    def _complete(self) -> Selection:
        raise NotImplementedError

    def choose(self, value: str) -> Optional[Selection]:
        """Apply *value* to the current step.

        Returns:
            The completed selection after the final step, else None.

        Raises:
            FlowValidationError: *value* is not valid for this step.
        """
        fields = self._validate(self.step_name, value)
        self.selection.update(fields)
        if self.step == len(self.steps) - 1:
            logger.info("%s flow complete", self.kind)
            return self._complete()
        self.step += 1
        return None

    def back(self) -> None:
        """Go back one step; previously chosen fields are kept."""
        if self.step == 0:
            raise FlowValidationError("Already at the first step")
        self.step -= 1

    def view(self) -> FlowView:
        return FlowView(
            kind=self.kind,
            step=self.step,
            step_name=self.step_name,
            options=self.options(),
            selection=dict(self.selection),
            can_go_back=self.step > 0,
        )


class BookingFlow(CardFlow):
    """Doctor appointment: doctor -> date -> time."""

    kind = "booking"
    steps = ("doctor", "date", "time")

    def options(self) -> list[Any]:
        if self.step_name == "doctor":
            return [d.model_dump() for d in DOCTORS]
        return super().options()

    def _validate(self, name: str, value: str) -> dict[str, str]:
        if name == "doctor":
            doctor = next((d for d in DOCTORS if d.name == value), None)
            if doctor is None:
                raise FlowValidationError(f"'{value}' is not on the doctor roster")
            return {"doctor": doctor.name, "specialty": doctor.specialty}
        return super()._validate(name, value)

    def _complete(self) -> AppointmentSelection:
        return AppointmentSelection(**self.selection)


class LabTestFlow(CardFlow):
    """Lab test: patient name -> scan type -> date -> time."""

    kind = "lab_booking"
    steps = ("patient_name", "scan_type", "date", "time")

    def options(self) -> list[Any]:
        if self.step_name == "scan_type":
            return [s.model_dump() for s in SCAN_TYPES]
        return super().options()

    def _validate(self, name: str, value: str) -> dict[str, str]:
        if name == "patient_name":
            patient_name = (value or "").strip()
            if not patient_name:
                raise FlowValidationError("Patient name is required")
            return {"patient_name": patient_name}
        if name == "scan_type":
            if not any(s.name == value for s in SCAN_TYPES):
                raise FlowValidationError(f"'{value}' is not an available test type")
            return {"scan_type": value}
        return super()._validate(name, value)

    def _complete(self) -> LabTestSelection:
        return LabTestSelection(**self.selection)


FLOW_TYPES: dict[str, type[CardFlow]] = {
    BookingFlow.kind: BookingFlow,
    LabTestFlow.kind: LabTestFlow,
}
