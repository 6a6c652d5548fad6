"""
Health Ranges

Static band table for the twelve supported metrics and the three-way
classifier (normal / warning / critical) built on it.  Also groups metric
maps into the three dashboard health cards.

Warning bands may sit above the normal band (LDL), below it (HDL) or on
both sides, so each interval is tested on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional

from labassist.core.i18n import lookup
from labassist.models.schemas import HealthCard, HealthCardRow

logger = logging.getLogger(__name__)

Status = Literal["normal", "warning", "critical"]
Direction = Literal["both", "high", "low"]


@dataclass(frozen=True)
class Band:
    """Reference bands for one metric."""

    display_name: str
    unit: str
    normal: tuple[float, float]
    warning: tuple[float, float]
    # which side of the normal band is medically meaningful
    direction: Direction = "both"


BANDS: dict[str, Band] = {
    "fastingGlucose": Band("Fasting Blood Glucose", "mg/dL", (70, 100), (100, 126)),
    "postMealGlucose": Band("Post-Meal Glucose", "mg/dL", (70, 140), (140, 200)),
    "systolicBP": Band("Systolic Blood Pressure", "mmHg", (90, 120), (120, 140)),
    "diastolicBP": Band("Diastolic Blood Pressure", "mmHg", (60, 80), (80, 90)),
    "totalCholesterol": Band("Total Cholesterol", "mg/dL", (0, 200), (200, 240), "high"),
    "hdl": Band("HDL Cholesterol", "mg/dL", (40, 200), (35, 40), "low"),
    "ldl": Band("LDL Cholesterol", "mg/dL", (0, 100), (100, 160), "high"),
    "heartRate": Band("Heart Rate", "bpm", (60, 100), (50, 60)),
    "hemoglobin": Band("Hemoglobin (Hb)", "g/dL", (12, 17), (10, 12)),
    "wbc": Band("White Blood Cells (WBC)", "cells/µL", (4000, 11000), (3000, 4000)),
    "rbc": Band("Red Blood Cells (RBC)", "million/µL", (4.2, 6.1), (3.5, 4.2)),
    "plateletCount": Band("Platelet Count", "per µL", (150000, 400000), (100000, 150000)),
}

# Normalised (lower-case, alphanumeric only) spellings -> canonical key
_NAME_ALIASES: dict[str, str] = {
    "glucose": "fastingGlucose",
    "fbs": "fastingGlucose",
    "fastingbloodglucose": "fastingGlucose",
    "fastingbloodsugar": "fastingGlucose",
    "bloodsugar": "fastingGlucose",
    "ppbs": "postMealGlucose",
    "postprandialglucose": "postMealGlucose",
    "postmealsugar": "postMealGlucose",
    "systolic": "systolicBP",
    "diastolic": "diastolicBP",
    "cholesterol": "totalCholesterol",
    "hdlcholesterol": "hdl",
    "ldlcholesterol": "ldl",
    "pulse": "heartRate",
    "hb": "hemoglobin",
    "hgb": "hemoglobin",
    "haemoglobin": "hemoglobin",
    "whitebloodcells": "wbc",
    "leukocytes": "wbc",
    "redbloodcells": "rbc",
    "platelets": "plateletCount",
    "platelet": "plateletCount",
    "plt": "plateletCount",
}
_NAME_ALIASES.update({key.lower(): key for key in BANDS})


def resolve_metric_key(name: str) -> Optional[str]:
    """Return the canonical metric key for *name*, or None if unknown."""
    cleaned = "".join(ch for ch in (name or "").lower() if ch.isalnum())
    return _NAME_ALIASES.get(cleaned)


def _within(value: float, interval: tuple[float, float]) -> bool:
    low, high = interval
    return low <= value <= high


def classify(key: str, value: float) -> Status:
    """Classify *value* for metric *key*.

    Unknown keys are always ``normal``.
    """
    canonical = resolve_metric_key(key)
    if canonical is None:
        return "normal"
    band = BANDS[canonical]
    if _within(value, band.normal):
        return "normal"
    if _within(value, band.warning):
        return "warning"
    return "critical"


def classify_many(metrics: dict[str, float]) -> dict[str, Status]:
    return {key: classify(key, value) for key, value in metrics.items()}


# ---------------------------------------------------------------------------
# Dashboard health cards
# ---------------------------------------------------------------------------

STATUS_COLORS: dict[str, str] = {
    "normal": "green",
    "warning": "yellow",
    "critical": "red",
}

# card id -> (metric key, unit translation key)
HEALTH_CARDS: dict[str, list[tuple[str, str]]] = {
    "bloodSugarBP": [
        ("fastingGlucose", "unit_mgdl"),
        ("postMealGlucose", "unit_mgdl"),
        ("systolicBP", "unit_mmhg"),
        ("diastolicBP", "unit_mmhg"),
    ],
    "cholesterolHeart": [
        ("totalCholesterol", "unit_mgdl"),
        ("hdl", "unit_mgdl"),
        ("ldl", "unit_mgdl"),
        ("heartRate", "unit_bpm"),
    ],
    "cbcHemoglobin": [
        ("hemoglobin", "unit_gdl"),
        ("wbc", "unit_cellsul"),
        ("rbc", "unit_millionul"),
        ("plateletCount", "unit_perul"),
    ],
}

_SEVERITY_ORDER = ["normal", "warning", "critical"]


def canonicalize(metrics: dict[str, float]) -> dict[str, float]:
    """Map metric names to canonical keys, dropping unknown names."""
    resolved: dict[str, float] = {}
    for name, value in metrics.items():
        key = resolve_metric_key(name)
        if key is None:
            logger.debug("Ignoring unknown metric '%s'", name)
            continue
        resolved[key] = value
    return resolved


def build_health_cards(metrics: dict[str, float], language: str = "en") -> list[HealthCard]:
    """Group *metrics* into the three dashboard cards.

    Metrics missing from the map are rows with no value and no status; the
    card status is the worst row status, or None for an empty card.
    """
    values = canonicalize(metrics)
    cards: list[HealthCard] = []
    for card_id, rows in HEALTH_CARDS.items():
        card_rows: list[HealthCardRow] = []
        for key, unit_key in rows:
            value = values.get(key)
            status = classify(key, value) if value is not None else None
            card_rows.append(
                HealthCardRow(
                    key=key,
                    label=lookup(language, key),
                    value=value,
                    unit=lookup(language, unit_key),
                    status=status,
                    color=STATUS_COLORS[status] if status else None,
                )
            )

        present = [row.status for row in card_rows if row.status]
        worst = max(present, key=_SEVERITY_ORDER.index) if present else None
        cards.append(
            HealthCard(
                id=card_id,
                title=lookup(language, card_id),
                status=worst,
                color=STATUS_COLORS[worst] if worst else None,
                rows=card_rows,
            )
        )
    return cards
