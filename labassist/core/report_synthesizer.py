"""
Report Synthesizer

Turns a raw metric map into a LabReport:
  1. canonicalise keys and drop unknown / non-numeric values
  2. one TestResult per metric (normal / low / high + commentary)
  3. health score and risk level from the non-normal results
  4. templated overall insight
  5. cross-metric pattern insights from a fixed, ordered rule set

An empty (or entirely unusable) metric map yields the demonstration report.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Any, Callable, Optional

from labassist.core.demo_report import demo_report
from labassist.core.health_ranges import BANDS, classify, resolve_metric_key
from labassist.models.schemas import LabReport, NormalRange, PatternInsight, TestResult

logger = logging.getLogger(__name__)

SCORE_CEILING = 100
PENALTY_PER_FINDING = 6

DEFAULT_PATIENT_NAME = "You"


# ---------------------------------------------------------------------------
# Per-metric commentary
# ---------------------------------------------------------------------------
# "normal" -> explanation; "low" / "high" -> (explanation, causes, intakes).
# One-directional metrics only carry the side that can be flagged.

_COMMENTARY: dict[str, dict[str, Any]] = {
    "fastingGlucose": {
        "normal": "Your fasting glucose is within the normal range. Keep up a balanced diet and regular exercise.",
        "low": (
            "Your fasting glucose is below the normal range, which can cause shakiness, sweating or dizziness.",
            ["Long gaps between meals", "Diabetes medication dosage", "Intense exercise without refuelling"],
            ["Regular small meals", "Complex carbohydrates (whole grains, oats)"],
        ),
        "high": (
            "Your fasting glucose is above the normal range. Values of 100-125 mg/dL suggest prediabetes; "
            "a repeat test or HbA1c is advisable.",
            ["Insulin resistance", "Diet high in refined sugars", "Low physical activity"],
            ["High-fibre vegetables and legumes", "Whole grains instead of refined flour", "Cinnamon and fenugreek (methi)"],
        ),
    },
    "postMealGlucose": {
        "normal": "Your post-meal glucose is within the normal range, showing a healthy response to food.",
        "low": (
            "Your post-meal glucose is lower than expected, which may indicate reactive hypoglycaemia.",
            ["Meals high in simple sugars", "Skipping protein at meals"],
            ["Balanced meals with protein and fibre"],
        ),
        "high": (
            "Your post-meal glucose is above the normal range, which suggests reduced glucose tolerance.",
            ["Large carbohydrate-heavy meals", "Insulin resistance"],
            ["Smaller, balanced portions", "A short walk after meals", "Low-glycaemic foods (millets, lentils)"],
        ),
    },
    "systolicBP": {
        "normal": "Your systolic blood pressure is within the normal range.",
        "low": (
            "Your systolic blood pressure is below the normal range, which can cause light-headedness.",
            ["Dehydration", "Prolonged bed rest", "Certain medications"],
            ["Adequate fluids through the day", "Small, frequent meals"],
        ),
        "high": (
            "Your systolic blood pressure is above the normal range. Sustained high readings strain the "
            "heart and blood vessels; please monitor it regularly.",
            ["High salt intake", "Stress", "Excess body weight"],
            ["Potassium-rich foods (bananas, spinach)", "Reduced salt and processed foods"],
        ),
    },
    "diastolicBP": {
        "normal": "Your diastolic blood pressure is within the normal range.",
        "low": (
            "Your diastolic blood pressure is below the normal range.",
            ["Dehydration", "Certain medications"],
            ["Adequate fluids through the day"],
        ),
        "high": (
            "Your diastolic blood pressure is above the normal range. Regular monitoring is recommended.",
            ["High salt intake", "Alcohol", "Low physical activity"],
            ["Reduced salt and processed foods", "Magnesium-rich foods (nuts, seeds)"],
        ),
    },
    "totalCholesterol": {
        "normal": "Your total cholesterol is within the desirable range (below 200 mg/dL).",
        "high": (
            "Your total cholesterol is above the desirable range (below 200 mg/dL). Consider reducing "
            "saturated and trans fats, increasing fibre and adding regular cardiovascular exercise.",
            ["Diet high in saturated and trans fats", "Lack of regular cardiovascular exercise", "Genetics / family history"],
            ["Omega-3 fatty acids (flaxseeds, salmon, walnuts)", "Soluble fiber (oats, beans, apples)"],
        ),
    },
    "hdl": {
        "normal": 'Your HDL ("good") cholesterol is in a healthy range.',
        "low": (
            'Your HDL ("good") cholesterol is below the healthy range. Higher HDL helps protect against '
            "heart disease.",
            ["Low physical activity", "Smoking", "Diet high in refined carbohydrates"],
            ["Healthy fats (avocado, olive oil, nuts)", "Regular aerobic exercise"],
        ),
    },
    "ldl": {
        "normal": 'Your LDL ("bad") cholesterol is within the optimal range.',
        "high": (
            'Your LDL ("bad") cholesterol is above the optimal range (below 100 mg/dL). Reducing processed '
            "foods and saturated fats can help bring it down within a few months.",
            ["High consumption of processed and fried foods", "Low physical activity"],
            ["Plant sterols / stanols (found in fortified foods)", "Almonds and other unsalted nuts"],
        ),
    },
    "heartRate": {
        "normal": "Your resting heart rate is within the normal range.",
        "low": (
            "Your resting heart rate is below the normal range. This is common in athletes but should be "
            "checked if you feel tired or dizzy.",
            ["High fitness level", "Certain medications", "Thyroid imbalance"],
            ["Balanced electrolytes (potassium, magnesium)"],
        ),
        "high": (
            "Your resting heart rate is above the normal range.",
            ["Stress or anxiety", "Caffeine", "Dehydration"],
            ["Adequate hydration", "Reduced caffeine"],
        ),
    },
    "hemoglobin": {
        "normal": "Your hemoglobin is within the normal range, so your blood carries oxygen well.",
        "low": (
            "Your hemoglobin is below the normal range. This could indicate iron-deficiency anemia. "
            "A follow-up test in 3 months is recommended.",
            ["Inadequate dietary iron intake", "Vitamin B12 or folate deficiency"],
            [
                "Iron supplements (consult healthcare provider)",
                "Spinach, red meat, and lentils",
                "Vitamin C-rich foods (citrus fruits) to boost iron absorption",
            ],
        ),
        "high": (
            "Your hemoglobin is above the normal range, which can happen with dehydration or smoking.",
            ["Dehydration", "Smoking", "Living at high altitude"],
            ["Adequate hydration"],
        ),
    },
    "wbc": {
        "normal": "Your white blood cell count is within the normal range, indicating a healthy immune system.",
        "low": (
            "Your white blood cell count is below the normal range, which can lower resistance to infection.",
            ["Recent viral infection", "Nutritional deficiency", "Certain medications"],
            ["Protein-rich foods", "Zinc and vitamin C sources"],
        ),
        "high": (
            "Your white blood cell count is above the normal range, which often points to an infection "
            "or inflammation.",
            ["Infection", "Inflammation", "Stress"],
            ["Adequate rest and hydration"],
        ),
    },
    "rbc": {
        "normal": "Your red blood cell count is within the normal range.",
        "low": (
            "Your red blood cell count is below the normal range, which often accompanies anemia.",
            ["Iron, B12 or folate deficiency", "Blood loss"],
            ["Iron-rich foods (spinach, lentils)", "Folate sources (leafy greens, beans)"],
        ),
        "high": (
            "Your red blood cell count is above the normal range.",
            ["Dehydration", "Smoking"],
            ["Adequate hydration"],
        ),
    },
    "plateletCount": {
        "normal": "Your platelet count is normal, indicating healthy blood clotting ability.",
        "low": (
            "Your platelet count is below the normal range, which can make bruising or bleeding easier.",
            ["Viral infection (e.g. dengue)", "Certain medications", "Vitamin B12 or folate deficiency"],
            ["Papaya and leafy greens", "Folate and B12 sources"],
        ),
        "high": (
            "Your platelet count is above the normal range, which may follow infection or inflammation.",
            ["Infection or inflammation", "Iron deficiency"],
            ["Adequate hydration", "Omega-3 fatty acids"],
        ),
    },
}


# ---------------------------------------------------------------------------
# Step 1-2: metric map -> TestResults
# ---------------------------------------------------------------------------

def usable_number(value: Any) -> Optional[float]:
    """Return *value* as a finite float, or None for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def clean_metrics(metrics: dict[str, Any]) -> dict[str, float]:
    """Canonicalise keys and keep finite numeric values only."""
    cleaned: dict[str, float] = {}
    for name, raw in (metrics or {}).items():
        key = resolve_metric_key(name)
        value = usable_number(raw)
        if key is None or value is None:
            logger.debug("Skipping metric %s=%r", name, raw)
            continue
        cleaned[key] = value
    return cleaned


def result_status(key: str, value: float) -> str:
    """Map *value* onto normal / low / high for metric *key*."""
    band = BANDS[key]
    low, high = band.normal
    if value < low:
        return "low" if band.direction != "high" else "normal"
    if value > high:
        return "high" if band.direction != "low" else "normal"
    return "normal"


def build_result(key: str, value: float) -> TestResult:
    band = BANDS[key]
    status = result_status(key, value)
    commentary = _COMMENTARY[key]
    if status == "normal":
        explanation, causes, intakes = commentary["normal"], None, None
    else:
        explanation, causes, intakes = commentary[status]
    return TestResult(
        id=key,
        name=band.display_name,
        value=value,
        unit=band.unit,
        normal_range=NormalRange(min=band.normal[0], max=band.normal[1]),
        status=status,
        explanation=explanation,
        causes=list(causes) if causes else None,
        suggested_intakes=list(intakes) if intakes else None,
    )


# ---------------------------------------------------------------------------
# Step 3-4: score, risk and overall insight
# ---------------------------------------------------------------------------

def health_score(tests: list[TestResult]) -> int:
    findings = sum(1 for t in tests if t.status != "normal")
    return max(0, SCORE_CEILING - PENALTY_PER_FINDING * findings)


def risk_level(tests: list[TestResult]) -> str:
    """Severe = classifier ``critical``; minor = ``warning``."""
    severe = minor = 0
    for t in tests:
        if t.status == "normal":
            continue
        if classify(t.id, t.value) == "critical":
            severe += 1
        else:
            minor += 1

    if severe >= 2:
        return "High"
    if severe == 1 or minor >= 2:
        return "Moderate"
    return "Low"


def overall_insight(tests: list[TestResult], risk: str) -> str:
    flagged = [t for t in tests if t.status != "normal"]
    if not flagged:
        return (
            f"All {len(tests)} of your results are within healthy ranges. "
            "Keep up your current lifestyle habits and schedule routine check-ups."
        )

    names = ", ".join(f"{t.name} ({t.status})" for t in flagged)
    summary = (
        f"{len(flagged)} of your {len(tests)} results are outside the healthy range: {names}."
    )
    if risk == "Low":
        return f"{summary} These are minor deviations worth monitoring; overall your health profile looks stable."
    if risk == "Moderate":
        return f"{summary} Some of these deserve attention. Consider discussing them with your doctor."
    return f"{summary} Several results are well outside the healthy range. Please consult your doctor soon."


# ---------------------------------------------------------------------------
# Step 5: pattern insights
# ---------------------------------------------------------------------------

Statuses = dict[str, str]


def _is(statuses: Statuses, key: str, status: str) -> bool:
    return statuses.get(key) == status


def _abnormal(statuses: Statuses, key: str) -> bool:
    return key in statuses and statuses[key] != "normal"


def _lipid_high(s: Statuses) -> bool:
    return _is(s, "totalCholesterol", "high") or _is(s, "ldl", "high")


def _glucose_high(s: Statuses) -> bool:
    return _is(s, "fastingGlucose", "high") or _is(s, "postMealGlucose", "high")


PatternRule = tuple[str, str, str, str, Callable[[Statuses], bool]]

# (id, icon, title, description, predicate); evaluated in order
PATTERN_RULES: list[PatternRule] = [
    (
        "anemia_signal",
        "🔬",
        "Mild Anemia Signal",
        "Your low hemoglobin combined with normal WBC and platelets suggests a potential "
        "iron-deficiency pattern rather than a systemic issue. Consider an iron panel for "
        "further clarity.",
        lambda s: _is(s, "hemoglobin", "low") and _is(s, "wbc", "normal") and _is(s, "plateletCount", "normal"),
    ),
    (
        "blood_count_review",
        "🩸",
        "Blood Count Review",
        "Low hemoglobin together with an abnormal white-cell or platelet count points beyond "
        "a simple nutritional cause. A complete blood count review with your doctor is advised.",
        lambda s: _is(s, "hemoglobin", "low") and (_abnormal(s, "wbc") or _abnormal(s, "plateletCount")),
    ),
    (
        "dietary_lipid",
        "❤️",
        "Cardiovascular Attention",
        "Elevated cholesterol alongside normal fasting glucose suggests dietary-driven lipid "
        "changes. A balanced diet shift could normalize these values within 3–6 months.",
        lambda s: _lipid_high(s) and _is(s, "fastingGlucose", "normal"),
    ),
    (
        "metabolic_cluster",
        "⚠️",
        "Metabolic Risk Cluster",
        "High blood sugar together with elevated cholesterol is a common metabolic risk "
        "combination. Lifestyle changes and a medical review can address both together.",
        lambda s: _glucose_high(s) and _lipid_high(s),
    ),
    (
        "blood_pressure",
        "🩺",
        "Blood Pressure Watch",
        "Your blood pressure reading is above the normal range. Reduce salt, stay active and "
        "recheck it over the coming weeks.",
        lambda s: _is(s, "systolicBP", "high") or _is(s, "diastolicBP", "high"),
    ),
    (
        "metabolic_stability",
        "✅",
        "Metabolic Stability",
        "Normal fasting glucose with no elevated lipids indicates a stable metabolic profile. "
        "Continue your current lifestyle habits to maintain these healthy levels.",
        lambda s: _is(s, "fastingGlucose", "normal") and not _lipid_high(s),
    ),
]


def find_patterns(tests: list[TestResult]) -> list[PatternInsight]:
    statuses = {t.id: t.status for t in tests}
    return [
        PatternInsight(id=rule_id, title=title, description=description, icon=icon)
        for rule_id, icon, title, description, predicate in PATTERN_RULES
        if predicate(statuses)
    ]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def synthesize(
    metrics: dict[str, Any],
    patient_name: Optional[str] = None,
    report_date: Optional[str] = None,
) -> LabReport:
    """Build a LabReport from a raw metric map.  Never raises."""
    cleaned = clean_metrics(metrics)
    if not cleaned:
        logger.info("No usable metrics supplied, returning demonstration report")
        return demo_report()

    tests = [build_result(key, value) for key, value in cleaned.items()]
    risk = risk_level(tests)
    report = LabReport(
        patient_name=patient_name or DEFAULT_PATIENT_NAME,
        date=report_date or date.today().isoformat(),
        overall_insight=overall_insight(tests, risk),
        health_score=health_score(tests),
        risk_level=risk,
        tests=tests,
        patterns=find_patterns(tests),
    )
    logger.info(
        "Synthesized report: %d tests, score=%d, risk=%s, patterns=%s",
        len(tests), report.health_score, risk, [p.id for p in report.patterns],
    )
    return report
