"""
Demonstration Report

The fixed report shown when no metrics are available.  ``demo_report()``
returns a fresh deep copy on every call.
"""

from labassist.models.schemas import LabReport, NormalRange, PatternInsight, TestResult

_DEMO_REPORT = LabReport(
    patient_name="Demo Patient",
    date="2026-02-27",
    overall_insight=(
        "Your results are mostly within healthy ranges. A few markers show minor deviations "
        "that are worth monitoring. Your hemoglobin is slightly below normal range, and your "
        "cholesterol levels could benefit from dietary adjustments. Overall, your health "
        "profile looks stable."
    ),
    health_score=82,
    risk_level="Low",
    tests=[
        TestResult(
            id="hemoglobin",
            name="Hemoglobin (Hb)",
            value=11.8,
            unit="g/dL",
            normal_range=NormalRange(min=12.0, max=15.5),
            status="low",
            explanation=(
                "Your hemoglobin is slightly below the normal range (12.0–15.5 g/dL for women). "
                "This could indicate mild iron-deficiency anemia. Consider increasing iron-rich "
                "foods like spinach, lentils, and red meat, paired with vitamin C for better "
                "absorption. A follow-up test in 3 months is recommended."
            ),
            causes=[
                "Inadequate dietary iron intake",
                "Vitamin B12 or folate deficiency",
            ],
            suggested_intakes=[
                "Iron supplements (consult healthcare provider)",
                "Spinach, red meat, and lentils",
                "Vitamin C-rich foods (citrus fruits) to boost iron absorption",
            ],
        ),
        TestResult(
            id="wbc",
            name="White Blood Cells (WBC)",
            value=7.2,
            unit="×10³/µL",
            normal_range=NormalRange(min=4.5, max=11.0),
            status="normal",
            explanation=(
                "Your white blood cell count is well within the normal range, indicating a "
                "healthy immune system with no signs of infection or immune disorder."
            ),
        ),
        TestResult(
            id="platelets",
            name="Platelet Count",
            value=250,
            unit="×10³/µL",
            normal_range=NormalRange(min=150, max=400),
            status="normal",
            explanation=(
                "Your platelet count is normal, indicating healthy blood clotting ability. "
                "No concerns here."
            ),
        ),
        TestResult(
            id="glucose",
            name="Fasting Blood Glucose",
            value=95,
            unit="mg/dL",
            normal_range=NormalRange(min=70, max=100),
            status="normal",
            explanation=(
                "Your fasting glucose is within the normal range. Continue maintaining a "
                "balanced diet and regular exercise for optimal blood sugar management."
            ),
        ),
        TestResult(
            id="cholesterol",
            name="Total Cholesterol",
            value=215,
            unit="mg/dL",
            normal_range=NormalRange(min=125, max=200),
            status="high",
            explanation=(
                "Your total cholesterol is in the borderline high range (200–239 mg/dL). "
                "Desirable levels are below 200 mg/dL. Consider reducing saturated fats and "
                "trans fats, increasing fiber intake, and adding regular cardiovascular "
                "exercise. A follow-up lipid panel in 6 months is advised."
            ),
            causes=[
                "Diet high in saturated and trans fats",
                "Lack of regular cardiovascular exercise",
                "Genetics / family history",
            ],
            suggested_intakes=[
                "Omega-3 fatty acids (flaxseeds, salmon, walnuts)",
                "Soluble fiber (oats, beans, apples)",
            ],
        ),
        TestResult(
            id="hdl",
            name="HDL Cholesterol",
            value=55,
            unit="mg/dL",
            normal_range=NormalRange(min=40, max=80),
            status="normal",
            explanation=(
                'Your HDL ("good") cholesterol is in a healthy range. Levels above 60 mg/dL '
                "are considered protective against heart disease. Aim to push it higher "
                "through regular aerobic exercise and healthy fats (avocado, olive oil, nuts)."
            ),
        ),
        TestResult(
            id="ldl",
            name="LDL Cholesterol",
            value=138,
            unit="mg/dL",
            normal_range=NormalRange(min=50, max=100),
            status="high",
            explanation=(
                'Your LDL ("bad") cholesterol is in the borderline high range (130–159 mg/dL). '
                "Optimal LDL is below 100 mg/dL. Reducing processed foods, saturated fats, and "
                "adding omega-3 fatty acids (salmon, flaxseeds, walnuts) can help bring this "
                "down within a few months."
            ),
            causes=[
                "High consumption of processed and fried foods",
                "Low physical activity",
            ],
            suggested_intakes=[
                "Plant sterols / stanols (found in fortified foods)",
                "Almonds and other unsalted nuts",
            ],
        ),
        TestResult(
            id="tsh",
            name="Thyroid (TSH)",
            value=2.8,
            unit="mIU/L",
            normal_range=NormalRange(min=0.4, max=4.0),
            status="normal",
            explanation=(
                "Your thyroid-stimulating hormone level is within the normal range, indicating "
                "proper thyroid function. No action needed."
            ),
        ),
    ],
    patterns=[
        PatternInsight(
            id="p1",
            title="Mild Anemia Signal",
            description=(
                "Your low hemoglobin combined with normal WBC and platelets suggests a potential "
                "iron-deficiency pattern rather than a systemic issue. Consider an iron panel "
                "for further clarity."
            ),
            icon="🔬",
        ),
        PatternInsight(
            id="p2",
            title="Cardiovascular Attention",
            description=(
                "Elevated total cholesterol and LDL alongside normal HDL suggests dietary-driven "
                "lipid changes. A balanced diet shift could normalize these values within "
                "3–6 months."
            ),
            icon="❤️",
        ),
        PatternInsight(
            id="p3",
            title="Metabolic Stability",
            description=(
                "Normal fasting glucose and TSH indicate a stable metabolic profile. Continue "
                "your current lifestyle habits to maintain these healthy levels."
            ),
            icon="✅",
        ),
    ],
)


def demo_report() -> LabReport:
    """Return a private copy of the demonstration report."""
    return _DEMO_REPORT.model_copy(deep=True)
