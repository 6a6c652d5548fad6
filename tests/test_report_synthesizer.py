"""Tests for synthesize(): statuses, score, risk, insight text and patterns."""

import math

import pytest

from labassist.core.demo_report import demo_report
from labassist.core.report_synthesizer import (
    clean_metrics,
    health_score,
    result_status,
    synthesize,
)


def _pattern_ids(report):
    return [p.id for p in report.patterns]


# ── Demo fallback ────────────────────────────────────────────────────────
@pytest.mark.parametrize("metrics", [
    {},
    {"tsh": 2.8},
    {"hemoglobin": "n/a"},
    {"hemoglobin": None, "ldl": True},
    {"hemoglobin": math.nan, "ldl": math.inf},
])
def test_no_usable_metrics_returns_demo_report(metrics):
    report = synthesize(metrics)
    assert report == demo_report()
    assert report.patient_name == "Demo Patient"
    assert report.date == "2026-02-27"
    assert report.health_score == 82
    assert report.risk_level == "Low"
    assert len(report.tests) == 8
    assert len(report.patterns) == 3


def test_demo_report_is_stable_and_not_shared():
    first = synthesize({})
    first.tests[0].value = 99
    first.patterns.clear()

    second = synthesize({})
    assert second.tests[0].value == 11.8
    assert len(second.patterns) == 3
    assert second.model_dump_json() == demo_report().model_dump_json()


# ── Test results ─────────────────────────────────────────────────────────
def test_single_low_hemoglobin():
    report = synthesize({"hemoglobin": 11.8})

    assert len(report.tests) == 1
    test = report.tests[0]
    assert test.id == "hemoglobin"
    assert test.status == "low"
    assert test.unit == "g/dL"
    assert test.normal_range.min == 12 and test.normal_range.max == 17
    assert test.causes and test.suggested_intakes
    assert "Hemoglobin" in report.overall_insight
    # no WBC / platelets -> no anemia-signal pattern
    assert "anemia_signal" not in _pattern_ids(report)


def test_unknown_and_non_numeric_metrics_are_ignored():
    report = synthesize({"hemoglobin": 13, "tsh": 2.8, "ldl": "high", "wbc": False})
    assert [t.id for t in report.tests] == ["hemoglobin"]


def test_alias_keys_are_canonicalized():
    report = synthesize({"glucose": 95, "Platelets": 250000})
    assert sorted(t.id for t in report.tests) == ["fastingGlucose", "plateletCount"]


@pytest.mark.parametrize("key, value, expected", [
    ("fastingGlucose", 60, "low"),
    ("fastingGlucose", 130, "high"),
    ("hemoglobin", 18, "high"),
    ("hdl", 30, "low"),
    ("hdl", 250, "normal"),
    ("ldl", 190, "high"),
    ("totalCholesterol", 260, "high"),
    ("heartRate", 45, "low"),
])
def test_result_status_direction(key: str, value: float, expected: str):
    assert result_status(key, value) == expected


def test_normal_results_carry_no_causes():
    report = synthesize({"wbc": 7000})
    assert report.tests[0].status == "normal"
    assert report.tests[0].causes is None
    assert report.tests[0].suggested_intakes is None


def test_clean_metrics_keeps_finite_numbers_only():
    assert clean_metrics({"hb": 12, "ldl": "x", "rbc": math.nan, "wbc": 5000.5}) == {
        "hemoglobin": 12.0,
        "wbc": 5000.5,
    }


# ── Score and risk ───────────────────────────────────────────────────────
def test_all_normal_scores_full_marks():
    report = synthesize({"hemoglobin": 14, "fastingGlucose": 90, "ldl": 80})
    assert report.health_score == 100
    assert report.risk_level == "Low"
    assert "within healthy ranges" in report.overall_insight


def test_score_deducts_per_finding():
    report = synthesize({"hemoglobin": 11, "ldl": 130, "fastingGlucose": 90})
    assert report.health_score == 88


def test_score_is_floored_at_zero():
    tests = synthesize({"hemoglobin": 5}).tests * 20
    assert health_score(tests) == 0


@pytest.mark.parametrize("metrics, expected", [
    ({"hemoglobin": 11.5}, "Low"),                          # one minor
    ({"hemoglobin": 11.5, "ldl": 130}, "Moderate"),         # two minor
    ({"hemoglobin": 8}, "Moderate"),                        # one severe
    ({"hemoglobin": 8, "ldl": 200}, "High"),                # two severe
    ({"hdl": 250, "hemoglobin": 14}, "Low"),                # non-flagged side of HDL
])
def test_risk_level(metrics, expected):
    assert synthesize(metrics).risk_level == expected


def test_synthesis_is_deterministic():
    metrics = {"hemoglobin": 11.8, "wbc": 7200, "plateletCount": 250000, "ldl": 138}
    first, second = synthesize(metrics, report_date="2026-01-01"), synthesize(metrics, report_date="2026-01-01")
    assert first == second


def test_patient_name_and_date_defaults_and_overrides():
    report = synthesize({"hemoglobin": 13})
    assert report.patient_name == "You"
    assert len(report.date) == 10

    named = synthesize({"hemoglobin": 13}, patient_name="Asha", report_date="2026-03-01")
    assert named.patient_name == "Asha"
    assert named.date == "2026-03-01"


# ── Patterns ─────────────────────────────────────────────────────────────
def test_anemia_signal_needs_normal_wbc_and_platelets():
    report = synthesize({"hemoglobin": 11.8, "wbc": 7200, "plateletCount": 250000})
    assert _pattern_ids(report) == ["anemia_signal"]
    assert report.patterns[0].icon == "🔬"


def test_blood_count_review_when_other_counts_abnormal():
    report = synthesize({"hemoglobin": 11.8, "wbc": 2500, "plateletCount": 250000})
    assert _pattern_ids(report) == ["blood_count_review"]


def test_dietary_lipid_and_stability_are_exclusive():
    lipid = synthesize({"totalCholesterol": 215, "fastingGlucose": 95})
    assert _pattern_ids(lipid) == ["dietary_lipid"]

    stable = synthesize({"totalCholesterol": 180, "fastingGlucose": 95})
    assert _pattern_ids(stable) == ["metabolic_stability"]


def test_metabolic_cluster_and_blood_pressure():
    report = synthesize({"postMealGlucose": 180, "ldl": 140, "systolicBP": 135})
    assert _pattern_ids(report) == ["metabolic_cluster", "blood_pressure"]


def test_no_patterns_without_matching_metrics():
    assert synthesize({"rbc": 5.0}).patterns == []
