from dataclasses import FrozenInstanceError

import pytest

from benchmarks import (
    DEFAULT_INDUSTRY,
    INDUSTRY_PROFILES,
    compare_to_benchmarks,
    get_benchmark_profile,
    list_industries,
    normalize_industry,
    resolve_industry,
)
from calculator import analyze_submission


EXPECTED_KEYS = [
    "saas-software", "technology-it", "marketing-advertising", "financial-services",
    "consulting-professional", "ecommerce-retail", "healthcare", "manufacturing",
    "education", "other",
]


def test_ten_profiles_in_order():
    assert list(INDUSTRY_PROFILES.keys()) == EXPECTED_KEYS
    assert [i["key"] for i in list_industries()] == EXPECTED_KEYS
    assert list_industries()[0] == {"key": "saas-software", "name": "SaaS & Software"}


def test_profiles_are_read_only():
    with pytest.raises(TypeError):
        INDUSTRY_PROFILES["new"] = INDUSTRY_PROFILES["other"]
    with pytest.raises(FrozenInstanceError):
        INDUSTRY_PROFILES["other"].best_conversion_rate = 99


@pytest.mark.parametrize("text,slug", [
    ("SaaS & Software", "saas-software"),
    ("  Health   Care ", "health-care"),
    ("E-commerce", "e-commerce"),
    (None, ""),
])
def test_normalize_industry(text, slug):
    assert normalize_industry(text) == slug


@pytest.mark.parametrize("text,key", [
    ("saas-software", "saas-software"),
    ("Healthcare", "healthcare"),
    ("Manufacturing", "manufacturing"),
    ("Financial Services", "financial-services"),
    ("B2B SaaS", "saas-software"),
    ("technology", "technology-it"),
    ("Underwater Basket Weaving", "other"),
    ("", "saas-software"),
    (None, "saas-software"),
    ("   ", "saas-software"),
    ("!!!", "saas-software"),
])
def test_resolve_industry(text, key):
    assert resolve_industry(text) == key


def test_get_benchmark_profile_never_fails():
    assert get_benchmark_profile("zzz-unknown").key == DEFAULT_INDUSTRY
    assert get_benchmark_profile("Healthcare").name == "Healthcare"


def test_best_response_in_hours():
    # 15 minutes is 0.25 h and rounds half up
    assert INDUSTRY_PROFILES["saas-software"].best_lead_response_hours == 0.3
    assert INDUSTRY_PROFILES["marketing-advertising"].best_lead_response_hours == 0.2
    assert INDUSTRY_PROFILES["healthcare"].best_lead_response_hours == 4.0
    assert INDUSTRY_PROFILES["manufacturing"].best_lead_response_hours == 8.0


def test_profile_dict_views():
    saas = INDUSTRY_PROFILES["saas-software"]
    assert saas.averages()["freeToPaidConversionRate"] == 12
    assert saas.best_in_class() == {
        "leadResponseTimeMinutes": 15,
        "freeToPaidConversionRateMax": 30,
        "failedPaymentRateMin": 0.8,
        "manualHoursMin": 8,
    }


def test_best_in_class_beats_average_everywhere():
    for p in INDUSTRY_PROFILES.values():
        assert p.best_conversion_rate > p.free_to_paid_conversion_rate
        assert p.best_failed_payment_rate < p.failed_payment_rate
        assert p.best_manual_hours < p.manual_hours
        assert p.best_lead_response_minutes / 60 <= p.lead_response_time_hours


def test_compare_worked_example(worked_example):
    inputs, profile, results = analyze_submission(worked_example)
    metrics = {m["id"]: m for m in compare_to_benchmarks(inputs, results, profile)}

    assert list(metrics) == ["lead-response", "conversion-rate", "payment-failure", "process-efficiency"]

    lead = metrics["lead-response"]
    assert lead["userValue"] == 24
    assert lead["industryAvg"] == 4
    assert lead["performance"] == "below-average"
    assert lead["gapToAverage"] == 20
    assert lead["revenueOpportunity"] == pytest.approx(150_000)

    conversion = metrics["conversion-rate"]
    assert conversion["performance"] == "below-average"
    assert conversion["gapToBestInClass"] == 25
    assert conversion["strategicAdvantage"] is False

    assert metrics["payment-failure"]["performance"] == "average"

    manual = metrics["process-efficiency"]
    assert manual["performance"] == "above-average"
    assert manual["strategicAdvantage"] is True
    assert manual["gapToAverage"] == -12


def test_compare_best_in_class(worked_example):
    record = dict(worked_example, free_to_paid_conversion=25, manual_hours=8, lead_response_time=0.5)
    inputs, profile, results = analyze_submission(dict(record, industry="healthcare"))
    metrics = {m["id"]: m for m in compare_to_benchmarks(inputs, results, profile)}

    assert profile.key == "healthcare"
    assert metrics["conversion-rate"]["performance"] == "best-in-class"
    assert metrics["process-efficiency"]["performance"] == "above-average"
    assert metrics["lead-response"]["performance"] == "best-in-class"


def test_blank_industry_follows_first_profile(worked_example):
    blank = dict(worked_example, industry="")
    inputs, profile, results = analyze_submission(blank)
    assert profile.key == "saas-software"
    assert results == analyze_submission(dict(worked_example, industry="saas-software"))[2]


def test_blank_industry_with_injected_profiles():
    profiles = {"healthcare": INDUSTRY_PROFILES["healthcare"], "other": INDUSTRY_PROFILES["other"]}
    assert resolve_industry(None, profiles) == "healthcare"
