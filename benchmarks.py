# benchmarks.py
import math
import re
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class IndustryBenchmarkProfile:
    key: str
    name: str
    # Industry averages
    monthly_leads: float
    average_deal_value: float
    lead_response_time_hours: float
    monthly_free_signups: float
    free_to_paid_conversion_rate: float
    monthly_mrr: float
    failed_payment_rate: float
    manual_hours: float
    hourly_rate: float
    # Best-in-class targets (top 5% performers)
    best_lead_response_minutes: float
    best_conversion_rate: float
    best_failed_payment_rate: float
    best_manual_hours: float

    @property
    def best_lead_response_hours(self):
        # half-up to one decimal: 15 minutes reads 0.3 h
        return math.floor(self.best_lead_response_minutes / 60 * 10 + 0.5) / 10

    def averages(self):
        return {
            "monthlyLeads": self.monthly_leads,
            "averageDealValue": self.average_deal_value,
            "leadResponseTimeHours": self.lead_response_time_hours,
            "monthlyFreeSignups": self.monthly_free_signups,
            "freeToPaidConversionRate": self.free_to_paid_conversion_rate,
            "monthlyMRR": self.monthly_mrr,
            "failedPaymentRate": self.failed_payment_rate,
            "manualHours": self.manual_hours,
            "hourlyRate": self.hourly_rate,
        }

    def best_in_class(self):
        return {
            "leadResponseTimeMinutes": self.best_lead_response_minutes,
            "freeToPaidConversionRateMax": self.best_conversion_rate,
            "failedPaymentRateMin": self.best_failed_payment_rate,
            "manualHoursMin": self.best_manual_hours,
        }


DEFAULT_INDUSTRY = "other"


def normalize_industry(industry_input):
    """Lowercase, drop punctuation, and hyphenate whitespace: 'SaaS & Software' -> 'saas-software'."""
    text = str(industry_input or "").lower()
    text = re.sub(r"[^a-z0-9\s-]", "", text).strip()
    return re.sub(r"\s+", "-", text)


def resolve_industry(industry_input, profiles=None):
    """
    Maps free text to a profile key. Never fails.
    1. Exact slug match.
    2. Substring match in either direction. An empty candidate is a substring
       of every key, so blank input lands on the first profile.
    3. Anything mentioning 'saas' goes to saas-software.
    4. Fallback to 'other'.
    """
    profiles = INDUSTRY_PROFILES if profiles is None else profiles
    candidate = normalize_industry(industry_input)
    if candidate in profiles:
        return candidate

    for key in profiles.keys():
        if key in candidate or candidate in key:
            return key

    if "saas" in candidate and "saas-software" in profiles:
        return "saas-software"

    return DEFAULT_INDUSTRY


def get_benchmark_profile(industry_input, profiles=None):
    """Main entry point. Returns the IndustryBenchmarkProfile for any industry text."""
    profiles = INDUSTRY_PROFILES if profiles is None else profiles
    return profiles[resolve_industry(industry_input, profiles)]


def list_industries(profiles=None):
    profiles = INDUSTRY_PROFILES if profiles is None else profiles
    return [{"key": p.key, "name": p.name} for p in profiles.values()]


# --- PERFORMANCE TIERS ---
def _rate_performance(user_value, industry_avg, best, higher_is_better):
    if higher_is_better:
        if user_value >= best:
            return "best-in-class"
        if user_value >= industry_avg * 1.2:
            return "above-average"
        if user_value >= industry_avg * 0.8:
            return "average"
        return "below-average"

    if user_value <= best:
        return "best-in-class"
    if user_value <= industry_avg * 0.8:
        return "above-average"
    if user_value <= industry_avg * 1.2:
        return "average"
    return "below-average"


def compare_to_benchmarks(inputs, results, profile):
    """
    Scores the four operational metrics against the industry average and best-in-class.

    inputs: calculator.NormalizedInputs for the submission
    results: output of calculator.calculate_results()
    profile: the resolved IndustryBenchmarkProfile
    """
    metrics = [
        {
            "id": "lead-response", "title": "Lead Response Time", "unit": "hours",
            "userValue": inputs.lead_response_time,
            "industryAvg": profile.lead_response_time_hours,
            "bestInClass": profile.best_lead_response_hours,
            "higherIsBetter": False,
            "revenueOpportunity": results["leadResponseLoss"],
        },
        {
            "id": "conversion-rate", "title": "Self-Serve Conversion Rate", "unit": "%",
            "userValue": inputs.free_to_paid_conversion,
            "industryAvg": profile.free_to_paid_conversion_rate,
            "bestInClass": profile.best_conversion_rate,
            "higherIsBetter": True,
            "revenueOpportunity": results["selfServeGap"],
        },
        {
            "id": "payment-failure", "title": "Failed Payment Rate", "unit": "%",
            "userValue": inputs.failed_payment_rate,
            "industryAvg": profile.failed_payment_rate,
            "bestInClass": profile.best_failed_payment_rate,
            "higherIsBetter": False,
            "revenueOpportunity": results["failedPaymentLoss"],
        },
        {
            "id": "process-efficiency", "title": "Manual Hours per Week", "unit": "hours",
            "userValue": inputs.manual_hours,
            "industryAvg": profile.manual_hours,
            "bestInClass": profile.best_manual_hours,
            "higherIsBetter": False,
            "revenueOpportunity": results["processInefficiency"],
        },
    ]

    for m in metrics:
        m["performance"] = _rate_performance(m["userValue"], m["industryAvg"], m["bestInClass"], m["higherIsBetter"])
        m["strategicAdvantage"] = m["performance"] in ("best-in-class", "above-average")
        if m["higherIsBetter"]:
            m["gapToAverage"] = m["industryAvg"] - m["userValue"]
            m["gapToBestInClass"] = m["bestInClass"] - m["userValue"]
        else:
            m["gapToAverage"] = m["userValue"] - m["industryAvg"]
            m["gapToBestInClass"] = m["userValue"] - m["bestInClass"]

    return metrics


# --- DATASET (Industry averages + best-in-class targets) ---
def _profile(key, name, avg, best):
    return IndustryBenchmarkProfile(key, name, *avg, *best)


# avg:  leads, deal value, response hrs, free signups, conversion %, MRR, failed payment %, manual hrs, hourly rate
# best: response minutes, conversion ceiling %, failed payment floor %, manual hours floor
_PROFILES = [
    _profile("saas-software", "SaaS & Software",
             (850, 12000, 4, 2400, 12, 85000, 4.2, 32, 85), (15, 30, 0.8, 8)),
    _profile("technology-it", "Technology & IT",
             (650, 18000, 6, 1800, 8, 120000, 3.8, 28, 95), (30, 25, 0.5, 6)),
    _profile("marketing-advertising", "Marketing & Advertising",
             (1200, 6500, 2, 3500, 15, 45000, 5.1, 40, 75), (10, 35, 1.2, 12)),
    _profile("financial-services", "Financial Services",
             (420, 35000, 8, 800, 6, 180000, 2.8, 25, 125), (60, 20, 0.3, 5)),
    _profile("consulting-professional", "Consulting & Professional Services",
             (320, 45000, 12, 600, 5, 220000, 3.2, 35, 150), (120, 18, 0.4, 8)),
    _profile("ecommerce-retail", "E-commerce & Retail",
             (2800, 2500, 1, 8500, 18, 28000, 6.8, 45, 55), (5, 40, 1.5, 15)),
    _profile("healthcare", "Healthcare",
             (280, 28000, 24, 450, 4, 150000, 2.1, 30, 110), (240, 15, 0.2, 6)),
    _profile("manufacturing", "Manufacturing",
             (180, 85000, 48, 200, 3, 380000, 1.8, 22, 95), (480, 12, 0.1, 4)),
    _profile("education", "Education",
             (950, 8500, 6, 4200, 14, 65000, 4.5, 38, 65), (20, 28, 1.0, 10)),
    _profile("other", "Other",
             (600, 15000, 6, 1500, 10, 75000, 4.0, 35, 85), (30, 25, 0.8, 8)),
]

INDUSTRY_PROFILES = MappingProxyType({p.key: p for p in _PROFILES})
