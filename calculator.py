"""
Revenue leakage engine.

Turns a submission (ARR, leads, response time, conversion, payments, manual work)
into four annual loss estimates, caps them against ARR, and projects recovery.
Pure and deterministic: no state between calls, the benchmark table is read-only.

  Lead response:   leads x 2.5% baseline conversion x delay penalty x deal value x 12
  Failed payments: MRR x failure rate x 12 x 70% unrecovered
  Self-serve gap:  signups x (best-in-class conversion - current) x customer value x 12
  Process:         manual hours x hourly rate x 52
"""
import logging
import math
import re
from collections import namedtuple
from dataclasses import dataclass, fields
from typing import Any, Optional

from benchmarks import INDUSTRY_PROFILES, resolve_industry

logger = logging.getLogger(__name__)


@dataclass
class SubmissionRecord:
    """One calculator submission. Numeric fields are untrusted: None, negative or absurd values are allowed."""
    company_name: str = ""
    contact_email: str = ""
    industry: Optional[str] = None
    current_arr: Any = None              # $ / year
    monthly_leads: Any = None
    average_deal_value: Any = None       # $
    lead_response_time: Any = None       # hours
    monthly_free_signups: Any = None
    free_to_paid_conversion: Any = None  # %
    monthly_mrr: Any = None              # $ / month
    failed_payment_rate: Any = None      # %
    manual_hours: Any = None             # hours / week
    hourly_rate: Any = None              # $ / hour

    @classmethod
    def from_mapping(cls, data):
        """Builds a record from a form/JSON payload, ignoring unknown keys."""
        data = data or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


# --- INPUT RULES: field -> (floor, ceiling, default when absent) ---
INPUT_RULES = {
    "current_arr":             (0, None, 0),
    "monthly_leads":           (0, None, 0),
    "average_deal_value":      (1000, None, 5000),
    "lead_response_time":      (0.5, 168, 24),
    "monthly_free_signups":    (0, None, 0),
    "free_to_paid_conversion": (0, 25, 2),
    "monthly_mrr":             (0, None, 0),
    "failed_payment_rate":     (0, 30, 5),
    "manual_hours":            (0, 80, 10),
    "hourly_rate":             (25, 500, 75),
}

NormalizedInputs = namedtuple("NormalizedInputs", list(INPUT_RULES.keys()))

# --- MODEL CONSTANTS ---
BASELINE_LEAD_CONVERSION = 0.025
# (max response hours, share of converting leads lost)
RESPONSE_DELAY_PENALTIES = [(1, 0.0), (2, 0.15), (4, 0.30), (8, 0.50), (24, 0.70)]
SLOW_RESPONSE_PENALTY = 0.85
UNRECOVERED_PAYMENT_SHARE = 0.70
SELF_SERVE_VALUE_CAP_SHARE = 0.60
FALLBACK_VALUE_SHARE = 0.40
FALLBACK_VALUE_CEILING = 8000
WEEKS_PER_YEAR = 52

# Maximum share of ARR per category, and for the total
LOSS_CAPS = {
    "leadResponse": 0.15,
    "failedPayments": 0.08,
    "selfServe": 0.12,
    "processInefficiency": 0.06,
}
TOTAL_LOSS_CAP = 0.35

CONSERVATIVE_RECOVERY_RATE = 0.65
OPTIMISTIC_RECOVERY_RATE = 0.82

# category, title, chart color
BREAKDOWN_CATEGORIES = [
    ("leadResponse", "Lead Response Loss", "#DC2626"),
    ("failedPayments", "Failed Payment Loss", "#F59E0B"),
    ("selfServe", "Self-Serve Gap", "#2563EB"),
    ("processInefficiency", "Process Inefficiency", "#64748B"),
]


# --- INPUT NORMALIZER ---
def parse_number(value):
    """Parses numbers and numeric strings ('$1,200'). Returns None for anything absent or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = re.sub(r"[,$\s%]", "", value)
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def clamp(value, floor, ceiling=None):
    value = max(floor, value)
    if ceiling is not None:
        value = min(ceiling, value)
    return value


def as_record(record):
    """Accepts a SubmissionRecord, a plain mapping, or None."""
    if record is None:
        return SubmissionRecord()
    if isinstance(record, SubmissionRecord):
        return record
    return SubmissionRecord.from_mapping(record)


def normalize_inputs(record):
    record = as_record(record)
    values = {}
    for name, (floor, ceiling, default) in INPUT_RULES.items():
        number = parse_number(getattr(record, name))
        values[name] = clamp(default if number is None else number, floor, ceiling)
    return NormalizedInputs(**values)


# --- LOSS ESTIMATORS ---
def lead_response_penalty(hours):
    for max_hours, penalty in RESPONSE_DELAY_PENALTIES:
        if hours <= max_hours:
            return penalty
    return SLOW_RESPONSE_PENALTY


def lead_response_loss(inputs):
    lost_conversions = inputs.monthly_leads * BASELINE_LEAD_CONVERSION * lead_response_penalty(inputs.lead_response_time)
    return lost_conversions * inputs.average_deal_value * 12


def failed_payment_loss(inputs):
    return inputs.monthly_mrr * (inputs.failed_payment_rate / 100) * 12 * UNRECOVERED_PAYMENT_SHARE


def self_serve_customer_value(inputs):
    """Monthly value of one extra paying customer."""
    current_conversions = inputs.monthly_free_signups * (inputs.free_to_paid_conversion / 100)
    if inputs.monthly_mrr > 0 and current_conversions > 0:
        return min(inputs.monthly_mrr / current_conversions,
                   inputs.average_deal_value * SELF_SERVE_VALUE_CAP_SHARE)
    return min(inputs.average_deal_value * FALLBACK_VALUE_SHARE, FALLBACK_VALUE_CEILING)


def self_serve_gap_loss(inputs, profile):
    gap = max(0, profile.best_conversion_rate - inputs.free_to_paid_conversion)
    additional_conversions = inputs.monthly_free_signups * (gap / 100)
    return additional_conversions * self_serve_customer_value(inputs) * 12


def process_inefficiency_loss(inputs):
    return inputs.manual_hours * inputs.hourly_rate * WEEKS_PER_YEAR


def estimate_losses(inputs, profile):
    """Uncapped annual loss per category."""
    return {
        "leadResponse": lead_response_loss(inputs),
        "failedPayments": failed_payment_loss(inputs),
        "selfServe": self_serve_gap_loss(inputs, profile),
        "processInefficiency": process_inefficiency_loss(inputs),
    }


# --- CAPPING & AGGREGATION ---
def apply_caps(losses, current_arr):
    """
    Caps each category at its share of ARR, then the total at 35% of ARR.
    With no ARR on file nothing is capped.
    Returns (capped_losses, total_loss).
    """
    if current_arr <= 0:
        capped = dict(losses)
        return capped, sum(capped.values())

    capped = {cat: min(amount, current_arr * LOSS_CAPS[cat]) for cat, amount in losses.items()}
    total = min(sum(capped.values()), current_arr * TOTAL_LOSS_CAP)
    return capped, total


# --- RECOVERY PROJECTOR ---
def project_recovery(total_loss):
    return total_loss * CONSERVATIVE_RECOVERY_RATE, total_loss * OPTIMISTIC_RECOVERY_RATE


def _pct(part, whole):
    return (part / whole) * 100 if whole > 0 else 0


def build_breakdown(capped, total_loss):
    breakdown = [
        {
            "category": cat,
            "title": title,
            "amount": capped[cat],
            "percentage": _pct(capped[cat], total_loss),
            "color": color,
        }
        for cat, title, color in BREAKDOWN_CATEGORIES
    ]
    breakdown.sort(key=lambda item: item["amount"], reverse=True)
    return breakdown


def calculate_results(record, profiles=INDUSTRY_PROFILES):
    """
    Main entry point.
    1. Normalize the raw submission.
    2. Resolve the industry benchmark profile.
    3. Estimate the four category losses.
    4. Cap against ARR and aggregate.
    5. Project recovery and build the report.
    With no record at all every figure is zero.
    """
    no_record = record is None
    record = as_record(record)
    inputs = normalize_inputs(record)
    industry_key = resolve_industry(record.industry, profiles)
    profile = profiles[industry_key]

    if no_record:
        raw = {cat: 0.0 for cat in LOSS_CAPS}
    else:
        raw = estimate_losses(inputs, profile)
    capped, total_loss = apply_caps(raw, inputs.current_arr)
    conservative, optimistic = project_recovery(total_loss)

    logger.debug("inputs=%s industry=%s raw=%s capped=%s total=%.2f", inputs, industry_key, raw, capped, total_loss)

    return {
        "industry": industry_key,
        "leadResponseLoss": capped["leadResponse"],
        "failedPaymentLoss": capped["failedPayments"],
        "selfServeGap": capped["selfServe"],
        "processInefficiency": capped["processInefficiency"],
        "totalLoss": total_loss,
        "uncappedLoss": sum(raw.values()),
        "conservativeRecovery": conservative,
        "optimisticRecovery": optimistic,
        "lossPercentageOfARR": _pct(total_loss, inputs.current_arr),
        "recoveryPercentageOfLoss": _pct(conservative, total_loss),
        "lossBreakdown": build_breakdown(capped, total_loss),
        "performanceMetrics": {
            "currentARR": inputs.current_arr,
            "secureRevenue": max(0, inputs.current_arr - total_loss),
            "revenueAtRisk": total_loss,
            "industryAverageRecovery": conservative,
            "bestInClassRecovery": optimistic,
        },
    }


def analyze_submission(record, profiles=INDUSTRY_PROFILES):
    """Runs the engine and returns (inputs, profile, results) for callers that also need the normalized view."""
    results = calculate_results(record, profiles)
    return normalize_inputs(record), profiles[results["industry"]], results


# --- FORMATTING ---
def format_currency(amount, compact=None):
    """
    US-dollar string with no cents. Compact ('$1.2M') kicks in at $1M unless compact is given.
    Non-finite or non-numeric input renders '$0'.
    """
    try:
        val = float(amount)
    except (TypeError, ValueError, OverflowError):
        return "$0"
    if not math.isfinite(val):
        return "$0"

    if compact is None:
        compact = val >= 1_000_000

    sign = "-" if val < 0 else ""
    val = abs(val)
    if compact and val >= 1_000:
        units = [(1e3, "K"), (1e6, "M"), (1e9, "B"), (1e12, "T")]
        for i, (divisor, suffix) in enumerate(units):
            scaled = round(val / divisor, 1)
            # 999,960 rounds to 1000.0K; roll over to the next unit
            if scaled < 1000 or i == len(units) - 1:
                short = f"{scaled:.1f}".rstrip("0").rstrip(".")
                return f"{sign}${short}{suffix}"
    return f"{sign}${val:,.0f}"
