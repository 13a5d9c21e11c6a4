"""
Priority actions, quick wins and the executive summary.

Built on top of calculator.calculate_results(). The per-action recovery rates
below are specific to each fix and differ from the blended 65% / 82%
projections of the engine.
"""
import logging

from calculator import as_record, calculate_results, normalize_inputs, parse_number
from knowledge_base import ACTION_PLAYBOOK, URGENCY_STYLES

logger = logging.getLogger(__name__)

# category: (result key, action recovery rate, minimum loss to act on)
ACTION_RULES = {
    "leadResponse": ("leadResponseLoss", 0.65, 1000),
    "selfServe": ("selfServeGap", 0.55, 500),
    "processInefficiency": ("processInefficiency", 0.75, 1000),
    "failedPayments": ("failedPaymentLoss", 0.70, 500),
}
ARR_THRESHOLD_SHARE = 0.0001

# Illustrative (recovery, loss) pairs used when no category clears its threshold
FALLBACK_AMOUNTS = {
    "leadResponse": (10000, 5000),
    "selfServe": (8000, 4000),
    "processInefficiency": (15000, 7500),
    "failedPayments": (5000, 2500),
}

CONFIDENCE_MULTIPLIERS = {"High": 1.0, "Medium": 0.8, "Low": 0.6}
MAX_ACTIONS = 4
MAX_QUICK_WINS = 2


def _loss_pct(loss, arr):
    return (loss / arr) * 100 if arr > 0 else 0


def get_confidence_level(loss, arr):
    pct = _loss_pct(loss, arr)
    if arr > 10_000_000 and pct > 5: return "High"
    if arr > 5_000_000 and pct > 3: return "High"
    if arr > 1_000_000 and pct > 2: return "Medium"
    if pct > 1: return "Medium"
    return "Low"


def get_urgency_level(loss, arr):
    pct = _loss_pct(loss, arr)
    if pct > 8: return "Critical"
    if pct > 5: return "High"
    if pct > 2: return "Medium"
    return "Low"


def urgency_config(level):
    return URGENCY_STYLES.get(level, URGENCY_STYLES["Medium"])


def create_action(category, recovery, displayed_recovery, arr, loss):
    play = ACTION_PLAYBOOK[category]
    return {
        "id": play["id"],
        "category": category,
        "title": play["title"],
        "description": play["description"],
        "impact": round((recovery / displayed_recovery) * 100) if displayed_recovery > 0 else 0,
        "effort": play["effort"],
        "timeframe": play["timeframe"],
        "recoveryAmount": recovery,
        "confidence": get_confidence_level(loss, arr),
        "urgency": get_urgency_level(loss, arr),
        "complexity": play["complexity"],
        "paybackPeriod": play["payback_period"],
        "whyItMatters": play["why_it_matters"],
        "dependencies": list(play["dependencies"]),
        "implementationSteps": list(play["steps"]),
    }


def _has_activity(record):
    """Which categories the raw submission carries data for (before defaults are applied)."""
    def positive(name):
        value = parse_number(getattr(record, name))
        return value is not None and value > 0

    return {
        "leadResponse": positive("monthly_leads") and positive("average_deal_value"),
        "selfServe": positive("monthly_free_signups"),
        "processInefficiency": positive("manual_hours") and positive("hourly_rate"),
        "failedPayments": positive("monthly_mrr") and positive("failed_payment_rate"),
    }


def calculate_priority_actions(record, results=None):
    results = results or calculate_results(record)
    record = as_record(record)
    arr = normalize_inputs(record).current_arr

    # (category, recovery, loss) for every category worth acting on
    candidates = []
    for cat, (key, rate, floor) in ACTION_RULES.items():
        loss = results[key]
        if loss > max(arr * ARR_THRESHOLD_SHARE, floor):
            candidates.append((cat, loss * rate, loss))

    if not candidates:
        activity = _has_activity(record)
        candidates = [(cat, *FALLBACK_AMOUNTS[cat]) for cat in ACTION_RULES if activity[cat]]
        if candidates:
            logger.info("No category cleared its threshold; using %d fallback actions", len(candidates))

    # Impact is the share of what is actually shown
    displayed = sum(recovery for _, recovery, _ in candidates)
    actions = [create_action(cat, recovery, displayed, arr, loss) for cat, recovery, loss in candidates]
    actions.sort(key=lambda a: a["recoveryAmount"], reverse=True)
    return actions[:MAX_ACTIONS]


def calculate_quick_wins(record, actions=None):
    actions = actions if actions is not None else calculate_priority_actions(record)
    wins = [
        {
            "action": a["title"],
            "impact": a["impact"],
            "timeframe": a["timeframe"],
            "recoveryAmount": a["recoveryAmount"],
            "confidence": a["confidence"],
            "complexity": a["complexity"],
            "whyItMatters": a["whyItMatters"],
        }
        for a in actions
        if a["effort"] == "Low" or a["timeframe"] in ("1-2 weeks", "2-4 weeks")
    ]
    return wins[:MAX_QUICK_WINS]


def calculate_total_potential_recovery(actions):
    return sum(a["recoveryAmount"] * CONFIDENCE_MULTIPLIERS.get(a["confidence"], 0.8) for a in actions)


def calculate_executive_summary(record, results=None):
    results = results or calculate_results(record)
    record = as_record(record)
    arr = normalize_inputs(record).current_arr

    total_leak = results["totalLoss"]
    realistic_recovery = results["conservativeRecovery"]
    actions = calculate_priority_actions(record, results)
    quick_wins = calculate_quick_wins(record, actions)

    leak_pct = _loss_pct(total_leak, arr)
    if leak_pct > 25:
        urgency = "Critical"
    elif leak_pct > 15:
        urgency = "High"
    elif leak_pct > 8:
        urgency = "Medium"
    else:
        urgency = "Low"

    loss_pct = results["lossPercentageOfARR"]
    confidence = "High" if loss_pct > 15 else "Medium" if loss_pct > 8 else "Low"

    if quick_wins:
        time_to_value = quick_wins[0]["timeframe"]
    elif actions:
        time_to_value = actions[0]["timeframe"]
    else:
        time_to_value = "8-12 weeks"

    if realistic_recovery > arr * 0.1:
        business_impact = "High-impact opportunity with significant revenue recovery potential"
    elif realistic_recovery > arr * 0.05:
        business_impact = "Moderate-impact opportunity with meaningful revenue improvements"
    else:
        business_impact = "Low-impact opportunity with incremental revenue gains"

    return {
        "totalLeakage": total_leak,
        "realisticRecovery": realistic_recovery,
        "priorityActions": actions,
        "quickWins": quick_wins,
        "urgencyLevel": urgency,
        "confidenceLevel": confidence,
        "timeToValue": time_to_value,
        "businessImpact": business_impact,
    }
