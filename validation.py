"""
Sanity checks on a finished calculation.

Nothing here changes the numbers; it flags inputs that look inconsistent
and grades how much the estimate can be trusted. Checks run on the uncapped
estimates, since the capped figures stay within their ARR ceilings by construction.
"""
from benchmarks import INDUSTRY_PROFILES
from calculator import LOSS_CAPS, TOTAL_LOSS_CAP, estimate_losses, normalize_inputs


def _check():
    return {"isValid": True, "warnings": [], "adjustedValue": None}


def _revenue_base(inputs):
    """ARR when on file, otherwise annualized MRR."""
    if inputs.current_arr > 0:
        return inputs.current_arr
    return inputs.monthly_mrr * 12


def _check_category(check, label, raw_loss, category, arr):
    ceiling = arr * LOSS_CAPS[category]
    if raw_loss > ceiling:
        check["warnings"].append(f"{label} limited to {LOSS_CAPS[category]:.0%} of ARR")
        check["adjustedValue"] = ceiling
    if raw_loss > arr:
        check["isValid"] = False
        check["warnings"].append(f"{label} estimate exceeds current ARR - verify inputs")


def validate_results(results, record, profiles=INDUSTRY_PROFILES):
    inputs = normalize_inputs(record)
    arr = inputs.current_arr
    raw = estimate_losses(inputs, profiles[results["industry"]])
    uncapped_total = results["uncappedLoss"]

    lead = _check()
    self_serve = _check()
    recovery = _check()

    if arr > 0:
        _check_category(lead, "Lead response loss", raw["leadResponse"], "leadResponse", arr)

        annual_lead_potential = inputs.monthly_leads * inputs.average_deal_value * 12
        if annual_lead_potential > arr * 10:
            lead["warnings"].append("Lead potential significantly exceeds current ARR - verify inputs")

        _check_category(self_serve, "Self-serve gap", raw["selfServe"], "selfServe", arr)

        if inputs.monthly_mrr > 0 and abs(inputs.monthly_mrr * 12 - arr) > arr * 0.5:
            self_serve["warnings"].append("MRR and ARR values appear inconsistent - verify inputs")

        if uncapped_total > arr * 1.5:
            recovery["warnings"].append(
                f"Total revenue leak exceeds 150% of ARR - capped at {TOTAL_LOSS_CAP:.0%} of ARR")
            recovery["adjustedValue"] = results["totalLoss"]
    elif uncapped_total > 0:
        recovery["warnings"].append("No ARR on file - loss estimates are not capped")
        annual_mrr = inputs.monthly_mrr * 12
        if annual_mrr > 0 and uncapped_total > annual_mrr:
            recovery["isValid"] = False
            recovery["warnings"].append("Total revenue leak exceeds annualized MRR - verify inputs")

    overall = {
        "isValid": lead["isValid"] and self_serve["isValid"] and recovery["isValid"],
        "warnings": lead["warnings"] + self_serve["warnings"] + recovery["warnings"],
        "adjustedValue": None,
    }
    return {"leadResponse": lead, "selfServe": self_serve, "recovery": recovery, "overall": overall}


def calculation_confidence(record, results):
    """Scores data quality into high / medium / low with the reasons behind it."""
    inputs = normalize_inputs(record)
    arr = inputs.current_arr
    score = 0
    factors = []

    if arr > 5_000_000:
        score += 3
        factors.append("Large company size increases confidence")
    elif arr > 1_000_000:
        score += 2
        factors.append("Mid-market size provides good confidence")
    elif arr > 100_000:
        score += 1
        factors.append("SMB size has moderate confidence")
    else:
        factors.append("Small company size limits confidence")

    if inputs.monthly_leads > 1000:
        score += 2
        factors.append("High lead volume increases accuracy")
    elif inputs.monthly_leads > 200:
        score += 1
        factors.append("Moderate lead volume")
    else:
        factors.append("Low lead volume limits accuracy")

    if inputs.monthly_free_signups > 2000:
        score += 2
        factors.append("High signup volume increases accuracy")
    elif inputs.monthly_free_signups > 500:
        score += 1
        factors.append("Moderate signup volume")
    else:
        factors.append("Low signup volume limits accuracy")

    base = _revenue_base(inputs)
    leak_ratio = results["uncappedLoss"] / base if base > 0 else 0
    if leak_ratio > 3:
        score -= 3
        factors.append("Total leak vs revenue ratio seems very high")
    elif leak_ratio > 1.5:
        score -= 2
        factors.append("Total leak vs revenue ratio seems high")
    elif leak_ratio > 0.8:
        score -= 1
        factors.append("Total leak vs revenue ratio is elevated")

    if inputs.monthly_mrr > 0 and arr > 0:
        if abs(inputs.monthly_mrr * 12 - arr) / arr > 0.5:
            score -= 2
            factors.append("MRR and ARR values appear inconsistent")

    if arr > 0 and inputs.monthly_leads * inputs.average_deal_value * 12 > arr * 5:
        score -= 1
        factors.append("Deal size vs current performance seems optimistic")

    if score >= 6:
        level = "high"
    elif score >= 3:
        level = "medium"
    else:
        level = "low"

    return {"level": level, "score": score, "factors": factors}
