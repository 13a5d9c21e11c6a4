from benchmarks import normalize_industry
from calculator import as_record, normalize_inputs

# (keywords, points) checked in order; first hit wins
INDUSTRY_POINTS = [
    (("saas", "software"), 12),
    (("marketing", "advertising"), 9),
    (("technology", "tech"), 8),
    (("finance", "financial"), 8),
    (("consulting", "professional"), 7),
    (("healthcare",), 6),
    (("ecommerce", "retail"), 6),
    (("manufacturing",), 5),
    (("education",), 5),
]
OTHER_INDUSTRY_POINTS = 4


def _arr_points(arr):
    if arr >= 5_000_000: return 50
    if arr >= 1_000_000: return 40
    if arr >= 500_000: return 30
    return 20


def _leak_points(total_loss):
    if total_loss >= 1_000_000: return 40
    if total_loss >= 500_000: return 30
    if total_loss >= 250_000: return 20
    return 10


def _industry_points(industry):
    slug = normalize_industry(industry)
    for keywords, points in INDUSTRY_POINTS:
        if any(k in slug for k in keywords):
            return points
    return OTHER_INDUSTRY_POINTS


def calculate_lead_score(record, total_loss):
    """0-100 prospect value: company size + size of the leak + industry intent."""
    record = as_record(record)
    inputs = normalize_inputs(record)
    score = _arr_points(inputs.current_arr) + _leak_points(total_loss) + _industry_points(record.industry)
    return min(score, 100)
