import io
import logging
import os

from flask import Flask, jsonify, request, send_file

from benchmarks import INDUSTRY_PROFILES, compare_to_benchmarks, list_industries
from calculator import analyze_submission, format_currency
from lead_scoring import calculate_lead_score
from priorities import calculate_executive_summary
from report import build_report_pdf
from validation import calculation_confidence, validate_results

# --- CONFIGURATION ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
REPORT_FILE = os.getenv("REPORT_FILE", "Revenue_Leak_Report.pdf")

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = Flask(__name__)


class InvalidSubmission(Exception):
    pass


@app.errorhandler(InvalidSubmission)
def handle_bad_request(e):
    return jsonify({"error": str(e)}), 400


# --- UTILS ---
def read_submission():
    """JSON body or form post -> plain dict. Numeric junk is left for the calculator to normalize."""
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise InvalidSubmission("Request body must be a JSON object")
        return data
    return request.form.to_dict()


def headline_figures(results):
    return {
        "totalLoss": format_currency(results["totalLoss"]),
        "conservativeRecovery": format_currency(results["conservativeRecovery"]),
        "optimisticRecovery": format_currency(results["optimisticRecovery"]),
        "secureRevenue": format_currency(results["performanceMetrics"]["secureRevenue"]),
        "breakdown": {i["category"]: format_currency(i["amount"]) for i in results["lossBreakdown"]},
    }


# --- ROUTES ---
@app.route('/health')
def health():
    return jsonify({"status": "ok"})


@app.route('/api/industries')
def industries():
    return jsonify(list_industries())


@app.route('/api/industries/<key>')
def industry_defaults(key):
    profile = INDUSTRY_PROFILES.get(key)
    if profile is None:
        return jsonify({"error": f"Unknown industry '{key}'"}), 404
    return jsonify({
        "key": profile.key,
        "name": profile.name,
        "averages": profile.averages(),
        "bestInClass": profile.best_in_class(),
    })


@app.route('/api/calculate', methods=['POST'])
def calculate():
    submission = read_submission()
    inputs, profile, results = analyze_submission(submission)
    logger.info("Calculated leak for %s: %s", submission.get("company_name") or "anonymous",
                format_currency(results["totalLoss"]))
    return jsonify({
        "calculations": results,
        "benchmarks": compare_to_benchmarks(inputs, results, profile),
        "validation": validate_results(results, submission),
        "confidence": calculation_confidence(submission, results),
        "leadScore": calculate_lead_score(submission, results["totalLoss"]),
        "formatted": headline_figures(results),
    })


@app.route('/api/priorities', methods=['POST'])
def priorities():
    submission = read_submission()
    return jsonify(calculate_executive_summary(submission))


@app.route('/report', methods=['POST'])
def generate_pdf():
    submission = read_submission()
    try:
        pdf_out = build_report_pdf(submission)
    except Exception:
        logger.exception("Report generation failed")
        return jsonify({"error": "Report generation failed"}), 500

    return send_file(
        io.BytesIO(pdf_out),
        as_attachment=True,
        download_name=os.path.basename(REPORT_FILE),
        mimetype="application/pdf"
    )


if __name__ == '__main__':
    port = int(os.environ.get("PORT", 5000))
    app.run(host='0.0.0.0', port=port)
