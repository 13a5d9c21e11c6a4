import json
import os
import sys

from calculator import analyze_submission, as_record, format_currency
from lead_scoring import calculate_lead_score
from priorities import calculate_executive_summary
from report import build_report_pdf
from validation import calculation_confidence

# --- CONFIGURATION ---
SUBMISSION_FILE = os.environ.get("SUBMISSION_FILE", "submission.json")
REPORT_FILE = os.environ.get("REPORT_FILE", "Revenue_Leak_Report.pdf")


# --- 1. LOAD SUBMISSION ---
def load_submission(path):
    print(f"\n📥 STEP 1: Loading submission from {path}...")
    with open(path, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Submission file must contain a JSON object")
    print(f"✅ Loaded {len(data)} fields.")
    return data


# --- 2. CALCULATE ---
def summarize(submission):
    print("\n🧮 STEP 2: Calculating revenue leak...")
    _, profile, results = analyze_submission(submission)
    confidence = calculation_confidence(submission, results)
    summary = calculate_executive_summary(submission, results)

    print(f"   Industry benchmark: {profile.name}")
    for item in results["lossBreakdown"]:
        print(f"   - {item['title']:<22} {format_currency(item['amount']):>12}  ({item['percentage']:.0f}%)")
    print(f"   Total leak:          {format_currency(results['totalLoss'])}")
    print(f"   Recoverable:         {format_currency(results['conservativeRecovery'])}"
          f" - {format_currency(results['optimisticRecovery'])}")
    print(f"   Urgency: {summary['urgencyLevel']} | Confidence: {confidence['level']}"
          f" | Lead score: {calculate_lead_score(submission, results['totalLoss'])}")
    return results


# --- 3. PDF GENERATION ---
def write_pdf(submission, filename):
    print("\n📄 STEP 3: Generating PDF...")
    pdf_bytes = build_report_pdf(submission)
    with open(filename, 'wb') as f:
        f.write(pdf_bytes)
    print(f"✅ PDF Saved: {filename}")


# --- 4. MAIN EXECUTION ---
def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    path = argv[0] if argv else SUBMISSION_FILE

    try:
        submission = load_submission(path)
    except FileNotFoundError:
        print(f"❌ Error: {path} not found.")
        return 1
    except (json.JSONDecodeError, ValueError) as e:
        print(f"❌ Error: {path} is not a valid submission: {e}")
        return 1

    company = as_record(submission).company_name or "Valued Client"
    print(f"--- Revenue Leak Report ---")
    print(f"Target: {company}")

    summarize(submission)

    try:
        write_pdf(submission, REPORT_FILE)
    except Exception as e:
        print(f"❌ PDF Generation Failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
