import json

import generate_report


def test_main_writes_pdf(tmp_path, monkeypatch, worked_example, capsys):
    submission = tmp_path / "submission.json"
    submission.write_text(json.dumps(worked_example))
    output = tmp_path / "report.pdf"
    monkeypatch.setattr(generate_report, "REPORT_FILE", str(output))

    assert generate_report.main([str(submission)]) == 0
    assert output.read_bytes().startswith(b"%PDF")

    out = capsys.readouterr().out
    assert "Acme Analytics" in out
    assert "$350,000" in out


def test_main_missing_file(tmp_path):
    assert generate_report.main([str(tmp_path / "nope.json")]) == 1


def test_main_rejects_non_object(tmp_path):
    submission = tmp_path / "submission.json"
    submission.write_text("[1, 2]")
    assert generate_report.main([str(submission)]) == 1


def test_main_rejects_invalid_json(tmp_path):
    submission = tmp_path / "submission.json"
    submission.write_text("{not json")
    assert generate_report.main([str(submission)]) == 1


def test_main_pdf_failure(tmp_path, monkeypatch, worked_example):
    submission = tmp_path / "submission.json"
    submission.write_text(json.dumps(worked_example))

    def boom(submission):
        raise RuntimeError("renderer down")

    monkeypatch.setattr(generate_report, "build_report_pdf", boom)
    assert generate_report.main([str(submission)]) == 1


def test_summarize_returns_results(worked_example):
    results = generate_report.summarize(worked_example)
    assert results["industry"] == "saas-software"
