import pytest

import app as app_module


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_list_industries(client):
    data = client.get('/api/industries').get_json()
    assert len(data) == 10
    assert data[-1] == {"key": "other", "name": "Other"}


def test_industry_defaults(client):
    data = client.get('/api/industries/healthcare').get_json()
    assert data["name"] == "Healthcare"
    assert data["averages"]["leadResponseTimeHours"] == 24
    assert data["bestInClass"]["leadResponseTimeMinutes"] == 240


def test_unknown_industry_is_404(client):
    response = client.get('/api/industries/space-mining')
    assert response.status_code == 404
    assert "space-mining" in response.get_json()["error"]


def test_calculate_json(client, worked_example):
    response = client.post('/api/calculate', json=worked_example)
    assert response.status_code == 200

    data = response.get_json()
    assert data["calculations"]["totalLoss"] == pytest.approx(350_000)
    assert data["calculations"]["lossBreakdown"][0]["category"] == "leadResponse"
    assert [m["id"] for m in data["benchmarks"]][0] == "lead-response"
    assert data["validation"]["overall"]["isValid"] is False
    assert data["calculations"]["uncappedLoss"] == pytest.approx(3_309_000)
    assert data["confidence"]["level"] == "low"
    assert data["leadScore"] == 72
    assert data["formatted"]["totalLoss"] == "$350,000"
    assert data["formatted"]["breakdown"]["failedPayments"] == "$21,000"


def test_calculate_form_post(client, worked_example):
    form = {k: str(v) for k, v in worked_example.items()}
    form["current_arr"] = "$1,000,000"
    data = client.post('/api/calculate', data=form).get_json()
    assert data["calculations"]["totalLoss"] == pytest.approx(350_000)


def test_calculate_with_junk_still_answers(client):
    data = client.post('/api/calculate', json={"current_arr": "lots", "manual_hours": None}).get_json()
    # defaults only: 10 h x $75 x 52, nothing capped without ARR
    assert data["calculations"]["totalLoss"] == pytest.approx(39_000)
    assert data["calculations"]["industry"] == "saas-software"


def test_oversized_integer_literal_is_ignored(client, worked_example):
    huge = 10 ** 400
    data = client.post('/api/calculate', json={"current_arr": huge}).get_json()
    assert data["calculations"]["totalLoss"] == pytest.approx(39_000)
    assert data["formatted"]["totalLoss"] == "$39,000"

    response = client.post('/report', json=dict(worked_example, monthly_leads=huge))
    assert response.status_code == 200


def test_calculate_rejects_non_object(client):
    response = client.post('/api/calculate', json=[1, 2, 3])
    assert response.status_code == 400
    assert "JSON object" in response.get_json()["error"]


def test_priorities(client, worked_example):
    data = client.post('/api/priorities', json=worked_example).get_json()
    assert data["urgencyLevel"] == "Critical"
    assert len(data["priorityActions"]) == 4
    assert data["quickWins"][0]["action"] == "Automate Manual Processes"


def test_report_download(client, worked_example):
    response = client.post('/report', json=worked_example)
    assert response.status_code == 200
    assert response.mimetype == "application/pdf"
    assert response.data.startswith(b"%PDF")
    assert "Revenue_Leak_Report.pdf" in response.headers["Content-Disposition"]


def test_report_failure_is_500(client, worked_example, monkeypatch):
    def boom(submission):
        raise RuntimeError("renderer down")

    monkeypatch.setattr(app_module, "build_report_pdf", boom)
    response = client.post('/report', json=worked_example)
    assert response.status_code == 500
    assert response.get_json() == {"error": "Report generation failed"}
