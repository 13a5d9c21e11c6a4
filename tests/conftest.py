"""Shared fixtures for the revenue leak test suite."""

import pytest

from app import app as flask_app


@pytest.fixture
def worked_example():
    """$1M ARR SaaS company: every category except failed payments hits its ARR cap."""
    return {
        "company_name": "Acme Analytics",
        "contact_email": "cfo@acme.test",
        "industry": "saas-software",
        "current_arr": 1_000_000,
        "monthly_leads": 100,
        "average_deal_value": 10000,
        "lead_response_time": 24,
        "monthly_free_signups": 500,
        "free_to_paid_conversion": 5,
        "monthly_mrr": 50000,
        "failed_payment_rate": 5,
        "manual_hours": 20,
        "hourly_rate": 75,
    }


@pytest.fixture
def no_arr_example(worked_example):
    """Same business with no ARR on file, so nothing gets capped."""
    return dict(worked_example, current_arr=0)


@pytest.fixture
def client():
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as c:
        yield c
