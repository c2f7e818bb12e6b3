"""
Integration tests for the loan and friend loan endpoints.

Requests carry camelCase records exactly as the client stores them.
"""

import pytest
from fastapi.testclient import TestClient

from loanbook.api.main import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def loan_terms():
    return {
        "principalAmount": 1_000_000,
        "totalPayback": 1_060_000,
        "startDate": "2024-01-01",
        "endDate": "2024-07-01",
    }


class TestScheduleEndpoints:
    """Test schedule generation over HTTP."""

    def test_schedule(self, client, loan_terms, at):
        response = client.post("/api/loans/schedule", json=loan_terms)

        assert response.status_code == 200
        payments = response.json()
        assert len(payments) == 6
        assert payments[0]["id"] == "payment-0"
        assert payments[0]["dueDate"] == at(2024, 1, 1)
        assert payments[0]["status"] == "pending"
        assert payments[-1]["dueDate"] == at(2024, 6, 1)
        assert payments[-1]["amount"] == 176_665
        assert sum(p["amount"] for p in payments) == 1_060_000

    def test_schedule_accepts_epoch_ms(self, client, loan_terms, at):
        loan_terms.update(startDate=at(2024, 1, 1), endDate=at(2024, 7, 1))
        response = client.post("/api/loans/schedule", json=loan_terms)

        assert response.status_code == 200
        assert len(response.json()) == 6

    def test_schedule_rejects_empty_range(self, client, loan_terms):
        loan_terms["endDate"] = loan_terms["startDate"]
        response = client.post("/api/loans/schedule", json=loan_terms)

        assert response.status_code == 422
        assert response.json()["detail"] == "end date must be after start date"

    def test_schedule_rejects_bad_input(self, client, loan_terms):
        response = client.post("/api/loans/schedule", json={**loan_terms, "paymentDay": 32})
        assert response.status_code == 422

        response = client.post("/api/loans/schedule", json={**loan_terms, "startDate": "not a date"})
        assert response.status_code == 422

    def test_schedule_payment_day_zero_means_first(self, client, loan_terms, at):
        response = client.post("/api/loans/schedule", json={**loan_terms, "paymentDay": 0})

        assert response.status_code == 200
        assert response.json()[0]["dueDate"] == at(2024, 1, 1)
        assert len(response.json()) == 6

    def test_periodic_payments(self, client, at):
        response = client.post(
            "/api/loans/periodic-payments",
            json={
                "loan": {
                    "principalAmount": 1200,
                    "totalPayback": 1200,
                    "startDate": "2024-01-15",
                    "endDate": "2024-12-31",
                },
                "dayOfMonth": 10,
                "numberOfMonths": 3,
            },
        )

        assert response.status_code == 200
        payments = response.json()
        assert [p["dueDate"] for p in payments] == [at(2024, 1, 10), at(2024, 2, 10), at(2024, 3, 10)]
        assert [p["amount"] for p in payments] == [400, 400, 400]


class TestConversionEndpoints:
    """Test interest rate <-> total payback conversion over HTTP."""

    def test_total_payback(self, client):
        response = client.post(
            "/api/loans/total-payback",
            json={
                "principalAmount": 1_000_000,
                "interestRate": 12,
                "startDate": "2024-01-01",
                "endDate": "2024-07-01",
            },
        )

        assert response.status_code == 200
        assert response.json() == {"totalPayback": 1_060_000, "months": 6}

    @pytest.mark.parametrize(
        "interest_rate,expected",
        [("12%", 1_060_000), (" 12 ", 1_060_000), ("", 1_000_000), ("12.", 1_060_000), ("abc", 1_000_000)],
    )
    def test_total_payback_from_typed_rate(self, client, interest_rate, expected):
        """Test that half-typed rate text is normalized instead of rejected."""
        response = client.post(
            "/api/loans/total-payback",
            json={
                "principalAmount": 1_000_000,
                "interestRate": interest_rate,
                "startDate": "2024-01-01",
                "endDate": "2024-07-01",
            },
        )

        assert response.status_code == 200
        assert response.json()["totalPayback"] == expected

    def test_interest_rate(self, client):
        response = client.post(
            "/api/loans/interest-rate",
            json={
                "principalAmount": 1_000_000,
                "totalPayback": 1_060_000,
                "startDate": "2024-01-01",
                "endDate": "2024-07-01",
            },
        )

        assert response.status_code == 200
        assert response.json() == {"interestRate": 12.0, "months": 6}

    def test_inverted_dates_fall_back(self, client):
        response = client.post(
            "/api/loans/total-payback",
            json={
                "principalAmount": 1000,
                "interestRate": 12,
                "startDate": "2024-07-01",
                "endDate": "2024-01-01",
            },
        )

        assert response.status_code == 200
        assert response.json() == {"totalPayback": 1000, "months": 0}


class TestLoanStateEndpoints:
    """Test summary and copy-on-write updates over HTTP."""

    def test_summary(self, client, scheduled_loan, at):
        response = client.post(
            "/api/loans/summary",
            json={"loan": scheduled_loan.to_dict(), "now": at(2024, 3, 15)},
        )

        assert response.status_code == 200
        summary = response.json()
        assert summary["remainingBalance"] == 1_060_000
        assert summary["totalPaid"] == 0
        assert summary["progressPercentage"] == 0
        assert summary["nextPayment"]["id"] == "payment-0"
        assert [p["id"] for p in summary["overduePayments"]] == ["payment-0", "payment-1", "payment-2"]
        assert [p["id"] for p in summary["upcomingPayments"]] == ["payment-3"]

    def test_summary_custom_window(self, client, scheduled_loan, at):
        response = client.post(
            "/api/loans/summary",
            json={"loan": scheduled_loan.to_dict(), "now": at(2024, 3, 15), "daysAhead": 60},
        )

        assert [p["id"] for p in response.json()["upcomingPayments"]] == ["payment-3", "payment-4"]

    def test_mark_paid(self, client, scheduled_loan, at):
        response = client.post(
            "/api/loans/mark-paid",
            json={
                "loan": scheduled_loan.to_dict(),
                "paymentId": "payment-0",
                "paidDate": at(2024, 1, 2),
                "paymentCardId": "card-1",
            },
        )

        assert response.status_code == 200
        loan = response.json()
        assert loan["payments"][0]["status"] == "paid"
        assert loan["payments"][0]["paidDate"] == at(2024, 1, 2)
        assert loan["payments"][0]["paymentCardId"] == "card-1"
        assert loan["payments"][1]["status"] == "pending"
        assert loan["principalAmount"] == 1_000_000

    def test_mark_unknown_payment_returns_loan_unchanged(self, client, scheduled_loan):
        response = client.post(
            "/api/loans/mark-paid",
            json={"loan": scheduled_loan.to_dict(), "paymentId": "missing"},
        )

        assert response.status_code == 200
        assert all(p["status"] == "pending" for p in response.json()["payments"])

    def test_status(self, client, scheduled_loan, at):
        response = client.post(
            "/api/loans/status",
            json={"loan": scheduled_loan.to_dict(), "now": at(2024, 3, 15)},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "defaulted"

    def test_wage_fee(self, client, half_year_loan):
        record = {**half_year_loan.to_dict(), "wageFee": 2500}
        response = client.post("/api/loans/wage-fee", json={"loan": record, "paymentCardId": "card-1"})

        assert response.status_code == 200
        assert response.json()["wageFeePaid"] is True
        assert response.json()["wageFeePaymentCardId"] == "card-1"

        response = client.post("/api/loans/wage-fee", json={"loan": response.json()})
        assert response.status_code == 409


class TestFriendLoanEndpoints:
    """Test friend loan endpoints."""

    def test_mark_paid_settles(self, client, split_friend_loan):
        record = split_friend_loan.to_dict()
        response = client.post(
            "/api/friend-loans/mark-paid",
            json={"friendLoan": record, "paymentId": "payback-0"},
        )
        assert response.json()["status"] == "active"

        response = client.post(
            "/api/friend-loans/mark-paid",
            json={"friendLoan": response.json(), "paymentId": "payback-1", "paybackCardId": "card-2"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "settled"
        assert response.json()["payments"][1]["paybackCardId"] == "card-2"

    def test_upcoming(self, client, split_friend_loan, at):
        response = client.post(
            "/api/friend-loans/upcoming",
            json={"friendLoans": [split_friend_loan.to_dict()], "now": at(2024, 2, 1), "daysAhead": 29},
        )

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == ["payback-0", "payback-1"]

    def test_total_lent(self, client, friend_loan):
        settled = {**friend_loan.to_dict(), "id": "friend-2", "status": "settled"}
        response = client.post(
            "/api/friend-loans/total-lent",
            json={"friendLoans": [friend_loan.to_dict(), settled]},
        )

        assert response.status_code == 200
        assert response.json() == {"totalLent": 100.0}
