#!/usr/bin/env python3
"""
End-to-end tests for the incentive API routes
"""

import pytest
from fastapi.testclient import TestClient

from fastapi_app import app


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


def employee(employee_id, name, role, store="saron1", achieved=None, not_achieved=None):
    return {
        "id": employee_id,
        "fullName": name,
        "role": role,
        "storeId": store,
        "bonusPercentageAchieved": achieved,
        "bonusPercentageNotAchieved": not_achieved,
    }


def weekly_goal(goal_id, seller_id, target):
    return {
        "id": goal_id,
        "type": "individual",
        "period": "weekly",
        "storeId": "saron1",
        "sellerId": seller_id,
        "weekStart": "2024-05-13",
        "weekEnd": "2024-05-19",
        "targetValue": target,
    }


def sale(sale_id, value, seller):
    return {"id": sale_id, "storeId": "saron1", "date": "2024-05-15T14:03:00", "netValue": value,
            "sellerName": seller, "status": "Finalizado"}


def receipt(sale_id, method, value):
    return {"saleId": sale_id, "paymentMethod": method, "grossValue": value, "netValue": value}


@pytest.fixture
def payout_snapshot():
    return {
        "employees": [
            employee("m1", "Marta Gerente", "gerente", achieved="1", not_achieved="0,5"),
            employee("v1", "Ana Souza", "vendedor", achieved="2", not_achieved="1"),
            employee("v2", "Bruno Lima", "vendedor", achieved="2", not_achieved="1"),
            employee("c1", "Caio Caixa", "caixa"),
        ],
        "salesGoals": [
            weekly_goal("gm", "m1", "1.000,00"),
            weekly_goal("g1", "v1", "300,00"),
            weekly_goal("g2", "v2", "400,00"),
        ],
        "cashierGoals": [{
            "id": "cg1",
            "cashierId": "c1",
            "storeId": "saron1",
            "periodType": "weekly",
            "weekStart": "2024-05-13",
            "weekEnd": "2024-05-19",
            "paymentMethods": ["PIX", "Débito"],
            "targetPercentage": "50",
            "bonusPercentageAchieved": "1",
            "bonusPercentageNotAchieved": "0,25",
        }],
        "sales": [
            sale("s1", "500,00", "Marta Gerente"),
            sale("s2", "300,00", "Ana Souza"),
            sale("s3", "400,00", "Bruno Lima"),
        ],
        "receipts": [
            receipt("s1", "PIX", "500,00"),
            receipt("s2", "Cartão de Crédito", "300,00"),
            receipt("s3", "TEF Débito", "400,00"),
        ],
    }


def test_root_lists_endpoints(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "payment_summary" in response.json()["endpoints"]


def test_health(client):
    assert client.get("/api/health/").json() == {"status": "healthy", "service": "incentive-api"}

    detailed = client.get("/api/health/detailed").json()
    assert detailed["status"] == "healthy"
    assert "saron1" in detailed["defaults"]["stores"]


def test_period_window(client):
    response = client.get("/api/periods/window", params={"period": "weekly", "referenceDate": "2024-05-22"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["window"] == {"start": "2024-05-20", "end": "2024-05-26"}

    monthly = client.get("/api/periods/window", params={"period": "monthly", "referenceDate": "2024-02-10"})
    assert monthly.json()["data"]["window"] == {"start": "2024-02-01", "end": "2024-02-29"}


def test_unknown_period_is_rejected(client):
    response = client.get("/api/periods/window", params={"period": "yearly"})
    assert response.status_code == 400


def test_goal_progress_accepts_brazilian_values(client):
    payload = {
        "goal": weekly_goal("g1", "v1", "1.000,00"),
        "employees": [employee("v1", "Ana Souza", "vendedor", achieved="2", not_achieved="1")],
        "sales": [sale("s1", "1.234,56", "ana souza"), sale("s2", "99,00", "Bruno Lima")],
        "receipts": [],
        "today": "2024-05-22",
    }

    response = client.post("/api/goals/progress", json=payload)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["progress"]["currentValue"] == pytest.approx(1234.56)
    assert data["progress"]["achieved"] is True
    assert data["progress"]["isFinished"] is True
    assert data["bonus"]["bonusValue"] == pytest.approx(24.69)
    assert data["salesCount"] == 1


def test_cashier_goal_progress(client):
    payload = {
        "cashierGoals": [{
            "id": "cg1",
            "cashierId": "c1",
            "storeId": "saron1",
            "weekStart": "2024-05-13",
            "weekEnd": "2024-05-19",
            "paymentMethods": ["pix", "debito"],
            "targetPercentage": 25,
            "bonusPercentageAchieved": 1,
            "bonusPercentageNotAchieved": 0.5,
        }],
        "sales": [sale("s1", 200, "Ana Souza"), sale("s2", 100, "Ana Souza"), sale("s3", 700, "Bruno Lima")],
        "receipts": [receipt("s1", "pix", 200), receipt("s2", "débito", 100), receipt("s3", "crédito", 700)],
        "today": "2024-05-16",
    }

    response = client.post("/api/cashier-goals/progress", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["record_count"] == 1
    progress = body["data"]["goals"][0]
    assert progress["percentageAchieved"] == pytest.approx(30)
    assert progress["isGoalMet"] is True
    assert progress["bonusValue"] == pytest.approx(3.0)
    assert progress["paymentMethods"] == ["debito", "pix"]


def test_empty_cashier_goal_list_is_rejected(client):
    assert client.post("/api/cashier-goals/progress", json={"cashierGoals": []}).status_code == 400


def test_payment_summary_defaults_to_previous_week(client, payout_snapshot):
    response = client.post("/api/bonus/payment-summary", json={**payout_snapshot, "now": "2024-05-22T09:30:00"})

    assert response.status_code == 200
    body = response.json()
    data = body["data"]
    assert body["record_count"] == 4
    assert data["period"] == {"start": "2024-05-13", "end": "2024-05-19"}
    assert data["paymentDate"] == "2024-05-20"
    assert data["totals"]["vendorTotal"] == pytest.approx(14.0)
    assert data["totals"]["managerTotal"] == pytest.approx(9.5)
    assert data["totals"]["cashierTotal"] == pytest.approx(9.0)
    assert data["totals"]["grandTotal"] == pytest.approx(32.5)

    manager = next(item for item in data["lineItems"] if item["employeeId"] == "m1")
    assert manager["ownBonusValue"] == pytest.approx(2.5)
    assert manager["managerTeamBonus"] == pytest.approx(7.0)


def test_payment_summary_rejects_half_open_period(client, payout_snapshot):
    response = client.post("/api/bonus/payment-summary",
                           json={**payout_snapshot, "periodStart": "2024-05-13", "now": "2024-05-22T09:30:00"})
    assert response.status_code == 400


def test_bonus_summary_has_weekly_and_monthly_totals(client, payout_snapshot):
    response = client.post("/api/bonus/summary", json={**payout_snapshot, "now": "2024-05-16T12:00:00"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert set(data) == {"weekly", "monthly"}
    assert data["weekly"]["period"] == {"start": "2024-05-13", "end": "2024-05-19"}
    # running goals are estimated: vendors 6 + 8, manager 2.50 own + 7 team
    assert data["weekly"]["vendorBonus"] == pytest.approx(14.0)
    assert data["weekly"]["managerBonus"] == pytest.approx(9.5)


def test_personal_goals_for_unknown_employee(client, payout_snapshot):
    payload = {**payout_snapshot, "employeeId": "ghost", "today": "2024-05-22"}

    assert client.post("/api/goals/personal", json=payload).status_code == 404


def test_goal_dashboard_for_vendor(client, payout_snapshot):
    payload = {**payout_snapshot, "viewerId": "v1", "today": "2024-05-16"}

    response = client.post("/api/goals/dashboard", json=payload)

    assert response.status_code == 200
    goals = response.json()["data"]["goals"]
    assert [g["progress"]["goalId"] for g in goals] == ["g1"]
    assert goals[0]["sellerName"] == "Ana Souza"


def test_cashier_dashboard(client, payout_snapshot):
    payload = {**payout_snapshot, "cashierId": "c1", "today": "2024-05-16"}

    response = client.post("/api/cashier/dashboard", json=payload)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["hasGoal"] is True
    assert data["progress"]["percentageAchieved"] == pytest.approx(75)


@pytest.fixture
def month_end_snapshot():
    april = {**weekly_goal("m-april", "v1", "100,00"), "period": "monthly",
             "weekStart": "2024-04-01", "weekEnd": "2024-04-30"}
    week = {**weekly_goal("w-paid", "v2", "300,00"), "weekStart": "2024-04-29", "weekEnd": "2024-05-05"}
    return {
        "employees": [
            employee("v1", "Ana Souza", "vendedor", achieved="2", not_achieved="1"),
            employee("v2", "Bruno Lima", "vendedor", achieved="2", not_achieved="1"),
        ],
        "salesGoals": [april, week],
        "sales": [
            {**sale("s1", "1.000,00", "Ana Souza"), "date": "2024-04-15T10:00:00"},
            {**sale("s2", "400,00", "Bruno Lima"), "date": "2024-04-30T10:00:00"},
        ],
    }


def test_weekly_payout_leaves_monthly_goals_to_the_monthly_run(client, month_end_snapshot):
    weekly = client.post("/api/bonus/payment-summary",
                         json={**month_end_snapshot, "now": "2024-05-06T10:00:00"}).json()["data"]
    monthly = client.post("/api/bonus/payment-summary",
                          json={**month_end_snapshot, "now": "2024-05-06T10:00:00",
                                "periodType": "monthly"}).json()["data"]

    assert weekly["period"] == {"start": "2024-04-29", "end": "2024-05-05"}
    assert [item["goalId"] for item in weekly["lineItems"]] == ["w-paid"]
    assert weekly["totals"]["grandTotal"] == pytest.approx(8.0)

    assert monthly["period"] == {"start": "2024-04-01", "end": "2024-04-30"}
    assert [item["goalId"] for item in monthly["lineItems"]] == ["m-april"]
    assert monthly["totals"]["grandTotal"] == pytest.approx(20.0)


def test_payment_summary_reads_utc_moment_on_business_clock(client, month_end_snapshot):
    # 01:00 UTC on Monday is still Sunday evening at UTC-3
    response = client.post("/api/bonus/payment-summary",
                           json={**month_end_snapshot, "now": "2024-05-13T01:00:00Z"})

    assert response.status_code == 200
    assert response.json()["data"]["period"] == {"start": "2024-04-29", "end": "2024-05-05"}
