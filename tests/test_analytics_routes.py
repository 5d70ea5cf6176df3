import pytest
from fastapi.testclient import TestClient

from portal.main import app
from portal.routes import analytics


client = TestClient(app)

POLICIES = [
    {
        "id": "POL-1",
        "policy_type": "Trafik",
        "premium_amount": 12000,
        "start_date": "2024-01-01",
        "end_date": "2025-01-01",
        "plate": "34 ABC 123",
        "company_name": "Anadolu",
        "status": "active",
    },
    {
        "id": "POL-2",
        "policy_type": "Kasko",
        "premium_amount": "not-a-number",
        "start_date": "2024-01-01",
        "end_date": "2024-07-20",
        "plate": "06 XYZ 99",
    },
]

CLAIMS = [
    {"id": "C1", "claim_number": "H-1", "policy_type": "Trafik", "payment_amount": 3000,
     "claim_date": "2024-07-01", "plate": "34abc123", "status": "closed"},
    {"id": "C2", "claim_number": "H-1", "policy_type": "Trafik", "payment_amount": 9000,
     "claim_date": "2024-07-01", "plate": "34abc123", "status": "closed"},
    {"id": "C3", "claim_number": "H-2", "policy_type": "Kasko", "payment_amount": 100,
     "claim_date": "2023-12-15", "plate": "06 XYZ 99", "status": "open"},
]


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_aggregate_by_plate_ranked_by_loss_ratio():
    response = client.post(
        "/api/analytics/aggregate",
        json={"policies": POLICIES, "claims": CLAIMS, "group_by": "plate", "as_of": "2024-07-02"},
    )

    assert response.status_code == 200
    body = response.json()
    assert [row["key"] for row in body] == ["34ABC123", "06XYZ99"]
    assert body[0]["earned_premium"] == pytest.approx(6000.0)
    assert body[0]["total_claims"] == 12000
    assert body[0]["loss_ratio"] == pytest.approx(200.0)
    # invalid premium is coerced to zero, so the ratio falls back to zero
    assert body[1]["total_premium"] == 0
    assert body[1]["loss_ratio"] == 0


def test_aggregate_rejects_unknown_grouping():
    response = client.post("/api/analytics/aggregate", json={"group_by": "insured"})
    assert response.status_code == 422


def test_rank_route():
    buckets = [
        {"key": "A", "name": "A", "claim_count": 1, "total_claims": 10, "loss_ratio": 5},
        {"key": "B", "name": "B", "claim_count": 3, "total_claims": 5, "loss_ratio": 1},
    ]
    response = client.post("/api/analytics/rank", json={"buckets": buckets, "criterion": "claim_count"})
    assert [row["key"] for row in response.json()] == ["B", "A"]


def test_trends_route():
    response = client.post(
        "/api/analytics/trends",
        json={"policies": POLICIES, "claims": CLAIMS, "months_back": 6, "reference_date": "2024-07-15"},
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["premium_trend"]) == 6
    assert len(body["claims_trend"]) == 6
    assert body["claims_trend"][-1]["count"] == 2
    assert body["claims_trend"][-1]["percentage"] == 100
    assert body["premium_trend"][0]["percentage"] == 0


def test_filter_claims_route():
    response = client.post(
        "/api/analytics/filter/claims",
        json={
            "records": CLAIMS,
            "predicates": {"equals": {"status": "closed"}, "on_or_after": {"claim_date": "2024-01-01"}},
        },
    )
    assert response.status_code == 200
    assert [row["id"] for row in response.json()] == ["C1", "C2"]


def test_filter_policies_route():
    response = client.post(
        "/api/analytics/filter/policies",
        json={"records": POLICIES, "predicates": {"search": "xyz", "search_fields": ["plate", "policy_number"]}},
    )
    assert [row["id"] for row in response.json()] == ["POL-2"]


def test_top_plates_route():
    response = client.post("/api/analytics/top-plates", json={"claims": CLAIMS})

    assert response.status_code == 200
    rows = response.json()
    assert rows[0]["key"] == "34abc123"
    assert rows[0]["unique_claim_count"] == 1
    assert rows[0]["total_amount"] == 12000


def test_summary_route():
    response = client.post(
        "/api/analytics/summary",
        json={"policies": POLICIES, "claims": CLAIMS, "as_of": "2024-07-02"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["summary"]["total_policies"] == 2
    assert body["summary"]["active_policies"] == 1
    assert body["summary"]["loss_ratio_band"] == "high"
    assert [row["label"] for row in body["policy_types"]] == ["Trafik", "Kasko"]
    assert [item["policy"]["id"] for item in body["expiring"]] == ["POL-2"]
    assert body["expiring"][0]["days_until_expiry"] == 18


def test_value_error_maps_to_bad_request(monkeypatch):
    def broken(claims):
        raise ValueError("bad plate data")

    monkeypatch.setattr(analytics, "rank_by_unique_claims", broken)

    response = client.post("/api/analytics/top-plates", json={"claims": []})

    assert response.status_code == 400
    assert response.json()["detail"] == "bad plate data"


def test_unexpected_error_maps_to_server_error(monkeypatch):
    def broken(claims):
        raise RuntimeError("boom")

    monkeypatch.setattr(analytics, "rank_by_unique_claims", broken)

    response = client.post("/api/analytics/top-plates", json={"claims": []})

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to compute top plates"


def test_filter_policies_route_orders_by_premium():
    policies = POLICIES + [{"id": "POL-3", "premium_amount": "450.50"}]

    response = client.post(
        "/api/analytics/filter/policies",
        json={"records": policies, "premium_order": "asc"},
    )

    assert response.status_code == 200
    assert [row["id"] for row in response.json()] == ["POL-2", "POL-3", "POL-1"]


def test_filter_claims_route_orders_by_amount_then_frequency():
    claims = CLAIMS + [
        {"id": "C4", "claim_number": "H-3", "payment_amount": 50000, "plate": "35 KLM 7"},
    ]

    by_amount = client.post("/api/analytics/filter/claims", json={"records": claims, "amount_order": "desc"})
    assert [row["id"] for row in by_amount.json()] == ["C4", "C2", "C1", "C3"]

    by_plate = client.post(
        "/api/analytics/filter/claims",
        json={"records": claims, "amount_order": "desc", "frequency_field": "plate"},
    )
    assert [row["id"] for row in by_plate.json()] == ["C2", "C1", "C4", "C3"]


def test_announcements_route():
    response = client.post(
        "/api/analytics/announcements",
        json={
            "announcements": [
                {"id": "a1", "title": "Holiday hours", "priority": "low"},
                {"id": "a2", "title": "New claims form", "priority": "high"},
            ],
            "dismissed_ids": ["a1"],
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert [item["announcement"]["id"] for item in body] == ["a2"]
    assert body[0]["priority"] == {"value": "high", "label": "High", "tone": "red"}


def test_labels_route():
    response = client.post(
        "/api/analytics/labels",
        json={"claim_statuses": ["closed", "in_review"], "policy_statuses": ["Active", None]},
    )

    assert response.status_code == 200
    body = response.json()
    assert [row["label"] for row in body["claim_statuses"]] == ["Paid", "in_review"]
    assert body["claim_statuses"][1]["tone"] == "gray"
    assert [row["label"] for row in body["policy_statuses"]] == ["Active", ""]
