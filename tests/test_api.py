"""
tests/test_api.py

HTTP contract tests for the processing and funnel routers.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.main import create_app

REFERENCE_CSV = (
    "uniqueid,impression_count,event_count_finished,event_count_replay,visit_count\n"
    "U1,3,1,0,1\n"
    "U2,0,0,2,0\n"
    "X001,5,1,4,7\n"
    "MissingID-ab12,2,1,0,1\n"
)


@pytest.fixture()
def client() -> TestClient:
    with TestClient(create_app()) as test_client:
        yield test_client


def _upload(client: TestClient, content: str, filename: str = "Spring Launch 01_04_2025 - 30_04_2025.csv"):
    return client.post(
        "/process-csv",
        files={"file": (filename, content.encode("utf-8"), "text/csv")},
    )


def _processed_metrics(client: TestClient) -> dict:
    response = _upload(client, REFERENCE_CSV)
    assert response.status_code == 200
    return response.json()["metrics"]


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_process_csv_returns_metrics_metadata_and_options(client: TestClient) -> None:
    response = _upload(client, REFERENCE_CSV)

    assert response.status_code == 200
    body = response.json()
    assert body["metadata"]["campaign_name"] == "Spring Launch"
    assert body["metadata"]["display_date"] == "01/04/2025 - 30/04/2025"
    metrics = body["metrics"]
    assert metrics["total_users"] == 3
    assert metrics["total_impressions"] == 5
    assert metrics["unique_visit_count"] == 2
    assert metrics["missing_ids"] == ["ab12"]
    assert metrics["found_test_users"] == ["X001"]
    assert metrics["event_unique_user_counts"] == {"event_count_replay": 2}
    assert metrics["total_thumbnail_count"] is None
    assert body["unique_completion_rate"] == "100.0"
    values = [option["value"] for option in body["funnel_options"]]
    assert values == sorted(values, reverse=True)
    defaults = body["funnel_defaults"]
    assert len(defaults) == 4
    assert defaults[0]["display_percentage"] == "100%"
    assert defaults[0]["value"] == values[0]


def test_process_csv_missing_columns_returns_structured_400(client: TestClient) -> None:
    response = _upload(client, "uniqueid,clicks\nU1,1\n")

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert "impression_count" in detail["message"]
    assert {error["column"] for error in detail["errors"]} == {"impression_count", "event_count_finished"}


def test_process_csv_rejects_non_csv_upload(client: TestClient) -> None:
    response = client.post(
        "/process-csv",
        files={"file": ("report.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert response.status_code == 400
    assert "Only CSV files are allowed" in response.json()["detail"]


def test_process_csv_rejects_non_utf8(client: TestClient) -> None:
    response = client.post(
        "/process-csv",
        files={"file": ("bad.csv", b"uniqueid\xff\xfe", "text/csv")},
    )

    assert response.status_code == 400
    assert "UTF-8" in response.json()["detail"]


def test_missing_ids_export(client: TestClient) -> None:
    response = client.post(
        "/missing-ids/export",
        json={"campaign_name": "Spring Launch", "missing_ids": ["ab12", "cd34"]},
    )

    assert response.status_code == 200
    assert response.text == "MissingID\nab12\ncd34"
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="missing_ids_Spring_Launch.csv"' in response.headers["content-disposition"]


def test_missing_ids_export_empty_is_400(client: TestClient) -> None:
    response = client.post(
        "/missing-ids/export",
        json={"campaign_name": "Spring Launch", "missing_ids": []},
    )

    assert response.status_code == 400


def test_funnel_default_prefills_four_steps(client: TestClient) -> None:
    metrics = _processed_metrics(client)

    response = client.post("/funnel/default", json={"metrics": metrics})

    assert response.status_code == 200
    body = response.json()
    assert len(body["steps"]) == 4
    assert body["steps"][0]["display_percentage"] == "100%"
    assert (body["min_items"], body["max_items"]) == (3, 6)


def test_funnel_resolve_with_total_audience_and_override(client: TestClient) -> None:
    metrics = _processed_metrics(client)
    steps = [
        {"metric": "total_impressions", "value": 5},
        {"metric": "unique_impressions", "value": 2},
        {"metric": "unique_completion", "value": 2},
    ]

    response = client.post(
        "/funnel/resolve",
        json={
            "steps": steps,
            "metrics": metrics,
            "percentage_base": "total_audience",
            "total_audience": 20,
        },
    )

    assert response.status_code == 200
    resolved = response.json()["steps"]
    assert resolved[0]["display_percentage"] == "25.0%"
    assert resolved[0]["label"] == "Total Impressions"
    assert resolved[1]["display_percentage"] == "40.0%"
    assert resolved[2]["display_percentage"] == "100.0%"

    edited = client.post(
        "/funnel/resolve",
        json={
            "steps": steps,
            "metrics": metrics,
            "percentage_base": "total_audience",
            "total_audience": 20,
            "first_step_percentage": "50%",
        },
    )

    first = edited.json()["steps"][0]
    assert first["display_percentage"] == "50.0%"
    assert first["effective_value"] == 10


@pytest.mark.parametrize("step_count", [2, 7])
def test_funnel_resolve_rejects_out_of_bounds_step_count(client: TestClient, step_count: int) -> None:
    metrics = _processed_metrics(client)
    steps = [{"metric": "total_impressions", "value": 5}] * step_count

    response = client.post("/funnel/resolve", json={"steps": steps, "metrics": metrics})

    assert response.status_code == 400
    assert "between 3 and 6" in response.json()["detail"]
