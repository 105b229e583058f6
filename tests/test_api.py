"""Tests for the HTTP surface."""

from fastapi.testclient import TestClient

from allergen_filter.api.app import create_app
from tests.conftest import DEMO_VENUE


def test_health(container) -> None:
    client = TestClient(create_app(container))
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_filter_columns_only(container, judge) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        f"/venues/{DEMO_VENUE}/filter",
        json={"restrictions": [{"id": "dairy", "severity": "allergy"}]},
    )

    assert response.status_code == 200
    data = response.json()
    assert [item["name"] for item in data["safe_items"]] == ["Garden Salad", "Fries"]
    assert data["caution_items"] == []
    assert data["excluded_count"] == 2
    assert judge.calls == []


def test_filter_formats_caution_warnings(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        f"/venues/{DEMO_VENUE}/filter", json={"restrictions": ["gluten"]}
    )

    data = response.json()
    caution = {item["name"]: item for item in data["caution_items"]}
    assert set(caution) == {"Caesar Salad", "Fries"}
    assert caution["Fries"]["warnings"] == ["gluten"]
    assert caution["Fries"]["warning_messages"] == [
        "Can be made Gluten-free on request"
    ]
    assert data["excluded_count"] == 1


def test_filter_custom_tag_uses_ai(container, judge) -> None:
    judge.confidences["Fries"] = 50
    client = TestClient(create_app(container))

    response = client.post(
        f"/venues/{DEMO_VENUE}/filter",
        json={
            "restrictions": ["dairy"],
            "custom_tags": [{"text": "cilantro", "severity": "allergy"}],
        },
    )

    data = response.json()
    assert [item["name"] for item in data["safe_items"]] == ["Garden Salad"]
    assert data["excluded_count"] == 3
    assert judge.calls[0][0] == ["Garden Salad", "Fries"]


def test_filter_rejects_malformed_restrictions(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        f"/venues/{DEMO_VENUE}/filter", json={"restrictions": {"dairy": True}}
    )

    assert response.status_code == 400


def test_filter_rejects_unknown_severity(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        f"/venues/{DEMO_VENUE}/filter",
        json={"restrictions": [{"id": "dairy", "severity": "deadly"}]},
    )

    assert response.status_code == 400
    assert "deadly" in response.json()["detail"]


def test_filter_unknown_venue(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/venues/nowhere/filter", json={"restrictions": []})

    assert response.status_code == 404


def test_interpret_local_match(container, resolver) -> None:
    client = TestClient(create_app(container))

    response = client.post("/interpret", json={"text": "i cant eat dary products"})

    assert response.status_code == 200
    assert response.json() == {
        "matched_allergen_ids": ["dairy"],
        "unmatched_remainder": None,
        "method": "local",
    }
    assert resolver.calls == []


def test_interpret_blank_text(container) -> None:
    client = TestClient(create_app(container))
    response = client.post("/interpret", json={"text": "   "})
    assert response.status_code == 400


def test_admin_invalidate_requires_token(container) -> None:
    client = TestClient(create_app(container))
    response = client.post(f"/admin/menus/{DEMO_VENUE}/invalidate")
    assert response.status_code == 401


def test_admin_invalidate_refetches_menu(container, menu_source) -> None:
    client = TestClient(create_app(container))
    body = {"restrictions": []}

    client.post(f"/venues/{DEMO_VENUE}/filter", json=body)
    client.post(f"/venues/{DEMO_VENUE}/filter", json=body)
    assert menu_source.reads == [DEMO_VENUE]

    response = client.post(
        f"/admin/menus/{DEMO_VENUE}/invalidate",
        headers={"X-Admin-Token": "admin-token"},
    )
    client.post(f"/venues/{DEMO_VENUE}/filter", json=body)

    assert response.status_code == 200
    assert menu_source.reads == [DEMO_VENUE, DEMO_VENUE]
