"""Tests for origin gating and CORS headers."""

import pytest

from razorpay_relay.errors import OriginGate

from .conftest import CLIENT_ORIGIN


def test_allowed_origin_gets_cors_headers(client):
    response = client.post("/create-order", json={"amount": 100}, headers={"Origin": CLIENT_ORIGIN})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == CLIENT_ORIGIN
    assert response.headers["access-control-allow-credentials"] == "true"


def test_request_without_origin_is_allowed(client):
    response = client.post("/create-order", json={"amount": 100})

    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers


def test_disallowed_origin_gets_generic_error(client, razorpay):
    response = client.post(
        "/create-order", json={"amount": 100}, headers={"Origin": "https://evil.example.com"}
    )

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": {"code": 500, "message": "Internal server error"},
    }
    assert "access-control-allow-origin" not in response.headers
    assert razorpay.requests == []


def test_disallowed_origin_is_rejected_on_health_too(client):
    response = client.get("/health", headers={"Origin": "https://evil.example.com"})
    assert response.status_code == 500


def test_preflight_from_allowed_origin(client):
    response = client.options(
        "/create-order",
        headers={
            "Origin": CLIENT_ORIGIN,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == CLIENT_ORIGIN
    assert "POST" in response.headers["access-control-allow-methods"]


def test_preflight_from_disallowed_origin(client):
    response = client.options(
        "/create-order",
        headers={"Origin": "https://evil.example.com", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 500
    assert "access-control-allow-origin" not in response.headers


@pytest.mark.parametrize(
    "origin, allowed",
    [
        (None, True),
        ("", True),
        ("https://shop.example.com", True),
        ("https://shop.example.com/", True),
        ("http://shop.example.com", False),
        ("https://other.example.com", False),
    ],
)
def test_origin_gate_allow_list(origin, allowed):
    gate = OriginGate(app=None, allowed_origins=["https://shop.example.com/"])
    assert gate.is_allowed(origin) is allowed


def test_empty_allow_list_only_admits_originless_requests():
    gate = OriginGate(app=None)
    assert gate.is_allowed(None)
    assert not gate.is_allowed("https://shop.example.com")
