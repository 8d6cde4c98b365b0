"""Shared fixtures: an app wired to a fake Razorpay API."""

import json
from contextlib import ExitStack

import httpx
import pytest
from fastapi.testclient import TestClient

from razorpay_relay.config import Settings
from razorpay_relay.gateway import RazorpayGateway
from razorpay_relay.main import create_app

CLIENT_ORIGIN = "https://shop.example.com"


def created_order(**overrides):
    order = {
        "id": "order_1",
        "entity": "order",
        "amount": 10000,
        "amount_paid": 0,
        "amount_due": 10000,
        "currency": "INR",
        "receipt": "receipt_1700000000000",
        "status": "created",
        "attempts": 0,
        "notes": [],
        "created_at": 1700000000,
    }
    order.update(overrides)
    return order


class FakeRazorpay:
    """Answers every request with ``status_code``/``body``, or raises ``exc``."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body = created_order()
        self.exc: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.body)

    @property
    def payloads(self):
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def razorpay():
    return FakeRazorpay()


@pytest.fixture
def settings():
    return Settings(
        razorpay_key_id="rzp_test_key",
        razorpay_key_secret="rzp_test_secret",
        razorpay_base_url="https://api.razorpay.test/v1",
        allowed_origins=(CLIENT_ORIGIN,),
        production=False,
        amount_policy="strict",
        service_name="razorpay-relay",
    )


@pytest.fixture
def make_client(razorpay):
    """Factory building a started TestClient for the given settings."""
    with ExitStack() as stack:

        def _make(settings):
            gateway = RazorpayGateway.from_settings(settings, transport=httpx.MockTransport(razorpay))
            app = create_app(settings, gateway=gateway)
            return stack.enter_context(TestClient(app, raise_server_exceptions=False))

        yield _make


@pytest.fixture
def client(make_client, settings):
    return make_client(settings)
