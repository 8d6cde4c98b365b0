"""Razorpay order API client.

One instance is built at startup and shared by every request. It holds a
single ``httpx.AsyncClient`` and no other state, so concurrent use is safe.
Gateway and transport failures come back as a :class:`GatewayFailure`
instead of propagating as exceptions.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Union

import httpx

from .config import Settings
from .metrics import GATEWAY_ORDERS

logger = logging.getLogger(__name__)

CURRENCY = "INR"
DEFAULT_FAILURE_CODE = 500
DEFAULT_FAILURE_MESSAGE = "Payment failed"


class GatewayConfigError(RuntimeError):
    """Gateway client cannot be built from the current settings."""


@dataclass(frozen=True)
class OrderCreated:
    order: dict[str, Any]


@dataclass(frozen=True)
class GatewayFailure:
    status_code: int = DEFAULT_FAILURE_CODE
    description: str = DEFAULT_FAILURE_MESSAGE
    details: Any = None


GatewayResult = Union[OrderCreated, GatewayFailure]


def make_receipt(now: float | None = None) -> str:
    ts = time.time() if now is None else now
    return f"receipt_{int(ts * 1000)}"


def _client_kwargs():
    timeout = httpx.Timeout(10.0, read=10.0)
    return {"timeout": timeout}


class RazorpayGateway:
    def __init__(self, key_id: str, key_secret: str, base_url: str, *, transport=None):
        if not key_id or not key_secret:
            raise GatewayConfigError("RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET must be set")
        kw = _client_kwargs()
        if transport is not None:
            kw["transport"] = transport
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=(key_id, key_secret),
            headers={"Content-Type": "application/json"},
            **kw,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "RazorpayGateway":
        return cls(
            settings.razorpay_key_id,
            settings.razorpay_key_secret,
            settings.razorpay_base_url,
            **kwargs,
        )

    async def create_order(self, amount_minor: int, receipt: str | None = None) -> GatewayResult:
        """Create an auto-captured INR order for ``amount_minor`` paise."""
        payload = {
            "amount": amount_minor,
            "currency": CURRENCY,
            "receipt": receipt or make_receipt(),
            "payment_capture": 1,
        }
        try:
            r = await self._client.post("/orders", json=payload)
        except httpx.HTTPError as exc:
            logger.error("Razorpay request failed: %r", exc)
            GATEWAY_ORDERS.labels(outcome="transport_error").inc()
            return GatewayFailure(details=str(exc) or exc.__class__.__name__)

        body = _json_or_text(r)
        if r.is_success and isinstance(body, dict):
            GATEWAY_ORDERS.labels(outcome="created").inc()
            return OrderCreated(order=body)

        logger.error("Razorpay error %s: %s", r.status_code, body)
        GATEWAY_ORDERS.labels(outcome="rejected").inc()
        error = body.get("error") if isinstance(body, dict) else None
        description = (error or {}).get("description") if isinstance(error, dict) else None
        return GatewayFailure(
            status_code=DEFAULT_FAILURE_CODE if r.is_success else r.status_code,
            description=description or DEFAULT_FAILURE_MESSAGE,
            details=body,
        )

    async def aclose(self) -> None:
        await self._client.aclose()


def _json_or_text(r: httpx.Response):
    try:
        return r.json()
    except ValueError:
        return r.text
