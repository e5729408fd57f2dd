"""
HTTP client for the payment intent relay.

The browser-side checkout talks to ``POST /api/create-payment-intent``; this module
is the same conversation expressed with ``requests``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

import requests

from .exceptions import RelayError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


@dataclass(frozen=True)
class PaymentIntentRequest:
    amount: int
    currency: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, object]:
        return {
            "amount": self.amount,
            "currency": self.currency,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class PaymentIntentResponse:
    client_secret: str
    payment_intent_id: str


class RelayClient:
    def __init__(self, url: str, *, timeout: Optional[float] = DEFAULT_TIMEOUT, session=None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, session=None) -> "RelayClient":
        from django.conf import settings

        return cls(
            settings.PAYMENT_RELAY_URL,
            timeout=settings.PAYMENT_RELAY_TIMEOUT,
            session=session,
        )

    def create_payment_intent(self, request: PaymentIntentRequest) -> PaymentIntentResponse:
        try:
            response = self.session.post(self.url, json=request.to_payload(), timeout=self.timeout)
        except requests.Timeout as exc:
            logger.warning("Payment intent request timed out after %ss", self.timeout)
            raise RelayError("Payment service did not respond in time") from exc
        except requests.RequestException as exc:
            logger.warning("Payment intent request failed: %s", exc)
            raise RelayError("Payment service is unreachable") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        logger.info("Payment intent response (%s): %s", response.status_code, data)

        if not 200 <= response.status_code < 300:
            raise RelayError(
                data.get("error") or data.get("message") or "Payment failed",
                status_code=response.status_code,
                payload=data,
            )

        client_secret = data.get("clientSecret")
        if not client_secret:
            raise RelayError(
                "Payment service returned no client secret",
                status_code=response.status_code,
                payload=data,
            )
        return PaymentIntentResponse(
            client_secret=client_secret,
            payment_intent_id=data.get("paymentIntentId") or "",
        )
