from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
from uuid import uuid4

import stripe
from django.conf import settings

from camps.plans import Plan, get_plan_by_name


@dataclass
class PaymentIntentStub:
    """
    Stand-in for stripe.PaymentIntent when running in stub mode.

    Local development and tests do not reach Stripe; the relay still answers with an
    id and client secret shaped like the real ones so the checkout flow can proceed.
    """

    id: str
    client_secret: str
    amount: int
    currency: str
    status: str = "requires_payment_method"
    metadata: Dict[str, str] = field(default_factory=dict)


def _stub_payment_intent(*, amount: int, currency: str, metadata: Mapping[str, str]) -> PaymentIntentStub:
    intent_id = f"pi_test_{uuid4().hex[:24]}"
    return PaymentIntentStub(
        id=intent_id,
        client_secret=f"{intent_id}_secret_{uuid4().hex[:24]}",
        amount=amount,
        currency=currency,
        metadata=dict(metadata),
    )


def _get_stripe_api_key() -> Optional[str]:
    key = getattr(settings, "STRIPE_SECRET_KEY", "")
    return key or None


def should_use_stub() -> bool:
    if getattr(settings, "STRIPE_USE_STUB", False):
        return True
    return _get_stripe_api_key() is None


def configure_stripe() -> None:
    api_key = _get_stripe_api_key()
    if not api_key:
        raise RuntimeError("STRIPE_SECRET_KEY is not configured.")
    stripe.api_key = api_key
    stripe.api_version = settings.STRIPE_API_VERSION


def stripe_error_details(exc: stripe.StripeError) -> Dict[str, Optional[str]]:
    """Message, type and code of a Stripe error, preferring the API error body."""

    body = exc.json_body if isinstance(exc.json_body, dict) else {}
    error = body.get("error") if isinstance(body.get("error"), dict) else {}
    return {
        "message": error.get("message") or exc.user_message or str(exc),
        "type": error.get("type"),
        "code": error.get("code") or exc.code,
    }


def create_payment_intent(*, amount: int, currency: str, metadata: Optional[Mapping[str, str]] = None):
    """
    Create a card payment intent with Stripe (or the stub equivalent).

    Returns an object exposing ``id``, ``client_secret``, ``amount`` and ``status``.
    Stripe errors propagate to the caller untouched.
    """

    metadata = dict(metadata or {})
    if should_use_stub():
        return _stub_payment_intent(amount=amount, currency=currency, metadata=metadata)

    configure_stripe()
    return stripe.PaymentIntent.create(
        amount=amount,
        currency=currency,
        metadata=metadata,
        payment_method_types=["card"],
        automatic_payment_methods={
            "enabled": True,
            "allow_redirects": "always",
        },
    )


def find_plan_amount_mismatch(amount: int, metadata: Mapping[str, str]) -> Optional[Plan]:
    """
    Return the catalog plan named in ``metadata`` when ``amount`` disagrees with its price.

    Requests that do not name a known plan are not checked.
    """

    plan = get_plan_by_name(metadata.get("planName"))
    if plan is None or plan.amount_minor_units == amount:
        return None
    return plan
