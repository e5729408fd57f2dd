from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Tuple

import stripe

from payments.services.intents import configure_stripe, stripe_error_details

SUCCEEDED = "succeeded"
REQUIRES_ACTION = "requires_action"


@dataclass(frozen=True)
class ProviderErrorInfo:
    message: str
    type: Optional[str] = None
    code: Optional[str] = None


@dataclass(frozen=True)
class IntentSnapshot:
    id: str
    status: str
    client_secret: Optional[str] = None


@dataclass(frozen=True)
class ConfirmResult:
    error: Optional[ProviderErrorInfo] = None
    payment_intent: Optional[IntentSnapshot] = None


@dataclass(frozen=True)
class ActionResult:
    error: Optional[ProviderErrorInfo] = None
    payment_intent: Optional[IntentSnapshot] = None


class PaymentProvider(Protocol):
    def confirm_payment(self, client_secret: str, *, return_url: str, redirect: str = "if_required") -> ConfirmResult:
        ...

    def handle_next_action(self, client_secret: str) -> ActionResult:
        ...


def intent_id_from_secret(client_secret: str) -> str:
    return client_secret.split("_secret_", 1)[0]


def _error_info(exc: stripe.StripeError) -> ProviderErrorInfo:
    return ProviderErrorInfo(**stripe_error_details(exc))


def _configuration_error() -> Optional[ProviderErrorInfo]:
    try:
        configure_stripe()
    except RuntimeError as exc:
        return ProviderErrorInfo(str(exc), type="configuration_error")
    return None


@dataclass
class StubPaymentProvider:
    """
    Scripted provider for local development and tests.

    ``status`` is what confirmation reports; ``confirm_error`` / ``action_error``
    make the respective step fail instead.
    """

    status: str = SUCCEEDED
    confirm_error: Optional[ProviderErrorInfo] = None
    action_error: Optional[ProviderErrorInfo] = None
    calls: List[Tuple[str, str]] = field(default_factory=list)

    def confirm_payment(self, client_secret: str, *, return_url: str, redirect: str = "if_required") -> ConfirmResult:
        self.calls.append(("confirm_payment", client_secret))
        if self.confirm_error is not None:
            return ConfirmResult(error=self.confirm_error)
        return ConfirmResult(
            payment_intent=IntentSnapshot(
                id=intent_id_from_secret(client_secret),
                status=self.status,
                client_secret=client_secret,
            )
        )

    def handle_next_action(self, client_secret: str) -> ActionResult:
        self.calls.append(("handle_next_action", client_secret))
        if self.action_error is not None:
            return ActionResult(error=self.action_error)
        return ActionResult(
            payment_intent=IntentSnapshot(
                id=intent_id_from_secret(client_secret),
                status=SUCCEEDED,
                client_secret=client_secret,
            )
        )


class StripePaymentProvider:
    """
    Confirm intents through the Stripe API with a known payment method.

    Used where no browser is involved (support tooling, test-mode cards such as
    ``pm_card_visa``). Stripe errors come back as ``ProviderErrorInfo``.
    """

    def __init__(self, payment_method: str):
        self.payment_method = payment_method

    def confirm_payment(self, client_secret: str, *, return_url: str, redirect: str = "if_required") -> ConfirmResult:
        error = _configuration_error()
        if error is not None:
            return ConfirmResult(error=error)
        try:
            intent = stripe.PaymentIntent.confirm(
                intent_id_from_secret(client_secret),
                payment_method=self.payment_method,
                return_url=return_url,
            )
        except stripe.StripeError as exc:
            return ConfirmResult(error=_error_info(exc))
        return ConfirmResult(
            payment_intent=IntentSnapshot(
                id=intent.id,
                status=intent.status,
                client_secret=intent.client_secret,
            )
        )

    def handle_next_action(self, client_secret: str) -> ActionResult:
        error = _configuration_error()
        if error is not None:
            return ActionResult(error=error)
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id_from_secret(client_secret))
        except stripe.StripeError as exc:
            return ActionResult(error=_error_info(exc))
        snapshot = IntentSnapshot(id=intent.id, status=intent.status, client_secret=intent.client_secret)
        if intent.status != SUCCEEDED:
            return ActionResult(
                error=ProviderErrorInfo(
                    message="Payment authentication was not completed",
                    type="authentication_error",
                    code=intent.status,
                ),
                payment_intent=snapshot,
            )
        return ActionResult(payment_intent=snapshot)
